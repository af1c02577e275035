"""Data models for incremental sync requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SyncQueryParams(BaseModel):
    """Query parameters accepted by every resource-listing endpoint."""

    model_config = ConfigDict(frozen=True)

    limit: int | None = Field(
        default=None, ge=1, description="Page size; the configured default (20) when omitted"
    )
    page: int = Field(default=1, ge=1, description="One-based page number")
    sync_from: str | None = Field(
        default=None, description="Watermark from a previous sync; only rows changed since are returned"
    )
    no_client_id: bool | None = Field(
        default=None, description="Restrict to rows without a client-generated id"
    )


class PaginatedResult(BaseModel):
    """One page of a collection query."""

    items: list[Any] = Field(default_factory=list, description="Rows on this page")
    current_page: int = Field(default=1, ge=1)
    total: int = Field(default=0, ge=0, description="Rows matching the query across all pages")
    per_page: int = Field(default=20, ge=1)
    last_page: int = Field(default=1, ge=1)


class SyncEnvelope(BaseModel):
    """Response body of an incremental sync fetch."""

    data: list[Any] = Field(default_factory=list, description="Resource representations")
    last_sync: datetime = Field(
        default=..., description="Server time captured before the query; replay as sync_from"
    )
    current_page: int = Field(default=1, ge=1)
    total: int = Field(default=0, ge=0)
    per_page: int = Field(default=20, ge=1)
    last_page: int = Field(default=1, ge=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "data": [{"id": 1, "name": "Cash", "updated_at": "2024-06-01T07:00:00Z"}],
                "last_sync": "2024-06-01T07:05:12.345678Z",
                "current_page": 1,
                "total": 1,
                "per_page": 20,
                "last_page": 1,
            }
        }
    }

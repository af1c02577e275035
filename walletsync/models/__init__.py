"""Data models for the sync API."""

from walletsync.models.config import (
    ApiConfig,
    AppConfig,
    DatabaseConfig,
    LocaleConfig,
    LoggingConfig,
    SyncConfig,
)
from walletsync.models.context import Principal, RequestContext
from walletsync.models.sync import PaginatedResult, SyncEnvelope, SyncQueryParams

__all__ = [
    "AppConfig",
    "ApiConfig",
    "DatabaseConfig",
    "LocaleConfig",
    "LoggingConfig",
    "SyncConfig",
    "Principal",
    "RequestContext",
    "PaginatedResult",
    "SyncEnvelope",
    "SyncQueryParams",
]

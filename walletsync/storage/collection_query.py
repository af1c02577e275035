"""Collection query interface and in-memory implementation."""

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from walletsync.models.sync import PaginatedResult

log = structlog.stdlib.get_logger()


def last_page_for(total: int, per_page: int) -> int:
    """Number of the last page; an empty collection still has page 1."""
    return max(1, math.ceil(total / per_page))


class CollectionQuery(ABC):
    """Abstract interface for a filterable, paginated collection query.

    The sync layer depends only on this interface. Every filter method returns
    a new query and leaves the receiver untouched, so one base query can back
    several fetches.
    """

    @abstractmethod
    def add_greater_or_equal_filter(self, field: str, value: Any) -> "CollectionQuery":
        """Restrict to rows whose ``field`` is greater than or equal to ``value``.

        Args:
            field: Column or key name, e.g. ``updated_at``
            value: Lower bound (inclusive)

        Returns:
            A new, narrower query
        """

    @abstractmethod
    def include_deleted(self) -> "CollectionQuery":
        """Include soft-deleted rows, which are hidden by default."""

    @abstractmethod
    def without_client_id(self) -> "CollectionQuery":
        """Restrict to rows that have no client-generated id."""

    @abstractmethod
    def paginate(self, limit: int, page: int = 1) -> PaginatedResult:
        """Execute the query and return one page.

        Ordering must be deterministic so repeated fetches with no
        intervening writes return the same page contents in the same order.

        Args:
            limit: Page size (>= 1)
            page: One-based page number

        Returns:
            The requested page and its counters

        Raises:
            ValueError: If limit or page is below 1
        """


class InMemoryCollectionQuery(CollectionQuery):
    """Collection query over a list of mappings.

    Rows with a truthy ``deleted_at`` are soft-deleted. Rows are ordered by
    ``order_by`` (ascending), which should be unique per row.
    """

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]],
        order_by: str = "id",
        deleted_field: str = "deleted_at",
        client_id_field: str = "client_generated_id",
    ):
        self._rows: list[Mapping[str, Any]] = list(rows)
        self._order_by = order_by
        self._deleted_field = deleted_field
        self._client_id_field = client_id_field
        self._conditions: tuple[tuple[str, Any], ...] = ()
        self._with_deleted = False
        self._without_client_id = False

    def _copy(self) -> "InMemoryCollectionQuery":
        clone = InMemoryCollectionQuery(
            self._rows,
            order_by=self._order_by,
            deleted_field=self._deleted_field,
            client_id_field=self._client_id_field,
        )
        clone._conditions = self._conditions
        clone._with_deleted = self._with_deleted
        clone._without_client_id = self._without_client_id
        return clone

    def add_greater_or_equal_filter(self, field: str, value: Any) -> "InMemoryCollectionQuery":
        clone = self._copy()
        clone._conditions = self._conditions + ((field, value),)
        return clone

    def include_deleted(self) -> "InMemoryCollectionQuery":
        clone = self._copy()
        clone._with_deleted = True
        return clone

    def without_client_id(self) -> "InMemoryCollectionQuery":
        clone = self._copy()
        clone._without_client_id = True
        return clone

    def _matches(self, row: Mapping[str, Any]) -> bool:
        if not self._with_deleted and row.get(self._deleted_field):
            return False
        if self._without_client_id and row.get(self._client_id_field) is not None:
            return False
        for field, value in self._conditions:
            current = row.get(field)
            if current is None or current < value:
                return False
        return True

    def paginate(self, limit: int, page: int = 1) -> PaginatedResult:
        if limit < 1 or page < 1:
            raise ValueError(f"limit and page must be >= 1 (got limit={limit}, page={page})")

        matching = sorted(
            (row for row in self._rows if self._matches(row)),
            key=lambda row: row[self._order_by],
        )
        start = (page - 1) * limit
        items = [dict(row) for row in matching[start : start + limit]]

        log.debug(
            "in_memory_collection_paginated",
            total=len(matching),
            page=page,
            limit=limit,
            returned=len(items),
        )

        return PaginatedResult(
            items=items,
            current_page=page,
            total=len(matching),
            per_page=limit,
            last_page=last_page_for(len(matching), limit),
        )

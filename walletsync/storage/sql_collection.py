"""SQLAlchemy-backed collection query."""

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import ColumnElement, DateTime, String, Table, func, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from walletsync.dates.normalizer import format_for_storage
from walletsync.models.sync import PaginatedResult
from walletsync.storage.collection_query import CollectionQuery, last_page_for

log = structlog.stdlib.get_logger()


class SqlAlchemyCollectionQuery(CollectionQuery):
    """Collection query over a SQLAlchemy Core table.

    Rows are ordered by the table's primary key. If the table has a
    ``deleted_at`` column, rows where it is set are treated as soft-deleted.
    Naive ``DateTime`` columns are assumed to hold UTC values. SQLite keeps
    them as text, written either by SQLAlchemy (``.ffffff`` suffix) or by
    other writers at second precision, so lower bounds on such columns are
    compared in that text form.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        table: Table,
        where: Sequence[ColumnElement[bool]] = (),
        deleted_column: str = "deleted_at",
        client_id_column: str = "client_generated_id",
    ):
        """
        Initialize the query.

        Args:
            session_factory: Opens a session per execution, e.g. a ``sessionmaker``
            table: Table holding the collection
            where: Base conditions, e.g. scoping rows to the requesting user
            deleted_column: Soft-delete timestamp column, if the table has one
            client_id_column: Column holding the client-generated id
        """
        if not table.primary_key.columns:
            raise ValueError(f"Table '{table.name}' needs a primary key for stable ordering")

        self._session_factory = session_factory
        self._table = table
        self._where: tuple[ColumnElement[bool], ...] = tuple(where)
        self._deleted_column = deleted_column
        self._client_id_column = client_id_column
        self._lower_bounds: tuple[tuple[str, Any], ...] = ()
        self._with_deleted = False

    def _copy(self, extra: Sequence[ColumnElement[bool]] = ()) -> "SqlAlchemyCollectionQuery":
        clone = SqlAlchemyCollectionQuery(
            self._session_factory,
            self._table,
            where=self._where + tuple(extra),
            deleted_column=self._deleted_column,
            client_id_column=self._client_id_column,
        )
        clone._lower_bounds = self._lower_bounds
        clone._with_deleted = self._with_deleted
        return clone

    def _naive_datetime_column(self, field: str) -> bool:
        column_type = self._table.c[field].type
        return isinstance(column_type, DateTime) and not column_type.timezone

    def _lower_bound(self, field: str, value: Any, dialect_name: str) -> ColumnElement[bool]:
        column = self._table.c[field]
        if not isinstance(value, datetime) or not self._naive_datetime_column(field):
            return column >= value

        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        if dialect_name == "sqlite":
            # '2024-06-01 12:00:00' must compare >= a bound of exactly 12:00:00
            return column >= literal(format_for_storage(value), String)
        return column >= value

    def add_greater_or_equal_filter(self, field: str, value: Any) -> "SqlAlchemyCollectionQuery":
        if field not in self._table.c:
            raise ValueError(f"Unknown column '{field}' on table '{self._table.name}'")
        clone = self._copy()
        clone._lower_bounds = self._lower_bounds + ((field, value),)
        return clone

    def include_deleted(self) -> "SqlAlchemyCollectionQuery":
        clone = self._copy()
        clone._with_deleted = True
        return clone

    def without_client_id(self) -> "SqlAlchemyCollectionQuery":
        if self._client_id_column not in self._table.c:
            raise ValueError(
                f"Table '{self._table.name}' has no '{self._client_id_column}' column"
            )
        return self._copy([self._table.c[self._client_id_column].is_(None)])

    def _conditions(self, dialect_name: str) -> list[ColumnElement[bool]]:
        conditions = list(self._where)
        conditions.extend(
            self._lower_bound(field, value, dialect_name) for field, value in self._lower_bounds
        )
        if not self._with_deleted and self._deleted_column in self._table.c:
            conditions.append(self._table.c[self._deleted_column].is_(None))
        return conditions

    def paginate(self, limit: int, page: int = 1) -> PaginatedResult:
        if limit < 1 or page < 1:
            raise ValueError(f"limit and page must be >= 1 (got limit={limit}, page={page})")

        try:
            with self._session_factory() as session:
                dialect_name = session.get_bind().dialect.name
                statement = select(self._table).where(*self._conditions(dialect_name))
                count_statement = select(func.count()).select_from(statement.subquery())
                page_statement = (
                    statement.order_by(*self._table.primary_key.columns)
                    .limit(limit)
                    .offset((page - 1) * limit)
                )
                total = session.scalar(count_statement) or 0
                rows = session.execute(page_statement).mappings().all()
        except SQLAlchemyError as e:
            log.error(
                "collection_query_failed",
                table=self._table.name,
                page=page,
                limit=limit,
                error=str(e),
            )
            raise

        log.debug(
            "sql_collection_paginated",
            table=self._table.name,
            total=total,
            page=page,
            limit=limit,
            returned=len(rows),
        )

        return PaginatedResult(
            items=[dict(row) for row in rows],
            current_page=page,
            total=total,
            per_page=limit,
            last_page=last_page_for(total, limit),
        )

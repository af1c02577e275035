"""Wiring of SQL tables as listable, user-scoped resources."""

from collections.abc import Callable, Iterable

import structlog
from sqlalchemy import Engine, MetaData, Table, false
from sqlalchemy.orm import Session

from walletsync.api.routes import CollectionFactory
from walletsync.models.context import RequestContext
from walletsync.storage.collection_query import CollectionQuery
from walletsync.storage.sql_collection import SqlAlchemyCollectionQuery

log = structlog.stdlib.get_logger()


def reflect_sync_tables(engine: Engine, watermark_field: str = "updated_at") -> list[Table]:
    """Reflect the database and keep tables that carry the watermark column."""
    metadata = MetaData()
    metadata.reflect(bind=engine)
    tables = [
        table for table in metadata.sorted_tables if watermark_field in table.c
    ]
    log.info(
        "sync_tables_reflected",
        tables=[table.name for table in tables],
        watermark_field=watermark_field,
    )
    return tables


def _scoped_factory(
    session_factory: Callable[[], Session], table: Table, owner_column: str
) -> CollectionFactory:
    def factory(context: RequestContext) -> CollectionQuery:
        where = []
        if owner_column in table.c:
            if context.principal is None:
                where.append(false())
            else:
                where.append(table.c[owner_column] == context.principal.user_id)
        return SqlAlchemyCollectionQuery(session_factory, table, where=where)

    return factory


def sql_collection_factories(
    session_factory: Callable[[], Session],
    tables: Iterable[Table],
    owner_column: str = "user_id",
) -> dict[str, CollectionFactory]:
    """
    Expose each table as a resource named after it.

    Tables with an ``owner_column`` are scoped to the requesting user; an
    anonymous request sees no rows of such tables.

    Args:
        session_factory: Opens sessions for query execution
        tables: Tables to expose
        owner_column: Column holding the owning user's id

    Returns:
        Mapping of resource name to collection factory
    """
    return {
        table.name: _scoped_factory(session_factory, table, owner_column) for table in tables
    }

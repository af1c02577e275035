"""HTTP boundary for the sync API."""

from walletsync.api.app import create_app
from walletsync.api.resources import reflect_sync_tables, sql_collection_factories

__all__ = [
    "create_app",
    "reflect_sync_tables",
    "sql_collection_factories",
]

"""Collection query abstraction and its implementations."""

from walletsync.storage.collection_query import CollectionQuery, InMemoryCollectionQuery
from walletsync.storage.sql_collection import SqlAlchemyCollectionQuery

__all__ = [
    "CollectionQuery",
    "InMemoryCollectionQuery",
    "SqlAlchemyCollectionQuery",
]

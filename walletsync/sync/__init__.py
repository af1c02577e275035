"""Incremental sync components."""

from walletsync.sync.builder import SyncQueryBuilder, apply_sync, utc_now

__all__ = [
    "SyncQueryBuilder",
    "apply_sync",
    "utc_now",
]

"""Incremental sync over an injected collection query."""

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from walletsync.dates.normalizer import normalize
from walletsync.models.config import SyncConfig
from walletsync.models.sync import SyncEnvelope, SyncQueryParams
from walletsync.storage.collection_query import CollectionQuery

log = structlog.stdlib.get_logger()


def utc_now() -> datetime:
    """Current server time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class SyncQueryBuilder:
    """Applies sync parameters to a collection query and builds the envelope.

    The envelope's ``last_sync`` watermark is read from the clock before the
    query is filtered or executed. A client that replays it as ``sync_from``
    cannot miss rows committed while the query ran; it may see some of them
    twice, so clients must apply deltas idempotently.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the builder.

        Args:
            config: Sync configuration (default page size, watermark column)
            clock: Source of the current time; must return aware datetimes
        """
        config = config or SyncConfig()
        self._default_limit: int = config.default_limit
        self._watermark_field: str = config.watermark_field
        self._clock = clock

    def apply_sync(
        self,
        params: SyncQueryParams,
        base_query: CollectionQuery,
        user_timezone: str | None = None,
    ) -> SyncEnvelope:
        """
        Fetch one page of the collection, optionally limited to recent changes.

        Args:
            params: Parsed request query parameters
            base_query: Query for the collection being listed
            user_timezone: Zone for interpreting a ``sync_from`` without offset

        Returns:
            SyncEnvelope with the page, its counters and the watermark

        Raises:
            InvalidFormatError: If ``sync_from`` cannot be parsed. The whole
                call fails rather than falling back to a full fetch.
        """
        last_synced = self._clock()

        limit = params.limit if params.limit is not None else self._default_limit
        query = base_query

        sync_from = None
        if params.sync_from is not None:
            sync_from = normalize(params.sync_from, user_timezone)
            query = query.add_greater_or_equal_filter(self._watermark_field, sync_from)
            query = query.include_deleted()

        if params.no_client_id:
            query = query.without_client_id()

        result = query.paginate(limit, params.page)

        log.info(
            "sync_applied",
            sync_from=sync_from.isoformat() if sync_from else None,
            last_sync=last_synced.isoformat(),
            page=result.current_page,
            per_page=result.per_page,
            total=result.total,
            returned=len(result.items),
        )

        return SyncEnvelope(
            data=result.items,
            last_sync=last_synced,
            current_page=result.current_page,
            total=result.total,
            per_page=result.per_page,
            last_page=result.last_page,
        )


_default_builder = SyncQueryBuilder()


def apply_sync(
    params: SyncQueryParams,
    base_query: CollectionQuery,
    user_timezone: str | None = None,
) -> SyncEnvelope:
    """Apply sync parameters using the default builder."""
    return _default_builder.apply_sync(params, base_query, user_timezone)

"""Resource-listing endpoints backed by the incremental sync builder."""

from collections.abc import Callable
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from walletsync.api.middleware import request_locale
from walletsync.locale.messages import OPERATION_SUCCESSFUL, translate
from walletsync.models.context import Principal, RequestContext
from walletsync.models.sync import SyncQueryParams
from walletsync.preferences.user_config import UserConfigProvider, build_request_context
from walletsync.storage.collection_query import CollectionQuery

log = structlog.stdlib.get_logger()

CollectionFactory = Callable[[RequestContext], CollectionQuery]
PrincipalResolver = Callable[[Request], Principal | None]
ConfigLookup = Callable[[Principal], UserConfigProvider | None]

router = APIRouter()


def get_sync_params(
    limit: int | None = Query(default=None, ge=1, description="Number of items per page"),
    page: int = Query(default=1, ge=1, description="Page number"),
    sync_from: str | None = Query(default=None, description="Get changes since this date"),
    no_client_id: bool | None = Query(
        default=None, description="Get results with no client id"
    ),
) -> SyncQueryParams:
    return SyncQueryParams(
        limit=limit, page=page, sync_from=sync_from, no_client_id=no_client_id
    )


def get_request_context(request: Request) -> RequestContext:
    """Resolve the principal and their timezone for this request."""
    state = request.app.state
    principal = state.principal_resolver(request)
    user_config = state.config_lookup(principal) if principal is not None else None
    return build_request_context(
        request_locale(request, state.negotiator.default_locale),
        principal,
        user_config,
    )


@router.get("/health", tags=["Health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/{resource}", tags=["Sync"])
def list_resource(
    resource: str,
    request: Request,
    params: SyncQueryParams = Depends(get_sync_params),
    context: RequestContext = Depends(get_request_context),
) -> dict[str, Any]:
    """
    List a resource collection, optionally only rows changed since ``sync_from``.

    Returns the sync envelope wrapped in the standard success body. Replaying
    ``last_sync`` as the next ``sync_from`` never misses an update.
    """
    factory: CollectionFactory | None = request.app.state.collections.get(resource)
    if factory is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown resource '{resource}'"
        )

    log.info(
        "resource_listing_requested",
        resource=resource,
        user_id=context.principal.user_id if context.principal else None,
        sync_from=params.sync_from,
    )

    envelope = request.app.state.sync_builder.apply_sync(
        params, factory(context), context.timezone
    )

    return {
        "success": True,
        "message": translate(OPERATION_SUCCESSFUL, context.locale),
        "data": envelope.model_dump(mode="json"),
    }

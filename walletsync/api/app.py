"""FastAPI application factory for the sync API."""

from collections.abc import Callable, Mapping
from datetime import datetime

import structlog
from fastapi import FastAPI, Request

from walletsync.api.errors import register_exception_handlers
from walletsync.api.middleware import JsonContentTypeMiddleware, LocaleMiddleware
from walletsync.api.routes import CollectionFactory, ConfigLookup, PrincipalResolver, router
from walletsync.locale.negotiator import LocaleNegotiator
from walletsync.models.config import AppConfig
from walletsync.models.context import Principal
from walletsync.sync.builder import SyncQueryBuilder, utc_now

log = structlog.stdlib.get_logger()


def anonymous_principal(request: Request) -> Principal | None:
    """Default resolver: authentication is handled outside this layer."""
    return None


def no_user_config(principal: Principal) -> None:
    """Default config lookup: no per-user configuration available."""
    return None


def create_app(
    config: AppConfig | None = None,
    collections: Mapping[str, CollectionFactory] | None = None,
    principal_resolver: PrincipalResolver = anonymous_principal,
    config_lookup: ConfigLookup = no_user_config,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Application configuration (defaults from environment)
        collections: Resource name to a factory that returns the base
            collection query for a request context
        principal_resolver: Maps a request to its authenticated user
        config_lookup: Maps a user to their stored configuration
        clock: Source of sync watermarks

    Returns:
        Configured FastAPI application
    """
    config = config or AppConfig()
    negotiator = LocaleNegotiator(config.locale)

    app = FastAPI(title="walletsync", version="0.1.0")
    app.state.negotiator = negotiator
    app.state.sync_builder = SyncQueryBuilder(config.sync, clock=clock)
    app.state.collections = dict(collections or {})
    app.state.principal_resolver = principal_resolver
    app.state.config_lookup = config_lookup

    # Last added runs first: negotiate the locale before the content-type gate.
    app.add_middleware(JsonContentTypeMiddleware, default_locale=negotiator.default_locale)
    app.add_middleware(LocaleMiddleware, negotiator=negotiator)

    register_exception_handlers(app, negotiator.default_locale)
    app.include_router(router, prefix=config.api.prefix)

    log.info(
        "api_app_created",
        prefix=config.api.prefix,
        resources=sorted(app.state.collections),
        default_locale=negotiator.default_locale,
    )
    return app

"""Per-user preferences consumed by the request layer."""

from walletsync.preferences.user_config import (
    InMemoryUserConfig,
    UserConfigProvider,
    build_request_context,
    resolve_user_timezone,
)

__all__ = [
    "InMemoryUserConfig",
    "UserConfigProvider",
    "build_request_context",
    "resolve_user_timezone",
]

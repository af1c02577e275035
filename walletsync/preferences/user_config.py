"""Per-user configuration lookup and request context construction."""

from abc import ABC, abstractmethod
from collections.abc import Mapping

import structlog

from walletsync.dates.normalizer import resolve_timezone
from walletsync.models.context import Principal, RequestContext

log = structlog.stdlib.get_logger()

TIMEZONE_KEY = "timezone"


class UserConfigProvider(ABC):
    """Read access to one user's stored configuration values."""

    @abstractmethod
    def get_config_value(self, key: str) -> str | None:
        """Return the stored value for ``key``, or None if unset."""


class InMemoryUserConfig(UserConfigProvider):
    """User configuration backed by a plain mapping."""

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    def get_config_value(self, key: str) -> str | None:
        return self._values.get(key)


def resolve_user_timezone(config: UserConfigProvider | None) -> str | None:
    """
    Read and validate the user's timezone setting.

    Args:
        config: The user's configuration, or None for anonymous requests

    Returns:
        A loadable IANA zone id, or None when unset or unknown
    """
    if config is None:
        return None

    name = config.get_config_value(TIMEZONE_KEY)
    if resolve_timezone(name) is None:
        return None
    return name


def build_request_context(
    locale: str,
    principal: Principal | None = None,
    config: UserConfigProvider | None = None,
) -> RequestContext:
    """
    Assemble the immutable context for one request.

    Args:
        locale: Negotiated locale
        principal: Authenticated user, if any
        config: That user's configuration, if any

    Returns:
        RequestContext carrying the locale, principal and resolved timezone
    """
    user_timezone = resolve_user_timezone(config) if principal is not None else None

    context = RequestContext(locale=locale, principal=principal, timezone=user_timezone)
    log.debug(
        "request_context_built",
        locale=context.locale,
        user_id=principal.user_id if principal else None,
        timezone=context.timezone,
    )
    return context

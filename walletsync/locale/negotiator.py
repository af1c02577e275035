"""Accept-Language negotiation against a fixed set of supported locales."""

import math
from collections.abc import Collection

import structlog
from pydantic import BaseModel, Field

from walletsync.models.config import DEFAULT_SUPPORTED_LOCALES, LocaleConfig

log = structlog.stdlib.get_logger()

QUALITY_SEPARATOR = ";q="


class AcceptLanguageEntry(BaseModel):
    """One weighted entry of an Accept-Language header."""

    tag: str = Field(default=..., description="Locale tag as sent by the client")
    weight: float = Field(default=1.0, ge=0.0, le=1.0, description="Quality weight")
    position: int = Field(default=..., ge=0, description="Left-to-right index in the header")

    @property
    def primary_subtag(self) -> str:
        """Leading language code, e.g. ``en`` for ``en-US``."""
        return self.tag[:2]


def _parse_weight(raw: str) -> float:
    try:
        weight = float(raw)
    except ValueError:
        return 1.0
    if math.isnan(weight):
        return 1.0
    return min(max(weight, 0.0), 1.0)


def parse_accept_language(header: str) -> list[AcceptLanguageEntry]:
    """
    Split an Accept-Language header into entries ordered by preference.

    Entries are sorted by weight descending. The sort is stable, so entries
    sharing a weight keep their left-to-right order. A missing or garbage
    weight counts as 1.0.

    Args:
        header: Raw header value, e.g. ``fr-FR;q=0.9,en;q=0.8``

    Returns:
        Entries, most preferred first
    """
    entries = []
    for position, part in enumerate(header.split(",")):
        part = part.strip()
        if QUALITY_SEPARATOR in part:
            tag, raw_weight = part.split(QUALITY_SEPARATOR, 1)
            weight = _parse_weight(raw_weight.strip())
        else:
            tag, weight = part, 1.0
        entries.append(AcceptLanguageEntry(tag=tag.strip(), weight=weight, position=position))

    return sorted(entries, key=lambda entry: -entry.weight)


def negotiate(
    header: str | None,
    default_locale: str,
    supported: Collection[str],
) -> str:
    """
    Pick the supported locale the client prefers most.

    Matching uses the first two characters of each tag and is case-sensitive
    against the lowercase supported set. Never raises: an absent header or one
    without any supported entry yields ``default_locale``.

    Args:
        header: Accept-Language header value, or None
        default_locale: Configured fallback locale
        supported: Supported primary subtags

    Returns:
        A locale tag from ``supported`` (or ``default_locale``)
    """
    if not header:
        return default_locale

    for entry in parse_accept_language(header):
        if entry.primary_subtag in supported:
            return entry.primary_subtag

    return default_locale


class LocaleNegotiator:
    """Negotiates request locales using the configured default and support set."""

    def __init__(self, config: LocaleConfig | None = None):
        """
        Initialize the negotiator.

        Args:
            config: Locale configuration. Defaults to English with the six
                built-in supported locales.
        """
        config = config or LocaleConfig()
        self._default_locale: str = config.default_locale
        self._supported: frozenset[str] = frozenset(
            config.supported_locales or DEFAULT_SUPPORTED_LOCALES
        )

    @property
    def default_locale(self) -> str:
        return self._default_locale

    @property
    def supported_locales(self) -> frozenset[str]:
        return self._supported

    def negotiate(self, header: str | None) -> str:
        """Negotiate the locale for one request."""
        locale = negotiate(header, self._default_locale, self._supported)
        log.debug("locale_negotiated", accept_language=header, locale=locale)
        return locale

"""Locale negotiation and localized messages."""

from walletsync.locale.messages import translate
from walletsync.locale.negotiator import (
    AcceptLanguageEntry,
    LocaleNegotiator,
    negotiate,
    parse_accept_language,
)

__all__ = [
    "AcceptLanguageEntry",
    "LocaleNegotiator",
    "negotiate",
    "parse_accept_language",
    "translate",
]

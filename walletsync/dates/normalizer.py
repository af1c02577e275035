"""Normalization of client-submitted date/time strings into UTC instants."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

log = structlog.stdlib.get_logger()

STORAGE_SEPARATOR = " "


class InvalidFormatError(ValueError):
    """Raised when a date/time string cannot be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date/time format: {value!r}")


def resolve_timezone(name: str | None) -> ZoneInfo | None:
    """
    Look up an IANA zone by id.

    Args:
        name: Zone id such as ``Europe/Paris``, or None

    Returns:
        The zone, or None when absent or unknown
    """
    if not name:
        return None

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        log.warning("invalid_timezone_ignored", timezone=name, error=str(e))
        return None


def _parse(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidFormatError(value) from e


def normalize(value: str, user_timezone: str | None = None) -> datetime:
    """
    Convert a client date/time string into an aware UTC datetime.

    An offset embedded in the string always wins. A wall-clock string with no
    offset is read in ``user_timezone`` when one is given, and as UTC
    otherwise. Wall-clock times that fall in a DST gap or overlap resolve
    with ``fold=0``.

    Args:
        value: ISO-8601-like date or date-time string
        user_timezone: IANA zone id from the user's configuration

    Returns:
        Aware datetime in UTC

    Raises:
        InvalidFormatError: If the value is not a parseable date/time string
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidFormatError(value)

    parsed = _parse(value)
    zone = None if parsed.tzinfo is not None else resolve_timezone(user_timezone)

    try:
        if parsed.tzinfo is not None:
            return parsed.astimezone(timezone.utc)
        if zone is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.replace(tzinfo=zone).astimezone(timezone.utc)
    except (OverflowError, ValueError) as e:
        # Parses, but the UTC instant falls outside year 1..9999
        raise InvalidFormatError(value) from e


def format_for_storage(instant: datetime) -> str:
    """
    Format an instant the way naive UTC DATETIME columns store it.

    ``YYYY-MM-DD HH:MM:SS`` with the year zero-padded, plus ``.ffffff`` only
    when the instant has a fractional second.
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc).replace(tzinfo=None)
    timespec = "microseconds" if instant.microsecond else "seconds"
    return instant.isoformat(sep=STORAGE_SEPARATOR, timespec=timespec)


def to_storage_string(value: str | None, user_timezone: str | None = None) -> str | None:
    """
    Normalize a value and format it as ``YYYY-MM-DD HH:MM:SS`` in UTC.

    Best-effort: absent or malformed input yields None instead of raising.
    Use ``normalize`` where bad input must be reported to the client.

    Args:
        value: ISO-8601-like date or date-time string, or None
        user_timezone: IANA zone id from the user's configuration

    Returns:
        Storage-formatted UTC string, or None
    """
    if not value:
        return None

    try:
        return format_for_storage(normalize(value, user_timezone).replace(microsecond=0))
    except InvalidFormatError:
        log.debug("storage_string_unparseable", value=value)
        return None

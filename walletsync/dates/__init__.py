"""Timezone-aware date/time normalization."""

from walletsync.dates.normalizer import (
    InvalidFormatError,
    format_for_storage,
    normalize,
    resolve_timezone,
    to_storage_string,
)

__all__ = [
    "InvalidFormatError",
    "format_for_storage",
    "normalize",
    "resolve_timezone",
    "to_storage_string",
]

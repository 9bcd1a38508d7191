"""Conversion of timestamps as serialized by the share service."""

import re
from datetime import datetime

from itemshare.errors import MalformedResponseError


# Go's time.Time zero value, used by the server for "no expiry"
GO_ZERO_TIME = "0001-01-01T00:00:00Z"

_FRACTION = re.compile(r"\.(\d+)")


def date_from_golang(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp produced by Go's encoding/json.

    Go emits up to nine fractional digits and a ``Z`` suffix for UTC; Python
    keeps microseconds, so extra digits are truncated.

    Returns:
        An aware datetime, or None for empty values and Go's zero time.
    """
    if not value or value == GO_ZERO_TIME:
        return None
    if not isinstance(value, str):
        raise MalformedResponseError(f"Invalid timestamp: {value!r}")

    normalized = value.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), normalized, count=1)

    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as e:
        raise MalformedResponseError(f"Invalid timestamp: {value!r}") from e

    if parsed.year == 1:
        return None
    return parsed

"""UTC timestamp formatting for API payloads and stored metadata."""

from datetime import datetime, timezone


def to_utc_iso(value: datetime) -> str:
    """
    Format a timestamp as ISO-8601 UTC with a ``Z`` suffix.

    Naive datetimes are taken to be UTC already; aware ones are converted.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"

"""Time utilities."""

from datetime import datetime, timezone


def parse_iso(ts: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting a trailing 'Z'.

    Naive results are assumed to be UTC.

    Raises:
        ValueError: If the string is not an ISO 8601 timestamp
    """
    text = ts.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

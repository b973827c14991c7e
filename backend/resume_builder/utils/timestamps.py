from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time in the millisecond ISO-8601 form browsers emit (``2024-05-01T09:30:00.000Z``)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO-8601 string, accepting a trailing ``Z``. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

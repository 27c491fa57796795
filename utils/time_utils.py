from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time as ISO-8601 string with milliseconds."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp, the format every stored document uses."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

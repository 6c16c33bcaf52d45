"""Date and time utility functions."""
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """
    Format datetime as ISO 8601 UTC with millisecond precision.

    Args:
        moment: Aware or naive datetime (naive is treated as UTC)

    Returns:
        String such as "2026-10-18T09:30:00.123Z"
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_iso(timestamp: str) -> datetime:
    """
    Parse ISO 8601 timestamp, accepting a trailing "Z".

    Raises:
        ValueError: If timestamp format is invalid
    """
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid timestamp format: {timestamp}") from e


def epoch_millis(moment: datetime) -> int:
    """Return milliseconds since the Unix epoch."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def format_timestamp(timestamp: str) -> str:
    """
    Format stored timestamp for display in local time.

    Returns the raw value if it cannot be parsed.
    """
    try:
        moment = parse_iso(timestamp)
    except ValueError:
        return timestamp
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S")

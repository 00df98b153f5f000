from datetime import datetime, timezone
from typing import Optional


def format_iso(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime, None if unparseable"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

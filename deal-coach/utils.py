from datetime import date, datetime, timedelta, timezone
from typing import Optional

# Shared normalization helpers. Nothing in here raises on bad deal data.

def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensures a datetime object is timezone-aware, assuming UTC if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def parse_timestamp(value) -> Optional[datetime]:
    """
    Normalizes a stored timestamp into an aware datetime.
    Accepts datetimes, dates and ISO strings (trailing 'Z', SQLite's space separator,
    bare dates). Anything else becomes None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_timezone_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return ensure_timezone_aware(datetime.fromisoformat(value.strip().replace('Z', '+00:00')))
        except ValueError:
            print(f"Warning: Could not parse timestamp '{value}', treating it as missing.")
            return None
    print(f"Warning: Unsupported timestamp type {type(value).__name__}, treating it as missing.")
    return None

def days_between(earlier: Optional[datetime], later: datetime, default: int) -> int:
    """Whole days from earlier to later, floored. Returns default when earlier is missing."""
    if earlier is None:
        return default
    return (ensure_timezone_aware(later) - ensure_timezone_aware(earlier)) // timedelta(days=1)

def is_filled(value) -> bool:
    """A value is filled when it is a string with something other than whitespace in it."""
    return isinstance(value, str) and value.strip() != ""

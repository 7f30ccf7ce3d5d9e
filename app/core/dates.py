"""
Calendar helpers.

Every date the app stores is a "YYYY-MM-DD" string for a calendar day in the
server's local timezone, never a UTC timestamp. Day arithmetic is done on
``datetime.date`` so it stays correct across daylight-saving transitions.
"""
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def local_now() -> datetime:
    """Single clock source for the app (naive, server local time)."""
    return datetime.now()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a "YYYY-MM-DD" string. Raises ValueError on anything else."""
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"Invalid date string: {value!r}")
    return datetime.strptime(value, DATE_FORMAT).date()


def is_date_string(value) -> bool:
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def today() -> str:
    return format_date(local_now().date())


def yesterday() -> str:
    return format_date(local_now().date() - timedelta(days=1))


def tomorrow() -> str:
    return format_date(local_now().date() + timedelta(days=1))


def to_heatmap_key(date_str: str) -> int:
    """
    Unix epoch seconds for local midnight of ``date_str``.

    The datetime is built from explicit year/month/day parts so the key maps
    back to the same calendar day in the viewer's timezone.
    """
    day = parse_date(date_str)
    return int(datetime(day.year, day.month, day.day).timestamp())

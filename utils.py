import re
from datetime import date, timedelta
from typing import Optional


# Sunday-based weekday labels, same indexing as sunday_weekday()
DAY_LABELS = ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
DIGITS = re.compile(r"[0-9]+")


def format_display_date(day: date) -> str:
    """Returns 'dd/mm/yyyy', the form used in task titles"""
    return f"{day.day:02d}/{day.month:02d}/{day.year:04d}"


def to_iso_date(day: date) -> str:
    """Returns 'YYYY-MM-DD' built from the date's own calendar fields"""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday=0 ... Saturday=6"""
    return (day.weekday() + 1) % 7


def parse_form_date(value: Optional[str]) -> Optional[date]:
    """Parse a 'YYYY-MM-DD' form value, returning None if missing or invalid"""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_display_date(value: Optional[str]) -> Optional[str]:
    """
    Parse 'dd/mm/yyyy' into an ISO date string.

    Day and month overflow roll forward: 31/02/2024 is 2024-03-02 and
    month 13 is January of the following year.
    """
    if not value:
        return None

    parts = value.split("/")
    if len(parts) != 3:
        return None

    if not all(DIGITS.fullmatch(part) for part in parts):
        return None
    dd, mm, yyyy = (int(part) for part in parts)

    if dd <= 0 or mm <= 0 or yyyy <= 0:
        return None

    year = yyyy + (mm - 1) // 12
    month = (mm - 1) % 12 + 1
    try:
        return to_iso_date(date(year, month, 1) + timedelta(days=dd - 1))
    except (ValueError, OverflowError):
        return None

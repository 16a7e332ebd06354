from datetime import date, datetime
from typing import Optional


def parse_iso_date(value) -> Optional[date]:
    """
    Parse an ISO-8601 date or timestamp ("2001-04-17", "2001-04-17T00:00:00Z").
    Returns None for anything that does not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def whole_years_between(first: date, second: date) -> int:
    """Completed calendar years between two dates, always non-negative."""
    earlier, later = sorted((first, second))
    years = later.year - earlier.year
    if (later.month, later.day) < (earlier.month, earlier.day):
        years -= 1
    return years


def age_difference_years(birth_a, birth_b) -> Optional[int]:
    a, b = parse_iso_date(birth_a), parse_iso_date(birth_b)
    if a is None or b is None:
        return None
    return whole_years_between(a, b)

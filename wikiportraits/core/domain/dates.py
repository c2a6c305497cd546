# wikiportraits/core/domain/dates.py
"""
Date helpers shared by the category, wikitext and entity modules.

Form data arrives as JSON, so dates are usually ISO strings
("2025-06-15", "2025-06-15T18:00:00Z") but may already be `date`/`datetime`
objects when called from Python.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]

_YEAR_ONLY = re.compile(r"^\d{4}$")
_YEAR_INPUT = re.compile(r"^\d{1,4}$")
MIN_YEAR = 1800


def parse_date(value: DateLike) -> Optional[date]:
    """Best-effort conversion of a form value to a `date`; None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip().lstrip("+")
    if _YEAR_ONLY.match(text):
        return date(int(text), 1, 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def year_of(value: DateLike) -> Optional[str]:
    """Four-digit year of a date-like value, as a string."""
    parsed = parse_date(value)
    return str(parsed.year) if parsed else None


def year_to_date(year: Union[str, int]) -> Optional[date]:
    """January 1st of `year`, or None outside 1800..current+10."""
    try:
        year_num = int(year)
    except (TypeError, ValueError):
        return None
    if year_num < MIN_YEAR or year_num > date.today().year + 10:
        return None
    return date(year_num, 1, 1)


def date_to_year(value: DateLike) -> Optional[int]:
    parsed = parse_date(value)
    return parsed.year if parsed else None


def year_input_to_date(year_input: str) -> Optional[date]:
    if not year_input or len(year_input) != 4:
        return None
    return year_to_date(year_input)


def is_valid_year_input(year_input: str) -> bool:
    """True while the user is still typing a year (empty or 1-4 digits)."""
    return year_input == "" or bool(_YEAR_INPUT.match(year_input))


def is_valid_complete_year(year: Union[str, int]) -> bool:
    try:
        year_num = int(year)
    except (TypeError, ValueError):
        return False
    return MIN_YEAR < year_num <= date.today().year + 10


def wd_date_to_date(wd_date: str) -> Optional[date]:
    """Wikidata time value ("+2024-01-01T00:00:00Z") to a date."""
    if not wd_date:
        return None
    return parse_date(wd_date.lstrip("+"))


def date_to_wd_date(value: date) -> str:
    return f"+{value.year}-{value.month:02d}-{value.day:02d}T00:00:00Z"


def format_date_for_display(value: DateLike, fmt: str = "year") -> str:
    """
    Human readable date: "2024", "January 2024" or "January 1, 2024".
    Unknown formats fall back to the year.
    """
    parsed = parse_date(value)
    if parsed is None:
        return ""
    if fmt == "month-year":
        return f"{parsed.strftime('%B')} {parsed.year}"
    if fmt == "full":
        return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"
    return str(parsed.year)


def is_same_year(first: DateLike, second: DateLike) -> bool:
    a, b = parse_date(first), parse_date(second)
    if a is None or b is None:
        return False
    return a.year == b.year

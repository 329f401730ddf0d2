"""
Calendar date helpers for the planning grid.

Dates travel as ISO strings (YYYY-MM-DD) because that is how they are stored
on each work item. No time zones, no business-day logic: a day is a
calendar day.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional, Union


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse an ISO calendar date.

    Accepts a date, a "YYYY-MM-DD" string, or a full ISO timestamp
    (the date part is used).

    Returns:
        The parsed date, or None if the value is blank or malformed
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


def to_iso(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()


def add_days(iso_date: str, n: Union[int, float]) -> str:
    """
    Return the ISO date n calendar days after iso_date.

    Negative n goes backwards, fractional n is rounded up.
    An unparsable iso_date is returned unchanged.

    Examples:
        add_days("2025-01-30", 3)   → "2025-02-02"
        add_days("2025-03-01", -1)  → "2025-02-28"
        add_days("not-a-date", 5)   → "not-a-date"
    """
    parsed = parse_iso_date(iso_date)
    if parsed is None:
        return iso_date

    try:
        offset = math.ceil(n)
    except (TypeError, ValueError, OverflowError):
        offset = 0

    try:
        return to_iso(parsed + timedelta(days=offset))
    except OverflowError:
        return iso_date

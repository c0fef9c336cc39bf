"""Calendar-day primitives.

A calendar day is a plain ``datetime.date``: no time of day, no time zone,
equality by (year, month, day). Everything crossing the program boundary uses
the fixed-width ``YYYY-MM-DD`` form, so that string order of two keys agrees
with chronological order.

Parsing is strict. ``date.fromisoformat`` and most date libraries accept more
shapes than we want (``20250101``, week dates, datetimes), and JavaScript-style
constructors silently roll ``2025-02-30`` over to March; ``parse_strict``
accepts only ``\\d{4}-\\d{2}-\\d{2}`` and only when the constructed date
reproduces the same year, month and day.
"""

import calendar
import re
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from babycal.utils.env import get_today

DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

DECEMBER = 12


class InvalidDateFormat(ValueError):  # noqa: N818
    """Input is not a valid ``YYYY-MM-DD`` calendar date."""

    def __init__(self, value: object, reason: str = "expected YYYY-MM-DD") -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid date '{value}': {reason}")


def parse_strict(text: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string into a calendar day.

    Args:
        text: Date string, or an existing ``date`` (returned unchanged)

    Returns:
        The parsed date

    Raises:
        InvalidDateFormat: If the shape is wrong or the day does not exist
    """
    if isinstance(text, datetime):
        raise InvalidDateFormat(text, "datetime values carry a time of day")
    if isinstance(text, date):
        return text
    if not isinstance(text, str):
        raise InvalidDateFormat(text, f"expected a string, got {type(text).__name__}")

    match = DATE_PATTERN.match(text)
    if not match:
        raise InvalidDateFormat(text)

    year, month, day = (int(part) for part in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError as e:
        raise InvalidDateFormat(text, str(e)) from e

    if (parsed.year, parsed.month, parsed.day) != (year, month, day):
        raise InvalidDateFormat(text, "date does not exist")
    return parsed


def parse_optional(value: str | date | None) -> date | None:
    """Parse an optional date; ``None`` and empty strings mean "not set"."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_strict(value)


def to_key(value: date) -> str:
    """Canonical zero-padded ``YYYY-MM-DD`` key for a calendar day."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def month_key(value: date) -> str:
    """``YYYY-MM`` key of the month containing ``value``."""
    return f"{value.year:04d}-{value.month:02d}"


def today() -> date:
    """Current calendar day (UTC), overridable through BABYCAL_FAKE_DATE."""
    return get_today()


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month (leap years included)."""
    return calendar.monthrange(year, month)[1]


def previous_month(year: int, month: int) -> tuple[int, int]:
    """Get the (year, month) immediately preceding the given month."""
    if month == 1:
        return year - 1, DECEMBER
    return year, month - 1


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length.

    ``add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)``
    """
    return value + relativedelta(months=months)


def parse_month(text: str) -> date:
    """Parse a ``YYYY-MM`` month into the first day of that month.

    Raises:
        InvalidDateFormat: If the text is not a valid month
    """
    match = MONTH_PATTERN.match(text)
    if not match:
        raise InvalidDateFormat(text, "expected YYYY-MM")
    year, month = (int(part) for part in match.groups())
    try:
        return date(year, month, 1)
    except ValueError as e:
        raise InvalidDateFormat(text, str(e)) from e


def anchor_month(text: str | None, fallback: date) -> date:
    """First day of the month to display.

    Args:
        text: ``YYYY-MM`` or ``YYYY-MM-DD`` (only the month is used); empty
            means "use the fallback"
        fallback: Day whose month is used when no text is given

    Raises:
        InvalidDateFormat: If text is given but is not a month or a day
    """
    if not text:
        return fallback.replace(day=1)
    if MONTH_PATTERN.match(text):
        return parse_month(text)
    return parse_strict(text).replace(day=1)

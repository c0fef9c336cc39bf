"""Calendar-correct age arithmetic and age label formatting.

Ages are decomposed into years, months and days using real month lengths,
so "1 month" from January 15th ends on February 15th regardless of whether
that is 28 or 31 days later. The graph module deliberately uses fixed
30-day months instead; see ``babycal.graph``.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from babycal.dates import days_in_month, previous_month

MONTHS_IN_YEAR = 12


class AgeFormat(str, Enum):
    """How an age is rendered as a short label."""

    MD = "md"  # total months and days: "14m3d"
    YMD = "ymd"  # years, months and days: "1y2m3d"


@dataclass(frozen=True)
class AgeParts:
    """Elapsed calendar time between two days (never negative)."""

    years: int = 0
    months: int = 0
    days: int = 0

    @property
    def total_months(self) -> int:
        """Years folded into months."""
        return self.years * MONTHS_IN_YEAR + self.months

    @property
    def is_zero(self) -> bool:
        """True for the zero age."""
        return self.years == 0 and self.months == 0 and self.days == 0


ZERO_AGE = AgeParts()


def calendar_diff(base: date, target: date) -> AgeParts:
    """Compute the calendar-correct age of ``target`` measured from ``base``.

    Days borrow the length of the month preceding ``target``'s month, months
    borrow 12 from years. When ``base``'s day does not exist in that preceding
    month (base on the 31st, target just after a 30-day month), the base day
    is clamped to the month end so the result stays non-negative and adding
    it back to ``base`` reproduces ``target``.

    Args:
        base: Start day (birth or due date)
        target: Day to measure the age on

    Returns:
        AgeParts; the zero age when ``target`` is before ``base``
    """
    if target < base:
        return ZERO_AGE

    years = target.year - base.year
    months = target.month - base.month
    days = target.day - base.day

    if days < 0:
        prev_year, prev_month = previous_month(target.year, target.month)
        prev_len = days_in_month(prev_year, prev_month)
        days = target.day + prev_len - min(base.day, prev_len)
        months -= 1

    if months < 0:
        months += MONTHS_IN_YEAR
        years -= 1

    return AgeParts(years=years, months=months, days=days)


def format_age(parts: AgeParts, mode: AgeFormat | str = AgeFormat.MD) -> str:
    """Render an age as a short label.

    ``md`` always prints the month count ("0m5d", "14m3d"); ``ymd`` drops a
    zero year and, while the year is zero, a zero month ("5d", "2m3d",
    "1y0m0d"). The zero age is "0d" in both modes.

    Args:
        parts: Age to render
        mode: AgeFormat (or its string value)

    Returns:
        Label string
    """
    mode = AgeFormat(mode)
    if parts.is_zero:
        return "0d"

    if mode is AgeFormat.MD:
        return f"{parts.total_months}m{parts.days}d"

    segments = []
    if parts.years > 0:
        segments.append(f"{parts.years}y")
    if parts.years > 0 or parts.months > 0:
        segments.append(f"{parts.months}m")
    segments.append(f"{parts.days}d")
    return "".join(segments)


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end``, floored at zero."""
    return max(0, (end - start).days)

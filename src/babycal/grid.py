"""Month grid for the calendar view.

A month is always shown as 6 weeks x 7 days = 42 cells, weeks starting on
Sunday, so the grid keeps the same height for every month. Cells outside the
displayed month are included (``is_current_month`` is False for them).

Every cell carries its own age labels. To avoid printing the same age on
every day, each cell also records whether the chronological or corrected
age reached a new month on that day compared to the day before.
"""

import logging
from collections.abc import Mapping
from datetime import date, timedelta

from babycal.age import calendar_diff
from babycal.age_service import compute_age_labels, corrected_base
from babycal.dates import to_key
from babycal.dates import today as current_day
from babycal.models import AgeSettings, CalendarCell, CalendarMonthView

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7
WEEKS_IN_GRID = 6
GRID_SIZE = DAYS_IN_WEEK * WEEKS_IN_GRID

# date.weekday() is Monday=0..Sunday=6; the grid starts on Sunday
_SUNDAY = 6


def grid_start(anchor: date) -> date:
    """First day of the grid: the Sunday on or before the 1st of the month."""
    first = anchor.replace(day=1)
    days_since_sunday = (first.weekday() - _SUNDAY) % DAYS_IN_WEEK
    return first - timedelta(days=days_since_sunday)


def _total_months(base: date | None, day: date) -> int | None:
    if base is None:
        return None
    return calendar_diff(base, day).total_months


def _advanced_one_month(previous: int | None, current: int | None) -> bool:
    return previous is not None and current is not None and current == previous + 1


def build_month(
    anchor: date,
    settings: AgeSettings,
    achievement_counts_by_day: Mapping[str, int] | None = None,
    today: date | None = None,
) -> list[CalendarCell]:
    """Build the 42 cells of the month containing ``anchor``.

    Args:
        anchor: Any day of the month to display
        settings: Birth/due dates and display preferences
        achievement_counts_by_day: Number of achievements per YYYY-MM-DD key
        today: Day to highlight (defaults to the current day)

    Returns:
        List of exactly 42 CalendarCell, in display order
    """
    counts = achievement_counts_by_day or {}
    today = today if today is not None else current_day()
    start = grid_start(anchor)

    birth = settings.birth_date
    corrected_from = (
        corrected_base(birth, settings.due_date)
        if birth is not None and settings.due_date is not None
        else None
    )

    # Seed the transition tracking with the day before the grid
    previous_day = start - timedelta(days=1)
    prev_chronological = _total_months(birth, previous_day)
    prev_corrected = _total_months(corrected_from, previous_day)

    cells: list[CalendarCell] = []
    for offset in range(GRID_SIZE):
        day = start + timedelta(days=offset)
        age_info = compute_age_labels(settings, day) if birth is not None else None

        chronological = _total_months(birth, day)
        corrected = _total_months(corrected_from, day)
        corrected_shown = age_info is not None and not age_info.suppressed

        cells.append(
            CalendarCell(
                date=day,
                is_current_month=(day.year, day.month) == (anchor.year, anchor.month),
                is_today=day == today,
                age_info=age_info,
                achievement_count=counts.get(to_key(day), 0),
                chronological_changed=_advanced_one_month(
                    prev_chronological, chronological
                ),
                corrected_changed=corrected_shown
                and _advanced_one_month(prev_corrected, corrected),
            )
        )
        prev_chronological = chronological
        prev_corrected = corrected

    logger.debug(
        "Built month grid %04d-%02d starting %s", anchor.year, anchor.month, start
    )
    return cells


def build_month_view(
    anchor: date,
    settings: AgeSettings,
    achievement_counts_by_day: Mapping[str, int] | None = None,
    today: date | None = None,
) -> CalendarMonthView:
    """Build the month grid together with the displayed year and month."""
    return CalendarMonthView(
        year=anchor.year,
        month=anchor.month,
        cells=build_month(anchor, settings, achievement_counts_by_day, today),
    )


def weeks(cells: list[CalendarCell]) -> list[list[CalendarCell]]:
    """Split grid cells into rows of seven days."""
    return [cells[i : i + DAYS_IN_WEEK] for i in range(0, len(cells), DAYS_IN_WEEK)]

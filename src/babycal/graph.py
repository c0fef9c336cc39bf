"""Cumulative achievement graph: buckets and x-axis labels.

Records are aggregated into fixed slots of the child's age:

- "1y" / "3y": months of age 0..12 / 0..36. A month here is a fixed
  30-day block counted from birth, NOT a calendar month. This differs from
  the calendar-correct arithmetic in ``babycal.age`` on purpose: it keeps
  every slot the same width on the graph. Do not unify the two, it would
  move records across bucket boundaries.
- "all": years of age (birthday-aware), from 0 to the oldest record.

Axis labels are thinned to at most 12 visible ticks. For premature babies
the month views get a second axis with the corrected age: gestational weeks
(every 4 weeks from week 22) before the due date, a marker at the due date
itself and corrected months after it.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any

from babycal.dates import parse_strict
from babycal.models import AxisLabelInfo, GraphBucket, GraphRecord, GraphResult

logger = logging.getLogger(__name__)

DAYS_PER_SLOT_MONTH = 30
DAYS_PER_WEEK = 7

# A birth this many days (or fewer) before the due date is not premature
PREMATURE_THRESHOLD_DAYS = 21

MAX_AXIS_LABELS = 12

TERM_WEEK = 40
MIN_GESTATIONAL_WEEK = 22
GESTATIONAL_WEEK_STEP = 4

CORRECTED_ZERO_LABEL = "修0M（予定日）"


class GraphPeriod(str, Enum):
    """Time span shown by the graph."""

    ONE_YEAR = "1y"
    THREE_YEARS = "3y"
    ALL = "all"


PERIOD_MONTHS = {
    GraphPeriod.ONE_YEAR: 12,
    GraphPeriod.THREE_YEARS: 36,
}


@dataclass
class _Counts:
    tried: int = 0
    did: int = 0


def calculate_actual_month(target: date, birth_date: date) -> int:
    """Age in 30-day months (negative before birth)."""
    return (target - birth_date).days // DAYS_PER_SLOT_MONTH


def calculate_corrected_month(target: date, due_date: date) -> int:
    """Corrected age in 30-day months (negative before the due date)."""
    return (target - due_date).days // DAYS_PER_SLOT_MONTH


def calculate_actual_year(target: date, birth_date: date) -> int:
    """Completed years of age; one less until this year's birthday."""
    years = target.year - birth_date.year
    if (target.month, target.day) < (birth_date.month, birth_date.day):
        return years - 1
    return years


def should_show_corrected(
    period: GraphPeriod | str,
    birth_date: date,
    due_date: date | None,
    enable_premature_display: bool,
) -> bool:
    """Decide whether the corrected-age axis is shown.

    Requires premature display enabled, a due date more than three weeks
    after the birth date and a month-based period.
    """
    if not enable_premature_display or due_date is None:
        return False
    if GraphPeriod(period) is GraphPeriod.ALL:
        return False
    return (due_date - birth_date).days > PREMATURE_THRESHOLD_DAYS


def gestational_week_label(target: date, due_date: date) -> str | None:
    """Gestational week label ("34w") for a day before the due date.

    The due date counts as week 40. Only every fourth week from week 22 gets
    a label.
    """
    week = TERM_WEEK + (target - due_date).days // DAYS_PER_WEEK
    if week < MIN_GESTATIONAL_WEEK:
        return None
    if (week - MIN_GESTATIONAL_WEEK) % GESTATIONAL_WEEK_STEP != 0:
        return None
    return f"{week}w"


def thinning_step(total_slots: int) -> int:
    """Show every n-th label so that at most MAX_AXIS_LABELS remain."""
    return max(1, math.ceil(total_slots / MAX_AXIS_LABELS))


def _corrected_annotation(
    slot_date: date, due_date: date, show_actual: bool
) -> tuple[str | None, bool, bool]:
    corrected_month = calculate_corrected_month(slot_date, due_date)
    if corrected_month < 0:
        label = gestational_week_label(slot_date, due_date)
        return label, label is not None and show_actual, False
    if corrected_month == 0:
        return CORRECTED_ZERO_LABEL, show_actual, True
    return f"修{corrected_month}M", show_actual, False


def build_axis_labels(
    period: GraphPeriod | str,
    birth_date: date,
    due_date: date | None,
    enable_premature_display: bool,
) -> list[AxisLabelInfo]:
    """Build month-of-age axis labels for the "1y" and "3y" periods.

    Raises:
        ValueError: For the "all" period (use build_year_axis_labels)
    """
    period = GraphPeriod(period)
    if period is GraphPeriod.ALL:
        raise ValueError("Month axis labels are not defined for the 'all' period")

    max_month = PERIOD_MONTHS[period]
    step = thinning_step(max_month + 1)
    show_corrected = should_show_corrected(
        period, birth_date, due_date, enable_premature_display
    )

    labels = []
    for month in range(max_month + 1):
        show_actual = month % step == 0
        corrected_label = None
        show_corrected_label = False
        zero_line = False
        if show_corrected and due_date is not None:
            slot_date = birth_date + timedelta(days=month * DAYS_PER_SLOT_MONTH)
            corrected_label, show_corrected_label, zero_line = _corrected_annotation(
                slot_date, due_date, show_actual
            )
        labels.append(
            AxisLabelInfo(
                actual_label=f"{month}M",
                corrected_label=corrected_label,
                show_actual_label=show_actual,
                show_corrected_label=show_corrected_label,
                show_corrected_zero_line=zero_line,
            )
        )
    return labels


def build_year_axis_labels(max_year: int) -> list[AxisLabelInfo]:
    """Build year-of-age axis labels 0Y..max_year for the "all" period."""
    step = thinning_step(max_year + 1)
    return [
        AxisLabelInfo(
            actual_label=f"{year}Y",
            corrected_label=None,
            show_actual_label=year % step == 0,
            show_corrected_label=False,
            show_corrected_zero_line=False,
        )
        for year in range(max_year + 1)
    ]


def _accumulate(
    labels: list[AxisLabelInfo], counts: Mapping[int, _Counts]
) -> list[GraphBucket]:
    buckets = []
    running = 0
    for index, label in enumerate(labels):
        slot = counts.get(index, _Counts())
        running += slot.tried + slot.did
        buckets.append(
            GraphBucket(
                key=label.actual_label,
                tried_count=slot.tried,
                did_count=slot.did,
                cumulative=running,
                actual_label=label.actual_label,
                corrected_label=label.corrected_label,
                show_actual_label=label.show_actual_label,
                show_corrected_label=label.show_corrected_label,
                show_corrected_zero_line=label.show_corrected_zero_line,
            )
        )
    return buckets


def build_buckets(
    period: GraphPeriod | str,
    birth_date: date | str,
    due_date: date | str | None,
    enable_premature_display: bool,
    records: Iterable[GraphRecord],
) -> GraphResult:
    """Aggregate records into graph buckets with a running total.

    Args:
        period: "1y", "3y" or "all"
        birth_date: Birth date (date or YYYY-MM-DD)
        due_date: Due date, or None
        enable_premature_display: Allow the corrected-age axis
        records: Per-day tried/did counts

    Returns:
        GraphResult with one bucket and one axis label per slot

    Raises:
        InvalidDateFormat: If a date string is malformed
        ValueError: If the period is unknown
    """
    period = GraphPeriod(period)
    birth = parse_strict(birth_date)
    due = parse_strict(due_date) if due_date else None

    counts: dict[int, _Counts] = {}
    dropped = 0

    if period is GraphPeriod.ALL:
        for record in records:
            year = calculate_actual_year(record.date, birth)
            if year < 0:
                dropped += 1
                continue
            slot = counts.setdefault(year, _Counts())
            slot.tried += record.tried
            slot.did += record.did
        labels = build_year_axis_labels(max(counts, default=0))
    else:
        max_month = PERIOD_MONTHS[period]
        for record in records:
            month = calculate_actual_month(record.date, birth)
            if month < 0 or month > max_month:
                dropped += 1
                continue
            slot = counts.setdefault(month, _Counts())
            slot.tried += record.tried
            slot.did += record.did
        labels = build_axis_labels(period, birth, due, enable_premature_display)

    if dropped:
        logger.debug(
            "Graph %s: %d record(s) outside the period were not bucketed",
            period.value,
            dropped,
        )

    return GraphResult(buckets=_accumulate(labels, counts), labels=labels)


def _entry_type(entry: Any) -> str | None:
    if isinstance(entry, Mapping):
        return entry.get("type")
    return getattr(entry, "type", None)


def records_from_store(store: Mapping[str, Iterable[Any]]) -> list[GraphRecord]:
    """Count tried/did entries per day of a ``{day_key: [entry, ...]}`` mapping.

    Entries may be Achievement models or plain dicts with a ``type`` key.

    Raises:
        InvalidDateFormat: If a day key is not a valid YYYY-MM-DD date
    """
    records = []
    for key in sorted(store):
        tried = did = 0
        for entry in store[key]:
            entry_type = _entry_type(entry)
            if entry_type == "tried":
                tried += 1
            elif entry_type == "did":
                did += 1
        records.append(GraphRecord(date=parse_strict(key), tried=tried, did=did))
    return records

"""Chronological and corrected age of a single day.

Chronological age is measured from the birth date. Corrected age is measured
from the due date (or from the birth date when the baby was born after its
due date, so corrected age never runs ahead of chronological age).

The corrected figure is suppressed when:

- there is no due date,
- it equals the chronological figure (nothing to add), or
- the target day is past the configured horizon after the corrected base
  (``show_corrected_until_months``; None means no horizon).
"""

import logging
from datetime import date

from babycal.age import (
    AgeParts,
    calendar_diff,
    days_between,
    format_age,
)
from babycal.dates import add_months, parse_strict
from babycal.models import AgeInfo, AgeLabels, AgeSettings

logger = logging.getLogger(__name__)

# Limits at or above this value mean "no limit"
UNLIMITED_MONTHS = 999

MISSING_BIRTH_LABELS = AgeLabels(chronological="0d", suppressed=True)


def corrected_base(birth_date: date, due_date: date) -> date:
    """Day corrected age is measured from: the later of birth and due date."""
    return max(birth_date, due_date)


def corrected_limit_reached(
    base: date,
    target: date,
    limit_months: int | None,
) -> bool:
    """Check whether ``target`` is past the corrected-age display horizon.

    Args:
        base: Corrected base day
        target: Day being displayed
        limit_months: Horizon in calendar months after ``base``; None
            (or UNLIMITED_MONTHS and above) for no horizon

    Returns:
        True when ``target`` falls strictly after ``base + limit_months``
    """
    if limit_months is None or limit_months >= UNLIMITED_MONTHS:
        return False
    return target > add_months(base, limit_months)


def _target_day(target_day: date | str) -> date:
    return parse_strict(target_day)


def compute_age_labels(settings: AgeSettings, target_day: date | str) -> AgeLabels:
    """Compute the age labels shown for one day.

    Args:
        settings: Birth/due dates and display preferences
        target_day: Day to compute the age on (date or YYYY-MM-DD)

    Returns:
        AgeLabels; ``corrected`` is only present when not suppressed

    Raises:
        InvalidDateFormat: If ``target_day`` is a malformed string
    """
    target = _target_day(target_day)
    if settings.birth_date is None:
        return MISSING_BIRTH_LABELS

    fmt = settings.age_format
    chronological = format_age(calendar_diff(settings.birth_date, target), fmt)

    if settings.due_date is None:
        return AgeLabels(chronological=chronological, suppressed=True)

    base = corrected_base(settings.birth_date, settings.due_date)
    corrected = format_age(calendar_diff(base, target), fmt)

    suppressed = corrected == chronological or corrected_limit_reached(
        base, target, settings.show_corrected_until_months
    )
    if suppressed:
        return AgeLabels(chronological=chronological, suppressed=True)
    return AgeLabels(chronological=chronological, corrected=corrected, suppressed=False)


def compute_age_info(settings: AgeSettings, target_day: date | str) -> AgeInfo | None:
    """Compute the per-day detail view.

    Returns:
        AgeInfo with labels, age parts and days since birth, or None when
        no birth date is set yet
    """
    target = _target_day(target_day)
    if settings.birth_date is None:
        logger.debug("No birth date configured, no age info for %s", target)
        return None

    chronological = calendar_diff(settings.birth_date, target)
    corrected: AgeParts | None = None
    if settings.due_date is not None:
        base = corrected_base(settings.birth_date, settings.due_date)
        corrected = calendar_diff(base, target)

    return AgeInfo(
        labels=compute_age_labels(settings, target),
        chronological=chronological,
        corrected=corrected,
        days_since_birth=days_between(settings.birth_date, target),
    )

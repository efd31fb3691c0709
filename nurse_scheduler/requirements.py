"""
RequirementSet builder: expands a period and coverage rules into per-day,
per-shift staffing requirements.
"""

from datetime import date, timedelta
from typing import Iterable, List

from .models import RequiredCoverage, ShiftRequirement, ShiftType


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5  # Saturday, Sunday


def period_dates(start: date, end: date) -> List[date]:
    """Every calendar day from start to end, inclusive. Empty if end < start."""
    total_days = (end - start).days + 1
    return [start + timedelta(days=offset) for offset in range(max(0, total_days))]


def build_requirements(start: date, end: date,
                       coverage: RequiredCoverage) -> List[ShiftRequirement]:
    """
    Emit a DAY then a NIGHT requirement for each day in the period.
    Weekend days use the weekend thresholds.
    """
    requirements = []
    for day in period_dates(start, end):
        weekend = is_weekend(day)
        for shift_type in (ShiftType.DAY, ShiftType.NIGHT):
            requirements.append(ShiftRequirement(
                date=day,
                shift_type=shift_type,
                required_count=coverage.required_for(shift_type, weekend),
            ))
    return requirements


def total_required(requirements: Iterable[ShiftRequirement]) -> int:
    return sum(r.required_count for r in requirements)

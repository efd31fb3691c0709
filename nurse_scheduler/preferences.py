"""
Validation of preference submissions and rule sets.

These checks run before generation, when a nurse submits preferences or a
scheduler edits the rules. Errors block the submission; warnings are advice.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .exceptions import InvalidInputError
from .models import DEFAULT_FLEXIBILITY_SCORE, NursePreferences, PreferredShift, SchedulingRules
from .requirements import is_weekend, period_dates
from .validator import longest_consecutive_run

MIN_FLEXIBILITY = 1
MAX_FLEXIBILITY = 10

# Work days above the minimum below which a nurse is nudged to offer more
AVAILABILITY_HEADROOM = 2


class PreferenceType(str, Enum):
    WORK = "WORK"
    PTO = "PTO"
    NO_SCHEDULE = "NO_SCHEDULE"


@dataclass(frozen=True)
class DayPreference:
    """One calendar entry of a preference submission"""
    date: date
    type: PreferenceType
    shift_type: Optional[PreferredShift] = None


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _stretches(dates: Sequence[date]) -> List[int]:
    """Lengths of runs of consecutive dates in a sorted sequence."""
    runs = []
    current = 0
    previous = None
    for day in dates:
        if previous is not None and (day - previous).days == 1:
            current += 1
        else:
            if current:
                runs.append(current)
            current = 1
        previous = day
    if current:
        runs.append(current)
    return runs


def validate_nurse_preferences(preferences: Sequence[DayPreference], rules: SchedulingRules,
                               period_start: date, period_end: date) -> ValidationResult:
    """Check a nurse's submission against the period's rules."""
    errors: List[str] = []
    warnings: List[str] = []

    work_days = [p for p in preferences if p.type == PreferenceType.WORK]
    pto_days = [p for p in preferences if p.type == PreferenceType.PTO]
    no_schedule_days = [p for p in preferences if p.type == PreferenceType.NO_SCHEDULE]

    total_days = (period_end - period_start).days + 1

    if len(work_days) < rules.min_shifts_per_nurse:
        errors.append(f"You must be available for at least {rules.min_shifts_per_nurse} shifts. "
                      f"Currently selected: {len(work_days)}")

    if len(work_days) > rules.max_shifts_per_nurse:
        errors.append(f"You cannot work more than {rules.max_shifts_per_nurse} shifts. "
                      f"Currently selected: {len(work_days)}")

    if len(pto_days) > rules.max_pto_per_nurse:
        errors.append(f"Maximum {rules.max_pto_per_nurse} PTO days allowed. "
                      f"Currently selected: {len(pto_days)}")

    if len(no_schedule_days) > rules.max_no_schedule_per_nurse:
        errors.append(f"Maximum {rules.max_no_schedule_per_nurse} no-schedule days allowed. "
                      f"Currently selected: {len(no_schedule_days)}")

    total_time_off = len(pto_days) + len(no_schedule_days)
    if total_time_off > rules.max_total_time_off:
        errors.append(f"Maximum {rules.max_total_time_off} total days off allowed. "
                      f"Currently selected: {total_time_off}")

    if rules.blackout_dates:
        clashes = sorted(p.date for p in pto_days + no_schedule_days if p.date in rules.blackout_dates)
        if clashes:
            errors.append("Time off not allowed on blackout dates: " +
                          ", ".join(d.isoformat() for d in clashes))

    work_dates = sorted({p.date for p in work_days})
    if work_dates:
        if longest_consecutive_run(work_dates) > rules.max_consecutive_days:
            errors.append(f"Cannot work more than {rules.max_consecutive_days} consecutive days")

        if any(run < rules.min_consecutive_days for run in _stretches(work_dates)):
            warnings.append(f"Consider working at least {rules.min_consecutive_days} "
                            f"consecutive days when scheduled")

    # Two weekend days approximate one weekend
    weekend_count = math.ceil(sum(1 for p in work_days if is_weekend(p.date)) / 2)
    if weekend_count > rules.max_weekends_per_nurse:
        errors.append(f"Maximum {rules.max_weekends_per_nurse} weekends allowed. "
                      f"Currently selected: {weekend_count}")

    if len(work_days) < rules.min_shifts_per_nurse + AVAILABILITY_HEADROOM:
        warnings.append("Consider adding more available days for better schedule flexibility")

    unassigned = total_days - len(work_days) - len(pto_days) - len(no_schedule_days)
    if unassigned > total_days * 0.5:
        warnings.append(f"You have {unassigned} unassigned days. Consider marking more preferences.")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate_rules(rules: SchedulingRules) -> ValidationResult:
    """Consistency checks a scheduler sees when saving a rule set."""
    errors: List[str] = []
    warnings: List[str] = []

    if rules.min_shifts_per_nurse > rules.max_shifts_per_nurse:
        errors.append("Minimum shifts cannot be greater than maximum shifts")

    if rules.min_consecutive_days > rules.max_consecutive_days:
        errors.append("Minimum consecutive days cannot be greater than maximum consecutive days")

    if rules.max_total_time_off < max(rules.max_pto_per_nurse, rules.max_no_schedule_per_nurse):
        warnings.append("Total time off limit is lower than the individual PTO or no-schedule limit")

    if not 0 <= rules.seniority_bias_weight <= 1:
        errors.append("Seniority bias weight must be between 0 and 1")

    coverage = rules.required_coverage
    if min(coverage.day, coverage.night, coverage.weekend_day, coverage.weekend_night) < 0:
        errors.append("Required coverage cannot be negative")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def requirements_display(rules: SchedulingRules) -> List[str]:
    """Rule summary shown to nurses while they fill in preferences."""
    lines = [
        f"• Work {rules.min_shifts_per_nurse}-{rules.max_shifts_per_nurse} shifts",
        f"• Maximum {rules.max_consecutive_days} consecutive days",
        f"• Maximum {rules.max_pto_per_nurse} PTO days",
        f"• Maximum {rules.max_no_schedule_per_nurse} no-schedule days",
        f"• Maximum {rules.max_total_time_off} total days off",
    ]

    if rules.max_weekends_per_nurse > 0:
        lines.append(f"• Maximum {rules.max_weekends_per_nurse} weekends")

    if rules.blackout_dates:
        lines.append("• No time off on blackout dates")

    if rules.require_alternating_weekends:
        lines.append("• Must alternate weekends")

    return lines


def preferences_from_days(preferences: Sequence[DayPreference],
                          flexibility_score: float = DEFAULT_FLEXIBILITY_SCORE) -> NursePreferences:
    """
    Convert a calendar submission into the engine's preference bundle.

    WORK entries without a shift type count as ANY. Later entries for the
    same date replace earlier ones.
    """
    if not MIN_FLEXIBILITY <= flexibility_score <= MAX_FLEXIBILITY:
        raise InvalidInputError(
            f"Flexibility score must be between {MIN_FLEXIBILITY} and {MAX_FLEXIBILITY}"
        )

    latest: Dict[date, DayPreference] = {}
    for preference in preferences:
        latest[preference.date] = preference

    preferred_shifts = {
        day: p.shift_type or PreferredShift.ANY
        for day, p in latest.items() if p.type == PreferenceType.WORK
    }

    return NursePreferences(
        preferred_shifts=preferred_shifts,
        pto_dates=frozenset(d for d, p in latest.items() if p.type == PreferenceType.PTO),
        no_schedule_dates=frozenset(d for d, p in latest.items() if p.type == PreferenceType.NO_SCHEDULE),
        flexibility_score=flexibility_score,
    )


def unfilled_days(preferences: Sequence[DayPreference], period_start: date, period_end: date) -> List[date]:
    """Days of the period that carry no entry at all."""
    marked = {p.date for p in preferences}
    return [day for day in period_dates(period_start, period_end) if day not in marked]

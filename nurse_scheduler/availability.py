"""
Availability filtering for greedy construction.

Blocked dates are precomputed once per generation call into an Availability
value. Partial assignment state is an immutable ScheduleState that is threaded
through each greedy step rather than held on an engine instance.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

from .models import Assignment, Nurse, SchedulingRules, ShiftRequirement


@dataclass(frozen=True)
class Availability:
    """PTO and no-schedule dates per nurse id"""
    blocked: Mapping[str, FrozenSet[date]] = field(default_factory=dict)

    @classmethod
    def from_nurses(cls, nurses: Iterable[Nurse]) -> "Availability":
        blocked = {}
        for nurse in nurses:
            if nurse.preferences is None:
                blocked[nurse.id] = frozenset()
            else:
                blocked[nurse.id] = nurse.preferences.blocked_dates
        return cls(blocked=blocked)

    def blocked_dates(self, nurse_id: str) -> FrozenSet[date]:
        return self.blocked.get(nurse_id, frozenset())

    def is_blocked(self, nurse_id: str, day: date) -> bool:
        return day in self.blocked_dates(nurse_id)


@dataclass(frozen=True)
class ScheduleState:
    """Assignments accumulated so far, keyed by nurse id. Never mutated in place."""
    by_nurse: Mapping[str, Tuple[Assignment, ...]] = field(default_factory=dict)

    def assignments_for(self, nurse_id: str) -> Tuple[Assignment, ...]:
        return self.by_nurse.get(nurse_id, ())

    def count_for(self, nurse_id: str) -> int:
        return len(self.assignments_for(nurse_id))

    def dates_for(self, nurse_id: str) -> FrozenSet[date]:
        return frozenset(a.date for a in self.assignments_for(nurse_id))

    def with_assignment(self, assignment: Assignment) -> "ScheduleState":
        by_nurse = dict(self.by_nurse)
        by_nurse[assignment.nurse_id] = self.assignments_for(assignment.nurse_id) + (assignment,)
        return ScheduleState(by_nurse=by_nurse)

    def with_assignments(self, assignments: Iterable[Assignment]) -> "ScheduleState":
        by_nurse = dict(self.by_nurse)
        for assignment in assignments:
            by_nurse[assignment.nurse_id] = by_nurse.get(assignment.nurse_id, ()) + (assignment,)
        return ScheduleState(by_nurse=by_nurse)

    def all_assignments(self) -> List[Assignment]:
        return [a for assignments in self.by_nurse.values() for a in assignments]


def consecutive_run_length(worked_dates: FrozenSet[date], day: date) -> int:
    """Length of the working run that `day` would sit in, counting `day` itself."""
    run = 1

    check = day - timedelta(days=1)
    while check in worked_dates:
        run += 1
        check -= timedelta(days=1)

    check = day + timedelta(days=1)
    while check in worked_dates:
        run += 1
        check += timedelta(days=1)

    return run


def is_eligible(nurse: Nurse, requirement: ShiftRequirement, state: ScheduleState,
                rules: SchedulingRules, availability: Availability) -> bool:
    """Check whether one nurse can take one more shift for this requirement."""
    if not nurse.can_work(requirement.shift_type):
        return False

    if availability.is_blocked(nurse.id, requirement.date):
        return False

    worked = state.dates_for(nurse.id)
    if requirement.date in worked:
        return False

    if consecutive_run_length(worked, requirement.date) > rules.max_consecutive_days:
        return False

    if state.count_for(nurse.id) >= rules.shift_cap(nurse):
        return False

    return True


def eligible_nurses(requirement: ShiftRequirement, nurses: Iterable[Nurse],
                    state: ScheduleState, rules: SchedulingRules,
                    availability: Availability) -> List[Nurse]:
    """Nurses eligible for a requirement, in input order. Empty means likely infeasible."""
    return [
        nurse for nurse in nurses
        if is_eligible(nurse, requirement, state, rules, availability)
    ]


def group_by_nurse(assignments: Iterable[Assignment]) -> Dict[str, List[Assignment]]:
    grouped: Dict[str, List[Assignment]] = {}
    for assignment in assignments:
        grouped.setdefault(assignment.nurse_id, []).append(assignment)
    return grouped

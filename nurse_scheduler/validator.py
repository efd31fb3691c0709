"""
Hard-constraint validation for complete candidate schedules.

A schedule that fails here is never returned or explored. Shortfalls that do
not disqualify a schedule (understaffing, under-minimum shifts) are reported by
the assembler instead.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .availability import Availability, group_by_nurse
from .models import Assignment, Nurse, SchedulingRules


def longest_consecutive_run(dates: Iterable[date]) -> int:
    """Longest run of consecutive calendar days in a collection of dates."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    longest = 1
    current = 1
    for previous, day in zip(ordered, ordered[1:]):
        if (day - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


class ConstraintValidator:
    """
    Pure hard-constraint check over a full assignment set.

    Per nurse:
    - Assignment count within the shift cap
    - Every consecutive working run within max_consecutive_days
    - No assignment on a PTO or no-schedule date
    - At most one assignment per date, only on shift types the nurse works
    """

    def __init__(self, nurses: Sequence[Nurse], rules: SchedulingRules,
                 availability: Optional[Availability] = None):
        self.nurses = {n.id: n for n in nurses}
        self.rules = rules
        self.availability = availability or Availability.from_nurses(nurses)

    def is_valid(self, assignments: Sequence[Assignment]) -> bool:
        """Fast pass/fail, stops at the first violation."""
        for nurse_id, nurse_assignments in group_by_nurse(assignments).items():
            if self._first_violation(nurse_id, nurse_assignments) is not None:
                return False
        return True

    def validate(self, assignments: Sequence[Assignment]) -> Tuple[bool, List[str]]:
        """
        Validate every nurse and collect all hard violations.
        Returns (is_valid, violations).
        """
        violations = []
        for nurse_id, nurse_assignments in group_by_nurse(assignments).items():
            violations.extend(self._nurse_violations(nurse_id, nurse_assignments))
        return len(violations) == 0, violations

    def _first_violation(self, nurse_id: str,
                         assignments: List[Assignment]) -> Optional[str]:
        return next(self._iter_violations(nurse_id, assignments), None)

    def _nurse_violations(self, nurse_id: str, assignments: List[Assignment]) -> List[str]:
        return list(self._iter_violations(nurse_id, assignments))

    def _iter_violations(self, nurse_id: str, assignments: List[Assignment]):
        nurse = self.nurses.get(nurse_id)
        if nurse is None:
            yield f"Unknown nurse {nurse_id} in schedule"
            return

        cap = self.rules.shift_cap(nurse)
        if len(assignments) > cap:
            yield (f"Nurse {nurse.display_name} assigned {len(assignments)} shifts "
                   f"(max: {cap})")

        seen = set()
        for assignment in assignments:
            if assignment.date in seen:
                yield (f"Nurse {nurse.display_name} has more than one shift on "
                       f"{assignment.date.isoformat()}")
            seen.add(assignment.date)

        for assignment in assignments:
            if not nurse.can_work(assignment.shift_type):
                yield (f"Nurse {nurse.display_name} cannot work {assignment.shift_type.value} "
                       f"shifts ({assignment.date.isoformat()})")

        run = longest_consecutive_run(seen)
        if run > self.rules.max_consecutive_days:
            yield (f"Nurse {nurse.display_name} has {run} consecutive working days "
                   f"(max: {self.rules.max_consecutive_days})")

        blocked = self.availability.blocked_dates(nurse_id)
        for assignment in assignments:
            if assignment.date in blocked:
                yield (f"Nurse {nurse.display_name} is unavailable on "
                       f"{assignment.date.isoformat()} (PTO/no-schedule)")

"""
Greedy construction of an initial feasible schedule.

Requirements are filled hardest-first (fewest eligible nurses) and each slot
takes the top-ranked eligible nurses. If any requirement cannot be staffed the
attempt has no feasible seed and the generator returns None.
"""

from typing import List, Optional, Sequence, Tuple

from .availability import Availability, ScheduleState, eligible_nurses
from .logger import get_logger
from .models import Assignment, Nurse, SchedulingRules, ShiftRequirement, ShiftType
from .scorer import preference_matches

logger = get_logger(__name__)

PREFERENCE_BONUS = 100
SENIORITY_FACTOR = 50
FAIRNESS_BASELINE = 10
FAIRNESS_FACTOR = 20
FLEXIBILITY_FACTOR = 10


def priority_score(nurse: Nurse, requirement: ShiftRequirement, state: ScheduleState,
                   rules: SchedulingRules) -> float:
    """
    Additive priority of a nurse for a requirement (higher = assigned first).

    - +100 if the nurse asked for this shift (or ANY) on this date
    - + seniority * bias weight * 50, only with seniority bias enabled
    - + (10 - shifts already assigned) * 20, favouring less-loaded nurses
    - + flexibility * 10
    """
    score = 0.0

    if preference_matches(nurse.preferred_shift_for(requirement.date), requirement.shift_type):
        score += PREFERENCE_BONUS

    if rules.enable_seniority_bias:
        score += nurse.seniority_level * rules.seniority_bias_weight * SENIORITY_FACTOR

    score += (FAIRNESS_BASELINE - state.count_for(nurse.id)) * FAIRNESS_FACTOR
    score += nurse.flexibility_score * FLEXIBILITY_FACTOR

    return score


def prioritize_nurses(nurses: Sequence[Nurse], requirement: ShiftRequirement,
                      state: ScheduleState, rules: SchedulingRules) -> List[Nurse]:
    """
    Order eligible nurses by descending priority.

    Ties are broken by nurse id (ascending), so the ranking never depends on
    the order nurses were supplied in.
    """
    return sorted(
        nurses,
        key=lambda nurse: (-priority_score(nurse, requirement, state, rules), nurse.id)
    )


class ScheduleGenerator:
    """
    Hardest-first greedy assigner.

    The requirement ordering is computed once against the empty state; each
    step threads a new ScheduleState forward so no engine-level map is mutated.
    """

    def __init__(self, nurses: Sequence[Nurse], requirements: Sequence[ShiftRequirement],
                 rules: SchedulingRules, availability: Optional[Availability] = None):
        self.nurses = list(nurses)
        self.requirements = list(requirements)
        self.rules = rules
        self.availability = availability or Availability.from_nurses(self.nurses)

    def order_requirements(self) -> List[ShiftRequirement]:
        """Requirements sorted by eligible-nurse count, fewest first (stable)."""
        empty = ScheduleState()

        def difficulty(requirement: ShiftRequirement) -> int:
            return len(eligible_nurses(requirement, self.nurses, empty,
                                       self.rules, self.availability))

        return sorted(self.requirements, key=difficulty)

    def assign_requirement(self, requirement: ShiftRequirement,
                           state: ScheduleState) -> Optional[Tuple[List[Assignment], ScheduleState]]:
        """Staff one requirement. Returns None if too few nurses are eligible."""
        available = eligible_nurses(requirement, self.nurses, state,
                                    self.rules, self.availability)

        if len(available) < requirement.required_count:
            logger.debug(
                "No feasible seed: %s %s needs %d nurses, %d eligible",
                requirement.shift_type.value, requirement.date.isoformat(),
                requirement.required_count, len(available)
            )
            return None

        ranked = prioritize_nurses(available, requirement, state, self.rules)
        assignments = [
            Assignment(nurse_id=nurse.id, date=requirement.date, shift_type=requirement.shift_type)
            for nurse in ranked[:requirement.required_count]
        ]
        return assignments, state.with_assignments(assignments)

    def generate(self) -> Optional[List[Assignment]]:
        """
        Build one feasible initial solution.
        Returns the assignment list, or None when no feasible seed exists.
        """
        state = ScheduleState()
        assignments: List[Assignment] = []

        for requirement in self.order_requirements():
            if requirement.required_count <= 0:
                continue

            result = self.assign_requirement(requirement, state)
            if result is None:
                return None

            new_assignments, state = result
            assignments.extend(new_assignments)

        logger.debug("Greedy seed built with %d assignments", len(assignments))
        return assignments


def shift_capability_summary(nurses: Sequence[Nurse]) -> dict:
    """Number of nurses able to work each shift type."""
    return {
        shift_type.value: sum(1 for n in nurses if n.can_work(shift_type))
        for shift_type in ShiftType
    }

"""
Multi-objective scoring for candidate schedules.

Four sub-scores, each normalized to [0, 1] (higher = better):
- Coverage: share of required slots that are filled
- Preference: share of preference-bearing assignments that match the preference
- Fairness: 1 - variance/mean^2 of per-nurse assignment counts
- Seniority: assigned seniority relative to the most senior capable nurse

Scoring is side-effect free; the same assignments always give the same scores.
"""

from collections import Counter
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .exceptions import InvalidInputError
from .models import (
    STRATEGIES, Assignment, Nurse, PreferredShift, SchedulingRules,
    ScoreBreakdown, ShiftRequirement, ShiftType,
)

# Weights in order coverage / preference / fairness / seniority
WEIGHT_PROFILES: Dict[str, Dict[str, float]] = {
    'balanced': {'coverage': 0.4, 'preference': 0.3, 'fairness': 0.2, 'seniority': 0.1},
    'coverage': {'coverage': 0.7, 'preference': 0.1, 'fairness': 0.1, 'seniority': 0.1},
    'preferences': {'coverage': 0.2, 'preference': 0.6, 'fairness': 0.1, 'seniority': 0.1},
    'fairness': {'coverage': 0.2, 'preference': 0.2, 'fairness': 0.5, 'seniority': 0.1},
}

# Where the seniority weight goes when seniority bias is disabled
SENIORITY_REDISTRIBUTION = {'coverage': 0.4, 'preference': 0.3, 'fairness': 0.3}

# Per-assignment satisfaction reported alongside exported assignments
EXACT_MATCH_SATISFACTION = 1.0
ANY_MATCH_SATISFACTION = 0.8
MISMATCH_SATISFACTION = 0.2
NEUTRAL_SATISFACTION = 0.5


def resolve_weights(strategy: str, seniority_enabled: bool,
                    profiles: Optional[Mapping[str, Mapping[str, float]]] = None) -> Dict[str, float]:
    """Weight profile for a strategy, with the seniority share redistributed if unused."""
    profiles = profiles or WEIGHT_PROFILES
    if strategy not in profiles:
        raise InvalidInputError(
            f"Unknown optimization strategy '{strategy}'. "
            f"Expected one of: {', '.join(sorted(profiles))}"
        )

    weights = dict(profiles[strategy])
    if not seniority_enabled:
        seniority_weight = weights.get('seniority', 0.0)
        weights['seniority'] = 0.0
        for key, share in SENIORITY_REDISTRIBUTION.items():
            weights[key] = weights.get(key, 0.0) + seniority_weight * share
    return weights


def preference_matches(preference: Optional[PreferredShift], shift_type: ShiftType) -> bool:
    return preference is not None and (
        preference == PreferredShift.ANY or preference.value == shift_type.value
    )


class ScheduleScorer:
    """
    Scores assignment sets against one period's requirements.

    Lookups (requirement slots, nurses, max seniority per shift type) are built
    once so the local search can score thousands of neighbours cheaply.
    """

    def __init__(self, nurses: Sequence[Nurse], requirements: Sequence[ShiftRequirement],
                 rules: SchedulingRules,
                 profiles: Optional[Mapping[str, Mapping[str, float]]] = None):
        self.nurses = {n.id: n for n in nurses}
        self.requirements = list(requirements)
        self.rules = rules
        self.profiles = profiles or WEIGHT_PROFILES
        self.total_required = sum(r.required_count for r in self.requirements)

        self.max_seniority: Dict[ShiftType, int] = {}
        for shift_type in ShiftType:
            levels = [n.seniority_level for n in nurses if n.can_work(shift_type)]
            self.max_seniority[shift_type] = max(levels) if levels else 0

    def score(self, assignments: Sequence[Assignment], strategy: str = 'balanced') -> ScoreBreakdown:
        """Compute all four sub-scores and the strategy-weighted optimization score."""
        weights = resolve_weights(strategy, self.rules.enable_seniority_bias, self.profiles)

        coverage = self.coverage_score(assignments)
        preference = self.preference_score(assignments)
        fairness = self.fairness_score(assignments)
        seniority = self.seniority_score(assignments)

        optimization_score = (
            coverage * weights['coverage'] +
            preference * weights['preference'] +
            fairness * weights['fairness'] +
            seniority * weights['seniority']
        )

        return ScoreBreakdown(
            coverage=coverage,
            preference=preference,
            fairness=fairness,
            seniority=seniority,
            optimization_score=optimization_score,
        )

    def optimization_score(self, assignments: Sequence[Assignment], strategy: str = 'balanced') -> float:
        return self.score(assignments, strategy).optimization_score

    def filled_counts(self, assignments: Iterable[Assignment]) -> Counter:
        """Number of nurses assigned per (date, shift type)."""
        return Counter((a.date, a.shift_type) for a in assignments)

    def coverage_score(self, assignments: Sequence[Assignment]) -> float:
        """Filled required slots / required slots. Over-filling never counts extra."""
        if self.total_required <= 0:
            return 1.0

        filled = self.filled_counts(assignments)
        total_filled = 0
        for requirement in self.requirements:
            slot = (requirement.date, requirement.shift_type)
            total_filled += min(filled.get(slot, 0), requirement.required_count)

        return total_filled / self.total_required

    def preference_score(self, assignments: Sequence[Assignment]) -> float:
        """
        Matching assignments / assignments with a stated preference for that date.
        Assignments with no stated preference are neutral.
        """
        total_preferences = 0
        satisfied = 0

        for assignment in assignments:
            nurse = self.nurses.get(assignment.nurse_id)
            if nurse is None:
                continue
            preference = nurse.preferred_shift_for(assignment.date)
            if preference is None:
                continue
            total_preferences += 1
            if preference_matches(preference, assignment.shift_type):
                satisfied += 1

        return satisfied / total_preferences if total_preferences > 0 else 1.0

    def fairness_score(self, assignments: Sequence[Assignment]) -> float:
        """1 - (variance / mean^2) of per-nurse workloads, floored at 0."""
        workloads = Counter(a.nurse_id for a in assignments)
        if not workloads:
            return 1.0

        values = list(workloads.values())
        mean = sum(values) / len(values)
        variance = sum((v - mean) ** 2 for v in values) / len(values)

        return max(0.0, 1 - (variance / (mean * mean)))

    def seniority_score(self, assignments: Sequence[Assignment]) -> float:
        """Assigned seniority / best achievable seniority. 1.0 when bias is disabled."""
        if not self.rules.enable_seniority_bias:
            return 1.0

        total_seniority = 0
        max_possible = 0
        for assignment in assignments:
            nurse = self.nurses.get(assignment.nurse_id)
            if nurse is None:
                continue
            total_seniority += nurse.seniority_level
            max_possible += self.max_seniority.get(assignment.shift_type, 0)

        return total_seniority / max_possible if max_possible > 0 else 1.0

    def assignment_satisfaction(self, assignment: Assignment) -> float:
        """Satisfaction of a single assignment against the nurse's stated preference."""
        nurse = self.nurses.get(assignment.nurse_id)
        preference = nurse.preferred_shift_for(assignment.date) if nurse else None
        if preference is None:
            return NEUTRAL_SATISFACTION
        if preference.value == assignment.shift_type.value:
            return EXACT_MATCH_SATISFACTION
        if preference == PreferredShift.ANY:
            return ANY_MATCH_SATISFACTION
        return MISMATCH_SATISFACTION

    def understaffed(self, assignments: Sequence[Assignment]) -> Tuple[Tuple[ShiftRequirement, int], ...]:
        """Requirements whose filled count falls short, with the filled count."""
        filled = self.filled_counts(assignments)
        shortfalls = []
        for requirement in self.requirements:
            count = filled.get((requirement.date, requirement.shift_type), 0)
            if count < requirement.required_count:
                shortfalls.append((requirement, count))
        return tuple(shortfalls)


def validate_strategy(strategy: str) -> str:
    if strategy not in STRATEGIES:
        raise InvalidInputError(
            f"Unknown optimization strategy '{strategy}'. "
            f"Expected one of: {', '.join(STRATEGIES)}"
        )
    return strategy

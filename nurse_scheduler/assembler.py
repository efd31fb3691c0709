"""
Packages a final assignment set into a GeneratedSchedule.

Soft violations (understaffing, nurses below the minimum shift count) are
advisory data for a human reviewer; they never block a schedule. Hard
constraints are the validator's job and are already satisfied here.
"""

import random
import uuid
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from .models import Assignment, GeneratedSchedule, Nurse, SchedulingRules, ScheduleStatistics
from .scorer import ScheduleScorer, preference_matches

DEFAULT_MESSAGES = {
    'understaffed': "Understaffed {shift_type} shift on {date}: {assigned}/{required} nurses assigned",
    'below_min_shifts': "Nurse {nurse} assigned only {assigned} shifts (min: {minimum})",
}


class ScheduleAssembler:
    """
    Builds the output record for the best solution of an attempt.

    Sub-scores are recomputed from scratch, so assembling the same
    assignments twice always gives identical results.
    """

    def __init__(self, nurses: Sequence[Nurse], rules: SchedulingRules, scorer: ScheduleScorer):
        self.nurses = list(nurses)
        self.rules = rules
        self.scorer = scorer

    def assemble(self, assignments: Sequence[Assignment], strategy: str = 'balanced',
                 rng: Optional[random.Random] = None,
                 metadata: Optional[Dict[str, Any]] = None) -> GeneratedSchedule:
        """Score, summarize and report on a final assignment set."""
        assignments = list(assignments)
        scores = self.scorer.score(assignments, strategy)

        return GeneratedSchedule(
            id=self._schedule_id(rng),
            assignments=assignments,
            optimization_score=scores.optimization_score,
            coverage_score=scores.coverage,
            preference_score=scores.preference,
            fairness_score=scores.fairness,
            seniority_score=scores.seniority,
            violations=self.find_violations(assignments),
            statistics=self.build_statistics(assignments, scores.coverage),
            assignment_scores=[self.scorer.assignment_satisfaction(a) for a in assignments],
            metadata=dict(metadata or {}),
        )

    def build_statistics(self, assignments: Sequence[Assignment],
                         coverage_score: float) -> ScheduleStatistics:
        """Per-nurse workloads and preference satisfaction, plus coverage totals."""
        workloads = Counter(a.nurse_id for a in assignments)

        satisfied = Counter()
        nurses_with_preferences = set()
        for assignment in assignments:
            nurse = self.scorer.nurses.get(assignment.nurse_id)
            if nurse is None or nurse.preferences is None:
                continue
            nurses_with_preferences.add(nurse.id)
            preference = nurse.preferred_shift_for(assignment.date)
            if preference_matches(preference, assignment.shift_type):
                satisfied[nurse.id] += 1

        preference_satisfaction = {
            nurse_id: satisfied[nurse_id] / workloads[nurse_id]
            for nurse_id in nurses_with_preferences
        }

        filled = self.scorer.filled_counts(assignments)
        total_filled = sum(
            min(filled.get((r.date, r.shift_type), 0), r.required_count)
            for r in self.scorer.requirements
        )

        return ScheduleStatistics(
            total_assignments=len(assignments),
            nurse_workloads=dict(workloads),
            coverage_metrics={
                'total_required': self.scorer.total_required,
                'total_filled': total_filled,
                'coverage_percentage': coverage_score,
            },
            preference_satisfaction=preference_satisfaction,
        )

    def find_violations(self, assignments: Sequence[Assignment]) -> List[str]:
        """Human-readable soft violations remaining in the schedule."""
        violations = []

        for requirement, assigned in self.scorer.understaffed(assignments):
            violations.append(self._message(
                'understaffed',
                shift_type=requirement.shift_type.value,
                date=requirement.date.isoformat(),
                assigned=assigned,
                required=requirement.required_count,
            ))

        workloads = Counter(a.nurse_id for a in assignments)
        for nurse in self.nurses:
            assigned = workloads.get(nurse.id, 0)
            if assigned < self.rules.min_shifts_per_nurse:
                violations.append(self._message(
                    'below_min_shifts',
                    nurse=nurse.display_name,
                    assigned=assigned,
                    minimum=self.rules.min_shifts_per_nurse,
                ))

        return violations

    def _message(self, key: str, **values) -> str:
        template = self.rules.custom_messages.get(key, DEFAULT_MESSAGES[key])
        try:
            return template.format(**values)
        except (KeyError, IndexError, ValueError):
            # Malformed custom template: fall back to the built-in wording
            return DEFAULT_MESSAGES[key].format(**values)

    @staticmethod
    def _schedule_id(rng: Optional[random.Random]) -> str:
        if rng is None:
            return f"schedule-{uuid.uuid4()}"
        return f"schedule-{uuid.UUID(int=rng.getrandbits(128), version=4)}"

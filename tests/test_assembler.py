"""
Tests for the ScheduleAssembler class.
"""

import random
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nurse_scheduler.assembler import ScheduleAssembler
from nurse_scheduler.models import Assignment, PreferredShift, ShiftType
from nurse_scheduler.requirements import build_requirements
from nurse_scheduler.scorer import ScheduleScorer
from tests.fixtures import day, day_only_rules, make_nurse, make_preferences


class TestScheduleAssembler(unittest.TestCase):
    """Test cases for ScheduleAssembler."""

    def setUp(self):
        """Two days, two DAY nurses needed per day, three nurses on the roster."""
        self.rules = day_only_rules(per_day=2, min_shifts_per_nurse=2)
        self.nurses = [
            make_nurse("N1", name="Alice",
                       preferences=make_preferences({day(0): PreferredShift.DAY,
                                                     day(1): PreferredShift.NIGHT})),
            make_nurse("N2", name="Bob"),
            make_nurse("N3", name="Carol"),
        ]
        requirements = build_requirements(day(0), day(1), self.rules.required_coverage)
        self.scorer = ScheduleScorer(self.nurses, requirements, self.rules)
        self.assembler = ScheduleAssembler(self.nurses, self.rules, self.scorer)
        self.assignments = [
            Assignment("N1", day(0), ShiftType.DAY),
            Assignment("N2", day(0), ShiftType.DAY),
            Assignment("N1", day(1), ShiftType.DAY),
        ]

    def test_assemble_scores(self):
        schedule = self.assembler.assemble(self.assignments, 'balanced', rng=random.Random(1))

        self.assertEqual(schedule.coverage_score, 0.75)
        self.assertEqual(schedule.preference_score, 0.5)
        self.assertEqual(schedule.seniority_score, 1.0)
        self.assertEqual(schedule.assignments, self.assignments)
        self.assertEqual(schedule.scores, self.scorer.score(self.assignments, 'balanced'))

    def test_rescoring_is_identical(self):
        """Assembling the same assignments twice gives identical sub-scores."""
        first = self.assembler.assemble(self.assignments, 'coverage')
        second = self.assembler.assemble(first.assignments, 'coverage')
        self.assertEqual(first.scores, second.scores)

    def test_uses_requested_strategy(self):
        balanced = self.assembler.assemble(self.assignments, 'balanced')
        coverage = self.assembler.assemble(self.assignments, 'coverage')
        self.assertNotAlmostEqual(balanced.optimization_score, coverage.optimization_score)

    def test_understaffed_violation(self):
        schedule = self.assembler.assemble(self.assignments)
        self.assertIn(f"Understaffed DAY shift on {day(1).isoformat()}: 1/2 nurses assigned",
                      schedule.violations)

    def test_below_minimum_includes_unassigned_nurses(self):
        violations = self.assembler.find_violations(self.assignments)

        self.assertIn("Nurse Bob assigned only 1 shifts (min: 2)", violations)
        self.assertIn("Nurse Carol assigned only 0 shifts (min: 2)", violations)
        self.assertFalse(any("Alice" in v for v in violations))

    def test_custom_messages(self):
        rules = day_only_rules(per_day=2, min_shifts_per_nurse=2, custom_messages={
            'below_min_shifts': "{nurse} needs {minimum} shifts, has {assigned}",
            'understaffed': "Short on {date} {shift_type} {missing}",
        })
        assembler = ScheduleAssembler(self.nurses, rules, self.scorer)
        violations = assembler.find_violations(self.assignments)

        self.assertIn("Carol needs 2 shifts, has 0", violations)
        # Unknown placeholder falls back to the built-in wording
        self.assertIn(f"Understaffed DAY shift on {day(1).isoformat()}: 1/2 nurses assigned", violations)

    def test_statistics(self):
        schedule = self.assembler.assemble(self.assignments)
        stats = schedule.statistics

        self.assertEqual(stats.total_assignments, 3)
        self.assertEqual(stats.nurse_workloads, {"N1": 2, "N2": 1})
        self.assertEqual(stats.coverage_metrics['total_required'], 4)
        self.assertEqual(stats.coverage_metrics['total_filled'], 3)
        self.assertEqual(stats.coverage_metrics['coverage_percentage'], 0.75)
        # Only nurses with submitted preferences are reported
        self.assertEqual(stats.preference_satisfaction, {"N1": 0.5})

    def test_schedule_id_reproducible_from_rng(self):
        first = self.assembler.assemble(self.assignments, rng=random.Random(5))
        second = self.assembler.assemble(self.assignments, rng=random.Random(5))
        other = self.assembler.assemble(self.assignments, rng=random.Random(6))

        self.assertEqual(first.id, second.id)
        self.assertNotEqual(first.id, other.id)
        self.assertTrue(first.id.startswith("schedule-"))

    def test_to_dict(self):
        schedule = self.assembler.assemble(self.assignments, metadata={'attempt': 0})
        data = schedule.to_dict()

        self.assertEqual(data['assignments'][0], {
            'nurse_id': 'N1',
            'date': day(0).isoformat(),
            'shift_type': 'DAY',
            'preference_satisfaction_score': 1.0,
        })
        self.assertEqual(data['assignments'][2]['preference_satisfaction_score'], 0.2)
        self.assertEqual(data['assignments'][1]['preference_satisfaction_score'], 0.5)
        self.assertEqual(data['metadata'], {'attempt': 0})
        self.assertEqual(data['statistics']['nurse_workloads'], {"N1": 2, "N2": 1})


if __name__ == '__main__':
    unittest.main()

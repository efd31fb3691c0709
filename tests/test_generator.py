"""
Tests for the nurse prioritizer and the greedy ScheduleGenerator.
"""

import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nurse_scheduler.availability import ScheduleState
from nurse_scheduler.generator import (
    ScheduleGenerator, prioritize_nurses, priority_score, shift_capability_summary,
)
from nurse_scheduler.models import (
    Assignment, PreferredShift, SchedulingRules, ShiftRequirement, ShiftType,
)
from nurse_scheduler.requirements import build_requirements
from nurse_scheduler.validator import ConstraintValidator
from tests.fixtures import (
    PERIOD_END, PERIOD_START, SAMPLE_NURSES, SAMPLE_RULES, day, day_only_rules,
    make_nurse, make_preferences,
)


class TestPriorityScore(unittest.TestCase):
    """Test cases for the additive priority score."""

    def setUp(self):
        self.requirement = ShiftRequirement(day(0), ShiftType.DAY, 1)
        self.rules = SchedulingRules()

    def test_base_score(self):
        """No preference, no bias: fairness baseline plus default flexibility."""
        nurse = make_nurse("N1")
        self.assertEqual(priority_score(nurse, self.requirement, ScheduleState(), self.rules),
                         10 * 20 + 5 * 10)

    def test_preference_bonus(self):
        exact = make_nurse("N1", preferences=make_preferences({day(0): PreferredShift.DAY}))
        any_shift = make_nurse("N2", preferences=make_preferences({day(0): PreferredShift.ANY}))
        other = make_nurse("N3", preferences=make_preferences({day(0): PreferredShift.NIGHT}))

        state = ScheduleState()
        self.assertEqual(priority_score(exact, self.requirement, state, self.rules), 350)
        self.assertEqual(priority_score(any_shift, self.requirement, state, self.rules), 350)
        self.assertEqual(priority_score(other, self.requirement, state, self.rules), 250)

    def test_seniority_only_with_bias(self):
        nurse = make_nurse("N1", seniority=4)
        biased = SchedulingRules(enable_seniority_bias=True, seniority_bias_weight=0.5)

        self.assertEqual(priority_score(nurse, self.requirement, ScheduleState(), self.rules), 250)
        self.assertEqual(priority_score(nurse, self.requirement, ScheduleState(), biased),
                         250 + 4 * 0.5 * 50)

    def test_load_lowers_priority(self):
        nurse = make_nurse("N1")
        state = ScheduleState().with_assignments([
            Assignment("N1", day(3), ShiftType.DAY),
            Assignment("N1", day(4), ShiftType.DAY),
        ])
        self.assertEqual(priority_score(nurse, self.requirement, state, self.rules), 250 - 2 * 20)


class TestPrioritizeNurses(unittest.TestCase):

    def test_descending_order(self):
        requirement = ShiftRequirement(day(0), ShiftType.DAY, 1)
        low = make_nurse("A", preferences=make_preferences(flexibility=1))
        high = make_nurse("B", preferences=make_preferences(flexibility=9))
        ranked = prioritize_nurses([low, high], requirement, ScheduleState(), SchedulingRules())
        self.assertEqual([n.id for n in ranked], ["B", "A"])

    def test_ties_broken_by_id(self):
        """Equal scores rank by nurse id regardless of input order."""
        requirement = ShiftRequirement(day(0), ShiftType.DAY, 1)
        nurses = [make_nurse("C"), make_nurse("A"), make_nurse("B")]
        rules = SchedulingRules()

        forward = prioritize_nurses(nurses, requirement, ScheduleState(), rules)
        backward = prioritize_nurses(list(reversed(nurses)), requirement, ScheduleState(), rules)

        self.assertEqual([n.id for n in forward], ["A", "B", "C"])
        self.assertEqual([n.id for n in backward], ["A", "B", "C"])


class TestScheduleGenerator(unittest.TestCase):
    """Test cases for the greedy initial assigner."""

    def test_two_day_example(self):
        """Two DAY nurses, one needed per day for two days: two assignments."""
        rules = day_only_rules(per_day=1)
        nurses = [make_nurse("N1", shift_types=[ShiftType.DAY]),
                  make_nurse("N2", shift_types=[ShiftType.DAY])]
        requirements = build_requirements(day(0), day(1), rules.required_coverage)

        assignments = ScheduleGenerator(nurses, requirements, rules).generate()

        self.assertEqual(len(assignments), 2)
        self.assertEqual({a.date for a in assignments}, {day(0), day(1)})
        # Load balancing spreads the two shifts over both nurses
        self.assertEqual({a.nurse_id for a in assignments}, {"N1", "N2"})

    def test_infeasible_returns_none(self):
        rules = day_only_rules(per_day=2)
        nurses = [make_nurse("N1")]
        requirements = build_requirements(day(0), day(1), rules.required_coverage)

        self.assertIsNone(ScheduleGenerator(nurses, requirements, rules).generate())

    def test_no_nurses_returns_none(self):
        rules = day_only_rules(per_day=1)
        requirements = build_requirements(day(0), day(0), rules.required_coverage)
        self.assertIsNone(ScheduleGenerator([], requirements, rules).generate())

    def test_zero_requirements_skipped(self):
        rules = day_only_rules(per_day=0)
        requirements = build_requirements(day(0), day(2), rules.required_coverage)
        self.assertEqual(ScheduleGenerator([make_nurse("N1")], requirements, rules).generate(), [])

    def test_order_requirements_hardest_first(self):
        """Requirements with fewer eligible nurses come first."""
        rules = day_only_rules(per_day=1)
        nurses = [make_nurse("N1", preferences=make_preferences(pto=[day(1)])), make_nurse("N2")]
        requirements = build_requirements(day(0), day(2), rules.required_coverage)

        ordered = ScheduleGenerator(nurses, requirements, rules).order_requirements()

        self.assertEqual(ordered[0].date, day(1))
        self.assertEqual(ordered[0].shift_type, ShiftType.DAY)

    def test_sample_roster_is_valid(self):
        """Greedy output on the sample roster satisfies every hard constraint."""
        requirements = build_requirements(PERIOD_START, PERIOD_END, SAMPLE_RULES.required_coverage)
        assignments = ScheduleGenerator(SAMPLE_NURSES, requirements, SAMPLE_RULES).generate()

        self.assertIsNotNone(assignments)
        is_valid, violations = ConstraintValidator(SAMPLE_NURSES, SAMPLE_RULES).validate(assignments)
        self.assertTrue(is_valid, violations)
        self.assertEqual(len(assignments), sum(r.required_count for r in requirements))

        pairs = [(a.nurse_id, a.date) for a in assignments]
        self.assertEqual(len(pairs), len(set(pairs)))

    def test_assign_requirement_threads_state(self):
        rules = day_only_rules(per_day=2)
        nurses = [make_nurse("A"), make_nurse("B"), make_nurse("C")]
        requirement = ShiftRequirement(day(0), ShiftType.DAY, 2)
        generator = ScheduleGenerator(nurses, [requirement], rules)

        empty = ScheduleState()
        assignments, state = generator.assign_requirement(requirement, empty)

        self.assertEqual([a.nurse_id for a in assignments], ["A", "B"])
        self.assertEqual(empty.count_for("A"), 0)
        self.assertEqual(state.count_for("A"), 1)


class TestCapabilitySummary(unittest.TestCase):

    def test_counts(self):
        summary = shift_capability_summary(SAMPLE_NURSES)
        self.assertEqual(summary, {'DAY': 9, 'NIGHT': 8})


if __name__ == '__main__':
    unittest.main()

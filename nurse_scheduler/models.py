"""
Core data model for the nurse shift scheduler.

Nurses, rules and requirements are built once per generation call and never
mutated. Assignments are small immutable records so candidate schedules can be
copied and swapped freely during local search.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class ShiftType(str, Enum):
    """Shift types a nurse can be rostered on"""
    DAY = "DAY"
    NIGHT = "NIGHT"


class PreferredShift(str, Enum):
    """Shift a nurse asked for on a given date"""
    DAY = "DAY"
    NIGHT = "NIGHT"
    ANY = "ANY"


DEFAULT_FLEXIBILITY_SCORE = 5.0


@dataclass(frozen=True)
class NursePreferences:
    """Preference bundle submitted by a nurse for one scheduling period"""
    preferred_shifts: Dict[date, PreferredShift] = field(default_factory=dict)
    pto_dates: FrozenSet[date] = frozenset()
    no_schedule_dates: FrozenSet[date] = frozenset()
    flexibility_score: float = DEFAULT_FLEXIBILITY_SCORE

    @property
    def blocked_dates(self) -> FrozenSet[date]:
        return self.pto_dates | self.no_schedule_dates

    def preferred_shift_for(self, day: date) -> Optional[PreferredShift]:
        """Stated preference for a date; PTO and no-schedule days win over it."""
        if day in self.pto_dates or day in self.no_schedule_dates:
            return None
        return self.preferred_shifts.get(day)


@dataclass(frozen=True)
class Nurse:
    """A nurse as seen by the engine: identity, capabilities and contract limits"""
    id: str
    seniority_level: int
    shift_types: FrozenSet[ShiftType]
    max_shifts_per_block: int
    contract_hours_per_week: float = 40.0
    preferences: Optional[NursePreferences] = None
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def flexibility_score(self) -> float:
        if self.preferences is None:
            return DEFAULT_FLEXIBILITY_SCORE
        return self.preferences.flexibility_score

    def can_work(self, shift_type: ShiftType) -> bool:
        return shift_type in self.shift_types

    def preferred_shift_for(self, day: date) -> Optional[PreferredShift]:
        if self.preferences is None:
            return None
        return self.preferences.preferred_shift_for(day)


@dataclass(frozen=True)
class RequiredCoverage:
    """Nurses required per shift, with separate weekend thresholds"""
    day: int = 3
    night: int = 2
    weekend_day: int = 2
    weekend_night: int = 2

    def required_for(self, shift_type: ShiftType, is_weekend: bool) -> int:
        if shift_type == ShiftType.DAY:
            return self.weekend_day if is_weekend else self.day
        return self.weekend_night if is_weekend else self.night


@dataclass(frozen=True)
class SchedulingRules:
    """Hospital staffing rules for one scheduling period"""
    # Shift requirements
    min_shifts_per_nurse: int = 3
    max_shifts_per_nurse: int = 12
    min_consecutive_days: int = 1
    max_consecutive_days: int = 5
    min_rest_between_shifts: int = 8

    # Time off
    max_pto_per_nurse: int = 3
    max_no_schedule_per_nurse: int = 2
    max_total_time_off: int = 4
    blackout_dates: FrozenSet[date] = frozenset()

    required_coverage: RequiredCoverage = field(default_factory=RequiredCoverage)

    # Weekends
    max_weekends_per_nurse: int = 2
    require_alternating_weekends: bool = False

    # Distribution
    require_even_distribution: bool = True
    enable_seniority_bias: bool = False
    seniority_bias_weight: float = 0.3

    custom_messages: Dict[str, str] = field(default_factory=dict)

    def shift_cap(self, nurse: Nurse) -> int:
        """
        Hard per-period shift cap for a nurse.

        Stricter than the nurse's contract alone: the rule-level
        max_shifts_per_nurse also applies, so a nurse contracted for 15 shifts
        is held to 12 under the default rules.
        """
        return min(nurse.max_shifts_per_block, self.max_shifts_per_nurse)


DEFAULT_SCHEDULING_RULES = SchedulingRules()


@dataclass(frozen=True)
class ShiftRequirement:
    """Staffing need for one date and shift type"""
    date: date
    shift_type: ShiftType
    required_count: int


@dataclass(frozen=True)
class Assignment:
    """Single assignment: nurse to a shift on a date"""
    nurse_id: str
    date: date
    shift_type: ShiftType

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nurse_id': self.nurse_id,
            'date': self.date.isoformat(),
            'shift_type': self.shift_type.value,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """The four normalized sub-scores and their weighted combination"""
    coverage: float
    preference: float
    fairness: float
    seniority: float
    optimization_score: float


@dataclass
class ScheduleStatistics:
    """Derived per-nurse and aggregate figures for a generated schedule"""
    total_assignments: int
    nurse_workloads: Dict[str, int]
    coverage_metrics: Dict[str, float]
    preference_satisfaction: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_assignments': self.total_assignments,
            'nurse_workloads': dict(self.nurse_workloads),
            'coverage_metrics': dict(self.coverage_metrics),
            'preference_satisfaction': dict(self.preference_satisfaction),
        }


@dataclass
class GeneratedSchedule:
    """A ranked candidate roster with its scores and advisory violations"""
    id: str
    assignments: List[Assignment]
    optimization_score: float
    coverage_score: float
    preference_score: float
    fairness_score: float
    seniority_score: float
    violations: List[str]
    statistics: ScheduleStatistics
    assignment_scores: List[float] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def scores(self) -> ScoreBreakdown:
        return ScoreBreakdown(
            coverage=self.coverage_score,
            preference=self.preference_score,
            fairness=self.fairness_score,
            seniority=self.seniority_score,
            optimization_score=self.optimization_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Output contract consumed by persistence and presentation layers."""
        assignments = []
        for index, assignment in enumerate(self.assignments):
            record = assignment.to_dict()
            if index < len(self.assignment_scores):
                record['preference_satisfaction_score'] = self.assignment_scores[index]
            assignments.append(record)

        return {
            'id': self.id,
            'assignments': assignments,
            'optimization_score': self.optimization_score,
            'coverage_score': self.coverage_score,
            'preference_score': self.preference_score,
            'fairness_score': self.fairness_score,
            'seniority_score': self.seniority_score,
            'violations': list(self.violations),
            'statistics': self.statistics.to_dict(),
            'metadata': dict(self.metadata),
        }


@dataclass(frozen=True)
class SchedulingContext:
    """Immutable input snapshot for one generation call"""
    period_start: date
    period_end: date
    nurses: List[Nurse]
    rules: SchedulingRules = DEFAULT_SCHEDULING_RULES


STRATEGIES = ('balanced', 'coverage', 'preferences', 'fairness')


@dataclass(frozen=True)
class GenerationOptions:
    """Knobs for one generate() call"""
    max_schedules: int = 3
    max_iterations: int = 1000
    strategy: str = 'balanced'
    time_limit_seconds: Optional[float] = None
    workers: Optional[int] = None

    @classmethod
    def from_config(cls, config) -> "GenerationOptions":
        """Build defaults from a NurseSchedulerConfig."""
        search = config.search
        return cls(
            max_schedules=search.max_schedules,
            max_iterations=search.max_iterations,
            strategy=search.default_strategy,
            time_limit_seconds=search.time_limit_seconds,
            workers=search.workers,
        )

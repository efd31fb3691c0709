"""
Input schemas for callers that hand the engine JSON-shaped payloads.

The roster store keeps dates as ISO strings and preferences as nested dicts;
these models validate such payloads and convert them into the engine's
immutable dataclasses.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import InvalidInputError
from .models import (
    DEFAULT_FLEXIBILITY_SCORE, STRATEGIES, GenerationOptions, Nurse, NursePreferences,
    PreferredShift, RequiredCoverage, SchedulingContext, SchedulingRules, ShiftType,
)


class NursePreferencesModel(BaseModel):
    """Preferences a nurse submitted for the period"""
    preferred_shifts: Dict[date, PreferredShift] = Field(default_factory=dict, description="Preferred shift per ISO date")
    pto_requests: List[date] = Field(default_factory=list, description="Dates requested as paid time off")
    no_schedule_requests: List[date] = Field(default_factory=list, description="Dates the nurse must not be scheduled")
    flexibility_score: float = Field(default=DEFAULT_FLEXIBILITY_SCORE, ge=1, le=10,
                                     description="Self-reported flexibility, 1 (rigid) to 10 (very flexible)")

    def to_preferences(self) -> NursePreferences:
        return NursePreferences(
            preferred_shifts=dict(self.preferred_shifts),
            pto_dates=frozenset(self.pto_requests),
            no_schedule_dates=frozenset(self.no_schedule_requests),
            flexibility_score=self.flexibility_score,
        )


class NurseModel(BaseModel):
    """Nurse record as supplied by the roster store"""
    id: str = Field(min_length=1, description="Unique nurse identifier")
    name: str = Field(default="", description="Display name used in violation messages")
    seniority_level: int = Field(default=1, ge=1, description="Seniority level, 1 = most junior")
    shift_types: List[ShiftType] = Field(default_factory=lambda: [ShiftType.DAY, ShiftType.NIGHT],
                                         description="Shift types the nurse can work")
    max_shifts_per_block: int = Field(default=15, ge=0, description="Contract cap on shifts in one period")
    contract_hours_per_week: float = Field(default=40.0, ge=0, description="Contracted weekly hours")
    preferences: Optional[NursePreferencesModel] = Field(default=None, description="Submitted preferences, if any")

    def to_nurse(self) -> Nurse:
        return Nurse(
            id=self.id,
            name=self.name,
            seniority_level=self.seniority_level,
            shift_types=frozenset(self.shift_types),
            max_shifts_per_block=self.max_shifts_per_block,
            contract_hours_per_week=self.contract_hours_per_week,
            preferences=self.preferences.to_preferences() if self.preferences else None,
        )


class RequiredCoverageModel(BaseModel):
    day: int = Field(default=3, ge=0)
    night: int = Field(default=2, ge=0)
    weekend_day: int = Field(default=2, ge=0)
    weekend_night: int = Field(default=2, ge=0)


class SchedulingRulesModel(BaseModel):
    """Hospital staffing rules for a period"""
    min_shifts_per_nurse: int = Field(default=3, ge=0)
    max_shifts_per_nurse: int = Field(default=12, ge=0)
    min_consecutive_days: int = Field(default=1, ge=1)
    max_consecutive_days: int = Field(default=5, ge=1)
    min_rest_between_shifts: int = Field(default=8, ge=0, description="Minimum rest in hours")

    max_pto_per_nurse: int = Field(default=3, ge=0)
    max_no_schedule_per_nurse: int = Field(default=2, ge=0)
    max_total_time_off: int = Field(default=4, ge=0)
    blackout_dates: List[date] = Field(default_factory=list, description="Dates on which time off is refused")

    required_coverage: RequiredCoverageModel = Field(default_factory=RequiredCoverageModel)

    max_weekends_per_nurse: int = Field(default=2, ge=0)
    require_alternating_weekends: bool = False

    require_even_distribution: bool = True
    enable_seniority_bias: bool = False
    seniority_bias_weight: float = Field(default=0.3, ge=0, le=1)

    custom_messages: Dict[str, str] = Field(default_factory=dict,
                                            description="Overrides for violation message templates")

    def to_rules(self) -> SchedulingRules:
        data = self.model_dump(exclude={'required_coverage', 'blackout_dates'})
        return SchedulingRules(
            required_coverage=RequiredCoverage(**self.required_coverage.model_dump()),
            blackout_dates=frozenset(self.blackout_dates),
            **data
        )


class SchedulingContextModel(BaseModel):
    """Full input snapshot for one generation call"""
    period_start: date = Field(description="First day of the period (ISO date)")
    period_end: date = Field(description="Last day of the period, inclusive (ISO date)")
    nurses: List[NurseModel] = Field(default_factory=list)
    rules: SchedulingRulesModel = Field(default_factory=SchedulingRulesModel)

    @model_validator(mode='after')
    def check_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self

    @field_validator('nurses')
    @classmethod
    def check_unique_ids(cls, nurses: List[NurseModel]) -> List[NurseModel]:
        seen = set()
        for nurse in nurses:
            if nurse.id in seen:
                raise ValueError(f"Duplicate nurse id: {nurse.id}")
            seen.add(nurse.id)
        return nurses

    def to_context(self) -> SchedulingContext:
        return SchedulingContext(
            period_start=self.period_start,
            period_end=self.period_end,
            nurses=[n.to_nurse() for n in self.nurses],
            rules=self.rules.to_rules(),
        )


class GenerationOptionsModel(BaseModel):
    """Options for one generation call"""
    max_schedules: int = Field(default=3, ge=1, description="Number of independent attempts")
    max_iterations: int = Field(default=1000, ge=0, description="Local search iterations per attempt")
    strategy: str = Field(default="balanced", description="Strategy: 'balanced' | 'coverage' | 'preferences' | 'fairness'")
    time_limit_seconds: Optional[float] = Field(default=None, gt=0, description="Per-attempt search time limit")
    workers: Optional[int] = Field(default=None, ge=1, description="Thread pool size (default: min(max_schedules, cpu count))")

    @field_validator('strategy')
    @classmethod
    def check_strategy(cls, strategy: str) -> str:
        if strategy not in STRATEGIES:
            raise ValueError(f"strategy must be one of: {', '.join(STRATEGIES)}")
        return strategy

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(**self.model_dump())


def parse_context(payload: Dict[str, Any]) -> SchedulingContext:
    """Validate a context payload, raising InvalidInputError on bad input."""
    try:
        return SchedulingContextModel.model_validate(payload).to_context()
    except ValidationError as e:
        raise InvalidInputError(f"Invalid scheduling context: {e}") from e


def parse_options(payload: Optional[Dict[str, Any]] = None) -> GenerationOptions:
    """Validate an options payload, raising InvalidInputError on bad input."""
    try:
        return GenerationOptionsModel.model_validate(payload or {}).to_options()
    except ValidationError as e:
        raise InvalidInputError(f"Invalid generation options: {e}") from e

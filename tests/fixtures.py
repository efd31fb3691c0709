"""
Test fixtures and utilities for nurse scheduler tests.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, Optional

from nurse_scheduler.models import (
    Nurse, NursePreferences, PreferredShift, RequiredCoverage,
    SchedulingContext, SchedulingRules, ShiftType,
)


# 2024-01-01 is a Monday, so the first week runs Monday to Sunday
PERIOD_START = date(2024, 1, 1)
PERIOD_END = date(2024, 1, 7)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)

BOTH_SHIFTS = (ShiftType.DAY, ShiftType.NIGHT)


def day(offset: int) -> date:
    """Date `offset` days after PERIOD_START."""
    return PERIOD_START + timedelta(days=offset)


def make_preferences(preferred: Optional[Dict[date, PreferredShift]] = None,
                     pto: Iterable[date] = (), no_schedule: Iterable[date] = (),
                     flexibility: float = 5.0) -> NursePreferences:
    return NursePreferences(
        preferred_shifts=dict(preferred or {}),
        pto_dates=frozenset(pto),
        no_schedule_dates=frozenset(no_schedule),
        flexibility_score=flexibility,
    )


def make_nurse(nurse_id: str, seniority: int = 1, shift_types: Iterable[ShiftType] = BOTH_SHIFTS,
               max_shifts: int = 15, preferences: Optional[NursePreferences] = None,
               name: str = "") -> Nurse:
    return Nurse(
        id=nurse_id,
        seniority_level=seniority,
        shift_types=frozenset(shift_types),
        max_shifts_per_block=max_shifts,
        preferences=preferences,
        name=name,
    )


def day_only_rules(per_day: int = 1, **overrides) -> SchedulingRules:
    """Rules needing `per_day` DAY nurses every day and nobody at night."""
    values = dict(
        required_coverage=RequiredCoverage(day=per_day, night=0, weekend_day=per_day, weekend_night=0),
        min_shifts_per_nurse=0,
    )
    values.update(overrides)
    return SchedulingRules(**values)


# Ten nurses with a mix of capabilities, seniority and preferences
SAMPLE_NURSES = [
    make_nurse("N001", seniority=5, name="Alice Johnson",
               preferences=make_preferences({day(0): PreferredShift.DAY, day(1): PreferredShift.DAY},
                                            pto=[day(4)], flexibility=3)),
    make_nurse("N002", seniority=2, name="Bob Smith",
               preferences=make_preferences({day(0): PreferredShift.NIGHT, day(2): PreferredShift.ANY})),
    make_nurse("N003", seniority=3, shift_types=[ShiftType.DAY], name="Carol Davis",
               preferences=make_preferences({day(3): PreferredShift.DAY}, no_schedule=[day(5)])),
    make_nurse("N004", seniority=1, name="David Lee"),
    make_nurse("N005", seniority=4, shift_types=[ShiftType.NIGHT], name="Eva Brown",
               preferences=make_preferences({day(1): PreferredShift.NIGHT, day(2): PreferredShift.NIGHT},
                                            flexibility=8)),
    make_nurse("N006", seniority=2, name="Frank Green",
               preferences=make_preferences(pto=[day(2)])),
    make_nurse("N007", seniority=1, name="Grace Hall"),
    make_nurse("N008", seniority=3, name="Henry King",
               preferences=make_preferences({day(5): PreferredShift.DAY, day(6): PreferredShift.DAY})),
    make_nurse("N009", seniority=2, shift_types=[ShiftType.DAY], name="Ivy Moore"),
    make_nurse("N010", seniority=1, name="Jack White",
               preferences=make_preferences({day(4): PreferredShift.NIGHT}, flexibility=9)),
]

SAMPLE_RULES = SchedulingRules()

SAMPLE_CONTEXT = SchedulingContext(
    period_start=PERIOD_START,
    period_end=PERIOD_END,
    nurses=SAMPLE_NURSES,
    rules=SAMPLE_RULES,
)

# Same roster as the JSON the roster store hands over
SAMPLE_CONTEXT_PAYLOAD = {
    "period_start": "2024-01-01",
    "period_end": "2024-01-07",
    "nurses": [
        {
            "id": "N001",
            "name": "Alice Johnson",
            "seniority_level": 5,
            "shift_types": ["DAY", "NIGHT"],
            "max_shifts_per_block": 15,
            "preferences": {
                "preferred_shifts": {"2024-01-01": "DAY", "2024-01-02": "DAY"},
                "pto_requests": ["2024-01-05"],
                "no_schedule_requests": [],
                "flexibility_score": 3,
            },
        },
        {
            "id": "N002",
            "name": "Bob Smith",
            "seniority_level": 2,
            "shift_types": ["DAY", "NIGHT"],
            "max_shifts_per_block": 15,
        },
        {
            "id": "N003",
            "name": "Carol Davis",
            "seniority_level": 3,
            "shift_types": ["DAY"],
            "preferences": {
                "no_schedule_requests": ["2024-01-06"],
            },
        },
    ],
    "rules": {
        "min_shifts_per_nurse": 1,
        "max_shifts_per_nurse": 5,
        "required_coverage": {"day": 1, "night": 1, "weekend_day": 1, "weekend_night": 0},
        "blackout_dates": ["2024-01-03"],
    },
}

"""
Nurse Shift Scheduler

Constraint-satisfaction and local-search engine that turns nurse availability,
preferences and hospital staffing rules into ranked candidate rosters.
"""

__version__ = "1.0.0"

from .engine import SchedulingEngine, generate
from .exceptions import ConfigError, InvalidInputError, SchedulerError
from .models import (
    Assignment,
    GeneratedSchedule,
    GenerationOptions,
    Nurse,
    NursePreferences,
    PreferredShift,
    RequiredCoverage,
    SchedulingContext,
    SchedulingRules,
    ShiftType,
)
from .schemas import parse_context, parse_options

__all__ = [
    "SchedulingEngine",
    "generate",
    "parse_context",
    "parse_options",
    "Assignment",
    "GeneratedSchedule",
    "GenerationOptions",
    "Nurse",
    "NursePreferences",
    "PreferredShift",
    "RequiredCoverage",
    "SchedulingContext",
    "SchedulingRules",
    "ShiftType",
    "SchedulerError",
    "InvalidInputError",
    "ConfigError",
]

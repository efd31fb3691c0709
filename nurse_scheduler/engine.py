"""
Generation orchestrator.

Runs several independent attempts (greedy seed, then local search), each with
its own seeded random.Random, and returns the successful ones ranked by
optimization score.

Usage:
    schedules = generate(context, GenerationOptions(max_schedules=3), rng=random.Random(42))
"""

import os
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from .assembler import ScheduleAssembler
from .availability import Availability
from .config import NurseSchedulerConfig, default_config, validate_config
from .exceptions import ConfigError, InvalidInputError
from .generator import ScheduleGenerator, shift_capability_summary
from .logger import get_logger
from .models import (
    Assignment, GeneratedSchedule, GenerationOptions, SchedulingContext, ShiftRequirement,
)
from .monitoring import PerformanceMonitor, ScheduleQualityTracker
from .optimizer import LocalSearchOptimizer
from .requirements import build_requirements, total_required
from .scorer import WEIGHT_PROFILES, ScheduleScorer, validate_strategy
from .validator import ConstraintValidator

logger = get_logger(__name__)

SEED_BITS = 64


def validate_context(context: SchedulingContext):
    """Raise InvalidInputError for input the engine cannot work with."""
    if context.period_end < context.period_start:
        raise InvalidInputError(
            f"Period end {context.period_end.isoformat()} is before "
            f"start {context.period_start.isoformat()}"
        )

    seen = set()
    for nurse in context.nurses:
        if nurse.id in seen:
            raise InvalidInputError(f"Duplicate nurse id: {nurse.id}")
        seen.add(nurse.id)

        if nurse.seniority_level < 1:
            raise InvalidInputError(f"Nurse {nurse.id} has seniority level {nurse.seniority_level} (must be >= 1)")

        if nurse.max_shifts_per_block < 0:
            raise InvalidInputError(f"Nurse {nurse.id} has a negative shift cap")

    if not 0 <= context.rules.seniority_bias_weight <= 1:
        raise InvalidInputError(
            f"seniority_bias_weight must be within [0, 1], got {context.rules.seniority_bias_weight}"
        )


def validate_options(options: GenerationOptions):
    """Raise InvalidInputError for out-of-range generation options."""
    if options.max_schedules < 1:
        raise InvalidInputError("max_schedules must be at least 1")
    if options.max_iterations < 0:
        raise InvalidInputError("max_iterations must not be negative")
    if options.time_limit_seconds is not None and options.time_limit_seconds <= 0:
        raise InvalidInputError("time_limit_seconds must be positive when set")
    if options.workers is not None and options.workers < 1:
        raise InvalidInputError("workers must be at least 1 when set")
    validate_strategy(options.strategy)


def weight_profiles(config: Optional[NurseSchedulerConfig]) -> Dict[str, Dict[str, float]]:
    """Built-in weight profiles with any configured overrides applied."""
    profiles = {name: dict(weights) for name, weights in WEIGHT_PROFILES.items()}
    if config is not None:
        for strategy, weights in config.scoring.weight_overrides.items():
            profiles.setdefault(strategy, {}).update(weights)
    return profiles


class SchedulingEngine:
    """
    Shared, read-only setup for one generation call.

    Requirements, availability, validator and scorer are built once and used
    by every attempt. Attempts never mutate them.
    """

    def __init__(self, context: SchedulingContext, config: Optional[NurseSchedulerConfig] = None):
        validate_context(context)
        if config is not None:
            issues = validate_config(config)
            if issues:
                raise ConfigError("Invalid configuration: " + "; ".join(issues))

        self.context = context
        self.config = config or default_config()
        self.nurses = list(context.nurses)
        self.rules = context.rules

        self.requirements: List[ShiftRequirement] = build_requirements(
            context.period_start, context.period_end, self.rules.required_coverage
        )
        self.availability = Availability.from_nurses(self.nurses)
        self.validator = ConstraintValidator(self.nurses, self.rules, self.availability)
        self.scorer = ScheduleScorer(self.nurses, self.requirements, self.rules,
                                     profiles=weight_profiles(config))
        self.assembler = ScheduleAssembler(self.nurses, self.rules, self.scorer)

    def run_attempt(self, attempt: int, seed: int, options: GenerationOptions,
                    stop_event: Optional[threading.Event] = None) -> Tuple[Optional[GeneratedSchedule], float]:
        """
        One independent attempt. Returns (schedule or None, elapsed seconds).
        None means no feasible greedy seed existed.
        """
        started = time.monotonic()
        rng = random.Random(seed)

        generator = ScheduleGenerator(self.nurses, self.requirements, self.rules, self.availability)
        initial = generator.generate()
        if initial is None:
            return None, time.monotonic() - started

        tracker = ScheduleQualityTracker() if self.config.monitoring.track_search_quality else None
        optimizer = LocalSearchOptimizer(self.validator, self.scorer, options.strategy, rng=rng,
                                         tracker=tracker)
        result = optimizer.optimize(
            initial,
            max_iterations=options.max_iterations,
            time_limit_seconds=options.time_limit_seconds,
            stop_event=stop_event,
        )

        elapsed = time.monotonic() - started
        metadata = dict(result.stats)
        metadata.update({
            'strategy': options.strategy,
            'attempt': attempt,
            'seed': seed,
            'stopped_early': result.stopped_early,
            'elapsed_seconds': round(elapsed, 4),
        })
        if tracker is not None:
            metadata['search_quality'] = tracker.get_improvement_trend()

        schedule = self.assembler.assemble(result.best, options.strategy, rng=rng, metadata=metadata)
        return schedule, elapsed

    def generate_schedules(self, options: Optional[GenerationOptions] = None,
                           rng: Optional[random.Random] = None,
                           monitor: Optional[PerformanceMonitor] = None,
                           stop_event: Optional[threading.Event] = None) -> List[GeneratedSchedule]:
        """Run all attempts and return successful schedules, best first."""
        options = options or GenerationOptions.from_config(self.config)
        validate_options(options)

        if rng is None:
            rng = random.Random(self.config.search.random_seed)

        # Seeds are drawn up front so results do not depend on thread scheduling
        seeds = [rng.getrandbits(SEED_BITS) for _ in range(options.max_schedules)]
        workers = options.workers or min(options.max_schedules, os.cpu_count() or 1)

        logger.info(
            "Generating %d schedule(s) for %d nurses, %s to %s (%d slots to fill, strategy=%s)",
            options.max_schedules, len(self.nurses),
            self.context.period_start.isoformat(), self.context.period_end.isoformat(),
            total_required(self.requirements), options.strategy
        )

        if workers == 1:
            outcomes = [self.run_attempt(i, seed, options, stop_event) for i, seed in enumerate(seeds)]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self.run_attempt, i, seed, options, stop_event)
                    for i, seed in enumerate(seeds)
                ]
                outcomes = [future.result() for future in futures]

        schedules = []
        for schedule, elapsed in outcomes:
            if schedule is None:
                if monitor is not None:
                    monitor.record_failed_seed(elapsed)
                continue
            schedules.append(schedule)
            if monitor is not None:
                monitor.record_schedule(schedule.optimization_score,
                                        schedule.metadata, duration=elapsed)

        if not schedules and total_required(self.requirements) > 0:
            logger.warning(
                "Unable to generate any feasible schedule (%d attempts). "
                "Try relaxing constraints or adding nurse availability.",
                options.max_schedules
            )

        # Stable sort keeps attempt order among equal scores
        schedules.sort(key=lambda s: s.optimization_score, reverse=True)

        if schedules:
            logger.info("Generated %d schedule(s); best score %.4f",
                        len(schedules), schedules[0].optimization_score)
        return schedules

    def validate_schedule(self, assignments: Sequence[Assignment]) -> Dict:
        """Hard-constraint report for an externally edited schedule."""
        is_valid, violations = self.validator.validate(assignments)
        return {
            'is_valid': is_valid,
            'violations': violations,
            'soft_violations': self.assembler.find_violations(assignments),
        }

    def score_schedule(self, assignments: Sequence[Assignment], strategy: str = 'balanced') -> Dict:
        """Sub-scores and optimization score for an arbitrary assignment set."""
        scores = self.scorer.score(assignments, validate_strategy(strategy))
        return {
            'coverage_score': scores.coverage,
            'preference_score': scores.preference,
            'fairness_score': scores.fairness,
            'seniority_score': scores.seniority,
            'optimization_score': scores.optimization_score,
        }

    def get_summary_stats(self) -> Dict:
        """Summary statistics about the input data"""
        needed = total_required(self.requirements)
        capacity = sum(self.rules.shift_cap(n) for n in self.nurses)
        return {
            'num_nurses': len(self.nurses),
            'num_days': len(self.requirements) // 2,
            'total_nurse_shifts_needed': needed,
            'total_shift_capacity': capacity,
            'capacity_ratio': round(capacity / needed, 2) if needed > 0 else 0,
            'nurses_per_shift_type': shift_capability_summary(self.nurses),
        }


def generate(context: SchedulingContext, options: Optional[GenerationOptions] = None,
             rng: Optional[random.Random] = None,
             config: Optional[NurseSchedulerConfig] = None,
             monitor: Optional[PerformanceMonitor] = None,
             stop_event: Optional[threading.Event] = None) -> List[GeneratedSchedule]:
    """
    Produce up to options.max_schedules feasible schedules, best first.

    Raises InvalidInputError for malformed input. An infeasible problem is not
    an error: the result is simply empty.
    """
    engine = SchedulingEngine(context, config)
    return engine.generate_schedules(options, rng=rng, monitor=monitor, stop_event=stop_event)

"""
Local search over complete schedules.

Hill climbing with simulated-annealing acceptance. A neighbour swaps the
nurses of two random assignments; neighbours that break a hard constraint are
skipped. The search is anytime: stopping early (time limit or stop event)
still returns the best schedule seen so far.
"""

import math
import random
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .logger import get_logger
from .models import Assignment
from .monitoring import ScheduleQualityTracker
from .scorer import ScheduleScorer
from .validator import ConstraintValidator

logger = get_logger(__name__)


@dataclass
class SearchResult:
    """Best solution found by one local search run, plus run statistics"""
    best: List[Assignment]
    best_score: float
    iterations: int = 0
    accepted: int = 0
    improved: int = 0
    rejected_invalid: int = 0
    stopped_early: bool = False

    @property
    def stats(self) -> Dict[str, int]:
        return {
            'iterations': self.iterations,
            'accepted': self.accepted,
            'improved': self.improved,
            'rejected_invalid': self.rejected_invalid,
        }


def acceptance_probability(neighbour_score: float, best_score: float,
                           iteration: int, max_iterations: int) -> float:
    """exp((neighbour - best) / T) with T cooling linearly from 1 towards 0."""
    temperature = 1 - (iteration / max_iterations)
    if temperature <= 0:
        return 0.0
    exponent = (neighbour_score - best_score) / temperature
    if exponent >= 0:
        return 1.0
    return math.exp(exponent)


class LocalSearchOptimizer:
    """
    Two-state search (current, best) seeded from a greedy solution.

    Randomness comes only from the injected rng so a run is reproducible from
    its seed and parallel runs never share a generator.
    """

    def __init__(self, validator: ConstraintValidator, scorer: ScheduleScorer,
                 strategy: str = 'balanced', rng: Optional[random.Random] = None,
                 tracker: Optional[ScheduleQualityTracker] = None):
        self.validator = validator
        self.scorer = scorer
        self.strategy = strategy
        self.rng = rng or random.Random()
        self.tracker = tracker

    def neighbour(self, solution: Sequence[Assignment]) -> Optional[List[Assignment]]:
        """
        Swap the nurses of two randomly chosen assignments.
        Returns None when the indices coincide or the swap breaks a hard constraint.
        """
        if len(solution) < 2:
            return None

        idx1 = self.rng.randrange(len(solution))
        idx2 = self.rng.randrange(len(solution))
        if idx1 == idx2:
            return None

        first = solution[idx1]
        second = solution[idx2]

        swapped = list(solution)
        swapped[idx1] = Assignment(nurse_id=second.nurse_id, date=first.date,
                                   shift_type=first.shift_type)
        swapped[idx2] = Assignment(nurse_id=first.nurse_id, date=second.date,
                                   shift_type=second.shift_type)

        if not self.validator.is_valid(swapped):
            return None
        return swapped

    def optimize(self, solution: Sequence[Assignment], max_iterations: int = 1000,
                 time_limit_seconds: Optional[float] = None,
                 stop_event: Optional[threading.Event] = None) -> SearchResult:
        """Run the search and return the best solution found."""
        current = list(solution)
        best = list(solution)
        best_score = self.scorer.optimization_score(best, self.strategy)

        deadline = None
        if time_limit_seconds is not None:
            deadline = time.monotonic() + time_limit_seconds

        iterations = accepted = improved = rejected = 0
        stopped_early = False

        for iteration in range(max_iterations):
            if (stop_event is not None and stop_event.is_set()) or \
                    (deadline is not None and time.monotonic() >= deadline):
                stopped_early = True
                break

            iterations += 1
            candidate = self.neighbour(current)
            if candidate is None:
                rejected += 1
                continue

            candidate_score = self.scorer.optimization_score(candidate, self.strategy)

            if candidate_score > best_score:
                best = candidate
                best_score = candidate_score
                current = candidate
                accepted += 1
                improved += 1
            elif self.rng.random() < acceptance_probability(
                    candidate_score, best_score, iteration, max_iterations):
                current = candidate
                accepted += 1
            else:
                continue

            if self.tracker is not None:
                self.tracker.add_result(iteration, best_score, candidate_score)

        if stopped_early:
            logger.debug("Local search stopped early after %d iterations", iterations)

        return SearchResult(
            best=best,
            best_score=best_score,
            iterations=iterations,
            accepted=accepted,
            improved=improved,
            rejected_invalid=rejected,
            stopped_early=stopped_early,
        )

"""
Performance Monitoring for Nurse Scheduler

Tracks generation timings, seeding outcomes and search quality.
"""

import json
import os
from typing import Dict, List, Optional
from datetime import datetime


class PerformanceMonitor:
    """Monitors and logs metrics for generation runs"""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = log_dir
        self.session_start = datetime.now()
        self.metrics = {
            'attempt_times': [],
            'attempts': 0,
            'seeded_attempts': 0,
            'failed_seeds': 0,
            'schedules_generated': 0,
            'iterations': 0,
            'accepted_moves': 0,
            'improving_moves': 0,
            'rejected_neighbours': 0,
            'best_optimization_score': None,
        }

    def record_failed_seed(self, duration: Optional[float] = None):
        """Record an attempt that could not build a feasible seed"""
        self.metrics['attempts'] += 1
        self.metrics['failed_seeds'] += 1
        if duration is not None:
            self.metrics['attempt_times'].append(duration)

    def record_schedule(self, optimization_score: float, search_stats: Optional[Dict] = None,
                        duration: Optional[float] = None):
        """Record a successfully generated schedule and its search statistics"""
        self.metrics['attempts'] += 1
        self.metrics['seeded_attempts'] += 1
        self.metrics['schedules_generated'] += 1
        if duration is not None:
            self.metrics['attempt_times'].append(duration)

        search_stats = search_stats or {}
        self.metrics['iterations'] += search_stats.get('iterations', 0)
        self.metrics['accepted_moves'] += search_stats.get('accepted', 0)
        self.metrics['improving_moves'] += search_stats.get('improved', 0)
        self.metrics['rejected_neighbours'] += search_stats.get('rejected_invalid', 0)

        best = self.metrics['best_optimization_score']
        if best is None or optimization_score > best:
            self.metrics['best_optimization_score'] = optimization_score

    def get_summary(self) -> Dict:
        """Get performance summary"""
        session_duration = (datetime.now() - self.session_start).total_seconds()
        times = self.metrics['attempt_times']
        avg_attempt_time = sum(times) / len(times) if times else 0
        best = self.metrics['best_optimization_score']

        return {
            'session_duration_seconds': round(session_duration, 2),
            'attempts': self.metrics['attempts'],
            'seeded_attempts': self.metrics['seeded_attempts'],
            'failed_seeds': self.metrics['failed_seeds'],
            'schedules_generated': self.metrics['schedules_generated'],
            'iterations': self.metrics['iterations'],
            'accepted_moves': self.metrics['accepted_moves'],
            'improving_moves': self.metrics['improving_moves'],
            'rejected_neighbours': self.metrics['rejected_neighbours'],
            'avg_attempt_time_seconds': round(avg_attempt_time, 3),
            'best_optimization_score': round(best, 4) if best is not None else None,
        }

    def save_session_log(self) -> str:
        """Save session metrics to file"""
        os.makedirs(self.log_dir, exist_ok=True)
        timestamp = self.session_start.strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(self.log_dir, f"performance_{timestamp}.json")

        summary = self.get_summary()
        summary['session_start'] = self.session_start.isoformat()
        summary['session_end'] = datetime.now().isoformat()

        with open(log_file, 'w') as f:
            json.dump(summary, f, indent=2)

        return log_file

    def print_realtime_status(self):
        """Print current performance status"""
        summary = self.get_summary()

        print("\n" + "=" * 60)
        print("PERFORMANCE MONITOR")
        print("=" * 60)
        print(f"Session Duration: {summary['session_duration_seconds']}s")
        print(f"Attempts: {summary['attempts']} "
              f"({summary['seeded_attempts']} seeded, {summary['failed_seeds']} infeasible)")
        print(f"Schedules Generated: {summary['schedules_generated']}")
        print(f"Search Iterations: {summary['iterations']}")
        print(f"  Accepted moves: {summary['accepted_moves']}")
        print(f"  Improving moves: {summary['improving_moves']}")
        print(f"  Invalid neighbours skipped: {summary['rejected_neighbours']}")
        print(f"\nBest Optimization Score: {summary['best_optimization_score']}")
        print(f"Avg Attempt Time: {summary['avg_attempt_time_seconds']}s")
        print("=" * 60)


class ScheduleQualityTracker:
    """Tracks best-score progress of a single local search"""

    def __init__(self):
        self.history: List[Dict] = []

    def add_result(self, iteration: int, best_score: float, current_score: float):
        """Record the search state after an accepted move"""
        self.history.append({
            'iteration': iteration,
            'best_score': best_score,
            'current_score': current_score,
        })

    def get_improvement_trend(self) -> Dict:
        """Analyze improvement trend"""
        if len(self.history) < 2:
            return {"status": "insufficient_data"}

        first_batch = self.history[:3]
        last_batch = self.history[-3:]

        avg_best_early = sum(r['best_score'] for r in first_batch) / len(first_batch)
        avg_best_late = sum(r['best_score'] for r in last_batch) / len(last_batch)

        best_record = max(self.history, key=lambda r: r['best_score'])
        if avg_best_late > avg_best_early:
            convergence_status = 'improving'
        elif avg_best_late == avg_best_early:
            convergence_status = 'stable'
        else:
            convergence_status = 'degrading'

        return {
            'status': 'analyzed',
            'best_score_trend': avg_best_late - avg_best_early,
            'total_records': len(self.history),
            'best_iteration': best_record['iteration'],
            'convergence_status': convergence_status,
        }

    def save_history(self, filename: Optional[str] = None) -> str:
        """Save quality history to file"""
        if not filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"logs/quality_history_{timestamp}.json"

        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(filename, 'w') as f:
            json.dump({
                'history': self.history,
                'trend_analysis': self.get_improvement_trend(),
                'summary': {
                    'total_records': len(self.history),
                    'best_score': max((r['best_score'] for r in self.history), default=None),
                    'final_score': self.history[-1]['current_score'] if self.history else None,
                }
            }, f, indent=2)

        return filename

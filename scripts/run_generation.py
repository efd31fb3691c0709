"""
Generate ranked schedules for a roster file.

Loads a roster JSON (see scripts/generate_data.py), validates it, runs the
generator and writes the ranked schedules as JSON.

Run: python scripts/run_generation.py data/roster.json --strategy balanced --seed 42
"""

import argparse
import json
import os
import random
import sys
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nurse_scheduler.config import ConfigManager
from nurse_scheduler.engine import SchedulingEngine
from nurse_scheduler.exceptions import SchedulerError
from nurse_scheduler.logger import configure_logging
from nurse_scheduler.models import GenerationOptions, STRATEGIES
from nurse_scheduler.monitoring import PerformanceMonitor
from nurse_scheduler.preferences import validate_rules
from nurse_scheduler.schemas import parse_context


def build_options(args, config) -> GenerationOptions:
    """Command-line values override configured defaults"""
    options = GenerationOptions.from_config(config)
    return GenerationOptions(
        max_schedules=args.schedules or options.max_schedules,
        max_iterations=args.iterations if args.iterations is not None else options.max_iterations,
        strategy=args.strategy or options.strategy,
        time_limit_seconds=args.time_limit or options.time_limit_seconds,
        workers=args.workers or options.workers,
    )


def print_schedule_summary(schedules):
    print("\n" + "=" * 60)
    print("GENERATED SCHEDULES")
    print("=" * 60)

    for rank, schedule in enumerate(schedules, start=1):
        print(f"\n#{rank} {schedule.id}")
        print(f"  Optimization score: {schedule.optimization_score:.4f}")
        print(f"  Coverage: {schedule.coverage_score:.2%}  Preference: {schedule.preference_score:.2%}  "
              f"Fairness: {schedule.fairness_score:.2%}  Seniority: {schedule.seniority_score:.2%}")
        print(f"  Assignments: {len(schedule.assignments)}  Violations: {len(schedule.violations)}")
        for violation in schedule.violations[:5]:
            print(f"    - {violation}")
        if len(schedule.violations) > 5:
            print(f"    ... and {len(schedule.violations) - 5} more")

    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Generate nurse schedules from a roster file")
    parser.add_argument("roster", help="Roster JSON file")
    parser.add_argument("--output", help="Output JSON file (default: output/schedules_<timestamp>.json)")
    parser.add_argument("--config", help="Configuration file")
    parser.add_argument("--strategy", choices=STRATEGIES, help="Optimization strategy")
    parser.add_argument("--schedules", type=int, help="Number of schedules to generate")
    parser.add_argument("--iterations", type=int, help="Local search iterations per schedule")
    parser.add_argument("--time-limit", type=float, help="Search time limit per schedule (seconds)")
    parser.add_argument("--workers", type=int, help="Parallel workers")
    parser.add_argument("--seed", type=int, help="Master random seed")
    args = parser.parse_args()

    manager = ConfigManager(args.config)
    config = manager.config
    log_file = None
    if config.monitoring.save_session_logs:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(config.monitoring.log_directory, f"generation_{timestamp}.log")
    configure_logging(config.monitoring.log_level, log_file)

    try:
        with open(args.roster, 'r') as f:
            payload = json.load(f)

        context = parse_context(payload)
        rule_check = validate_rules(context.rules)
        for warning in rule_check.warnings:
            print(f"⚠️  {warning}")
        if not rule_check.valid:
            for error in rule_check.errors:
                print(f"❌ {error}")
            sys.exit(1)

        engine = SchedulingEngine(context, config)
        stats = engine.get_summary_stats()
        print("\nData Summary:")
        print(f"  Nurses: {stats['num_nurses']}")
        print(f"  Days: {stats['num_days']}")
        print(f"  Nurse-shifts needed: {stats['total_nurse_shifts_needed']}")
        print(f"  Shift capacity: {stats['total_shift_capacity']}")
        print(f"  Capacity ratio: {stats['capacity_ratio']}x")

        seed = args.seed if args.seed is not None else config.search.random_seed
        monitor = PerformanceMonitor(config.monitoring.log_directory) \
            if config.monitoring.enable_monitoring else None
        schedules = engine.generate_schedules(build_options(args, config),
                                              rng=random.Random(seed), monitor=monitor)
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Could not read roster {args.roster}: {e}")
        sys.exit(2)
    except SchedulerError as e:
        print(f"❌ {e}")
        sys.exit(2)

    if not schedules:
        print("\n❌ Unable to generate valid schedules with current constraints.")
        print("   Try relaxing some constraints or ensuring sufficient nurse availability.")
        sys.exit(3)

    print_schedule_summary(schedules)

    output = args.output
    if not output:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output = os.path.join("output", f"schedules_{timestamp}.json")
    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output, 'w') as f:
        json.dump([s.to_dict() for s in schedules], f, indent=2)
    print(f"\n✓ Saved {len(schedules)} schedule(s) to {output}")

    if monitor is not None:
        monitor.print_realtime_status()
        if config.monitoring.save_session_logs:
            print(f"Session log: {monitor.save_session_log()}")


if __name__ == "__main__":
    main()

"""
Configuration Management for Nurse Scheduler

Centralized configuration with validation and environment support.
"""

import json
import math
import os
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict, field

from dotenv import load_dotenv

from .exceptions import ConfigError
from .models import STRATEGIES
from .scorer import WEIGHT_PROFILES


@dataclass
class SearchConfig:
    """Generation and local search configuration"""
    max_schedules: int = 3
    max_iterations: int = 1000
    default_strategy: str = "balanced"
    time_limit_seconds: Optional[float] = None  # per attempt; None = run all iterations
    workers: Optional[int] = None  # None = min(max_schedules, cpu count)
    random_seed: Optional[int] = None


@dataclass
class ScoringConfig:
    """Overrides for the strategy weight profiles"""
    # e.g. {"balanced": {"coverage": 0.5, "preference": 0.2, "fairness": 0.2, "seniority": 0.1}}
    weight_overrides: Dict[str, Dict[str, float]] = field(default_factory=dict)


@dataclass
class MonitoringConfig:
    """Performance monitoring and logging configuration"""
    enable_monitoring: bool = True
    log_directory: str = "logs"
    log_level: str = "INFO"
    save_session_logs: bool = False
    track_search_quality: bool = False  # attach a ScheduleQualityTracker to each search


@dataclass
class NurseSchedulerConfig:
    """Complete configuration for the nurse scheduler"""
    search: SearchConfig
    scoring: ScoringConfig
    monitoring: MonitoringConfig

    config_file: str = "config/scheduler_config.json"


class ConfigManager:
    """Manages configuration loading, validation, and environment overrides"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or "config/scheduler_config.json"
        self.config = self._load_config()

    def _load_config(self) -> NurseSchedulerConfig:
        """Load configuration from file with environment overrides"""
        # Start with defaults
        config_dict = self._get_default_config()

        # Load from file if exists
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r') as f:
                    file_config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Could not load config file {self.config_file}: {e}") from e
            config_dict = self._merge_configs(config_dict, file_config)

        # Apply environment overrides (.env is honoured but never overrides real env vars)
        load_dotenv()
        config_dict = self._apply_env_overrides(config_dict)
        config_dict["config_file"] = self.config_file

        return self._dict_to_config(config_dict)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration as dictionary"""
        default_config = NurseSchedulerConfig(
            search=SearchConfig(),
            scoring=ScoringConfig(),
            monitoring=MonitoringConfig(),
        )
        return asdict(default_config)

    def _merge_configs(self, base: Dict, override: Dict) -> Dict:
        """Recursively merge configuration dictionaries"""
        merged = base.copy()

        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _apply_env_overrides(self, config_dict: Dict) -> Dict:
        """Apply environment variable overrides"""
        search = config_dict.setdefault("search", {})
        monitoring = config_dict.setdefault("monitoring", {})

        try:
            if "SCHEDULER_MAX_SCHEDULES" in os.environ:
                search["max_schedules"] = int(os.environ["SCHEDULER_MAX_SCHEDULES"])

            if "SCHEDULER_MAX_ITERATIONS" in os.environ:
                search["max_iterations"] = int(os.environ["SCHEDULER_MAX_ITERATIONS"])

            if "SCHEDULER_TIME_LIMIT" in os.environ:
                search["time_limit_seconds"] = float(os.environ["SCHEDULER_TIME_LIMIT"])

            if "SCHEDULER_WORKERS" in os.environ:
                search["workers"] = int(os.environ["SCHEDULER_WORKERS"])

            if "SCHEDULER_RANDOM_SEED" in os.environ:
                search["random_seed"] = int(os.environ["SCHEDULER_RANDOM_SEED"])
        except ValueError as e:
            raise ConfigError(f"Invalid numeric environment override: {e}") from e

        if "SCHEDULER_STRATEGY" in os.environ:
            search["default_strategy"] = os.environ["SCHEDULER_STRATEGY"]

        # Monitoring configuration
        if "SCHEDULER_DISABLE_MONITORING" in os.environ:
            monitoring["enable_monitoring"] = False

        if "SCHEDULER_LOG_DIR" in os.environ:
            monitoring["log_directory"] = os.environ["SCHEDULER_LOG_DIR"]

        if "SCHEDULER_LOG_LEVEL" in os.environ:
            monitoring["log_level"] = os.environ["SCHEDULER_LOG_LEVEL"].upper()

        if "SCHEDULER_TRACK_QUALITY" in os.environ:
            monitoring["track_search_quality"] = True

        return config_dict

    def _dict_to_config(self, config_dict: Dict) -> NurseSchedulerConfig:
        """Convert dictionary to typed configuration object"""
        try:
            return NurseSchedulerConfig(
                search=SearchConfig(**config_dict.get("search", {})),
                scoring=ScoringConfig(**config_dict.get("scoring", {})),
                monitoring=MonitoringConfig(**config_dict.get("monitoring", {})),
                config_file=config_dict.get("config_file", "config/scheduler_config.json")
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save_config(self, config_file: Optional[str] = None) -> str:
        """Save current configuration to file"""
        file_path = config_file or self.config_file

        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, 'w') as f:
            json.dump(asdict(self.config), f, indent=2)

        return file_path

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues"""
        return validate_config(self.config)

    def print_config_summary(self):
        """Print human-readable configuration summary"""
        search = self.config.search
        monitoring = self.config.monitoring

        print("\n" + "=" * 60)
        print("SCHEDULER CONFIGURATION")
        print("=" * 60)

        print("\nSEARCH:")
        print(f"  Schedules per run: {search.max_schedules}")
        print(f"  Max iterations: {search.max_iterations}")
        print(f"  Default strategy: {search.default_strategy}")
        print(f"  Time limit per attempt: {search.time_limit_seconds or 'none'}")
        print(f"  Workers: {search.workers or 'auto'}")
        print(f"  Random seed: {search.random_seed if search.random_seed is not None else 'unseeded'}")

        if self.config.scoring.weight_overrides:
            print("\nSCORING OVERRIDES:")
            for strategy, weights in self.config.scoring.weight_overrides.items():
                print(f"  {strategy}: {weights}")

        print("\nMONITORING:")
        print(f"  Enabled: {monitoring.enable_monitoring}")
        print(f"  Log directory: {monitoring.log_directory}")
        print(f"  Log level: {monitoring.log_level}")

        issues = self.validate_config()
        if issues:
            print("\nCONFIGURATION ISSUES:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print("\nConfiguration is valid")

        print("=" * 60)


def validate_config(config: NurseSchedulerConfig) -> List[str]:
    """Return a list of problems with a configuration (empty when valid)."""
    issues = []
    search = config.search

    if search.max_schedules <= 0:
        issues.append("max_schedules must be positive")

    if search.max_iterations < 0:
        issues.append("max_iterations must not be negative")

    if search.default_strategy not in STRATEGIES:
        issues.append(f"default_strategy must be one of: {', '.join(STRATEGIES)}")

    if search.time_limit_seconds is not None and search.time_limit_seconds <= 0:
        issues.append("time_limit_seconds must be positive when set")

    if search.workers is not None and search.workers <= 0:
        issues.append("workers must be positive when set")

    for strategy, weights in config.scoring.weight_overrides.items():
        if strategy not in STRATEGIES:
            issues.append(f"Unknown strategy in weight_overrides: {strategy}")
            continue
        if any(w < 0 for w in weights.values()):
            issues.append(f"Weights for '{strategy}' must be non-negative")
        unknown = set(weights) - {'coverage', 'preference', 'fairness', 'seniority'}
        if unknown:
            issues.append(f"Unknown weight keys for '{strategy}': {', '.join(sorted(unknown))}")
            continue

        merged = dict(WEIGHT_PROFILES[strategy], **weights)
        if not math.isclose(sum(merged.values()), 1.0, abs_tol=1e-9):
            issues.append(f"Weights for '{strategy}' must sum to 1 after overrides, got {sum(merged.values()):.3f}")

    if config.monitoring.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        issues.append(f"Unknown log_level: {config.monitoring.log_level}")

    return issues


def default_config() -> NurseSchedulerConfig:
    """Built-in defaults, without reading files or the environment."""
    return NurseSchedulerConfig(
        search=SearchConfig(),
        scoring=ScoringConfig(),
        monitoring=MonitoringConfig(),
    )


# Convenience function for easy access
def load_config(config_file: Optional[str] = None) -> NurseSchedulerConfig:
    """Load and return scheduler configuration"""
    manager = ConfigManager(config_file)
    return manager.config


if __name__ == "__main__":
    manager = ConfigManager()
    manager.print_config_summary()
    manager.save_config("config/default_config.json")

"""
Tests for configuration loading and validation.
"""

import json
import tempfile
import unittest
from unittest.mock import patch
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nurse_scheduler.config import ConfigManager, default_config, load_config, validate_config
from nurse_scheduler.exceptions import ConfigError
from nurse_scheduler.models import GenerationOptions


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config_file = os.path.join(self.tmp.name, "scheduler_config.json")
        self.env = patch.dict(os.environ, {}, clear=False)
        self.env.start()
        for key in list(os.environ):
            if key.startswith("SCHEDULER_"):
                del os.environ[key]

    def tearDown(self):
        self.env.stop()
        self.tmp.cleanup()

    def write_config(self, data):
        with open(self.config_file, 'w') as f:
            json.dump(data, f)

    def test_defaults_without_file(self):
        config = ConfigManager(self.config_file).config

        self.assertEqual(config.search.max_schedules, 3)
        self.assertEqual(config.search.max_iterations, 1000)
        self.assertEqual(config.search.default_strategy, 'balanced')
        self.assertTrue(config.monitoring.enable_monitoring)
        self.assertEqual(config.config_file, self.config_file)

    def test_file_merges_with_defaults(self):
        self.write_config({"search": {"max_iterations": 50}, "monitoring": {"log_level": "DEBUG"}})
        config = load_config(self.config_file)

        self.assertEqual(config.search.max_iterations, 50)
        self.assertEqual(config.search.max_schedules, 3)
        self.assertEqual(config.monitoring.log_level, "DEBUG")

    def test_env_overrides(self):
        self.write_config({"search": {"max_iterations": 50}})
        os.environ["SCHEDULER_MAX_ITERATIONS"] = "75"
        os.environ["SCHEDULER_STRATEGY"] = "fairness"
        os.environ["SCHEDULER_RANDOM_SEED"] = "12"
        os.environ["SCHEDULER_DISABLE_MONITORING"] = "1"

        config = load_config(self.config_file)

        self.assertEqual(config.search.max_iterations, 75)
        self.assertEqual(config.search.default_strategy, "fairness")
        self.assertEqual(config.search.random_seed, 12)
        self.assertFalse(config.monitoring.enable_monitoring)

    def test_bad_env_value(self):
        os.environ["SCHEDULER_MAX_SCHEDULES"] = "many"
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_bad_json(self):
        with open(self.config_file, 'w') as f:
            f.write("{not json")
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_unknown_key(self):
        self.write_config({"search": {"population_size": 10}})
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_save_and_reload(self):
        manager = ConfigManager(self.config_file)
        manager.config.search.max_schedules = 7
        saved = manager.save_config(os.path.join(self.tmp.name, "nested", "saved.json"))

        reloaded = load_config(saved)
        self.assertEqual(reloaded.search.max_schedules, 7)

    def test_validate_config(self):
        manager = ConfigManager(self.config_file)
        self.assertEqual(manager.validate_config(), [])

        manager.config.search.default_strategy = "cheapest"
        manager.config.search.max_schedules = 0
        manager.config.scoring.weight_overrides = {"balanced": {"speed": 1.0}}
        issues = manager.validate_config()

        self.assertEqual(len(issues), 3)

    def test_partial_weight_override_must_sum_to_one(self):
        config = default_config()
        config.scoring.weight_overrides = {"balanced": {"coverage": 0.9}}

        issues = validate_config(config)

        self.assertEqual(len(issues), 1)
        self.assertIn("sum to 1", issues[0])

    def test_complementary_weight_override_is_valid(self):
        config = default_config()
        config.scoring.weight_overrides = {"balanced": {"coverage": 0.5, "preference": 0.2}}
        self.assertEqual(validate_config(config), [])


class TestDefaults(unittest.TestCase):

    def test_default_config_is_valid(self):
        self.assertEqual(validate_config(default_config()), [])

    def test_generation_options_from_config(self):
        config = default_config()
        config.search.max_iterations = 20
        config.search.default_strategy = "coverage"

        options = GenerationOptions.from_config(config)

        self.assertEqual(options.max_iterations, 20)
        self.assertEqual(options.strategy, "coverage")
        self.assertEqual(options.max_schedules, 3)


if __name__ == '__main__':
    unittest.main()

"""
Tests for the command-line scripts.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch
import sys
import os

# Add project root and scripts directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'scripts'))

import run_generation


class TestRunGeneration(unittest.TestCase):
    """Roster loading failures end with a message and exit code 2."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config_file = os.path.join(self.tmp.name, "missing_config.json")

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, roster):
        argv = ["run_generation.py", roster, "--config", self.config_file]
        output = io.StringIO()
        with patch.object(sys, "argv", argv), \
                patch("run_generation.configure_logging"), \
                redirect_stdout(output):
            with self.assertRaises(SystemExit) as ctx:
                run_generation.main()
        return ctx.exception.code, output.getvalue()

    def test_missing_roster_file(self):
        code, output = self.run_main(os.path.join(self.tmp.name, "nope.json"))

        self.assertEqual(code, 2)
        self.assertIn("Could not read roster", output)

    def test_malformed_roster_json(self):
        roster = os.path.join(self.tmp.name, "roster.json")
        with open(roster, "w") as f:
            f.write("{not json")

        code, output = self.run_main(roster)

        self.assertEqual(code, 2)
        self.assertIn("Could not read roster", output)

    def test_invalid_roster_payload(self):
        roster = os.path.join(self.tmp.name, "roster.json")
        with open(roster, "w") as f:
            f.write('{"period_start": "2024-01-05", "period_end": "2024-01-01", "nurses": []}')

        code, _ = self.run_main(roster)

        self.assertEqual(code, 2)


if __name__ == '__main__':
    unittest.main()

"""
WiFiAnalytics - Configuration and Utility Tests

Unit tests for environment-driven configuration, batching and timing.
"""

import logging
import os
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from wifi_analytics.utils.config import Config, GenerationConfig
from wifi_analytics.utils.logging_config import setup_logging
from wifi_analytics.utils.performance import PerformanceTimer, batched, format_perf_report, get_metrics


class TestConfig(unittest.TestCase):
    """Test cases for Config."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def make_config(self) -> Config:
        return Config(
            data_dir=self.root / "data",
            log_dir=self.root / "data" / "logs",
            export_dir=self.root / "data" / "exports"
        )

    def test_defaults_and_directories(self):
        with patch.dict(os.environ, {}, clear=True):
            config = self.make_config()
        self.assertEqual(config.environment.database, "WIFI_ANALYTICS")
        self.assertEqual(config.environment.external_role, "EXTERNAL_ANALYST")
        self.assertEqual(config.generation.seed, 42)
        self.assertEqual(config.generation.history_days, 30)
        self.assertEqual(config.operational.batch_size, 10000)
        self.assertTrue((self.root / "data" / "exports").is_dir())

    def test_environment_overrides(self):
        overrides = {
            "SNF_DATABASE": "WIFI_DEV",
            "RANDOM_SEED": "7",
            "HISTORY_DAYS": "3",
            "REFERENCE_TIME": "2024-01-17T12:00:00",
            "EXPORT_FORMAT": "jsonl",
        }
        with patch.dict(os.environ, overrides, clear=True):
            config = self.make_config()
        self.assertEqual(config.environment.database, "WIFI_DEV")
        self.assertEqual(config.generation.seed, 7)
        self.assertEqual(config.generation.reference_time, datetime(2024, 1, 17, 12))
        self.assertEqual(config.operational.export_format, "jsonl")

    def test_snowflake_credentials(self):
        credentials = {"SNF_ACCOUNT": "acct", "SNF_USER": "demo", "SNF_PASSWORD": "secret"}
        with patch.dict(os.environ, credentials, clear=True):
            snowflake = self.make_config().get_snowflake_config()
        self.assertEqual(snowflake.account, "acct")
        self.assertEqual(snowflake.schema, "TRANSFORMED")
        self.assertEqual(snowflake.role, "NETWORK_ANALYST")

    def test_missing_credential(self):
        with patch.dict(os.environ, {"SNF_ACCOUNT": "acct", "SNF_USER": "demo"}, clear=True):
            config = self.make_config()
            with self.assertRaises(ValueError):
                config.get_snowflake_config()


class TestGenerationConfig(unittest.TestCase):
    """Test cases for generation windows."""

    def test_history_start_and_firmware_window(self):
        generation = GenerationConfig(history_days=30, reference_time=datetime(2024, 2, 20, 15, 42, 10))
        self.assertEqual(generation.resolve_reference_time(), datetime(2024, 2, 20, 15, 42))
        self.assertEqual(generation.history_start(), datetime(2024, 1, 21))
        self.assertEqual(generation.firmware_issue_window(), (datetime(2024, 2, 4), datetime(2024, 2, 11)))


class TestPerformanceUtilities(unittest.TestCase):
    """Test cases for batching and timing."""

    def test_batched(self):
        self.assertEqual(list(batched(range(5), 2)), [[0, 1], [2, 3], [4]])
        self.assertEqual(list(batched([], 3)), [])

    def test_batched_rejects_non_positive_size(self):
        with self.assertRaises(ValueError):
            list(batched([1], 0))

    def test_timer_records_metrics(self):
        get_metrics().clear()
        with PerformanceTimer("unit_test_stage") as timer:
            sum(range(100))
        self.assertGreaterEqual(timer.elapsed_ms, 0)
        self.assertEqual(get_metrics().get_stats("unit_test_stage")["count"], 1)
        self.assertIn("unit_test_stage", format_perf_report())
        get_metrics().clear()
        self.assertEqual(format_perf_report(), "[PERF] No performance metrics recorded")

    def test_timer_accumulates_rows(self):
        get_metrics().clear()
        for rows in (100, 250):
            with PerformanceTimer("load_stage") as timer:
                timer.rows = rows
        stats = get_metrics().get_stats("load_stage")
        self.assertEqual(stats["count"], 2)
        self.assertEqual(stats["rows"], 350)
        self.assertEqual(get_metrics().get_stats("never_run")["rows"], 0)
        get_metrics().clear()


class TestLogging(unittest.TestCase):
    """Test cases for setup_logging."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        root = logging.getLogger()
        self.saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers:
            handler.close()
        level, handlers = self.saved
        root.handlers[:] = handlers
        root.setLevel(level)
        self.tmp.cleanup()

    def test_file_receives_debug_while_console_stays_at_info(self):
        root = setup_logging(logging.INFO, log_dir=Path(self.tmp.name))
        console, file_handler = root.handlers
        self.assertEqual(console.level, logging.INFO)
        self.assertEqual(file_handler.level, logging.DEBUG)

        logging.getLogger("wifi_analytics.generators").debug("status stream started")
        file_handler.flush()
        content = (Path(self.tmp.name) / "app.log").read_text(encoding="utf-8")
        self.assertIn("status stream started", content)
        self.assertEqual(logging.getLogger("snowflake.connector").level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()

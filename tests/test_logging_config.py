"""
Unit tests for logging helpers.
"""

import logging
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from postman_core.logging_config import LogTimer, get_logger, log_exception, setup_logging
from postman_core.exceptions import PathNotFoundError


class TestLoggingConfig(unittest.TestCase):
    """Test logger naming, timing and setup."""

    def tearDown(self):
        package_logger = logging.getLogger("postman_core")
        for handler in list(package_logger.handlers):
            handler.close()
            package_logger.removeHandler(handler)
        package_logger.propagate = True

    def test_get_logger_names(self):
        self.assertEqual(get_logger("postman_core.graph").name, "postman_core.graph")
        self.assertEqual(get_logger("cli").name, "postman_core.cli")

    def test_log_timer_records_elapsed(self):
        logger = get_logger("timer_test")
        with self.assertLogs(logger, level="INFO") as logs:
            with LogTimer(logger, "Matrix build") as timer:
                pass
        self.assertIsNotNone(timer.elapsed)
        self.assertGreaterEqual(timer.elapsed, 0.0)
        self.assertIn("Matrix build", logs.output[0])

    def test_log_exception(self):
        logger = get_logger("exc_test")
        with self.assertLogs(logger, level="ERROR") as logs:
            log_exception(logger, "Routing failed", PathNotFoundError(1, 2))
        self.assertIn("No path exists from 1 to 2", logs.output[0])

    def test_setup_logging_with_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "nested" / "postman.log"
            logger = setup_logging(level=logging.DEBUG, log_file=log_file, console=False)
            self.assertEqual(logger.name, "postman_core")
            self.assertFalse(logger.propagate)

            get_logger("setup_test").info("patrol started")
            for handler in logger.handlers:
                handler.flush()
            self.assertIn("patrol started", log_file.read_text(encoding="utf-8"))

            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)


if __name__ == "__main__":
    unittest.main()

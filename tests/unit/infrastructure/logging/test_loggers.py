"""Unit tests for logger implementations.

Tests verify that:
1. ConsoleLogger and NullLogger implement LoggerPort
2. ConsoleLogger honours its verbosity level
3. Import progress is counted in the logger statistics
"""

from io import StringIO
import unittest

from rich.console import Console

from define_engine.application.ports.services import LoggerPort
from define_engine.infrastructure.logging import (
    ConsoleLogger,
    LogContext,
    LogLevel,
    NullLogger,
)


class TestLoggerPort(unittest.TestCase):
    """Test that logger implementations comply with LoggerPort protocol."""

    def test_console_logger_implements_loggerport(self):
        """ConsoleLogger should implement LoggerPort protocol."""
        self.assertIsInstance(ConsoleLogger(), LoggerPort)

    def test_null_logger_implements_loggerport(self):
        """NullLogger should implement LoggerPort protocol."""
        self.assertIsInstance(NullLogger(), LoggerPort)

    def test_loggerport_has_import_methods(self):
        """LoggerPort should define the import progress hooks."""
        required_methods = {
            "info",
            "warning",
            "error",
            "log_import_start",
            "log_stage_result",
            "log_import_summary",
        }
        protocol_methods = {
            name for name in dir(LoggerPort) if not name.startswith("_")
        }
        self.assertTrue(required_methods.issubset(protocol_methods))


class TestConsoleLogger(unittest.TestCase):
    """Test ConsoleLogger output and statistics."""

    def setUp(self):
        """Set up a logger writing to an in-memory console."""
        self.buffer = StringIO()
        self.console = Console(file=self.buffer, width=120)
        self.logger = ConsoleLogger(console=self.console, verbosity=LogLevel.DEBUG)

    def output(self) -> str:
        return self.buffer.getvalue()

    def test_initialization(self):
        """Logger should initialize with proper defaults."""
        logger = ConsoleLogger()
        self.assertEqual(logger.verbosity, 0)
        self.assertIsNone(logger._context)
        self.assertEqual(logger.get_stats()["records_read"], 0)

    def test_success_and_warning(self):
        """Status messages are printed with their marker."""
        self.logger.success("Saved")
        self.logger.warning("Careful")

        self.assertIn("✓ Saved", self.output())
        self.assertIn("⚠ Careful", self.output())
        self.assertEqual(self.logger.get_stats()["warnings"], 1)

    def test_error_counts(self):
        """Errors are counted."""
        self.logger.error("Broken")

        self.assertIn("✗ Broken", self.output())
        self.assertEqual(self.logger.get_stats()["errors"], 1)

    def test_verbose_hidden_at_normal_level(self):
        """Verbose and debug output need a higher verbosity."""
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)

        logger.verbose("detail")
        logger.debug("internals")

        self.assertEqual(self.output(), "")

    def test_context_prefix_at_debug_level(self):
        """At debug level messages carry the model and stage."""
        self.logger.set_context(model="SDTM", stage="variables")

        self.logger.info("Merging")

        self.assertIn("[SDTM:variables] Merging", self.output())

    def test_import_progress_is_counted(self):
        """Import hooks feed the statistics."""
        self.logger.log_import_start("SDTM", {"datasets": 1, "variables": 2})
        self.logger.log_stage_result("variables", 1, 1)
        self.logger.log_import_summary({"variables": (1, 1)}, success=True)

        stats = self.logger.get_stats()
        self.assertEqual(stats["records_read"], 3)
        self.assertEqual(stats["entities_created"], 1)
        self.assertEqual(stats["entities_updated"], 1)
        self.assertIn("Importing 3 records into SDTM metadata", self.output())
        self.assertIn("Import complete: 1 created, 1 updated", self.output())

    def test_failed_import_summary(self):
        """A rejected import says the metadata is unchanged."""
        self.logger.log_import_summary({}, success=False)

        self.assertIn("Import rejected; metadata unchanged", self.output())

    def test_reset_stats(self):
        """Statistics can be reset."""
        self.logger.warning("Careful")
        self.logger.reset_stats()

        self.assertEqual(self.logger.get_stats()["warnings"], 0)

    def test_clear_context(self):
        """Clearing the context drops the prefix."""
        self.logger.set_context(model="ADaM")
        self.logger.clear_context()

        self.assertIsNone(self.logger._context)


class TestLogContext(unittest.TestCase):
    """Test LogContext."""

    def test_elapsed_is_non_negative(self):
        """Elapsed time is measured from creation."""
        self.assertGreaterEqual(LogContext(model="SDTM").elapsed_ms(), 0)


class TestNullLogger(unittest.TestCase):
    """Test NullLogger silence."""

    def test_all_methods_are_silent(self):
        """Every method accepts its arguments and returns None."""
        logger = NullLogger()

        self.assertIsNone(logger.info("x"))
        self.assertIsNone(logger.warning("x"))
        self.assertIsNone(logger.log_import_start("SDTM", {"datasets": 1}))
        self.assertIsNone(logger.log_stage_result("datasets", 1, 0))
        self.assertIsNone(logger.log_import_summary({}, success=True))

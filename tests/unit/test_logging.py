"""
Unit Tests for Logging Setup
"""
import logging

from reefmetrics.utils import get_logger, setup_logging
from reefmetrics.utils.logging import StructuredFormatter


def make_record(level=logging.WARNING, msg="Rate limit exceeded") -> logging.LogRecord:
    return logging.LogRecord("reefmetrics.test", level, __file__, 1, msg, None, None)


class TestStructuredFormatter:

    def test_plain_line(self):
        line = StructuredFormatter(use_color=False).format(make_record())

        assert line.startswith("[")
        assert line.endswith("] WARNING  [reefmetrics.test] Rate limit exceeded")
        assert "\033[" not in line

    def test_colour_wraps_line(self):
        line = StructuredFormatter(use_color=True).format(make_record(level=logging.ERROR))

        assert line.startswith(StructuredFormatter.COLORS["ERROR"])
        assert line.endswith(StructuredFormatter.COLORS["RESET"])


class TestSetupLogging:

    def test_replaces_root_handlers(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "reefmetrics.log"
        try:
            setup_logging("debug", str(log_file))

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING

            get_logger("reefmetrics.test").info("Aquarium created")
            root.handlers[1].flush()
            assert "| INFO | reefmetrics.test | Aquarium created" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

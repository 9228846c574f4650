"""
Tests for logging setup.
"""

import logging
import logging.handlers
import sys

from errtree.logging_config import get_logger, setup_logging


def _file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]


class TestSetupLogging:
    """Handlers are added only where asked, and only once."""

    def test_no_handlers_without_log_dir(self):
        logger = setup_logging()
        assert logger.name == "errtree"
        assert _file_handlers(logger) == []

    def test_file_handler_in_log_dir(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path / "logs")

        assert len(_file_handlers(logger)) == 1
        log_files = list((tmp_path / "logs").glob("errtree-*.log"))
        assert len(log_files) == 1
        assert "Log file:" in log_files[0].read_text(encoding="utf-8")

    def test_env_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ERRTREE_LOG_DIR", str(tmp_path))

        setup_logging()

        assert len(list(tmp_path.glob("errtree-*.log"))) == 1

    def test_repeated_setup_does_not_duplicate(self, tmp_path):
        setup_logging(log_dir=tmp_path, console=True)
        logger = setup_logging(log_dir=tmp_path, console=True)

        assert len(_file_handlers(logger)) == 1
        console = [
            h
            for h in logger.handlers
            if not isinstance(h, logging.FileHandler) and getattr(h, "stream", None) is sys.stderr
        ]
        assert len(console) == 1

    def test_records_flushed_immediately(self, tmp_path):
        setup_logging(log_dir=tmp_path, level=logging.DEBUG)

        get_logger("errtree.render").debug("Depth cap reached at depth 3")

        log_file = next(tmp_path.glob("errtree-*.log"))
        assert "errtree.render" in log_file.read_text(encoding="utf-8")

    def test_level(self):
        assert setup_logging(level=logging.WARNING).level == logging.WARNING


class TestGetLogger:
    def test_default_name(self):
        assert get_logger().name == "errtree"

    def test_child_logger(self):
        assert get_logger("errtree.codec").parent is logging.getLogger("errtree")

"""
Logging configuration for errtree.

errtree is a library first: modules only create loggers under "errtree" and
attach no handlers, so a host application's logging setup decides where
records go.

Tools built on errtree (the CLI, excepthook users) call setup_logging() for:
- A daily log file under the log directory: errtree-YYYY-MM-DD.log
- Optionally, records echoed to stderr

Trees are printed to stdout (CLI) or stderr (excepthook). Log records only
share a stream with a tree when console logging is asked for.
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class FlushingFileHandler(logging.handlers.TimedRotatingFileHandler):
    """Midnight-rotated file handler that flushes every record."""

    def emit(self, record):
        super().emit(record)
        self.flush()


def resolve_log_dir(log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Pick the log directory: explicit argument, then ERRTREE_LOG_DIR.

    Returns:
        Directory path, or None when file logging is off
    """
    if log_dir is not None:
        return Path(log_dir)
    env_dir = os.environ.get("ERRTREE_LOG_DIR", "").strip()
    return Path(env_dir) if env_dir else None


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, logging.handlers.TimedRotatingFileHandler) for h in logger.handlers)


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(
        type(h) is logging.StreamHandler and h.stream is sys.stderr
        for h in logger.handlers
    )


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    backup_count: int = 30,  # days of rotated files kept
    console: bool = False,
) -> logging.Logger:
    """
    Configure the "errtree" logger.

    Safe to call repeatedly: handlers that are already attached are not
    added twice, only the level is updated.

    Args:
        log_dir: Directory for daily log files (default: ERRTREE_LOG_DIR;
                 with neither, no file is written)
        level: Logging level (default: INFO)
        backup_count: Number of rotated daily files to keep
        console: Also write records to stderr

    Returns:
        The configured "errtree" logger
    """
    logger = logging.getLogger("errtree")
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    directory = resolve_log_dir(log_dir)
    if directory is not None and not _has_file_handler(logger):
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / f"errtree-{datetime.now():%Y-%m-%d}.log"

        file_handler = FlushingFileHandler(
            log_file,
            when="midnight",
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Log file: {log_file} (level {logging.getLevelName(level)})")

    if console and not _has_stderr_handler(logger):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger


def get_logger(name: str = "errtree") -> logging.Logger:
    """
    Get an errtree logger.

    Args:
        name: Logger name, "errtree" or a dotted child such as "errtree.render"

    Returns:
        Logger instance
    """
    return logging.getLogger(name)

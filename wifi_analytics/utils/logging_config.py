"""
WiFiAnalytics - Logging Configuration

Console and rotating-file logging for the pipeline. Messages carry the
[INFO] / [...] / [OK] / [WARN] / [ERROR] / [DONE] prefixes at the call site.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path("data/logs")
DEFAULT_LOG_FILE = "app.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers held at WARNING
QUIET_LIBRARIES = ("snowflake.connector", "urllib3", "botocore")


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8"
    )
    # the file keeps DEBUG regardless of console verbosity
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Configure root logging for a pipeline run.

    Args:
        level: Console level; the file always receives DEBUG
        log_file: Log file name (default: app.log)
        log_dir: Directory for log files (default: data/logs)

    Returns:
        Root logger instance
    """
    directory = log_dir or DEFAULT_LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(level))
    root_logger.addHandler(_file_handler(directory / (log_file or DEFAULT_LOG_FILE)))

    for library in QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.WARNING)

    return root_logger

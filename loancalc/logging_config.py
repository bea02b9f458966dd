"""
Logging for the loan calculator suite.

Everything goes through the standard library: one console handler on
stdout (coloured when attached to a terminal) and, for test sessions, a
file handler that keeps DEBUG-level browser actions for post-mortems.
"""

import logging
import os
import sys
from typing import Optional

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s"

# Third-party loggers that flood DEBUG output during browser runs
NOISY_LOGGERS = ("asyncio", "urllib3")


class Colors:
    """ANSI escape sequences for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    MAGENTA = '\033[95m'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name by severity."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.RED + Colors.BOLD
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Colour a copy; other handlers share the same record
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{color}{record.levelname:8s}{Colors.RESET}"
        return super().format(tinted)


def _console_handler(use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    if use_colors and sys.stdout.isatty():
        handler.setFormatter(ColoredFormatter(
            f"{Colors.CYAN}%(asctime)s{Colors.RESET} | %(levelname)s | "
            f"{Colors.MAGENTA}%(name)s{Colors.RESET} | %(message)s",
            datefmt='%H:%M:%S'
        ))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logging(
    level: Optional[str] = None,
    use_colors: bool = True,
    log_to_file: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger for a suite run.

    Replaces any handlers already on the root logger, so calling it again
    (e.g. from a test session fixture) starts from a clean slate.

    Args:
        level: Level name; defaults to the LOG_LEVEL environment variable, then INFO
        use_colors: Colour console output when stdout is a terminal
        log_to_file: Also write to ``log_file``
        log_file: Destination for the file handler
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level))
    root.handlers.clear()
    root.addHandler(_console_handler(use_colors))

    if log_to_file and log_file:
        root.addHandler(_file_handler(log_file))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger (pass ``__name__``)."""
    return logging.getLogger(name)


def log_browser_action(
    action: str,
    selector: Optional[str] = None,
    success: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Record one browser interaction as ``✓ click | #selector``.

    Successful actions are DEBUG so they only reach the session log file;
    failures are WARNING.
    """
    logger = logger or logging.getLogger()

    parts = [f"{'✓' if success else '✗'} {action:15s}"]
    if selector:
        parts.append(selector)
    logger.log(logging.DEBUG if success else logging.WARNING, " | ".join(parts))

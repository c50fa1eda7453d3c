"""
utils/logger.py — Project-wide logging configuration
=====================================================
Single `get_logger(name)` factory: every component logs to stdout with the
severity tag colour-coded, so scan events stand out while the camera loop
is running.
"""

import logging
import sys

from config import LOG_LEVEL

_COLOURS = {
    logging.DEBUG:    "\033[36m",   # cyan
    logging.INFO:     "\033[32m",   # green
    logging.WARNING:  "\033[33m",   # yellow
    logging.ERROR:    "\033[31m",   # red
    logging.CRITICAL: "\033[35m",   # magenta
}
_RESET = "\033[0m"

_BASE_FMT = "%(asctime)s  %(levelname)s  %(name)-18s  %(message)s"
_DATE_FMT = "%H:%M:%S"


class _ColourFormatter(logging.Formatter):
    """Wrap the level name in an ANSI colour without touching the record."""

    def format(self, record: logging.LogRecord) -> str:
        colour = _COLOURS.get(record.levelno, _RESET)
        original = record.levelname
        record.levelname = f"{colour}{original:<8}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


# One handler per named logger, however many times get_logger() is called
_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str, level: int = LOG_LEVEL) -> logging.Logger:
    """
    Return (or create) a named logger.

    Parameters
    ----------
    name  : str   Component name shown in log lines (e.g. "tracking.hold").
    level : int   Minimum severity (default `config.LOG_LEVEL`).
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_ColourFormatter(fmt=_BASE_FMT, datefmt=_DATE_FMT))
    logger.addHandler(handler)

    _loggers[name] = logger
    return logger

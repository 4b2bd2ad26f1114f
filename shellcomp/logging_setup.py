"""Logging setup and utilities.

Every module asks for its logger with `get_logger`. The handlers are installed
once by `init_logger` and shared by all the loggers, none of which propagate.
"""

import logging
import os

from .ansi import LogStyles, sgr, should_colorize

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

DEBUG_VARIABLE = "SHELLCOMP_DEBUG"


class LogObjects:
    """Shared logging state."""

    handlers: list[logging.Handler] = []
    debug: bool = bool(os.environ.get(DEBUG_VARIABLE))


def is_debug() -> bool:
    """Return True when verbose logging was asked for."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Turn verbose logging on or off for the loggers created afterwards."""
    LogObjects.debug = value


class ScreenLogFormatter(logging.Formatter):
    """Formatter of the stderr handler, coloring records by level."""

    def __init__(self) -> None:
        super().__init__()
        log_format = r"%(name)20s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        use_color = should_colorize()

        def styled(codes: tuple[str, ...]) -> logging.Formatter:
            if not use_color:
                return logging.Formatter(log_format)
            return logging.Formatter(f"{sgr(*codes)}{log_format}{sgr('0')}")

        self._plain = logging.Formatter(log_format)
        self._formatters = {
            logging.WARNING: styled(LogStyles.WARNING),
            logging.ERROR: styled(LogStyles.ERROR),
            logging.CRITICAL: styled(LogStyles.CRITICAL),
        }

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters.get(record.levelno, self._plain).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Safe to call more than once: previously installed handlers are replaced.

    Args:
        filename: Optional file receiving a timestamped copy of the records
        force_debug: Enable verbose logging, as `--debug` does
    """
    if force_debug:
        set_debug(True)

    for handler in LogObjects.handlers:
        for name in list(logging.root.manager.loggerDict):
            logging.getLogger(name).removeHandler(handler)
    LogObjects.handlers.clear()

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "shellcomp", level: int | None = None) -> logging.Logger:
    """Return a named logger attached to the shared handlers.

    Args:
        name: logger's name
        level: logger's level, derived from the debug flag when not set
    """
    logger = logging.getLogger(name)
    if level is None:
        level = logging.DEBUG if is_debug() else logging.WARNING
    logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger

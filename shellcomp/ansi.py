"""Terminal colors for log records and validation reports.

Colors are only emitted when the target stream is a terminal, unless
NO_COLOR or FORCE_COLOR say otherwise.
"""

import os
import sys
from typing import TextIO

__all__ = [
    "LogStyles",
    "ReportStyles",
    "paint",
    "report_style",
    "sgr",
    "should_colorize",
]

_CSI = "\x1b["
RESET = f"{_CSI}0m"

BOLD = "1"
DIM = "2"
RED = "31"
GREEN = "32"
YELLOW = "33"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell whether `stream` (stderr by default) should receive colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    target = sys.stderr if stream is None else stream
    isatty = getattr(target, "isatty", None)
    return bool(isatty and isatty())


def sgr(*codes: str) -> str:
    """Return the escape sequence selecting `codes`, empty when there are none."""
    return f"{_CSI}{';'.join(codes)}m" if codes else ""


def paint(text: str, codes: tuple[str, ...], stream: TextIO | None = None) -> str:
    """Wrap `text` in `codes` when `stream` accepts colors.

    Args:
        text: The text to color
        codes: SGR codes, e.g. `ReportStyles.ERROR`
        stream: Where the text is going to be written

    Returns:
        The text, colored or untouched
    """
    if not codes or not should_colorize(stream):
        return text
    return f"{sgr(*codes)}{text}{RESET}"


class LogStyles:
    """Styles of the screen log formatter, by level."""

    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)


class ReportStyles:
    """Styles of the `validate` report lines."""

    ERROR = (RED,)
    WARNING = (YELLOW,)
    VALID = (GREEN, BOLD)


def report_style(line: str, valid: bool) -> tuple[str, ...]:
    """Pick the style of a report line."""
    if "ERROR:" in line:
        return ReportStyles.ERROR
    if "WARNING:" in line:
        return ReportStyles.WARNING
    return ReportStyles.VALID if valid else ()

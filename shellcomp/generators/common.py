"""Helpers shared by the shell generators.

Quoting rules differ too much between shells to be shared, each generator
keeps its own; only naming and tree filtering live here.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..models import Command, Option

__all__ = [
    "function_name",
    "non_leaf",
    "sanitize_name",
    "visible",
]

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_name(name: str) -> str:
    """Map a command or program name to a shell-safe identifier.

    E.g., "my-cli" -> "my_cli", "db:migrate" -> "db_migrate"
    """
    return _UNSAFE_CHARS.sub("_", name)


def function_name(*segments: str) -> str:
    """Build the completion function name for a command path.

    Args:
        *segments: program name, then each ancestor command, then the command

    Returns:
        The name shared by the function definition and every call site,
        e.g. ``function_name("mycli", "db", "migrate") == "_mycli_db_migrate"``
    """
    return "_" + "_".join(sanitize_name(s) for s in segments)


def visible(items: Iterable[Command | Option]) -> list:
    """Filter out hidden commands or options, keeping the declared order."""
    return [item for item in items if not item.hidden]


def non_leaf(commands: Iterable[Command]) -> list[Command]:
    """Visible commands worth a dedicated function (or branch)."""
    return [cmd for cmd in visible(commands) if not cmd.is_leaf]

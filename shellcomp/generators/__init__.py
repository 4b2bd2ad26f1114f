"""Shell completion generators.

Provides generator functions for each supported shell, all sharing the same
signature: they take a `Schema` and return the script text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from ..logging_setup import get_logger
from ..models import Schema, UnsupportedShellError
from .bash import generate_bash
from .fish import generate_fish
from .powershell import generate_powershell
from .zsh import generate_zsh

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "GENERATORS",
    "Shell",
    "generate",
    "generate_bash",
    "generate_fish",
    "generate_powershell",
    "generate_zsh",
]


class Shell(StrEnum):
    """Shells a completion script can be generated for."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"


GENERATORS: dict[Shell, Callable[[Schema], str]] = {
    Shell.BASH: generate_bash,
    Shell.ZSH: generate_zsh,
    Shell.FISH: generate_fish,
    Shell.POWERSHELL: generate_powershell,
}


def generate(shell: str, schema: Schema) -> str:
    """Generate the completion script of `schema` for `shell`.

    Args:
        shell: One of the `Shell` values
        schema: The program description

    Returns:
        The script content

    Raises:
        UnsupportedShellError: If `shell` is unknown
        TypeError: If `schema` is not a Schema
    """
    try:
        selected = Shell(shell)
    except ValueError:
        msg = f"Unsupported shell: {shell!r}. Supported: {', '.join(Shell)}"
        raise UnsupportedShellError(msg) from None
    if not isinstance(schema, Schema):
        msg = f"Expected a Schema, got {type(schema).__name__}"
        raise TypeError(msg)

    get_logger("shellcomp.generators").debug(
        "Generating %s completion for %s (%d top-level commands)", selected, schema.name, len(schema.commands)
    )
    return GENERATORS[selected](schema)

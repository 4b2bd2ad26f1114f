"""Fish completion generator.

Fish needs no functions: each `complete` line carries its own condition.
Nested levels are reached through a chain of `__fish_seen_subcommand_from`
tests, one per command of the path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import HintType
from .common import visible

if TYPE_CHECKING:
    from ..models import Command, CompletionHint, Option, Schema

__all__ = ["build_condition", "generate_fish", "quote_fish"]

ROOT_CONDITION = "__fish_use_subcommand"


def quote_fish(text: str) -> str:
    """Single-quote a string for fish, where only `\\` and `'` need escaping."""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_condition(path: tuple[str, ...]) -> str:
    """Build the condition matching the context of a command path.

    E.g., ("utils", "nested") gives
    "__fish_seen_subcommand_from utils; and __fish_seen_subcommand_from nested"
    """
    return "; and ".join(f"__fish_seen_subcommand_from {name}" for name in path)


def _hint_candidates(hint: CompletionHint | None) -> str:
    """Candidates for an option value, empty to keep fish's file completion."""
    if hint is None:
        return ""
    if hint.type == HintType.DIRECTORY:
        return "(__fish_complete_directories)"
    if hint.type == HintType.STATIC:
        return " ".join(hint.values)
    if hint.type in (HintType.COMMAND, HintType.DYNAMIC):
        return f"({hint.command})"
    return ""


def _option_lines(prog: str, opt: Option, condition: str) -> list[str]:
    """Generate the lines of one option.

    Each short alias gets its own line, followed by a line for the long flag.

    Args:
        prog: The program name
        opt: The option
        condition: Condition guarding the option

    Returns:
        The `complete` lines
    """
    value_parts: list[str] = []
    if not opt.is_boolean:
        value_parts.append("-r")
        candidates = " ".join(opt.enum) if opt.enum else _hint_candidates(opt.completion)
        if candidates:
            value_parts.append(f"-a {quote_fish(candidates)}")
    desc_parts = [f"-d {quote_fish(opt.description)}"] if opt.description else []

    base = f"complete -c {prog} -n {quote_fish(condition)}"
    flags = [f"-s {short}" if len(short) == 1 else f"-o {short}" for short in opt.short]
    flags.append(f"-l {opt.name}")
    return [" ".join([base, flag, *desc_parts, *value_parts]) for flag in flags]


def _command_line(prog: str, cmd: Command, condition: str) -> str:
    parts = [f"complete -c {prog} -n {quote_fish(condition)} -a {quote_fish(cmd.name)}"]
    if cmd.description:
        parts.append(f"-d {quote_fish(cmd.description)}")
    return " ".join(parts)


def _command_lines(prog: str, cmd: Command, path: tuple[str, ...]) -> list[str]:
    """Generate the lines of a command context, then those of its subcommands.

    Args:
        prog: The program name
        cmd: The command whose context is generated
        path: Command names from the top level down to `cmd`

    Returns:
        The `complete` lines
    """
    condition = build_condition(path)
    lines = [_command_line(prog, sub, condition) for sub in visible(cmd.subcommands)]
    for opt in visible(cmd.options):
        lines.extend(_option_lines(prog, opt, condition))

    argument = cmd.driving_argument
    if argument is not None and argument.completion is not None and argument.completion.type == HintType.DIRECTORY:
        lines.append(f"complete -c {prog} -n {quote_fish(condition)} -x -a '(__fish_complete_directories)'")

    for sub in visible(cmd.subcommands):
        lines.extend(_command_lines(prog, sub, (*path, sub.name)))
    return lines


def generate_fish(schema: Schema) -> str:
    """Generate fish completion script content.

    Args:
        schema: The program description

    Returns:
        The fish completion script content
    """
    lines: list[str] = []
    if schema.description:
        lines.append(f"# {schema.name} - {' '.join(schema.description.split())}")
    lines.append("# Generated by: shellcomp generate fish")
    lines.append("")

    for cmd in visible(schema.commands):
        lines.append(_command_line(schema.name, cmd, ROOT_CONDITION))
    for opt in visible(schema.global_options):
        lines.extend(_option_lines(schema.name, opt, ROOT_CONDITION))
    for cmd in visible(schema.commands):
        lines.extend(_command_lines(schema.name, cmd, (cmd.name,)))
    return "\n".join(lines) + "\n"

"""Zsh completion generator.

Every function follows the same `_arguments` + `$state` idiom: the first word
is described from a list (`command` / `subcommand` state), the remaining
words (`args` state) are handed to the function of the chosen command, where
`$words[1]` has become that command name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..models import HintType
from .common import function_name, non_leaf, visible

if TYPE_CHECKING:
    from ..models import Argument, Command, CompletionHint, Option, Schema

__all__ = ["escape_description", "escape_value", "format_argument", "format_completion", "format_option", "generate_zsh"]

_SAFE_PATTERN = re.compile(r"[\w.:+@%,/=-]+")


def escape_description(text: str) -> str:
    """Escape text placed inside a single-quoted `_arguments` spec.

    Newlines are flattened, quotes closed and reopened, brackets escaped.
    """
    text = text.replace("\r", "").replace("\n", " ").replace("'", "'\\''")
    return re.sub(r"([\[\]])", r"\\\1", text)


def escape_value(value: str) -> str:
    """Escape a completion candidate: same as descriptions plus whitespace."""
    return re.sub(r"(\s)", r"\\\1", escape_description(value))


def _quote(text: str) -> str:
    return f"'{text}'"


def _case_pattern(name: str) -> str:
    """Return a `case` pattern matching exactly `name`."""
    if _SAFE_PATTERN.fullmatch(name):
        return name
    return _quote(name.replace("'", "'\\''"))


def _describe_entry(cmd: Command) -> str:
    """One `name:description` element of a `_describe` array, colons in the name escaped."""
    name = escape_description(cmd.name).replace(":", "\\:")
    return f"{_quote(name)}:{_quote(escape_description(cmd.description))}"


def format_completion(hint: CompletionHint | None) -> str:
    """Lower a completion hint to an `_arguments` action.

    Args:
        hint: The hint, None meaning files

    Returns:
        The action, to be placed inside a single-quoted spec
    """
    if hint is None:
        return "_files"
    if hint.type == HintType.STATIC:
        return f"({' '.join(escape_value(v) for v in hint.values)})"
    if hint.type == HintType.DIRECTORY:
        return "_directories"
    if hint.type in (HintType.COMMAND, HintType.DYNAMIC):
        command = hint.command.replace("'", "'\\''")
        return f"($({command}))"
    if hint.pattern:
        return f'_files -g "{escape_description(hint.pattern)}"'
    if len(hint.extensions) == 1:
        return f'_files -g "*.{escape_description(hint.extensions[0])}"'
    if hint.extensions:
        return f'_files -g "*.({"|".join(escape_description(e) for e in hint.extensions)})"'
    return "_files"


def _value_suffix(opt: Option) -> str:
    """Value part of an option spec, empty for booleans."""
    if opt.is_boolean:
        return ""
    if opt.enum:
        return f":value:({' '.join(escape_value(v) for v in opt.enum)})"
    if opt.completion is not None:
        return f":value:{format_completion(opt.completion)}"
    return f":{escape_description(opt.type)}:"


def format_option(opt: Option) -> list[str]:
    """Build the `_arguments` specs of an option.

    Options having both short and long flags get one spec per flag, all
    sharing an exclusion group so that using one flag hides the others.

    Args:
        opt: The option

    Returns:
        The quoted specs (none for hidden options)
    """
    if opt.hidden:
        return []
    desc = f"[{escape_description(opt.description)}]"
    suffix = _value_suffix(opt)
    shorts = [f"-{s}" for s in opt.short]
    long_flag = f"--{opt.name}"

    if not shorts:
        return [_quote(f"{long_flag}{desc}{suffix}")]
    exclusion = f"({' '.join([*shorts, long_flag])})"
    return [_quote(f"{exclusion}{flag}{desc}{suffix}") for flag in [*shorts, long_flag]]


def format_argument(arg: Argument, position: int) -> str:
    """Build the positional spec of an argument.

    Args:
        arg: The argument
        position: 1-based position, ignored for variadic arguments

    Returns:
        The quoted spec
    """
    prefix = "*" if arg.variadic else str(position)
    colons = ":" if arg.required else "::"
    message = escape_description(arg.description or arg.name)
    return _quote(f"{prefix}{colons}{message}:{format_completion(arg.completion)}")


def _arguments_call(specs: list[str], continuation: bool) -> list[str]:
    """Format an `_arguments` call, one spec per line."""
    if not specs:
        return []
    lines = ["  _arguments -C \\" if continuation else "  _arguments \\"]
    for idx, spec in enumerate(specs):
        lines.append(f"    {spec}" + (" \\" if idx < len(specs) - 1 else ""))
    return lines


def _state_dispatch(state: str, array: str, prog: str, path: tuple[str, ...], commands: tuple[Command, ...]) -> list[str]:
    """The `case $state` block describing or dispatching to child commands.

    Args:
        state: Name of the state listing the children ("command" or "subcommand")
        array: Name of the local array holding the `_describe` entries
        prog: The program name
        path: Names of the commands leading to the children
        commands: The children

    Returns:
        The generated lines
    """
    lines = [
        "  case $state in",
        f"    {state})",
        f"      _describe '{state}' {array}",
        "      ;;",
        "    args)",
        "      case $words[1] in",
    ]
    for cmd in visible(commands):
        lines.append(f"        {_case_pattern(cmd.name)})")
        if cmd.is_leaf:
            lines.append("          # No additional completion")
        else:
            lines.append(f"          {function_name(prog, *path, cmd.name)}")
        lines.append("          ;;")
    lines.extend(["      esac", "      ;;", "  esac"])
    return lines


def _describe_array(array: str, commands: tuple[Command, ...]) -> list[str]:
    lines = [f"  local -a {array}", f"  {array}=("]
    lines.extend(f"    {_describe_entry(cmd)}" for cmd in visible(commands))
    lines.extend(["  )", ""])
    return lines


def _command_function(prog: str, cmd: Command, parents: tuple[str, ...]) -> list[str]:
    """Generate the function of `cmd`, preceded by the ones of its subcommands.

    Args:
        prog: The program name
        cmd: The command to generate
        parents: Names of the ancestor commands, outermost first

    Returns:
        The generated lines
    """
    path = (*parents, cmd.name)
    lines: list[str] = []
    for sub in non_leaf(cmd.subcommands):
        lines.extend(_command_function(prog, sub, path))

    lines.append(f"{function_name(prog, *path)}() {{")
    specs = [spec for opt in cmd.options for spec in format_option(opt)]
    if cmd.subcommands:
        lines.append("  local context state line")
        lines.extend(_describe_array("subcommands", cmd.subcommands))
        specs.extend(["'1: :->subcommand'", "'*::arg:->args'"])
        lines.extend(_arguments_call(specs, continuation=True))
        lines.append("")
        lines.extend(_state_dispatch("subcommand", "subcommands", prog, path, cmd.subcommands))
    else:
        specs.extend(format_argument(arg, idx) for idx, arg in enumerate(cmd.arguments, start=1))
        lines.extend(_arguments_call(specs, continuation=False) or ["  :"])
    lines.extend(["}", ""])
    return lines


def _main_function(schema: Schema) -> list[str]:
    lines = [
        f"{function_name(schema.name)}() {{",
        "  local context state line",
        "  typeset -A opt_args",
        "",
    ]
    specs = [spec for opt in schema.global_options for spec in format_option(opt)]
    if schema.commands:
        lines.extend(_describe_array("commands", schema.commands))
        specs.extend(["'1: :->command'", "'*::arg:->args'"])
    lines.extend(_arguments_call(specs, continuation=True))
    if schema.commands:
        lines.append("")
        lines.extend(_state_dispatch("command", "commands", schema.name, (), schema.commands))
    lines.extend(["}", ""])
    return lines


def generate_zsh(schema: Schema) -> str:
    """Generate zsh completion script content.

    Args:
        schema: The program description

    Returns:
        The zsh completion script content
    """
    lines = [f"#compdef {schema.name}", ""]
    for cmd in non_leaf(schema.commands):
        lines.extend(_command_function(schema.name, cmd, ()))
    lines.extend(_main_function(schema))
    lines.append(f"compdef {function_name(schema.name)} {schema.name}")
    return "\n".join(lines) + "\n"

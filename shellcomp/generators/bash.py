"""Bash completion generator.

Emits one `_<prog>` entry function registered with ``complete -F`` and one
function per non-leaf command. Functions know the depth at which they live,
which gives the index of the next path segment in ``words``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..models import HintType
from .common import function_name, non_leaf, visible

if TYPE_CHECKING:
    from ..models import Command, CompletionHint, Option, Schema

__all__ = ["generate_bash"]

_FILES_REPLY = 'COMPREPLY=($(compgen -f -- "$cur"))'
_SAFE_PATTERN = re.compile(r"[\w.:+@%,/=-]+")


def _dq(text: str) -> str:
    """Escape text for use inside a double-quoted bash string."""
    return re.sub(r'([\\"$`])', r"\\\1", text)


def _case_pattern(name: str) -> str:
    """Return a `case` pattern matching exactly `name`."""
    if _SAFE_PATTERN.fullmatch(name):
        return name
    return f'"{_dq(name)}"'


def _words_reply(words: str) -> str:
    return f'COMPREPLY=($(compgen -W "{words}" -- "$cur"))'


def _hint_reply(hint: CompletionHint | None) -> str:
    """Lower a completion hint to a COMPREPLY assignment.

    Args:
        hint: The hint, None meaning default file completion

    Returns:
        A single bash statement
    """
    if hint is None:
        return _FILES_REPLY
    if hint.type == HintType.DIRECTORY:
        return 'COMPREPLY=($(compgen -d -- "$cur"))'
    if hint.type == HintType.STATIC:
        return _words_reply(" ".join(_dq(v) for v in hint.values))
    if hint.type in (HintType.COMMAND, HintType.DYNAMIC):
        return _words_reply(f"$({hint.command})")
    return _FILES_REPLY


def _option_words(options: tuple[Option, ...]) -> str:
    """Space separated flags of the visible options."""
    return " ".join(_dq(flag) for opt in visible(options) for flag in opt.flags)


def _value_reply(opt: Option) -> str:
    if opt.enum:
        return _words_reply(" ".join(_dq(v) for v in opt.enum))
    return _hint_reply(opt.completion)


def _prev_case(options: tuple[Option, ...]) -> list[str]:
    """Complete the value of the option typed just before the cursor.

    Args:
        options: The options of the command

    Returns:
        A `case "$prev"` block, or nothing when no option takes a value
    """
    value_options = [opt for opt in visible(options) if not opt.is_boolean]
    if not value_options:
        return []
    lines = ['  case "$prev" in']
    for opt in value_options:
        lines.append(f"    {'|'.join(_case_pattern(flag) for flag in opt.flags)})")
        lines.append(f"      {_value_reply(opt)}")
        lines.append("      return")
        lines.append("      ;;")
    lines.append("  esac")
    lines.append("")
    return lines


def _entry_function(schema: Schema) -> list[str]:
    commands = " ".join(_dq(cmd.name) for cmd in visible(schema.commands))
    lines = [
        f"{function_name(schema.name)}() {{",
        "  local cur prev words cword",
        "  if type _init_completion &>/dev/null; then",
        "    _init_completion || return",
        "  else",
        "    COMPREPLY=()",
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    prev="${COMP_WORDS[COMP_CWORD-1]}"',
        '    words=("${COMP_WORDS[@]}")',
        "    cword=$COMP_CWORD",
        "  fi",
        "",
        f'  local commands="{commands}"',
        f'  local options="{_option_words(schema.global_options)}"',
        "",
        "  if [[ $cword -eq 1 ]]; then",
        '    COMPREPLY=($(compgen -W "$commands $options" -- "$cur"))',
        "    return",
        "  fi",
        "",
        '  case "${words[1]}" in',
    ]
    for cmd in non_leaf(schema.commands):
        lines.append(f"    {_case_pattern(cmd.name)})")
        lines.append(f"      {function_name(schema.name, cmd.name)}")
        lines.append("      ;;")
    lines.extend(["    *)", "      COMPREPLY=()", "      ;;", "  esac", "}", ""])
    return lines


def _subcommand_body(prog: str, cmd: Command, path: tuple[str, ...]) -> list[str]:
    """Body of a command owning subcommands: list them, or delegate deeper."""
    depth = len(path) + 1
    has_options = bool(visible(cmd.options))
    offered = '"$subcommands $options"' if has_options else '"$subcommands"'
    lines = [
        "",
        f"  if [[ $cword -eq {depth} ]]; then",
        f'    COMPREPLY=($(compgen -W {offered} -- "$cur"))',
        "    return",
        "  fi",
        "",
        f'  case "${{words[{depth}]}}" in',
    ]
    for sub in non_leaf(cmd.subcommands):
        lines.append(f"    {_case_pattern(sub.name)})")
        lines.append(f"      {function_name(prog, *path, sub.name)}")
        lines.append("      ;;")
    lines.append("    *)")
    lines.append('      COMPREPLY=($(compgen -W "$options" -- "$cur"))' if has_options else "      COMPREPLY=()")
    lines.extend(["      ;;", "  esac"])
    return lines


def _command_function(prog: str, cmd: Command, parents: tuple[str, ...]) -> list[str]:
    """Generate the function of `cmd`, followed by those of its subcommands.

    Args:
        prog: The program name
        cmd: The command to generate
        parents: Names of the ancestor commands, outermost first

    Returns:
        The generated lines
    """
    path = (*parents, cmd.name)
    lines = [f"{function_name(prog, *path)}() {{"]
    if cmd.subcommands:
        subcommands = " ".join(_dq(sub.name) for sub in visible(cmd.subcommands))
        lines.append(f'  local subcommands="{subcommands}"')
    if visible(cmd.options):
        lines.append(f'  local options="{_option_words(cmd.options)}"')

    argument = cmd.driving_argument
    if cmd.subcommands:
        lines.extend(_subcommand_body(prog, cmd, path))
    elif argument is not None:
        lines.append("")
        lines.extend(_prev_case(cmd.options))
        if visible(cmd.options):
            lines.extend(
                [
                    "  if [[ $cur == -* ]]; then",
                    '    COMPREPLY=($(compgen -W "$options" -- "$cur"))',
                    "    return",
                    "  fi",
                    "",
                ]
            )
        lines.append(f"  {_hint_reply(argument.completion)}")
    else:
        lines.append("")
        lines.extend(_prev_case(cmd.options))
        # an undeclared $options is the caller's list
        lines.append('  COMPREPLY=($(compgen -W "$options" -- "$cur"))' if visible(cmd.options) else "  COMPREPLY=()")
    lines.extend(["}", ""])

    for sub in non_leaf(cmd.subcommands):
        lines.extend(_command_function(prog, sub, path))
    return lines


def generate_bash(schema: Schema) -> str:
    """Generate bash completion script content.

    Args:
        schema: The program description

    Returns:
        The bash completion script content
    """
    title = f"{schema.name} {schema.version}".rstrip()
    lines = [
        f"# Bash completion for {title}",
        "# Generated by: shellcomp generate bash",
        "",
    ]
    lines.extend(_entry_function(schema))
    for cmd in non_leaf(schema.commands):
        lines.extend(_command_function(schema.name, cmd, ()))
    lines.append(f"complete -F {function_name(schema.name)} {schema.name}")
    return "\n".join(lines) + "\n"

"""PowerShell completion generator.

A single `Register-ArgumentCompleter` script block rebuilds the typed command
path from the AST (`prog;cmd;sub`) and switches on it. Filtering on the word
being completed and sorting happen once, after the switch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import HintType
from .common import visible

if TYPE_CHECKING:
    from ..models import Argument, Command, Option, Schema

__all__ = ["generate_powershell", "quote_ps"]

_PREAMBLE = [
    "using namespace System.Management.Automation",
    "using namespace System.Management.Automation.Language",
    "",
]

_PATH_RECONSTRUCTION = [
    "    param($wordToComplete, $commandAst, $cursorPosition)",
    "",
    "    $commandElements = $commandAst.CommandElements",
    "    $command = @(",
    "        {prog}",
    "        for ($i = 1; $i -lt $commandElements.Count; $i++) {{",
    "            $element = $commandElements[$i]",
    "            if ($element -isnot [StringConstantExpressionAst] -or",
    "                $element.StringConstantType -ne [StringConstantType]::BareWord -or",
    "                $element.Value.StartsWith('-') -or",
    "                $element.Value -eq $wordToComplete) {{",
    "                break",
    "            }}",
    "            $element.Value",
    "        }}",
    "    ) -join ';'",
    "",
    "    $completions = @(switch ($command) {{",
]

_TRAILER = [
    "    })",
    "",
    '    $completions.Where{ $_.CompletionText -like "$wordToComplete*" } |',
    "        Sort-Object -Property ListItemText",
    "}",
]

# Argument hints lowered to an inline listing: only files and directories
_LISTING_SWITCHES = {
    HintType.FILE: ("File", "-File"),
    HintType.DIRECTORY: ("Directory", "-Directory"),
}


def quote_ps(text: str) -> str:
    """Single-quote a string for PowerShell, doubling embedded quotes."""
    return "'" + text.replace("'", "''") + "'"


def _result(text: str, kind: str, tooltip: str) -> str:
    """A `CompletionResult` constructor call.

    PowerShell rejects empty tooltips, the completion text is used instead.
    """
    return (
        f"            [CompletionResult]::new({quote_ps(text)}, {quote_ps(text)}, "
        f"[CompletionResultType]::{kind}, {quote_ps(' '.join(tooltip.split()) or text)})"
    )


def _option_results(opt: Option) -> list[str]:
    return [_result(flag, "ParameterName", opt.description) for flag in opt.flags]


def _argument_listing(argument: Argument | None) -> list[str]:
    """Inline listing for file or directory hints, nothing for other hints."""
    if argument is None or argument.completion is None or argument.completion.type not in _LISTING_SWITCHES:
        return []
    label, switch = _LISTING_SWITCHES[argument.completion.type]
    return [
        f"            # {label} completion",
        f"            Get-ChildItem -Path . {switch} | ForEach-Object {{",
        "                [CompletionResult]::new($_.Name, $_.Name, [CompletionResultType]::ParameterValue, $_.Name)",
        "            }",
    ]


def _branch(path: tuple[str, ...], body: list[str]) -> list[str]:
    return [f"        {quote_ps(';'.join(path))} {{", *body, "            break", "        }"]


def _command_branches(cmd: Command, path: tuple[str, ...]) -> list[str]:
    """Generate the branch of a command, then those of its subcommands.

    Args:
        cmd: The command
        path: Program name and command names down to `cmd`

    Returns:
        The switch branches, none for leaf commands
    """
    if cmd.is_leaf:
        return []
    body = [_result(sub.name, "ParameterValue", sub.description) for sub in visible(cmd.subcommands)]
    for opt in visible(cmd.options):
        body.extend(_option_results(opt))
    body.extend(_argument_listing(cmd.driving_argument))

    lines = _branch(path, body)
    for sub in visible(cmd.subcommands):
        lines.extend(_command_branches(sub, (*path, sub.name)))
    return lines


def generate_powershell(schema: Schema) -> str:
    """Generate PowerShell completion script content.

    Args:
        schema: The program description

    Returns:
        The PowerShell completion script content
    """
    title = f"{schema.name} {schema.version}".rstrip()
    lines = [
        f"# PowerShell completion for {title}",
        "# Generated by: shellcomp generate powershell",
        "",
        *_PREAMBLE,
        f"Register-ArgumentCompleter -Native -CommandName {quote_ps(schema.name)} -ScriptBlock {{",
    ]
    lines.extend(line.format(prog=quote_ps(schema.name)) for line in _PATH_RECONSTRUCTION)

    root = [_result(cmd.name, "ParameterValue", cmd.description) for cmd in visible(schema.commands)]
    for opt in visible(schema.global_options):
        root.extend(_option_results(opt))
    lines.extend(_branch((schema.name,), root))
    for cmd in visible(schema.commands):
        lines.extend(_command_branches(cmd, (schema.name, cmd.name)))

    lines.extend(_TRAILER)
    return "\n".join(lines) + "\n"

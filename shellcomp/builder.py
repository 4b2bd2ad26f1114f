"""Schema extraction from argparse parsers.

Walks an `argparse.ArgumentParser` tree (sub-parsers included) and produces
the equivalent `Schema`. Names are dasherized, descriptions flattened to one
line, and boolean flags get their `no-<name>` / `skip-<name>` siblings.
"""

from __future__ import annotations

import argparse
import re

from .logging_setup import get_logger
from .models import Argument, Command, CompletionHint, HintType, Option, Schema

__all__ = [
    "build_schema",
    "dasherize",
    "normalize_description",
    "normalize_name",
    "resolve_completion",
]

_DIRECTORY_NAME = re.compile(r"(^dir$|_dir(ectory)?$|^folder$|_folder$)")
_FILE_NAME = re.compile(r"(^file$|_file$)")
_VARIADIC_NARGS = ("*", "+", argparse.REMAINDER)
_OPTIONAL_NARGS = ("?", "*")
_NEGATION_PREFIXES = ("no-", "skip-")


def dasherize(text: str) -> str:
    """Convert underscores to dashes: "skip_bundle" -> "skip-bundle"."""
    return text.replace("_", "-")


def normalize_name(name: str) -> str:
    """Normalize a command, option or argument name.

    `_run` stands for `run` (a name often unavailable to the host framework),
    anything else is dasherized.
    """
    if name == "_run":
        return "run"
    return dasherize(name)


def normalize_description(description: str | None) -> str:
    """Flatten a description to a single line."""
    if not description or description == argparse.SUPPRESS:
        return ""
    return " ".join(description.split())


def resolve_completion(name: str) -> CompletionHint | None:
    """Guess a completion hint from a parameter name.

    E.g., "config_file" -> file, "output_dir" -> directory, "count" -> None
    """
    if _FILE_NAME.search(name):
        return CompletionHint(type=HintType.FILE)
    if _DIRECTORY_NAME.search(name):
        return CompletionHint(type=HintType.DIRECTORY)
    return None


def _option_type(action: argparse.Action) -> str:
    if action.nargs == 0:
        return "boolean"
    if isinstance(action, (argparse._AppendAction, argparse._ExtendAction)):  # noqa: SLF001
        return "array"
    if action.nargs in _VARIADIC_NARGS or (isinstance(action.nargs, int) and action.nargs > 1):
        return "array"
    if action.type in (int, float):
        return "float"
    return "string"


def _build_options(parser: argparse.ArgumentParser) -> list[Option]:
    """Extract the options of a parser.

    Args:
        parser: The parser

    Returns:
        The options, each boolean followed by its synthetic siblings
    """
    log = get_logger("shellcomp.builder")
    taken = {normalize_name(s[2:]) for action in parser._actions for s in action.option_strings if s.startswith("--")}  # noqa: SLF001
    options: list[Option] = []
    for action in parser._actions:  # noqa: SLF001
        if not action.option_strings or isinstance(action, (argparse._HelpAction, argparse._VersionAction)):  # noqa: SLF001
            continue
        longs = [s for s in action.option_strings if s.startswith("--")]
        if not longs:
            log.debug("Skipping %s: no long flag", "/".join(action.option_strings))
            continue

        name = normalize_name(longs[0][2:])
        option_type = _option_type(action)
        hidden = action.help == argparse.SUPPRESS
        repeatable = isinstance(action, (argparse._AppendAction, argparse._ExtendAction, argparse._CountAction))  # noqa: SLF001
        options.append(
            Option(
                name=name,
                short=tuple(dasherize(s.lstrip("-")) for s in action.option_strings if not s.startswith("--")),
                type=option_type,
                description=normalize_description(action.help),
                required=action.required,
                repeatable=repeatable,
                default=None if action.default == argparse.SUPPRESS else action.default,
                enum=tuple(str(c) for c in action.choices or ()),
                hidden=hidden,
                completion=resolve_completion(action.dest),
            )
        )
        # no-/skip- options are negations themselves
        if option_type == "boolean" and not name.startswith(_NEGATION_PREFIXES):
            for prefix in _NEGATION_PREFIXES:
                synthetic = f"{prefix}{name}"
                if synthetic not in taken:
                    options.append(Option(name=synthetic, type="boolean", repeatable=repeatable, hidden=hidden))
    return options


def _build_arguments(parser: argparse.ArgumentParser) -> list[Argument]:
    arguments: list[Argument] = []
    for action in parser._actions:  # noqa: SLF001
        if action.option_strings or isinstance(action, argparse._SubParsersAction):  # noqa: SLF001
            continue
        if action.choices:
            completion: CompletionHint | None = CompletionHint(type=HintType.STATIC, values=tuple(str(c) for c in action.choices))
        else:
            completion = resolve_completion(action.dest)
        arguments.append(
            Argument(
                name=normalize_name(action.dest),
                description=normalize_description(action.help) or action.dest.replace("_", " ").capitalize(),
                required=action.nargs not in _OPTIONAL_NARGS,
                variadic=action.nargs in _VARIADIC_NARGS,
                completion=completion,
            )
        )
    return arguments


def _build_commands(parser: argparse.ArgumentParser) -> list[Command]:
    """Extract the commands of the sub-parsers of `parser`, recursively.

    Args:
        parser: The parser

    Returns:
        The commands, aliases excluded
    """
    commands: list[Command] = []
    for action in parser._actions:  # noqa: SLF001
        if not isinstance(action, argparse._SubParsersAction):  # noqa: SLF001
            continue
        helps = {choice.dest: choice.help for choice in action._choices_actions}  # noqa: SLF001
        seen: set[int] = set()
        for name, subparser in action.choices.items():
            if id(subparser) in seen:
                continue
            seen.add(id(subparser))
            help_text = helps.get(name)
            commands.append(
                Command(
                    name=normalize_name(name),
                    description=normalize_description(help_text or subparser.description),
                    hidden=help_text == argparse.SUPPRESS,
                    options=tuple(_build_options(subparser)),
                    arguments=tuple(_build_arguments(subparser)),
                    subcommands=tuple(_build_commands(subparser)),
                )
            )
    return commands


def build_schema(
    parser: argparse.ArgumentParser,
    name: str | None = None,
    description: str | None = None,
    version: str | None = None,
) -> Schema:
    """Build the schema of a program from its argument parser.

    Options of the top-level parser become global options.

    Args:
        parser: The top-level parser
        name: Program name, defaults to the parser's `prog`
        description: Program description, defaults to the parser's
        version: Program version, defaults to the one of a `version` action

    Returns:
        The schema
    """
    if version is None:
        version = next(
            (str(action.version) for action in parser._actions if isinstance(action, argparse._VersionAction) and action.version),  # noqa: SLF001
            "",
        )
    return Schema(
        name=normalize_name(name or parser.prog),
        description=normalize_description(description if description is not None else parser.description),
        version=version,
        commands=tuple(_build_commands(parser)),
        global_options=tuple(_build_options(parser)),
    )

"""Completion schema: the tree handed to every shell backend.

A schema describes a command-line program: its commands (possibly nested),
options and positional arguments, plus hints telling the shells how to
complete option and argument *values*.

Nodes are frozen dataclasses holding tuples, so a schema can be shared freely
between generators without any of them being able to alter it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any

from .constants import DEFAULT_OPTION_TYPE

__all__ = [
    "Argument",
    "Command",
    "CompletionHint",
    "ExitCode",
    "HintType",
    "Option",
    "Schema",
    "SchemaError",
    "ShellCompError",
    "UnsupportedShellError",
]


class ShellCompError(Exception):
    """Base class for shellcomp errors."""


class SchemaError(ShellCompError, ValueError):
    """Raised for a structurally invalid schema.

    Attributes:
        errors: every problem found, one message per entry
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class UnsupportedShellError(ShellCompError, ValueError):
    """Raised when no generator exists for the requested shell."""


class ExitCode(IntEnum):
    """Standard exit codes for the shellcomp CLI."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command provided, invalid arguments
    SCHEMA_ERROR = 2  # Schema could not be loaded or is invalid
    IO_ERROR = 3  # Completion script could not be written


class HintType(StrEnum):
    """How the value of an option or argument gets completed."""

    FILE = "file"
    DIRECTORY = "directory"
    STATIC = "static"
    COMMAND = "command"
    DYNAMIC = "dynamic"


def _require_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name:
        msg = f"{kind} name must be a non-empty string, got {name!r}"
        raise SchemaError(msg)


def _as_tuple(value: Any) -> tuple:
    """Accept a scalar, a list or nothing where a sequence is expected."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class CompletionHint:
    """Value completion hint.

    `values` is used by static hints, `command` by command and dynamic hints,
    `pattern` and `extensions` refine file hints.
    """

    type: HintType
    values: tuple[str, ...] = ()
    command: str = ""
    pattern: str = ""
    extensions: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionHint:
        """Build a hint from its document form."""
        return cls(
            type=HintType(data["type"]),
            values=tuple(str(v) for v in _as_tuple(data.get("values"))),
            command=data.get("command") or "",
            pattern=data.get("pattern") or "",
            extensions=tuple(str(e).lstrip(".") for e in _as_tuple(data.get("extensions"))),
        )


@dataclass(frozen=True)
class Option:  # pylint: disable=too-many-instance-attributes
    """A flag, `name` being the long form without its leading dashes."""

    name: str
    short: tuple[str, ...] = ()
    type: str = DEFAULT_OPTION_TYPE
    description: str = ""
    required: bool = False
    repeatable: bool = False
    default: Any = None
    enum: tuple[str, ...] = ()
    hidden: bool = False
    completion: CompletionHint | None = None

    def __post_init__(self) -> None:
        _require_name("Option", self.name)

    @property
    def is_boolean(self) -> bool:
        """Boolean options never take a value."""
        return self.type == "boolean"

    @property
    def flags(self) -> list[str]:
        """All the flags of the option, short ones first."""
        return [f"-{s}" for s in self.short] + [f"--{self.name}"]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Option:
        """Build an option from its document form."""
        completion = data.get("completion")
        return cls(
            name=data["name"],
            short=tuple(str(s).lstrip("-") for s in _as_tuple(data.get("short"))),
            type=data.get("type") or DEFAULT_OPTION_TYPE,
            description=data.get("description") or "",
            required=bool(data.get("required", False)),
            repeatable=bool(data.get("repeatable", False)),
            default=data.get("default"),
            enum=tuple(str(v) for v in _as_tuple(data.get("enum"))),
            hidden=bool(data.get("hidden", False)),
            completion=CompletionHint.from_dict(completion) if completion else None,
        )


@dataclass(frozen=True)
class Argument:
    """A positional parameter."""

    name: str
    description: str = ""
    required: bool = True
    variadic: bool = False
    completion: CompletionHint | None = None

    def __post_init__(self) -> None:
        _require_name("Argument", self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Argument:
        """Build an argument from its document form."""
        completion = data.get("completion")
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            required=bool(data.get("required", True)),
            variadic=bool(data.get("variadic", False)),
            completion=CompletionHint.from_dict(completion) if completion else None,
        )


@dataclass(frozen=True)
class Command:
    """A command, possibly holding nested subcommands."""

    name: str
    description: str = ""
    hidden: bool = False
    options: tuple[Option, ...] = ()
    arguments: tuple[Argument, ...] = ()
    subcommands: tuple[Command, ...] = ()

    def __post_init__(self) -> None:
        _require_name("Command", self.name)

    @property
    def is_leaf(self) -> bool:
        """True when nothing is left to complete after the command name."""
        return not (self.subcommands or self.options or self.arguments)

    @property
    def driving_argument(self) -> Argument | None:
        """The argument used for value completion: only the first one counts."""
        return self.arguments[0] if self.arguments else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Command:
        """Build a command (and its subtree) from its document form."""
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            hidden=bool(data.get("hidden", False)),
            options=tuple(Option.from_dict(o) for o in data.get("options") or ()),
            arguments=tuple(Argument.from_dict(a) for a in data.get("arguments") or ()),
            subcommands=tuple(cls.from_dict(c) for c in data.get("subcommands") or ()),
        )


@dataclass(frozen=True)
class Schema:
    """Root of the tree: the program itself."""

    name: str
    description: str = ""
    version: str = ""
    commands: tuple[Command, ...] = ()
    global_options: tuple[Option, ...] = field(default=())

    def __post_init__(self) -> None:
        _require_name("Program", self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schema:
        """Build a schema from its document form (``globalOptions`` key for global options)."""
        version = data.get("version")
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            version="" if version is None else str(version),
            commands=tuple(Command.from_dict(c) for c in data.get("commands") or ()),
            global_options=tuple(Option.from_dict(o) for o in data.get("globalOptions") or ()),
        )

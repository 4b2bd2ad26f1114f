"""Schema document validation.

Provides declarative field definitions (SchemaField, SchemaItems) describing
the document form of a completion schema (as read from JSON or TOML), and a
validator checking types, required fields, closed value sets, sibling name
uniqueness and unknown keys (with fuzzy matching for typo detection).

Used by:
- the loader, before turning a document into a `Schema`
- 'shellcomp validate' CLI
"""

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .constants import HINT_TYPES

__all__ = [
    "SCHEMA_FIELDS",
    "SchemaField",
    "SchemaItems",
    "SchemaValidator",
    "format_schema_error",
    "validate_document",
]


@dataclass
class SchemaField:  # pylint: disable=too-many-instance-attributes
    """Describes an expected field of a schema document.

    Attributes:
        name: The key name
        field_type: Expected type (str, bool, list, dict) or tuple of types for union, object for anything
        required: Whether the field is required
        description: Human-readable description for error messages
        choices: List of valid values for enum-like fields
        validator: Custom validator function returning list of error messages
        children: Schema of the value when field_type is dict
        items: Schema of every element when field_type is a list of dicts
        unique_names: For lists of dicts, whether element names must be unique
    """

    name: str
    field_type: type | tuple[type, ...] = str
    required: bool = False
    description: str = ""
    choices: tuple | None = None
    validator: Callable[[Any], list[str]] | None = None
    children: "SchemaItems | None" = None
    items: "SchemaItems | None" = None
    unique_names: bool = False

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'str', 'str or list')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class SchemaItems(list):
    """The SchemaField items describing one kind of node."""

    def __init__(self, *args: SchemaField) -> None:
        super().__init__(args)


def _non_empty(value: Any) -> list[str]:
    if isinstance(value, str) and not value.strip():
        return ["Must not be empty"]
    return []


def _unprefixed_aliases(value: Any) -> list[str]:
    aliases = [value] if isinstance(value, str) else value
    return [f"Alias {alias!r} must be a single token" for alias in aliases if not isinstance(alias, str) or not alias or " " in alias]


def _string_list(value: Any) -> list[str]:
    return [f"Expected a list of strings, found {item!r}" for item in value if not isinstance(item, (str, int, float))]


HINT_FIELDS = SchemaItems(
    SchemaField("type", str, required=True, choices=HINT_TYPES, description="Hint kind"),
    SchemaField("values", list, validator=_string_list, description="Candidates of a static hint"),
    SchemaField("command", str, validator=_non_empty, description="Command producing candidates"),
    SchemaField("pattern", str, description="Glob for file hints"),
    SchemaField("extensions", list, validator=_string_list, description="File extensions for file hints"),
)

OPTION_FIELDS = SchemaItems(
    SchemaField("name", str, required=True, validator=_non_empty, description="Long flag without dashes"),
    SchemaField("short", (str, list), validator=_unprefixed_aliases, description="Short aliases"),
    SchemaField("type", str, description="Value type"),
    SchemaField("description", str),
    SchemaField("required", bool),
    SchemaField("repeatable", bool),
    SchemaField("default", object),
    SchemaField("enum", list, validator=_string_list, description="Closed value set"),
    SchemaField("hidden", bool),
    SchemaField("completion", dict, children=HINT_FIELDS),
)

ARGUMENT_FIELDS = SchemaItems(
    SchemaField("name", str, required=True, validator=_non_empty),
    SchemaField("description", str),
    SchemaField("required", bool),
    SchemaField("variadic", bool),
    SchemaField("completion", dict, children=HINT_FIELDS),
)

COMMAND_FIELDS = SchemaItems(
    SchemaField("name", str, required=True, validator=_non_empty),
    SchemaField("description", str),
    SchemaField("hidden", bool),
    SchemaField("options", list, items=OPTION_FIELDS, unique_names=True),
    SchemaField("arguments", list, items=ARGUMENT_FIELDS),
)
# Commands nest to any depth
COMMAND_FIELDS.append(SchemaField("subcommands", list, items=COMMAND_FIELDS, unique_names=True))

SCHEMA_FIELDS = SchemaItems(
    SchemaField("name", str, required=True, validator=_non_empty, description="Program name"),
    SchemaField("description", str),
    SchemaField("version", (str, int, float)),
    SchemaField("commands", list, items=COMMAND_FIELDS, unique_names=True),
    SchemaField("globalOptions", list, items=OPTION_FIELDS, unique_names=True),
)


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Find a similar key using fuzzy matching.

    Args:
        unknown_key: The unknown key to find a match for
        known_keys: List of valid keys to search

    Returns:
        The closest matching key, or None if no close match found
    """
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


def format_schema_error(location: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a schema error message.

    Args:
        location: Path of the node holding the field (e.g. "mycli.commands[new]")
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{location}] Error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class SchemaValidator:
    """Validates one node of a schema document against its field definitions."""

    def __init__(self, document: dict, location: str, logger: logging.Logger, warnings: list[str] | None = None) -> None:
        """Initialize the validator.

        Args:
            document: The node to validate
            location: Path of the node, for error messages
            logger: Logger instance for warnings
            warnings: List collecting the warnings of the whole document
        """
        self.document = document
        self.location = location
        self.log = logger
        self.warnings: list[str] = [] if warnings is None else warnings

    def validate(self, fields: SchemaItems) -> list[str]:
        """Validate the node and its descendants.

        Args:
            fields: Definitions of the node fields

        Returns:
            List of error messages (empty if validation passed)
        """
        errors: list[str] = []
        for field_def in fields:
            value = self.document.get(field_def.name)

            if value is None:
                if field_def.required:
                    errors.append(format_schema_error(self.location, field_def.name, "Missing required field"))
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.choices is not None and value not in field_def.choices:
                choices_str = ", ".join(repr(c) for c in field_def.choices)
                errors.append(
                    format_schema_error(self.location, field_def.name, f"Invalid value {value!r}", f"Valid options: {choices_str}")
                )
                continue

            if field_def.validator:
                errors.extend(format_schema_error(self.location, field_def.name, msg) for msg in field_def.validator(value))

            if field_def.children is not None:
                errors.extend(self._validate_child(f"{self.location}.{field_def.name}", value, field_def.children))
            if field_def.items is not None:
                errors.extend(self._validate_items(field_def, field_def.items, value))

        if fields is HINT_FIELDS:
            errors.extend(self._check_hint())
        return errors

    def _check_type(self, field_def: SchemaField, value: Any) -> str | None:
        """Check if value matches expected type.

        Args:
            field_def: Field definition
            value: Value to check

        Returns:
            Error message if type mismatch, None otherwise
        """
        expected = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if object in expected:
            return None
        # bool is a subclass of int, only accept it where explicitly expected
        if isinstance(value, bool) and bool not in expected:
            matches = False
        else:
            matches = isinstance(value, expected)
        if matches:
            return None
        suggestion = "Use true/false (without quotes)" if bool in expected else ""
        return format_schema_error(
            self.location,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
            suggestion,
        )

    def _check_hint(self) -> list[str]:
        """Check the fields a completion hint needs for its kind."""
        hint_type = self.document.get("type")
        if hint_type == "static" and not self.document.get("values"):
            return [format_schema_error(self.location, "values", "Static hints need a list of values")]
        if hint_type in ("command", "dynamic") and not self.document.get("command"):
            return [format_schema_error(self.location, "command", f"{hint_type.capitalize()} hints need a command")]
        return []

    def _validate_child(self, location: str, value: dict, fields: SchemaItems) -> list[str]:
        child = SchemaValidator(value, location, self.log, self.warnings)
        errors = child.validate(fields)
        child.warn_unknown_keys(fields)
        return errors

    def _validate_items(self, field_def: SchemaField, items: SchemaItems, value: list) -> list[str]:
        """Validate every element of a list of nodes.

        Args:
            field_def: Field definition of the list
            items: Schema of every element
            value: The list

        Returns:
            List of all validation errors
        """
        errors: list[str] = []
        seen: set[str] = set()
        for idx, item in enumerate(value):
            if not isinstance(item, dict):
                errors.append(format_schema_error(self.location, f"{field_def.name}[{idx}]", f"Expected dict, got {type(item).__name__}"))
                continue
            name = item.get("name")
            label = name if isinstance(name, str) and name else str(idx)
            errors.extend(self._validate_child(f"{self.location}.{field_def.name}[{label}]", item, items))
            if field_def.unique_names and isinstance(name, str):
                if name in seen:
                    errors.append(format_schema_error(self.location, field_def.name, f"Duplicate name {name!r}"))
                seen.add(name)
        return errors

    def warn_unknown_keys(self, fields: SchemaItems) -> list[str]:
        """Log warnings for unknown keys.

        Args:
            fields: Definitions of the node fields

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = [f.name for f in fields]

        for key in self.document:
            if key in known_keys:
                continue

            similar = _find_similar_key(key, known_keys)
            if similar:
                msg = f"[{self.location}] Unknown key '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.location}] Unknown key '{key}' - will be ignored"

            self.log.warning(msg)
            warnings.append(msg)

        self.warnings.extend(warnings)
        return warnings


def validate_document(document: Any, logger: logging.Logger) -> tuple[list[str], list[str]]:
    """Validate a whole schema document.

    Args:
        document: The parsed JSON/TOML document
        logger: Logger receiving the unknown key warnings

    Returns:
        Tuple of (errors, warnings)
    """
    if not isinstance(document, dict):
        return ([format_schema_error("schema", "<root>", f"Expected dict, got {type(document).__name__}")], [])
    name = document.get("name")
    validator = SchemaValidator(document, name if isinstance(name, str) and name else "schema", logger)
    errors = validator.validate(SCHEMA_FIELDS)
    validator.warn_unknown_keys(SCHEMA_FIELDS)
    return (errors, validator.warnings)

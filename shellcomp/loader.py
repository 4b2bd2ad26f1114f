"""Schema loading utilities.

This module turns a schema source into a `Schema`. Supported sources:
- JSON documents (``*.json``)
- TOML documents (any other file, ``*.toml`` preferred)
- ``module:attribute`` references to an `argparse.ArgumentParser`, or to a
  callable returning one
"""

from __future__ import annotations

import argparse
import importlib
import json
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from .builder import build_schema
from .models import Schema, SchemaError, ShellCompError
from .validation import validate_document

if TYPE_CHECKING:
    import logging

__all__ = ["SchemaLoader"]


class SchemaLoader:
    """Loads and validates schemas from files or Python modules."""

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the schema loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log
        self.warnings: list[str] = []

    def load(self, source: str) -> Schema:
        """Load a schema from `source`.

        Args:
            source: Path to a JSON/TOML document, or ``module:attribute``

        Returns:
            The schema

        Raises:
            SchemaError: If the document is not a valid schema
            ShellCompError: If the source cannot be read
        """
        path = Path(os.path.expandvars(source)).expanduser()
        if not path.exists() and ":" in source:
            return self.load_parser(source)

        document = self.load_document(path)
        errors, self.warnings = validate_document(document, self.log)
        if errors:
            for error in errors:
                self.log.error(error)
            msg = f"Invalid schema in {path}: {len(errors)} error(s)"
            raise SchemaError(msg, errors)
        return Schema.from_dict(document)

    def load_document(self, fname: Path) -> dict[str, Any]:
        """Load a single schema document.

        Args:
            fname: Path to the document

        Returns:
            The document, not validated yet

        Raises:
            ShellCompError: If file not found or has syntax errors
        """
        if not fname.is_file():
            self.log.critical("Schema file not found: %s", fname)
            msg = f"Schema file not found: {fname}"
            raise ShellCompError(msg)

        self.log.info("Loading %s", fname)
        if fname.suffix == ".json":
            with fname.open(encoding="utf-8") as f:
                try:
                    return cast("dict[str, Any]", json.load(f))
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    self.log.critical("Problem reading %s: %s", fname, e)
                    msg = f"Problem reading {fname}: {e}"
                    raise ShellCompError(msg) from e

        with fname.open("rb") as f:
            try:
                return tomllib.load(f)
            except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
                self.log.critical("Problem reading %s: %s", fname, e)
                msg = f"Problem reading {fname}: {e}"
                raise ShellCompError(msg) from e

    def load_parser(self, reference: str) -> Schema:
        """Build a schema from an argument parser found in a module.

        Args:
            reference: ``module:attribute``, the attribute being a parser or a
                       callable taking no argument and returning one

        Returns:
            The schema

        Raises:
            ShellCompError: If the reference cannot be resolved to a parser
        """
        module_name, _, attribute = reference.partition(":")
        try:
            module = importlib.import_module(module_name)
            target = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            self.log.critical("Cannot resolve %s: %s", reference, e)
            msg = f"Cannot resolve {reference}: {e}"
            raise ShellCompError(msg) from e

        if not isinstance(target, argparse.ArgumentParser) and callable(target):
            target = target()
        if not isinstance(target, argparse.ArgumentParser):
            msg = f"{reference} is not an argparse.ArgumentParser"
            self.log.critical(msg)
            raise ShellCompError(msg)

        self.log.info("Building schema from parser %s", reference)
        return build_schema(target)

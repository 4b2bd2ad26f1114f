"""Tests for schema extraction from argparse parsers."""

from __future__ import annotations

import argparse

import pytest

from shellcomp.builder import build_schema, dasherize, normalize_description, normalize_name, resolve_completion
from shellcomp.models import HintType, Schema


def _sample_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mycli", description="This is\n    mycli")
    parser.add_argument("--version", action="version", version="1.2.3")
    parser.add_argument("-v", "--very_verbose", action="store_true", help="Enable very verbose output")
    parser.add_argument("-q", action="store_true", help="Short only")
    parser.add_argument("--token", help=argparse.SUPPRESS)

    commands = parser.add_subparsers(dest="command")
    new = commands.add_parser("new", help="Create a new app", aliases=["create"])
    new.add_argument("path", help="Application path")
    new.add_argument("-B", "--skip_bundle", action="store_true", help="Skip bundle install")
    new.add_argument("--no-skip-bundle", action="store_true", help="Run bundle install")
    new.add_argument("--template_file")
    new.add_argument("--output-dir")
    new.add_argument("--jobs", type=int, default=4)
    new.add_argument("--tag", action="append")

    completion = commands.add_parser("completion", help="Generate shell\ncompletion script")
    completion.add_argument("--shell", required=True, choices=["bash", "zsh", "powershell", "fish"])
    completion.add_argument("kind", nargs="?", choices=["script", "path"])
    completion.add_argument("extra", nargs="*")

    run = commands.add_parser("_run", help="Run the app")
    tasks = run.add_subparsers()
    tasks.add_parser("once", help="Run once")
    return parser


@pytest.fixture(scope="module")
def built() -> Schema:
    """Schema of the sample parser."""
    return build_schema(_sample_parser())


class TestNormalization:
    """Test name and description normalization."""

    def test_dasherize(self) -> None:
        """Underscores become dashes."""
        assert dasherize("skip_bundle") == "skip-bundle"

    def test_normalize_name(self) -> None:
        """`_run` stands for `run`."""
        assert normalize_name("_run") == "run"
        assert normalize_name("output_path") == "output-path"

    def test_normalize_description(self) -> None:
        """Descriptions are flattened to one line."""
        assert normalize_description("Generate shell\n   completion  script") == "Generate shell completion script"
        assert normalize_description(None) == ""
        assert normalize_description(argparse.SUPPRESS) == ""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("file", HintType.FILE),
            ("config_file", HintType.FILE),
            ("dir", HintType.DIRECTORY),
            ("output_dir", HintType.DIRECTORY),
            ("target_directory", HintType.DIRECTORY),
            ("folder", HintType.DIRECTORY),
            ("cache_folder", HintType.DIRECTORY),
        ],
    )
    def test_resolve_completion(self, name: str, expected: HintType) -> None:
        """Hints are guessed from names."""
        hint = resolve_completion(name)
        assert hint is not None
        assert hint.type == expected

    @pytest.mark.parametrize("name", ["count", "profile", "directory_name", "filename"])
    def test_no_completion(self, name: str) -> None:
        """Other names get no hint."""
        assert resolve_completion(name) is None


class TestProgram:
    """Test the top-level parser."""

    def test_metadata(self, built: Schema) -> None:
        """Name, description and version come from the parser."""
        assert built.name == "mycli"
        assert built.description == "This is mycli"
        assert built.version == "1.2.3"

    def test_overrides(self) -> None:
        """Metadata may be given explicitly."""
        schema = build_schema(_sample_parser(), name="other", description="Other tool", version="9")
        assert (schema.name, schema.description, schema.version) == ("other", "Other tool", "9")

    def test_global_options(self, built: Schema) -> None:
        """Top-level flags are global options, with synthetic siblings."""
        names = [opt.name for opt in built.global_options]
        assert names == ["very-verbose", "no-very-verbose", "skip-very-verbose", "token"]
        assert built.global_options[0].short == ("v",)
        assert built.global_options[0].description == "Enable very verbose output"

    def test_hidden_option(self, built: Schema) -> None:
        """Suppressed help hides the option."""
        token = built.global_options[-1]
        assert token.hidden
        assert token.description == ""


class TestCommands:
    """Test sub-parsers."""

    def test_names(self, built: Schema) -> None:
        """Aliases are not repeated, `_run` is renamed."""
        assert [cmd.name for cmd in built.commands] == ["new", "completion", "run"]

    def test_arguments(self, built: Schema) -> None:
        """Positionals become arguments."""
        new = built.commands[0]
        assert [(arg.name, arg.description, arg.required, arg.variadic) for arg in new.arguments] == [("path", "Application path", True, False)]

    def test_options(self, built: Schema) -> None:
        """Options keep their types and hints."""
        options = {opt.name: opt for opt in built.commands[0].options}
        assert list(options) == ["skip-bundle", "no-skip-bundle", "template-file", "output-dir", "jobs", "tag"]
        assert options["skip-bundle"].short == ("B",)
        assert options["template-file"].completion is not None
        assert options["template-file"].completion.type == HintType.FILE
        assert options["output-dir"].completion is not None
        assert options["output-dir"].completion.type == HintType.DIRECTORY
        assert options["jobs"].type == "float"
        assert options["jobs"].default == 4
        assert options["tag"].type == "array"
        assert options["tag"].repeatable

    def test_choices(self, built: Schema) -> None:
        """Choices are enums on options and static hints on positionals."""
        completion = built.commands[1]
        assert completion.description == "Generate shell completion script"
        shell = completion.options[0]
        assert shell.enum == ("bash", "zsh", "powershell", "fish")
        assert shell.required

        kind, extra = completion.arguments
        assert kind.completion is not None
        assert kind.completion.values == ("script", "path")
        assert not kind.required
        assert extra.variadic
        assert not extra.required
        assert extra.description == "Extra"

    def test_nested(self, built: Schema) -> None:
        """Sub-parsers nest."""
        run = built.commands[2]
        assert [cmd.name for cmd in run.subcommands] == ["once"]
        assert run.subcommands[0].is_leaf

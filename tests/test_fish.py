"""Tests for the fish completion generator."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from shellcomp.generators.fish import build_condition, generate_fish, quote_fish
from shellcomp.models import Command, Option, Schema

INFO_CONDITION = "__fish_seen_subcommand_from utils; and __fish_seen_subcommand_from nested; and __fish_seen_subcommand_from info"


@pytest.fixture(scope="module")
def fish_script(sample_schema: Schema) -> str:
    """Generate fish completion script."""
    return generate_fish(sample_schema)


@pytest.mark.skipif(not shutil.which("fish"), reason="fish not installed")
class TestFishSyntax:
    """Test fish completion script syntax."""

    def test_syntax_valid(self, fish_script: str, tmp_path: Path) -> None:
        """Fish completion script should have valid syntax."""
        script_file = tmp_path / "completions.fish"
        script_file.write_text(fish_script)
        result = subprocess.run(
            ["fish", "--no-execute", str(script_file)],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0, f"Fish syntax error: {result.stderr}"


class TestTopLevel:
    """Test the top-level lines."""

    def test_header(self, fish_script: str) -> None:
        """Header names the program."""
        assert fish_script.startswith("# mycli - This is mycli\n# Generated by: shellcomp generate fish\n")

    def test_commands(self, fish_script: str) -> None:
        """Commands complete when no subcommand was typed yet."""
        assert "complete -c mycli -n '__fish_use_subcommand' -a 'new' -d 'Create a new app'" in fish_script
        assert "complete -c mycli -n '__fish_use_subcommand' -a 'utils' -d 'Utility commands'" in fish_script

    def test_global_options(self, fish_script: str) -> None:
        """Multi-character short aliases use old-style flags."""
        assert "complete -c mycli -n '__fish_use_subcommand' -o vv -d 'Enable very verbose output'" in fish_script
        assert "complete -c mycli -n '__fish_use_subcommand' -l very-verbose -d 'Enable very verbose output'" in fish_script


class TestNesting:
    """Test nested command contexts."""

    def test_condition_chain(self) -> None:
        """One test per path segment."""
        assert build_condition(("utils", "nested", "info")) == INFO_CONDITION

    def test_nested_option(self, fish_script: str) -> None:
        """Options of nested commands are guarded by the whole chain."""
        assert f"complete -c mycli -n '{INFO_CONDITION}' -l detailed -d 'Show detailed information'" in fish_script
        assert f"complete -c mycli -n '{INFO_CONDITION}' -l output-path -d 'Path to save the output' -r" in fish_script

    def test_subcommands(self, fish_script: str) -> None:
        """Subcommands complete in the context of their parent."""
        assert "complete -c mycli -n '__fish_seen_subcommand_from utils' -a 'cleanup' -d 'Clean up temporary files'" in fish_script
        assert "complete -c mycli -n '__fish_seen_subcommand_from utils; and __fish_seen_subcommand_from cleanup' -s f -l" not in fish_script
        assert "complete -c mycli -n '__fish_seen_subcommand_from utils; and __fish_seen_subcommand_from cleanup' -s f -d" in fish_script

    def test_enum_option(self, fish_script: str) -> None:
        """Enum options require a value among the enum."""
        assert "complete -c mycli -n '__fish_seen_subcommand_from completion' -l shell -r -a 'bash zsh powershell fish'" in fish_script


class TestHints:
    """Test the hint lowering."""

    def test_directory_argument(self, hinted_schema: Schema) -> None:
        """Directory arguments list folders only."""
        script = generate_fish(hinted_schema)
        assert "complete -c hinted -n '__fish_seen_subcommand_from cd' -x -a '(__fish_complete_directories)'" in script

    def test_option_hints(self, hinted_schema: Schema) -> None:
        """Option values follow their hints."""
        script = generate_fish(hinted_schema)
        assert "-l remote -d 'Remote' -r -a '(git remote)'" in script
        assert "-l output-dir -r -a '(__fish_complete_directories)'" in script
        assert "-s F -r -a 'json csv'" in script


class TestQuoting:
    """Test quoting."""

    def test_quote_fish(self) -> None:
        """Backslashes and quotes are escaped once."""
        assert quote_fish("it's a \\ test") == "'it\\'s a \\\\ test'"

    def test_description_quotes(self) -> None:
        """Descriptions with quotes stay in one string."""
        schema = Schema(name="prog", commands=(Command(name="run", description="Don't stop", options=(Option(name="x"),)),))
        assert "-a 'run' -d 'Don\\'t stop'" in generate_fish(schema)

"""Properties shared by every generator."""

from __future__ import annotations

import re

import pytest

from shellcomp.generators import GENERATORS, Shell, generate
from shellcomp.models import Argument, Command, CompletionHint, HintType, Option, Schema, UnsupportedShellError

ALL_SHELLS = [shell.value for shell in Shell]
HIDDEN_NAMES = ("hidden-command", "secret", "internal", "reindex", "everything", "Maintenance")

DEFINITION = re.compile(r"^(_\w+)\(\) \{$", re.MULTILINE)
CALL = re.compile(r"^\s+(_mycli\w*)$", re.MULTILINE)


class TestDispatch:
    """Test the generate entry point."""

    def test_table_covers_every_shell(self) -> None:
        """Every Shell member has a generator."""
        assert set(GENERATORS) == set(Shell)

    @pytest.mark.parametrize("shell", ALL_SHELLS)
    def test_accepts_plain_names(self, shell: str, sample_schema: Schema) -> None:
        """Plain strings and enum members are equivalent."""
        assert generate(shell, sample_schema) == generate(Shell(shell), sample_schema)

    def test_unsupported_shell(self, sample_schema: Schema) -> None:
        """Unknown shells fail before generating anything."""
        with pytest.raises(UnsupportedShellError, match="Unsupported shell: 'tcsh'"):
            generate("tcsh", sample_schema)

    def test_unsupported_shell_is_value_error(self, sample_schema: Schema) -> None:
        """Callers may catch ValueError."""
        with pytest.raises(ValueError):
            generate("cmd.exe", sample_schema)

    def test_rejects_raw_documents(self) -> None:
        """Documents must be turned into a Schema first."""
        with pytest.raises(TypeError):
            generate("bash", {"name": "mycli"})  # type: ignore[arg-type]


@pytest.mark.parametrize("shell", ALL_SHELLS)
class TestProperties:
    """Properties holding for every shell."""

    def test_deterministic(self, shell: str, sample_schema: Schema, sample_document: dict) -> None:
        """Equal schemas give byte-identical scripts."""
        assert generate(shell, sample_schema) == generate(shell, Schema.from_dict(sample_document))

    def test_hidden_excluded(self, shell: str, sample_schema: Schema) -> None:
        """Hidden nodes and everything below them never show up."""
        script = generate(shell, sample_schema)
        for name in HIDDEN_NAMES:
            assert name not in script

    def test_ends_with_newline(self, shell: str, sample_schema: Schema) -> None:
        """Scripts are newline terminated."""
        assert generate(shell, sample_schema).endswith("\n")

    def test_declared_order(self, shell: str) -> None:
        """Commands appear in the order they are declared."""
        names = ("zeta", "alpha", "mid")
        forward = generate(shell, Schema(name="prog", commands=tuple(Command(name=n, description=f"{n} cmd") for n in names)))
        positions = [forward.index(n) for n in names]
        assert positions == sorted(positions)

        backward = generate(shell, Schema(name="prog", commands=tuple(Command(name=n, description=f"{n} cmd") for n in reversed(names))))
        positions = [backward.index(n) for n in reversed(names)]
        assert positions == sorted(positions)

    def test_every_hint_kind(self, shell: str, hinted_schema: Schema) -> None:
        """Every hint kind is accepted."""
        assert generate(shell, hinted_schema)

    def test_empty_program(self, shell: str) -> None:
        """A program without commands or options still gets a script."""
        assert generate(shell, Schema(name="bare"))


@pytest.mark.parametrize("shell", ALL_SHELLS)
class TestHiddenOptions:
    """Hidden options of visible commands."""

    def test_hidden_option_left_out(self, shell: str) -> None:
        """Only the visible option of `run` is offered."""
        run = Command(name="run", options=(Option(name="force", short=("f",)), Option(name="secret", type="string", hidden=True)))
        script = generate(shell, Schema(name="prog", commands=(run,)))
        assert "force" in script
        assert "secret" not in script

    def test_all_options_hidden(self, shell: str) -> None:
        """A command whose options are all hidden offers no flag."""
        run = Command(name="run", options=(Option(name="secret", type="string", hidden=True),))
        script = generate(shell, Schema(name="prog", global_options=(Option(name="global-flag"),), commands=(run,)))
        assert "secret" not in script
        assert script.count("global-flag") == generate(shell, Schema(name="prog", global_options=(Option(name="global-flag"),))).count("global-flag")


@pytest.mark.parametrize("shell", [Shell.BASH, Shell.FISH, Shell.POWERSHELL])
def test_only_first_argument_completes(shell: Shell) -> None:
    """A second argument never changes the value completion."""
    first = Argument(name="source", completion=CompletionHint(type=HintType.FILE))
    second = Argument(name="target", completion=CompletionHint(type=HintType.DIRECTORY))
    single = Schema(name="prog", commands=(Command(name="copy", arguments=(first,)),))
    double = Schema(name="prog", commands=(Command(name="copy", arguments=(first, second)),))
    assert generate(shell, double) == generate(shell, single)


@pytest.mark.parametrize("shell", ["bash", "zsh"])
class TestNamingConsistency:
    """Every dispatched function is defined."""

    def test_calls_resolve(self, shell: str, sample_schema: Schema) -> None:
        """Function calls match definitions."""
        script = generate(shell, sample_schema)
        defined = set(DEFINITION.findall(script))
        called = set(CALL.findall(script))
        assert called
        assert called <= defined

    def test_no_unused_functions(self, shell: str, sample_schema: Schema) -> None:
        """Every command function is reachable."""
        script = generate(shell, sample_schema)
        defined = set(DEFINITION.findall(script))
        called = set(CALL.findall(script))
        assert defined - called == {"_mycli"}


class TestScenarios:
    """End to end scenarios on the sample program."""

    def test_bash_argument_command(self, sample_schema: Schema) -> None:
        """Bash dispatches `new` to its function, completing files."""
        script = generate("bash", sample_schema)
        assert "    new)\n      _mycli_new\n" in script
        assert 'COMPREPLY=($(compgen -f -- "$cur"))' in script.split("_mycli_new() {")[1]

    def test_zsh_exclusion_group(self) -> None:
        """Zsh groups the short and long flags of an option."""
        schema = Schema.from_dict({"name": "mycli", "globalOptions": [{"name": "verbose", "short": "v", "description": "Verbose output"}]})
        assert "(-v --verbose)" in generate("zsh", schema)

    def test_fish_nested_condition(self, sample_schema: Schema) -> None:
        """Fish guards nested options with the whole command chain."""
        script = generate("fish", sample_schema)
        assert (
            "-n '__fish_seen_subcommand_from utils; and __fish_seen_subcommand_from nested; "
            "and __fish_seen_subcommand_from info' -l detailed"
        ) in script

    def test_powershell_enum_option(self, sample_schema: Schema) -> None:
        """PowerShell only offers the flag of an enum option."""
        script = generate("powershell", sample_schema)
        branch = script.split("'mycli;completion' {")[1].split("break")[0]
        assert "'--shell'" in branch
        assert "'zsh'" not in branch

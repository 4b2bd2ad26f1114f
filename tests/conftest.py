"""Generic fixtures."""

import copy

import pytest

from shellcomp.logging_setup import get_logger, init_logger
from shellcomp.models import Argument, Command, CompletionHint, HintType, Option, Schema

SAMPLE_DOCUMENT = {
    "name": "mycli",
    "description": "This is mycli",
    "version": "1.2.3",
    "globalOptions": [
        {"name": "very-verbose", "short": "vv", "type": "boolean", "description": "Enable very verbose output"},
    ],
    "commands": [
        {
            "name": "utils",
            "description": "Utility commands",
            "subcommands": [
                {
                    "name": "nested",
                    "description": "Nested utility commands",
                    "subcommands": [
                        {
                            "name": "info",
                            "description": "Show nested info",
                            "options": [
                                {"name": "detailed", "type": "boolean", "description": "Show detailed information"},
                                {"name": "output-path", "type": "string", "description": "Path to save the output"},
                            ],
                        }
                    ],
                },
                {
                    "name": "cleanup",
                    "description": "Clean up temporary files",
                    "options": [
                        {"name": "force", "short": "f", "type": "boolean", "description": "Force cleanup without confirmation"},
                    ],
                },
                {"name": "status", "description": "Show system status"},
                {
                    "name": "hidden-command",
                    "description": "This command is hidden",
                    "hidden": True,
                    "options": [{"name": "secret", "type": "string", "description": "A secret option", "hidden": True}],
                },
            ],
        },
        {
            "name": "new",
            "description": "Create a new app",
            "options": [
                {"name": "skip-bundle", "short": "B", "type": "boolean", "description": "Skip bundle install"},
            ],
            "arguments": [{"name": "path", "description": "Application path", "required": True}],
        },
        {
            "name": "completion",
            "description": "Generate shell completion script",
            "options": [
                {"name": "shell", "type": "string", "required": True, "enum": ["bash", "zsh", "powershell", "fish"]},
            ],
        },
        {
            "name": "internal",
            "description": "Maintenance tasks",
            "hidden": True,
            "subcommands": [
                {
                    "name": "reindex",
                    "description": "Rebuild every index",
                    "options": [{"name": "everything", "type": "boolean"}],
                }
            ],
        },
    ],
}


def pytest_configure():
    "Runs once before all"
    init_logger("/dev/null", force_debug=True)


@pytest.fixture(scope="session")
def sample_document() -> dict:
    """The mycli sample program, document form."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture(scope="session")
def sample_schema() -> Schema:
    """The mycli sample program."""
    return Schema.from_dict(SAMPLE_DOCUMENT)


@pytest.fixture(scope="session")
def hinted_schema() -> Schema:
    """A program using every hint kind, on arguments and options."""
    return Schema(
        name="hinted",
        commands=(
            Command(
                name="open",
                description="Open a file",
                arguments=(Argument(name="file", description="File to open", completion=CompletionHint(type=HintType.FILE, extensions=("md", "txt"))),),
            ),
            Command(
                name="cd",
                description="Change folder",
                arguments=(Argument(name="dir", description="Target folder", completion=CompletionHint(type=HintType.DIRECTORY)),),
            ),
            Command(
                name="pick",
                description="Pick a color",
                arguments=(Argument(name="color", description="Color", completion=CompletionHint(type=HintType.STATIC, values=("red", "blue"))),),
            ),
            Command(
                name="checkout",
                description="Switch branch",
                arguments=(
                    Argument(name="branch", description="Branch", completion=CompletionHint(type=HintType.COMMAND, command="git branch --list")),
                ),
                options=(Option(name="remote", type="string", description="Remote", completion=CompletionHint(type=HintType.DYNAMIC, command="git remote")),),
            ),
            Command(
                name="export",
                description="Export data",
                options=(
                    Option(name="format", short=("F",), type="string", enum=("json", "csv")),
                    Option(name="output-dir", type="string", completion=CompletionHint(type=HintType.DIRECTORY)),
                ),
            ),
        ),
    )


@pytest.fixture
def test_logger():
    "A logger for components taking one"
    return get_logger("tests")

"""Interactive install flow for `shellcomp install`."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import questionary
from questionary import Choice

from .config import load_config
from .constants import SUPPORTED_SHELLS
from .generators import generate
from .handlers import get_default_path, get_success_message, write_script
from .loader import SchemaLoader
from .models import SchemaError, ShellCompError

if TYPE_CHECKING:
    import logging

    from .models import Schema

SHELL_TITLES = {
    "bash": "Bash",
    "zsh": "Zsh",
    "fish": "Fish",
    "powershell": "PowerShell",
}


def print_banner() -> None:
    """Print the wizard banner."""
    questionary.print("\n╭─────────────────────────────────────╮", style="bold fg:cyan")
    questionary.print("│     shellcomp Completion Installer  │", style="bold fg:cyan")
    questionary.print("╰─────────────────────────────────────╯\n", style="bold fg:cyan")


def detect_shell() -> str | None:
    """Guess the user's shell from the environment.

    Returns:
        One of the supported shells, or None
    """
    if os.environ.get("PSModulePath") and not os.environ.get("SHELL"):
        return "powershell"
    name = Path(os.environ.get("SHELL", "")).name
    if name in ("pwsh", "powershell"):
        return "powershell"
    return name if name in SUPPORTED_SHELLS else None


def ask_shell() -> str | None:
    """Ask user to select the target shell.

    Returns:
        The shell name, or None if cancelled
    """
    detected = detect_shell()

    choices = [Choice(title=title, value=shell) for shell, title in SHELL_TITLES.items()]

    # If detected, move it to top and mark as detected
    if detected:
        choices = [c for c in choices if c.value != detected]
        choices.insert(0, Choice(title=f"{SHELL_TITLES[detected]} (detected)", value=detected))
        questionary.print(f"Detected: {SHELL_TITLES[detected]}", style="fg:green")

    result = questionary.select(
        "Which shell should get the completions?",
        choices=choices,
        default=detected or "bash",
    ).ask()
    if result is None:
        return None
    return str(result)


def ask_source() -> str | None:
    """Ask for the schema source.

    Returns:
        A document path or ``module:attribute``, or None if cancelled
    """
    result = questionary.path("Schema file (or module:attribute):").ask()
    if not result:
        return None
    return str(result)


def ask_destination(default_path: str) -> str | None:
    """Ask where to write the script.

    Args:
        default_path: Suggested destination

    Returns:
        Absolute destination path, or None if cancelled
    """
    result = questionary.path("Install completions to:", default=default_path).ask()
    if not result:
        return None
    path = Path(result).expanduser()
    if not path.is_absolute():
        questionary.print("Relative paths not supported. Use absolute path or ~/path.", style="fg:red")
        return None
    return str(path)


def confirm_overwrite(path: str) -> bool:
    """Confirm replacing an existing file.

    Args:
        path: Destination path

    Returns:
        True if should continue, False to abort
    """
    if not Path(path).exists():
        return True
    questionary.print(f"\nExisting file found at: {path}", style="fg:yellow")
    return bool(questionary.confirm("Overwrite it?", default=False).ask())


def _load_schema(source: str, log: logging.Logger) -> Schema | None:
    loader = SchemaLoader(log)
    try:
        schema = loader.load(source)
    except SchemaError as e:
        questionary.print(str(e), style="fg:red bold")
        for error in e.errors:
            questionary.print(f"  {error}", style="fg:red")
        return None
    except ShellCompError as e:
        questionary.print(str(e), style="fg:red bold")
        return None
    for warning in loader.warnings:
        questionary.print(f"  {warning}", style="fg:yellow")
    return schema


def run_wizard(source: str | None, log: logging.Logger) -> bool:
    """Run the install wizard.

    Args:
        source: Schema source, asked for when None
        log: Logger instance

    Returns:
        True if the script was installed
    """
    print_banner()

    source = source or ask_source()
    if source is None:
        return False
    schema = _load_schema(source, log)
    if schema is None:
        return False

    shell = ask_shell()
    if shell is None:
        return False

    try:
        config = load_config(log)
    except ShellCompError as e:
        questionary.print(str(e), style="fg:red bold")
        return False
    default_path = get_default_path(shell, schema.name, config)
    destination = ask_destination(default_path)
    if destination is None or not confirm_overwrite(destination):
        questionary.print("Nothing installed.", style="fg:yellow")
        return False

    written, error = write_script(generate(shell, schema), destination, log)
    if not written:
        questionary.print(error, style="fg:red bold")
        return False

    questionary.print(f"\n✓ {get_success_message(shell, destination, destination == default_path)}", style="fg:green bold")
    return True

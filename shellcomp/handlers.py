"""CLI handlers for completion commands.

Provides the handlers behind `shellcomp generate` and `shellcomp validate`,
plus the helpers the install wizard shares with them.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import load_config
from .constants import SUPPORTED_SHELLS
from .generators import generate
from .loader import SchemaLoader
from .models import ExitCode, SchemaError, ShellCompError

if TYPE_CHECKING:
    import logging

__all__ = ["get_default_path", "get_success_message", "handle_generate", "handle_validate", "write_script"]


def get_default_path(shell: str, name: str, config: dict[str, Any]) -> str:
    """Get the default user-level completion path for a shell.

    Args:
        shell: Shell type ("bash", "zsh", "fish" or "powershell")
        name: Program name, substituted for "{name}"
        config: Configuration holding the "paths" section

    Returns:
        Expanded absolute path to the default completion file
    """
    return str(Path(config["paths"][shell].replace("{name}", name)).expanduser())


def get_success_message(shell: str, output_path: str, used_default: bool) -> str:
    """Generate a friendly success message after installing completions.

    Args:
        shell: Shell type
        output_path: Path where completions were written
        used_default: Whether the default path was used

    Returns:
        User-friendly success message
    """
    # Use ~ in display path for readability
    home = str(Path.home())
    display_path = "~" + output_path[len(home) :] if output_path.startswith(home + "/") else output_path

    if not used_default:
        return f"Completions written to {display_path}"

    if shell == "bash":
        return f"Completions installed to {display_path}\nReload your shell or run: source ~/.bashrc"

    if shell == "zsh":
        folder = str(Path(display_path).parent)
        return (
            f"Completions installed to {display_path}\n"
            f"Ensure {folder} is in your fpath. Add to ~/.zshrc:\n"
            f"  fpath=({folder} $fpath)\n"
            "  autoload -Uz compinit && compinit\n"
            "Then reload your shell."
        )

    if shell == "fish":
        return f"Completions installed to {display_path}\nReload your shell or run: source ~/.config/fish/config.fish"

    if shell == "powershell":
        return f"Completions installed to {display_path}\nAdd this line to your $PROFILE:\n  . {display_path}"

    return f"Completions written to {display_path}"


def _parse_generate_args(args: list[str]) -> tuple[bool, str, str, str | None]:
    """Parse and validate generate command arguments.

    Args:
        args: Arguments after "generate" (e.g., ["zsh", "cli.toml", "default"])

    Returns:
        Tuple of (success, shell_or_error, source, path_arg):
        - On success: (True, shell, source, path_arg or None)
        - On failure: (False, error_message, "", None)
    """
    if len(args) < 2:  # noqa: PLR2004
        shells = "|".join(SUPPORTED_SHELLS)
        return (False, f"Usage: generate <{shells}> <schema> [default|path]", "", None)

    shell, source = args[0], args[1]
    if shell not in SUPPORTED_SHELLS:
        return (False, f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}", "", None)

    path_arg = args[2] if len(args) > 2 else None  # noqa: PLR2004
    if path_arg is not None and path_arg != "default" and not path_arg.startswith(("/", "~")):
        return (False, "Relative paths not supported. Use absolute path, ~/path, or 'default'.", "", None)

    return (True, shell, source, path_arg)


def write_script(content: str, output_path: str, log: logging.Logger) -> tuple[bool, str]:
    """Write a completion script, creating the parent folders.

    Args:
        content: The script
        output_path: Absolute destination path
        log: Logger instance

    Returns:
        Tuple of (success, error message or "")
    """
    log.debug("Writing completions to: %s", output_path)
    try:
        parent_dir = Path(output_path).parent
        parent_dir.mkdir(parents=True, exist_ok=True)
        Path(output_path).write_text(content, encoding="utf-8")
    except OSError as e:
        return (False, f"Failed to write completion file: {e}")
    return (True, "")


def handle_generate(args: list[str], log: logging.Logger) -> tuple[ExitCode, str]:
    """Handle the generate command with path semantics.

    Args:
        args: Arguments after "generate" (e.g., ["zsh", "cli.toml"] or ["zsh", "cli.toml", "default"])
        log: Logger instance

    Returns:
        Tuple of (exit_code, result):
        - No path arg: result is the script content
        - With path arg: result is the success message
        - On failure: result is the error message
    """
    success, shell_or_error, source, path_arg = _parse_generate_args(args)
    if not success:
        return (ExitCode.USAGE_ERROR, shell_or_error)

    shell = shell_or_error

    try:
        schema = SchemaLoader(log).load(source)
        content = generate(shell, schema)
    except SchemaError as e:
        return (ExitCode.SCHEMA_ERROR, "\n".join([str(e), *e.errors]))
    except ShellCompError as e:
        return (ExitCode.IO_ERROR, f"Failed to generate completions: {e}")

    if path_arg is None:
        return (ExitCode.SUCCESS, content)

    if path_arg == "default":
        try:
            config = load_config(log)
        except ShellCompError as e:
            return (ExitCode.IO_ERROR, str(e))
        output_path = get_default_path(shell, schema.name, config)
        used_default = True
    else:
        output_path = str(Path(path_arg).expanduser())
        used_default = False

    written, error = write_script(content, output_path, log)
    if not written:
        return (ExitCode.IO_ERROR, error)

    return (ExitCode.SUCCESS, get_success_message(shell, output_path, used_default))


def handle_validate(source: str, log: logging.Logger) -> tuple[ExitCode, str]:
    """Handle the validate command.

    Args:
        source: Schema document path or ``module:attribute``
        log: Logger instance

    Returns:
        Tuple of (exit_code, report)
    """
    loader = SchemaLoader(log)
    try:
        schema = loader.load(source)
    except SchemaError as e:
        lines = [f"  ERROR: {error}" for error in e.errors]
        lines.extend(f"  WARNING: {warning}" for warning in loader.warnings)
        lines.append(f"Found {len(e.errors)} error(s) and {len(loader.warnings)} warning(s)")
        return (ExitCode.SCHEMA_ERROR, "\n".join(lines))
    except ShellCompError as e:
        return (ExitCode.IO_ERROR, str(e))

    lines = [f"  WARNING: {warning}" for warning in loader.warnings]
    if loader.warnings:
        lines.append(f"Found {len(loader.warnings)} warning(s)")
    else:
        lines.append(f"Schema for '{schema.name}' is valid!")
    return (ExitCode.SUCCESS, "\n".join(lines))

"""Shared constants for shellcomp."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "DEFAULT_OPTION_TYPE",
    "DEFAULT_PATHS",
    "HINT_TYPES",
    "SUPPORTED_SHELLS",
    "VERSION",
]

VERSION = "0.4.0"

# Config file path - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "shellcomp" / "config.toml"

# Bash completion directory - use XDG_DATA_HOME with fallback to ~/.local/share
_xdg_data_home = os.environ.get("XDG_DATA_HOME") or "~/.local/share"

# Supported shells for completion generation
SUPPORTED_SHELLS = ("bash", "zsh", "fish", "powershell")

# Default user-level completion paths, "{name}" is the program name
DEFAULT_PATHS = {
    "bash": f"{_xdg_data_home}/bash-completion/completions/{{name}}",
    "zsh": "~/.zsh/completions/_{name}",
    "fish": "~/.config/fish/completions/{name}.fish",
    "powershell": "~/.config/powershell/completions/{name}.ps1",
}

# Completion hint kinds understood by every backend
HINT_TYPES = ("file", "directory", "static", "command", "dynamic")

DEFAULT_OPTION_TYPE = "boolean"

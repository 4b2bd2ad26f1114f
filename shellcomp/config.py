"""User configuration.

The optional file at `CONFIG_FILE` (TOML) customizes where `install` puts the
completion scripts::

    [paths]
    zsh = "~/.config/zsh/functions/_{name}"
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CONFIG_FILE, DEFAULT_PATHS, SUPPORTED_SHELLS
from .models import ShellCompError
from .utils import merge

if TYPE_CHECKING:
    import logging

__all__ = ["DEFAULT_CONFIG", "load_config"]

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": dict(DEFAULT_PATHS),
}


def load_config(log: logging.Logger, filename: Path | None = None) -> dict[str, Any]:
    """Load the user configuration merged over the defaults.

    Args:
        log: Logger instance
        filename: Configuration file, defaults to `CONFIG_FILE`

    Returns:
        The configuration dictionary

    Raises:
        ShellCompError: If the file exists but is not valid TOML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    fname = Path(filename or CONFIG_FILE).expanduser()
    if not fname.exists():
        return config

    log.info("Loading %s", fname)
    with fname.open("rb") as f:
        try:
            user_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.critical("Problem reading %s: %s", fname, e)
            msg = f"Problem reading {fname}: {e}"
            raise ShellCompError(msg) from e

    for shell in user_config.get("paths", {}):
        if shell not in SUPPORTED_SHELLS:
            log.warning("[%s] Unknown shell '%s' in [paths] - will be ignored", fname, shell)
    merge(config, user_config)
    return config

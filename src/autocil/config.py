"""autocil configuration management.

Reads the user-global configuration file (~/.config/autocil/config.yaml).
The file is loaded once per run and the resulting ``Config`` is passed
explicitly to everything that needs it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from autocil.helpers import try_parse
from autocil.logger import AutocilLogger

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "projects_root": "~/projects",
    "editor": "vim",
}


@dataclass(frozen=True)
class Config:
    """Resolved user configuration."""

    projects_root: Path
    editor: str = "vim"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            projects_root=Path(str(data["projects_root"])).expanduser(),
            editor=str(data["editor"]),
        )


def get_global_config_dir() -> Path:
    """Get the global configuration directory path."""
    return Path.home() / ".config" / "autocil"


def load_config(
    config_file: Optional[Path] = None,
    logger: Optional[AutocilLogger] = None,
) -> Config:
    """Load the user-global configuration merged over the defaults.

    A missing file, a malformed file, or one whose top level is not a
    mapping all yield the defaults; the latter two log a warning.

    Args:
        config_file: Explicit file to read (defaults to the global config.yaml)
        logger: Logger for warnings

    Returns:
        Resolved configuration
    """
    if config_file is None:
        config_file = get_global_config_dir() / "config.yaml"

    config = dict(DEFAULT_CONFIG)
    loaded = try_parse(config_file, yaml.safe_load, logger)
    if loaded is None:
        return Config.from_dict(config)

    if not isinstance(loaded, dict):
        (logger or AutocilLogger()).warning(
            f"Ignoring malformed {config_file.name}: expected a mapping"
        )
        return Config.from_dict(config)

    config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
    for key in ("projects_root", "editor"):
        if not isinstance(config[key], str) or not config[key].strip():
            (logger or AutocilLogger()).warning(
                f"Ignoring invalid '{key}' in {config_file.name}"
            )
            config[key] = DEFAULT_CONFIG[key]

    return Config.from_dict(config)

"""
Settings for the treelox shell.

Settings live in a small YAML file::

    prompt: "lox> "
    diagnostic_style: detailed   # or "classic", "json"
    show_source: true
    max_errors: 20
    log_level: INFO

Every key is optional. The shell looks for the file named by ``--config``,
then by the ``TREELOX_CONFIG`` environment variable, and otherwise runs with
defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TREELOX_CONFIG"

DIAGNOSTIC_STYLES = ("classic", "detailed", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when a settings file is malformed."""


@dataclass
class Settings:
    prompt: str = "> "
    diagnostic_style: str = "classic"
    show_source: bool = True
    max_errors: int = 20
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.prompt, str):
            raise ConfigError("prompt must be a string")
        if self.diagnostic_style not in DIAGNOSTIC_STYLES:
            raise ConfigError(
                f"diagnostic_style must be one of {', '.join(DIAGNOSTIC_STYLES)}, "
                f"got {self.diagnostic_style!r}"
            )
        if not isinstance(self.show_source, bool):
            raise ConfigError("show_source must be true or false")
        if isinstance(self.max_errors, bool) or not isinstance(self.max_errors, int) \
                or self.max_errors < 1:
            raise ConfigError(f"max_errors must be a positive integer, got {self.max_errors!r}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log_level {self.log_level!r}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown setting(s): {', '.join(unknown)}")
        return cls(**dict(data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(path: Path | str) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Settings with file values applied over the defaults

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not valid YAML, is not a mapping,
            or holds an unknown key or a bad value
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"settings file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected mapping at root, got {type(data).__name__}")

    logger.debug("loaded settings from %s", config_path)
    return Settings.from_dict(data)


def resolve_settings(path: Optional[Path | str] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Settings from an explicit path, the environment, or defaults."""
    if path is None:
        env = os.environ if environ is None else environ
        path = env.get(CONFIG_ENV_VAR) or None
    if path is None:
        return Settings()
    return load_settings(path)

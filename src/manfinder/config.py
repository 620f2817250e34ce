"""Application configuration defaults and configuration file loading."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from manfinder.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MANFINDER_CONFIG"
DEFAULT_CONFIG_NAME = "config.toml"
DEFAULT_INDEX_NAME = "index.db"
DEFAULT_FORMATTER = ["groff", "-mandoc", "-Tutf8"]
DEFAULT_PAGER = ["less", "--quit-if-one-screen", "-R"]


@dataclass(slots=True)
class AppConfig:
    man_root: Path | None = None
    index_path: Path = Path(DEFAULT_INDEX_NAME)
    formatter: List[str] = field(default_factory=lambda: list(DEFAULT_FORMATTER))
    pager: List[str] = field(default_factory=lambda: list(DEFAULT_PAGER))

    def resolve_index_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.index_path).is_absolute() or base_dir is None:
            return Path(self.index_path)
        return base_dir / self.index_path

    def require_root(self) -> Path:
        if self.man_root is None:
            raise ConfigurationError("No manual page root directory configured")
        return Path(self.man_root)


def find_config_file(explicit: Path | None = None, cwd: Path | None = None) -> Path:
    """Locate the configuration file.

    Search order: the explicit path, the ``MANFINDER_CONFIG`` environment
    variable, then ``config.toml`` in the working directory.
    """
    if explicit is not None:
        return explicit
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    return (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME


def _command(value: Any, key: str, default: List[str]) -> List[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        value = value.split()
    if not isinstance(value, list) or not value or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a non-empty command string or list of strings")
    return list(value)


def load_config(path: Path) -> AppConfig:
    """Read a TOML configuration file with a ``[default]`` table."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Problem opening {path}: {exc}") from exc

    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Problem parsing values from {path}: {exc}") from exc

    section = data.get("default")
    if not isinstance(section, dict):
        raise ConfigurationError(f"{path} has no [default] table")

    root = section.get("file_path")
    if not isinstance(root, str) or not root.strip():
        raise ConfigurationError(f"{path} has no [default].file_path entry")

    index_path = section.get("index_path", DEFAULT_INDEX_NAME)
    if not isinstance(index_path, str) or not index_path.strip():
        raise ConfigurationError("'index_path' must be a non-empty string")

    config = AppConfig(
        man_root=Path(root).expanduser(),
        index_path=Path(index_path).expanduser(),
        formatter=_command(section.get("formatter"), "formatter", DEFAULT_FORMATTER),
        pager=_command(section.get("pager"), "pager", DEFAULT_PAGER),
    )
    LOGGER.debug("Loaded configuration from %s: root=%s", path, config.man_root)
    return config

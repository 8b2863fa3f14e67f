"""
Configuration loader — reads unitctl.yml and decides the search roots.

unitctl.yml is optional. When present it can list unit search roots
(relative to the file), the action log path and a log level.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml

from unitctl.core.models.config import UnitctlConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "unitctl.yml"

ENV_PATH = "UNITCTL_PATH"

# Project-local primary, user-scoped fallback, alternate project-local
DEFAULT_ROOTS = ("units", "~/.config/unitctl/units", ".unitctl/units")


class ConfigError(Exception):
    """Raised when unitctl.yml is unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for unitctl.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to unitctl.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> UnitctlConfig:
    """Load unitctl.yml, or defaults when there is none.

    Args:
        path: Explicit path to unitctl.yml. If None, searches upward.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()
    if path is None:
        return UnitctlConfig()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return UnitctlConfig()

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return UnitctlConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = UnitctlConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    # Relative paths in the file are relative to the file
    base = path.parent.resolve()
    config.paths = [str(_anchor(p, base)) for p in config.paths]
    if config.log_file:
        config.log_file = str(_anchor(config.log_file, base))

    logger.info("Loaded config %s with %d search roots", path, len(config.paths))
    return config


def search_roots(
    config: UnitctlConfig | None = None,
    extra: Sequence[str | Path] = (),
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> list[Path]:
    """Ordered unit search roots.

    ``extra`` (from ``--path``) always comes first. Then the first of
    these that is set: $UNITCTL_PATH, the config's ``paths``, the
    defaults. Roots that do not exist are dropped.
    """
    environ = os.environ if environ is None else environ
    base = (cwd or Path.cwd()).resolve()

    env_value = environ.get(ENV_PATH, "")
    if env_value:
        configured = [p for p in env_value.split(os.pathsep) if p]
    elif config is not None and config.paths:
        configured = list(config.paths)
    else:
        configured = list(DEFAULT_ROOTS)

    roots: list[Path] = []
    for entry in [*extra, *configured]:
        root = _anchor(entry, base)
        if root in roots:
            continue
        if not root.is_dir():
            logger.debug("Skipping missing search root %s", root)
            continue
        roots.append(root)
    return roots


def _anchor(entry: str | Path, base: Path) -> Path:
    path = Path(entry).expanduser()
    if not path.is_absolute():
        path = base / path
    return path

"""
Configuration loader — reads daemon settings and configuration snapshots.

Both are YAML files validated against Pydantic schemas:

    cfgd.yml       → DaemonSettings (paths, unit names, source, audit)
    snapshot.yml   → ConfigSnapshot (the desired system state)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cfgd.core.models.config import ConfigSnapshot
from cfgd.core.models.settings import DaemonSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path("/etc/cfgd/cfgd.yml")
SETTINGS_ENV_VAR = "CFGD_CONFIG"


class ConfigError(Exception):
    """Raised when a settings or snapshot file is invalid or missing."""


def _read_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def settings_path(explicit: Path | None = None) -> tuple[Path, bool]:
    """Resolve which settings file to use.

    Returns:
        (path, required). A file named on the command line or in
        CFGD_CONFIG is required to exist; the default one is not.
    """
    if explicit is not None:
        return explicit, True
    from_env = os.environ.get(SETTINGS_ENV_VAR)
    if from_env:
        return Path(from_env), True
    return DEFAULT_SETTINGS_FILE, False


def load_settings(path: Path | None = None) -> DaemonSettings:
    """Load and validate daemon settings.

    Raises:
        ConfigError: If a required file is missing or the file is invalid.
    """
    resolved, required = settings_path(path)

    if not resolved.is_file() and not required:
        logger.debug("No settings file at %s, using defaults", resolved)
        return DaemonSettings()

    logger.debug("Loading settings from %s", resolved)
    data = _read_mapping(resolved)

    try:
        return DaemonSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {resolved}: {e}") from e


def parse_snapshot(data: dict[str, Any], origin: str = "<data>") -> ConfigSnapshot:
    """Validate an already-decoded mapping into a ConfigSnapshot."""
    try:
        return ConfigSnapshot.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration snapshot in {origin}: {e}") from e


def load_snapshot(path: Path) -> ConfigSnapshot:
    """Load a configuration snapshot from YAML.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    snapshot = parse_snapshot(_read_mapping(path), origin=str(path))
    logger.debug("Loaded snapshot from %s: %s", path, ", ".join(snapshot.domains) or "empty")
    return snapshot

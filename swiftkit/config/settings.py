"""YAML configuration for SwiftKit.

Settings come from three layers, later layers winning:

1. Built-in defaults
2. The ``swiftkit`` section of a YAML file (``swiftkit.yaml`` by default)
3. ``SWIFTKIT_*`` environment variables

Example swiftkit.yaml:

    swiftkit:
      cache_dir: ~/.cache/swiftkit
      keyserver: hkp://keyserver.ubuntu.com
      download_timeout: 600
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from swiftkit.core.directory import get_global_cache_dir
from swiftkit.core.defaults import (
    DEFAULT_DOWNLOAD_HOST,
    DEFAULT_KEY_PUBLISHER,
    DEFAULT_KEYS_URL,
    DEFAULT_KEYSERVER,
)
from swiftkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "swiftkit.yaml"
CONFIG_SECTION = "swiftkit"
ENV_PREFIX = "SWIFTKIT_"


@dataclass
class InstallerSettings:
    """Settings for building the default install pipeline."""

    cache_dir: Path = field(default_factory=get_global_cache_dir)
    download_host: str = DEFAULT_DOWNLOAD_HOST
    keys_url: str = DEFAULT_KEYS_URL
    keyserver: str = DEFAULT_KEYSERVER
    key_publisher: str = DEFAULT_KEY_PUBLISHER
    gpg_executable: str = "gpg"
    download_timeout: Optional[float] = None  # None waits indefinitely
    lock_timeout: int = 300


_PATH_FIELDS = {"cache_dir"}
_OPTIONAL_FLOAT_FIELDS = {"download_timeout"}
_INT_FIELDS = {"lock_timeout"}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw YAML/env value to the type of the named field."""
    try:
        if name in _PATH_FIELDS:
            return Path(str(value)).expanduser()
        if name in _OPTIONAL_FLOAT_FIELDS:
            if value is None or str(value).strip().lower() in ("", "none"):
                return None
            return float(value)
        if name in _INT_FIELDS:
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{name}': {value!r} ({e})") from e

    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{name}' must be a non-empty string, got {value!r}")
    return value


def settings_from_dict(data: Mapping[str, Any]) -> InstallerSettings:
    """
    Build settings from a mapping, validating keys and types.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(InstallerSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {name: _coerce(name, value) for name, value in data.items()}
    return InstallerSettings(**values)


def load_config_file(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load the swiftkit section of a YAML file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Section contents (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is missing when required, or malformed
    """
    config_file = Path(config_file)
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(document, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_file}")

    section = document.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' section must be a mapping")

    return section


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Collect SWIFTKIT_<FIELD> variables for known fields.

    Example:
        >>> env_overrides({"SWIFTKIT_KEYSERVER": "hkps://keys.openpgp.org"})
        {'keyserver': 'hkps://keys.openpgp.org'}
    """
    if environ is None:
        environ = os.environ

    overrides = {}
    for f in fields(InstallerSettings):
        value = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if value is not None:
            overrides[f.name] = value
    return overrides


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> InstallerSettings:
    """
    Load settings from defaults, an optional YAML file and the environment.

    Args:
        config_file: Explicit config file (required to exist when given);
            otherwise ./swiftkit.yaml is used if present
        environ: Environment mapping (default: os.environ)

    Raises:
        ConfigError: If the configuration is invalid
    """
    if config_file is not None:
        data = load_config_file(config_file, required=True)
    else:
        data = load_config_file(Path.cwd() / DEFAULT_CONFIG_FILE)

    data = dict(data)
    data.update(env_overrides(environ))
    return settings_from_dict(data)


__all__ = [
    "InstallerSettings",
    "load_settings",
    "load_config_file",
    "settings_from_dict",
    "env_overrides",
    "DEFAULT_CONFIG_FILE",
]

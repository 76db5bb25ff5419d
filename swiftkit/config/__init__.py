"""Configuration loading for SwiftKit."""

from swiftkit.config.settings import (
    InstallerSettings,
    load_settings,
    load_config_file,
    settings_from_dict,
)

__all__ = [
    "InstallerSettings",
    "load_settings",
    "load_config_file",
    "settings_from_dict",
]

"""Module de configuration."""

from systemctl_openrc.config.loader import (
    ConfigLoader,
    FileConfigLoader,
)
from systemctl_openrc.config.settings import (
    CONFIG_ENV_VAR,
    LoggingSettings,
    OpenRCSettings,
    PathsSettings,
    Settings,
    find_settings_file,
    load_settings,
)

__all__ = [
    "ConfigLoader",
    "FileConfigLoader",
    "CONFIG_ENV_VAR",
    "LoggingSettings",
    "OpenRCSettings",
    "PathsSettings",
    "Settings",
    "find_settings_file",
    "load_settings",
]

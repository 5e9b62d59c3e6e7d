"""Configuration package exports."""

from .loader import (  # noqa: F401
    get_configuration,
    load_settings,
    print_config_summary,
    settings_path,
)
from .model import LinkSettings
from .repository import SettingsRepository, parse_settings_text

__all__ = [
    "LinkSettings",
    "SettingsRepository",
    "get_configuration",
    "load_settings",
    "parse_settings_text",
    "print_config_summary",
    "settings_path",
]

"""Configuration package."""

from srs_engine.config.settings import (
    SchedulerSettings,
    get_settings,
    load_yaml_config,
    settings,
    settings_from_yaml,
)

__all__ = [
    "SchedulerSettings",
    "get_settings",
    "load_yaml_config",
    "settings",
    "settings_from_yaml",
]

"""Configuration management for kgraph."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    CommunitySettings,
    PathFindingSettings,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CommunitySettings",
    "PathFindingSettings",
    "Settings",
    "bootstrap_settings",
    "load_settings",
    "save_settings",
]

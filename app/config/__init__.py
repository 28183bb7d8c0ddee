"""
Configuration package for the Menu Modifier Extractor.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    OCRSettings,
    UploadSettings,
    SecuritySettings,
    settings,
    get_settings,
    load_settings,
    env_files_for,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "OCRSettings",
    "UploadSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "load_settings",
    "env_files_for",
    "reload_settings",
]

"""
Configuration module
"""

from rest_template.config.settings import (
    RestTemplateSettings,
    SettingsDefaults,
    ENV_VAR_MAPPING,
)
from rest_template.config.settings_loader import SettingsLoader

__all__ = [
    "RestTemplateSettings",
    "SettingsDefaults",
    "ENV_VAR_MAPPING",
    "SettingsLoader",
]

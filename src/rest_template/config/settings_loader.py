"""
Settings Loader
Loads RestTemplate settings from various sources
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from rest_template.config.settings import ENV_VAR_MAPPING, RestTemplateSettings
from rest_template.exceptions import ConfigError


logger = logging.getLogger(__name__)


class SettingsLoader:
    """
    SettingsLoader class
    Provides multiple ways to load and merge settings
    """

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load settings from a JSON file

        Args:
            path: Path to JSON settings file

        Returns:
            Loaded settings dictionary

        Raises:
            ConfigError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise ConfigError(
                f"Settings file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                settings = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in settings file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(settings, dict):
            raise ConfigError(
                f"Settings file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )

        logger.debug("Loaded settings from %s", file_path)
        return settings

    def from_environment(self) -> Dict[str, Any]:
        """
        Load settings from environment variables

        Returns:
            Settings dictionary from environment variables
        """
        settings: Dict[str, Any] = {}

        for env_var, key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                settings[key] = self._parse_env_value(key, value)

        return settings

    def from_dict(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a settings dictionary"""
        return settings.copy()

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple settings sources
        Priority: later sources override earlier sources

        Args:
            sources: Settings dictionaries in order of increasing priority

        Returns:
            Merged settings dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            merged.update(self._filter_none(source))

        return merged

    def resolve(self, settings: Dict[str, Any]) -> RestTemplateSettings:
        """
        Resolve settings with defaults and validation

        Raises:
            ConfigError: If settings are invalid
        """
        try:
            return RestTemplateSettings(**settings)
        except PydanticValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: "
                f"{error['msg']}"
                for error in e.errors()
            )
            raise ConfigError(
                f"Settings validation failed: {messages}",
                code="CONFIG_VALIDATION_ERROR",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Dict[str, Any]] = None,
    ) -> RestTemplateSettings:
        """
        Load, merge, and resolve settings from multiple sources

        Args:
            file: Path to JSON settings file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic settings dictionary (optional)

        Returns:
            Fully resolved RestTemplateSettings object
        """
        sources: list[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(config)

        return self.resolve(self.merge(*sources))

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if key == "detect_request_factory":
            return value.lower() in ("true", "1", "yes")

        if key in ("connect_timeout", "read_timeout"):
            try:
                return int(value)
            except ValueError:
                return value

        return value

    def _filter_none(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Filter out None values from settings dictionary"""
        return {k: v for k, v in settings.items() if v is not None}

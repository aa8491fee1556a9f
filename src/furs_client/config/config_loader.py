"""
Configuration Loader
Loads FURS client configuration from various sources
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from furs_client.config.furs_config import (
    FursConfig,
    FursEnvironment,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from furs_client.config.config_validator import ConfigValidator
from furs_client.exceptions import ConfigError


BOOLEAN_FIELDS = ("verify_tls", "enable_audit_log", "debug")
INTEGER_FIELDS = ("tax_number", "timeout")
PATH_FIELDS = ("cert_path", "ca_certs_path")


class ConfigLoader:
    """
    ConfigLoader class
    Provides multiple ways to load and merge configuration

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load(file='./furs.json')
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a JSON file

        Relative certificate paths are resolved against the file's directory.

        Args:
            path: Path to JSON configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise ConfigError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )

        return self._process_paths(config, file_path.parent)

    def from_environment(self) -> Dict[str, Any]:
        """
        Load configuration from ``FURS_*`` environment variables

        Returns:
            Configuration dictionary from environment variables
        """
        config: Dict[str, Any] = {}

        for env_var, config_key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                config[config_key] = self._parse_env_value(config_key, value)

        return config

    def from_dict(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a configuration dictionary"""
        return config.copy()

    def merge(self, *sources: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration sources
        Priority: later sources override earlier sources

        Args:
            sources: Configuration dictionaries in order of increasing priority

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            merged.update(self._filter_none(source))

        return merged

    def resolve(self, config: Dict[str, Any]) -> FursConfig:
        """
        Resolve configuration with defaults and validation

        Raises:
            ValidationError: If configuration is invalid
        """
        self._validator.validate_or_raise(config)
        return FursConfig(**config)

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Dict[str, Any]] = None,
    ) -> FursConfig:
        """
        Load, merge, and resolve configuration from multiple sources

        Args:
            file: Path to JSON configuration file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic configuration dictionary (optional)

        Returns:
            Fully resolved FursConfig object
        """
        sources: List[Dict[str, Any]] = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(config)

        return self.resolve(self.merge(*sources))

    def create_template(self, path: Union[str, Path]) -> None:
        """Write a configuration template file"""
        template = {
            "cert_path": "./certs/furs.p12",
            "cert_password": "YOUR_CERTIFICATE_PASSWORD",
            "tax_number": 12345678,
            "environment": ConfigDefaults.ENVIRONMENT.value,
            "timeout": ConfigDefaults.TIMEOUT,
            "ca_certs_path": "./certs/ca",
            "verify_tls": ConfigDefaults.VERIFY_TLS,
            "enable_audit_log": ConfigDefaults.ENABLE_AUDIT_LOG,
            "debug": ConfigDefaults.DEBUG,
        }

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if key in BOOLEAN_FIELDS:
            return value.lower() in ("true", "1", "yes")

        if key in INTEGER_FIELDS:
            try:
                return int(value)
            except ValueError:
                return value

        if key == "environment":
            try:
                return FursEnvironment(value.lower())
            except ValueError:
                return value

        return value

    def _process_paths(self, config: Dict[str, Any], base_path: Path) -> Dict[str, Any]:
        """Resolve certificate paths relative to the config file"""
        processed = config.copy()

        for key in PATH_FIELDS:
            value = processed.get(key)
            if isinstance(value, str) and value and not Path(value).is_absolute():
                processed[key] = str(base_path / value)

        return processed

    def _filter_none(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Filter out None values from config dictionary"""
        return {k: v for k, v in config.items() if v is not None}

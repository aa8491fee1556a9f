"""
Configuration module
"""

from furs_client.config.furs_config import (
    FursConfig,
    FursEnvironment,
    FURS_BASE_URLS,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from furs_client.config.config_loader import ConfigLoader
from furs_client.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "FursConfig",
    "FursEnvironment",
    "FURS_BASE_URLS",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]

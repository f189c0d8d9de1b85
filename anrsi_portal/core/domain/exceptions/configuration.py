"""Configuration-related exceptions."""

from .base import PortalError


class ConfigurationError(PortalError):
    """Configuration or environment variable errors."""

    error_code = "ANR_CFG_001"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "ANR_CFG_002"

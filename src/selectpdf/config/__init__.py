"""Configuration module for the SelectPdf client.

Configuration is managed with Pydantic settings, loaded from YAML files and
environment variables. YAML values support ${VAR} and ${VAR:-default}
interpolation.

Example:
    >>> from selectpdf.config import load_settings
    >>> from selectpdf.clients import HtmlToPdfClient
    >>>
    >>> settings = load_settings("selectpdf.yaml")
    >>> with HtmlToPdfClient.from_settings(settings) as client:
    ...     pdf = client.convert_url("https://selectpdf.com")
"""

from __future__ import annotations

from selectpdf.config.exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
)
from selectpdf.config.schema import (
    ApiConfig,
    AsyncJobsConfig,
    ConfigBaseModel,
    EndpointsConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ObservabilityConfig,
)
from selectpdf.config.settings import (
    API_KEY_ENV_VAR,
    Settings,
    clear_settings_cache,
    find_config_file,
    get_settings,
    load_settings,
)


__all__ = [
    "API_KEY_ENV_VAR",
    "ApiConfig",
    "AsyncJobsConfig",
    "ConfigBaseModel",
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EndpointsConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ObservabilityConfig",
    "Settings",
    "clear_settings_cache",
    "find_config_file",
    "get_settings",
    "load_settings",
]

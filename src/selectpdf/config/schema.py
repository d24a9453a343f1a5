"""Configuration schema models for the SelectPdf client.

These Pydantic models describe every configuration section. They are used
by the Settings class to validate values loaded from YAML files and
environment variables.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - needed at runtime for Pydantic
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from selectpdf.observability.logging import LogFormat, LogLevel


__all__ = [
    "ApiConfig",
    "AsyncJobsConfig",
    "ConfigBaseModel",
    "EndpointsConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ObservabilityConfig",
]


class ConfigBaseModel(BaseModel):
    """Base model for all configuration sections.

    Unknown fields are rejected so that typos in configuration files
    surface as errors instead of being silently ignored.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_default=True,
    )


# ---------------------------------------------------------------------------
# API Connection
# ---------------------------------------------------------------------------


class EndpointsConfig(ConfigBaseModel):
    """SelectPdf service endpoints.

    Only change these when advised by SelectPdf.
    """

    convert: str = "https://selectpdf.com/api2/convert/"
    async_job: str = "https://selectpdf.com/api2/asyncjob/"
    web_elements: str = "https://selectpdf.com/api2/webelements/"
    usage: str = "https://selectpdf.com/api2/usage/"
    pdf_merge: str = "https://selectpdf.com/api2/pdfmerge/"
    pdf_to_text: str = "https://selectpdf.com/api2/pdftotext/"

    @field_validator("*")
    @classmethod
    def require_http_scheme(cls, v: str) -> str:
        """Reject endpoints that are not http(s) URLs."""
        if not v.lower().startswith(("http://", "https://")):
            msg = f"Endpoint must be an http:// or https:// URL: {v}"
            raise ValueError(msg)
        return v


class ApiConfig(ConfigBaseModel):
    """SelectPdf API connection configuration.

    If ``key`` is empty, the key is read from ``key_file``, then from the
    ``SELECTPDF_API_KEY`` environment variable.

    Attributes:
        key: API key (supports ${VAR} interpolation).
        key_file: Path to a file containing the API key.
        timeout: HTTP timeout in seconds for every request.
        endpoints: Service endpoints.
    """

    key: str | None = Field(
        default=None,
        description="API key (supports ${VAR} interpolation)",
    )
    key_file: Path | None = Field(
        default=None,
        description="Path to file containing the API key",
    )
    timeout: Annotated[
        float,
        Field(gt=0, le=3600, description="HTTP timeout in seconds"),
    ] = 600.0
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)


# ---------------------------------------------------------------------------
# Asynchronous Jobs
# ---------------------------------------------------------------------------


class AsyncJobsConfig(ConfigBaseModel):
    """Polling of asynchronous conversion jobs.

    Attributes:
        ping_interval: Seconds to wait before each job status check.
        max_pings: Number of status checks before giving up.
    """

    ping_interval: Annotated[
        float,
        Field(ge=0, le=3600, description="Seconds between job status checks"),
    ] = 3.0
    max_pings: Annotated[
        int,
        Field(ge=1, description="Maximum number of job status checks"),
    ] = 1000


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------


class LoggingConfig(ConfigBaseModel):
    """Logging configuration.

    Attributes:
        level: Log verbosity level.
        format: Log output format.
    """

    level: LogLevel = Field(default=LogLevel.WARNING)
    format: LogFormat = Field(default=LogFormat.AUTO)

    @field_validator("level", "format", mode="before")
    @classmethod
    def lowercase(cls, v: object) -> object:
        """Accept level and format names in any case."""
        return v.lower() if isinstance(v, str) else v


class ObservabilityConfig(ConfigBaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

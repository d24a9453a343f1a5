"""Settings management for the SelectPdf client.

This module provides the main Settings class and the functions that load
it from YAML files and environment variables.

Example:
    >>> from selectpdf.config import load_settings
    >>> settings = load_settings()
    >>> print(settings.async_jobs.ping_interval)
    3.0
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from selectpdf.config.exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
)
from selectpdf.config.schema import (
    ApiConfig,
    AsyncJobsConfig,
    ObservabilityConfig,
)


if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = [
    "API_KEY_ENV_VAR",
    "Settings",
    "clear_settings_cache",
    "find_config_file",
    "get_settings",
    "load_settings",
]


API_KEY_ENV_VAR = "SELECTPDF_API_KEY"


# ---------------------------------------------------------------------------
# Environment Variable Interpolation
# ---------------------------------------------------------------------------

# ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _interpolate_env_vars(value: object) -> object:
    """Recursively replace ${VAR} and ${VAR:-default} in strings.

    Dicts and lists are processed recursively; other values are returned
    unchanged. Unset variables without a default become empty strings.

    Example:
        >>> os.environ["MY_KEY"] = "secret123"
        >>> _interpolate_env_vars("${MY_KEY}")
        'secret123'
        >>> _interpolate_env_vars("${MISSING:-fallback}")
        'fallback'
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            return match.group(2) or ""

        return _ENV_VAR_PATTERN.sub(replace, value)

    if isinstance(value, dict):
        return {k: _interpolate_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_interpolate_env_vars(item) for item in value]

    return value


class _InterpolatingYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML settings source that interpolates environment variables."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | str | None = None,
    ) -> None:
        if yaml_file is not None:
            super().__init__(settings_cls, yaml_file=yaml_file)
        else:
            super().__init__(settings_cls)

    def _read_files(
        self,
        files: Path | str | Sequence[Path | str] | None,
    ) -> dict[str, Any]:
        raw_data = super()._read_files(files)
        interpolated = _interpolate_env_vars(raw_data)
        if not isinstance(interpolated, dict):  # pragma: no cover
            return {}
        return interpolated


# ---------------------------------------------------------------------------
# Settings Class
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Client settings loaded from a YAML file and environment variables.

    Priority (highest to lowest):
    1. Constructor arguments
    2. Environment variables (``SELECTPDF_*``, nested with ``__``,
       e.g. ``SELECTPDF_ASYNC_JOBS__MAX_PINGS``)
    3. YAML configuration file
    4. Default values

    Attributes:
        api: API key, timeout and endpoints.
        async_jobs: Polling of asynchronous jobs.
        observability: Logging settings.
    """

    model_config = SettingsConfigDict(
        yaml_file=None,
        yaml_file_encoding="utf-8",
        env_prefix="SELECTPDF_",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    CONFIG_SEARCH_PATHS: ClassVar[list[Path]] = [
        Path("selectpdf.yaml"),
        Path("selectpdf.yml"),
        Path.home() / ".config" / "selectpdf" / "config.yaml",
        Path("/etc/selectpdf/config.yaml"),
    ]

    # Set by load_settings() before instantiation
    _yaml_file_override: ClassVar[Path | str | None] = None

    api: ApiConfig = Field(default_factory=ApiConfig)
    async_jobs: AsyncJobsConfig = Field(default_factory=AsyncJobsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @model_validator(mode="after")
    def resolve_api_key(self) -> Settings:
        """Resolve the API key from the key file or the environment.

        Resolution order: ``api.key``, then ``api.key_file``, then the
        ``SELECTPDF_API_KEY`` environment variable.

        Raises:
            ValueError: If ``key_file`` is set but does not exist.
        """
        if self.api.key:
            return self

        if self.api.key_file:
            key_path = self.api.key_file
            if not key_path.is_file():
                msg = f"API key file not found: {key_path}"
                raise ValueError(msg)
            object.__setattr__(self.api, "key", key_path.read_text().strip())
            return self

        env_key = os.environ.get(API_KEY_ENV_VAR)
        if env_key:
            object.__setattr__(self.api, "key", env_key)

        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order settings sources: init, env, YAML, secrets (no dotenv)."""
        return (
            init_settings,
            env_settings,
            _InterpolatingYamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._yaml_file_override,
            ),
            file_secret_settings,
        )


# ---------------------------------------------------------------------------
# Settings Loading Functions
# ---------------------------------------------------------------------------

_cached_settings: Settings | None = None


def find_config_file(config_path: Path | str | None = None) -> Path | None:
    """Find the configuration file.

    Args:
        config_path: Explicit path, or None to search the default locations.

    Returns:
        Path to the config file if found, None otherwise.
    """
    if config_path is not None:
        path = Path(config_path)
        return path if path.is_file() else None

    for search_path in Settings.CONFIG_SEARCH_PATHS:
        if search_path.is_file():
            return search_path

    return None


def load_settings(
    config_path: Path | str | None = None,
    *,
    require_config_file: bool = False,
) -> Settings:
    """Load and validate settings, caching them for get_settings().

    Args:
        config_path: Path to a YAML config file. If None, searches
            ./selectpdf.yaml, ./selectpdf.yml,
            ~/.config/selectpdf/config.yaml and /etc/selectpdf/config.yaml.
        require_config_file: Raise when no config file is found instead of
            falling back to environment variables and defaults.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationFileNotFoundError: When require_config_file=True and
            no config file is found.
        ConfigurationValidationError: When configuration validation fails.
    """
    global _cached_settings  # noqa: PLW0603

    config_file = find_config_file(config_path)

    if config_file is None and require_config_file:
        raise ConfigurationFileNotFoundError(
            path=str(config_path) if config_path else None,
            searched_paths=[str(p) for p in Settings.CONFIG_SEARCH_PATHS],
        )

    Settings._yaml_file_override = config_file  # noqa: SLF001
    try:
        settings = Settings()
    except ConfigurationError:
        raise
    except ValidationError as exc:
        raise ConfigurationValidationError.from_validation_error(exc) from exc
    except Exception as exc:
        msg = f"Failed to load configuration: {exc}"
        raise ConfigurationValidationError(msg) from exc
    finally:
        Settings._yaml_file_override = None  # noqa: SLF001

    _cached_settings = settings
    return settings


def get_settings() -> Settings:
    """Get the cached settings, loading them with defaults if necessary."""
    global _cached_settings  # noqa: PLW0603

    if _cached_settings is None:
        _cached_settings = load_settings()

    return _cached_settings


def clear_settings_cache() -> None:
    """Forget the cached settings so the next get_settings() reloads."""
    global _cached_settings  # noqa: PLW0603
    _cached_settings = None

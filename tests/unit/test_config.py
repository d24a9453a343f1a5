"""Unit tests for the configuration module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from selectpdf.config import (
    ApiConfig,
    AsyncJobsConfig,
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EndpointsConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    Settings,
    clear_settings_cache,
    find_config_file,
    get_settings,
    load_settings,
)


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_settings(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Clear the settings cache and run from an empty directory."""
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    """Create a sample configuration file."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
api:
  key: "yaml-key"
  timeout: 120
  endpoints:
    convert: "https://eu.selectpdf.example/api2/convert/"

async_jobs:
  ping_interval: 5
  max_pings: 20

observability:
  logging:
    level: "DEBUG"
    format: "json"
""")
    return config_file


@pytest.fixture
def minimal_config_yaml(tmp_path: Path) -> Path:
    """Create a minimal configuration file (uses all defaults)."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("# Empty config - uses all defaults\n")
    return config_file


@pytest.fixture
def config_with_interpolation(tmp_path: Path) -> Path:
    """Create a config file with environment variable interpolation."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
api:
  key: "${TEST_SELECTPDF_KEY}"
  endpoints:
    usage: "${TEST_USAGE_ENDPOINT:-https://selectpdf.com/api2/usage/}"
""")
    return config_file


# ---------------------------------------------------------------------------
# Schema Validation Tests
# ---------------------------------------------------------------------------


class TestSchemaValidation:
    """Tests for configuration schema validation."""

    def test_api_config_defaults(self) -> None:
        """Test ApiConfig default values."""
        config = ApiConfig()

        assert config.key is None
        assert config.key_file is None
        assert config.timeout == 600.0
        assert config.endpoints.convert == "https://selectpdf.com/api2/convert/"
        assert config.endpoints.async_job == "https://selectpdf.com/api2/asyncjob/"
        assert config.endpoints.pdf_to_text == "https://selectpdf.com/api2/pdftotext/"

    def test_timeout_bounds(self) -> None:
        """Test the timeout must be positive and at most one hour."""
        with pytest.raises(ValidationError):
            ApiConfig(timeout=0)
        with pytest.raises(ValidationError):
            ApiConfig(timeout=3601)

    def test_async_jobs_defaults(self) -> None:
        """Test AsyncJobsConfig default values."""
        config = AsyncJobsConfig()

        assert config.ping_interval == 3.0
        assert config.max_pings == 1000

    def test_async_jobs_bounds(self) -> None:
        """Test ping interval and max pings bounds."""
        assert AsyncJobsConfig(ping_interval=0).ping_interval == 0
        with pytest.raises(ValidationError):
            AsyncJobsConfig(ping_interval=-1)
        with pytest.raises(ValidationError):
            AsyncJobsConfig(max_pings=0)

    def test_endpoint_must_be_http(self) -> None:
        """Test endpoints must be http(s) URLs."""
        with pytest.raises(ValidationError, match="Endpoint must be"):
            EndpointsConfig(convert="ftp://selectpdf.com/api2/convert/")

    def test_logging_config_case_insensitive(self) -> None:
        """Test level and format accept any case."""
        config = LoggingConfig(level="ERROR", format="LogFmt")

        assert config.level == LogLevel.ERROR
        assert config.format == LogFormat.LOGFMT

    def test_config_forbids_extra_fields(self) -> None:
        """Test that unknown fields are rejected."""
        with pytest.raises(ValidationError):
            AsyncJobsConfig(ping_intervall=1)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Settings Loading Tests
# ---------------------------------------------------------------------------


class TestSettingsLoading:
    """Tests for settings loading functionality."""

    def test_load_settings_with_defaults(self) -> None:
        """Test loading settings with all defaults (no config file)."""
        settings = load_settings()

        assert settings.api.key is None
        assert settings.async_jobs.max_pings == 1000
        assert settings.observability.logging.level == LogLevel.WARNING

    def test_load_settings_from_yaml(self, sample_config_yaml: Path) -> None:
        """Test loading settings from a YAML file."""
        settings = load_settings(sample_config_yaml)

        assert settings.api.key == "yaml-key"
        assert settings.api.timeout == 120
        assert settings.api.endpoints.convert == "https://eu.selectpdf.example/api2/convert/"
        assert settings.api.endpoints.usage == "https://selectpdf.com/api2/usage/"
        assert settings.async_jobs.ping_interval == 5
        assert settings.async_jobs.max_pings == 20
        assert settings.observability.logging.level == LogLevel.DEBUG
        assert settings.observability.logging.format == LogFormat.JSON

    def test_load_settings_minimal_yaml(self, minimal_config_yaml: Path) -> None:
        """Test loading settings from minimal YAML (uses defaults)."""
        settings = load_settings(minimal_config_yaml)

        assert settings.api.timeout == 600.0
        assert settings.async_jobs.ping_interval == 3.0

    def test_load_settings_requires_file(self) -> None:
        """Test that require_config_file=True raises on missing file."""
        with pytest.raises(ConfigurationFileNotFoundError) as exc_info:
            load_settings("/nonexistent/config.yaml", require_config_file=True)

        assert "not found" in exc_info.value.message.lower()

    def test_load_settings_nonexistent_file_optional(self) -> None:
        """Test that missing file is OK when not required."""
        settings = load_settings("/nonexistent/config.yaml")

        assert settings.api.timeout == 600.0

    def test_invalid_values_raise_validation_error(self, tmp_path: Path) -> None:
        """Test invalid values are reported as ConfigurationValidationError."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("async_jobs:\n  max_pings: 0\n")

        with pytest.raises(ConfigurationValidationError) as exc_info:
            load_settings(config_file)

        assert exc_info.value.errors
        assert isinstance(exc_info.value, ConfigurationError)
        assert "async_jobs.max_pings: Input should be greater than or equal to 1" in (
            exc_info.value.message
        )


class TestEnvironmentVariableInterpolation:
    """Tests for ${VAR} interpolation in YAML values."""

    def test_interpolation_with_value(
        self,
        config_with_interpolation: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test interpolation when environment variable is set."""
        monkeypatch.setenv("TEST_SELECTPDF_KEY", "env-key-xyz")
        monkeypatch.setenv("TEST_USAGE_ENDPOINT", "https://alt.example/usage/")

        settings = load_settings(config_with_interpolation)

        assert settings.api.key == "env-key-xyz"
        assert settings.api.endpoints.usage == "https://alt.example/usage/"

    def test_interpolation_with_default(
        self,
        config_with_interpolation: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test interpolation uses default when variable not set."""
        monkeypatch.setenv("TEST_SELECTPDF_KEY", "env-key-xyz")
        monkeypatch.delenv("TEST_USAGE_ENDPOINT", raising=False)

        settings = load_settings(config_with_interpolation)

        assert settings.api.endpoints.usage == "https://selectpdf.com/api2/usage/"

    def test_interpolation_empty_when_missing(
        self,
        config_with_interpolation: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a missing variable without default becomes empty."""
        monkeypatch.delenv("TEST_SELECTPDF_KEY", raising=False)

        settings = load_settings(config_with_interpolation)

        assert not settings.api.key


class TestApiKeyResolution:
    """Tests for API key resolution."""

    def test_key_from_file(self, tmp_path: Path) -> None:
        """Test the key is read from key_file."""
        key_file = tmp_path / "key.txt"
        key_file.write_text("secret-key-from-file\n")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f'api:\n  key_file: "{key_file}"\n')

        settings = load_settings(config_file)

        assert settings.api.key == "secret-key-from-file"

    def test_key_file_not_found(self, tmp_path: Path) -> None:
        """Test error when key_file doesn't exist."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text('api:\n  key_file: "/nonexistent/key.txt"\n')

        with pytest.raises(ConfigurationValidationError) as exc_info:
            load_settings(config_file)

        assert "api key file not found" in exc_info.value.message.lower()

    def test_key_takes_precedence_over_file(self, tmp_path: Path) -> None:
        """Test a direct key takes precedence over key_file."""
        key_file = tmp_path / "key.txt"
        key_file.write_text("file-key")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f'api:\n  key: "direct-key"\n  key_file: "{key_file}"\n')

        settings = load_settings(config_file)

        assert settings.api.key == "direct-key"

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the SELECTPDF_API_KEY environment variable fallback."""
        monkeypatch.setenv("SELECTPDF_API_KEY", "env-fallback-key")

        settings = load_settings()

        assert settings.api.key == "env-fallback-key"


class TestEnvironmentVariableOverrides:
    """Tests for environment variable overrides."""

    def test_env_override_nested(
        self,
        sample_config_yaml: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test environment variables override YAML values."""
        monkeypatch.setenv("SELECTPDF_ASYNC_JOBS__MAX_PINGS", "3")

        settings = load_settings(sample_config_yaml)

        assert settings.async_jobs.max_pings == 3

    def test_env_override_deeply_nested(
        self,
        minimal_config_yaml: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test deeply nested environment variable override."""
        monkeypatch.setenv("SELECTPDF_API__ENDPOINTS__USAGE", "https://alt.example/usage/")

        settings = load_settings(minimal_config_yaml)

        assert settings.api.endpoints.usage == "https://alt.example/usage/"


# ---------------------------------------------------------------------------
# Settings Caching Tests
# ---------------------------------------------------------------------------


class TestSettingsCaching:
    """Tests for settings caching behavior."""

    def test_get_settings_caches(self) -> None:
        """Test that get_settings returns cached instance."""
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self) -> None:
        """Test that clear_settings_cache clears the cache."""
        settings1 = get_settings()
        clear_settings_cache()

        assert get_settings() is not settings1

    def test_load_settings_updates_cache(self, sample_config_yaml: Path) -> None:
        """Test that load_settings updates the cache."""
        settings1 = get_settings()
        settings2 = load_settings(sample_config_yaml)

        assert get_settings() is settings2
        assert settings2 is not settings1


# ---------------------------------------------------------------------------
# Find Config File Tests
# ---------------------------------------------------------------------------


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_find_explicit_path(self, sample_config_yaml: Path) -> None:
        """Test finding config at explicit path."""
        assert find_config_file(sample_config_yaml) == sample_config_yaml

    def test_find_explicit_path_string(self, sample_config_yaml: Path) -> None:
        """Test finding config at explicit path as string."""
        assert find_config_file(str(sample_config_yaml)) == sample_config_yaml

    def test_find_nonexistent_returns_none(self) -> None:
        """Test that nonexistent path returns None."""
        assert find_config_file("/nonexistent/config.yaml") is None

    def test_find_searches_default_paths(self, tmp_path: Path) -> None:
        """Test that None searches the working directory first."""
        config_file = tmp_path / "selectpdf.yaml"
        config_file.write_text("async_jobs:\n  max_pings: 9\n")

        result = find_config_file(None)

        assert result is not None
        assert result.resolve() == config_file.resolve()
        assert load_settings().async_jobs.max_pings == 9


# ---------------------------------------------------------------------------
# Exception Tests
# ---------------------------------------------------------------------------


class TestExceptions:
    """Tests for configuration exceptions."""

    def test_configuration_error_base(self) -> None:
        """Test ConfigurationError base exception."""
        exc = ConfigurationError("Test error message")

        assert exc.message == "Test error message"
        assert str(exc) == "Test error message"

    def test_configuration_file_not_found_error(self) -> None:
        """Test ConfigurationFileNotFoundError lists searched paths."""
        exc = ConfigurationFileNotFoundError(searched_paths=["/a", "/b"])

        assert exc.path is None
        assert exc.searched_paths == ["/a", "/b"]
        assert exc.message == "Configuration file not found (searched /a, /b)"

    def test_configuration_file_not_found_error_with_path(self) -> None:
        """Test ConfigurationFileNotFoundError with just path."""
        exc = ConfigurationFileNotFoundError(path="/path/to/config.yaml")

        assert "/path/to/config.yaml" in exc.message

    def test_configuration_validation_error_no_errors(self) -> None:
        """Test ConfigurationValidationError without error list."""
        exc = ConfigurationValidationError("Validation failed")

        assert exc.message == "Validation failed"
        assert exc.errors == []


class TestSettingsObject:
    """Tests for the Settings object itself."""

    def test_settings_has_all_sections(self) -> None:
        """Test that Settings has all expected sections."""
        settings = Settings()

        assert isinstance(settings.api, ApiConfig)
        assert isinstance(settings.async_jobs, AsyncJobsConfig)
        assert settings.observability.logging.format == LogFormat.AUTO

"""Errors raised while loading the SelectPdf client configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from pydantic import ValidationError


__all__ = [
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
]


class ConfigurationError(Exception):
    """The client configuration cannot be used.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationFileNotFoundError(ConfigurationError):
    """A configuration file was required but none was found.

    Attributes:
        path: Explicitly requested file, if any.
        searched_paths: Default locations that were looked at.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        searched_paths: Sequence[Path | str] = (),
    ) -> None:
        self.path = str(path) if path else None
        self.searched_paths = [str(candidate) for candidate in searched_paths]

        if self.path:
            super().__init__(f"Configuration file not found: {self.path}")
        elif self.searched_paths:
            searched = ", ".join(self.searched_paths)
            super().__init__(f"Configuration file not found (searched {searched})")
        else:
            super().__init__("Configuration file not found")


class ConfigurationValidationError(ConfigurationError):
    """Configuration values were rejected by the settings schema.

    Attributes:
        errors: Pydantic error details, one per rejected value.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> Self:
        """Summarize a pydantic error as ``section.field: reason`` entries.

        Example:
            ``Invalid configuration: async_jobs.max_pings: Input should be
            greater than or equal to 1``
        """
        errors = [dict(error) for error in exc.errors()]
        entries = [
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in errors
        ]
        return cls(f"Invalid configuration: {'; '.join(entries)}", errors=errors)

"""Local validation of option values.

All checks run at configuration time and raise
:class:`~selectpdf.api.exceptions.SelectPdfValidationError` before any
network call is made.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from selectpdf.api.exceptions import SelectPdfValidationError


if TYPE_CHECKING:
    from collections.abc import Iterable


__all__ = [
    "serialize_boolean",
    "validate_choice",
    "validate_color",
    "validate_int_choice",
    "validate_url",
]


_COLOR_PATTERN = re.compile(r"^#?[0-9a-fA-F]{6}$")

# Only the plain-http form is rejected; https://localhost is let through.
_LOCALHOST_PREFIX = "http://localhost"
_FALSE_STRINGS = frozenset({"false", "0", ""})


def validate_url(url: str, *, label: str = "url") -> str:
    """Check that a URL can be fetched by the online service.

    Args:
        url: The URL to check.
        label: Name used in the error message ("url", "base url", ...).

    Returns:
        The URL, unchanged.

    Raises:
        SelectPdfValidationError: If the scheme is not http/https or the URL
            points to ``http://localhost``.
    """
    if not isinstance(url, str):
        msg = f"The {label} must be a string, got {type(url).__name__}."
        raise SelectPdfValidationError(msg)
    lowered = url.lower()
    if not lowered.startswith(("http://", "https://")):
        msg = f"The supported protocols for the {label} are http:// and https://."
        raise SelectPdfValidationError(msg)
    if lowered.startswith(_LOCALHOST_PREFIX):
        msg = (
            "Cannot convert local urls. SelectPdf online API can only "
            "convert publicly available urls."
        )
        raise SelectPdfValidationError(msg)
    return url


def validate_color(color: str) -> str:
    """Check a color is in ``#RRGGBB`` format (leading ``#`` optional)."""
    if not _COLOR_PATTERN.match(color):
        msg = "Color value must be in #RRGGBB format."
        raise SelectPdfValidationError(msg)
    return color


def validate_choice(value: str, allowed: Iterable[str], *, label: str) -> str:
    """Match a string option case-insensitively against an allow-list.

    Args:
        value: Value to check.
        allowed: Allowed values.
        label: Option name used in the error message.

    Returns:
        The value as given.

    Raises:
        SelectPdfValidationError: If the value is not allowed.
    """
    allowed = [str(item) for item in allowed]
    if str(value).lower() not in {item.lower() for item in allowed}:
        msg = f"Allowed values for {label}: {', '.join(allowed)}."
        raise SelectPdfValidationError(msg)
    return str(value)


def validate_int_choice(value: int | str, allowed: Iterable[int], *, label: str) -> int:
    """Match an integer option against its allowed values."""
    allowed = list(allowed)
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = None
    if number not in allowed:
        choices = ", ".join(str(item) for item in allowed)
        msg = f"Allowed values for {label}: {choices}."
        raise SelectPdfValidationError(msg)
    return number


def serialize_boolean(value: object) -> str:
    """Serialize a flag as the literal ``"True"`` or ``"False"``.

    A value whose string form is ``"false"`` (any case), ``"0"`` or empty
    counts as False.
    """
    if str(value).strip().lower() in _FALSE_STRINGS:
        value = False
    return "True" if value else "False"

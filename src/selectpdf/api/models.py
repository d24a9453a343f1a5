"""Data models and option enums for the SelectPdf API client.

This module defines the value types that flow between the request encoder,
the HTTP transport and the asynchronous job poller, plus the enumerations
accepted by the operation clients' setters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from pathlib import Path  # noqa: TC003


__all__ = [
    "AsyncJobHandle",
    "FileAttachment",
    "HttpOutcome",
    "OutputFormat",
    "PageLayout",
    "PageMode",
    "PageNumbersAlignment",
    "PageOrientation",
    "PageSize",
    "RenderingEngine",
    "SecureProtocol",
    "StartupMode",
    "TextLayout",
]


# ---------------------------------------------------------------------------
# Option Enums
# ---------------------------------------------------------------------------


class PageSize(StrEnum):
    """PDF page size.

    Use ``CUSTOM`` together with ``set_page_width``/``set_page_height``.
    """

    CUSTOM = "Custom"
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    LETTER = "Letter"
    HALF_LETTER = "HalfLetter"
    LEDGER = "Ledger"
    LEGAL = "Legal"


class PageOrientation(StrEnum):
    """PDF page orientation."""

    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"


class RenderingEngine(StrEnum):
    """Rendering engine used for HTML to PDF conversion."""

    WEBKIT = "WebKit"
    RESTRICTED = "Restricted"
    BLINK = "Blink"


class StartupMode(StrEnum):
    """Converter startup mode.

    Attributes:
        AUTOMATIC: Conversion starts right after the page loads.
        MANUAL: Conversion starts only when ``SelectPdf.startConversion()``
            is called from JavaScript in the page.
    """

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class SecureProtocol(IntEnum):
    """Protocol used for secure (HTTPS) connections."""

    TLS11_OR_NEWER = 0
    TLS10 = 1
    SSL3 = 2


class PageLayout(IntEnum):
    """Page layout used when the PDF document is opened in a viewer."""

    SINGLE_PAGE = 0
    ONE_COLUMN = 1
    TWO_COLUMN_LEFT = 2
    TWO_COLUMN_RIGHT = 3


class PageMode(IntEnum):
    """Panels visible when the PDF document is opened in a viewer."""

    USE_NONE = 0
    USE_OUTLINES = 1
    USE_THUMBS = 2
    FULL_SCREEN = 3
    USE_OC = 4
    USE_ATTACHMENTS = 5


class PageNumbersAlignment(IntEnum):
    """Alignment of the page numbers text in the footer."""

    LEFT = 1
    CENTER = 2
    RIGHT = 3


class TextLayout(IntEnum):
    """Layout of the text extracted from a PDF.

    Attributes:
        ORIGINAL: Keep the original layout of the text.
        READING: Reorder text in reading order.
    """

    ORIGINAL = 0
    READING = 1


class OutputFormat(IntEnum):
    """Output format of the text extracted from a PDF."""

    TEXT = 0
    HTML = 1


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileAttachment:
    """A local file sent as one part of a multipart request.

    Attributes:
        name: Form field name.
        path: Local file path. The path string is also sent as the
            part's filename.
    """

    name: str
    path: Path | str


@dataclass(frozen=True, slots=True)
class HttpOutcome:
    """Interpreted result of a single POST to the service.

    Attributes:
        status_code: HTTP status code, or 0 if no status line was seen.
        status_line: The raw status line, e.g. ``HTTP/1.1 200 OK``.
        job_id: Job id from the ``selectpdf-api-jobid`` header, if any.
        pages: Page count from the ``selectpdf-api-pages`` header (0 if absent).
        body: Raw response body.
    """

    status_code: int
    status_line: str = ""
    job_id: str | None = None
    pages: int = 0
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        """Whether the service returned the final result (200)."""
        return self.status_code == 200  # noqa: PLR2004

    @property
    def is_running(self) -> bool:
        """Whether the job was accepted and is still running (202 + job id)."""
        return self.status_code == 202 and bool(self.job_id)  # noqa: PLR2004


@dataclass(frozen=True, slots=True)
class AsyncJobHandle:
    """Handle for a job started on the service with ``async=True``.

    Attributes:
        job_id: Opaque job token issued by the service.
        api_key: API key used to query the job.
        endpoint: URL of the job status endpoint.
    """

    job_id: str
    api_key: str
    endpoint: str

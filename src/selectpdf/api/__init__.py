"""Core of the SelectPdf API client.

This module provides the request encoder, the HTTP transport, the response
interpreter and the asynchronous job poller shared by the operation clients
in :mod:`selectpdf.clients`.
"""

from __future__ import annotations

from selectpdf.api.client import (
    ApiClient,
    AsyncJobClient,
    interpret_response,
    parse_status_line,
    write_body,
)
from selectpdf.api.encoding import (
    MULTIPART_FORM_DATA_BOUNDARY,
    EncodedRequest,
    encode_multipart,
    encode_urlencoded,
)
from selectpdf.api.exceptions import (
    SelectPdfAsyncLaunchError,
    SelectPdfAsyncTimeoutError,
    SelectPdfConnectionError,
    SelectPdfError,
    SelectPdfLocalIOError,
    SelectPdfRemoteError,
    SelectPdfValidationError,
)
from selectpdf.api.models import (
    AsyncJobHandle,
    FileAttachment,
    HttpOutcome,
    OutputFormat,
    PageLayout,
    PageMode,
    PageNumbersAlignment,
    PageOrientation,
    PageSize,
    RenderingEngine,
    SecureProtocol,
    StartupMode,
    TextLayout,
)


__all__ = [
    "MULTIPART_FORM_DATA_BOUNDARY",
    "ApiClient",
    "AsyncJobClient",
    "AsyncJobHandle",
    "EncodedRequest",
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
    "SelectPdfAsyncLaunchError",
    "SelectPdfAsyncTimeoutError",
    "SelectPdfConnectionError",
    "SelectPdfError",
    "SelectPdfLocalIOError",
    "SelectPdfRemoteError",
    "SelectPdfValidationError",
    "StartupMode",
    "TextLayout",
    "encode_multipart",
    "encode_urlencoded",
    "interpret_response",
    "parse_status_line",
    "write_body",
]

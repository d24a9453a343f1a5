"""Request body encoding for the SelectPdf API.

Parameters are sent either as ``application/x-www-form-urlencoded`` or,
when files or binary blobs are attached, as ``multipart/form-data`` with
a fixed boundary. Bodies are built by httpx from ``data=`` and ``files=``
arguments; the boundary is taken from the Content-Type header passed along
with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from selectpdf.api.exceptions import SelectPdfLocalIOError


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from selectpdf.api.models import FileAttachment


__all__ = [
    "MULTIPART_CONTENT_TYPE",
    "MULTIPART_FORM_DATA_BOUNDARY",
    "URLENCODED_CONTENT_TYPE",
    "EncodedRequest",
    "FormPayload",
    "encode_multipart",
    "encode_urlencoded",
    "multipart_payload",
    "urlencoded_payload",
]


MULTIPART_FORM_DATA_BOUNDARY = "------------SelectPdf_Api_Boundry_$"

URLENCODED_CONTENT_TYPE = "application/x-www-form-urlencoded"
MULTIPART_CONTENT_TYPE = f"multipart/form-data; boundary={MULTIPART_FORM_DATA_BOUNDARY}"
ATTACHMENT_CONTENT_TYPE = "application/octet-stream"

# (filename, content, content type) as accepted by httpx ``files=``
FormFile = tuple[str | None, bytes, str | None]


@dataclass(frozen=True, slots=True)
class FormPayload:
    """Arguments for an httpx form POST.

    Attributes:
        data: Text fields, passed as ``data=``.
        files: Multipart parts, passed as ``files=``.
        headers: Headers fixing the body's Content-Type.
    """

    data: dict[str, str] = field(default_factory=dict)
    files: list[tuple[str, FormFile]] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)

    def build_request(self, url: str = "") -> httpx.Request:
        """Build the POST request httpx would send for this payload."""
        return httpx.Request(
            "POST",
            url,
            data=self.data or None,
            files=self.files or None,
            headers=self.headers,
        )


@dataclass(frozen=True, slots=True)
class EncodedRequest:
    """Encoded request body and its matching Content-Type header value."""

    content: bytes
    content_type: str


def _read_attachment(path: Path | str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        msg = f"Cannot read input file {path}: {exc}"
        raise SelectPdfLocalIOError(msg, cause=exc) from exc


def urlencoded_payload(parameters: Mapping[str, str]) -> FormPayload:
    """Build the payload of a URL-encoded form POST."""
    return FormPayload(
        data=dict(parameters),
        headers={"Content-Type": URLENCODED_CONTENT_TYPE},
    )


def multipart_payload(
    parameters: Mapping[str, str],
    files: Iterable[FileAttachment] = (),
    binary_data: Mapping[str, bytes] | None = None,
) -> FormPayload:
    """Build the payload of a multipart/form-data POST.

    Parts keep insertion order: parameters first, then files, then binary
    blobs. File parts are named after the file path, blob parts after their
    field name.

    Args:
        parameters: Text fields.
        files: Local files to attach; their bytes are read into memory.
        binary_data: In-memory blobs keyed by field name.

    Returns:
        The payload.

    Raises:
        SelectPdfLocalIOError: If an attached file cannot be read.
    """
    parts: list[tuple[str, FormFile]] = [
        (
            attachment.name,
            (str(attachment.path), _read_attachment(attachment.path), ATTACHMENT_CONTENT_TYPE),
        )
        for attachment in files
    ]
    parts.extend(
        (name, (name, blob, ATTACHMENT_CONTENT_TYPE))
        for name, blob in (binary_data or {}).items()
    )
    headers = {"Content-Type": MULTIPART_CONTENT_TYPE}

    if not parts:
        # httpx only writes multipart bodies when files are given; parts
        # without a filename render exactly like plain text fields.
        text_parts: list[tuple[str, FormFile]] = [
            (name, (None, str(value).encode("utf-8"), None))
            for name, value in parameters.items()
        ]
        return FormPayload(files=text_parts, headers=headers)

    return FormPayload(data=dict(parameters), files=parts, headers=headers)


def _encode(payload: FormPayload) -> EncodedRequest:
    request = payload.build_request()
    return EncodedRequest(
        content=request.read(),
        content_type=request.headers["Content-Type"],
    )


def encode_urlencoded(parameters: Mapping[str, str]) -> EncodedRequest:
    """Percent-encode parameters as a form body.

    Args:
        parameters: Parameter names and values.

    Returns:
        The encoded body.
    """
    return _encode(urlencoded_payload(parameters))


def encode_multipart(
    parameters: Mapping[str, str],
    files: Iterable[FileAttachment] = (),
    binary_data: Mapping[str, bytes] | None = None,
) -> EncodedRequest:
    """Encode parameters, files and binary blobs as multipart/form-data.

    Raises:
        SelectPdfLocalIOError: If an attached file cannot be read.
    """
    return _encode(multipart_payload(parameters, files, binary_data))

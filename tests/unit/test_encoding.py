"""Unit tests for request body encoding."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from urllib.parse import parse_qsl

import pytest

from selectpdf.api import (
    MULTIPART_FORM_DATA_BOUNDARY,
    FileAttachment,
    SelectPdfLocalIOError,
    encode_multipart,
    encode_urlencoded,
)
from selectpdf.api.encoding import multipart_payload, urlencoded_payload


CRLF = b"\r\n"
BOUNDARY = MULTIPART_FORM_DATA_BOUNDARY.encode("ascii")


# ---------------------------------------------------------------------------
# URL-encoded Bodies
# ---------------------------------------------------------------------------


class TestEncodeUrlencoded:
    """Tests for encode_urlencoded."""

    def test_alphanumeric_values_decode_to_same_mapping(self) -> None:
        """Test an alphanumeric parameter set survives encoding unchanged."""
        parameters = {"key": "abc123", "page_size": "A4", "margin_top": "10"}

        encoded = encode_urlencoded(parameters)

        assert dict(parse_qsl(encoded.content.decode("ascii"))) == parameters

    def test_reserved_characters_are_percent_encoded(self) -> None:
        """Test reserved characters are escaped."""
        encoded = encode_urlencoded({"url": "https://example.com/?a=1&b=2"})

        assert encoded.content == b"url=https%3A%2F%2Fexample.com%2F%3Fa%3D1%26b%3D2"

    def test_insertion_order_is_kept(self) -> None:
        """Test parameters appear in insertion order."""
        encoded = encode_urlencoded({"b": "2", "a": "1"})

        assert encoded.content == b"b=2&a=1"

    def test_content_type(self) -> None:
        """Test the form content type is reported."""
        assert encode_urlencoded({}).content_type == "application/x-www-form-urlencoded"


# ---------------------------------------------------------------------------
# Multipart Bodies
# ---------------------------------------------------------------------------


class TestEncodeMultipart:
    """Tests for encode_multipart."""

    def test_content_type_uses_fixed_boundary(self) -> None:
        """Test the content type names the fixed boundary."""
        encoded = encode_multipart({"key": "k"})

        assert encoded.content_type == (
            "multipart/form-data; boundary=------------SelectPdf_Api_Boundry_$"
        )

    def test_parameter_part_layout(self) -> None:
        """Test the exact bytes of a single text part."""
        encoded = encode_multipart({"key": "secret"})

        assert encoded.content == (
            b"--" + BOUNDARY + CRLF
            + b'Content-Disposition: form-data; name="key"' + CRLF
            + CRLF
            + b"secret" + CRLF
            + b"--" + BOUNDARY + b"--" + CRLF
        )

    def test_ends_with_closing_boundary(self, tmp_path: Path) -> None:
        """Test the body always ends with the closing boundary."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"%PDF-1.4")

        encoded = encode_multipart(
            {"key": "k"},
            [FileAttachment("inputPdf", pdf)],
            {"blob": b"\x00\x01"},
        )

        assert encoded.content.endswith(b"--" + BOUNDARY + b"--" + CRLF)

    def test_part_count_matches_inputs(self, tmp_path: Path) -> None:
        """Test one part is emitted per parameter, file and blob."""
        first = tmp_path / "a.pdf"
        second = tmp_path / "b.pdf"
        first.write_bytes(b"A")
        second.write_bytes(b"B")

        encoded = encode_multipart(
            {"key": "k", "action": "Convert", "files_no": "2"},
            [FileAttachment("file_1", first), FileAttachment("file_2", second)],
            {"data": b"raw"},
        )

        opening = b"--" + BOUNDARY + CRLF
        assert encoded.content.count(opening) == 3 + 2 + 1

    def test_parts_ordered_parameters_files_blobs(self, tmp_path: Path) -> None:
        """Test parameters come first, then files, then blobs."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"FILE")

        encoded = encode_multipart(
            {"key": "k"},
            [FileAttachment("inputPdf", pdf)],
            {"blob": b"BLOB"},
        )
        content = encoded.content

        assert content.index(b'name="key"') < content.index(b'name="inputPdf"')
        assert content.index(b'name="inputPdf"') < content.index(b'name="blob"')

    def test_file_part_carries_filename_and_bytes(self, tmp_path: Path) -> None:
        """Test file parts name the file and hold its raw bytes."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"%PDF-1.4\x00\xff")

        encoded = encode_multipart({}, [FileAttachment("inputPdf", pdf)])

        assert f'name="inputPdf"; filename="{pdf}"'.encode() in encoded.content
        assert b"Content-Type: application/octet-stream" + CRLF + CRLF in encoded.content
        assert b"%PDF-1.4\x00\xff" + CRLF in encoded.content

    def test_blob_part_uses_field_name_as_filename(self) -> None:
        """Test binary blobs are sent as files named after their field."""
        encoded = encode_multipart({}, binary_data={"data": b"xyz"})

        assert b'name="data"; filename="data"' in encoded.content
        assert b"xyz" + CRLF in encoded.content

    def test_missing_file_raises_local_io_error(self, tmp_path: Path) -> None:
        """Test an unreadable attachment raises SelectPdfLocalIOError."""
        with pytest.raises(SelectPdfLocalIOError) as exc_info:
            encode_multipart({}, [FileAttachment("inputPdf", tmp_path / "missing.pdf")])

        assert "missing.pdf" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_parameters_and_file_layout(self, tmp_path: Path) -> None:
        """Test the exact bytes of a text part followed by a file part."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"FILE")

        encoded = encode_multipart({"key": "k"}, [FileAttachment("inputPdf", pdf)])

        assert encoded.content == (
            b"--" + BOUNDARY + CRLF
            + b'Content-Disposition: form-data; name="key"' + CRLF
            + CRLF
            + b"k" + CRLF
            + b"--" + BOUNDARY + CRLF
            + f'Content-Disposition: form-data; name="inputPdf"; filename="{pdf}"'.encode()
            + CRLF
            + b"Content-Type: application/octet-stream" + CRLF
            + CRLF
            + b"FILE" + CRLF
            + b"--" + BOUNDARY + b"--" + CRLF
        )

    def test_utf8_parameter_values(self) -> None:
        """Test non-ASCII values are sent as UTF-8 bytes."""
        encoded = encode_multipart({"doc_title": "Café"})

        assert "Café".encode() + CRLF in encoded.content


# ---------------------------------------------------------------------------
# Form Payloads
# ---------------------------------------------------------------------------


class TestFormPayload:
    """Tests for the httpx form arguments."""

    def test_urlencoded_payload_uses_data(self) -> None:
        """Test URL-encoded parameters are passed as form data."""
        payload = urlencoded_payload({"key": "k", "url": "https://example.com"})

        assert payload.data == {"key": "k", "url": "https://example.com"}
        assert payload.files == []
        assert payload.headers == {"Content-Type": "application/x-www-form-urlencoded"}

    def test_multipart_payload_splits_fields_and_files(self, tmp_path: Path) -> None:
        """Test text fields go to data and attachments to files."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"FILE")

        payload = multipart_payload(
            {"key": "k"},
            [FileAttachment("inputPdf", pdf)],
            {"blob": b"BLOB"},
        )

        assert payload.data == {"key": "k"}
        assert payload.files == [
            ("inputPdf", (str(pdf), b"FILE", "application/octet-stream")),
            ("blob", ("blob", b"BLOB", "application/octet-stream")),
        ]

    def test_build_request_keeps_fixed_boundary(self, tmp_path: Path) -> None:
        """Test the built request carries the fixed boundary and the URL."""
        pdf = tmp_path / "in.pdf"
        pdf.write_bytes(b"FILE")
        payload = multipart_payload({"key": "k"}, [FileAttachment("inputPdf", pdf)])

        request = payload.build_request("https://selectpdf.com/api2/pdftotext/")

        assert request.method == "POST"
        assert str(request.url) == "https://selectpdf.com/api2/pdftotext/"
        assert request.headers["content-type"] == (
            f"multipart/form-data; boundary={MULTIPART_FORM_DATA_BOUNDARY}"
        )
        assert b"--" + BOUNDARY + b"--" + CRLF in request.read()

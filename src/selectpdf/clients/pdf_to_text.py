"""Text extraction and search in PDF documents with the SelectPdf online API."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any, Self

from selectpdf.api.client import ApiClient
from selectpdf.api.exceptions import SelectPdfRemoteError
from selectpdf.api.models import OutputFormat, TextLayout
from selectpdf.api.validation import validate_int_choice, validate_url


if TYPE_CHECKING:
    from pathlib import Path


__all__ = ["PdfToTextClient"]


class PdfToTextClient(ApiClient):
    """Extract text from PDF documents or search for text in them.

    The document is either a local file or its bytes, uploaded as multipart
    form data, or a public URL fetched by the service.
    """

    DEFAULT_API_ENDPOINT = "https://selectpdf.com/api2/pdftotext/"
    ENDPOINT_NAME = "pdf_to_text"
    INPUT_PARAMETERS = (
        "action",
        "url",
        "search_text",
        "case_sensitive",
        "whole_words_only",
    )

    # -------------------------------------------------------------------------
    # Operation Inputs
    # -------------------------------------------------------------------------

    def _clear_documents(self) -> None:
        self.files.clear()
        self.binary_data.clear()

    def _use_file(self, action: str, input_pdf: Path | str | bytes) -> None:
        self._reset_inputs()
        self._clear_documents()
        self.parameters["action"] = action
        if isinstance(input_pdf, bytes):
            self.binary_data["inputPdf"] = input_pdf
        else:
            self.files["inputPdf"] = input_pdf

    def _use_url(self, action: str, url: str) -> None:
        validate_url(url)
        self._reset_inputs()
        self._clear_documents()
        self.parameters["action"] = action
        self.parameters["url"] = url

    def _set_search(self, text: str, *, case_sensitive: bool, whole_words_only: bool) -> None:
        self.parameters["search_text"] = text
        self._set_flag("case_sensitive", case_sensitive)
        self._set_flag("whole_words_only", whole_words_only)

    @staticmethod
    def _decode_search_results(result: bytes) -> list[dict[str, Any]]:
        if not result.strip():
            return []
        try:
            return json.loads(result)
        except json.JSONDecodeError as exc:
            msg = f"Invalid search response: {exc}"
            raise SelectPdfRemoteError(msg, status_code=200) from exc

    # -------------------------------------------------------------------------
    # Text Extraction From Local Files
    # -------------------------------------------------------------------------

    def get_text_from_file(self, input_pdf: Path | str | bytes) -> str:
        """Extract the text of a local PDF document.

        Args:
            input_pdf: Path of the PDF document, or its contents.

        Returns:
            The extracted text, or HTML with ``OutputFormat.HTML``.

        Raises:
            SelectPdfLocalIOError: If the document cannot be read.
            SelectPdfRemoteError: If the service reports an error.
        """
        self._use_file("Convert", input_pdf)
        return self._perform_post(multipart=True).decode("utf-8")

    def get_text_from_file_to_stream(
        self,
        input_pdf: Path | str | bytes,
        stream: IO[bytes],
    ) -> None:
        """Extract the text of a local PDF document to a binary stream."""
        self._use_file("Convert", input_pdf)
        self._perform_post(stream, multipart=True)

    def get_text_from_file_to_file(
        self,
        input_pdf: Path | str | bytes,
        output_file_path: Path | str,
    ) -> None:
        """Extract the text of a local PDF document to a local file."""
        self._use_file("Convert", input_pdf)
        with self._output_file(output_file_path) as stream:
            self._perform_post(stream, multipart=True)

    def get_text_from_file_async(self, input_pdf: Path | str | bytes) -> str:
        """Extract the text of a local PDF document with an asynchronous job."""
        self._use_file("Convert", input_pdf)
        return self._run_async(multipart=True).decode("utf-8")

    def get_text_from_file_to_stream_async(
        self,
        input_pdf: Path | str | bytes,
        stream: IO[bytes],
    ) -> None:
        """Extract text with an asynchronous job and write it to a stream."""
        self._use_file("Convert", input_pdf)
        self._run_async(stream, multipart=True)

    def get_text_from_file_to_file_async(
        self,
        input_pdf: Path | str | bytes,
        output_file_path: Path | str,
    ) -> None:
        """Extract text with an asynchronous job and save it to a file."""
        self._use_file("Convert", input_pdf)
        with self._output_file(output_file_path) as stream:
            self._run_async(stream, multipart=True)

    # -------------------------------------------------------------------------
    # Text Extraction From URLs
    # -------------------------------------------------------------------------

    def get_text_from_url(self, url: str) -> str:
        """Extract the text of a PDF document available at a public URL.

        Raises:
            SelectPdfValidationError: If the URL is not http(s) or is local.
        """
        self._use_url("Convert", url)
        return self._perform_post(multipart=True).decode("utf-8")

    def get_text_from_url_to_stream(self, url: str, stream: IO[bytes]) -> None:
        """Extract the text of a PDF from a URL to a binary stream."""
        self._use_url("Convert", url)
        self._perform_post(stream, multipart=True)

    def get_text_from_url_to_file(self, url: str, output_file_path: Path | str) -> None:
        """Extract the text of a PDF from a URL to a local file."""
        self._use_url("Convert", url)
        with self._output_file(output_file_path) as stream:
            self._perform_post(stream, multipart=True)

    def get_text_from_url_async(self, url: str) -> str:
        """Extract the text of a PDF from a URL with an asynchronous job."""
        self._use_url("Convert", url)
        return self._run_async(multipart=True).decode("utf-8")

    def get_text_from_url_to_stream_async(self, url: str, stream: IO[bytes]) -> None:
        """Extract text from a URL with an asynchronous job to a stream."""
        self._use_url("Convert", url)
        self._run_async(stream, multipart=True)

    def get_text_from_url_to_file_async(self, url: str, output_file_path: Path | str) -> None:
        """Extract text from a URL with an asynchronous job to a file."""
        self._use_url("Convert", url)
        with self._output_file(output_file_path) as stream:
            self._run_async(stream, multipart=True)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search_file(
        self,
        input_pdf: Path | str | bytes,
        text_to_search: str,
        *,
        case_sensitive: bool = False,
        whole_words_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Search for text in a local PDF document.

        Args:
            input_pdf: Path of the PDF document, or its contents.
            text_to_search: Text to find.
            case_sensitive: Match the case of the text.
            whole_words_only: Match whole words only.

        Returns:
            The matches, each with the page index and the position of the
            text on the page.
        """
        self._use_file("Search", input_pdf)
        self._set_search(
            text_to_search,
            case_sensitive=case_sensitive,
            whole_words_only=whole_words_only,
        )
        return self._decode_search_results(self._perform_post(multipart=True))

    def search_file_async(
        self,
        input_pdf: Path | str | bytes,
        text_to_search: str,
        *,
        case_sensitive: bool = False,
        whole_words_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Search for text in a local PDF document with an asynchronous job."""
        self._use_file("Search", input_pdf)
        self._set_search(
            text_to_search,
            case_sensitive=case_sensitive,
            whole_words_only=whole_words_only,
        )
        return self._decode_search_results(self._run_async(multipart=True))

    def search_url(
        self,
        url: str,
        text_to_search: str,
        *,
        case_sensitive: bool = False,
        whole_words_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Search for text in a PDF document available at a public URL."""
        self._use_url("Search", url)
        self._set_search(
            text_to_search,
            case_sensitive=case_sensitive,
            whole_words_only=whole_words_only,
        )
        return self._decode_search_results(self._perform_post(multipart=True))

    def search_url_async(
        self,
        url: str,
        text_to_search: str,
        *,
        case_sensitive: bool = False,
        whole_words_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Search for text in a PDF from a URL with an asynchronous job."""
        self._use_url("Search", url)
        self._set_search(
            text_to_search,
            case_sensitive=case_sensitive,
            whole_words_only=whole_words_only,
        )
        return self._decode_search_results(self._run_async(multipart=True))

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def set_start_page(self, start_page: int) -> Self:
        """Set the first page processed (1-based). Default 1."""
        return self._set("start_page", start_page)

    def set_end_page(self, end_page: int) -> Self:
        """Set the last page processed. 0, the default, means the last page."""
        return self._set("end_page", end_page)

    def set_user_password(self, user_password: str) -> Self:
        """Set the password needed to open the PDF document."""
        return self._set("user_password", user_password)

    def set_text_layout(self, text_layout: TextLayout | int) -> Self:
        """Set the layout of the extracted text (0 Original, 1 Reading)."""
        value = validate_int_choice(
            text_layout,
            TextLayout,
            label="Text Layout (0: Original, 1: Reading)",
        )
        return self._set("text_layout", value)

    def set_output_format(self, output_format: OutputFormat | int) -> Self:
        """Set the format of the extracted text (0 Text, 1 Html)."""
        value = validate_int_choice(
            output_format,
            OutputFormat,
            label="Output Format (0: Text, 1: Html)",
        )
        return self._set("output_format", value)

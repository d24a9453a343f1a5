"""Merging of PDF documents with the SelectPdf online API."""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Self

import httpx

from selectpdf.api.client import ApiClient
from selectpdf.api.exceptions import SelectPdfValidationError
from selectpdf.api.validation import validate_url


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


__all__ = ["PdfMergeClient"]


_SLOT_PATTERN = re.compile(r"^(file|url|password)_\d+$")


class PdfMergeClient(ApiClient):
    """Merge local and remote PDF documents into one.

    Documents are merged in the order they were added. After each save the
    added documents are cleared, so the client can be reused for another
    merge with the same settings.

    Example:
        ```python
        with PdfMergeClient("your-api-key") as client:
            client.add_file("first.pdf").add_url_file("https://example.com/second.pdf")
            client.save_to_file("merged.pdf")
        ```
    """

    DEFAULT_API_ENDPOINT = "https://selectpdf.com/api2/pdfmerge/"
    ENDPOINT_NAME = "pdf_merge"

    def __init__(
        self,
        api_key: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(api_key, timeout=timeout, transport=transport)
        self.file_idx = 0

    # -------------------------------------------------------------------------
    # Input Documents
    # -------------------------------------------------------------------------

    def add_file(
        self,
        input_pdf: Path | str | bytes,
        user_password: str | None = None,
    ) -> Self:
        """Add a local PDF document to the merge.

        Args:
            input_pdf: Path of the PDF document, or its contents.
            user_password: Password needed to open the document, if any.
        """
        self.file_idx += 1
        name = f"file_{self.file_idx}"
        if isinstance(input_pdf, bytes):
            self.binary_data[name] = input_pdf
        else:
            self.files[name] = input_pdf
        self._set_password(user_password)
        return self

    def add_url_file(self, input_url: str, user_password: str | None = None) -> Self:
        """Add a PDF document available at a public URL to the merge.

        Raises:
            SelectPdfValidationError: If the URL is not http(s) or is local.
        """
        validate_url(input_url)
        self.file_idx += 1
        self.parameters[f"url_{self.file_idx}"] = input_url
        self._set_password(user_password)
        return self

    def _set_password(self, user_password: str | None) -> None:
        if user_password:
            self.parameters[f"password_{self.file_idx}"] = user_password

    @contextmanager
    def _merge_request(self) -> Iterator[None]:
        """Send the added documents and clear them when the request ends."""
        if self.file_idx == 0:
            msg = "Add at least one PDF document to merge."
            raise SelectPdfValidationError(msg)

        self._reset_inputs()
        self.parameters["files_no"] = str(self.file_idx)
        try:
            yield
        finally:
            self._clear_documents()

    def _clear_documents(self) -> None:
        for name in [name for name in self.parameters if _SLOT_PATTERN.match(name)]:
            del self.parameters[name]
        self.parameters.pop("files_no", None)
        self.files.clear()
        self.binary_data.clear()
        self.file_idx = 0

    # -------------------------------------------------------------------------
    # Merge
    # -------------------------------------------------------------------------

    def save(self) -> bytes:
        """Merge the added documents.

        Returns:
            The merged PDF document.

        Raises:
            SelectPdfValidationError: If no document was added.
            SelectPdfLocalIOError: If a local document cannot be read.
            SelectPdfRemoteError: If the service reports an error.
        """
        with self._merge_request():
            return self._perform_post(multipart=True)

    def save_to_stream(self, stream: IO[bytes]) -> None:
        """Merge the added documents and write the result to a binary stream."""
        with self._merge_request():
            self._perform_post(stream, multipart=True)

    def save_to_file(self, file_path: Path | str) -> None:
        """Merge the added documents and save the result to a local file."""
        with self._merge_request(), self._output_file(file_path) as stream:
            self._perform_post(stream, multipart=True)

    def save_async(self) -> bytes:
        """Merge the added documents using an asynchronous job."""
        with self._merge_request():
            return self._run_async(multipart=True)

    def save_to_stream_async(self, stream: IO[bytes]) -> None:
        """Merge with an asynchronous job and write the result to a stream."""
        with self._merge_request():
            self._run_async(stream, multipart=True)

    def save_to_file_async(self, file_path: Path | str) -> None:
        """Merge with an asynchronous job and save the result to a file."""
        with self._merge_request(), self._output_file(file_path) as stream:
            self._run_async(stream, multipart=True)

    # -------------------------------------------------------------------------
    # Document Options
    # -------------------------------------------------------------------------

    def set_doc_title(self, doc_title: str) -> Self:
        """Set the title of the merged document."""
        return self._set("doc_title", doc_title)

    def set_doc_subject(self, doc_subject: str) -> Self:
        """Set the subject of the merged document."""
        return self._set("doc_subject", doc_subject)

    def set_doc_keywords(self, doc_keywords: str) -> Self:
        """Set the keywords of the merged document."""
        return self._set("doc_keywords", doc_keywords)

    def set_doc_author(self, doc_author: str) -> Self:
        """Set the author of the merged document."""
        return self._set("doc_author", doc_author)

    def set_doc_add_creation_date(self, doc_add_creation_date: bool) -> Self:  # noqa: FBT001
        """Add the creation date to the document information."""
        return self._set_flag("doc_add_creation_date", doc_add_creation_date)

    def set_user_password(self, user_password: str) -> Self:
        """Set the password required to open the merged document."""
        return self._set("user_password", user_password)

    def set_owner_password(self, owner_password: str) -> Self:
        """Set the password required to change the merged document permissions."""
        return self._set("owner_password", owner_password)

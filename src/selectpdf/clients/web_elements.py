"""Retrieval of web element positions after an HTML to PDF conversion."""

from __future__ import annotations

import json
from typing import Any

import httpx

from selectpdf.api.client import ApiClient
from selectpdf.api.exceptions import SelectPdfRemoteError


__all__ = ["WebElementsClient"]


class WebElementsClient(ApiClient):
    """Get the positions of HTML elements rendered in a converted PDF.

    The elements are the ones matched by the CSS selectors passed to
    ``HtmlToPdfClient.set_pdf_web_elements_selectors`` for the conversion
    identified by ``job_id``.
    """

    DEFAULT_API_ENDPOINT = ApiClient.DEFAULT_WEB_ELEMENTS_ENDPOINT
    ENDPOINT_NAME = "web_elements"

    def __init__(
        self,
        api_key: str,
        job_id: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the web elements client.

        Args:
            api_key: SelectPdf API key.
            job_id: Job id of the conversion.
            timeout: Optional HTTP timeout.
            transport: Optional custom transport.
        """
        super().__init__(api_key, timeout=timeout, transport=transport)
        self.parameters["job_id"] = job_id
        self.headers["Accept"] = "text/json"

    def get_web_elements(self) -> list[dict[str, Any]]:
        """Get the located web elements.

        Returns:
            One mapping per element (page index and coordinates as reported
            by the service). An empty body means no elements and gives an
            empty list.
        """
        result = self._perform_post()
        if not result.strip():
            return []
        try:
            elements = json.loads(result)
        except json.JSONDecodeError as exc:
            msg = f"Invalid web elements response: {exc}"
            raise SelectPdfRemoteError(msg, status_code=200) from exc
        return elements or []

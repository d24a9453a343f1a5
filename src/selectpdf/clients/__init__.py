"""Operation clients for the SelectPdf online API.

Each client wraps one service endpoint. Clients keep their configuration
between calls, so one instance can run several operations with the same
options.
"""

from __future__ import annotations

from selectpdf.api.client import AsyncJobClient
from selectpdf.clients.html_to_pdf import HtmlToPdfClient
from selectpdf.clients.pdf_merge import PdfMergeClient
from selectpdf.clients.pdf_to_text import PdfToTextClient
from selectpdf.clients.usage import UsageClient
from selectpdf.clients.web_elements import WebElementsClient


__all__ = [
    "AsyncJobClient",
    "HtmlToPdfClient",
    "PdfMergeClient",
    "PdfToTextClient",
    "UsageClient",
    "WebElementsClient",
]

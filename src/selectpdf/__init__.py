"""Python client for the SelectPdf online API.

SelectPdf converts HTML to PDF, merges PDFs and extracts or searches text
in PDFs on its servers. This package builds the requests, sends them and
interprets the responses, including the polling of asynchronous jobs.

Example:
    ```python
    from selectpdf.clients import HtmlToPdfClient, UsageClient
    from selectpdf.api.models import PageSize

    with HtmlToPdfClient("your-api-key") as client:
        client.set_page_size(PageSize.A4).set_margins(0)
        client.convert_url_to_file("https://selectpdf.com", "test.pdf")
        print(client.get_number_of_pages())

    with UsageClient("your-api-key") as usage:
        print(usage.get_usage()["available"])
    ```
"""

from __future__ import annotations


__version__ = "1.4.0"

__all__ = ["__version__"]

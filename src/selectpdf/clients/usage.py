"""Usage reporting for the SelectPdf online API."""

from __future__ import annotations

import json
from typing import Any

from selectpdf.api.client import ApiClient
from selectpdf.api.exceptions import SelectPdfRemoteError


__all__ = ["UsageClient"]


class UsageClient(ApiClient):
    """Get usage details for a SelectPdf API key."""

    DEFAULT_API_ENDPOINT = "https://selectpdf.com/api2/usage/"
    ENDPOINT_NAME = "usage"
    INPUT_PARAMETERS = ("get_history",)

    def get_usage(self, get_history: bool = False) -> dict[str, Any]:  # noqa: FBT001, FBT002
        """Get the API usage for the current key.

        Args:
            get_history: Include the daily usage history.

        Returns:
            The decoded usage document (``available`` holds the conversions
            left this month).

        Raises:
            SelectPdfRemoteError: If the service reports an error or returns
                an invalid document.
        """
        self._reset_inputs()
        self.headers["Accept"] = "text/json"
        if get_history:
            self.parameters["get_history"] = "True"

        result = self._perform_post()
        try:
            return json.loads(result)
        except json.JSONDecodeError as exc:
            msg = f"Invalid usage response: {exc}"
            raise SelectPdfRemoteError(msg, status_code=200) from exc

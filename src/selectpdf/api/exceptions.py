"""Custom exceptions for the SelectPdf API client."""

from __future__ import annotations


__all__ = [
    "SelectPdfAsyncLaunchError",
    "SelectPdfAsyncTimeoutError",
    "SelectPdfConnectionError",
    "SelectPdfError",
    "SelectPdfLocalIOError",
    "SelectPdfRemoteError",
    "SelectPdfValidationError",
]


class SelectPdfError(Exception):
    """Base exception for all SelectPdf client errors.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code that caused this error, or 0 when no
            HTTP response is involved.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code, if any.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        """Return string representation with status code if available."""
        if self.status_code:
            return f"({self.status_code}) {self.message}"
        return self.message


class SelectPdfValidationError(SelectPdfError):
    """Raised when a configured value fails a local constraint.

    Raised synchronously by setters and conversion methods before any
    network call is made (bad URL scheme, local URL, malformed color,
    value outside an allowed set).
    """


class SelectPdfConnectionError(SelectPdfError):
    """Raised when the HTTP request itself fails.

    This includes network errors, DNS failures and timeouts. No HTTP
    status is available, so ``status_code`` is always 0.
    """

    def __init__(
        self,
        message: str = "Failed to connect to SelectPdf",
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error description.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.__cause__ = cause


class SelectPdfRemoteError(SelectPdfError):
    """Raised when the service answers with a status other than 200/202.

    The message is the response body when the service sent one,
    otherwise the HTTP status line.
    """


class SelectPdfAsyncLaunchError(SelectPdfError):
    """Raised when starting an asynchronous job did not yield a job id."""

    def __init__(
        self,
        message: str = "An error occurred launching the asynchronous call.",
        *,
        status_code: int = 0,
    ) -> None:
        """Initialize the launch error.

        Args:
            message: Human-readable error description.
            status_code: Status code of the launch response.
        """
        super().__init__(message, status_code=status_code)


class SelectPdfAsyncTimeoutError(SelectPdfError):
    """Raised when an asynchronous job is still running after all pings.

    Attributes:
        job_id: The job that did not finish.
        pings: Number of status checks performed.
    """

    def __init__(
        self,
        job_id: str,
        pings: int,
        message: str = "Asynchronous call did not finish in expected timeframe.",
    ) -> None:
        """Initialize the timeout error.

        Args:
            job_id: The job that did not finish.
            pings: Number of status checks performed.
            message: Human-readable error description.
        """
        super().__init__(message)
        self.job_id = job_id
        self.pings = pings


class SelectPdfLocalIOError(SelectPdfError):
    """Raised when reading an input file or writing a result fails."""

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the I/O error.

        Args:
            message: Human-readable error description.
            cause: The underlying OS error, if any.
        """
        super().__init__(message)
        self.__cause__ = cause

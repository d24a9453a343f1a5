"""HTTP client core shared by all SelectPdf operation clients.

The :class:`ApiClient` base class owns the parameter set of one operation
client and implements the request/response cycle used by every operation:
encode the parameters, POST them, interpret the status line and the
``selectpdf-api-*`` headers, then return the body, write it to a sink, or
poll an asynchronous job until it finishes.
"""

from __future__ import annotations

import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, ClassVar, Self

import httpx

from selectpdf import __version__
from selectpdf.api.encoding import (
    FormPayload,
    multipart_payload,
    urlencoded_payload,
)
from selectpdf.api.exceptions import (
    SelectPdfAsyncLaunchError,
    SelectPdfAsyncTimeoutError,
    SelectPdfConnectionError,
    SelectPdfLocalIOError,
    SelectPdfRemoteError,
    SelectPdfValidationError,
)
from selectpdf.api.models import AsyncJobHandle, FileAttachment, HttpOutcome
from selectpdf.api.validation import serialize_boolean
from selectpdf.config.exceptions import ConfigurationError
from selectpdf.observability import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from selectpdf.config import Settings


__all__ = [
    "CLIENT_HEADER",
    "JOB_ID_HEADER",
    "PAGES_HEADER",
    "ApiClient",
    "AsyncJobClient",
    "interpret_response",
    "parse_status_line",
    "write_body",
]


CLIENT_HEADER = "selectpdf-api-client"
JOB_ID_HEADER = "selectpdf-api-jobid"
PAGES_HEADER = "selectpdf-api-pages"
CLIENT_IDENTITY = f"python-{__version__}"

_STATUS_LINE_PATTERN = re.compile(r"HTTP/\d(?:\.\d)?\s+(\d+)\s*.*")


# ---------------------------------------------------------------------------
# Response Interpretation
# ---------------------------------------------------------------------------


def parse_status_line(line: str) -> int:
    """Extract the status code from an ``HTTP/x.y <code> <reason>`` line.

    Returns:
        The status code, or 0 if the line is not a status line.
    """
    match = _STATUS_LINE_PATTERN.match(line.strip())
    if match is None:
        return 0
    return int(match.group(1))


def _header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def interpret_response(
    status_line: str,
    headers: Mapping[str, str],
    body: bytes = b"",
) -> HttpOutcome:
    """Build an :class:`HttpOutcome` from a raw response.

    Header names are matched case-insensitively. A missing or malformed
    page count is reported as 0 and a missing job id as None.

    Args:
        status_line: Response status line, e.g. ``HTTP/1.1 202 Accepted``.
        headers: Response headers.
        body: Response body.

    Returns:
        The interpreted outcome.
    """
    job_id = _header(headers, JOB_ID_HEADER) or None
    try:
        pages = int(_header(headers, PAGES_HEADER) or 0)
    except ValueError:
        pages = 0

    return HttpOutcome(
        status_code=parse_status_line(status_line),
        status_line=status_line.strip(),
        job_id=job_id.strip() if job_id else None,
        pages=pages,
        body=body,
    )


def write_body(stream: IO[bytes], body: bytes) -> int:
    """Write a result body to a binary stream and verify the byte count.

    Raises:
        SelectPdfLocalIOError: If the stream fails or accepts fewer bytes
            than the body holds.
    """
    msg = "Error writing the result to the specified destination."
    try:
        written = stream.write(body)
    except OSError as exc:
        raise SelectPdfLocalIOError(msg, cause=exc) from exc
    if written != len(body):
        raise SelectPdfLocalIOError(msg)
    return written


# ---------------------------------------------------------------------------
# Base Client
# ---------------------------------------------------------------------------


class ApiClient:
    """Base class for SelectPdf API clients. Do not use this directly.

    Attributes:
        api_endpoint: URL receiving the operation's POST requests.
        api_async_endpoint: URL polled for asynchronous job status.
        api_web_elements_endpoint: URL of the web elements lookup.
        timeout: HTTP timeout for each request.
        async_calls_ping_interval: Seconds to wait before every job status check.
        async_calls_max_pings: Maximum number of job status checks.
        parameters: Parameters sent with the next request.
        headers: Extra HTTP headers sent with the next request.
        files: Local files uploaded with the next multipart request.
        binary_data: In-memory documents uploaded with the next multipart
            request, keyed by field name.
    """

    DEFAULT_API_ENDPOINT = "https://selectpdf.com/api2/convert/"
    DEFAULT_ASYNC_ENDPOINT = "https://selectpdf.com/api2/asyncjob/"
    DEFAULT_WEB_ELEMENTS_ENDPOINT = "https://selectpdf.com/api2/webelements/"
    DEFAULT_TIMEOUT = httpx.Timeout(600.0)
    DEFAULT_PING_INTERVAL = 3.0
    DEFAULT_MAX_PINGS = 1000

    # Name of the endpoint field in the configuration's api.endpoints section.
    ENDPOINT_NAME: ClassVar[str] = "convert"
    # Operation inputs removed before each new operation.
    INPUT_PARAMETERS: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        api_key: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: SelectPdf API key.
            timeout: Optional HTTP timeout (seconds or httpx.Timeout).
            transport: Optional custom transport for testing or advanced config.
        """
        self.api_endpoint = self.DEFAULT_API_ENDPOINT
        self.api_async_endpoint = self.DEFAULT_ASYNC_ENDPOINT
        self.api_web_elements_endpoint = self.DEFAULT_WEB_ELEMENTS_ENDPOINT
        if timeout is None:
            timeout = self.DEFAULT_TIMEOUT
        self.timeout = timeout if isinstance(timeout, httpx.Timeout) else httpx.Timeout(timeout)
        self.async_calls_ping_interval = self.DEFAULT_PING_INTERVAL
        self.async_calls_max_pings = self.DEFAULT_MAX_PINGS

        self.parameters: dict[str, str] = {"key": api_key}
        self.headers: dict[str, str] = {}
        self.files: dict[str, Path | str] = {}
        self.binary_data: dict[str, bytes] = {}

        self.number_of_pages = 0
        self.job_id = ""

        self._transport = transport
        self._client: httpx.Client | None = None
        self._logger = get_logger(__name__, client=type(self).__name__)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *args: Any,  # noqa: ANN401
        transport: httpx.BaseTransport | None = None,
    ) -> Self:
        """Create a client configured from application settings.

        Args:
            settings: Loaded application settings.
            *args: Extra positional arguments for the client constructor
                (e.g. a job id).
            transport: Optional custom transport.

        Returns:
            The configured client.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not settings.api.key:
            msg = "No SelectPdf API key configured"
            raise ConfigurationError(msg)

        client = cls(
            settings.api.key,
            *args,
            timeout=settings.api.timeout,
            transport=transport,
        )
        endpoints = settings.api.endpoints
        client.set_api_endpoint(getattr(endpoints, cls.ENDPOINT_NAME))
        client.set_api_async_endpoint(endpoints.async_job)
        client.set_api_web_elements_endpoint(endpoints.web_elements)
        client.set_async_calls_ping_interval(settings.async_jobs.ping_interval)
        client.set_async_calls_max_pings(settings.async_jobs.max_pings)
        return client

    def __enter__(self) -> Self:
        """Enter context and create the HTTP client."""
        self._ensure_client()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context and close the HTTP client."""
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Ensure the HTTP client is initialized."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.timeout, transport=self._transport)
        return self._client

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    # -------------------------------------------------------------------------
    # Client Configuration
    # -------------------------------------------------------------------------

    def set_api_endpoint(self, api_endpoint: str) -> Self:
        """Set a custom SelectPdf API endpoint.

        Do not use this method unless advised by SelectPdf.
        """
        self.api_endpoint = api_endpoint
        return self

    def set_api_async_endpoint(self, api_async_endpoint: str) -> Self:
        """Set a custom endpoint for asynchronous job status checks."""
        self.api_async_endpoint = api_async_endpoint
        return self

    def set_api_web_elements_endpoint(self, api_web_elements_endpoint: str) -> Self:
        """Set a custom endpoint for web elements lookups."""
        self.api_web_elements_endpoint = api_web_elements_endpoint
        return self

    def set_async_calls_ping_interval(self, interval: float) -> Self:
        """Set the wait, in seconds, before each job status check.

        Raises:
            SelectPdfValidationError: If the interval is negative.
        """
        if interval < 0:
            msg = "Ping interval for asynchronous calls cannot be negative."
            raise SelectPdfValidationError(msg)
        self.async_calls_ping_interval = interval
        return self

    def set_async_calls_max_pings(self, max_pings: int) -> Self:
        """Set the maximum number of job status checks.

        Raises:
            SelectPdfValidationError: If fewer than one ping is allowed.
        """
        if max_pings < 1:
            msg = "Maximum number of pings for asynchronous calls must be at least 1."
            raise SelectPdfValidationError(msg)
        self.async_calls_max_pings = max_pings
        return self

    def set_timeout(self, timeout: float) -> Self:
        """Set the HTTP timeout, in seconds, for the following requests.

        Raises:
            SelectPdfValidationError: If the timeout is not positive.
        """
        if timeout <= 0:
            msg = "Timeout must be a positive number of seconds."
            raise SelectPdfValidationError(msg)
        self.timeout = httpx.Timeout(timeout)
        self.close()
        return self

    def get_number_of_pages(self) -> int:
        """Get the number of pages reported by the last call."""
        return self.number_of_pages

    def get_job_id(self) -> str:
        """Get the job id reported by the last call (empty if none)."""
        return self.job_id

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _set(self, name: str, value: object) -> Self:
        self.parameters[name] = str(value)
        return self

    def _set_flag(self, name: str, value: object) -> Self:
        self.parameters[name] = serialize_boolean(value)
        return self

    def _reset_inputs(self) -> None:
        """Remove the previous operation's inputs from the parameter set."""
        for name in (*self.INPUT_PARAMETERS, "async"):
            self.parameters.pop(name, None)

    def _payload(self, *, multipart: bool) -> FormPayload:
        if not multipart:
            return urlencoded_payload(self.parameters)
        attachments = [FileAttachment(name, path) for name, path in self.files.items()]
        return multipart_payload(self.parameters, attachments, self.binary_data)

    def _send(self, *, multipart: bool = False) -> HttpOutcome:
        """POST the parameter set once and interpret the response.

        Returns:
            The outcome of a 200 or 202 response.

        Raises:
            SelectPdfConnectionError: If the request could not be completed.
            SelectPdfRemoteError: For any status other than 200 and 202.
        """
        self.number_of_pages = 0
        self.job_id = ""

        payload = self._payload(multipart=multipart)
        request_headers = dict(self.headers)
        request_headers[CLIENT_HEADER] = CLIENT_IDENTITY
        # The fixed multipart boundary is read from this header by httpx.
        request_headers.update(payload.headers)

        client = self._ensure_client()
        log = self._logger.bind(endpoint=self.api_endpoint)
        log.debug(
            "api_request",
            multipart=multipart,
            parts=len(payload.files),
        )

        try:
            response = client.post(
                self.api_endpoint,
                data=payload.data or None,
                files=payload.files or None,
                headers=request_headers,
            )
        except httpx.TransportError as exc:
            log.warning("connection_error", error=str(exc))
            raise SelectPdfConnectionError(
                str(exc) or type(exc).__name__,
                cause=exc,
            ) from exc

        status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}"
        outcome = interpret_response(status_line, response.headers, response.content)
        self.number_of_pages = outcome.pages
        self.job_id = outcome.job_id or ""

        log.debug(
            "api_response",
            status_code=outcome.status_code,
            pages=outcome.pages,
            job_id=outcome.job_id,
        )

        if outcome.status_code not in {200, 202}:
            message = outcome.body.decode("utf-8", errors="replace").strip()
            raise SelectPdfRemoteError(
                message or outcome.status_line,
                status_code=outcome.status_code,
            )
        return outcome

    def _perform_post(
        self,
        out_stream: IO[bytes] | None = None,
        *,
        multipart: bool = False,
    ) -> bytes:
        """POST the parameter set and return or write the result.

        Args:
            out_stream: Binary stream receiving the body on success.
            multipart: Send as multipart/form-data instead of URL-encoded.

        Returns:
            The response body (empty for 202 responses).
        """
        outcome = self._send(multipart=multipart)
        if not outcome.is_success:
            return b""
        if out_stream is not None:
            write_body(out_stream, outcome.body)
        return outcome.body

    @contextmanager
    def _output_file(self, file_path: Path | str) -> Iterator[IO[bytes]]:
        """Open a result file, removing it if anything inside the block fails."""
        path = Path(file_path)
        try:
            stream = path.open("wb")
        except OSError as exc:
            msg = f"Cannot open output file {path}: {exc}"
            raise SelectPdfLocalIOError(msg, cause=exc) from exc

        try:
            with stream:
                yield stream
        except BaseException:
            path.unlink(missing_ok=True)
            self._logger.debug("partial_output_removed", path=str(path))
            raise

    # -------------------------------------------------------------------------
    # Asynchronous Jobs
    # -------------------------------------------------------------------------

    def start_async_job(self, *, multipart: bool = False) -> AsyncJobHandle:
        """Launch the configured operation as an asynchronous job.

        Returns:
            Handle used to poll the job.

        Raises:
            SelectPdfAsyncLaunchError: If the service did not accept the job
                with a 202 response carrying a job id.
        """
        self.parameters["async"] = "True"
        outcome = self._send(multipart=multipart)
        if not outcome.is_running or outcome.job_id is None:
            raise SelectPdfAsyncLaunchError(status_code=outcome.status_code)

        self._logger.info("async_job_started", job_id=outcome.job_id)
        return AsyncJobHandle(
            job_id=outcome.job_id,
            api_key=self.parameters["key"],
            endpoint=self.api_async_endpoint,
        )

    def poll_once(self, handle: AsyncJobHandle) -> HttpOutcome:
        """Check the status of an asynchronous job once."""
        with AsyncJobClient(
            handle.api_key,
            handle.job_id,
            timeout=self.timeout,
            transport=self._transport,
        ) as job_client:
            job_client.set_api_endpoint(handle.endpoint)
            return job_client.check_status()

    def wait_for_job(self, handle: AsyncJobHandle) -> bytes:
        """Poll an asynchronous job until it stops reporting 202.

        Every check is preceded by a full ``async_calls_ping_interval`` wait.

        Returns:
            The job result.

        Raises:
            SelectPdfRemoteError: If a status check returns an error status.
            SelectPdfAsyncTimeoutError: If the job is still running after
                ``async_calls_max_pings`` checks.
        """
        log = self._logger.bind(job_id=handle.job_id)

        for ping in range(1, self.async_calls_max_pings + 1):
            time.sleep(self.async_calls_ping_interval)
            outcome = self.poll_once(handle)
            log.debug("async_job_poll", ping=ping, status_code=outcome.status_code)

            if outcome.status_code != 202:  # noqa: PLR2004
                self.number_of_pages = outcome.pages
                log.info("async_job_finished", pings=ping, pages=outcome.pages)
                return outcome.body

        log.warning("async_job_timeout", pings=self.async_calls_max_pings)
        raise SelectPdfAsyncTimeoutError(handle.job_id, self.async_calls_max_pings)

    def _run_async(
        self,
        out_stream: IO[bytes] | None = None,
        *,
        multipart: bool = False,
    ) -> bytes:
        """Start a job, wait for it and return or write its result."""
        handle = self.start_async_job(multipart=multipart)
        result = self.wait_for_job(handle)
        if out_stream is not None:
            write_body(out_stream, result)
        return result


class AsyncJobClient(ApiClient):
    """Check the status of an asynchronous job and retrieve its result."""

    DEFAULT_API_ENDPOINT = ApiClient.DEFAULT_ASYNC_ENDPOINT
    ENDPOINT_NAME = "async_job"

    def __init__(
        self,
        api_key: str,
        job_id: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the job client.

        Args:
            api_key: SelectPdf API key.
            job_id: Job id returned when the job was started.
            timeout: Optional HTTP timeout.
            transport: Optional custom transport.
        """
        super().__init__(api_key, timeout=timeout, transport=transport)
        self.parameters["job_id"] = job_id
        self.finished = False

    def check_status(self) -> HttpOutcome:
        """Query the job once; any status other than 202 means finished."""
        outcome = self._send()
        self.finished = outcome.status_code != 202  # noqa: PLR2004
        return outcome

    def get_result(self) -> bytes | None:
        """Get the job result.

        Returns:
            The result, or None while the job is still running.
        """
        outcome = self.check_status()
        if not self.finished:
            return None
        return outcome.body

"""HTML to PDF conversion with the SelectPdf online API."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any, Self
from urllib.parse import urlencode

from selectpdf.api.client import ApiClient
from selectpdf.api.models import (
    PageLayout,
    PageMode,
    PageNumbersAlignment,
    PageOrientation,
    PageSize,
    RenderingEngine,
    SecureProtocol,
    StartupMode,
)
from selectpdf.api.validation import (
    validate_choice,
    validate_color,
    validate_int_choice,
    validate_url,
)
from selectpdf.clients.web_elements import WebElementsClient


if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


__all__ = ["HtmlToPdfClient"]


class HtmlToPdfClient(ApiClient):
    """Convert web pages and raw HTML to PDF.

    Options are configured with chainable setters before the conversion.
    Every setter validates its value immediately and raises
    :class:`~selectpdf.api.exceptions.SelectPdfValidationError` on bad input,
    so no request is ever sent with an invalid configuration.

    Example:
        ```python
        with HtmlToPdfClient("your-api-key") as client:
            client.set_page_size(PageSize.A4).set_margins(0).set_show_page_numbers(False)
            pdf = client.convert_url("https://selectpdf.com")
            print(client.get_number_of_pages())
        ```
    """

    DEFAULT_API_ENDPOINT = "https://selectpdf.com/api2/convert/"
    ENDPOINT_NAME = "convert"
    INPUT_PARAMETERS = ("url", "html", "base_url")

    # -------------------------------------------------------------------------
    # Conversion Inputs
    # -------------------------------------------------------------------------

    def _use_url(self, url: str) -> None:
        validate_url(url, label="converted webpage")
        self._reset_inputs()
        self.parameters["url"] = url

    def _use_html(self, html_string: str, base_url: str | None) -> None:
        self._reset_inputs()
        self.parameters["html"] = html_string
        if base_url:
            self.parameters["base_url"] = base_url

    # -------------------------------------------------------------------------
    # URL Conversions
    # -------------------------------------------------------------------------

    def convert_url(self, url: str) -> bytes:
        """Convert a publicly available http:// or https:// URL to PDF.

        Args:
            url: Address of the web page being converted.

        Returns:
            The PDF document.

        Raises:
            SelectPdfValidationError: If the URL is not http(s) or is local.
            SelectPdfRemoteError: If the service reports an error.
            SelectPdfConnectionError: If the service cannot be reached.
        """
        self._use_url(url)
        return self._perform_post()

    def convert_url_to_stream(self, url: str, stream: IO[bytes]) -> None:
        """Convert a URL to PDF and write the result to a binary stream."""
        self._use_url(url)
        self._perform_post(stream)

    def convert_url_to_file(self, url: str, file_path: Path | str) -> None:
        """Convert a URL to PDF and save it to a local file.

        The file is removed again if the conversion or the write fails.
        """
        self._use_url(url)
        with self._output_file(file_path) as stream:
            self._perform_post(stream)

    def convert_url_async(self, url: str) -> bytes:
        """Convert a URL to PDF using an asynchronous job.

        The job is started, then polled every ``async_calls_ping_interval``
        seconds until it finishes or ``async_calls_max_pings`` is reached.

        Raises:
            SelectPdfAsyncLaunchError: If the job could not be started.
            SelectPdfAsyncTimeoutError: If the job did not finish in time.
        """
        self._use_url(url)
        return self._run_async()

    def convert_url_to_stream_async(self, url: str, stream: IO[bytes]) -> None:
        """Convert a URL with an asynchronous job and write the PDF to a stream."""
        self._use_url(url)
        self._run_async(stream)

    def convert_url_to_file_async(self, url: str, file_path: Path | str) -> None:
        """Convert a URL with an asynchronous job and save the PDF to a file."""
        self._use_url(url)
        with self._output_file(file_path) as stream:
            self._run_async(stream)

    # -------------------------------------------------------------------------
    # HTML String Conversions
    # -------------------------------------------------------------------------

    def convert_html_string(
        self,
        html_string: str,
        base_url: str | None = None,
    ) -> bytes:
        """Convert a raw HTML string to PDF.

        Args:
            html_string: HTML content.
            base_url: Optional base URL used to resolve relative paths
                (images, CSS) in the HTML.

        Returns:
            The PDF document.
        """
        self._use_html(html_string, base_url)
        return self._perform_post()

    def convert_html_string_to_stream(
        self,
        html_string: str,
        stream: IO[bytes],
        base_url: str | None = None,
    ) -> None:
        """Convert a raw HTML string to PDF and write it to a binary stream."""
        self._use_html(html_string, base_url)
        self._perform_post(stream)

    def convert_html_string_to_file(
        self,
        html_string: str,
        file_path: Path | str,
        base_url: str | None = None,
    ) -> None:
        """Convert a raw HTML string to PDF and save it to a local file."""
        self._use_html(html_string, base_url)
        with self._output_file(file_path) as stream:
            self._perform_post(stream)

    def convert_html_string_async(
        self,
        html_string: str,
        base_url: str | None = None,
    ) -> bytes:
        """Convert a raw HTML string to PDF using an asynchronous job."""
        self._use_html(html_string, base_url)
        return self._run_async()

    def convert_html_string_to_stream_async(
        self,
        html_string: str,
        stream: IO[bytes],
        base_url: str | None = None,
    ) -> None:
        """Convert HTML with an asynchronous job and write the PDF to a stream."""
        self._use_html(html_string, base_url)
        self._run_async(stream)

    def convert_html_string_to_file_async(
        self,
        html_string: str,
        file_path: Path | str,
        base_url: str | None = None,
    ) -> None:
        """Convert HTML with an asynchronous job and save the PDF to a file."""
        self._use_html(html_string, base_url)
        with self._output_file(file_path) as stream:
            self._run_async(stream)

    # -------------------------------------------------------------------------
    # Web Elements
    # -------------------------------------------------------------------------

    def get_web_elements(self) -> list[dict[str, Any]]:
        """Get the positions of the elements selected with
        :meth:`set_pdf_web_elements_selectors` in the last conversion.

        Returns:
            The located elements; empty if no selectors were set or the last
            conversion reported no job id.
        """
        if not self.parameters.get("pdf_web_elements_selectors") or not self.job_id:
            return []

        with WebElementsClient(
            self.parameters["key"],
            self.job_id,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            client.set_api_endpoint(self.api_web_elements_endpoint)
            return client.get_web_elements()

    # -------------------------------------------------------------------------
    # Page Setup
    # -------------------------------------------------------------------------

    def set_page_size(self, page_size: PageSize | str) -> Self:
        """Set the PDF page size. Default is A4.

        With ``PageSize.CUSTOM`` use :meth:`set_page_width` and
        :meth:`set_page_height` to give the dimensions.
        """
        value = validate_choice(page_size, PageSize, label="Page Size")
        return self._set("page_size", value)

    def set_page_width(self, page_width: int) -> Self:
        """Set the page width in points (1pt = 1/72 inch). Default 595pt."""
        return self._set("page_width", page_width)

    def set_page_height(self, page_height: int) -> Self:
        """Set the page height in points. Default 842pt."""
        return self._set("page_height", page_height)

    def set_page_orientation(self, page_orientation: PageOrientation | str) -> Self:
        """Set the PDF page orientation. Default is Portrait."""
        value = validate_choice(page_orientation, PageOrientation, label="Page Orientation")
        return self._set("page_orientation", value)

    def set_margin_top(self, margin_top: int) -> Self:
        """Set the top margin in points. Default 5pt."""
        return self._set("margin_top", margin_top)

    def set_margin_right(self, margin_right: int) -> Self:
        """Set the right margin in points. Default 5pt."""
        return self._set("margin_right", margin_right)

    def set_margin_bottom(self, margin_bottom: int) -> Self:
        """Set the bottom margin in points. Default 5pt."""
        return self._set("margin_bottom", margin_bottom)

    def set_margin_left(self, margin_left: int) -> Self:
        """Set the left margin in points. Default 5pt."""
        return self._set("margin_left", margin_left)

    def set_margins(self, margin: int) -> Self:
        """Set all four page margins to the same value in points."""
        return (
            self.set_margin_top(margin)
            .set_margin_right(margin)
            .set_margin_bottom(margin)
            .set_margin_left(margin)
        )

    def set_pdf_name(self, pdf_name: str) -> Self:
        """Set the name of the generated PDF document."""
        return self._set("pdf_name", pdf_name)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def set_rendering_engine(self, rendering_engine: RenderingEngine | str) -> Self:
        """Set the rendering engine (WebKit, Restricted or Blink)."""
        value = validate_choice(rendering_engine, RenderingEngine, label="Rendering Engine")
        return self._set("engine", value)

    def set_web_page_width(self, web_page_width: int) -> Self:
        """Set the width in pixels of the browser window used for rendering.

        Default 1024px.
        """
        return self._set("web_page_width", web_page_width)

    def set_web_page_height(self, web_page_height: int) -> Self:
        """Set the height in pixels of the rendering window.

        The default 0 means the height is computed from the page content.
        """
        return self._set("web_page_height", web_page_height)

    def set_min_load_time(self, min_load_time: int) -> Self:
        """Set the time in seconds to wait after the page loads. Default 1."""
        return self._set("min_load_time", min_load_time)

    def set_conversion_delay(self, delay: int) -> Self:
        """Alias of :meth:`set_min_load_time`."""
        return self.set_min_load_time(delay)

    def set_max_load_time(self, max_load_time: int) -> Self:
        """Set the maximum time in seconds to wait for the page. Default 30."""
        return self._set("max_load_time", max_load_time)

    def set_navigation_timeout(self, timeout: int) -> Self:
        """Alias of :meth:`set_max_load_time`."""
        return self.set_max_load_time(timeout)

    def set_secure_protocol(self, secure_protocol: SecureProtocol | int) -> Self:
        """Set the protocol used for HTTPS connections to the converted page."""
        value = validate_int_choice(
            secure_protocol,
            SecureProtocol,
            label="Secure Protocol (0: TLS 1.1 or newer, 1: TLS 1.0, 2: SSL v3 only)",
        )
        return self._set("protocol", value)

    def set_use_css_print(self, use_css_print: bool) -> Self:  # noqa: FBT001
        """Use the ``print`` CSS media type instead of ``screen``."""
        return self._set_flag("use_css_print", use_css_print)

    def set_background_color(self, background_color: str) -> Self:
        """Set the PDF page background color in #RRGGBB format."""
        return self._set("background_color", validate_color(background_color))

    def set_draw_html_background(self, draw_html_background: bool) -> Self:  # noqa: FBT001
        """Render the web page background in the PDF. Default True."""
        return self._set_flag("draw_html_background", draw_html_background)

    def set_disable_javascript(self, disable_javascript: bool) -> Self:  # noqa: FBT001
        """Do not run JavaScript in the converted page. Default False."""
        return self._set_flag("disable_javascript", disable_javascript)

    def set_disable_internal_links(self, disable_internal_links: bool) -> Self:  # noqa: FBT001
        """Do not create internal links in the PDF. Default False."""
        return self._set_flag("disable_internal_links", disable_internal_links)

    def set_disable_external_links(self, disable_external_links: bool) -> Self:  # noqa: FBT001
        """Do not create external links in the PDF. Default False."""
        return self._set_flag("disable_external_links", disable_external_links)

    def set_render_on_timeout(self, render_on_timeout: bool) -> Self:  # noqa: FBT001
        """Render the page even if it did not finish loading. Default True."""
        return self._set_flag("render_on_timeout", render_on_timeout)

    def set_keep_images_together(self, keep_images_together: bool) -> Self:  # noqa: FBT001
        """Avoid breaking images between PDF pages. Default False."""
        return self._set_flag("keep_images_together", keep_images_together)

    def set_startup_mode(self, startup_mode: StartupMode | str) -> Self:
        """Set the converter startup mode (Automatic or Manual)."""
        value = validate_choice(startup_mode, StartupMode, label="Startup Mode")
        return self._set("startup_mode", value)

    def set_skip_decoding(self, skip_decoding: bool) -> Self:  # noqa: FBT001
        """Internal use only. Default True."""
        return self._set_flag("skip_decoding", skip_decoding)

    def set_scale_images(self, scale_images: bool) -> Self:  # noqa: FBT001
        """Scale images to produce smaller PDFs. Default False."""
        return self._set_flag("scale_images", scale_images)

    def set_single_page_pdf(self, generate_single_page_pdf: bool) -> Self:  # noqa: FBT001
        """Resize the page so that all content fits a single PDF page."""
        return self._set_flag("single_page_pdf", generate_single_page_pdf)

    def set_page_breaks_enhanced_algorithm(
        self,
        enable_enhanced_page_breaks_algorithm: bool,  # noqa: FBT001
    ) -> Self:
        """Use the slower page breaks algorithm that avoids hidden text."""
        return self._set_flag(
            "page_breaks_enhanced_algorithm",
            enable_enhanced_page_breaks_algorithm,
        )

    # -------------------------------------------------------------------------
    # Security and Document Information
    # -------------------------------------------------------------------------

    def set_user_password(self, user_password: str) -> Self:
        """Set the password required to open the PDF."""
        return self._set("user_password", user_password)

    def set_owner_password(self, owner_password: str) -> Self:
        """Set the password required to change the PDF permissions."""
        return self._set("owner_password", owner_password)

    def set_doc_title(self, doc_title: str) -> Self:
        """Set the PDF document title."""
        return self._set("doc_title", doc_title)

    def set_doc_subject(self, doc_subject: str) -> Self:
        """Set the PDF document subject."""
        return self._set("doc_subject", doc_subject)

    def set_doc_keywords(self, doc_keywords: str) -> Self:
        """Set the PDF document keywords."""
        return self._set("doc_keywords", doc_keywords)

    def set_doc_author(self, doc_author: str) -> Self:
        """Set the PDF document author."""
        return self._set("doc_author", doc_author)

    def set_doc_add_creation_date(self, doc_add_creation_date: bool) -> Self:  # noqa: FBT001
        """Add the creation date to the document information."""
        return self._set_flag("doc_add_creation_date", doc_add_creation_date)

    # -------------------------------------------------------------------------
    # Viewer Preferences
    # -------------------------------------------------------------------------

    def set_viewer_page_layout(self, page_layout: PageLayout | int) -> Self:
        """Set the page layout used when the PDF is opened in a viewer."""
        value = validate_int_choice(
            page_layout,
            PageLayout,
            label=(
                "Viewer Page Layout (0: Single Page, 1: One Column, "
                "2: Two Column Left, 3: Two Column Right)"
            ),
        )
        return self._set("viewer_page_layout", value)

    def set_viewer_page_mode(self, page_mode: PageMode | int) -> Self:
        """Set the panels displayed when the PDF is opened in a viewer."""
        value = validate_int_choice(
            page_mode,
            PageMode,
            label=(
                "Viewer Page Mode (0: Use None, 1: Use Outlines, 2: Use Thumbs, "
                "3: Full Screen, 4: Use OC, 5: Use Attachments)"
            ),
        )
        return self._set("viewer_page_mode", value)

    def set_viewer_center_window(self, viewer_center_window: bool) -> Self:  # noqa: FBT001
        """Center the viewer window on the screen."""
        return self._set_flag("viewer_center_window", viewer_center_window)

    def set_viewer_display_doc_title(self, viewer_display_doc_title: bool) -> Self:  # noqa: FBT001
        """Show the document title instead of the file name in the title bar."""
        return self._set_flag("viewer_display_doc_title", viewer_display_doc_title)

    def set_viewer_fit_window(self, viewer_fit_window: bool) -> Self:  # noqa: FBT001
        """Resize the viewer window to fit the first page."""
        return self._set_flag("viewer_fit_window", viewer_fit_window)

    def set_viewer_hide_menu_bar(self, viewer_hide_menu_bar: bool) -> Self:  # noqa: FBT001
        """Hide the viewer menu bar."""
        return self._set_flag("viewer_hide_menu_bar", viewer_hide_menu_bar)

    def set_viewer_hide_toolbar(self, viewer_hide_toolbar: bool) -> Self:  # noqa: FBT001
        """Hide the viewer toolbars."""
        return self._set_flag("viewer_hide_toolbar", viewer_hide_toolbar)

    def set_viewer_hide_window_ui(self, viewer_hide_window_ui: bool) -> Self:  # noqa: FBT001
        """Hide scroll bars and navigation controls in the viewer."""
        return self._set_flag("viewer_hide_window_ui", viewer_hide_window_ui)

    # -------------------------------------------------------------------------
    # Header
    # -------------------------------------------------------------------------

    def set_show_header(self, show_header: bool) -> Self:  # noqa: FBT001
        """Display a header on the PDF pages. Default False."""
        return self._set_flag("show_header", show_header)

    def set_header_height(self, height: int) -> Self:
        """Set the header height in points. Default 50."""
        return self._set("header_height", height)

    def set_header_url(self, url: str) -> Self:
        """Set the URL of the page rendered in the header."""
        return self._set("header_url", validate_url(url))

    def set_header_html(self, html: str) -> Self:
        """Set the raw HTML rendered in the header."""
        return self._set("header_html", html)

    def set_header_base_url(self, base_url: str) -> Self:
        """Set the base URL used to resolve relative paths in the header HTML."""
        return self._set("header_base_url", validate_url(base_url, label="base url"))

    def set_header_display_on_first_page(self, display_on_first_page: bool) -> Self:  # noqa: FBT001
        """Show the header on the first page. Default True."""
        return self._set_flag("header_display_on_first_page", display_on_first_page)

    def set_header_display_on_odd_pages(self, display_on_odd_pages: bool) -> Self:  # noqa: FBT001
        """Show the header on odd pages. Default True."""
        return self._set_flag("header_display_on_odd_pages", display_on_odd_pages)

    def set_header_display_on_even_pages(self, display_on_even_pages: bool) -> Self:  # noqa: FBT001
        """Show the header on even pages. Default True."""
        return self._set_flag("header_display_on_even_pages", display_on_even_pages)

    # -------------------------------------------------------------------------
    # Footer
    # -------------------------------------------------------------------------

    def set_show_footer(self, show_footer: bool) -> Self:  # noqa: FBT001
        """Display a footer on the PDF pages. Default False."""
        return self._set_flag("show_footer", show_footer)

    def set_footer_height(self, height: int) -> Self:
        """Set the footer height in points. Default 50."""
        return self._set("footer_height", height)

    def set_footer_url(self, url: str) -> Self:
        """Set the URL of the page rendered in the footer."""
        return self._set("footer_url", validate_url(url))

    def set_footer_html(self, html: str) -> Self:
        """Set the raw HTML rendered in the footer."""
        return self._set("footer_html", html)

    def set_footer_base_url(self, base_url: str) -> Self:
        """Set the base URL used to resolve relative paths in the footer HTML."""
        return self._set("footer_base_url", validate_url(base_url, label="base url"))

    def set_footer_display_on_first_page(self, display_on_first_page: bool) -> Self:  # noqa: FBT001
        """Show the footer on the first page. Default True."""
        return self._set_flag("footer_display_on_first_page", display_on_first_page)

    def set_footer_display_on_odd_pages(self, display_on_odd_pages: bool) -> Self:  # noqa: FBT001
        """Show the footer on odd pages. Default True."""
        return self._set_flag("footer_display_on_odd_pages", display_on_odd_pages)

    def set_footer_display_on_even_pages(self, display_on_even_pages: bool) -> Self:  # noqa: FBT001
        """Show the footer on even pages. Default True."""
        return self._set_flag("footer_display_on_even_pages", display_on_even_pages)

    def set_footer_display_on_last_page(self, display_on_last_page: bool) -> Self:  # noqa: FBT001
        """Show a separate footer on the last page. Default False."""
        return self._set_flag("footer_display_on_last_page", display_on_last_page)

    # -------------------------------------------------------------------------
    # Page Numbers
    # -------------------------------------------------------------------------

    def set_show_page_numbers(self, show_page_numbers: bool) -> Self:  # noqa: FBT001
        """Show page numbers in the footer. Default True."""
        return self._set_flag("page_numbers", show_page_numbers)

    def set_page_numbers_first(self, first_page_number: int) -> Self:
        """Set the number of the first page. Default 1."""
        return self._set("page_numbers_first", first_page_number)

    def set_page_numbers_offset(self, total_pages_offset: int) -> Self:
        """Set the offset added to the total number of pages. Default 0."""
        return self._set("page_numbers_offset", total_pages_offset)

    def set_page_numbers_template(self, template: str) -> Self:
        """Set the page numbers text.

        ``{page_number}`` and ``{total_pages}`` are replaced by the service.
        Default is ``"Page: {page_number} of {total_pages}"``.
        """
        return self._set("page_numbers_template", template)

    def set_page_numbers_font_name(self, font_name: str) -> Self:
        """Set the page numbers font. Default Helvetica."""
        return self._set("page_numbers_font_name", font_name)

    def set_page_numbers_font_size(self, font_size: int) -> Self:
        """Set the page numbers font size in points. Default 10."""
        return self._set("page_numbers_font_size", font_size)

    def set_page_numbers_alignment(self, alignment: PageNumbersAlignment | int) -> Self:
        """Set the page numbers alignment (1 left, 2 center, 3 right)."""
        value = validate_int_choice(
            alignment,
            PageNumbersAlignment,
            label="Page Numbers Alignment (1: Left, 2: Center, 3: Right)",
        )
        return self._set("page_numbers_alignment", value)

    def set_page_numbers_color(self, color: str) -> Self:
        """Set the page numbers color in #RRGGBB format. Default #333333."""
        return self._set("page_numbers_color", validate_color(color))

    def set_page_numbers_vertical_position(self, position: int) -> Self:
        """Set the vertical position of the page numbers in the footer."""
        return self._set("page_numbers_pos_y", position)

    # -------------------------------------------------------------------------
    # Element Selection
    # -------------------------------------------------------------------------

    def set_pdf_bookmarks_selectors(self, selectors: str) -> Self:
        """Create bookmarks for the elements matched by CSS selectors."""
        return self._set("pdf_bookmarks_selectors", selectors)

    def set_pdf_hide_elements(self, selectors: str) -> Self:
        """Exclude the elements matched by CSS selectors from the conversion."""
        return self._set("pdf_hide_elements", selectors)

    def set_pdf_show_only_element_id(self, element_id: str) -> Self:
        """Convert only the element with the given HTML id."""
        return self._set("pdf_show_only_element_id", element_id)

    def set_pdf_web_elements_selectors(self, selectors: str) -> Self:
        """Locate the elements matched by CSS selectors in the PDF.

        Their positions are retrieved after the conversion with
        :meth:`get_web_elements`.
        """
        return self._set("pdf_web_elements_selectors", selectors)

    # -------------------------------------------------------------------------
    # HTTP Options
    # -------------------------------------------------------------------------

    def set_cookies(self, cookies: Mapping[str, str]) -> Self:
        """Send cookies with the request for the converted page."""
        return self._set("cookies_string", urlencode(dict(cookies)))

    def set_authentication(self, username: str, password: str) -> Self:
        """Set HTTP authentication credentials for the converted page."""
        self._set("user_name", username)
        return self._set("password", password)

    def set_proxy_server(self, proxy_server: str) -> Self:
        """Set the proxy server used to access the converted page."""
        return self._set("proxy_server", proxy_server)

    def set_proxy_port(self, proxy_port: int) -> Self:
        """Set the proxy server port."""
        return self._set("proxy_port", proxy_port)

    def set_proxy_user_name(self, proxy_user_name: str) -> Self:
        """Set the proxy server user name."""
        return self._set("proxy_user_name", proxy_user_name)

    def set_proxy_password(self, proxy_password: str) -> Self:
        """Set the proxy server password."""
        return self._set("proxy_password", proxy_password)

    def set_custom_parameter(self, name: str, value: str) -> Self:
        """Set a parameter not covered by the other setters."""
        return self._set(name, value)

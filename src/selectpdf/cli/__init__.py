"""CLI module for the SelectPdf client."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer

from selectpdf import __version__
from selectpdf.api import (
    OutputFormat,
    PageOrientation,
    PageSize,
    SelectPdfError,
)
from selectpdf.clients import (
    HtmlToPdfClient,
    PdfMergeClient,
    PdfToTextClient,
    UsageClient,
)
from selectpdf.config import ConfigurationError, Settings, load_settings
from selectpdf.observability import LogLevel, configure_logging, operation_context


if TYPE_CHECKING:
    from collections.abc import Iterator


app = typer.Typer(
    name="selectpdf",
    help="Convert HTML to PDF, merge PDFs and extract text with the SelectPdf online API.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:  # noqa: FBT001
    """Print version and exit."""
    if value:
        typer.echo(f"selectpdf version {__version__}")
        raise typer.Exit


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


@contextmanager
def _command(name: str) -> Iterator[None]:
    """Run a command body, reporting client errors on stderr with exit code 1."""
    with operation_context(command=name):
        try:
            yield
        except (SelectPdfError, ConfigurationError) as exc:
            _fail(exc)


def _settings(ctx: typer.Context) -> Settings:
    settings: Settings = ctx.obj
    return settings


def _is_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--verbose",
        "-V",
        help="Enable verbose (debug) logging.",
    ),
    quiet: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--quiet",
        "-q",
        help="Only show errors.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
) -> None:
    """SelectPdf online API client."""
    del version  # Handled by callback

    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive.", err=True)
        raise typer.Exit(1)

    try:
        settings = load_settings(config_file, require_config_file=config_file is not None)
    except ConfigurationError as exc:
        _fail(exc)

    logging_config = settings.observability.logging
    if verbose:
        level = LogLevel.DEBUG
    elif quiet:
        level = LogLevel.ERROR
    else:
        level = logging_config.level

    configure_logging(level=level, log_format=logging_config.format)
    ctx.obj = settings


# ---------------------------------------------------------------------------
# HTML to PDF
# ---------------------------------------------------------------------------


def _configure_conversion(
    client: HtmlToPdfClient,
    page_size: PageSize,
    orientation: PageOrientation,
    margins: int | None,
) -> None:
    client.set_page_size(page_size).set_page_orientation(orientation)
    if margins is not None:
        client.set_margins(margins)


@app.command(name="convert-url")
def convert_url(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Public http:// or https:// URL to convert."),
    output: Path = typer.Argument(..., help="Output PDF file."),
    page_size: PageSize = typer.Option(
        PageSize.A4,
        "--page-size",
        case_sensitive=False,
        help="PDF page size.",
    ),
    orientation: PageOrientation = typer.Option(
        PageOrientation.PORTRAIT,
        "--orientation",
        case_sensitive=False,
        help="PDF page orientation.",
    ),
    margins: int | None = typer.Option(None, "--margins", help="All page margins in points."),
    use_async: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--async",
        help="Run the conversion as an asynchronous job.",
    ),
) -> None:
    """Convert a web page to PDF."""
    with _command("convert-url"), HtmlToPdfClient.from_settings(_settings(ctx)) as client:
        _configure_conversion(client, page_size, orientation, margins)
        if use_async:
            client.convert_url_to_file_async(url, output)
        else:
            client.convert_url_to_file(url, output)
        typer.echo(f"Saved {output} ({client.get_number_of_pages()} pages).")


@app.command(name="convert-html")
def convert_html(
    ctx: typer.Context,
    input_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="HTML file to convert.",
    ),
    output: Path = typer.Argument(..., help="Output PDF file."),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="Base URL used to resolve relative paths in the HTML.",
    ),
    page_size: PageSize = typer.Option(
        PageSize.A4,
        "--page-size",
        case_sensitive=False,
        help="PDF page size.",
    ),
    orientation: PageOrientation = typer.Option(
        PageOrientation.PORTRAIT,
        "--orientation",
        case_sensitive=False,
        help="PDF page orientation.",
    ),
    margins: int | None = typer.Option(None, "--margins", help="All page margins in points."),
    use_async: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--async",
        help="Run the conversion as an asynchronous job.",
    ),
) -> None:
    """Convert a local HTML file to PDF."""
    html = input_file.read_text(encoding="utf-8")
    with _command("convert-html"), HtmlToPdfClient.from_settings(_settings(ctx)) as client:
        _configure_conversion(client, page_size, orientation, margins)
        if use_async:
            client.convert_html_string_to_file_async(html, output, base_url)
        else:
            client.convert_html_string_to_file(html, output, base_url)
        typer.echo(f"Saved {output} ({client.get_number_of_pages()} pages).")


# ---------------------------------------------------------------------------
# PDF Tools
# ---------------------------------------------------------------------------


@app.command()
def merge(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Output PDF file."),
    inputs: list[str] = typer.Argument(..., help="PDF files or URLs, in merge order."),
    use_async: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--async",
        help="Run the merge as an asynchronous job.",
    ),
) -> None:
    """Merge PDF documents into one."""
    with _command("merge"), PdfMergeClient.from_settings(_settings(ctx)) as client:
        for item in inputs:
            if _is_url(item):
                client.add_url_file(item)
            else:
                client.add_file(item)
        if use_async:
            client.save_to_file_async(output)
        else:
            client.save_to_file(output)
        typer.echo(f"Saved {output} ({client.get_number_of_pages()} pages).")


@app.command(name="pdf-to-text")
def pdf_to_text(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="PDF file or URL."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the text to this file instead of stdout.",
    ),
    start_page: int = typer.Option(1, "--start-page", help="First page to process."),
    end_page: int = typer.Option(0, "--end-page", help="Last page to process (0 for the last)."),
    html: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--html",
        help="Produce HTML instead of plain text.",
    ),
) -> None:
    """Extract the text of a PDF document."""
    with _command("pdf-to-text"), PdfToTextClient.from_settings(_settings(ctx)) as client:
        client.set_start_page(start_page).set_end_page(end_page)
        client.set_output_format(OutputFormat.HTML if html else OutputFormat.TEXT)

        if output is None:
            if _is_url(source):
                text = client.get_text_from_url(source)
            else:
                text = client.get_text_from_file(source)
            typer.echo(text)
        elif _is_url(source):
            client.get_text_from_url_to_file(source, output)
        else:
            client.get_text_from_file_to_file(source, output)


@app.command()
def search(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="PDF file or URL."),
    text: str = typer.Argument(..., help="Text to search for."),
    case_sensitive: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--case-sensitive",
        help="Match the case of the text.",
    ),
    whole_words: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--whole-words",
        help="Match whole words only.",
    ),
) -> None:
    """Search for text in a PDF document and print the matches as JSON."""
    with _command("search"), PdfToTextClient.from_settings(_settings(ctx)) as client:
        if _is_url(source):
            results = client.search_url(
                source,
                text,
                case_sensitive=case_sensitive,
                whole_words_only=whole_words,
            )
        else:
            results = client.search_file(
                source,
                text,
                case_sensitive=case_sensitive,
                whole_words_only=whole_words,
            )
        typer.echo(json.dumps(results, indent=2))


@app.command()
def usage(
    ctx: typer.Context,
    history: bool = typer.Option(  # noqa: FBT001
        False,  # noqa: FBT003
        "--history",
        help="Include the usage history.",
    ),
) -> None:
    """Show the API usage for the configured key."""
    with _command("usage"), UsageClient.from_settings(_settings(ctx)) as client:
        typer.echo(json.dumps(client.get_usage(history), indent=2))


__all__ = ["app"]

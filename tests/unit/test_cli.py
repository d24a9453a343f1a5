"""Unit tests for the command-line interface."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest
import respx  # noqa: TC002
from typer.testing import CliRunner

from selectpdf import __version__
from selectpdf.cli import app
from selectpdf.config import clear_settings_cache


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


BASE_URL = "https://selectpdf.com/api2"
PDF_BYTES = b"%PDF-1.4 cli"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Run from an empty directory with a fresh settings cache."""
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def with_key(monkeypatch: pytest.MonkeyPatch, api_key: str) -> str:
    """Provide the API key through the environment."""
    monkeypatch.setenv("SELECTPDF_API_KEY", api_key)
    return api_key


class TestGlobalOptions:
    """Tests for global options."""

    def test_version(self) -> None:
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"selectpdf version {__version__}" in result.output

    def test_verbose_and_quiet_conflict(self) -> None:
        """Test --verbose and --quiet cannot be combined."""
        result = runner.invoke(app, ["-V", "-q", "usage"])

        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_missing_config_file(self, tmp_path: Path) -> None:
        """Test an explicit config file must exist."""
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "usage"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_missing_api_key(self) -> None:
        """Test commands fail cleanly without an API key."""
        result = runner.invoke(app, ["usage"])

        assert result.exit_code == 1
        assert "No SelectPdf API key configured" in result.output


class TestConvertCommands:
    """Tests for the conversion commands."""

    @pytest.mark.respx(base_url=BASE_URL)
    def test_convert_url(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test convert-url saves the PDF."""
        route = respx_mock.post("/convert/").mock(
            return_value=httpx.Response(
                200,
                content=PDF_BYTES,
                headers={"selectpdf-api-pages": "2"},
            ),
        )
        output = tmp_path / "out.pdf"

        result = runner.invoke(
            app,
            [
                "convert-url",
                "https://example.com",
                str(output),
                "--page-size",
                "letter",
                "--orientation",
                "Landscape",
                "--margins",
                "0",
            ],
        )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == PDF_BYTES
        assert "(2 pages)" in result.output
        body = route.calls.last.request.content.decode()
        assert f"key={with_key}" in body
        assert "page_size=Letter" in body
        assert "page_orientation=Landscape" in body
        assert "margin_left=0" in body

    @pytest.mark.respx(base_url=BASE_URL)
    def test_convert_url_rejects_local_url(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test validation errors are reported with exit code 1."""
        del with_key
        output = tmp_path / "out.pdf"

        result = runner.invoke(app, ["convert-url", "http://localhost/x", str(output)])

        assert result.exit_code == 1
        assert "Cannot convert local urls" in result.output
        assert respx_mock.calls.call_count == 0
        assert not output.exists()

    @pytest.mark.respx(base_url=BASE_URL)
    def test_convert_html(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test convert-html sends the file contents."""
        del with_key
        route = respx_mock.post("/convert/").mock(
            return_value=httpx.Response(200, content=PDF_BYTES),
        )
        page = tmp_path / "page.html"
        page.write_text("<h1>Hello</h1>", encoding="utf-8")
        output = tmp_path / "out.pdf"

        result = runner.invoke(
            app,
            ["convert-html", str(page), str(output), "--base-url", "https://example.com/"],
        )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == PDF_BYTES
        body = route.calls.last.request.content.decode()
        assert "html=%3Ch1%3EHello%3C%2Fh1%3E" in body
        assert "base_url=https%3A%2F%2Fexample.com%2F" in body

    @pytest.mark.respx(base_url=BASE_URL)
    def test_remote_error(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test service errors are reported with the status code."""
        del with_key
        respx_mock.post("/convert/").mock(
            return_value=httpx.Response(401, content=b"Invalid API key"),
        )
        output = tmp_path / "out.pdf"

        result = runner.invoke(app, ["convert-url", "https://example.com", str(output)])

        assert result.exit_code == 1
        assert "Error: (401) Invalid API key" in result.output
        assert not output.exists()


class TestPdfCommands:
    """Tests for the merge, text and usage commands."""

    @pytest.mark.respx(base_url=BASE_URL)
    def test_merge(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test merge accepts files and URLs."""
        del with_key
        route = respx_mock.post("/pdfmerge/").mock(
            return_value=httpx.Response(200, content=PDF_BYTES),
        )
        first = tmp_path / "a.pdf"
        first.write_bytes(b"%PDF a")
        output = tmp_path / "merged.pdf"

        result = runner.invoke(
            app,
            ["merge", str(output), str(first), "https://example.com/b.pdf"],
        )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == PDF_BYTES
        body = route.calls.last.request.content
        assert b'name="file_1"' in body
        assert b"https://example.com/b.pdf" in body

    @pytest.mark.respx(base_url=BASE_URL)
    def test_pdf_to_text_stdout(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
    ) -> None:
        """Test pdf-to-text prints the text."""
        del with_key
        respx_mock.post("/pdftotext/").mock(
            return_value=httpx.Response(200, content=b"Extracted text"),
        )

        result = runner.invoke(app, ["pdf-to-text", "https://example.com/a.pdf"])

        assert result.exit_code == 0, result.output
        assert "Extracted text" in result.output

    @pytest.mark.respx(base_url=BASE_URL)
    def test_search(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
        tmp_path: Path,
    ) -> None:
        """Test search prints the matches as JSON."""
        del with_key
        matches = [{"TextFound": "pdf", "PageIndex": 0}]
        respx_mock.post("/pdftotext/").mock(return_value=httpx.Response(200, json=matches))
        source = tmp_path / "a.pdf"
        source.write_bytes(b"%PDF a")

        result = runner.invoke(app, ["search", str(source), "pdf", "--whole-words"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == matches

    @pytest.mark.respx(base_url=BASE_URL)
    def test_usage(
        self,
        with_key: str,
        respx_mock: respx.MockRouter,
    ) -> None:
        """Test usage prints the usage document."""
        del with_key
        route = respx_mock.post("/usage/").mock(
            return_value=httpx.Response(200, json={"available": 42}),
        )

        result = runner.invoke(app, ["usage", "--history"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"available": 42}
        assert "get_history=True" in route.calls.last.request.content.decode()

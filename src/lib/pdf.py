"""
PDF materialization with a headless browser

Loads an assembled HTML document into Chromium (playwright, sync API),
lets Mermaid draw, and prints the page to PDF. One BrowserSession owns one
browser process and can print many documents; each document gets its own
browser context.

Usage:
    with BrowserSession() as session:
        pdf = session.pdf_render(html, config)
"""

import re
from typing import Any, Dict, Optional

from playwright.sync_api import Browser, BrowserContext, Error as PlaywrightError, Playwright, sync_playwright

from ..config import appsettings
from ..models.document import DocumentConfig
from .document import MERMAID_MARKER
from .log import LOG


class PdfRenderError(Exception):
    """Raised when the browser cannot be started or cannot print a page"""
    pass


def launchOptions_normalize(options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Convert launch option keys to playwright's keyword names

    Config files written for the JavaScript tooling use camelCase
    (``executablePath``); playwright for Python expects snake_case.
    """
    normalized: Dict[str, Any] = {}
    for key, value in (options or {}).items():
        normalized[re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()] = value
    return normalized


class BrowserSession:
    """
    A Chromium instance for printing documents

    The browser is started on first use (or on ``with`` entry) and closed
    by ``close()`` / leaving the ``with`` block.
    """

    def __init__(self, launch_options: Optional[Dict[str, Any]] = None):
        self.launch_options: Dict[str, Any] = {
            "headless": appsettings.headless,
            **launchOptions_normalize(launch_options),
        }
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    def __enter__(self) -> "BrowserSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._browser is not None

    def open(self) -> Browser:
        """Start playwright and launch Chromium, if not already running"""
        if self._browser is not None:
            return self._browser
        LOG(f"Launching browser with {self.launch_options}", level=2)
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(**self.launch_options)
        except PlaywrightError as e:
            self.close()
            raise PdfRenderError(f"Could not launch browser: {e}") from e
        return self._browser

    def close(self) -> None:
        """Close the browser and stop playwright"""
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def pdf_render(self, html: str, config: DocumentConfig) -> bytes:
        """
        Print an HTML document to PDF

        Args:
            html: Complete HTML document
            config: Document options (timeout, media type, pdf_options)

        Returns:
            PDF file content

        Raises:
            PdfRenderError: If loading or printing the page fails
        """
        browser = self.open()
        context: Optional[BrowserContext] = None
        try:
            context = browser.new_context()
            page = context.new_page()
            if config.page_media_type:
                page.emulate_media(media=config.page_media_type)
            page.set_content(html, wait_until="networkidle", timeout=config.timeout)
            if MERMAID_MARKER in html and appsettings.mermaid_settle_ms:
                page.wait_for_timeout(appsettings.mermaid_settle_ms)
            pdf: bytes = page.pdf(**config.pdf_options.pdfKwargs_get())
        except PlaywrightError as e:
            raise PdfRenderError(f"Failed to print document: {e}") from e
        finally:
            if context is not None:
                context.close()
        LOG(f"Printed {len(pdf)} bytes of PDF", level=3)
        return pdf

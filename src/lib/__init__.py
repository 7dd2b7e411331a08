"""
mdpress - Markdown to HTML/PDF converter with math and diagrams

Library layer: rendering, sanitizing, document assembly and printing.
"""

__version__ = "1.0.0"

from .renderer import markdown_render, markdown_renderSafe, renderer_create, renderer_get
from .sanitizer import ALLOWLIST_DEFAULT, AllowList, html_sanitize
from .theme import Theme, ThemeError
from .pdf import BrowserSession, PdfRenderError
from .converter import ConversionResult, Converter, markdown_convert
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "markdown_render",
    "markdown_renderSafe",
    "renderer_create",
    "renderer_get",
    "AllowList",
    "ALLOWLIST_DEFAULT",
    "html_sanitize",
    "Theme",
    "ThemeError",
    "BrowserSession",
    "PdfRenderError",
    "Converter",
    "ConversionResult",
    "markdown_convert",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]

"""
mdpress - Markdown to HTML/PDF converter

Renders Markdown with LaTeX math and Mermaid diagrams to sanitized HTML,
standalone HTML documents, or PDF.
"""

__version__ = "1.0.0"

from .lib import (
    Converter,
    ConversionResult,
    markdown_convert,
    markdown_render,
    markdown_renderSafe,
    html_sanitize,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Converter",
    "ConversionResult",
    "markdown_convert",
    "markdown_render",
    "markdown_renderSafe",
    "html_sanitize",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

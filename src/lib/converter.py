"""
Markdown to HTML/PDF conversion

The Converter ties the pipeline together for one document:

    Markdown text
      -> front matter split (per-document option overrides)
      -> markdown_renderSafe (render + sanitize)
      -> htmlDocument_build (standalone HTML)
      -> bytes, or BrowserSession.pdf_render (PDF)
      -> optional write to ``dest``

Example:
    >>> converter = Converter(DocumentConfig(as_html=True))
    >>> result = converter.convert("# Hello")
    >>> result.content.startswith(b"<!DOCTYPE html>")
    True
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..models.document import DocumentConfig
from .document import customScripts_load, customStyles_load, htmlDocument_build, path_resolve
from .frontmatter import frontmatter_split
from .log import LOG
from .pdf import BrowserSession
from .renderer import markdown_renderSafe, rendererConfig_fromOptions


STDOUT_DEST = "stdout"


@dataclass
class ConversionResult:
    """
    Output of converting one document

    Attributes:
        content: HTML (UTF-8) or PDF bytes
        filename: Where the output was written: a path, "stdout", or None
        as_html: True if content is HTML
    """
    content: bytes
    filename: Optional[str] = None
    as_html: bool = False


class Converter:
    """
    Converts Markdown documents with a base configuration

    Args:
        config: Base document options (defaults when None)
        browser: Shared BrowserSession for PDF output. Without one, a
                 session is started and closed for each PDF conversion.
    """

    def __init__(self, config: Optional[DocumentConfig] = None, browser: Optional[BrowserSession] = None):
        self.config: DocumentConfig = config or DocumentConfig()
        self.browser: Optional[BrowserSession] = browser

    def config_resolve(self, overrides: Dict[str, Any]) -> DocumentConfig:
        """Base configuration with front matter ``overrides`` applied"""
        if not overrides:
            return self.config
        LOG(f"Front matter overrides: {sorted(overrides)}", level=3)
        return self.config.merged(overrides)

    def convert(self, markdown: Optional[str], basedir: Union[str, Path, None] = None) -> ConversionResult:
        """
        Convert Markdown text

        Args:
            markdown: Document text, optionally with YAML front matter
            basedir: Directory for relative stylesheets, scripts and dest
                     (config.basedir, then the current directory, when None)

        Returns:
            ConversionResult

        Raises:
            ValueError: If no Markdown is given or the options are invalid
            PdfRenderError: If PDF printing fails
        """
        if markdown is None:
            raise ValueError("Either a path or Markdown content must be provided")

        content, overrides = frontmatter_split(markdown)
        config = self.config_resolve(overrides)
        basedir = config.basedir or basedir or Path.cwd()

        fragment = markdown_renderSafe(
            content, rendererConfig_fromOptions(config.markdown_options)
        )
        html = htmlDocument_build(
            fragment,
            config,
            custom_styles=customStyles_load(config, basedir),
            custom_scripts=customScripts_load(config, basedir),
        )

        if config.as_html:
            output = html.encode("utf-8")
        else:
            output = self.pdf_render(html, config)

        result = ConversionResult(content=output, as_html=config.as_html)
        if config.dest:
            result.filename = output_write(output, config.dest, basedir)
        return result

    def file_convert(self, path: Union[str, Path]) -> ConversionResult:
        """
        Convert a Markdown file

        Relative resources resolve against the file's directory unless the
        configuration sets ``basedir``.

        Raises:
            OSError: If the file cannot be read
        """
        source = Path(path).expanduser().resolve()
        LOG(f"Reading {source}", level=2)
        markdown = source.read_text(encoding=self.config.md_file_encoding)
        return self.convert(markdown, basedir=source.parent)

    def pdf_render(self, html: str, config: DocumentConfig) -> bytes:
        if self.browser is not None:
            return self.browser.pdf_render(html, config)
        with BrowserSession(config.launch_options) as session:
            return session.pdf_render(html, config)


def output_write(content: bytes, dest: str, basedir: Union[str, Path, None]) -> str:
    """
    Write conversion output to ``dest``

    Returns:
        The written path, or "stdout"
    """
    if dest == STDOUT_DEST:
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.flush()
        return STDOUT_DEST

    output_path = path_resolve(dest, basedir)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
    LOG(f"Wrote {output_path}", level=2)
    return str(output_path)


def markdown_convert(
    path: Union[str, Path, None] = None,
    content: Optional[str] = None,
    config: Optional[DocumentConfig] = None,
    browser: Optional[BrowserSession] = None,
) -> ConversionResult:
    """
    Convert a Markdown file or string in one call

    Raises:
        ValueError: If neither ``path`` nor ``content`` is given
    """
    converter = Converter(config, browser)
    if path is not None:
        return converter.file_convert(path)
    if content is None:
        raise ValueError("Either a path or Markdown content must be provided")
    return converter.convert(content)

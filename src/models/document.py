"""
Document conversion options

Pydantic models for everything that shapes a converted document: page
setup for PDF output, Markdown parser toggles, extra stylesheets and
scripts. The same models validate config files, CLI overrides and YAML
front matter, so all three sources merge into one DocumentConfig.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


PageFormat = Literal["A4", "Letter", "A3", "A5", "Legal", "Tabloid"]
MediaType = Literal["screen", "print"]


class PdfMargin(BaseModel):
    """Page margins as CSS lengths (e.g. "1cm", "12mm", "0.5in")"""

    model_config = ConfigDict(extra="forbid")

    top: Optional[str] = "1.5cm"
    bottom: Optional[str] = "1cm"
    left: Optional[str] = "1cm"
    right: Optional[str] = "1cm"

    @field_validator("top", "bottom", "left", "right", mode="before")
    @classmethod
    def length_coerce(cls, value: Any) -> Any:
        # YAML turns "0" or "10" into ints; treat bare numbers as pixels
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value}px"
        return value


class PdfOptions(BaseModel):
    """
    Browser print options

    Field names follow the browser's page.pdf() keyword arguments.
    """

    model_config = ConfigDict(extra="forbid")

    format: PageFormat = "A4"
    width: Optional[Union[str, int]] = None
    height: Optional[Union[str, int]] = None
    margin: PdfMargin = Field(default_factory=PdfMargin)
    print_background: bool = True
    landscape: bool = False
    scale: Optional[float] = Field(default=None, ge=0.1, le=2.0)
    header_template: Optional[str] = None
    footer_template: Optional[str] = None
    display_header_footer: bool = False
    page_ranges: Optional[str] = None
    prefer_css_page_size: bool = False

    def pdfKwargs_get(self) -> Dict[str, Any]:
        """Keyword arguments for page.pdf(), unset values omitted"""
        kwargs: Dict[str, Any] = {
            "format": self.format,
            "margin": self.margin.model_dump(exclude_none=True),
            "print_background": self.print_background,
            "landscape": self.landscape,
            "display_header_footer": self.display_header_footer,
            "prefer_css_page_size": self.prefer_css_page_size,
        }
        optional = {
            "width": self.width,
            "height": self.height,
            "scale": self.scale,
            "header_template": self.header_template,
            "footer_template": self.footer_template,
            "page_ranges": self.page_ranges,
        }
        kwargs.update({k: v for k, v in optional.items() if v is not None})
        return kwargs


class MarkdownOptions(BaseModel):
    """
    Markdown parser toggles as written by users

    Unset values fall back to the renderer defaults. ``gfm`` is accepted for
    compatibility and ignored: tables and strikethrough are always on.
    """

    model_config = ConfigDict(extra="ignore")

    html: Optional[bool] = None
    linkify: Optional[bool] = None
    typographer: Optional[bool] = None
    breaks: Optional[bool] = None
    gfm: Optional[bool] = None


class ScriptConfig(BaseModel):
    """A script to inject: a local path, a remote URL, or inline content"""

    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None


class DocumentConfig(BaseModel):
    """
    Complete configuration for converting one Markdown document

    Attributes:
        basedir: Directory for resolving relative stylesheet/script paths
        stylesheet: Extra stylesheets (local paths or http(s) URLs)
        css: Inline CSS appended after the stylesheets
        body_class: Classes for the content wrapper element
        pdf_options: Page setup for PDF output
        dest: Output path, "stdout", or None to only return the bytes
        document_title: <title> of the generated document
        timeout: Page load timeout in milliseconds
        as_html: Produce HTML instead of PDF
        highlight_style: Pygments style for code blocks
        page_media_type: CSS media type to emulate while printing
        launch_options: Extra browser launch keyword arguments
        markdown_options: Markdown parser toggles
        script: Extra scripts appended to the document body
        md_file_encoding: Encoding of Markdown input files
        stylesheet_encoding: Encoding of local stylesheet files
    """

    model_config = ConfigDict(extra="ignore")

    basedir: Optional[str] = None
    stylesheet: List[str] = Field(default_factory=list)
    css: str = ""
    body_class: List[str] = Field(default_factory=lambda: ["markdown-body"])
    pdf_options: PdfOptions = Field(default_factory=PdfOptions)
    dest: Optional[str] = None
    document_title: str = "Document"
    timeout: int = Field(default=30000, gt=0)
    as_html: bool = False
    highlight_style: Optional[str] = None
    page_media_type: Optional[MediaType] = None
    launch_options: Dict[str, Any] = Field(default_factory=dict)
    markdown_options: MarkdownOptions = Field(default_factory=MarkdownOptions)
    script: List[ScriptConfig] = Field(default_factory=list)
    md_file_encoding: str = "utf-8"
    stylesheet_encoding: str = "utf-8"

    @field_validator("stylesheet", "body_class", "script", mode="before")
    @classmethod
    def list_coerce(cls, value: Any) -> Any:
        """Accept a single value where a list is expected"""
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            return [value]
        return value

    def merged(self, overrides: Dict[str, Any]) -> "DocumentConfig":
        """
        Return a new config with ``overrides`` applied on top of this one

        Nested mappings (pdf_options, margin, markdown_options,
        launch_options) are merged key by key; everything else is replaced.

        Args:
            overrides: Raw option mapping (config file, CLI, front matter)

        Returns:
            Validated DocumentConfig

        Raises:
            pydantic.ValidationError: If the merged options are invalid
        """
        base = self.model_dump(exclude_unset=True)
        return type(self).model_validate(dict_deepMerge(base, overrides))


def dict_deepMerge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``overrides`` into a copy of ``base``"""
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = dict_deepMerge(result[key], value)
        else:
            result[key] = value
    return result

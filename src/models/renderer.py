"""
Renderer value objects

RendererConfig selects the four parser toggles; MathResult carries the
outcome of typesetting one formula so the render pass never has to deal
with exceptions.
"""

from dataclasses import dataclass
from typing import Literal, Optional


MathErrorKind = Literal["syntax", "internal"]


@dataclass(frozen=True)
class RendererConfig:
    """
    Immutable Markdown renderer configuration

    Equal configurations hash equal, so they can key the renderer cache.

    Attributes:
        html: Pass raw HTML in the source through to the output
        linkify: Turn URL-like text into links
        typographer: Typographic replacements and smart quotes
        breaks: Render soft line breaks as <br>
    """
    html: bool = True
    linkify: bool = True
    typographer: bool = True
    breaks: bool = False


RENDERER_CONFIG_DEFAULT = RendererConfig()


@dataclass(frozen=True)
class MathResult:
    """
    Outcome of typesetting a single formula

    Either ``markup`` holds the rendered MathML, or ``error`` holds a
    message and ``error_kind`` says whether the math engine rejected the
    input ("syntax") or failed on its own ("internal").

    Attributes:
        source: Raw math source as written between the delimiters
        display: True for block (display) math, False for inline
        markup: Rendered markup, empty on error
        error: Error message, None on success
        error_kind: Category of the error, None on success
    """
    source: str
    display: bool
    markup: str = ""
    error: Optional[str] = None
    error_kind: Optional[MathErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, display: bool, markup: str) -> "MathResult":
        return cls(source=source, display=display, markup=markup)

    @classmethod
    def failure(
        cls, source: str, display: bool, error: str, kind: MathErrorKind
    ) -> "MathResult":
        return cls(source=source, display=display, error=error, error_kind=kind)

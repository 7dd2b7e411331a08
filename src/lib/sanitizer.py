"""
HTML sanitization for rendered Markdown

Allow-list filtering with bleach. Anything not on the list is removed:
scripts, event-handler attributes, javascript: URLs, unknown elements.
The default list extends bleach's defaults with the vocabulary the
renderer itself produces: Markdown output, task-list checkboxes,
highlighted code, and MathML from the math typesetter.

Elements whose content is itself hostile (script, style, iframe, ...) are
removed together with their content before the allow-list pass, so
``<script>alert(1)</script>`` leaves nothing behind.
"""

import re
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

import bleach
from bleach.css_sanitizer import CSSSanitizer
from bs4 import BeautifulSoup


MARKDOWN_ELEMENTS: FrozenSet[str] = frozenset(
    {
        # text
        "p", "br", "hr", "div", "span", "em", "strong", "b", "i", "u",
        "s", "del", "ins", "mark", "sup", "sub", "small", "cite", "q",
        "abbr", "acronym", "kbd", "samp", "var", "time",
        # headings
        "h1", "h2", "h3", "h4", "h5", "h6",
        # lists
        "ul", "ol", "li", "dl", "dt", "dd",
        # blocks
        "blockquote", "pre", "code", "details", "summary", "figure", "figcaption",
        # tables
        "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption", "colgroup", "col",
        # links and media
        "a", "img",
        # task lists
        "input", "label",
    }
)

MATH_ELEMENTS: FrozenSet[str] = frozenset(
    {
        "math", "semantics", "annotation", "annotation-xml",
        "mrow", "mi", "mo", "mn", "ms", "mtext", "mspace",
        "msup", "msub", "msubsup", "mfrac", "mroot", "msqrt",
        "mover", "munder", "munderover", "mmultiscripts", "mprescripts", "none",
        "mtable", "mtr", "mtd", "mlabeledtr",
        "mstyle", "mpadded", "mphantom", "menclose", "merror", "mfenced", "maction",
    }
)

MATH_ATTRIBUTES: FrozenSet[str] = frozenset(
    {
        "xmlns", "display", "encoding", "mathvariant", "mathsize", "mathcolor",
        "stretchy", "fence", "separator", "form", "lspace", "rspace",
        "largeop", "movablelimits", "symmetric", "minsize", "maxsize",
        "accent", "accentunder", "linethickness", "bevelled",
        "columnalign", "columnlines", "columnspacing", "columnspan",
        "rowalign", "rowlines", "rowspacing", "rowspan",
        "frame", "framespacing", "equalrows", "equalcolumns",
        "displaystyle", "scriptlevel", "width", "height", "depth", "voffset",
        "notation", "open", "close", "separators", "alttext",
    }
)

GLOBAL_ATTRIBUTES: FrozenSet[str] = frozenset(
    {"class", "id", "title", "style", "role", "focusable", "lang", "dir"}
)

ELEMENT_ATTRIBUTES: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("a", frozenset({"href", "title", "rel", "name"})),
    ("img", frozenset({"src", "alt", "title", "width", "height"})),
    ("input", frozenset({"type", "checked", "disabled"})),
    ("label", frozenset({"for"})),
    ("ol", frozenset({"start", "type"})),
    ("th", frozenset({"colspan", "rowspan", "scope"})),
    ("td", frozenset({"colspan", "rowspan"})),
    ("col", frozenset({"span"})),
    ("colgroup", frozenset({"span"})),
    ("time", frozenset({"datetime"})),
    ("blockquote", frozenset({"cite"})),
    ("q", frozenset({"cite"})),
    ("details", frozenset({"open"})),
) + tuple((tag, MATH_ATTRIBUTES) for tag in sorted(MATH_ELEMENTS))

CSS_PROPERTIES: FrozenSet[str] = frozenset(
    {
        "color", "background-color", "text-align", "vertical-align",
        "font-size", "font-weight", "font-style", "font-family",
        "display", "width", "height", "min-width", "max-width",
        "margin", "margin-top", "margin-bottom", "margin-left", "margin-right",
        "padding", "padding-top", "padding-bottom", "padding-left", "padding-right",
        "border", "border-top", "border-bottom", "border-left", "border-right",
        "white-space", "overflow-x",
    }
)

PROTOCOLS: FrozenSet[str] = frozenset({"http", "https", "mailto", "tel"})

# Removed with everything inside them
CONTENT_DROP_ELEMENTS: Tuple[str, ...] = (
    "script", "style", "iframe", "object", "embed", "noscript", "template",
)

_CONTENT_DROP_RE = re.compile(
    r"<\s*(?:%s)\b" % "|".join(CONTENT_DROP_ELEMENTS), re.IGNORECASE
)


@dataclass(frozen=True)
class AllowList:
    """
    Elements, attributes and URL schemes that survive sanitization

    Attributes:
        elements: Element names to keep
        global_attributes: Attributes allowed on every kept element
        element_attributes: (element, attributes) pairs for element-specific
                            attributes
        protocols: URL schemes allowed in href/src
        css_properties: CSS properties allowed in style attributes
        data_attributes: Allow any data-* attribute
        aria_attributes: Allow any aria-* attribute
    """
    elements: FrozenSet[str] = frozenset(bleach.sanitizer.ALLOWED_TAGS) | MARKDOWN_ELEMENTS | MATH_ELEMENTS
    global_attributes: FrozenSet[str] = GLOBAL_ATTRIBUTES
    element_attributes: Tuple[Tuple[str, FrozenSet[str]], ...] = ELEMENT_ATTRIBUTES
    protocols: FrozenSet[str] = PROTOCOLS
    css_properties: FrozenSet[str] = CSS_PROPERTIES
    data_attributes: bool = True
    aria_attributes: bool = True
    _element_map: Dict[str, FrozenSet[str]] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        element_map: Dict[str, FrozenSet[str]] = {}
        for tag, names in self.element_attributes:
            element_map[tag] = element_map.get(tag, frozenset()) | names
        object.__setattr__(self, "_element_map", element_map)

    def attribute_allow(self, tag: str, name: str, value: str) -> bool:
        """Attribute filter with bleach's callable signature"""
        if name in self.global_attributes:
            return True
        if self.data_attributes and name.startswith("data-"):
            return True
        if self.aria_attributes and name.startswith("aria-"):
            return True
        return name in self._element_map.get(tag, frozenset())


ALLOWLIST_DEFAULT = AllowList()

# Malformed markup (HTML elements inside MathML, misnested tables) can
# serialize into a tree the parser rebuilds differently; a few more passes
# settle it
SANITIZE_PASSES_MAX = 4

# bleach Cleaners must not be shared between threads
_cleaners = threading.local()


def cleaner_get(allowlist: AllowList) -> bleach.sanitizer.Cleaner:
    """Per-thread bleach Cleaner for ``allowlist``"""
    cache = getattr(_cleaners, "cache", None)
    if cache is None:
        cache = _cleaners.cache = {}
    cleaner = cache.get(allowlist)
    if cleaner is None:
        cleaner = bleach.sanitizer.Cleaner(
            tags=allowlist.elements,
            attributes=allowlist.attribute_allow,
            protocols=allowlist.protocols,
            strip=True,
            strip_comments=True,
            css_sanitizer=CSSSanitizer(allowed_css_properties=allowlist.css_properties),
        )
        cache[allowlist] = cleaner
    return cleaner


def hostileContent_drop(html: str) -> str:
    """
    Remove script-like elements together with their content

    Only parses when such an element appears, so ordinary documents pass
    through untouched.
    """
    if not _CONTENT_DROP_RE.search(html):
        return html
    soup = BeautifulSoup(html, "html.parser")
    for element in soup.find_all(list(CONTENT_DROP_ELEMENTS)):
        element.decompose()
    return str(soup)


def html_sanitize(html: str, allowlist: Optional[AllowList] = None) -> str:
    """
    Sanitize an HTML fragment against an allow-list

    Removing content is the intended behavior and never an error.
    Sanitizing already sanitized output returns it unchanged.

    Args:
        html: HTML fragment from the renderer
        allowlist: Elements/attributes to keep (ALLOWLIST_DEFAULT when None)

    Returns:
        Sanitized HTML fragment

    Raises:
        TypeError: If ``html`` is not a string
    """
    if not isinstance(html, str):
        raise TypeError(f"HTML must be str, not {type(html).__name__}")
    if not html:
        return html
    cleaner = cleaner_get(allowlist or ALLOWLIST_DEFAULT)
    cleaned = cleaner.clean(hostileContent_drop(html))
    for _ in range(SANITIZE_PASSES_MAX):
        again = cleaner.clean(hostileContent_drop(cleaned))
        if again == cleaned:
            break
        cleaned = again
    return cleaned

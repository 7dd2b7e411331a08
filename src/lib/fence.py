"""
Fenced code block rendering

Replaces markdown-it's ``fence`` render rule:

- ```` ```mermaid ```` blocks become ``<div class="mermaid">`` containers
  holding the escaped diagram source, for Mermaid to draw in the browser.
- Every other block becomes ``<pre><code class="language-X">``, highlighted
  with Pygments when X names a known lexer and escaped as-is otherwise.

Highlighting uses CSS classes; the theme stylesheet supplies the colors.
"""

from typing import Optional, Sequence

from markdown_it.common.utils import escapeHtml, unescapeAll
from markdown_it.token import Token
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .log import WARN


MERMAID_TAG = "mermaid"

_formatter = HtmlFormatter(nowrap=True)


def lexer_get(language: str) -> Optional[Lexer]:
    """Pygments lexer for a fence language, or None if there is none"""
    if not language:
        return None
    try:
        # Keep leading/trailing blank lines exactly as written
        return get_lexer_by_name(language, stripnl=False)
    except ClassNotFound:
        return None


def code_highlight(code: str, language: str) -> str:
    """
    Highlight ``code`` as ``language``, falling back to escaped text

    Pygments turns input it cannot lex into error tokens instead of
    failing, so unparseable snippets still come out highlighted.

    Args:
        code: Raw fence body
        language: Fence language name (may be empty)

    Returns:
        HTML for the inside of a <code> element
    """
    lexer = lexer_get(language)
    if lexer is None:
        return escapeHtml(code)
    try:
        return highlight(code, lexer, _formatter)
    except Exception as e:
        WARN(f"highlighting {language!r} failed ({e}); using plain text")
        return escapeHtml(code)


def fence_render(self, tokens: Sequence[Token], idx: int, options, env) -> str:
    """Render rule for fence tokens"""
    token = tokens[idx]
    info = unescapeAll(token.info).strip() if token.info else ""

    if info == MERMAID_TAG:
        return f'<div class="mermaid">{escapeHtml(token.content)}</div>\n'

    language = info.split(maxsplit=1)[0] if info else ""
    code = code_highlight(token.content, language)
    class_attr = f' class="language-{escapeHtml(language)}"' if language else ""
    return f"<pre><code{class_attr}>{code}</code></pre>\n"

"""
Math typesetting for math_block and math_inline tokens

Formulas are converted to MathML with latex2mathml. The conversion result
is returned as a MathResult value rather than raised, so the token render
functions are total: one broken formula shows an error marker in place
and the rest of the document still renders.

Converter output is not filtered here; html_sanitize() is the security
boundary for everything the renderer emits.
"""

import re
from html import escape
from typing import Any, Iterator, List, Sequence

import latex2mathml.commands
import latex2mathml.converter
import latex2mathml.exceptions
from latex2mathml.symbols_parser import convert_symbol
from latex2mathml.tokenizer import tokenize
from markdown_it.token import Token

from ..models.renderer import MathResult
from .log import LOG


# Every error class latex2mathml raises for input it cannot parse
LATEX_SYNTAX_ERRORS = tuple(
    obj for obj in vars(latex2mathml.exceptions).values()
    if isinstance(obj, type) and issubclass(obj, Exception)
)

ERROR_COLOR = "#cc0000"

COMMAND_RE = re.compile(r"\\[a-zA-Z]+")

# Commands whose next control sequence becomes a user-defined macro
MACRO_DEFINERS = frozenset(
    (
        latex2mathml.commands.NEWCOMMAND,
        latex2mathml.commands.DEF,
        latex2mathml.commands.DECLAREMATHOPERATOR,
    )
)


def commandNames_collect(value: Any) -> Iterator[str]:
    """Yield the strings in a latex2mathml command table (str, tuple or dict keys)"""
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for key in value:
            yield from commandNames_collect(key)
    elif isinstance(value, (tuple, list, set, frozenset)):
        for item in value:
            yield from commandNames_collect(item)


# Control sequences latex2mathml has a conversion for; symbols such as
# \alpha are looked up separately in its unicode-math table
KNOWN_COMMANDS = frozenset(
    name
    for table in [*vars(latex2mathml.commands).values(), latex2mathml.converter.OPERATORS]
    for name in commandNames_collect(table)
    if COMMAND_RE.fullmatch(name)
)


def commands_findUnknown(source: str) -> List[str]:
    r"""
    Control sequences in ``source`` that latex2mathml would pass through
    as plain identifiers (``\invalidcmd`` becomes ``<mi>\invalidcmd</mi>``)

    Macros defined in the formula itself with \newcommand, \def or
    \DeclareMathOperator count as known.
    """
    tokens = list(tokenize(source))
    defined = set()
    unknown = []
    for i, token in enumerate(tokens):
        if not COMMAND_RE.fullmatch(token):
            continue
        if token in MACRO_DEFINERS:
            j = i + 1
            if j < len(tokens) and tokens[j] == "{":
                j += 1
            if j < len(tokens) and COMMAND_RE.fullmatch(tokens[j]):
                defined.add(tokens[j])
            continue
        if token in KNOWN_COMMANDS or token in defined or convert_symbol(token):
            continue
        unknown.append(token)
    return unknown


def error_describe(e: Exception) -> str:
    """'ErrorClass: message', or just the class name when the message is empty"""
    message = str(e)
    name = type(e).__name__
    return f"{name}: {message}" if message and message != name else name


def math_typeset(source: str, display: bool) -> MathResult:
    """
    Typeset one formula

    Args:
        source: Raw LaTeX math source
        display: True for display (block) mode, False for inline

    Returns:
        MathResult with MathML markup, or with an error descriptor
    """
    try:
        unknown = commands_findUnknown(source)
        if unknown:
            return MathResult.failure(
                source, display, f"Undefined control sequence: {unknown[0]}", "syntax"
            )
        markup = latex2mathml.converter.convert(
            source, display="block" if display else "inline"
        )
    except LATEX_SYNTAX_ERRORS as e:
        return MathResult.failure(source, display, error_describe(e), "syntax")
    except Exception as e:
        LOG(f"Math engine failure on {source!r}: {e!r}", level=2)
        return MathResult.failure(source, display, str(e) or type(e).__name__, "internal")
    return MathResult.success(source, display, markup)


def mathResult_toHtml(result: MathResult) -> str:
    """
    Turn a MathResult into an HTML fragment

    Display results sit in a centered, scrollable ``div.math-block``;
    inline results flow with the surrounding text. Syntax errors show the
    source in red with the parser message as a tooltip; internal failures
    show a flagged "Math error" fragment.
    """
    if result.error_kind == "internal":
        tag = "div" if result.display else "span"
        return f'<{tag} class="math-error">Math error: {escape(result.error or "")}</{tag}>'

    if result.error_kind == "syntax":
        body = (
            f'<span class="math-error" title="{escape(result.error or "")}" '
            f'style="color:{ERROR_COLOR}">{escape(result.source)}</span>'
        )
    else:
        body = result.markup

    if result.display:
        return f'<div class="math-block">{body}</div>\n'
    return body


def mathBlock_render(self, tokens: Sequence[Token], idx: int, options, env) -> str:
    """Render rule for math_block tokens"""
    return mathResult_toHtml(math_typeset(tokens[idx].content, display=True))


def mathInline_render(self, tokens: Sequence[Token], idx: int, options, env) -> str:
    """Render rule for math_inline tokens"""
    return mathResult_toHtml(math_typeset(tokens[idx].content, display=False))

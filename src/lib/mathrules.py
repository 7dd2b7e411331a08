r"""
Math grammar for markdown-it

Adds two rules to the parser's rule chains:

- ``math_block``: ``$$`` on its own line ... ``$$`` on its own line, or
  ``$$...$$`` on a single line. Runs before ``fence``.
- ``math_inline``: ``$...$`` inside a paragraph. Runs before ``escape`` so
  an escaped ``\$`` is seen by this rule first and declined here.

Both rules decline rather than fail: an unterminated block, an empty pair
of delimiters, or a lone ``$`` fall through to the ordinary rules and end
up as literal text.

Example:
    >>> from markdown_it import MarkdownIt
    >>> md = MarkdownIt()
    >>> rules_install(md)
    >>> [t.type for t in md.parse("$$x^2$$")]
    ['math_block']
"""

from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline

from ..models.rules import RuleLevel, RuleSpec


BLOCK_DELIMITER = "$$"
INLINE_DELIMITER = "$"


def mathBlock_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """
    Block rule for display math

    Args:
        state: markdown-it block state
        startLine: Line to test
        endLine: First line past the end of the current container
        silent: Only report whether the rule would match

    Returns:
        True if a math block starts at ``startLine``
    """
    pos = state.bMarks[startLine] + state.tShift[startLine]
    maximum = state.eMarks[startLine]

    if pos + 2 > maximum:
        return False
    if state.src[pos:pos + 2] != BLOCK_DELIMITER:
        return False

    # $$...$$ on one line
    closing = state.src.find(BLOCK_DELIMITER, pos + 2, maximum)
    if closing != -1:
        content = state.src[pos + 2:closing].strip()
        if not content:
            return False
        if silent:
            return True
        mathToken_push(state, content, startLine, startLine + 1)
        return True

    nextLine = startLine + 1
    found = False
    while nextLine < endLine:
        line_start = state.bMarks[nextLine] + state.tShift[nextLine]
        line_end = state.eMarks[nextLine]
        if state.src[line_start:line_end].strip() == BLOCK_DELIMITER:
            found = True
            break
        nextLine += 1

    # Never swallow the rest of the document into an unclosed block
    if not found:
        return False

    content = state.getLines(startLine + 1, nextLine, state.tShift[startLine], False).strip()
    if not content:
        return False
    if silent:
        return True

    mathToken_push(state, content, startLine, nextLine + 1)
    return True


def mathToken_push(state: StateBlock, content: str, startLine: int, nextLine: int) -> None:
    """Emit a math_block token covering [startLine, nextLine) and move past it"""
    token = state.push("math_block", "math", 0)
    token.content = content
    token.markup = BLOCK_DELIMITER
    token.map = [startLine, nextLine]
    state.line = nextLine


def backslash_isEscaping(src: str, pos: int) -> bool:
    r"""
    Check whether the character at ``pos`` is escaped

    A character is escaped when an odd number of backslashes precede it:
    ``\$`` is escaped, ``\\$`` is not.
    """
    count = 0
    pos -= 1
    while pos >= 0 and src[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def mathInline_rule(state: StateInline, silent: bool) -> bool:
    """
    Inline rule for run-in math

    Args:
        state: markdown-it inline state
        silent: Only report whether the rule would match

    Returns:
        True if a math span starts at ``state.pos``
    """
    start = state.pos
    maximum = state.posMax
    src = state.src

    if src[start] != INLINE_DELIMITER:
        return False

    # $$ belongs to block math, even in the middle of a paragraph
    if start + 1 < maximum and src[start + 1] == INLINE_DELIMITER:
        return False

    if backslash_isEscaping(src, start):
        return False

    end = start + 1
    while end < maximum:
        if src[end] == INLINE_DELIMITER and src[end - 1] != "\\":
            break
        end += 1

    if end >= maximum:
        return False

    content = src[start + 1:end]
    if not content.strip():
        return False

    if not silent:
        token = state.push("math_inline", "math", 0)
        token.content = content
        token.markup = INLINE_DELIMITER

    state.pos = end + 1
    return True


MATH_RULES: List[RuleSpec] = [
    RuleSpec(
        name="math_block",
        level=RuleLevel.BLOCK,
        before="fence",
        handler=mathBlock_rule,
    ),
    RuleSpec(
        name="math_inline",
        level=RuleLevel.INLINE,
        before="escape",
        handler=mathInline_rule,
    ),
]


def rules_install(md: MarkdownIt, specs: Optional[List[RuleSpec]] = None) -> MarkdownIt:
    """
    Insert rule specs into a parser's block and inline chains, in order

    Args:
        md: Parser to extend
        specs: Rules to install (default: MATH_RULES)

    Returns:
        The same parser, for chaining
    """
    for spec in MATH_RULES if specs is None else specs:
        ruler = md.block.ruler if spec.level is RuleLevel.BLOCK else md.inline.ruler
        ruler.before(spec.before, spec.name, spec.handler)
    return md

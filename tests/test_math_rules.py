"""
Math grammar tests - token level

Tests which sources produce math_block / math_inline tokens, their
content and line maps, and the silent-mode contract of both rules.
"""

import pytest
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline

from mdpress.lib.mathrules import MATH_RULES, backslash_isEscaping, mathBlock_rule, mathInline_rule
from mdpress.lib.renderer import renderer_create
from mdpress.models import RuleLevel


@pytest.fixture(scope="module")
def md():
    return renderer_create()


def block_tokens(md, source):
    return [t for t in md.parse(source) if t.type == "math_block"]


def inline_tokens(md, source):
    children = []
    for token in md.parse(source):
        if token.type == "inline" and token.children:
            children.extend(t for t in token.children if t.type == "math_inline")
    return children


class TestBlockMath:
    """Test the block rule"""

    def test_multiline(self, md):
        """Delimiter lines around the formula"""
        tokens = md.parse("$$\n x^2 \n$$")
        assert [t.type for t in tokens] == ["math_block"]
        assert tokens[0].content == "x^2"
        assert tokens[0].map == [0, 3]
        assert tokens[0].markup == "$$"

    def test_single_line(self, md):
        tokens = md.parse("$$x^2$$")
        assert [t.type for t in tokens] == ["math_block"]
        assert tokens[0].content == "x^2"
        assert tokens[0].map == [0, 1]

    def test_indented_opening(self, md):
        """Up to three spaces of indentation are allowed"""
        tokens = block_tokens(md, "  $$\nx\n  $$")
        assert len(tokens) == 1
        assert tokens[0].content == "x"

    def test_multiline_content_kept(self, md):
        tokens = block_tokens(md, "$$\na = 1 \\\\\nb = 2\n$$")
        assert tokens[0].content == "a = 1 \\\\\nb = 2"

    def test_unterminated(self, md):
        """No closing line: no math token"""
        assert block_tokens(md, "$$\nx^2\nmore text") == []

    def test_empty_multiline(self, md):
        assert block_tokens(md, "$$\n\n$$") == []

    def test_empty_single_line(self, md):
        assert block_tokens(md, "$$ $$") == []

    def test_following_content(self, md):
        """Parsing continues after the closing line"""
        tokens = md.parse("$$\nx\n$$\n# Title")
        assert tokens[0].type == "math_block"
        assert tokens[1].type == "heading_open"

    def test_inside_fence_is_code(self, md):
        tokens = md.parse("```\n$$\nx\n$$\n```")
        assert [t.type for t in tokens] == ["fence"]

    def test_silent_mode(self, md):
        """Silent mode reports a match without touching state"""
        state = StateBlock("$$\nx^2\n$$", md, {}, [])
        assert mathBlock_rule(state, 0, state.lineMax, True) is True
        assert state.tokens == []
        assert state.line == 0

    def test_silent_mode_decline(self, md):
        state = StateBlock("$$\nx^2", md, {}, [])
        assert mathBlock_rule(state, 0, state.lineMax, True) is False


class TestInlineMath:
    """Test the inline rule"""

    def test_simple(self, md):
        tokens = inline_tokens(md, "The equation $E = mc^2$ is famous.")
        assert len(tokens) == 1
        assert tokens[0].content == "E = mc^2"
        assert tokens[0].markup == "$"

    def test_content_not_trimmed(self, md):
        tokens = inline_tokens(md, "a $ x $ b")
        assert tokens[0].content == " x "

    def test_escaped_opening(self, md):
        assert inline_tokens(md, "The price is \\$10.") == []

    def test_escaped_closing_skipped(self, md):
        """An escaped $ inside the span is not a closing delimiter"""
        tokens = inline_tokens(md, "$a \\$ b$")
        assert len(tokens) == 1
        assert tokens[0].content == "a \\$ b"

    def test_double_backslash_is_not_escape(self, md):
        tokens = inline_tokens(md, "\\\\$x$")
        assert len(tokens) == 1
        assert tokens[0].content == "x"

    def test_unterminated(self, md):
        assert inline_tokens(md, "costs $5 only") == []

    def test_whitespace_only(self, md):
        assert inline_tokens(md, "a $ $ b") == []

    def test_currency_pair_is_math(self, md):
        """Two prices in one paragraph form a math span"""
        tokens = inline_tokens(md, "costs $5 and $10")
        assert len(tokens) == 1
        assert tokens[0].content == "5 and "

    def test_double_dollar_not_an_opener(self, md):
        """$$ is skipped; a following single $ can still open a span"""
        tokens = inline_tokens(md, "text $$x$$ text")
        assert [t.content for t in tokens] == ["x"]

    def test_inside_code_span(self, md):
        assert inline_tokens(md, "`$x$`") == []

    def test_silent_mode(self, md):
        state = StateInline("$x$ rest", md, {}, [])
        assert mathInline_rule(state, True) is True
        assert state.tokens == []
        assert state.pos == 3


class TestHelpers:
    """Test rule metadata and helpers"""

    def test_backslash_parity(self):
        assert backslash_isEscaping("\\$", 1) is True
        assert backslash_isEscaping("\\\\$", 2) is False
        assert backslash_isEscaping("$", 0) is False

    def test_rule_specs(self):
        levels = {spec.name: (spec.level, spec.before) for spec in MATH_RULES}
        assert levels["math_block"] == (RuleLevel.BLOCK, "fence")
        assert levels["math_inline"] == (RuleLevel.INLINE, "escape")

    def test_rules_installed_in_order(self, md):
        block_rules = md.block.ruler.get_all_rules()
        inline_rules = md.inline.ruler.get_all_rules()
        assert block_rules.index("math_block") == block_rules.index("fence") - 1
        assert inline_rules.index("math_inline") == inline_rules.index("escape") - 1

    def test_custom_spec_installed(self):
        from markdown_it import MarkdownIt

        from mdpress.lib.mathrules import rules_install
        from mdpress.models import RuleSpec

        spec = RuleSpec(name="math_inline", level=RuleLevel.INLINE, before="text", handler=mathInline_rule)
        parser = rules_install(MarkdownIt("commonmark"), [spec])
        rules = parser.inline.ruler.get_all_rules()
        assert rules.index("math_inline") == rules.index("text") - 1
        assert parser.block.ruler.get_all_rules().count("math_block") == 0

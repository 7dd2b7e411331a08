"""
Renderer factory tests

Tests the per-configuration parser cache, the four toggles, option
mapping and the input contract.
"""

import pytest

from mdpress.lib.mathrender import commands_findUnknown, error_describe, math_typeset, mathResult_toHtml
from mdpress.lib.renderer import (
    markdown_render,
    renderer_create,
    renderer_get,
    rendererConfig_fromOptions,
)
from mdpress.models import RENDERER_CONFIG_DEFAULT, MarkdownOptions, MathResult, RendererConfig


class TestRendererCache:
    """Test parser sharing"""

    def test_default_shared(self):
        assert renderer_get() is renderer_get()
        assert renderer_get(None) is renderer_get(RENDERER_CONFIG_DEFAULT)

    def test_equal_configs_shared(self):
        assert renderer_get(RendererConfig(breaks=True)) is renderer_get(RendererConfig(breaks=True))

    def test_different_configs_separate(self):
        assert renderer_get(RendererConfig(breaks=True)) is not renderer_get()

    def test_create_is_fresh(self):
        assert renderer_create() is not renderer_create()


class TestToggles:
    """Test the four configuration toggles"""

    def test_breaks(self):
        assert "<br>" in markdown_render("a\nb", RendererConfig(breaks=True))
        assert "<br>" not in markdown_render("a\nb")

    def test_html_off(self):
        result = markdown_render("<b>x</b>", RendererConfig(html=False))
        assert "&lt;b&gt;" in result

    def test_html_on(self):
        assert "<b>x</b>" in markdown_render("<b>x</b>")

    def test_linkify_off(self):
        result = markdown_render("see https://example.com", RendererConfig(linkify=False))
        assert "<a" not in result

    def test_typographer(self):
        assert "—" in markdown_render("a --- b")
        assert "—" not in markdown_render("a --- b", RendererConfig(typographer=False))


class TestOptions:
    """Test user options to RendererConfig"""

    def test_none(self):
        assert rendererConfig_fromOptions(None) == RENDERER_CONFIG_DEFAULT

    def test_partial_mapping(self):
        config = rendererConfig_fromOptions({"breaks": True})
        assert config == RendererConfig(breaks=True)

    def test_model(self):
        config = rendererConfig_fromOptions(MarkdownOptions(html=False, linkify=False))
        assert config.html is False
        assert config.linkify is False
        assert config.typographer is True

    def test_gfm_ignored(self):
        assert rendererConfig_fromOptions({"gfm": False}) == RENDERER_CONFIG_DEFAULT


class TestContract:
    """Test input checks"""

    @pytest.mark.parametrize("source", [None, b"# bytes", 42])
    def test_non_string(self, source):
        with pytest.raises(TypeError):
            markdown_render(source)

    def test_empty(self):
        assert markdown_render("") == ""


class TestMathRendering:
    """Test MathResult handling"""

    def test_success(self):
        result = math_typeset("x^2", display=False)
        assert result.ok
        assert "<msup>" in result.markup

    def test_syntax_error_markup(self):
        failed = MathResult.failure("\\frac{", False, "MissingSuperScriptOrSubscriptError: x", "syntax")
        html = mathResult_toHtml(failed)
        assert html.startswith('<span class="math-error" title="MissingSuperScriptOrSubscriptError: x"')
        assert 'style="color:#cc0000"' in html
        assert ">\\frac{</span>" in html

    def test_syntax_error_block_wrapped(self):
        failed = MathResult.failure("x", True, "Error: bad", "syntax")
        assert mathResult_toHtml(failed).startswith('<div class="math-block"><span class="math-error"')

    def test_internal_error_markup(self):
        block = mathResult_toHtml(MathResult.failure("x", True, "boom <1>", "internal"))
        inline = mathResult_toHtml(MathResult.failure("x", False, "boom", "internal"))
        assert block == '<div class="math-error">Math error: boom &lt;1&gt;</div>'
        assert inline == '<span class="math-error">Math error: boom</span>'

    def test_source_escaped_in_error(self):
        failed = MathResult.failure("<x>", False, "bad", "syntax")
        assert "&lt;x&gt;" in mathResult_toHtml(failed)

    def test_error_message_built_once(self):
        class EmptyError(Exception):
            pass

        assert error_describe(EmptyError()) == "EmptyError"
        assert error_describe(EmptyError("EmptyError")) == "EmptyError"
        assert error_describe(ValueError("bad")) == "ValueError: bad"

    def test_missing_operand_tooltip(self):
        result = math_typeset("x^", display=False)
        assert result.error_kind == "syntax"
        assert "ParseError" not in mathResult_toHtml(result)


class TestUnknownCommands:
    """Test control sequences the math engine has no conversion for"""

    def test_unknown_is_syntax_error(self):
        result = math_typeset("\\invalidcmd{x}", display=False)
        assert not result.ok
        assert result.error_kind == "syntax"
        assert result.error == "Undefined control sequence: \\invalidcmd"

    @pytest.mark.parametrize(
        "source",
        ["\\alpha + \\beta", "\\frac{1}{2}", "\\sin x", "\\mathbb{R}", "\\sum_{i=1}^n i", "\\left( x \\right)"],
    )
    def test_known_commands(self, source):
        assert commands_findUnknown(source) == []
        assert math_typeset(source, display=False).ok

    def test_user_macro(self):
        assert commands_findUnknown("\\newcommand{\\half}{\\frac{1}{2}} \\half") == []

    def test_reports_each_unknown(self):
        assert commands_findUnknown("\\foo + \\alpha + \\bar{x} + \\baz") == ["\\foo", "\\baz"]

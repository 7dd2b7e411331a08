"""
Sanitizer tests

Tests removal of scripts, handlers and unsafe URLs, preservation of the
Markdown and MathML vocabulary, idempotence and custom allow-lists.
"""

import pytest

from mdpress.lib.renderer import markdown_renderSafe
from mdpress.lib.sanitizer import ALLOWLIST_DEFAULT, AllowList, html_sanitize


class TestRemoval:
    """Test hostile markup is removed"""

    def test_script_and_content(self):
        result = html_sanitize('<p>ok</p><script>alert("xss")</script>')
        assert "<script" not in result
        assert "alert" not in result
        assert "<p>ok</p>" in result

    @pytest.mark.parametrize("tag", ["style", "iframe", "noscript", "template"])
    def test_content_elements(self, tag):
        result = html_sanitize(f"<p>keep</p><{tag}>hostile</{tag}>")
        assert "hostile" not in result
        assert "keep" in result

    def test_event_handler(self):
        result = html_sanitize('<img src="x.png" onerror="alert(1)">')
        assert "onerror" not in result
        assert 'src="x.png"' in result

    def test_javascript_url(self):
        result = html_sanitize('<a href="javascript:alert(1)">click</a>')
        assert "javascript" not in result
        assert "click" in result

    @pytest.mark.parametrize(
        "url",
        ["https://example.com", "http://example.com", "mailto:a@example.com", "tel:+123"],
    )
    def test_allowed_protocols(self, url):
        assert f'href="{url}"' in html_sanitize(f'<a href="{url}">x</a>')

    def test_unknown_element_stripped(self):
        result = html_sanitize("<blink>text</blink>")
        assert "<blink" not in result
        assert "text" in result

    def test_comments_removed(self):
        assert "secret" not in html_sanitize("<p>a</p><!-- secret -->")


class TestPreservation:
    """Test the renderer's vocabulary survives"""

    def test_mathml(self):
        source = '<math display="block"><msup><mi>x</mi><mn>2</mn></msup></math>'
        result = html_sanitize(source)
        assert "<math" in result
        assert 'display="block"' in result
        assert "<msup><mi>x</mi><mn>2</mn></msup>" in result

    def test_math_error_marker(self):
        result = html_sanitize('<span class="math-error" title="ParseError: bad">\\bad</span>')
        assert 'class="math-error"' in result
        assert 'title="ParseError: bad"' in result

    def test_highlight_spans(self):
        source = '<pre><code class="language-python"><span class="k">def</span></code></pre>'
        assert html_sanitize(source) == source

    def test_data_and_aria_attributes(self):
        result = html_sanitize('<div data-line="3" aria-hidden="true">x</div>')
        assert 'data-line="3"' in result
        assert 'aria-hidden="true"' in result

    def test_table_alignment_style(self):
        result = html_sanitize('<table><tr><td style="text-align:right">1</td></tr></table>')
        assert "text-align" in result

    def test_disallowed_css_removed(self):
        result = html_sanitize('<p style="position: fixed">x</p>')
        assert "position" not in result


class TestContract:
    """Test idempotence, input checks and custom allow-lists"""

    def test_idempotent(self):
        source = (
            '<h1>Title</h1><p>Text &amp; <a href="https://example.com" onclick="x()">link</a>'
            "<script>bad()</script></p><ul><li>item</li></ul>"
        )
        once = html_sanitize(source)
        assert html_sanitize(once) == once

    @pytest.mark.parametrize(
        "source",
        [
            '"<img src=x><table><table><table>b```\n}<td><p title="a<math>){\n',
            "<math><mi>x</mi><p>para</p></math>",
        ],
    )
    def test_idempotent_on_misnested_math(self, source):
        once = markdown_renderSafe(source)
        assert html_sanitize(once) == once
        assert html_sanitize(html_sanitize(once)) == once

    def test_empty(self):
        assert html_sanitize("") == ""

    def test_type_error(self):
        with pytest.raises(TypeError):
            html_sanitize(b"<p>x</p>")

    def test_custom_allowlist(self):
        allowlist = AllowList(elements=frozenset({"p"}))
        result = html_sanitize("<p><strong>x</strong></p>", allowlist)
        assert result == "<p>x</p>"

    def test_allowlists_hashable(self):
        assert hash(AllowList()) == hash(ALLOWLIST_DEFAULT)
        assert AllowList() == ALLOWLIST_DEFAULT

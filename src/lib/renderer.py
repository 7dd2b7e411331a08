"""
Markdown renderer factory

Builds markdown-it parsers with the mdpress extensions installed and
renders Markdown to HTML fragments.

Every parser gets:
- the markdown-it "default" rule set (tables, strikethrough, linkify,
  typographic replacements)
- task list checkboxes (mdit-py-plugins)
- block and inline math (mathrules / mathrender)
- the fence override (Mermaid containers, Pygments highlighting)

Only the four RendererConfig toggles differ between parsers. Parsers are
cached per configuration value and never mutated after construction, so
they are safe to share between threads.

Example:
    >>> html = markdown_render("The equation $E = mc^2$ is famous.")
    >>> "<math" in html
    True
"""

from dataclasses import replace
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from markdown_it import MarkdownIt
from mdit_py_plugins.tasklists import tasklists_plugin

from ..models.document import MarkdownOptions
from ..models.renderer import RENDERER_CONFIG_DEFAULT, RendererConfig
from .fence import fence_render
from .mathrender import mathBlock_render, mathInline_render
from .mathrules import rules_install
from .sanitizer import AllowList, html_sanitize


def renderer_create(config: RendererConfig = RENDERER_CONFIG_DEFAULT) -> MarkdownIt:
    """
    Build a new parser for ``config``

    Args:
        config: Renderer toggles

    Returns:
        Configured MarkdownIt instance
    """
    md = MarkdownIt(
        "default",
        {
            "html": config.html,
            "linkify": config.linkify,
            "typographer": config.typographer,
            "breaks": config.breaks,
        },
    )
    md.use(tasklists_plugin)
    rules_install(md)
    md.add_render_rule("math_block", mathBlock_render)
    md.add_render_rule("math_inline", mathInline_render)
    md.add_render_rule("fence", fence_render)
    return md


@lru_cache(maxsize=None)
def _renderer_cached(config: RendererConfig) -> MarkdownIt:
    return renderer_create(config)


def renderer_get(config: Optional[RendererConfig] = None) -> MarkdownIt:
    """
    Shared parser for ``config`` (default configuration when None)

    Equal configurations share one parser; a parser is built the first
    time its configuration is asked for.
    """
    return _renderer_cached(config or RENDERER_CONFIG_DEFAULT)


def rendererConfig_fromOptions(
    options: Union[MarkdownOptions, Mapping[str, Any], None]
) -> RendererConfig:
    """
    Build a RendererConfig from user-facing Markdown options

    Unset options keep their defaults; unknown keys (including "gfm") are
    ignored.

    Args:
        options: MarkdownOptions model, plain mapping, or None

    Returns:
        RendererConfig
    """
    if options is None:
        return RENDERER_CONFIG_DEFAULT
    if not isinstance(options, MarkdownOptions):
        options = MarkdownOptions.model_validate(dict(options))

    overrides = {
        name: value
        for name, value in options.model_dump(exclude={"gfm"}).items()
        if value is not None
    }
    if not overrides:
        return RENDERER_CONFIG_DEFAULT
    return replace(RENDERER_CONFIG_DEFAULT, **overrides)


def markdown_render(source: str, config: Optional[RendererConfig] = None) -> str:
    """
    Render Markdown to an HTML fragment

    Any text is valid Markdown: malformed math, code fences or markup
    degrade to literal text or inline error markers, never to exceptions.

    Args:
        source: Markdown text
        config: Renderer toggles (default configuration when None)

    Returns:
        HTML fragment (not a full document)

    Raises:
        TypeError: If ``source`` is not a string
    """
    if not isinstance(source, str):
        raise TypeError(f"Markdown source must be str, not {type(source).__name__}")
    return renderer_get(config).render(source)


def markdown_renderSafe(
    source: str,
    config: Optional[RendererConfig] = None,
    sanitize: bool = True,
    allowlist: Optional[AllowList] = None,
) -> str:
    """
    Render Markdown and sanitize the result

    Args:
        source: Markdown text
        config: Renderer toggles (default configuration when None)
        sanitize: Pass False to skip sanitizing, for trusted input only
        allowlist: Elements/attributes to keep (default allow-list when None)

    Returns:
        HTML fragment
    """
    html = markdown_render(source, config)
    if sanitize is False:
        return html
    return html_sanitize(html, allowlist)

"""
Standalone HTML document assembly

Wraps a rendered (and sanitized) HTML fragment into a complete HTML5
document: title, theme CSS, user stylesheets and inline CSS in the head;
the fragment inside the body wrapper, followed by the Mermaid bootstrap
and user scripts.
"""

from html import escape
from pathlib import Path
from typing import List, Optional, Union

from ..config import appsettings
from ..models.document import DocumentConfig, ScriptConfig
from .log import WARN
from .theme import Theme


REMOTE_PREFIXES = ("http://", "https://")
MERMAID_MARKER = 'class="mermaid"'


def path_resolve(path: Union[str, Path], basedir: Union[str, Path, None]) -> Path:
    """Resolve ``path`` against ``basedir`` unless it is already absolute"""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return Path(basedir or Path.cwd()) / candidate


def stylesheet_load(stylesheet: str, basedir: Union[str, Path, None] = None, encoding: str = "utf-8") -> str:
    """
    Turn one stylesheet reference into a <head> fragment

    Remote stylesheets become <link> elements; the browser fetches them
    when the page loads. Local files are inlined in a <style> element.

    Args:
        stylesheet: http(s) URL or file path
        basedir: Directory for relative paths (cwd when None)
        encoding: Encoding of local files

    Returns:
        HTML fragment, or "" when a local file cannot be read
    """
    if stylesheet.startswith(REMOTE_PREFIXES):
        return f'<link rel="stylesheet" href="{escape(stylesheet)}">'

    full_path = path_resolve(stylesheet, basedir)
    try:
        css = full_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        WARN(f"failed to load stylesheet {full_path}: {e}")
        return ""
    return f"<style>\n{css}\n</style>"


def script_load(script: ScriptConfig, basedir: Union[str, Path, None] = None) -> str:
    """
    Turn one script configuration into a <script> element

    Inline content wins over a URL, which wins over a local path.

    Returns:
        HTML fragment, or "" when nothing usable is configured
    """
    if script.content:
        return f"<script>{script.content}</script>"
    if script.url:
        return f'<script src="{escape(script.url)}"></script>'
    if script.path:
        full_path = path_resolve(script.path, basedir)
        try:
            return f"<script>{full_path.read_text(encoding='utf-8')}</script>"
        except (OSError, UnicodeDecodeError) as e:
            WARN(f"failed to load script {full_path}: {e}")
    return ""


def customStyles_load(config: DocumentConfig, basedir: Union[str, Path, None] = None) -> str:
    """All user stylesheets, then the inline css option"""
    fragments: List[str] = [
        stylesheet_load(s, basedir, config.stylesheet_encoding) for s in config.stylesheet
    ]
    if config.css:
        fragments.append(f"<style>\n{config.css}\n</style>")
    return "\n".join(f for f in fragments if f)


def customScripts_load(config: DocumentConfig, basedir: Union[str, Path, None] = None) -> str:
    return "\n".join(f for f in (script_load(s, basedir) for s in config.script) if f)


def htmlDocument_build(
    content: str,
    config: DocumentConfig,
    custom_styles: str = "",
    custom_scripts: str = "",
    theme: Optional[Theme] = None,
) -> str:
    """
    Assemble a complete HTML document around a rendered fragment

    The Mermaid script is only referenced when the fragment contains a
    diagram container.

    Args:
        content: Rendered HTML fragment
        config: Document options (title, body classes, highlight style)
        custom_styles: Extra <head> fragments (see customStyles_load)
        custom_scripts: Extra <script> elements for the end of <body>
        theme: Theme to use (built from config.highlight_style when None)

    Returns:
        HTML document text
    """
    theme = theme or Theme(config.highlight_style)
    title = escape(config.document_title or "Document")
    body_classes = escape(" ".join(config.body_class) or "markdown-body")

    mermaid_head = ""
    mermaid_body = ""
    if MERMAID_MARKER in content:
        mermaid_head = f'<script src="{escape(appsettings.mermaid_script_url)}"></script>'
        mermaid_body = (
            "<script>mermaid.initialize({ startOnLoad: true, theme: '%s' });</script>"
            % escape(appsettings.mermaid_theme)
        )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
{theme.css_get()}
  </style>
  {custom_styles}
  {mermaid_head}
</head>
<body>
  <div class="{body_classes}">{content}</div>
  {mermaid_body}
  {custom_scripts}
</body>
</html>
"""

"""
Theme loader for mdpress documents.

A theme is the stylesheet that goes into the <head> of every converted
document. It consists of:
  - the base stylesheet shipped in the package (assets/css/markdown.css)
  - Pygments CSS for the chosen code highlight style, scoped to
    ``pre code`` so it only colors fenced code blocks
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pygments.formatters import HtmlFormatter
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound

from ..config import appsettings
from .log import WARN


ASSETS_DIR: Path = Path(__file__).parent.parent / "assets"

HIGHLIGHT_SCOPE = "pre code"

# highlight.js theme names users carry over from other tools
STYLE_ALIASES: Dict[str, str] = {
    "github": "default",
    "atom-one-dark": "one-dark",
    "atom-one-light": "default",
    "vs2015": "vs",
}


class ThemeError(Exception):
    """Raised when theme loading or validation fails"""
    pass


class Theme:
    """
    Represents the styling of an mdpress document.

    A theme consists of:
      - Base CSS from the package assets
      - Pygments highlight CSS for the requested style
    """

    def __init__(self, highlight_style: Optional[str] = None, assets_dir: Optional[Path] = None):
        """
        Load a theme.

        Args:
            highlight_style: Pygments style name (or a known alias). Unknown
                             names fall back to "default" with a warning.
            assets_dir: Directory holding css/ (default: package assets/)

        Raises:
            ThemeError: If the base stylesheet does not exist
        """
        self.requested_style = highlight_style or appsettings.highlight_style
        self.highlight_style = style_resolve(self.requested_style)
        if self.highlight_style is None:
            WARN(f"unknown highlight style '{self.requested_style}', using 'default'")
            self.highlight_style = "default"

        self.assets_dir = Path(assets_dir) if assets_dir else ASSETS_DIR
        self.css_path = self.assets_dir / "css" / appsettings.stylesheet_asset
        if not self.css_path.exists():
            raise ThemeError(
                f"Base stylesheet not found. Expected file: {self.css_path}"
            )

    def baseCSS_get(self) -> str:
        """Read the base stylesheet"""
        try:
            return self.css_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ThemeError(f"Failed to read {self.css_path}: {e}")

    def highlightCSS_get(self) -> str:
        """Pygments CSS for the highlight style, scoped to fenced code"""
        return highlightCSS_build(self.highlight_style)

    def pygmentsStyle_get(self) -> str:
        """
        Get Pygments style name for syntax highlighting.

        Returns:
            Resolved Pygments style name
        """
        return self.highlight_style

    def css_get(self) -> str:
        """Complete theme CSS: base stylesheet followed by highlight rules"""
        return f"{self.baseCSS_get()}\n/* Syntax highlighting: {self.highlight_style} */\n{self.highlightCSS_get()}\n"

    def __repr__(self) -> str:
        return f"Theme(highlight_style='{self.highlight_style}', path='{self.css_path}')"


@lru_cache(maxsize=None)
def highlightCSS_build(style: str) -> str:
    try:
        return HtmlFormatter(style=style).get_style_defs(HIGHLIGHT_SCOPE)
    except ClassNotFound as e:
        raise ThemeError(f"Pygments style '{style}' could not be loaded: {e}")


def style_resolve(name: str) -> Optional[str]:
    """
    Map a user-supplied style name to an installed Pygments style.

    Returns:
        Style name, or None when nothing matches
    """
    key = name.strip().lower()
    key = STYLE_ALIASES.get(key, key)
    return key if key in themes_listAvailable() else None


def themes_listAvailable() -> list[str]:
    """
    List all available highlight style names.

    Returns:
        Sorted Pygments style names
    """
    return sorted(get_all_styles())


def theme_validate(highlight_style: str) -> tuple[bool, str]:
    """
    Validate a highlight style name.

    Args:
        highlight_style: Style name or alias to check

    Returns:
        Tuple of (is_valid, message)
    """
    resolved = style_resolve(highlight_style)
    if resolved is None:
        return False, f"Highlight style '{highlight_style}' not found"
    if resolved != highlight_style:
        return True, f"Highlight style '{highlight_style}' resolves to '{resolved}'"
    return True, f"Highlight style '{highlight_style}' is valid"

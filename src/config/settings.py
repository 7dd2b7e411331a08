"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDPRESS_ prefix (e.g., MDPRESS_HIGHLIGHT_STYLE=monokai).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDPRESS_ prefix.

    Examples:
        MDPRESS_HIGHLIGHT_STYLE=monokai
        MDPRESS_MERMAID_SETTLE_MS=2000
        MDPRESS_HEADLESS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MDPRESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document assembly
    highlight_style: str = Field(
        default="default",
        description="Pygments style used for code blocks when a document does not choose one",
    )

    mermaid_script_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js",
        description="Script URL that bootstraps client-side Mermaid rendering",
    )

    mermaid_theme: str = Field(
        default="default",
        description="Mermaid theme passed to mermaid.initialize()",
    )

    stylesheet_asset: str = Field(
        default="markdown.css",
        description="Base stylesheet file name inside the package assets/css directory",
    )

    # PDF rendering
    headless: bool = Field(
        default=True,
        description="Launch the browser headless unless launch options say otherwise",
    )

    mermaid_settle_ms: int = Field(
        default=1000,
        ge=0,
        description="Time to let Mermaid draw diagrams before printing",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()

"""
Models package for mdpress

Contains data structures and type definitions for the rendering pipeline.
"""

from .state import ProgramState, pipeline
from .rules import RuleSpec, RuleLevel
from .renderer import RendererConfig, RENDERER_CONFIG_DEFAULT, MathResult
from .document import DocumentConfig, PdfOptions, PdfMargin, MarkdownOptions, ScriptConfig

__all__ = [
    "ProgramState",
    "pipeline",
    "RuleSpec",
    "RuleLevel",
    "RendererConfig",
    "RENDERER_CONFIG_DEFAULT",
    "MathResult",
    "DocumentConfig",
    "PdfOptions",
    "PdfMargin",
    "MarkdownOptions",
    "ScriptConfig",
]

"""
YAML front matter

A Markdown document may start with a YAML block that sets document
options for that file only:

    ---
    document_title: Quarterly report
    pdf_options:
      format: Letter
      margin:
        top: 2cm
    ---
    # Report

The block is removed from the content and returned as a mapping.
"""

import re
from typing import Any, Dict, Tuple

import yaml

from .log import WARN


FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def frontmatter_split(markdown: str) -> Tuple[str, Dict[str, Any]]:
    """
    Separate leading YAML front matter from Markdown content

    A block that is not valid YAML, or does not hold a mapping, is left in
    place and a warning is logged.

    Args:
        markdown: Document text

    Returns:
        (content without the front matter, front matter mapping)
    """
    match = FRONTMATTER_RE.match(markdown)
    if not match:
        return markdown, {}

    try:
        data: Any = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        WARN(f"ignoring front matter that is not valid YAML: {e}")
        return markdown, {}

    if data is None:
        data = {}
    if not isinstance(data, dict):
        WARN(f"ignoring front matter, expected a mapping but got {type(data).__name__}")
        return markdown, {}

    return markdown[match.end():], data

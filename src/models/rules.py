"""
Parser rule specification models

Describes the rules mdpress plugs into the markdown-it rule chains, so the
renderer factory can install them in order without knowing their details.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Callable


class RuleLevel(Enum):
    """
    Grammar level a rule operates on

    Block rules work on whole lines and produce container tokens; inline
    rules scan the text of a single block and produce span tokens.
    """
    BLOCK = "block"
    INLINE = "inline"


@dataclass(frozen=True)
class RuleSpec:
    """
    Specification for a parser rule

    Attributes:
        name: Rule name, also the token type it emits (e.g. "math_block")
        level: Block or inline chain
        before: Name of the existing rule this one is inserted before
        handler: Rule function with markdown-it's signature for the level
    """
    name: str
    level: RuleLevel
    before: str
    handler: Callable[..., bool]

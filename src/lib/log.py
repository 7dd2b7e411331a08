"""
Logging for mdpress, built on Loguru.

Two entry points, both aware of the active ProgramState:

- LOG(): progress and debug messages, shown only when the connected
  state's verbosity reaches the message level. Without a connected state
  (plain library use) LOG() is silent.
- WARN(): recoverable problems in a document (unreadable stylesheet,
  malformed front matter, unknown highlight style). Shown unless a
  connected state asks for silence with verbosity 0.

The active state is held in a context variable, so concurrent
conversions in different threads or tasks keep their own verbosity.

Usage:
    from mdpress.lib.log import LOG, WARN, state_connectToLogger

    state_connectToLogger(state)
    LOG("Converting 3 documents", level=1)
    LOG("Front matter overrides: ['pdf_options']", level=3)
    WARN("failed to load stylesheet custom.css")
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module: <12}</cyan>:<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state.verbosity`` govern LOG()/WARN() in the current context.

    Args:
        state: ProgramState (anything with a ``verbosity`` attribute), or
               None to disconnect
    """
    _program_state.set(state)


def verbosity_get() -> Optional[int]:
    """Verbosity of the connected state, or None when nothing is connected"""
    state = _program_state.get()
    return getattr(state, "verbosity", None) if state is not None else None


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log a progress/debug message if the connected verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru formatting arguments
    """
    verbosity = verbosity_get()
    if verbosity is not None and verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Report a recoverable problem; conversion continues.

    Args:
        message: What went wrong and what was done instead
        **kwargs: Additional loguru formatting arguments
    """
    verbosity = verbosity_get()
    if verbosity is None or verbosity >= 1:
        logger.opt(depth=1).warning(message, **kwargs)

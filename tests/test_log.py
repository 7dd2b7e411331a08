"""
Logging tests

Tests that LOG() follows the connected verbosity and that WARN() is
shown unless the connected state asks for silence.
"""

import pytest
from loguru import logger

from mdpress.lib.log import LOG, WARN, state_connectToLogger, verbosity_get
from mdpress.models import ProgramState


@pytest.fixture
def messages():
    """Capture loguru output as 'LEVEL:message' strings"""
    captured = []
    handler = logger.add(lambda m: captured.append(m.strip()), format="{level}:{message}")
    yield captured
    logger.remove(handler)
    state_connectToLogger(None)


class TestLog:
    """Test verbosity gating"""

    def test_silent_without_state(self, messages):
        state_connectToLogger(None)
        assert verbosity_get() is None
        LOG("hidden", level=1)
        assert messages == []

    def test_level_gate(self, messages):
        state_connectToLogger(ProgramState(verbosity=2))
        LOG("shown", level=2)
        LOG("hidden", level=3)
        assert messages == ["DEBUG:shown"]


class TestWarn:
    """Test recoverable problem reports"""

    def test_shown_without_state(self, messages):
        state_connectToLogger(None)
        WARN("stylesheet missing")
        assert messages == ["WARNING:stylesheet missing"]

    def test_quiet_state(self, messages):
        state_connectToLogger(ProgramState(verbosity=0))
        WARN("stylesheet missing")
        assert messages == []

    def test_front_matter_warning(self, messages):
        from mdpress.lib.frontmatter import frontmatter_split

        state_connectToLogger(ProgramState(verbosity=1))
        frontmatter_split("---\n- a\n---\nbody")
        assert len(messages) == 1
        assert messages[0].startswith("WARNING:ignoring front matter")

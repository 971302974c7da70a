import pytest

from pi.prompt.config import PromptSettings
from pi.prompt.keybindings import set_prompt_keybindings

from .virtual_terminal import VirtualTerminal


@pytest.fixture
def terminal():
    """A 24x80 in-memory terminal with no scripted input."""
    return VirtualTerminal()


@pytest.fixture
def settings():
    """Settings that do not depend on the caller's environment."""
    return PromptSettings(poll_interval_ms=1)


@pytest.fixture(autouse=True)
def _reset_keybindings():
    yield
    set_prompt_keybindings(None)

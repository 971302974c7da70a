"""pi-prompt: interactive line-mode prompts for raw-mode terminals."""

# Widgets (re-exported from components package)
from pi.prompt.components import Input, Select

# Configuration
from pi.prompt.config import (
    DEFAULT_HELP_MESSAGE,
    DEFAULT_PAGE_SIZE,
    InputConfig,
    PromptSettings,
    SelectConfig,
)

# Event loop
from pi.prompt.driver import PromptStatus, PromptWidget, run_prompt

# Errors
from pi.prompt.errors import CursorInvariantError, PaginationInvariantError, PromptError

# Terminal events
from pi.prompt.events import (
    ClosedEvent,
    Event,
    FocusEvent,
    KeyEvent,
    PasteEvent,
    ResizeEvent,
)

# Image previews
from pi.prompt.image_preview import ImagePreview, TerminalImagePreview

# Keybindings
from pi.prompt.keybindings import (
    DEFAULT_PROMPT_KEYBINDINGS,
    PromptAction,
    PromptKeybindingsManager,
    get_prompt_keybindings,
    set_prompt_keybindings,
)

# Keyboard input handling
from pi.prompt.keys import Key, KeyId, is_key_release, parse_key

# Widget state
from pi.prompt.pagination import PaginationState
from pi.prompt.text_edit import TextEditState

# Input buffering
from pi.prompt.stdin_buffer import StdinBuffer

# Styling
from pi.prompt.style import Color

# Terminal interface and implementation
from pi.prompt.terminal import ProcessTerminal, Terminal

__all__ = [
    # Widgets
    "Input",
    "Select",
    # Configuration
    "DEFAULT_HELP_MESSAGE",
    "DEFAULT_PAGE_SIZE",
    "InputConfig",
    "PromptSettings",
    "SelectConfig",
    # Event loop
    "PromptStatus",
    "PromptWidget",
    "run_prompt",
    # Errors
    "CursorInvariantError",
    "PaginationInvariantError",
    "PromptError",
    # Events
    "ClosedEvent",
    "Event",
    "FocusEvent",
    "KeyEvent",
    "PasteEvent",
    "ResizeEvent",
    # Image previews
    "ImagePreview",
    "TerminalImagePreview",
    # Keybindings
    "DEFAULT_PROMPT_KEYBINDINGS",
    "PromptAction",
    "PromptKeybindingsManager",
    "get_prompt_keybindings",
    "set_prompt_keybindings",
    # Keys
    "Key",
    "KeyId",
    "is_key_release",
    "parse_key",
    # State
    "PaginationState",
    "TextEditState",
    # Input buffering
    "StdinBuffer",
    # Styling
    "Color",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]

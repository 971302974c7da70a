"""Prompt keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.prompt.keys import KeyId

PromptAction = Literal[
    # Text input
    "cursorLeft",
    "cursorRight",
    "deleteCharBackward",
    "submit",
    # Selection
    "selectUp",
    "selectDown",
    "selectUpVim",
    "selectDownVim",
    "selectConfirm",
    # Both widgets
    "cancel",
]

PromptKeybindingsConfig = dict[PromptAction, KeyId | list[KeyId]]

DEFAULT_PROMPT_KEYBINDINGS: dict[PromptAction, KeyId | list[KeyId]] = {
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "deleteCharBackward": ["backspace", "delete"],
    "submit": "enter",
    "selectUp": "up",
    "selectDown": "down",
    "selectUpVim": "k",
    "selectDownVim": "j",
    "selectConfirm": "enter",
    "cancel": ["escape", "ctrl+c"],
}


class PromptKeybindingsManager:
    """Maps decoded key identifiers to prompt actions."""

    def __init__(self, config: PromptKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[PromptAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PromptKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for source in (DEFAULT_PROMPT_KEYBINDINGS, config):
            for action, keys in source.items():
                key_array = keys if isinstance(keys, list) else [keys]
                self._action_to_keys[action] = list(key_array)

    def matches(self, key: KeyId | None, action: PromptAction) -> bool:
        """Check if a decoded key triggers *action*."""
        if key is None:
            return False
        return key in self._action_to_keys.get(action, ())

    def get_keys(self, action: PromptAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: PromptKeybindingsConfig) -> None:
        self._build_maps(config)


_global_prompt_keybindings: PromptKeybindingsManager | None = None


def get_prompt_keybindings() -> PromptKeybindingsManager:
    global _global_prompt_keybindings
    if _global_prompt_keybindings is None:
        _global_prompt_keybindings = PromptKeybindingsManager()
    return _global_prompt_keybindings


def set_prompt_keybindings(manager: PromptKeybindingsManager | None) -> None:
    """Replace the process-wide bindings; ``None`` restores the defaults."""
    global _global_prompt_keybindings
    _global_prompt_keybindings = manager

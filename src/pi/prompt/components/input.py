"""Input prompt - asks the user to type a single line of text."""

from __future__ import annotations

from pi.prompt.config import DEFAULT_MINIMUM_CHARS, InputConfig, PromptSettings
from pi.prompt.driver import PromptWidget, run_prompt
from pi.prompt.events import KeyEvent
from pi.prompt.keybindings import PromptKeybindingsManager
from pi.prompt.style import DEFAULT_COLOR, Color
from pi.prompt.terminal import ProcessTerminal, Terminal
from pi.prompt.text_edit import TextEditState


class Input(PromptWidget):
    """Prompt suitable for when you need the user to input a string.

    Example::

        name = Input("What's your name?").prompt()
        if name is None:
            print("There was an error, please try again")
        else:
            print(f"Hello {name}!")
    """

    def __init__(
        self,
        message: str,
        *,
        minimum_chars: int = DEFAULT_MINIMUM_CHARS,
        color: Color = DEFAULT_COLOR,
        terminal: Terminal | None = None,
        settings: PromptSettings | None = None,
        keybindings: PromptKeybindingsManager | None = None,
    ) -> None:
        super().__init__(keybindings)
        self.config = InputConfig(message=message, minimum_chars=minimum_chars, color=color)
        self.state = TextEditState(message)
        self._terminal = terminal
        self._settings = settings

    def prompt(self) -> str | None:
        """Returns the trimmed string the user typed, or ``None`` if cancelled."""
        terminal = self._terminal or ProcessTerminal(settings=self._settings)
        return run_prompt(self, terminal, self._settings)

    def draw(self, terminal: Terminal) -> None:
        terminal.move_to(0, 0)
        terminal.clear_screen()

        terminal.set_foreground(self.config.color)
        terminal.write(self.config.message)
        terminal.reset_color()

        terminal.move_to(0, self.state.first_column)
        terminal.write(self.state.buffer)
        terminal.move_to(0, self.state.screen_cursor_column)

    def handle_key(self, event: KeyEvent, terminal: Terminal) -> bool:
        kb = self.keybindings

        if kb.matches(event.key, "submit"):
            answer = self.state.submit(self.config.minimum_chars)
            if answer is not None:
                self.confirm(answer)
            return False

        if kb.matches(event.key, "deleteCharBackward"):
            return self.state.delete()

        if kb.matches(event.key, "cursorLeft"):
            return self.state.move_left()

        if kb.matches(event.key, "cursorRight"):
            return self.state.move_right()

        text = event.text
        if text is None:
            return False
        self.state.insert(text)
        return True

    def handle_paste(self, text: str, terminal: Terminal) -> bool:
        self.state.paste(text)
        return True

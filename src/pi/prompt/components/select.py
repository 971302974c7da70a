"""Select prompt - pick one option from a paginated list."""

from __future__ import annotations

from collections.abc import Sequence

from pi.prompt.config import (
    DEFAULT_HELP_MESSAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_VIM_MODE,
    PromptSettings,
    SelectConfig,
)
from pi.prompt.driver import PromptWidget, run_prompt
from pi.prompt.events import KeyEvent
from pi.prompt.image_preview import ImagePreview, TerminalImagePreview
from pi.prompt.keybindings import PromptKeybindingsManager
from pi.prompt.pagination import PaginationState
from pi.prompt.style import DEFAULT_COLOR, Color
from pi.prompt.terminal import ProcessTerminal, Terminal
from pi.prompt.utils import truncate_to_width

SELECTED_PREFIX = "> "
UNSELECTED_PREFIX = "  "


class Select(PromptWidget):
    """Prompt suitable for when you need the user to select one option among many.

    Row 0 holds the message, rows ``1..page_size`` the visible options and
    the row below them the help message. Passing ``help_message=None``
    removes the help line. ``images`` is a list of image paths, one per
    option, previewed next to the list on terminals that support inline
    images; ``image_preview`` replaces the default previewer.

    Example::

        options = ["Rust", "C", "C++", "Javascript", "Java", "C#", "Python"]
        language = Select("What's your favorite programming language?", options).prompt()
    """

    def __init__(
        self,
        message: str,
        options: Sequence[str],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        help_message: str | None = DEFAULT_HELP_MESSAGE,
        vim_mode: bool = DEFAULT_VIM_MODE,
        images: Sequence[str] | None = None,
        image_preview: ImagePreview | None = None,
        color: Color = DEFAULT_COLOR,
        terminal: Terminal | None = None,
        settings: PromptSettings | None = None,
        keybindings: PromptKeybindingsManager | None = None,
    ) -> None:
        super().__init__(keybindings)
        self.config = SelectConfig(
            message=message,
            options=tuple(options),
            page_size=page_size,
            help_message=help_message,
            vim_mode=vim_mode,
            images=tuple(images) if images is not None else None,
            color=color,
        )
        self.state = PaginationState(self.config.options, self.config.page_size)
        if image_preview is None and self.config.images is not None:
            image_preview = TerminalImagePreview(self.config.images)
        self.image_preview = image_preview
        self._terminal = terminal
        self._settings = settings

    def prompt(self) -> str | None:
        """Returns the option the user selected, or ``None`` if cancelled."""
        terminal = self._terminal or ProcessTerminal(settings=self._settings)
        return run_prompt(self, terminal, self._settings)

    def start(self, terminal: Terminal) -> None:
        terminal.set_cursor_style("steady_bar")
        terminal.hide_cursor()
        super().start(terminal)

    def finish(self, terminal: Terminal) -> None:
        if self.image_preview is not None:
            self.image_preview.clear(terminal)

    def draw(self, terminal: Terminal) -> None:
        color = self.config.color
        columns, _ = terminal.size
        label_width = max(1, columns - len(SELECTED_PREFIX))

        terminal.move_to(0, 0)
        terminal.clear_screen()

        terminal.set_foreground(color)
        terminal.write(self.config.message)
        terminal.reset_color()

        row = 0
        for option in self.state.visible_options():
            row = option.row
            label = truncate_to_width(option.label, label_width)
            terminal.move_to(row, 0)
            if option.selected:
                terminal.set_foreground(color)
                terminal.write(SELECTED_PREFIX + label)
                terminal.reset_color()
            else:
                terminal.write(UNSELECTED_PREFIX + label)

        if self.config.help_message is not None:
            terminal.move_to(row + 1, 0)
            terminal.set_foreground(color)
            terminal.write(self.config.help_message)
            terminal.reset_color()

        terminal.move_to(self.state.cursor_row, 0)

        if self.image_preview is not None:
            self.image_preview.draw(terminal, self.state.selected_index)
            terminal.move_to(self.state.cursor_row, 0)

    def handle_key(self, event: KeyEvent, terminal: Terminal) -> bool:
        kb = self.keybindings
        vim = self.config.vim_mode

        if kb.matches(event.key, "selectConfirm"):
            self.confirm(self.state.confirm())
            return False

        if kb.matches(event.key, "selectUp") or (vim and kb.matches(event.key, "selectUpVim")):
            return self.state.move_up()

        if kb.matches(event.key, "selectDown") or (vim and kb.matches(event.key, "selectDownVim")):
            return self.state.move_down()

        return False

"""Event loop shared by the prompt widgets.

``run_prompt`` puts the terminal in raw mode, lets the widget draw itself,
then repeatedly drains every pending input event into the widget, flushes
the queued output and sleeps for the poll interval. The loop ends when the
widget leaves the ``ACTIVE`` state. The terminal is restored on every exit
path, including exceptions raised by the widget.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from pi.prompt.config import PromptSettings
from pi.prompt.events import (
    ClosedEvent,
    Event,
    FocusEvent,
    KeyEvent,
    PasteEvent,
    ResizeEvent,
)
from pi.prompt.keybindings import PromptKeybindingsManager, get_prompt_keybindings
from pi.prompt.terminal import Terminal

logger = logging.getLogger(__name__)


class PromptStatus(Enum):
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PromptWidget:
    """Base class for widgets driven by :func:`run_prompt`.

    Subclasses implement :meth:`draw` and :meth:`handle_key`, and call
    :meth:`confirm` once they have an answer.
    """

    def __init__(self, keybindings: PromptKeybindingsManager | None = None) -> None:
        self.status: PromptStatus = PromptStatus.ACTIVE
        self.answer: str | None = None
        self._keybindings = keybindings

    @property
    def keybindings(self) -> PromptKeybindingsManager:
        return self._keybindings or get_prompt_keybindings()

    # -- lifecycle hooks ------------------------------------------------------

    def start(self, terminal: Terminal) -> None:
        """Called once raw mode is on, before the first event."""
        self.draw(terminal)

    def finish(self, terminal: Terminal) -> None:
        """Called before the terminal is restored, on every exit path."""

    def draw(self, terminal: Terminal) -> None:
        raise NotImplementedError

    def handle_key(self, event: KeyEvent, terminal: Terminal) -> bool:
        """Apply a key press. Returns ``True`` if the screen needs a redraw."""
        raise NotImplementedError

    def handle_paste(self, text: str, terminal: Terminal) -> bool:
        return False

    # -- state transitions ----------------------------------------------------

    def confirm(self, answer: str) -> None:
        self.answer = answer
        self.status = PromptStatus.CONFIRMED

    def cancel(self) -> None:
        self.answer = None
        self.status = PromptStatus.CANCELLED

    # -- dispatch -------------------------------------------------------------

    def handle_event(self, event: Event, terminal: Terminal) -> None:
        if self.status is not PromptStatus.ACTIVE:
            return

        if isinstance(event, KeyEvent):
            if self.keybindings.matches(event.key, "cancel"):
                self.cancel()
                return
            if self.handle_key(event, terminal) and self.status is PromptStatus.ACTIVE:
                self.draw(terminal)
        elif isinstance(event, PasteEvent):
            if self.handle_paste(event.text, terminal):
                self.draw(terminal)
        elif isinstance(event, ResizeEvent):
            self.draw(terminal)
        elif isinstance(event, FocusEvent):
            pass
        elif isinstance(event, ClosedEvent):
            logger.debug("input closed: %s", event.reason)
            self.cancel()
        else:
            logger.debug("unexpected event %r", event)
            self.cancel()


def restore_terminal(terminal: Terminal, leave_raw: bool) -> None:
    """Reset colors and cursor, clear the screen and leave raw mode."""
    terminal.reset_color()
    terminal.set_cursor_style("default")
    terminal.show_cursor()
    terminal.clear_screen()
    terminal.move_to(0, 0)
    terminal.flush()
    if leave_raw:
        terminal.disable_raw_mode()


def run_prompt(
    widget: PromptWidget,
    terminal: Terminal,
    settings: PromptSettings | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> str | None:
    """Drive *widget* until it is confirmed or cancelled.

    Returns the widget's answer, or ``None`` when the prompt was cancelled
    or the input stream failed.
    """
    settings = settings or PromptSettings.from_env()
    was_raw = terminal.is_raw_mode

    terminal.enable_raw_mode()
    try:
        widget.start(terminal)
        while widget.status is PromptStatus.ACTIVE:
            _drain_events(widget, terminal)
            terminal.flush()
            if widget.status is PromptStatus.ACTIVE:
                sleep(settings.poll_interval)
    finally:
        try:
            widget.finish(terminal)
        finally:
            restore_terminal(terminal, leave_raw=not was_raw)

    logger.debug("prompt finished: %s", widget.status.value)
    if widget.status is PromptStatus.CONFIRMED:
        return widget.answer
    return None


def _drain_events(widget: PromptWidget, terminal: Terminal) -> None:
    while widget.status is PromptStatus.ACTIVE:
        try:
            if not terminal.poll(0.0):
                return
            event = terminal.read()
        except (OSError, ValueError) as exc:
            logger.debug("failed to read terminal input: %s", exc)
            widget.cancel()
            return
        widget.handle_event(event, terminal)

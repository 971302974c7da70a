"""Terminal surface for raw-mode prompts.

Provides a ``Terminal`` protocol describing everything the prompt widgets
need from a terminal, and a concrete ``ProcessTerminal`` backed by
``sys.stdin``/``sys.stdout`` that manages raw mode, bracketed paste, focus
reporting, the Kitty keyboard protocol and ``SIGWINCH`` resize detection.

Output is queued and only reaches the terminal on :meth:`Terminal.flush`.
"""

from __future__ import annotations

import codecs
import logging
import os
import re
import select
import signal
import sys
import termios
import tty
from collections import deque
from typing import Literal, Protocol, TextIO

from pi.prompt.config import PromptSettings
from pi.prompt.events import (
    ClosedEvent,
    Event,
    FocusEvent,
    KeyEvent,
    PasteEvent,
    ResizeEvent,
)
from pi.prompt.keys import is_key_release, parse_key
from pi.prompt.stdin_buffer import StdinBuffer
from pi.prompt.style import Color

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

_FOCUS_REPORTING_ENABLE = "\x1b[?1004h"
_FOCUS_REPORTING_DISABLE = "\x1b[?1004l"
_FOCUS_IN = "\x1b[I"
_FOCUS_OUT = "\x1b[O"

_KITTY_QUERY = "\x1b[?u"
_KITTY_ENABLE = "\x1b[>1u"
_KITTY_DISABLE = "\x1b[<u"
_KITTY_RESPONSE_RE = re.compile(r"^\x1b\[\?(\d+)u$")

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J"
_RESET_COLOR = "\x1b[0m"
_MOVE_TO_FMT = "\x1b[{};{}H"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_RIGHT_FMT = "\x1b[{}C"
_CURSOR_LEFT_FMT = "\x1b[{}D"

CursorStyle = Literal["default", "blinking_block", "steady_block", "blinking_bar", "steady_bar"]

_CURSOR_STYLES: dict[str, str] = {
    "default": "\x1b[0 q",
    "blinking_block": "\x1b[1 q",
    "steady_block": "\x1b[2 q",
    "blinking_bar": "\x1b[5 q",
    "steady_bar": "\x1b[6 q",
}


def move_to_sequence(row: int, column: int) -> str:
    """CUP sequence for a 0-based *row* and *column*."""
    return _MOVE_TO_FMT.format(max(0, row) + 1, max(0, column) + 1)


def move_by_sequence(rows: int, columns: int) -> str:
    """Relative cursor motion; the terminal clamps it at the screen edges."""
    parts: list[str] = []
    if rows < 0:
        parts.append(_CURSOR_UP_FMT.format(-rows))
    elif rows > 0:
        parts.append(_CURSOR_DOWN_FMT.format(rows))
    if columns < 0:
        parts.append(_CURSOR_LEFT_FMT.format(-columns))
    elif columns > 0:
        parts.append(_CURSOR_RIGHT_FMT.format(columns))
    return "".join(parts)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the terminal operations used by prompt widgets.

    Rows and columns are 0-based. Implementations deliver only key presses
    through :meth:`read`; key-release reports are dropped before they reach
    a widget.
    """

    @property
    def is_raw_mode(self) -> bool: ...

    @property
    def size(self) -> tuple[int, int]:
        """``(columns, rows)`` of the terminal."""
        ...

    def enable_raw_mode(self) -> None: ...

    def disable_raw_mode(self) -> None: ...

    def move_to(self, row: int, column: int) -> None: ...

    def move_by(self, rows: int, columns: int) -> None: ...

    def clear_screen(self) -> None: ...

    def set_foreground(self, color: Color) -> None: ...

    def reset_color(self) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def set_cursor_style(self, style: CursorStyle) -> None: ...

    def write(self, text: str) -> None: ...

    def flush(self) -> None: ...

    def poll(self, timeout: float | None = 0.0) -> bool:
        """Return ``True`` if :meth:`read` would not block."""
        ...

    def read(self) -> Event: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's standard streams.

    Raw mode is managed with :mod:`tty` and :mod:`termios`; readiness is
    checked with :func:`select.select` so :meth:`poll` never blocks when
    called with a zero timeout.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        settings: PromptSettings | None = None,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._settings = settings or PromptSettings.from_env()

        self._raw_mode: bool = False
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._sigwinch_installed: bool = False
        self._resize_pending: bool = False
        self._kitty_protocol_active: bool = False
        self._closed: bool = False

        self._pending_output: list[str] = []
        self._events: deque[Event] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._stdin_buffer.on_data(self._on_sequence)
        self._stdin_buffer.on_paste(self._on_paste)

    # -- properties ---------------------------------------------------------

    @property
    def is_raw_mode(self) -> bool:
        return self._raw_mode

    @property
    def kitty_protocol_active(self) -> bool:
        return self._kitty_protocol_active

    @property
    def size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(self._stdout.fileno())
        except (ValueError, OSError):
            return 80, 24
        return size.columns, size.lines

    # -- raw mode -----------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Enter raw mode and turn on the input reporting modes we decode."""
        if self._raw_mode:
            return

        fd = self._stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._raw_mode = True
        logger.debug("raw mode enabled on fd %d", fd)

        self._install_sigwinch_handler()

        self._raw_write(_BRACKETED_PASTE_ENABLE + _FOCUS_REPORTING_ENABLE + _KITTY_QUERY)

    def disable_raw_mode(self) -> None:
        """Undo everything :meth:`enable_raw_mode` changed."""
        if not self._raw_mode:
            return

        restore = _BRACKETED_PASTE_DISABLE + _FOCUS_REPORTING_DISABLE
        if self._kitty_protocol_active:
            restore += _KITTY_DISABLE
            self._kitty_protocol_active = False
        self.flush()
        self._raw_write(restore)

        self._restore_sigwinch_handler()

        if self._original_termios is not None:
            try:
                termios.tcsetattr(
                    self._stdin.fileno(), termios.TCSADRAIN, self._original_termios
                )
            finally:
                self._original_termios = None

        self._stdin_buffer.clear()
        self._raw_mode = False
        logger.debug("raw mode disabled")

    # -- output -------------------------------------------------------------

    def write(self, text: str) -> None:
        self._pending_output.append(text)

    def flush(self) -> None:
        if not self._pending_output:
            return
        data = "".join(self._pending_output)
        self._pending_output.clear()
        self._raw_write(data)

    def move_to(self, row: int, column: int) -> None:
        self.write(move_to_sequence(row, column))

    def move_by(self, rows: int, columns: int) -> None:
        self.write(move_by_sequence(rows, columns))

    def clear_screen(self) -> None:
        self.write(_CLEAR_SCREEN)

    def set_foreground(self, color: Color) -> None:
        self.write(color.sgr)

    def reset_color(self) -> None:
        self.write(_RESET_COLOR)

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)

    def set_cursor_style(self, style: CursorStyle) -> None:
        self.write(_CURSOR_STYLES[style])

    # -- input --------------------------------------------------------------

    def poll(self, timeout: float | None = 0.0) -> bool:
        if self._events:
            return True
        if self._resize_pending:
            self._queue_resize()
            return True
        if self._closed:
            return False

        self._read_available(timeout)
        self._stdin_buffer.flush_if_stale()
        return bool(self._events)

    def read(self) -> Event:
        """Return the next event, blocking until one is available.

        Raises :class:`OSError` if the terminal is not readable.
        """
        while not self._events:
            if self._closed:
                return ClosedEvent("stdin closed")
            # A partial escape sequence must be flushed even if no more
            # bytes ever arrive.
            timeout = 0.01 if self._stdin_buffer.has_pending else None
            self.poll(timeout)
        return self._events.popleft()

    # -- private: reading ---------------------------------------------------

    def _read_available(self, timeout: float | None) -> None:
        fd = self._stdin.fileno()
        readable, _, _ = select.select([fd], [], [], timeout)
        if not readable:
            return

        raw = os.read(fd, 4096)
        if not raw:
            logger.debug("stdin reached end of file")
            self._closed = True
            self._events.append(ClosedEvent("end of file"))
            return

        try:
            text = self._decoder.decode(raw)
        except UnicodeDecodeError as exc:
            logger.debug("undecodable terminal input: %s", exc)
            self._decoder.reset()
            self._stdin_buffer.clear()
            self._closed = True
            self._events.append(ClosedEvent("invalid utf-8"))
            return

        self._stdin_buffer.process(text)

    def _on_sequence(self, data: str) -> None:
        if _KITTY_RESPONSE_RE.match(data):
            if not self._kitty_protocol_active:
                self._kitty_protocol_active = True
                self._raw_write(_KITTY_ENABLE)
                logger.debug("kitty keyboard protocol enabled")
            return
        if data == _FOCUS_IN:
            self._events.append(FocusEvent(gained=True))
            return
        if data == _FOCUS_OUT:
            self._events.append(FocusEvent(gained=False))
            return
        if is_key_release(data):
            return
        self._events.append(KeyEvent(data=data, key=parse_key(data)))

    def _on_paste(self, text: str) -> None:
        self._events.append(PasteEvent(text=text))

    def _queue_resize(self) -> None:
        self._resize_pending = False
        columns, rows = self.size
        self._events.append(ResizeEvent(rows=rows, columns=columns))

    # -- private: SIGWINCH --------------------------------------------------

    def _install_sigwinch_handler(self) -> None:
        try:
            self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
            signal.signal(signal.SIGWINCH, self._on_sigwinch)
        except ValueError:
            # Not the main thread; resizes go unreported
            logger.debug("cannot install SIGWINCH handler outside the main thread")
            return
        self._sigwinch_installed = True

    def _restore_sigwinch_handler(self) -> None:
        if not self._sigwinch_installed:
            return
        signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler or signal.SIG_DFL)
        self._prev_sigwinch_handler = None
        self._sigwinch_installed = False

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self._resize_pending = True

    # -- private: raw write -------------------------------------------------

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing the output queue."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            logger.debug("failed to write %d chars to the terminal", len(data))

        if self._settings.write_log:
            try:
                with open(self._settings.write_log, "a") as f:
                    f.write(data)
            except OSError:
                pass

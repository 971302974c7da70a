"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

Input is scripted: queue events with :meth:`VirtualTerminal.feed_keys` or
:meth:`VirtualTerminal.feed` and the prompt driver reads them back through
``poll``/``read``. All output is captured for assertions, and the cursor
position and raw-mode flag are tracked so tests can check that a prompt
leaves the terminal the way it found it.
"""

from __future__ import annotations

from collections import deque

from pi.prompt.events import ClosedEvent, Event, KeyEvent
from pi.prompt.keys import parse_key
from pi.prompt.style import Color
from pi.prompt.utils import visible_width


class VirtualTerminal:
    """In-memory terminal that records all writes for test inspection.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self._rows = rows
        self._columns = columns
        self._buffer: list[str] = []
        self._pending: list[str] = []
        self._events: deque[Event] = deque()
        self._raw_mode = False
        self.raw_mode_history: list[bool] = []
        self.cursor_visible = True
        self.cursor_style = "default"
        self.foreground: Color | None = None
        self.row = 0
        self.column = 0
        self.flush_count = 0
        self.read_error: Exception | None = None
        # Report a closed stream once scripted input runs out so a test
        # that forgets a confirm or cancel key cannot hang the loop
        self.close_when_exhausted = True

    # -- Terminal protocol: properties --------------------------------------

    @property
    def is_raw_mode(self) -> bool:
        return self._raw_mode

    @property
    def size(self) -> tuple[int, int]:
        return self._columns, self._rows

    # -- Terminal protocol: raw mode ----------------------------------------

    def enable_raw_mode(self) -> None:
        self._raw_mode = True
        self.raw_mode_history.append(True)

    def disable_raw_mode(self) -> None:
        self._raw_mode = False
        self.raw_mode_history.append(False)

    # -- Terminal protocol: output ------------------------------------------

    def write(self, text: str) -> None:
        self._pending.append(text)
        self.column += visible_width(text)

    def flush(self) -> None:
        self._buffer.extend(self._pending)
        self._pending.clear()
        self.flush_count += 1

    def move_to(self, row: int, column: int) -> None:
        self.row = max(0, min(row, self._rows - 1))
        self.column = max(0, min(column, self._columns - 1))
        self._pending.append(f"\x1b[{self.row + 1};{self.column + 1}H")

    def move_by(self, rows: int, columns: int) -> None:
        self.move_to(self.row + rows, self.column + columns)

    def clear_screen(self) -> None:
        self._pending.append("\x1b[2J")

    def set_foreground(self, color: Color) -> None:
        self.foreground = color
        self._pending.append(color.sgr)

    def reset_color(self) -> None:
        self.foreground = None
        self._pending.append("\x1b[0m")

    def hide_cursor(self) -> None:
        self.cursor_visible = False
        self._pending.append("\x1b[?25l")

    def show_cursor(self) -> None:
        self.cursor_visible = True
        self._pending.append("\x1b[?25h")

    def set_cursor_style(self, style: str) -> None:
        self.cursor_style = style

    # -- Terminal protocol: input -------------------------------------------

    def poll(self, timeout: float | None = 0.0) -> bool:
        if self.read_error is not None:
            return True
        return bool(self._events) or self.close_when_exhausted

    def read(self) -> Event:
        if self.read_error is not None:
            raise self.read_error
        if not self._events:
            return ClosedEvent("no scripted input left")
        return self._events.popleft()

    # -- Test helpers -------------------------------------------------------

    def feed(self, *events: Event) -> None:
        """Queue already-built events."""
        self._events.extend(events)

    def feed_keys(self, *sequences: str) -> None:
        """Queue raw key sequences such as ``"a"``, ``"\\x1b[A"`` or ``"\\r"``."""
        for data in sequences:
            self._events.append(KeyEvent(data=data, key=parse_key(data)))

    @property
    def pending_events(self) -> int:
        return len(self._events)

    @property
    def output(self) -> str:
        """Everything flushed to the terminal as a single string."""
        return "".join(self._buffer)

    @property
    def unflushed(self) -> str:
        return "".join(self._pending)

    def clear_buffer(self) -> None:
        self._buffer.clear()

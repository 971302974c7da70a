"""Single-line text edit state for the input prompt.

The state owns the answer buffer and a stored logical insertion offset.
The terminal column of the cursor is derived from the offset, so the
state can be driven and checked without a terminal.

Layout of the prompt line (0-based columns)::

    What's your name? Ada
    ^                 ^  ^
    0                 |  last_column
                      first_column = message width + 1 separating space
"""

from __future__ import annotations

import re

from pi.prompt.errors import CursorInvariantError
from pi.prompt.keys import printable_text
from pi.prompt.utils import grapheme_count, graphemes, visible_width

# CSI, OSC and two-byte escape sequences
_ESCAPE_SEQUENCE_RE = re.compile(
    r"\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\)?|[@-Z\\-_])"
)


class TextEditState:
    """Answer buffer plus insertion point for a one-line input."""

    def __init__(self, message: str) -> None:
        self._message_width = visible_width(message)
        self.buffer: str = ""
        self.offset: int = 0

    # -- derived screen positions ----------------------------------------

    @property
    def first_column(self) -> int:
        """Column of the first editable cell, right after ``message + " "``."""
        return self._message_width + 1

    @property
    def last_column(self) -> int:
        """Column one past the last character of the buffer."""
        return self.first_column + visible_width(self.buffer)

    @property
    def screen_cursor_column(self) -> int:
        self._check_offset()
        return self.first_column + visible_width(self.buffer[: self.offset])

    # -- editing ------------------------------------------------------------

    def insert(self, text: str) -> None:
        """Insert *text* at the cursor and move the cursor past it."""
        self._check_offset()
        self.buffer = self.buffer[: self.offset] + text + self.buffer[self.offset :]
        self.offset += len(text)

    def paste(self, text: str) -> None:
        """Insert pasted *text*, dropping escape sequences and control characters.

        Line breaks are control characters too, so a multi-line paste is
        joined into one line.
        """
        stripped = _ESCAPE_SEQUENCE_RE.sub("", text)
        clean = "".join(ch for ch in stripped if printable_text(ch) is not None)
        if clean:
            self.insert(clean)

    def delete(self) -> bool:
        """Remove the character left of the cursor.

        Returns ``False`` (and changes nothing) when the buffer is empty or
        the cursor is at the first editable column.
        """
        if not self.buffer or self.offset == 0:
            return False
        self._check_offset()
        width = self._previous_grapheme_length()
        self.buffer = self.buffer[: self.offset - width] + self.buffer[self.offset :]
        self.offset -= width
        return True

    def move_left(self) -> bool:
        if self.offset == 0:
            return False
        self._check_offset()
        self.offset -= self._previous_grapheme_length()
        return True

    def move_right(self) -> bool:
        if self.offset >= len(self.buffer):
            return False
        after = graphemes(self.buffer[self.offset :])
        self.offset += len(after[0]) if after else 1
        return True

    def submit(self, minimum_chars: int) -> str | None:
        """Return the trimmed answer, or ``None`` if it is too short.

        Only characters left after trimming count towards *minimum_chars*.
        """
        answer = self.buffer.strip()
        if grapheme_count(answer) < minimum_chars:
            return None
        return answer

    # -- invariants -----------------------------------------------------------

    def _previous_grapheme_length(self) -> int:
        before = graphemes(self.buffer[: self.offset])
        return len(before[-1]) if before else 1

    def _check_offset(self) -> None:
        if not 0 <= self.offset <= len(self.buffer):
            raise CursorInvariantError(
                f"cursor offset {self.offset} outside buffer of length {len(self.buffer)}"
            )

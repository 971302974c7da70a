"""StdinBuffer splits raw stdin chunks into complete input sequences.

A single ``os.read`` can return several key presses at once, or stop in
the middle of an escape sequence. Without buffering, a partial ``ESC [``
would be misread as an Escape key press followed by ``[``.

The buffer is driven synchronously: the terminal feeds it whatever it
read and calls :meth:`StdinBuffer.flush_if_stale` on every poll so a lone
``ESC`` that never grows into a sequence is eventually emitted as-is.
"""

from __future__ import annotations

import re
import time
from typing import Callable, Literal

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> SequenceStatus:
    """Classify *data* as a complete escape sequence, a prefix of one, or text."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    introducer = data[1]

    # CSI: ESC [ params final-byte
    if introducer == "[":
        if data.startswith(f"{ESC}[M"):
            # X10 mouse report carries three raw bytes
            return "complete" if len(data) >= 6 else "incomplete"
        if len(data) < 3:
            return "incomplete"
        payload = data[2:]
        if not 0x40 <= ord(payload[-1]) <= 0x7E:
            return "incomplete"
        if payload.startswith("<") and not _SGR_MOUSE_RE.match(payload):
            return "incomplete"
        return "complete"

    # OSC: ESC ] ... (BEL | ST)
    if introducer == "]":
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # DCS and APC: terminated by ST
    if introducer in ("P", "_"):
        return "complete" if data.endswith(f"{ESC}\\") else "incomplete"

    # SS3: ESC O letter
    if introducer == "O":
        return "complete" if len(data) >= 3 else "incomplete"

    # Meta key: ESC followed by one character
    return "complete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns ``(sequences, remainder)`` where *remainder* is an unfinished
    escape sequence to keep for the next chunk.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            if _is_complete_sequence(remaining[:seq_end]) == "complete":
                break
            seq_end += 1
        else:
            return sequences, remaining

        sequences.append(remaining[:seq_end])
        pos += seq_end

    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences and paste payloads."""

    def __init__(
        self,
        *,
        timeout: float = 0.01,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._buffer: str = ""
        self._timeout = timeout
        self._clock = clock
        self._pending_since: float | None = None
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set callback for bracketed paste content."""
        self._on_paste = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def process(self, data: str) -> None:
        """Feed a chunk of decoded stdin data into the buffer."""
        self._buffer += data

        if self._paste_mode:
            self._paste_buffer += self._buffer
            self._buffer = ""
            self._finish_paste_if_complete()
            return

        start_index = self._buffer.find(BRACKETED_PASTE_START)
        if start_index != -1:
            before_paste = self._buffer[:start_index]
            sequences, _ = _extract_complete_sequences(before_paste)
            for sequence in sequences:
                self._emit_data(sequence)

            self._paste_mode = True
            self._paste_buffer = self._buffer[start_index + len(BRACKETED_PASTE_START):]
            self._buffer = ""
            self._pending_since = None
            self._finish_paste_if_complete()
            return

        sequences, remainder = _extract_complete_sequences(self._buffer)
        self._buffer = remainder
        for sequence in sequences:
            self._emit_data(sequence)

        self._pending_since = self._clock() if self._buffer else None

    def _finish_paste_if_complete(self) -> None:
        end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end_index == -1:
            return

        pasted_content = self._paste_buffer[:end_index]
        remaining = self._paste_buffer[end_index + len(BRACKETED_PASTE_END):]
        self._paste_mode = False
        self._paste_buffer = ""

        self._emit_paste(pasted_content)

        if remaining:
            self.process(remaining)

    def flush_if_stale(self) -> None:
        """Emit a buffered partial sequence once it has waited past the timeout."""
        if self._pending_since is None:
            return
        if self._clock() - self._pending_since < self._timeout:
            return
        for sequence in self.flush():
            self._emit_data(sequence)

    def flush(self) -> list[str]:
        """Return and clear the buffered partial sequence, if any."""
        self._pending_since = None
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    @property
    def has_pending(self) -> bool:
        return bool(self._buffer)

    def clear(self) -> None:
        self._buffer = ""
        self._pending_since = None
        self._paste_mode = False
        self._paste_buffer = ""

    def get_buffer(self) -> str:
        return self._buffer

"""Terminal events delivered to prompt widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pi.prompt.keys import KeyId, printable_text, split_key_id


@dataclass(frozen=True)
class KeyEvent:
    """A key press.

    ``key`` is the decoded identifier (``"ctrl+c"``, ``"up"``, ``"a"``) or
    ``None`` when the sequence does not name a key. ``data`` is the raw
    sequence it was decoded from.
    """

    data: str
    key: KeyId | None

    @property
    def text(self) -> str | None:
        """The printable text carried by the key, if any."""
        return printable_text(self.data)

    @property
    def modifiers(self) -> int:
        if self.key is None:
            return 0
        return split_key_id(self.key)[1]


@dataclass(frozen=True)
class PasteEvent:
    """Text delivered through bracketed paste."""

    text: str


@dataclass(frozen=True)
class ResizeEvent:
    rows: int
    columns: int


@dataclass(frozen=True)
class FocusEvent:
    gained: bool


@dataclass(frozen=True)
class ClosedEvent:
    """The input stream reached end-of-file or failed."""

    reason: str = ""


Event = Union[KeyEvent, PasteEvent, ResizeEvent, FocusEvent, ClosedEvent]

"""Keyboard input decoding for raw-mode terminals.

Turns a single complete input sequence (as produced by
:class:`~pi.prompt.stdin_buffer.StdinBuffer`) into a key identifier such as
``"a"``, ``"ctrl+c"``, ``"up"`` or ``"shift+enter"``. Legacy xterm sequences,
the Kitty keyboard protocol (CSI u) and xterm ``modifyOtherKeys`` are
understood.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

KeyId = str

KeyEventType = Literal["press", "repeat", "release"]


class Key:
    """Named key identifiers used by the prompt keybindings."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock and num lock bits reported by the Kitty protocol
LOCK_MASK = 64 + 128

CODEPOINTS: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
    57414: "enter",  # keypad enter
}

# Final byte of ``CSI 1;<mod> X`` and ``SS3 X`` sequences
_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# Number of ``CSI <n> ~`` sequences
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

# Kitty functional key codepoints (private use area)
_KITTY_FUNCTIONAL_KEYS: dict[int, str] = {
    57364 + i: f"f{i + 1}" for i in range(12)
}

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    **{f"\x1b[{letter}": key for letter, key in _LETTER_KEYS.items() if letter in "ABCDHFE"},
    **{f"\x1bO{letter}": key for letter, key in _LETTER_KEYS.items() if letter != "E"},
    **{f"\x1b[{number}~": key for number, key in _TILDE_KEYS.items()},
    "\x1b[Z": "shift+tab",
}

_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$")
_CSI_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFEPQRS])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+)(?::(\d+))?)?~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")

_BRACKETED_PASTE_RE = re.compile(r"\x1b\[20[01]~")
_RELEASE_RE = re.compile(r"(?::3u|;\d+:3~|;\d+:3[ABCDHFPQRS])$")
_REPEAT_RE = re.compile(r"(?::2u|;\d+:2~|;\d+:2[ABCDHFPQRS])$")


# ---------------------------------------------------------------------------
# Release / repeat detection
# ---------------------------------------------------------------------------


def is_key_release(data: str) -> bool:
    """Return ``True`` if *data* is a Kitty key-release report."""
    if _BRACKETED_PASTE_RE.search(data):
        return False
    return bool(_RELEASE_RE.search(data))


def is_key_repeat(data: str) -> bool:
    """Return ``True`` if *data* is a Kitty key-repeat report."""
    if _BRACKETED_PASTE_RE.search(data):
        return False
    return bool(_REPEAT_RE.search(data))


# ---------------------------------------------------------------------------
# Kitty sequence parsing
# ---------------------------------------------------------------------------


@dataclass
class ParsedKittySequence:
    key: str | None
    codepoint: int
    modifier: int  # bitmask, shift=1 alt=2 ctrl=4, lock bits stripped
    event_type: int  # 1 = press, 2 = repeat, 3 = release


def _decode_modifier(raw: str | None) -> int:
    if not raw:
        return 0
    return (int(raw) - 1) & ~LOCK_MASK


def parse_kitty_sequence(data: str) -> ParsedKittySequence | None:
    """Parse a CSI u, ``CSI 1;<mod> X`` or ``CSI <n>;<mod> ~`` sequence.

    Returns ``None`` when *data* is not one of those forms.
    """
    m = _CSI_U_RE.match(data)
    if m:
        codepoint = int(m.group(1))
        base_layout = int(m.group(3)) if m.group(3) else None
        key = CODEPOINTS.get(codepoint) or _KITTY_FUNCTIONAL_KEYS.get(codepoint)
        if key is None:
            # Prefer the base layout key for non-latin layouts
            cp = codepoint if chr(codepoint).isascii() or base_layout is None else base_layout
            ch = chr(cp)
            key = ch.lower() if ch.isprintable() else None
        return ParsedKittySequence(
            key=key,
            codepoint=codepoint,
            modifier=_decode_modifier(m.group(4)),
            event_type=int(m.group(5)) if m.group(5) else 1,
        )

    m = _CSI_LETTER_RE.match(data)
    if m:
        return ParsedKittySequence(
            key=_LETTER_KEYS[m.group(3)],
            codepoint=0,
            modifier=_decode_modifier(m.group(1)),
            event_type=int(m.group(2)) if m.group(2) else 1,
        )

    m = _CSI_TILDE_RE.match(data)
    if m and m.group(2):
        key = _TILDE_KEYS.get(int(m.group(1)))
        if key is None:
            return None
        return ParsedKittySequence(
            key=key,
            codepoint=0,
            modifier=_decode_modifier(m.group(2)),
            event_type=int(m.group(3)) if m.group(3) else 1,
        )

    return None


# ---------------------------------------------------------------------------
# Key id helpers
# ---------------------------------------------------------------------------


def format_key_id(key: str, modifier: int = 0) -> KeyId:
    """Join a base key and a modifier bitmask into ``"ctrl+shift+alt+key"``."""
    prefix = ""
    if modifier & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if modifier & MODIFIERS["shift"]:
        prefix += "shift+"
    if modifier & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix + key


def split_key_id(key_id: KeyId) -> tuple[str, int]:
    """Split ``"ctrl+a"`` into ``("a", 4)``.

    A trailing ``+`` is treated as the key itself, so ``"ctrl++"`` is
    ``("+", 4)``.
    """
    modifier = 0
    rest = key_id
    while True:
        head, sep, tail = rest.partition("+")
        if not sep or not tail or head.lower() not in MODIFIERS:
            break
        modifier |= MODIFIERS[head.lower()]
        rest = tail
    return rest, modifier


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Return the key identifier for one complete input sequence.

    Returns ``None`` for empty input and for sequences that do not map to
    a key (mouse reports, terminal query responses and the like).
    """
    if not data:
        return None

    parsed = parse_kitty_sequence(data)
    if parsed is not None:
        if parsed.key is None:
            return None
        return format_key_id(parsed.key, parsed.modifier)

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        modifier = _decode_modifier(m.group(1))
        keycode = int(m.group(2))
        key = CODEPOINTS.get(keycode)
        if key is None:
            ch = chr(keycode)
            if not ch.isprintable():
                return None
            key = ch.lower()
        return format_key_id(key, modifier)

    legacy = LEGACY_KEY_SEQUENCES.get(data)
    if legacy is not None:
        return legacy

    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # Ctrl + letter
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key arrives as an ESC prefix
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is None:
            return None
        key, modifier = split_key_id(inner)
        if data[1].isupper():
            key, modifier = data[1].lower(), modifier | MODIFIERS["shift"]
        return format_key_id(key, modifier | MODIFIERS["alt"])

    if len(data) == 1 and data.isprintable():
        return data

    return None


def printable_text(data: str) -> str | None:
    """Return *data* if it is plain text that may be inserted into a buffer.

    Control characters (C0, DEL and C1) disqualify the whole chunk.
    """
    if not data:
        return None
    for ch in data:
        code = ord(ch)
        if code < 32 or code == 0x7F or 0x80 <= code <= 0x9F:
            return None
    return data

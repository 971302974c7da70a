"""Tests for pi.prompt.keys -- keyboard input decoding."""

from __future__ import annotations

import pytest

from pi.prompt.keys import (
    LEGACY_KEY_SEQUENCES,
    MODIFIERS,
    Key,
    format_key_id,
    is_key_release,
    is_key_repeat,
    parse_key,
    parse_kitty_sequence,
    printable_text,
    split_key_id,
)


# ---------------------------------------------------------------------------
# Key helper class
# ---------------------------------------------------------------------------


class TestKeyConstants:
    def test_named_keys(self) -> None:
        assert Key.escape == "escape"
        assert Key.enter == "enter"
        assert Key.page_up == "pageUp"

    def test_modifier_helpers(self) -> None:
        assert Key.ctrl("c") == "ctrl+c"
        assert Key.shift("tab") == "shift+tab"
        assert Key.alt("b") == "alt+b"


# ---------------------------------------------------------------------------
# Legacy sequences
# ---------------------------------------------------------------------------


class TestLegacyKeys:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOA", "up"),
            ("\x1bOD", "left"),
            ("\x1b[H", "home"),
            ("\x1b[3~", "delete"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[Z", "shift+tab"),
        ],
    )
    def test_navigation_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b", "escape"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            (" ", "space"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            ("\x00", "ctrl+space"),
            ("\x03", "ctrl+c"),
            ("\x02", "ctrl+b"),
            ("\x06", "ctrl+f"),
        ],
    )
    def test_single_byte_keys(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_every_table_entry_parses(self) -> None:
        for data, key in LEGACY_KEY_SEQUENCES.items():
            assert parse_key(data) == key

    def test_alt_prefix(self) -> None:
        assert parse_key("\x1bb") == "alt+b"
        assert parse_key("\x1b\r") == "alt+enter"

    def test_alt_uppercase_adds_shift(self) -> None:
        assert parse_key("\x1bB") == "shift+alt+b"

    def test_printable_characters(self) -> None:
        assert parse_key("a") == "a"
        assert parse_key("J") == "J"
        assert parse_key("é") == "é"

    def test_unknown_sequences(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[<0;10;5M") is None


# ---------------------------------------------------------------------------
# Kitty protocol and modifyOtherKeys
# ---------------------------------------------------------------------------


class TestKittyKeys:
    def test_csi_u_with_ctrl(self) -> None:
        assert parse_key("\x1b[97;5u") == "ctrl+a"

    def test_csi_u_named_codepoints(self) -> None:
        assert parse_key("\x1b[13u") == "enter"
        assert parse_key("\x1b[27u") == "escape"
        assert parse_key("\x1b[127u") == "backspace"
        assert parse_key("\x1b[13;2u") == "shift+enter"

    def test_functional_key(self) -> None:
        assert parse_key("\x1b[57364u") == "f1"

    def test_lock_bits_are_ignored(self) -> None:
        # Caps lock (64) on top of no modifiers
        assert parse_key("\x1b[97;65u") == "a"

    def test_modified_arrows_and_tilde_keys(self) -> None:
        assert parse_key("\x1b[1;5A") == "ctrl+up"
        assert parse_key("\x1b[1;2B") == "shift+down"
        assert parse_key("\x1b[3;5~") == "ctrl+delete"

    def test_event_types(self) -> None:
        parsed = parse_kitty_sequence("\x1b[97;1:3u")
        assert parsed is not None
        assert parsed.key == "a"
        assert parsed.modifier == 0
        assert parsed.event_type == 3

    def test_not_a_kitty_sequence(self) -> None:
        assert parse_kitty_sequence("\x1b[A") is None
        assert parse_kitty_sequence("a") is None

    def test_modify_other_keys(self) -> None:
        assert parse_key("\x1b[27;5;97~") == "ctrl+a"
        assert parse_key("\x1b[27;2;13~") == "shift+enter"


class TestReleaseAndRepeat:
    def test_release(self) -> None:
        assert is_key_release("\x1b[97;1:3u") is True
        assert is_key_release("\x1b[1;1:3A") is True
        assert is_key_release("\x1b[97;1u") is False

    def test_repeat(self) -> None:
        assert is_key_repeat("\x1b[97;1:2u") is True
        assert is_key_repeat("\x1b[97;1:3u") is False

    def test_bracketed_paste_is_never_a_release(self) -> None:
        assert is_key_release("\x1b[200~") is False
        assert is_key_release("\x1b[201~") is False


# ---------------------------------------------------------------------------
# Key id helpers
# ---------------------------------------------------------------------------


class TestKeyIds:
    def test_format_orders_modifiers(self) -> None:
        all_mods = MODIFIERS["ctrl"] | MODIFIERS["shift"] | MODIFIERS["alt"]
        assert format_key_id("a", all_mods) == "ctrl+shift+alt+a"
        assert format_key_id("up") == "up"

    def test_split(self) -> None:
        assert split_key_id("ctrl+shift+a") == ("a", 5)
        assert split_key_id("up") == ("up", 0)

    def test_split_plus_key(self) -> None:
        assert split_key_id("ctrl++") == ("+", 4)
        assert split_key_id("+") == ("+", 0)


class TestPrintableText:
    def test_plain_text(self) -> None:
        assert printable_text("abc") == "abc"
        assert printable_text("日本") == "日本"

    @pytest.mark.parametrize("data", ["", "\x1b", "a\x1b[A", "\x7f", "\r", "\u0085"])
    def test_control_characters_rejected(self, data: str) -> None:
        assert printable_text(data) is None

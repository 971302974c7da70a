"""Tests for TextEditState -- buffer edits and the derived cursor column."""

from __future__ import annotations

import random

import pytest

from pi.prompt.errors import CursorInvariantError
from pi.prompt.text_edit import TextEditState

MESSAGE = "Name?"  # 5 columns, editable region starts at column 6


def _state(text: str = "") -> TextEditState:
    state = TextEditState(MESSAGE)
    if text:
        state.insert(text)
    return state


def _assert_cursor_in_bounds(state: TextEditState) -> None:
    first = len(MESSAGE) + 1
    assert first <= state.screen_cursor_column <= first + len(state.buffer)


class TestColumns:
    def test_first_column_follows_message_and_space(self) -> None:
        assert _state().first_column == len(MESSAGE) + 1

    def test_empty_buffer_cursor_at_first_column(self) -> None:
        state = _state()
        assert state.screen_cursor_column == state.first_column
        assert state.last_column == state.first_column

    def test_cursor_column_tracks_offset(self) -> None:
        state = _state("abc")
        assert state.screen_cursor_column == len(MESSAGE) + 1 + 3
        state.move_left()
        assert state.screen_cursor_column == len(MESSAGE) + 1 + 2

    def test_wide_characters_take_two_columns(self) -> None:
        state = _state("日本")
        assert state.screen_cursor_column == state.first_column + 4
        state.move_left()
        assert state.screen_cursor_column == state.first_column + 2

    def test_wide_message_shifts_editable_region(self) -> None:
        state = TextEditState("名前")
        assert state.first_column == 5


class TestInsert:
    def test_insert_appends_at_end(self) -> None:
        state = _state("ab")
        state.insert("c")
        assert state.buffer == "abc"
        assert state.offset == 3

    def test_insert_in_the_middle(self) -> None:
        state = _state("ac")
        state.move_left()
        state.insert("b")
        assert state.buffer == "abc"
        assert state.offset == 2

    def test_insert_at_start(self) -> None:
        state = _state("bc")
        state.move_left()
        state.move_left()
        state.insert("a")
        assert state.buffer == "abc"
        assert state.screen_cursor_column == state.first_column + 1

    def test_insert_with_corrupted_offset_raises(self) -> None:
        state = _state("ab")
        state.offset = -1
        with pytest.raises(CursorInvariantError):
            state.insert("x")
        assert state.buffer == "ab"

    def test_paste_drops_line_breaks(self) -> None:
        state = _state()
        state.paste("one\r\ntwo\nthree")
        assert state.buffer == "onetwothree"
        assert state.offset == len("onetwothree")

    def test_paste_drops_control_characters_and_escapes(self) -> None:
        state = _state()
        state.paste("a\tb\x1b[2Jc")
        assert state.buffer == "abc"
        assert state.screen_cursor_column == state.first_column + 3

    def test_paste_drops_osc_and_c1_controls(self) -> None:
        state = _state("x")
        state.paste("\x1b]0;title\x07y\u009bz\x1b")
        assert state.buffer == "xyz"
        _assert_cursor_in_bounds(state)

    def test_paste_of_only_controls_is_noop(self) -> None:
        state = _state("ab")
        state.paste("\x1b[A\r\n\x00")
        assert state.buffer == "ab"
        assert state.offset == 2


class TestDelete:
    def test_delete_on_empty_buffer_is_noop(self) -> None:
        state = _state()
        assert state.delete() is False
        assert state.buffer == ""
        assert state.screen_cursor_column == state.first_column

    def test_delete_at_first_column_is_noop(self) -> None:
        state = _state("ab")
        state.move_left()
        state.move_left()
        assert state.delete() is False
        assert state.buffer == "ab"
        assert state.offset == 0

    def test_delete_removes_char_left_of_cursor(self) -> None:
        state = _state("abc")
        state.move_left()
        assert state.delete() is True
        assert state.buffer == "ac"
        assert state.offset == 1

    def test_delete_removes_whole_grapheme_cluster(self) -> None:
        state = _state("e\u0301")  # e + combining acute accent
        state.delete()
        assert state.buffer == ""

    def test_insert_then_delete_round_trips(self) -> None:
        state = _state("hello")
        state.move_left()
        state.move_left()
        before = (state.buffer, state.screen_cursor_column)
        state.insert("x")
        state.delete()
        assert (state.buffer, state.screen_cursor_column) == before


class TestMovement:
    def test_move_left_stops_at_first_column(self) -> None:
        state = _state("a")
        assert state.move_left() is True
        assert state.move_left() is False
        assert state.screen_cursor_column == state.first_column

    def test_move_right_stops_after_last_char(self) -> None:
        state = _state("ab")
        assert state.move_right() is False
        assert state.screen_cursor_column == state.last_column

    def test_move_right_after_move_left(self) -> None:
        state = _state("ab")
        state.move_left()
        assert state.move_right() is True
        assert state.offset == 2

    def test_random_walk_keeps_cursor_in_bounds(self) -> None:
        rng = random.Random(1234)
        state = _state("some text")
        for _ in range(500):
            action = rng.choice(["left", "right", "insert", "delete"])
            if action == "left":
                state.move_left()
            elif action == "right":
                state.move_right()
            elif action == "insert":
                state.insert(rng.choice("xyz "))
            else:
                state.delete()
            _assert_cursor_in_bounds(state)


class TestSubmit:
    def test_surrounding_whitespace_is_trimmed(self) -> None:
        assert _state("  ab  ").submit(2) == "ab"

    def test_too_short_after_trimming_is_rejected(self) -> None:
        state = _state(" a ")
        assert state.submit(2) is None
        # Editing continues with the buffer untouched
        assert state.buffer == " a "

    def test_interior_whitespace_counts(self) -> None:
        assert _state("a b").submit(3) == "a b"

    def test_zero_minimum_accepts_empty_answer(self) -> None:
        assert _state("   ").submit(0) == ""

    def test_minimum_counts_user_perceived_characters(self) -> None:
        assert _state("e\u0301").submit(2) is None
        assert _state("e\u0301e").submit(2) == "e\u0301e"

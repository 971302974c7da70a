"""Exception hierarchy for prompt widgets."""

from __future__ import annotations


class PromptError(Exception):
    """Base class for errors raised by pi-prompt."""


class CursorInvariantError(PromptError):
    """The text cursor left the editable region of the buffer.

    Indicates a bug in the key dispatch, never a user error.
    """


class PaginationInvariantError(PromptError):
    """``selected_index`` no longer matches the page window and cursor row."""

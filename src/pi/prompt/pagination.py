"""Paging state for the select prompt.

The prompt shows a window of ``page_size`` options out of the full list.
``cursor_row`` is the 1-based row of the highlighted option inside that
window, so at all times::

    selected_index == start + cursor_row - 1

Moving down past the middle of the window slides the window instead of
the cursor while more options remain below, which keeps upcoming options
in view. Moving up only slides the window once the cursor is on the top
row.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from pi.prompt.errors import PaginationInvariantError


@dataclass(frozen=True)
class VisibleOption:
    row: int
    index: int
    label: str
    selected: bool


class PaginationState:
    """Selected index, cursor row and page window over a list of options."""

    def __init__(self, options: Sequence[str], page_size: int) -> None:
        if not options:
            raise ValueError("options must not be empty")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        self.options: tuple[str, ...] = tuple(options)
        self.page_size: int = min(page_size, len(self.options))
        self.start: int = 0
        self.end: int = self.page_size
        self.selected_index: int = 0
        self.cursor_row: int = 1

    @property
    def page_window(self) -> range:
        return range(self.start, self.end)

    @property
    def midpoint_row(self) -> int:
        """Row at which moving down slides the window."""
        return max(1, self.page_size // 2)

    @property
    def selected(self) -> str:
        return self.options[self.selected_index]

    # -- navigation -----------------------------------------------------------

    def move_up(self) -> bool:
        """Move the highlight up one option. Returns ``False`` at the top."""
        if self.cursor_row > 1:
            self.cursor_row -= 1
            self.selected_index -= 1
        elif self.start > 0:
            self.start -= 1
            self.end -= 1
            self.selected_index -= 1
        else:
            return False
        self._check_invariant()
        return True

    def move_down(self) -> bool:
        """Move the highlight down one option. Returns ``False`` at the end."""
        if self.cursor_row >= self.midpoint_row and self.end < len(self.options):
            self.start += 1
            self.end += 1
            self.selected_index += 1
        elif self.cursor_row == self.page_size:
            return False
        else:
            self.cursor_row += 1
            self.selected_index += 1
        self._check_invariant()
        return True

    def confirm(self) -> str:
        return self.options[self.selected_index]

    # -- rendering helpers ----------------------------------------------------

    def visible_options(self) -> Iterator[VisibleOption]:
        for row, index in enumerate(self.page_window, start=1):
            yield VisibleOption(
                row=row,
                index=index,
                label=self.options[index],
                selected=index == self.selected_index,
            )

    def _check_invariant(self) -> None:
        if (
            self.end - self.start != self.page_size
            or not 1 <= self.cursor_row <= self.page_size
            or self.selected_index != self.start + self.cursor_row - 1
        ):
            raise PaginationInvariantError(
                f"selected={self.selected_index} window=[{self.start},{self.end}) "
                f"row={self.cursor_row} page_size={self.page_size}"
            )

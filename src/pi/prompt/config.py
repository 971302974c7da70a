"""Prompt configuration.

Widget configuration is immutable for the lifetime of a prompt and is
validated when it is built, so a bad value never surfaces in the middle of
the input loop.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from pi.prompt.style import DEFAULT_COLOR, Color

DEFAULT_MINIMUM_CHARS = 0
DEFAULT_PAGE_SIZE = 7
DEFAULT_VIM_MODE = False
DEFAULT_HELP_MESSAGE = "[Move with the arrows and click enter to select]"
DEFAULT_POLL_INTERVAL_MS = 33

ENV_POLL_INTERVAL_MS = "PI_PROMPT_POLL_INTERVAL_MS"
ENV_WRITE_LOG = "PI_PROMPT_WRITE_LOG"


@dataclass(frozen=True)
class InputConfig:
    """Configuration of a text input prompt."""

    message: str
    minimum_chars: int = DEFAULT_MINIMUM_CHARS
    color: Color = DEFAULT_COLOR

    def __post_init__(self) -> None:
        if self.minimum_chars < 0:
            raise ValueError(
                f"minimum_chars must be >= 0, got {self.minimum_chars}"
            )


@dataclass(frozen=True)
class SelectConfig:
    """Configuration of a selection prompt.

    ``page_size`` is the configured window length; the effective length is
    clamped to the number of options by the pagination state.
    """

    message: str
    options: tuple[str, ...]
    page_size: int = DEFAULT_PAGE_SIZE
    help_message: str | None = DEFAULT_HELP_MESSAGE
    vim_mode: bool = DEFAULT_VIM_MODE
    images: tuple[str, ...] | None = None
    color: Color = DEFAULT_COLOR

    def __post_init__(self) -> None:
        # Accept any sequence, store a tuple
        object.__setattr__(self, "options", tuple(self.options))
        if self.images is not None:
            object.__setattr__(self, "images", tuple(self.images))

        if not self.options:
            raise ValueError("a select prompt needs at least one option")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.images is not None and len(self.images) != len(self.options):
            raise ValueError(
                f"got {len(self.images)} images for {len(self.options)} options"
            )


@dataclass
class PromptSettings:
    """Runtime settings of the event loop and the process terminal."""

    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    write_log: str = field(default="")

    @property
    def poll_interval(self) -> float:
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> PromptSettings:
        """Build settings from ``PI_PROMPT_*`` environment variables.

        Unparseable or non-positive intervals fall back to the default.
        """
        env = os.environ if environ is None else environ
        interval = DEFAULT_POLL_INTERVAL_MS
        raw = env.get(ENV_POLL_INTERVAL_MS, "")
        if raw:
            try:
                interval = int(raw)
            except ValueError:
                interval = DEFAULT_POLL_INTERVAL_MS
            if interval <= 0:
                interval = DEFAULT_POLL_INTERVAL_MS
        return cls(poll_interval_ms=interval, write_log=env.get(ENV_WRITE_LOG, ""))

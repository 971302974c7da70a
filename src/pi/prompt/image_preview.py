"""Image previews shown next to the options of a select prompt.

The select prompt knows nothing about images beyond calling the preview
from its redraw hook with the currently selected index. Terminals that
speak the Kitty graphics protocol or the iTerm2 inline image protocol get
a picture in the right half of the screen; other terminals get nothing.
"""

from __future__ import annotations

import base64
import logging
import os
from collections.abc import Sequence
from typing import Literal, Protocol

from pi.prompt.terminal import Terminal

logger = logging.getLogger(__name__)

ImageProtocol = Literal["kitty", "iterm2"] | None

_KITTY_CHUNK_SIZE = 4096


class ImagePreview(Protocol):
    """Collaborator invoked whenever the select prompt redraws."""

    def draw(self, terminal: Terminal, index: int) -> None: ...

    def clear(self, terminal: Terminal) -> None: ...


def detect_image_protocol(environ: dict[str, str] | None = None) -> ImageProtocol:
    env = os.environ if environ is None else environ
    term_program = env.get("TERM_PROGRAM", "").lower()
    term = env.get("TERM", "").lower()

    if env.get("KITTY_WINDOW_ID") or term_program == "kitty":
        return "kitty"
    if term_program == "ghostty" or "ghostty" in term or env.get("GHOSTTY_RESOURCES_DIR"):
        return "kitty"
    if env.get("WEZTERM_PANE") or term_program == "wezterm":
        return "kitty"
    if env.get("ITERM_SESSION_ID") or term_program == "iterm.app":
        return "iterm2"
    return None


def encode_kitty(
    base64_data: str,
    *,
    columns: int | None = None,
    rows: int | None = None,
    image_id: int | None = None,
) -> str:
    """Transmit-and-display command, chunked as the protocol requires."""
    params: list[str] = ["a=T", "f=100", "q=2"]
    if columns:
        params.append(f"c={columns}")
    if rows:
        params.append(f"r={rows}")
    if image_id:
        params.append(f"i={image_id}")
    header = ",".join(params)

    if len(base64_data) <= _KITTY_CHUNK_SIZE:
        return f"\x1b_G{header};{base64_data}\x1b\\"

    chunks = [
        base64_data[i : i + _KITTY_CHUNK_SIZE]
        for i in range(0, len(base64_data), _KITTY_CHUNK_SIZE)
    ]
    out = [f"\x1b_G{header},m=1;{chunks[0]}\x1b\\"]
    for chunk in chunks[1:-1]:
        out.append(f"\x1b_Gm=1;{chunk}\x1b\\")
    out.append(f"\x1b_Gm=0;{chunks[-1]}\x1b\\")
    return "".join(out)


def delete_kitty_image(image_id: int) -> str:
    return f"\x1b_Ga=d,d=I,i={image_id}\x1b\\"


def encode_iterm2(
    base64_data: str,
    *,
    width: int | None = None,
    height: int | None = None,
    name: str | None = None,
) -> str:
    params: list[str] = ["inline=1"]
    if width is not None:
        params.append(f"width={width}")
    if height is not None:
        params.append(f"height={height}")
    if name:
        params.append(f"name={base64.b64encode(name.encode()).decode()}")
    return f"\x1b]1337;File={';'.join(params)}:{base64_data}\x07"


class TerminalImagePreview:
    """Draws the image file of the selected option with an inline image protocol.

    The image occupies half the terminal width and height, anchored two
    columns left of the vertical center line and a quarter of the way down.
    """

    def __init__(
        self,
        paths: Sequence[str],
        protocol: ImageProtocol = None,
    ) -> None:
        self._paths = tuple(paths)
        self._protocol = protocol if protocol is not None else detect_image_protocol()
        self._cache: dict[str, str | None] = {}
        self._shown_index: int | None = None
        self._shown_size: tuple[int, int] | None = None

    @property
    def protocol(self) -> ImageProtocol:
        return self._protocol

    def draw(self, terminal: Terminal, index: int) -> None:
        if self._protocol is None or not 0 <= index < len(self._paths):
            return

        # Kitty placements outlive a screen clear; iTerm2 images do not
        if (
            self._protocol == "kitty"
            and index == self._shown_index
            and terminal.size == self._shown_size
        ):
            return

        self.clear(terminal)

        path = self._paths[index]
        data = self._load(path)
        if data is None:
            return

        columns, rows = terminal.size
        width = max(1, columns // 2)
        height = max(1, rows // 2)
        terminal.move_to(rows // 4, max(0, columns // 2 - 2))

        if self._protocol == "kitty":
            terminal.write(
                encode_kitty(data, columns=width, rows=height, image_id=index + 1)
            )
        else:
            terminal.write(
                encode_iterm2(data, width=width, height=height, name=os.path.basename(path))
            )
        self._shown_index = index
        self._shown_size = (columns, rows)

    def clear(self, terminal: Terminal) -> None:
        if self._shown_index is None:
            return
        # iTerm2 images go away with the next screen clear
        if self._protocol == "kitty":
            terminal.write(delete_kitty_image(self._shown_index + 1))
        self._shown_index = None
        self._shown_size = None

    def _load(self, path: str) -> str | None:
        if path not in self._cache:
            try:
                with open(path, "rb") as f:
                    self._cache[path] = base64.b64encode(f.read()).decode("ascii")
            except OSError as exc:
                logger.warning("cannot read preview image %s: %s", path, exc)
                self._cache[path] = None
        return self._cache[path]

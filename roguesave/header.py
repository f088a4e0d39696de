"""The version and screen-size header at the start of a saved game."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO

from .cipher import VERSION, encread, encwrite

_DIMS_SIZE = 80
_DIMS_RE = re.compile(rb"\s*([+-]?\d+)\s*x\s*([+-]?\d+)")


class SaveHeaderError(Exception):
    """A saved game header could not be read."""


class OutOfDateError(SaveHeaderError):
    """The saved game was written by a different version."""

    def __init__(self) -> None:
        super().__init__("Sorry, saved game is out of date.")


class ScreenTooSmallError(SaveHeaderError):
    """The current screen is smaller than the one the game was saved on."""

    def __init__(self, dimension: str, saved: int, current: int) -> None:
        self.dimension = dimension
        self.saved = saved
        self.current = current
        super().__init__(
            f"Sorry, original game was played on a screen with {saved} {dimension}.\n"
            f"Current screen only has {current} {dimension}. Unable to restore game"
        )


@dataclass(frozen=True)
class SaveHeader:
    """Screen size recorded when the game was saved."""

    lines: int
    cols: int


def write_header(stream: BinaryIO, lines: int, cols: int) -> None:
    """Write the scrambled version string and screen size to ``stream``."""
    dims = f"{lines} x {cols}\n".encode("ascii")
    if len(dims) >= _DIMS_SIZE:
        raise ValueError("screen size does not fit in the header")
    encwrite(stream, VERSION.encode("ascii") + b"\0")
    encwrite(stream, dims.ljust(_DIMS_SIZE, b"\0"))


def read_header(stream: BinaryIO) -> SaveHeader:
    """Read and check the header; raise ``OutOfDateError`` on a version mismatch."""
    version = VERSION.encode("ascii")
    raw = encread(stream, len(version) + 1)
    if not raw:
        raise SaveHeaderError("saved game is empty")
    if raw.split(b"\0", 1)[0] != version:
        raise OutOfDateError()
    dims = encread(stream, _DIMS_SIZE)
    match = _DIMS_RE.match(dims.split(b"\0", 1)[0])
    if match is None:
        raise SaveHeaderError("saved game has no screen size")
    return SaveHeader(int(match.group(1)), int(match.group(2)))


def check_screen(header: SaveHeader, lines: int, cols: int) -> None:
    """Raise ``ScreenTooSmallError`` if the saved screen exceeds the current one."""
    if header.lines > lines:
        raise ScreenTooSmallError("lines", header.lines, lines)
    if header.cols > cols:
        raise ScreenTooSmallError("columns", header.cols, cols)
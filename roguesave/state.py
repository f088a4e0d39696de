"""Typed primitives of the portable saved-game state format.

Every primitive is scrambled on its own: each low-level write or read
restarts the cipher keystream, so values must be read back with the same
sequence of calls that wrote them. Integers are stored little-endian.
"""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import BinaryIO, Iterable, Sequence

from .cipher import encread, encwrite


class Marker(IntEnum):
    """Section identifiers embedded in the state stream."""

    STATS = 0xABCD0001
    THING = 0xABCD0002
    THING_NULL = 0xDEAD0002
    OBJECT = 0xABCD0003
    MAGICITEMS = 0xABCD0004
    KNOWS = 0xABCD0005
    GUESSES = 0xABCD0006
    OBJECTLIST = 0xABCD0007
    BAGOBJECT = 0xABCD0008
    MONSTERLIST = 0xABCD0009
    MONSTERSTATS = 0xABCD000A
    MONSTERS = 0xABCD000B
    TRAP = 0xABCD000C
    WINDOW = 0xABCD000D
    DAEMONS = 0xABCD000E
    IWEAPS = 0xABCD000F
    IARMOR = 0xABCD0010
    SPELLS = 0xABCD0011
    ILIST = 0xABCD0012
    HLIST = 0xABCD0013
    DEATHTYPE = 0xABCD0014
    CTYPES = 0xABCD0015
    COORDLIST = 0xABCD0016
    ROOMS = 0xABCD0017


class StateError(Exception):
    """The saved state could not be restored."""


class StateReadError(StateError):
    """The state stream ended before a value was complete."""


class StateFormatError(StateError):
    """The state stream does not have the expected layout."""


def _pack(fmt: str, value: int, what: str) -> bytes:
    try:
        return struct.pack(fmt, value)
    except struct.error as exc:
        raise ValueError(f"{what} value {value!r} out of range") from exc


def _to_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


class StateWriter:
    """Writes scrambled state primitives to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _write(self, data: bytes) -> None:
        encwrite(self._stream, data)

    def write_int(self, value: int) -> None:
        self._write(_pack("<i", value, "int"))

    def write_uint(self, value: int) -> None:
        self._write(_pack("<I", value, "unsigned int"))

    def write_short(self, value: int) -> None:
        self._write(_pack("<h", value, "short"))

    def write_ushort(self, value: int) -> None:
        self._write(_pack("<H", value, "unsigned short"))

    def write_char(self, value: int | str) -> None:
        """Write one byte, given as a one-character string or an integer."""
        if isinstance(value, str):
            if len(value) != 1:
                raise ValueError("a char must be a single character")
            value = ord(value)
        if not -128 <= value <= 255:
            raise ValueError(f"char value {value!r} out of range")
        self._write(bytes([value & 0xFF]))

    def write_boolean(self, value: object) -> None:
        self._write(b"\x01" if value else b"\x00")

    def write_chars(self, data: bytes | str, count: int) -> None:
        """Write a fixed-size buffer of ``count`` bytes, padded with NULs."""
        raw = _to_bytes(data)
        if len(raw) > count:
            raise ValueError(f"{len(raw)} bytes do not fit in a buffer of {count}")
        self.write_int(count)
        self._write(raw.ljust(count, b"\0"))

    def write_ints(self, values: Sequence[int]) -> None:
        self.write_int(len(values))
        for value in values:
            self.write_int(value)

    def write_shorts(self, values: Sequence[int]) -> None:
        self.write_int(len(values))
        for value in values:
            self.write_short(value)

    def write_booleans(self, values: Sequence[object]) -> None:
        self.write_int(len(values))
        for value in values:
            self.write_boolean(value)

    def write_marker(self, marker: int) -> None:
        self.write_uint(int(marker))

    def write_string(self, text: str | bytes | None) -> None:
        """Write a NUL-terminated string; ``None`` is written as length zero."""
        if text is None:
            self.write_int(0)
            self.write_chars(b"", 0)
            return
        raw = _to_bytes(text)
        if b"\0" in raw:
            raise ValueError("string must not contain NUL")
        raw += b"\0"
        self.write_int(len(raw))
        self.write_chars(raw, len(raw))

    def write_strings(self, texts: Sequence[str | bytes | None]) -> None:
        self.write_int(len(texts))
        for text in texts:
            self.write_string(text)

    def write_string_index(self, master: Sequence[str], text: str | None) -> None:
        """Write the position of ``text`` in ``master``, or -1 if absent."""
        index = next((i for i, item in enumerate(master) if item == text), -1)
        self.write_int(index)

    def write_window(self, rows: Iterable[Sequence[int | str]]) -> None:
        """Write a rectangular grid of screen cells, row by row."""
        grid = [list(row) for row in rows]
        width = len(grid[0]) if grid else 0
        if any(len(row) != width for row in grid):
            raise ValueError("window rows must all have the same width")
        self.write_marker(Marker.WINDOW)
        self.write_int(len(grid))
        self.write_int(width)
        for row in grid:
            for cell in row:
                value = ord(cell) if isinstance(cell, str) else cell
                value &= 0xFFFFFFFF
                self.write_int(value - (1 << 32) if value & 0x80000000 else value)


class StateReader:
    """Reads scrambled state primitives from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read(self, size: int) -> bytes:
        data = encread(self._stream, size)
        if len(data) != size:
            raise StateReadError(f"expected {size} bytes, got {len(data)}")
        return data

    def _unpack(self, fmt: str) -> int:
        return struct.unpack(fmt, self._read(struct.calcsize(fmt)))[0]

    def _expect_count(self, count: int) -> None:
        value = self.read_int()
        if value != count:
            raise StateFormatError(f"expected {count} items, found {value}")

    def read_int(self) -> int:
        return self._unpack("<i")

    def read_uint(self) -> int:
        return self._unpack("<I")

    def read_short(self) -> int:
        return self._unpack("<h")

    def read_ushort(self) -> int:
        return self._unpack("<H")

    def read_char(self) -> str:
        return self._read(1).decode("latin-1")

    def read_boolean(self) -> bool:
        return self._read(1) != b"\x00"

    def read_chars(self, count: int) -> bytes:
        self._expect_count(count)
        return self._read(count)

    def read_ints(self, count: int) -> list[int]:
        self._expect_count(count)
        return [self.read_int() for _ in range(count)]

    def read_shorts(self, count: int) -> list[int]:
        self._expect_count(count)
        return [self.read_short() for _ in range(count)]

    def read_booleans(self, count: int) -> list[bool]:
        self._expect_count(count)
        return [self.read_boolean() for _ in range(count)]

    def read_marker(self, marker: int) -> None:
        found = self.read_uint()
        if found != int(marker):
            raise StateFormatError(f"expected marker {int(marker):#x}, found {found:#x}")

    def _read_length(self, max_len: int | None = None) -> int:
        length = self.read_int()
        if length < 0 or (max_len is not None and length > max_len):
            raise StateFormatError(f"bad string length {length}")
        return length

    def read_string(self, max_len: int) -> str:
        """Read a string of at most ``max_len`` bytes; a null one reads as ``""``."""
        length = self._read_length(max_len)
        return _decode_text(self.read_chars(length))

    def read_new_string(self) -> str | None:
        """Read a string of any length; a null one reads as ``None``."""
        length = self._read_length()
        raw = self.read_chars(length)
        return None if length == 0 else _decode_text(raw)

    def read_strings(self, count: int, max_len: int) -> list[str]:
        self._expect_count(count)
        return [self.read_string(max_len) for _ in range(count)]

    def read_new_strings(self, count: int) -> list[str | None]:
        self._expect_count(count)
        return [self.read_new_string() for _ in range(count)]

    def read_string_index(self, master: Sequence[str]) -> str | None:
        index = self.read_int()
        if index >= len(master):
            raise StateFormatError(f"string index {index} out of range")
        return master[index] if index >= 0 else None

    def read_window(self, height: int, width: int) -> list[list[int]]:
        """Read a saved grid, keeping only the part that fits ``height`` x ``width``."""
        self.read_marker(Marker.WINDOW)
        saved_lines = self.read_int()
        saved_cols = self.read_int()
        grid: list[list[int]] = []
        for row in range(saved_lines):
            cells = [self.read_int() for _ in range(saved_cols)]
            if row < height:
                grid.append(cells[:width])
        return grid
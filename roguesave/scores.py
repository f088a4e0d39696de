"""Reading and writing the scrambled top-ten score file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO, Iterable

from .cipher import encread, encwrite

NAME_SIZE = 1024
"""Bytes reserved for each player name (the game's string buffer size)."""

LINE_SIZE = 100
"""Bytes reserved for each line of numeric score fields."""

_MASK32 = 0xFFFFFFFF
_LINE_RE = re.compile(
    rb"\s*(\d+)\s+([+-]?\d+)\s+(\d+)\s+(\d+)\s+([+-]?\d+)\s+([0-9a-fA-F]+)"
)


def _int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass
class ScoreEntry:
    """One entry of the score board."""

    name: str = ""
    uid: int = 0
    score: int = 0
    flags: int = 0
    monster: int = 0
    level: int = 0
    time: int = 0

    def _name_bytes(self) -> bytes:
        raw = self.name.encode("utf-8")
        if b"\0" in raw or len(raw) >= NAME_SIZE:
            raise ValueError("score name does not fit in the score file")
        return raw.ljust(NAME_SIZE, b"\0")

    def _line_bytes(self) -> bytes:
        text = (
            f" {self.uid & _MASK32} {_int32(self.score)} {self.flags & _MASK32}"
            f" {self.monster & 0xFFFF} {_int32(self.level)} {self.time & _MASK32:x} \n"
        )
        return text.encode("ascii").ljust(LINE_SIZE, b"\0")


def read_scores(stream: BinaryIO, count: int) -> list[ScoreEntry]:
    """Read up to ``count`` entries from the start of ``stream``.

    Reading stops early at the end of the data; the stream is left rewound.
    """
    entries: list[ScoreEntry] = []
    stream.seek(0)
    for _ in range(count):
        raw_name = encread(stream, NAME_SIZE)
        raw_line = encread(stream, LINE_SIZE)
        if len(raw_name) < NAME_SIZE or len(raw_line) < LINE_SIZE:
            break
        match = _LINE_RE.match(raw_line.split(b"\0", 1)[0])
        if match is None:
            raise ValueError("malformed score line")
        uid, score, flags, monster, level, when = match.groups()
        entries.append(
            ScoreEntry(
                name=raw_name.split(b"\0", 1)[0].decode("utf-8", errors="replace"),
                uid=int(uid),
                score=int(score),
                flags=int(flags),
                monster=int(monster) & 0xFFFF,
                level=int(level),
                time=int(when, 16),
            )
        )
    stream.seek(0)
    return entries


def write_scores(stream: BinaryIO, entries: Iterable[ScoreEntry]) -> None:
    """Write ``entries`` from the start of ``stream``, leaving it rewound."""
    records = [(entry._name_bytes(), entry._line_bytes()) for entry in entries]
    stream.seek(0)
    for name, line in records:
        encwrite(stream, name)
        encwrite(stream, line)
    stream.seek(0)
"""Coordinates, stats, rooms and objects in the saved-game state stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .state import Marker, StateFormatError, StateReader, StateWriter

DAMAGE_SIZE = 13
"""Bytes reserved for a creature's damage string."""

OBJECT_DAMAGE_SIZE = 8
"""Bytes reserved for each of an object's damage strings."""

MAX_EXITS = 12
"""Number of exit slots stored for every room."""


def _text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Coord:
    """A position on the level map."""

    x: int = 0
    y: int = 0


@dataclass
class Stats:
    """Fighting statistics of the hero or a monster."""

    strength: int = 0
    exp: int = 0
    level: int = 0
    armor: int = 0
    hp: int = 0
    damage: str = ""
    max_hp: int = 0


def _default_exits() -> list[Coord]:
    return [Coord() for _ in range(MAX_EXITS)]


@dataclass(eq=False)
class Room:
    """A room or passage of the current level."""

    pos: Coord = Coord()
    max: Coord = Coord()
    gold: Coord = Coord()
    goldval: int = 0
    flags: int = 0
    nexits: int = 0
    exits: list[Coord] = field(default_factory=_default_exits)


@dataclass(eq=False)
class GameObject:
    """An item lying on the level or carried in a pack."""

    type: int = 0
    pos: Coord = Coord()
    launch: int = 0
    packch: str = "\0"
    damage: str = ""
    hurldmg: str = ""
    count: int = 0
    which: int = 0
    hplus: int = 0
    dplus: int = 0
    arm: int = 0
    flags: int = 0
    group: int = 0
    label: Optional[str] = None


def _index_of(items: Sequence[object], item: object) -> int:
    return next((i for i, each in enumerate(items) if each is item), -1)


def write_coord(writer: StateWriter, coord: Coord) -> None:
    writer.write_int(coord.x)
    writer.write_int(coord.y)


def read_coord(reader: StateReader) -> Coord:
    x = reader.read_int()
    y = reader.read_int()
    return Coord(x, y)


def write_stats(writer: StateWriter, stats: Stats) -> None:
    writer.write_marker(Marker.STATS)
    writer.write_uint(stats.strength)
    writer.write_int(stats.exp)
    writer.write_int(stats.level)
    writer.write_int(stats.armor)
    writer.write_int(stats.hp)
    writer.write_chars(stats.damage, DAMAGE_SIZE)
    writer.write_int(stats.max_hp)


def read_stats(reader: StateReader) -> Stats:
    reader.read_marker(Marker.STATS)
    strength = reader.read_uint()
    exp = reader.read_int()
    level = reader.read_int()
    armor = reader.read_int()
    hp = reader.read_int()
    damage = _text(reader.read_chars(DAMAGE_SIZE))
    max_hp = reader.read_int()
    return Stats(strength, exp, level, armor, hp, damage, max_hp)


def write_room(writer: StateWriter, room: Room) -> None:
    if len(room.exits) != MAX_EXITS:
        raise ValueError(f"a room must have exactly {MAX_EXITS} exit slots")
    write_coord(writer, room.pos)
    write_coord(writer, room.max)
    write_coord(writer, room.gold)
    writer.write_int(room.goldval)
    writer.write_short(room.flags)
    writer.write_int(room.nexits)
    for exit_pos in room.exits:
        write_coord(writer, exit_pos)


def read_room(reader: StateReader) -> Room:
    pos = read_coord(reader)
    size = read_coord(reader)
    gold = read_coord(reader)
    goldval = reader.read_int()
    flags = reader.read_short()
    nexits = reader.read_int()
    exits = [read_coord(reader) for _ in range(MAX_EXITS)]
    return Room(pos, size, gold, goldval, flags, nexits, exits)


def write_rooms(writer: StateWriter, rooms: Sequence[Room]) -> None:
    writer.write_int(len(rooms))
    for room in rooms:
        write_room(writer, room)


def read_rooms(reader: StateReader, count: int) -> list[Room]:
    """Read a room table that may hold at most ``count`` rooms."""
    value = reader.read_int()
    if value > count or value < 0:
        raise StateFormatError(f"{value} rooms saved, at most {count} allowed")
    return [read_room(reader) for _ in range(value)]


def write_room_reference(
    writer: StateWriter, rooms: Sequence[Room], room: Optional[Room]
) -> None:
    """Write the position of ``room`` in ``rooms``, or -1 if it is not there."""
    writer.write_int(_index_of(rooms, room))


def read_room_reference(reader: StateReader, rooms: Sequence[Room]) -> Optional[Room]:
    index = reader.read_int()
    if index < 0:
        return None
    if index >= len(rooms):
        raise StateFormatError(f"room index {index} out of range")
    return rooms[index]


def write_object(writer: StateWriter, obj: GameObject) -> None:
    writer.write_marker(Marker.OBJECT)
    writer.write_int(obj.type)
    write_coord(writer, obj.pos)
    writer.write_int(obj.launch)
    writer.write_char(obj.packch)
    writer.write_chars(obj.damage, OBJECT_DAMAGE_SIZE)
    writer.write_chars(obj.hurldmg, OBJECT_DAMAGE_SIZE)
    writer.write_int(obj.count)
    writer.write_int(obj.which)
    writer.write_int(obj.hplus)
    writer.write_int(obj.dplus)
    writer.write_int(obj.arm)
    writer.write_int(obj.flags)
    writer.write_int(obj.group)
    writer.write_string(obj.label)


def read_object(reader: StateReader) -> GameObject:
    reader.read_marker(Marker.OBJECT)
    obj = GameObject()
    obj.type = reader.read_int()
    obj.pos = read_coord(reader)
    obj.launch = reader.read_int()
    obj.packch = reader.read_char()
    obj.damage = _text(reader.read_chars(OBJECT_DAMAGE_SIZE))
    obj.hurldmg = _text(reader.read_chars(OBJECT_DAMAGE_SIZE))
    obj.count = reader.read_int()
    obj.which = reader.read_int()
    obj.hplus = reader.read_int()
    obj.dplus = reader.read_int()
    obj.arm = reader.read_int()
    obj.flags = reader.read_int()
    obj.group = reader.read_int()
    obj.label = reader.read_new_string()
    return obj


def write_object_list(writer: StateWriter, objects: Sequence[GameObject]) -> None:
    writer.write_marker(Marker.OBJECTLIST)
    writer.write_int(len(objects))
    for obj in objects:
        write_object(writer, obj)


def read_object_list(reader: StateReader) -> list[GameObject]:
    reader.read_marker(Marker.OBJECTLIST)
    count = reader.read_int()
    return [read_object(reader) for _ in range(count)]


def write_object_reference(
    writer: StateWriter, objects: Sequence[GameObject], item: Optional[GameObject]
) -> None:
    """Write the position of ``item`` in ``objects``, or -1 if it is not there."""
    writer.write_int(_index_of(objects, item))


def read_object_reference(
    reader: StateReader, objects: Sequence[GameObject]
) -> Optional[GameObject]:
    """Read an object position; one outside ``objects`` gives ``None``."""
    index = reader.read_int()
    if 0 <= index < len(objects):
        return objects[index]
    return None
"""Monsters, map places, timed actions and item knowledge in the state stream."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Union

from .records import (
    Coord,
    GameObject,
    Room,
    Stats,
    read_coord,
    read_object_list,
    read_room_reference,
    read_stats,
    write_coord,
    write_object_list,
    write_room_reference,
    write_stats,
)
from .state import Marker, StateFormatError, StateReader, StateWriter

DAEMON_FUNCTIONS = (
    "rollwand",
    "doctor",
    "stomach",
    "runners",
    "swander",
    "nohaste",
    "unconfuse",
    "unsee",
    "sight",
)
"""Names of the timed actions, in the order of their stored codes 1 to 9."""

# Stored (list id, index) pairs for a creature's destination.
_DEST_NONE = (0, 0)
_DEST_HERO = (0, 1)
_LIST_MONSTER = 1
_LIST_OBJECT = 2
_LIST_GOLD = 3


@dataclass(eq=False)
class Creature:
    """The hero or a monster.

    ``dest`` is what the creature is heading for: the hero or another
    creature, an object on the level, a room (meaning the gold in it), or
    ``None``. ``dest_ref`` holds a monster index read from the stream that
    still has to be resolved with :func:`fix_thing`; it is -1 otherwise.
    """

    pos: Coord = Coord()
    turn: bool = False
    type: str = "\0"
    disguise: str = "\0"
    oldch: str = "\0"
    dest: Optional[Union["Creature", GameObject, Room]] = None
    flags: int = 0
    stats: Stats = field(default_factory=Stats)
    room: Optional[Room] = None
    pack: list[GameObject] = field(default_factory=list)
    dest_ref: int = -1


@dataclass
class Place:
    """One cell of the level map."""

    ch: str = " "
    flags: int = 0
    monst: Optional[Creature] = None


@dataclass
class DelayedAction:
    """A daemon or fuse: a named action run after ``time`` turns."""

    type: int = 0
    func: Optional[str] = None
    arg: int = 0
    time: int = 0


@dataclass
class ObjInfo:
    """What is known about one kind of item; ``name`` is not stored."""

    name: str = ""
    prob: int = 0
    worth: int = 0
    guess: Optional[str] = None
    know: bool = False


def _index_of(items: Sequence[object], item: object) -> int:
    return next((i for i, each in enumerate(items) if each is item), -1)


def _dest_pair(
    dest: object,
    hero: Optional[Creature],
    monsters: Sequence[Creature],
    objects: Sequence[GameObject],
    rooms: Sequence[Room],
) -> tuple[int, int]:
    if dest is None:
        return _DEST_NONE
    if dest is hero:
        return _DEST_HERO
    for list_id, items in (
        (_LIST_MONSTER, monsters),
        (_LIST_OBJECT, objects),
        (_LIST_GOLD, rooms),
    ):
        index = _index_of(items, dest)
        if index >= 0:
            return list_id, index
    # Whatever it was chasing is gone; chase the hero instead.
    return _DEST_HERO


def write_thing(
    writer: StateWriter,
    thing: Optional[Creature],
    hero: Optional[Creature],
    monsters: Sequence[Creature],
    objects: Sequence[GameObject],
    rooms: Sequence[Room],
) -> None:
    """Write a creature, or a null entry for ``None``."""
    writer.write_marker(Marker.THING)
    if thing is None:
        writer.write_int(0)
        return
    writer.write_int(1)
    write_coord(writer, thing.pos)
    writer.write_boolean(thing.turn)
    writer.write_char(thing.type)
    writer.write_char(thing.disguise)
    writer.write_char(thing.oldch)
    list_id, index = _dest_pair(thing.dest, hero, monsters, objects, rooms)
    writer.write_int(list_id)
    writer.write_int(index)
    writer.write_short(thing.flags)
    write_stats(writer, thing.stats)
    write_room_reference(writer, rooms, thing.room)
    write_object_list(writer, thing.pack)


def read_thing(
    reader: StateReader,
    hero: Optional[Creature],
    objects: Sequence[GameObject],
    rooms: Sequence[Room],
) -> Optional[Creature]:
    """Read a creature; a null entry gives ``None``.

    Pass ``hero=None`` when reading the hero itself: a destination naming
    the hero then refers to the creature being read. A destination naming a
    monster is left in ``dest_ref`` for :func:`fix_thing`.
    """
    reader.read_marker(Marker.THING)
    if reader.read_int() == 0:
        return None
    thing = Creature()
    thing.pos = read_coord(reader)
    thing.turn = reader.read_boolean()
    thing.type = reader.read_char()
    thing.disguise = reader.read_char()
    thing.oldch = reader.read_char()

    list_id = reader.read_int()
    index = reader.read_int()
    if list_id == 0:
        if index == 1:
            thing.dest = thing if hero is None else hero
    elif list_id == _LIST_MONSTER:
        thing.dest_ref = index
    elif list_id == _LIST_OBJECT:
        if 0 <= index < len(objects):
            thing.dest = objects[index]
    elif list_id == _LIST_GOLD:
        if not 0 <= index < len(rooms):
            raise StateFormatError(f"gold room index {index} out of range")
        thing.dest = rooms[index]

    thing.flags = reader.read_short()
    thing.stats = read_stats(reader)
    thing.room = read_room_reference(reader, rooms)
    thing.pack = read_object_list(reader)
    return thing


def fix_thing(thing: Creature, monsters: Sequence[Creature]) -> None:
    """Point ``thing.dest`` at the monster its pending ``dest_ref`` names."""
    if thing.dest_ref < 0:
        return
    if thing.dest_ref < len(monsters):
        thing.dest = monsters[thing.dest_ref]


def write_thing_list(
    writer: StateWriter,
    things: Sequence[Creature],
    hero: Optional[Creature],
    objects: Sequence[GameObject],
    rooms: Sequence[Room],
) -> None:
    """Write the monster list; destinations among ``things`` are by index."""
    writer.write_marker(Marker.MONSTERLIST)
    writer.write_int(len(things))
    for thing in things:
        write_thing(writer, thing, hero, things, objects, rooms)


def read_thing_list(
    reader: StateReader,
    hero: Optional[Creature],
    objects: Sequence[GameObject],
    rooms: Sequence[Room],
) -> list[Creature]:
    """Read the monster list; call :func:`fix_thing_list` afterwards."""
    reader.read_marker(Marker.MONSTERLIST)
    count = reader.read_int()
    things: list[Creature] = []
    for _ in range(count):
        thing = read_thing(reader, hero, objects, rooms)
        things.append(Creature() if thing is None else thing)
    return things


def fix_thing_list(things: Sequence[Creature]) -> None:
    """Resolve the pending monster destinations of every creature in the list."""
    for thing in things:
        fix_thing(thing, things)


def write_thing_reference(
    writer: StateWriter, things: Sequence[Creature], item: Optional[Creature]
) -> None:
    """Write the position of ``item`` in ``things``; ``None`` or absent is -1."""
    writer.write_int(-1 if item is None else _index_of(things, item))


def read_thing_reference(
    reader: StateReader, things: Sequence[Creature]
) -> Optional[Creature]:
    """Read a creature position; -1 or one outside ``things`` gives ``None``."""
    index = reader.read_int()
    if 0 <= index < len(things):
        return things[index]
    return None


def write_places(
    writer: StateWriter, places: Sequence[Place], monsters: Sequence[Creature]
) -> None:
    for place in places:
        writer.write_char(place.ch)
        writer.write_char(place.flags)
        write_thing_reference(writer, monsters, place.monst)


def read_places(
    reader: StateReader, count: int, monsters: Sequence[Creature]
) -> list[Place]:
    places: list[Place] = []
    for _ in range(count):
        ch = reader.read_char()
        flags = ord(reader.read_char())
        monst = read_thing_reference(reader, monsters)
        places.append(Place(ch, flags, monst))
    return places


def _func_code(func: Optional[str]) -> int:
    if func is None:
        return 0
    try:
        return DAEMON_FUNCTIONS.index(func) + 1
    except ValueError:
        return -1


def write_daemons(
    writer: StateWriter, actions: Sequence[DelayedAction], count: int
) -> None:
    """Write a table of ``count`` action slots, padding with empty ones."""
    if len(actions) > count:
        raise ValueError(f"{len(actions)} actions do not fit in {count} slots")
    slots = list(actions) + [DelayedAction() for _ in range(count - len(actions))]
    writer.write_marker(Marker.DAEMONS)
    writer.write_int(count)
    for action in slots:
        writer.write_int(action.type)
        writer.write_int(_func_code(action.func))
        writer.write_int(action.arg)
        writer.write_int(action.time)


def read_daemons(reader: StateReader, count: int) -> list[DelayedAction]:
    """Read ``count`` action slots; unknown action codes read as ``None``."""
    reader.read_marker(Marker.DAEMONS)
    value = reader.read_int()
    if value > count:
        raise StateFormatError(f"{value} actions saved, at most {count} allowed")
    actions: list[DelayedAction] = []
    for _ in range(count):
        kind = reader.read_int()
        code = reader.read_int()
        arg = reader.read_int()
        time = reader.read_int()
        func = DAEMON_FUNCTIONS[code - 1] if 1 <= code <= len(DAEMON_FUNCTIONS) else None
        actions.append(DelayedAction(kind, func, arg, time))
    return actions


def write_obj_info(writer: StateWriter, infos: Sequence[ObjInfo]) -> None:
    writer.write_marker(Marker.MAGICITEMS)
    writer.write_int(len(infos))
    for info in infos:
        writer.write_int(info.prob)
        writer.write_int(info.worth)
        writer.write_string(info.guess)
        writer.write_boolean(info.know)


def read_obj_info(reader: StateReader, infos: Sequence[ObjInfo]) -> list[ObjInfo]:
    """Return ``infos`` updated with the saved values; names are kept."""
    reader.read_marker(Marker.MAGICITEMS)
    value = reader.read_int()
    if value > len(infos):
        raise StateFormatError(
            f"{value} item kinds saved, at most {len(infos)} allowed"
        )
    result = list(infos)
    for n in range(max(value, 0)):
        prob = reader.read_int()
        worth = reader.read_int()
        guess = reader.read_new_string()
        know = reader.read_boolean()
        result[n] = replace(result[n], prob=prob, worth=worth, guess=guess, know=know)
    return result
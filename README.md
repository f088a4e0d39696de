# roguesave

`roguesave` reads and writes the files that a classic dungeon crawler keeps on disk:

- **Save games.** A save game is a scrambled stream. It starts with a version and screen-size header, and the serialised game state follows.
- **Score files.** The top-ten list, scrambled in the same way.
- **Password hashes.** Traditional DES `crypt(3)` hashes and the extended `_` form.

It depends on nothing outside the standard library.

## The scrambled stream

`roguesave.cipher` XORs each byte with two fixed key strings and with a running feedback value. The keystream starts again from the beginning on every call. Because the operation is its own inverse, a single function both scrambles and unscrambles:

```python
import io
from roguesave.cipher import crypt_bytes, encwrite, encread

assert crypt_bytes(crypt_bytes(b"hello")) == b"hello"

buf = io.BytesIO()
encwrite(buf, b"hello")          # returns the number of bytes written
buf.seek(0)
assert encread(buf, 5) == b"hello"
```

The module also exports `VERSION` and `RELEASE`, the game's version strings.

## Save-file header

```python
import io
from roguesave.header import write_header, read_header, check_screen

buf = io.BytesIO()
write_header(buf, 24, 80)
buf.seek(0)
header = read_header(buf)        # SaveHeader(lines=24, cols=80)
check_screen(header, 25, 80)     # raises ScreenTooSmallError if it does not fit
```

`read_header` raises `OutOfDateError` when the version string does not match. It raises `SaveHeaderError` when the stream is empty or holds no screen size. Both `OutOfDateError` and `ScreenTooSmallError` are subclasses of `SaveHeaderError`.

## Scores

```python
import io
from roguesave.scores import ScoreEntry, read_scores, write_scores

board = io.BytesIO()
write_scores(board, [ScoreEntry(name="rodney", score=1200, level=7)])
entries = read_scores(board, 10)  # stops early at the end of the data
```

Each entry is stored as two fields:

- a name block, `NAME_SIZE` bytes long, padded with NULs;
- a line of numbers, `LINE_SIZE` bytes long, padded the same way.

Both `read_scores` and `write_scores` begin at the start of the stream and leave it rewound.

## Game state

`roguesave.state` provides `StateWriter` and `StateReader` for the primitive values of the state stream:

- little-endian ints, unsigned ints, shorts and unsigned shorts;
- chars and booleans;
- counted arrays;
- length-prefixed strings and string indices;
- section markers (`Marker`);
- screen windows.

Every primitive is scrambled on its own, so values must be read back with the same sequence of calls that wrote them:

```python
import io
from roguesave.state import StateWriter, StateReader

buf = io.BytesIO()
writer = StateWriter(buf)
writer.write_int(42)
writer.write_string("hello")
buf.seek(0)
reader = StateReader(buf)
assert reader.read_int() == 42
assert reader.read_new_string() == "hello"
```

When the stream ends early, the reader raises `StateReadError`. When a marker, a count or an index does not match what is expected, it raises `StateFormatError`. Both are subclasses of `StateError`.

Two modules build the game's records on top of those primitives.

`roguesave.records`:
- `Coord`, `Stats`, `Room` and `GameObject`, with `write_*` and `read_*` functions for each;
- room tables and object lists;
- references into those tables and lists, written as list positions.

`roguesave.creatures`:
- `Creature` for the hero and the monsters, through `write_thing` / `read_thing` and the list forms;
- `fix_thing` and `fix_thing_list`, which resolve monster destinations once the whole list has been read;
- `Place` for map cells;
- `DelayedAction` for daemons and fuses, saved by name from `DAEMON_FUNCTIONS`;
- `ObjInfo` for item knowledge.

## Password hashing

```python
from roguesave.xcrypt import crypt

crypt("password", "ab")          # traditional 13-character DES hash
crypt("password", "_J9..salt")   # extended form: 4-char count, 4-char salt
```

`roguesave.des` holds the lower-level DES operations: `make_key_schedule`, `salt_bits`, `des_rounds` and `des_cipher`.

## What it does not do

This package is a library of file formats. It does not play the game, and it has no command, screen or terminal handling.

There is no single call that saves or restores a whole game. To do that, write the header and then each section in order with the functions above, and read them back in the same order.
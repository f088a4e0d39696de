import io

import pytest

from roguesave.cipher import crypt_bytes
from roguesave.state import (
    Marker,
    StateError,
    StateFormatError,
    StateReadError,
    StateReader,
    StateWriter,
)


def _pair():
    buf = io.BytesIO()
    return buf, StateWriter(buf)


def _reader(buf):
    return StateReader(io.BytesIO(buf.getvalue()))


@pytest.mark.parametrize("value", [0, 1, -1, 2**31 - 1, -(2**31), 0x01020304])
def test_int_round_trip(value):
    buf, w = _pair()
    w.write_int(value)
    assert _reader(buf).read_int() == value


def test_int_is_little_endian_on_the_wire():
    buf, w = _pair()
    w.write_int(0x01020304)
    assert crypt_bytes(buf.getvalue()) == b"\x04\x03\x02\x01"


def test_int_out_of_range():
    _, w = _pair()
    with pytest.raises(ValueError):
        w.write_int(2**31)


def test_unsigned_and_short_round_trip():
    buf, w = _pair()
    w.write_uint(0xFFFFFFFF)
    w.write_short(-32768)
    w.write_ushort(65535)
    r = _reader(buf)
    assert r.read_uint() == 0xFFFFFFFF
    assert r.read_short() == -32768
    assert r.read_ushort() == 65535


def test_short_out_of_range():
    _, w = _pair()
    with pytest.raises(ValueError):
        w.write_short(40000)


def test_char_round_trip():
    buf, w = _pair()
    w.write_char("@")
    w.write_char(ord("A"))
    r = _reader(buf)
    assert r.read_char() == "@"
    assert r.read_char() == "A"


def test_boolean_is_one_byte():
    buf, w = _pair()
    w.write_boolean(5)
    assert crypt_bytes(buf.getvalue()) == b"\x01"
    assert _reader(buf).read_boolean() is True


def test_chars_padded_and_checked():
    buf, w = _pair()
    w.write_chars(b"abc", 8)
    assert _reader(buf).read_chars(8) == b"abc\0\0\0\0\0"
    with pytest.raises(StateFormatError):
        _reader(buf).read_chars(7)


def test_chars_too_long():
    _, w = _pair()
    with pytest.raises(ValueError):
        w.write_chars(b"abcdef", 3)


def test_lists_round_trip():
    buf, w = _pair()
    w.write_ints([3, -4, 5])
    w.write_shorts([7, -8])
    w.write_booleans([True, False, True])
    r = _reader(buf)
    assert r.read_ints(3) == [3, -4, 5]
    assert r.read_shorts(2) == [7, -8]
    assert r.read_booleans(3) == [True, False, True]


def test_list_count_mismatch():
    buf, w = _pair()
    w.write_ints([1, 2])
    with pytest.raises(StateFormatError):
        _reader(buf).read_ints(3)


def test_marker_wire_and_check():
    buf, w = _pair()
    w.write_marker(Marker.STATS)
    assert crypt_bytes(buf.getvalue()) == b"\x01\x00\xcd\xab"
    _reader(buf).read_marker(Marker.STATS)
    with pytest.raises(StateFormatError):
        _reader(buf).read_marker(Marker.THING)


def test_string_round_trip_and_layout():
    buf, w = _pair()
    w.write_string("rogue")
    data = buf.getvalue()
    assert crypt_bytes(data[:4]) == (6).to_bytes(4, "little")
    assert crypt_bytes(data[4:8]) == (6).to_bytes(4, "little")
    assert crypt_bytes(data[8:]) == b"rogue\0"
    assert _reader(buf).read_string(10) == "rogue"
    assert _reader(buf).read_new_string() == "rogue"


def test_null_string():
    buf, w = _pair()
    w.write_string(None)
    assert _reader(buf).read_new_string() is None
    assert _reader(buf).read_string(5) == ""


def test_string_too_long_for_buffer():
    buf, w = _pair()
    w.write_string("a longer name")
    with pytest.raises(StateFormatError):
        _reader(buf).read_string(4)


def test_strings_round_trip():
    buf, w = _pair()
    w.write_strings(["trap door", None, "bear trap"])
    w.write_strings(["x", "y"])
    r = _reader(buf)
    assert r.read_new_strings(3) == ["trap door", None, "bear trap"]
    assert r.read_strings(2, 4) == ["x", "y"]


def test_string_index():
    master = ["red", "blue", "green"]
    buf, w = _pair()
    w.write_string_index(master, "blue")
    w.write_string_index(master, "plaid")
    r = _reader(buf)
    assert r.read_string_index(master) == "blue"
    assert r.read_string_index(master) is None


def test_string_index_out_of_range():
    buf, w = _pair()
    w.write_int(3)
    with pytest.raises(StateFormatError):
        _reader(buf).read_string_index(["a", "b", "c"])


def test_window_round_trip_and_clip():
    rows = [["a", "b", "c"], [1, 2, 3]]
    buf, w = _pair()
    w.write_window(rows)
    assert _reader(buf).read_window(5, 5) == [[97, 98, 99], [1, 2, 3]]
    assert _reader(buf).read_window(1, 2) == [[97, 98]]


def test_window_must_be_rectangular():
    _, w = _pair()
    with pytest.raises(ValueError):
        w.write_window([[1, 2], [3]])


def test_window_requires_marker():
    buf, w = _pair()
    w.write_int(2)
    with pytest.raises(StateFormatError):
        _reader(buf).read_window(2, 2)


def test_short_stream_raises_read_error():
    buf, w = _pair()
    w.write_short(1)
    with pytest.raises(StateReadError):
        _reader(buf).read_int()
    with pytest.raises(StateError):
        StateReader(io.BytesIO(b"")).read_boolean()


def test_mixed_sequence():
    buf, w = _pair()
    w.write_boolean(False)
    w.write_int(42)
    w.write_string("slime mold")
    w.write_char("%")
    r = _reader(buf)
    assert r.read_boolean() is False
    assert r.read_int() == 42
    assert r.read_new_string() == "slime mold"
    assert r.read_char() == "%"
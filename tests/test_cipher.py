import io

import pytest

from roguesave.cipher import crypt_bytes, encread, encwrite


def test_crypt_bytes_is_involution():
    data = bytes(range(256)) * 2
    assert crypt_bytes(crypt_bytes(data)) == data


def test_crypt_bytes_changes_data():
    data = b"The Amulet of Yendor"
    assert crypt_bytes(data) != data
    assert len(crypt_bytes(data)) == len(data)


def test_crypt_bytes_is_xor_with_keystream():
    data = b"hello dungeon of doom, long enough to wrap the key tables twice over"
    keystream = crypt_bytes(bytes(len(data)))
    assert crypt_bytes(data) == bytes(a ^ b for a, b in zip(data, keystream))


def test_crypt_bytes_prefix_stable():
    a = b"first part"
    b = b" and the rest"
    assert crypt_bytes(a + b)[: len(a)] == crypt_bytes(a)


def test_crypt_bytes_empty():
    assert crypt_bytes(b"") == b""


def test_encwrite_encread_round_trip():
    stream = io.BytesIO()
    assert encwrite(stream, b"rogue data") == len(b"rogue data")
    stream.seek(0)
    assert encread(stream, len(b"rogue data")) == b"rogue data"


def test_encwrite_writes_scrambled_bytes():
    stream = io.BytesIO()
    encwrite(stream, b"plain text")
    assert stream.getvalue() == crypt_bytes(b"plain text")


def test_each_call_restarts_keystream():
    stream = io.BytesIO()
    encwrite(stream, b"abc")
    encwrite(stream, b"abc")
    raw = stream.getvalue()
    assert raw[:3] == raw[3:]
    stream.seek(0)
    assert encread(stream, 3) == b"abc"
    assert encread(stream, 3) == b"abc"


def test_encread_short_read():
    stream = io.BytesIO(crypt_bytes(b"xyz"))
    assert encread(stream, 10) == b"xyz"
    assert encread(stream, 10) == b""


def test_encread_negative_size():
    with pytest.raises(ValueError):
        encread(io.BytesIO(b"abc"), -1)
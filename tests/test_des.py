import pytest

from roguesave.des import (
    KeySchedule,
    des_cipher,
    des_rounds,
    make_key_schedule,
    salt_bits,
)

KEY = bytes.fromhex("133457799BBCDFF1")
PLAIN = bytes.fromhex("0123456789ABCDEF")


def _invert(data: bytes) -> bytes:
    return bytes(b ^ 0xFF for b in data)


def test_standard_vector():
    schedule = make_key_schedule(KEY)
    assert des_cipher(PLAIN, schedule, 0, 1) == bytes.fromhex("85E813540F0AB405")


def test_second_standard_vector():
    schedule = make_key_schedule(bytes.fromhex("0E329232EA6D0D73"))
    block = bytes.fromhex("8787878787878787")
    assert des_cipher(block, schedule, 0, 1) == bytes(8)


@pytest.mark.parametrize("salt", [0, 1, 0x3F, 0xABC, 0xFFFFFF])
def test_decrypt_inverts_encrypt(salt):
    schedule = make_key_schedule(b"abcdefgh")
    data = b"\x00\x11\x22\x33\x44\x55\x66\x77"
    encrypted = des_cipher(data, schedule, salt, 1)
    assert encrypted != data
    assert des_cipher(encrypted, schedule, salt, -1) == data


def test_multiple_iterations_equal_repeated_encryption():
    schedule = make_key_schedule(KEY)
    once = des_cipher(PLAIN, schedule, 5, 1)
    twice = des_cipher(once, schedule, 5, 1)
    assert des_cipher(PLAIN, schedule, 5, 2) == twice
    assert des_cipher(twice, schedule, 5, -2) == PLAIN


def test_complementation_property():
    schedule = make_key_schedule(KEY)
    inverted = make_key_schedule(_invert(KEY))
    assert des_cipher(_invert(PLAIN), inverted, 0, 1) == _invert(
        des_cipher(PLAIN, schedule, 0, 1)
    )


def test_weak_key_is_an_involution():
    schedule = make_key_schedule(bytes.fromhex("0101010101010101"))
    once = des_cipher(PLAIN, schedule, 0, 1)
    assert des_cipher(once, schedule, 0, 1) == PLAIN


def test_parity_bits_are_ignored():
    flipped = bytes(b ^ 0x01 for b in KEY)
    assert make_key_schedule(flipped) == make_key_schedule(KEY)


def test_key_schedule_shape():
    schedule = make_key_schedule(KEY)
    assert len(schedule.left) == 16
    assert len(schedule.right) == 16
    assert all(0 <= k < (1 << 24) for k in schedule.left + schedule.right)
    assert schedule.decrypt_left == tuple(reversed(schedule.left))
    assert schedule.decrypt_right == tuple(reversed(schedule.right))


def test_salt_changes_output():
    schedule = make_key_schedule(KEY)
    assert des_cipher(PLAIN, schedule, 0, 1) != des_cipher(PLAIN, schedule, 1, 1)


def test_salt_bits_values():
    assert salt_bits(0) == 0
    assert salt_bits(1) == 0x800000
    assert salt_bits(0xFFFFFF) == 0xFFFFFF


def test_salt_bits_reverses_bit_order():
    for i in range(24):
        assert salt_bits(1 << i) == 1 << (23 - i)


def test_salt_bits_ignores_high_bits():
    assert salt_bits(0x1000000 | 5) == salt_bits(5)


def test_des_rounds_matches_des_cipher():
    schedule = make_key_schedule(KEY)
    left = int.from_bytes(PLAIN[:4], "big")
    right = int.from_bytes(PLAIN[4:], "big")
    out_l, out_r = des_rounds(left, right, schedule, salt_bits(7), 3)
    expected = des_cipher(PLAIN, schedule, 7, 3)
    assert out_l.to_bytes(4, "big") + out_r.to_bytes(4, "big") == expected


def test_des_rounds_zero_count_rejected():
    schedule = make_key_schedule(KEY)
    with pytest.raises(ValueError):
        des_rounds(0, 0, schedule, 0, 0)


def test_des_cipher_zero_count_rejected():
    with pytest.raises(ValueError):
        des_cipher(PLAIN, make_key_schedule(KEY), 0, 0)


@pytest.mark.parametrize("key", [b"", b"short", b"much too long key"])
def test_bad_key_length(key):
    with pytest.raises(ValueError):
        make_key_schedule(key)


def test_bad_block_length():
    with pytest.raises(ValueError):
        des_cipher(b"1234567", make_key_schedule(KEY), 0, 1)


def test_key_schedule_is_comparable():
    assert make_key_schedule(KEY) == KeySchedule(
        make_key_schedule(KEY).left, make_key_schedule(KEY).right
    )
    assert make_key_schedule(KEY) != make_key_schedule(b"abcdefgh")
"""Traditional and extended DES-based ``crypt()`` password hashing."""

from __future__ import annotations

from .des import des_cipher, des_rounds, make_key_schedule, salt_bits

_MASK32 = 0xFFFFFFFF

ASCII64 = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
"""The 64-character alphabet used for salts, counts and hash output."""

_EXTENDED_MARKER = "_"


def ascii_to_bin(ch: str) -> int:
    """Return the 6-bit value of one crypt alphabet character, or 0 if invalid."""
    if not ch:
        return 0
    c = ord(ch[0])
    if c > ord("z"):
        return 0
    if c >= ord("a"):
        return c - ord("a") + 38
    if c > ord("Z"):
        return 0
    if c >= ord("A"):
        return c - ord("A") + 12
    if c > ord("9"):
        return 0
    if c >= ord("."):
        return c - ord(".")
    return 0


def _until_nul(value):
    cut = value.find("\0" if isinstance(value, str) else b"\0")
    return value if cut < 0 else value[:cut]


def _key_bytes(key: str | bytes) -> bytes:
    if isinstance(key, str):
        key = key.encode("utf-8")
    return _until_nul(bytes(key))


def _decode_field(setting: str, start: int, stop: int) -> int:
    value = 0
    for shift, ch in enumerate(setting.ljust(stop, "\0")[start:stop]):
        value |= ascii_to_bin(ch) << (shift * 6)
    return value


def _encode_hash(r0: int, r1: int) -> str:
    out = []
    l = r0 >> 8
    out.extend(ASCII64[(l >> s) & 0x3F] for s in (18, 12, 6, 0))
    l = ((r0 << 16) | ((r1 >> 16) & 0xFFFF)) & _MASK32
    out.extend(ASCII64[(l >> s) & 0x3F] for s in (18, 12, 6, 0))
    l = (r1 << 2) & _MASK32
    out.extend(ASCII64[(l >> s) & 0x3F] for s in (12, 6, 0))
    return "".join(out)


def crypt(key: str | bytes, setting: str) -> str:
    """Hash ``key`` with the salt (and, for ``_`` settings, count) in ``setting``.

    A two-character setting gives the classic 13-character hash of at most
    eight key characters. A setting starting with ``_`` carries a 4-character
    iteration count and a 4-character salt and hashes the whole key.
    """
    raw = _key_bytes(key)
    setting = _until_nul(setting)
    if not setting:
        raise ValueError("crypt setting must not be empty")

    # Each key byte is shifted up one bit; a byte that becomes zero does not
    # advance the key, exactly as the classic implementation behaves.
    pos = 0
    buf = bytearray(8)
    for i in range(8):
        c = raw[pos] if pos < len(raw) else 0
        buf[i] = (c << 1) & 0xFF
        if buf[i]:
            pos += 1
    schedule = make_key_schedule(bytes(buf))

    if setting.startswith(_EXTENDED_MARKER):
        count = _decode_field(setting, 1, 5)
        salt = _decode_field(setting, 5, 9)
        while pos < len(raw):
            buf = bytearray(des_cipher(bytes(buf), schedule, 0, 1))
            i = 0
            while i < 8 and pos < len(raw):
                buf[i] ^= (raw[pos] << 1) & 0xFF
                i += 1
                pos += 1
            schedule = make_key_schedule(bytes(buf))
        prefix = setting[:9]
    else:
        count = 25
        salt = (ascii_to_bin(setting[1:2]) << 6) | ascii_to_bin(setting[0])
        prefix = setting[0] + (setting[1] if len(setting) > 1 else setting[0])

    if count == 0:
        raise ValueError("crypt iteration count must not be zero")
    r0, r1 = des_rounds(0, 0, schedule, salt_bits(salt), count)
    return prefix + _encode_hash(r0, r1)
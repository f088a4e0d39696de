"""DES block cipher with the salted E-box used by traditional crypt().

The tables are expanded once at import time into OR-masks so that the
permutations become a handful of lookups per block.
"""

from __future__ import annotations

from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF

_IP = (
    58, 50, 42, 34, 26, 18, 10, 2, 60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6, 64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1, 59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5, 63, 55, 47, 39, 31, 23, 15, 7,
)

_KEY_PERM = (
    57, 49, 41, 33, 25, 17, 9, 1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27, 19, 11, 3, 60, 52, 44, 36,
    63, 55, 47, 39, 31, 23, 15, 7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29, 21, 13, 5, 28, 20, 12, 4,
)

_KEY_SHIFTS = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

_COMP_PERM = (
    14, 17, 11, 24, 1, 5, 3, 28, 15, 6, 21, 10,
    23, 19, 12, 4, 26, 8, 16, 7, 27, 20, 13, 2,
    41, 52, 31, 37, 47, 55, 30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53, 46, 42, 50, 36, 29, 32,
)

_SBOX = (
    (
        14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7,
        0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8,
        4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0,
        15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13,
    ),
    (
        15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10,
        3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5,
        0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15,
        13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9,
    ),
    (
        10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8,
        13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1,
        13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7,
        1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12,
    ),
    (
        7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15,
        13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9,
        10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4,
        3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14,
    ),
    (
        2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9,
        14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6,
        4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14,
        11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3,
    ),
    (
        12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11,
        10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8,
        9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6,
        4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13,
    ),
    (
        4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1,
        13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6,
        1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2,
        6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12,
    ),
    (
        13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7,
        1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2,
        7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8,
        2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11,
    ),
)

_PBOX = (
    16, 7, 20, 21, 29, 12, 28, 17, 1, 15, 23, 26, 5, 18, 31, 10,
    2, 8, 24, 14, 32, 27, 3, 9, 19, 13, 30, 6, 22, 11, 4, 25,
)


def _bit32(n: int) -> int:
    return 1 << (31 - n)


def _bit28(n: int) -> int:
    return 1 << (27 - n)


def _bit24(n: int) -> int:
    return 1 << (23 - n)


def _bit8(n: int) -> int:
    return 0x80 >> n


def _build_tables():
    init_perm = [0] * 64
    final_perm = [0] * 64
    for i, v in enumerate(_IP):
        final_perm[i] = v - 1
        init_perm[v - 1] = i

    inv_key_perm = [255] * 64
    for i, v in enumerate(_KEY_PERM):
        inv_key_perm[v - 1] = i

    inv_comp_perm = [255] * 56
    for i, v in enumerate(_COMP_PERM):
        inv_comp_perm[v - 1] = i

    # Reorder S-box inputs so that the row bits need no special handling.
    u_sbox = [
        [box[(j & 0x20) | ((j & 1) << 4) | ((j >> 1) & 0xF)] for j in range(64)]
        for box in _SBOX
    ]
    m_sbox = tuple(
        tuple(
            (u_sbox[2 * b][i] << 4) | u_sbox[2 * b + 1][j]
            for i in range(64)
            for j in range(64)
        )
        for b in range(4)
    )

    ip_l, ip_r, fp_l, fp_r = [], [], [], []
    kp_l, kp_r, cp_l, cp_r = [], [], [], []
    for k in range(8):
        row_ipl, row_ipr, row_fpl, row_fpr = [], [], [], []
        for i in range(256):
            il = ir = fl = fr = 0
            for j in range(8):
                if not i & _bit8(j):
                    continue
                inbit = 8 * k + j
                obit = init_perm[inbit]
                if obit < 32:
                    il |= _bit32(obit)
                else:
                    ir |= _bit32(obit - 32)
                obit = final_perm[inbit]
                if obit < 32:
                    fl |= _bit32(obit)
                else:
                    fr |= _bit32(obit - 32)
            row_ipl.append(il)
            row_ipr.append(ir)
            row_fpl.append(fl)
            row_fpr.append(fr)
        ip_l.append(tuple(row_ipl))
        ip_r.append(tuple(row_ipr))
        fp_l.append(tuple(row_fpl))
        fp_r.append(tuple(row_fpr))

        row_kpl, row_kpr, row_cpl, row_cpr = [], [], [], []
        for i in range(128):
            il = ir = 0
            for j in range(7):
                if not i & _bit8(j + 1):
                    continue
                obit = inv_key_perm[8 * k + j]
                if obit == 255:
                    continue
                if obit < 28:
                    il |= _bit28(obit)
                else:
                    ir |= _bit28(obit - 28)
            row_kpl.append(il)
            row_kpr.append(ir)

            il = ir = 0
            for j in range(7):
                if not i & _bit8(j + 1):
                    continue
                obit = inv_comp_perm[7 * k + j]
                if obit == 255:
                    continue
                if obit < 24:
                    il |= _bit24(obit)
                else:
                    ir |= _bit24(obit - 24)
            row_cpl.append(il)
            row_cpr.append(ir)
        kp_l.append(tuple(row_kpl))
        kp_r.append(tuple(row_kpr))
        cp_l.append(tuple(row_cpl))
        cp_r.append(tuple(row_cpr))

    un_pbox = [0] * 32
    for i, v in enumerate(_PBOX):
        un_pbox[v - 1] = i
    psbox = tuple(
        tuple(
            sum(_bit32(un_pbox[8 * b + j]) for j in range(8) if i & _bit8(j))
            for i in range(256)
        )
        for b in range(4)
    )

    return (
        m_sbox,
        psbox,
        tuple(ip_l),
        tuple(ip_r),
        tuple(fp_l),
        tuple(fp_r),
        tuple(kp_l),
        tuple(kp_r),
        tuple(cp_l),
        tuple(cp_r),
    )


(
    _M_SBOX,
    _PSBOX,
    _IP_MASKL,
    _IP_MASKR,
    _FP_MASKL,
    _FP_MASKR,
    _KEY_PERM_MASKL,
    _KEY_PERM_MASKR,
    _COMP_MASKL,
    _COMP_MASKR,
) = _build_tables()


@dataclass(frozen=True)
class KeySchedule:
    """The sixteen 48-bit round keys, each split into two 24-bit halves."""

    left: tuple[int, ...]
    right: tuple[int, ...]

    @property
    def decrypt_left(self) -> tuple[int, ...]:
        return self.left[::-1]

    @property
    def decrypt_right(self) -> tuple[int, ...]:
        return self.right[::-1]


def _permute8(masks, hi: int, lo: int) -> int:
    """OR together mask lookups for the eight bytes of a 64-bit value."""
    return (
        masks[0][hi >> 24]
        | masks[1][(hi >> 16) & 0xFF]
        | masks[2][(hi >> 8) & 0xFF]
        | masks[3][hi & 0xFF]
        | masks[4][lo >> 24]
        | masks[5][(lo >> 16) & 0xFF]
        | masks[6][(lo >> 8) & 0xFF]
        | masks[7][lo & 0xFF]
    )


def _key_permute(masks, raw0: int, raw1: int) -> int:
    return (
        masks[0][raw0 >> 25]
        | masks[1][(raw0 >> 17) & 0x7F]
        | masks[2][(raw0 >> 9) & 0x7F]
        | masks[3][(raw0 >> 1) & 0x7F]
        | masks[4][raw1 >> 25]
        | masks[5][(raw1 >> 17) & 0x7F]
        | masks[6][(raw1 >> 9) & 0x7F]
        | masks[7][(raw1 >> 1) & 0x7F]
    )


def _compress(masks, t0: int, t1: int) -> int:
    return (
        masks[0][(t0 >> 21) & 0x7F]
        | masks[1][(t0 >> 14) & 0x7F]
        | masks[2][(t0 >> 7) & 0x7F]
        | masks[3][t0 & 0x7F]
        | masks[4][(t1 >> 21) & 0x7F]
        | masks[5][(t1 >> 14) & 0x7F]
        | masks[6][(t1 >> 7) & 0x7F]
        | masks[7][t1 & 0x7F]
    )


def _check_block(data: bytes, what: str) -> bytes:
    data = bytes(data)
    if len(data) != 8:
        raise ValueError(f"{what} must be exactly 8 bytes, got {len(data)}")
    return data


def make_key_schedule(key: bytes) -> KeySchedule:
    """Expand an 8-byte DES key (parity bits ignored) into its round keys."""
    key = _check_block(key, "key")
    raw0 = int.from_bytes(key[:4], "big")
    raw1 = int.from_bytes(key[4:], "big")

    k0 = _key_permute(_KEY_PERM_MASKL, raw0, raw1)
    k1 = _key_permute(_KEY_PERM_MASKR, raw0, raw1)

    left: list[int] = []
    right: list[int] = []
    shifts = 0
    for step in _KEY_SHIFTS:
        shifts += step
        t0 = ((k0 << shifts) | (k0 >> (28 - shifts))) & _MASK32
        t1 = ((k1 << shifts) | (k1 >> (28 - shifts))) & _MASK32
        left.append(_compress(_COMP_MASKL, t0, t1))
        right.append(_compress(_COMP_MASKR, t0, t1))
    return KeySchedule(tuple(left), tuple(right))


def salt_bits(salt: int) -> int:
    """Map the low 24 bits of a salt to the E-box swap mask, bit-reversed."""
    bits = 0
    obit = 0x800000
    for i in range(24):
        if salt & (1 << i):
            bits |= obit
        obit >>= 1
    return bits


def des_rounds(
    left: int, right: int, schedule: KeySchedule, saltbits: int, count: int
) -> tuple[int, int]:
    """Run DES ``abs(count)`` times over a block given as two 32-bit halves.

    A positive count encrypts, a negative one decrypts. A count of zero is
    rejected with ``ValueError``.
    """
    if count == 0:
        raise ValueError("DES iteration count must not be zero")
    if count > 0:
        keys_l, keys_r = schedule.left, schedule.right
    else:
        count = -count
        keys_l, keys_r = schedule.decrypt_left, schedule.decrypt_right

    l = _permute8(_IP_MASKL, left & _MASK32, right & _MASK32)
    r = _permute8(_IP_MASKR, left & _MASK32, right & _MASK32)
    f = 0

    m0, m1, m2, m3 = _M_SBOX
    p0, p1, p2, p3 = _PSBOX
    for _ in range(count):
        for kl, kr in zip(keys_l, keys_r):
            # Expand R to 48 bits (the E-box).
            r48l = (
                ((r & 0x00000001) << 23)
                | ((r & 0xF8000000) >> 9)
                | ((r & 0x1F800000) >> 11)
                | ((r & 0x01F80000) >> 13)
                | ((r & 0x001F8000) >> 15)
            )
            r48r = (
                ((r & 0x0001F800) << 7)
                | ((r & 0x00001F80) << 5)
                | ((r & 0x000001F8) << 3)
                | ((r & 0x0000001F) << 1)
                | ((r & 0x80000000) >> 31)
            )
            f = (r48l ^ r48r) & saltbits
            r48l ^= f ^ kl
            r48r ^= f ^ kr
            f = (
                p0[m0[r48l >> 12]]
                | p1[m1[r48l & 0xFFF]]
                | p2[m2[r48r >> 12]]
                | p3[m3[r48r & 0xFFF]]
            )
            f ^= l
            l = r
            r = f
        r = l
        l = f

    return _permute8(_FP_MASKL, l, r), _permute8(_FP_MASKR, l, r)


def des_cipher(block: bytes, schedule: KeySchedule, salt: int, count: int) -> bytes:
    """Encrypt (count > 0) or decrypt (count < 0) one 8-byte block."""
    block = _check_block(block, "block")
    left = int.from_bytes(block[:4], "big")
    right = int.from_bytes(block[4:], "big")
    out_l, out_r = des_rounds(left, right, schedule, salt_bits(salt), count)
    return out_l.to_bytes(4, "big") + out_r.to_bytes(4, "big")
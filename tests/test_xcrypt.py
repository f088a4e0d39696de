import pytest

from roguesave.xcrypt import ASCII64, ascii_to_bin, crypt


def test_ascii_to_bin_matches_alphabet_positions():
    assert [ascii_to_bin(ch) for ch in ASCII64] == list(range(64))


@pytest.mark.parametrize("ch", ["{", ":", "@", "[", "`", "-", " ", "\x7f", "é", ""])
def test_ascii_to_bin_invalid_characters_are_zero(ch):
    assert ascii_to_bin(ch) == 0


def test_classic_hash_shape():
    result = crypt("secret", "ab")
    assert len(result) == 13
    assert result[:2] == "ab"
    assert all(ch in ASCII64 for ch in result)


def test_classic_hash_is_stable_across_other_calls():
    first = crypt("secret", "xy")
    assert first.startswith("xy")
    assert len(first) == 13
    other = crypt("password", "ab")
    assert other != first
    crypt("token", "_1...abcd")
    assert crypt("secret", "xy") == first
    assert crypt("password", "ab") == other


def test_classic_hash_last_character_has_low_bits_clear():
    for key in ("secret", "password", "a", ""):
        assert ASCII64.index(crypt(key, "Qz")[-1]) % 4 == 0


def test_classic_hash_ignores_characters_beyond_eight():
    assert crypt("abcdefgh", "ab") == crypt("abcdefghXYZ", "ab")


def test_classic_hash_depends_on_key_and_salt():
    assert crypt("secret", "ab") != crypt("secreu", "ab")
    assert crypt("secret", "ab") != crypt("secret", "ac")


def test_setting_extra_characters_are_ignored_in_classic_mode():
    assert crypt("secret", "abXXXXXXXXX") == crypt("secret", "ab")


def test_key_stops_at_nul():
    assert crypt("ab\0cd", "xy") == crypt("ab", "xy")
    assert crypt(b"ab\0cd", "xy") == crypt(b"ab", "xy")


def test_str_and_bytes_keys_agree():
    assert crypt("secret", "ab") == crypt(b"secret", "ab")


def test_empty_setting_rejected():
    with pytest.raises(ValueError):
        crypt("secret", "")


def test_extended_hash_shape():
    setting = "_1...abcd"
    result = crypt("secret", setting)
    assert len(result) == 20
    assert result[:9] == setting
    assert all(ch in ASCII64 for ch in result[9:])


def test_extended_hash_uses_whole_key():
    setting = "_1...abcd"
    assert crypt("abcdefghX", setting) != crypt("abcdefghY", setting)


def test_extended_hash_depends_on_count_and_salt():
    base = crypt("secret", "_1...abcd")
    assert base[9:] != crypt("secret", "_2...abcd")[9:]
    assert base[9:] != crypt("secret", "_1...abce")[9:]


def test_extended_short_setting_keeps_given_prefix():
    result = crypt("secret", "_1")
    assert result.startswith("_1")
    assert len(result) == 2 + 11


def test_extended_zero_count_rejected():
    with pytest.raises(ValueError):
        crypt("secret", "_....abcd")
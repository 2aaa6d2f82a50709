import pytest

from hashtab.util import (
    Version,
    find_hash_in_string,
    floor_icon_size,
    hash_bytes_to_string,
    hash_string_to_bytes,
    hex_digit,
    make_path_long_compatible,
    unhex,
)


def test_hex_digit_case():
    assert hex_digit(10) == "A"
    assert hex_digit(10, False) == "a"
    assert hex_digit(9, False) == "9"


def test_hex_digit_out_of_range():
    with pytest.raises(ValueError):
        hex_digit(16)


@pytest.mark.parametrize("n", range(16))
def test_unhex_inverts_hex_digit(n):
    assert unhex(hex_digit(n)) == n
    assert unhex(hex_digit(n, False)) == n


@pytest.mark.parametrize("ch", ["g", "G", " ", "\u00e9", "-"])
def test_unhex_rejects(ch):
    assert unhex(ch) is None


def test_unhex_accepts_int():
    assert unhex(ord("f")) == unhex("f")


@pytest.mark.parametrize("data", [b"", b"\x00", b"\xde\xad\xbe\xef", bytes(range(64))])
def test_bytes_string_round_trip(data):
    assert hash_string_to_bytes(hash_bytes_to_string(data)) == data
    assert hash_string_to_bytes(hash_bytes_to_string(data, False)) == data


def test_hash_bytes_to_string_matches_hex():
    data = bytes(range(0, 256, 7))
    assert hash_bytes_to_string(data, False) == data.hex()
    assert hash_bytes_to_string(data) == data.hex().upper()


def test_hash_string_with_spaces():
    assert hash_string_to_bytes("de ad be ef") == bytes.fromhex("deadbeef")


def test_hash_string_from_bytes_input():
    assert hash_string_to_bytes(b"DEADBEEF") == bytes.fromhex("deadbeef")


def test_hash_string_ignores_trailing_odd_digit():
    assert hash_string_to_bytes("abc") == bytes.fromhex("ab")


@pytest.mark.parametrize("text", ["", "a", "zz", "ab c", "ab  ", "12345g"])
def test_hash_string_invalid(text):
    assert hash_string_to_bytes(text) == b""


def test_find_hash_in_string():
    assert find_hash_in_string("sha: deadbeef00 end") == bytes.fromhex("deadbeef00")


def test_find_hash_spaced_uppercase():
    assert find_hash_in_string("x DE AD BE EF y") == bytes.fromhex("deadbeef")


def test_find_hash_mixed_case_not_found():
    assert find_hash_in_string("DEADbeef") == b""


def test_find_hash_too_short():
    assert find_hash_in_string("aabbcc") == b""


def test_find_hash_does_not_give_back_pairs():
    assert find_hash_in_string("aa bb cc dd eeg") == b""


def test_find_hash_none():
    assert find_hash_in_string("no hash here") == b""


def test_version_ordering():
    assert Version(1, 2, 3) < Version(1, 3, 0)
    assert Version(2, 0, 0) > Version(1, 65535, 65535)
    assert Version(1, 2, 3) == Version(1, 2, 3)


def test_version_zero():
    assert Version().as_number() == 0


def test_version_number_monotonic():
    assert Version(1, 0, 0).as_number() > Version(0, 65535, 65535).as_number()
    assert Version(0, 1, 0).as_number() > Version(0, 0, 65535).as_number()


def test_version_range():
    with pytest.raises(ValueError):
        Version(65536, 0, 0)


@pytest.mark.parametrize(
    ("size", "expected"), [(1000, 256), (256, 256), (255, 192), (16, 16), (10, 10)]
)
def test_floor_icon_size(size, expected):
    assert floor_icon_size(size) == expected


def test_make_path_long_compatible_prefixes():
    assert make_path_long_compatible("C:\\x") == "\\\\?\\C:\\x"


def test_make_path_long_compatible_keeps_unc():
    unc = "\\\\server\\share"
    assert make_path_long_compatible(unc) == unc


def test_make_path_long_compatible_idempotent():
    once = make_path_long_compatible("C:\\dir\\file.txt")
    assert make_path_long_compatible(once) == once
import base64

import pytest

from hashtab.b64codec import decode, encode


@pytest.mark.parametrize(
    "data",
    [b"", b"f", b"fo", b"foo", b"foob", b"fooba", b"foobar", bytes(range(256))],
)
def test_encode_matches_standard_base64(data):
    assert encode(data) == base64.b64encode(data).decode("ascii")


@pytest.mark.parametrize(
    "data",
    [b"", b"f", b"fo", b"foo", b"foob", b"fooba", b"foobar", bytes(range(256))],
)
def test_round_trip(data):
    assert decode(encode(data)) == data


def test_encode_known_value():
    assert encode(b"foobar") == "Zm9vYmFy"


def test_decode_known_value():
    assert decode("Zm9vYmFy") == b"foobar"


@pytest.mark.parametrize("padded", ["Zm9vYg==", "Zm9vYmE=", "Zm8=", "Zg=="])
def test_decode_without_padding(padded):
    assert decode(padded.rstrip("=")) == base64.b64decode(padded)


def test_decode_accepts_urlsafe_alphabet():
    data = bytes(range(250, 256)) * 3
    urlsafe = base64.urlsafe_b64encode(data).decode("ascii")
    assert "-" in urlsafe or "_" in urlsafe
    assert decode(urlsafe) == data


def test_decode_accepts_bytes_input():
    data = b"\x00\x10\x83\x10Q\x87"
    assert decode(encode(data).encode("ascii")) == data


def test_decode_empty():
    assert decode("") == b""


def test_decode_length_from_padding():
    for size in range(0, 20):
        data = bytes(range(size))
        assert len(decode(encode(data))) == size
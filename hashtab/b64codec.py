"""Base64 encoding and a lenient decoder for hash values found in checksum files."""

from __future__ import annotations

import base64

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def _build_decode_table() -> tuple[int, ...]:
    table = [0] * 256
    for value, char in enumerate(_ALPHABET):
        table[ord(char)] = value
    # Accept the URL-safe and a few legacy alphabets as well.
    table[ord(",")] = 63
    table[ord("-")] = 62
    table[ord(".")] = 62
    table[ord("_")] = 63
    return tuple(table)


_DECODE_TABLE = _build_decode_table()
_PAD = ord("=")


def encode(data: bytes) -> str:
    """Encode bytes as padded standard base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode(text: str | bytes) -> bytes:
    """Decode base64 leniently.

    Padding is optional, the standard and URL-safe alphabets are both
    accepted, and characters outside the alphabet decode as zero bits.
    """
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    length = len(raw)

    def sextet(index: int) -> int:
        # Reading past the end behaves like reading a terminating NUL.
        return _DECODE_TABLE[raw[index]] if index < length else 0

    pad = 1 if length > 0 and (length % 4 or raw[-1] == _PAD) else 0
    full = ((length + 3) // 4 - pad) * 4

    out = bytearray()
    for start in range(0, full, 4):
        n = (
            sextet(start) << 18
            | sextet(start + 1) << 12
            | sextet(start + 2) << 6
            | sextet(start + 3)
        )
        out += bytes(((n >> 16) & 0xFF, (n >> 8) & 0xFF, n & 0xFF))

    if pad:
        n = sextet(full) << 18 | sextet(full + 1) << 12
        out.append((n >> 16) & 0xFF)
        if length > full + 2 and raw[full + 2] != _PAD:
            n |= sextet(full + 2) << 6
            out.append((n >> 8) & 0xFF)

    return bytes(out)
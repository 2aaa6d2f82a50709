"""Hash string helpers, versions and small path utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_ICON_SIZES = (256, 192, 128, 96, 64, 48, 40, 32, 24, 16)

# Pairs of hex digits, optionally separated by single spaces, at least four
# pairs long and all in the same case. The lookahead/backreference pair makes
# the repetition atomic so that it never gives back pairs to satisfy \b.
_HASH_RE = re.compile(
    r"\b[0-9a-f]{2}(?=((?: ?[0-9a-f]{2}){3,}))\1\b"
    r"|\b[0-9A-F]{2}(?=((?: ?[0-9A-F]{2}){3,}))\2\b",
    re.ASCII,
)


@total_ordering
@dataclass(frozen=True)
class Version:
    """A major.minor.patch version with 16-bit components."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if not 0 <= part <= 0xFFFF:
                raise ValueError(f"version component out of range: {part}")

    def as_number(self) -> int:
        """Pack the version into one comparable integer."""
        return (self.major << 32) | (self.minor << 16) | self.patch

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.as_number() < other.as_number()

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def hex_digit(n: int, upper: bool = True) -> str:
    """Return the hex digit for a nibble value."""
    if not 0 <= n <= 0xF:
        raise ValueError(f"not a nibble: {n}")
    return "0123456789ABCDEF"[n] if upper else "0123456789abcdef"[n]


def unhex(ch: str | int) -> int | None:
    """Return the value of a hex digit, or None if it is not one."""
    code = ch if isinstance(ch, int) else ord(ch)
    if ord("0") <= code <= ord("9"):
        return code - ord("0")
    if ord("a") <= code <= ord("f"):
        return code - ord("a") + 0xA
    if ord("A") <= code <= ord("F"):
        return code - ord("A") + 0xA
    return None


def hash_bytes_to_string(data: bytes, upper: bool = True) -> str:
    """Format a hash as hex text."""
    return "".join(hex_digit(b >> 4, upper) + hex_digit(b & 0xF, upper) for b in data)


def hash_string_to_bytes(text: str | bytes) -> bytes:
    """Parse hex text, allowing spaces between byte pairs.

    Returns empty bytes when the text is not a valid hash. A single
    trailing unpaired digit is ignored.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")
    size = len(text)
    out = bytearray()
    i = 0
    while i < size - 1:
        while text[i] == " ":
            i += 1
            if i >= size - 1:
                break
        high = unhex(text[i])
        low = unhex(text[i + 1]) if i + 1 < size else None
        if high is None or low is None:
            return b""
        out.append(high << 4 | low)
        i += 2
    return bytes(out)


def find_hash_in_string(text: str) -> bytes:
    """Find the first hash-looking run of hex in text and return its bytes."""
    match = _HASH_RE.search(text)
    if match is None:
        return b""
    return hash_string_to_bytes(match.group(0))


def floor_icon_size(size: int) -> int:
    """Round a size down to the nearest standard icon size."""
    for candidate in _ICON_SIZES:
        if size >= candidate:
            return candidate
    return size


def make_path_long_compatible(path: str) -> str:
    """Prefix a Windows path so that it is not limited in length."""
    if path.startswith("\\\\"):
        return path
    return "\\\\?\\" + path
"""Parsing of checksum files: plain hex lists, SFV and base64 sum files."""

from __future__ import annotations

import enum
import os
import re
from typing import Union

from . import b64codec
from .util import hash_string_to_bytes

MIN_SUMFILE_SIZE = 6  # a base64 encoded CRC32 is the shortest hash we accept
DEFAULT_MAX_HASH_SIZE = 64
_MAX_FILE_SIZE = 1 << 32

_WHITESPACE = b"\r\n\t\f\v "
_BOM = b"\xef\xbb\xbf"
_NEWLINE_RE = re.compile(rb"[\r\n]")

_HEX_RE = re.compile(rb"([0-9a-fA-F]{8,512}) [ *](.+)", re.DOTALL)
_B64_RE = re.compile(rb"([0-9a-zA-Z=+/,\-_]{6,512}) [ *](.+)", re.DOTALL)
# Both leading runs are possessive: the lookahead/backreference pairs keep
# them from giving characters back.
_SFV_RE = re.compile(rb"(?=([^ ]+))\1(?=(\s+))\2([0-9a-fA-F]{8})")

FileSumEntry = tuple[str, bytes]
_Line = Union[bytes, str]


class _CommentStyle(enum.Enum):
    UNKNOWN = enum.auto()
    SEMICOLON = enum.auto()
    HASH = enum.auto()


class _HashStyle(enum.Enum):
    UNKNOWN = enum.auto()
    HEX = enum.auto()
    SFV = enum.auto()
    BASE64 = enum.auto()


class SumFileParser:
    """Line-by-line parser that locks onto the first comment and hash style seen.

    Parsed entries accumulate in ``files`` as ``(raw_name_bytes, hash_bytes)``.
    """

    def __init__(self) -> None:
        self._comment = _CommentStyle.UNKNOWN
        self._hash = _HashStyle.UNKNOWN
        self.files: list[tuple[bytes, bytes]] = []

    def _accepts(self, style: _HashStyle) -> bool:
        return self._hash in (_HashStyle.UNKNOWN, style)

    def process_line(self, line: _Line) -> bool:
        """Consume one line; return False if it fits none of the known formats."""
        if isinstance(line, str):
            line = line.encode("utf-8")

        if not line.strip(_WHITESPACE):
            return True

        first = line[:1]
        if self._comment in (_CommentStyle.UNKNOWN, _CommentStyle.HASH) and first == b"#":
            self._comment = _CommentStyle.HASH
            return True
        if self._comment in (_CommentStyle.UNKNOWN, _CommentStyle.SEMICOLON) and first == b";":
            self._comment = _CommentStyle.SEMICOLON
            return True

        if self._accepts(_HashStyle.SFV):
            match = _SFV_RE.fullmatch(line)
            if match:
                self._hash = _HashStyle.SFV
                name = match.group(1).rstrip(b" ")
                digest = hash_string_to_bytes(match.group(3))
                if digest:
                    self.files.append((name, digest))
                    return True

        if self._accepts(_HashStyle.HEX):
            match = _HEX_RE.fullmatch(line)
            if match:
                self._hash = _HashStyle.HEX
                digest = hash_string_to_bytes(match.group(1))
                if digest:
                    self.files.append((match.group(2), digest))
                    return True

        if self._accepts(_HashStyle.BASE64):
            match = _B64_RE.fullmatch(line)
            if match:
                self._hash = _HashStyle.BASE64
                digest = b64codec.decode(match.group(1))
                if digest:
                    self.files.append((match.group(2), digest))
                    return True

        return False


def parse_sumfile(data: bytes, max_hash_size: int = DEFAULT_MAX_HASH_SIZE) -> list[FileSumEntry]:
    """Parse the contents of a sum file.

    Returns ``(file_name, hash)`` pairs. A file holding a single bare hash
    yields one entry with an empty name. Anything that is not a valid sum
    file yields an empty list.
    """
    data = bytes(data)
    if len(data) < MIN_SUMFILE_SIZE:
        return []

    body = data[len(_BOM):] if data.startswith(_BOM) else data

    # Longest hash, hexed, with room for separators and newlines.
    if len(data) <= max_hash_size * 2 * 2:
        stripped = body.strip(_WHITESPACE)
        if stripped:
            digest = hash_string_to_bytes(stripped)
            if digest:
                return [("", digest)]

    parser = SumFileParser()
    for line in _NEWLINE_RE.split(body):
        if line and not parser.process_line(line):
            return []

    try:
        return [(name.decode("utf-8"), digest) for name, digest in parser.files]
    except UnicodeDecodeError:
        return []


def try_parse_sumfile(path: str | os.PathLike[str], max_hash_size: int = DEFAULT_MAX_HASH_SIZE) -> list[FileSumEntry]:
    """Read and parse a sum file from disk.

    Raises OSError if the file cannot be read. Files too small or too large
    to be sum files give an empty list.
    """
    with open(path, "rb") as handle:
        size = os.fstat(handle.fileno()).st_size
        if size >= _MAX_FILE_SIZE or size < MIN_SUMFILE_SIZE:
            return []
        data = handle.read()
    return parse_sumfile(data, max_hash_size)
"""Turning the paths a user selected into the list of files to hash."""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .settings import Settings
from .sumfile import DEFAULT_MAX_HASH_SIZE, try_parse_sumfile

NOT_SUMFILE = -2
UNKNOWN_SUMFILE = -1

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


@dataclass(frozen=True)
class AlgorithmInfo:
    """A hash algorithm's name and the extensions its sum files use."""

    name: str
    extensions: tuple[str, ...] = ()


@dataclass
class FileInfo:
    """One file to hash and the hashes it is expected to have."""

    # Relative to the base path, or absolute when the file lies outside it.
    relative_path: str = ""
    expected_hashes: list[bytes] = field(default_factory=list)


@dataclass
class ProcessedFileList:
    """The files to hash, keyed by normalized path.

    ``sumfile_type`` is NOT_SUMFILE, UNKNOWN_SUMFILE, or the index of the
    algorithm whose sum file was opened. ``base_path`` ends with a separator
    when it is not empty.
    """

    sumfile_type: int = NOT_SUMFILE
    base_path: str = ""
    files: dict[str, FileInfo] = field(default_factory=dict)


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return the absolute, normalized form of path."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def _read_sums(path: str, max_hash_size: int) -> list[tuple[str, bytes]]:
    try:
        return try_parse_sumfile(path, max_hash_size)
    except OSError:
        return []


def _algorithm_enabled(settings: Settings, name: str) -> bool:
    setting = settings.algorithms.get(name)
    return bool(setting) if setting is not None else False


def _relative_to(path: str, base: str) -> str:
    return path[len(base):] if path.startswith(base) else path


def _split_base(path: str) -> str:
    """Everything up to and including the last separator."""
    cut = max(path.rfind(sep) for sep in _SEPARATORS)
    return path[: cut + 1]


def _common_base(paths: list[str]) -> str:
    ordered = sorted(paths)
    front, back = ordered[0], ordered[-1]
    length = 0
    for a, b in zip(front, back):
        if a != b:
            break
        length += 1
    base = front[:length]
    cut = max(base.rfind(sep) for sep in _SEPARATORS)
    return base[:cut] if cut >= 0 else base


def _list_directory(path: str) -> list[str] | None:
    """Children of a directory, skipping links; None if it cannot be listed."""
    try:
        with os.scandir(path) as it:
            entries = [entry for entry in it if not entry.is_symlink()]
    except OSError:
        return None
    return [os.path.join(path, entry.name) for entry in sorted(entries, key=lambda e: e.name)]


def process_everything(
    paths: Iterable[str | os.PathLike[str]],
    settings: Settings,
    algorithms: Sequence[AlgorithmInfo] = (),
    max_hash_size: int = DEFAULT_MAX_HASH_SIZE,
) -> ProcessedFileList:
    """Expand the selection into files to hash.

    A single selected sum file is opened and the files it names are listed
    with their expected hashes. Directories are expanded recursively. When
    enabled, sum files next to each file supply expected hashes.
    """
    pending = [os.fspath(p) for p in paths]
    result = ProcessedFileList()
    from_sumfile: list[tuple[str, bytes]] = []

    if len(pending) == 1:
        sumfile_path = pending[0]
        sumfile_base = _split_base(sumfile_path)
        result.base_path = sumfile_base

        sums = _read_sums(sumfile_path, max_hash_size)
        if any(name for name, _ in sums):
            result.sumfile_type = UNKNOWN_SUMFILE
            extension = os.path.splitext(sumfile_path)[1]
            if extension.startswith("."):
                wanted = extension[1:]
                for index, algo in enumerate(algorithms):
                    if wanted in algo.extensions:
                        result.sumfile_type = index

            from_sumfile = [(sumfile_base + name, digest) for name, digest in sums if name]

            if not settings.hash_sumfile_too:
                pending.pop(0)
    elif pending:
        result.base_path = _common_base(pending)

    if result.base_path:
        base = normalize_path(result.base_path)
        if not base.endswith(_SEPARATORS):
            base += os.sep
        result.base_path = base

    for path, digest in from_sumfile:
        normalized = normalize_path(path)
        existing = result.files.get(normalized)
        if existing is not None:
            existing.expected_hashes.append(digest)
        else:
            result.files[normalized] = FileInfo(
                relative_path=_relative_to(normalized, result.base_path),
                expected_hashes=[digest],
            )

    queue = deque(pending)
    while queue:
        normalized = normalize_path(queue.popleft())

        if os.path.isdir(normalized):
            children = _list_directory(normalized)
            if children is not None:
                queue.extend(children)
                continue
            # Listing failed: treat it as a file so hashing reports the error.

        info = FileInfo(relative_path=_relative_to(normalized, result.base_path))

        # Never look for neighbouring sum files while processing a sum file.
        if result.sumfile_type == NOT_SUMFILE and settings.look_for_sumfiles:
            for algo in algorithms:
                if not _algorithm_enabled(settings, algo.name):
                    continue
                for ext in algo.extensions:
                    for _, digest in _read_sums(f"{normalized}.{ext}", max_hash_size):
                        info.expected_hashes.append(digest)

        result.files.setdefault(normalized, info)

    return result
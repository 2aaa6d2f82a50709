"""Persistent user settings stored as 32-bit values keyed by name."""

from __future__ import annotations

import contextlib
import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Union

_DWORD_MASK = 0xFFFFFFFF
_DEFAULT_ALGORITHMS = frozenset({"MD5", "SHA-1", "SHA-256", "SHA-512"})

SettingValue = Union[bool, int]


def _rgb(red: int, green: int, blue: int) -> int:
    return red | (green << 8) | (blue << 16)


class SettingsStore:
    """Name to 32-bit value storage, optionally backed by a JSON file.

    Unreadable or malformed files are treated as empty, and failures to
    write are ignored, so settings always fall back to their defaults.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._values = self._load()

    def _load(self) -> dict[str, int]:
        if self._path is None:
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        if not isinstance(raw, dict):
            return {}
        return {
            key: value
            for key, value in raw.items()
            if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _DWORD_MASK
        }

    def get(self, name: str, default: int) -> int:
        """Return the stored value for name, or default if there is none."""
        return self._values.get(name, default)

    def set(self, name: str, value: int) -> None:
        """Store a value, truncated to 32 bits, and persist it."""
        self._values[name] = int(value) & _DWORD_MASK
        if self._path is None:
            return
        with contextlib.suppress(OSError):
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")


class Setting:
    """One named setting, loaded from a store when created."""

    def __init__(self, store: SettingsStore, key: str, default: SettingValue) -> None:
        self._store = store
        self.key = key
        self._is_bool = isinstance(default, bool)
        self._value = self._from_dword(store.get(key, int(default) & _DWORD_MASK))

    def _from_dword(self, dword: int) -> SettingValue:
        # A boolean occupies only the low byte of the stored value.
        return bool(dword & 0xFF) if self._is_bool else dword & _DWORD_MASK

    def _coerce(self, value: SettingValue) -> SettingValue:
        return bool(value) if self._is_bool else int(value) & _DWORD_MASK

    @property
    def value(self) -> SettingValue:
        """The current value."""
        return self._value

    @value.setter
    def value(self, new_value: SettingValue) -> None:
        self._value = self._coerce(new_value)
        self._store.set(self.key, int(self._value))

    def set_no_save(self, value: SettingValue) -> None:
        """Change the value for this session only."""
        self._value = self._coerce(value)

    def __bool__(self) -> bool:
        return bool(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __repr__(self) -> str:
        return f"Setting({self.key!r}, {self._value!r})"


class Settings:
    """All user-facing options with their defaults."""

    def __init__(self, store: SettingsStore | None = None, algorithms: Iterable[str] = ()) -> None:
        self.store = store if store is not None else SettingsStore()
        s = self.store

        self.algorithms: dict[str, Setting] = {
            name: Setting(s, name, name in _DEFAULT_ALGORITHMS) for name in algorithms
        }

        self.display_uppercase = Setting(s, "DisplayUppercase", True)
        self.display_monospace = Setting(s, "DisplayMonospace", True)
        self.look_for_sumfiles = Setting(s, "LookForSumfiles", False)
        self.sumfile_uppercase = Setting(s, "SumfileUppercase", True)
        self.sumfile_unix_endings = Setting(s, "SumfileLF", True)
        self.sumfile_use_double_space = Setting(s, "SumfileDoubleSpace", False)
        self.sumfile_forward_slashes = Setting(s, "SumfileForwardSlash", True)
        self.sumfile_dot_hash_compatible = Setting(s, "SumfileDotHashCompat", True)
        self.sumfile_banner = Setting(s, "SumfileBanner", True)
        self.sumfile_banner_date = Setting(s, "SumfileBannerDate", False)
        self.virustotal_tos = Setting(s, "VTToS", False)
        self.clipboard_autoenable = Setting(s, "ClipboardAutoenable", True)
        self.clipboard_autoenable_if_none = Setting(s, "ClipboardAutoenableIfNone", True)
        self.clipboard_autoenable_exclusive = Setting(s, "ClipboardAutoenableExclusive", False)
        self.checkagainst_autoformat = Setting(s, "CheckAgainstAutoformat", False)
        self.checkagainst_strict = Setting(s, "CheckAgainstStruct", False)
        self.hash_sumfile_too = Setting(s, "HashSumfileToo", False)
        self.sumfile_algorithm_only = Setting(s, "SumfileAlgorithmOnly", True)

        # No hash to compare to: system colors. Error: red text.
        # Mismatch: red background. Secure match: green. Insecure match: orange.
        self.unknown_fg_enabled = Setting(s, "UnknownFgEnabled", False)
        self.unknown_fg_color = Setting(s, "UnknownFgColor", _rgb(0, 0, 0))
        self.unknown_bg_enabled = Setting(s, "UnknownBgEnabled", False)
        self.unknown_bg_color = Setting(s, "UnknownBgColor", _rgb(255, 255, 255))

        self.match_fg_enabled = Setting(s, "MatchFgEnabled", True)
        self.match_fg_color = Setting(s, "MatchFgColor", _rgb(255, 255, 255))
        self.match_bg_enabled = Setting(s, "MatchBgEnabled", True)
        self.match_bg_color = Setting(s, "MatchBgColor", _rgb(45, 170, 23))

        self.mismatch_fg_enabled = Setting(s, "MismatchFgEnabled", True)
        self.mismatch_fg_color = Setting(s, "MismatchFgColor", _rgb(255, 255, 255))
        self.mismatch_bg_enabled = Setting(s, "MismatchBgEnabled", True)
        self.mismatch_bg_color = Setting(s, "MismatchBgColor", _rgb(230, 55, 23))

        self.insecure_fg_enabled = Setting(s, "InsecureFgEnabled", True)
        self.insecure_fg_color = Setting(s, "InsecureFgColor", _rgb(255, 255, 255))
        self.insecure_bg_enabled = Setting(s, "InsecureBgEnabled", True)
        self.insecure_bg_color = Setting(s, "InsecureBgColor", _rgb(170, 82, 23))

        self.error_fg_enabled = Setting(s, "ErrorFgEnabled", True)
        self.error_fg_color = Setting(s, "ErrorFgColor", _rgb(255, 55, 23))
        self.error_bg_enabled = Setting(s, "ErrorBgEnabled", False)
        self.error_bg_color = Setting(s, "ErrorBgColor", _rgb(255, 255, 255))

    def algorithm_enabled(self, name: str) -> bool:
        """Whether the named algorithm is enabled; KeyError if it is unknown."""
        try:
            return bool(self.algorithms[name])
        except KeyError:
            raise KeyError(f"unknown algorithm: {name}") from None
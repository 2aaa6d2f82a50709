"""Hash string helpers, checksum file parsing, settings, path expansion and online hash lookups."""

__version__ = "0.1.0"

__all__ = [
    "b64codec",
    "util",
    "sumfile",
    "settings",
    "https",
    "updatecheck",
    "virustotal",
    "paths",
]
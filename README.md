# hashtab

A library of building blocks for a file hashing tool: reading checksum
files, converting hashes between bytes and text, keeping user settings,
expanding a selection of paths into the files to hash, and looking hashes
up online. It uses only the standard library.

## Modules

- `hashtab.b64codec`: `encode(data)` gives padded standard base64 text.
  `decode(text)` is lenient: padding is optional, the standard and URL-safe
  alphabets are both accepted, and characters outside the alphabet decode as
  zero bits.
- `hashtab.util`:
  - `hash_bytes_to_string(data, upper=True)` and
    `hash_string_to_bytes(text)` convert between bytes and hex. The parser
    allows spaces between byte pairs and returns empty bytes for invalid
    text.
  - `find_hash_in_string(text)` returns the first run of at least four hex
    byte pairs, all in the same case, found in free text.
  - `hex_digit` and `unhex` convert single hex digits.
  - `Version(major, minor, patch)` is an ordered, 16-bit-per-component
    version. `as_number()` packs it into one integer.
  - `floor_icon_size` rounds down to a standard icon size.
    `make_path_long_compatible` adds the `\\?\` prefix to a Windows path
    that does not already start with `\\`.
- `hashtab.sumfile`: parses checksum files in three forms: hex lists in the
  `md5sum` style, SFV files and base64 lists. It also reads files that
  hold a single bare hash. `#` and `;` comments and blank lines are skipped,
  and a UTF-8 BOM is ignored.
  - `parse_sumfile(data, max_hash_size=64)` works on bytes and returns
    `(file_name, hash_bytes)` pairs. A bare hash gives one pair with an empty
    name. Anything that is not a sum file gives an empty list.
  - `try_parse_sumfile(path, max_hash_size=64)` reads a file first and raises
    `OSError` if it cannot be read.
  - `SumFileParser` is the line-by-line parser underneath.
- `hashtab.settings`:
  - `SettingsStore(path=None)` keeps named 32-bit values, optionally in a
    JSON file. An unreadable file counts as empty, and failed writes are
    ignored.
  - `Settings(store, algorithms)` holds every option with its default as a
    `Setting`. Assigning to `.value` saves the change, while `set_no_save`
    changes it for the session only. MD5, SHA-1, SHA-256 and SHA-512 are
    enabled by default. `algorithm_enabled(name)` raises `KeyError` for an
    unknown algorithm.
- `hashtab.https`: `do_https(HTTPRequest(...))` performs one HTTPS request
  and returns an `HTTPResult` holding `http_code`, `body` and a decoded
  `text`. If a step fails it raises `HTTPError`, whose `location` tells
  which step. A non-200 status is returned to the caller, not raised.
- `hashtab.updatecheck`:
  - `get_latest_version()` fetches the tag list of the repository named in
    the `HASHTAB_UPDATE_REPOSITORY` environment variable (`owner/name`). It
    returns the `Version` of the first `vX.Y.Z` tag.
  - `parse_tags_reply(result)` does the parsing on a reply you already have.
  - Failures raise `UpdateCheckError`.
- `hashtab.virustotal`:
  - `build_query(files, algo)` builds the request body for the `HashedFile`
    entries that hashed without error.
  - `parse_reply(result, files, algo)` matches the service's answer back to
    those files as `Result` objects, in file order.
  - `query(files, algo, api_key)` does both around a request.
  - Failures raise `VirusTotalError`.
- `hashtab.paths`: `process_everything(paths, settings, algorithms,
  max_hash_size)` turns a selection into a `ProcessedFileList`. That list
  holds a `base_path`, a `sumfile_type` and `files`, which maps each
  normalized path to a `FileInfo` with its relative path and expected
  hashes.
  - A single selected sum file is opened, and the files it names are listed.
  - Directories are expanded recursively, and symbolic links are skipped.
  - With `look_for_sumfiles` enabled, sum files next to each file (for
    example `file.sha256`) supply expected hashes.
  - `AlgorithmInfo` describes an algorithm's name and sum file extensions.

## Examples

```python
from hashtab.sumfile import parse_sumfile

entries = parse_sumfile(
    b"d41d8cd98f00b204e9800998ecf8427e  empty.txt\n", max_hash_size=64
)
for name, digest in entries:
    print(name, digest.hex())  # empty.txt d41d8cd98f00b204e9800998ecf8427e
```

```python
from hashtab.util import hash_string_to_bytes, hash_bytes_to_string

raw = hash_string_to_bytes("DE AD BE EF")
print(hash_bytes_to_string(raw, upper=False))  # deadbeef
```

```python
from hashtab.paths import AlgorithmInfo, process_everything
from hashtab.settings import Settings

algorithms = [AlgorithmInfo("MD5", ("md5",)), AlgorithmInfo("SHA-256", ("sha256",))]
settings = Settings(algorithms=[a.name for a in algorithms])
listing = process_everything(["downloads/archive.sha256"], settings, algorithms)
for path, info in listing.files.items():
    print(info.relative_path, [h.hex() for h in info.expected_hashes])
```

## What it does not do

- It does not compute hashes. Hashes come from your own code, and the
  algorithms are described to it through `AlgorithmInfo` and the names given
  to `Settings`.
- It has no command line, no window and no clipboard handling.
- Settings live in a JSON file that you choose, not in any system-wide
  configuration store.

## Tests

Install with the `test` extra and run `pytest`.
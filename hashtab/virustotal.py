"""Looking up file hashes in the VirusTotal file report service."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Union
from urllib.parse import quote

from .https import HTTPError, HTTPRequest, HTTPResult, do_https
from .util import hash_bytes_to_string

USER_AGENT = "VirusTotal"  # the service checks for this
SERVER_NAME = "www.virustotal.com"
REPORTS_PATH = "/partners/sysinternals/file-reports"
REQUEST_HEADERS = "Content-Type: application/json\r\n"

# A zero file time formats as the start of its epoch.
_NO_TIME = "1601-01-01 00:00:00"

AlgoKey = Union[int, str]


@dataclass
class HashedFile:
    """A file that has been hashed, as sent to and matched against the service.

    ``hashes`` is indexed by algorithm; a non-zero ``error`` marks a file
    whose hashing failed.
    """

    display_name: str
    hashes: Union[Sequence[bytes], Mapping[Any, bytes]] = field(default_factory=dict)
    creation_time: datetime | None = None
    error: int = 0

    def hash_hex(self, algo: AlgoKey) -> str:
        """The hash for algo as upper-case hex."""
        return hash_bytes_to_string(self.hashes[algo], True)


@dataclass
class Result:
    """The service's verdict for one file."""

    file: HashedFile | None = None
    found: bool = False
    permalink: str = ""
    positives: int = 0
    total: int = 0


class VirusTotalError(RuntimeError):
    """The service could not be queried or gave an unusable reply."""


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _NO_TIME
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} {moment:%H:%M:%S}"


def build_query(files: Iterable[HashedFile], algo: AlgoKey) -> bytes:
    """Build the JSON request body for every file that hashed successfully."""
    entries = [
        {
            "autostart_location": "",
            "autostart_entry": "",
            "hash": f.hash_hex(algo),
            "image_path": f.display_name,
            "creation_datetime": _format_time(f.creation_time),
        }
        for f in files
        if f.error == 0
    ]
    return json.dumps(entries).encode("utf-8")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _result_from_entry(entry: Mapping[str, Any]) -> Result:
    if not entry["found"]:
        return Result(found=False)
    permalink = entry.get("permalink")
    positives = entry.get("positives")
    total = entry.get("total")
    return Result(
        found=True,
        permalink=permalink if isinstance(permalink, str) else "",
        positives=positives if _is_int(positives) else 0,
        total=total if _is_int(total) else 0,
    )


def parse_reply(result: HTTPResult, files: Iterable[HashedFile], algo: AlgoKey) -> list[Result]:
    """Match a reply to the queried files, in file order.

    Files the reply does not mention are left out. Raises VirusTotalError
    for a non-200 status, unparseable JSON or a reply without a data list.
    """
    body = result.text
    if result.http_code != 200:
        raise VirusTotalError(f"HTTP Status {result.http_code} received. Server says: {body}")

    try:
        root = json.loads(body)
    except ValueError:
        raise VirusTotalError(f"JSON parse error. Body: {body}") from None

    data = root.get("data") if isinstance(root, dict) else None
    if not isinstance(data, list):
        raise VirusTotalError(f"Malformed reply. Body: {body}")

    by_hash: dict[str, Result] = {}
    for entry in data:
        if not isinstance(entry, dict):
            continue
        if isinstance(entry.get("found"), bool) and isinstance(entry.get("hash"), str):
            by_hash[entry["hash"]] = _result_from_entry(entry)

    results = []
    for f in files:
        if f.error != 0:
            continue
        verdict = by_hash.get(f.hash_hex(algo))
        if verdict is not None:
            results.append(
                Result(
                    file=f,
                    found=verdict.found,
                    permalink=verdict.permalink,
                    positives=verdict.positives,
                    total=verdict.total,
                )
            )
    return results


def query(files: Sequence[HashedFile], algo: AlgoKey, api_key: str) -> list[Result]:
    """Send the files' hashes to the service and return its verdicts."""
    files = list(files)
    request = HTTPRequest(
        server_name=SERVER_NAME,
        method="POST",
        uri=f"{REPORTS_PATH}?apikey={quote(api_key, safe='')}",
        user_agent=USER_AGENT,
        headers=REQUEST_HEADERS,
        body=build_query(files, algo),
    )
    try:
        reply = do_https(request)
    except HTTPError as exc:
        raise VirusTotalError(str(exc)) from exc
    return parse_reply(reply, files, algo)
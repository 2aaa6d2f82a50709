"""Looking up the newest released version from a repository's tag list."""

from __future__ import annotations

import json
import os
import re

from .https import HTTPError, HTTPRequest, HTTPResult, do_https
from .util import Version

USER_AGENT = "OpenHashTab_Update_Checker"
SERVER_NAME = "api.github.com"
REQUEST_HEADERS = "Content-Type: application/json\r\nAccept: application/vnd.github.v3+json\r\n"

# The repository to check, as "owner/name". Taken from the environment.
REPOSITORY_ENV = "HASHTAB_UPDATE_REPOSITORY"

_VERSION_RE = re.compile(r"v\s*(\d+)\.\s*(\d+)\.\s*(\d+)", re.ASCII)


class UpdateCheckError(RuntimeError):
    """The latest version could not be determined."""


def _parse_version(tag: str) -> Version:
    match = _VERSION_RE.match(tag)
    if match is None:
        raise UpdateCheckError(f"Malformed version number: {tag}")
    # Components are 16-bit and wrap like an unsigned short would.
    major, minor, patch = (int(part) & 0xFFFF for part in match.groups())
    return Version(major, minor, patch)


def parse_tags_reply(result: HTTPResult) -> Version:
    """Extract the version of the first tag in a tag-list reply.

    Raises UpdateCheckError for a non-200 status, unparseable JSON, a
    reply of the wrong shape or a tag name that is not ``vX.Y.Z``.
    """
    body = result.text
    if result.http_code != 200:
        raise UpdateCheckError(f"HTTP Status {result.http_code} received. Server says: {body}")

    try:
        root = json.loads(body)
    except ValueError:
        raise UpdateCheckError(f"JSON parse error. Body: {body}") from None

    if not isinstance(root, list) or not root:
        raise UpdateCheckError(f"Malformed reply. Body: {body}")
    first = root[0]
    if not isinstance(first, dict) or not isinstance(first.get("name"), str):
        raise UpdateCheckError(f"Malformed reply. Body: {body}")

    return _parse_version(first["name"])


def get_latest_version() -> Version:
    """Ask the server for the newest tagged version of the configured repository."""
    repository = os.environ.get(REPOSITORY_ENV, "").strip().strip("/")
    if not repository:
        raise UpdateCheckError(f"No repository to check; set {REPOSITORY_ENV} to owner/name")

    request = HTTPRequest(
        server_name=SERVER_NAME,
        method="GET",
        uri=f"/repos/{repository}/tags",
        user_agent=USER_AGENT,
        headers=REQUEST_HEADERS,
    )
    try:
        reply = do_https(request)
    except HTTPError as exc:
        raise UpdateCheckError(str(exc)) from exc
    return parse_tags_reply(reply)
"""A minimal HTTPS client used for update checks and hash lookups."""

from __future__ import annotations

import http.client
from dataclasses import dataclass

HTTPS_PORT = 443

# Steps at which a request can fail, reported in HTTPError.location.
LOCATION_SESSION = 2
LOCATION_CONNECT = 3
LOCATION_SEND = 5
LOCATION_RECEIVE = 6
LOCATION_READ = 8


@dataclass(frozen=True)
class HTTPRequest:
    """An HTTPS request. Headers use the raw ``Name: value\\r\\n`` form."""

    server_name: str
    method: str = "GET"
    uri: str = "/"
    user_agent: str = ""
    headers: str = ""
    body: bytes = b""
    timeout: float = 30.0


@dataclass(frozen=True)
class HTTPResult:
    """The status code and body of a completed request."""

    http_code: int
    body: bytes

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, with undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")


class HTTPError(Exception):
    """A request failed before a complete response was read."""

    def __init__(self, location: int, cause: BaseException) -> None:
        self.location = location
        errno = getattr(cause, "errno", None)
        self.error_code = errno if isinstance(errno, int) else 0
        super().__init__(f"Error {self.error_code:08X} at {location}: {cause}")


def _parse_headers(raw: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in raw.split("\r\n"):
        if not line.strip():
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"malformed header line: {line!r}")
        headers[name.strip()] = value.strip()
    return headers


def do_https(request: HTTPRequest) -> HTTPResult:
    """Perform the request and return the response.

    Raises HTTPError if any step fails and ValueError for malformed headers.
    A non-200 status is not an error here; it is returned to the caller.
    """
    headers = {}
    if request.user_agent:
        headers["User-Agent"] = request.user_agent
    headers.update(_parse_headers(request.headers))

    try:
        connection = http.client.HTTPSConnection(request.server_name, HTTPS_PORT, timeout=request.timeout)
    except (OSError, ValueError, http.client.HTTPException) as exc:
        raise HTTPError(LOCATION_SESSION, exc) from exc

    try:
        try:
            connection.connect()
        except (OSError, http.client.HTTPException) as exc:
            raise HTTPError(LOCATION_CONNECT, exc) from exc

        try:
            connection.request(request.method, request.uri, body=request.body or None, headers=headers)
        except (OSError, http.client.HTTPException) as exc:
            raise HTTPError(LOCATION_SEND, exc) from exc

        try:
            response = connection.getresponse()
        except (OSError, http.client.HTTPException) as exc:
            raise HTTPError(LOCATION_RECEIVE, exc) from exc

        try:
            body = response.read()
        except (OSError, http.client.HTTPException) as exc:
            raise HTTPError(LOCATION_READ, exc) from exc

        return HTTPResult(http_code=int(response.status), body=body)
    finally:
        connection.close()
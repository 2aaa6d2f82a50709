import http.client
from unittest.mock import patch

import pytest

from hashtab.https import HTTPError, HTTPRequest, HTTPResult, do_https


def _request(**overrides):
    fields = dict(
        server_name="api.example.com",
        uri="/tags",
        user_agent="agent",
        headers="Content-Type: application/json\r\nAccept: text/plain\r\n",
    )
    fields.update(overrides)
    return HTTPRequest(**fields)


@patch("http.client.HTTPSConnection")
def test_successful_request(connection_cls):
    connection = connection_cls.return_value
    response = connection.getresponse.return_value
    response.status = 200
    response.read.return_value = b"[]"

    result = do_https(_request())

    assert result == HTTPResult(http_code=200, body=b"[]")
    assert connection_cls.call_args.args == ("api.example.com", 443)
    call = connection.request.call_args
    assert call.args == ("GET", "/tags")
    assert call.kwargs["body"] is None
    assert call.kwargs["headers"] == {
        "User-Agent": "agent",
        "Content-Type": "application/json",
        "Accept": "text/plain",
    }
    connection.close.assert_called_once()


@patch("http.client.HTTPSConnection")
def test_body_is_sent(connection_cls):
    connection = connection_cls.return_value
    response = connection.getresponse.return_value
    response.status = 201
    response.read.return_value = b"ok"

    result = do_https(_request(method="POST", body=b'{"a": 1}'))

    assert result.http_code == 201
    assert result.text == "ok"
    call = connection.request.call_args
    assert call.args == ("POST", "/tags")
    assert call.kwargs["body"] == b'{"a": 1}'


@patch("http.client.HTTPSConnection")
def test_non_200_is_returned(connection_cls):
    connection = connection_cls.return_value
    response = connection.getresponse.return_value
    response.status = 404
    response.read.return_value = b"not found"

    result = do_https(_request())

    assert (result.http_code, result.body) == (404, b"not found")


@patch("http.client.HTTPSConnection")
def test_connect_failure(connection_cls):
    connection = connection_cls.return_value
    connection.connect.side_effect = ConnectionRefusedError(111, "refused")

    with pytest.raises(HTTPError) as info:
        do_https(_request())

    assert info.value.location == 3
    assert info.value.error_code == 111
    connection.close.assert_called_once()


@patch("http.client.HTTPSConnection")
def test_send_failure(connection_cls):
    connection = connection_cls.return_value
    connection.request.side_effect = BrokenPipeError(32, "broken pipe")

    with pytest.raises(HTTPError) as info:
        do_https(_request())

    assert info.value.location == 5


@patch("http.client.HTTPSConnection")
def test_receive_failure(connection_cls):
    connection = connection_cls.return_value
    connection.getresponse.side_effect = http.client.RemoteDisconnected("closed")

    with pytest.raises(HTTPError) as info:
        do_https(_request())

    assert info.value.location == 6
    assert info.value.error_code == 0


@patch("http.client.HTTPSConnection")
def test_read_failure(connection_cls):
    connection = connection_cls.return_value
    response = connection.getresponse.return_value
    response.status = 200
    response.read.side_effect = http.client.IncompleteRead(b"par")

    with pytest.raises(HTTPError) as info:
        do_https(_request())

    assert info.value.location == 8


@patch("http.client.HTTPSConnection")
def test_malformed_header_rejected(connection_cls):
    with pytest.raises(ValueError):
        do_https(_request(headers="NoColonHere\r\n"))
    connection_cls.assert_not_called()
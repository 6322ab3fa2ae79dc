"""Tests for the aiohttp transport against an in-process server."""

import asyncio
import base64
import json
import socket

import pytest

from volt.suite import AuthConfig, AuthType, HTTPMethod
from volt.transport import (
    HTTPRequest,
    HTTPTransport,
    TransportError,
    TransportErrorKind,
    apply_auth_headers,
)


def free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def send(serve, path, **kwargs):
    """Serve the test app and send one request to ``path``."""

    async def scenario():
        async with serve() as base_url:
            async with HTTPTransport() as transport:
                return await transport.send(HTTPRequest(url=base_url + path, **kwargs))

    return asyncio.run(scenario())


# --- auth headers ---


def test_apply_auth_headers():
    headers = {}
    apply_auth_headers(headers, AuthConfig(type=AuthType.BEARER, token="t"))
    assert headers == {"Authorization": "Bearer t"}

    headers = {}
    apply_auth_headers(headers, AuthConfig(type=AuthType.API_KEY, key="k", header="X-Key"))
    assert headers == {"X-Key": "k"}

    headers = {}
    apply_auth_headers(headers, AuthConfig(type=AuthType.BASIC, username="u", password="p"))
    assert headers == {"Authorization": "Basic " + base64.b64encode(b"u:p").decode()}

    headers = {}
    apply_auth_headers(headers, None)
    apply_auth_headers(headers, AuthConfig(type=AuthType.BEARER))
    assert headers == {}


# --- send ---


def test_get_returns_response_snapshot(serve):
    response = send(serve, "/users/7")
    assert response.status_code == 200
    assert response.status_text == "OK"
    assert response.header("x-request-id") == "req-7"
    assert response.has_header("CONTENT-TYPE")
    assert json.loads(response.body)["data"]["id"] == 7
    assert isinstance(response.timing_ms, int)
    assert response.timing_ms >= 0


def test_post_sends_headers_and_body(serve):
    response = send(
        serve,
        "/echo",
        method=HTTPMethod.POST,
        headers={"X-Trace": "abc"},
        body='{"a": 1}',
    )
    echoed = json.loads(response.body)
    assert echoed["method"] == "POST"
    assert echoed["headers"]["X-Trace"] == "abc"
    assert echoed["body"] == '{"a": 1}'


@pytest.mark.parametrize(
    "auth,header,value",
    [
        (AuthConfig(type=AuthType.BEARER, token="abc"), "Authorization", "Bearer abc"),
        (AuthConfig(type=AuthType.API_KEY, key="secret"), "X-API-Key", "secret"),
        (
            AuthConfig(type=AuthType.BASIC, username="bob", password="pw"),
            "Authorization",
            "Basic " + base64.b64encode(b"bob:pw").decode(),
        ),
    ],
)
def test_auth_is_sent(serve, auth, header, value):
    response = send(serve, "/echo", auth=auth)
    assert json.loads(response.body)["headers"][header] == value


def test_error_status_is_a_response(serve):
    response = send(serve, "/me")
    assert response.status_code == 401


def test_redirects_followed_by_default(serve):
    response = send(serve, "/redirect")
    assert response.status_code == 200
    assert response.header("X-Request-Id") == "req-1"


def test_redirects_not_followed_when_disabled(serve):
    response = send(serve, "/redirect", follow_redirects=False)
    assert response.status_code == 302
    assert response.header("Location") == "/users/1"


# --- failures ---


def test_timeout_raises_transport_error(serve):
    with pytest.raises(TransportError) as exc_info:
        send(serve, "/slow", timeout_ms=100)
    assert exc_info.value.kind is TransportErrorKind.TIMEOUT
    assert str(exc_info.value) == "Request timed out after 100ms"


def test_connection_refused_raises_transport_error():
    url = f"http://127.0.0.1:{free_port()}/"

    async def scenario():
        async with HTTPTransport() as transport:
            return await transport.send(HTTPRequest(url=url))

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.kind is TransportErrorKind.CONNECTION
    assert exc_info.value.to_dict()["url"] == url


def test_send_without_connect():
    transport = HTTPTransport()
    assert not transport.is_connected

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(transport.send(HTTPRequest(url="http://localhost/")))
    assert exc_info.value.kind is TransportErrorKind.NOT_CONNECTED
    assert repr(transport) == "HTTPTransport(status=disconnected)"

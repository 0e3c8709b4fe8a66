# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from chainhttp.config import HttpSettings
from chainhttp.errors import ErrorCategory, TransportError
from chainhttp.http.httpx_transport import HttpxTransport, render_header_block
from chainhttp.http.models import TransportOptions
from chainhttp.http.request import HttpRequest


def _transport(handler, **settings) -> HttpxTransport:
    cfg = HttpSettings(user_agent="UA/1.0", **settings)
    return HttpxTransport(cfg, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_execute_renders_raw_response_and_sends_repeated_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["accept"] = request.headers.get_list("Accept")
        seen["user_agent"] = request.headers["User-Agent"]
        seen["body"] = request.content
        return httpx.Response(
            200,
            headers=[("Content-Type", "text/plain"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            content=b"hello world",
        )

    transport = _transport(handler)
    result = transport.execute(
        "http://example.test/",
        TransportOptions(
            uri="http://example.test/",
            settings={"method": "post", "body": "payload"},
            header_lines=["Accept: text/html", "Accept: application/json"],
        ),
    )
    assert seen == {
        "method": "POST",
        "accept": ["text/html", "application/json"],
        "user_agent": "UA/1.0",
        "body": b"payload",
    }
    assert result.raw.startswith("HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n")
    assert "Set-Cookie: a=1\r\nSet-Cookie: b=2\r\n" in result.raw
    assert result.raw.endswith("\r\n\r\nhello world")
    assert result.info.status_code == 200
    assert result.info.redirect_count == 0
    assert result.info.header_blocks == 1
    assert result.info.effective_url == "http://example.test/"


def test_execute_without_headers_returns_body_only():
    transport = _transport(lambda request: httpx.Response(200, content=b"plain"))
    result = transport.execute("http://example.test/", TransportOptions(uri="http://example.test/", include_headers=False))
    assert result.raw == "plain"


def test_explicit_user_agent_header_wins():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get_list("User-Agent")
        return httpx.Response(204)

    transport = _transport(handler)
    transport.execute("http://example.test/", TransportOptions(uri="http://example.test/", header_lines=["User-Agent: mine"]))
    assert seen["ua"] == ["mine"]


def test_redirect_history_becomes_header_blocks():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "/end"})
        return httpx.Response(200, headers={"X-Final": "yes"}, content=b"done")

    transport = _transport(handler)
    with HttpRequest("http://example.test/start", transport=transport) as req:
        req.execute()
        assert req.get_response_status("code") == "200"
        assert req.get_response_header("X-Final") == ["yes"]
        assert req.get_response_body() == "done"
        assert req.get_raw_response().startswith("HTTP/1.1 302 Found\r\n")
        info = req.get_info()
        assert info.redirect_count == 1
        assert info.header_blocks == 2
        assert info.effective_url == "http://example.test/end"


def test_redirects_not_followed_when_disabled():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, headers={"Location": "/elsewhere"}, content=b"moved")

    req = HttpRequest("http://example.test/", transport=_transport(handler))
    req.set_option("follow_redirects", False).execute()
    assert req.get_response_status("code") == "301"
    assert req.get_response_header("Location") == ["/elsewhere"]
    assert req.get_response_body() == "moved"


def test_too_many_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "/loop"})

    req = HttpRequest("http://example.test/", transport=_transport(handler))
    req.set_option("max_redirects", 2)
    with pytest.raises(TransportError) as info:
        req.execute()
    assert info.value.code == ErrorCategory.TOO_MANY_REDIRECTS


def test_body_is_capped():
    transport = _transport(lambda request: httpx.Response(200, content=b"x" * 100), max_body_bytes=10)
    result = transport.execute("http://example.test/", TransportOptions(uri="http://example.test/"))
    assert result.raw.endswith("\r\n\r\n" + "x" * 10)
    assert result.info.body_truncated is True


def test_transport_errors_are_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = _transport(handler)
    with pytest.raises(TransportError) as info:
        transport.execute("http://example.test/", TransportOptions(uri="http://example.test/"))
    assert info.value.code == ErrorCategory.CONNECTION_ERROR
    assert info.value.message == "connection refused"
    assert isinstance(info.value.__cause__, httpx.ConnectError)


def test_timeout_errors_are_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    req = HttpRequest("http://example.test/", transport=_transport(handler))
    with pytest.raises(TransportError) as info:
        req.execute()
    assert info.value.code == ErrorCategory.TIMEOUT
    assert req.get_response_body() is None


def test_render_header_block_normalizes_version_and_reason():
    response = httpx.Response(
        503,
        headers=[("X-Case", "Kept")],
        extensions={"http_version": b"HTTP/2", "reason_phrase": b""},
    )
    assert render_header_block(response) == "HTTP/2.0 503 Service Unavailable\r\nX-Case: Kept\r\n\r\n"


def test_close_closes_client():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    HttpxTransport(HttpSettings(), client=client).close()
    assert client.is_closed


def test_binary_body_round_trips():
    payload = b"\x89PNG\r\n\x1a\n\xff\xfe\x00\x01"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Type": "image/png"}, content=payload)

    req = HttpRequest("http://example.test/logo.png", transport=_transport(handler)).execute()
    codec = req.get_info().meta["body_encoding"]
    assert codec == "latin-1"
    assert req.get_response_body().encode(codec) == payload


def test_declared_charset_is_used_for_text():
    payload = "café ☃".encode("utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Type": "text/plain; charset=utf-8"}, content=payload)

    req = HttpRequest("http://example.test/", transport=_transport(handler)).execute()
    assert req.get_response_body() == "café ☃"
    assert req.get_info().meta["body_encoding"] == "utf-8"
    assert req.get_response_body().encode("utf-8") == payload


def test_redirect_body_is_not_buffered():
    class CountingStream(httpx.SyncByteStream):
        def __init__(self):
            self.bytes_sent = 0
            self.closed = False

        def __iter__(self):
            for _ in range(1000):
                self.bytes_sent += 1000
                yield b"x" * 1000

        def close(self):
            self.closed = True

    hop_stream = CountingStream()

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(302, headers={"Location": "/end"}, stream=hop_stream)
        return httpx.Response(200, content=b"done")

    transport = _transport(handler, max_body_bytes=10)
    result = transport.execute("http://example.test/start", TransportOptions(uri="http://example.test/start"))
    assert hop_stream.bytes_sent <= 10
    assert hop_stream.closed is True
    assert result.info.redirect_count == 1
    assert result.raw.endswith("\r\n\r\ndone")

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed TransportClient implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import transport_error_from_exception
from .headers import parse_header_lines
from .models import TransferInfo, TransportOptions, TransportResult
from .transport import TransportClient

logger = logging.getLogger(__name__)

# Options a caller may set through HttpRequest.set_option().
TRANSPORT_OPTIONS = frozenset(
    {
        "method",
        "body",
        "timeout",
        "follow_redirects",
        "max_redirects",
        "user_agent",
    }
)

_TRANSPORT_EXCEPTIONS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, OSError)


def render_header_block(response: httpx.Response) -> str:
    """Render a response's status line and headers as raw HTTP/1.x text."""
    version = response.http_version or "HTTP/1.1"
    if "." not in version:
        version = f"{version}.0"
    reason = response.reason_phrase or httpx.codes.get_reason_phrase(response.status_code)
    encoding = response.headers.encoding
    lines = [f"{version} {response.status_code} {reason}"]
    lines.extend(f"{key.decode(encoding)}: {value.decode(encoding)}" for key, value in response.headers.raw)
    return "\r\n".join(lines) + "\r\n\r\n"


def decode_body(content: bytes, encoding: str | None) -> tuple[str, str]:
    """
    Decode a body without losing bytes.

    Falls back to latin-1 when the declared (or default) charset is unknown or does not
    fit the bytes, so ``text.encode(codec)`` always gives back ``content``.
    """
    if encoding:
        try:
            return content.decode(encoding), encoding
        except (LookupError, UnicodeDecodeError):
            pass
    return content.decode("latin-1"), "latin-1"


class HttpxTransport(TransportClient):
    """Synchronous httpx client wrapper producing raw response text."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def execute(self, uri: str, options: TransportOptions) -> TransportResult:
        config: dict[str, Any] = dict(options.settings)
        method = str(config.get("method") or "GET").upper()
        follow_redirects = bool(config.get("follow_redirects", self.settings.allow_redirects))
        max_redirects = int(config.get("max_redirects", self.settings.max_redirects))
        timeout = config.get("timeout", self.settings.timeout)

        headers = parse_header_lines(options.header_lines)
        if not any(name.lower() == "user-agent" for name, _ in headers):
            headers.append(("User-Agent", str(config.get("user_agent") or self.settings.user_agent)))

        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024

        started = time.monotonic()
        blocks: list[str] = []
        try:
            request = self._client.build_request(
                method,
                uri,
                headers=headers,
                content=config.get("body"),
                timeout=timeout,
            )
            redirects = 0
            while True:
                logger.debug("%s %s", request.method, request.url)
                response = self._client.send(request, stream=True, follow_redirects=False)
                try:
                    blocks.append(render_header_block(response))
                    next_request = response.next_request if follow_redirects else None
                    if next_request is None:
                        content, truncated = self._read_body(response, max_body_bytes)
                        break
                finally:
                    response.close()
                redirects += 1
                if redirects > max_redirects:
                    raise httpx.TooManyRedirects(f"Exceeded maximum allowed redirects ({max_redirects})", request=next_request)
                request = next_request
        except _TRANSPORT_EXCEPTIONS as exc:
            logger.debug("Transfer to %s failed: %s", uri, exc)
            raise transport_error_from_exception(exc) from exc

        text, body_encoding = decode_body(content, response.charset_encoding or response.encoding)

        raw = "".join(blocks) + text if options.include_headers else text
        info = TransferInfo(
            effective_url=str(response.url),
            status_code=response.status_code,
            redirect_count=redirects,
            elapsed=time.monotonic() - started,
            header_blocks=len(blocks),
            body_truncated=truncated,
            meta={
                "body_bytes_read": len(content),
                "body_bytes_limit": max_body_bytes,
                "body_encoding": body_encoding,
                "http_version": response.http_version,
            },
        )
        return TransportResult(raw=raw, info=info)

    @staticmethod
    def _read_body(response: httpx.Response, max_body_bytes: int) -> tuple[bytes, bool]:
        content = bytearray()
        truncated = False
        for chunk in response.iter_bytes():
            if not chunk:
                continue
            remaining = max_body_bytes - len(content)
            if remaining <= 0:
                truncated = True
                break
            if len(chunk) > remaining:
                content.extend(chunk[:remaining])
                truncated = True
                break
            content.extend(chunk)
        return bytes(content), truncated

    def close(self) -> None:
        self._client.close()

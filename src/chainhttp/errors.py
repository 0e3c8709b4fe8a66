# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    INVALID_URL = "INVALID_URL"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ChainHttpError(Exception):
    """Base class for every error raised by chainhttp."""


class TransportError(ChainHttpError):
    """Transport-level failure (connection refused, DNS failure, timeout, ...)."""

    def __init__(self, code: ErrorCategory | str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        code = self.code.value if isinstance(self.code, ErrorCategory) else self.code
        return f"[{code}] {self.message}"


class MissingResponseError(ChainHttpError):
    """A response accessor was used before any response exists."""

    def __init__(self, message: str = "No response available; call execute() first"):
        super().__init__(message)


class PlausibleHeadersNotFoundError(ChainHttpError):
    """The raw response has no recognizable header/body boundary."""

    def __init__(self, message: str = "Could not find plausible response headers"):
        super().__init__(message)


class ConfigurationError(ChainHttpError):
    """Invalid request configuration, rejected before any network activity."""


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.TooManyRedirects):
        return ErrorCategory.TOO_MANY_REDIRECTS

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_URL

    # httpx wraps the socket error; look at the cause chain for DNS and TLS failures.
    cause = exc.__cause__ or exc.__context__
    if cause is not None and cause is not exc:
        nested = categorize_exception(cause)
        if nested in (ErrorCategory.DNS_ERROR, ErrorCategory.SSL_ERROR):
            return nested

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.PROTOCOL_ERROR: "Malformed HTTP exchange",
        ErrorCategory.TOO_MANY_REDIRECTS: "Redirect limit exceeded",
        ErrorCategory.INVALID_URL: "Invalid or unsupported URL",
        ErrorCategory.UNKNOWN_ERROR: "Transfer failed",
        None: "",
    }
    return mapping.get(category, "Transfer failed")


def transport_error_from_exception(exc: BaseException) -> TransportError:
    """Wrap a transport exception into TransportError, keeping its message."""
    category = categorize_exception(exc)
    return TransportError(category, str(exc) or error_category_to_reason(category))


__all__ = [
    "ChainHttpError",
    "ConfigurationError",
    "ErrorCategory",
    "MissingResponseError",
    "PlausibleHeadersNotFoundError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
    "transport_error_from_exception",
]

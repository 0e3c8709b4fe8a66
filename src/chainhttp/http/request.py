# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Chainable HTTP request object.

``HttpRequest`` collects a URI, transport options and outgoing headers, hands them to a
TransportClient, and splits the raw text it gets back into status line, headers and
body. Every configuration method returns the request itself so calls can be chained::

    with HttpRequest("https://example.com") as req:
        req.set_outgoing_header("Accept", "text/html").set_option("timeout", 5).execute()
        print(req.get_response_status("code"), req.get_response_body())
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import ConfigurationError, MissingResponseError
from .headers import coerce_header_values, format_header_lines
from .httpx_transport import TRANSPORT_OPTIONS
from .models import HeaderTable, SplitResponse, StatusLine, TransferInfo, TransportOptions
from .parsing import parse_header_block, split_response
from .transport import TransportClient, create_default_transport

logger = logging.getLogger(__name__)

# Option names that would smuggle headers past set_outgoing_header().
HEADER_OPTION_NAMES = frozenset({"header", "headers", "httpheader", "http_header", "http_headers"})


def _validate_option(name: str, value: Any) -> None:
    if name == "method":
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError("Option 'method' must be a non-empty string")
    elif name == "body":
        if value is not None and not isinstance(value, (str, bytes, bytearray)):
            raise ConfigurationError("Option 'body' must be str, bytes or None")
    elif name == "timeout":
        if value is not None and (isinstance(value, bool) or not isinstance(value, Real) or value < 0):
            raise ConfigurationError("Option 'timeout' must be a non-negative number or None")
    elif name == "follow_redirects":
        if not isinstance(value, bool):
            raise ConfigurationError("Option 'follow_redirects' must be a bool")
    elif name == "max_redirects":
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigurationError("Option 'max_redirects' must be a non-negative int")
    elif name == "user_agent":
        if not isinstance(value, str):
            raise ConfigurationError("Option 'user_agent' must be a string")


class HttpRequest:
    """Builder-style wrapper around one transport session."""

    def __init__(
        self,
        uri: str | None = None,
        *,
        transport: TransportClient | None = None,
        settings: HttpSettings | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._uri = uri
        self._options: dict[str, Any] = {}
        self._outgoing: dict[str, list[str]] = {}

        self._transport = transport
        self._owns_transport = transport is None
        self._finalizer: weakref.finalize | None = None

        self._raw: str | None = None
        self._split: SplitResponse | None = None
        self._info: TransferInfo | None = None
        # None until first read; replaced once, never reset for the same response.
        self._header_table: HeaderTable | None = None
        self._header_lock = threading.Lock()

    # -- configuration -------------------------------------------------------------------

    @property
    def uri(self) -> str | None:
        return self._uri

    def set_uri(self, uri: str) -> HttpRequest:
        if not isinstance(uri, str) or not uri.strip():
            raise ConfigurationError("URI must be a non-empty string")
        self._uri = uri
        return self

    def set_option(self, name: str, value: Any) -> HttpRequest:
        """Set one transport option (see ``TRANSPORT_OPTIONS``)."""
        self._options[self._check_option(name, value)] = value
        return self

    def set_options(self, options: Mapping[str, Any]) -> HttpRequest:
        # Validate everything first so a bad entry leaves the options untouched.
        staged = dict(self._options)
        for name, value in options.items():
            staged[self._check_option(name, value)] = value
        self._options = staged
        return self

    def _check_option(self, name: str, value: Any) -> str:
        key = str(name).lower()
        if key in HEADER_OPTION_NAMES:
            raise ConfigurationError(
                f"Headers cannot be set through option {name!r}; use set_outgoing_header()/set_outgoing_headers()"
            )
        if key not in self._supported_options():
            raise ConfigurationError(f"Unknown transport option {name!r}")
        _validate_option(key, value)
        return key

    def get_option(self, name: str) -> Any:
        return self._options.get(str(name).lower())

    def get_options(self) -> dict[str, Any]:
        return dict(self._options)

    def set_outgoing_header(self, name: str, value: str | Sequence[str]) -> HttpRequest:
        """Set an outgoing header, replacing any previous value for ``name``."""
        self._outgoing[name] = coerce_header_values(name, value)
        return self

    def set_outgoing_headers(self, headers: Mapping[str, str | Sequence[str]]) -> HttpRequest:
        staged = {name: coerce_header_values(name, value) for name, value in headers.items()}
        self._outgoing.update(staged)
        return self

    def remove_outgoing_header(self, name: str) -> HttpRequest:
        self._outgoing.pop(name, None)
        return self

    def get_outgoing_header(self, name: str) -> list[str] | None:
        values = self._outgoing.get(name)
        return list(values) if values is not None else None

    def get_outgoing_headers(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._outgoing.items()}

    # -- execution -----------------------------------------------------------------------

    def execute(self) -> HttpRequest:
        """Perform the transfer and split the raw response.

        Transport errors propagate unchanged. If anything fails, response accessors keep
        the values of the previous execution.
        """
        if not self._uri:
            raise ConfigurationError("No URI configured; call set_uri() first")

        options = TransportOptions(
            uri=self._uri,
            settings=dict(self._options),
            include_headers=True,
            header_lines=format_header_lines(self._outgoing),
        )
        transport = self._acquire_transport()
        logger.debug("Executing %s %s", options.settings.get("method", "GET"), self._uri)
        result = transport.execute(self._uri, options)
        self._store_response(result.raw, result.info)
        return self

    def set_raw_response(self, raw: str) -> HttpRequest:
        """Inject a raw response as if a transfer had returned it."""
        self._store_response(raw, None)
        return self

    def _store_response(self, raw: str, info: TransferInfo | None) -> None:
        split = split_response(raw)
        with self._header_lock:
            self._raw = raw
            self._split = split
            self._info = info
            self._header_table = None

    def _acquire_transport(self) -> TransportClient:
        if self._transport is None:
            self._transport = create_default_transport(self.settings)
            self._owns_transport = True
            self._finalizer = weakref.finalize(self, self._transport.close)
        return self._transport

    def _supported_options(self) -> frozenset[str]:
        supported = getattr(self._transport, "supported_options", None)
        return frozenset(supported) if supported is not None else TRANSPORT_OPTIONS

    # -- response accessors --------------------------------------------------------------

    def get_raw_response(self) -> str | None:
        return self._raw

    def get_response_body(self) -> str | None:
        return self._split.body if self._split is not None else None

    def get_response_headers(self) -> HeaderTable:
        """Return the response HeaderTable, parsing the header block on first call."""
        self._require_response()
        table = self._header_table
        if table is not None:
            return table
        with self._header_lock:
            if self._header_table is None:
                self._header_table = parse_header_block(self._split.header_block)
            return self._header_table

    def get_response_header(self, name: str) -> list[str] | None:
        values = self.get_response_headers().get(name)
        return list(values) if values is not None else None

    def get_response_status(self, part: str | None = None) -> StatusLine | str:
        """Return the whole StatusLine, or one of ``raw``, ``version``, ``code``, ``status``."""
        status = self._require_response().status
        if part is None:
            return status
        return status.part(part)

    def get_info(self) -> TransferInfo | None:
        return self._info

    def _require_response(self) -> SplitResponse:
        split = self._split
        if split is None:
            raise MissingResponseError()
        return split

    # -- lifecycle -----------------------------------------------------------------------

    def close(self) -> None:
        """Release the transport this request created. Injected transports stay open."""
        if self._finalizer is not None:
            self._finalizer()
            self._finalizer = None
        if self._owns_transport:
            self._transport = None

    def __enter__(self) -> HttpRequest:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["HEADER_OPTION_NAMES", "HttpRequest"]

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
chainhttp package entrypoint.

A chainable request object on top of an injectable transport client. The transport
returns the raw response text, headers included, and chainhttp splits it into a
status line, a header table and a body.
"""

from .config import HttpSettings, load_http_settings
from .errors import (
    ChainHttpError,
    ConfigurationError,
    ErrorCategory,
    MissingResponseError,
    PlausibleHeadersNotFoundError,
    TransportError,
)
from .http import (
    HeaderTable,
    HttpRequest,
    HttpxTransport,
    StatusLine,
    StubTransport,
    TransferInfo,
    TransportClient,
    TransportOptions,
    TransportResult,
    create_default_transport,
    parse_header_block,
    parse_status_line,
    split_response,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "ChainHttpError",
    "ConfigurationError",
    "ErrorCategory",
    "HeaderTable",
    "HttpRequest",
    "HttpSettings",
    "HttpxTransport",
    "MissingResponseError",
    "PlausibleHeadersNotFoundError",
    "StatusLine",
    "StubTransport",
    "TransferInfo",
    "TransportClient",
    "TransportError",
    "TransportOptions",
    "TransportResult",
    "create_default_transport",
    "load_http_settings",
    "parse_header_block",
    "parse_status_line",
    "setup_logging",
    "split_response",
    "__version__",
]

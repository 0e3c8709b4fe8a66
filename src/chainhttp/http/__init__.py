# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport, parsing and request exports."""

from .adapters import StubTransport
from .headers import format_header_lines, header_values
from .httpx_transport import TRANSPORT_OPTIONS, HttpxTransport
from .models import (
    HeaderTable,
    SplitResponse,
    StatusLine,
    TransferInfo,
    TransportOptions,
    TransportResult,
)
from .parsing import parse_header_block, parse_status_line, split_response
from .request import HttpRequest
from .transport import TransportClient, create_default_transport

__all__ = [
    "TRANSPORT_OPTIONS",
    "HeaderTable",
    "HttpRequest",
    "HttpxTransport",
    "SplitResponse",
    "StatusLine",
    "StubTransport",
    "TransferInfo",
    "TransportClient",
    "TransportOptions",
    "TransportResult",
    "create_default_transport",
    "format_header_lines",
    "header_values",
    "parse_header_block",
    "parse_status_line",
    "split_response",
]

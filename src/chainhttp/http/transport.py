# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Transport client protocol.

A transport performs one transfer and returns the raw response text, header blocks
included, for ``split_response`` to take apart. Failures are raised as ``TransportError``.
"""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import TransportOptions, TransportResult


class TransportClient(Protocol):
    """Performs one transfer described by TransportOptions and returns raw response text."""

    def execute(self, uri: str, options: TransportOptions) -> TransportResult: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_transport(settings: HttpSettings | None = None) -> TransportClient:
    """Build the httpx-backed transport an HttpRequest uses when none is injected."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(settings or load_http_settings())

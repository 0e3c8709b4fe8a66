# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport adapters that do not touch the network."""

from __future__ import annotations

from ..errors import ErrorCategory, TransportError
from .models import TransferInfo, TransportOptions, TransportResult
from .transport import TransportClient


class StubTransport(TransportClient):
    """Deterministic, programmable TransportClient for tests."""

    def __init__(self, responses: dict[str, str] | None = None, *, error: TransportError | None = None):
        self._responses = responses or {}
        self.error = error
        self.calls: list[TransportOptions] = []
        self.closed = False

    def add(self, uri: str, raw: str) -> None:
        self._responses[uri] = raw

    def execute(self, uri: str, options: TransportOptions) -> TransportResult:
        self.calls.append(options)
        if self.error is not None:
            raise self.error
        if uri not in self._responses:
            raise TransportError(ErrorCategory.CONNECTION_ERROR, f"No stubbed response configured for {uri}")
        raw = self._responses[uri]
        return TransportResult(raw=raw, info=TransferInfo(effective_url=uri))

    def close(self) -> None:
        self.closed = True

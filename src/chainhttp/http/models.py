# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport and response data models used across chainhttp."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

HeaderTable = dict[str, list[str]]

STATUS_PARTS = ("raw", "version", "code", "status")


@dataclass(frozen=True)
class StatusLine:
    """Parsed HTTP status line."""

    raw: str
    version: str
    code: str
    status: str

    @property
    def code_int(self) -> int:
        return int(self.code)

    def part(self, name: str) -> str:
        """Return one named field (raw, version, code or status)."""
        if name not in STATUS_PARTS:
            raise ValueError(f"Unknown status part {name!r}; expected one of {', '.join(STATUS_PARTS)}")
        return getattr(self, name)


@dataclass(frozen=True)
class SplitResponse:
    """Status line, authoritative header block and body recovered from a raw response."""

    status: StatusLine
    header_block: str
    body: str


@dataclass
class TransportOptions:
    """Everything a TransportClient needs to perform one transfer."""

    uri: str
    settings: dict[str, Any] = field(default_factory=dict)
    include_headers: bool = True
    header_lines: list[str] = field(default_factory=list)


@dataclass
class TransferInfo:
    """Metadata about a completed transfer."""

    effective_url: str | None = None
    status_code: int | None = None
    redirect_count: int = 0
    elapsed: float | None = None
    header_blocks: int = 0
    body_truncated: bool = False
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransportResult:
    """Raw response text plus transfer metadata."""

    raw: str
    info: TransferInfo = field(default_factory=TransferInfo)

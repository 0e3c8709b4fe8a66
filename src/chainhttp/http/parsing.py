# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Raw HTTP response splitting.

Transports that include response headers in their output may emit more than one
header block before the body: one per redirect hop, a ``100 Continue`` interim
response, or an authentication challenge. The splitter walks the blank-line
delimited chunks of the raw text and treats the last header-shaped chunk that is
directly followed by a non header-shaped chunk as authoritative.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from ..errors import MissingResponseError, PlausibleHeadersNotFoundError
from .models import HeaderTable, SplitResponse, StatusLine

logger = logging.getLogger(__name__)

STATUS_LINE_RE = re.compile(
    r"^(?P<version>[A-Za-z]+/\d+\.\d+) (?P<code>\d{3}) (?P<status>[^\r\n]*)\r?$",
    re.MULTILINE,
)
_CHUNK_DELIMITER_RE = re.compile(r"\r?\n\r?\n")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
_HEADER_SEPARATOR = ": "


def iter_chunks(raw: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, text)`` for each blank-line delimited chunk of ``raw``."""
    start = 0
    for match in _CHUNK_DELIMITER_RE.finditer(raw):
        yield start, raw[start : match.start()]
        start = match.end()
    yield start, raw[start:]


def parse_status_line(line: str) -> StatusLine:
    """Extract version, code and reason phrase from a status line."""
    raw = line.rstrip("\r\n")
    match = STATUS_LINE_RE.fullmatch(raw)
    if not match:
        raise ValueError(f"Not an HTTP status line: {raw!r}")
    return StatusLine(
        raw=raw,
        version=match.group("version"),
        code=match.group("code"),
        status=match.group("status"),
    )


def split_response(raw: str | None) -> SplitResponse:
    """
    Split a raw response into status line, header block and body.

    The body is sliced from ``raw`` at the offset of the first chunk that does not
    carry a status line, so it is returned byte-for-byte as received.
    """
    if raw is None:
        raise MissingResponseError()

    status: StatusLine | None = None
    previous: str | None = None
    blocks = 0
    for offset, chunk in iter_chunks(raw):
        match = STATUS_LINE_RE.search(chunk)
        if match:
            status = parse_status_line(match.group(0))
            previous = chunk
            blocks += 1
            continue
        if previous is None or status is None:
            break
        logger.debug("Split response: %d header block(s), body at offset %d", blocks, offset)
        return SplitResponse(status=status, header_block=previous, body=raw[offset:])

    raise PlausibleHeadersNotFoundError()


def parse_header_block(block: str) -> HeaderTable:
    """
    Parse a raw header block into a HeaderTable.

    The first line is the status line and is skipped. Repeated names accumulate
    their values in order. A line without ``": "`` becomes a name with an empty value.
    """
    table: HeaderTable = {}
    for line in _LINE_SPLIT_RE.split(block)[1:]:
        if not line:
            continue
        name, sep, value = line.partition(_HEADER_SEPARATOR)
        if not sep:
            name, value = line.rstrip(), ""
        table.setdefault(name, []).append(value)
    return table


__all__ = [
    "STATUS_LINE_RE",
    "iter_chunks",
    "parse_header_block",
    "parse_status_line",
    "split_response",
]

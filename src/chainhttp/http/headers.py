# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header helpers.

Outgoing headers are stored as ``{name: [values]}`` and handed to transports as a flat
list of ``"Name: value"`` lines, one line per value. Incoming headers keep the casing
they were received with; ``header_values`` offers a case-insensitive read on top
(RFC 9110 field names are case-insensitive).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence

from ..errors import ConfigurationError

# RFC 9110 field-name: 1*tchar
FIELD_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


def coerce_header_values(name: str, value: str | Sequence[str]) -> list[str]:
    """Wrap a single value into a list, or copy an explicit sequence of values."""
    if not isinstance(name, str) or not FIELD_NAME_RE.fullmatch(name):
        raise ConfigurationError(f"Invalid header name {name!r}")
    if isinstance(value, str):
        values = [value]
    elif isinstance(value, (bytes, bytearray)):
        raise ConfigurationError(f"Header {name!r} value must be str, not bytes")
    else:
        try:
            values = list(value)
        except TypeError:
            raise ConfigurationError(f"Header {name!r} value must be a string or a sequence of strings") from None
    for item in values:
        if not isinstance(item, str):
            raise ConfigurationError(f"Header {name!r} value {item!r} is not a string")
        if "\n" in item or "\r" in item:
            raise ConfigurationError(f"Header {name!r} value contains a line break")
    return values


def format_header_lines(headers: Mapping[str, Iterable[str]]) -> list[str]:
    """Flatten ``{name: [v1, v2]}`` into ``["name: v1", "name: v2"]``."""
    return [f"{name}: {value}" for name, values in headers.items() for value in values]


def parse_header_lines(lines: Iterable[str]) -> list[tuple[str, str]]:
    """Turn ``"Name: value"`` lines back into ordered ``(name, value)`` pairs."""
    pairs: list[tuple[str, str]] = []
    for line in lines:
        name, sep, value = line.partition(":")
        if not sep:
            raise ConfigurationError(f"Malformed header line {line!r}")
        pairs.append((name.strip(), value.strip()))
    return pairs


def header_values(headers: Mapping[str, list[str]] | None, name: str) -> list[str] | None:
    """
    Return the values of ``name`` using case-insensitive key matching.

    Values of keys that differ only in case are merged in table order.
    """
    if not headers or not name:
        return None

    lower = name.lower()
    merged: list[str] = []
    found = False
    for key, values in headers.items():
        if key.lower() == lower:
            merged.extend(values)
            found = True
    return merged if found else None


__all__ = [
    "coerce_header_values",
    "format_header_lines",
    "header_values",
    "parse_header_lines",
]

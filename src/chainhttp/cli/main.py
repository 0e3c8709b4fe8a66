# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""chainhttp CLI."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import ChainHttpError, ConfigurationError
from ..http import HttpRequest
from ..log import setup_logging

CLI_TEXT_TRUNCATION_BYTES = 4096


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch a URL and show its status line, headers and body")
    parser.add_argument("url", help="Target URL")
    parser.add_argument("-X", "--request", dest="method", default=None, help="HTTP method (default: GET, or POST with --data)")
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        metavar="'Name: value'",
        help="Outgoing header; repeat the same name to send several values",
    )
    parser.add_argument("-d", "--data", default=None, help="Request body")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout in seconds")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of the raw-style listing",
    )
    parser.add_argument(
        "--head-only",
        action="store_true",
        help="Print status line and headers only",
    )
    parser.add_argument(
        "--no-redirects",
        action="store_true",
        help="Do not follow redirects",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: CHAINHTTP_LOG_LEVEL or WARNING)")
    return parser


def parse_header_args(values: list[str]) -> dict[str, list[str]]:
    """Group ``-H`` arguments by name, keeping repeated names as several values."""
    headers: dict[str, list[str]] = {}
    for item in values:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Malformed header {item!r}; expected 'Name: value'")
        headers.setdefault(name.strip(), []).append(value.strip())
    return headers


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    suffix_bytes = suffix.encode("utf-8")
    keep = max_bytes - len(suffix_bytes)
    if keep <= 0:
        return suffix_bytes[:max_bytes].decode("utf-8", errors="ignore")
    prefix = raw[:keep].decode("utf-8", errors="ignore")
    return prefix + suffix


def build_request(args: argparse.Namespace, settings: HttpSettings) -> HttpRequest:
    request = HttpRequest(args.url, settings=settings)
    request.set_outgoing_headers(parse_header_args(args.headers))
    method = args.method or ("POST" if args.data is not None else "GET")
    request.set_option("method", method)
    if args.data is not None:
        request.set_option("body", args.data)
    if args.timeout is not None:
        request.set_option("timeout", args.timeout)
    if args.no_redirects:
        request.set_option("follow_redirects", False)
    return request


def _response_payload(request: HttpRequest, *, head_only: bool) -> dict[str, Any]:
    status = request.get_response_status()
    info = request.get_info()
    payload: dict[str, Any] = {
        "status": asdict(status),
        "headers": request.get_response_headers(),
        "info": asdict(info) if info is not None else None,
    }
    if not head_only:
        payload["body"] = _truncate_text_bytes(request.get_response_body() or "", CLI_TEXT_TRUNCATION_BYTES)
    return payload


def _print_json(payload: dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(request: HttpRequest, *, head_only: bool) -> None:
    print(request.get_response_status("raw"))
    for name, values in request.get_response_headers().items():
        for value in values:
            print(f"{name}: {value}")
    if head_only:
        return
    print()
    sys.stdout.write(request.get_response_body() or "")
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    try:
        with build_request(args, settings) as request:
            request.execute()
            if args.json:
                _print_json(_response_payload(request, head_only=args.head_only))
            else:
                _pretty_print(request, head_only=args.head_only)
    except ChainHttpError as exc:
        print(f"chainhttp: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging setup for the chainhttp CLI.

Library modules only emit debug records through ``logging.getLogger(__name__)`` and never
configure handlers; ``setup_logging`` is for entry points such as ``chainhttp.cli``.
"""

from __future__ import annotations

import logging
import os


def _default_log_level() -> str:
    return os.getenv("CHAINHTTP_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None) -> None:
    """Configure root logging at ``level``, or ``CHAINHTTP_LOG_LEVEL`` (default WARNING)."""
    effective_level = (level or _default_log_level()).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


__all__ = ["setup_logging"]

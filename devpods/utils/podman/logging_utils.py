"""Internal logging helpers for Podman utilities.

Separated to keep concerns modular. Not part of the public API.
"""

from __future__ import annotations

import re
from re import Pattern

from rich.markup import escape

from devpods.utils.log_utils import logger


ANSI_ESCAPE_RE: Pattern[str] = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_RE.sub("", text)


def log_multiline(text: str, log_prefix: str | None, level: str = "info") -> None:
    """Log command output line-by-line with optional prefix."""
    if not text:
        return
    pf = escape(log_prefix) if log_prefix else ""
    log_fn = getattr(logger, level, logger.info)
    for raw_line in text.splitlines():
        sanitized = strip_ansi(raw_line).replace("\r", "")
        if sanitized.strip():
            log_fn(f"{pf}{escape(sanitized)}")


__all__ = ["strip_ansi", "log_multiline", "ANSI_ESCAPE_RE"]

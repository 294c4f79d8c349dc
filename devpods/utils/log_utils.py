"""Logging utilities shared across the devpods package."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


_CONFIGURED: bool = False

# Tables and summary cards bypass the logger and render straight to stdout.
console = Console()

DEFAULT_CONSOLE_LEVEL = "INFO"
DEFAULT_FILE_LEVEL = "DEBUG"
DEFAULT_FILE_ENV = "DEVPODS_LOG_FILE"
DEFAULT_FILE_ROTATION = "5 MB"
DEFAULT_FILE_RETENTION = 2

_RICH_HANDLER_KWARGS: dict[str, Any] = {
    "markup": True,
    "show_time": False,
    "show_level": False,
    "show_path": False,
}


def _configure_logging(*, force: bool = False) -> None:
    """Configure the shared logger once per process."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    logger.remove()

    logger.add(
        RichHandler(console=console, **_RICH_HANDLER_KWARGS),  # type: ignore[arg-type]
        level=os.getenv("DEVPODS_LOG_LEVEL", DEFAULT_CONSOLE_LEVEL),
        format="{message}",
    )

    file_path = os.getenv(DEFAULT_FILE_ENV)
    if file_path:
        resolved_file_path = Path(file_path).expanduser().resolve()
        resolved_file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(resolved_file_path),
            level=DEFAULT_FILE_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
            rotation=DEFAULT_FILE_ROTATION,
            retention=DEFAULT_FILE_RETENTION,
            enqueue=True,
        )

    _CONFIGURED = True


# Status markers. Messages may carry Rich markup; raw values coming from
# subprocess output should go through ``escape`` first.


def section(message: str) -> None:
    logger.info(f"\n[magenta]▸ {message}[/magenta]")


def info(message: str) -> None:
    logger.info(f"  [blue]→[/blue]  {message}")


def ok(message: str) -> None:
    logger.info(f"  [green]✔[/green]  {message}")


def warn(message: str) -> None:
    logger.warning(f"  [yellow]⚠[/yellow]  {message}")


def err(message: str) -> None:
    logger.error(f"  [red]✖[/red]  {message}")


def dim(message: str) -> None:
    logger.info(f"  [bright_black]{message}[/bright_black]")


__all__ = ["logger", "console", "escape", "section", "info", "ok", "warn", "err", "dim"]

# Configure logging on import so callers only need to import `logger`.
_configure_logging()

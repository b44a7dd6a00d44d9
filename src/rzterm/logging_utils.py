"""Runtime logging helpers."""

from __future__ import annotations

import sys
from logging import Handler
from pathlib import Path
from typing import Literal

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

LogProfile = Literal["default", "terminal"]

_PROFILE_FORMATS: dict[LogProfile, str] = {
    "terminal": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {message}",
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}",
}
_CONFIGURED: tuple[LogProfile, str, Path | None] | None = None


def _build_terminal_handler() -> Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(
    *,
    profile: LogProfile = "default",
    level: str = "INFO",
    log_file: Path | None = None,
) -> None:
    """Configure process-level logging once per distinct profile."""
    global _CONFIGURED
    key = (profile, level.upper(), log_file)
    if key == _CONFIGURED:
        return

    logger.remove()
    if profile == "terminal" and log_file is not None:
        # The tty is in raw mode, so stderr output would tear the edit line.
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=key[1],
            format=_PROFILE_FORMATS["terminal"],
            backtrace=False,
            diagnose=False,
        )
    elif profile == "terminal":
        logger.add(
            _build_terminal_handler(),
            level=key[1],
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=key[1],
            format=_PROFILE_FORMATS["default"],
            backtrace=False,
            diagnose=False,
        )
    _CONFIGURED = key

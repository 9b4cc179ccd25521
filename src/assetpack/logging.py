# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.text import Text

LIBRARY_LOGGER: Final[str] = "assetpack"


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool, tty: bool, stderr: bool = False) -> Console:
    """Return a Rich console configured for the presentation flags."""

    return Console(
        stderr=stderr,
        color_system="auto" if color and tty else None,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
) -> None:
    tty = detect_tty()
    color_enabled = tty if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji, tty=tty, stderr=stderr)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


class ConsoleLogHandler(logging.Handler):
    """Route library log records through the console helpers on stderr."""

    def __init__(self, *, use_emoji: bool, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.use_emoji = use_emoji

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except (TypeError, ValueError):
            self.handleError(record)
            return
        if record.levelno >= logging.ERROR:
            prefix, style = emoji("❌ ", self.use_emoji), "red"
        elif record.levelno >= logging.WARNING:
            prefix, style = emoji("⚠️ ", self.use_emoji), "yellow"
        else:
            prefix, style = "", "dim"
        _print_line(f"{prefix}{message}", style=style, use_emoji=self.use_emoji, stderr=True)


def configure_logging(*, debug: bool, use_emoji: bool = True) -> logging.Logger:
    """Send library log records to stderr, at DEBUG level when ``debug`` is set.

    Calling it again only adjusts the level and emoji preference.
    """

    logger = logging.getLogger(LIBRARY_LOGGER)
    handler = next((item for item in logger.handlers if isinstance(item, ConsoleLogHandler)), None)
    if handler is None:
        handler = ConsoleLogHandler(use_emoji=use_emoji)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    handler.use_emoji = use_emoji
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger


__all__ = [
    "ConsoleLogHandler",
    "configure_logging",
    "detect_tty",
    "emoji",
    "fail",
    "get_console",
    "info",
    "ok",
    "warn",
]

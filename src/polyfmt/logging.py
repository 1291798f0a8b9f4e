# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

LOG_FORMAT = "%(name)s: %(message)s"


def detect_tty(*, stderr: bool = False) -> bool:
    """Return ``True`` when the selected stream appears to be a terminal.

    Args:
        stderr: Probe ``sys.stderr`` instead of ``sys.stdout``.

    Returns:
        bool: ``True`` when the stream reports TTY support.
    """

    stream = sys.stderr if stderr else sys.stdout
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by presentation flags."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        """Return a console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stderr: Write to standard error instead of standard output.

        Returns:
            Console: Cached or newly constructed console.
        """

        tty = detect_tty(stderr=stderr)
        key = (color, emoji, stderr, tty)
        if key not in self._cache:
            color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
                "auto" if color and tty else None
            )
            self._cache[key] = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                stderr=stderr,
                highlight=False,
            )
        return self._cache[key]


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


def configure_logging(*, verbose: bool = False) -> None:
    """Route library log records to standard error through Rich.

    Args:
        verbose: Emit debug records (stage transitions, argv) when ``True``.
    """

    console = get_console_manager().get(color=True, emoji=False, stderr=True)
    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("polyfmt")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str, use_emoji: bool, use_color: bool | None, stderr: bool = False) -> None:
    color_enabled = detect_tty(stderr=stderr) if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if color_enabled:
        text.stylize(style)
    console.print(text)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message on standard error."""

    _print_line(
        f"{emoji('⚠️ ', use_emoji)}{msg}",
        style="yellow",
        use_emoji=use_emoji,
        use_color=use_color,
        stderr=True,
    )


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message on standard error.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _print_line(
        f"{emoji('❌ ', use_emoji)}{msg}",
        style="red",
        use_emoji=use_emoji,
        use_color=use_color,
        stderr=True,
    )


__all__ = [
    "RichConsoleManager",
    "configure_logging",
    "detect_tty",
    "fail",
    "get_console_manager",
    "warn",
]

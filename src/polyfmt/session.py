# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Debounced formatting for interactive callers such as editors."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

from .languages import Language
from .models import FormatResult
from .service import FormatterService

DEFAULT_DEBOUNCE_SECONDS: Final[float] = 0.3

LOGGER = logging.getLogger(__name__)


class FormatSession:
    """Keep at most one format request alive per editing session.

    Each call to :meth:`request` supersedes the previous one: a request still
    waiting out the debounce delay returns ``None`` without spawning anything,
    and one already running has its formatter process killed.
    """

    def __init__(self, service: FormatterService, *, debounce: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        if debounce < 0:
            raise ValueError("debounce must not be negative")
        self._service = service
        self._debounce = debounce
        self._current: asyncio.Event | None = None

    @property
    def debounce(self) -> float:
        """Return the quiet period in seconds before a request starts formatting."""

        return self._debounce

    def cancel_pending(self) -> None:
        """Cancel the in-flight request, if any."""

        if self._current is not None:
            self._current.set()
            self._current = None

    async def request(self, code: str, language: Language | str) -> FormatResult | None:
        """Format ``code`` once the debounce delay passes without a newer request.

        Args:
            code: Source code to format.
            language: Language member or its configuration key.

        Returns:
            FormatResult | None: The result, or ``None`` when superseded.
        """

        self.cancel_pending()
        cancel = asyncio.Event()
        self._current = cancel

        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({waiter}, timeout=self._debounce)
        finally:
            waiter.cancel()
        if cancel.is_set():
            LOGGER.debug("Format request superseded during debounce")
            return None

        result = await self._service.format(code, language, cancel=cancel)
        if cancel.is_set():
            LOGGER.debug("Format request superseded while running")
            return None
        if self._current is cancel:
            self._current = None
        return result


__all__ = ["DEFAULT_DEBOUNCE_SECONDS", "FormatSession"]

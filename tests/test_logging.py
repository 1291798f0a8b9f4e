# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for console helpers and logging configuration."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

import polyfmt.logging as console_logging
from polyfmt.logging import configure_logging, fail, get_console_manager, warn


def test_fail_writes_plain_message_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    fail("Formatting Error\n\nbad input", use_emoji=False, use_color=False)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Formatting Error" in captured.err
    assert "bad input" in captured.err


def test_warn_prefixes_emoji_when_enabled(capsys: pytest.CaptureFixture[str]) -> None:
    warn("deprecated option", use_emoji=True, use_color=False)

    captured = capsys.readouterr()
    assert "deprecated option" in captured.err
    assert "⚠" in captured.err


def test_console_manager_caches_consoles() -> None:
    manager = get_console_manager()

    first = manager.get(color=False, emoji=False, stderr=True)

    assert manager.get(color=False, emoji=False, stderr=True) is first
    assert manager.get(color=False, emoji=False, stderr=False) is not first


def test_public_helpers_are_the_ones_the_cli_uses() -> None:
    assert set(console_logging.__all__) == {
        "RichConsoleManager",
        "configure_logging",
        "detect_tty",
        "fail",
        "get_console_manager",
        "warn",
    }


@pytest.mark.parametrize(("verbose", "level"), [(True, logging.DEBUG), (False, logging.WARNING)])
def test_configure_logging_installs_rich_handler(verbose: bool, level: int) -> None:
    configure_logging(verbose=verbose)

    package_logger = logging.getLogger("polyfmt")
    assert package_logger.level == level
    assert package_logger.propagate is False
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], RichHandler)

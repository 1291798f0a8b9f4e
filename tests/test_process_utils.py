# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the blocking probe wrapper."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from conftest import posix_only

from polyfmt.process_utils import SubprocessExecutionError, run_command

pytestmark = posix_only

ToolFactory = Callable[[str, str], Path]


def test_run_command_captures_output(make_tool: ToolFactory) -> None:
    tool = make_tool("version", "echo v20.11.0")

    completed = run_command([str(tool)])

    assert completed.returncode == 0
    assert completed.stdout.strip() == "v20.11.0"


def test_run_command_raises_on_failure(make_tool: ToolFactory) -> None:
    tool = make_tool("fails", "echo oops >&2\nexit 3")

    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command([str(tool)])

    assert excinfo.value.returncode == 3
    assert "oops" in str(excinfo.value)


def test_run_command_without_check_returns_status(make_tool: ToolFactory) -> None:
    tool = make_tool("fails", "exit 3")

    assert run_command([str(tool)], check=False).returncode == 3


def test_run_command_stdin_is_closed(make_tool: ToolFactory) -> None:
    tool = make_tool("reader", "cat\necho done")

    assert run_command([str(tool)], timeout=2).stdout.strip() == "done"


def test_run_command_timeout_reports_124(make_tool: ToolFactory) -> None:
    tool = make_tool("hang", "exec sleep 30")

    completed = run_command([str(tool)], check=False, timeout=0.2)

    assert completed.returncode == 124
    assert "timed out" in completed.stderr


def test_run_command_missing_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["polyfmt-definitely-missing"])


def test_run_command_rejects_empty_args() -> None:
    with pytest.raises(ValueError):
        run_command([])

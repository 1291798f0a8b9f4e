# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Blocking ``subprocess`` wrapper used for short environment probes."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; probes run fixed argument lists
# without ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

PROBE_TIMEOUT_SECONDS: Final[float] = 5.0
TIMEOUT_RETURNCODE: Final[int] = 124


class SubprocessExecutionError(RuntimeError):
    """Raised when a probe exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable replaced by its absolute path.

    Args:
        args: Command and arguments supplied by the caller.

    Returns:
        list[str]: Argument list suitable for ``subprocess.run``.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable cannot be found on ``PATH``.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: float | None = PROBE_TIMEOUT_SECONDS,
) -> CompletedProcess[str]:
    """Run a short-lived helper command and capture its text output.

    stdin is always ``DEVNULL`` so probes can never block waiting for input.
    A timeout is reported as exit status ``124`` with a note on stderr.

    Args:
        args: Command and argument sequence to execute.
        cwd: Working directory for the command.
        env: Environment replacing the inherited one.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        timeout: Seconds to wait before giving up.

    Returns:
        CompletedProcess[str]: Captured execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the command fails.
    """

    normalized = _normalize_args(args)
    try:
        # Bandit: fixed probe commands; no shell expansion.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"
        completed = subprocess.CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout) or "",
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        )

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(normalized, completed.returncode, completed.stdout, completed.stderr)
    return completed


__all__ = ["PROBE_TIMEOUT_SECONDS", "SubprocessExecutionError", "run_command"]

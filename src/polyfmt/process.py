# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous process transports with deadlines and process-tree cleanup."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import tempfile
import uuid
from collections.abc import Collection, Iterator, Sequence
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .classifier import classify
from .models import FILE_PLACEHOLDER, FormatErrorCategory, ProcessResult, Transport
from .process_utils import SubprocessExecutionError, run_command

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
SCRATCH_DIR_NAME: Final[str] = "polyfmt"
TEXT_ENCODING: Final[str] = "utf-8"
CANCELLED_MESSAGE: Final[str] = "Formatting cancelled."
LAUNCH_FAILURE_PREFIX: Final[str] = "Failed to run formatter"
EXIT_POLL_SECONDS: Final[float] = 0.05
STREAM_GRACE_SECONDS: Final[float] = 0.5

LOGGER = logging.getLogger(__name__)


def timeout_message(timeout: float) -> str:
    """Return the user-facing message for a run that exceeded ``timeout`` seconds."""

    return f"Formatting timed out after {timeout:.1f}s. Code may be too large."


def default_scratch_dir() -> Path:
    """Return the shared scratch directory used by the temp-file transport."""

    return Path(tempfile.gettempdir()) / SCRATCH_DIR_NAME


@dataclass(slots=True, frozen=True)
class _Completed:
    """Raw outcome of a process that exited on its own."""

    returncode: int
    stdout: str
    stderr: str


class ProcessRunner:
    """Run formatter executables over stdin or a scratch file.

    Every run is bounded by a deadline and may be cancelled through an
    :class:`asyncio.Event`. When either fires the whole process tree is killed
    and reaped before the result is returned. No failure escapes as an
    exception; task cancellation is the one exception, re-raised once the
    process tree is gone.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS, *, scratch_dir: Path | None = None) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = timeout
        self._scratch_dir = scratch_dir if scratch_dir is not None else default_scratch_dir()

    @property
    def timeout(self) -> float:
        """Return the default deadline in seconds."""

        return self._timeout

    @property
    def scratch_dir(self) -> Path:
        """Return the directory receiving temp-file transport scratch files."""

        return self._scratch_dir

    async def run(
        self,
        command: str,
        args: Sequence[str],
        input_text: str,
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
        success_codes: Collection[int] = (0,),
        trust_output: bool = True,
    ) -> ProcessResult:
        """Pipe ``input_text`` through ``command`` and classify its stdout.

        Args:
            command: Executable to launch.
            args: Arguments passed to the executable.
            input_text: Source code written to stdin before it is closed.
            cwd: Working directory for the process.
            timeout: Deadline in seconds overriding the runner default.
            cancel: Event that aborts the run when set.
            success_codes: Exit statuses the tool uses for success.
            trust_output: Accept non-empty stdout despite other exit statuses.

        Returns:
            ProcessResult: Classified outcome of the run.
        """

        argv = [command, *args]
        try:
            outcome = await self._execute(
                argv,
                payload=input_text.encode(TEXT_ENCODING),
                cwd=cwd,
                timeout=timeout,
                cancel=cancel,
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Unexpected failure running %s", command)
            return ProcessResult.failure(FormatErrorCategory.UNKNOWN, f"{LAUNCH_FAILURE_PREFIX}: {exc}")
        if isinstance(outcome, ProcessResult):
            return outcome
        return classify(
            Transport.STDIN,
            outcome.returncode,
            outcome.stdout,
            outcome.stderr,
            success_codes=success_codes,
            trust_output=trust_output,
        )

    async def run_with_temp_file(
        self,
        command: str,
        args: Sequence[str],
        input_text: str,
        file_extension: str,
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
        success_codes: Collection[int] = (0,),
        trust_output: bool = True,
    ) -> ProcessResult:
        """Format ``input_text`` through a scratch file the tool rewrites in place.

        Every ``{file}`` occurrence inside every argument is replaced with the
        scratch path. The file is read back after the process exits and is
        deleted on every exit path.

        Args:
            command: Executable to launch.
            args: Argument template containing the ``{file}`` placeholder.
            input_text: Source code written to the scratch file.
            file_extension: Extension the tool needs to recognise the language.
            cwd: Working directory for the process.
            timeout: Deadline in seconds overriding the runner default.
            cancel: Event that aborts the run when set.
            success_codes: Exit statuses the tool uses for success.
            trust_output: Accept non-empty file content despite other exit statuses.

        Returns:
            ProcessResult: Classified outcome of the run.
        """

        bound = timeout if timeout is not None else self._timeout
        try:
            with self._scratch_file(file_extension) as path:
                with path.open("w", encoding=TEXT_ENCODING, newline="") as handle:
                    handle.write(input_text)
                argv = [command, *(arg.replace(FILE_PLACEHOLDER, str(path)) for arg in args)]
                loop = asyncio.get_running_loop()
                started = loop.time()
                outcome = await self._execute(argv, payload=None, cwd=cwd, timeout=bound, cancel=cancel)
                if isinstance(outcome, ProcessResult):
                    return outcome
                remaining = max(0.0, bound - (loop.time() - started))
                content = await asyncio.wait_for(asyncio.to_thread(_read_back, path), timeout=remaining)
        except TimeoutError:
            LOGGER.warning("Reading back %s output exceeded the %.1fs deadline", command, bound)
            return ProcessResult.failure(FormatErrorCategory.PROCESS_TIMEOUT, timeout_message(bound))
        except OSError as exc:
            LOGGER.warning("Scratch file I/O failed for %s: %s", command, exc)
            return ProcessResult.failure(FormatErrorCategory.UNKNOWN, f"{LAUNCH_FAILURE_PREFIX}: {exc}")
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Unexpected failure running %s", command)
            return ProcessResult.failure(FormatErrorCategory.UNKNOWN, f"{LAUNCH_FAILURE_PREFIX}: {exc}")
        return classify(
            Transport.TEMP_FILE,
            outcome.returncode,
            content,
            outcome.stderr,
            success_codes=success_codes,
            trust_output=trust_output,
        )

    @contextmanager
    def _scratch_file(self, extension: str) -> Iterator[Path]:
        """Yield a collision-free scratch path and delete it afterwards."""

        self._scratch_dir.mkdir(parents=True, exist_ok=True)
        path = self._scratch_dir / f"{uuid.uuid4().hex}{extension}"
        try:
            yield path
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                LOGGER.warning("Failed to remove scratch file %s: %s", path, exc)

    async def _execute(
        self,
        argv: Sequence[str],
        *,
        payload: bytes | None,
        cwd: Path | None,
        timeout: float | None,
        cancel: asyncio.Event | None,
    ) -> _Completed | ProcessResult:
        """Spawn ``argv`` and wait for exit, the deadline or cancellation.

        Returns:
            _Completed | ProcessResult: Raw streams when the process exited on
            its own, otherwise a failed result describing why it was stopped.
        """

        bound = timeout if timeout is not None else self._timeout
        if cancel is not None and cancel.is_set():
            return ProcessResult.failure(FormatErrorCategory.PROCESS_TIMEOUT, CANCELLED_MESSAGE)

        LOGGER.debug("Spawning %s (cwd=%s, timeout=%.1fs)", list(argv), cwd, bound)
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE if payload is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd is not None else None,
                start_new_session=os.name != "nt",
            )
        except (OSError, ValueError) as exc:
            LOGGER.debug("Failed to launch %s: %s", argv[0], exc)
            return ProcessResult.failure(FormatErrorCategory.PROCESS_LAUNCH_FAILURE, f"{LAUNCH_FAILURE_PREFIX}: {exc}")

        communicate = asyncio.ensure_future(process.communicate(payload))
        exited = asyncio.ensure_future(_wait_for_exit(process))
        waiters: set[asyncio.Future[object]] = {communicate, exited}
        cancel_wait: asyncio.Future[object] | None = None
        if cancel is not None:
            cancel_wait = asyncio.ensure_future(cancel.wait())
            waiters.add(cancel_wait)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + bound
        try:
            done, _ = await asyncio.wait(waiters, timeout=bound, return_when=asyncio.FIRST_COMPLETED)
            stopped = cancel_wait is not None and cancel_wait in done
            if communicate not in done and exited in done and not stopped:
                if await _drain_after_exit(process, communicate, deadline - loop.time()):
                    done = {communicate}
        except asyncio.CancelledError:
            await _terminate(process, communicate)
            raise
        finally:
            exited.cancel()
            if cancel_wait is not None:
                cancel_wait.cancel()

        if communicate in done:
            stdout, stderr = communicate.result()
            returncode = process.returncode if process.returncode is not None else await process.wait()
            return _Completed(
                returncode=returncode,
                stdout=stdout.decode(TEXT_ENCODING, errors="replace"),
                stderr=stderr.decode(TEXT_ENCODING, errors="replace"),
            )

        await _terminate(process, communicate)
        if cancel_wait is not None and cancel_wait in done:
            LOGGER.debug("Cancelled %s", argv[0])
            return ProcessResult.failure(FormatErrorCategory.PROCESS_TIMEOUT, CANCELLED_MESSAGE)
        LOGGER.warning("Killed %s after %.1fs deadline", argv[0], bound)
        return ProcessResult.failure(FormatErrorCategory.PROCESS_TIMEOUT, timeout_message(bound))


def _read_back(path: Path) -> str:
    if not path.is_file():
        return ""
    with path.open(encoding=TEXT_ENCODING, errors="replace", newline="") as handle:
        return handle.read()


async def _wait_for_exit(process: asyncio.subprocess.Process) -> int:
    """Return once the child itself exits.

    ``returncode`` is recorded as soon as the child is reaped, even while
    descendants still hold its output pipes open.
    """

    while process.returncode is None:
        await asyncio.sleep(EXIT_POLL_SECONDS)
    return process.returncode


async def _drain_after_exit(
    process: asyncio.subprocess.Process,
    communicate: asyncio.Future[object],
    remaining: float,
) -> bool:
    """Finish reading output after the child exited, killing lingering descendants.

    Returns:
        bool: ``True`` when both output streams reached end of file.
    """

    loop = asyncio.get_running_loop()
    deadline = loop.time() + remaining
    done, _ = await asyncio.wait({communicate}, timeout=max(0.0, min(STREAM_GRACE_SECONDS, remaining)))
    if communicate in done:
        return True
    LOGGER.debug("pid %s exited but descendants still hold its output pipes; killing them", process.pid)
    await _kill_tree(process)
    done, _ = await asyncio.wait({communicate}, timeout=max(STREAM_GRACE_SECONDS, deadline - loop.time()))
    return communicate in done


async def _terminate(process: asyncio.subprocess.Process, communicate: asyncio.Future[object]) -> None:
    """Kill the process tree, stop stream draining and reap the child."""

    await _kill_tree(process)
    communicate.cancel()
    await asyncio.wait({communicate})
    await process.wait()


async def _kill_tree(process: asyncio.subprocess.Process) -> None:
    """Forcefully kill ``process`` and every descendant it spawned."""

    if os.name == "nt":
        try:
            await asyncio.to_thread(run_command, ["taskkill", "/F", "/T", "/PID", str(process.pid)])
        except (FileNotFoundError, SubprocessExecutionError) as exc:
            LOGGER.debug("taskkill failed for pid %s: %s", process.pid, exc)
            with suppress(ProcessLookupError):
                process.kill()
        return
    # The session leader's pid doubles as the process group id.
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        with suppress(ProcessLookupError):
            process.kill()


__all__ = [
    "CANCELLED_MESSAGE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ProcessRunner",
    "default_scratch_dir",
    "timeout_message",
]

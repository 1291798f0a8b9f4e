# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Formatter service façade sequencing validation, resolution and execution."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .classifier import ERROR_HEADING, to_format_result, translate_failure
from .config import ConfigStore
from .dialects import build_args
from .environment import NODE_DOWNLOAD_URL, NodeEnvironment, install_hint, locate_runtime_binary
from .interfaces import ConfigProvider, EnvironmentProbe
from .languages import Language, language_from_key
from .models import FormatErrorCategory, FormatResult, FormatterEntry, ProcessResult, Transport
from .process import DEFAULT_TIMEOUT_SECONDS, ProcessRunner
from .resolver import CommandResolver

TIMEOUT_ENV: Final[str] = "POLYFMT_TIMEOUT"
NO_INPUT_MESSAGE: Final[str] = "No code to format."

LOGGER = logging.getLogger(__name__)


class FormatStage(StrEnum):
    """Stages a format request moves through, in order."""

    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    EXECUTING = "executing"
    CLASSIFYING = "classifying"
    DONE = "done"


@dataclass(slots=True)
class _RequestState:
    """Track the stage of one in-flight request for logging."""

    label: str
    stage: FormatStage = FormatStage.IDLE

    def advance(self, stage: FormatStage) -> None:
        self.stage = stage
        LOGGER.debug("[%s] %s", self.label, stage.value)


def resolve_timeout(timeout: float | None = None, env: Mapping[str, str] | None = None) -> float:
    """Return the effective deadline in seconds.

    Args:
        timeout: Explicit deadline; wins when provided.
        env: Environment consulted for ``POLYFMT_TIMEOUT``.

    Returns:
        float: Positive deadline in seconds.

    Raises:
        ValueError: If ``timeout`` is not positive.
    """

    if timeout is not None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        return float(timeout)
    env = os.environ if env is None else env
    raw = env.get(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", TIMEOUT_ENV, raw)
        return DEFAULT_TIMEOUT_SECONDS
    if value <= 0:
        LOGGER.warning("Ignoring non-positive %s=%r", TIMEOUT_ENV, raw)
        return DEFAULT_TIMEOUT_SECONDS
    return value


def _quote_path(path: Path, *, windows: bool) -> str:
    if windows:
        escaped = str(path).replace("'", "''")
        return f"'{escaped}'"
    return shlex.quote(str(path))


def rewrite_runtime_binaries(
    args: Sequence[str],
    binaries: Sequence[str],
    root: Path,
    *,
    windows: bool | None = None,
) -> tuple[str, ...]:
    """Point shell-wrapped runtime binaries at their absolute launcher paths.

    ``& prettier ...`` (PowerShell) or ``prettier ...`` (``sh -c``) becomes the
    quoted absolute launcher found below ``root``. Binaries without a launcher
    are left for ``PATH`` lookup.

    Args:
        args: Synthesized argument vector.
        binaries: Binary names declared by the formatter entry.
        root: Runtime package root.
        windows: Force PowerShell quoting; defaults to the host OS.

    Returns:
        tuple[str, ...]: New argument vector.
    """

    use_windows = os.name == "nt" if windows is None else windows
    rewritten = list(args)
    for binary in binaries:
        launcher = locate_runtime_binary(root, binary)
        if launcher is None:
            continue
        pattern = re.compile(rf"(^|&\s*){re.escape(binary)}(?=\s|$)")
        quoted = _quote_path(launcher, windows=use_windows)
        for index, arg in enumerate(rewritten):
            updated = pattern.sub(lambda match, text=quoted: f"{match.group(1)}{text}", arg, count=1)
            if updated != arg:
                rewritten[index] = updated
                break
    return tuple(rewritten)


class FormatterService:
    """Format source code by delegating to external formatter executables.

    The service reads the formatter entry and settings for the requested
    language, checks preconditions, synthesizes arguments, resolves the
    executable and runs it through the matching transport. Every outcome is
    returned as a :class:`FormatResult`; only task cancellation propagates.
    """

    def __init__(
        self,
        config: ConfigProvider,
        *,
        environment: EnvironmentProbe | None = None,
        resolver: CommandResolver | None = None,
        runner: ProcessRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._config = config
        self._environment = environment if environment is not None else NodeEnvironment()
        self._resolver = resolver if resolver is not None else CommandResolver(custom_path=config.get_custom_path)
        self._timeout = resolve_timeout(timeout)
        self._runner = runner if runner is not None else ProcessRunner(self._timeout)

    @property
    def timeout(self) -> float:
        """Return the deadline applied to each formatter run."""

        return self._timeout

    @property
    def resolver(self) -> CommandResolver:
        """Return the command resolver used to locate executables."""

        return self._resolver

    async def format(
        self,
        code: str,
        language: Language | str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> FormatResult:
        """Format ``code`` written in ``language``.

        Args:
            code: Source code to format.
            language: Language member or its configuration key.
            cancel: Event that aborts the run when set.

        Returns:
            FormatResult: Formatted code, or a failure with a readable message.
        """

        state = _RequestState(label=str(language))
        try:
            return await self._format(code, language, cancel, state)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Formatting %s failed during %s", language, state.stage.value)
            return FormatResult.fail(FormatErrorCategory.UNKNOWN, f"{ERROR_HEADING}\n\n{exc}")

    def format_sync(self, code: str, language: Language | str) -> FormatResult:
        """Run :meth:`format` to completion on a fresh event loop."""

        return asyncio.run(self.format(code, language))

    async def _format(
        self,
        code: str,
        language: Language | str,
        cancel: asyncio.Event | None,
        state: _RequestState,
    ) -> FormatResult:
        state.advance(FormatStage.VALIDATING)
        if not code.strip():
            return self._finish(state, FormatResult.fail(FormatErrorCategory.NO_INPUT, NO_INPUT_MESSAGE))

        resolved_language = language if isinstance(language, Language) else language_from_key(language)
        entry = self._config.get_formatter_entry(resolved_language) if resolved_language is not None else None
        if resolved_language is None or entry is None:
            name = resolved_language.display_name if resolved_language is not None else str(language)
            return self._finish(
                state,
                FormatResult.fail(FormatErrorCategory.UNCONFIGURED_LANGUAGE, f"No formatter configured for {name}."),
            )

        root: Path | None = None
        if entry.requires_runtime:
            precondition, root = await self._check_runtime(resolved_language, entry)
            if precondition is not None:
                return self._finish(state, precondition)

        state.advance(FormatStage.RESOLVING)
        settings = dict(self._config.get_settings_with_defaults(resolved_language))
        args = build_args(entry.dialect, entry.args, settings)
        if root is not None and entry.runtime_binaries:
            args = rewrite_runtime_binaries(args, entry.runtime_binaries, root)
        command = self._resolver.resolve(entry.command)
        LOGGER.debug("Resolved %s -> %s %s", entry.command, command, list(args))

        state.advance(FormatStage.EXECUTING)
        result = await self._execute(entry, command, args, code, cwd=root, cancel=cancel)

        state.advance(FormatStage.CLASSIFYING)
        if result.success:
            return self._finish(state, to_format_result(result))
        search_info = None
        if result.category is FormatErrorCategory.PROCESS_LAUNCH_FAILURE:
            search_info = self._resolver.describe_search(entry.command)
        return self._finish(state, translate_failure(result, entry, cwd=root, search_info=search_info))

    async def _check_runtime(self, language: Language, entry: FormatterEntry) -> tuple[FormatResult | None, Path | None]:
        """Verify the runtime and its packages, returning a failure or the package root."""

        if not await asyncio.to_thread(self._environment.is_runtime_installed):
            message = (
                "Node.js Required\n\n"
                f"{language.display_name} formatting requires Node.js to be installed.\n\n"
                f"Download: {NODE_DOWNLOAD_URL}"
            )
            return FormatResult.fail(FormatErrorCategory.RUNTIME_REQUIRED, message), None

        root = await asyncio.to_thread(self._environment.find_runtime_package_root)
        if root is None:
            message = (
                "Could not find npm global directory.\n\n"
                "Make sure Node.js and npm are installed and in PATH.\n"
                "Run 'npm root -g' in terminal to verify."
            )
            return FormatResult.fail(FormatErrorCategory.MISSING_PACKAGE, message), None

        missing = [name for name in entry.required_packages if not self._environment.package_exists(root, name)]
        if missing:
            message = (
                f"{', '.join(missing)} Not Installed\n\n"
                f"{language.display_name} formatting requires {' and '.join(missing)} to be installed globally.\n\n"
                f"Install with:\n  {install_hint(missing)}"
            )
            return FormatResult.fail(FormatErrorCategory.MISSING_PACKAGE, message), root
        return None, root

    async def _execute(
        self,
        entry: FormatterEntry,
        command: str,
        args: Sequence[str],
        code: str,
        *,
        cwd: Path | None,
        cancel: asyncio.Event | None,
    ) -> ProcessResult:
        if entry.transport is Transport.TEMP_FILE:
            return await self._runner.run_with_temp_file(
                command,
                args,
                code,
                entry.temp_file_extension,
                cwd=cwd,
                timeout=self._timeout,
                cancel=cancel,
                success_codes=entry.success_codes,
                trust_output=entry.trust_output_on_failure,
            )
        return await self._runner.run(
            command,
            args,
            code,
            cwd=cwd,
            timeout=self._timeout,
            cancel=cancel,
            success_codes=entry.success_codes,
            trust_output=entry.trust_output_on_failure,
        )

    @staticmethod
    def _finish(state: _RequestState, result: FormatResult) -> FormatResult:
        state.advance(FormatStage.DONE)
        return result


def format_code(
    code: str,
    language: Language | str,
    *,
    config: ConfigProvider | None = None,
    timeout: float | None = None,
) -> FormatResult:
    """Format ``code`` synchronously with the user's configuration.

    Args:
        code: Source code to format.
        language: Language member or its configuration key.
        config: Configuration provider; defaults to the user's config file.
        timeout: Deadline in seconds for the formatter run.

    Returns:
        FormatResult: Outcome of the format request.

    Raises:
        ConfigError: If the default configuration file is invalid.
    """

    provider = config if config is not None else ConfigStore.load()
    return FormatterService(provider, timeout=timeout).format_sync(code, language)


__all__ = [
    "TIMEOUT_ENV",
    "FormatStage",
    "FormatterService",
    "format_code",
    "resolve_timeout",
    "rewrite_runtime_binaries",
]

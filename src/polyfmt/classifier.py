# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide whether a formatter run succeeded and render failures for users."""

from __future__ import annotations

import logging
from collections.abc import Collection
from pathlib import Path
from typing import Final

from .models import FormatErrorCategory, FormatResult, FormatterEntry, ProcessResult, Transport

UNKNOWN_ERROR_MESSAGE: Final[str] = "Unknown formatting error occurred."
EMPTY_OUTPUT_MESSAGE: Final[str] = "Formatter produced no output."
ERROR_HEADING: Final[str] = "Formatting Error"

LOGGER = logging.getLogger(__name__)


def classify(
    transport: Transport,
    returncode: int,
    output: str,
    stderr: str = "",
    *,
    success_codes: Collection[int] = (0,),
    trust_output: bool = True,
) -> ProcessResult:
    """Turn raw process output into a :class:`ProcessResult`.

    A run succeeds when the exit status is listed in ``success_codes``, or when
    ``trust_output`` is set and the tool still produced output: stdout for the
    stdin transport, the read-back scratch file for the temp-file transport.
    Some tools exit non-zero to report that they changed the input, others
    after fixing what they could. stderr is always carried along so warnings
    survive a nominal success.

    An accepted exit status with no output at all is still a failure because
    there is nothing to hand back to the caller.

    Args:
        transport: Transport the output was collected from.
        returncode: Process exit status.
        output: Candidate formatted text.
        stderr: Captured standard error.
        success_codes: Exit statuses the tool uses for success.
        trust_output: Accept non-empty output despite an unexpected exit status.

    Returns:
        ProcessResult: Classified result.
    """

    has_output = bool(output.strip())
    exit_ok = returncode in success_codes
    if has_output and (exit_ok or trust_output):
        if not exit_ok:
            LOGGER.debug(
                "Accepting %s output despite exit status %s",
                transport.value,
                returncode,
            )
        return ProcessResult(success=True, output=output, error=stderr, returncode=returncode)
    message = stderr if stderr.strip() else (EMPTY_OUTPUT_MESSAGE if exit_ok else "")
    return ProcessResult(
        success=False,
        output=output,
        error=message,
        returncode=returncode,
        category=FormatErrorCategory.FORMATTER_REPORTED_ERROR,
    )


def translate_failure(
    result: ProcessResult,
    entry: FormatterEntry,
    *,
    cwd: Path | None = None,
    search_info: str | None = None,
) -> FormatResult:
    """Convert an unsuccessful :class:`ProcessResult` into a readable failure.

    Args:
        result: Failed process result.
        entry: Formatter entry that was executed.
        cwd: Working directory used for runtime-backed tools.
        search_info: Resolver search description appended to launch failures.

    Returns:
        FormatResult: Failed result whose output is the user-facing message.
    """

    message = result.error.strip() or UNKNOWN_ERROR_MESSAGE
    if entry.requires_runtime:
        message += f"\n\nDebug Info:\nWorking Directory: {cwd}"
    category = result.category or FormatErrorCategory.UNKNOWN
    if category is FormatErrorCategory.PROCESS_LAUNCH_FAILURE and search_info:
        message += f"\n\n{search_info}"
    return FormatResult.fail(category, f"{ERROR_HEADING}\n\n{message}")


def to_format_result(result: ProcessResult) -> FormatResult:
    """Convert a successful :class:`ProcessResult`, keeping stderr as warnings."""

    return FormatResult.ok(result.output, warnings=result.error.strip())


__all__ = ["UNKNOWN_ERROR_MESSAGE", "classify", "to_format_result", "translate_failure"]

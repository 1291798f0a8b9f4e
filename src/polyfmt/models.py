# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing formatter entries and format outcomes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .settings import SettingValue

FILE_PLACEHOLDER: Final[str] = "{file}"


class Transport(StrEnum):
    """Enumerate how code is delivered to and read back from a formatter."""

    STDIN = "stdin"
    TEMP_FILE = "temp-file"


class DialectKind(StrEnum):
    """Enumerate the argument dialects understood by the synthesizer."""

    DIRECT_FLAG = "direct-flag"
    INLINE = "inline"
    PREFIX_COMMAND = "prefix-command"
    REGEX_SUBSTITUTION = "regex-substitution"
    SIMPLE_APPEND = "simple-append"


class OptionKind(StrEnum):
    """Enumerate how a simple-append option renders its value."""

    FLAG = "flag"
    VALUE = "value"
    JOINED = "joined"


class FormatErrorCategory(StrEnum):
    """User-visible failure categories reported by the formatter service."""

    NO_INPUT = "no-input"
    UNCONFIGURED_LANGUAGE = "unconfigured-language"
    RUNTIME_REQUIRED = "runtime-required"
    MISSING_PACKAGE = "missing-package"
    PROCESS_LAUNCH_FAILURE = "process-launch-failure"
    PROCESS_TIMEOUT = "process-timeout"
    FORMATTER_REPORTED_ERROR = "formatter-reported-error"
    UNKNOWN = "unknown"


class OptionSpec(BaseModel):
    """Map one setting onto appended CLI tokens."""

    model_config = ConfigDict(frozen=True)

    setting: str
    kind: OptionKind = OptionKind.FLAG
    flag: str
    negate_flag: str | None = None


class SubstitutionSpec(BaseModel):
    """Rewrite part of a templated command token from a setting value.

    ``replacement`` is a :meth:`str.format` template receiving ``value``.
    """

    model_config = ConfigDict(frozen=True)

    setting: str
    pattern: str
    replacement: str


class DialectSpec(BaseModel):
    """Declare which argument dialect a formatter entry speaks."""

    model_config = ConfigDict(frozen=True)

    kind: DialectKind = DialectKind.INLINE
    primary_setting: str | None = None
    config_section: str | None = None
    marker: str | None = None
    options: tuple[OptionSpec, ...] = ()
    substitutions: tuple[SubstitutionSpec, ...] = ()

    @model_validator(mode="after")
    def _check_parameters(self) -> DialectSpec:
        """Reject dialect declarations that are missing their required parameters.

        Returns:
            DialectSpec: The validated specification.

        Raises:
            ValueError: If a required parameter for ``kind`` is absent.
        """

        if self.kind is DialectKind.DIRECT_FLAG and not self.config_section:
            raise ValueError("direct-flag dialect requires 'config_section'")
        if self.kind in {DialectKind.PREFIX_COMMAND, DialectKind.REGEX_SUBSTITUTION} and not self.marker:
            raise ValueError(f"{self.kind.value} dialect requires 'marker'")
        return self


class FormatterEntry(BaseModel):
    """Describe how to invoke one formatting tool for one language."""

    model_config = ConfigDict(frozen=True)

    command: str
    args: tuple[str, ...] = ()
    transport: Transport = Transport.STDIN
    temp_file_extension: str = ""
    requires_runtime: bool = False
    required_packages: tuple[str, ...] = ()
    runtime_binaries: tuple[str, ...] = ()
    dialect: DialectSpec = Field(default_factory=DialectSpec)
    success_codes: tuple[int, ...] = (0,)
    trust_output_on_failure: bool = True
    settings: Mapping[str, SettingValue] = Field(default_factory=dict)

    @field_validator("args", "required_packages", "runtime_binaries", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Sequence[object] | str | None) -> tuple[str, ...]:
        """Normalise string collections loaded from TOML into tuples.

        Args:
            value: Raw value supplied for the field.

        Returns:
            tuple[str, ...]: Values converted to strings.

        Raises:
            ValueError: If ``value`` is a bare string rather than an array.
        """

        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("expected an array of strings, not a single string")
        return tuple(str(item) for item in value)

    @field_validator("temp_file_extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith("."):
            return f".{value}"
        return value

    @model_validator(mode="after")
    def _check_transport(self) -> FormatterEntry:
        """Ensure temp-file entries say where the scratch path goes.

        Returns:
            FormatterEntry: The validated entry.

        Raises:
            ValueError: If a temp-file entry lacks the file placeholder.
        """

        if self.transport is Transport.TEMP_FILE and not any(FILE_PLACEHOLDER in arg for arg in self.args):
            raise ValueError(f"temp-file transport requires the '{FILE_PLACEHOLDER}' placeholder in args")
        return self


class ProcessResult(BaseModel):
    """Outcome of a single formatter process invocation."""

    model_config = ConfigDict(frozen=True)

    success: bool
    output: str = ""
    error: str = ""
    returncode: int | None = None
    category: FormatErrorCategory | None = None

    @classmethod
    def failure(cls, category: FormatErrorCategory, message: str, *, returncode: int | None = None) -> ProcessResult:
        """Return an unsuccessful result carrying ``message`` on the error channel.

        Args:
            category: Failure category to record.
            message: Human readable description of the failure.
            returncode: Exit status when the process ran to completion.

        Returns:
            ProcessResult: Unsuccessful result.
        """

        return cls(success=False, error=message, returncode=returncode, category=category)


class FormatResult(BaseModel):
    """Outcome of a format request as exposed to callers."""

    model_config = ConfigDict(frozen=True)

    success: bool
    output: str
    category: FormatErrorCategory | None = None
    warnings: str = ""

    @model_validator(mode="after")
    def _check_consistency(self) -> FormatResult:
        if self.success and not self.output:
            raise ValueError("a successful format result must carry output")
        if not self.success and self.category is None:
            raise ValueError("a failed format result must carry an error category")
        return self

    @classmethod
    def ok(cls, output: str, *, warnings: str = "") -> FormatResult:
        """Return a successful result."""

        return cls(success=True, output=output, warnings=warnings)

    @classmethod
    def fail(cls, category: FormatErrorCategory, message: str) -> FormatResult:
        """Return a failed result with a readable message."""

        return cls(success=False, output=message, category=category)


__all__ = [
    "FILE_PLACEHOLDER",
    "DialectKind",
    "DialectSpec",
    "FormatErrorCategory",
    "FormatResult",
    "FormatterEntry",
    "OptionKind",
    "OptionSpec",
    "ProcessResult",
    "SubstitutionSpec",
    "Transport",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Argument dialects translating generic settings into tool-specific CLI tokens."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Final, Protocol

from .models import DialectKind, DialectSpec, OptionKind, OptionSpec, SubstitutionSpec
from .settings import SettingsMap, SettingValue

__all__ = ["DialectStrategy", "build_args", "compile_dialect", "render_value", "to_kebab_case"]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class DialectStrategy(Protocol):  # pylint: disable=too-few-public-methods
    """Behaviour contract producing a new argument vector from settings."""

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        """Return ``base_args`` extended or rewritten to reflect ``settings``."""


class _OptionBehavior(Protocol):  # pylint: disable=too-few-public-methods
    """Behaviour contract appending the CLI fragment for one option."""

    def extend_command(self, command: list[str], value: SettingValue) -> None:
        """Mutate ``command`` to reflect ``value``."""


def render_value(value: SettingValue) -> str:
    """Render a setting value as CLI text, spelling booleans in lower case.

    Args:
        value: Setting value.

    Returns:
        str: Text form suitable for a command-line token.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_kebab_case(key: str) -> str:
    """Convert ``camelCase`` keys to ``kebab-case`` (``printWidth`` -> ``print-width``)."""

    return _CAMEL_BOUNDARY.sub("-", key).lower()


def _find_marker_token(args: Sequence[str], marker: str) -> int | None:
    for index, arg in enumerate(args):
        if marker in arg:
            return index
    return None


@dataclass(slots=True, frozen=True)
class _FlagOption:
    """Emit a flag when the value is truthy and an optional negation otherwise."""

    flag: str
    negate_flag: str | None

    def extend_command(self, command: list[str], value: SettingValue) -> None:
        if value is True or (not isinstance(value, bool) and bool(value)):
            command.append(self.flag)
            return
        if self.negate_flag:
            command.append(self.negate_flag)


@dataclass(slots=True, frozen=True)
class _ValueOption:
    """Emit ``flag value`` as two tokens."""

    flag: str

    def extend_command(self, command: list[str], value: SettingValue) -> None:
        command.extend((self.flag, render_value(value)))


@dataclass(slots=True, frozen=True)
class _JoinedOption:
    """Emit ``flag=value`` as a single token."""

    flag: str

    def extend_command(self, command: list[str], value: SettingValue) -> None:
        command.append(f"{self.flag}={render_value(value)}")


def _compile_option(option: OptionSpec) -> _OptionBehavior:
    if option.kind is OptionKind.VALUE:
        return _ValueOption(option.flag)
    if option.kind is OptionKind.JOINED:
        return _JoinedOption(option.flag)
    return _FlagOption(option.flag, option.negate_flag)


@dataclass(slots=True, frozen=True)
class _InlineDialect:
    """Leave the template untouched.

    Tools such as dprint only read options from a configuration file, so the
    settings are kept for persistence but never reach the command line.
    """

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        del settings
        return list(base_args)


@dataclass(slots=True, frozen=True)
class _DirectFlagDialect:
    """Emit the primary setting as a top-level flag and the rest as config overrides."""

    primary_setting: str | None
    config_section: str

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        command = list(base_args)
        for key, value in settings.items():
            if key == self.primary_setting:
                command.append(f"--{key}={render_value(value)}")
                continue
            literal = json.dumps(value) if isinstance(value, str) else render_value(value)
            command.extend(("--config", f"{self.config_section}.{key}={literal}"))
        return command


@dataclass(slots=True, frozen=True)
class _PrefixCommandDialect:
    """Append kebab-cased flags to the token carrying the tool's full invocation."""

    marker: str

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        command = list(base_args)
        index = _find_marker_token(command, self.marker)
        if index is None or not settings:
            return command
        flags: list[str] = []
        for key, value in settings.items():
            cli_key = to_kebab_case(key)
            if isinstance(value, bool):
                flags.append(f"--{cli_key}" if value else f"--no-{cli_key}")
            else:
                flags.append(f"--{cli_key}={render_value(value)}")
        command[index] = " ".join((command[index], *flags))
        return command


@dataclass(slots=True, frozen=True)
class _RegexSubstitutionDialect:
    """Rewrite known options in place inside the templated invocation token."""

    marker: str
    substitutions: tuple[SubstitutionSpec, ...]

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        command = list(base_args)
        index = _find_marker_token(command, self.marker)
        if index is None:
            return command
        token = command[index]
        for substitution in self.substitutions:
            value = settings.get(substitution.setting)
            if value is None or value == "":
                continue
            replacement = substitution.replacement.format(value=render_value(value))
            token = re.sub(substitution.pattern, lambda _match, text=replacement: text, token)
        command[index] = token
        return command


@dataclass(slots=True, frozen=True)
class _SimpleAppendDialect:
    """Append declared options in order, skipping settings that are absent."""

    options: tuple[tuple[str, _OptionBehavior], ...]

    def build(self, base_args: Sequence[str], settings: SettingsMap) -> list[str]:
        command = list(base_args)
        for setting, behavior in self.options:
            value = settings.get(setting)
            if value is None:
                continue
            behavior.extend_command(command, value)
        return command


_FACTORIES: Final[dict[DialectKind, Callable[[DialectSpec], DialectStrategy]]] = {
    DialectKind.INLINE: lambda spec: _InlineDialect(),
    DialectKind.DIRECT_FLAG: lambda spec: _DirectFlagDialect(spec.primary_setting, spec.config_section or ""),
    DialectKind.PREFIX_COMMAND: lambda spec: _PrefixCommandDialect(spec.marker or ""),
    DialectKind.REGEX_SUBSTITUTION: lambda spec: _RegexSubstitutionDialect(spec.marker or "", spec.substitutions),
    DialectKind.SIMPLE_APPEND: lambda spec: _SimpleAppendDialect(
        tuple((option.setting, _compile_option(option)) for option in spec.options),
    ),
}


def compile_dialect(spec: DialectSpec) -> DialectStrategy:
    """Return the strategy implementing ``spec``.

    Args:
        spec: Dialect declaration taken from a formatter entry.

    Returns:
        DialectStrategy: Strategy ready to build argument vectors.
    """

    return _FACTORIES[spec.kind](spec)


def build_args(spec: DialectSpec, base_args: Sequence[str], settings: Mapping[str, SettingValue]) -> tuple[str, ...]:
    """Return the final argument vector for a formatter invocation.

    Neither ``base_args`` nor ``settings`` is modified.

    Args:
        spec: Dialect declaration taken from the formatter entry.
        base_args: Argument template from the formatter entry.
        settings: Effective settings for the language.

    Returns:
        tuple[str, ...]: New argument vector.
    """

    if not settings:
        return tuple(base_args)
    return tuple(compile_dialect(spec).build(base_args, dict(settings)))

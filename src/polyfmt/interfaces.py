# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Interfaces for the collaborators the formatter service depends on."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from .languages import Language
from .models import FormatterEntry
from .settings import SettingValue


@runtime_checkable
class ConfigProvider(Protocol):
    """Supply formatter entries and user settings for each language."""

    @abstractmethod
    def get_formatter_entry(self, language: Language) -> FormatterEntry | None:
        """Return the formatter entry configured for ``language``.

        Args:
            language: Language whose formatter is requested.

        Returns:
            FormatterEntry | None: Entry describing the tool, or ``None`` when
            the language has no formatter configured.
        """
        raise NotImplementedError

    @abstractmethod
    def get_settings_with_defaults(self, language: Language) -> Mapping[str, SettingValue]:
        """Return the effective settings for ``language`` with defaults applied.

        Args:
            language: Language whose settings are requested.

        Returns:
            Mapping[str, SettingValue]: Settings keyed by setting name.
        """
        raise NotImplementedError

    @abstractmethod
    def get_custom_path(self, tool_name: str) -> Path | None:
        """Return the user-configured executable override for ``tool_name``.

        Args:
            tool_name: Logical command name such as ``ruff``.

        Returns:
            Path | None: Override path when one is configured.
        """
        raise NotImplementedError


@runtime_checkable
class EnvironmentProbe(Protocol):
    """Detect the scripting runtime some formatters are launched through."""

    @abstractmethod
    def is_runtime_installed(self) -> bool:
        """Return ``True`` when the runtime executable responds."""
        raise NotImplementedError

    @abstractmethod
    def find_runtime_package_root(self) -> Path | None:
        """Return the directory holding globally installed runtime packages.

        Returns:
            Path | None: Directory containing ``node_modules`` when found.
        """
        raise NotImplementedError

    @abstractmethod
    def package_exists(self, root: Path, package_name: str) -> bool:
        """Return ``True`` when ``package_name`` is installed below ``root``.

        Args:
            root: Package root returned by :meth:`find_runtime_package_root`.
            package_name: Package to look for.

        Returns:
            bool: Whether the package directory exists.
        """
        raise NotImplementedError


__all__ = ["ConfigProvider", "EnvironmentProbe"]

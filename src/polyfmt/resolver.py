# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve logical formatter names to concrete executables."""

from __future__ import annotations

import os
import platform
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

PACKAGE_DIR: Final[Path] = Path(__file__).resolve().parent
BUNDLED_BIN_DIR_NAME: Final[str] = "bin"

ARCH_ALIASES: Final[dict[str, str]] = {
    "amd64": "x64",
    "x86_64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

PLATFORM_ALIASES: Final[dict[str, str]] = {
    "win32": "win",
    "cygwin": "win",
    "darwin": "osx",
    "linux": "linux",
}


def _platform_tag() -> str:
    return PLATFORM_ALIASES.get(sys.platform, sys.platform)


def default_search_paths() -> tuple[Path, ...]:
    """Return bundled-binary directories in order of preference.

    The package-local ``bin`` directory covers development checkouts; the
    ``runtimes/<platform>[-<arch>]/native`` layouts cover packaged
    distributions; the interpreter's script directory covers formatters
    installed into the same environment (``pip install ruff``).

    Returns:
        tuple[Path, ...]: Directories to probe, most specific first.
    """

    plat = _platform_tag()
    arch = ARCH_ALIASES.get(platform.machine().lower(), platform.machine().lower())
    distribution_root = PACKAGE_DIR.parent
    scripts = Path(sys.prefix) / ("Scripts" if os.name == "nt" else "bin")
    return (
        PACKAGE_DIR / BUNDLED_BIN_DIR_NAME,
        distribution_root / "runtimes" / f"{plat}-{arch}" / "native",
        distribution_root / "runtimes" / plat / "native",
        scripts,
        PACKAGE_DIR,
    )


class CommandResolver:
    """Turn a command name into the executable path used to spawn it.

    Precedence: a user override that exists on disk, then the first bundled
    binary found in the search directories, then the bare name for the
    operating system's ``PATH`` lookup. Resolution never fails; an unknown
    name surfaces as a launch failure when the process is spawned.
    """

    def __init__(
        self,
        custom_path: Callable[[str], Path | None] | None = None,
        search_paths: Sequence[Path] | None = None,
    ) -> None:
        self._custom_path = custom_path
        self._search_paths = tuple(search_paths) if search_paths is not None else default_search_paths()

    @property
    def search_paths(self) -> tuple[Path, ...]:
        """Return the bundled-binary directories probed by :meth:`resolve`."""

        return self._search_paths

    def resolve(self, command: str) -> str:
        """Return the executable path for ``command``.

        Args:
            command: Logical tool name such as ``ruff``.

        Returns:
            str: Absolute path to an override or bundled binary, or ``command``
            unchanged so the OS can search ``PATH``.
        """

        if self._custom_path is not None:
            override = self._custom_path(command)
            if override is not None and override.is_file():
                return str(override)
        for directory in self._search_paths:
            for candidate in self._candidates(directory, command):
                if candidate.is_file():
                    return str(candidate)
        return command

    def describe_search(self, command: str) -> str:
        """Render the search list for ``command`` for troubleshooting output.

        Args:
            command: Logical tool name.

        Returns:
            str: Multi-line description of each probed location.
        """

        lines = ["Search paths:"]
        if self._custom_path is not None and (override := self._custom_path(command)) is not None:
            lines.append(f"  custom override {override} -> exists: {override.is_file()}")
        for directory in self._search_paths:
            for candidate in self._candidates(directory, command):
                lines.append(f"  {candidate} -> exists: {candidate.is_file()}")
        return "\n".join(lines)

    @staticmethod
    def _candidates(directory: Path, command: str) -> tuple[Path, ...]:
        if os.name == "nt" and not command.lower().endswith(".exe"):
            return (directory / f"{command}.exe", directory / command)
        return (directory / command,)


__all__ = ["CommandResolver", "default_search_paths"]

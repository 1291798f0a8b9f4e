# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Best-effort discovery of the Node.js runtime and its global packages."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Final

from .process_utils import SubprocessExecutionError, run_command

NODE_MODULES_DIR: Final[str] = "node_modules"
NODE_COMMAND: Final[str] = "node"
NPM_COMMAND: Final[str] = "npm"
NODE_DOWNLOAD_URL: Final[str] = "https://nodejs.org"

LOGGER = logging.getLogger(__name__)

CandidateGenerator = Callable[[Mapping[str, str]], Iterable[Path]]


def _from_npm(env: Mapping[str, str]) -> Iterator[Path]:
    """Yield the parent of ``npm root -g``, the authoritative answer when npm works."""

    del env
    try:
        completed = run_command([NPM_COMMAND, "root", "-g"])
    except (FileNotFoundError, SubprocessExecutionError) as exc:
        LOGGER.debug("npm root -g unavailable: %s", exc)
        return
    if reported := completed.stdout.strip():
        yield Path(reported).parent


def _from_npm_prefix(env: Mapping[str, str]) -> Iterator[Path]:
    if prefix := env.get("NPM_CONFIG_PREFIX") or env.get("npm_config_prefix"):
        base = Path(prefix).expanduser()
        yield base if os.name == "nt" else base / "lib"


def _from_appdata(env: Mapping[str, str]) -> Iterator[Path]:
    if appdata := env.get("APPDATA"):
        yield Path(appdata) / "npm"


def _from_home(env: Mapping[str, str]) -> Iterator[Path]:
    home = env.get("HOME") or env.get("USERPROFILE")
    if home:
        yield Path(home) / ".npm-global" / "lib"


def _from_system(env: Mapping[str, str]) -> Iterator[Path]:
    del env
    yield Path("/usr/local/lib")
    yield Path("/usr/lib")
    yield Path("/opt/homebrew/lib")


DEFAULT_CANDIDATES: Final[tuple[CandidateGenerator, ...]] = (
    _from_npm,
    _from_npm_prefix,
    _from_appdata,
    _from_home,
    _from_system,
)


class NodeEnvironment:
    """Probe the local Node.js installation used by prettier-style formatters.

    The package root is the directory that holds the global ``node_modules``
    folder. It is found by walking a ranked list of candidate generators and
    accepting the first candidate that actually contains ``node_modules``.
    """

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        candidates: Sequence[CandidateGenerator] | None = None,
        node_command: str = NODE_COMMAND,
    ) -> None:
        self._env = env
        self._candidates = tuple(candidates) if candidates is not None else DEFAULT_CANDIDATES
        self._node_command = node_command

    def is_runtime_installed(self) -> bool:
        """Return ``True`` when ``node --version`` succeeds."""

        try:
            run_command([self._node_command, "--version"])
        except (FileNotFoundError, PermissionError, SubprocessExecutionError) as exc:
            LOGGER.debug("Node.js not detected: %s", exc)
            return False
        return True

    def find_runtime_package_root(self) -> Path | None:
        """Return the first candidate directory containing ``node_modules``.

        Returns:
            Path | None: Package root, or ``None`` when no candidate matches.
        """

        env = os.environ if self._env is None else self._env
        for generator in self._candidates:
            for candidate in generator(env):
                if (candidate / NODE_MODULES_DIR).is_dir():
                    LOGGER.debug("Using Node package root %s", candidate)
                    return candidate
        return None

    def package_exists(self, root: Path, package_name: str) -> bool:
        """Return ``True`` when ``root/node_modules/<package_name>`` exists."""

        return (root / NODE_MODULES_DIR / package_name).is_dir()


def locate_runtime_binary(root: Path, name: str) -> Path | None:
    """Return the launcher script npm installed for ``name`` below ``root``.

    Windows global installs put ``name.cmd`` beside ``node_modules``; POSIX
    installs link ``name`` into the sibling ``bin`` directory.

    Args:
        root: Package root returned by :meth:`NodeEnvironment.find_runtime_package_root`.
        name: Binary name such as ``prettier``.

    Returns:
        Path | None: Existing launcher path, or ``None`` when none is found.
    """

    if os.name == "nt":
        candidates = (root / f"{name}.cmd", root / NODE_MODULES_DIR / ".bin" / f"{name}.cmd")
    else:
        candidates = (root.parent / "bin" / name, root / "bin" / name, root / NODE_MODULES_DIR / ".bin" / name)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def install_hint(packages: Sequence[str]) -> str:
    """Return the npm command installing ``packages`` globally."""

    return f"npm install -g {' '.join(packages)}"


__all__ = [
    "DEFAULT_CANDIDATES",
    "NODE_DOWNLOAD_URL",
    "NodeEnvironment",
    "install_hint",
    "locate_runtime_binary",
]

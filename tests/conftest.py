# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import pytest

from polyfmt.languages import Language
from polyfmt.models import FormatterEntry
from polyfmt.process import ProcessRunner
from polyfmt.settings import SettingValue

posix_only = pytest.mark.skipif(os.name == "nt", reason="fake tools are POSIX shell scripts")


class StubConfig:
    """In-memory ``ConfigProvider`` for service tests."""

    def __init__(
        self,
        entries: Mapping[Language, FormatterEntry] | None = None,
        settings: Mapping[Language, Mapping[str, SettingValue]] | None = None,
        paths: Mapping[str, Path] | None = None,
    ) -> None:
        self.entries = dict(entries or {})
        self.settings = dict(settings or {})
        self.paths = dict(paths or {})

    def get_formatter_entry(self, language: Language) -> FormatterEntry | None:
        return self.entries.get(language)

    def get_settings_with_defaults(self, language: Language) -> dict[str, SettingValue]:
        return dict(self.settings.get(language, {}))

    def get_custom_path(self, tool_name: str) -> Path | None:
        return self.paths.get(tool_name)


class StubEnvironment:
    """``EnvironmentProbe`` with fixed answers."""

    def __init__(self, *, installed: bool = True, root: Path | None = None, packages: tuple[str, ...] = ()) -> None:
        self.installed = installed
        self.root = root
        self.packages = set(packages)
        self.probes = 0

    def is_runtime_installed(self) -> bool:
        self.probes += 1
        return self.installed

    def find_runtime_package_root(self) -> Path | None:
        return self.root

    def package_exists(self, root: Path, package_name: str) -> bool:
        return package_name in self.packages


@pytest.fixture
def make_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory writing executable ``/bin/sh`` scripts into ``tmp_path/bin``."""

    def _make(name: str, body: str) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def runner(scratch_dir: Path) -> ProcessRunner:
    return ProcessRunner(timeout=5.0, scratch_dir=scratch_dir)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo CLI logging configuration so ``caplog`` keeps seeing package records."""

    logger = logging.getLogger("polyfmt")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate

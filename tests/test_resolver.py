# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for command resolution precedence."""

from __future__ import annotations

from pathlib import Path

from conftest import posix_only

from polyfmt.resolver import CommandResolver, default_search_paths


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


@posix_only
def test_custom_override_wins_over_bundled(tmp_path: Path) -> None:
    bundled = _touch(tmp_path / "bundle" / "ruff")
    override = _touch(tmp_path / "custom" / "ruff")
    resolver = CommandResolver(custom_path=lambda name: override, search_paths=[bundled.parent])

    assert resolver.resolve("ruff") == str(override)


@posix_only
def test_missing_override_falls_back_to_bundled(tmp_path: Path) -> None:
    bundled = _touch(tmp_path / "bundle" / "ruff")
    resolver = CommandResolver(custom_path=lambda name: tmp_path / "nope" / "ruff", search_paths=[bundled.parent])

    assert resolver.resolve("ruff") == str(bundled)


@posix_only
def test_first_search_directory_wins(tmp_path: Path) -> None:
    first = _touch(tmp_path / "first" / "ruff")
    _touch(tmp_path / "second" / "ruff")
    resolver = CommandResolver(search_paths=[tmp_path / "missing", first.parent, tmp_path / "second"])

    assert resolver.resolve("ruff") == str(first)


def test_bare_name_when_nothing_found(tmp_path: Path) -> None:
    resolver = CommandResolver(custom_path=lambda name: None, search_paths=[tmp_path])

    assert resolver.resolve("definitely-not-installed") == "definitely-not-installed"


def test_directories_are_not_treated_as_binaries(tmp_path: Path) -> None:
    (tmp_path / "ruff").mkdir()
    resolver = CommandResolver(search_paths=[tmp_path])

    assert resolver.resolve("ruff") == "ruff"


@posix_only
def test_describe_search_lists_candidates(tmp_path: Path) -> None:
    _touch(tmp_path / "ruff")
    resolver = CommandResolver(custom_path=lambda name: tmp_path / "custom-ruff", search_paths=[tmp_path])

    description = resolver.describe_search("ruff")

    assert description.startswith("Search paths:")
    assert f"{tmp_path / 'custom-ruff'} -> exists: False" in description
    assert f"{tmp_path / 'ruff'} -> exists: True" in description


def test_default_search_paths_include_package_bin() -> None:
    paths = default_search_paths()

    assert paths[0].name == "bin"
    assert paths[0].parent.name == "polyfmt"

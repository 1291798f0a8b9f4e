# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for argument dialect synthesis."""

from __future__ import annotations

import pytest

from polyfmt.config import default_formatters
from polyfmt.config.defaults import PRETTIER_JAVA_INVOCATION, SQL_FORMATTER_INVOCATION
from polyfmt.dialects import build_args, to_kebab_case
from polyfmt.languages import Language
from polyfmt.models import DialectKind, DialectSpec, OptionKind, OptionSpec


def _entry(language: Language):
    return default_formatters()[language]


def test_empty_settings_return_base_args() -> None:
    entry = _entry(Language.PYTHON)

    assert build_args(entry.dialect, entry.args, {}) == ("format", "-")


def test_ruff_direct_flags_and_config_overrides() -> None:
    entry = _entry(Language.PYTHON)
    settings = {"line-length": 100, "quote-style": "single", "preview": True}

    args = build_args(entry.dialect, entry.args, settings)

    assert args == (
        "format",
        "-",
        "--line-length=100",
        "--config",
        'format.quote-style="single"',
        "--config",
        "format.preview=true",
    )


def test_inline_dialect_ignores_settings() -> None:
    entry = _entry(Language.TYPESCRIPT)

    assert build_args(entry.dialect, entry.args, {"lineWidth": 80}) == entry.args


def test_prefix_command_appends_kebab_flags_to_marker_token() -> None:
    entry = _entry(Language.JAVA)

    args = build_args(entry.dialect, entry.args, {"printWidth": 100, "useTabs": False, "semi": True})

    assert args[:-1] == entry.args[:-1]
    assert args[-1].endswith(f"{PRETTIER_JAVA_INVOCATION} --print-width=100 --no-use-tabs --semi")


def test_regex_substitution_rewrites_language() -> None:
    entry = _entry(Language.SQL)

    args = build_args(entry.dialect, entry.args, {"language": "mysql", "tabWidth": 4})

    assert args[-1].endswith(SQL_FORMATTER_INVOCATION.replace("postgresql", "mysql"))


def test_regex_substitution_skips_empty_value() -> None:
    entry = _entry(Language.SQL)

    args = build_args(entry.dialect, entry.args, {"language": ""})

    assert args == entry.args


@pytest.mark.parametrize(("extra", "expected"), [(True, True), (False, False)])
def test_gofumpt_extra_flag(extra: bool, expected: bool) -> None:
    entry = _entry(Language.GO)

    args = build_args(entry.dialect, entry.args, {"extra": extra})

    assert ("-extra" in args) is expected


def test_gofumpt_extra_absent_adds_nothing() -> None:
    entry = _entry(Language.GO)

    assert "-extra" not in build_args(entry.dialect, entry.args, {"unrelated": True})


def test_shfmt_value_and_flag_options() -> None:
    entry = _entry(Language.SHELL)
    settings = {
        "indent": 4,
        "binaryNextLine": True,
        "caseIndent": False,
        "spaceRedirects": True,
        "keepPadding": False,
        "funcNextLine": True,
    }

    assert build_args(entry.dialect, entry.args, settings) == ("-i", "4", "-bn", "-sr", "-fn")


def test_clang_joined_style() -> None:
    entry = _entry(Language.CPP)

    args = build_args(entry.dialect, entry.args, {"style": "Google"})

    assert args == ("--assume-filename=file.cpp", "--style=Google")


def test_negate_flag_emitted_for_false() -> None:
    dialect = DialectSpec(
        kind=DialectKind.SIMPLE_APPEND,
        options=(OptionSpec(setting="tabs", kind=OptionKind.FLAG, flag="--tabs", negate_flag="--spaces"),),
    )

    assert build_args(dialect, (), {"tabs": False}) == ("--spaces",)


def test_build_args_does_not_mutate_inputs() -> None:
    entry = _entry(Language.JAVA)
    base = list(entry.args)
    settings = {"printWidth": 100}

    build_args(entry.dialect, base, settings)

    assert base == list(entry.args)
    assert settings == {"printWidth": 100}


@pytest.mark.parametrize(
    ("key", "expected"),
    [("printWidth", "print-width"), ("useTabs", "use-tabs"), ("semi", "semi"), ("line-length", "line-length")],
)
def test_to_kebab_case(key: str, expected: str) -> None:
    assert to_kebab_case(key) == expected

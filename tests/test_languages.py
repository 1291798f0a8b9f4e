# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the language registry."""

import pytest

from polyfmt.languages import LANGUAGES, Language, language_from_key, language_info


def test_every_language_is_registered_once() -> None:
    registered = [info.language for info in LANGUAGES]

    assert sorted(registered) == sorted(Language)
    assert len(set(registered)) == len(registered)


def test_config_key_matches_enum_value() -> None:
    info = language_info(Language.OBJECTIVE_C)

    assert info.config_key == "objc"
    assert info.display_name == "Objective-C"
    assert Language.OBJECTIVE_C.info is info


@pytest.mark.parametrize("key", ["python", "Python", " PYTHON "])
def test_language_from_key_is_case_insensitive(key: str) -> None:
    assert language_from_key(key) is Language.PYTHON


def test_language_from_key_unknown_returns_none() -> None:
    assert language_from_key("cobol") is None


def test_display_name_property() -> None:
    assert Language.CSHARP.display_name == "C#"
    assert Language.SHELL.display_name == "Shell/Bash"

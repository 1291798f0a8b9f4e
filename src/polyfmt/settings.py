# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema metadata describing the configurable knobs of each formatter."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Final, TypeAlias

from pydantic import BaseModel, ConfigDict, model_validator

from .languages import Language

SettingValue: TypeAlias = bool | int | str
SettingsMap: TypeAlias = Mapping[str, SettingValue]

LOGGER = logging.getLogger(__name__)


class SettingType(StrEnum):
    """Enumerate the value types a formatter setting may hold."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    CHOICE = "choice"


class SettingDefinition(BaseModel):
    """Describe one configurable option of a formatter."""

    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str
    type: SettingType
    default: SettingValue
    minimum: int | None = None
    maximum: int | None = None
    choices: tuple[str, ...] = ()
    description: str = ""

    @model_validator(mode="after")
    def _check_default(self) -> SettingDefinition:
        """Ensure the declared default satisfies the declared type and bounds.

        Returns:
            SettingDefinition: The validated definition.

        Raises:
            ValueError: If the default value violates the definition.
        """

        if self.coerce(self.default) is None:
            raise ValueError(f"default for setting '{self.key}' does not satisfy its declared type")
        return self

    def coerce(self, value: object) -> SettingValue | None:
        """Return ``value`` converted to this setting's type, or ``None`` when invalid.

        Args:
            value: Raw value loaded from configuration.

        Returns:
            SettingValue | None: Normalised value ready for argument synthesis.
        """

        if self.type is SettingType.BOOLEAN:
            return value if isinstance(value, bool) else None
        if self.type is SettingType.INTEGER:
            if isinstance(value, bool):
                return None
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            if not isinstance(value, int):
                return None
            if self.minimum is not None and value < self.minimum:
                return None
            if self.maximum is not None and value > self.maximum:
                return None
            return value
        if not isinstance(value, str):
            return None
        if self.choices and value not in self.choices:
            return None
        return value


def _integer(key: str, name: str, default: int, low: int, high: int, description: str) -> SettingDefinition:
    return SettingDefinition(
        key=key,
        display_name=name,
        type=SettingType.INTEGER,
        default=default,
        minimum=low,
        maximum=high,
        description=description,
    )


def _boolean(key: str, name: str, default: bool, description: str) -> SettingDefinition:
    return SettingDefinition(key=key, display_name=name, type=SettingType.BOOLEAN, default=default, description=description)


def _choice(key: str, name: str, default: str, choices: tuple[str, ...], description: str) -> SettingDefinition:
    return SettingDefinition(
        key=key,
        display_name=name,
        type=SettingType.CHOICE,
        default=default,
        choices=choices,
        description=description,
    )


_LINE_WIDTH_120: Final = _integer("lineWidth", "Line Width", 120, 40, 400, "Maximum line width")
_LINE_WIDTH_80: Final = _integer("lineWidth", "Line Width", 80, 40, 400, "Maximum line width")
_INDENT_WIDTH: Final = _integer("indentWidth", "Indent Width", 2, 1, 16, "Number of spaces for indentation")
_USE_TABS: Final = _boolean("useTabs", "Use Tabs", False, "Use tabs instead of spaces")
_PRINT_WIDTH: Final = _integer("printWidth", "Print Width", 80, 40, 400, "Maximum line width")
_TAB_WIDTH: Final = _integer("tabWidth", "Tab Width", 2, 1, 16, "Number of spaces per tab")
_CASE_CHOICES: Final[tuple[str, ...]] = ("preserve", "upper", "lower")

PYTHON_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _integer("line-length", "Line Length", 88, 40, 400, "Maximum line length"),
    _choice("indent-style", "Indent Style", "space", ("space", "tab"), "Use spaces or tabs for indentation"),
    _choice("quote-style", "Quote Style", "double", ("double", "single", "preserve"), "Preferred quote style for strings"),
    _choice("line-ending", "Line Ending", "auto", ("auto", "lf", "cr-lf", "native"), "Line ending style"),
)

TYPESCRIPT_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _LINE_WIDTH_120,
    _INDENT_WIDTH,
    _USE_TABS,
    _choice("semiColons", "Semicolons", "prefer", ("prefer", "asi"), "Whether to use semicolons"),
    _choice(
        "quoteStyle",
        "Quote Style",
        "double",
        ("double", "single", "preferDouble", "preferSingle"),
        "Preferred quote style",
    ),
)

JSON_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _LINE_WIDTH_120,
    _INDENT_WIDTH,
    _USE_TABS,
    _choice("newLineKind", "Line Ending", "lf", ("auto", "lf", "crlf", "system"), "Line ending style"),
    _choice("trailingCommas", "Trailing Commas", "jsonc", ("never", "jsonc", "always"), "When to use trailing commas"),
)

MARKDOWN_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _LINE_WIDTH_80,
    _choice("textWrap", "Text Wrap", "maintain", ("always", "never", "maintain"), "How to wrap text"),
)

TOML_SETTINGS: Final[tuple[SettingDefinition, ...]] = (_LINE_WIDTH_120, _INDENT_WIDTH, _USE_TABS)

CSS_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _PRINT_WIDTH,
    _TAB_WIDTH,
    _USE_TABS,
    _boolean("singleQuote", "Single Quotes", False, "Use single quotes instead of double quotes"),
)

HTML_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _PRINT_WIDTH,
    _TAB_WIDTH,
    _USE_TABS,
    _boolean(
        "closingBracketSameLine",
        "Closing Bracket Same Line",
        False,
        "Put closing bracket on same line as last attribute",
    ),
)

YAML_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _LINE_WIDTH_80,
    _INDENT_WIDTH,
    _choice(
        "quotes",
        "Quote Style",
        "preferDouble",
        ("preferDouble", "preferSingle", "forceDouble", "forceSingle"),
        "Preferred quote style",
    ),
)

GRAPHQL_SETTINGS: Final[tuple[SettingDefinition, ...]] = (_LINE_WIDTH_80, _INDENT_WIDTH, _USE_TABS)

DOCKERFILE_SETTINGS: Final[tuple[SettingDefinition, ...]] = (_LINE_WIDTH_120,)

JAVA_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _PRINT_WIDTH,
    _integer("tabWidth", "Tab Width", 4, 1, 16, "Number of spaces per tab"),
    _USE_TABS,
)

SQL_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _TAB_WIDTH,
    _USE_TABS,
    _choice("keywordCase", "Keyword Case", "preserve", _CASE_CHOICES, "Case for SQL keywords"),
    _choice("dataTypeCase", "Data Type Case", "preserve", _CASE_CHOICES, "Case for data types"),
    _choice("functionCase", "Function Case", "preserve", _CASE_CHOICES, "Case for function names"),
    _choice(
        "language",
        "SQL Dialect",
        "postgresql",
        ("sql", "postgresql", "mysql", "mariadb", "transactsql", "sqlite", "bigquery", "spark", "redshift"),
        "SQL dialect to use",
    ),
)

CLANG_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _choice(
        "style",
        "Style",
        "LLVM",
        ("LLVM", "Google", "Chromium", "Mozilla", "WebKit", "Microsoft", "GNU"),
        "Predefined clang-format style",
    ),
)

GO_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _boolean("extra", "Extra Rules", False, "Enable gofumpt's stricter extra rules"),
)

SHELL_SETTINGS: Final[tuple[SettingDefinition, ...]] = (
    _integer("indent", "Indent", 2, 0, 16, "Indent width; 0 indents with tabs"),
    _boolean("binaryNextLine", "Binary Ops Next Line", False, "Binary operators may start a line"),
    _boolean("caseIndent", "Indent Case", False, "Indent switch cases"),
    _boolean("spaceRedirects", "Space Redirects", False, "Redirect operators are followed by a space"),
    _boolean("keepPadding", "Keep Padding", False, "Keep column alignment padding"),
    _boolean("funcNextLine", "Function Brace Next Line", False, "Function opening braces go on the next line"),
)

_DEFINITIONS: Final[dict[Language, tuple[SettingDefinition, ...]]] = {
    Language.PYTHON: PYTHON_SETTINGS,
    Language.JAVASCRIPT: TYPESCRIPT_SETTINGS,
    Language.TYPESCRIPT: TYPESCRIPT_SETTINGS,
    Language.JSON: JSON_SETTINGS,
    Language.MARKDOWN: MARKDOWN_SETTINGS,
    Language.TOML: TOML_SETTINGS,
    Language.CSS: CSS_SETTINGS,
    Language.SCSS: CSS_SETTINGS,
    Language.LESS: CSS_SETTINGS,
    Language.HTML: HTML_SETTINGS,
    Language.VUE: HTML_SETTINGS,
    Language.SVELTE: HTML_SETTINGS,
    Language.ASTRO: HTML_SETTINGS,
    Language.YAML: YAML_SETTINGS,
    Language.GRAPHQL: GRAPHQL_SETTINGS,
    Language.DOCKERFILE: DOCKERFILE_SETTINGS,
    Language.JAVA: JAVA_SETTINGS,
    Language.SQL: SQL_SETTINGS,
    Language.C: CLANG_SETTINGS,
    Language.CPP: CLANG_SETTINGS,
    Language.OBJECTIVE_C: CLANG_SETTINGS,
    Language.GO: GO_SETTINGS,
    Language.SHELL: SHELL_SETTINGS,
}


def setting_definitions(language: Language) -> tuple[SettingDefinition, ...]:
    """Return the setting definitions declared for ``language``.

    Args:
        language: Language whose formatter settings are requested.

    Returns:
        tuple[SettingDefinition, ...]: Definitions in display order; empty when
        the language's formatter exposes no settings.
    """

    return _DEFINITIONS.get(language, ())


def resolve_settings(
    definitions: tuple[SettingDefinition, ...],
    saved: Mapping[str, object] | None,
) -> dict[str, SettingValue]:
    """Return a settings map combining defaults with saved user values.

    Unknown keys are ignored. Saved values that do not satisfy their definition
    fall back to the default so a hand-edited config can never produce an
    argument the tool rejects.

    Args:
        definitions: Setting definitions for one language.
        saved: User-saved values, possibly containing unknown keys.

    Returns:
        dict[str, SettingValue]: A new map keyed by every defined setting.
    """

    resolved: dict[str, SettingValue] = {definition.key: definition.default for definition in definitions}
    if not saved:
        return resolved
    by_key = {definition.key: definition for definition in definitions}
    for key, raw in saved.items():
        definition = by_key.get(key)
        if definition is None:
            continue
        value = definition.coerce(raw)
        if value is None:
            LOGGER.warning("Ignoring invalid value %r for setting '%s'; using default", raw, key)
            continue
        resolved[key] = value
    return resolved


__all__ = [
    "SettingDefinition",
    "SettingType",
    "SettingValue",
    "SettingsMap",
    "resolve_settings",
    "setting_definitions",
]

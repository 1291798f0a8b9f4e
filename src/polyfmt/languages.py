# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry of the source languages polyfmt knows how to route to a formatter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class Language(StrEnum):
    """Closed set of supported languages keyed by their configuration identifier."""

    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JSON = "json"
    MARKDOWN = "markdown"
    TOML = "toml"
    CSS = "css"
    SCSS = "scss"
    LESS = "less"
    HTML = "html"
    VUE = "vue"
    SVELTE = "svelte"
    ASTRO = "astro"
    YAML = "yaml"
    GRAPHQL = "graphql"
    DOCKERFILE = "dockerfile"
    JAVA = "java"
    SQL = "sql"
    C = "c"
    CPP = "cpp"
    CSHARP = "csharp"
    GO = "go"
    ASSEMBLY = "assembly"
    SHELL = "shell"
    LUA = "lua"
    R = "r"
    DELPHI = "delphi"
    OBJECTIVE_C = "objc"
    KOTLIN = "kotlin"
    HASKELL = "haskell"
    PERL = "perl"
    PHP = "php"
    MATLAB = "matlab"
    RUBY = "ruby"

    @property
    def info(self) -> LanguageInfo:
        """Return the registry metadata describing this language."""

        return language_info(self)

    @property
    def display_name(self) -> str:
        """Return the human readable name of the language."""

        return language_info(self).display_name


@dataclass(frozen=True, slots=True)
class LanguageInfo:
    """Static metadata describing one language."""

    language: Language
    display_name: str
    file_extension: str
    editor_language: str

    @property
    def config_key(self) -> str:
        """Return the key used for this language in configuration files."""

        return self.language.value


LANGUAGES: Final[tuple[LanguageInfo, ...]] = (
    LanguageInfo(Language.PYTHON, "Python", "py", "python"),
    LanguageInfo(Language.JAVASCRIPT, "JavaScript", "js", "javascript"),
    LanguageInfo(Language.TYPESCRIPT, "TypeScript", "ts", "typescript"),
    LanguageInfo(Language.JSON, "JSON", "json", "json"),
    LanguageInfo(Language.MARKDOWN, "Markdown", "md", "markdown"),
    LanguageInfo(Language.TOML, "TOML", "toml", "toml"),
    LanguageInfo(Language.CSS, "CSS", "css", "css"),
    LanguageInfo(Language.SCSS, "SCSS", "scss", "scss"),
    LanguageInfo(Language.LESS, "Less", "less", "less"),
    LanguageInfo(Language.HTML, "HTML", "html", "html"),
    LanguageInfo(Language.VUE, "Vue", "vue", "html"),
    LanguageInfo(Language.SVELTE, "Svelte", "svelte", "html"),
    LanguageInfo(Language.ASTRO, "Astro", "astro", "html"),
    LanguageInfo(Language.YAML, "YAML", "yaml", "yaml"),
    LanguageInfo(Language.GRAPHQL, "GraphQL", "graphql", "graphql"),
    LanguageInfo(Language.DOCKERFILE, "Dockerfile", "Dockerfile", "dockerfile"),
    LanguageInfo(Language.JAVA, "Java", "java", "java"),
    LanguageInfo(Language.SQL, "SQL", "sql", "sql"),
    LanguageInfo(Language.C, "C", "c", "c"),
    LanguageInfo(Language.CPP, "C++", "cpp", "cpp"),
    LanguageInfo(Language.CSHARP, "C#", "cs", "csharp"),
    LanguageInfo(Language.GO, "Go", "go", "go"),
    LanguageInfo(Language.ASSEMBLY, "Go Assembly", "s", "plaintext"),
    LanguageInfo(Language.SHELL, "Shell/Bash", "sh", "shell"),
    LanguageInfo(Language.LUA, "Lua", "lua", "lua"),
    LanguageInfo(Language.R, "R", "r", "r"),
    LanguageInfo(Language.DELPHI, "Delphi/Pascal", "pas", "pascal"),
    LanguageInfo(Language.OBJECTIVE_C, "Objective-C", "m", "objective-c"),
    LanguageInfo(Language.KOTLIN, "Kotlin", "kt", "kotlin"),
    LanguageInfo(Language.HASKELL, "Haskell", "hs", "haskell"),
    LanguageInfo(Language.PERL, "Perl", "pl", "perl"),
    LanguageInfo(Language.PHP, "PHP", "php", "php"),
    LanguageInfo(Language.MATLAB, "MATLAB", "m", "plaintext"),
    LanguageInfo(Language.RUBY, "Ruby", "rb", "ruby"),
)

_BY_LANGUAGE: Final[dict[Language, LanguageInfo]] = {info.language: info for info in LANGUAGES}
_BY_KEY: Final[dict[str, LanguageInfo]] = {info.config_key.lower(): info for info in LANGUAGES}


def language_info(language: Language) -> LanguageInfo:
    """Return the registry entry for ``language``.

    Args:
        language: Language member to look up.

    Returns:
        LanguageInfo: Metadata for the language.
    """

    return _BY_LANGUAGE[language]


def language_from_key(key: str) -> Language | None:
    """Return the language whose configuration key matches ``key``.

    Matching is case-insensitive so that hand-edited configuration files and
    CLI arguments such as ``Python`` resolve to :attr:`Language.PYTHON`.

    Args:
        key: Configuration key or CLI token.

    Returns:
        Language | None: Matching language, or ``None`` when unknown.
    """

    info = _BY_KEY.get(key.strip().lower())
    return info.language if info is not None else None


__all__ = ["LANGUAGES", "Language", "LanguageInfo", "language_from_key", "language_info"]

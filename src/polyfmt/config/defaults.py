# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in formatter table used when no user configuration overrides an entry."""

from __future__ import annotations

import os
from typing import Final

from ..languages import Language
from ..models import (
    FILE_PLACEHOLDER,
    DialectKind,
    DialectSpec,
    FormatterEntry,
    OptionKind,
    OptionSpec,
    SubstitutionSpec,
    Transport,
)

DPRINT_PLUGIN_TYPESCRIPT: Final[str] = "https://plugins.dprint.dev/typescript-0.95.13.wasm"
DPRINT_PLUGIN_JSON: Final[str] = "https://plugins.dprint.dev/json-0.21.0.wasm"
DPRINT_PLUGIN_MARKDOWN: Final[str] = "https://plugins.dprint.dev/markdown-0.20.0.wasm"
DPRINT_PLUGIN_TOML: Final[str] = "https://plugins.dprint.dev/toml-0.7.0.wasm"
DPRINT_PLUGIN_MALVA: Final[str] = "https://plugins.dprint.dev/g-plane/malva-v0.15.1.wasm"
DPRINT_PLUGIN_MARKUP_FMT: Final[str] = "https://plugins.dprint.dev/g-plane/markup_fmt-v0.25.1.wasm"
DPRINT_PLUGIN_YAML: Final[str] = "https://plugins.dprint.dev/g-plane/pretty_yaml-v0.5.1.wasm"
DPRINT_PLUGIN_GRAPHQL: Final[str] = "https://plugins.dprint.dev/g-plane/pretty_graphql-v0.2.3.wasm"
DPRINT_PLUGIN_DOCKERFILE: Final[str] = "https://plugins.dprint.dev/dockerfile-0.3.3.wasm"

PRETTIER_JAVA_INVOCATION: Final[str] = "prettier --plugin=prettier-plugin-java --parser java"
SQL_FORMATTER_INVOCATION: Final[str] = "sql-formatter --language postgresql"

_RUFF_DIALECT: Final = DialectSpec(
    kind=DialectKind.DIRECT_FLAG,
    primary_setting="line-length",
    config_section="format",
)
_CLANG_DIALECT: Final = DialectSpec(
    kind=DialectKind.SIMPLE_APPEND,
    options=(OptionSpec(setting="style", kind=OptionKind.JOINED, flag="--style"),),
)


def _dprint(stdin_name: str, plugin: str) -> FormatterEntry:
    return FormatterEntry(
        command="dprint",
        args=("fmt", "--stdin", stdin_name, "--plugins", plugin, "--config-discovery=false"),
    )


def shell_wrapper(invocation: str, *, windows: bool | None = None) -> tuple[str, tuple[str, ...]]:
    """Return the command and args launching ``invocation`` through a shell.

    Node-based formatters are installed as shell shims (``prettier.cmd`` on
    Windows), so they are launched through PowerShell or ``sh`` with the full
    invocation carried in a single argument token.

    Args:
        invocation: Tool name followed by its fixed arguments.
        windows: Force the Windows or POSIX wrapper; defaults to the host OS.

    Returns:
        tuple[str, tuple[str, ...]]: Wrapper command and its argument vector.
    """

    use_windows = os.name == "nt" if windows is None else windows
    if use_windows:
        return "powershell", ("-NoProfile", "-NonInteractive", "-Command", f"& {invocation}")
    return "sh", ("-c", invocation)


def _node_entry(invocation: str, *, packages: tuple[str, ...], binary: str, dialect: DialectSpec) -> FormatterEntry:
    command, args = shell_wrapper(invocation)
    return FormatterEntry(
        command=command,
        args=args,
        requires_runtime=True,
        required_packages=packages,
        runtime_binaries=(binary,),
        dialect=dialect,
    )


def _temp_file(command: str, *args: str, extension: str, trust_output: bool = True) -> FormatterEntry:
    return FormatterEntry(
        command=command,
        args=args,
        transport=Transport.TEMP_FILE,
        temp_file_extension=extension,
        trust_output_on_failure=trust_output,
    )


def default_formatters() -> dict[Language, FormatterEntry]:
    """Return the built-in formatter entry for every supported language.

    Returns:
        dict[Language, FormatterEntry]: Fresh mapping that callers may mutate.
    """

    return {
        Language.PYTHON: FormatterEntry(command="ruff", args=("format", "-"), dialect=_RUFF_DIALECT),
        Language.JAVASCRIPT: _dprint("file.js", DPRINT_PLUGIN_TYPESCRIPT),
        Language.TYPESCRIPT: _dprint("file.ts", DPRINT_PLUGIN_TYPESCRIPT),
        Language.JSON: _dprint("file.json", DPRINT_PLUGIN_JSON),
        Language.MARKDOWN: _dprint("file.md", DPRINT_PLUGIN_MARKDOWN),
        Language.TOML: _dprint("file.toml", DPRINT_PLUGIN_TOML),
        Language.CSS: _dprint("file.css", DPRINT_PLUGIN_MALVA),
        Language.SCSS: _dprint("file.scss", DPRINT_PLUGIN_MALVA),
        Language.LESS: _dprint("file.less", DPRINT_PLUGIN_MALVA),
        Language.HTML: _dprint("file.html", DPRINT_PLUGIN_MARKUP_FMT),
        Language.VUE: _dprint("file.vue", DPRINT_PLUGIN_MARKUP_FMT),
        Language.SVELTE: _dprint("file.svelte", DPRINT_PLUGIN_MARKUP_FMT),
        Language.ASTRO: _dprint("file.astro", DPRINT_PLUGIN_MARKUP_FMT),
        Language.YAML: _dprint("file.yaml", DPRINT_PLUGIN_YAML),
        Language.GRAPHQL: _dprint("file.graphql", DPRINT_PLUGIN_GRAPHQL),
        Language.DOCKERFILE: _dprint("Dockerfile", DPRINT_PLUGIN_DOCKERFILE),
        Language.JAVA: _node_entry(
            PRETTIER_JAVA_INVOCATION,
            packages=("prettier", "prettier-plugin-java"),
            binary="prettier",
            dialect=DialectSpec(kind=DialectKind.PREFIX_COMMAND, marker="prettier"),
        ),
        Language.SQL: _node_entry(
            SQL_FORMATTER_INVOCATION,
            packages=("sql-formatter",),
            binary="sql-formatter",
            dialect=DialectSpec(
                kind=DialectKind.REGEX_SUBSTITUTION,
                marker="sql-formatter",
                substitutions=(
                    SubstitutionSpec(setting="language", pattern=r"--language\s+\w+", replacement="--language {value}"),
                ),
            ),
        ),
        Language.C: FormatterEntry(command="clang-format", args=("--assume-filename=file.c",), dialect=_CLANG_DIALECT),
        Language.CPP: FormatterEntry(
            command="clang-format",
            args=("--assume-filename=file.cpp",),
            dialect=_CLANG_DIALECT,
        ),
        Language.OBJECTIVE_C: FormatterEntry(
            command="clang-format",
            args=("--assume-filename=file.m",),
            dialect=_CLANG_DIALECT,
        ),
        # The scratch file starts out holding the input; trust only the exit status.
        Language.CSHARP: _temp_file("csharpier", "format", FILE_PLACEHOLDER, extension=".cs", trust_output=False),
        Language.GO: FormatterEntry(
            command="gofumpt",
            dialect=DialectSpec(
                kind=DialectKind.SIMPLE_APPEND,
                options=(OptionSpec(setting="extra", flag="-extra"),),
            ),
        ),
        Language.ASSEMBLY: FormatterEntry(command="asmfmt"),
        Language.SHELL: FormatterEntry(
            command="shfmt",
            dialect=DialectSpec(
                kind=DialectKind.SIMPLE_APPEND,
                options=(
                    OptionSpec(setting="indent", kind=OptionKind.VALUE, flag="-i"),
                    OptionSpec(setting="binaryNextLine", flag="-bn"),
                    OptionSpec(setting="caseIndent", flag="-ci"),
                    OptionSpec(setting="spaceRedirects", flag="-sr"),
                    OptionSpec(setting="keepPadding", flag="-kp"),
                    OptionSpec(setting="funcNextLine", flag="-fn"),
                ),
            ),
        ),
        Language.LUA: FormatterEntry(command="stylua", args=("-",)),
        Language.R: _temp_file(
            "Rscript",
            "-e",
            "styler::style_file(commandArgs(trailingOnly = TRUE))",
            FILE_PLACEHOLDER,
            extension=".R",
        ),
        Language.DELPHI: _temp_file("pasfmt", FILE_PLACEHOLDER, extension=".pas", trust_output=False),
        Language.KOTLIN: FormatterEntry(command="ktlint", args=("--stdin", "--format", "--log-level=none")),
        Language.HASKELL: FormatterEntry(command="ormolu"),
        Language.PERL: FormatterEntry(command="perltidy", args=("-st", "-se")),
        Language.PHP: _temp_file("php-cs-fixer", "fix", FILE_PLACEHOLDER, "--quiet", "--using-cache=no", extension=".php"),
        Language.MATLAB: _temp_file("mh_style", "--fix", FILE_PLACEHOLDER, extension=".m"),
        # rufo exits with 3 when it changed the input.
        Language.RUBY: FormatterEntry(command="rufo", success_codes=(0, 3)),
    }


__all__ = [
    "DPRINT_PLUGIN_TYPESCRIPT",
    "PRETTIER_JAVA_INVOCATION",
    "SQL_FORMATTER_INVOCATION",
    "default_formatters",
    "shell_wrapper",
]

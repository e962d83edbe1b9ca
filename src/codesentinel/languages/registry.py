from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

UNKNOWN_LANGUAGE = "Unknown"


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    label: str
    extensions: tuple[str, ...]


LANGUAGES: tuple[LanguageSpec, ...] = (
    LanguageSpec("TypeScript", (".ts",)),
    LanguageSpec("TypeScript React", (".tsx",)),
    LanguageSpec("JavaScript", (".js",)),
    LanguageSpec("JavaScript React", (".jsx",)),
    LanguageSpec("Python", (".py",)),
    LanguageSpec("Ruby", (".rb",)),
    LanguageSpec("Go", (".go",)),
    LanguageSpec("Rust", (".rs",)),
    LanguageSpec("Java", (".java",)),
    LanguageSpec("Kotlin", (".kt",)),
    LanguageSpec("Swift", (".swift",)),
    LanguageSpec("C#", (".cs",)),
    LanguageSpec("C++", (".cpp",)),
    LanguageSpec("C", (".c",)),
    LanguageSpec("PHP", (".php",)),
    LanguageSpec("Vue", (".vue",)),
    LanguageSpec("Svelte", (".svelte",)),
)

_EXT_TO_LABEL = {ext: spec.label for spec in LANGUAGES for ext in spec.extensions}


def language_label(filename: str) -> str:
    """
    Display label for a filename, based on its extension only.

    The label is informational; rules run the same regardless of language.
    """

    return _EXT_TO_LABEL.get(PurePath(filename).suffix.lower(), UNKNOWN_LANGUAGE)

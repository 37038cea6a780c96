"""Extension to language classification and language display colors."""

from __future__ import annotations

from pathlib import PurePath
from typing import Dict, Optional

_LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "rs": "Rust",
    "js": "JavaScript",
    "mjs": "JavaScript",
    "cjs": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "mts": "TypeScript",
    "cts": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "pyw": "Python",
    "go": "Go",
    "java": "Java",
    "cpp": "C++",
    "cc": "C++",
    "cxx": "C++",
    "c++": "C++",
    "hpp": "C++",
    "hxx": "C++",
    "hh": "C++",
    "c": "C",
    "h": "C",
    "rb": "Ruby",
    "html": "HTML",
    "htm": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "Sass",
    "json": "JSON",
    "yaml": "YAML",
    "yml": "YAML",
    "md": "Markdown",
    "markdown": "Markdown",
    "sh": "Shell",
    "bash": "Shell",
    "zsh": "Shell",
    "php": "PHP",
    "swift": "Swift",
    "kt": "Kotlin",
    "kts": "Kotlin",
    "scala": "Scala",
    "sc": "Scala",
    "hs": "Haskell",
    "lhs": "Haskell",
    "ex": "Elixir",
    "exs": "Elixir",
    "clj": "Clojure",
    "cljs": "Clojure",
    "cljc": "Clojure",
    "lua": "Lua",
    "r": "R",
    "dart": "Dart",
    "vue": "Vue",
    "svelte": "Svelte",
    "sql": "SQL",
    "graphql": "GraphQL",
    "gql": "GraphQL",
    "toml": "TOML",
    "xml": "XML",
}

_COLOR_BY_LANGUAGE: Dict[str, str] = {
    "rust": "#DEA584",
    "javascript": "#F7DF1E",
    "typescript": "#3178C6",
    "python": "#3776AB",
    "go": "#00ADD8",
    "java": "#B07219",
    "c++": "#F34B7D",
    "c": "#555555",
    "ruby": "#CC342D",
    "html": "#E34C26",
    "css": "#563D7C",
    "scss": "#C6538C",
    "sass": "#C6538C",
    "json": "#292929",
    "yaml": "#CB171E",
    "markdown": "#083FA1",
    "shell": "#89E051",
    "php": "#4F5D95",
    "swift": "#F05138",
    "kotlin": "#A97BFF",
    "scala": "#DC322F",
    "haskell": "#5E5086",
    "elixir": "#6E4A7E",
    "clojure": "#DB5855",
    "lua": "#000080",
    "r": "#198CE7",
    "dart": "#00B4AB",
    "vue": "#41B883",
    "svelte": "#FF3E00",
    "sql": "#E38C00",
    "graphql": "#E10098",
    "toml": "#9C4221",
    "xml": "#0060AC",
}

# Short names accepted by ``color_of`` in addition to canonical names.
_COLOR_ALIASES: Dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "cpp": "c++",
    "rb": "ruby",
    "yml": "yaml",
    "md": "markdown",
    "sh": "shell",
    "bash": "shell",
    "hs": "haskell",
    "ex": "elixir",
    "clj": "clojure",
    "gql": "graphql",
}

DEFAULT_COLOR = "#8B8B8B"


def classify(extension: str) -> Optional[str]:
    """Return the language for a file extension, or None when it is not counted.

    The lookup ignores case and an optional leading dot.
    """
    key = extension.lower()
    if key.startswith("."):
        key = key[1:]
    return _LANGUAGE_BY_EXTENSION.get(key)


def classify_path(path: str | PurePath) -> Optional[str]:
    """Classify a file by its final suffix."""
    suffix = PurePath(path).suffix
    if not suffix:
        return None
    return classify(suffix)


def color_of(language: str) -> str:
    """Return the display color for a language name (case-insensitive)."""
    key = language.lower()
    key = _COLOR_ALIASES.get(key, key)
    return _COLOR_BY_LANGUAGE.get(key, DEFAULT_COLOR)


__all__ = ["DEFAULT_COLOR", "classify", "classify_path", "color_of"]

"""Report models produced by repository analysis.

A ``DirectoryNode`` carries the statistics of the files that live directly
inside its directory. Child nodes are nested for navigation only: a parent's
``lines`` never include the lines of its children.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from .languages import color_of

ROOT_LABEL = "(root)"


@dataclass(frozen=True)
class LanguageBreakdown:
    """Share of lines one language holds within some total."""

    language: str
    lines: int
    percentage: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "lines": self.lines,
            "percentage": self.percentage,
            "color": self.color,
        }


@dataclass(frozen=True)
class DirectoryNode:
    """One directory's own statistics plus its child directories."""

    name: str
    path: str
    age_days: int
    lines: int
    languages: Tuple[LanguageBreakdown, ...] = ()
    children: Tuple["DirectoryNode", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "age_days": self.age_days,
            "lines": self.lines,
            "languages": [item.to_dict() for item in self.languages],
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class RepoAnalysis:
    """Complete, immutable report for one analyzed repository."""

    id: str
    name: str
    path: str
    age_days: int
    total_lines: int
    languages: Tuple[LanguageBreakdown, ...] = ()
    directories: Tuple[DirectoryNode, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "age_days": self.age_days,
            "total_lines": self.total_lines,
            "languages": [item.to_dict() for item in self.languages],
            "directories": [node.to_dict() for node in self.directories],
        }


@dataclass
class DirectoryStats:
    """Mutable accumulator for files found directly inside one directory."""

    lines: int = 0
    languages: Dict[str, int] = field(default_factory=dict)

    def add(self, language: str, lines: int) -> None:
        self.lines += lines
        self.languages[language] = self.languages.get(language, 0) + lines


def build_breakdown(stats: Mapping[str, int], total: int) -> Tuple[LanguageBreakdown, ...]:
    """Return per-language shares of ``total``, largest first.

    The result is empty when ``total`` is zero. Ties keep the mapping's order.
    """
    if total <= 0:
        return ()

    breakdown = [
        LanguageBreakdown(
            language=language,
            lines=lines,
            percentage=min(100.0, max(0.0, lines / total * 100.0)),
            color=color_of(language),
        )
        for language, lines in stats.items()
    ]
    breakdown.sort(key=lambda item: item.lines, reverse=True)
    return tuple(breakdown)


__all__ = [
    "DirectoryNode",
    "DirectoryStats",
    "LanguageBreakdown",
    "ROOT_LABEL",
    "RepoAnalysis",
    "build_breakdown",
]

"""Traversal exclusion rules for repository walks."""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import FrozenSet

VCS_DIR = ".git"

EXCLUDED_DIRS: FrozenSet[str] = frozenset(
    {
        VCS_DIR,
        "node_modules",
        "target",
        "dist",
        "build",
        ".next",
        "__pycache__",
        ".venv",
        "venv",
        ".idea",
        ".vscode",
        "vendor",
        ".cargo",
        "deps",
        "_build",
    }
)


def _relative_parts(path: str | PurePath, repository_root: str | PurePath) -> tuple[str, ...]:
    candidate = PurePath(path)
    root = PurePath(repository_root)
    try:
        relative = candidate.relative_to(root)
    except ValueError:
        relative = PurePath(os.path.relpath(candidate, root)) if candidate.is_absolute() else candidate
    return tuple(part for part in relative.parts if part not in ("", "."))


def is_excluded_name(name: str) -> bool:
    """Return True when a single path segment is never traversed."""
    return name in EXCLUDED_DIRS or name.startswith(".")


def should_ignore(path: str | Path, repository_root: str | Path) -> bool:
    """Return True when ``path`` must be skipped during a walk of ``repository_root``.

    Every segment of the root-relative path is checked as a whole: denylisted
    build and dependency directories and hidden entries are excluded at any
    depth. The root itself is never ignored.
    """
    return any(is_excluded_name(part) for part in _relative_parts(path, repository_root))


__all__ = ["EXCLUDED_DIRS", "VCS_DIR", "is_excluded_name", "should_ignore"]

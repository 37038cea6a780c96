"""Single-pass repository walk that counts lines per language and directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Tuple

from .errors import InvalidPathError, RepositoryIOError
from .ignore import is_excluded_name
from .languages import classify_path
from .logging import get_logger
from .models import DirectoryStats

logger = get_logger("walker")


@dataclass
class WalkResult:
    """Totals gathered from one walk.

    ``directories`` is keyed by the POSIX path of each directory relative to
    the repository root (the root itself is ``""``) and only holds directories
    with at least one counted file.
    """

    total_lines: int = 0
    languages: Dict[str, int] = field(default_factory=dict)
    directories: Dict[str, DirectoryStats] = field(default_factory=dict)


def count_lines(text: str) -> int:
    """Count newline-delimited lines; a final unterminated line still counts."""
    if not text:
        return 0
    count = text.count("\n")
    if not text.endswith("\n"):
        count += 1
    return count


def _read_text(path: Path) -> str | None:
    try:
        # newline="" keeps a lone "\r" from being counted as a line break.
        with path.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError:
        logger.debug("Skipping non-text file %s", path)
    except OSError as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
    return None


def _iter_source_files(root: Path) -> Iterator[Tuple[str, Path, str]]:
    """Yield ``(relative_dir, file_path, language)`` for every counted file."""

    def _on_error(error: OSError) -> None:
        if Path(error.filename or "") == root:
            raise RepositoryIOError(f"Unable to read repository at {root}: {error}") from error
        logger.debug("Skipping unreadable directory %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        # Prune in place so excluded trees are never descended into.
        dirnames[:] = sorted(name for name in dirnames if not is_excluded_name(name))

        for filename in sorted(filenames):
            if is_excluded_name(filename):
                continue
            language = classify_path(filename)
            if language is None:
                continue
            path = current_dir / filename
            if path.is_symlink() or not path.is_file():
                continue
            yield rel_dir, path, language


class FileWalker:
    """Walks a repository once and accumulates line statistics."""

    def walk(self, root: str | Path) -> WalkResult:
        """Return global and per-directory line totals for ``root``."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise InvalidPathError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise InvalidPathError(f"Repository path is not a directory: {root}")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise InvalidPathError(f"Repository path is not readable: {root}")
        root_path = root_path.resolve()

        result = WalkResult()
        files = 0
        for rel_dir, path, language in _iter_source_files(root_path):
            text = _read_text(path)
            if text is None:
                continue
            lines = count_lines(text)
            files += 1
            result.total_lines += lines
            result.languages[language] = result.languages.get(language, 0) + lines
            stats = result.directories.get(rel_dir)
            if stats is None:
                stats = result.directories[rel_dir] = DirectoryStats()
            stats.add(language, lines)

        logger.debug(
            "Counted %d lines in %d files across %d directories",
            result.total_lines,
            files,
            len(result.directories),
        )
        return result


def walk(root: str | Path) -> WalkResult:
    """Convenience wrapper around ``FileWalker().walk``."""
    return FileWalker().walk(root)


__all__ = ["FileWalker", "WalkResult", "count_lines", "walk"]

"""Analysis pipeline: validate, date, walk, and assemble one report."""

from __future__ import annotations

import time
import uuid
from pathlib import Path
from typing import Callable, List, Optional

from .errors import InvalidPathError, NotARepositoryError, RepositoryIOError
from .history import GitHistory
from .ignore import VCS_DIR, is_excluded_name
from .logging import get_logger
from .models import RepoAnalysis, build_breakdown
from .tree import build_directory_tree
from .walker import FileWalker

HistoryFactory = Callable[[Path], GitHistory]


class RepoAnalyzer:
    """Produces a ``RepoAnalysis`` for a local repository checkout."""

    def __init__(
        self,
        walker: FileWalker | None = None,
        history_factory: HistoryFactory | None = None,
        clock: Callable[[], float] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.walker = walker or FileWalker()
        self._clock = clock or time.time
        self._history_factory = history_factory or self._default_history
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.logger = get_logger("analyzer")

    def analyze(
        self,
        path: str,
        *,
        name: Optional[str] = None,
        source: Optional[str] = None,
    ) -> RepoAnalysis:
        """Analyze the repository at ``path``.

        Raises one of ``InvalidPathError``, ``NotARepositoryError``,
        ``NoCommitsError`` or ``RepositoryIOError``; per-file problems are
        absorbed by the walk.
        """
        repo_path = Path(path).expanduser()
        if not repo_path.exists():
            raise InvalidPathError(f"Repository path not found: {path}")
        if not repo_path.is_dir():
            raise InvalidPathError(f"Repository path is not a directory: {path}")
        repo_path = repo_path.resolve()
        if not (repo_path / VCS_DIR).exists():
            raise NotARepositoryError(f"{path} is not a Git repository")

        self.logger.info("Analyzing repository at %s", repo_path)
        history = self._history_factory(repo_path)
        age_days = history.repository_age_days()

        walk = self.walker.walk(repo_path)
        directories = build_directory_tree(walk.directories, history.age_days)
        languages = build_breakdown(walk.languages, walk.total_lines)

        analysis = RepoAnalysis(
            id=self._id_factory(),
            name=name or repo_path.name or "unknown",
            path=source if source is not None else path,
            age_days=age_days,
            total_lines=walk.total_lines,
            languages=languages,
            directories=tuple(directories),
        )
        self.logger.info(
            "Analyzed %s: %d lines, %d languages, %d directories",
            analysis.name,
            analysis.total_lines,
            len(analysis.languages),
            len(walk.directories),
        )
        return analysis

    def _default_history(self, repo_path: Path) -> GitHistory:
        return GitHistory(repo_path, clock=self._clock)


def discover_repositories(path: str) -> List[Path]:
    """Return ``path`` if it is a repository, else its repository subdirectories.

    Hidden and excluded directories are not considered. Results are sorted by
    name.
    """
    root = Path(path).expanduser()
    if not root.is_dir():
        raise InvalidPathError(f"Scan path is not a directory: {path}")
    root = root.resolve()
    if (root / VCS_DIR).exists():
        return [root]
    try:
        candidates = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise RepositoryIOError(f"Unable to list {root}: {exc}") from exc
    return [
        entry
        for entry in candidates
        if entry.is_dir() and not is_excluded_name(entry.name) and (entry / VCS_DIR).exists()
    ]


def analyze_repository(path: str) -> RepoAnalysis:
    """Analyze ``path`` with default collaborators."""
    return RepoAnalyzer().analyze(path)


__all__ = ["RepoAnalyzer", "analyze_repository", "discover_repositories"]

"""Commit-history lookups used to date repositories and directories."""

from __future__ import annotations

import posixpath
import subprocess
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from .errors import NoCommitsError, RepositoryIOError
from .logging import get_logger

logger = get_logger("history")

SECONDS_PER_DAY = 86400

_RECORD_SEPARATOR = "\x1e"
# -z emits raw NUL-terminated paths, so names are never C-quoted.
_LOG_ARGS = (
    "git",
    "log",
    "-z",
    "--reverse",
    "--date-order",
    "--name-only",
    "--format=%x1e%H %ct%x00",
    "HEAD",
)


def days_between(now: float, timestamp: float) -> int:
    """Whole days from ``timestamp`` to ``now``, never negative."""
    return max(0, int((now - timestamp) // SECONDS_PER_DAY))


class GitHistory:
    """Answers "how old is this path" from one oldest-first history pass.

    The first time an age is requested the full log is read once and, for
    every touched file, the earliest commit time is recorded against the file
    and each of its ancestor directories. Later lookups are dictionary hits.
    """

    def __init__(
        self,
        repo_path: str | Path,
        runner: Callable[..., str] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.repo_path = Path(repo_path)
        self._runner = runner or self._default_runner
        self._clock = clock or time.time
        self._first_commit_time: Optional[int] = None
        self._first_touch: Dict[str, int] = {}
        self._commits = 0
        self._indexed = False

    def repository_age_days(self) -> int:
        """Age of the oldest commit reachable from ``HEAD``."""
        return self.age_days("")

    def age_days(self, relative_path: str = "") -> int:
        """Age in days of the oldest commit touching ``relative_path`` or below.

        The empty path means the repository root. Paths no commit has touched
        resolve to 0.
        """
        self._ensure_index()
        key = _normalise(relative_path)
        if not key:
            timestamp = self._first_commit_time
        else:
            timestamp = self._first_touch.get(key)
        if timestamp is None:
            logger.debug("No commit touches %s; reporting age 0", key or "(root)")
            return 0
        return days_between(self._clock(), timestamp)

    # ------------------------------------------------------------------
    # Internals

    def _ensure_index(self) -> None:
        if self._indexed:
            return
        self._verify_head()
        try:
            output = self._run(_LOG_ARGS)
        except subprocess.CalledProcessError as exc:
            raise RepositoryIOError(f"git log failed in {self.repo_path}: {exc}") from exc
        for record in output.split(_RECORD_SEPARATOR):
            if not record.strip("\0\n"):
                continue
            header, _, body = record.partition("\0")
            paths = [path for path in body.lstrip("\0\n").split("\0") if path.strip("\n")]
            try:
                timestamp = int(header.split()[1])
            except (IndexError, ValueError) as exc:
                raise RepositoryIOError(f"Unexpected git log output: {header!r}") from exc
            self._commits += 1
            if self._first_commit_time is None:
                self._first_commit_time = timestamp
            for path in paths:
                self._record(path, timestamp)

        if self._first_commit_time is None:
            raise NoCommitsError(f"Repository has no commits: {self.repo_path}")
        self._indexed = True
        logger.debug(
            "Indexed %d commits touching %d paths in %s",
            self._commits,
            len(self._first_touch),
            self.repo_path,
        )

    def _record(self, path: str, timestamp: int) -> None:
        current = _normalise(path)
        while current:
            if current in self._first_touch:
                # Ancestors were recorded by an earlier (or the same) commit.
                return
            self._first_touch[current] = timestamp
            current = posixpath.dirname(current)

    def _verify_head(self) -> None:
        try:
            self._run(("git", "rev-parse", "--verify", "HEAD"))
        except subprocess.CalledProcessError as exc:
            raise NoCommitsError(f"Repository has no commits: {self.repo_path}") from exc

    def _run(self, args: Iterable[str]) -> str:
        try:
            return self._runner(args, cwd=self.repo_path, capture_output=True)
        except FileNotFoundError as exc:
            raise RepositoryIOError("Unable to locate the git executable") from exc
        except OSError as exc:
            raise RepositoryIOError(f"Failed to read history of {self.repo_path}: {exc}") from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            capture_output=capture_output,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        return completed.stdout if capture_output else ""


def _normalise(path: str) -> str:
    return path.strip("/")


def age_days(repo_path: str | Path, relative_path: str = "") -> int:
    """One-off age lookup; prefer a shared ``GitHistory`` for many paths."""
    return GitHistory(repo_path).age_days(relative_path)


__all__ = ["GitHistory", "SECONDS_PER_DAY", "age_days", "days_between"]

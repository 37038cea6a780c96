"""GitHub lookup and clone support for remote repository analysis."""

from __future__ import annotations

import json
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from .analyzer import RepoAnalyzer
from .logging import get_logger
from .models import RepoAnalysis

logger = get_logger("github")

_OWNER_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")
_REPO_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,100}$")
_URL_PATTERN = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/([^/\s]+)/([^/\s#?]+)")

# Large enough to fetch the whole history of any repository.
_FULL_DEPTH = 2147483647


class GitHubError(RuntimeError):
    """Raised when a GitHub repository cannot be looked up or cloned."""


def parse_github_slug(target: str) -> Tuple[str, str]:
    """Split ``owner/repo`` or a github.com URL into ``(owner, repo)``."""
    text = target.strip()
    match = _URL_PATTERN.match(text)
    if match:
        owner, repo = match.group(1), match.group(2)
    else:
        parts = [part for part in text.split("/") if part]
        if len(parts) != 2:
            raise GitHubError(f"Invalid repository '{target}'. Use: owner/repository")
        owner, repo = parts
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    validate_slug(owner, repo)
    return owner, repo


def validate_slug(owner: str, repo: str) -> None:
    if not _OWNER_PATTERN.match(owner or ""):
        raise GitHubError(f"Invalid GitHub owner: {owner!r}")
    if not _REPO_PATTERN.match(repo or "") or repo in {".", ".."}:
        raise GitHubError(f"Invalid GitHub repository name: {repo!r}")


class GitHubFetcher:
    """Resolves a GitHub repository, clones it and hands the checkout to the analyzer."""

    def __init__(
        self,
        *,
        api_url: str = "https://api.github.com",
        token: str | None = None,
        runner: Callable[..., str] | None = None,
        opener: Callable[..., Any] | None = None,
        clone_timeout: float | None = 600.0,
        full_history: bool = True,
        request_timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.clone_timeout = clone_timeout
        self.full_history = full_history
        self.request_timeout = request_timeout
        self._runner = runner or self._default_runner
        self._opener = opener or urlopen

    def repo_info(self, owner: str, repo: str) -> Dict[str, Any]:
        """Return the GitHub API payload for ``owner/repo``."""
        validate_slug(owner, repo)
        endpoint = f"{self.api_url}/repos/{quote(owner)}/{quote(repo)}"
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "codecity",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        request = Request(endpoint, headers=headers, method="GET")
        try:
            with self._opener(request, timeout=self.request_timeout) as response:
                payload = response.read()
        except HTTPError as exc:
            if exc.code == 404:
                raise GitHubError(f"GitHub repository not found: {owner}/{repo}") from exc
            raise GitHubError(f"GitHub API error ({exc.code}) for {owner}/{repo}") from exc
        except URLError as exc:
            raise GitHubError(f"GitHub API unreachable: {exc.reason}") from exc

        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GitHubError("GitHub API returned malformed JSON") from exc
        if not isinstance(data, dict):
            raise GitHubError("GitHub API returned an unexpected payload")
        return data

    def clone_url(self, owner: str, repo: str) -> str:
        info = self.repo_info(owner, repo)
        clone_url = info.get("clone_url")
        if not isinstance(clone_url, str) or not clone_url:
            raise GitHubError("No clone URL available")
        return clone_url

    def analyze(
        self,
        owner: str,
        repo: str,
        analyzer: RepoAnalyzer | None = None,
    ) -> RepoAnalysis:
        """Clone ``owner/repo`` into a temporary directory and analyze it.

        The temporary checkout is removed once the analysis completes or fails.
        """
        clone_url = self.clone_url(owner, repo)
        analyzer = analyzer or RepoAnalyzer()
        with tempfile.TemporaryDirectory(prefix="codecity-") as tmpdir:
            checkout = Path(tmpdir) / repo
            self._clone(clone_url, checkout)
            if self.full_history:
                self._deepen(checkout)
            return analyzer.analyze(
                str(checkout),
                name=f"{owner}/{repo}",
                source=clone_url,
            )

    # ------------------------------------------------------------------
    # Internals

    def _clone(self, clone_url: str, checkout: Path) -> None:
        logger.info("Cloning %s", clone_url)
        args = [
            "git",
            "clone",
            "--depth",
            "1",
            "--single-branch",
            clone_url,
            str(checkout),
        ]
        try:
            self._run(args, cwd=checkout.parent)
        except subprocess.CalledProcessError as exc:
            message = (exc.stderr or exc.stdout or str(exc.returncode)).strip()
            raise GitHubError(f"Git clone failed: {message}") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitHubError(f"Git clone timed out after {exc.timeout}s") from exc
        except FileNotFoundError as exc:
            raise GitHubError("Unable to locate the git executable") from exc

    def _deepen(self, checkout: Path) -> None:
        # Ages come from the oldest commit, so the shallow clone is extended
        # to the full history. A failure only makes ages younger.
        try:
            self._run(["git", "fetch", f"--deepen={_FULL_DEPTH}"], cwd=checkout)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
            logger.warning("Could not fetch full history for %s: %s", checkout.name, exc)

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, capture_output=True, timeout=self.clone_timeout)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
        timeout: Optional[float] = None,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
            timeout=timeout,
        )
        return completed.stdout if capture_output else ""


__all__ = ["GitHubError", "GitHubFetcher", "parse_github_slug", "validate_slug"]

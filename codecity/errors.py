"""Error kinds raised by repository analysis."""

from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base class for failures that abort a whole analysis."""


class InvalidPathError(AnalysisError):
    """Raised when the repository root is missing or not a readable directory."""


class NotARepositoryError(AnalysisError):
    """Raised when the path carries no version-control metadata."""


class NoCommitsError(AnalysisError):
    """Raised when the repository has no commits, so its age is undefined."""


class RepositoryIOError(AnalysisError):
    """Raised when the repository cannot be read at the top level."""


__all__ = [
    "AnalysisError",
    "InvalidPathError",
    "NoCommitsError",
    "NotARepositoryError",
    "RepositoryIOError",
]

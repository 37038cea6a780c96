"""Repository structure analysis: line counts, languages and directory ages."""

from .analyzer import RepoAnalyzer, analyze_repository
from .errors import (
    AnalysisError,
    InvalidPathError,
    NoCommitsError,
    NotARepositoryError,
    RepositoryIOError,
)
from .models import DirectoryNode, LanguageBreakdown, RepoAnalysis

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "DirectoryNode",
    "InvalidPathError",
    "LanguageBreakdown",
    "NoCommitsError",
    "NotARepositoryError",
    "RepoAnalysis",
    "RepoAnalyzer",
    "RepositoryIOError",
    "analyze_repository",
]

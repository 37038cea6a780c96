"""Shared pytest fixtures.

``repo_builder`` hands each test a fresh directory it can fill with files and
turn into a real Git repository whose commits carry fixed timestamps.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Return a builder for a repository under ``tmp_path / "repo"``."""
    return RepoBuilder(tmp_path)

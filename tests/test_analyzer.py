"""Tests for codecity.analyzer."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

import pytest

from codecity.analyzer import RepoAnalyzer, analyze_repository, discover_repositories
from codecity.errors import InvalidPathError, NoCommitsError, NotARepositoryError
from codecity.models import DirectoryNode
from tests._fixtures.repo_builder import RepoBuilder, now_after, requires_git

pytestmark = requires_git


def _analyzer(days: float = 30) -> RepoAnalyzer:
    return RepoAnalyzer(clock=lambda: now_after(days))


def _walk(nodes: List[DirectoryNode]) -> Iterator[DirectoryNode]:
    for node in nodes:
        yield node
        yield from _walk(list(node.children))


def test_analyze_nests_subdirectory_under_root(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"a.rs": "fn a() {}\n" * 10, "sub/b.py": "pass\n" * 5})
    repo_builder.commit("initial", day=0)

    analysis = _analyzer().analyze(str(repo_builder.path()))

    assert analysis.total_lines == 15
    assert [(item.language, item.lines) for item in analysis.languages] == [
        ("Rust", 10),
        ("Python", 5),
    ]
    assert analysis.languages[0].percentage == pytest.approx(66.7, abs=0.05)
    assert analysis.languages[1].percentage == pytest.approx(33.3, abs=0.05)

    assert len(analysis.directories) == 1
    root = analysis.directories[0]
    assert (root.name, root.path, root.lines) == ("(root)", "", 10)
    assert [(item.language, item.percentage) for item in root.languages] == [("Rust", 100.0)]
    assert [(child.name, child.lines) for child in root.children] == [("sub", 5)]
    assert root.children[0].languages[0].language == "Python"


def test_analyze_report_fields(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"main.go": "package main\n"})
    repo_builder.commit("initial", day=0)
    repo_builder.write({"cmd/tool/main.go": "package main\n\nfunc main() {}\n"})
    repo_builder.commit("tool", day=12)

    first = _analyzer(days=30).analyze(str(repo_builder.path()))
    second = _analyzer(days=30).analyze(str(repo_builder.path()))

    assert first.id != second.id
    assert first.name == "repo"
    assert first.path == str(repo_builder.path())
    assert first.age_days == 30
    assert first.total_lines == sum(item.lines for item in first.languages)

    # "cmd" has no counted files of its own, so "cmd/tool" is promoted.
    assert [node.path for node in first.directories] == ["", "cmd/tool"]
    assert first.directories[1].age_days == 18


def test_analyze_ignores_dependency_trees(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"node_modules/x.js": "module.exports = {};\n"})
    repo_builder.commit("deps", day=0)

    analysis = _analyzer().analyze(str(repo_builder.path()))

    assert analysis.total_lines == 0
    assert analysis.languages == ()
    assert analysis.directories == ()


def test_analyze_skips_unrecognized_files(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"data.bin": b"\x00\x01binary", "app.py": "print(1)\n"})
    repo_builder.commit("initial", day=0)

    analysis = _analyzer().analyze(str(repo_builder.path()))

    assert analysis.total_lines == 1
    assert [item.language for item in analysis.languages] == ["Python"]
    for node in _walk(list(analysis.directories)):
        assert all(item.language == "Python" for item in node.languages)


def test_directory_lines_equal_direct_files_only(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write(
        {
            "src/a.py": "1\n2\n",
            "src/pkg/b.py": "1\n2\n3\n",
            "src/pkg/c.ts": "1\n",
        }
    )
    repo_builder.commit("initial", day=0)

    analysis = _analyzer().analyze(str(repo_builder.path()))
    lines = {node.path: node.lines for node in _walk(list(analysis.directories))}

    assert lines == {"src": 2, "src/pkg": 4}
    assert analysis.total_lines == sum(lines.values())


def test_analyze_accepts_name_and_source_overrides(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"x.py": "x\n"})
    repo_builder.commit("initial", day=0)

    analysis = _analyzer().analyze(
        str(repo_builder.path()),
        name="owner/repo",
        source="https://github.com/owner/repo.git",
    )

    assert analysis.name == "owner/repo"
    assert analysis.path == "https://github.com/owner/repo.git"


def test_analyze_rejects_missing_path(tmp_path: Path) -> None:
    with pytest.raises(InvalidPathError):
        _analyzer().analyze(str(tmp_path / "missing"))


def test_analyze_rejects_plain_directory(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text("x\n", encoding="utf-8")
    with pytest.raises(NotARepositoryError):
        _analyzer().analyze(str(tmp_path))


def test_analyze_rejects_repository_without_commits(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"a.py": "x\n"})
    with pytest.raises(NoCommitsError):
        _analyzer().analyze(str(repo_builder.path()))


def test_discover_repositories(tmp_path: Path) -> None:
    for name in ("beta", "alpha"):
        RepoBuilder(tmp_path, name).init()
    (tmp_path / "plain").mkdir()
    RepoBuilder(tmp_path, ".hidden").init()

    found = discover_repositories(str(tmp_path))

    assert [path.name for path in found] == ["alpha", "beta"]
    assert discover_repositories(str(tmp_path / "alpha")) == [(tmp_path / "alpha").resolve()]


def test_analyze_repository_uses_default_collaborators(repo_builder: RepoBuilder) -> None:
    repo_builder.init()
    repo_builder.write({"index.ts": "export {};\n"})
    repo_builder.commit("initial", day=0)

    analysis = analyze_repository(str(repo_builder.path()))

    assert analysis.total_lines == 1
    assert analysis.age_days > 365

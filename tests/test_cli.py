"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codecity.cli import _build_parser, main
from codecity.logging import configure_logging
from tests._fixtures.repo_builder import RepoBuilder, requires_git


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "analyze"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "some/repo", "--verbose"])
    assert args.verbose is True
    assert args.path == "some/repo"


def test_cli_serve_overrides() -> None:
    parser = _build_parser()
    args = parser.parse_args(["serve", "--port", "8080", "--host", "127.0.0.1"])
    assert args.command == "serve"
    assert args.port == 8080
    assert args.host == "127.0.0.1"
    assert args.verbose is False


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_analyze_reports_errors_with_exit_status(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "Repository path not found" in capsys.readouterr().err


def test_github_rejects_malformed_slug(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["github", "not-a-slug"])

    assert excinfo.value.code == 1
    assert "owner/repository" in capsys.readouterr().err


@requires_git
def test_analyze_prints_json_report(repo_builder: RepoBuilder, capsys) -> None:
    repo_builder.init()
    repo_builder.write({"lib/util.py": "a = 1\nb = 2\n"})
    repo_builder.commit("initial")

    main(["analyze", str(repo_builder.path()), "--indent", "0"])

    report = json.loads(capsys.readouterr().out)
    assert report["total_lines"] == 2
    assert report["name"] == "repo"
    assert report["directories"][0]["path"] == "lib"
    assert report["languages"][0]["language"] == "Python"


def test_cli_accepts_log_file_before_or_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--log-file", "out.log", "analyze"]).log_file == Path("out.log")
    assert parser.parse_args(["analyze", "--log-file", "out.log"]).log_file == Path("out.log")
    assert parser.parse_args(["analyze"]).log_file is None


@requires_git
def test_analyze_appends_progress_to_log_file(
    repo_builder: RepoBuilder, tmp_path: Path, capsys
) -> None:
    repo_builder.init()
    repo_builder.write({"main.rs": "fn main() {}\n"})
    repo_builder.commit("initial")
    log_file = tmp_path / "logs" / "codecity.log"

    try:
        main(["analyze", str(repo_builder.path()), "--log-file", str(log_file)])
    finally:
        configure_logging()

    capsys.readouterr()
    contents = log_file.read_text(encoding="utf-8")
    assert "codecity.analyzer" in contents
    assert "Analyzing repository at" in contents

"""CLI entrypoints for codecity commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .analyzer import RepoAnalyzer
from .config import ConfigError, load_config
from .errors import AnalysisError
from .github import GitHubError, GitHubFetcher, parse_github_slug
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also append log records to this file.",
    )


def _add_indent_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation of the JSON report (0 for a single line).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codecity",
        description="Measure repository size, languages and directory ages.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a local Git repository and print the JSON report.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_log_file_option(analyze_parser, suppress_default=True)
    _add_indent_option(analyze_parser)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )

    github_parser = subparsers.add_parser(
        "github",
        help="Clone a GitHub repository and print its JSON report.",
    )
    _add_verbose_option(github_parser, suppress_default=True)
    _add_log_file_option(github_parser, suppress_default=True)
    _add_indent_option(github_parser)
    github_parser.add_argument("slug", help="Repository as owner/repo or a github.com URL.")
    github_parser.add_argument(
        "--config",
        default=".",
        help="Path to .codecity.yml or the directory holding it.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    serve_parser.add_argument(
        "--config",
        default=".",
        help="Path to .codecity.yml or the directory holding it.",
    )
    serve_parser.add_argument("--host", default=None, help="Override the listen address.")
    serve_parser.add_argument("--port", type=int, default=None, help="Override the listen port.")

    return parser


def _print_report(payload: object, indent: int) -> None:
    print(json.dumps(payload, indent=indent or None))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codecity commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "analyze":
        try:
            analysis = RepoAnalyzer().analyze(args.path)
        except AnalysisError as exc:
            parser.exit(1, f"codecity analyze failed: {exc}\n")
        _print_report(analysis.to_dict(), args.indent)
    elif args.command == "github":
        try:
            config = load_config(Path(args.config))
            owner, repo = parse_github_slug(args.slug)
            fetcher = GitHubFetcher(
                api_url=config.github.api_url,
                token=config.github.token,
                clone_timeout=config.github.clone_timeout,
                full_history=config.github.full_history,
            )
            analysis = fetcher.analyze(owner, repo)
        except (AnalysisError, ConfigError, GitHubError) as exc:
            parser.exit(1, f"codecity github failed: {exc}\n")
        _print_report(analysis.to_dict(), args.indent)
    elif args.command == "serve":
        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        if args.host:
            config.server.host = args.host
        if args.port is not None:
            config.server.port = args.port

        from .service import run_service

        run_service(config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

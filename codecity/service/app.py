"""FastAPI application exposing repository analysis over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analyzer import RepoAnalyzer, discover_repositories
from ..config import ServiceConfig
from ..errors import AnalysisError
from ..github import GitHubError, GitHubFetcher
from ..logging import get_logger
from ..models import RepoAnalysis
from ..store import AnalysisStore

logger = get_logger("service")


class AnalyzeLocalRequest(BaseModel):
    path: str


class AnalyzeGithubRequest(BaseModel):
    owner: str
    repo: str


class ScanRequest(BaseModel):
    path: str


class LanguageBreakdownModel(BaseModel):
    language: str
    lines: int
    percentage: float
    color: str


class DirectoryNodeModel(BaseModel):
    name: str
    path: str
    age_days: int
    lines: int
    languages: List[LanguageBreakdownModel]
    children: List["DirectoryNodeModel"]


DirectoryNodeModel.model_rebuild()


class RepoAnalysisModel(BaseModel):
    id: str
    name: str
    path: str
    age_days: int
    total_lines: int
    languages: List[LanguageBreakdownModel]
    directories: List[DirectoryNodeModel]


class ScanFailure(BaseModel):
    path: str
    error: str


class ScanResponse(BaseModel):
    repositories: List[RepoAnalysisModel]
    errors: List[ScanFailure]


class HealthResponse(BaseModel):
    status: str


def _to_model(analysis: RepoAnalysis) -> RepoAnalysisModel:
    return RepoAnalysisModel.model_validate(analysis.to_dict())


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Repository not found"})


def _default_fetcher(config: ServiceConfig | None) -> GitHubFetcher:
    if config is None:
        return GitHubFetcher()
    return GitHubFetcher(
        api_url=config.github.api_url,
        token=config.github.token,
        clone_timeout=config.github.clone_timeout,
        full_history=config.github.full_history,
    )


def create_app(
    store: AnalysisStore | None = None,
    analyzer_factory: Callable[[], RepoAnalyzer] = RepoAnalyzer,
    fetcher_factory: Optional[Callable[[], GitHubFetcher]] = None,
    config: ServiceConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    The analysis store is injected so tests can inspect it; a fresh one is
    created when omitted.
    """
    repo_store = store if store is not None else AnalysisStore()
    make_fetcher = fetcher_factory or (lambda: _default_fetcher(config))
    origins = config.server.cors_origins if config is not None else ["*"]

    app = FastAPI(title="CodeCity", version="1.0.0")
    app.state.store = repo_store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def get_analyzer() -> RepoAnalyzer:
        return analyzer_factory()

    async def _in_executor(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/repos", response_model=List[RepoAnalysisModel])
    async def list_repos() -> List[RepoAnalysisModel]:
        return [_to_model(analysis) for analysis in repo_store.list()]

    @app.post("/api/analyze/local", response_model=RepoAnalysisModel)
    async def analyze_local(
        payload: AnalyzeLocalRequest,
        analyzer: RepoAnalyzer = Depends(get_analyzer),
    ) -> RepoAnalysisModel:
        analysis = await _in_executor(lambda: analyzer.analyze(payload.path))
        repo_store.add(analysis)
        return _to_model(analysis)

    @app.post("/api/analyze/github", response_model=RepoAnalysisModel)
    async def analyze_github(
        payload: AnalyzeGithubRequest,
        analyzer: RepoAnalyzer = Depends(get_analyzer),
    ) -> RepoAnalysisModel:
        fetcher = make_fetcher()
        analysis = await _in_executor(
            lambda: fetcher.analyze(payload.owner, payload.repo, analyzer)
        )
        repo_store.add(analysis)
        return _to_model(analysis)

    @app.post("/api/scan", response_model=ScanResponse)
    async def scan_directory(
        payload: ScanRequest,
        analyzer: RepoAnalyzer = Depends(get_analyzer),
    ) -> ScanResponse:
        def _run_scan() -> ScanResponse:
            analyses: List[RepoAnalysisModel] = []
            failures: List[ScanFailure] = []
            for repo_path in discover_repositories(payload.path):
                try:
                    analysis = analyzer.analyze(str(repo_path))
                except AnalysisError as exc:
                    logger.warning("Skipping %s during scan: %s", repo_path, exc)
                    failures.append(ScanFailure(path=str(repo_path), error=str(exc)))
                    continue
                repo_store.add(analysis)
                analyses.append(_to_model(analysis))
            return ScanResponse(repositories=analyses, errors=failures)

        return await _in_executor(_run_scan)

    @app.get("/api/repo/{repo_id}", response_model=RepoAnalysisModel)
    async def get_repo(repo_id: str) -> Any:
        analysis = repo_store.get(repo_id)
        if analysis is None:
            return _not_found()
        return _to_model(analysis)

    @app.get("/api/repo/{repo_id}/tree", response_model=List[DirectoryNodeModel])
    async def get_repo_tree(repo_id: str) -> Any:
        analysis = repo_store.get(repo_id)
        if analysis is None:
            return _not_found()
        return [node.to_dict() for node in analysis.directories]

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(_: Any, exc: AnalysisError) -> JSONResponse:
        logger.info("Analysis failed: %s", exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(GitHubError)
    async def github_error_handler(_: Any, exc: GitHubError) -> JSONResponse:
        logger.info("GitHub analysis failed: %s", exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    return app


def run_service(config: ServiceConfig) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    logger.info(
        "CodeCity backend listening on http://%s:%d", config.server.host, config.server.port
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port)

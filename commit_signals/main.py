from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from commit_signals import __version__
from commit_signals.commit_ingest import GitRepository, GitRepositoryError
from commit_signals.config import Settings, settings
from commit_signals.services import (
    AnalysisReport,
    CommitService,
    CommitServiceError,
    InMemoryAnalyzedFilesStore,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Conventional Commit Signals API",
    description="Deterministic diff analysis, history correlation and tone checks for Conventional Commits",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared across requests so /commit can auto-stage what /analyze saw.
analyzed_files_store = InMemoryAnalyzedFilesStore()


class AnalyzeRequest(BaseModel):
    repo_path: Optional[str] = Field(None, description="Repository path (default: configured repo_path)")
    staged: Optional[bool] = Field(None, description="Use staged diff (--cached). Ignored when base_ref is set.")
    base_ref: Optional[str] = Field(None, description="Compare <base_ref>...HEAD (example: main, origin/main, HEAD~1)")
    max_chars: Optional[int] = Field(None, ge=500, le=300_000, description="Max diff characters to analyze")
    include_untracked: Optional[bool] = Field(None, description="Include untracked files as diffs against /dev/null")

    class Config:
        json_schema_extra = {
            "example": {
                "repo_path": "/path/to/repo",
                "staged": True,
                "max_chars": 120000,
                "include_untracked": True,
            }
        }


class RelatedCommitModel(BaseModel):
    hash: str
    subject: str
    score: float
    reason: str


class ToneRequest(BaseModel):
    repo_path: Optional[str] = Field(None, description="Repository path (default: configured repo_path)")
    message: str = Field(..., min_length=1, description="Commit subject/header to validate")
    related_recent_commits: Optional[List[RelatedCommitModel]] = Field(
        None, description="Related commits from /analyze. If omitted, recent history is sampled."
    )
    min_tone_score: Optional[float] = Field(None, ge=0.5, le=1.0, description="Rewrite threshold (default 0.8)")


class CommitRequest(BaseModel):
    repo_path: Optional[str] = Field(None, description="Repository path (default: configured repo_path)")
    message: str = Field(..., min_length=1, description="Commit header prepared by the caller")
    body: Optional[str] = Field(None, description="Optional commit body")
    footer: Optional[str] = Field(None, description="Optional footer (e.g. BREAKING CHANGE, Refs)")
    dry_run: bool = Field(False, description="Run git commit --dry-run")
    auto_stage_analyzed: bool = Field(True, description="Stage the files from the latest /analyze call first")


class TypeScoreModel(BaseModel):
    type: str
    score: int
    reason: str


class StatsModel(BaseModel):
    files: int
    additions: int
    deletions: int
    added_files: int
    deleted_files: int
    renamed_files: int
    has_breaking_hint: bool


class AnalyzeResponse(BaseModel):
    has_changes: bool
    scope_candidates: List[str]
    recommended_types: List[TypeScoreModel]
    subject_hints: List[str]
    stats: StatsModel
    changed_files: List[str]
    related_recent_commits: List[RelatedCommitModel]
    summary: str


class ToneResponse(BaseModel):
    tone_score: float
    violations: List[str]
    suggested_rewrite: str
    applied: bool


class CommitResponse(BaseModel):
    success: bool
    dry_run: bool
    auto_stage_analyzed: bool
    auto_staged_files: int
    message: str
    body: Optional[str]
    footer: Optional[str]
    stdout: str
    stderr: str


def _resolve_settings(repo_path: Optional[str]) -> Settings:
    if repo_path and repo_path.strip():
        return settings.model_copy(update={"repo_path": Path(repo_path)})
    return settings


def _build_service(cfg: Settings) -> CommitService:
    try:
        repository = GitRepository(cfg.repo_path)
    except GitRepositoryError as exc:
        raise HTTPException(status_code=400, detail=f"Repository error: {exc}") from exc
    return CommitService(repository, analyzed_files_store, config=cfg)


def _summarize(report: AnalysisReport) -> str:
    if not report.has_changes:
        return "No changes found in selected diff scope."

    analysis = report.analysis
    stats = analysis.stats
    return "\n".join(
        [
            f"Diff analyzed: {len(stats.files)} files, +{stats.additions}/-{stats.deletions}",
            "Top type candidates: "
            + ", ".join(f"{c.type.value}({c.score})" for c in analysis.recommended_types),
            f"Scope candidates: {', '.join(analysis.scope_candidates) or '(none)'}",
            f"Related recent commits: {len(report.related_commits)}",
            f"Breaking hint: {'yes' if stats.has_breaking_hint else 'no'}",
        ]
    )


def _to_analyze_response(report: AnalysisReport) -> AnalyzeResponse:
    analysis = report.analysis
    stats = analysis.stats
    return AnalyzeResponse(
        has_changes=report.has_changes,
        scope_candidates=list(analysis.scope_candidates),
        recommended_types=[
            TypeScoreModel(type=c.type.value, score=c.score, reason=c.reason) for c in analysis.recommended_types
        ],
        subject_hints=list(analysis.subject_hints),
        stats=StatsModel(
            files=len(stats.files),
            additions=stats.additions,
            deletions=stats.deletions,
            added_files=stats.added_files,
            deleted_files=stats.deleted_files,
            renamed_files=stats.renamed_files,
            has_breaking_hint=stats.has_breaking_hint,
        ),
        changed_files=list(stats.files),
        related_recent_commits=[
            RelatedCommitModel(hash=r.hash, subject=r.subject, score=r.score, reason=r.reason)
            for r in report.related_commits
        ],
        summary=_summarize(report),
    )


@app.get("/")
def root():
    return {
        "message": "Conventional Commit Signals API",
        "version": __version__,
        "endpoints": {
            "POST /analyze": "Analyze a diff and return commit type, scope and subject signals",
            "POST /tone": "Validate a commit header and suggest a rewrite",
            "POST /commit": "Create a commit from a caller-supplied message",
            "GET /health": "Check API health",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """Analyze staged, unstaged or ref-range changes of a repository."""
    cfg = _resolve_settings(request.repo_path)
    service = _build_service(cfg)

    try:
        report = service.analyze(
            staged=request.staged,
            base_ref=request.base_ref,
            max_chars=request.max_chars,
            include_untracked=request.include_untracked,
        )
    except GitRepositoryError as exc:
        logger.warning(f"Diff analysis failed for {cfg.repo_path}: {exc}")
        raise HTTPException(status_code=500, detail=f"Unable to analyze diff: {exc}") from exc

    return _to_analyze_response(report)


@app.post("/tone", response_model=ToneResponse)
def tone(request: ToneRequest) -> ToneResponse:
    """Score a commit header; recent history is sampled when no related commits are given."""
    cfg = _resolve_settings(request.repo_path)
    service = _build_service(cfg)
    related_subjects = [commit.subject for commit in (request.related_recent_commits or [])]

    try:
        result = service.validate_tone(
            request.message,
            related_subjects=related_subjects,
            min_tone_score=request.min_tone_score,
        )
    except GitRepositoryError as exc:
        raise HTTPException(status_code=500, detail=f"Unable to validate tone: {exc}") from exc

    return ToneResponse(
        tone_score=result.tone_score,
        violations=list(result.violations),
        suggested_rewrite=result.suggested_rewrite,
        applied=result.applied,
    )


@app.post("/commit", response_model=CommitResponse)
def commit(request: CommitRequest) -> CommitResponse:
    """Stage the analyzed files (unless disabled) and run git commit."""
    cfg = _resolve_settings(request.repo_path)
    service = _build_service(cfg)

    try:
        outcome = service.execute_commit(
            request.message,
            body=request.body,
            footer=request.footer,
            dry_run=request.dry_run,
            auto_stage_analyzed=request.auto_stage_analyzed,
        )
    except CommitServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except GitRepositoryError as exc:
        logger.warning(f"Commit failed for {cfg.repo_path}: {exc}")
        raise HTTPException(status_code=500, detail=f"Commit execution failed: {exc}") from exc

    return CommitResponse(
        success=outcome.success,
        dry_run=outcome.dry_run,
        auto_stage_analyzed=outcome.auto_stage_analyzed,
        auto_staged_files=outcome.auto_staged_files,
        message=outcome.message,
        body=outcome.body,
        footer=outcome.footer,
        stdout=outcome.stdout,
        stderr=outcome.stderr,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8004)

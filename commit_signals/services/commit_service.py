from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console  # type: ignore[import]
from rich.markup import escape  # type: ignore[import]
from rich.table import Table  # type: ignore[import]

from commit_signals.analysis import analyze_diff, find_related, is_noise_commit, validate_tone
from commit_signals.commit_ingest import GitRepository
from commit_signals.config import Settings, settings as default_settings
from commit_signals.models import (
    AnalysisResult,
    CommitOutcome,
    CommitType,
    DiffStatistics,
    RelatedCommit,
    ToneValidation,
    TypeCandidate,
)
from commit_signals.services.store import AnalyzedFilesStore, InMemoryAnalyzedFilesStore

logger = logging.getLogger(__name__)

TONE_SAMPLE_SIZE = 3

PLACEHOLDER_VALUES = frozenset(
    {
        "<header>",
        "<subject>",
        "<message>",
        "<body>",
        "<footer>",
        "[header]",
        "[subject]",
        "[message]",
        "[body]",
        "[footer]",
    }
)
_PLACEHOLDER_RE = re.compile(r"<\s*(header|subject|message|body|footer)\s*>", re.IGNORECASE)


class CommitServiceError(ValueError):
    """Raised when a request is rejected before any git command runs."""


class EmptyMessageError(CommitServiceError):
    pass


class PlaceholderContentError(CommitServiceError):
    pass


class NoAnalyzedFilesError(CommitServiceError):
    pass


def has_placeholder_text(value: Optional[str]) -> bool:
    """Detect template tokens such as ``<header>`` or ``[body]`` left in a message."""
    normalized = (value or "").strip().lower()
    if not normalized:
        return False
    if normalized in PLACEHOLDER_VALUES:
        return True
    return bool(_PLACEHOLDER_RE.search(normalized))


@dataclass(slots=True)
class AnalysisReport:
    """Diff analysis plus the recent commits that look related to it."""

    analysis: AnalysisResult
    related_commits: List[RelatedCommit] = field(default_factory=list)
    has_changes: bool = True

    @classmethod
    def no_changes(cls) -> AnalysisReport:
        return cls(
            analysis=AnalysisResult(
                stats=DiffStatistics.empty(),
                scope_candidates=[],
                recommended_types=[TypeCandidate(type=CommitType.CHORE, score=10, reason="No diff detected")],
                subject_hints=["update project files"],
            ),
            has_changes=False,
        )


class CommitService:
    """Coordinates git access with the analysis engine and remembers analyzed files per repository."""

    def __init__(
        self,
        repository: GitRepository,
        store: Optional[AnalyzedFilesStore] = None,
        *,
        config: Optional[Settings] = None,
    ) -> None:
        self._repository = repository
        self._store = store or InMemoryAnalyzedFilesStore()
        self._config = config or default_settings

    @property
    def repo_path(self) -> Path:
        return self._repository.repo_path

    def analyze(
        self,
        *,
        staged: Optional[bool] = None,
        base_ref: Optional[str] = None,
        max_chars: Optional[int] = None,
        include_untracked: Optional[bool] = None,
    ) -> AnalysisReport:
        """
        Analyze the selected diff and correlate it with recent history.

        Args:
            staged: Use the index (``--cached``). Ignored when ``base_ref`` is set.
            base_ref: Compare ``<base_ref>...HEAD``.
            max_chars: Maximum number of diff characters to analyze.
            include_untracked: Append synthetic diffs for untracked files.

        Returns:
            AnalysisReport; ``has_changes`` is False for an empty diff.
        """
        cfg = self._config
        diff = self._repository.get_diff(
            staged=cfg.staged if staged is None else staged,
            base_ref=base_ref,
            max_chars=max_chars or cfg.max_diff_chars,
            include_untracked=cfg.include_untracked if include_untracked is None else include_untracked,
        )

        if not diff.strip():
            logger.info(f"No changes found in {self.repo_path}")
            return AnalysisReport.no_changes()

        analysis = analyze_diff(diff)
        recent = self._repository.recent_commits(cfg.recent_commit_window)
        related = find_related(
            analysis,
            recent,
            min_score=cfg.min_correlation_score,
            max_results=cfg.max_related_commits,
        )
        self._store.set(self.repo_path, analysis.stats.files)

        logger.info(
            f"Analyzed {len(analysis.stats.files)} files in {self.repo_path}; "
            f"{len(related)} related of {len(recent)} recent commits"
        )
        return AnalysisReport(analysis=analysis, related_commits=related)

    def validate_tone(
        self,
        message: str,
        related_subjects: Optional[Sequence[str]] = None,
        min_tone_score: Optional[float] = None,
    ) -> ToneValidation:
        subjects = [subject for subject in (related_subjects or []) if subject]

        if not subjects:
            recent = self._repository.recent_commits(self._config.tone_history_window)
            subjects = [commit.subject for commit in recent if not is_noise_commit(commit.subject)][:TONE_SAMPLE_SIZE]
            logger.debug(f"Sampled {len(subjects)} recent subjects for tone comparison")

        threshold = self._config.min_tone_score if min_tone_score is None else min_tone_score
        return validate_tone(message, subjects, min_score=threshold)

    def execute_commit(
        self,
        message: str,
        *,
        body: Optional[str] = None,
        footer: Optional[str] = None,
        dry_run: bool = False,
        auto_stage_analyzed: bool = True,
    ) -> CommitOutcome:
        """
        Create a commit from a caller-supplied header, body and footer.

        Raises:
            EmptyMessageError: the header is blank.
            PlaceholderContentError: any part still contains template tokens.
            NoAnalyzedFilesError: auto-staging was requested but nothing was analyzed.
            GitRepositoryError: staging or committing failed.
        """
        header = (message or "").strip()
        body = (body or "").strip() or None
        footer = (footer or "").strip() or None

        if not header:
            raise EmptyMessageError("Commit message cannot be empty.")

        if any(has_placeholder_text(part) for part in (header, body, footer)):
            raise PlaceholderContentError(
                "Commit message/body/footer contains placeholder text (e.g. <header>, <body>). Provide real content."
            )

        staged_count = 0
        if auto_stage_analyzed:
            analyzed = self._store.get(self.repo_path)
            if not analyzed:
                raise NoAnalyzedFilesError(
                    "No analyzed files found for this repository. Run analyze first or disable auto-staging."
                )
            staged_count = len(self._repository.stage_files(analyzed))
            logger.info(f"Auto-staged {staged_count} analyzed files in {self.repo_path}")

        stdout, stderr = self._repository.commit(header, body=body, footer=footer, dry_run=dry_run)
        return CommitOutcome(
            success=True,
            dry_run=dry_run,
            auto_stage_analyzed=auto_stage_analyzed,
            auto_staged_files=staged_count,
            message=header,
            body=body,
            footer=footer,
            stdout=stdout,
            stderr=stderr,
        )

    @staticmethod
    def render_analysis(report: AnalysisReport, *, console: Optional[Console] = None) -> None:
        console = console or Console()
        stats = report.analysis.stats

        if not report.has_changes:
            console.print("[yellow]No changes found in selected diff scope.[/yellow]")
            return

        console.rule(
            f"[bold cyan]Diff analyzed[/bold cyan]: {len(stats.files)} files, +{stats.additions}/-{stats.deletions}"
        )

        table = Table("Type", "Score", "Reason", show_header=True, header_style="bold magenta")
        for candidate in report.analysis.recommended_types:
            table.add_row(candidate.type.value, str(candidate.score), candidate.reason)
        console.print(table)

        console.print(f"Scope candidates: {', '.join(report.analysis.scope_candidates) or '(none)'}")
        console.print(f"Subject hints: {'; '.join(report.analysis.subject_hints)}")
        console.print(f"Breaking hint: {'yes' if stats.has_breaking_hint else 'no'}")

        if not report.related_commits:
            console.print("[dim]No related recent commits.[/dim]")
            return

        related = Table("Commit", "Subject", "Score", "Reason", show_header=True, header_style="bold magenta")
        for commit in report.related_commits:
            related.add_row(commit.hash[:8], escape(commit.subject), f"{commit.score:.3f}", commit.reason)
        console.print(related)

    @staticmethod
    def render_tone(result: ToneValidation, *, console: Optional[Console] = None) -> None:
        console = console or Console()
        console.print(f"Tone score: [bold]{result.tone_score}[/bold]")
        console.print(f"Violations: {'; '.join(result.violations) if result.violations else 'none'}")
        console.print(f"Suggested rewrite: {escape(result.suggested_rewrite)}")
        console.print(f"Applied: {'yes' if result.applied else 'no'}")

    @staticmethod
    def render_commit(outcome: CommitOutcome, *, console: Optional[Console] = None) -> None:
        console = console or Console()
        label = "Dry-run commit executed successfully." if outcome.dry_run else "Commit executed successfully."
        console.print(f"[green]{label}[/green]")
        if outcome.stdout.strip():
            console.print(outcome.stdout.strip(), markup=False)

from __future__ import annotations

from commit_signals.analysis.conventional import ConventionalHeader, parse_header, parse_type
from commit_signals.analysis.correlation import find_related, is_noise_commit
from commit_signals.analysis.diff_parser import parse_diff
from commit_signals.analysis.heuristics import scope_candidates, subject_hints
from commit_signals.analysis.tone import validate_tone
from commit_signals.analysis.type_scorer import score_types
from commit_signals.models import AnalysisResult


def analyze_diff(diff_text: str) -> AnalysisResult:
    """Parse ``diff_text`` and derive type, scope and subject suggestions from it."""
    stats = parse_diff(diff_text)
    return AnalysisResult(
        stats=stats,
        scope_candidates=scope_candidates(stats.files),
        recommended_types=score_types(stats),
        subject_hints=subject_hints(stats.files),
    )


__all__ = [
    "ConventionalHeader",
    "analyze_diff",
    "find_related",
    "is_noise_commit",
    "parse_diff",
    "parse_header",
    "parse_type",
    "score_types",
    "scope_candidates",
    "subject_hints",
    "validate_tone",
]

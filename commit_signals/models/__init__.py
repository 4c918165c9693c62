from __future__ import annotations

from commit_signals.models.analysis import (
    AnalysisResult,
    CommitType,
    DiffStatistics,
    ToneValidation,
    TypeCandidate,
)
from commit_signals.models.change import CommitOutcome, RecentCommit, RelatedCommit

__all__ = [
    "AnalysisResult",
    "CommitOutcome",
    "CommitType",
    "DiffStatistics",
    "RecentCommit",
    "RelatedCommit",
    "ToneValidation",
    "TypeCandidate",
]

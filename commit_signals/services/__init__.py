from __future__ import annotations

from commit_signals.services.commit_service import (
    AnalysisReport,
    CommitService,
    CommitServiceError,
    EmptyMessageError,
    NoAnalyzedFilesError,
    PlaceholderContentError,
    has_placeholder_text,
)
from commit_signals.services.store import AnalyzedFilesStore, InMemoryAnalyzedFilesStore

__all__ = [
    "AnalysisReport",
    "AnalyzedFilesStore",
    "CommitService",
    "CommitServiceError",
    "EmptyMessageError",
    "InMemoryAnalyzedFilesStore",
    "NoAnalyzedFilesError",
    "PlaceholderContentError",
    "has_placeholder_text",
]

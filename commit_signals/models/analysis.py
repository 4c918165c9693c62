from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class CommitType(str, Enum):
    """Conventional Commit type. Member order is the scoring tie-break order."""
    FEAT = "feat"
    FIX = "fix"
    REFACTOR = "refactor"
    DOCS = "docs"
    TEST = "test"
    CHORE = "chore"
    BUILD = "build"
    CI = "ci"
    PERF = "perf"
    STYLE = "style"

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional[CommitType]:
        if not label:
            return None
        try:
            return cls(label.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class DiffStatistics:
    """Line-level statistics extracted from a unified diff."""

    files: Tuple[str, ...] = ()
    additions: int = 0
    deletions: int = 0
    added_files: int = 0
    deleted_files: int = 0
    renamed_files: int = 0
    has_breaking_hint: bool = False
    feature_signals: int = 0
    fix_signals: int = 0
    refactor_signals: int = 0
    perf_signals: int = 0
    style_signals: int = 0
    has_test_files: bool = False
    has_docs_files: bool = False
    has_config_files: bool = False
    has_code_files: bool = False

    @classmethod
    def empty(cls) -> DiffStatistics:
        return cls()

    @property
    def changed_lines(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True, slots=True)
class TypeCandidate:
    """A scored commit type suggestion."""

    type: CommitType
    score: int
    reason: str


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything derived from a single diff: statistics, types, scopes and subject hints."""

    stats: DiffStatistics
    scope_candidates: List[str] = field(default_factory=list)
    recommended_types: List[TypeCandidate] = field(default_factory=list)
    subject_hints: List[str] = field(default_factory=list)

    @property
    def preferred_type(self) -> Optional[CommitType]:
        if not self.recommended_types:
            return None
        return self.recommended_types[0].type

    @property
    def has_changes(self) -> bool:
        return len(self.stats.files) > 0


@dataclass(frozen=True, slots=True)
class ToneValidation:
    """Outcome of checking a commit header against the house style."""

    tone_score: float
    violations: List[str] = field(default_factory=list)
    suggested_rewrite: str = ""
    applied: bool = False

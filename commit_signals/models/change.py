from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class RecentCommit:
    """Summary of a commit from history, built from `git log --numstat`."""

    hash: str
    subject: str
    files: List[str] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True, slots=True)
class RelatedCommit:
    """A historical commit judged similar to the change under analysis."""

    hash: str
    subject: str
    score: float
    reason: str


@dataclass(slots=True)
class CommitOutcome:
    """Result of running `git commit` for a caller-supplied message."""

    success: bool
    dry_run: bool
    auto_stage_analyzed: bool
    auto_staged_files: int
    message: str
    body: Optional[str] = None
    footer: Optional[str] = None
    stdout: str = ""
    stderr: str = ""

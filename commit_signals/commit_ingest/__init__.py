from __future__ import annotations

from commit_signals.commit_ingest.git_repository import GitRepository, GitRepositoryError, parse_commit_record

__all__ = ["GitRepository", "GitRepositoryError", "parse_commit_record"]

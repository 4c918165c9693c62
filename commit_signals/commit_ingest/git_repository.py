from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from git import Repo  # type: ignore[import]
from git.exc import GitCommandError  # type: ignore[import]

from commit_signals.models import RecentCommit

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 120_000
MIN_MAX_CHARS = 500
MAX_MAX_CHARS = 300_000
MIN_HISTORY = 3

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = "--pretty=format:%x1e%H%x1f%s"

_NUMSTAT_RE = re.compile(r"^(\d+|-)\s+(\d+|-)\s+(.+)$")


class GitRepositoryError(RuntimeError):
    """Raised when the repository cannot be accessed or a git command fails."""


def clamp_max_chars(max_chars: Optional[int]) -> int:
    return max(MIN_MAX_CHARS, min(max_chars or DEFAULT_MAX_CHARS, MAX_MAX_CHARS))


def parse_commit_record(record: str) -> Optional[RecentCommit]:
    """
    Parse one ``git log --numstat`` record: a ``hash<US>subject`` header line
    followed by ``added<TAB>deleted<TAB>path`` rows. Binary files report ``-``
    and count as zero lines. Returns ``None`` for records without a hash or
    subject.
    """
    if not record.strip():
        return None

    lines = record.strip("\n").split("\n")
    header = lines[0]
    if FIELD_SEPARATOR not in header:
        return None
    commit_hash, subject = header.split(FIELD_SEPARATOR, 1)
    if not commit_hash.strip() or not subject.strip():
        return None

    additions = 0
    deletions = 0
    files: List[str] = []
    for line in lines[1:]:
        match = _NUMSTAT_RE.match(line.strip())
        if not match:
            continue
        additions += 0 if match.group(1) == "-" else int(match.group(1))
        deletions += 0 if match.group(2) == "-" else int(match.group(2))
        path = match.group(3).strip()
        if path:
            files.append(path)

    return RecentCommit(
        hash=commit_hash.strip(),
        subject=subject.strip(),
        files=files,
        additions=additions,
        deletions=deletions,
    )


class GitRepository:
    """Thin wrapper around GitPython for reading diffs and history and creating commits."""

    def __init__(self, repo_path: str | Path) -> None:
        self.repo_path = Path(repo_path)
        if not self.repo_path.exists():
            raise GitRepositoryError(f"Repository path does not exist: {self.repo_path}")

        try:
            self._repo = Repo(self.repo_path, search_parent_directories=True)
        except Exception as exc:  # pragma: no cover - GitPython error types vary
            raise GitRepositoryError(f"Failed to open repository: {exc}") from exc

        if self._repo.bare:
            raise GitRepositoryError("Bare repositories are not supported")

    def _git(self, command: str, *args: str) -> str:
        try:
            return getattr(self._repo.git, command)(*args)
        except GitCommandError as exc:
            raise GitRepositoryError(f"git {command} failed: {exc.stderr.strip() if exc.stderr else exc}") from exc

    def get_diff(
        self,
        *,
        staged: bool = True,
        base_ref: Optional[str] = None,
        max_chars: Optional[int] = None,
        include_untracked: bool = True,
    ) -> str:
        """
        Return unified diff text for the selected scope.

        ``base_ref`` compares ``<base_ref>...HEAD`` and wins over ``staged``.
        Untracked files are appended as synthetic diffs against ``/dev/null``.
        The combined text is clipped to ``max_chars`` (clamped to 500..300000).
        """
        args: List[str] = ["--no-color"]
        if base_ref and base_ref.strip():
            args.append(f"{base_ref.strip()}...HEAD")
        elif staged:
            args.append("--cached")

        diff = self._git("diff", *args)

        if include_untracked:
            untracked = self._untracked_diff()
            if untracked:
                diff = f"{diff}\n{untracked}" if diff else untracked

        return diff[: clamp_max_chars(max_chars)]

    def untracked_files(self) -> List[str]:
        output = self._git("ls_files", "--others", "--exclude-standard")
        return [line.strip() for line in output.split("\n") if line.strip()]

    def _untracked_diff(self) -> str:
        parts: List[str] = []
        for path in self.untracked_files():
            # `git diff --no-index` exits with 1 when the files differ.
            status, stdout, stderr = self._repo.git.diff(
                "--no-color",
                "--no-index",
                "--",
                "/dev/null",
                path,
                with_extended_output=True,
                with_exceptions=False,
            )
            if status not in (0, 1):
                raise GitRepositoryError(f"git diff --no-index failed for {path}: {stderr.strip()}")
            if stdout.strip():
                parts.append(stdout)
        return "\n".join(parts)

    def recent_commits(self, max_count: int = 12) -> List[RecentCommit]:
        """Most recent non-merge commits with their per-file line counts, newest first."""
        if not self._repo.head.is_valid():
            logger.debug(f"No commits yet in {self.repo_path}")
            return []

        output = self._git(
            "log",
            "-n",
            str(max(MIN_HISTORY, max_count)),
            "--no-merges",
            LOG_FORMAT,
            "--numstat",
        )

        commits: List[RecentCommit] = []
        for record in output.split(RECORD_SEPARATOR):
            commit = parse_commit_record(record)
            if commit:
                commits.append(commit)
        return commits

    def stage_files(self, files: Iterable[str]) -> List[str]:
        unique: List[str] = []
        for path in files:
            path = path.strip()
            if path and path not in unique:
                unique.append(path)

        if unique:
            self._git("add", "-A", "--", *unique)
        return unique

    def commit(
        self,
        message: str,
        *,
        body: Optional[str] = None,
        footer: Optional[str] = None,
        dry_run: bool = False,
    ) -> Tuple[str, str]:
        """Run ``git commit`` with one ``-m`` per message part; returns (stdout, stderr)."""
        args: List[str] = ["-m", message]
        if body:
            args.extend(["-m", body])
        if footer:
            args.extend(["-m", footer])
        if dry_run:
            args.append("--dry-run")

        try:
            _status, stdout, stderr = self._repo.git.commit(*args, with_extended_output=True)
        except GitCommandError as exc:
            raise GitRepositoryError(f"git commit failed: {exc.stderr.strip() if exc.stderr else exc}") from exc
        return stdout, stderr

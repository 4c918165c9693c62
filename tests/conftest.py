from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import pytest  # type: ignore[import]

from commit_signals.config import Settings
from commit_signals.models import RecentCommit


class DummyRepository:
    """In-memory stand-in for GitRepository."""

    def __init__(
        self,
        diff: str = "",
        recent: Optional[List[RecentCommit]] = None,
        repo_path: Path = Path("/tmp/commit-signals-dummy"),
    ) -> None:
        self.repo_path = repo_path
        self.diff = diff
        self.recent = recent or []
        self.diff_calls: List[dict] = []
        self.history_calls: List[int] = []
        self.staged: List[List[str]] = []
        self.commits: List[dict] = []
        self.error: Optional[Exception] = None

    def get_diff(self, **kwargs) -> str:  # noqa: D401 - simple stub
        self.diff_calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.diff

    def recent_commits(self, max_count: int = 12) -> List[RecentCommit]:
        self.history_calls.append(max_count)
        return list(self.recent)

    def stage_files(self, files) -> List[str]:
        unique = list(dict.fromkeys(f.strip() for f in files if f.strip()))
        self.staged.append(unique)
        return unique

    def commit(self, message: str, *, body=None, footer=None, dry_run: bool = False) -> Tuple[str, str]:
        self.commits.append({"message": message, "body": body, "footer": footer, "dry_run": dry_run})
        return f"[main abc1234] {message}", ""


@pytest.fixture()
def base_settings() -> Settings:
    return Settings()


@pytest.fixture()
def repository_factory():
    return DummyRepository


SAMPLE_DIFF = """diff --git a/api/users.py b/api/users.py
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/api/users.py
@@ -0,0 +1,2 @@
+def add_user():
+    return create()
"""


@pytest.fixture()
def sample_diff() -> str:
    return SAMPLE_DIFF

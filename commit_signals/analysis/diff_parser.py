from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List

from commit_signals.analysis.files import is_code, is_config, is_doc, is_test
from commit_signals.models import DiffStatistics

logger = logging.getLogger(__name__)

FEATURE_KEYWORDS = ("add ", "adds ", "added ", "new ", "create", "introduce", "support", "enable", "implement", "expose")
FIX_KEYWORDS = (
    "fix",
    "bug",
    "error",
    "exception",
    "prevent",
    "handle",
    "resolve",
    "correct",
    "fallback",
    "guard",
    "null",
    "undefined",
)
REFACTOR_KEYWORDS = ("refactor", "cleanup", "simplify", "reorganize", "extract", "rename", "move ", "split ")
PERF_KEYWORDS = ("optimiz", "performance", "faster", "latency", "throughput", "memo", "cache", "benchmark")
STYLE_KEYWORDS = ("format", "lint", "prettier", "eslint-disable")

BREAKING_MARKERS = ("BREAKING CHANGE", "!:")

_FILE_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")
_PUNCTUATION_ONLY_RE = re.compile(r"^[{}()\[\];,.]+$")
_COMMENT_RE = re.compile(r"^\s*(//|\*|\*/)")


@dataclass(slots=True)
class _Accumulator:
    files: List[str] = field(default_factory=list)
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

    def scan_content(self, line: str, *, added: bool) -> None:
        text = line[1:].lower()
        if any(marker in line for marker in BREAKING_MARKERS):
            self.has_breaking_hint = True

        # Feature signals come from added lines only.
        if added:
            self.feature_signals += count_keyword_hits(text, FEATURE_KEYWORDS)
        self.fix_signals += count_keyword_hits(text, FIX_KEYWORDS)
        self.refactor_signals += count_keyword_hits(text, REFACTOR_KEYWORDS)
        self.perf_signals += count_keyword_hits(text, PERF_KEYWORDS)
        self.style_signals += count_keyword_hits(text, STYLE_KEYWORDS)
        if is_style_only_change(text):
            self.style_signals += 1

    def freeze(self) -> DiffStatistics:
        files = tuple(self.files)
        return DiffStatistics(
            files=files,
            additions=self.additions,
            deletions=self.deletions,
            added_files=self.added_files,
            deleted_files=self.deleted_files,
            renamed_files=self.renamed_files,
            has_breaking_hint=self.has_breaking_hint,
            feature_signals=self.feature_signals,
            fix_signals=self.fix_signals,
            refactor_signals=self.refactor_signals,
            perf_signals=self.perf_signals,
            style_signals=self.style_signals,
            has_test_files=any(is_test(f) for f in files),
            has_docs_files=any(is_doc(f) for f in files),
            has_config_files=any(is_config(f) for f in files),
            has_code_files=any(is_code(f) for f in files),
        )


def count_keyword_hits(text: str, keywords: Iterable[str]) -> int:
    """Number of distinct keywords that occur in ``text``."""
    return sum(1 for keyword in keywords if keyword in text)


def is_style_only_change(text: str) -> bool:
    """True for blank lines, bracket/punctuation-only lines and comment lines."""
    trimmed = text.strip()
    if not trimmed:
        return True
    if _PUNCTUATION_ONLY_RE.match(trimmed):
        return True
    return bool(_COMMENT_RE.match(text))


def parse_diff(diff_text: str) -> DiffStatistics:
    """
    Extract statistics from unified diff text.

    Never raises: empty or malformed input produces a zero-valued record.
    Changed files are reported in first-seen order, one entry per
    ``diff --git`` header, without de-duplication.

    Every ``rename from``/``rename to`` line bumps ``renamed_files``, so a
    single rename is counted twice.
    """
    acc = _Accumulator()
    if not diff_text:
        return acc.freeze()

    for raw_line in diff_text.split("\n"):
        line = raw_line.rstrip("\r")

        if line.startswith("diff --git "):
            match = _FILE_HEADER_RE.match(line)
            if match and match.group(2):
                acc.files.append(match.group(2))
            continue

        if line.startswith("new file mode "):
            acc.added_files += 1
            continue

        if line.startswith("deleted file mode "):
            acc.deleted_files += 1
            continue

        if line.startswith("rename from ") or line.startswith("rename to "):
            acc.renamed_files += 1
            continue

        if line.startswith("+") and not line.startswith("+++"):
            acc.additions += 1
            acc.scan_content(line, added=True)
            continue

        if line.startswith("-") and not line.startswith("---"):
            acc.deletions += 1
            acc.scan_content(line, added=False)

    stats = acc.freeze()
    logger.debug(
        f"Parsed diff: {len(stats.files)} files, +{stats.additions}/-{stats.deletions}, "
        f"breaking={stats.has_breaking_hint}"
    )
    return stats

from __future__ import annotations

from typing import Dict, List

from commit_signals.analysis.files import is_config, is_doc, is_test
from commit_signals.models import CommitType, DiffStatistics, TypeCandidate

DEFAULT_LIMIT = 4

_TYPE_ORDER = {commit_type: index for index, commit_type in enumerate(CommitType)}


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _reasons(stats: DiffStatistics) -> Dict[CommitType, str]:
    return {
        CommitType.FEAT: f"featureSignals={stats.feature_signals}, addedFiles={stats.added_files}",
        CommitType.FIX: f"fixSignals={stats.fix_signals}, deletions={stats.deletions}",
        CommitType.REFACTOR: f"refactorSignals={stats.refactor_signals}, renamedFiles={stats.renamed_files}",
        CommitType.DOCS: f"hasDocsFiles={_flag(stats.has_docs_files)}",
        CommitType.TEST: f"hasTestFiles={_flag(stats.has_test_files)}",
        CommitType.CHORE: f"hasConfigFiles={_flag(stats.has_config_files)}",
        CommitType.BUILD: "config/build files detected",
        CommitType.CI: "ci config detected",
        CommitType.PERF: f"perfSignals={stats.perf_signals}",
        CommitType.STYLE: f"styleSignals={stats.style_signals}",
    }


def score_types(stats: DiffStatistics, limit: int = DEFAULT_LIMIT) -> List[TypeCandidate]:
    """
    Rank every Conventional Commit type for the given statistics.

    Rules are additive and applied in a fixed order; the result is sorted by
    descending score with ties resolved by ``CommitType`` declaration order,
    then cut to ``limit`` entries.
    """
    scores: Dict[CommitType, int] = {commit_type: 0 for commit_type in CommitType}
    files = stats.files

    if not files:
        # Headerless input can still carry signals; chore must outrank all of them.
        scores[CommitType.CHORE] += 10 + max(
            stats.feature_signals + stats.added_files * 2 + 1,
            stats.fix_signals + 1,
            stats.refactor_signals + (3 if stats.renamed_files > 0 else 0),
            stats.perf_signals * 2,
            stats.style_signals,
        ) - 1

    all_docs = bool(files) and all(is_doc(f) for f in files)
    if all_docs:
        # Blank lines in prose count as style signals; docs must stay ahead of them.
        scores[CommitType.DOCS] += 12 + stats.style_signals

    # Documentation living under test directories is still documentation.
    if files and not all_docs and all(is_test(f) for f in files):
        scores[CommitType.TEST] += 12

    if files and all(is_config(f) for f in files):
        scores[CommitType.CHORE] += 7
        if any(".github/" in f for f in files):
            scores[CommitType.CI] += 8
        if any("package.json" in f or "lock" in f or "docker" in f for f in files):
            scores[CommitType.BUILD] += 8

    scores[CommitType.FEAT] += (
        stats.feature_signals + stats.added_files * 2 + (1 if stats.additions > stats.deletions else 0)
    )
    scores[CommitType.FIX] += stats.fix_signals + (1 if stats.deletions > stats.additions else 0)
    scores[CommitType.REFACTOR] += stats.refactor_signals + (3 if stats.renamed_files > 0 else 0)
    scores[CommitType.PERF] += stats.perf_signals * 2
    scores[CommitType.STYLE] += stats.style_signals

    if stats.deletions > stats.additions * 2 and stats.has_code_files:
        scores[CommitType.REFACTOR] += 2

    # Threshold is additions plus a third of deletions.
    if stats.style_signals > max(3, stats.additions + stats.deletions / 3) and stats.has_code_files:
        scores[CommitType.STYLE] += 3

    if stats.has_code_files and scores[CommitType.FIX] == 0 and scores[CommitType.FEAT] == 0:
        scores[CommitType.FIX] += 1

    if not (stats.has_code_files or stats.has_docs_files or stats.has_config_files or stats.has_test_files):
        scores[CommitType.CHORE] += 2

    reasons = _reasons(stats)
    ranked = sorted(scores.items(), key=lambda item: (-item[1], _TYPE_ORDER[item[0]]))
    return [
        TypeCandidate(type=commit_type, score=score, reason=reasons[commit_type])
        for commit_type, score in ranked[:limit]
    ]

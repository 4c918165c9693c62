from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence, Set

from commit_signals.analysis.conventional import parse_type
from commit_signals.models import AnalysisResult, RecentCommit, RelatedCommit

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 0.65
DEFAULT_MAX_RESULTS = 3

OVERLAP_WEIGHT = 0.55
LEXICAL_WEIGHT = 0.25
TYPE_MATCH_WEIGHT = 0.20

STOP_WORDS = frozenset(
    {
        "the",
        "and",
        "for",
        "with",
        "from",
        "into",
        "this",
        "that",
        "these",
        "those",
        "was",
        "were",
        "are",
        "has",
    }
)

NOISE_PATTERNS = (
    re.compile(r"^merge\b", re.IGNORECASE),
    re.compile(r"^revert\b", re.IGNORECASE),
    re.compile(r"^release\b", re.IGNORECASE),
    re.compile(r"^(chore|build)\(release\)", re.IGNORECASE),
    re.compile(r"^(chore|build)(\([^)]*\))?!?:\s*(release|bump)\b", re.IGNORECASE),
    re.compile(r"^v?\d+\.\d+\.\d+"),
    re.compile(r"\bversion bump\b", re.IGNORECASE),
    re.compile(r"\bbump(ed|s)?\b.*\bversion\b", re.IGNORECASE),
)

_TOKEN_STRIP_RE = re.compile(r"[^a-z0-9/_\-\s]")


def is_noise_commit(subject: str) -> bool:
    """Merge, release, revert and version-bump commits never count as related work."""
    text = subject.strip()
    return any(pattern.search(text) for pattern in NOISE_PATTERNS)


def tokenize(text: str) -> Set[str]:
    cleaned = _TOKEN_STRIP_RE.sub(" ", text.lower())
    return {token for token in cleaned.split() if len(token) >= 3 and token not in STOP_WORDS}


def file_overlap(current: Iterable[str], previous: Iterable[str]) -> float:
    """Dice coefficient of two file sets; 0.0 when either side is empty."""
    current_set = set(current)
    previous_set = set(previous)
    if not current_set or not previous_set:
        return 0.0
    shared = len(current_set & previous_set)
    return (2 * shared) / (len(current_set) + len(previous_set))


def jaccard(left: Set[str], right: Set[str]) -> float:
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def _analysis_tokens(analysis: AnalysisResult) -> Set[str]:
    preferred = analysis.preferred_type
    parts: List[str] = [preferred.value if preferred else ""]
    parts.extend(analysis.scope_candidates)
    parts.extend(analysis.subject_hints)
    parts.extend(analysis.stats.files)
    return tokenize(" ".join(parts))


def find_related(
    analysis: AnalysisResult,
    recent_commits: Sequence[RecentCommit],
    min_score: float = DEFAULT_MIN_SCORE,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[RelatedCommit]:
    """
    Rank recent commits by similarity to the analysed change.

    The score blends file overlap, lexical similarity between the analysis
    and the commit subject, and whether the subject's Conventional type
    matches the top recommended type. Commits below ``min_score`` and noise
    commits are dropped.
    """
    current_files = analysis.stats.files
    current_tokens = _analysis_tokens(analysis)
    preferred = analysis.preferred_type

    scored: List[RelatedCommit] = []
    for commit in recent_commits:
        if is_noise_commit(commit.subject):
            logger.debug(f"Skipping noise commit {commit.hash[:8]}: {commit.subject}")
            continue

        overlap = file_overlap(current_files, commit.files)
        lexical = jaccard(current_tokens, tokenize(commit.subject))
        type_match = 1.0 if preferred is not None and parse_type(commit.subject) == preferred else 0.0

        score = OVERLAP_WEIGHT * overlap + LEXICAL_WEIGHT * lexical + TYPE_MATCH_WEIGHT * type_match
        score = min(1.0, max(0.0, score))
        if score < min_score:
            continue

        scored.append(
            RelatedCommit(
                hash=commit.hash,
                subject=commit.subject,
                score=round(score, 3),
                reason=f"overlap={overlap:.2f}, lexical={lexical:.2f}, type_match={type_match:.0f}",
            )
        )

    scored.sort(key=lambda related: related.score, reverse=True)
    return scored[: max(0, max_results)]

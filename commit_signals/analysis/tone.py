from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from commit_signals.analysis.conventional import parse_header, parse_type, strip_prefix
from commit_signals.models import CommitType, ToneValidation

logger = logging.getLogger(__name__)

DEFAULT_MIN_TONE_SCORE = 0.8
MIN_SUBJECT_LENGTH = 8
MAX_SUBJECT_LENGTH = 72

HEADER_PENALTY = 0.35
LENGTH_PENALTY = 0.12
PUNCTUATION_PENALTY = 0.08
VAGUE_PENALTY = 0.2
CAPITALIZATION_PENALTY = 0.05
TYPE_DRIFT_PENALTY = 0.15

VAGUE_PHRASES = (
    "various changes",
    "some changes",
    "minor changes",
    "small changes",
    "stuff",
    "misc",
    "things",
    "wip",
    "etc",
)
VAGUE_REPLACEMENT = "implementation details"
EMPTY_SUBJECT_FALLBACK = "update project files"

_VAGUE_RE = re.compile(r"\b(?:" + "|".join(re.escape(p) for p in VAGUE_PHRASES) + r")\b", re.IGNORECASE)
_TRAILING_PUNCTUATION_RE = re.compile(r"[.!?]+$")
_WHITESPACE_RE = re.compile(r"\s+")


def dominant_type(subjects: Iterable[str]) -> Optional[CommitType]:
    """Most frequent Conventional type among ``subjects``; ties go to the first seen."""
    parsed = [commit_type for commit_type in (parse_type(s) for s in subjects) if commit_type is not None]
    if not parsed:
        return None
    counts = Counter(parsed)
    best = max(counts.values())
    return next(commit_type for commit_type in parsed if counts[commit_type] == best)


def normalize_subject(subject: str) -> str:
    text = strip_prefix(subject)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    text = _TRAILING_PUNCTUATION_RE.sub("", text).strip()
    text = _VAGUE_RE.sub(VAGUE_REPLACEMENT, text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if not text:
        return EMPTY_SUBJECT_FALLBACK
    return text[0].lower() + text[1:]



def _first_line(message: str) -> str:
    return message.split("\n", 1)[0].strip()


def _score(trimmed: str, expected: Optional[CommitType]) -> Tuple[float, List[str]]:
    header = parse_header(trimmed)
    violations: List[str] = []
    score = 1.0

    if header is None:
        score -= HEADER_PENALTY
        violations.append("header does not follow type(scope): subject")
        subject = _first_line(trimmed)
    else:
        subject = header.subject

    if not MIN_SUBJECT_LENGTH <= len(subject) <= MAX_SUBJECT_LENGTH:
        score -= LENGTH_PENALTY
        violations.append(
            f"subject length {len(subject)} is outside {MIN_SUBJECT_LENGTH}-{MAX_SUBJECT_LENGTH} characters"
        )

    if subject.endswith((".", "!", "?")):
        score -= PUNCTUATION_PENALTY
        violations.append("subject ends with punctuation")

    if _VAGUE_RE.search(subject):
        score -= VAGUE_PENALTY
        violations.append("subject uses vague wording")

    if subject[:1].isupper():
        score -= CAPITALIZATION_PENALTY
        violations.append("subject starts with an upper-case letter")

    actual = header.type if header else None
    if expected is not None and expected != actual:
        score -= TYPE_DRIFT_PENALTY
        violations.append(f"type differs from related commits (expected {expected.value})")

    return round(min(1.0, max(0.0, score)), 3), violations


def _rewrite(trimmed: str) -> str:
    header = parse_header(trimmed)
    if header is not None:
        return header.render(normalize_subject(header.subject))
    return f"{CommitType.CHORE.value}: {normalize_subject(_first_line(trimmed))}"


def validate_tone(
    message: str,
    related_subjects: Iterable[str] = (),
    min_score: float = DEFAULT_MIN_TONE_SCORE,
) -> ToneValidation:
    """
    Score a commit header against the house style and propose a rewrite.

    The score starts at 1.0 and loses a fixed amount per violated rule. A
    rewrite that would score lower than the message itself is discarded in
    favour of the message, so the rewrite is only marked as applied when the
    score falls below ``min_score`` and the rewrite actually differs.
    """
    trimmed = (message or "").strip()
    expected = dominant_type(related_subjects)
    score, violations = _score(trimmed, expected)

    rewrite = _rewrite(trimmed)
    if rewrite != trimmed:
        rewrite_score, _ = _score(rewrite, expected)
        if rewrite_score < score:
            logger.debug(f"Discarding rewrite {rewrite!r}: scores {rewrite_score} below {score}")
            rewrite = trimmed

    applied = score < min_score and rewrite != trimmed
    logger.debug(f"Tone score {score} for {trimmed!r} ({len(violations)} violations, applied={applied})")

    return ToneValidation(
        tone_score=score,
        violations=violations,
        suggested_rewrite=rewrite,
        applied=applied,
    )

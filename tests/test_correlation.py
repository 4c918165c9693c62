from __future__ import annotations

import pytest  # type: ignore[import]

from commit_signals.analysis import analyze_diff
from commit_signals.analysis.correlation import file_overlap, find_related, is_noise_commit, jaccard, tokenize
from commit_signals.models import RecentCommit


@pytest.fixture()
def analysis(sample_diff: str):
    return analyze_diff(sample_diff)


def test_related_commit_on_same_files(analysis) -> None:
    recent = [RecentCommit(hash="a1b2c3d4e5", subject="feat(api): add users endpoint", files=["api/users.py"])]

    related = find_related(analysis, recent)

    assert len(related) == 1
    assert related[0].hash == "a1b2c3d4e5"
    assert related[0].score == pytest.approx(0.827, abs=0.001)
    assert related[0].reason == "overlap=1.00, lexical=0.31, type_match=1"


@pytest.mark.parametrize(
    "subject",
    [
        "Merge branch 'main' into feature",
        "Revert \"feat(api): add users endpoint\"",
        "chore(release): 1.4.0",
        "chore: bump version to 1.4.0",
        "v1.4.0",
    ],
)
def test_noise_commits_are_excluded(analysis, subject: str) -> None:
    recent = [RecentCommit(hash="deadbeef", subject=subject, files=["api/users.py"])]

    assert is_noise_commit(subject)
    assert find_related(analysis, recent) == []


def test_unrelated_commit_is_below_threshold(analysis) -> None:
    recent = [RecentCommit(hash="cafe01", subject="docs: describe installation", files=["README.md"])]

    assert find_related(analysis, recent) == []


def test_results_are_sorted_and_limited(analysis) -> None:
    recent = [
        RecentCommit(hash="c1", subject="fix(api): handle missing user", files=["api/users.py"]),
        RecentCommit(hash="c2", subject="feat(api): add users endpoint", files=["api/users.py"]),
        RecentCommit(hash="c3", subject="feat(api): add users paging", files=["api/users.py", "api/paging.py"]),
    ]

    related = find_related(analysis, recent, min_score=0.0, max_results=2)

    assert [r.hash for r in related] == ["c2", "c3"]
    assert related[0].score >= related[1].score


def test_max_results_zero_returns_nothing(analysis) -> None:
    recent = [RecentCommit(hash="c2", subject="feat(api): add users endpoint", files=["api/users.py"])]

    assert find_related(analysis, recent, max_results=0) == []


def test_scores_stay_in_unit_interval(analysis) -> None:
    recent = [
        RecentCommit(hash=f"h{n}", subject=subject, files=files)
        for n, (subject, files) in enumerate(
            [
                ("feat(api): add users endpoint", ["api/users.py"]),
                ("refactor: tidy", []),
                ("", ["api/users.py"]),
            ]
        )
    ]

    for related in find_related(analysis, recent, min_score=0.0, max_results=10):
        assert 0.0 <= related.score <= 1.0


def test_tokenize_drops_short_words_and_stop_words() -> None:
    assert tokenize("Fix the API for user-profile, and cache it!") == {"fix", "api", "user-profile", "cache"}


def test_overlap_and_jaccard_helpers() -> None:
    assert file_overlap(["a.py", "b.py"], ["b.py", "c.py"]) == pytest.approx(0.5)
    assert file_overlap([], ["a.py"]) == 0.0
    assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard(set(), set()) == 0.0


def test_regular_subjects_are_not_noise() -> None:
    assert not is_noise_commit("feat(api): add users endpoint")
    assert not is_noise_commit("fix: merge sort off-by-one")

from __future__ import annotations

import pytest  # type: ignore[import]

from commit_signals.analysis import analyze_diff
from commit_signals.analysis.heuristics import scope_candidates, subject_hints, summarize_target
from commit_signals.models import CommitType


def test_scope_from_first_directory_or_file_stem() -> None:
    files = ["api/users.py", "src/app.py", "README.md", "api/v2.py"]

    assert scope_candidates(files) == ["api", "app", "readme"]


def test_scope_strips_unsafe_characters_and_truncates() -> None:
    long_name = "a" * 40

    assert scope_candidates(["My Module/x.py"]) == ["mymodule"]
    assert scope_candidates([f"src/{long_name}.py"]) == ["a" * 30]


def test_scope_candidates_are_limited() -> None:
    files = [f"pkg{n}/mod.py" for n in range(8)]

    assert scope_candidates(files) == ["pkg0", "pkg1", "pkg2", "pkg3", "pkg4"]
    assert scope_candidates(files, limit=2) == ["pkg0", "pkg1"]


def test_scope_skips_names_that_strip_to_nothing() -> None:
    assert scope_candidates(["src/+++.py"]) == []


@pytest.mark.parametrize(
    "files, expected",
    [
        ([], "codebase"),
        (["src/App.tsx"], "app"),
        (["api/a.py", "api/b.py"], "api"),
        (["api/a.py", "web/b.py"], "multiple-modules"),
    ],
)
def test_summarize_target(files, expected: str) -> None:
    assert summarize_target(files) == expected


def test_subject_hints_follow_fixed_templates() -> None:
    assert subject_hints(["api/users.py"]) == [
        "update users behavior",
        "add users support",
        "refactor users implementation",
        "optimize users performance",
    ]


def test_analyze_diff_combines_all_signals(sample_diff: str) -> None:
    result = analyze_diff(sample_diff)

    assert result.has_changes
    assert result.preferred_type == CommitType.FEAT
    assert result.scope_candidates == ["api"]
    assert result.subject_hints[0] == "update users behavior"
    assert len(result.recommended_types) == 4


def test_analyze_empty_diff() -> None:
    result = analyze_diff("")

    assert not result.has_changes
    assert result.preferred_type == CommitType.CHORE
    assert result.scope_candidates == []
    assert result.subject_hints[0] == "update codebase behavior"

from __future__ import annotations

import pytest  # type: ignore[import]

from commit_signals.analysis.diff_parser import count_keyword_hits, is_style_only_change, parse_diff
from commit_signals.analysis.files import extension_of, is_code, is_config, is_doc, is_test
from commit_signals.models import DiffStatistics


MODIFIED_DIFF = """diff --git a/src/app.py b/src/app.py
index 1234567..89abcde 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@
 context line
-old line
+new line here
+another line
"""

RENAME_DIFF = """diff --git a/lib/old_name.py b/lib/new_name.py
similarity index 100%
rename from lib/old_name.py
rename to lib/new_name.py
"""


def test_single_markdown_line() -> None:
    stats = parse_diff("diff --git a/x.md b/x.md\n+hello\n")

    assert list(stats.files) == ["x.md"]
    assert stats.additions == 1
    assert stats.deletions == 0
    assert stats.has_docs_files is True


@pytest.mark.parametrize("text", ["", "not a diff at all", "@@ -1 +1 @@\n"])
def test_empty_or_malformed_input_yields_zero_record(text: str) -> None:
    assert parse_diff(text) == DiffStatistics.empty()


def test_file_markers_are_not_counted_as_changes() -> None:
    stats = parse_diff(MODIFIED_DIFF)

    assert list(stats.files) == ["src/app.py"]
    assert stats.additions == 2
    assert stats.deletions == 1
    assert stats.has_code_files is True


@pytest.mark.parametrize(
    "diff",
    [
        MODIFIED_DIFF,
        RENAME_DIFF,
        "diff --git a/a.txt b/a.txt\n--- a/a.txt\n+++ b/a.txt\n-x\n-y\n+z\n",
        "+one\n-two\n+++ not counted\n--- not counted\n++double\n--double\n",
    ],
)
def test_additions_plus_deletions_match_content_lines(diff: str) -> None:
    stats = parse_diff(diff)
    expected = sum(
        1
        for line in diff.split("\n")
        if (line.startswith("+") and not line.startswith("+++"))
        or (line.startswith("-") and not line.startswith("---"))
    )

    assert stats.changed_lines == expected


def test_rename_counts_both_directions() -> None:
    stats = parse_diff(RENAME_DIFF)

    assert list(stats.files) == ["lib/new_name.py"]
    assert stats.renamed_files == 2


def test_new_and_deleted_file_modes() -> None:
    diff = (
        "diff --git a/src/new.py b/src/new.py\nnew file mode 100644\n+x = 1\n"
        "diff --git a/src/gone.py b/src/gone.py\ndeleted file mode 100644\n-y = 2\n"
    )
    stats = parse_diff(diff)

    assert stats.added_files == 1
    assert stats.deleted_files == 1
    assert list(stats.files) == ["src/new.py", "src/gone.py"]


def test_repeated_headers_are_not_deduplicated() -> None:
    diff = "diff --git a/a.py b/a.py\n+x\ndiff --git a/a.py b/a.py\n+y\n"

    assert list(parse_diff(diff).files) == ["a.py", "a.py"]


@pytest.mark.parametrize(
    "line, expected",
    [
        ("+BREAKING CHANGE: drop the v1 API", True),
        ("-feat!: remove legacy flag", True),
        ("+breaking change in lower case", False),
        ("+plain line", False),
    ],
)
def test_breaking_markers(line: str, expected: bool) -> None:
    stats = parse_diff(f"diff --git a/src/a.py b/src/a.py\n{line}\n")

    assert stats.has_breaking_hint is expected


def test_feature_signals_only_from_added_lines() -> None:
    added = parse_diff("+add new support\n")
    removed = parse_diff("-add new support\n")

    assert added.feature_signals == 3
    assert removed.feature_signals == 0


def test_keyword_counted_once_per_line_across_lists() -> None:
    stats = parse_diff("+fix the bug fix and cache it\n")

    assert stats.fix_signals == 2
    assert stats.perf_signals == 1


def test_deleted_lines_feed_fix_refactor_perf_and_style() -> None:
    stats = parse_diff("-refactor error handler with lint\n")

    assert stats.refactor_signals == 1
    assert stats.fix_signals == 2
    assert stats.style_signals == 1


@pytest.mark.parametrize("line", ["+", "+}", "+  );", "+  // comment", "- * docblock", "-*/"])
def test_style_only_lines_add_style_signal(line: str) -> None:
    assert parse_diff(f"{line}\n").style_signals == 1


def test_style_only_change_helper() -> None:
    assert is_style_only_change("   ")
    assert is_style_only_change("{}")
    assert not is_style_only_change("return value;")


def test_count_keyword_hits() -> None:
    assert count_keyword_hits("optimize the cache for faster reads", ("optimiz", "cache", "faster", "memo")) == 3


def test_shape_flags() -> None:
    diff = "".join(
        f"diff --git a/{path} b/{path}\n+x\n"
        for path in ("tests/test_app.py", "docs/guide.md", "package.json", "src/app.py")
    )
    stats = parse_diff(diff)

    assert stats.has_test_files
    assert stats.has_docs_files
    assert stats.has_config_files
    assert stats.has_code_files


def test_crlf_lines_are_handled() -> None:
    stats = parse_diff("diff --git a/a.py b/a.py\r\n+x\r\n-y\r\n")

    assert list(stats.files) == ["a.py"]
    assert stats.additions == 1
    assert stats.deletions == 1


@pytest.mark.parametrize(
    "path, doc, test, config, code",
    [
        ("README.md", True, False, False, False),
        ("docs/index.html", True, False, False, False),
        ("tests/test_app.py", False, True, False, True),
        ("src/__mocks__/api.ts", False, True, False, True),
        (".github/workflows/ci.yml", False, False, True, False),
        ("package-lock.json", False, False, True, False),
        ("src/app.py", False, False, False, True),
        ("assets/logo.png", False, False, False, False),
        ("Makefile", False, False, False, False),
    ],
)
def test_file_classification(path: str, doc: bool, test: bool, config: bool, code: bool) -> None:
    assert is_doc(path) is doc
    assert is_test(path) is test
    assert is_config(path) is config
    assert is_code(path) is code


def test_extension_of() -> None:
    assert extension_of("src/App.TSX") == ".tsx"
    assert extension_of("a.b/Makefile") == ""
    assert extension_of(".gitignore") == ".gitignore"

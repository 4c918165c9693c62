from __future__ import annotations

import re
from typing import List, Sequence

GENERIC_ROOTS = frozenset({"src", "lib"})
MAX_SCOPES = 5
MAX_SCOPE_LENGTH = 30

_SCOPE_STRIP_RE = re.compile(r"[^a-z0-9_-]")
_EXTENSION_RE = re.compile(r"\.[^.]+$")


def _segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


def _stem(name: str) -> str:
    return _EXTENSION_RE.sub("", name)


def scope_candidates(files: Sequence[str], limit: int = MAX_SCOPES) -> List[str]:
    """Derive scope names from changed paths, in discovery order."""
    scopes: List[str] = []

    for path in files:
        parts = _segments(path)
        if len(parts) > 1 and parts[0] not in GENERIC_ROOTS:
            scope = _SCOPE_STRIP_RE.sub("", parts[0].lower())
        else:
            filename = parts[-1] if parts else path
            scope = _SCOPE_STRIP_RE.sub("", _stem(filename).lower())[:MAX_SCOPE_LENGTH]

        if scope and scope not in scopes:
            scopes.append(scope)

    return scopes[:limit]


def summarize_target(files: Sequence[str]) -> str:
    if not files:
        return "codebase"

    if len(files) == 1:
        name = files[0].split("/")[-1] or files[0]
        return _stem(name).lower()

    roots = {path.split("/")[0] or "root" for path in files}
    if len(roots) == 1:
        return roots.pop().lower()

    return "multiple-modules"


def subject_hints(files: Sequence[str]) -> List[str]:
    target = summarize_target(files)
    return [
        f"update {target} behavior",
        f"add {target} support",
        f"refactor {target} implementation",
        f"optimize {target} performance",
    ]

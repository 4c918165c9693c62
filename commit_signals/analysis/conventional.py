"""Conventional Commit header grammar: ``type(scope)!: subject``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from commit_signals.models import CommitType

_TYPE_ALTERNATION = "|".join(commit_type.value for commit_type in CommitType)

HEADER_RE = re.compile(
    rf"^(?P<type>{_TYPE_ALTERNATION})(?:\((?P<scope>[^()\r\n]*)\))?(?P<breaking>!)?:\s*(?P<subject>.*)$",
    re.IGNORECASE,
)
PREFIX_RE = re.compile(
    rf"^(?:{_TYPE_ALTERNATION})(?:\([^()\r\n]*\))?!?:\s*",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ConventionalHeader:
    type: CommitType
    scope: str
    breaking: bool
    subject: str

    def render(self, subject: Optional[str] = None) -> str:
        scope = f"({self.scope})" if self.scope else ""
        bang = "!" if self.breaking else ""
        return f"{self.type.value}{scope}{bang}: {self.subject if subject is None else subject}"


def parse_header(message: str) -> Optional[ConventionalHeader]:
    """Parse the first line of ``message``; ``None`` when it is not a Conventional header."""
    if not message:
        return None

    first_line = message.strip().split("\n", 1)[0].strip()
    match = HEADER_RE.match(first_line)
    if not match or not match.group("subject").strip():
        return None

    commit_type = CommitType.from_label(match.group("type"))
    if commit_type is None:
        return None

    return ConventionalHeader(
        type=commit_type,
        scope=(match.group("scope") or "").strip(),
        breaking=bool(match.group("breaking")),
        subject=match.group("subject").strip(),
    )


def parse_type(message: str) -> Optional[CommitType]:
    header = parse_header(message)
    return header.type if header else None


def strip_prefix(subject: str) -> str:
    return PREFIX_RE.sub("", subject.strip(), count=1)

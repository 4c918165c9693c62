"""Path-based classification of changed files."""

from __future__ import annotations

DOC_EXTENSIONS = frozenset({".md", ".mdx", ".rst", ".adoc", ".txt"})
BINARY_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".pdf", ".lock"})

TEST_HINTS = ("test", "spec", "__tests__", "__mocks__", "fixtures")
CONFIG_HINTS = (
    ".github/",
    ".gitlab/",
    ".vscode/",
    ".husky/",
    "dockerfile",
    "docker-compose",
    "tsconfig",
    "eslint",
    "prettier",
    "package.json",
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
)


def extension_of(path: str) -> str:
    # Dotfiles keep their whole name as the extension (".gitignore").
    name = path.rsplit("/", 1)[-1]
    idx = name.rfind(".")
    return name[idx:].lower() if idx != -1 else ""


def is_doc(path: str) -> bool:
    lowered = path.lower()
    return lowered.startswith("docs/") or extension_of(lowered) in DOC_EXTENSIONS


def is_test(path: str) -> bool:
    lowered = path.lower()
    return any(hint in lowered for hint in TEST_HINTS)


def is_config(path: str) -> bool:
    lowered = path.lower()
    return any(hint in lowered for hint in CONFIG_HINTS)


def is_code(path: str) -> bool:
    if is_doc(path) or is_config(path):
        return False
    ext = extension_of(path)
    return bool(ext) and ext not in BINARY_EXTENSIONS

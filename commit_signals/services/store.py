from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Sequence


class AnalyzedFilesStore(ABC):
    """Remembers the files seen by the latest analysis of each repository."""

    @abstractmethod
    def get(self, repo_path: Path) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, repo_path: Path, files: Sequence[str]) -> None:
        raise NotImplementedError

    @staticmethod
    def key(repo_path: Path) -> str:
        return str(Path(repo_path).resolve())


class InMemoryAnalyzedFilesStore(AnalyzedFilesStore):
    """
    Process-local store with last-write-wins semantics.

    Concurrent analyses of the same repository simply overwrite each other;
    the lock only keeps each individual read or write atomic.
    """

    def __init__(self) -> None:
        self._files: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def get(self, repo_path: Path) -> List[str]:
        with self._lock:
            return list(self._files.get(self.key(repo_path), []))

    def set(self, repo_path: Path, files: Sequence[str]) -> None:
        with self._lock:
            self._files[self.key(repo_path)] = list(files)

"""In-memory registry of completed analyses."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .models import RepoAnalysis


class AnalysisStore:
    """Keeps completed analyses keyed by id for the lifetime of the process."""

    def __init__(self) -> None:
        self._entries: Dict[str, RepoAnalysis] = {}
        self._lock = threading.Lock()

    def add(self, analysis: RepoAnalysis) -> None:
        with self._lock:
            self._entries[analysis.id] = analysis

    def get(self, analysis_id: str) -> Optional[RepoAnalysis]:
        with self._lock:
            return self._entries.get(analysis_id)

    def list(self) -> List[RepoAnalysis]:
        """Return every stored analysis in insertion order."""
        with self._lock:
            return list(self._entries.values())

    def __contains__(self, analysis_id: object) -> bool:
        with self._lock:
            return analysis_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["AnalysisStore"]

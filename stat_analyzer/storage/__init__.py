"""Analysis record storage."""

from stat_analyzer.storage.repository import (
    AnalysisRecord,
    AnalysisRepository,
    AnalysisStatus,
    InMemoryAnalysisRepository,
)

__all__ = [
    "AnalysisRecord",
    "AnalysisRepository",
    "AnalysisStatus",
    "InMemoryAnalysisRepository",
]

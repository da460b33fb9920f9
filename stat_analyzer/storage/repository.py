"""Analysis record persistence.

Records are kept in memory. The API receives a repository through a FastAPI
dependency so tests and other deployments can supply their own.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AnalysisStatus(str, Enum):
    """Lifecycle of an analysis."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisRecord(BaseModel):
    """One uploaded file and everything computed from it."""

    id: int
    filename: str
    file_type: str
    file_size: int
    status: AnalysisStatus = AnalysisStatus.PENDING
    research_question: str | None = None
    data_preview: dict[str, Any] | None = None
    statistical_results: dict[str, Any] | None = None
    interpretation: dict[str, Any] | None = None
    report_path: str | None = None
    error_message: str | None = None
    # In-memory StatisticalResults for report and chart rendering
    results: Any = Field(default=None, exclude=True)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class AnalysisRepository(ABC):
    """Storage interface for analysis records."""

    @abstractmethod
    def create(
        self,
        filename: str,
        file_type: str,
        file_size: int,
        research_question: str | None = None,
    ) -> AnalysisRecord:
        """Create a pending record with a new id."""

    @abstractmethod
    def get(self, analysis_id: int) -> AnalysisRecord | None:
        """Return the record or None."""

    @abstractmethod
    def update(self, analysis_id: int, **changes: Any) -> AnalysisRecord | None:
        """Apply field changes, returning the updated record or None."""

    @abstractmethod
    def list_all(self) -> list[AnalysisRecord]:
        """All records, newest first."""


class InMemoryAnalysisRepository(AnalysisRepository):
    """Thread-safe dictionary-backed repository with ids starting at 1."""

    def __init__(self) -> None:
        self._records: dict[int, AnalysisRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(
        self,
        filename: str,
        file_type: str,
        file_size: int,
        research_question: str | None = None,
    ) -> AnalysisRecord:
        with self._lock:
            record = AnalysisRecord(
                id=self._next_id,
                filename=filename,
                file_type=file_type,
                file_size=file_size,
                research_question=research_question,
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    def get(self, analysis_id: int) -> AnalysisRecord | None:
        with self._lock:
            return self._records.get(analysis_id)

    def update(self, analysis_id: int, **changes: Any) -> AnalysisRecord | None:
        with self._lock:
            record = self._records.get(analysis_id)
            if record is None:
                return None
            unknown = set(changes) - set(AnalysisRecord.model_fields)
            if unknown:
                raise ValueError(f"Unknown record fields: {sorted(unknown)}")
            updated = record.model_copy(update={**changes, "updated_at": _now()})
            self._records[analysis_id] = updated
            return updated

    def list_all(self) -> list[AnalysisRecord]:
        with self._lock:
            return sorted(
                self._records.values(),
                key=lambda r: (r.created_at, r.id),
                reverse=True,
            )

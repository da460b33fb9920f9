"""Tests for analysis record storage."""

import pytest

from stat_analyzer.storage import AnalysisStatus, InMemoryAnalysisRepository


@pytest.fixture
def repository() -> InMemoryAnalysisRepository:
    return InMemoryAnalysisRepository()


class TestCreate:
    """Tests for record creation."""

    def test_ids_start_at_one(self, repository: InMemoryAnalysisRepository) -> None:
        """Test sequential ids."""
        first = repository.create("a.csv", "csv", 10)
        second = repository.create("b.csv", "csv", 20, research_question="Why?")

        assert (first.id, second.id) == (1, 2)
        assert first.status == AnalysisStatus.PENDING
        assert second.research_question == "Why?"

    def test_get_unknown(self, repository: InMemoryAnalysisRepository) -> None:
        """Test that unknown ids return None."""
        assert repository.get(99) is None


class TestUpdate:
    """Tests for record updates."""

    def test_update_fields(self, repository: InMemoryAnalysisRepository) -> None:
        """Test that changes are stored and the timestamp advances."""
        record = repository.create("a.csv", "csv", 10)
        updated = repository.update(record.id, status=AnalysisStatus.COMPLETED, report_path="r.pdf")

        assert updated.status == AnalysisStatus.COMPLETED
        assert repository.get(record.id).report_path == "r.pdf"
        assert updated.updated_at >= record.updated_at
        assert record.status == AnalysisStatus.PENDING

    def test_update_unknown_record(self, repository: InMemoryAnalysisRepository) -> None:
        """Test updating a missing record."""
        assert repository.update(5, status=AnalysisStatus.FAILED) is None

    def test_update_unknown_field(self, repository: InMemoryAnalysisRepository) -> None:
        """Test that unknown fields are rejected."""
        record = repository.create("a.csv", "csv", 10)
        with pytest.raises(ValueError, match="Unknown record fields"):
            repository.update(record.id, colour="blue")


class TestListAll:
    """Tests for listing."""

    def test_newest_first(self, repository: InMemoryAnalysisRepository) -> None:
        """Test ordering by creation time, newest first."""
        for name in ("a.csv", "b.csv", "c.csv"):
            repository.create(name, "csv", 1)

        assert [r.filename for r in repository.list_all()] == ["c.csv", "b.csv", "a.csv"]

    def test_results_not_serialised(self, repository: InMemoryAnalysisRepository) -> None:
        """Test that in-memory results are excluded from dumps."""
        record = repository.create("a.csv", "csv", 1)
        record = repository.update(record.id, results=object())

        assert "results" not in record.model_dump()

"""Tests for the document schema."""

from datetime import datetime, timedelta, timezone

from triage.retrieval.evidence import days_between
from triage.schemas.document import Document


class TestDocument:
    """Tests for Document validation."""

    def test_naive_created_at_is_utc(self):
        doc = Document(id=1, title="Crash", created_at=datetime(2024, 1, 2, 12, 0))
        assert doc.created_at == datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)

    def test_aware_created_at_kept(self):
        """Test an explicit offset is preserved."""
        tz = timezone(timedelta(hours=-5))
        doc = Document(id=1, title="Crash", created_at=datetime(2024, 1, 2, tzinfo=tz))
        assert doc.created_at.utcoffset() == timedelta(hours=-5)

    def test_mixed_timezones_comparable(self):
        aware = Document(id=1, title="a", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        naive = Document(id=2, title="b", createdAt="2024-01-02T00:00:00")
        assert days_between(aware, naive) == 1.0

    def test_none_body_is_empty(self):
        doc = Document(id=1, title="Crash", body=None, created_at=datetime(2024, 1, 1))
        assert doc.body == ""

"""
Tests for the database-backed import store with a stand-in session
"""
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import PersistenceError
from app.models.import_batch import ImportBatch, ImportRowError
from app.models.influencer import Influencer, Platform
from app.services.importer import BatchImporter, SQLAlchemyImportStore
from app.services.importer.row import Row
from app.services.importer.row_processor import InfluencerCandidate

DUPLICATE_MESSAGE = 'duplicate key value violates unique constraint "influencers_pkey"'


class FakeSession:
    """Records what the store adds and commits; rejects influencers by name."""

    def __init__(self, reject_name=None):
        self.reject_name = reject_name
        self.pending = []
        self.committed = []
        self.executed = []
        self.rollbacks = 0

    def add(self, obj):
        self.pending.append(obj)

    async def commit(self):
        if any(isinstance(obj, Influencer) and obj.name == self.reject_name for obj in self.pending):
            raise IntegrityError("INSERT INTO influencers", {}, Exception(DUPLICATE_MESSAGE))
        self.committed.extend(self.pending)
        self.pending = []

    async def rollback(self):
        self.rollbacks += 1
        self.pending = []

    async def refresh(self, obj):
        if obj.id is None:
            obj.id = uuid.uuid4()

    async def execute(self, statement):
        self.executed.append(statement)

    def committed_of(self, model):
        return [obj for obj in self.committed if isinstance(obj, model)]


class TestSQLAlchemyImportStore:

    @pytest.mark.asyncio
    async def test_rejected_insert_rolls_back_and_raises(self):
        session = FakeSession(reject_name="C")
        store = SQLAlchemyImportStore(session)
        candidate = InfluencerCandidate(name="C", platform=Platform.youtube, handle="c")

        with pytest.raises(PersistenceError) as exc:
            await store.insert_influencer(candidate)

        assert session.rollbacks == 1
        assert exc.value.message == DUPLICATE_MESSAGE
        assert isinstance(exc.value.original_exception, IntegrityError)
        assert session.committed == []

    @pytest.mark.asyncio
    async def test_batch_reports_rejected_insert_as_row_error(self):
        session = FakeSession(reject_name="C")
        rows = [
            Row({"이름": "A", "플랫폼": "인스타"}),
            Row({"이름": "B", "플랫폼": "badvalue"}),
            Row({"이름": "C", "플랫폼": "youtube"}),
        ]

        report = await BatchImporter(SQLAlchemyImportStore(session)).run(
            rows, {}, uploaded_by=uuid.uuid4(), file_name="list.csv"
        )

        assert (report.total, report.success, report.errors) == (3, 1, 2)
        assert [e.row_index for e in report.error_rows] == [1, 2]
        assert report.error_rows[1].message == DUPLICATE_MESSAGE
        assert session.rollbacks == 1

        assert [i.name for i in session.committed_of(Influencer)] == ["A"]
        stored_errors = session.committed_of(ImportRowError)
        assert [e.row_index for e in stored_errors] == [1, 2]
        assert stored_errors[1].raw_data == {"이름": "C", "플랫폼": "youtube"}
        assert len(session.committed_of(ImportBatch)) == 1
        assert len(session.executed) == 1

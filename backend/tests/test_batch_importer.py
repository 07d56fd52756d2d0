"""
Tests for batch import semantics against an in-memory store
"""
import uuid

import pytest

from app.services.importer import BatchImporter, auto_map_columns, parse_upload
from app.services.importer.row import Row


def rows_of(*cells):
    return [Row(c) for c in cells]


THREE_ROWS = rows_of(
    {"이름": "A", "플랫폼": "인스타", "팔로워": ""},
    {"이름": "B", "플랫폼": "badvalue", "팔로워": ""},
    {"이름": "C", "플랫폼": "youtube", "팔로워": "3.1만"},
)
MAPPING = {"name": "이름", "platform": "플랫폼", "followers": "팔로워"}


class TestBatchImporter:

    @pytest.mark.asyncio
    async def test_partial_success(self, store_factory):
        store = store_factory()
        user_id = uuid.uuid4()

        report = await BatchImporter(store).run(THREE_ROWS, MAPPING, uploaded_by=user_id, file_name="list.csv")

        assert (report.total, report.success, report.errors) == (3, 2, 1)
        assert [e.row_index for e in report.error_rows] == [1]
        assert "Invalid platform" in report.error_rows[0].message
        assert report.error_rows[0].raw_data == {"이름": "B", "플랫폼": "badvalue", "팔로워": ""}

        assert [c.name for c in store.influencers] == ["A", "C"]
        assert store.influencers[1].followers == 31000
        assert all(c.created_by == user_id for c in store.influencers)

        batch = store.batches[report.batch_id]
        assert batch["total_rows"] == 3
        assert batch["file_name"] == "list.csv"
        assert (batch["success_rows"], batch["error_rows"]) == (2, 1)
        assert store.finalize_calls == 1

    @pytest.mark.asyncio
    async def test_persistence_failure_becomes_row_error(self, store_factory):
        def reject_c(candidate):
            if candidate.name == "C":
                return 'duplicate key value violates unique constraint "influencers_pkey"'
            return None

        store = store_factory(fail_when=reject_c)
        report = await BatchImporter(store).run(THREE_ROWS, MAPPING, uploaded_by=uuid.uuid4(), file_name="list.csv")

        assert (report.total, report.success, report.errors) == (3, 1, 2)
        assert [e.row_index for e in report.error_rows] == [1, 2]
        assert "duplicate key" in report.error_rows[1].message
        assert report.error_rows[1].raw_data["플랫폼"] == "youtube"
        assert len(store.errors) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header,cell", [
        ("팔로워", "1" * 40),
        ("팔로워", "1e30"),
        ("참여율", "1e30"),
    ])
    async def test_oversized_number_is_a_row_error(self, store_factory, header, cell):
        store = store_factory()
        rows = rows_of(
            {"이름": "A", "플랫폼": "youtube", header: cell},
            {"이름": "B", "플랫폼": "youtube"},
        )

        report = await BatchImporter(store).run(rows, {}, uploaded_by=uuid.uuid4(), file_name="big.csv")

        assert (report.total, report.success, report.errors) == (2, 1, 1)
        assert report.error_rows[0].row_index == 0
        assert [c.name for c in store.influencers] == ["B"]
        assert store.finalize_calls == 1

    @pytest.mark.asyncio
    async def test_reimport_creates_duplicates(self, store_factory):
        store = store_factory()
        importer = BatchImporter(store)

        first = await importer.run(THREE_ROWS, MAPPING, uploaded_by=uuid.uuid4(), file_name="list.csv")
        second = await importer.run(THREE_ROWS, MAPPING, uploaded_by=uuid.uuid4(), file_name="list.csv")

        assert first.batch_id != second.batch_id
        assert second.success == 2
        assert [c.handle for c in store.influencers] == ["a", "c", "a", "c"]

    @pytest.mark.asyncio
    async def test_error_list_is_capped_but_all_errors_stored(self, store_factory):
        rows = [Row({"이름": f"R{i}", "플랫폼": "myspace"}) for i in range(60)]
        store = store_factory()

        report = await BatchImporter(store, error_response_limit=50).run(
            rows, {}, uploaded_by=uuid.uuid4(), file_name="bad.csv"
        )

        assert report.errors == 60
        assert len(report.error_rows) == 50
        assert report.error_rows[-1].row_index == 49
        assert len(store.errors) == 60
        assert [e["row_index"] for e in store.errors] == list(range(60))

    @pytest.mark.asyncio
    async def test_end_to_end_from_csv(self, sample_csv, store_factory):
        sheet = parse_upload(sample_csv, "influencers.csv")
        store = store_factory()

        report = await BatchImporter(store).run(
            sheet.rows, auto_map_columns(sheet.headers), uploaded_by=uuid.uuid4(), file_name=sheet.file_name
        )

        assert (report.total, report.success, report.errors) == (3, 2, 1)
        assert report.error_rows[0].row_index == 1
        assert report.error_rows[0].message.startswith("Invalid platform")
        assert store.influencers[1].followers == 31000
        assert store.influencers[0].platform.value == "instagram"

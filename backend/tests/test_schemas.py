"""
Tests for request/response schemas and spreadsheet output
"""
import csv
import io
import uuid
from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models.influencer import Influencer, InfluencerNote, InfluencerStatus, Platform
from app.models.schemas import InfluencerCreate, InfluencerUpdate, InfluencerResponse, NoteCreate
from app.services.export_service import EXPORT_COLUMNS, export_file_name, influencers_to_csv
from app.services.influencer_service import parse_platform_list, parse_status_list, resolve_sort
from app.services.note_service import to_note_response
from app.exceptions import BusinessLogicError


def make_influencer(**overrides) -> Influencer:
    values = dict(
        id=uuid.uuid4(),
        name="Beauty Guru",
        platform=Platform.instagram,
        handle="beautyguru",
        languages=["ko", "en"],
        followers=500000,
        engagement_rate=Decimal("5.10"),
        collab_types=["trial", "paid_ad"],
        status=InfluencerStatus.active,
        notes_summary='Says "hi" often',
        created_at=datetime(2025, 1, 2, 3, 4, 5),
        updated_at=datetime(2025, 1, 2, 3, 4, 5),
    )
    values.update(overrides)
    return Influencer(**values)


class TestInfluencerCreate:

    def test_accepts_camel_case_and_coerces_text(self):
        payload = InfluencerCreate.model_validate({
            "name": "  Jane  ",
            "platform": "인스타그램",
            "followers": "3.1만",
            "avgLikes": "1,200",
            "engagementRate": "4.5",
            "collabTypes": "trial; paid_ad",
            "country": "   ",
        })

        assert payload.name == "Jane"
        assert payload.platform == Platform.instagram
        assert payload.followers == 31000
        assert payload.avg_likes == 1200
        assert payload.engagement_rate == Decimal("4.5")
        assert payload.collab_types == ["trial", "paid_ad"]
        assert payload.country is None
        assert payload.status == InfluencerStatus.candidate

    def test_name_and_platform_required(self):
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"platform": "youtube"})
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"name": "A"})

    def test_rejects_bad_values(self):
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"name": "A", "platform": "myspace"})
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"name": "A", "platform": "youtube", "followers": "lots"})
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"name": "A", "platform": "youtube", "followers": -1})

    @pytest.mark.parametrize("field,value", [
        ("followers", "1" * 40),
        ("followers", 3000000000),
        ("engagementRate", "1e30"),
        ("engagementRate", 1e30),
    ])
    def test_rejects_numbers_beyond_column_range(self, field, value):
        with pytest.raises(ValidationError):
            InfluencerCreate.model_validate({"name": "A", "platform": "youtube", field: value})
        with pytest.raises(ValidationError):
            InfluencerUpdate.model_validate({field: value})

    def test_update_tracks_explicit_fields(self):
        update = InfluencerUpdate.model_validate({"engagementRate": None, "city": "Seoul"})
        assert update.model_dump(exclude_unset=True) == {"engagement_rate": None, "city": "Seoul"}


class TestInfluencerResponse:

    def test_serializes_camel_case(self):
        data = InfluencerResponse.model_validate(make_influencer()).model_dump(by_alias=True, mode="json")

        assert data["handle"] == "beautyguru"
        assert data["engagementRate"] == "5.10"
        assert data["collabTypes"] == ["trial", "paid_ad"]
        assert data["platform"] == "instagram"
        assert "avg_likes" not in data


class TestExport:

    def test_csv_quotes_every_cell_and_joins_lists(self):
        content = influencers_to_csv([make_influencer()])
        lines = content.splitlines()

        assert lines[0].startswith('"Name","Platform","Handle","Profile URL"')
        assert lines[0].endswith('"Notes Summary","Created At"')

        row = next(csv.reader(io.StringIO(lines[1])))
        record = dict(zip([header for header, _ in EXPORT_COLUMNS], row))
        assert record["Languages"] == "ko; en"
        assert record["Collab Types"] == "trial; paid_ad"
        assert record["Engagement Rate"] == "5.10"
        assert record["Status"] == "active"
        assert record["Profile URL"] == ""
        assert record["Notes Summary"] == 'Says "hi" often'
        assert record["Created At"] == "2025-01-02T03:04:05"
        assert lines[1].startswith('"Beauty Guru","instagram","beautyguru",""')

    def test_empty_export_has_header(self):
        content = influencers_to_csv([])
        assert content.splitlines() == [",".join(f'"{header}"' for header, _ in EXPORT_COLUMNS)]

    def test_file_name(self):
        assert export_file_name(date(2025, 3, 9)) == "influencers-2025-03-09.csv"


class TestListParameters:

    def test_platform_list(self):
        assert parse_platform_list("instagram, 유튜브") == [Platform.instagram, Platform.youtube]
        assert parse_platform_list("") is None
        with pytest.raises(BusinessLogicError):
            parse_platform_list("instagram,myspace")

    def test_status_list(self):
        assert parse_status_list("Active,blacklist") == [InfluencerStatus.active, InfluencerStatus.blacklist]
        with pytest.raises(BusinessLogicError):
            parse_status_list("archived")

    def test_sort(self):
        resolve_sort("followers", "ASC")
        resolve_sort("engagement_rate", "desc")
        with pytest.raises(BusinessLogicError):
            resolve_sort("name", "asc")
        with pytest.raises(BusinessLogicError):
            resolve_sort("created_at", "up")


class TestNotes:

    def test_note_content_limit(self):
        with pytest.raises(ValidationError):
            NoteCreate(content="x" * 10001)

    def test_note_response_uses_author_display_name(self, admin_user):
        author = admin_user
        note = InfluencerNote(
            id=uuid.uuid4(),
            influencer_id=uuid.uuid4(),
            author_id=author.id,
            content="Responded within a day",
            created_at=datetime(2025, 1, 1),
        )

        response = to_note_response(note, author=author)

        assert response.author.name == "Admin"
        assert response.model_dump(by_alias=True)["createdAt"] == datetime(2025, 1, 1)

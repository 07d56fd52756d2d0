"""
Tests for the /api/v1/imports endpoints
"""
import io
import json

import pandas as pd
import pytest
from httpx import AsyncClient

from app.services.importer.columns import TEMPLATE_HEADERS


def upload(content: bytes, filename: str = "influencers.csv"):
    return {"file": (filename, content, "text/csv")}


class TestImportEndpoint:

    @pytest.mark.asyncio
    async def test_import_reports_partial_success(self, client: AsyncClient, as_user, admin_user, import_store, sample_csv):
        as_user(admin_user)

        response = await client.post("/api/v1/imports", files=upload(sample_csv))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["success"] == 2
        assert data["errors"] == 1
        assert data["batchId"]
        assert len(data["errorRows"]) == 1
        assert data["errorRows"][0]["rowIndex"] == 1
        assert "Invalid platform" in data["errorRows"][0]["message"]
        assert data["errorRows"][0]["rawData"]["플랫폼"] == "badvalue"

        assert [c.followers for c in import_store.influencers] == [None, 31000]
        assert all(c.created_by == admin_user.id for c in import_store.influencers)

    @pytest.mark.asyncio
    async def test_caller_mapping(self, client: AsyncClient, as_user, admin_user, import_store):
        as_user(admin_user)
        content = "Influencer,Where,Audience\nJane Doe,틱톡,2만\n".encode("utf-8")
        mapping = {"name": "Influencer", "platform": "Where", "followers": "Audience"}

        response = await client.post(
            "/api/v1/imports",
            files=upload(content),
            data={"mapping": json.dumps(mapping)},
        )

        assert response.status_code == 200
        assert response.json()["success"] == 1
        candidate = import_store.influencers[0]
        assert candidate.handle == "janedoe"
        assert candidate.followers == 20000

    @pytest.mark.asyncio
    async def test_unsupported_extension(self, client: AsyncClient, as_user, admin_user, import_store):
        as_user(admin_user)

        response = await client.post("/api/v1/imports", files=upload(b"name\nA\n", "list.pdf"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported file format"
        assert import_store.batches == {}

    @pytest.mark.asyncio
    async def test_empty_content(self, client: AsyncClient, as_user, admin_user, import_store):
        as_user(admin_user)

        response = await client.post("/api/v1/imports", files=upload("이름,플랫폼\n".encode("utf-8")))

        assert response.status_code == 400
        assert import_store.batches == {}

    @pytest.mark.asyncio
    async def test_unknown_mapping_field(self, client: AsyncClient, as_user, admin_user, import_store, sample_csv):
        as_user(admin_user)

        response = await client.post(
            "/api/v1/imports",
            files=upload(sample_csv),
            data={"mapping": json.dumps({"shoeSize": "이름"})},
        )

        assert response.status_code == 400
        assert "shoeSize" in response.json()["detail"]
        assert import_store.batches == {}

    @pytest.mark.asyncio
    async def test_malformed_mapping(self, client: AsyncClient, as_user, admin_user, sample_csv):
        as_user(admin_user)

        response = await client.post("/api/v1/imports", files=upload(sample_csv), data={"mapping": "{oops"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_staff_cannot_import(self, client: AsyncClient, as_user, staff_user, import_store, sample_csv):
        as_user(staff_user)

        response = await client.post("/api/v1/imports", files=upload(sample_csv))

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"
        assert import_store.batches == {}

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient, sample_csv):
        response = await client.post("/api/v1/imports", files=upload(sample_csv))

        assert response.status_code == 401


class TestPreviewEndpoint:

    @pytest.mark.asyncio
    async def test_preview(self, client: AsyncClient, as_user, admin_user, import_store):
        as_user(admin_user)
        content = "이름,플랫폼,담당자\nA,인스타,Kim\nB,유튜브,Lee\n".encode("utf-8")

        response = await client.post("/api/v1/imports/preview", files=upload(content))

        assert response.status_code == 200
        data = response.json()
        assert data["fileName"] == "influencers.csv"
        assert data["headers"] == ["이름", "플랫폼", "담당자"]
        assert data["mapping"] == {"name": "이름", "platform": "플랫폼"}
        assert data["unmappedHeaders"] == ["담당자"]
        assert data["totalRows"] == 2
        assert data["sampleRows"][0] == {"이름": "A", "플랫폼": "인스타", "담당자": "Kim"}
        assert import_store.batches == {}

    @pytest.mark.asyncio
    async def test_preview_rejects_bad_file(self, client: AsyncClient, as_user, admin_user):
        as_user(admin_user)

        response = await client.post("/api/v1/imports/preview", files=upload(b"x", "list.doc"))

        assert response.status_code == 400


class TestTemplateEndpoint:

    @pytest.mark.asyncio
    async def test_template_headers(self, client: AsyncClient, as_user, admin_user):
        as_user(admin_user)

        response = await client.get("/api/v1/imports/template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        frame = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
        assert list(frame.columns) == [header for _, header in TEMPLATE_HEADERS]
        assert list(frame.columns)[:3] == ["이름", "플랫폼", "프로필URL"]

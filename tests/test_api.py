"""
Tests for the FastAPI backend: upload validation, merge, download and
preview publishing.
"""
import pytest
from fastapi.testclient import TestClient

import app.api as api_module
from core.config import Settings

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(api_module, "OUTPUT_ROOT", tmp_path / "output")
    monkeypatch.setattr(api_module, "FILE_REGISTRY", {})
    monkeypatch.setattr(api_module, "JOB_RESULTS", {})
    return TestClient(api_module.app)


@pytest.fixture
def upload(make_xlsx_bytes, roster_sheet):
    def _make(name, prefix):
        return ("files", (name, make_xlsx_bytes({"CSE": roster_sheet(prefix)}), XLSX_MIME))
    return _make


def test_merge_and_download(client, upload):
    response = client.post(
        "/merge",
        files=[upload("2024-2028.xlsx", "1MS24CS"), upload("2022-2026.xlsx", "1MS22CS")],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["result"]["statistics"]["total_records"] == 4
    assert body["result"]["statistics"]["batches"] == ["2022-2026", "2024-2028"]
    assert body["result"]["meta"]["input_files"] == ["2024-2028.xlsx", "2022-2026.xlsx"]

    download = client.get(body["downloads"]["export"]["download_url"])
    assert download.status_code == 200
    assert download.content[:2] == b"PK"


def test_merge_without_files(client):
    assert client.post("/merge").status_code == 400


def test_merge_rejects_non_xlsx(client, upload):
    response = client.post(
        "/merge",
        files=[upload("2022-2026.xlsx", "1MS22CS"), ("files", ("notes.csv", b"a,b", "text/csv"))],
    )
    assert response.status_code == 400
    assert "notes.csv" in response.json()["detail"]


def test_download_unknown_file(client):
    assert client.get("/download/doesnotexist").status_code == 404


def test_preview_unknown_job(client):
    assert client.post("/preview/nope").status_code == 404


def test_preview_not_configured(client, upload, monkeypatch):
    monkeypatch.setattr(api_module, "get_settings", lambda: Settings(PREVIEW_ENDPOINT_URL=""))
    job_id = client.post("/merge", files=[upload("2022-2026.xlsx", "1MS22CS")]).json()["job_id"]
    assert client.post(f"/preview/{job_id}").status_code == 503


def test_preview_publishes_flattened_rows(client, upload, monkeypatch):
    settings = Settings(PREVIEW_ENDPOINT_URL="https://preview.example.test/api/create-sheet")
    monkeypatch.setattr(api_module, "get_settings", lambda: settings)
    captured = {}

    def fake_publish(result, settings=None):
        captured["records"] = result.statistics.total_records
        return "https://docs.example.test/sheet/1"

    monkeypatch.setattr(api_module, "publish_preview", fake_publish)
    job_id = client.post("/merge", files=[upload("2022-2026.xlsx", "1MS22CS")]).json()["job_id"]

    response = client.post(f"/preview/{job_id}")
    assert response.status_code == 200
    assert response.json() == {"job_id": job_id, "url": "https://docs.example.test/sheet/1"}
    assert captured["records"] == 2


def test_job_cache_evicts_oldest(client, upload, monkeypatch):
    monkeypatch.setattr(api_module, "MAX_JOB_RESULTS", 2)
    job_ids = [
        client.post("/merge", files=[upload("2022-2026.xlsx", "1MS22CS")]).json()["job_id"]
        for _ in range(3)
    ]
    assert list(api_module.JOB_RESULTS) == job_ids[1:]
    assert client.post(f"/preview/{job_ids[0]}").status_code == 404

"""Tests for the FastAPI routes with in-memory collaborators."""

import base64
import threading

import pytest
from fastapi.testclient import TestClient

from apps.api.main import create_app
from lib.record_store import RecordStore
from supabase_store.attachments import Attachment
from utils.errors import BucketNotFoundError


class FakeAttachments:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploads: list = []

    def upload(self, file_name, content, content_type="application/octet-stream"):
        if self.error is not None:
            raise self.error
        self.uploads.append((file_name, content, content_type))
        return Attachment(url=f"https://cdn.example/1_{file_name}", name=file_name, path=f"1_{file_name}")


@pytest.fixture
def api(remote, surfaced: list):
    store = RecordStore(remote, fallback_mode="empty", seed_on_empty=False, on_error=surfaced.append)
    attachments = FakeAttachments()
    app = create_app(store=store, attachments=attachments, llm=lambda prompt: '{"title": "From Notes"}')
    with TestClient(app) as client:
        client.store = store
        client.attachments = attachments
        yield client


def test_health_reports_degraded_flag(api) -> None:
    assert api.get("/health").json() == {"status": "ok", "degraded": False}


def test_list_and_search_workshops(api) -> None:
    body = api.get("/workshops", params={"search": "newer"}).json()
    assert [workshop["id"] for workshop in body["workshops"]] == ["200"]
    assert body["categories"] == ["All", "Teacher Training"]


def test_get_unknown_workshop_is_404(api) -> None:
    assert api.get("/workshops/nope").status_code == 404


def test_create_workshop_derives_speakers_and_custom_category(api, remote) -> None:
    response = api.post(
        "/workshops",
        json={
            "title": "Parent Connect",
            "date": "2025-02-01",
            "customCategory": "  Parent Engagement ",
            "agenda": [
                {"particulars": "Circle time", "speaker": "Ms. Kavya Iyer", "isActivity": True},
                {"particulars": "Q&A", "speaker": "Panel"},
            ],
            "budget": {"allocated": 1000, "expenses": [{"description": "Tea", "amount": "250"}]},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "Parent Engagement"
    assert [speaker["name"] for speaker in body["speakers"]] == ["Ms. Kavya Iyer"]
    assert body["activities"] == ["Circle time"]
    assert body["budgetTotal"] == 250
    assert body["budgetUtilization"] == 25.0
    assert body["formattedDate"] == "01-02-2025"
    assert any(row["id"] == body["id"] for row in remote.rows)


def test_failed_create_is_rolled_back_and_reported(api, remote, surfaced) -> None:
    remote.fail_on.add("insert")
    response = api.post("/workshops", json={"title": "Doomed"})
    assert response.status_code == 502
    assert len(api.store.records) == 2
    assert len(surfaced) == 1


def test_update_keeps_the_record_id(api) -> None:
    response = api.put("/workshops/100", json={"title": "Renamed", "date": "2023-01-10"})
    assert response.status_code == 200
    assert response.json()["id"] == "100"
    assert api.store.get("100").title == "Renamed"


def test_update_unknown_record_is_404(api) -> None:
    assert api.put("/workshops/999", json={"title": "Ghost"}).status_code == 404


def test_delete_workshop(api, remote) -> None:
    assert api.delete("/workshops/200").status_code == 204
    assert [record.id for record in api.store.records] == ["100"]
    assert api.delete("/workshops/200").status_code == 404


def test_upload_attachment_links_file_to_record(api) -> None:
    response = api.post(
        "/workshops/100/attachment",
        json={"fileName": "report.pdf", "contentBase64": base64.b64encode(b"%PDF").decode(), "contentType": "application/pdf"},
    )
    assert response.status_code == 200
    assert response.json()["attachmentName"] == "report.pdf"
    assert api.store.get("100").attachment_url == "https://cdn.example/1_report.pdf"
    assert api.attachments.uploads == [("report.pdf", b"%PDF", "application/pdf")]


def test_upload_to_missing_bucket_returns_remediation(api) -> None:
    api.attachments.error = BucketNotFoundError("Storage bucket 'workshop-attachments' was not found.", "Create it.")
    response = api.post(
        "/workshops/100/attachment",
        json={"fileName": "report.pdf", "contentBase64": base64.b64encode(b"x").decode()},
    )
    assert response.status_code == 424
    assert response.json()["detail"]["remediation"] == "Create it."


def test_dashboard_and_compare(api) -> None:
    dashboard = api.get("/dashboard", params={"year": "2024"}).json()
    assert dashboard["record_count"] == 1
    assert dashboard["records"][0]["id"] == "200"
    assert "2030" in dashboard["years"]
    compare = api.get("/compare").json()
    assert [row["id"] for row in compare["rows"]] == ["200", "100"]


def test_process_report_adds_extracted_record(api) -> None:
    response = api.post("/reports/process", json={"text": "Notes from the session."})
    assert response.status_code == 201
    assert response.json()["title"] == "From Notes"
    assert api.store.records[-1].title == "From Notes"


def test_health_answers_while_an_update_is_pending(api, remote) -> None:
    entered, release = threading.Event(), threading.Event()
    outcome: dict = {}
    original_update = remote.update

    def slow_update(record_id, row):
        entered.set()
        outcome["released"] = release.wait(timeout=5)
        return original_update(record_id, row)

    remote.update = slow_update
    worker = threading.Thread(
        target=lambda: outcome.update(put=api.put("/workshops/100", json={"title": "Slow", "date": "2023-01-10"}))
    )
    worker.start()
    assert entered.wait(timeout=5)
    health = api.get("/health")
    release.set()
    worker.join(timeout=5)
    assert health.status_code == 200
    assert outcome["released"] is True
    assert outcome["put"].status_code == 200
    assert api.store.get("100").title == "Slow"

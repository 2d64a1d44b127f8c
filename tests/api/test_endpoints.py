"""Tests for the HTTP API."""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from docforge.core.exceptions import ProviderUnavailableError
from docforge.main import create_app

API = "/api/v1"


@pytest.fixture
def api(database_client, storage, make_gateway):
    """Factory starting the app against an in-memory database and a fake provider."""
    with ExitStack() as stack:

        def _start(*replies):
            gateway, provider = make_gateway(*replies)
            app = create_app(database=database_client, gateway=gateway, storage=storage)
            client = stack.enter_context(TestClient(app))
            return client, provider

        yield _start


def _create_project(client: TestClient, name: str = "Inventory renewal") -> str:
    response = client.post(f"{API}/projects", json={"name": name, "description": "Stock tracking"})
    assert response.status_code == 201
    return response.json()["data"]["id"]


def _upload(client: TestClient, project_id: str) -> dict:
    response = client.post(
        f"{API}/projects/{project_id}/files",
        files={"file": ("brief.txt", b"Warehouse staff track stock per location.", "text/plain")},
    )
    assert response.status_code == 201
    return response.json()["data"]


class TestServiceEndpoints:

    def test_health_reports_database_and_providers(self, api) -> None:
        client, _ = api("unused")

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"
        assert body["providers"]
        assert all(body["providers"].values())

    def test_root_and_correlation_id(self, api) -> None:
        client, _ = api("unused")

        response = client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.status_code == 200
        assert response.json()["health"] == "/health"
        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestProjectEndpoints:

    def test_create_get_and_list(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        fetched = client.get(f"{API}/projects/{project_id}")
        listed = client.get(f"{API}/projects")

        assert fetched.status_code == 200
        assert fetched.json()["data"]["name"] == "Inventory renewal"
        assert listed.json()["data"]["total"] == 1

    def test_blank_name_is_rejected_with_field(self, api) -> None:
        client, _ = api("unused")

        response = client.post(f"{API}/projects", json={"name": ""})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "name"

    def test_unknown_project_is_404(self, api) -> None:
        client, _ = api("unused")

        response = client.get(f"{API}/projects/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json()["detail"]["title"] == "Not Found"

    def test_upload_records_text(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        document = _upload(client, project_id)

        assert document["type"] == "uploaded_file"
        assert document["content"]["text"] == "Warehouse staff track stock per location."
        assert document["content"]["file_name"] == "brief.txt"

    def test_empty_upload_is_rejected(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        response = client.post(
            f"{API}/projects/{project_id}/files", files={"file": ("empty.txt", b"", "text/plain")}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "file"

    def test_activity_logs_round_trip(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        created = client.post(
            f"{API}/projects/{project_id}/activity-logs",
            json={"phase": "design", "status": "completed", "description": "Screen layouts"},
        )
        listed = client.get(f"{API}/projects/{project_id}/activity-logs")

        assert created.status_code == 201
        assert [log["phase"] for log in listed.json()["data"]["items"]] == ["design"]

    def test_no_quality_check_yet_is_404(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        response = client.get(f"{API}/projects/{project_id}/quality-checks/latest")

        assert response.status_code == 404


class TestStageEndpoints:

    def test_document_generation(self, api) -> None:
        client, provider = api("# Requirements\n\n1. Track stock")
        project_id = _create_project(client)
        _upload(client, project_id)

        response = client.post(
            f"{API}/stages/document-generation",
            json={"project_id": project_id, "document_type": "requirements"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Document generated"
        assert body["data"]["stage"] == "document_generation"
        assert body["data"]["summary"] == "# Requirements"
        assert body["data"]["is_fallback"] is False
        assert len(provider.calls) == 1

        document = client.get(f"{API}/artifacts/documents/{body['data']['artifact_id']}")
        assert document.json()["data"]["content"] == {"content": "# Requirements\n\n1. Track stock"}

    def test_provider_outage_still_returns_201(self, api) -> None:
        client, _ = api(ProviderUnavailableError("down", provider="fake"))
        project_id = _create_project(client)
        _upload(client, project_id)

        response = client.post(
            f"{API}/stages/document-generation",
            json={"project_id": project_id, "document_type": "design"},
        )

        assert response.status_code == 201
        assert response.json()["message"].endswith("(fallback output)")
        assert response.json()["data"]["is_fallback"] is True

    def test_missing_field_is_400(self, api) -> None:
        client, provider = api("unused")

        response = client.post(f"{API}/stages/document-generation", json={"document_type": "requirements"})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "project_id"
        assert provider.calls == []

    def test_missing_upload_is_409(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        response = client.post(
            f"{API}/stages/document-generation",
            json={"project_id": project_id, "document_type": "requirements"},
        )

        assert response.status_code == 409

    def test_empty_consistency_request_is_400(self, api) -> None:
        client, _ = api("unused")

        response = client.post(f"{API}/stages/consistency-check", json={"document_ids": []})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "document_ids"

    def test_unknown_check_item_is_400(self, api) -> None:
        client, _ = api("unused")
        project_id = _create_project(client)

        response = client.post(
            f"{API}/stages/quality-check", json={"project_id": project_id, "items": ["テスト"]}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"].startswith("items")

    def test_progress_report(self, api) -> None:
        client, _ = api("Design is behind schedule")
        project_id = _create_project(client)
        client.post(f"{API}/projects/{project_id}/activity-logs", json={"phase": "test", "status": "completed"})

        response = client.post(
            f"{API}/stages/progress-report",
            json={
                "project_id": project_id,
                "start_date": "2000-01-01T00:00:00Z",
                "end_date": "2100-01-01T00:00:00Z",
            },
        )

        assert response.status_code == 201
        summary = response.json()["data"]["summary"]
        assert "Overall progress: 25%" in summary
        assert "1. Design is behind schedule" in summary


class TestWorkEstimateEndpoints:

    def test_estimate_then_adjust(self, api) -> None:
        client, _ = api('{"totalHours": 5, "breakdown": [{"phase": "design", "hours": 40}]}')
        project_id = _create_project(client)

        created = client.post(f"{API}/stages/work-estimation", json={"project_id": project_id})
        estimate_id = created.json()["data"]["artifact_id"]
        assert created.json()["data"]["summary"] == "Total: 40 hours\ndesign: 40 hours"

        adjusted = client.patch(
            f"{API}/artifacts/work-estimates/{estimate_id}",
            json={"breakdown": [{"phase": "design", "hours": 30}, {"phase": "test", "hours": 12.5}]},
        )

        assert adjusted.status_code == 200
        assert adjusted.json()["data"]["estimate"]["totalHours"] == 42.5

    def test_empty_adjustment_is_400(self, api) -> None:
        client, _ = api("unused")

        response = client.patch(
            f"{API}/artifacts/work-estimates/00000000-0000-0000-0000-000000000000", json={"breakdown": []}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "breakdown"

    def test_malformed_artifact_id_is_400(self, api) -> None:
        client, _ = api("unused")

        response = client.get(f"{API}/artifacts/work-estimates/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "artifact_id"

    def test_overflowing_adjustment_is_400(self, api) -> None:
        client, _ = api("unused")

        response = client.patch(
            f"{API}/artifacts/work-estimates/00000000-0000-0000-0000-000000000000",
            json={"breakdown": [{"phase": "design", "hours": 1e308}, {"phase": "test", "hours": 1e308}]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "breakdown"

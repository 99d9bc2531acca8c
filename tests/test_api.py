"""Tests for the FastAPI endpoints with a mocked chat model."""

import pytest
from fastapi.testclient import TestClient

from api import app, report_store
from src.utils.report_storage import STATUS_FAILED, STATUS_READY

client = TestClient(app)


@pytest.fixture(autouse=True)
def clear_store():
    report_store.clear()
    yield
    report_store.clear()


def test_root_lists_endpoints():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["webhook"] == "POST /webhook/typeform"


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["reports_stored"] == 0


def test_webhook_generates_report(typeform_payload, mock_llm):
    response = client.post("/webhook/typeform", json=typeform_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["htmlUrl"] == f"/report/{data['reportId']}"
    assert report_store.get(data["reportId"]).status == STATUS_READY

    report = client.get(data["htmlUrl"])
    assert report.status_code == 200
    assert "Business Exit Readiness Report" in report.text


def test_webhook_accepts_zero_emotional_readiness(typeform_payload, mock_llm):
    typeform_payload["form_response"]["answers"][1]["number"] = 0
    response = client.post("/webhook/typeform", json=typeform_payload)

    assert response.status_code == 200
    record = report_store.get(response.json()["reportId"])
    assert record.answers.emotional_readiness is None


def test_webhook_with_invalid_payload(mock_llm):
    response = client.post("/webhook/typeform", json={"event_id": "x"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid Typeform webhook data"}
    assert len(report_store) == 0


def test_webhook_narrative_failure_is_generic(typeform_payload, mock_llm):
    mock_llm.invoke.side_effect = RuntimeError("upstream timeout")

    response = client.post("/webhook/typeform", json=typeform_payload)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to process assessment"}

    # Scores are kept so the narrative can be retried
    [record] = report_store.list()
    assert record.status == STATUS_FAILED
    assert record.score_result is not None
    assert client.get(f"/report/{record.report_id}").status_code == 503


def test_retry_failed_report(typeform_payload, mock_llm):
    mock_llm.invoke.side_effect = RuntimeError("upstream timeout")
    client.post("/webhook/typeform", json=typeform_payload)
    [failed] = report_store.list()

    mock_llm.invoke.side_effect = None
    response = client.post(f"/report/{failed.report_id}/retry")

    assert response.status_code == 200
    assert response.json()["success"] is True
    record = report_store.get(failed.report_id)
    assert record.status == STATUS_READY
    assert record.score_result == failed.score_result
    assert client.get(f"/report/{failed.report_id}").status_code == 200


def test_retry_ready_report_is_a_no_op(typeform_payload, mock_llm):
    report_id = client.post("/webhook/typeform", json=typeform_payload).json()["reportId"]

    response = client.post(f"/report/{report_id}/retry")

    assert response.status_code == 200
    assert response.json()["message"] == "Report already generated"
    mock_llm.invoke.assert_called_once()


def test_retry_unknown_report():
    assert client.post("/report/missing/retry").status_code == 404


def test_unknown_report_page():
    response = client.get("/report/does-not-exist")
    assert response.status_code == 404
    assert "Report Not Found" in response.text


def test_latest_report(typeform_payload, mock_llm):
    assert "No Reports Available" in client.get("/report/latest").text

    client.post("/webhook/typeform", json=typeform_payload)
    response = client.get("/report/latest")
    assert response.status_code == 200
    assert "Business Exit Readiness Report" in response.text


def test_list_reports(typeform_payload, mock_llm):
    report_id = client.post("/webhook/typeform", json=typeform_payload).json()["reportId"]

    data = client.get("/reports").json()
    assert data["totalReports"] == 1
    entry = data["reports"][0]
    assert entry["id"] == report_id
    assert entry["status"] == STATUS_READY
    assert entry["scores"]["category"] in {
        "EXIT READY", "NEARLY READY", "PREPARATION NEEDED", "SIGNIFICANT GAPS", "NOT READY"
    }


def test_score_endpoint(best_raw_answers):
    response = client.post("/api/score", json=best_raw_answers)
    assert response.status_code == 200
    data = response.json()
    assert data["overall"] == 100
    assert data["category"] == "EXIT READY"


def test_score_endpoint_with_defaults():
    data = client.post("/api/score", json={}).json()
    assert data["overall"] == 50


def test_score_endpoint_rejects_malformed_answers():
    response = client.post("/api/score", json={"emotional_readiness": "very ready"})
    assert response.status_code == 400
    assert "emotional_readiness" in response.json()["detail"]


def test_score_endpoint_rejects_non_object_body():
    assert client.post("/api/score", json=["a", "b"]).status_code == 422

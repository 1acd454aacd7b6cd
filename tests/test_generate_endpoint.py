import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from tuitiondesk.main import app
from tuitiondesk.services.invoicing import (
    InvoiceGenerator, NO_STUDENTS_MESSAGE, REQUIRED_FIELDS_MESSAGE
)
from tuitiondesk.services.payments import PaymentService

URL = "/api/invoices/generate-monthly"


def _body(center, **overrides):
    body = {
        "centerId": str(center.id),
        "month": 3,
        "year": 2024,
        "academicYear": "2023-24",
    }
    body.update(overrides)
    return body


def test_missing_fields_return_400(client):
    response = client.post(URL, json={"month": 3, "year": 2024})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": REQUIRED_FIELDS_MESSAGE}


def test_invalid_center_id_returns_400(client):
    response = client.post(URL, json={
        "centerId": "not-a-uuid", "month": 3, "year": 2024, "academicYear": "2023-24"
    })

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid center ID."}


def test_out_of_range_month_returns_400(client, grade_eight_center):
    response = client.post(URL, json=_body(grade_eight_center["center"], month=13))

    assert response.status_code == 400
    assert response.json()["error"] == "Month must be between 1 and 12."


def test_malformed_body_returns_400_envelope(client, grade_eight_center):
    response = client.post(URL, json=_body(grade_eight_center["center"], month="March"))

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["details"]


def test_generates_for_grade_filter(client, grade_eight_center):
    center = grade_eight_center["center"]

    response = client.post(URL, json=_body(center, gradeFilter="8"))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["invoicesGenerated"] == 1
    assert data["message"] == "1 invoices generated successfully."
    invoice = data["invoices"][0]
    assert set(invoice) == {"invoiceId", "invoiceNumber", "studentId", "studentName", "totalAmount"}
    assert invoice["studentId"] == str(grade_eight_center["asha"].id)
    assert invoice["studentName"] == "Asha"
    assert invoice["totalAmount"] == 500.0
    assert invoice["invoiceNumber"].startswith("INV-")
    assert invoice["invoiceNumber"].endswith("-ASH")
    assert data["skipped"] == []
    assert data["failed"] == []


def test_rerun_generates_nothing(client, grade_eight_center):
    body = _body(grade_eight_center["center"], gradeFilter="8")

    client.post(URL, json=body)
    response = client.post(URL, json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["invoicesGenerated"] == 0
    assert data["invoices"] == []
    assert [s["reason"] for s in data["skipped"]] == ["skipped_duplicate"]


def test_all_grades_reports_students_without_fees(client, grade_eight_center):
    response = client.post(URL, json=_body(grade_eight_center["center"]))

    data = response.json()
    assert data["invoicesGenerated"] == 1
    assert [(s["studentName"], s["reason"]) for s in data["skipped"]] == [("Dev", "skipped_no_fees")]


def test_center_without_students(client, seed):
    center = seed.center()

    response = client.post(URL, json=_body(center))

    assert response.status_code == 200
    assert response.json()["invoicesGenerated"] == 0
    assert response.json()["message"] == NO_STUDENTS_MESSAGE


def test_roster_failure_returns_500(client, grade_eight_center, monkeypatch):
    def broken_roster(self, center_id, grade=None):
        raise OperationalError("SELECT students", {}, Exception("database is locked"))

    monkeypatch.setattr(InvoiceGenerator, "active_students", broken_roster)

    response = client.post(URL, json=_body(grade_eight_center["center"]))

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert "database is locked" in data["error"]


def test_cors_preflight(client):
    response = client.options(URL, headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "content-type, x-client-info",
    })

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_headers_on_response(client):
    response = client.post(
        URL,
        json={"month": 3},
        headers={"Origin": "http://localhost:5173"},
    )

    assert response.status_code == 400
    assert response.headers["access-control-allow-origin"] == "*"


def test_huge_due_days_is_a_validation_error(client, grade_eight_center):
    response = client.post(URL, json=_body(grade_eight_center["center"], dueInDays=10 ** 7))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Due in days cannot exceed 365."}


@pytest.fixture
def lenient_client(engine):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def test_uncaught_errors_keep_cors_headers(lenient_client, seed, monkeypatch):
    center = seed.center()

    def broken_summary(self, center_id, today=None):
        raise RuntimeError("summary query failed")

    monkeypatch.setattr(PaymentService, "summary", broken_summary)

    response = lenient_client.get(
        "/api/invoices/summary",
        headers={"Origin": "http://localhost:5173", "X-Center-ID": str(center.id)},
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "summary query failed"}
    assert response.headers["access-control-allow-origin"] == "*"
    assert "x-center-id" in response.headers["access-control-allow-headers"]

from datetime import date
from decimal import Decimal

import pytest

from tuitiondesk.services.expenses import ExpenseService


def _headers(center):
    return {"X-Center-ID": str(center.id)}


@pytest.fixture
def spending(seed):
    """Two rent payments, one salary and a utility bill in March and April 2024"""
    center = seed.center()
    seed.expense(center, "12000.00", category="rent", description="March rent", expense_date=date(2024, 3, 1))
    seed.expense(center, "12000.00", category="rent", description="April rent", expense_date=date(2024, 4, 1))
    seed.expense(center, "30000.00", category="salaries", description="Tutor salary", expense_date=date(2024, 3, 31))
    seed.expense(center, "850.50", category="utilities", description="Electricity", expense_date=date(2024, 3, 20))
    return center


def test_breakdown_groups_by_category(db, spending):
    report = ExpenseService(db).breakdown(spending.id)

    assert report["total_expenses"] == Decimal("54850.50")
    assert [(c["category"], c["total"], c["count"]) for c in report["categories"]] == [
        ("salaries", Decimal("30000.00"), 1),
        ("rent", Decimal("24000.00"), 2),
        ("utilities", Decimal("850.50"), 1),
    ]


def test_breakdown_respects_date_range(db, spending):
    report = ExpenseService(db).breakdown(spending.id, date_from=date(2024, 3, 1), date_to=date(2024, 3, 31))

    assert report["total_expenses"] == Decimal("42850.50")
    assert {c["category"]: c["count"] for c in report["categories"]} == {
        "salaries": 1, "rent": 1, "utilities": 1,
    }


def test_breakdown_without_expenses(db, seed):
    report = ExpenseService(db).breakdown(seed.center().id)

    assert report == {"total_expenses": Decimal("0.00"), "categories": []}


def test_record_and_list_expenses_api(client, seed):
    center = seed.center()
    headers = _headers(center)

    created = client.post("/api/expenses/", json={
        "category": "Materials",
        "description": " Workbooks ",
        "amount": "1499.99",
        "expense_date": "2024-03-10",
        "vendor": "City Books",
    }, headers=headers)

    assert created.status_code == 201
    expense = created.json()
    assert expense["category"] == "materials"
    assert expense["description"] == "Workbooks"
    assert expense["amount"] == 1499.99
    assert expense["vendor"] == "City Books"

    defaulted = client.post("/api/expenses/", json={"description": "Printer ink", "amount": 300}, headers=headers)
    assert defaulted.status_code == 201
    assert defaulted.json()["category"] == "admin"
    assert defaulted.json()["expense_date"] == date.today().isoformat()

    listed = client.get("/api/expenses/", headers=headers).json()
    assert [e["description"] for e in listed] == ["Printer ink", "Workbooks"]

    materials = client.get("/api/expenses/?category=materials", headers=headers).json()
    assert [e["id"] for e in materials] == [expense["id"]]


def test_list_filters_by_date_range(client, spending):
    listed = client.get(
        "/api/expenses/?date_from=2024-03-15&date_to=2024-03-31", headers=_headers(spending)
    ).json()

    assert [e["description"] for e in listed] == ["Tutor salary", "Electricity"]


@pytest.mark.parametrize("body", [
    {"description": "Snacks", "amount": "100", "category": "food"},
    {"description": "Refund", "amount": "-5"},
    {"description": "   ", "amount": "10"},
    {"amount": "10"},
])
def test_invalid_expenses_are_rejected(client, seed, body):
    response = client.post("/api/expenses/", json=body, headers=_headers(seed.center()))

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_rejects_bad_filters(client, seed):
    headers = _headers(seed.center())

    assert client.get("/api/expenses/?category=food", headers=headers).status_code == 400
    assert client.get("/api/expenses/?date_from=2024-04-01&date_to=2024-03-01", headers=headers).status_code == 400


def test_expenses_are_scoped_to_the_center(client, seed, spending):
    other = seed.center("Elsewhere")

    assert client.get("/api/expenses/", headers=_headers(other)).json() == []
    assert client.get("/api/expenses/breakdown", headers=_headers(other)).json() == {
        "total_expenses": 0.0, "categories": [],
    }


def test_breakdown_api(client, spending):
    report = client.get("/api/expenses/breakdown?date_from=2024-04-01", headers=_headers(spending)).json()

    assert report == {
        "total_expenses": 12000.0,
        "categories": [{"category": "rent", "total": 12000.0, "count": 1}],
    }


def test_finance_summary_includes_expenses(client, seed, spending):
    student = seed.student(spending, "Asha")
    invoice = seed.invoice(spending, student, "INV-20240301100000-ASH", total="60000.00")
    client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": "55000.00"},
        headers=_headers(spending),
    )

    summary = client.get("/api/invoices/summary", headers=_headers(spending)).json()

    assert summary["total_collected"] == 55000.0
    assert summary["total_expenses"] == 54850.5
    assert summary["net_income"] == 149.5
    assert [c["category"] for c in summary["expenses_by_category"]] == ["salaries", "rent", "utilities"]

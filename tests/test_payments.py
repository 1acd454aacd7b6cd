from datetime import date
from decimal import Decimal

import pytest

from tuitiondesk.services.payments import PaymentError, PaymentService


@pytest.fixture
def invoice(seed):
    center = seed.center()
    student = seed.student(center, "Asha")
    return seed.invoice(center, student, "INV-20240301100000-ASH", total="500.00")


def _headers(center_id):
    return {"X-Center-ID": str(center_id)}


def test_partial_then_full_payment(db, invoice):
    service = PaymentService(db)

    service.record_payment(invoice, Decimal("200.00"), payment_method="upi", reference_number="UTR123")
    assert invoice.status == "partial"
    assert invoice.paid_amount == Decimal("200.00")
    assert invoice.balance == Decimal("300.00")

    service.record_payment(invoice, Decimal("300.00"))
    assert invoice.status == "paid"
    assert invoice.balance == Decimal("0.00")


def test_paid_invoice_rejects_payment(db, invoice):
    service = PaymentService(db)
    service.record_payment(invoice, Decimal("500.00"))

    with pytest.raises(PaymentError):
        service.record_payment(invoice, Decimal("1.00"))


def test_cannot_cancel_invoice_with_payments(db, invoice):
    service = PaymentService(db)
    service.record_payment(invoice, Decimal("50.00"))

    with pytest.raises(PaymentError):
        service.cancel_invoice(invoice)


def test_summary_ignores_cancelled_invoices(db, seed, invoice):
    service = PaymentService(db)
    service.record_payment(invoice, Decimal("200.00"))

    other = seed.invoice(
        seed.center("Elsewhere"), invoice.student, "INV-20240301100000-ASH-2", month=4
    )
    cancelled = seed.invoice(
        invoice.student.center, invoice.student, "INV-20240301100000-ASH-3", month=5, total="800.00"
    )
    service.cancel_invoice(cancelled)

    summary = service.summary(invoice.center_id, today=date(2024, 6, 1))

    assert summary["total_invoiced"] == Decimal("500.00")
    assert summary["total_collected"] == Decimal("200.00")
    assert summary["total_outstanding"] == Decimal("300.00")
    assert summary["invoice_count"] == 1
    assert summary["overdue_count"] == 1
    assert other.center_id != invoice.center_id


def test_record_payment_api(client, invoice):
    response = client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": "125.50", "payment_method": "cash"},
        headers=_headers(invoice.center_id),
    )

    assert response.status_code == 201
    assert response.json()["amount"] == 125.5

    detail = client.get(f"/api/invoices/{invoice.id}", headers=_headers(invoice.center_id)).json()
    assert detail["status"] == "partial"
    assert detail["paid_amount"] == 125.5
    assert detail["balance"] == 374.5
    assert len(detail["payments"]) == 1

    payments = client.get(f"/api/payments/invoice/{invoice.id}", headers=_headers(invoice.center_id))
    assert [p["amount"] for p in payments.json()] == [125.5]


def test_payment_for_other_center_is_not_found(client, seed, invoice):
    other = seed.center("Elsewhere")

    response = client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": 10},
        headers=_headers(other.id),
    )

    assert response.status_code == 404


def test_cancel_and_summary_api(client, invoice):
    headers = _headers(invoice.center_id)

    response = client.put(f"/api/invoices/{invoice.id}/cancel", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["balance"] == 0.0

    rejected = client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": 10},
        headers=headers,
    )
    assert rejected.status_code == 400

    summary = client.get("/api/invoices/summary", headers=headers).json()
    assert summary["invoice_count"] == 0
    assert summary["total_invoiced"] == 0.0


def test_unknown_payment_method_is_rejected(client, invoice):
    response = client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": "10", "payment_method": "bitcoin"},
        headers=_headers(invoice.center_id),
    )

    assert response.status_code == 400
    assert "Payment method must be one of" in response.json()["details"][0]["msg"]


def test_payment_method_is_normalized(client, invoice):
    response = client.post(
        "/api/payments/",
        json={"invoice_id": str(invoice.id), "amount": "10", "payment_method": " UPI "},
        headers=_headers(invoice.center_id),
    )

    assert response.status_code == 201
    assert response.json()["payment_method"] == "upi"


def test_invoice_list_rejects_unknown_status(client, invoice):
    headers = _headers(invoice.center_id)

    assert client.get("/api/invoices/?status=settled", headers=headers).status_code == 400
    issued = client.get("/api/invoices/?status=issued", headers=headers).json()
    assert [inv["invoice_number"] for inv in issued] == [invoice.invoice_number]

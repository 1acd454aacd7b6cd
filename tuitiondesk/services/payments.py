# tuitiondesk/services/payments.py - Payment recording and finance summary
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from tuitiondesk.models.payment import Invoice, Payment

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = ("issued", "pending", "partial", "overdue")


class PaymentError(ValueError):
    """Raised when a payment cannot be applied to an invoice"""
    pass


class PaymentService:
    """Service class for recording payments against a center's invoices"""

    def __init__(self, db: Session):
        self.db = db

    def get_invoice(self, center_id: UUID, invoice_id: UUID) -> Optional[Invoice]:
        return self.db.execute(
            select(Invoice).where(
                Invoice.id == invoice_id,
                Invoice.center_id == center_id
            )
        ).scalar_one_or_none()

    def record_payment(
        self,
        invoice: Invoice,
        amount: Decimal,
        payment_method: str = "cash",
        reference_number: Optional[str] = None,
        payment_date: Optional[date] = None,
    ) -> Payment:
        """
        Record a payment and move the invoice to partial or paid.

        Raises:
            PaymentError: If the invoice no longer accepts payments
        """
        if invoice.status not in PAYABLE_STATUSES:
            raise PaymentError(f"Cannot record payment for invoice with status {invoice.status}")
        if amount <= 0:
            raise PaymentError("Payment amount must be greater than zero")

        payment = Payment(
            invoice_id=invoice.id,
            amount=amount,
            payment_method=payment_method,
            reference_number=reference_number,
            payment_date=payment_date or date.today(),
        )
        self.db.add(payment)

        invoice.paid_amount = Decimal(invoice.paid_amount or 0) + amount
        invoice.status = "paid" if invoice.paid_amount >= invoice.total_amount else "partial"

        self.db.commit()
        self.db.refresh(payment)

        logger.info(
            f"Payment of {amount} recorded on invoice {invoice.invoice_number}; "
            f"paid {invoice.paid_amount}/{invoice.total_amount}, status {invoice.status}"
        )
        return payment

    def cancel_invoice(self, invoice: Invoice) -> Invoice:
        """
        Cancel an invoice that has not received any payment.

        Raises:
            PaymentError: If payments were already recorded
        """
        if invoice.status == "cancelled":
            return invoice
        if invoice.paid_amount and invoice.paid_amount > 0:
            raise PaymentError("Cannot cancel an invoice that already has payments recorded")

        invoice.status = "cancelled"
        self.db.commit()
        self.db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} cancelled")
        return invoice

    def summary(self, center_id: UUID, today: Optional[date] = None) -> dict:
        """Invoiced, collected and outstanding totals for a center, ignoring cancelled invoices"""
        today = today or date.today()
        live = (Invoice.center_id == center_id, Invoice.status != "cancelled")

        total_invoiced, total_collected, invoice_count = self.db.execute(
            select(
                func.coalesce(func.sum(Invoice.total_amount), 0),
                func.coalesce(func.sum(Invoice.paid_amount), 0),
                func.count(Invoice.id),
            ).where(*live)
        ).one()

        overdue_count = self.db.execute(
            select(func.count(Invoice.id)).where(
                *live,
                Invoice.status != "paid",
                Invoice.due_date < today,
            )
        ).scalar_one()

        total_invoiced = Decimal(str(total_invoiced))
        total_collected = Decimal(str(total_collected))
        return {
            "total_invoiced": total_invoiced,
            "total_collected": total_collected,
            "total_outstanding": max(Decimal('0.00'), total_invoiced - total_collected),
            "invoice_count": invoice_count,
            "overdue_count": overdue_count,
        }

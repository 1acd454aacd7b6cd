# tuitiondesk/models/payment.py - Invoices, their line items and payments
from __future__ import annotations
import uuid
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import (
    String, Integer, Numeric, Date, DateTime, ForeignKey, CheckConstraint,
    Index, UniqueConstraint, Uuid
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from tuitiondesk.models.base import Base

INVOICE_STATUSES = ("issued", "pending", "partial", "paid", "overdue", "cancelled")
PAYMENT_METHODS = ("cash", "bank", "upi", "card", "cheque")


def sql_in(column: str, values) -> str:
    return f"{column} IN (" + ",".join(f"'{v}'" for v in values) + ")"


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    center_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("centers.id"), nullable=False, index=True)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id"), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal('0.00'))
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal('0.00'))
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="issued")
    invoice_date: Mapped[date | None] = mapped_column(Date)
    due_date: Mapped[date | None] = mapped_column(Date)
    # NULL for manually raised invoices; set by the monthly batch
    invoice_month: Mapped[int | None] = mapped_column(Integer)
    invoice_year: Mapped[int | None] = mapped_column(Integer)
    academic_year: Mapped[str | None] = mapped_column(String(16))
    notes: Mapped[str | None] = mapped_column(String(256))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    student: Mapped["Student"] = relationship("Student", back_populates="invoices")
    items: Mapped[list["InvoiceItem"]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    payments: Mapped[list["Payment"]] = relationship("Payment", back_populates="invoice", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(sql_in("status", INVOICE_STATUSES), name="ck_invoice_status"),
        CheckConstraint("total_amount >= 0", name="ck_invoice_total_positive"),
        CheckConstraint("paid_amount >= 0", name="ck_invoice_paid_positive"),
        CheckConstraint("invoice_month IS NULL OR (invoice_month BETWEEN 1 AND 12)", name="ck_invoice_month_range"),
        UniqueConstraint("student_id", "invoice_month", "invoice_year", name="uix_invoice_student_period"),
        Index("ix_invoices_center_period", "center_id", "invoice_year", "invoice_month"),
    )

    @property
    def student_name(self) -> str | None:
        return self.student.name if self.student else None

    @property
    def balance(self) -> Decimal:
        if self.status == "cancelled":
            return Decimal('0.00')
        return max(Decimal('0.00'), self.total_amount - self.paid_amount)


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fee_heading_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("fee_headings.id", ondelete="SET NULL"))
    description: Mapped[str] = mapped_column(String(256), nullable=False)
    unit_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
        CheckConstraint("unit_amount >= 0", name="ck_invoice_items_unit_amount_positive"),
        CheckConstraint("total_amount = unit_amount * quantity", name="ck_invoice_items_total"),
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("invoices.id"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    payment_method: Mapped[str] = mapped_column(String(16), nullable=False, default="cash")
    reference_number: Mapped[str | None] = mapped_column(String(64))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="payments")

    __table_args__ = (
        CheckConstraint(sql_in("payment_method", PAYMENT_METHODS), name="ck_payment_method"),
        CheckConstraint("amount > 0", name="ck_payment_amount_positive"),
    )

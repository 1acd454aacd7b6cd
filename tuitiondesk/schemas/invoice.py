# tuitiondesk/schemas/invoice.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date, datetime
from uuid import UUID

from tuitiondesk.schemas.expense import CategoryTotal
from tuitiondesk.schemas.payment import PaymentOut


class CamelModel(BaseModel):
    """Models exchanged with the monthly generation endpoint use camelCase keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# Monthly generation
class GenerateMonthlyInvoicesRequest(CamelModel):
    center_id: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None
    academic_year: Optional[str] = None
    due_in_days: Optional[int] = None  # falls back to INVOICE_DEFAULT_DUE_DAYS
    grade_filter: Optional[str] = "all"


class GeneratedInvoiceOut(CamelModel):
    invoice_id: UUID
    invoice_number: str
    student_id: UUID
    student_name: str
    total_amount: float


class StudentOutcomeOut(CamelModel):
    student_id: UUID
    student_name: str
    reason: str
    detail: str = ""


class GenerateMonthlyInvoicesResponse(CamelModel):
    success: bool = True
    invoices_generated: int
    invoices: List[GeneratedInvoiceOut] = []
    skipped: List[StudentOutcomeOut] = []
    failed: List[StudentOutcomeOut] = []
    message: str


# Invoice views
class InvoiceItemOut(BaseModel):
    id: UUID
    fee_heading_id: Optional[UUID]
    description: str
    unit_amount: float
    quantity: int
    total_amount: float

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: UUID
    center_id: UUID
    student_id: UUID
    student_name: Optional[str] = None
    invoice_number: str
    total_amount: float
    paid_amount: float
    balance: float
    status: str
    invoice_date: Optional[date]
    due_date: Optional[date]
    invoice_month: Optional[int]
    invoice_year: Optional[int]
    academic_year: Optional[str]
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceDetail(InvoiceOut):
    """Invoice with line items and payment history"""
    items: List[InvoiceItemOut] = []
    payments: List[PaymentOut] = []


class FinanceSummary(BaseModel):
    total_invoiced: float
    total_collected: float
    total_outstanding: float
    invoice_count: int
    overdue_count: int
    total_expenses: float = 0.0
    net_income: float = 0.0  # collected minus expenses
    expenses_by_category: List[CategoryTotal] = []

# tuitiondesk/api/routers/invoices.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from typing import Dict, Any, List, Optional
from uuid import UUID
import logging

from tuitiondesk.core.config import settings
from tuitiondesk.core.db import get_db
from tuitiondesk.api.deps.tenancy import require_center
from tuitiondesk.models.payment import Invoice, INVOICE_STATUSES
from tuitiondesk.schemas.invoice import (
    GenerateMonthlyInvoicesRequest, GenerateMonthlyInvoicesResponse,
    GeneratedInvoiceOut, StudentOutcomeOut,
    InvoiceOut, InvoiceDetail, FinanceSummary
)
from tuitiondesk.services.invoicing import (
    BillingConfig, BillingError, InvoiceGenerator, MonthlyRunRequest,
    RunSummary, REQUIRED_FIELDS_MESSAGE
)
from tuitiondesk.services.payments import PaymentError, PaymentService
from tuitiondesk.services.expenses import ExpenseService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_billing_config() -> BillingConfig:
    return BillingConfig.from_settings(settings)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _summary_response(summary: RunSummary) -> GenerateMonthlyInvoicesResponse:
    def outcome(result):
        return StudentOutcomeOut(
            student_id=result.student_id,
            student_name=result.student_name,
            reason=result.outcome.value,
            detail=result.detail,
        )

    return GenerateMonthlyInvoicesResponse(
        success=True,
        invoices_generated=summary.invoices_generated,
        invoices=[
            GeneratedInvoiceOut(
                invoice_id=inv.invoice_id,
                invoice_number=inv.invoice_number,
                student_id=inv.student_id,
                student_name=inv.student_name,
                total_amount=inv.total_amount,
            )
            for inv in summary.invoices
        ],
        skipped=[outcome(r) for r in summary.skipped],
        failed=[outcome(r) for r in summary.failed],
        message=summary.message,
    )


@router.post("/generate-monthly", response_model=GenerateMonthlyInvoicesResponse)
async def generate_monthly_invoices(
    data: GenerateMonthlyInvoicesRequest,
    db: Session = Depends(get_db),
    config: BillingConfig = Depends(get_billing_config)
):
    """Generate this month's invoices for every active student of a center"""
    if not data.center_id or not data.month or not data.year or not data.academic_year:
        return _error(status.HTTP_400_BAD_REQUEST, REQUIRED_FIELDS_MESSAGE)

    try:
        center_id = UUID(data.center_id.strip())
    except ValueError:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid center ID.")

    request = MonthlyRunRequest(
        center_id=center_id,
        month=data.month,
        year=data.year,
        academic_year=data.academic_year,
        due_in_days=data.due_in_days,
        grade_filter=data.grade_filter,
    )

    try:
        summary = InvoiceGenerator(db, config).generate(request)
    except BillingError as e:
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Generate monthly invoices error for center {center_id}: {e}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "Failed to generate invoices")

    return _summary_response(summary)


@router.get("/summary", response_model=FinanceSummary)
async def finance_summary(
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Invoiced, collected and outstanding totals for the center, next to its expenses"""
    totals = PaymentService(db).summary(ctx["center_id"])
    expenses = ExpenseService(db).breakdown(ctx["center_id"])
    return FinanceSummary(
        **totals,
        total_expenses=expenses["total_expenses"],
        net_income=totals["total_collected"] - expenses["total_expenses"],
        expenses_by_category=expenses["categories"],
    )


@router.get("/", response_model=List[InvoiceOut])
async def list_invoices(
    month: Optional[int] = None,
    year: Optional[int] = None,
    status: Optional[str] = None,
    student_id: Optional[UUID] = None,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List invoices with optional filters, newest first"""
    query = select(Invoice).options(selectinload(Invoice.student)).where(
        Invoice.center_id == ctx["center_id"]
    )

    if month:
        query = query.where(Invoice.invoice_month == month)
    if year:
        query = query.where(Invoice.invoice_year == year)
    if status:
        if status not in INVOICE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Unknown invoice status: {status}")
        query = query.where(Invoice.status == status)
    if student_id:
        query = query.where(Invoice.student_id == student_id)

    invoices = db.execute(
        query.order_by(Invoice.created_at.desc(), Invoice.invoice_number)
    ).scalars().all()
    return [InvoiceOut.model_validate(inv) for inv in invoices]


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(
    invoice_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Get detailed invoice with items and payments"""
    invoice = PaymentService(db).get_invoice(ctx["center_id"], invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceDetail.model_validate(invoice)


@router.put("/{invoice_id}/cancel", response_model=InvoiceOut)
async def cancel_invoice(
    invoice_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Cancel an invoice that has not been paid against"""
    service = PaymentService(db)
    invoice = service.get_invoice(ctx["center_id"], invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    try:
        invoice = service.cancel_invoice(invoice)
    except PaymentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return InvoiceOut.model_validate(invoice)

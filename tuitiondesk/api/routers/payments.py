# tuitiondesk/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Dict, Any, List
from uuid import UUID

from tuitiondesk.core.db import get_db
from tuitiondesk.api.deps.tenancy import require_center
from tuitiondesk.models.payment import Payment
from tuitiondesk.schemas.payment import PaymentCreate, PaymentOut
from tuitiondesk.services.payments import PaymentError, PaymentService

router = APIRouter()


@router.post("/", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
async def record_payment(
    data: PaymentCreate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Record payment against an invoice"""
    service = PaymentService(db)

    invoice = service.get_invoice(ctx["center_id"], data.invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    try:
        payment = service.record_payment(
            invoice,
            amount=data.amount,
            payment_method=data.payment_method,
            reference_number=data.reference_number,
            payment_date=data.payment_date,
        )
    except PaymentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PaymentOut.model_validate(payment)


@router.get("/invoice/{invoice_id}", response_model=List[PaymentOut])
async def list_invoice_payments(
    invoice_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List payments recorded against an invoice"""
    invoice = PaymentService(db).get_invoice(ctx["center_id"], invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    payments = db.execute(
        select(Payment)
        .where(Payment.invoice_id == invoice.id)
        .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
    ).scalars().all()

    return [PaymentOut.model_validate(p) for p in payments]

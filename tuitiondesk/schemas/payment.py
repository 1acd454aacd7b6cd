# tuitiondesk/schemas/payment.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from tuitiondesk.models.payment import PAYMENT_METHODS


class PaymentCreate(BaseModel):
    invoice_id: UUID
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_method: str = "cash"
    reference_number: Optional[str] = Field(None, max_length=64)
    payment_date: Optional[date] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        """Ensure payment amount has at most 2 decimal places"""
        return v.quantize(Decimal('0.01'))

    @field_validator('payment_method')
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PAYMENT_METHODS:
            raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v


class PaymentOut(BaseModel):
    id: UUID
    invoice_id: UUID
    amount: float
    payment_date: date
    payment_method: str
    reference_number: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

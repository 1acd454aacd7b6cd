# tuitiondesk/schemas/expense.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from tuitiondesk.models.expense import EXPENSE_CATEGORIES


class ExpenseCreate(BaseModel):
    category: str = "admin"
    description: str = Field(..., min_length=1, max_length=256)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    expense_date: Optional[date] = None
    vendor: Optional[str] = Field(None, max_length=128)

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in EXPENSE_CATEGORIES:
            raise ValueError(f"Category must be one of: {', '.join(EXPENSE_CATEGORIES)}")
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Description cannot be empty or whitespace')
        return v.strip()

    @field_validator('vendor')
    @classmethod
    def validate_vendor(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None


class ExpenseOut(BaseModel):
    id: UUID
    center_id: UUID
    category: str
    description: str
    amount: float
    expense_date: date
    vendor: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class CategoryTotal(BaseModel):
    category: str
    total: float
    count: int


class ExpenseBreakdown(BaseModel):
    """Spending per category over an optional date range"""
    total_expenses: float
    categories: List[CategoryTotal] = []

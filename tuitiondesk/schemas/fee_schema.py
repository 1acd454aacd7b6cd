# tuitiondesk/schemas/fee_schema.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime
from decimal import Decimal
from uuid import UUID

Frequency = Literal["monthly", "quarterly", "annual", "one_time"]


# Fee Heading Schemas
class FeeHeadingCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = Field(None, max_length=256)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure heading name is not just whitespace"""
        if not v.strip():
            raise ValueError('Heading name cannot be empty or whitespace')
        return v.strip()


class FeeHeadingOut(BaseModel):
    id: UUID
    center_id: UUID
    name: str
    description: Optional[str]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# Fee Structure Schemas
class FeeStructureCreate(BaseModel):
    fee_heading_id: UUID
    grade: str = Field(..., min_length=1, max_length=32)
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    frequency: Frequency = "monthly"

    @field_validator('grade')
    @classmethod
    def validate_grade(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Grade cannot be empty or whitespace')
        return v.strip()


class FeeStructureUpdate(BaseModel):
    """Schema for updating an existing fee structure"""
    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    frequency: Optional[Frequency] = None
    is_active: Optional[bool] = None


class FeeStructureOut(BaseModel):
    id: UUID
    center_id: UUID
    fee_heading_id: UUID
    fee_heading_name: Optional[str] = None
    grade: str
    amount: float
    frequency: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

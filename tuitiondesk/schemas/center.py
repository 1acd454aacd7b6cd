# tuitiondesk/schemas/center.py
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional
import uuid


class CenterCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128, description="Center name (required)")
    address: Optional[str] = Field(None, max_length=256, description="Center address")
    phone: Optional[str] = Field(None, max_length=32, description="Center phone number")
    currency: str = Field("INR", max_length=8, description="Billing currency")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Center name cannot be empty or whitespace')
        return v.strip()


class CenterOut(BaseModel):
    id: uuid.UUID
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    currency: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

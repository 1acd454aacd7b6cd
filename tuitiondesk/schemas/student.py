# tuitiondesk/schemas/student.py
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


class StudentCreate(BaseModel):
    name: str
    grade: str
    parent_name: Optional[str] = None

    @field_validator('name', 'grade')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Value cannot be empty')
        return v.strip()


class StudentOut(BaseModel):
    id: UUID
    center_id: UUID
    name: str
    grade: str
    parent_name: Optional[str]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

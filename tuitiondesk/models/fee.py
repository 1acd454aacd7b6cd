from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Literal, Optional
from datetime import datetime

from sqlalchemy import (
    String, Boolean, Numeric, ForeignKey, DateTime,
    CheckConstraint, Index, UniqueConstraint, Uuid
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tuitiondesk.models.base import Base

Frequency = Literal["monthly", "quarterly", "annual", "one_time"]


class FeeHeading(Base):
    __tablename__ = "fee_headings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    center_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("centers.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(256))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    structures: Mapped[list["FeeStructure"]] = relationship("FeeStructure", back_populates="fee_heading")

    __table_args__ = (
        UniqueConstraint("center_id", "name", name="uix_fee_heading_center_name"),
    )


class FeeStructure(Base):
    __tablename__ = "fee_structures"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    center_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("centers.id"), index=True, nullable=False)

    fee_heading_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("fee_headings.id"),
        index=True,
        nullable=False,
    )

    grade: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal('0.00'))
    frequency: Mapped[Frequency] = mapped_column(String(16), default="monthly", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    fee_heading: Mapped["FeeHeading"] = relationship("FeeHeading", back_populates="structures")

    __table_args__ = (
        CheckConstraint("frequency IN ('monthly','quarterly','annual','one_time')", name="ck_fee_structures_frequency"),
        CheckConstraint("amount >= 0", name="ck_fee_structures_amount_positive"),
        Index("ix_fee_structures_center_grade", "center_id", "grade"),
    )

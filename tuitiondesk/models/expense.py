# tuitiondesk/models/expense.py - Center running costs
from __future__ import annotations
import uuid
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import String, Numeric, Date, DateTime, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from tuitiondesk.models.base import Base
from tuitiondesk.models.payment import sql_in

EXPENSE_CATEGORIES = (
    "salaries", "rent", "utilities", "materials", "maintenance", "transport", "admin", "other"
)


class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    center_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("centers.id"), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="admin")
    description: Mapped[str] = mapped_column(String(256), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    vendor: Mapped[str | None] = mapped_column(String(128))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(sql_in("category", EXPENSE_CATEGORIES), name="ck_expense_category"),
        CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
        Index("ix_expenses_center_date", "center_id", "expense_date"),
    )

# tuitiondesk/services/expenses.py - Expense recording and per-category report
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from tuitiondesk.models.expense import Expense

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service class for a center's running costs"""

    def __init__(self, db: Session):
        self.db = db

    def record_expense(
        self,
        center_id: UUID,
        description: str,
        amount: Decimal,
        category: str = "admin",
        expense_date: Optional[date] = None,
        vendor: Optional[str] = None,
    ) -> Expense:
        expense = Expense(
            center_id=center_id,
            category=category,
            description=description,
            amount=amount,
            expense_date=expense_date or date.today(),
            vendor=vendor,
        )
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)

        logger.info(f"Expense recorded: {expense.category} {expense.amount} on {expense.expense_date}")
        return expense

    def _filters(self, center_id: UUID, date_from: Optional[date], date_to: Optional[date]) -> list:
        filters = [Expense.center_id == center_id]
        if date_from:
            filters.append(Expense.expense_date >= date_from)
        if date_to:
            filters.append(Expense.expense_date <= date_to)
        return filters

    def list_expenses(
        self,
        center_id: UUID,
        category: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Expense]:
        """Newest first"""
        filters = self._filters(center_id, date_from, date_to)
        if category:
            filters.append(Expense.category == category)

        return self.db.execute(
            select(Expense)
            .where(*filters)
            .order_by(Expense.expense_date.desc(), Expense.created_at.desc())
        ).scalars().all()

    def breakdown(
        self,
        center_id: UUID,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> dict:
        """
        Total spending and per-category totals, largest category first.

        Categories without expenses in the range are left out.
        """
        rows = self.db.execute(
            select(
                Expense.category,
                func.coalesce(func.sum(Expense.amount), 0),
                func.count(Expense.id),
            )
            .where(*self._filters(center_id, date_from, date_to))
            .group_by(Expense.category)
        ).all()

        categories = [
            {"category": category, "total": Decimal(str(total)), "count": count}
            for category, total, count in rows
        ]
        categories.sort(key=lambda c: (-c["total"], c["category"]))

        return {
            "total_expenses": sum((c["total"] for c in categories), Decimal('0.00')),
            "categories": categories,
        }

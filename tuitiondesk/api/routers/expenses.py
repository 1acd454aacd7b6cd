# tuitiondesk/api/routers/expenses.py - Expense routes
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
from datetime import date
import logging

from tuitiondesk.core.db import get_db
from tuitiondesk.api.deps.tenancy import require_center
from tuitiondesk.models.expense import EXPENSE_CATEGORIES
from tuitiondesk.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseBreakdown
from tuitiondesk.services.expenses import ExpenseService

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_range(date_from: Optional[date], date_to: Optional[date]):
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="date_from must not be after date_to")


@router.post("/", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
async def record_expense(
    data: ExpenseCreate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Record an expense for the current center"""
    expense = ExpenseService(db).record_expense(ctx["center_id"], **data.model_dump())
    return ExpenseOut.model_validate(expense)


@router.get("/", response_model=List[ExpenseOut])
async def list_expenses(
    category: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List expenses, newest first"""
    if category and category not in EXPENSE_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown expense category: {category}")
    _check_range(date_from, date_to)

    expenses = ExpenseService(db).list_expenses(ctx["center_id"], category, date_from, date_to)
    return [ExpenseOut.model_validate(e) for e in expenses]


@router.get("/breakdown", response_model=ExpenseBreakdown)
async def expense_breakdown(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Spending per category"""
    _check_range(date_from, date_to)
    return ExpenseBreakdown(**ExpenseService(db).breakdown(ctx["center_id"], date_from, date_to))

# tuitiondesk/api/routers/centers.py - Center (tenant) management routes
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import List
import logging

from tuitiondesk.core.db import get_db
from tuitiondesk.models.center import Center
from tuitiondesk.schemas.center import CenterCreate, CenterOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=CenterOut, status_code=status.HTTP_201_CREATED)
async def create_center(
    data: CenterCreate,
    db: Session = Depends(get_db)
):
    """Create a new tuition center"""
    center = Center(**data.model_dump())
    db.add(center)
    db.commit()
    db.refresh(center)

    logger.info(f"New center created: {center.name} ({center.id})")
    return CenterOut.model_validate(center)


@router.get("/", response_model=List[CenterOut])
async def list_centers(db: Session = Depends(get_db)):
    """List active centers"""
    centers = db.execute(
        select(Center).where(Center.is_active == True).order_by(Center.name)
    ).scalars().all()
    return [CenterOut.model_validate(c) for c in centers]

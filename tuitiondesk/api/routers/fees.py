# tuitiondesk/api/routers/fees.py - Fee headings and fee structures
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import Dict, Any, List, Optional
from uuid import UUID
import logging

from tuitiondesk.core.db import get_db
from tuitiondesk.api.deps.tenancy import require_center
from tuitiondesk.models.fee import FeeHeading, FeeStructure
from tuitiondesk.schemas.fee_schema import (
    FeeHeadingCreate, FeeHeadingOut,
    FeeStructureCreate, FeeStructureUpdate, FeeStructureOut
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _structure_out(structure: FeeStructure) -> FeeStructureOut:
    return FeeStructureOut(
        id=structure.id,
        center_id=structure.center_id,
        fee_heading_id=structure.fee_heading_id,
        fee_heading_name=structure.fee_heading.name if structure.fee_heading else None,
        grade=structure.grade,
        amount=structure.amount,
        frequency=structure.frequency,
        is_active=structure.is_active,
        created_at=structure.created_at,
    )


def _get_structure(db: Session, center_id: UUID, structure_id: UUID) -> FeeStructure:
    structure = db.execute(
        select(FeeStructure).where(
            FeeStructure.id == structure_id,
            FeeStructure.center_id == center_id
        )
    ).scalar_one_or_none()
    if not structure:
        raise HTTPException(status_code=404, detail="Fee structure not found")
    return structure


# ---------------------------------------------------------------------------
# Fee headings
# ---------------------------------------------------------------------------

@router.post("/headings/", response_model=FeeHeadingOut, status_code=status.HTTP_201_CREATED)
async def create_fee_heading(
    data: FeeHeadingCreate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Create a fee heading (e.g. Tuition, Transport)"""
    heading = FeeHeading(center_id=ctx["center_id"], is_active=True, **data.model_dump())

    try:
        db.add(heading)
        db.commit()
        db.refresh(heading)
    except IntegrityError as e:
        db.rollback()
        if 'uix_fee_heading_center_name' in str(e) or 'UNIQUE' in str(e).upper():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A fee heading named '{data.name}' already exists"
            )
        raise HTTPException(status_code=400, detail="Database constraint violation")

    logger.info(f"Fee heading created: {heading.name}")
    return FeeHeadingOut.model_validate(heading)


@router.get("/headings/", response_model=List[FeeHeadingOut])
async def list_fee_headings(
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List the center's fee headings"""
    headings = db.execute(
        select(FeeHeading)
        .where(FeeHeading.center_id == ctx["center_id"])
        .order_by(FeeHeading.name)
    ).scalars().all()
    return [FeeHeadingOut.model_validate(h) for h in headings]


@router.delete("/headings/{heading_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fee_heading(
    heading_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Delete a fee heading that no fee structure uses"""
    heading = db.execute(
        select(FeeHeading).where(
            FeeHeading.id == heading_id,
            FeeHeading.center_id == ctx["center_id"]
        )
    ).scalar_one_or_none()

    if not heading:
        raise HTTPException(status_code=404, detail="Fee heading not found")

    in_use = db.execute(
        select(func.count(FeeStructure.id)).where(FeeStructure.fee_heading_id == heading_id)
    ).scalar_one()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Fee heading is used by {in_use} fee structure(s). Delete or reassign them first."
        )

    name = heading.name
    db.delete(heading)
    db.commit()
    logger.info(f"Fee heading deleted: {name}")


# ---------------------------------------------------------------------------
# Fee structures
# ---------------------------------------------------------------------------

@router.post("/structures/", response_model=FeeStructureOut, status_code=status.HTTP_201_CREATED)
async def create_fee_structure(
    data: FeeStructureCreate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Attach a recurring charge under a fee heading to a grade"""
    center_id = ctx["center_id"]

    heading = db.execute(
        select(FeeHeading).where(
            FeeHeading.id == data.fee_heading_id,
            FeeHeading.center_id == center_id
        )
    ).scalar_one_or_none()
    if not heading:
        raise HTTPException(status_code=404, detail="Fee heading not found")

    structure = FeeStructure(center_id=center_id, **data.model_dump())
    db.add(structure)
    db.commit()
    db.refresh(structure)

    logger.info(f"Fee structure created: {heading.name} for grade {structure.grade} = {structure.amount}")
    return _structure_out(structure)


@router.get("/structures/", response_model=List[FeeStructureOut])
async def list_fee_structures(
    grade: Optional[str] = None,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List fee structures, optionally for a single grade"""
    query = select(FeeStructure).where(FeeStructure.center_id == ctx["center_id"])
    if grade:
        query = query.where(FeeStructure.grade == grade)

    structures = db.execute(
        query.order_by(FeeStructure.grade, FeeStructure.created_at)
    ).scalars().all()
    return [_structure_out(s) for s in structures]


@router.put("/structures/{structure_id}", response_model=FeeStructureOut)
async def update_fee_structure(
    structure_id: UUID,
    data: FeeStructureUpdate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Change the amount, frequency or active flag of a fee structure"""
    structure = _get_structure(db, ctx["center_id"], structure_id)

    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(structure, key, value)

    db.commit()
    db.refresh(structure)
    return _structure_out(structure)


@router.delete("/structures/{structure_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fee_structure(
    structure_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Delete a fee structure; invoices already issued keep their items"""
    structure = _get_structure(db, ctx["center_id"], structure_id)
    db.delete(structure)
    db.commit()

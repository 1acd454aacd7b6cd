# tuitiondesk/api/routers/students.py - Student roster routes
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Dict, Any, List, Optional
from uuid import UUID
import logging

from tuitiondesk.core.db import get_db
from tuitiondesk.api.deps.tenancy import require_center
from tuitiondesk.models.student import Student
from tuitiondesk.schemas.student import StudentCreate, StudentOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentCreate,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Register a student at the current center"""
    student = Student(center_id=ctx["center_id"], **data.model_dump())
    db.add(student)
    db.commit()
    db.refresh(student)

    logger.info(f"Student registered: {student.name} (grade {student.grade})")
    return StudentOut.model_validate(student)


@router.get("/", response_model=List[StudentOut])
async def list_students(
    grade: Optional[str] = None,
    active: Optional[bool] = True,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """List the center's students, optionally by grade"""
    query = select(Student).where(Student.center_id == ctx["center_id"])

    if grade:
        query = query.where(Student.grade == grade)
    if active is not None:
        query = query.where(Student.is_active == active)

    students = db.execute(query.order_by(Student.name)).scalars().all()
    return [StudentOut.model_validate(s) for s in students]


@router.put("/{student_id}/deactivate", response_model=StudentOut)
async def deactivate_student(
    student_id: UUID,
    ctx: Dict[str, Any] = Depends(require_center),
    db: Session = Depends(get_db)
):
    """Mark a student inactive so later invoice runs skip them"""
    student = db.execute(
        select(Student).where(
            Student.id == student_id,
            Student.center_id == ctx["center_id"]
        )
    ).scalar_one_or_none()

    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    student.is_active = False
    db.commit()
    db.refresh(student)

    logger.info(f"Student deactivated: {student.name}")
    return StudentOut.model_validate(student)

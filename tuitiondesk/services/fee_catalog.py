# tuitiondesk/services/fee_catalog.py - Read-only access to a center's fee structures
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from tuitiondesk.models.fee import FeeHeading, FeeStructure

logger = logging.getLogger(__name__)

DEFAULT_FEE_DESCRIPTION = "Fee"


@dataclass(frozen=True)
class FeeLine:
    """One applicable fee structure row with its heading already resolved"""
    fee_structure_id: UUID
    fee_heading_id: Optional[UUID]
    description: str
    amount: Decimal
    frequency: str


class FeeCatalog:
    """Reads active fee structures for a (center, grade) pair"""

    def __init__(self, db: Session):
        self.db = db

    def fees_for_grade(self, center_id: UUID, grade: str) -> List[FeeLine]:
        """
        Return the active fee lines for a grade, ordered by heading name.

        An empty list is a valid answer: the grade simply has no fees.
        """
        rows = self.db.execute(
            select(FeeStructure, FeeHeading)
            .outerjoin(FeeHeading, FeeStructure.fee_heading_id == FeeHeading.id)
            .where(
                FeeStructure.center_id == center_id,
                FeeStructure.grade == grade,
                FeeStructure.is_active == True,
                or_(FeeHeading.id.is_(None), FeeHeading.is_active == True),
            )
            .order_by(FeeHeading.name, FeeStructure.created_at)
        ).all()

        lines = [self._to_line(structure, heading) for structure, heading in rows]
        logger.debug(f"Found {len(lines)} fee lines for center {center_id}, grade {grade}")
        return lines

    @staticmethod
    def _to_line(structure: FeeStructure, heading: Optional[FeeHeading]) -> FeeLine:
        return FeeLine(
            fee_structure_id=structure.id,
            fee_heading_id=heading.id if heading else None,
            description=heading.name if heading else DEFAULT_FEE_DESCRIPTION,
            amount=Decimal(structure.amount),
            frequency=structure.frequency,
        )

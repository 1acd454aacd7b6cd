# tuitiondesk/services/invoice_numbers.py - Collision-checked invoice number generation
from datetime import datetime
from typing import Callable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from tuitiondesk.models.payment import Invoice

logger = logging.getLogger(__name__)

FALLBACK_NAME_PREFIX = "STU"


class InvoiceNumberExhaustedError(RuntimeError):
    """Raised when every candidate invoice number is already taken"""
    pass


def name_prefix(student_name: str) -> str:
    """First three letters of the student's name, uppercased."""
    letters = [ch for ch in (student_name or "") if ch.isalpha()]
    if not letters:
        return FALLBACK_NAME_PREFIX
    return "".join(letters[:3]).upper()


class InvoiceNumberGenerator:
    """
    Builds numbers of the form ``INV-<YYYYMMDDHHMMSS>-<ABC>``.

    Two students with the same name prefix billed in the same second would
    collide, so each candidate is checked against existing invoices and a
    ``-2``, ``-3``... suffix is appended until a free number is found or
    ``max_attempts`` candidates have been tried.
    """

    def __init__(
        self,
        db: Session,
        prefix: str = "INV",
        max_attempts: int = 5,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.prefix = prefix
        self.max_attempts = max_attempts
        self.clock = clock or datetime.utcnow

    def base_number(self, student_name: str) -> str:
        stamp = self.clock().strftime("%Y%m%d%H%M%S")
        return f"{self.prefix}-{stamp}-{name_prefix(student_name)}"

    def next_number(self, student_name: str) -> str:
        base = self.base_number(student_name)
        for attempt in range(1, self.max_attempts + 1):
            candidate = base if attempt == 1 else f"{base}-{attempt}"
            if not self._is_taken(candidate):
                if attempt > 1:
                    logger.info(f"Invoice number {base} taken, using {candidate}")
                return candidate

        raise InvoiceNumberExhaustedError(
            f"Could not find a free invoice number after {self.max_attempts} attempts (base {base})"
        )

    def _is_taken(self, number: str) -> bool:
        return self.db.execute(
            select(Invoice.id).where(Invoice.invoice_number == number)
        ).first() is not None

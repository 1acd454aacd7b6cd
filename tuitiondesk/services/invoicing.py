# tuitiondesk/services/invoicing.py - Monthly invoice generation for a center
"""
Monthly invoice batch.

For every active student of a center (optionally limited to one grade) the
batch checks that the student has not been billed for the period yet, reads
the fee structures of the student's grade, sums them and writes one invoice
with one line per fee. Each student is handled in its own transaction so a
failure while writing one student's invoice never leaves a header without its
items and never stops the rest of the batch.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union
from uuid import UUID
import calendar
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tuitiondesk.models.payment import Invoice, InvoiceItem
from tuitiondesk.models.student import Student
from tuitiondesk.services.fee_catalog import FeeCatalog, FeeLine
from tuitiondesk.services.invoice_numbers import InvoiceNumberGenerator

logger = logging.getLogger(__name__)

ALL_GRADES = "all"
REQUIRED_FIELDS_MESSAGE = "Center ID, month, year, and academic year are required."
NO_STUDENTS_MESSAGE = "No active students found for the selected criteria."
MAX_DUE_DAYS = 365


class BillingError(ValueError):
    """Raised when a billing request is invalid"""
    pass


# =============================================================================
# CONFIGURATION & REQUEST
# =============================================================================

@dataclass(frozen=True)
class BillingConfig:
    """Everything the batch needs from configuration, passed in explicitly"""
    default_due_days: int = 30
    number_prefix: str = "INV"
    number_max_attempts: int = 5
    clock: Callable[[], datetime] = datetime.utcnow

    @classmethod
    def from_settings(cls, settings) -> "BillingConfig":
        return cls(
            default_due_days=settings.INVOICE_DEFAULT_DUE_DAYS,
            number_prefix=settings.INVOICE_NUMBER_PREFIX,
            number_max_attempts=settings.INVOICE_NUMBER_MAX_ATTEMPTS,
        )


@dataclass
class MonthlyRunRequest:
    center_id: UUID
    month: int
    year: int
    academic_year: str
    due_in_days: Optional[int] = None
    grade_filter: Optional[str] = ALL_GRADES

    @property
    def grade(self) -> Optional[str]:
        """The grade to restrict to, or None when every grade is billed"""
        if self.grade_filter is None:
            return None
        grade = self.grade_filter.strip()
        if not grade or grade.lower() == ALL_GRADES:
            return None
        return grade


# =============================================================================
# ASSEMBLY
# =============================================================================

@dataclass(frozen=True)
class AssembledItem:
    fee_heading_id: Optional[UUID]
    description: str
    unit_amount: Decimal
    quantity: int
    total_amount: Decimal


@dataclass(frozen=True)
class AssembledInvoice:
    total_amount: Decimal
    items: Tuple[AssembledItem, ...]


def assemble_invoice(fee_lines: Sequence[FeeLine]) -> AssembledInvoice:
    """Sum the fee lines into an invoice total with one item per fee."""
    items = tuple(
        AssembledItem(
            fee_heading_id=line.fee_heading_id,
            description=line.description,
            unit_amount=line.amount,
            quantity=1,
            total_amount=line.amount,
        )
        for line in fee_lines
    )
    total = sum((item.total_amount for item in items), Decimal('0.00'))
    return AssembledInvoice(total_amount=total, items=items)


def billing_dates(year: int, month: int, due_in_days: int) -> Tuple[date, date]:
    """Invoice date is the first of the billing month; due date follows by due_in_days."""
    invoice_date = date(year, month, 1)
    return invoice_date, invoice_date + timedelta(days=due_in_days)


def period_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


# =============================================================================
# RESULTS
# =============================================================================

class StudentOutcome(str, Enum):
    CREATED = "created"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_NO_FEES = "skipped_no_fees"
    SKIPPED_ZERO_TOTAL = "skipped_zero_total"
    FAILED = "failed"


@dataclass
class CreatedInvoice:
    invoice_id: UUID
    invoice_number: str
    student_id: UUID
    student_name: str
    total_amount: Decimal


@dataclass
class StudentResult:
    student_id: UUID
    student_name: str
    outcome: StudentOutcome
    detail: str = ""


@dataclass
class RunSummary:
    invoices: List[CreatedInvoice] = field(default_factory=list)
    skipped: List[StudentResult] = field(default_factory=list)
    failed: List[StudentResult] = field(default_factory=list)
    message: str = ""

    @property
    def invoices_generated(self) -> int:
        return len(self.invoices)

    def record(self, result: Union[CreatedInvoice, StudentResult]):
        if isinstance(result, CreatedInvoice):
            self.invoices.append(result)
        elif result.outcome == StudentOutcome.FAILED:
            self.failed.append(result)
        else:
            self.skipped.append(result)


# =============================================================================
# WRITER
# =============================================================================

class InvoiceWriter:
    """Persists an invoice header and its items inside the caller's transaction"""

    def __init__(self, db: Session):
        self.db = db

    def write(
        self,
        *,
        center_id: UUID,
        student_id: UUID,
        invoice_number: str,
        assembled: AssembledInvoice,
        invoice_date: date,
        due_date: date,
        month: int,
        year: int,
        academic_year: str,
        notes: str,
    ) -> Invoice:
        invoice = Invoice(
            center_id=center_id,
            student_id=student_id,
            invoice_number=invoice_number,
            total_amount=assembled.total_amount,
            paid_amount=Decimal('0.00'),
            status="issued",
            invoice_date=invoice_date,
            due_date=due_date,
            invoice_month=month,
            invoice_year=year,
            academic_year=academic_year,
            notes=notes,
        )
        self.db.add(invoice)
        self.db.flush()

        for item in assembled.items:
            self.db.add(InvoiceItem(
                invoice_id=invoice.id,
                fee_heading_id=item.fee_heading_id,
                description=item.description,
                unit_amount=item.unit_amount,
                quantity=item.quantity,
                total_amount=item.total_amount,
            ))
        self.db.flush()
        return invoice


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class InvoiceGenerator:
    """Runs the monthly invoice batch for one center"""

    def __init__(
        self,
        db: Session,
        config: Optional[BillingConfig] = None,
        catalog: Optional[FeeCatalog] = None,
        writer: Optional[InvoiceWriter] = None,
        numbers: Optional[InvoiceNumberGenerator] = None,
    ):
        self.db = db
        self.config = config or BillingConfig()
        self.catalog = catalog or FeeCatalog(db)
        self.writer = writer or InvoiceWriter(db)
        self.numbers = numbers or InvoiceNumberGenerator(
            db,
            prefix=self.config.number_prefix,
            max_attempts=self.config.number_max_attempts,
            clock=self.config.clock,
        )

    def validate(self, request: MonthlyRunRequest):
        if not request.center_id or not request.month or not request.year or not request.academic_year:
            raise BillingError(REQUIRED_FIELDS_MESSAGE)
        if not 1 <= request.month <= 12:
            raise BillingError("Month must be between 1 and 12.")
        if not 1900 <= request.year <= 9999:
            raise BillingError("Year is out of range.")
        if request.due_in_days is not None and request.due_in_days < 0:
            raise BillingError("Due in days cannot be negative.")
        if request.due_in_days is not None and request.due_in_days > MAX_DUE_DAYS:
            raise BillingError(f"Due in days cannot exceed {MAX_DUE_DAYS}.")

    def active_students(self, center_id: UUID, grade: Optional[str] = None) -> List[Student]:
        query = select(Student).where(
            Student.center_id == center_id,
            Student.is_active == True
        )
        if grade is not None:
            query = query.where(Student.grade == grade)
        return list(self.db.execute(query.order_by(Student.name, Student.id)).scalars().all())

    def already_billed(self, student_id: UUID, month: int, year: int) -> bool:
        return self.db.execute(
            select(Invoice.id).where(
                Invoice.student_id == student_id,
                Invoice.invoice_month == month,
                Invoice.invoice_year == year
            )
        ).first() is not None

    def generate(self, request: MonthlyRunRequest) -> RunSummary:
        """
        Generate invoices for every eligible student of the center.

        Raises:
            BillingError: If the request is invalid
            SQLAlchemyError: If the roster itself cannot be read
        """
        self.validate(request)

        due_in_days = request.due_in_days if request.due_in_days is not None else self.config.default_due_days
        try:
            invoice_date, due_date = billing_dates(request.year, request.month, due_in_days)
        except OverflowError:
            raise BillingError("Due date is out of range.")
        notes = f"Monthly fees for {period_label(request.year, request.month)}"

        logger.info(
            f"Generating invoices for center {request.center_id}, {request.month}/{request.year} "
            f"(academic year {request.academic_year}, grade filter {request.grade or ALL_GRADES})"
        )

        students = self.active_students(request.center_id, request.grade)
        summary = RunSummary()

        if not students:
            summary.message = NO_STUDENTS_MESSAGE
            return summary

        for student in students:
            summary.record(self._process_student(student, request, invoice_date, due_date, notes))

        summary.message = f"{summary.invoices_generated} invoices generated successfully."
        logger.info(
            f"Invoice run for center {request.center_id} finished: {summary.invoices_generated} created, "
            f"{len(summary.skipped)} skipped, {len(summary.failed)} failed"
        )
        return summary

    def _process_student(
        self,
        student: Student,
        request: MonthlyRunRequest,
        invoice_date: date,
        due_date: date,
        notes: str,
    ) -> Union[CreatedInvoice, StudentResult]:
        student_id, student_name, grade = student.id, student.name, student.grade

        def skipped(outcome: StudentOutcome, detail: str) -> StudentResult:
            logger.info(f"Skipping {student_name}: {detail}")
            return StudentResult(student_id, student_name, outcome, detail)

        def failed(detail: str) -> StudentResult:
            self.db.rollback()
            logger.exception(f"Invoice generation failed for {student_name} ({student_id}): {detail}")
            return StudentResult(student_id, student_name, StudentOutcome.FAILED, detail)

        try:
            if self.already_billed(student_id, request.month, request.year):
                return skipped(
                    StudentOutcome.SKIPPED_DUPLICATE,
                    f"Invoice already exists for {request.month}/{request.year}"
                )
        except Exception as e:
            return failed(f"Could not check for an existing invoice: {e}")

        try:
            fee_lines = self.catalog.fees_for_grade(request.center_id, grade)
        except Exception as e:
            return failed(f"Could not read fee structures: {e}")

        if not fee_lines:
            return skipped(StudentOutcome.SKIPPED_NO_FEES, f"No fee structures for grade {grade}")

        assembled = assemble_invoice(fee_lines)
        if assembled.total_amount == 0:
            return skipped(StudentOutcome.SKIPPED_ZERO_TOTAL, "Total amount is 0")

        try:
            invoice = self.writer.write(
                center_id=request.center_id,
                student_id=student_id,
                invoice_number=self.numbers.next_number(student_name),
                assembled=assembled,
                invoice_date=invoice_date,
                due_date=due_date,
                month=request.month,
                year=request.year,
                academic_year=request.academic_year,
                notes=notes,
            )
            created = CreatedInvoice(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                student_id=student_id,
                student_name=student_name,
                total_amount=assembled.total_amount,
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Another run billed this student between the check and the write
            try:
                duplicate = self.already_billed(student_id, request.month, request.year)
            except Exception as check_error:
                return failed(f"Could not write invoice: {e.orig}; re-checking for a duplicate failed: {check_error}")
            if duplicate:
                return skipped(
                    StudentOutcome.SKIPPED_DUPLICATE,
                    f"Invoice already exists for {request.month}/{request.year}"
                )
            return failed(f"Could not write invoice: {e.orig}")
        except Exception as e:
            return failed(f"Could not write invoice: {e}")

        logger.info(f"Created invoice {created.invoice_number} for {student_name}: {created.total_amount}")
        return created

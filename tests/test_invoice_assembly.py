from datetime import date
from decimal import Decimal
from uuid import uuid4

from tuitiondesk.services.fee_catalog import FeeLine
from tuitiondesk.services.invoicing import (
    MonthlyRunRequest, assemble_invoice, billing_dates, period_label
)


def _line(description, amount):
    return FeeLine(
        fee_structure_id=uuid4(),
        fee_heading_id=uuid4(),
        description=description,
        amount=Decimal(amount),
        frequency="monthly",
    )


def test_total_is_sum_of_items():
    assembled = assemble_invoice([_line("Tuition", "450.00"), _line("Lab", "50.50")])

    assert assembled.total_amount == Decimal("500.50")
    assert [item.description for item in assembled.items] == ["Tuition", "Lab"]
    assert all(item.quantity == 1 for item in assembled.items)
    assert sum(item.total_amount for item in assembled.items) == assembled.total_amount


def test_empty_fee_list_totals_zero():
    assembled = assemble_invoice([])

    assert assembled.total_amount == Decimal("0.00")
    assert assembled.items == ()


def test_frequency_does_not_change_the_amount():
    quarterly = FeeLine(uuid4(), uuid4(), "Exam", Decimal("300.00"), "quarterly")

    assert assemble_invoice([quarterly]).total_amount == Decimal("300.00")


def test_billing_dates():
    assert billing_dates(2024, 3, 30) == (date(2024, 3, 1), date(2024, 3, 31))
    assert billing_dates(2024, 2, 30) == (date(2024, 2, 1), date(2024, 3, 2))
    assert billing_dates(2024, 12, 0) == (date(2024, 12, 1), date(2024, 12, 1))


def test_period_label():
    assert period_label(2024, 3) == "March 2024"


def test_grade_filter_all_means_every_grade():
    base = dict(center_id=uuid4(), month=3, year=2024, academic_year="2023-24")

    assert MonthlyRunRequest(**base).grade is None
    assert MonthlyRunRequest(**base, grade_filter="ALL").grade is None
    assert MonthlyRunRequest(**base, grade_filter="  ").grade is None
    assert MonthlyRunRequest(**base, grade_filter=None).grade is None
    assert MonthlyRunRequest(**base, grade_filter=" 8 ").grade == "8"

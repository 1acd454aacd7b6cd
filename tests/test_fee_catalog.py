from decimal import Decimal

from tuitiondesk.services.fee_catalog import FeeCatalog, FeeLine


def test_returns_active_fees_for_grade_ordered_by_heading(db, grade_eight_center):
    center = grade_eight_center["center"]

    lines = FeeCatalog(db).fees_for_grade(center.id, "8")

    assert [line.description for line in lines] == ["Lab", "Tuition"]
    assert [line.amount for line in lines] == [Decimal("50.00"), Decimal("450.00")]
    assert all(isinstance(line, FeeLine) for line in lines)
    assert all(line.fee_heading_id is not None for line in lines)


def test_grade_without_fees_is_empty(db, grade_eight_center):
    center = grade_eight_center["center"]

    assert FeeCatalog(db).fees_for_grade(center.id, "9") == []


def test_inactive_structures_and_headings_are_ignored(db, seed):
    center = seed.center()
    tuition = seed.heading(center, "Tuition")
    retired = seed.heading(center, "Transport", is_active=False)
    seed.structure(center, tuition, grade="10", amount="700.00")
    seed.structure(center, tuition, grade="10", amount="900.00", is_active=False)
    seed.structure(center, retired, grade="10", amount="200.00")

    lines = FeeCatalog(db).fees_for_grade(center.id, "10")

    assert len(lines) == 1
    assert lines[0].description == "Tuition"
    assert lines[0].amount == Decimal("700.00")


def test_fees_are_scoped_to_the_center(db, seed):
    center = seed.center("North")
    other = seed.center("South")
    seed.structure(other, seed.heading(other, "Tuition"), grade="8", amount="999.00")

    assert FeeCatalog(db).fees_for_grade(center.id, "8") == []

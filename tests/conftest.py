# tests/conftest.py - Shared fixtures: in-memory SQLite database, API client, seed helpers
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENV"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tuitiondesk.core.db import db_manager, get_engine
from tuitiondesk.main import app
from tuitiondesk.models import Base, Center, Student, FeeHeading, FeeStructure, Invoice, Expense

FIXED_NOW = datetime(2024, 3, 1, 10, 0, 0)


class Seeder:
    """Creates committed rows so API requests sharing the connection can see them"""

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def center(self, name="Bright Minds Tuition", is_active=True):
        return self._save(Center(name=name, is_active=is_active))

    def student(self, center, name, grade="8", is_active=True):
        return self._save(Student(center_id=center.id, name=name, grade=grade, is_active=is_active))

    def heading(self, center, name="Tuition", is_active=True):
        return self._save(FeeHeading(center_id=center.id, name=name, is_active=is_active))

    def structure(self, center, heading, grade="8", amount="500.00", is_active=True, frequency="monthly"):
        return self._save(FeeStructure(
            center_id=center.id,
            fee_heading_id=heading.id,
            grade=grade,
            amount=Decimal(amount),
            frequency=frequency,
            is_active=is_active,
        ))

    def invoice(self, center, student, invoice_number, month=3, year=2024, total="500.00"):
        return self._save(Invoice(
            center_id=center.id,
            student_id=student.id,
            invoice_number=invoice_number,
            total_amount=Decimal(total),
            paid_amount=Decimal("0.00"),
            status="issued",
            invoice_date=date(year, month, 1),
            due_date=date(year, month, 28),
            invoice_month=month,
            invoice_year=year,
            academic_year="2023-24",
        ))

    def expense(self, center, amount, category="admin", description="Office supplies", expense_date=date(2024, 3, 5), vendor=None):
        return self._save(Expense(
            center_id=center.id,
            category=category,
            description=description,
            amount=Decimal(amount),
            expense_date=expense_date,
            vendor=vendor,
        ))


@pytest.fixture
def engine():
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(engine):
    session = db_manager.SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seed(db):
    return Seeder(db)


@pytest.fixture
def client(engine):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def grade_eight_center(seed):
    """
    Center with Asha (grade 8, active), Bilal (grade 8, inactive) and
    Dev (grade 9, active). Only grade 8 has fees: Tuition 450 + Lab 50.
    """
    center = seed.center()
    tuition = seed.heading(center, "Tuition")
    lab = seed.heading(center, "Lab")
    seed.structure(center, tuition, grade="8", amount="450.00")
    seed.structure(center, lab, grade="8", amount="50.00")

    return {
        "center": center,
        "asha": seed.student(center, "Asha", grade="8"),
        "bilal": seed.student(center, "Bilal", grade="8", is_active=False),
        "dev": seed.student(center, "Dev", grade="9"),
    }

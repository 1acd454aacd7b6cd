# tuitiondesk/models/__init__.py - Import all models so SQLAlchemy can discover them

from tuitiondesk.models.base import Base

from tuitiondesk.models.center import Center
from tuitiondesk.models.student import Student
from tuitiondesk.models.fee import FeeHeading, FeeStructure
from tuitiondesk.models.payment import Invoice, InvoiceItem, Payment
from tuitiondesk.models.expense import Expense

__all__ = [
    "Base",
    "Center",
    "Student",
    "FeeHeading",
    "FeeStructure",
    "Invoice",
    "InvoiceItem",
    "Payment",
    "Expense",
]

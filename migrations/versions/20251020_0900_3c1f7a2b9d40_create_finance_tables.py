"""create finance tables

Revision ID: 3c1f7a2b9d40
Revises:
Create Date: 2025-10-20 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f7a2b9d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'centers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('address', sa.String(length=256), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('currency', sa.String(length=8), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('center_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('grade', sa.String(length=32), nullable=False),
        sa.Column('parent_name', sa.String(length=128), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['center_id'], ['centers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_center_id', 'students', ['center_id'])
    op.create_index('ix_students_center_grade_active', 'students', ['center_id', 'grade', 'is_active'])

    op.create_table(
        'fee_headings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('center_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.String(length=256), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['center_id'], ['centers.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('center_id', 'name', name='uix_fee_heading_center_name'),
    )
    op.create_index('ix_fee_headings_center_id', 'fee_headings', ['center_id'])

    op.create_table(
        'fee_structures',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('center_id', sa.Uuid(), nullable=False),
        sa.Column('fee_heading_id', sa.Uuid(), nullable=False),
        sa.Column('grade', sa.String(length=32), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('frequency', sa.String(length=16), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("frequency IN ('monthly','quarterly','annual','one_time')", name='ck_fee_structures_frequency'),
        sa.CheckConstraint('amount >= 0', name='ck_fee_structures_amount_positive'),
        sa.ForeignKeyConstraint(['center_id'], ['centers.id']),
        sa.ForeignKeyConstraint(['fee_heading_id'], ['fee_headings.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_fee_structures_center_id', 'fee_structures', ['center_id'])
    op.create_index('ix_fee_structures_fee_heading_id', 'fee_structures', ['fee_heading_id'])
    op.create_index('ix_fee_structures_center_grade', 'fee_structures', ['center_id', 'grade'])

    op.create_table(
        'invoices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('center_id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('invoice_number', sa.String(length=64), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('invoice_month', sa.Integer(), nullable=True),
        sa.Column('invoice_year', sa.Integer(), nullable=True),
        sa.Column('academic_year', sa.String(length=16), nullable=True),
        sa.Column('notes', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('issued','pending','partial','paid','overdue','cancelled')",
            name='ck_invoice_status'
        ),
        sa.CheckConstraint('total_amount >= 0', name='ck_invoice_total_positive'),
        sa.CheckConstraint('paid_amount >= 0', name='ck_invoice_paid_positive'),
        sa.CheckConstraint(
            'invoice_month IS NULL OR (invoice_month BETWEEN 1 AND 12)',
            name='ck_invoice_month_range'
        ),
        sa.ForeignKeyConstraint(['center_id'], ['centers.id']),
        sa.ForeignKeyConstraint(['student_id'], ['students.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number'),
        sa.UniqueConstraint('student_id', 'invoice_month', 'invoice_year', name='uix_invoice_student_period'),
    )
    op.create_index('ix_invoices_center_id', 'invoices', ['center_id'])
    op.create_index('ix_invoices_center_period', 'invoices', ['center_id', 'invoice_year', 'invoice_month'])

    op.create_table(
        'invoice_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('fee_heading_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.String(length=256), nullable=False),
        sa.Column('unit_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_invoice_items_quantity_positive'),
        sa.CheckConstraint('unit_amount >= 0', name='ck_invoice_items_unit_amount_positive'),
        sa.CheckConstraint('total_amount = unit_amount * quantity', name='ck_invoice_items_total'),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fee_heading_id'], ['fee_headings.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoice_items_invoice_id', 'invoice_items', ['invoice_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('payment_method', sa.String(length=16), nullable=False),
        sa.Column('reference_number', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("payment_method IN ('cash','bank','upi','card','cheque')", name='ck_payment_method'),
        sa.CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'])


def downgrade():
    op.drop_index('ix_payments_invoice_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_invoice_items_invoice_id', table_name='invoice_items')
    op.drop_table('invoice_items')
    op.drop_index('ix_invoices_center_period', table_name='invoices')
    op.drop_index('ix_invoices_center_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_fee_structures_center_grade', table_name='fee_structures')
    op.drop_index('ix_fee_structures_fee_heading_id', table_name='fee_structures')
    op.drop_index('ix_fee_structures_center_id', table_name='fee_structures')
    op.drop_table('fee_structures')
    op.drop_index('ix_fee_headings_center_id', table_name='fee_headings')
    op.drop_table('fee_headings')
    op.drop_index('ix_students_center_grade_active', table_name='students')
    op.drop_index('ix_students_center_id', table_name='students')
    op.drop_table('students')
    op.drop_table('centers')

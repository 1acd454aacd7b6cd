"""add expenses

Revision ID: 8d2e4f6a1b57
Revises: 3c1f7a2b9d40
Create Date: 2025-11-04 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8d2e4f6a1b57'
down_revision: Union[str, Sequence[str], None] = '3c1f7a2b9d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('center_id', sa.Uuid(), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('description', sa.String(length=256), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('vendor', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "category IN ('salaries','rent','utilities','materials','maintenance','transport','admin','other')",
            name='ck_expense_category'
        ),
        sa.CheckConstraint('amount > 0', name='ck_expense_amount_positive'),
        sa.ForeignKeyConstraint(['center_id'], ['centers.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_center_id', 'expenses', ['center_id'])
    op.create_index('ix_expenses_center_date', 'expenses', ['center_id', 'expense_date'])


def downgrade():
    op.drop_index('ix_expenses_center_date', table_name='expenses')
    op.drop_index('ix_expenses_center_id', table_name='expenses')
    op.drop_table('expenses')

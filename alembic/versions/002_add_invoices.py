"""Add invoices table

Revision ID: 002_add_invoices
Revises: 001_initial_schema
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_add_invoices'
down_revision: Union[str, None] = '001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'invoices',
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('organisation_id', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(128), nullable=True),
        sa.Column('updated_by', sa.String(128), nullable=True),
        sa.Column('invoice_number', sa.String(32), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_email', sa.String(), nullable=True),
        sa.Column('line_items', sa.JSON(), nullable=False),
        sa.Column('subtotal_eur', sa.Float(), nullable=False),
        sa.Column('vat_eur', sa.Float(), nullable=False),
        sa.Column('total_eur', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('transaction_id', sa.String(32), nullable=True),
        sa.Column('product_id', sa.String(32), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.UniqueConstraint('organisation_id', 'invoice_number', name='uq_invoices_org_number'),
    )
    op.create_index('ix_invoices_organisation_id', 'invoices', ['organisation_id'])
    op.create_index('ix_invoices_issued_at', 'invoices', ['issued_at'])


def downgrade() -> None:
    op.drop_index('ix_invoices_issued_at', table_name='invoices')
    op.drop_index('ix_invoices_organisation_id', table_name='invoices')
    op.drop_table('invoices')

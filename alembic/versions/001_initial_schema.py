"""Initial schema - creates all tables for the Luxselle operations API

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17

"""
from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def document_columns() -> List[sa.Column]:
    return [
        sa.Column('id', sa.String(32), primary_key=True),
        sa.Column('organisation_id', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(128), nullable=True),
        sa.Column('updated_by', sa.String(128), nullable=True),
    ]


def create_document_table(name: str, *columns) -> None:
    op.create_table(name, *document_columns(), *columns)
    op.create_index(f'ix_{name}_organisation_id', name, ['organisation_id'])


def upgrade() -> None:
    create_document_table(
        'products',
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('model', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('condition', sa.String(), nullable=False),
        sa.Column('colour', sa.String(), nullable=False),
        sa.Column('cost_price_eur', sa.Float(), nullable=False),
        sa.Column('sell_price_eur', sa.Float(), nullable=False),
        sa.Column('customs_eur', sa.Float(), nullable=False),
        sa.Column('vat_eur', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
    )
    op.create_index('ix_products_brand', 'products', ['brand'])
    op.create_index('ix_products_status', 'products', ['status'])

    create_document_table(
        'buying_list_items',
        sa.Column('source_type', sa.String(16), nullable=False),
        sa.Column('supplier_id', sa.String(32), nullable=True),
        sa.Column('supplier_item_id', sa.String(32), nullable=True),
        sa.Column('evaluation_id', sa.String(32), nullable=True),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('model', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('condition', sa.String(), nullable=False),
        sa.Column('colour', sa.String(), nullable=False),
        sa.Column('target_buy_price_eur', sa.Float(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('landed_cost_snapshot', sa.JSON(), nullable=True),
    )
    op.create_index('ix_buying_list_items_supplier_id', 'buying_list_items', ['supplier_id'])
    op.create_index('ix_buying_list_items_status', 'buying_list_items', ['status'])

    create_document_table(
        'transactions',
        sa.Column('type', sa.String(16), nullable=False),
        sa.Column('product_id', sa.String(32), nullable=True),
        sa.Column('buying_list_item_id', sa.String(32), nullable=True),
        sa.Column('amount_eur', sa.Float(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
    )
    op.create_index('ix_transactions_type', 'transactions', ['type'])
    op.create_index('ix_transactions_product_id', 'transactions', ['product_id'])
    op.create_index('ix_transactions_buying_list_item_id', 'transactions', ['buying_list_item_id'])

    create_document_table(
        'activity_events',
        sa.Column('actor', sa.String(128), nullable=False),
        sa.Column('event_type', sa.String(64), nullable=False),
        sa.Column('entity_type', sa.String(64), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
    )
    op.create_index('ix_activity_events_event_type', 'activity_events', ['event_type'])
    op.create_index('ix_activity_events_entity_type', 'activity_events', ['entity_type'])
    op.create_index('ix_activity_events_entity_id', 'activity_events', ['entity_id'])

    create_document_table(
        'suppliers',
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('whatsapp_number', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('region', sa.String(16), nullable=False),
        sa.Column('item_count', sa.Integer(), nullable=False),
        sa.Column('import_template', sa.JSON(), nullable=True),
        sa.Column('source_emails', sa.JSON(), nullable=False),
    )

    create_document_table(
        'supplier_items',
        sa.Column('supplier_id', sa.String(32), nullable=False),
        sa.Column('external_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('sku', sa.String(), nullable=False),
        sa.Column('condition_rank', sa.String(), nullable=False),
        sa.Column('ask_price_usd', sa.Float(), nullable=False),
        sa.Column('ask_price_eur', sa.Float(), nullable=False),
        sa.Column('selling_price_usd', sa.Float(), nullable=True),
        sa.Column('selling_price_eur', sa.Float(), nullable=True),
        sa.Column('availability', sa.String(16), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('source_url', sa.String(), nullable=False),
        sa.Column('raw_payload', sa.JSON(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_supplier_items_supplier_id', 'supplier_items', ['supplier_id'])

    create_document_table(
        'supplier_import_records',
        sa.Column('dedupe_id', sa.String(64), nullable=False, unique=True),
        sa.Column('supplier_id', sa.String(32), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('source', sa.String(16), nullable=False),
        sa.Column('imported_count', sa.Integer(), nullable=False),
    )
    op.create_index('ix_supplier_import_records_supplier_id', 'supplier_import_records', ['supplier_id'])

    create_document_table(
        'system_jobs',
        sa.Column('job_type', sa.String(64), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('queued_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_run_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_success_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_error', sa.Text(), nullable=False),
        sa.Column('progress', sa.JSON(), nullable=True),
        sa.Column('error_count', sa.Integer(), nullable=False),
        sa.Column('retry_count', sa.Integer(), nullable=False),
        sa.Column('max_retries', sa.Integer(), nullable=False),
        sa.Column('input', sa.JSON(), nullable=True),
        sa.Column('output', sa.JSON(), nullable=True),
    )
    op.create_index('ix_system_jobs_job_type', 'system_jobs', ['job_type'])
    op.create_index('ix_system_jobs_status', 'system_jobs', ['status'])

    create_document_table(
        'sourcing_requests',
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('query_text', sa.Text(), nullable=False),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('budget', sa.Float(), nullable=False),
        sa.Column('priority', sa.String(8), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('linked_product_id', sa.String(32), nullable=True),
        sa.Column('linked_supplier_item_id', sa.String(32), nullable=True),
    )
    op.create_index('ix_sourcing_requests_status', 'sourcing_requests', ['status'])

    create_document_table(
        'evaluations',
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('model', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('condition', sa.String(), nullable=False),
        sa.Column('colour', sa.String(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('ask_price_eur', sa.Float(), nullable=True),
        sa.Column('estimated_retail_eur', sa.Float(), nullable=False),
        sa.Column('max_buy_price_eur', sa.Float(), nullable=False),
        sa.Column('history_avg_paid_eur', sa.Float(), nullable=True),
        sa.Column('comps', sa.JSON(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=False),
        sa.Column('provider', sa.String(16), nullable=False),
    )

    create_document_table(
        'org_settings',
        sa.Column('base_currency', sa.String(3), nullable=False),
        sa.Column('target_margin_pct', sa.Float(), nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=False),
        sa.Column('fx_usd_to_eur', sa.Float(), nullable=False),
        sa.Column('vat_rate_pct', sa.Float(), nullable=False),
        sa.Column('receive_sell_markup', sa.Float(), nullable=False),
    )


def downgrade() -> None:
    for table in (
        'org_settings',
        'evaluations',
        'sourcing_requests',
        'system_jobs',
        'supplier_import_records',
        'supplier_items',
        'suppliers',
        'activity_events',
        'transactions',
        'buying_list_items',
        'products',
    ):
        op.drop_table(table)

"""create invoice and shipment tables

Revision ID: 9a1f3c2e7b40
Revises:
Create Date: 2026-10-19 10:12:41.204311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9a1f3c2e7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

id_type = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'invoice',
        sa.Column('id', id_type, primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(255), nullable=False),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('details', sa.String(255), nullable=True),
        sa.Column('status', sa.String(255), nullable=False),
        sa.Column('payment_method', sa.String(255), nullable=False),
        sa.Column('payment_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('payment_amount', sa.Numeric(21, 2), nullable=False),
    )
    op.create_table(
        'shipment',
        sa.Column('id', id_type, primary_key=True, autoincrement=True),
        sa.Column('tracking_code', sa.String(255), nullable=True),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('details', sa.String(255), nullable=True),
        sa.Column('invoice_id', id_type, nullable=False),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoice.id'], name='fk_shipment__invoice_id'),
    )
    op.create_index('idx_shipment_invoice_id', 'shipment', ['invoice_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_shipment_invoice_id', table_name='shipment')
    op.drop_table('shipment')
    op.drop_table('invoice')

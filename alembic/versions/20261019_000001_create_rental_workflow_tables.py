"""Create rental workflow tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates offers, payment_transactions, rent_month_records and agreements.
The users and properties tables are owned by the listing service and must
already exist.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _party_columns():
    return [
        sa.Column('offer_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
    ]


def _party_foreign_keys(table: str):
    return [
        sa.ForeignKeyConstraint(['offer_id'], ['offers.id'], name=f'fk_{table}_offer_id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name=f'fk_{table}_property_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name=f'fk_{table}_tenant_id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name=f'fk_{table}_owner_id'),
    ]


def _party_indexes(table: str):
    for column in ('offer_id', 'property_id', 'tenant_id', 'owner_id'):
        op.create_index(f'ix_{table}_{column}', table, [column])


def upgrade() -> None:
    """Create the rental workflow tables."""
    op.create_table(
        'offers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('offer_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('joining_date_estimate', sa.String(length=100), nullable=False),
        sa.Column('offer_advance', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('offer_booking_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('needs_bike_parking', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('needs_car_parking', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tenant_type', sa.String(length=100), nullable=True),
        sa.Column('accepts_rules', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('match_percent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('action_type', sa.String(length=50), nullable=True),
        sa.Column('requested_advance_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('requested_advance_validity_days', sa.Integer(), nullable=True),
        sa.Column('proposed_meeting_time', sa.DateTime(), nullable=True),
        sa.Column('desired_joining_date', sa.Date(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'accepted', 'rejected', name='offer_status', create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('booking_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('booking_verified_at', sa.DateTime(), nullable=True),
        sa.Column('tenant_move_in_confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tenant_move_in_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_offers_property_id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_offers_owner_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_offers_tenant_id'),
    )
    op.create_index('ix_offers_property_id', 'offers', ['property_id'])
    op.create_index('ix_offers_owner_id', 'offers', ['owner_id'])
    op.create_index('ix_offers_tenant_id', 'offers', ['tenant_id'])
    op.create_index('ix_offers_status', 'offers', ['status'])
    op.create_index('ix_offers_owner_property_created', 'offers', ['owner_id', 'property_id', 'created_at'])
    op.create_index('ix_offers_tenant_property_created', 'offers', ['tenant_id', 'property_id', 'created_at'])

    op.create_table(
        'payment_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('transaction_id', sa.String(length=64), nullable=False),
        *_party_columns(),
        sa.Column(
            'payment_type',
            sa.Enum('booking', 'rent', name='payment_type', create_constraint=True),
            nullable=False,
            server_default='booking'
        ),
        sa.Column('rent_month', sa.String(length=7), nullable=True),
        sa.Column('period_key', sa.String(length=16), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=8), nullable=False),
        sa.Column(
            'status',
            sa.Enum('created', 'paid', 'failed', 'refunded', name='transaction_status', create_constraint=True),
            nullable=False,
            server_default='created'
        ),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('owner_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('owner_verified_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        *_party_foreign_keys('payment_transactions'),
        sa.UniqueConstraint(
            'offer_id', 'payment_type', 'period_key',
            name='uq_payment_transactions_offer_type_period'
        ),
    )
    op.create_index('ix_payment_transactions_transaction_id', 'payment_transactions', ['transaction_id'], unique=True)
    _party_indexes('payment_transactions')
    op.create_index('ix_payment_transactions_payment_type', 'payment_transactions', ['payment_type'])
    op.create_index('ix_payment_transactions_status', 'payment_transactions', ['status'])

    op.create_table(
        'rent_month_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_party_columns(),
        sa.Column('rent_month', sa.String(length=7), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=8), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', name='rent_record_status', create_constraint=True),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('payment_transaction_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        *_party_foreign_keys('rent_month_records'),
        sa.ForeignKeyConstraint(
            ['payment_transaction_id'],
            ['payment_transactions.id'],
            name='fk_rent_month_records_payment_transaction_id'
        ),
        sa.UniqueConstraint('offer_id', 'rent_month', name='uq_rent_month_records_offer_month'),
    )
    _party_indexes('rent_month_records')
    op.create_index(
        'ix_rent_month_records_owner_month_status', 'rent_month_records', ['owner_id', 'rent_month', 'status']
    )
    op.create_index(
        'ix_rent_month_records_tenant_month_status', 'rent_month_records', ['tenant_id', 'rent_month', 'status']
    )

    op.create_table(
        'agreements',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_party_columns(),
        sa.Column('snapshot_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('property_snapshot', sa.JSON(), nullable=True),
        sa.Column('owner_snapshot', sa.JSON(), nullable=True),
        sa.Column('tenant_snapshot', sa.JSON(), nullable=True),
        sa.Column('booking', sa.JSON(), nullable=True),
        sa.Column('rent', sa.JSON(), nullable=True),
        sa.Column('charges', sa.JSON(), nullable=True),
        sa.Column('tenant_details', sa.JSON(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('draft', 'sent', 'accepted', 'rejected', name='agreement_status', create_constraint=True),
            nullable=False,
            server_default='sent'
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        *_party_foreign_keys('agreements'),
    )
    _party_indexes('agreements')
    op.create_index('ix_agreements_status', 'agreements', ['status'])
    op.create_index('ix_agreements_offer_created', 'agreements', ['offer_id', 'created_at'])


def downgrade() -> None:
    """Drop the rental workflow tables."""
    op.drop_table('agreements')
    op.drop_table('rent_month_records')
    op.drop_table('payment_transactions')
    op.drop_table('offers')

    # Drop the enum types
    if op.get_bind().dialect.name != "postgresql":
        return
    for name in ('agreement_status', 'rent_record_status', 'transaction_status', 'payment_type', 'offer_status'):
        op.execute(f"DROP TYPE IF EXISTS {name}")

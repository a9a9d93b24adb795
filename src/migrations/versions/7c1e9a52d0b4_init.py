"""init

Revision ID: 7c1e9a52d0b4
Revises: 
Create Date: 2026-10-19 10:12:31.402118

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c1e9a52d0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # USERS
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=180), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=120), nullable=False),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.Column('wallet_balance', sa.BigInteger(), nullable=False),
        sa.Column('favorites', sa.JSON(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('wallet_balance >= 0', name='ck_users_wallet_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)

    # VEHICLES
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('owner_name', sa.String(length=120), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('image', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('base_price', sa.BigInteger(), nullable=False),
        sa.Column('suggested_starting_bid', sa.BigInteger(), nullable=False),
        sa.Column('current_price', sa.BigInteger(), nullable=False),
        sa.Column('bidding_type', sa.String(length=10), nullable=False),
        sa.Column('bidding_duration', sa.Integer(), nullable=False),
        sa.Column('bidding_end_time', sa.DateTime(), nullable=False),
        sa.Column('nearest_city', sa.String(length=120), nullable=False),
        sa.Column('location_lat', sa.Float(), nullable=True),
        sa.Column('location_lng', sa.Float(), nullable=True),
        sa.Column('year_of_manufacture', sa.String(length=10), nullable=True),
        sa.Column('mileage', sa.String(length=40), nullable=True),
        sa.Column('engine_capacity', sa.String(length=40), nullable=True),
        sa.Column('previous_owners', sa.Integer(), nullable=True),
        sa.Column('fuel_type', sa.String(length=20), nullable=True),
        sa.Column('transmission_type', sa.String(length=30), nullable=True),
        sa.Column('selling_reason', sa.Text(), nullable=True),
        sa.Column('tyre_condition', sa.Integer(), nullable=True),
        sa.Column('battery_condition', sa.Integer(), nullable=True),
        sa.Column('interior_condition', sa.Integer(), nullable=True),
        sa.Column('exterior_condition', sa.Integer(), nullable=True),
        sa.Column('negotiable', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('base_price >= 0', name='ck_vehicles_base_price'),
        sa.CheckConstraint('bidding_duration BETWEEN 1 AND 30', name='ck_vehicles_duration'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('vehicles', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_vehicles_owner_id'), ['owner_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_vehicles_bidding_end_time'), ['bidding_end_time'], unique=False)
        batch_op.create_index(batch_op.f('ix_vehicles_is_active'), ['is_active'], unique=False)

    # BIDS
    op.create_table(
        'bids',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('user_name', sa.String(length=120), nullable=False),
        sa.Column('user_email', sa.String(length=180), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('bidding_type', sa.String(length=10), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_bids_amount_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('bids', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_bids_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_bids_vehicle_id'), ['vehicle_id'], unique=False)
        batch_op.create_index('ix_bids_vehicle_user_created', ['vehicle_id', 'user_id', 'created_at'], unique=False)

    # WALLET LEDGER
    op.create_table(
        'wallet_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('balance_before', sa.BigInteger(), nullable=False),
        sa.Column('balance_after', sa.BigInteger(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('related_vehicle_id', sa.Integer(), nullable=True),
        sa.Column('related_bid_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('balance_after = balance_before + amount', name='ck_wallet_tx_snapshot'),
        sa.CheckConstraint('balance_after >= 0', name='ck_wallet_tx_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('wallet_transactions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_wallet_transactions_user_id'), ['user_id'], unique=False)
        batch_op.create_index('ix_wallet_transactions_user_created', ['user_id', 'created_at'], unique=False)


def downgrade():
    with op.batch_alter_table('wallet_transactions', schema=None) as batch_op:
        batch_op.drop_index('ix_wallet_transactions_user_created')
        batch_op.drop_index(batch_op.f('ix_wallet_transactions_user_id'))
    op.drop_table('wallet_transactions')

    with op.batch_alter_table('bids', schema=None) as batch_op:
        batch_op.drop_index('ix_bids_vehicle_user_created')
        batch_op.drop_index(batch_op.f('ix_bids_vehicle_id'))
        batch_op.drop_index(batch_op.f('ix_bids_user_id'))
    op.drop_table('bids')

    with op.batch_alter_table('vehicles', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_vehicles_is_active'))
        batch_op.drop_index(batch_op.f('ix_vehicles_bidding_end_time'))
        batch_op.drop_index(batch_op.f('ix_vehicles_owner_id'))
    op.drop_table('vehicles')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_users_email'))
    op.drop_table('users')

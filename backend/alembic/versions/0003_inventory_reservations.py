"""Room inventory, reservations and reservation room lines

Revision ID: 0003
Revises: 0002
Create Date: 2025-08-20
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '0003'
down_revision: Union[str, None] = '0002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- room_inventory ---
    op.create_table('room_inventory',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('inventory_date', sa.Date(), nullable=False),
        sa.Column('available_rooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('allocated_rooms', sa.Integer(), nullable=True),
        sa.Column('reserved_rooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('hotel_id', 'room_type_id', 'inventory_date', name='uq_room_inventory_day'),
        sa.CheckConstraint('available_rooms >= 0', name='ck_room_inventory_available'),
        sa.CheckConstraint('reserved_rooms >= 0', name='ck_room_inventory_reserved'),
        sa.CheckConstraint(
            'allocated_rooms IS NULL OR (allocated_rooms >= 0 AND allocated_rooms <= available_rooms)',
            name='ck_room_inventory_allocated',
        ),
    )
    op.create_index('idx_inventory_room_type_date', 'room_inventory', ['room_type_id', 'inventory_date'])

    # --- reservations ---
    op.create_table('reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reservation_number', sa.String(length=100), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('check_in_date', sa.Date(), nullable=False),
        sa.Column('check_out_date', sa.Date(), nullable=False),
        sa.Column('nights', sa.Integer(), nullable=False),
        sa.Column('adult_count', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('child_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('infant_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('room_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('promo_code', sa.String(length=50), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='confirmed'),
        sa.Column('guest_name', sa.String(length=200), nullable=True),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('settlement_currency', sa.String(length=3), nullable=True),
        sa.Column('exchange_rate', sa.Numeric(precision=14, scale=6), nullable=True),
        sa.Column('settlement_total', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reservation_number'),
        sa.CheckConstraint('check_out_date > check_in_date', name='ck_reservations_dates'),
    )
    op.create_index('ix_reservations_hotel_id', 'reservations', ['hotel_id'])
    op.create_index('ix_reservations_check_in_date', 'reservations', ['check_in_date'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])

    # --- reservation_room_lines ---
    op.create_table('reservation_room_lines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reservation_id', sa.Integer(), nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('room_number', sa.Integer(), nullable=False),
        sa.Column('nightly_snapshot', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('promo_code', sa.String(length=50), nullable=True),
        sa.Column('room_subtotal', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('discount_total', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('extras_total', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('line_total', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('inventory_status', sa.String(length=20), nullable=False, server_default='held'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reservation_room_lines_reservation_id', 'reservation_room_lines', ['reservation_id'])


def downgrade() -> None:
    op.drop_index('ix_reservation_room_lines_reservation_id', table_name='reservation_room_lines')
    op.drop_table('reservation_room_lines')
    op.drop_index('ix_reservations_status', table_name='reservations')
    op.drop_index('ix_reservations_check_in_date', table_name='reservations')
    op.drop_index('ix_reservations_hotel_id', table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('idx_inventory_room_type_date', table_name='room_inventory')
    op.drop_table('room_inventory')

"""Hotels, room types, seasons and season rates

Revision ID: 0001
Revises:
Create Date: 2025-08-04
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- hotels ---
    op.create_table('hotels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hotel_code', sa.String(length=50), nullable=False),
        sa.Column('hotel_name', sa.String(length=100), nullable=False),
        sa.Column('hotel_name_en', sa.String(length=100), nullable=True),
        sa.Column('country', sa.String(length=50), nullable=True),
        sa.Column('region', sa.String(length=50), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('hotel_code'),
    )

    # --- room_types ---
    op.create_table('room_types',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('room_type_code', sa.String(length=50), nullable=False),
        sa.Column('room_type_name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('max_adults', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('max_children', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_infants', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('breakfast_rate_adult', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('breakfast_rate_child', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('breakfast_rate_infant', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('extra_bed_rate', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('baby_cot_rate', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('hotel_id', 'room_type_code', name='uq_room_types_hotel_code'),
    )
    op.create_index('ix_room_types_hotel_id', 'room_types', ['hotel_id'])

    # --- seasons ---
    op.create_table('seasons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('season_name', sa.String(length=100), nullable=False),
        sa.Column('label', sa.String(length=20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('end_date >= start_date', name='ck_seasons_dates'),
        sa.CheckConstraint(
            "label IN ('low', 'shoulder', 'peak', 'super_peak')", name='ck_seasons_label'
        ),
    )
    op.create_index('ix_seasons_hotel_id', 'seasons', ['hotel_id'])
    op.create_index('idx_seasons_hotel_dates', 'seasons', ['hotel_id', 'start_date', 'end_date'])

    # --- season_rates ---
    op.create_table('season_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('season_id', sa.Integer(), nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('base_rate', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['season_id'], ['seasons.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('season_id', 'room_type_id', name='uq_season_rates_season_room'),
        sa.CheckConstraint('base_rate >= 0', name='ck_season_rates_positive'),
    )


def downgrade() -> None:
    op.drop_table('season_rates')
    op.drop_index('idx_seasons_hotel_dates', table_name='seasons')
    op.drop_index('ix_seasons_hotel_id', table_name='seasons')
    op.drop_table('seasons')
    op.drop_index('ix_room_types_hotel_id', table_name='room_types')
    op.drop_table('room_types')
    op.drop_table('hotels')

"""Promotions, promotion daily rates and benefits

Revision ID: 0002
Revises: 0001
Create Date: 2025-08-11
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- promotions ---
    op.create_table('promotions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hotel_id', sa.Integer(), nullable=False),
        sa.Column('promo_code', sa.String(length=50), nullable=False),
        sa.Column('promo_name', sa.String(length=200), nullable=False),
        sa.Column('booking_start_date', sa.Date(), nullable=False),
        sa.Column('booking_end_date', sa.Date(), nullable=False),
        sa.Column('stay_start_date', sa.Date(), nullable=False),
        sa.Column('stay_end_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('terms_and_conditions', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('hotel_id', 'promo_code', name='uq_promotions_hotel_code'),
        sa.CheckConstraint('booking_end_date >= booking_start_date', name='ck_promotions_booking_dates'),
        sa.CheckConstraint('stay_end_date >= stay_start_date', name='ck_promotions_stay_dates'),
    )
    op.create_index('ix_promotions_hotel_id', 'promotions', ['hotel_id'])

    # --- promotion_daily_rates ---
    op.create_table('promotion_daily_rates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('promotion_id', sa.Integer(), nullable=False),
        sa.Column('room_type_id', sa.Integer(), nullable=False),
        sa.Column('stay_date', sa.Date(), nullable=False),
        sa.Column('rate_per_night', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('min_nights', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_nights', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['promotion_id'], ['promotions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_type_id'], ['room_types.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('promotion_id', 'room_type_id', 'stay_date', name='uq_promo_daily_rate'),
        sa.CheckConstraint('rate_per_night >= 0', name='ck_promo_daily_rate_positive'),
        sa.CheckConstraint('min_nights >= 1', name='ck_promo_daily_rate_min_nights'),
        sa.CheckConstraint('max_nights IS NULL OR max_nights >= min_nights', name='ck_promo_daily_rate_nights_range'),
    )
    op.create_index('idx_promo_daily_rates_lookup', 'promotion_daily_rates', ['room_type_id', 'stay_date'])

    # --- promotion_benefits ---
    op.create_table('promotion_benefits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('promotion_id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=30), nullable=False),
        sa.Column('nights_required', sa.Integer(), nullable=True),
        sa.Column('free_nights', sa.Integer(), nullable=True),
        sa.Column('percent', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['promotion_id'], ['promotions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "kind IN ('free_night', 'discount_percent', 'fixed_discount')", name='ck_promo_benefit_kind'
        ),
    )
    op.create_index('ix_promotion_benefits_promotion_id', 'promotion_benefits', ['promotion_id'])


def downgrade() -> None:
    op.drop_index('ix_promotion_benefits_promotion_id', table_name='promotion_benefits')
    op.drop_table('promotion_benefits')
    op.drop_index('idx_promo_daily_rates_lookup', table_name='promotion_daily_rates')
    op.drop_table('promotion_daily_rates')
    op.drop_index('ix_promotions_hotel_id', table_name='promotions')
    op.drop_table('promotions')

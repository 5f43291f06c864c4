"""offers and applicable rooms

Revision ID: 0002_offers
Revises: 0001_hotels_rooms_bookings
Create Date: 2025-10-05
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0002_offers'
down_revision: Union[str, None] = '0001_hotels_rooms_bookings'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('offers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('short_description', sa.String(length=200), nullable=True),
        sa.Column('hotel_id', sa.Integer(), sa.ForeignKey('hotels.id'), nullable=False),
        sa.Column('discount_type', sa.String(length=16), nullable=False),
        sa.Column('discount_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('original_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('offer_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        sa.Column('used_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_stay', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_stay', sa.Integer(), nullable=True),
        sa.Column('booking_window_start_days', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('booking_window_end_days', sa.Integer(), nullable=False, server_default='365'),
        sa.Column('blackout_dates', sa.JSON(), nullable=False),
        sa.Column('target', sa.String(length=16), nullable=False, server_default='all'),
        sa.Column('promo_code', sa.String(length=64), nullable=True),
        sa.Column('terms_conditions', sa.JSON(), nullable=False),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('banner_image', sa.Text(), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('promo_code'),
    )
    op.create_index('ix_offers_hotel_id', 'offers', ['hotel_id'])
    op.create_index('ix_offers_created_at', 'offers', ['created_at'])
    op.create_index('ix_offers_hotel_active', 'offers', ['hotel_id', 'is_active'])
    op.create_index('ix_offers_window', 'offers', ['start_date', 'end_date'])

    op.create_table('offer_rooms',
        sa.Column('offer_id', sa.Integer(), sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table('offer_rooms')
    op.drop_table('offers')

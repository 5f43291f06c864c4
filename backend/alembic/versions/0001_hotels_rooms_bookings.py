"""hotels, rooms and bookings

Revision ID: 0001_hotels_rooms_bookings
Revises: 
Create Date: 2025-10-04
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_hotels_rooms_bookings'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('hotels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', sa.String(length=255), nullable=False),
        sa.Column('owner_email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=False),
        sa.Column('state', sa.String(length=120), nullable=False),
        sa.Column('country', sa.String(length=120), nullable=False, server_default='Nigeria'),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('phone', sa.String(length=40), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.String(length=200), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('cover_image', sa.Text(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('star_rating', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('category', sa.String(length=16), nullable=False, server_default='Standard'),
        sa.Column('check_in_time', sa.String(length=8), nullable=False, server_default='14:00'),
        sa.Column('check_out_time', sa.String(length=8), nullable=False, server_default='12:00'),
        sa.Column('cancellation_policy', sa.Text(), nullable=True),
        sa.Column('pets_allowed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('smoking_allowed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
    )
    op.create_index('ix_hotels_owner_id', 'hotels', ['owner_id'])
    op.create_index('ix_hotels_created_at', 'hotels', ['created_at'])
    op.create_index('ix_hotels_city_active', 'hotels', ['city', 'is_active'])
    op.create_index('ix_hotels_featured_active', 'hotels', ['featured', 'is_active'])

    op.create_table('rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hotel_id', sa.Integer(), sa.ForeignKey('hotels.id'), nullable=False),
        sa.Column('room_type', sa.String(length=120), nullable=False),
        sa.Column('room_number', sa.String(length=32), nullable=False),
        sa.Column('price_per_night', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(length=8), nullable=False, server_default='NGN'),
        sa.Column('discount_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('discount_type', sa.String(length=16), nullable=False, server_default='fixed'),
        sa.Column('discount_valid_until', sa.DateTime(), nullable=True),
        sa.Column('max_guests', sa.Integer(), nullable=False),
        sa.Column('max_adults', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('max_children', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('beds', sa.JSON(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('size_value', sa.Float(), nullable=True),
        sa.Column('size_unit', sa.String(length=8), nullable=False, server_default='sqm'),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('total_rooms', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('available_rooms', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('smoking', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('pets_allowed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
    )
    op.create_index('ix_rooms_hotel_id', 'rooms', ['hotel_id'])
    op.create_index('ix_rooms_room_type', 'rooms', ['room_type'])
    op.create_index('ix_rooms_price_per_night', 'rooms', ['price_per_night'])
    op.create_index('ix_rooms_created_at', 'rooms', ['created_at'])
    op.create_index('ix_rooms_hotel_available', 'rooms', ['hotel_id', 'is_available'])

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hotel_id', sa.Integer(), sa.ForeignKey('hotels.id'), nullable=False),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('guest_name', sa.String(length=255), nullable=False),
        sa.Column('guest_email', sa.String(length=255), nullable=False),
        sa.Column('guest_phone', sa.String(length=40), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('check_in_date', sa.DateTime(), nullable=False),
        sa.Column('check_out_date', sa.DateTime(), nullable=False),
        sa.Column('nights', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('payment_method', sa.String(length=32), nullable=True),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        *_timestamps(),
    )
    op.create_index('ix_bookings_hotel_id', 'bookings', ['hotel_id'])
    op.create_index('ix_bookings_room_id', 'bookings', ['room_id'])
    op.create_index('ix_bookings_guest_email', 'bookings', ['guest_email'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_created_at', 'bookings', ['created_at'])


def downgrade() -> None:
    op.drop_table('bookings')
    op.drop_table('rooms')
    op.drop_table('hotels')

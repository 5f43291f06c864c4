"""testimonials and newsletter subscribers

Revision ID: 0003_testimonials_newsletter
Revises: 0002_offers
Create Date: 2025-10-06
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0003_testimonials_newsletter'
down_revision: Union[str, None] = '0002_offers'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('testimonials',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_avatar', sa.Text(), nullable=True),
        sa.Column('hotel_id', sa.Integer(), sa.ForeignKey('hotels.id'), nullable=False),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=True),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('stay_date', sa.DateTime(), nullable=False),
        sa.Column('trip_type', sa.String(length=16), nullable=False, server_default='Leisure'),
        sa.Column('verified_booking', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('booking_reference', sa.String(length=64), nullable=True),
        sa.Column('hotel_response', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('responded_by', sa.String(length=255), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('helpful_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('report_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_testimonials_created_at', 'testimonials', ['created_at'])
    op.create_index('ix_testimonials_hotel_approved', 'testimonials', ['hotel_id', 'is_approved'])
    op.create_index('ix_testimonials_room_approved', 'testimonials', ['room_id', 'is_approved'])

    op.create_table('newsletter_subscribers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=True),
        sa.Column('last_name', sa.String(length=50), nullable=True),
        sa.Column('pref_promotions', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('pref_new_hotels', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('pref_travel_tips', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('pref_exclusive_offers', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('country', sa.String(length=120), nullable=False, server_default='Nigeria'),
        sa.Column('language', sa.String(length=8), nullable=False, server_default='en'),
        sa.Column('source', sa.String(length=16), nullable=False, server_default='website'),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('open_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_engagement', sa.DateTime(), nullable=True),
        sa.Column('verification_token', sa.String(length=64), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('unsubscribed_at', sa.DateTime(), nullable=True),
        sa.Column('unsubscribe_reason', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_newsletter_subscribers_email', 'newsletter_subscribers', ['email'], unique=True)
    op.create_index('ix_newsletter_subscribers_verification_token', 'newsletter_subscribers', ['verification_token'])
    op.create_index('ix_newsletter_subscribers_created_at', 'newsletter_subscribers', ['created_at'])
    op.create_index('ix_newsletter_active_verified', 'newsletter_subscribers', ['is_active', 'is_verified'])
    op.create_index('ix_newsletter_city_country', 'newsletter_subscribers', ['city', 'country'])


def downgrade() -> None:
    op.drop_table('newsletter_subscribers')
    op.drop_table('testimonials')

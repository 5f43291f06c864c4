import secrets
from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, Index, event
from sqlalchemy.orm import Mapped, mapped_column

from hotel_api.models.base import Base, TimestampMixin

SUBSCRIPTION_SOURCES = ("website", "booking", "social_media", "referral", "other")


class NewsletterSubscriber(TimestampMixin, Base):
    __tablename__ = "newsletter_subscribers"
    __table_args__ = (
        Index("ix_newsletter_active_verified", "is_active", "is_verified"),
        Index("ix_newsletter_city_country", "city", "country"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)

    pref_promotions: Mapped[bool] = mapped_column(Boolean, default=True)
    pref_new_hotels: Mapped[bool] = mapped_column(Boolean, default=True)
    pref_travel_tips: Mapped[bool] = mapped_column(Boolean, default=True)
    pref_exclusive_offers: Mapped[bool] = mapped_column(Boolean, default=True)

    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str] = mapped_column(String(120), default="Nigeria")
    language: Mapped[str] = mapped_column(String(8), default="en")
    source: Mapped[str] = mapped_column(String(16), default="website")
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    open_count: Mapped[int] = mapped_column(Integer, default=0)
    click_count: Mapped[int] = mapped_column(Integer, default=0)
    last_engagement: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    verification_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    unsubscribed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    unsubscribe_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts)

    @property
    def preferences(self) -> dict:
        return {
            "promotions": self.pref_promotions,
            "newHotels": self.pref_new_hotels,
            "travelTips": self.pref_travel_tips,
            "exclusiveOffers": self.pref_exclusive_offers,
        }


@event.listens_for(NewsletterSubscriber, "before_insert")
def _issue_verification_token(mapper, connection, target: NewsletterSubscriber) -> None:
    if not target.verification_token and not target.is_verified:
        target.verification_token = secrets.token_urlsafe(24)

import math
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Table, String, Integer, Boolean, DateTime, ForeignKey, Numeric, Text, JSON, Index, event
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from hotel_api.core.dates import utcnow
from hotel_api.models.base import Base, TimestampMixin
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room

OFFER_DISCOUNT_TYPES = ("percentage", "fixed", "package")
OFFER_TARGETS = ("all", "new_customers", "returning", "corporate", "family")

offer_rooms = Table(
    "offer_rooms",
    Base.metadata,
    Column("offer_id", ForeignKey("offers.id", ondelete="CASCADE"), primary_key=True),
    Column("room_id", ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True),
)


class Offer(TimestampMixin, Base):
    __tablename__ = "offers"
    __table_args__ = (
        Index("ix_offers_hotel_active", "hotel_id", "is_active"),
        Index("ix_offers_window", "start_date", "end_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(500))
    short_description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    hotel_id: Mapped[int] = mapped_column(ForeignKey("hotels.id"), index=True)

    discount_type: Mapped[str] = mapped_column(String(16))  # percentage | fixed | package
    discount_value: Mapped[float] = mapped_column(Numeric(12, 2))
    original_price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)
    offer_price: Mapped[float | None] = mapped_column(Numeric(12, 2), nullable=True)

    start_date: Mapped[datetime] = mapped_column(DateTime)
    end_date: Mapped[datetime] = mapped_column(DateTime)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    usage_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)  # None = unlimited
    used_count: Mapped[int] = mapped_column(Integer, default=0)
    min_stay: Mapped[int] = mapped_column(Integer, default=1)
    max_stay: Mapped[int | None] = mapped_column(Integer, nullable=True)
    booking_window_start_days: Mapped[int] = mapped_column(Integer, default=0)
    booking_window_end_days: Mapped[int] = mapped_column(Integer, default=365)
    blackout_dates: Mapped[list] = mapped_column(JSON, default=list)

    target: Mapped[str] = mapped_column(String(16), default="all")
    promo_code: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    terms_conditions: Mapped[list] = mapped_column(JSON, default=list)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    priority: Mapped[int] = mapped_column(Integer, default=0)  # higher first

    hotel: Mapped[Hotel] = relationship(lazy="joined")
    applicable_rooms: Mapped[list[Room]] = relationship(secondary=offer_rooms, lazy="selectin")

    @validates("promo_code")
    def _normalize_promo_code(self, key, value):
        if value is None:
            return None
        value = value.strip().upper()
        return value or None

    def is_currently_valid(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        return bool(
            self.is_active
            and self.start_date <= now <= self.end_date
            and (self.usage_limit is None or (self.used_count or 0) < self.usage_limit)
        )

    def days_remaining(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        return math.ceil((self.end_date - now).total_seconds() / 86400)


@event.listens_for(Offer, "before_insert")
@event.listens_for(Offer, "before_update")
def _fill_offer_price(mapper, connection, target: Offer) -> None:
    if target.original_price is None or target.offer_price is not None:
        return
    original = Decimal(str(target.original_price))
    value = Decimal(str(target.discount_value or 0))
    if target.discount_type == "percentage":
        target.offer_price = (original * (1 - value / 100)).quantize(Decimal("0.01"))
    elif target.discount_type == "fixed":
        target.offer_price = max(Decimal("0"), original - value)

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Numeric, Text, JSON, Float, Index, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.models.base import Base, TimestampMixin
from hotel_api.models.hotel import Hotel

DISCOUNT_TYPES = ("percentage", "fixed")
BED_TYPES = ("Single", "Double", "Queen", "King")


class Room(TimestampMixin, Base):
    __tablename__ = "rooms"
    __table_args__ = (Index("ix_rooms_hotel_available", "hotel_id", "is_available"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(ForeignKey("hotels.id"), index=True)
    # Unique per hotel by convention only, not enforced
    room_type: Mapped[str] = mapped_column(String(120), index=True)
    room_number: Mapped[str] = mapped_column(String(32))

    price_per_night: Mapped[float] = mapped_column(Numeric(12, 2), index=True)
    currency: Mapped[str] = mapped_column(String(8), default="NGN")
    discount_amount: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    discount_type: Mapped[str] = mapped_column(String(16), default="fixed")
    discount_valid_until: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    max_guests: Mapped[int] = mapped_column(Integer)
    max_adults: Mapped[int] = mapped_column(Integer, default=2)
    max_children: Mapped[int] = mapped_column(Integer, default=2)
    beds: Mapped[list] = mapped_column(JSON, default=list)  # [{type, count}]

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    size_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    size_unit: Mapped[str] = mapped_column(String(8), default="sqm")
    images: Mapped[list] = mapped_column(JSON, default=list)
    amenities: Mapped[list] = mapped_column(JSON, default=list)

    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    total_rooms: Mapped[int] = mapped_column(Integer, default=1)
    available_rooms: Mapped[int] = mapped_column(Integer, default=1)

    smoking: Mapped[bool] = mapped_column(Boolean, default=False)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)

    hotel: Mapped[Hotel] = relationship(lazy="joined")


@event.listens_for(Room, "before_insert")
@event.listens_for(Room, "before_update")
def _clamp_available_rooms(mapper, connection, target: Room) -> None:
    # available_rooms <= total_rooms on every write
    total = target.total_rooms if target.total_rooms is not None else 1
    if target.available_rooms is not None and target.available_rooms > total:
        target.available_rooms = total

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.models.base import Base, TimestampMixin
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed")


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hotel_id: Mapped[int] = mapped_column(ForeignKey("hotels.id"), index=True)
    room_id: Mapped[int | None] = mapped_column(ForeignKey("rooms.id", ondelete="SET NULL"), index=True, nullable=True)
    # Guest contact captured at booking time, independent of any account record
    guest_name: Mapped[str] = mapped_column(String(255))
    guest_email: Mapped[str] = mapped_column(String(255), index=True)
    guest_phone: Mapped[str] = mapped_column(String(40))
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    check_in_date: Mapped[datetime] = mapped_column(DateTime)
    check_out_date: Mapped[datetime] = mapped_column(DateTime)
    nights: Mapped[int] = mapped_column(Integer)
    total_price: Mapped[float] = mapped_column(Numeric(12, 2))
    guests: Mapped[int] = mapped_column(Integer)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    payment_method: Mapped[str | None] = mapped_column(String(32), nullable=True, default="pay-on-arrival")
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)  # pending | confirmed | cancelled | completed

    hotel: Mapped[Hotel] = relationship(lazy="joined")
    room: Mapped[Room | None] = relationship(lazy="joined")

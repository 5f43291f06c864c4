from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_api.models.base import Base, TimestampMixin
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room

TRIP_TYPES = ("Business", "Leisure", "Family", "Romantic", "Other")


class Testimonial(TimestampMixin, Base):
    __tablename__ = "testimonials"
    __table_args__ = (
        Index("ix_testimonials_hotel_approved", "hotel_id", "is_approved"),
        Index("ix_testimonials_room_approved", "room_id", "is_approved"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255))
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_avatar: Mapped[str | None] = mapped_column(Text, nullable=True)

    hotel_id: Mapped[int] = mapped_column(ForeignKey("hotels.id"))
    room_id: Mapped[int | None] = mapped_column(ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True)

    rating: Mapped[int] = mapped_column(Integer)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    comment: Mapped[str] = mapped_column(Text)
    stay_date: Mapped[datetime] = mapped_column(DateTime)
    trip_type: Mapped[str] = mapped_column(String(16), default="Leisure")

    verified_booking: Mapped[bool] = mapped_column(Boolean, default=False)
    booking_reference: Mapped[str | None] = mapped_column(String(64), nullable=True)

    hotel_response: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    responded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Only approved testimonials are shown publicly and counted in ratings
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    helpful_count: Mapped[int] = mapped_column(Integer, default=0)
    report_count: Mapped[int] = mapped_column(Integer, default=0)

    hotel: Mapped[Hotel] = relationship(lazy="joined")
    room: Mapped[Room | None] = relationship(lazy="joined")

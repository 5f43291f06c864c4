from sqlalchemy import String, Integer, Boolean, Float, Text, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from hotel_api.models.base import Base, TimestampMixin

HOTEL_CATEGORIES = ("Budget", "Standard", "Luxury", "Boutique", "Resort")


class Hotel(TimestampMixin, Base):
    __tablename__ = "hotels"
    __table_args__ = (
        Index("ix_hotels_city_active", "city", "is_active"),
        Index("ix_hotels_featured_active", "featured", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    # Opaque identifiers from the identity provider
    owner_id: Mapped[str] = mapped_column(String(255), index=True)
    owner_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    address: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(120))
    state: Mapped[str] = mapped_column(String(120))
    country: Mapped[str] = mapped_column(String(120), default="Nigeria")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    phone: Mapped[str] = mapped_column(String(40))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    images: Mapped[list] = mapped_column(JSON, default=list)  # [{url, caption, isPrimary}]
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    amenities: Mapped[list] = mapped_column(JSON, default=list)

    star_rating: Mapped[int] = mapped_column(Integer, default=3)
    category: Mapped[str] = mapped_column(String(16), default="Standard")

    check_in_time: Mapped[str] = mapped_column(String(8), default="14:00")
    check_out_time: Mapped[str] = mapped_column(String(8), default="12:00")
    cancellation_policy: Mapped[str | None] = mapped_column(Text, nullable=True)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    smoking_allowed: Mapped[bool] = mapped_column(Boolean, default=False)

    # Soft delete flips is_active; hotels are never removed
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field

from hotel_api.core.dates import UTCDateTime
from hotel_api.schemas.common import CamelModel, ImageIn
from hotel_api.schemas.hotel import HotelBrief


class Bed(CamelModel):
    type: Literal["Single", "Double", "Queen", "King"]
    count: int = Field(1, ge=1)


class DiscountIn(CamelModel):
    amount: Decimal = Field(Decimal("0"), ge=0)
    type: Literal["percentage", "fixed"] = "fixed"
    valid_until: Optional[UTCDateTime] = None


class Size(CamelModel):
    value: Optional[float] = Field(None, ge=0)
    unit: str = "sqm"


class RoomCreate(CamelModel):
    hotel: int
    room_type: str = Field(min_length=1, max_length=120)
    room_number: str = Field(min_length=1, max_length=32)
    price_per_night: Decimal = Field(ge=0)
    currency: Optional[str] = Field(None, max_length=8)
    discount: Optional[DiscountIn] = None
    max_guests: int = Field(ge=1)
    max_adults: int = Field(2, ge=0)
    max_children: int = Field(2, ge=0)
    beds: List[Bed] = []
    description: Optional[str] = Field(None, max_length=500)
    size: Optional[Size] = None
    images: List[ImageIn] = []
    amenities: List[str] = []
    is_available: bool = True
    total_rooms: int = Field(1, ge=1)
    available_rooms: int = Field(1, ge=0)
    smoking: bool = False
    pets_allowed: bool = False


class RoomUpdate(CamelModel):
    room_type: Optional[str] = Field(None, min_length=1, max_length=120)
    room_number: Optional[str] = Field(None, min_length=1, max_length=32)
    price_per_night: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=8)
    discount: Optional[DiscountIn] = None
    max_guests: Optional[int] = Field(None, ge=1)
    max_adults: Optional[int] = Field(None, ge=0)
    max_children: Optional[int] = Field(None, ge=0)
    beds: Optional[List[Bed]] = None
    description: Optional[str] = Field(None, max_length=500)
    size: Optional[Size] = None
    images: Optional[List[ImageIn]] = None
    amenities: Optional[List[str]] = None
    is_available: Optional[bool] = None
    total_rooms: Optional[int] = Field(None, ge=1)
    available_rooms: Optional[int] = Field(None, ge=0)
    smoking: Optional[bool] = None
    pets_allowed: Optional[bool] = None


class RoomAvailabilityUpdate(CamelModel):
    is_available: Optional[bool] = None
    available_rooms: Optional[int] = Field(None, ge=0)


class AvailabilityRequest(CamelModel):
    check_in: UTCDateTime
    check_out: UTCDateTime
    guests: int = Field(1, ge=1)


class DiscountOut(CamelModel):
    amount: float
    type: str
    valid_until: Optional[datetime] = None


class RoomOut(CamelModel):
    id: int
    hotel_id: int
    hotel: Optional[HotelBrief] = None
    room_type: str
    room_number: str
    price_per_night: float
    currency: str
    discount: DiscountOut
    max_guests: int
    max_adults: int
    max_children: int
    beds: List[Bed] = []
    description: Optional[str] = None
    size: Size
    images: List[ImageIn] = []
    amenities: List[str] = []
    is_available: bool
    total_rooms: int
    available_rooms: int
    smoking: bool
    pets_allowed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_room(cls, room, **extra) -> "RoomOut":
        return cls(
            id=room.id,
            hotel_id=room.hotel_id,
            hotel=HotelBrief.model_validate(room.hotel) if room.hotel else None,
            room_type=room.room_type,
            room_number=room.room_number,
            price_per_night=float(room.price_per_night),
            currency=room.currency,
            discount=DiscountOut(
                amount=float(room.discount_amount or 0),
                type=room.discount_type or "fixed",
                valid_until=room.discount_valid_until,
            ),
            max_guests=room.max_guests,
            max_adults=room.max_adults,
            max_children=room.max_children,
            beds=room.beds or [],
            description=room.description,
            size=Size(value=room.size_value, unit=room.size_unit or "sqm"),
            images=room.images or [],
            amenities=room.amenities or [],
            is_available=room.is_available,
            total_rooms=room.total_rooms,
            available_rooms=room.available_rooms,
            smoking=room.smoking,
            pets_allowed=room.pets_allowed,
            created_at=room.created_at,
            updated_at=room.updated_at,
            **extra,
        )


class RoomSummaryOut(RoomOut):
    final_price: float
    has_discount: bool
    avg_rating: float
    total_reviews: int

    @classmethod
    def from_summary(cls, summary) -> "RoomSummaryOut":
        return cls.from_room(
            summary.room,
            final_price=float(summary.final_price),
            has_discount=summary.has_discount,
            avg_rating=summary.avg_rating,
            total_reviews=summary.total_reviews,
        )


class QuoteOut(CamelModel):
    room_id: int
    hotel_id: int
    check_in: datetime
    check_out: datetime
    guests: int
    nights: int
    price_per_night: float
    final_price: float
    total_price: float
    currency: str
    has_discount: bool
    available: bool = True

    @classmethod
    def from_quote(cls, quote) -> "QuoteOut":
        return cls(
            room_id=quote.room_id,
            hotel_id=quote.hotel_id,
            check_in=quote.check_in,
            check_out=quote.check_out,
            guests=quote.guests,
            nights=quote.nights,
            price_per_night=float(quote.price_per_night),
            final_price=float(quote.final_price),
            total_price=float(quote.total_price),
            currency=quote.currency,
            has_discount=quote.has_discount,
        )

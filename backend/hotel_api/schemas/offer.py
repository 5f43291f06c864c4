from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from hotel_api.core.dates import UTCDateTime
from hotel_api.schemas.common import CamelModel
from hotel_api.schemas.hotel import HotelBrief
from hotel_api.schemas.booking import RoomBrief

OfferDiscountType = Literal["percentage", "fixed", "package"]
OfferTarget = Literal["all", "new_customers", "returning", "corporate", "family"]


class BookingWindow(CamelModel):
    start: int = Field(0, ge=0)
    end: int = Field(365, ge=0)


class OfferCreate(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    short_description: Optional[str] = Field(None, max_length=200)
    hotel: int
    applicable_rooms: List[int] = []
    discount_type: OfferDiscountType
    discount_value: Decimal = Field(ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    start_date: UTCDateTime
    end_date: UTCDateTime
    is_active: bool = True
    usage_limit: Optional[int] = Field(None, ge=0)
    min_stay: int = Field(1, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    booking_window: BookingWindow = BookingWindow()
    blackout_dates: List[UTCDateTime] = []
    target: OfferTarget = "all"
    promo_code: Optional[str] = Field(None, max_length=64)
    terms_conditions: List[str] = []
    image: Optional[str] = None
    banner_image: Optional[str] = None
    is_featured: bool = False
    priority: int = 0

    @model_validator(mode="after")
    def _check_window(self):
        if self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("discountValue cannot exceed 100 for percentage offers")
        return self


class OfferUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    short_description: Optional[str] = Field(None, max_length=200)
    applicable_rooms: Optional[List[int]] = None
    discount_type: Optional[OfferDiscountType] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    offer_price: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    is_active: Optional[bool] = None
    usage_limit: Optional[int] = Field(None, ge=0)
    min_stay: Optional[int] = Field(None, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    booking_window: Optional[BookingWindow] = None
    blackout_dates: Optional[List[UTCDateTime]] = None
    target: Optional[OfferTarget] = None
    promo_code: Optional[str] = Field(None, max_length=64)
    terms_conditions: Optional[List[str]] = None
    image: Optional[str] = None
    banner_image: Optional[str] = None
    is_featured: Optional[bool] = None
    priority: Optional[int] = None


class PromoValidateRequest(CamelModel):
    promo_code: str = Field(min_length=1, max_length=64)
    hotel_id: int


class OfferOut(CamelModel):
    id: int
    title: str
    description: str
    short_description: Optional[str] = None
    hotel_id: int
    hotel: Optional[HotelBrief] = None
    applicable_rooms: List[RoomBrief] = []
    discount_type: str
    discount_value: float
    original_price: Optional[float] = None
    offer_price: Optional[float] = None
    start_date: datetime
    end_date: datetime
    is_active: bool
    usage_limit: Optional[int] = None
    used_count: int
    min_stay: int
    max_stay: Optional[int] = None
    booking_window: BookingWindow
    blackout_dates: List[str] = []
    target: str
    promo_code: Optional[str] = None
    terms_conditions: List[str] = []
    image: Optional[str] = None
    banner_image: Optional[str] = None
    is_featured: bool
    priority: int
    is_currently_valid: bool
    days_remaining: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_offer(cls, offer, now: Optional[datetime] = None) -> "OfferOut":
        return cls(
            id=offer.id,
            title=offer.title,
            description=offer.description,
            short_description=offer.short_description,
            hotel_id=offer.hotel_id,
            hotel=HotelBrief.model_validate(offer.hotel) if offer.hotel else None,
            applicable_rooms=[RoomBrief.model_validate(r) for r in offer.applicable_rooms],
            discount_type=offer.discount_type,
            discount_value=float(offer.discount_value),
            original_price=float(offer.original_price) if offer.original_price is not None else None,
            offer_price=float(offer.offer_price) if offer.offer_price is not None else None,
            start_date=offer.start_date,
            end_date=offer.end_date,
            is_active=offer.is_active,
            usage_limit=offer.usage_limit,
            used_count=offer.used_count or 0,
            min_stay=offer.min_stay,
            max_stay=offer.max_stay,
            booking_window=BookingWindow(start=offer.booking_window_start_days, end=offer.booking_window_end_days),
            blackout_dates=offer.blackout_dates or [],
            target=offer.target,
            promo_code=offer.promo_code,
            terms_conditions=offer.terms_conditions or [],
            image=offer.image,
            banner_image=offer.banner_image,
            is_featured=offer.is_featured,
            priority=offer.priority,
            is_currently_valid=offer.is_currently_valid(now),
            days_remaining=offer.days_remaining(now),
            created_at=offer.created_at,
            updated_at=offer.updated_at,
        )

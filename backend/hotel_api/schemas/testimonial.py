from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from hotel_api.core.dates import UTCDateTime
from hotel_api.schemas.common import CamelModel
from hotel_api.schemas.hotel import HotelBrief

TripType = Literal["Business", "Leisure", "Family", "Romantic", "Other"]


class TestimonialCreate(CamelModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_avatar: Optional[str] = None
    hotel: int
    room: Optional[int] = None
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    comment: str = Field(min_length=1, max_length=1000)
    stay_date: UTCDateTime
    trip_type: TripType = "Leisure"
    booking_reference: Optional[str] = Field(None, max_length=64)


class TestimonialUpdate(CamelModel):
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    customer_avatar: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    comment: Optional[str] = Field(None, min_length=1, max_length=1000)
    stay_date: Optional[UTCDateTime] = None
    trip_type: Optional[TripType] = None
    verified_booking: Optional[bool] = None
    hotel_response: Optional[str] = Field(None, max_length=1000)
    is_approved: Optional[bool] = None
    is_featured: Optional[bool] = None


class TestimonialRoom(CamelModel):
    id: int
    room_type: str


class TestimonialOut(CamelModel):
    id: int
    customer_name: str
    customer_email: Optional[str] = None
    customer_avatar: Optional[str] = None
    hotel_id: int
    hotel: Optional[HotelBrief] = None
    room_id: Optional[int] = None
    room: Optional[TestimonialRoom] = None
    rating: int
    title: Optional[str] = None
    comment: str
    stay_date: datetime
    trip_type: str
    verified_booking: bool
    booking_reference: Optional[str] = None
    hotel_response: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None
    is_approved: bool
    is_featured: bool
    helpful_count: int
    report_count: int
    created_at: datetime
    updated_at: datetime

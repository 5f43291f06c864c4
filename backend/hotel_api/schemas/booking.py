from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import EmailStr, Field

from hotel_api.core.dates import UTCDateTime
from hotel_api.schemas.common import CamelModel
from hotel_api.schemas.hotel import HotelBrief

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingCreate(CamelModel):
    room: int
    hotel: Optional[int] = None
    guest_name: str = Field(min_length=1, max_length=120)
    guest_email: EmailStr
    guest_phone: str = Field(min_length=1, max_length=40)
    check_in_date: UTCDateTime
    check_out_date: UTCDateTime
    nights: int = Field(ge=1)
    total_price: Decimal = Field(gt=0)
    guests: int = Field(1, ge=1)
    special_requests: Optional[str] = Field(None, max_length=1000)
    payment_method: Optional[str] = Field(None, max_length=40)
    user_id: Optional[str] = None


class BookingUpdate(CamelModel):
    guest_name: Optional[str] = Field(None, min_length=1, max_length=120)
    guest_phone: Optional[str] = Field(None, min_length=1, max_length=40)
    check_in_date: Optional[UTCDateTime] = None
    check_out_date: Optional[UTCDateTime] = None
    nights: Optional[int] = Field(None, ge=1)
    total_price: Optional[Decimal] = Field(None, gt=0)
    guests: Optional[int] = Field(None, ge=1)
    special_requests: Optional[str] = Field(None, max_length=1000)
    payment_method: Optional[str] = Field(None, max_length=40)
    is_paid: Optional[bool] = None
    status: Optional[BookingStatus] = None


class PaymentUpdate(CamelModel):
    is_paid: bool
    payment_method: Optional[str] = Field(None, max_length=40)


class RoomBrief(CamelModel):
    id: int
    room_type: str
    room_number: str
    price_per_night: float
    currency: str
    max_guests: int


class BookingOut(CamelModel):
    id: int
    hotel_id: int
    room_id: Optional[int] = None
    hotel: Optional[HotelBrief] = None
    room: Optional[RoomBrief] = None
    guest_name: str
    guest_email: str
    guest_phone: str
    user_id: Optional[str] = None
    check_in_date: datetime
    check_out_date: datetime
    nights: int
    total_price: float
    guests: int
    special_requests: Optional[str] = None
    payment_method: Optional[str] = None
    is_paid: bool
    status: str
    created_at: datetime
    updated_at: datetime


class BookingPublicHotel(CamelModel):
    id: int
    name: str
    city: str
    address: str


class BookingPublicOut(CamelModel):
    """Limited view served to anyone holding the booking id."""
    id: int
    guest_name: str
    check_in_date: datetime
    check_out_date: datetime
    nights: int
    total_price: float
    status: str
    is_paid: bool
    room: Optional[RoomBrief] = None
    hotel: Optional[BookingPublicHotel] = None
    created_at: datetime

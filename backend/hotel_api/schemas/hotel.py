from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from hotel_api.schemas.common import CamelModel, ImageIn

HotelCategory = Literal["Budget", "Standard", "Luxury", "Boutique", "Resort"]
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class HotelBase(CamelModel):
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=120)
    state: str = Field(min_length=1, max_length=120)
    country: str = "Nigeria"
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: str = Field(min_length=1, max_length=40)
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    short_description: Optional[str] = Field(None, max_length=200)
    images: List[ImageIn] = []
    cover_image: Optional[str] = None
    amenities: List[str] = []
    star_rating: int = Field(3, ge=1, le=5)
    category: HotelCategory = "Standard"
    check_in_time: str = Field("14:00", pattern=TIME_PATTERN)
    check_out_time: str = Field("12:00", pattern=TIME_PATTERN)
    cancellation_policy: Optional[str] = None
    pets_allowed: bool = False
    smoking_allowed: bool = False


class HotelCreate(HotelBase):
    name: str = Field(min_length=1, max_length=100)


class HotelUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=120)
    state: Optional[str] = Field(None, min_length=1, max_length=120)
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = Field(None, min_length=1, max_length=40)
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    short_description: Optional[str] = Field(None, max_length=200)
    images: Optional[List[ImageIn]] = None
    cover_image: Optional[str] = None
    amenities: Optional[List[str]] = None
    star_rating: Optional[int] = Field(None, ge=1, le=5)
    category: Optional[HotelCategory] = None
    check_in_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    check_out_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    cancellation_policy: Optional[str] = None
    pets_allowed: Optional[bool] = None
    smoking_allowed: Optional[bool] = None
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None
    featured: Optional[bool] = None


class HotelBrief(CamelModel):
    id: int
    name: str
    owner_id: str
    address: str
    city: str
    state: str
    country: str
    phone: str
    email: Optional[str] = None
    amenities: List[str] = []
    star_rating: int
    category: str
    cover_image: Optional[str] = None
    check_in_time: str
    check_out_time: str
    cancellation_policy: Optional[str] = None
    pets_allowed: bool
    smoking_allowed: bool


class HotelOut(HotelBrief):
    owner_email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    website: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    images: List[ImageIn] = []
    is_active: bool
    is_verified: bool
    featured: bool
    created_at: datetime
    updated_at: datetime

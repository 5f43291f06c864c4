from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator, EmailStr, Field

from hotel_api.schemas.common import CamelModel

SubscriptionSource = Literal["website", "booking", "social_media", "referral", "other"]


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


SubscriberEmail = Annotated[EmailStr, BeforeValidator(_lower)]


class Preferences(CamelModel):
    promotions: bool = True
    new_hotels: bool = True
    travel_tips: bool = True
    exclusive_offers: bool = True


class PreferencesPatch(CamelModel):
    promotions: Optional[bool] = None
    new_hotels: Optional[bool] = None
    travel_tips: Optional[bool] = None
    exclusive_offers: Optional[bool] = None


class SubscribeRequest(CamelModel):
    email: SubscriberEmail
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    preferences: Optional[Preferences] = None
    source: SubscriptionSource = "website"
    city: Optional[str] = Field(None, max_length=120)
    country: Optional[str] = Field(None, max_length=120)
    language: Optional[str] = Field(None, max_length=8)


class PreferencesUpdate(CamelModel):
    email: SubscriberEmail
    preferences: Optional[PreferencesPatch] = None


class UnsubscribeRequest(CamelModel):
    email: SubscriberEmail
    reason: Optional[str] = Field(None, max_length=255)


class SubscriberOut(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    preferences: Preferences
    city: Optional[str] = None
    country: Optional[str] = None
    language: str
    source: str
    is_active: bool
    is_verified: bool
    open_count: int
    click_count: int
    last_engagement: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    unsubscribed_at: Optional[datetime] = None
    unsubscribe_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

"""Availability check and price quote for a candidate stay.

No overlap check is made against existing bookings of the same room and the
``available_rooms`` counter is only read, never consumed.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from hotel_api.core.errors import AvailabilityError, NotFoundError
from hotel_api.models.room import Room
from hotel_api.services.pricing import room_discount, effective_price, to_money

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class Quote:
    room_id: int
    hotel_id: int
    check_in: datetime
    check_out: datetime
    guests: int
    nights: int
    price_per_night: Decimal
    final_price: Decimal
    total_price: Decimal
    currency: str
    has_discount: bool


def count_nights(check_in: datetime, check_out: datetime) -> int:
    return math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_DAY)


def quote_room(room: Room, check_in: datetime, check_out: datetime, guests: int, now: Optional[datetime] = None) -> Quote:
    if guests > room.max_guests:
        raise AvailabilityError(AvailabilityError.TOO_MANY_GUESTS, f"Too many guests: room allows at most {room.max_guests}")
    if not room.is_available or (room.available_rooms or 0) <= 0:
        raise AvailabilityError(AvailabilityError.UNAVAILABLE, "Room is not available")
    if check_out <= check_in:
        raise AvailabilityError(AvailabilityError.INVALID_DATES, "Invalid date range: check-out must be after check-in")
    nights = count_nights(check_in, check_out)
    discount = room_discount(room, now)
    nightly = effective_price(room.price_per_night, discount)
    return Quote(
        room_id=room.id,
        hotel_id=room.hotel_id,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        nights=nights,
        price_per_night=to_money(room.price_per_night),
        final_price=nightly,
        total_price=to_money(nightly * nights),
        currency=room.currency,
        has_discount=discount is not None,
    )


def check_availability(db: Session, room_id: int, check_in: datetime, check_out: datetime, guests: int, now: Optional[datetime] = None) -> Quote:
    room = db.get(Room, room_id)
    if not room:
        raise NotFoundError("Room not found")
    return quote_room(room, check_in, check_out, guests, now)

from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.core.dates import utcnow
from hotel_api.models.booking import Booking
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room

EARNING_STATUSES = ("confirmed", "completed")
RECENT_BOOKINGS = 10


def owner_dashboard(db: Session, owner_id: str, now: Optional[datetime] = None) -> dict:
    """Totals over the caller's active hotels.

    occupancyRate is a rough figure: confirmed stays in progress right now over
    the number of bookable room listings.
    """
    now = now or utcnow()
    hotel_ids = list(db.scalars(select(Hotel.id).where(Hotel.owner_id == owner_id, Hotel.is_active.is_(True))))
    if not hotel_ids:
        return {
            "totalHotels": 0,
            "totalBookings": 0,
            "totalRevenue": 0.0,
            "recentBookings": [],
            "totalRooms": 0,
            "occupancyRate": 0,
        }

    in_hotels = Booking.hotel_id.in_(hotel_ids)
    total_bookings = db.scalar(
        select(func.count(Booking.id)).where(in_hotels, Booking.status.in_(EARNING_STATUSES))
    ) or 0
    revenue = db.scalar(
        select(func.coalesce(func.sum(Booking.total_price), 0)).where(
            in_hotels, Booking.status.in_(EARNING_STATUSES), Booking.is_paid.is_(True)
        )
    )
    recent = db.scalars(
        select(Booking).where(in_hotels).order_by(Booking.created_at.desc(), Booking.id.desc()).limit(RECENT_BOOKINGS)
    ).all()
    total_rooms = db.scalar(
        select(func.count(Room.id)).where(Room.hotel_id.in_(hotel_ids), Room.is_available.is_(True))
    ) or 0
    occupied = db.scalar(
        select(func.count(Booking.id)).where(
            in_hotels,
            Booking.status == "confirmed",
            Booking.check_in_date <= now,
            Booking.check_out_date >= now,
        )
    ) or 0
    occupancy = round(occupied / total_rooms * 100) if total_rooms else 0

    return {
        "totalHotels": len(hotel_ids),
        "totalBookings": total_bookings,
        "totalRevenue": float(revenue or 0),
        "recentBookings": [
            {
                "id": b.id,
                "hotel": b.hotel.name if b.hotel else None,
                "roomType": b.room.room_type if b.room else None,
                "guestName": b.guest_name,
                "guestEmail": b.guest_email,
                "checkInDate": b.check_in_date.isoformat(),
                "nights": b.nights,
                "totalPrice": float(b.total_price),
                "status": b.status,
            }
            for b in recent
        ],
        "totalRooms": total_rooms,
        "occupancyRate": occupancy,
    }

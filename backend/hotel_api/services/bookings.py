"""Booking creation and status lifecycle.

    pending   -> confirmed | cancelled | completed
    confirmed -> pending (payment reverted) | cancelled | completed
    cancelled, completed: terminal
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.core.dates import utcnow
from hotel_api.core.errors import ForbiddenError, NotFoundError, PolicyError, UnauthenticatedError, ValidationError
from hotel_api.core.security import Identity
from hotel_api.models.booking import Booking, BOOKING_STATUSES
from hotel_api.models.room import Room
from hotel_api.schemas.booking import BookingCreate
from hotel_api.services.availability import count_nights
from hotel_api.services.pricing import to_money

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("cancelled", "completed")
TRANSITIONS = {
    "pending": {"pending", "confirmed", "cancelled", "completed"},
    "confirmed": {"confirmed", "pending", "cancelled", "completed"},
    "cancelled": set(),
    "completed": set(),
}
# Columns an admin may sort the booking listing by
SORTABLE_FIELDS = {
    "createdAt": Booking.created_at,
    "updatedAt": Booking.updated_at,
    "checkInDate": Booking.check_in_date,
    "checkOutDate": Booking.check_out_date,
    "totalPrice": Booking.total_price,
    "status": Booking.status,
    "guestName": Booking.guest_name,
    "guestEmail": Booking.guest_email,
    "nights": Booking.nights,
}
IMMUTABLE_FIELDS = ("hotel_id", "room_id", "guest_email", "id")


def transition(booking: Booking, target: str) -> None:
    if target not in BOOKING_STATUSES:
        raise ValidationError.from_fields([f"status: must be one of {', '.join(BOOKING_STATUSES)}"])
    if target not in TRANSITIONS.get(booking.status, set()):
        raise PolicyError(f"Booking is {booking.status} and cannot become {target}")
    booking.status = target


def get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def require_email(identity: Identity) -> str:
    if not identity.email:
        raise UnauthenticatedError("Verified email address required")
    return identity.email


def create_booking(db: Session, payload: BookingCreate, identity: Optional[Identity] = None) -> Booking:
    room = db.get(Room, payload.room)
    if not room:
        raise NotFoundError("Room not found")
    if not room.hotel or not room.hotel.is_active:
        raise NotFoundError("Hotel not found")

    errors = []
    if payload.hotel is not None and payload.hotel != room.hotel_id:
        errors.append("hotel: does not match the room's hotel")
    if payload.check_out_date <= payload.check_in_date:
        errors.append("checkOutDate: must be after checkInDate")
    elif payload.nights != count_nights(payload.check_in_date, payload.check_out_date):
        errors.append("nights: must equal the number of nights between checkInDate and checkOutDate")
    if errors:
        raise ValidationError.from_fields(errors)

    booking = Booking(
        hotel_id=room.hotel_id,
        room_id=room.id,
        guest_name=payload.guest_name.strip(),
        guest_email=payload.guest_email.strip(),
        guest_phone=payload.guest_phone.strip(),
        user_id=payload.user_id or (identity.user_id if identity else None),
        check_in_date=payload.check_in_date,
        check_out_date=payload.check_out_date,
        nights=payload.nights,
        total_price=to_money(payload.total_price),
        guests=payload.guests,
        special_requests=(payload.special_requests or "").strip(),
        payment_method=payload.payment_method or "pay-on-arrival",
        is_paid=False,
        status="pending",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created for room %s (%s nights)", booking.id, room.id, booking.nights)
    return booking


def cancel_booking(db: Session, booking_id: int, identity: Identity, now: Optional[datetime] = None, notice_hours: int = 24) -> Booking:
    booking = get_booking(db, booking_id)
    email = require_email(identity)
    if booking.guest_email.lower() != email.lower():
        raise ForbiddenError("Not authorized to cancel this booking")
    if booking.status in TERMINAL_STATUSES:
        raise PolicyError(f"Booking is already {booking.status}")
    now = now or utcnow()
    if booking.check_in_date - now <= timedelta(hours=notice_hours):
        raise PolicyError(f"Bookings can only be cancelled at least {notice_hours} hours before check-in")
    transition(booking, "cancelled")
    db.commit()
    logger.info("Booking %s cancelled by guest", booking.id)
    return booking


def update_payment_status(db: Session, booking_id: int, is_paid: bool, payment_method: Optional[str] = None) -> Booking:
    booking = get_booking(db, booking_id)
    transition(booking, "confirmed" if is_paid else "pending")
    booking.is_paid = is_paid
    if payment_method:
        booking.payment_method = payment_method
    db.commit()
    logger.info("Booking %s payment set to %s", booking.id, "paid" if is_paid else "unpaid")
    return booking


def update_booking(db: Session, booking_id: int, changes: dict) -> Booking:
    booking = get_booking(db, booking_id)
    for key in IMMUTABLE_FIELDS:
        changes.pop(key, None)
    status = changes.pop("status", None)
    is_paid = changes.pop("is_paid", None)
    nights = changes.pop("nights", None)

    check_in = changes.get("check_in_date", booking.check_in_date)
    check_out = changes.get("check_out_date", booking.check_out_date)
    if check_out <= check_in:
        raise ValidationError.from_fields(["checkOutDate: must be after checkInDate"])
    span = count_nights(check_in, check_out)
    if nights is not None and nights != span:
        raise ValidationError.from_fields(["nights: must equal the number of nights between checkInDate and checkOutDate"])

    # payment drives status the same way as PATCH /payment; an explicit status applies after it
    try:
        if is_paid is not None:
            transition(booking, "confirmed" if is_paid else "pending")
            booking.is_paid = is_paid
        if status is not None and status != booking.status:
            transition(booking, status)
    except (PolicyError, ValidationError):
        db.rollback()
        raise
    for key, value in changes.items():
        setattr(booking, key, value)
    booking.nights = span
    db.commit()
    return booking


def delete_booking(db: Session, booking_id: int) -> None:
    booking = get_booking(db, booking_id)
    db.delete(booking)
    db.commit()


def list_bookings(
    db: Session,
    page: int,
    limit: int,
    status: Optional[str] = None,
    guest_email: Optional[str] = None,
    hotel_id: Optional[int] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[Booking], int]:
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError.from_fields([f"sortBy: must be one of {', '.join(SORTABLE_FIELDS)}"])
    conds = []
    if status:
        conds.append(Booking.status == status)
    if guest_email:
        conds.append(func.lower(Booking.guest_email) == guest_email.lower())
    if hotel_id is not None:
        conds.append(Booking.hotel_id == hotel_id)
    total = db.scalar(select(func.count(Booking.id)).where(*conds)) or 0
    col = SORTABLE_FIELDS[sort_by]
    order = col.asc() if sort_order == "asc" else col.desc()
    items = db.scalars(
        select(Booking).where(*conds).order_by(order, Booking.id.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return list(items), total


def booking_stats(db: Session) -> dict:
    by_status = dict(
        db.execute(select(Booking.status, func.count(Booking.id)).group_by(Booking.status)).all()
    )
    total_revenue = db.scalar(
        select(func.coalesce(func.sum(Booking.total_price), 0)).where(Booking.is_paid.is_(True))
    )
    # Monthly revenue grouped Python side to stay DB agnostic (no portable month extraction)
    monthly: dict[tuple[int, int], dict] = {}
    for created_at, price in db.execute(
        select(Booking.created_at, Booking.total_price).where(Booking.is_paid.is_(True))
    ).all():
        key = (created_at.year, created_at.month)
        entry = monthly.setdefault(key, {"year": key[0], "month": key[1], "revenue": 0.0, "bookings": 0})
        entry["revenue"] += float(price or 0)
        entry["bookings"] += 1
    revenue_by_month = [monthly[k] for k in sorted(monthly, reverse=True)[:12]]
    return {
        "total": sum(by_status.values()),
        "byStatus": {s: by_status.get(s, 0) for s in BOOKING_STATUSES},
        "totalRevenue": float(total_revenue or 0),
        "revenueByMonth": revenue_by_month,
    }

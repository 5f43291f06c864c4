from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity, get_optional_identity, get_settings, require_admin
from hotel_api.core.config import Settings
from hotel_api.core.errors import ForbiddenError
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.schemas.booking import BookingCreate, BookingOut, BookingPublicOut, BookingUpdate, PaymentUpdate
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.services import bookings as booking_service
from hotel_api.services.room_search import clamp_paging, page_count

router = APIRouter()


def _listing(items, total: int, page: int, limit: int) -> dict:
    return envelope(
        data=[BookingOut.model_validate(b) for b in items],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    booking = booking_service.create_booking(db, payload, identity)
    return envelope(data=BookingOut.model_validate(booking), message="Booking created successfully")


@router.get("/public/{booking_id}")
def public_booking(booking_id: int, db: Session = Depends(get_db)):
    booking = booking_service.get_booking(db, booking_id)
    return envelope(data=BookingPublicOut.model_validate(booking))


@router.get("/my-bookings")
def my_bookings(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    status_: str | None = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(10),
):
    email = booking_service.require_email(identity)
    page, limit = clamp_paging(page, limit)
    items, total = booking_service.list_bookings(db, page, limit, status=status_, guest_email=email)
    return _listing(items, total, page, limit)


@router.get("/stats/dashboard", dependencies=[Depends(require_admin)])
def booking_stats(db: Session = Depends(get_db)):
    return envelope(data=booking_service.booking_stats(db))


@router.get("/guest/{email}", dependencies=[Depends(require_admin)])
def bookings_by_guest(
    email: str,
    db: Session = Depends(get_db),
    status_: str | None = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    items, total = booking_service.list_bookings(db, page, limit, status=status_, guest_email=email)
    return _listing(items, total, page, limit)


@router.get("", dependencies=[Depends(require_admin)])
def list_bookings(
    db: Session = Depends(get_db),
    status_: str | None = Query(None, alias="status"),
    guest_email: str | None = Query(None, alias="guestEmail"),
    hotel_id: int | None = Query(None, alias="hotelId"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    items, total = booking_service.list_bookings(
        db, page, limit, status=status_, guest_email=guest_email, hotel_id=hotel_id, sort_by=sort_by, sort_order=sort_order
    )
    return _listing(items, total, page, limit)


@router.get("/{booking_id}")
def get_booking(booking_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    booking = booking_service.get_booking(db, booking_id)
    email = booking_service.require_email(identity)
    if booking.guest_email.lower() != email.lower():
        raise ForbiddenError("Not authorized to view this booking")
    return envelope(data=BookingOut.model_validate(booking))


@router.patch("/{booking_id}/cancel")
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    settings: Settings = Depends(get_settings),
):
    booking = booking_service.cancel_booking(db, booking_id, identity, notice_hours=settings.cancellation_notice_hours)
    return envelope(data=BookingOut.model_validate(booking), message="Booking cancelled successfully")


@router.put("/{booking_id}", dependencies=[Depends(require_admin)])
def update_booking(booking_id: int, payload: BookingUpdate, db: Session = Depends(get_db)):
    booking = booking_service.update_booking(db, booking_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    return envelope(data=BookingOut.model_validate(booking), message="Booking updated successfully")


@router.patch("/{booking_id}/payment", dependencies=[Depends(require_admin)])
def update_payment(booking_id: int, payload: PaymentUpdate, db: Session = Depends(get_db)):
    booking = booking_service.update_payment_status(db, booking_id, payload.is_paid, payload.payment_method)
    return envelope(data=BookingOut.model_validate(booking), message="Payment status updated successfully")


@router.delete("/{booking_id}", dependencies=[Depends(require_admin)])
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return envelope(message="Booking deleted successfully")

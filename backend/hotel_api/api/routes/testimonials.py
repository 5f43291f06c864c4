import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity, get_optional_identity
from hotel_api.core.dates import utcnow
from hotel_api.core.errors import NotFoundError, ValidationError
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.models.booking import Booking
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room
from hotel_api.models.testimonial import Testimonial
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.schemas.testimonial import TestimonialCreate, TestimonialOut, TestimonialUpdate
from hotel_api.services.ownership import assert_owner
from hotel_api.services.room_search import clamp_paging, page_count

logger = logging.getLogger(__name__)

router = APIRouter()

VERIFYING_STATUSES = ("confirmed", "completed")


def _get_testimonial(db: Session, testimonial_id: int) -> Testimonial:
    testimonial = db.get(Testimonial, testimonial_id)
    if not testimonial:
        raise NotFoundError("Testimonial not found")
    return testimonial


def _owned_testimonial(db: Session, testimonial_id: int, identity: Identity, message: str) -> Testimonial:
    testimonial = _get_testimonial(db, testimonial_id)
    assert_owner(testimonial.hotel.owner_id if testimonial.hotel else None, identity.user_id, message)
    return testimonial


def _is_verified_stay(db: Session, hotel_id: int, email: str | None, reference: str | None) -> bool:
    """A review counts as verified when its booking reference is a real stay of the same guest at that hotel."""
    if not email or not reference or not reference.strip().isdigit():
        return False
    booking = db.get(Booking, int(reference.strip()))
    return bool(
        booking
        and booking.hotel_id == hotel_id
        and booking.status in VERIFYING_STATUSES
        and booking.guest_email.lower() == email.lower()
    )


@router.get("")
def list_testimonials(
    db: Session = Depends(get_db),
    hotel_id: int | None = Query(None, alias="hotelId"),
    min_rating: int | None = Query(None, alias="minRating", ge=1, le=5),
    featured: bool | None = None,
    approved: bool = True,
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    conds = [Testimonial.is_approved.is_(approved)]
    if hotel_id is not None:
        conds.append(Testimonial.hotel_id == hotel_id)
    if min_rating is not None:
        conds.append(Testimonial.rating >= min_rating)
    if featured is not None:
        conds.append(Testimonial.is_featured.is_(featured))
    total = db.scalar(select(func.count(Testimonial.id)).where(*conds)) or 0
    items = db.scalars(
        select(Testimonial)
        .where(*conds)
        .order_by(Testimonial.is_featured.desc(), Testimonial.created_at.desc(), Testimonial.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return envelope(
        data=[TestimonialOut.model_validate(t) for t in items],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/hotel/{hotel_id}")
def hotel_testimonials(hotel_id: int, db: Session = Depends(get_db)):
    conds = [Testimonial.hotel_id == hotel_id, Testimonial.is_approved.is_(True)]
    items = db.scalars(
        select(Testimonial).where(*conds).order_by(Testimonial.created_at.desc(), Testimonial.id.desc())
    ).all()
    average = db.scalar(select(func.avg(Testimonial.rating)).where(*conds))
    return envelope(
        data=[TestimonialOut.model_validate(t) for t in items],
        count=len(items),
        averageRating=round(float(average or 0), 2),
    )


@router.get("/{testimonial_id}")
def get_testimonial(testimonial_id: int, db: Session = Depends(get_db)):
    return envelope(data=TestimonialOut.model_validate(_get_testimonial(db, testimonial_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_testimonial(
    payload: TestimonialCreate,
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    hotel = db.scalar(select(Hotel).where(Hotel.id == payload.hotel, Hotel.is_active.is_(True)))
    if not hotel:
        raise NotFoundError("Hotel not found")
    if payload.room is not None:
        room = db.get(Room, payload.room)
        if not room or room.hotel_id != hotel.id:
            raise ValidationError.from_fields(["room: must be a room of the reviewed hotel"])
    # An authenticated reviewer is linked by their verified email
    email = (identity.email if identity and identity.email else None) or payload.customer_email
    testimonial = Testimonial(
        **payload.model_dump(exclude={"hotel", "room", "customer_email"}),
        hotel_id=hotel.id,
        room_id=payload.room,
        customer_email=email,
        verified_booking=_is_verified_stay(db, hotel.id, email, payload.booking_reference),
    )
    db.add(testimonial)
    db.commit()
    db.refresh(testimonial)
    logger.info("Testimonial %s submitted for hotel %s (awaiting approval)", testimonial.id, hotel.id)
    return envelope(data=TestimonialOut.model_validate(testimonial), message="Thank you! Your review will appear once approved")


@router.post("/{testimonial_id}/helpful")
def mark_helpful(testimonial_id: int, db: Session = Depends(get_db)):
    testimonial = _get_testimonial(db, testimonial_id)
    testimonial.helpful_count = (testimonial.helpful_count or 0) + 1
    db.commit()
    return envelope(data=TestimonialOut.model_validate(testimonial))


@router.put("/{testimonial_id}")
def update_testimonial(
    testimonial_id: int,
    payload: TestimonialUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    testimonial = _owned_testimonial(db, testimonial_id, identity, "Not authorized to update this testimonial")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "hotel_response" in changes:
        testimonial.responded_at = utcnow()
        testimonial.responded_by = identity.email or identity.user_id
    for key, value in changes.items():
        setattr(testimonial, key, value)
    db.commit()
    db.refresh(testimonial)
    return envelope(data=TestimonialOut.model_validate(testimonial))


@router.delete("/{testimonial_id}")
def delete_testimonial(testimonial_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    testimonial = _owned_testimonial(db, testimonial_id, identity, "Not authorized to delete this testimonial")
    db.delete(testimonial)
    db.commit()
    return envelope(message="Testimonial deleted successfully")


@router.patch("/{testimonial_id}/approve")
def approve_testimonial(testimonial_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    testimonial = _owned_testimonial(db, testimonial_id, identity, "Not authorized to update this testimonial")
    testimonial.is_approved = True
    db.commit()
    db.refresh(testimonial)
    return envelope(data=TestimonialOut.model_validate(testimonial), message="Testimonial approved successfully")


@router.patch("/{testimonial_id}/feature")
def feature_testimonial(testimonial_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    testimonial = _owned_testimonial(db, testimonial_id, identity, "Not authorized to update this testimonial")
    testimonial.is_featured = not testimonial.is_featured
    db.commit()
    db.refresh(testimonial)
    state = "featured" if testimonial.is_featured else "unfeatured"
    return envelope(data=TestimonialOut.model_validate(testimonial), message=f"Testimonial {state} successfully")

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity
from hotel_api.core.dates import utcnow
from hotel_api.core.errors import NotFoundError, ValidationError
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.models.hotel import Hotel
from hotel_api.models.offer import Offer
from hotel_api.models.room import Room
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.schemas.offer import OfferCreate, OfferOut, OfferUpdate, PromoValidateRequest
from hotel_api.services.ownership import assert_owner
from hotel_api.services.room_search import clamp_paging, page_count

logger = logging.getLogger(__name__)

router = APIRouter()

FEATURED_LIMIT = 8
# Changing any of these invalidates a previously computed offer price
PRICE_FIELDS = ("discount_type", "discount_value", "original_price")


def _get_offer(db: Session, offer_id: int) -> Offer:
    offer = db.get(Offer, offer_id)
    if not offer:
        raise NotFoundError("Offer not found")
    return offer


def _owned_offer(db: Session, offer_id: int, identity: Identity, message: str) -> Offer:
    offer = _get_offer(db, offer_id)
    assert_owner(offer.hotel.owner_id if offer.hotel else None, identity.user_id, message)
    return offer


def _rooms_of_hotel(db: Session, hotel_id: int, room_ids: list[int]) -> list[Room]:
    if not room_ids:
        return []
    rooms = db.scalars(select(Room).where(Room.id.in_(room_ids), Room.hotel_id == hotel_id)).all()
    if len(rooms) != len(set(room_ids)):
        raise ValidationError.from_fields(["applicableRooms: every room must belong to the offer's hotel"])
    return list(rooms)


def _check_promo_code(db: Session, code: str | None, offer_id: int | None = None) -> None:
    if not code or not code.strip():
        return
    cond = [Offer.promo_code == code.strip().upper()]
    if offer_id is not None:
        cond.append(Offer.id != offer_id)
    if db.scalar(select(Offer.id).where(*cond)):
        raise ValidationError.from_fields(["promoCode: already in use"])


def _offer_columns(data: dict) -> dict:
    if "booking_window" in data:
        window = data.pop("booking_window") or {}
        data["booking_window_start_days"] = window.get("start", 0)
        data["booking_window_end_days"] = window.get("end", 365)
    if "blackout_dates" in data:
        data["blackout_dates"] = [d.isoformat() for d in data["blackout_dates"] or []]
    return data


def _active_window(now):
    return [Offer.is_active.is_(True), Offer.start_date <= now, Offer.end_date >= now]


@router.get("")
def list_offers(
    db: Session = Depends(get_db),
    hotel_id: int | None = Query(None, alias="hotelId"),
    active: bool = True,
    featured: bool | None = None,
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    now = utcnow()
    conds = _active_window(now) if active else [Offer.is_active.is_(False)]
    if hotel_id is not None:
        conds.append(Offer.hotel_id == hotel_id)
    if featured is not None:
        conds.append(Offer.is_featured.is_(featured))
    total = db.scalar(select(func.count(Offer.id)).where(*conds)) or 0
    offers = db.scalars(
        select(Offer)
        .where(*conds)
        .order_by(Offer.priority.desc(), Offer.is_featured.desc(), Offer.created_at.desc(), Offer.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return envelope(
        data=[OfferOut.from_offer(o, now) for o in offers],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/featured")
def featured_offers(db: Session = Depends(get_db)):
    now = utcnow()
    offers = db.scalars(
        select(Offer)
        .where(*_active_window(now), Offer.is_featured.is_(True))
        .order_by(Offer.priority.desc(), Offer.discount_value.desc(), Offer.id.asc())
        .limit(FEATURED_LIMIT)
    ).all()
    return envelope(data=[OfferOut.from_offer(o, now) for o in offers], count=len(offers))


@router.post("/validate-promo")
def validate_promo(payload: PromoValidateRequest, db: Session = Depends(get_db)):
    now = utcnow()
    offer = db.scalar(
        select(Offer).where(
            Offer.promo_code == payload.promo_code.strip().upper(),
            Offer.hotel_id == payload.hotel_id,
            *_active_window(now),
            or_(Offer.usage_limit.is_(None), Offer.used_count < Offer.usage_limit),
        )
    )
    if not offer:
        raise NotFoundError("Invalid or expired promo code")
    return envelope(data=OfferOut.from_offer(offer, now))


@router.get("/{offer_id}")
def get_offer(offer_id: int, db: Session = Depends(get_db)):
    return envelope(data=OfferOut.from_offer(_get_offer(db, offer_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_offer(payload: OfferCreate, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    hotel = db.scalar(select(Hotel).where(Hotel.id == payload.hotel, Hotel.is_active.is_(True)))
    if not hotel:
        raise NotFoundError("Hotel not found")
    assert_owner(hotel.owner_id, identity.user_id, "Not authorized to create offers for this hotel")
    _check_promo_code(db, payload.promo_code)
    data = _offer_columns(payload.model_dump(exclude={"hotel", "applicable_rooms"}))
    offer = Offer(**data, hotel_id=hotel.id)
    offer.applicable_rooms = _rooms_of_hotel(db, hotel.id, payload.applicable_rooms)
    db.add(offer)
    db.commit()
    db.refresh(offer)
    logger.info("Offer %s created for hotel %s", offer.id, hotel.id)
    return envelope(data=OfferOut.from_offer(offer), message="Offer created successfully")


@router.put("/{offer_id}")
def update_offer(offer_id: int, payload: OfferUpdate, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    offer = _owned_offer(db, offer_id, identity, "Not authorized to update this offer")
    changes = payload.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k in ("usage_limit", "max_stay", "promo_code")}
    if "promo_code" in changes:
        _check_promo_code(db, changes["promo_code"], offer.id)
    if "applicable_rooms" in changes:
        offer.applicable_rooms = _rooms_of_hotel(db, offer.hotel_id, changes.pop("applicable_rooms"))
    if any(k in changes for k in PRICE_FIELDS) and "offer_price" not in changes:
        changes["offer_price"] = None
    for key, value in _offer_columns(changes).items():
        setattr(offer, key, value)
    if offer.end_date <= offer.start_date:
        db.rollback()
        raise ValidationError.from_fields(["endDate: must be after startDate"])
    db.commit()
    db.refresh(offer)
    return envelope(data=OfferOut.from_offer(offer))


@router.delete("/{offer_id}")
def delete_offer(offer_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    offer = _owned_offer(db, offer_id, identity, "Not authorized to delete this offer")
    db.delete(offer)
    db.commit()
    return envelope(message="Offer deleted successfully")


@router.patch("/{offer_id}/toggle-active")
def toggle_offer(offer_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    offer = _owned_offer(db, offer_id, identity, "Not authorized to update this offer")
    offer.is_active = not offer.is_active
    db.commit()
    db.refresh(offer)
    state = "activated" if offer.is_active else "deactivated"
    return envelope(data=OfferOut.from_offer(offer), message=f"Offer {state} successfully")

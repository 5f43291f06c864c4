import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity
from hotel_api.core.errors import NotFoundError
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.schemas.hotel import HotelCreate, HotelOut, HotelUpdate
from hotel_api.schemas.room import RoomOut
from hotel_api.services.ownership import assert_owner
from hotel_api.services.room_search import clamp_paging, ids_with_amenities, page_count, split_amenities

logger = logging.getLogger(__name__)

router = APIRouter()

FEATURED_LIMIT = 6


def _get_hotel(db: Session, hotel_id: int) -> Hotel:
    hotel = db.get(Hotel, hotel_id)
    if not hotel:
        raise NotFoundError("Hotel not found")
    return hotel


@router.get("")
def list_hotels(
    db: Session = Depends(get_db),
    city: str | None = None,
    state: str | None = None,
    min_rating: int | None = Query(None, alias="minRating", ge=1, le=5),
    category: str | None = None,
    amenities: str | None = Query(None, description="Comma separated; a hotel matching any of them is returned"),
    featured: bool | None = None,
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    conds = [Hotel.is_active.is_(True)]
    if city:
        conds.append(Hotel.city.icontains(city.strip(), autoescape=True))
    if state:
        conds.append(Hotel.state.icontains(state.strip(), autoescape=True))
    if min_rating is not None:
        conds.append(Hotel.star_rating >= min_rating)
    if category:
        conds.append(Hotel.category == category)
    if featured is not None:
        conds.append(Hotel.featured.is_(featured))
    wanted = split_amenities(amenities)
    if wanted:
        conds.append(Hotel.id.in_(ids_with_amenities(db, Hotel, list(conds), wanted, match_all=False)))

    total = db.scalar(select(func.count(Hotel.id)).where(*conds)) or 0
    hotels = db.scalars(
        select(Hotel)
        .where(*conds)
        .order_by(Hotel.featured.desc(), Hotel.created_at.desc(), Hotel.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return envelope(
        data=[HotelOut.model_validate(h) for h in hotels],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/featured/list")
def featured_hotels(db: Session = Depends(get_db)):
    hotels = db.scalars(
        select(Hotel)
        .where(Hotel.is_active.is_(True), Hotel.featured.is_(True))
        .order_by(Hotel.created_at.desc(), Hotel.id.desc())
        .limit(FEATURED_LIMIT)
    ).all()
    return envelope(data=[HotelOut.model_validate(h) for h in hotels], count=len(hotels))


@router.get("/owner/my-hotels")
def my_hotels(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    cond = Hotel.owner_id == identity.user_id
    total = db.scalar(select(func.count(Hotel.id)).where(cond)) or 0
    hotels = db.scalars(
        select(Hotel).where(cond).order_by(Hotel.created_at.desc(), Hotel.id.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return envelope(
        data=[HotelOut.model_validate(h) for h in hotels],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/{hotel_id}")
def get_hotel(hotel_id: int, db: Session = Depends(get_db)):
    hotel = db.get(Hotel, hotel_id)
    if not hotel or not hotel.is_active:
        raise NotFoundError("Hotel not found")
    rooms = db.scalars(
        select(Room).where(Room.hotel_id == hotel.id, Room.is_available.is_(True)).order_by(Room.id)
    ).all()
    return envelope(data={"hotel": HotelOut.model_validate(hotel), "rooms": [RoomOut.from_room(r) for r in rooms]})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_hotel(payload: HotelCreate, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    hotel = Hotel(**payload.model_dump(), owner_id=identity.user_id, owner_email=identity.email)
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    logger.info("Hotel %s created by %s", hotel.id, identity.user_id)
    return envelope(data=HotelOut.model_validate(hotel), message="Hotel created successfully")


@router.put("/{hotel_id}")
def update_hotel(hotel_id: int, payload: HotelUpdate, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    hotel = _get_hotel(db, hotel_id)
    assert_owner(hotel.owner_id, identity.user_id, "Not authorized to update this hotel")
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(hotel, key, value)
    db.commit()
    db.refresh(hotel)
    return envelope(data=HotelOut.model_validate(hotel))


@router.delete("/{hotel_id}")
def delete_hotel(hotel_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    hotel = _get_hotel(db, hotel_id)
    assert_owner(hotel.owner_id, identity.user_id, "Not authorized to delete this hotel")
    # Soft delete; rooms, bookings and reviews keep their reference
    hotel.is_active = False
    db.commit()
    logger.info("Hotel %s deactivated by %s", hotel.id, identity.user_id)
    return envelope(message="Hotel deleted successfully")

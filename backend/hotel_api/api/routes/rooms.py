import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity, get_settings
from hotel_api.core.config import Settings
from hotel_api.core.errors import NotFoundError
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.schemas.room import (
    AvailabilityRequest,
    QuoteOut,
    RoomAvailabilityUpdate,
    RoomCreate,
    RoomOut,
    RoomSummaryOut,
    RoomUpdate,
)
from hotel_api.services.availability import check_availability
from hotel_api.services.ownership import assert_owner
from hotel_api.services.room_search import (
    RoomFilter,
    SearchPage,
    clamp_paging,
    page_count,
    room_summary,
    search_hotel_rooms,
    search_rooms,
    split_amenities,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _room_columns(data: dict) -> dict:
    """Flatten the nested wire shape (discount, size) onto Room columns."""
    if "hotel" in data:
        data["hotel_id"] = data.pop("hotel")
    if "discount" in data:
        discount = data.pop("discount") or {}
        data["discount_amount"] = discount.get("amount", 0)
        data["discount_type"] = discount.get("type", "fixed")
        data["discount_valid_until"] = discount.get("valid_until")
    if "size" in data:
        size = data.pop("size") or {}
        data["size_value"] = size.get("value")
        data["size_unit"] = size.get("unit", "sqm")
    return data


def _page_body(result: SearchPage) -> dict:
    return envelope(
        data=[RoomSummaryOut.from_summary(s) for s in result.items],
        pagination=Pagination(page=result.page, limit=result.limit, total=result.total, pages=result.pages),
    )


def _owned_room(db: Session, room_id: int, identity: Identity, message: str) -> Room:
    room = db.get(Room, room_id)
    if not room:
        raise NotFoundError("Room not found")
    assert_owner(room.hotel.owner_id if room.hotel else None, identity.user_id, message)
    return room


@router.get("")
def list_rooms(
    db: Session = Depends(get_db),
    hotel_id: int | None = Query(None, alias="hotelId"),
    city: str | None = None,
    room_type: str | None = Query(None, alias="roomType"),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    amenities: str | None = Query(None, description="Comma separated; rooms must carry all of them"),
    guests: int | None = Query(None, ge=1),
    sort: str = "newest",
    page: int = Query(1),
    limit: int = Query(10),
):
    filt = RoomFilter(
        hotel_id=hotel_id,
        city=city,
        room_type=room_type,
        min_price=min_price,
        max_price=max_price,
        amenities=split_amenities(amenities),
        guests=guests,
    )
    return _page_body(search_rooms(db, filt, sort=sort, page=page, limit=limit))


@router.get("/hotel/{hotel_id}")
def list_hotel_rooms(
    hotel_id: int,
    db: Session = Depends(get_db),
    room_type: str | None = Query(None, alias="roomType"),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    amenities: str | None = None,
    guests: int | None = Query(None, ge=1),
    sort: str = "newest",
    page: int = Query(1),
    limit: int = Query(10),
):
    filt = RoomFilter(
        room_type=room_type,
        min_price=min_price,
        max_price=max_price,
        amenities=split_amenities(amenities),
        guests=guests,
    )
    return _page_body(search_hotel_rooms(db, hotel_id, filt, sort=sort, page=page, limit=limit))


@router.get("/owner/my-rooms")
def my_rooms(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    hotel_id: int | None = Query(None, alias="hotelId"),
    page: int = Query(1),
    limit: int = Query(10),
):
    page, limit = clamp_paging(page, limit)
    if hotel_id is not None:
        hotel = db.scalar(select(Hotel).where(Hotel.id == hotel_id, Hotel.owner_id == identity.user_id))
        if not hotel:
            raise NotFoundError("Hotel not found or not owned by you")
        cond = Room.hotel_id == hotel_id
    else:
        cond = Room.hotel_id.in_(select(Hotel.id).where(Hotel.owner_id == identity.user_id))
    total = db.scalar(select(func.count(Room.id)).where(cond)) or 0
    rooms = db.scalars(
        select(Room).where(cond).order_by(Room.created_at.desc(), Room.id.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return envelope(
        data=[RoomOut.from_room(r) for r in rooms],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/{room_id}")
def get_room(room_id: int, db: Session = Depends(get_db)):
    return envelope(data=RoomSummaryOut.from_summary(room_summary(db, room_id)))


@router.post("/{room_id}/check-availability")
def room_availability(room_id: int, payload: AvailabilityRequest, db: Session = Depends(get_db)):
    quote = check_availability(db, room_id, payload.check_in, payload.check_out, payload.guests)
    return envelope(data=QuoteOut.from_quote(quote))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    settings: Settings = Depends(get_settings),
):
    hotel = db.scalar(select(Hotel).where(Hotel.id == payload.hotel, Hotel.is_active.is_(True)))
    if not hotel:
        raise NotFoundError("Hotel not found")
    assert_owner(hotel.owner_id, identity.user_id, "Not authorized to add rooms to this hotel")
    data = _room_columns(payload.model_dump())
    data["currency"] = data.get("currency") or settings.default_currency
    room = Room(**data)
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info("Room %s created under hotel %s", room.id, hotel.id)
    return envelope(data=RoomOut.from_room(room), message="Room created successfully")


@router.put("/{room_id}")
def update_room(room_id: int, payload: RoomUpdate, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    room = _owned_room(db, room_id, identity, "Not authorized to update this room")
    changes = payload.model_dump(exclude_unset=True)
    # explicit null clears the discount, other nulls are ignored
    changes = {k: v for k, v in changes.items() if v is not None or k == "discount"}
    for key, value in _room_columns(changes).items():
        setattr(room, key, value)
    db.commit()
    db.refresh(room)
    return envelope(data=RoomOut.from_room(room))


@router.patch("/{room_id}/availability")
def update_room_availability(
    room_id: int,
    payload: RoomAvailabilityUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    room = _owned_room(db, room_id, identity, "Not authorized to update this room")
    if payload.is_available is not None:
        room.is_available = payload.is_available
    if payload.available_rooms is not None:
        room.available_rooms = min(payload.available_rooms, room.total_rooms)
    db.commit()
    db.refresh(room)
    logger.info("Room %s availability set to %s (%s units)", room.id, room.is_available, room.available_rooms)
    return envelope(data=RoomOut.from_room(room), message="Room availability updated successfully")


@router.delete("/{room_id}")
def delete_room(room_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    room = _owned_room(db, room_id, identity, "Not authorized to delete this room")
    db.delete(room)
    db.commit()
    logger.info("Room %s deleted by %s", room_id, identity.user_id)
    return envelope(message="Room deleted successfully")

"""Room search: filter, join hotel + approved review stats, price, sort and paginate.

Both the global listing and the hotel-scoped listing run through :func:`search_rooms`;
the hotel scope only adds the vacancy requirement and the hotel existence check.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import select, func, and_
from sqlalchemy.orm import Session

from hotel_api.core.errors import NotFoundError, ValidationError
from hotel_api.models.hotel import Hotel
from hotel_api.models.room import Room
from hotel_api.models.testimonial import Testimonial
from hotel_api.services.pricing import room_discount, effective_price

SORT_OPTIONS = ("newest", "priceAsc", "priceDesc")
DEFAULT_LIMIT = 10


@dataclass
class RoomFilter:
    hotel_id: Optional[int] = None
    city: Optional[str] = None
    room_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    amenities: Sequence[str] = field(default_factory=tuple)
    guests: Optional[int] = None
    require_vacancy: bool = False


@dataclass
class RoomSummary:
    room: Room
    final_price: Decimal
    has_discount: bool
    avg_rating: float
    total_reviews: int


@dataclass
class SearchPage:
    items: List[RoomSummary]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)


def clamp_paging(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    page = max(page if page is not None else 1, 1)
    limit = max(limit if limit is not None else DEFAULT_LIMIT, 1)
    return page, limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def split_amenities(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [a.strip() for a in raw.split(",") if a.strip()]


def ids_with_amenities(db: Session, model, conditions: list, wanted: Sequence[str], match_all: bool = True) -> List[int]:
    """Amenity tags live in a JSON list column; matching is done Python side to stay DB agnostic."""
    wanted_set = {w.lower() for w in wanted}
    rows = db.execute(select(model.id, model.amenities).where(*conditions)).all()
    matched = []
    for row_id, amenities in rows:
        have = {str(a).lower() for a in (amenities or [])}
        if (match_all and wanted_set <= have) or (not match_all and wanted_set & have):
            matched.append(row_id)
    return matched


def review_stats_subquery():
    return (
        select(
            Testimonial.room_id.label("room_id"),
            func.avg(Testimonial.rating).label("avg_rating"),
            func.count(Testimonial.id).label("total_reviews"),
        )
        .where(Testimonial.is_approved.is_(True), Testimonial.room_id.is_not(None))
        .group_by(Testimonial.room_id)
        .subquery()
    )


def _conditions(filt: RoomFilter) -> list:
    conds = [Room.is_available.is_(True), Hotel.is_active.is_(True)]
    if filt.require_vacancy:
        conds.append(Room.available_rooms > 0)
    if filt.hotel_id is not None:
        conds.append(Room.hotel_id == filt.hotel_id)
    if filt.city:
        conds.append(Hotel.city.icontains(filt.city.strip(), autoescape=True))
    if filt.room_type:
        conds.append(Room.room_type.icontains(filt.room_type.strip(), autoescape=True))
    if filt.min_price is not None:
        conds.append(Room.price_per_night >= filt.min_price)
    if filt.max_price is not None:
        conds.append(Room.price_per_night <= filt.max_price)
    if filt.guests is not None:
        conds.append(Room.max_guests >= filt.guests)
    return conds


def _order_by(sort: str) -> list:
    if sort == "priceAsc":
        return [Room.price_per_night.asc(), Room.id.asc()]
    if sort == "priceDesc":
        return [Room.price_per_night.desc(), Room.id.asc()]
    return [Room.created_at.desc(), Room.id.desc()]


def summarize(room: Room, avg_rating, total_reviews, now: Optional[datetime] = None) -> RoomSummary:
    discount = room_discount(room, now)
    return RoomSummary(
        room=room,
        final_price=effective_price(room.price_per_night, discount),
        has_discount=discount is not None,
        avg_rating=float(avg_rating or 0),
        total_reviews=int(total_reviews or 0),
    )


def search_rooms(db: Session, filt: RoomFilter, sort: str = "newest", page: Optional[int] = 1, limit: Optional[int] = DEFAULT_LIMIT, now: Optional[datetime] = None) -> SearchPage:
    if sort not in SORT_OPTIONS:
        raise ValidationError.from_fields([f"sort: must be one of {', '.join(SORT_OPTIONS)}"])
    if filt.min_price is not None and filt.max_price is not None and filt.min_price > filt.max_price:
        raise ValidationError.from_fields(["minPrice: must not exceed maxPrice"])
    page, limit = clamp_paging(page, limit)

    conds = _conditions(filt)
    if filt.amenities:
        room_ids = ids_with_amenities(db, Room, [Room.hotel_id == Hotel.id, *conds], filt.amenities, match_all=True)
        if not room_ids:
            return SearchPage(items=[], total=0, page=page, limit=limit)
        conds.append(Room.id.in_(room_ids))

    total = db.scalar(select(func.count(Room.id)).join(Hotel, Room.hotel_id == Hotel.id).where(*conds)) or 0

    stats = review_stats_subquery()
    stmt = (
        select(Room, stats.c.avg_rating, stats.c.total_reviews)
        .join(Hotel, Room.hotel_id == Hotel.id)
        .outerjoin(stats, stats.c.room_id == Room.id)
        .where(*conds)
        .order_by(*_order_by(sort))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [summarize(room, avg, cnt, now) for room, avg, cnt in db.execute(stmt).all()]
    return SearchPage(items=items, total=total, page=page, limit=limit)


def search_hotel_rooms(db: Session, hotel_id: int, filt: RoomFilter, sort: str = "newest", page: Optional[int] = 1, limit: Optional[int] = DEFAULT_LIMIT, now: Optional[datetime] = None) -> SearchPage:
    hotel = db.scalar(select(Hotel).where(and_(Hotel.id == hotel_id, Hotel.is_active.is_(True))))
    if not hotel:
        raise NotFoundError("Hotel not found")
    filt.hotel_id = hotel_id
    filt.require_vacancy = True
    return search_rooms(db, filt, sort=sort, page=page, limit=limit, now=now)


def room_summary(db: Session, room_id: int, now: Optional[datetime] = None) -> RoomSummary:
    stats = review_stats_subquery()
    row = db.execute(
        select(Room, stats.c.avg_rating, stats.c.total_reviews)
        .outerjoin(stats, stats.c.room_id == Room.id)
        .where(Room.id == room_id)
    ).first()
    if not row:
        raise NotFoundError("Room not found")
    room, avg, cnt = row
    return summarize(room, avg, cnt, now)

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from hotel_api.api.deps import require_admin
from hotel_api.core.dates import utcnow
from hotel_api.core.errors import NotFoundError, PolicyError
from hotel_api.db.session import get_db
from hotel_api.models.newsletter import NewsletterSubscriber
from hotel_api.schemas.common import Pagination, envelope
from hotel_api.schemas.newsletter import PreferencesUpdate, SubscribeRequest, SubscriberOut, UnsubscribeRequest
from hotel_api.services.room_search import clamp_paging, page_count

logger = logging.getLogger(__name__)

router = APIRouter()

PREFERENCE_COLUMNS = {
    "promotions": "pref_promotions",
    "new_hotels": "pref_new_hotels",
    "travel_tips": "pref_travel_tips",
    "exclusive_offers": "pref_exclusive_offers",
}
TOP_CITIES = 5


def _active_subscriber(db: Session, email: str) -> NewsletterSubscriber:
    subscriber = db.scalar(
        select(NewsletterSubscriber).where(NewsletterSubscriber.email == email, NewsletterSubscriber.is_active.is_(True))
    )
    if not subscriber:
        raise NotFoundError("Subscriber not found")
    return subscriber


def _apply_preferences(subscriber: NewsletterSubscriber, prefs: dict) -> None:
    for key, value in prefs.items():
        if value is not None and key in PREFERENCE_COLUMNS:
            setattr(subscriber, PREFERENCE_COLUMNS[key], value)


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
def subscribe(payload: SubscribeRequest, request: Request, db: Session = Depends(get_db)):
    existing = db.scalar(select(NewsletterSubscriber).where(NewsletterSubscriber.email == payload.email))
    if existing:
        if existing.is_active:
            raise PolicyError("Email already subscribed")
        existing.is_active = True
        existing.unsubscribed_at = None
        existing.unsubscribe_reason = None
        db.commit()
        logger.info("Newsletter subscriber %s reactivated", existing.id)
        body = envelope(data=SubscriberOut.model_validate(existing), message="Successfully resubscribed to newsletter")
        return JSONResponse(status_code=status.HTTP_200_OK, content=body)

    subscriber = NewsletterSubscriber(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        source=payload.source,
        city=payload.city,
        country=payload.country or "Nigeria",
        language=payload.language or "en",
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    if payload.preferences is not None:
        _apply_preferences(subscriber, payload.preferences.model_dump())
    db.add(subscriber)
    db.commit()
    db.refresh(subscriber)
    # No mail delivery; the token is logged so it can be verified by hand
    logger.info("Verification token for subscriber %s: %s", subscriber.id, subscriber.verification_token)
    return envelope(
        data=SubscriberOut.model_validate(subscriber),
        message="Successfully subscribed to newsletter. Please check your email for verification.",
    )


@router.get("/verify")
def verify(token: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    subscriber = db.scalar(select(NewsletterSubscriber).where(NewsletterSubscriber.verification_token == token))
    if not subscriber:
        raise NotFoundError("Invalid verification token")
    if subscriber.is_verified:
        return envelope(message="Email already verified")
    subscriber.is_verified = True
    subscriber.verified_at = utcnow()
    subscriber.verification_token = None
    db.commit()
    return envelope(message="Email successfully verified")


@router.put("/preferences")
def update_preferences(payload: PreferencesUpdate, db: Session = Depends(get_db)):
    subscriber = _active_subscriber(db, payload.email)
    if payload.preferences is not None:
        _apply_preferences(subscriber, payload.preferences.model_dump())
    db.commit()
    db.refresh(subscriber)
    return envelope(data=SubscriberOut.model_validate(subscriber), message="Preferences updated successfully")


@router.post("/unsubscribe")
def unsubscribe(payload: UnsubscribeRequest, db: Session = Depends(get_db)):
    subscriber = _active_subscriber(db, payload.email)
    subscriber.is_active = False
    subscriber.unsubscribed_at = utcnow()
    subscriber.unsubscribe_reason = payload.reason
    db.commit()
    logger.info("Newsletter subscriber %s unsubscribed", subscriber.id)
    return envelope(message="Successfully unsubscribed from newsletter")


@router.get("/subscribers", dependencies=[Depends(require_admin)])
def list_subscribers(
    db: Session = Depends(get_db),
    active: bool = True,
    page: int = Query(1),
    limit: int = Query(20),
):
    page, limit = clamp_paging(page, limit)
    conds = [NewsletterSubscriber.is_active.is_(active)]
    if active:
        conds.append(NewsletterSubscriber.is_verified.is_(True))
    total = db.scalar(select(func.count(NewsletterSubscriber.id)).where(*conds)) or 0
    items = db.scalars(
        select(NewsletterSubscriber)
        .where(*conds)
        .order_by(NewsletterSubscriber.created_at.desc(), NewsletterSubscriber.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return envelope(
        data=[SubscriberOut.model_validate(s) for s in items],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.get("/stats", dependencies=[Depends(require_admin)])
def newsletter_stats(db: Session = Depends(get_db)):
    active = NewsletterSubscriber.is_active.is_(True)
    total_active = db.scalar(select(func.count(NewsletterSubscriber.id)).where(active)) or 0
    total_unsubscribed = db.scalar(
        select(func.count(NewsletterSubscriber.id)).where(NewsletterSubscriber.is_active.is_(False))
    ) or 0
    week_ago = utcnow() - timedelta(days=7)
    new_this_week = db.scalar(
        select(func.count(NewsletterSubscriber.id)).where(active, NewsletterSubscriber.created_at >= week_ago)
    ) or 0
    count_col = func.count(NewsletterSubscriber.id)
    top_cities = db.execute(
        select(NewsletterSubscriber.city, count_col)
        .where(active, NewsletterSubscriber.city.is_not(None), NewsletterSubscriber.city != "")
        .group_by(NewsletterSubscriber.city)
        .order_by(count_col.desc(), NewsletterSubscriber.city.asc())
        .limit(TOP_CITIES)
    ).all()
    return envelope(data={
        "totalSubscribers": total_active,
        "totalUnsubscribed": total_unsubscribed,
        "newThisWeek": new_this_week,
        "topCities": [{"city": city, "count": count} for city, count in top_cities],
    })

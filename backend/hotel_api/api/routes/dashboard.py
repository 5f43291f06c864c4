from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hotel_api.api.deps import get_identity
from hotel_api.core.security import Identity
from hotel_api.db.session import get_db
from hotel_api.schemas.common import envelope
from hotel_api.services.dashboard import owner_dashboard

router = APIRouter()


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db), identity: Identity = Depends(get_identity)):
    return envelope(data=owner_dashboard(db, identity.user_id))

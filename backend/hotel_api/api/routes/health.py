from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from hotel_api.db.session import get_db
from hotel_api.schemas.common import envelope

router = APIRouter()


@router.get("")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return envelope(message="Server is running!")

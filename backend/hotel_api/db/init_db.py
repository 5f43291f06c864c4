import logging

from sqlalchemy.engine import Engine

from hotel_api.models import hotel, room, booking, offer, testimonial, newsletter  # noqa: F401
from hotel_api.models.base import Base

logger = logging.getLogger(__name__)


def create_tables(engine: Engine) -> None:
    # Dev/test only; production schemas are managed by Alembic
    Base.metadata.create_all(bind=engine)
    logger.info("Ensured tables: %s", ", ".join(sorted(Base.metadata.tables)))

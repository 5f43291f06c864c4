"""Alembic environment for the hotel_api schema.

The URL comes from ``sqlalchemy.url`` when the app runs migrations at startup,
otherwise from DATABASE_URL via the application settings.
"""
import logging
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool

# backend/ holds the hotel_api package; alembic may be launched from elsewhere
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from hotel_api.core.config import get_settings  # noqa: E402
from hotel_api.db.session import normalize_database_url  # noqa: E402
from hotel_api.models.base import Base  # noqa: E402
from hotel_api.models import hotel, room, booking, offer, testimonial, newsletter  # noqa: F401,E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)
logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def database_url() -> str:
    url = config.get_main_option("sqlalchemy.url") or get_settings().database_url
    if not url:
        raise SystemExit("DATABASE_URL env var is required for migrations")
    return normalize_database_url(url)


def run_offline(url: str) -> None:
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    engine = engine_from_config({"sqlalchemy.url": url}, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


url = database_url()
logger.info("Migrating %s database", url.split(":", 1)[0])
if context.is_offline_mode():
    run_offline(url)
else:
    run_online(url)

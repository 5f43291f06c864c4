import importlib.util
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Rewrite plain postgres URLs to the psycopg (v3) driver when psycopg2 is absent."""
    psycopg2_present = importlib.util.find_spec("psycopg2") is not None
    if not psycopg2_present and url.startswith(("postgres://", "postgresql://")) and "+psycopg" not in url:
        # Normalize legacy prefix 'postgres://' -> 'postgresql://'
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


class Database:
    """Engine plus session factory, constructed once per process and passed explicitly.

    The application factory owns the instance (``app.state.db``) and disposes it on shutdown.
    """

    def __init__(self, url: str):
        if not url:
            raise RuntimeError("DATABASE_URL environment variable must be set")
        self.url = normalize_database_url(url)
        kwargs: dict = {}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # single shared connection so every session sees the same in-memory schema
                kwargs["poolclass"] = StaticPool
        self.engine: Engine = create_engine(self.url, **kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()

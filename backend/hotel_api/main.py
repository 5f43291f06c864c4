import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from hotel_api.api.router import api_router
from hotel_api.core.config import Settings, get_settings
from hotel_api.core.errors import AppError, AvailabilityError
from hotel_api.core.logging import configure_logging
from hotel_api.db.init_db import create_tables
from hotel_api.db.session import Database
from hotel_api.schemas.common import error_body

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _run_migrations_if_needed(settings: Settings) -> bool:
    """Apply Alembic migrations in production when AUTO_APPLY_MIGRATIONS is on.

    Returns True when the schema was handled by Alembic. Safe to run repeatedly.
    """
    if settings.env.lower() != "prod" or not settings.auto_apply_migrations:
        return False
    from alembic import command
    from alembic.config import Config

    alembic_ini = BACKEND_DIR / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("alembic.ini not found at %s, skipping auto-migrations", alembic_ini)
        return False
    cfg = Config(str(alembic_ini))
    # Resolve script_location when launched from an arbitrary CWD
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    # configparser interpolation: escape % in passwords
    cfg.set_main_option("sqlalchemy.url", (settings.database_url or "").replace("%", "%%"))
    logger.info("Applying Alembic migrations -> head ...")
    try:
        command.upgrade(cfg, "head")
    except Exception:
        # Keep serving; migrations can be retried by hand
        logger.exception("Migration failed")
        return True
    logger.info("Migrations applied successfully")
    return True


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        body = error_body(exc.message, exc.errors)
        if isinstance(exc, AvailabilityError):
            body["code"] = exc.code
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
            errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return JSONResponse(status_code=400, content=error_body("Validation failed: " + "; ".join(errors), errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body("Internal server error"))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.state.settings = settings
    app.state.db = Database(settings.database_url)

    origins = settings.cors_origins
    logger.info("Resolved CORS origins: %s", origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)
    _register_exception_handlers(app)
    app.include_router(api_router)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    if not settings.admin_user_ids:
        logger.warning("ADMIN_USER_IDS is empty: admin routes accept any authenticated identity")

    @app.on_event("startup")
    def startup():
        if not _run_migrations_if_needed(settings):
            create_tables(app.state.db.engine)

    @app.on_event("shutdown")
    def shutdown():
        app.state.db.dispose()

    return app


def run() -> None:
    import uvicorn

    uvicorn.run("hotel_api.main:create_app", factory=True, host="0.0.0.0", port=8000)

import json
import re
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEV_ORIGINS = ["http://127.0.0.1:5173", "http://localhost:5173"]
LOOPBACK_HOSTS = ("localhost", "127.0.0.1")


def split_env_list(raw: Optional[str]) -> List[str]:
    """Read a JSON array or a comma/space separated string as a list of strings."""
    text = (raw or "").strip()
    if not text:
        return []
    if text.startswith("[") and text.endswith("]"):
        try:
            items = json.loads(text)
        except ValueError:
            items = None
        if isinstance(items, list):
            return [s for s in (str(i).strip() for i in items) if s]
    return [part for part in re.split(r"[,\s]+", text) if part]


def with_loopback_twins(origins: List[str]) -> List[str]:
    # a dev origin on localhost:<port> also allows 127.0.0.1:<port> and vice versa
    result = set(origins)
    for origin in origins:
        for host in LOOPBACK_HOSTS:
            prefix = f"http://{host}:"
            if origin.startswith(prefix):
                port = origin[len(prefix):]
                result.update(f"http://{h}:{port}" for h in LOOPBACK_HOSTS)
    return sorted(result)


class Settings(BaseSettings):
    app_name: str = Field(default="Hotel Marketplace API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    auto_apply_migrations: bool = Field(default=True, alias="AUTO_APPLY_MIGRATIONS")
    # Bearer tokens are issued by the external identity provider. For HS* algorithms
    # this is the shared secret, for RS*/ES* the PEM encoded public key.
    auth_jwt_key: str = Field(default="devsecret", alias="AUTH_JWT_KEY")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_issuer: Optional[str] = Field(default=None, alias="AUTH_ISSUER")
    auth_audience: Optional[str] = Field(default=None, alias="AUTH_AUDIENCE")
    auth_email_claim: str = Field(default="email", alias="AUTH_EMAIL_CLAIM")
    # Kept as raw strings and split by the properties below, so a plain
    # comma separated value never hits pydantic's JSON decoding
    admin_user_ids_raw: Optional[str] = Field(default=None, alias="ADMIN_USER_IDS", description="Identity ids allowed on admin routes; empty = any authenticated identity")
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")
    upload_dir: str = Field(default="public/uploads", alias="UPLOAD_DIR")
    upload_max_bytes: int = Field(default=2 * 1024 * 1024, alias="UPLOAD_MAX_BYTES")
    public_base_url: Optional[str] = Field(default=None, alias="PUBLIC_BASE_URL")
    default_currency: str = Field(default="NGN", alias="DEFAULT_CURRENCY")
    cancellation_notice_hours: int = Field(default=24, alias="CANCELLATION_NOTICE_HOURS")

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    @property
    def admin_user_ids(self) -> List[str]:
        return split_env_list(self.admin_user_ids_raw)

    @property
    def cors_origins(self) -> List[str]:
        origins = split_env_list(self.cors_origins_raw)
        if not origins:
            # Vite dev server
            return list(DEV_ORIGINS)
        return with_loopback_twins(origins)


def get_settings() -> Settings:
    return Settings()  # type: ignore

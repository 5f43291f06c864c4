from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import jwt

from hotel_api.core.config import Settings


@dataclass(frozen=True)
class Identity:
    """Verified caller produced once per request by the authentication boundary."""
    user_id: str
    email: Optional[str] = None


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature, expiry and (if configured) issuer/audience of a provider token.
    Raises jwt.PyJWTError if invalid and returns the payload as a dict.
    """
    options = {"verify_aud": settings.auth_audience is not None}
    return jwt.decode(
        token,
        settings.auth_jwt_key,
        algorithms=[settings.auth_jwt_algorithm],
        audience=settings.auth_audience,
        issuer=settings.auth_issuer,
        options=options,
    )


def identity_from_token(token: str, settings: Settings) -> Identity:
    payload = decode_access_token(token, settings)
    sub = payload.get("sub")
    if not sub:
        raise jwt.InvalidTokenError("Missing subject")
    email = payload.get(settings.auth_email_claim)
    return Identity(user_id=str(sub), email=str(email) if email else None)


def create_access_token(subject: str | Any, settings: Settings, email: Optional[str] = None, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token the way the identity provider would (dev tooling and tests, HS* only)."""
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(minutes=60))
    to_encode: dict[str, Any] = {"sub": str(subject), "exp": expire}
    if email:
        to_encode[settings.auth_email_claim] = email
    if settings.auth_issuer:
        to_encode["iss"] = settings.auth_issuer
    if settings.auth_audience:
        to_encode["aud"] = settings.auth_audience
    return jwt.encode(to_encode, settings.auth_jwt_key, algorithm=settings.auth_jwt_algorithm)

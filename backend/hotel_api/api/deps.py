import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from hotel_api.core.config import Settings
from hotel_api.core.errors import ForbiddenError, UnauthenticatedError
from hotel_api.core.security import Identity, identity_from_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[Identity]:
    """Identity for routes that accept anonymous callers; a bad token still fails."""
    if credentials is None:
        return None
    try:
        return identity_from_token(credentials.credentials, settings)
    except jwt.PyJWTError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise UnauthenticatedError("Invalid or expired token")


def get_identity(identity: Optional[Identity] = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise UnauthenticatedError("Authentication required")
    return identity


def require_admin(identity: Identity = Depends(get_identity), settings: Settings = Depends(get_settings)) -> Identity:
    # With no ADMIN_USER_IDS configured every authenticated identity passes
    allowed = settings.admin_user_ids
    if allowed and identity.user_id not in allowed:
        raise ForbiddenError("Admin access required")
    return identity

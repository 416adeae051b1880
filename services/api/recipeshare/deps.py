"""FastAPI dependencies for the recipe-sharing API.

Provides:
- Caller identity resolution from the session cookie (optional / required / admin)
- Owner-or-admin edit check
- The photo store selected at startup
"""

from typing import Optional

from fastapi import Cookie, Depends, Request

from .errors import Forbidden, Unauthenticated
from .schemas import AuthUser
from .security import COOKIE_NAME, identity_from_token
from .services.photos import PhotoStore


def get_current_user_optional(
    auth_token: Optional[str] = Cookie(None, alias=COOKIE_NAME),
) -> Optional[AuthUser]:
    """Identity from the session cookie, or None.

    A missing, malformed, expired or forged token never raises; the caller is
    simply treated as anonymous.
    """
    return identity_from_token(auth_token)


def require_user(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
) -> AuthUser:
    if user is None:
        raise Unauthenticated()
    return user


def require_admin(user: AuthUser = Depends(require_user)) -> AuthUser:
    if not user.is_admin:
        raise Forbidden("Admin only")
    return user


def can_edit(user: Optional[AuthUser], owner_id: str) -> bool:
    if user is None:
        return False
    if user.is_admin:
        return True
    return user.id == owner_id


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photo_store

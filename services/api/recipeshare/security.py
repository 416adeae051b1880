"""Credential and session-token primitives.

- Password hashing: werkzeug's salted hashes, compared in constant time
- Session tokens: HS256 JWTs carrying the public user fields
- Cookie helpers for the http-only session cookie
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Response
from jwt import InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash

from .schemas import AuthUser
from .settings import parse_duration, settings


COOKIE_NAME = "auth_token"
JWT_ALGORITHM = "HS256"


def token_lifetime() -> timedelta:
    return parse_duration(settings.jwt_expires_in)


# --- Passwords ---

def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


# --- Tokens ---

def sign_token(user: AuthUser, *, lifetime: Optional[timedelta] = None, now: Optional[datetime] = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = user.model_dump(by_alias=True)
    payload["iat"] = issued
    payload["exp"] = issued + (lifetime or token_lifetime())
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> AuthUser:
    """Verify a token and return its identity. Raises ``InvalidTokenError``."""
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    try:
        return AuthUser.model_validate(payload)
    except ValueError as e:
        raise InvalidTokenError(f"Malformed token payload: {e}") from e


def identity_from_token(token: Optional[str]) -> Optional[AuthUser]:
    """Return the token's identity, or None for any missing/invalid token."""
    if not token:
        return None
    try:
        return decode_token(token)
    except InvalidTokenError:
        return None


# --- Cookie ---

def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=int(token_lifetime().total_seconds()),
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=COOKIE_NAME, path="/")

"""Auth API router.

Endpoints:
- POST /api/auth/register - Create account and start a session
- POST /api/auth/login - Start a session
- POST /api/auth/logout - Clear the session cookie
- GET /api/auth/me - Current user or null
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_user_optional
from ..schemas import AuthUser, LoginIn, OkOut, RegisterIn
from ..security import clear_auth_cookie, set_auth_cookie, sign_token
from ..services.users import authenticate, register_user, to_auth_user

router = APIRouter(prefix="/auth")
logger = logging.getLogger("recipeshare.auth")


def _start_session(response: Response, user: AuthUser) -> AuthUser:
    set_auth_cookie(response, sign_token(user))
    return user


@router.post("/register", response_model=AuthUser)
def register(payload: RegisterIn, response: Response, db: Session = Depends(get_db)):
    user = register_user(
        db,
        email=payload.email,
        display_name=payload.display_name,
        password=payload.password,
    )
    logger.info(f"Registered user {user.id}")
    return _start_session(response, to_auth_user(user))


@router.post("/login", response_model=AuthUser)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    user = authenticate(db, email=payload.email, password=payload.password)
    return _start_session(response, to_auth_user(user))


@router.post("/logout", response_model=OkOut)
def logout(response: Response):
    clear_auth_cookie(response)
    return OkOut()


@router.get("/me", response_model=Optional[AuthUser])
def me(user: Optional[AuthUser] = Depends(get_current_user_optional)):
    return user

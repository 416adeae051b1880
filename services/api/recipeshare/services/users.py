import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import Conflict, InvalidCredentials, ServerError
from ..models import Role, User
from ..schemas import AuthUser
from ..security import hash_password, verify_password

logger = logging.getLogger("recipeshare.users")

# Compared against when the email is unknown so both failure paths cost a hash check
_DUMMY_HASH = hash_password("not-a-real-password")


def to_auth_user(user: User) -> AuthUser:
    return AuthUser(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        role=user.role,
    )


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def register_user(db: Session, *, email: str, display_name: str, password: str) -> User:
    """Create a USER account. Raises Conflict if the email is taken."""
    if get_user_by_email(db, email):
        raise Conflict("Email already used")

    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password(password),
        role=Role.USER.value,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise Conflict("Email already used")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to register user")
        raise ServerError()

    db.refresh(user)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User:
    """Return the user for valid credentials, else raise InvalidCredentials."""
    user = get_user_by_email(db, email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def ensure_admin_user(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Create the bootstrap ADMIN account if configured and absent.

    Returns the created user, or None when nothing was done.
    """
    if not email or not password:
        return None
    if get_user_by_email(db, email):
        return None

    admin = User(
        email=email,
        display_name="Admin",
        password_hash=hash_password(password),
        role=Role.ADMIN.value,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Created admin user: {email}")
    return admin

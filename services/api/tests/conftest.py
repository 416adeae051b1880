import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipeshare.main import app
from recipeshare.db import Base, get_db
from recipeshare.deps import get_photo_store
from recipeshare.models import Role, User
from recipeshare.security import COOKIE_NAME, hash_password, sign_token
from recipeshare.services.photos import LocalPhotoStore
from recipeshare.services.users import to_auth_user
from recipeshare.settings import settings

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# StaticPool keeps one connection so every session sees the same in-memory DB
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "uploads_dir", str(path))
    return path


@pytest.fixture
def photo_store(upload_dir):
    return LocalPhotoStore(upload_dir)


@pytest.fixture
def client(photo_store):
    """Test client with DB and photo store overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_store] = lambda: photo_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


def make_user(db, email, display_name="Cook", role=Role.USER, password="password123"):
    user = User(
        email=email,
        display_name=display_name,
        password_hash=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def act_as(client, user):
    """Point the client's session cookie at ``user`` (None for anonymous)."""
    client.cookies.clear()
    if user is not None:
        client.cookies.set(COOKIE_NAME, sign_token(to_auth_user(user)))


@pytest.fixture
def alice(db_session):
    return make_user(db_session, "alice@example.com", display_name="Alice")


@pytest.fixture
def bob(db_session):
    return make_user(db_session, "bob@example.com", display_name="Bob")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", display_name="Admin", role=Role.ADMIN)

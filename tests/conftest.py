"""
Global test configuration

Loaded by pytest before any test module. Environment variables are set here,
before anything imports Settings, so the app binds to a throwaway SQLite file
and upload directory.
"""
import os
import tempfile

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="diyari-tests-")

TEST_ENV_VARS = {
    "SECRET_KEY": "test_secret_key_for_testing_only",
    "DATABASE_URL": f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
    "ALGORITHM": "HS256",
    "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
    "BCRYPT_ROUNDS": "4",
    "ADMIN_USERNAME": "admin",
    "ADMIN_EMAIL": "admin@test.com",
    "ADMIN_PASSWORD": "admin123",
    "ENVIRONMENT": "testing",
    "LOG_LEVEL": "WARNING",
    "CORS_ORIGINS": "*",
    "UPLOADS_DIR": os.path.join(_TMP_DIR, "uploads"),
    "MAX_FILE_SIZE_MB": "1",
    "MAX_IMAGES": "3",
    "RATE_LIMIT_ENABLED": "false",
    "CACHE_ENABLED": "false",
    "CACHE_TTL_SECONDS": "300",
}

for key, value in TEST_ENV_VARS.items():
    os.environ[key] = value

from fastapi.testclient import TestClient  # noqa: E402

from app.core.cache import clear_cache  # noqa: E402
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from app.models.property_model import Property  # noqa: E402
from app.schemas import user_schema  # noqa: E402
from app.services import user_service  # noqa: E402


@pytest.fixture(scope="function", autouse=True)
def reset_database():
    """Every test starts from empty tables and an empty cache"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    clear_cache()
    yield


@pytest.fixture(scope="function")
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory creating users straight through the service layer"""
    def _make_user(username: str, is_admin: bool = False, **extra):
        user_in = user_schema.UserCreate(
            username=username,
            email=f"{username}@example.com",
            password="password123",
            full_name=extra.pop("full_name", username.capitalize()),
            is_admin=is_admin,
            **extra,
        )
        return user_service.create_user(db_session, user_in)
    return _make_user


@pytest.fixture(scope="function")
def make_property(db_session):
    """Factory inserting an active property owned by owner"""
    def _make_property(owner, **fields):
        data = {
            "title": "Apartment",
            "price": 100000000,
            "property_type": "sale",
            "category": "apartment",
            "location": "Karrada",
            "city": "بغداد",
            "bedrooms": 3,
            "area": 150,
            "image_urls": [],
        }
        data.update(fields)
        prop = Property(user_id=owner.id, **data)
        db_session.add(prop)
        db_session.commit()
        db_session.refresh(prop)
        return prop
    return _make_property


@pytest.fixture(scope="function")
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _auth_headers


@pytest.fixture(scope="function")
def alice(make_user):
    return make_user("alice")


@pytest.fixture(scope="function")
def bob(make_user):
    return make_user("bob")


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user("root", is_admin=True)

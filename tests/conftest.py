import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_TOKEN_SECRET_KEY", "test-refresh-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest import mock


def passthrough_decorator(*args, **kwargs):
    """Passthrough decorator that doesn't do rate limiting"""

    def decorator(func):
        return func

    return decorator


mock.patch("slowapi.Limiter.limit", passthrough_decorator).start()
mock.patch("slowapi.Limiter.shared_limit", passthrough_decorator).start()

# ruff: noqa: E402
from app.main import app
from app.database import Base, get_db
from app.core.config import settings
from app.core.hashing import Hasher
from app import crud, models

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """create a fresh database session for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def override_db(db_session):
    """route every get_db dependency to the test session"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield db_session
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(override_db):
    """create a test client with overridden database dependency"""

    async def passthrough_middleware(self, request, call_next):
        """passthrough middleware that doesnt do rate limiting"""
        response = await call_next(request)
        return response

    with (
        mock.patch("app.main.init_db"),
        mock.patch("app.main.create_minio_bucket_if_not_exists"),
        mock.patch("app.main.init_scheduler"),
        mock.patch("app.main.start_scheduler"),
        mock.patch("app.main.shutdown_scheduler"),
        mock.patch("slowapi.middleware.SlowAPIMiddleware.dispatch", passthrough_middleware),
    ):
        with TestClient(app, base_url="http://localhost:8000") as test_client:
            yield test_client


@pytest.fixture(scope="function")
def maintenance_pages(db_session):
    """seed the default page maintenance records"""
    crud.ensure_default_pages(db_session)
    return crud.get_page_maintenance_list(db_session)


@pytest.fixture(scope="function")
def test_user(db_session):
    """create a test user"""
    user = models.User(
        email="test@example.com",
        username="testuser",
        hashed_password=Hasher.get_password_hash("Test123!@#"),
        is_active=True,
        role=models.UserRole.USER,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_admin(db_session):
    """create a test admin"""
    user = models.User(
        email="admin@example.com",
        username="adminuser",
        hashed_password=Hasher.get_password_hash("Admin123!@#"),
        is_active=True,
        role=models.UserRole.ADMIN,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def auth_headers(client, test_user):
    """get authentication headers for test user"""
    response = client.post(
        f"{settings.API_V1_STR}/users/token",
        data={
            "username": "testuser",
            "password": "Test123!@#",
        },
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def admin_auth_headers(client, test_admin):
    """get authentication headers for admin user"""
    response = client.post(
        f"{settings.API_V1_STR}/users/token",
        data={
            "username": "adminuser",
            "password": "Admin123!@#",
        },
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}

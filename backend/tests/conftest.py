"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-testing-only-0123456789"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

from authentication.auth import create_access_token  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_profile(
    db_session,
    name: str,
    role: db_models.Role = db_models.Role.USER,
    is_verified: bool = False,
) -> db_models.Profile:
    """Insert a profile the way the auth gate does on first sign-in."""
    profile = db_models.Profile(
        id=uuid.uuid4(),
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        role=role,
        is_verified=is_verified,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


def make_post(
    db_session,
    author: db_models.Profile,
    title: str = "Test my habit tracker",
    moderation_status: db_models.ModerationStatus = db_models.ModerationStatus.OK,
    is_deleted: bool = False,
) -> db_models.Post:
    post = db_models.Post(
        author_id=author.id,
        title=title,
        content="Looking for 12 testers for a closed test.",
        play_store_url="https://play.google.com/store/apps/details?id=com.example",
        moderation_status=moderation_status,
        is_deleted=is_deleted,
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


def auth_header(profile: db_models.Profile) -> dict:
    token = create_access_token(profile.id, claims={"email": profile.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session) -> db_models.Profile:
    """Create a regular user."""
    return make_profile(db_session, "Test User")


@pytest.fixture
def other_user(db_session) -> db_models.Profile:
    """Create a second regular user."""
    return make_profile(db_session, "Other User")


@pytest.fixture
def moderator_user(db_session) -> db_models.Profile:
    return make_profile(db_session, "Mod User", role=db_models.Role.MODERATOR)


@pytest.fixture
def admin_user(db_session) -> db_models.Profile:
    return make_profile(db_session, "Admin User", role=db_models.Role.ADMIN)


@pytest.fixture
def test_post(db_session, test_user) -> db_models.Post:
    """A visible post authored by test_user."""
    return make_post(db_session, test_user)


@pytest.fixture
def test_tag(db_session) -> db_models.Tag:
    """Create a test tag."""
    tag = db_models.Tag(name="Productivity", slug="productivity")
    db_session.add(tag)
    db_session.commit()
    db_session.refresh(tag)
    return tag


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Get authentication headers for test user."""
    return auth_header(test_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return auth_header(other_user)


@pytest.fixture
def moderator_headers(moderator_user) -> dict:
    return auth_header(moderator_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_header(admin_user)


@pytest.fixture
def profile_factory(db_session):
    """Build extra profiles: ``profile_factory("Name", role=..., is_verified=...)``."""

    def factory(name: str, **kwargs) -> db_models.Profile:
        return make_profile(db_session, name, **kwargs)

    return factory


@pytest.fixture
def post_factory(db_session):
    """Build posts: ``post_factory(author, title=..., moderation_status=...)``."""

    def factory(author: db_models.Profile, **kwargs) -> db_models.Post:
        return make_post(db_session, author, **kwargs)

    return factory


@pytest.fixture
def headers_for():
    """Bearer headers for any profile."""
    return auth_header

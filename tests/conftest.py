"""
pytest Fixtures for Bookshelf API Tests

Shared fixtures used across all test files.

FIXTURE SCOPES:
- function (default): New instance per test function

Every test gets its own in-memory SQLite engine. Services commit (and roll
back on failure) themselves, so wrapping each test in an outer transaction
would not isolate them; a fresh database per test does.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.config import get_settings
from bookshelf.database import Base, get_db
from bookshelf.main import app
from bookshelf.models import Book, Credential, Profile
from bookshelf.schemas.auth import RegisterRequest
from bookshelf.services import accounts
from bookshelf.services.security import ALGORITHM, create_access_token

TEST_PASSWORD = "SecurePass123"


def encode_claims(**overrides) -> str:
    """Sign a token by hand so single claims can be varied."""
    settings = get_settings()
    now = datetime.now(UTC)
    claims = {
        "sub": "alice",
        "iss": settings.jwt_issuer,
        "authorities": "",
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(minutes=5),
        "jti": "test-token",
    }
    claims.update(overrides)
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the whole test;
    without it the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """Create a sample book for testing."""
    book = Book(
        title="Dune",
        subtitle="Deluxe Edition",
        author="Frank Herbert",
        genre="Science Fiction",
        publisher="Chilton Books",
        year="1965",
        pages=412,
        isbn="9780441013593",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def second_book(db_session: Session) -> Book:
    """Create a second book for collection scenarios."""
    book = Book(
        title="Neuromancer",
        author="William Gibson",
        genre="Cyberpunk",
        year="1984",
        pages=271,
        isbn="9780441569595",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """Create multiple books for pagination and filter testing."""
    books = []
    for i in range(15):
        book = Book(
            title=f"Test Book {i + 1:02d}",
            author="Ursula K. Le Guin" if i % 2 == 0 else "Isaac Asimov",
            genre="Fantasy" if i % 3 == 0 else "Science Fiction",
            pages=100 + i * 10,
        )
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


def register_user(db_session: Session, username: str, email: str, name: str) -> Profile:
    accounts.register(
        db_session,
        RegisterRequest(
            username=username,
            password=TEST_PASSWORD,
            email=email,
            name=name,
        ),
    )
    credential = db_session.execute(
        select(Credential).where(Credential.username == username)
    ).scalar_one()
    return db_session.get(Profile, credential.id)


@pytest.fixture
def sample_user(db_session: Session) -> Profile:
    """Register a sample account and return its profile."""
    return register_user(db_session, "testuser", "testuser@example.com", "Test User")


@pytest.fixture
def second_user(db_session: Session) -> Profile:
    """Register a second account for ownership scenarios."""
    return register_user(db_session, "seconduser", "seconduser@example.com", "Second User")


# =============================================================================
# AUTHENTICATION FIXTURES
# =============================================================================
@pytest.fixture
def auth_token(sample_user: Profile) -> str:
    """Access token for sample_user."""
    return create_access_token(sample_user.username)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Authorization header for sample_user."""
    return {"Authorization": f"Bearer {auth_token}"}

"""Pytest configuration and fixtures for job board tests."""

import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite:///:memory:"

from jobboard.database import Base, get_db
from jobboard.main import app
from jobboard.models import Application, Job, Role, User
from jobboard.services.auth import create_access_token

API = "/api/v1.0"

# Use in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign key support for SQLite (required for ON DELETE CASCADE)
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def auth_headers(user: User) -> dict:
    """Bearer header carrying a session token for ``user``."""
    token = create_access_token({"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


def make_user(db, email: str, role: Role, name: str | None = None) -> User:
    user = User(email=email, role=role, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_job(db, author: User, title: str = "Backend Developer", published: bool = True) -> Job:
    job = Job(
        title=title,
        description="Build and run APIs",
        salary=Decimal("50000.5"),
        location="Remote",
        published=published,
        author_id=author.id,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


@pytest.fixture
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Create a test client with database dependency override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", Role.ADMIN, name="Admin")


@pytest.fixture
def company(db):
    return make_user(db, "jobs@acme.com", Role.COMPANY, name="Acme")


@pytest.fixture
def other_company(db):
    return make_user(db, "jobs@globex.com", Role.COMPANY, name="Globex")


@pytest.fixture
def worker(db):
    return make_user(db, "ann@example.com", Role.WORKER, name="Ann")


@pytest.fixture
def other_worker(db):
    return make_user(db, "bob@example.com", Role.WORKER, name="Bob")


@pytest.fixture
def published_job(db, company):
    return make_job(db, company)


@pytest.fixture
def draft_job(db, company):
    return make_job(db, company, title="Draft Position", published=False)


@pytest.fixture
def application(db, worker, published_job):
    """An application from ``worker`` to ``published_job``."""
    application = Application(
        cover_letter="I would love to work on your APIs.",
        job_id=published_job.id,
        author_id=worker.id,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@pytest.fixture
def headers_for():
    """Build request headers authenticating as a given user."""
    return auth_headers


@pytest.fixture
def job_factory(db):
    def create(author: User, title: str = "Backend Developer", published: bool = True) -> Job:
        return make_job(db, author, title=title, published=published)

    return create


@pytest.fixture
def user_factory(db):
    def create(email: str, role: Role = Role.WORKER, name: str | None = None) -> User:
        return make_user(db, email, role, name=name)

    return create

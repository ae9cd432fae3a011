# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.database import create_engine_for_url, get_db, init_db
from bookstore.main import app

SAMPLE_BOOKS = [
    {"title": "Pride and Prejudice", "author": "Jane Austen", "publisher": "Penguin",
     "isbn": "9780141439518", "category": "Romance", "classification": "Fiction",
     "pageCount": 432, "price": 9.99},
    {"title": "Moby Dick", "author": "Herman Melville", "publisher": "Penguin",
     "isbn": "9780142437247", "category": "Classic", "classification": "Fiction",
     "pageCount": 720, "price": 11.99},
    {"title": "A Brief History of Time", "author": "Stephen Hawking", "publisher": "Bantam",
     "isbn": "9780553380163", "category": "Science", "classification": "Non-Fiction",
     "pageCount": 212, "price": 10.99},
    {"title": "Great Expectations", "author": "Charles Dickens", "publisher": "Penguin",
     "isbn": "9780141439563", "category": "Classic", "pageCount": 544, "price": 8.5},
    {"title": "Cosmos", "author": "Carl Sagan", "publisher": "Ballantine",
     "isbn": "9780345539434", "category": "Science", "classification": "Non-Fiction",
     "pageCount": 396, "price": 18.0},
    {"title": "Emma", "author": "Jane Austen", "publisher": "Penguin",
     "isbn": "9780141439587", "category": "Romance", "classification": "Fiction",
     "pageCount": 474, "price": 100.0},
]


@pytest.fixture
def session_factory():
    engine = create_engine_for_url("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(client):
    """Load SAMPLE_BOOKS through the API; returns the created bodies."""
    created = []
    for book in SAMPLE_BOOKS:
        r = client.post("/api/books", json=book)
        assert r.status_code == 201
        created.append(r.json())
    return created


@pytest.fixture
def broken_db(client, session_factory):
    """Replace get_db with sessions whose queries fail like a locked database."""
    from sqlalchemy.exc import OperationalError

    def _execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def _get_db():
        session = session_factory()
        session.execute = _execute
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield

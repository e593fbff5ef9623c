"""
Pytest configuration and shared fixtures.
"""

import random

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.main import create_app
from api.services import BookServices
from utilities.config import LibraryConfig

TEST_API_KEY = "lib_test-key-for-write-requests"


def generate_isbn() -> str:
    """Random value with the 3-10 digit shape used throughout the tests."""
    return f"{random.randint(100, 999)}-{random.randint(1000000000, 2100999999)}"


def generate_book(title: str = "Integration Testing", isbn: str = None) -> dict:
    """Book payload as a client would send it."""
    return {
        "isbn": isbn or generate_isbn(),
        "title": title,
        "author": "Chris Lapraille",
        "pageCount": 450,
        "shortDescription": "My Best Book",
        "releaseDate": "2024-08-22",
    }


@pytest.fixture
def database_path(tmp_path):
    """Path of a fresh SQLite database file."""
    return tmp_path / "library.db"


@pytest.fixture
def services(database_path):
    """Services bound to an uninitialized database."""
    return BookServices.build(database_path)


@pytest_asyncio.fixture
async def repository(services):
    """Book repository on an initialized database."""
    await services.initializer.initialize()
    return services.repository


@pytest.fixture
def app(database_path):
    """Application configured with a test API key and a temporary database."""
    return create_app(
        api_config=APIConfig(api_keys=TEST_API_KEY),
        library_config=LibraryConfig(database_path=str(database_path))
    )


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Authorization header carrying the test API key."""
    return {"Authorization": f"Bearer {TEST_API_KEY}"}


@pytest.fixture
def make_book():
    """Factory for book payloads."""
    return generate_book

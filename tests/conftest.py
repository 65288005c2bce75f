"""
Shared fixtures: every test gets a fresh in-memory MongoDB (mongomock) with the menu seeded.
"""
import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import seed


@pytest.fixture
def db():
    previous = database.db
    handle = mongomock.MongoClient()["room_service_test"]
    database.use_database(handle)
    yield handle
    database.use_database(previous)


@pytest.fixture
def menu(db):
    """Seeded catalog as name -> item id."""
    return seed.seed_items()


@pytest.fixture
def api(menu):
    from main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def caesar_and_salmon(menu):
    return [
        {"itemId": menu["Caesar Salad"], "quantity": 2},
        {"itemId": menu["Grilled Salmon"], "quantity": 1},
    ]

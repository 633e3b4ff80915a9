"""
Shared fixtures: an in-process fake store and a seeded SQLite schema.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pytest

from lightbnb.db import ExecutionError


class FakeStore:
    """
    Records every (query, params) pair and replays queued responses.

    A queued exception instance is raised instead of returned.
    """

    def __init__(self, responses: Sequence[Any] = (), paramstyle: str = "numeric_dollar"):
        self.paramstyle = paramstyle
        self.calls: List[tuple] = []
        self._responses = list(responses)

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    async def execute(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((query, list(params)))
        response = self._responses.pop(0) if self._responses else []
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def failing_store():
    return FakeStore([ExecutionError("connection refused")])


SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE properties (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        owner_id INTEGER NOT NULL REFERENCES users (id),
        title TEXT NOT NULL,
        description TEXT,
        thumbnail_photo_url TEXT,
        cover_photo_url TEXT,
        cost_per_night INTEGER NOT NULL DEFAULT 0,
        parking_spaces INTEGER NOT NULL DEFAULT 0,
        number_of_bathrooms INTEGER NOT NULL DEFAULT 0,
        number_of_bedrooms INTEGER NOT NULL DEFAULT 0,
        country TEXT,
        street TEXT,
        city TEXT,
        province TEXT,
        post_code TEXT,
        active BOOLEAN NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE reservations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        start_date DATE NOT NULL,
        end_date DATE NOT NULL,
        property_id INTEGER NOT NULL REFERENCES properties (id),
        guest_id INTEGER NOT NULL REFERENCES users (id)
    )
    """,
    """
    CREATE TABLE property_reviews (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guest_id INTEGER NOT NULL REFERENCES users (id),
        property_id INTEGER NOT NULL REFERENCES properties (id),
        reservation_id INTEGER REFERENCES reservations (id),
        rating SMALLINT NOT NULL DEFAULT 0,
        message TEXT
    )
    """,
]

# (id, owner_id, title, cost_per_night in cents, city)
PROPERTIES = [
    (1, 1, "Cozy Loft", 8000, "Vancouver"),
    (2, 1, "Harbour View", 25000, "Vancouver"),
    (3, 2, "Cabin", 5000, "Victoria"),
    (4, 1, "Studio", 12000, "North Vancouver"),
    (5, 2, "Chalet", 9000, "Whist_ler"),
    (6, 2, "Orchard House", 15000, "Kettle Valley"),
]

# (property_id, rating): averages 1=4.5, 2=3, 3=4, 4=5, 5=2, 6=4
REVIEWS = [(1, 5), (1, 4), (2, 3), (3, 4), (4, 5), (5, 2), (6, 4)]


async def create_schema(store) -> None:
    for statement in SCHEMA:
        await store.execute(statement)


async def seed(store) -> None:
    await create_schema(store)
    for user_id, name in [(1, "Alice"), (2, "Bob"), (3, "Guest")]:
        await store.execute(
            "INSERT INTO users (id, name, email, password) VALUES (?1, ?2, ?3, ?4)",
            [user_id, name, f"{name.lower()}@example.com", "hash"],
        )
    for property_id, owner_id, title, cost, city in PROPERTIES:
        await store.execute(
            "INSERT INTO properties (id, owner_id, title, cost_per_night, city) VALUES (?1, ?2, ?3, ?4, ?5)",
            [property_id, owner_id, title, cost, city],
        )
    for property_id, rating in REVIEWS:
        await store.execute(
            "INSERT INTO property_reviews (guest_id, property_id, rating) VALUES (3, ?1, ?2)",
            [property_id, rating],
        )
    await store.execute(
        "INSERT INTO reservations (start_date, end_date, property_id, guest_id) VALUES (?1, ?2, ?3, ?4)",
        ["2026-07-01", "2026-07-05", 2, 3],
    )
    await store.execute(
        "INSERT INTO reservations (start_date, end_date, property_id, guest_id) VALUES (?1, ?2, ?3, ?4)",
        ["2026-03-10", "2026-03-12", 1, 3],
    )


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'lightbnb_test.db'}"

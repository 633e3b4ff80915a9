"""
lightbnb/repositories.py

Fixed single-statement reads and inserts used alongside property search:
user lookup, registration, reservation listing and new listings.

Unlike search_properties, these let ExecutionError propagate; the route layer
decides how a failure is reported.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

try:
    from lightbnb.config import DEFAULT_SEARCH_LIMIT
    from lightbnb.schemas import PropertyCreate
    from lightbnb.search import placeholder, to_minor_units
except ModuleNotFoundError:
    from config import DEFAULT_SEARCH_LIMIT
    from schemas import PropertyCreate
    from search import placeholder, to_minor_units


PROPERTY_COLUMNS = (
    "owner_id",
    "title",
    "description",
    "thumbnail_photo_url",
    "cover_photo_url",
    "cost_per_night",
    "street",
    "city",
    "province",
    "post_code",
    "country",
    "parking_spaces",
    "number_of_bathrooms",
    "number_of_bedrooms",
)


def _placeholders(count: int, paramstyle: str) -> str:
    return ", ".join(placeholder(i, paramstyle) for i in range(1, count + 1))


async def _first(store, query: str, params: List[Any]) -> Optional[Dict[str, Any]]:
    rows = await store.execute(query, params)
    return rows[0] if rows else None


# ---------------------------------------------------------
# Users
# ---------------------------------------------------------
async def get_user_with_email(store, email: str) -> Optional[Dict[str, Any]]:
    """Single user by email, or None."""
    query = f"SELECT id, name, email, password FROM users WHERE email = {placeholder(1, store.paramstyle)};"
    return await _first(store, query, [email])


async def get_user_with_id(store, user_id: int) -> Optional[Dict[str, Any]]:
    """Single user by id, or None."""
    query = f"SELECT id, name, email, password FROM users WHERE id = {placeholder(1, store.paramstyle)};"
    return await _first(store, query, [user_id])


async def add_user(store, name: str, email: str, password_hash: str) -> int:
    """Insert a user and return the generated id."""
    query = (
        "INSERT INTO users (name, email, password) "
        f"VALUES ({_placeholders(3, store.paramstyle)}) RETURNING id;"
    )
    row = await _first(store, query, [name, email, password_hash])
    return row["id"]


# ---------------------------------------------------------
# Reservations
# ---------------------------------------------------------
async def get_all_reservations(store, guest_id: int, limit: int = DEFAULT_SEARCH_LIMIT) -> List[Dict[str, Any]]:
    """Reservations for one guest, earliest start first."""
    ps = store.paramstyle
    query = (
        "SELECT * FROM reservations "
        f"WHERE guest_id = {placeholder(1, ps)} "
        f"ORDER BY start_date ASC LIMIT {placeholder(2, ps)};"
    )
    return await store.execute(query, [guest_id, limit])


# ---------------------------------------------------------
# Properties
# ---------------------------------------------------------
async def add_property(store, prop: PropertyCreate) -> int:
    """
    Insert a listing and return the generated id.

    cost_per_night arrives in dollars and is stored in cents.
    """
    data = prop.model_dump()
    data["cost_per_night"] = to_minor_units(prop.cost_per_night)
    values = [data[column] for column in PROPERTY_COLUMNS]

    query = (
        f"INSERT INTO properties ({', '.join(PROPERTY_COLUMNS)}) "
        f"VALUES ({_placeholders(len(PROPERTY_COLUMNS), store.paramstyle)}) RETURNING id;"
    )
    row = await _first(store, query, values)
    return row["id"]

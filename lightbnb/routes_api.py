"""
lightbnb/routes_api.py

Listing, reservation and user endpoints.

- Property search is a single parameterized query (see lightbnb.search)
- A failed search is HTTP 500, never an empty 200
- Store errors are logged; clients only see a generic detail
"""

from __future__ import annotations

import hashlib
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

try:
    from lightbnb import repositories
    from lightbnb.config import DEFAULT_SEARCH_LIMIT, IS_DEV, MAX_SEARCH_LIMIT
    from lightbnb.db import ExecutionError, Store
    from lightbnb.schemas import (
        CreatedResponse,
        PropertyCreate,
        PropertyRow,
        PropertySearchResponse,
        ReservationListResponse,
        ReservationRow,
        SearchOptions,
        UserCreate,
        UserResponse,
    )
    from lightbnb.search import search_properties
except ModuleNotFoundError:
    import repositories
    from config import DEFAULT_SEARCH_LIMIT, IS_DEV, MAX_SEARCH_LIMIT
    from db import ExecutionError, Store
    from schemas import (
        CreatedResponse,
        PropertyCreate,
        PropertyRow,
        PropertySearchResponse,
        ReservationListResponse,
        ReservationRow,
        SearchOptions,
        UserCreate,
        UserResponse,
    )
    from search import search_properties


router = APIRouter(tags=["lightbnb"])


def get_store(request: Request) -> Store:
    """Store opened by the app lifespan."""
    return request.app.state.store


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


def _database_error(label: str, e: ExecutionError) -> HTTPException:
    # Log error but don't expose internal details
    print(f"[API] {label} DB error: {e}")
    return HTTPException(status_code=500, detail="Database error")


# ---------------------------------------------------------
# Properties
# ---------------------------------------------------------
@router.get("/api/properties", response_model=PropertySearchResponse)
async def list_properties(
    owner_id: Optional[int] = Query(None, ge=1),
    minimum_price_per_night: Optional[Decimal] = Query(None, ge=0),
    maximum_price_per_night: Optional[Decimal] = Query(None, ge=0),
    city: Optional[str] = Query(None, max_length=100),
    minimum_rating: Optional[float] = Query(None, ge=0, le=5),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    store: Store = Depends(get_store),
) -> PropertySearchResponse:
    """
    Search listings with optional filters, cheapest first.

    Raises:
        HTTPException(500): the search query failed
    """
    options = SearchOptions(
        owner_id=owner_id,
        minimum_price_per_night=minimum_price_per_night,
        maximum_price_per_night=maximum_price_per_night,
        city=city,
        minimum_rating=minimum_rating,
    )
    result = await search_properties(store, options, limit)
    if not result.ok:
        # Already logged by the search observer
        raise HTTPException(status_code=500, detail="Database error")

    properties = [PropertyRow(**row) for row in result.rows]
    return PropertySearchResponse(properties=properties, total=len(properties))


@router.post("/api/properties", response_model=CreatedResponse)
async def create_property(prop: PropertyCreate, store: Store = Depends(get_store)) -> CreatedResponse:
    """Add a listing; cost_per_night is given in dollars."""
    owner = await _get_user_or_404(store, prop.owner_id)
    try:
        property_id = await repositories.add_property(store, prop)
    except ExecutionError as e:
        raise _database_error("create_property", e)
    if IS_DEV:
        print(f"[API] Property {property_id} created for owner {owner['id']}")
    return CreatedResponse(id=property_id)


# ---------------------------------------------------------
# Reservations
# ---------------------------------------------------------
@router.get("/api/reservations", response_model=ReservationListResponse)
async def list_reservations(
    guest_id: int = Query(..., ge=1),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    store: Store = Depends(get_store),
) -> ReservationListResponse:
    try:
        rows = await repositories.get_all_reservations(store, guest_id, limit)
    except ExecutionError as e:
        raise _database_error("list_reservations", e)
    reservations = [ReservationRow(**row) for row in rows]
    return ReservationListResponse(reservations=reservations, total=len(reservations))


# ---------------------------------------------------------
# Users
# ---------------------------------------------------------
async def _get_user_or_404(store: Store, user_id: int) -> dict:
    try:
        user = await repositories.get_user_with_id(store, user_id)
    except ExecutionError as e:
        raise _database_error("get_user", e)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/users", response_model=CreatedResponse)
async def register(req: UserCreate, store: Store = Depends(get_store)) -> CreatedResponse:
    """
    Register a user.

    Raises:
        HTTPException(409): email already registered
    """
    try:
        if await repositories.get_user_with_email(store, req.email) is not None:
            raise HTTPException(status_code=409, detail="Email already registered")
        user_id = await repositories.add_user(store, req.name, req.email, hash_password(req.password))
    except ExecutionError as e:
        raise _database_error("register", e)
    return CreatedResponse(id=user_id)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, store: Store = Depends(get_store)) -> UserResponse:
    user = await _get_user_or_404(store, user_id)
    return UserResponse(**user)

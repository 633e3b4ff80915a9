"""
lightbnb/schemas.py

Pydantic schemas for property search, listings, users and reservations.
All user-supplied values reach SQL only as bound parameters.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator


# ========================================================================
# PROPERTY SEARCH SCHEMAS
# ========================================================================

class SearchOptions(BaseModel):
    """Sparse filter set for property search.

    Every field is optional. None means "no constraint"; 0 is a real
    constraint. Prices are in major currency units (dollars); they are
    converted to cents when the query is built.
    """
    owner_id: Optional[int] = Field(None, description="Only listings owned by this user")
    minimum_price_per_night: Optional[Decimal] = Field(None, ge=0, description="Minimum nightly cost (dollars)")
    maximum_price_per_night: Optional[Decimal] = Field(None, ge=0, description="Maximum nightly cost (dollars)")
    city: Optional[str] = Field(None, max_length=100, description="Substring of the city name")
    minimum_rating: Optional[float] = Field(None, ge=0, le=5, description="Minimum average review rating")

    class Config:
        extra = "ignore"

    @validator("city", pre=True)
    def trim_city(cls, v):
        """Trim whitespace; a blank city is no constraint."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class PropertyRow(BaseModel):
    """Single listing as returned by search (properties.* plus average_rating)."""
    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    thumbnail_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cost_per_night: int = Field(..., description="Nightly cost in cents")
    parking_spaces: int = 0
    number_of_bathrooms: int = 0
    number_of_bedrooms: int = 0
    country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    post_code: Optional[str] = None
    active: bool = True
    average_rating: Optional[float] = None

    class Config:
        # Allows instantiation from DB rows with extra columns
        extra = "ignore"


class PropertySearchResponse(BaseModel):
    """Response schema for property search."""
    properties: List[PropertyRow] = Field(default_factory=list, description="Matching listings")
    total: int = Field(0, description="Number of listings returned (capped at limit)")


class PropertyCreate(BaseModel):
    """Request schema for a new listing. cost_per_night is in dollars."""
    owner_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    thumbnail_photo_url: str = Field("", max_length=255)
    cover_photo_url: str = Field("", max_length=255)
    cost_per_night: Decimal = Field(..., ge=0)
    street: str = Field("", max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    province: str = Field("", max_length=255)
    post_code: str = Field("", max_length=255)
    country: str = Field("", max_length=255)
    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)

    @validator("title", "city", pre=True)
    def trim_required(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


# ========================================================================
# USER / RESERVATION SCHEMAS
# ========================================================================

class UserCreate(BaseModel):
    """Request schema for registration."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)

    @validator("email", pre=True)
    def normalize_email(cls, v):
        """Trim and lowercase email."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @validator("email")
    def validate_email_shape(cls, v):
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class UserResponse(BaseModel):
    """Public user record. Never includes the password hash."""
    id: int
    name: str
    email: str

    class Config:
        extra = "ignore"


class ReservationRow(BaseModel):
    id: int
    start_date: Any
    end_date: Any
    property_id: int
    guest_id: int

    class Config:
        extra = "ignore"


class ReservationListResponse(BaseModel):
    reservations: List[ReservationRow] = Field(default_factory=list)
    total: int = 0


class CreatedResponse(BaseModel):
    id: int

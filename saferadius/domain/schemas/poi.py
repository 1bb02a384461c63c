"""Pydantic schemas for POI submission, management views and search."""

import math
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class POICategory(str, Enum):
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    GYM = "gym"
    HOSPITAL = "hospital"
    SCHOOL = "school"
    PARK = "park"
    SHOPPING = "shopping"
    GAS_STATION = "gas_station"
    BANK = "bank"
    PHARMACY = "pharmacy"
    OTHER = "other"


class POICreate(BaseModel):
    name: str = Field(max_length=200)
    address: str = Field(max_length=500)
    area: str = Field(max_length=200)
    city: str = Field(max_length=200)
    postal_code: str = Field(max_length=20)
    category: POICategory

    @field_validator("name", "address", "area", "city", "postal_code")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("All fields are required")
        return value


class POICreated(BaseModel):
    message: str = "POI added successfully"
    poi_id: int


class POIRead(BaseModel):
    """Plaintext view for owners."""
    id: int
    name: str
    address: str
    area: str
    city: str
    postal_code: str
    category: POICategory
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class POICreator(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class POIAdminRead(POIRead):
    """Plaintext view for admins, with the submitting account."""
    owner: Optional[POICreator] = None


class SearchRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    radius_km: float = Field(default=5.0, gt=0)
    category: Optional[POICategory] = None

    @field_validator("radius_km")
    @classmethod
    def finite_radius(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("radius_km must be a finite number")
        return value


class POISearchResult(BaseModel):
    """Decrypted view built per search and never stored."""
    id: int
    name: str
    lat: float
    lon: float
    category: str
    distance_km: float
    created_at: Optional[datetime] = None


class SearchResponse(BaseModel):
    count: int
    radius_km: float
    results: list[POISearchResult]

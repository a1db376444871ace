from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shipspace.schemas.rating import ReputationSummaryOut
from shipspace.services.catalog import (
    ARRIVAL_PORTS,
    DESTINATION_CITIES,
    LOADING_PORTS,
    ORIGIN_CITIES,
    VEHICLE_TYPES,
)


ListingKind = Literal["offer", "request"]
ListingStatus = Literal["pending", "approved", "rejected"]


def _from_catalog(value: str, allowed: tuple[str, ...], field: str) -> str:
    # exact match: city filters compare stored values to catalog entries
    if value not in allowed:
        raise ValueError(f"{field} must be one of the catalog values")
    return value


class ListingDraft(BaseModel):
    """
    What an owner submits. Content is fixed after creation, only status moves.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: ListingKind
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=10_000)

    origin_city: str = Field(min_length=1, max_length=120)
    destination_city: str = Field(min_length=1, max_length=120)
    loading_port: str = Field(min_length=1, max_length=120)
    arrival_port: str = Field(min_length=1, max_length=120)

    spot_count: int = Field(ge=1)
    vehicle_type: str = Field(min_length=1, max_length=60)
    ship_date: date

    contact_email: str = Field(min_length=3, max_length=320)
    contact_phone: str = Field(min_length=1, max_length=40)

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("contact_email must be an email address")
        return v.lower()

    @field_validator("origin_city")
    @classmethod
    def validate_origin_city(cls, v: str) -> str:
        return _from_catalog(v, ORIGIN_CITIES, "origin_city")

    @field_validator("destination_city")
    @classmethod
    def validate_destination_city(cls, v: str) -> str:
        return _from_catalog(v, DESTINATION_CITIES, "destination_city")

    @field_validator("loading_port")
    @classmethod
    def validate_loading_port(cls, v: str) -> str:
        return _from_catalog(v, LOADING_PORTS, "loading_port")

    @field_validator("arrival_port")
    @classmethod
    def validate_arrival_port(cls, v: str) -> str:
        return _from_catalog(v, ARRIVAL_PORTS, "arrival_port")

    @field_validator("vehicle_type")
    @classmethod
    def validate_vehicle_type(cls, v: str) -> str:
        return _from_catalog(v, VEHICLE_TYPES, "vehicle_type")

    @field_validator("spot_count", mode="before")
    @classmethod
    def reject_bool(cls, v):
        # bool is an int subclass; True must not count as one spot
        if isinstance(v, bool):
            raise ValueError("spot_count must be an integer")
        return v


class ListingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    kind: ListingKind
    title: str
    description: str
    origin_city: str
    destination_city: str
    loading_port: str
    arrival_port: str
    spot_count: int
    vehicle_type: str
    ship_date: date
    contact_email: str
    contact_phone: str
    status: ListingStatus
    created_at: datetime


class SellerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_name: str
    company_name: str | None
    reputation: ReputationSummaryOut


class EnrichedListingOut(ListingOut):
    seller: SellerOut

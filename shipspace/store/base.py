from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Protocol, runtime_checkable

from shipspace.schemas.listing import ListingDraft


@dataclass(frozen=True)
class ListingRecord:
    id: str
    owner_id: str
    kind: str
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
    status: str
    created_at: datetime


@dataclass(frozen=True)
class ProfileRecord:
    id: str
    company_name: str
    contact_person: str
    phone: str
    is_admin: bool = False


@dataclass(frozen=True)
class NewRating:
    reviewer_id: str
    rated_party_id: str
    score: int
    feedback: str = ""
    listing_id: str | None = None


@dataclass(frozen=True)
class RatingRecord:
    id: str
    reviewer_id: str
    rated_party_id: str
    score: int
    feedback: str
    listing_id: str | None
    created_at: datetime


@dataclass(frozen=True)
class AuditEntry:
    action: str
    actor_id: str | None
    target_type: str | None = None
    target_id: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class MarketplaceStore(Protocol):
    """
    Persistence contract the core runs against.

    Implementations must:
    - return listing lists newest first (created_at desc)
    - apply `update_listing_status(..., expected=...)` as a single atomic compare-and-set
    - enforce one rating per (reviewer, rated party) and raise ConflictError on a duplicate
    - raise TransientError for I/O failures, never a driver exception
    Writes become durable on `commit()`.
    """

    async def create_listing(self, draft: ListingDraft, owner_id: str) -> ListingRecord:
        ...

    async def get_listing(self, listing_id: str) -> ListingRecord | None:
        ...

    async def list_listings_by_status(self, status: str) -> list[ListingRecord]:
        ...

    async def list_listings_by_owner(self, owner_id: str) -> list[ListingRecord]:
        ...

    async def update_listing_status(self, listing_id: str, status: str, *, expected: str | None = None) -> bool:
        """
        Returns True if a row changed. With `expected`, only a row currently in that status is touched.
        """
        ...

    async def delete_listing(self, listing_id: str) -> bool:
        ...

    async def insert_rating(self, row: NewRating) -> RatingRecord:
        ...

    async def list_ratings_for_party(self, party_id: str) -> list[RatingRecord]:
        ...

    async def list_ratings_for_parties(self, party_ids: Iterable[str]) -> list[RatingRecord]:
        ...

    async def get_profile(self, user_id: str) -> ProfileRecord | None:
        ...

    async def list_profiles(self, user_ids: Iterable[str]) -> list[ProfileRecord]:
        ...

    async def upsert_profile(self, profile: ProfileRecord) -> ProfileRecord:
        ...

    async def insert_api_key(self, *, user_id: str, key_prefix: str, key_hash: str) -> str:
        ...

    async def get_api_key_owner(self, key_hash: str) -> str | None:
        ...

    async def record_audit(self, entry: AuditEntry) -> None:
        ...

    async def commit(self) -> None:
        ...

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from shipspace.core.errors import ConflictError
from shipspace.core.ids import LISTING_PREFIX, RATING_PREFIX, API_KEY_PREFIX, gen_id
from shipspace.schemas.listing import ListingDraft
from shipspace.store.base import (
    AuditEntry,
    ListingRecord,
    NewRating,
    ProfileRecord,
    RatingRecord,
)


class InMemoryStore:
    """
    Process-local MarketplaceStore. Same ordering and constraint rules as the SQL store;
    used by tests and local runs without a database.
    """

    def __init__(self) -> None:
        self.listings: dict[str, ListingRecord] = {}
        self.profiles: dict[str, ProfileRecord] = {}
        self.ratings: dict[str, RatingRecord] = {}
        self.api_keys: dict[str, str] = {}  # key_hash -> user_id
        self.audit_log: list[AuditEntry] = []
        self.commits = 0
        self.calls: list[str] = []

        # insertion sequence breaks created_at ties
        self._seq = itertools.count()
        self._order: dict[str, int] = {}

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _newest_first(self, rows: Iterable[ListingRecord]) -> list[ListingRecord]:
        return sorted(rows, key=lambda r: (r.created_at, self._order[r.id]), reverse=True)

    # --- listings ---

    async def create_listing(self, draft: ListingDraft, owner_id: str) -> ListingRecord:
        self.calls.append("create_listing")
        record = ListingRecord(
            id=gen_id(LISTING_PREFIX),
            owner_id=owner_id,
            status="pending",
            created_at=self._now(),
            **draft.model_dump(),
        )
        self.listings[record.id] = record
        self._order[record.id] = next(self._seq)
        return record

    async def get_listing(self, listing_id: str) -> ListingRecord | None:
        self.calls.append("get_listing")
        return self.listings.get(listing_id)

    async def list_listings_by_status(self, status: str) -> list[ListingRecord]:
        self.calls.append("list_listings_by_status")
        return self._newest_first(r for r in self.listings.values() if r.status == status)

    async def list_listings_by_owner(self, owner_id: str) -> list[ListingRecord]:
        self.calls.append("list_listings_by_owner")
        return self._newest_first(r for r in self.listings.values() if r.owner_id == owner_id)

    async def update_listing_status(self, listing_id: str, status: str, *, expected: str | None = None) -> bool:
        self.calls.append("update_listing_status")
        current = self.listings.get(listing_id)
        if current is None:
            return False
        if expected is not None and current.status != expected:
            return False
        self.listings[listing_id] = replace(current, status=status)
        return True

    async def delete_listing(self, listing_id: str) -> bool:
        self.calls.append("delete_listing")
        return self.listings.pop(listing_id, None) is not None

    # --- ratings ---

    async def insert_rating(self, row: NewRating) -> RatingRecord:
        self.calls.append("insert_rating")
        for existing in self.ratings.values():
            if existing.reviewer_id == row.reviewer_id and existing.rated_party_id == row.rated_party_id:
                raise ConflictError("Rating already submitted for this user")

        record = RatingRecord(
            id=gen_id(RATING_PREFIX),
            reviewer_id=row.reviewer_id,
            rated_party_id=row.rated_party_id,
            score=row.score,
            feedback=row.feedback,
            listing_id=row.listing_id,
            created_at=self._now(),
        )
        self.ratings[record.id] = record
        self._order[record.id] = next(self._seq)
        return record

    async def list_ratings_for_party(self, party_id: str) -> list[RatingRecord]:
        self.calls.append("list_ratings_for_party")
        rows = [r for r in self.ratings.values() if r.rated_party_id == party_id]
        return sorted(rows, key=lambda r: (r.created_at, self._order[r.id]), reverse=True)

    async def list_ratings_for_parties(self, party_ids: Iterable[str]) -> list[RatingRecord]:
        self.calls.append("list_ratings_for_parties")
        wanted = set(party_ids)
        return [r for r in self.ratings.values() if r.rated_party_id in wanted]

    # --- profiles ---

    async def get_profile(self, user_id: str) -> ProfileRecord | None:
        self.calls.append("get_profile")
        return self.profiles.get(user_id)

    async def list_profiles(self, user_ids: Iterable[str]) -> list[ProfileRecord]:
        self.calls.append("list_profiles")
        return [self.profiles[i] for i in sorted(set(user_ids)) if i in self.profiles]

    async def upsert_profile(self, profile: ProfileRecord) -> ProfileRecord:
        self.calls.append("upsert_profile")
        self.profiles[profile.id] = profile
        return profile

    # --- identity boundary ---

    async def insert_api_key(self, *, user_id: str, key_prefix: str, key_hash: str) -> str:
        self.calls.append("insert_api_key")
        if key_hash in self.api_keys:
            raise ConflictError("API key already registered")
        self.api_keys[key_hash] = user_id
        return gen_id(API_KEY_PREFIX)

    async def get_api_key_owner(self, key_hash: str) -> str | None:
        self.calls.append("get_api_key_owner")
        return self.api_keys.get(key_hash)

    # --- audit / unit of work ---

    async def record_audit(self, entry: AuditEntry) -> None:
        self.audit_log.append(entry)

    async def commit(self) -> None:
        self.commits += 1

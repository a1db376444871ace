from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from shipspace.core.errors import ConflictError, TransientError, ValidationError
from shipspace.models.api_key import ApiKey
from shipspace.models.audit_log import AuditLog
from shipspace.models.listing import Listing
from shipspace.models.profile import Profile
from shipspace.models.rating import Rating
from shipspace.schemas.listing import ListingDraft
from shipspace.store.base import (
    AuditEntry,
    ListingRecord,
    NewRating,
    ProfileRecord,
    RatingRecord,
)

log = logging.getLogger(__name__)

RATING_UNIQUE_CONSTRAINT = "uq_rating_reviewer_rated_party"


_TRANSIENT_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, asyncio.TimeoutError, ConnectionError)


def _listing_record(row: Listing) -> ListingRecord:
    return ListingRecord(
        id=row.id,
        owner_id=row.owner_id,
        kind=row.kind,
        title=row.title,
        description=row.description,
        origin_city=row.origin_city,
        destination_city=row.destination_city,
        loading_port=row.loading_port,
        arrival_port=row.arrival_port,
        spot_count=row.spot_count,
        vehicle_type=row.vehicle_type,
        ship_date=row.ship_date,
        contact_email=row.contact_email,
        contact_phone=row.contact_phone,
        status=row.status,
        created_at=row.created_at,
    )


def _profile_record(row: Profile) -> ProfileRecord:
    return ProfileRecord(
        id=row.id,
        company_name=row.company_name,
        contact_person=row.contact_person,
        phone=row.phone,
        is_admin=row.is_admin,
    )


def _rating_record(row: Rating) -> RatingRecord:
    return RatingRecord(
        id=row.id,
        reviewer_id=row.reviewer_id,
        rated_party_id=row.rated_party_id,
        score=row.score,
        feedback=row.feedback,
        listing_id=row.listing_id,
        created_at=row.created_at,
    )


class SqlAlchemyStore:
    """
    MarketplaceStore over an AsyncSession. Writes are flushed, the caller commits.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        # an AsyncSession cannot run two statements at once; gathered reads queue here
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def _io(self, op: str):
        """
        Driver/network failures become TransientError; everything else propagates unchanged.
        """
        async with self._lock:
            try:
                yield
            except _TRANSIENT_ERRORS as e:
                log.warning("store op %s failed transiently: %s", op, e)
                await self._reset()
                raise TransientError(f"Store unavailable during {op}") from e
            except DBAPIError as e:
                if not e.connection_invalidated:
                    raise
                log.warning("store op %s lost its connection: %s", op, e)
                await self._reset()
                raise TransientError(f"Store connection lost during {op}") from e

    async def _reset(self) -> None:
        # the failed transaction is unusable; a retry needs a fresh one
        try:
            await self.db.rollback()
        except _TRANSIENT_ERRORS + (DBAPIError,):
            log.exception("rollback after transient failure failed")

    # --- listings ---

    async def create_listing(self, draft: ListingDraft, owner_id: str) -> ListingRecord:
        listing = Listing(owner_id=owner_id, status="pending", **draft.model_dump())
        async with self._io("create_listing"):
            self.db.add(listing)
            await self.db.flush()
            # created_at is a server default
            await self.db.refresh(listing)
        return _listing_record(listing)

    async def get_listing(self, listing_id: str) -> ListingRecord | None:
        async with self._io("get_listing"):
            row = (await self.db.execute(select(Listing).where(Listing.id == listing_id))).scalar_one_or_none()
        return _listing_record(row) if row else None

    async def list_listings_by_status(self, status: str) -> list[ListingRecord]:
        stmt = (
            select(Listing)
            .where(Listing.status == status)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        async with self._io("list_listings_by_status"):
            rows = (await self.db.execute(stmt)).scalars().all()
        return [_listing_record(r) for r in rows]

    async def list_listings_by_owner(self, owner_id: str) -> list[ListingRecord]:
        stmt = (
            select(Listing)
            .where(Listing.owner_id == owner_id)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        async with self._io("list_listings_by_owner"):
            rows = (await self.db.execute(stmt)).scalars().all()
        return [_listing_record(r) for r in rows]

    async def update_listing_status(self, listing_id: str, status: str, *, expected: str | None = None) -> bool:
        # single conditional UPDATE so two racing moderators cannot both win
        stmt = update(Listing).where(Listing.id == listing_id)
        if expected is not None:
            stmt = stmt.where(Listing.status == expected)
        stmt = stmt.values(status=status).execution_options(synchronize_session="fetch")

        async with self._io("update_listing_status"):
            res = await self.db.execute(stmt)
        return res.rowcount > 0

    async def delete_listing(self, listing_id: str) -> bool:
        stmt = delete(Listing).where(Listing.id == listing_id).execution_options(synchronize_session="fetch")
        async with self._io("delete_listing"):
            res = await self.db.execute(stmt)
        return res.rowcount > 0

    # --- ratings ---

    async def insert_rating(self, row: NewRating) -> RatingRecord:
        rating = Rating(
            reviewer_id=row.reviewer_id,
            rated_party_id=row.rated_party_id,
            listing_id=row.listing_id,
            score=row.score,
            feedback=row.feedback,
        )
        async with self._io("insert_rating"):
            try:
                # savepoint: a duplicate must not poison the outer transaction
                async with self.db.begin_nested():
                    self.db.add(rating)
            except IntegrityError as e:
                if RATING_UNIQUE_CONSTRAINT in str(e.orig):
                    raise ConflictError("Rating already submitted for this user") from e
                raise ValidationError("Rating violates a store constraint") from e
            await self.db.refresh(rating)
        return _rating_record(rating)

    async def list_ratings_for_party(self, party_id: str) -> list[RatingRecord]:
        stmt = (
            select(Rating)
            .where(Rating.rated_party_id == party_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
        )
        async with self._io("list_ratings_for_party"):
            rows = (await self.db.execute(stmt)).scalars().all()
        return [_rating_record(r) for r in rows]

    async def list_ratings_for_parties(self, party_ids: Iterable[str]) -> list[RatingRecord]:
        ids = sorted(set(party_ids))
        if not ids:
            return []
        stmt = select(Rating).where(Rating.rated_party_id.in_(ids))
        async with self._io("list_ratings_for_parties"):
            rows = (await self.db.execute(stmt)).scalars().all()
        return [_rating_record(r) for r in rows]

    # --- profiles ---

    async def get_profile(self, user_id: str) -> ProfileRecord | None:
        async with self._io("get_profile"):
            row = await self.db.get(Profile, user_id)
        return _profile_record(row) if row else None

    async def list_profiles(self, user_ids: Iterable[str]) -> list[ProfileRecord]:
        ids = sorted(set(user_ids))
        if not ids:
            return []
        async with self._io("list_profiles"):
            rows = (await self.db.execute(select(Profile).where(Profile.id.in_(ids)))).scalars().all()
        return [_profile_record(r) for r in rows]

    async def upsert_profile(self, profile: ProfileRecord) -> ProfileRecord:
        async with self._io("upsert_profile"):
            row = await self.db.get(Profile, profile.id)
            if row is None:
                row = Profile(id=profile.id)
                self.db.add(row)
            row.company_name = profile.company_name
            row.contact_person = profile.contact_person
            row.phone = profile.phone
            row.is_admin = profile.is_admin
            await self.db.flush()
        return _profile_record(row)

    # --- identity boundary ---

    async def insert_api_key(self, *, user_id: str, key_prefix: str, key_hash: str) -> str:
        row = ApiKey(user_id=user_id, key_prefix=key_prefix, key_hash=key_hash, is_active=True)
        async with self._io("insert_api_key"):
            self.db.add(row)
            await self.db.flush()
        return row.id

    async def get_api_key_owner(self, key_hash: str) -> str | None:
        stmt = select(ApiKey.user_id).where(ApiKey.key_hash == key_hash, ApiKey.is_active.is_(True))
        async with self._io("get_api_key_owner"):
            return (await self.db.execute(stmt)).scalar_one_or_none()

    # --- audit / unit of work ---

    async def record_audit(self, entry: AuditEntry) -> None:
        self.db.add(AuditLog(
            actor_id=entry.actor_id,
            action=entry.action,
            target_type=entry.target_type,
            target_id=entry.target_id,
            detail=entry.detail or {},
        ))

    async def commit(self) -> None:
        async with self._io("commit"):
            try:
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                log.exception("commit failed: integrity error")
                raise ConflictError("Constraint violation") from e

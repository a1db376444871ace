"""
SqlAlchemyStore against a real Postgres. Skipped unless DATABASE_URL_TEST is set.
"""
import pytest

from shipspace.core.errors import ConflictError
from shipspace.schemas.listing import ListingDraft
from shipspace.store.base import AuditEntry, NewRating, ProfileRecord
from shipspace.store.sql import SqlAlchemyStore

from tests.factories import listing_draft


@pytest.fixture
def sql_store(db_session) -> SqlAlchemyStore:
    return SqlAlchemyStore(db_session)


@pytest.mark.asyncio
async def test_listing_status_compare_and_set(sql_store):
    listing = await sql_store.create_listing(ListingDraft.model_validate(listing_draft()), "usr_seller")
    assert listing.status == "pending"
    assert listing.created_at is not None

    assert await sql_store.update_listing_status(listing.id, "approved", expected="pending") is True
    # second moderator loses
    assert await sql_store.update_listing_status(listing.id, "rejected", expected="pending") is False

    stored = await sql_store.get_listing(listing.id)
    assert stored.status == "approved"

    approved = await sql_store.list_listings_by_status("approved")
    assert [r.id for r in approved] == [listing.id]
    assert await sql_store.list_listings_by_status("pending") == []


@pytest.mark.asyncio
async def test_delete_listing(sql_store):
    listing = await sql_store.create_listing(ListingDraft.model_validate(listing_draft()), "usr_seller")

    assert await sql_store.delete_listing(listing.id) is True
    assert await sql_store.delete_listing(listing.id) is False
    assert await sql_store.get_listing(listing.id) is None


@pytest.mark.asyncio
async def test_duplicate_rating_is_conflict(sql_store):
    first = await sql_store.insert_rating(NewRating(
        reviewer_id="usr_buyer", rated_party_id="usr_seller", score=5, feedback="great",
    ))
    assert first.id.startswith("rtg_")

    with pytest.raises(ConflictError):
        await sql_store.insert_rating(NewRating(
            reviewer_id="usr_buyer", rated_party_id="usr_seller", score=1, feedback="again",
        ))

    # the savepoint kept the first row usable
    rows = await sql_store.list_ratings_for_parties(["usr_seller", "usr_other"])
    assert [(r.reviewer_id, r.score) for r in rows] == [("usr_buyer", 5)]


@pytest.mark.asyncio
async def test_profiles_and_api_keys(sql_store):
    await sql_store.upsert_profile(ProfileRecord(
        id="usr_seller", company_name="Canton Freight", contact_person="Li Wei", phone="1",
    ))
    await sql_store.upsert_profile(ProfileRecord(
        id="usr_seller", company_name="Canton Freight Ltd", contact_person="Li Wei", phone="2",
    ))

    profiles = await sql_store.list_profiles(["usr_seller", "usr_ghost"])
    assert [(p.id, p.company_name) for p in profiles] == [("usr_seller", "Canton Freight Ltd")]

    await sql_store.insert_api_key(user_id="usr_seller", key_prefix="abcd", key_hash="hash-1")
    assert await sql_store.get_api_key_owner("hash-1") == "usr_seller"
    assert await sql_store.get_api_key_owner("hash-2") is None

    await sql_store.record_audit(AuditEntry(
        action="profile.updated", actor_id="usr_seller", target_type="user", target_id="usr_seller",
    ))
    await sql_store.commit()

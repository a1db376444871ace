import pytest

from shipspace.core.errors import AuthError, NotFoundError, ValidationError
from shipspace.services.auth import Actor
from shipspace.services.moderation import ModerationWorkflow
from shipspace.services.search import search

from tests.factories import listing_draft


@pytest.fixture
def workflow(store):
    return ModerationWorkflow(store)


@pytest.mark.asyncio
async def test_submit_creates_pending_listing(workflow, store, seller):
    listing = await workflow.submit(listing_draft(), seller)

    assert listing.status == "pending"
    assert listing.owner_id == "usr_seller"
    assert listing.spot_count == 4
    assert store.audit_log[-1].action == "listing.submitted"


@pytest.mark.asyncio
@pytest.mark.parametrize("spot_count", [0, -3])
async def test_submit_rejects_non_positive_spot_count(workflow, seller, spot_count):
    with pytest.raises(ValidationError) as exc:
        await workflow.submit(listing_draft(spot_count=spot_count), seller)
    assert exc.value.details[0]["loc"] == ("spot_count",)


@pytest.mark.asyncio
async def test_submit_rejects_missing_and_blank_fields(workflow, seller):
    draft = listing_draft()
    del draft["origin_city"]
    with pytest.raises(ValidationError):
        await workflow.submit(draft, seller)

    with pytest.raises(ValidationError):
        await workflow.submit(listing_draft(title="   "), seller)


@pytest.mark.asyncio
async def test_submit_requires_identity(workflow):
    with pytest.raises(AuthError):
        await workflow.submit(listing_draft(), Actor.anonymous())


@pytest.mark.asyncio
async def test_approve_requires_admin(workflow, seller):
    listing = await workflow.submit(listing_draft(), seller)

    with pytest.raises(AuthError) as exc:
        await workflow.approve(listing.id, seller)
    assert exc.value.authenticated is True

    with pytest.raises(AuthError) as exc:
        await workflow.reject(listing.id, Actor.anonymous())
    assert exc.value.authenticated is False


@pytest.mark.asyncio
async def test_approve_unknown_listing(workflow, admin):
    with pytest.raises(NotFoundError):
        await workflow.approve("lst_missing", admin)


@pytest.mark.asyncio
async def test_approve_twice_is_idempotent(workflow, store, seller, admin):
    listing = await workflow.submit(listing_draft(), seller)

    first = await workflow.approve(listing.id, admin)
    second = await workflow.approve(listing.id, admin)

    assert first.status == second.status == "approved"
    assert (await store.get_listing(listing.id)).status == "approved"
    # only the real transition is audited
    assert [e.action for e in store.audit_log].count("listing.approved") == 1


@pytest.mark.asyncio
async def test_terminal_status_never_changes(workflow, store, seller, admin):
    approved = await workflow.submit(listing_draft(), seller)
    rejected = await workflow.submit(listing_draft(), seller)
    await workflow.approve(approved.id, admin)
    await workflow.reject(rejected.id, admin)

    assert (await workflow.reject(approved.id, admin)).status == "approved"
    assert (await workflow.approve(rejected.id, admin)).status == "rejected"
    assert (await store.get_listing(approved.id)).status == "approved"
    assert (await store.get_listing(rejected.id)).status == "rejected"


@pytest.mark.asyncio
async def test_lost_race_reports_stored_state(workflow, store, seller, admin):
    listing = await workflow.submit(listing_draft(), seller)

    # another moderator rejects between our read and our write
    original_update = store.update_listing_status

    async def racing_update(listing_id, status, *, expected=None):
        await original_update(listing_id, "rejected", expected="pending")
        return await original_update(listing_id, status, expected=expected)

    store.update_listing_status = racing_update

    result = await workflow.approve(listing.id, admin)

    assert result.status == "rejected"
    assert (await store.get_listing(listing.id)).status == "rejected"


@pytest.mark.asyncio
async def test_list_by_status_newest_first(workflow, seller, admin):
    a = await workflow.submit(listing_draft(title="first"), seller)
    b = await workflow.submit(listing_draft(title="second"), seller)
    c = await workflow.submit(listing_draft(title="third"), seller)
    await workflow.approve(b.id, admin)

    pending = await workflow.list_by_status("pending", admin)
    assert [l.id for l in pending] == [c.id, a.id]

    approved = await workflow.list_by_status("approved", Actor.anonymous())
    assert [l.id for l in approved] == [b.id]


@pytest.mark.asyncio
async def test_pending_queue_is_admin_only(workflow, seller):
    with pytest.raises(AuthError):
        await workflow.list_by_status("pending", seller)

    with pytest.raises(ValidationError):
        await workflow.list_by_status("archived", seller)


@pytest.mark.asyncio
async def test_owner_dashboard_shows_all_statuses(workflow, seller, buyer, admin):
    a = await workflow.submit(listing_draft(), seller)
    b = await workflow.submit(listing_draft(), seller)
    c = await workflow.submit(listing_draft(), seller)
    await workflow.submit(listing_draft(), buyer)
    await workflow.approve(a.id, admin)
    await workflow.reject(b.id, admin)

    mine = await workflow.list_for_owner(seller)

    assert [l.id for l in mine] == [c.id, b.id, a.id]
    assert {l.status for l in mine} == {"pending", "approved", "rejected"}


@pytest.mark.asyncio
async def test_only_owner_can_delete(workflow, store, seller, buyer, admin):
    listing = await workflow.submit(listing_draft(), seller)
    await workflow.approve(listing.id, admin)

    with pytest.raises(AuthError):
        await workflow.delete(listing.id, buyer)
    # admins moderate, they do not delete
    with pytest.raises(AuthError):
        await workflow.delete(listing.id, admin)

    await workflow.delete(listing.id, seller)

    assert await store.get_listing(listing.id) is None
    with pytest.raises(NotFoundError):
        await workflow.delete(listing.id, seller)


@pytest.mark.asyncio
async def test_only_approved_reach_search(workflow, store, seller, admin):
    pending = await workflow.submit(listing_draft(title="guangzhou pending"), seller)
    approved = await workflow.submit(listing_draft(title="guangzhou approved"), seller)
    rejected = await workflow.submit(listing_draft(title="guangzhou rejected"), seller)
    await workflow.approve(approved.id, admin)
    await workflow.reject(rejected.id, admin)

    everything = list(store.listings.values())
    out = search(everything, {"query": "guangzhou"})

    assert [l.id for l in out] == [approved.id]
    assert pending.id not in {l.id for l in out}


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [
    ("origin_city", "guangzhou"),
    ("origin_city", "Alger"),
    ("destination_city", "Paris"),
    ("loading_port", "Atlantis"),
    ("arrival_port", "Port of Shanghai"),
    ("vehicle_type", "Spaceship"),
])
async def test_submit_rejects_values_outside_catalog(workflow, store, seller, field, value):
    with pytest.raises(ValidationError) as exc:
        await workflow.submit(listing_draft(**{field: value}), seller)
    assert exc.value.details[0]["loc"] == (field,)
    assert store.listings == {}


@pytest.mark.asyncio
async def test_catalog_values_are_found_by_city_filters(workflow, seller, admin):
    listing = await workflow.submit(
        listing_draft(origin_city="  Shenzhen ", destination_city="Sétif", vehicle_type="Truck"),
        seller,
    )
    await workflow.approve(listing.id, admin)

    approved = await workflow.list_by_status("approved", Actor.anonymous())
    out = search(approved, {"origin_city": "Shenzhen", "destination_city": "Sétif"})

    assert [r.id for r in out] == [listing.id]

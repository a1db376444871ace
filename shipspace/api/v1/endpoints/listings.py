from fastapi import APIRouter, Depends, Query

from shipspace.schemas.listing import EnrichedListingOut, ListingDraft, ListingOut, SellerOut
from shipspace.services.auth import Actor, get_actor
from shipspace.services.enrichment import EnrichedListing, SellerEnricher
from shipspace.services.listing_state import APPROVED
from shipspace.services.moderation import ModerationWorkflow
from shipspace.services.retry import retry_transient
from shipspace.services.search import parse_criteria, search
from shipspace.store.base import MarketplaceStore
from shipspace.store.deps import get_store

router = APIRouter()


def _enriched_out(item: EnrichedListing) -> EnrichedListingOut:
    return EnrichedListingOut(
        **ListingOut.model_validate(item.listing).model_dump(),
        seller=SellerOut.model_validate(item.seller),
    )


@router.get("/listings", response_model=list[EnrichedListingOut])
async def browse_listings(
    q: str | None = Query(default=None, max_length=200),
    kind: str = Query(default="all"),
    origin_city: str | None = Query(default=None),
    destination_city: str | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> list[EnrichedListingOut]:
    criteria = parse_criteria({
        "query": q,
        "kind": kind,
        "origin_city": origin_city,
        "destination_city": destination_city,
    })
    workflow = ModerationWorkflow(store)
    enricher = SellerEnricher(store)

    async def _load() -> list[EnrichedListing]:
        approved = await workflow.list_by_status(APPROVED, actor)
        return search(await enricher.enrich(approved), criteria)

    return [_enriched_out(item) for item in await retry_transient(_load)]


@router.post("/listings", response_model=ListingOut, status_code=201)
async def submit_listing(
    payload: ListingDraft,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> ListingOut:
    listing = await ModerationWorkflow(store).submit(payload, actor)
    await store.commit()
    return ListingOut.model_validate(listing)


@router.delete("/listings/{listing_id}")
async def delete_listing(
    listing_id: str,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> dict:
    await ModerationWorkflow(store).delete(listing_id, actor)
    await store.commit()
    return {"status": "deleted", "listing_id": listing_id}


@router.get("/me/listings", response_model=list[ListingOut])
async def my_listings(
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> list[ListingOut]:
    rows = await ModerationWorkflow(store).list_for_owner(actor)
    return [ListingOut.model_validate(r) for r in rows]

from fastapi import APIRouter, Depends, Query

from shipspace.schemas.listing import ListingOut
from shipspace.services.auth import Actor, get_actor
from shipspace.services.listing_state import PENDING
from shipspace.services.moderation import ModerationWorkflow
from shipspace.store.base import MarketplaceStore
from shipspace.store.deps import get_store

router = APIRouter(prefix="/admin")


@router.get("/listings", response_model=list[ListingOut])
async def moderation_queue(
    status: str = Query(default=PENDING),
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> list[ListingOut]:
    rows = await ModerationWorkflow(store).list_by_status(status, actor)
    return [ListingOut.model_validate(r) for r in rows]


@router.post("/listings/{listing_id}/approve", response_model=ListingOut)
async def approve_listing(
    listing_id: str,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> ListingOut:
    listing = await ModerationWorkflow(store).approve(listing_id, actor)
    await store.commit()
    return ListingOut.model_validate(listing)


@router.post("/listings/{listing_id}/reject", response_model=ListingOut)
async def reject_listing(
    listing_id: str,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> ListingOut:
    listing = await ModerationWorkflow(store).reject(listing_id, actor)
    await store.commit()
    return ListingOut.model_validate(listing)

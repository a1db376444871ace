from fastapi import APIRouter, Depends

from shipspace.schemas.profile import ProfileOut, ProfileUpdate, UserPageOut
from shipspace.schemas.rating import RatingCreate, RatingOut, ReputationSummaryOut
from shipspace.services import profiles
from shipspace.services.auth import Actor, get_actor
from shipspace.services.reputation import ReputationAggregator
from shipspace.store.base import MarketplaceStore
from shipspace.store.deps import get_store

router = APIRouter()


@router.get("/users/{user_id}", response_model=UserPageOut)
async def user_page(user_id: str, store: MarketplaceStore = Depends(get_store)) -> UserPageOut:
    # 404 before any rating read
    profile = await profiles.get_profile(store, user_id)
    summary = await ReputationAggregator(store).get_summary(user_id)
    return UserPageOut(
        profile=ProfileOut.model_validate(profile),
        reputation=ReputationSummaryOut.model_validate(summary),
    )


@router.put("/me/profile", response_model=ProfileOut)
async def update_my_profile(
    payload: ProfileUpdate,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> ProfileOut:
    profile = await profiles.update_profile(store, actor, payload)
    await store.commit()
    return ProfileOut.model_validate(profile)


@router.get("/users/{user_id}/reputation", response_model=ReputationSummaryOut)
async def user_reputation(user_id: str, store: MarketplaceStore = Depends(get_store)) -> ReputationSummaryOut:
    summary = await ReputationAggregator(store).get_summary(user_id)
    return ReputationSummaryOut.model_validate(summary)


@router.get("/users/{user_id}/ratings", response_model=list[RatingOut])
async def user_ratings(user_id: str, store: MarketplaceStore = Depends(get_store)) -> list[RatingOut]:
    rows = await ReputationAggregator(store).list_ratings(user_id)
    return [RatingOut.model_validate(r) for r in rows]


@router.post("/users/{user_id}/ratings", response_model=RatingOut, status_code=201)
async def rate_user(
    user_id: str,
    payload: RatingCreate,
    actor: Actor = Depends(get_actor),
    store: MarketplaceStore = Depends(get_store),
) -> RatingOut:
    rating = await ReputationAggregator(store).submit_rating(
        actor,
        user_id,
        payload.score,
        payload.feedback,
        listing_id=payload.listing_id,
    )
    await store.commit()
    return RatingOut.model_validate(rating)

from fastapi import APIRouter, Depends

from shipspace.schemas.profile import UserBootstrap, UserBootstrapOut
from shipspace.services.internal_admin import require_internal_admin
from shipspace.services.profiles import bootstrap_user
from shipspace.store.base import MarketplaceStore
from shipspace.store.deps import get_store

router = APIRouter(prefix="/internal", dependencies=[Depends(require_internal_admin)])


@router.post("/users/bootstrap", response_model=UserBootstrapOut)
async def bootstrap(payload: UserBootstrap, store: MarketplaceStore = Depends(get_store)) -> UserBootstrapOut:
    """
    Ops-only: creates a user profile and returns its first API key. The key is shown once.
    """
    profile, plain_key = await bootstrap_user(store, payload)
    await store.commit()
    return UserBootstrapOut(user_id=profile.id, api_key=plain_key)

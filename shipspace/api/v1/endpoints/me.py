from fastapi import APIRouter, Depends

from shipspace.schemas.me import MeOut
from shipspace.services.auth import Actor, get_actor

router = APIRouter()

@router.get("/me", response_model=MeOut)
async def me(actor: Actor = Depends(get_actor)) -> MeOut:
    return MeOut(user_id=actor.user_id, is_admin=actor.is_admin)

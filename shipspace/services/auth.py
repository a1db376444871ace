from dataclasses import dataclass

from fastapi import Depends, Security
from fastapi.security.api_key import APIKeyHeader

from shipspace.core.errors import AuthError
from shipspace.core.security import hash_api_key
from shipspace.store.base import MarketplaceStore
from shipspace.store.deps import get_store

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass(frozen=True)
class Actor:
    """
    Caller identity handed explicitly to every core operation.
    user_id is None for an anonymous caller.
    """
    user_id: str | None
    is_admin: bool = False

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls(user_id=None, is_admin=False)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def require_authenticated(actor: Actor, action: str) -> str:
    if not actor.is_authenticated:
        raise AuthError(f"Sign in to {action}")
    assert actor.user_id is not None
    return actor.user_id


def require_admin(actor: Actor) -> None:
    if not actor.is_authenticated:
        raise AuthError("Sign in as an administrator")
    if not actor.is_admin:
        raise AuthError("Admin privileges required", authenticated=True)


async def get_actor(
    api_key: str | None = Security(api_key_header),
    store: MarketplaceStore = Depends(get_store),
) -> Actor:
    # browsing is public: no key means anonymous, a bad key is an error
    if not api_key:
        return Actor.anonymous()

    user_id = await store.get_api_key_owner(hash_api_key(api_key))
    if not user_id:
        raise AuthError("Invalid API key")

    profile = await store.get_profile(user_id)
    return Actor(user_id=user_id, is_admin=bool(profile and profile.is_admin))

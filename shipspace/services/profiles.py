from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from shipspace.core.errors import NotFoundError, ValidationError
from shipspace.core.ids import USER_PREFIX, gen_id
from shipspace.core.security import generate_api_key
from shipspace.schemas.profile import ProfileUpdate, UserBootstrap
from shipspace.services.auth import Actor, require_authenticated
from shipspace.store.base import AuditEntry, MarketplaceStore, ProfileRecord

log = logging.getLogger(__name__)


def _validate_update(changes: ProfileUpdate | Mapping[str, Any]) -> ProfileUpdate:
    if isinstance(changes, ProfileUpdate):
        return changes
    try:
        return ProfileUpdate.model_validate(changes)
    except PydanticValidationError as e:
        raise ValidationError(
            "Company name, contact person and phone are required",
            details=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


async def get_profile(store: MarketplaceStore, user_id: str) -> ProfileRecord:
    profile = await store.get_profile(user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


async def update_profile(
    store: MarketplaceStore,
    actor: Actor,
    changes: ProfileUpdate | Mapping[str, Any],
) -> ProfileRecord:
    """
    A party edits only its own profile. The admin flag is carried over untouched.
    """
    user_id = require_authenticated(actor, "edit your profile")
    valid = _validate_update(changes)

    existing = await store.get_profile(user_id)
    profile = await store.upsert_profile(ProfileRecord(
        id=user_id,
        company_name=valid.company_name,
        contact_person=valid.contact_person,
        phone=valid.phone,
        is_admin=existing.is_admin if existing else False,
    ))
    await store.record_audit(AuditEntry(
        action="profile.updated",
        actor_id=user_id,
        target_type="user",
        target_id=user_id,
        detail={"created": existing is None},
    ))
    log.info("profile %s %s", user_id, "updated" if existing else "created")
    return profile


async def bootstrap_user(store: MarketplaceStore, payload: UserBootstrap) -> tuple[ProfileRecord, str]:
    """
    Internal path: create a user with a profile and its first API key.
    Returns (profile, plain_api_key); the plain key is never stored.
    """
    user_id = gen_id(USER_PREFIX)
    profile = await store.upsert_profile(ProfileRecord(
        id=user_id,
        company_name=payload.company_name,
        contact_person=payload.contact_person,
        phone=payload.phone,
        is_admin=payload.is_admin,
    ))

    key = generate_api_key()
    await store.insert_api_key(user_id=user_id, key_prefix=key.prefix, key_hash=key.hashed)
    await store.record_audit(AuditEntry(
        action="user.bootstrapped",
        actor_id="internal",
        target_type="user",
        target_id=user_id,
        detail={"is_admin": payload.is_admin},
    ))
    log.info("bootstrapped user %s (admin=%s)", user_id, payload.is_admin)
    return profile, key.plain

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from shipspace.core.errors import AuthError, NotFoundError, ValidationError
from shipspace.schemas.listing import ListingDraft
from shipspace.services.auth import Actor, require_admin, require_authenticated
from shipspace.services.listing_state import (
    APPROVED,
    LISTING_STATUSES,
    PENDING,
    REJECTED,
    can_transition,
    is_terminal,
    normalize_status,
)
from shipspace.store.base import AuditEntry, ListingRecord, MarketplaceStore

log = logging.getLogger(__name__)


def validate_listing_draft(payload: ListingDraft | Mapping[str, Any]) -> ListingDraft:
    """
    Coerce a raw payload into a ListingDraft.
    Raises ValidationError with pydantic's structured errors as details.
    """
    if isinstance(payload, ListingDraft):
        return payload
    try:
        return ListingDraft.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Listing is missing required fields or has invalid values",
            details=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


class ModerationWorkflow:
    """
    pending -> approved | rejected. Terminal states never move again.

    Re-applying a transition to a terminal listing is a successful no-op that
    returns the listing as stored, so callers always see the real final status.
    """

    def __init__(self, store: MarketplaceStore) -> None:
        self.store = store

    async def submit(self, draft: ListingDraft | Mapping[str, Any], actor: Actor) -> ListingRecord:
        owner_id = require_authenticated(actor, "create a listing")
        valid = validate_listing_draft(draft)

        listing = await self.store.create_listing(valid, owner_id)
        await self.store.record_audit(AuditEntry(
            action="listing.submitted",
            actor_id=owner_id,
            target_type="listing",
            target_id=listing.id,
            detail={"kind": listing.kind},
        ))
        log.info("listing %s submitted by %s (pending)", listing.id, owner_id)
        return listing

    async def approve(self, listing_id: str, actor: Actor) -> ListingRecord:
        return await self._transition(listing_id, actor, APPROVED)

    async def reject(self, listing_id: str, actor: Actor) -> ListingRecord:
        return await self._transition(listing_id, actor, REJECTED)

    async def _transition(self, listing_id: str, actor: Actor, target: str) -> ListingRecord:
        require_admin(actor)

        listing = await self.store.get_listing(listing_id)
        if listing is None:
            raise NotFoundError("Listing not found")

        if is_terminal(listing.status):
            log.info("listing %s already %s, %s is a no-op", listing_id, listing.status, target)
            return listing

        assert can_transition(listing.status, target)
        changed = await self.store.update_listing_status(listing_id, target, expected=PENDING)
        if not changed:
            # another moderator got there first (or the owner deleted it)
            current = await self.store.get_listing(listing_id)
            if current is None:
                raise NotFoundError("Listing not found")
            log.info("listing %s moved to %s concurrently, %s is a no-op", listing_id, current.status, target)
            return current

        await self.store.record_audit(AuditEntry(
            action=f"listing.{target}",
            actor_id=actor.user_id,
            target_type="listing",
            target_id=listing_id,
            detail={"from": PENDING, "to": target},
        ))
        log.info("listing %s %s by %s", listing_id, target, actor.user_id)
        return replace(listing, status=target)

    async def list_by_status(self, status: str, actor: Actor) -> list[ListingRecord]:
        status_norm = normalize_status(status)
        if status_norm not in LISTING_STATUSES:
            raise ValidationError(f"Unknown listing status '{status}'")
        # only the approved set is public
        if status_norm != APPROVED:
            require_admin(actor)
        return await self.store.list_listings_by_status(status_norm)

    async def list_for_owner(self, actor: Actor) -> list[ListingRecord]:
        owner_id = require_authenticated(actor, "view your listings")
        return await self.store.list_listings_by_owner(owner_id)

    async def delete(self, listing_id: str, actor: Actor) -> None:
        user_id = require_authenticated(actor, "delete a listing")

        listing = await self.store.get_listing(listing_id)
        if listing is None:
            raise NotFoundError("Listing not found")
        if listing.owner_id != user_id:
            raise AuthError("Only the owner can delete this listing", authenticated=True)

        if not await self.store.delete_listing(listing_id):
            raise NotFoundError("Listing not found")

        await self.store.record_audit(AuditEntry(
            action="listing.deleted",
            actor_id=user_id,
            target_type="listing",
            target_id=listing_id,
            detail={"status": listing.status},
        ))
        log.info("listing %s deleted by owner %s", listing_id, user_id)

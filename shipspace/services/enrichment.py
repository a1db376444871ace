from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

from shipspace.services.reputation import EMPTY_SUMMARY, ReputationAggregator, ReputationSummary
from shipspace.store.base import ListingRecord, MarketplaceStore, ProfileRecord

log = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown user"


@dataclass(frozen=True)
class SellerSummary:
    display_name: str
    company_name: str | None
    reputation: ReputationSummary


@dataclass(frozen=True)
class EnrichedListing:
    listing: ListingRecord
    seller: SellerSummary


def seller_summary(profile: ProfileRecord | None, reputation: ReputationSummary | None) -> SellerSummary:
    if profile is None:
        return SellerSummary(display_name=UNKNOWN_USER, company_name=None, reputation=reputation or EMPTY_SUMMARY)
    display_name = profile.contact_person.strip() or profile.company_name.strip() or UNKNOWN_USER
    return SellerSummary(
        display_name=display_name,
        company_name=profile.company_name or None,
        reputation=reputation or EMPTY_SUMMARY,
    )


class SellerEnricher:
    """
    Joins listings with their owner's name and reputation using one profile read and
    one rating read for the whole page, never one per listing.
    """

    def __init__(self, store: MarketplaceStore, reputation: ReputationAggregator | None = None) -> None:
        self.store = store
        self.reputation = reputation or ReputationAggregator(store)

    async def enrich(self, listings: Iterable[ListingRecord]) -> list[EnrichedListing]:
        rows = list(listings)
        if not rows:
            return []

        owner_ids = sorted({r.owner_id for r in rows})
        # wait for both reads before raising; neither may outlive the session
        profiles, summaries = await asyncio.gather(
            self.store.list_profiles(owner_ids),
            self.reputation.get_summaries(owner_ids),
            return_exceptions=True,
        )
        for result in (profiles, summaries):
            if isinstance(result, BaseException):
                raise result
        by_id = {p.id: p for p in profiles}

        missing = len(owner_ids) - len(by_id)
        if missing:
            log.debug("enrich: %d of %d sellers have no profile", missing, len(owner_ids))

        return [
            EnrichedListing(
                listing=r,
                seller=seller_summary(by_id.get(r.owner_id), summaries.get(r.owner_id)),
            )
            for r in rows
        ]

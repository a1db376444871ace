from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from shipspace.core.errors import NotFoundError, ValidationError
from shipspace.services.auth import Actor, require_authenticated
from shipspace.store.base import AuditEntry, MarketplaceStore, NewRating, RatingRecord

log = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5
MAX_FEEDBACK_LENGTH = 2000


@dataclass(frozen=True)
class ReputationSummary:
    average: float = 0.0
    count: int = 0


EMPTY_SUMMARY = ReputationSummary()


def summarize(scores: Iterable[int]) -> ReputationSummary:
    """
    Derive {average, count} from raw scores. Average is rounded half-up to one decimal
    (4.25 -> 4.3); no ratings gives EMPTY_SUMMARY.
    """
    values = list(scores)
    if not values:
        return EMPTY_SUMMARY
    mean = Decimal(sum(values)) / Decimal(len(values))
    average = float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return ReputationSummary(average=average, count=len(values))


def validate_score(score: object) -> int:
    # bool is an int subclass; True is not a score
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("Score must be a whole number between 1 and 5")
    if score < MIN_SCORE or score > MAX_SCORE:
        raise ValidationError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}")
    return score


class ReputationAggregator:
    """
    Ratings are append-only rows; every summary is recomputed from them on read.
    """

    def __init__(self, store: MarketplaceStore) -> None:
        self.store = store

    async def submit_rating(
        self,
        actor: Actor,
        rated_party_id: str,
        score: object,
        feedback: str = "",
        *,
        listing_id: str | None = None,
    ) -> RatingRecord:
        reviewer_id = require_authenticated(actor, "rate a user")
        valid_score = validate_score(score)

        if reviewer_id == rated_party_id:
            raise ValidationError("You cannot rate yourself")

        feedback = (feedback or "").strip()
        if len(feedback) > MAX_FEEDBACK_LENGTH:
            raise ValidationError(f"Feedback is limited to {MAX_FEEDBACK_LENGTH} characters")

        if await self.store.get_profile(rated_party_id) is None:
            raise NotFoundError("User not found")

        # uniqueness is the store's job so concurrent duplicates fail instead of double counting
        rating = await self.store.insert_rating(NewRating(
            reviewer_id=reviewer_id,
            rated_party_id=rated_party_id,
            score=valid_score,
            feedback=feedback,
            listing_id=listing_id,
        ))
        await self.store.record_audit(AuditEntry(
            action="rating.submitted",
            actor_id=reviewer_id,
            target_type="user",
            target_id=rated_party_id,
            detail={"rating_id": rating.id, "score": valid_score},
        ))
        log.info("rating %s: %s rated %s with %d", rating.id, reviewer_id, rated_party_id, valid_score)
        return rating

    async def get_summary(self, rated_party_id: str) -> ReputationSummary:
        rows = await self.store.list_ratings_for_party(rated_party_id)
        return summarize(r.score for r in rows)

    async def get_summaries(self, party_ids: Iterable[str]) -> dict[str, ReputationSummary]:
        """
        One store read for any number of parties. Every requested id is present in the result.
        """
        ids = sorted(set(party_ids))
        if not ids:
            return {}

        scores: dict[str, list[int]] = defaultdict(list)
        for row in await self.store.list_ratings_for_parties(ids):
            scores[row.rated_party_id].append(row.score)

        return {party_id: summarize(scores.get(party_id, ())) for party_id in ids}

    async def list_ratings(self, rated_party_id: str) -> list[RatingRecord]:
        return await self.store.list_ratings_for_party(rated_party_id)

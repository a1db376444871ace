from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import ValidationError as PydanticValidationError

from shipspace.core.errors import ValidationError
from shipspace.schemas.search import SearchCriteria
from shipspace.services.enrichment import EnrichedListing
from shipspace.services.listing_state import is_publicly_visible
from shipspace.store.base import ListingRecord

Item = TypeVar("Item", ListingRecord, EnrichedListing)


def parse_criteria(criteria: SearchCriteria | Mapping[str, Any] | None) -> SearchCriteria:
    if criteria is None:
        return SearchCriteria()
    if isinstance(criteria, SearchCriteria):
        return criteria
    try:
        return SearchCriteria.model_validate(criteria)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid search criteria",
            details=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


def _as_listing(item: ListingRecord | EnrichedListing) -> ListingRecord:
    return item.listing if isinstance(item, EnrichedListing) else item


def _matches(listing: ListingRecord, criteria: SearchCriteria, needle: str | None) -> bool:
    # moderation gate: nothing but approved listings ever matches
    if not is_publicly_visible(listing.status):
        return False
    if criteria.kind != "all" and listing.kind != criteria.kind:
        return False
    if criteria.origin_city and listing.origin_city != criteria.origin_city:
        return False
    if criteria.destination_city and listing.destination_city != criteria.destination_city:
        return False
    if needle:
        fields = (listing.title, listing.description, listing.origin_city, listing.destination_city)
        if not any(needle in f.casefold() for f in fields):
            return False
    return True


def search(
    listings: Iterable[Item],
    criteria: SearchCriteria | Mapping[str, Any] | None = None,
) -> list[Item]:
    """
    Narrow listings by free text, kind and city filters (all ANDed; blank means any).

    Input order is kept as-is. The text query is a case-insensitive substring match
    on title, description, origin city and destination city; city filters are exact.
    """
    crit = parse_criteria(criteria)
    needle = crit.query.casefold() if crit.query else None
    return [item for item in listings if _matches(_as_listing(item), crit, needle)]

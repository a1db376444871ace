from datetime import date, datetime, timedelta, timezone

from shipspace.core.ids import LISTING_PREFIX, gen_id
from shipspace.store.base import ListingRecord


def listing_draft(**overrides) -> dict:
    draft = {
        "kind": "offer",
        "title": "4 spots in a 40ft container",
        "description": "Shared container, leaving mid-month.",
        "origin_city": "Guangzhou",
        "destination_city": "Alger",
        "loading_port": "Port of Guangzhou",
        "arrival_port": "Port of Algiers",
        "spot_count": 4,
        "vehicle_type": "SUV",
        "ship_date": "2026-11-15",
        "contact_email": "ops@example.com",
        "contact_phone": "+213 555 0100",
    }
    draft.update(overrides)
    return draft


_BASE_TIME = datetime(2026, 10, 1, tzinfo=timezone.utc)


def make_listing(n: int = 0, **overrides) -> ListingRecord:
    """
    Build a record directly, bypassing the store. Larger n means newer.
    """
    fields = {
        "id": gen_id(LISTING_PREFIX),
        "owner_id": "usr_seller",
        "kind": "offer",
        "title": f"Listing {n}",
        "description": "Space available",
        "origin_city": "Shanghai",
        "destination_city": "Oran",
        "loading_port": "Port of Shanghai",
        "arrival_port": "Port of Oran",
        "spot_count": 2,
        "vehicle_type": "Sedan",
        "ship_date": date(2026, 12, 1),
        "contact_email": "seller@example.com",
        "contact_phone": "+86 20 0000",
        "status": "approved",
        "created_at": _BASE_TIME + timedelta(minutes=n),
    }
    fields.update(overrides)
    return ListingRecord(**fields)

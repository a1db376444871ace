import pytest

from shipspace.core.errors import ValidationError
from shipspace.schemas.search import SearchCriteria
from shipspace.services.enrichment import EMPTY_SUMMARY, EnrichedListing, SellerSummary
from shipspace.services.search import search

from tests.factories import make_listing


@pytest.fixture
def listings():
    # newest first, as the store returns them
    return [
        make_listing(5, title="SUV spots to Oran", kind="offer", origin_city="Shenzhen", destination_city="Oran"),
        make_listing(4, title="Need room for a van", kind="request", origin_city="Guangzhou", destination_city="Alger"),
        make_listing(3, title="Half container", kind="offer", origin_city="Ningbo", destination_city="Annaba",
                     description="Pickup trucks welcome"),
        make_listing(2, title="Pending one", kind="offer", origin_city="Guangzhou", status="pending"),
        make_listing(1, title="Rejected one", kind="request", origin_city="Guangzhou", status="rejected"),
    ]


def test_no_criteria_returns_all_approved_in_input_order(listings):
    out = search(listings)
    assert [l.title for l in out] == ["SUV spots to Oran", "Need room for a van", "Half container"]


@pytest.mark.parametrize(
    "criteria",
    [
        {},
        {"query": "guangzhou"},
        {"query": "one"},
        {"kind": "offer"},
        {"kind": "request"},
        {"origin_city": "Guangzhou"},
    ],
)
def test_non_approved_never_returned(listings, criteria):
    out = search(listings, criteria)
    assert all(l.status == "approved" for l in out)


def test_query_matches_origin_city_case_insensitively(listings):
    out = search(listings, {"query": "guangzhou"})
    assert [l.title for l in out] == ["Need room for a van"]


def test_query_matches_title_description_and_destination(listings):
    assert [l.title for l in search(listings, {"query": "SUV"})] == ["SUV spots to Oran"]
    assert [l.title for l in search(listings, {"query": "PICKUP"})] == ["Half container"]
    assert [l.title for l in search(listings, {"query": "annaba"})] == ["Half container"]


def test_kind_offer_excludes_requests(listings):
    out = search(listings, {"kind": "offer"})
    assert out
    assert all(l.kind == "offer" for l in out)


def test_filters_combine_with_and(listings):
    out = search(listings, SearchCriteria(kind="offer", destination_city="Oran"))
    assert [l.title for l in out] == ["SUV spots to Oran"]

    assert search(listings, {"kind": "request", "destination_city": "Oran"}) == []


def test_city_filters_are_exact(listings):
    assert search(listings, {"origin_city": "shenzhen"}) == []
    assert len(search(listings, {"origin_city": "Shenzhen"})) == 1


def test_blank_criteria_are_pass_through(listings):
    out = search(listings, {"query": "   ", "origin_city": "", "destination_city": None, "kind": "all"})
    assert len(out) == 3


def test_deterministic(listings):
    criteria = {"query": "o"}
    assert search(listings, criteria) == search(listings, criteria)


def test_unknown_kind_is_validation_error(listings):
    with pytest.raises(ValidationError):
        search(listings, {"kind": "swap"})


def test_enriched_listings_are_filtered_on_their_listing(listings):
    seller = SellerSummary(display_name="Li Wei", company_name=None, reputation=EMPTY_SUMMARY)
    enriched = [EnrichedListing(listing=l, seller=seller) for l in listings]

    out = search(enriched, {"query": "van"})

    assert len(out) == 1
    assert isinstance(out[0], EnrichedListing)
    assert out[0].listing.title == "Need room for a van"

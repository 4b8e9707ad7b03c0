"""
Test cases for filter parsing and serialization
"""
from datetime import date

import pytest

from tournaments.filters import (
    DateRange,
    LocationFilter,
    PriceRange,
    TournamentFilters,
    parse_filters,
    serialize_filters,
)


@pytest.fixture
def full_filters():
    return TournamentFilters(
        search="summer cup",
        location=LocationFilter(postcode="E9 5PF", radius=25, latitude=51.5558, longitude=-0.0295),
        date_range=DateRange(start=date(2025, 7, 1), end=date(2025, 7, 31)),
        price_range=PriceRange(min=10, max=60, include_free=True),
        format=["5v5", "7v7"],
        age_groups=["U10", "U11"],
        team_types=["girls"],
        type=["tournament", "camp"],
        regions=["London", "Kent"],
        status=["registration_open"],
    )


def test_round_trip(full_filters):
    assert parse_filters(serialize_filters(full_filters)) == full_filters


def test_serialize_is_stable(full_filters):
    once = serialize_filters(full_filters)
    assert serialize_filters(parse_filters(once)) == once


def test_serialize_writes_canonical_names_and_legacy_region(full_filters):
    params = serialize_filters(full_filters)

    assert params["search"] == "summer cup"
    assert params["location"] == "E9 5PF"
    assert params["radius"] == "25"
    assert params["startDate"] == "2025-07-01"
    assert params["includeFree"] == "true"
    assert params["format"] == "5v5,7v7"
    assert params["ageGroups"] == "U10,U11"
    assert params["regions"] == "London,Kent"
    assert params["region"] == "London,Kent"


@pytest.mark.parametrize("key", ["format", "formats"])
def test_format_alias(key):
    assert parse_filters({key: "5v5"}).format == ["5v5"]


@pytest.mark.parametrize(
    "params,attr,expected",
    [
        ({"q": "cup"}, "search", "cup"),
        ({"ages": "U9,U10"}, "age_groups", ["U9", "U10"]),
        ({"teams": "girls"}, "team_types", ["girls"]),
        ({"region": "Kent"}, "regions", ["Kent"]),
    ],
)
def test_aliases(params, attr, expected):
    assert getattr(parse_filters(params), attr) == expected


def test_postcode_alias():
    filters = parse_filters({"postcode": "M1 1AA", "radius": "15"})
    assert filters.location == LocationFilter(postcode="M1 1AA", radius=15)


def test_canonical_name_wins_over_alias():
    assert parse_filters({"format": "11v11", "formats": "5v5"}).format == ["11v11"]


def test_empty_params_give_empty_filters():
    filters = parse_filters({})
    assert filters.is_empty()
    assert serialize_filters(filters) == {}


def test_absent_arrays_are_none_not_empty():
    filters = parse_filters({"format": " , "})
    assert filters.format is None


def test_malformed_numbers_and_dates_are_dropped():
    filters = parse_filters({"minPrice": "cheap", "startDate": "soon", "lat": "51.5"})
    assert filters.price_range is None
    assert filters.date_range is None
    # A lone latitude is not a location
    assert filters.location is None


def test_radius_without_location_is_not_serialized():
    params = serialize_filters(TournamentFilters(location=LocationFilter(radius=10)))
    assert "radius" not in params


@pytest.mark.parametrize(
    "filters",
    [
        TournamentFilters(location=LocationFilter(postcode="M1 1AA")),
        TournamentFilters(location=LocationFilter(postcode="LS1 4DY", radius=5)),
        TournamentFilters(location=LocationFilter(radius=15, latitude=53.4808, longitude=-2.2426)),
        TournamentFilters(price_range=PriceRange(include_free=True)),
        TournamentFilters(price_range=PriceRange(min=20)),
        TournamentFilters(price_range=PriceRange(max=0)),
        TournamentFilters(date_range=DateRange(start=date(2025, 8, 1))),
        TournamentFilters(date_range=DateRange(end=date(2025, 8, 31))),
        TournamentFilters(format=["5v5", "7v7", "9v9"], age_groups=["U7", "U8", "U9", "U10"]),
        TournamentFilters(regions=["Kent", "Essex"], status=["upcoming", "today"]),
    ],
    ids=[
        "postcode-only",
        "postcode-radius",
        "coordinates-only",
        "include-free-only",
        "min-price-only",
        "max-price-only",
        "start-date-only",
        "end-date-only",
        "multi-item-arrays",
        "regions-and-status",
    ],
)
def test_partial_filters_round_trip(filters):
    params = serialize_filters(filters)

    assert parse_filters(params) == filters
    assert serialize_filters(parse_filters(params)) == params


def test_legacy_region_only_input_is_stable():
    filters = parse_filters({"region": "Kent,Essex"})
    params = serialize_filters(filters)

    assert filters.regions == ["Kent", "Essex"]
    assert params == {"regions": "Kent,Essex", "region": "Kent,Essex"}
    assert serialize_filters(parse_filters(params)) == params


@pytest.mark.parametrize("value", ["inf", "-inf", "Infinity", "nan", "1e999", "-1e999"])
def test_non_finite_numbers_are_dropped(value):
    filters = parse_filters({"minPrice": value, "maxPrice": value, "lat": value, "lng": value})

    assert filters.price_range is None
    assert filters.location is None
    assert serialize_filters(filters) == {}


@pytest.mark.parametrize("value", ["inf", "nan", "1e999"])
def test_non_finite_radius_keeps_location(value):
    filters = parse_filters({"location": "E9 5PF", "radius": value})
    assert filters.location == LocationFilter(postcode="E9 5PF")


def test_non_finite_coordinates_are_not_usable():
    location = LocationFilter(latitude=float("nan"), longitude=-0.0295)
    assert not location.has_coordinates
    assert "lat" not in serialize_filters(TournamentFilters(location=location))


def test_search_is_trimmed_when_serialized():
    params = serialize_filters(TournamentFilters(search="  summer cup "))

    assert params == {"search": "summer cup"}
    assert parse_filters(params).search == "summer cup"
    assert serialize_filters(TournamentFilters(search="   ")) == {}

"""
Test cases for applying filters to tournament view models
"""
from datetime import date

import pytest

from tournaments.filtering import apply_filters, haversine_miles, matches_filters, split_upcoming_past
from tournaments.filters import parse_filters


def make_tournament(**overrides):
    tournament = {
        "id": 1,
        "name": "Hackney Summer Cup",
        "description": "Small sided festival",
        "location": {"name": "Hackney Marshes", "coordinates": [-0.0295, 51.5558], "region": "London"},
        "dates": {"start": date(2025, 7, 12), "end": date(2025, 7, 13)},
        "format": "7v7",
        "ageGroups": ["U10", "U11"],
        "teamTypes": ["boys"],
        "type": "tournament",
        "cost": {"amount": 45.0, "currency": "GBP"},
        "status": "registration_open",
    }
    tournament.update(overrides)
    return tournament


def test_haversine_london_to_manchester():
    distance = haversine_miles(51.5074, -0.1278, 53.4808, -2.2426)
    assert 160 < distance < 170


def test_search_matches_name_and_venue():
    tournament = make_tournament()
    assert matches_filters(tournament, parse_filters({"search": "summer"}))
    assert matches_filters(tournament, parse_filters({"search": "marshes"}))
    assert not matches_filters(tournament, parse_filters({"search": "winter"}))


def test_date_range_overlap():
    tournament = make_tournament()
    assert matches_filters(tournament, parse_filters({"startDate": "2025-07-13", "endDate": "2025-07-20"}))
    assert not matches_filters(tournament, parse_filters({"startDate": "2025-07-14", "endDate": "2025-07-20"}))


def test_distance_uses_default_radius():
    tournament = make_tournament()
    # Stratford, about 2 miles away
    assert matches_filters(tournament, parse_filters({"lat": "51.5416", "lng": "-0.0034"}))
    # Reading, well outside 10 miles
    assert not matches_filters(tournament, parse_filters({"lat": "51.4543", "lng": "-0.9781"}))
    assert matches_filters(tournament, parse_filters({"lat": "51.4543", "lng": "-0.9781", "radius": "50"}))


def test_price_range_and_include_free():
    paid = make_tournament()
    free = make_tournament(cost={"amount": 0, "currency": "GBP"})

    filters = parse_filters({"minPrice": "20", "maxPrice": "50"})
    assert matches_filters(paid, filters)
    assert not matches_filters(free, filters)

    filters = parse_filters({"minPrice": "20", "includeFree": "true"})
    assert matches_filters(free, filters)


def test_format_matches_any_listed_format():
    tournament = make_tournament(format="5v5, 7v7")
    assert matches_filters(tournament, parse_filters({"format": "7v7"}))
    assert not matches_filters(tournament, parse_filters({"format": "11v11"}))


def test_age_groups_and_team_types_overlap():
    tournament = make_tournament()
    assert matches_filters(tournament, parse_filters({"ageGroups": "U9,U10"}))
    assert not matches_filters(tournament, parse_filters({"ageGroups": "U16"}))
    assert not matches_filters(tournament, parse_filters({"teamTypes": "girls"}))


def test_country_region_expands():
    tournament = make_tournament()
    assert matches_filters(tournament, parse_filters({"regions": "england"}))
    assert not matches_filters(tournament, parse_filters({"regions": "scotland"}))


def test_status_filter():
    tournament = make_tournament()
    assert matches_filters(tournament, parse_filters({"status": "registration_open,today"}))
    assert not matches_filters(tournament, parse_filters({"status": "completed"}))


def test_apply_filters_sorts_by_distance_when_coordinates_known():
    near = make_tournament(id=1, location={"coordinates": [-0.01, 51.55], "region": "London"})
    far = make_tournament(id=2, location={"coordinates": [-0.2, 51.45], "region": "London"})
    results = apply_filters([far, near], parse_filters({"lat": "51.5558", "lng": "-0.0295", "radius": "30"}))
    assert [t["id"] for t in results] == [1, 2]


def test_apply_filters_sorts_by_start_date_otherwise():
    later = make_tournament(id=1, dates={"start": date(2025, 8, 1), "end": date(2025, 8, 1)})
    sooner = make_tournament(id=2, dates={"start": date(2025, 7, 1), "end": date(2025, 7, 1)})
    assert [t["id"] for t in apply_filters([later, sooner], parse_filters({}))] == [2, 1]


@pytest.mark.parametrize(
    "start,expected",
    [(date(2025, 7, 13), "upcoming"), (date(2025, 7, 10), "upcoming"), (date(2025, 7, 9), "past")],
)
def test_split_upcoming_past_by_start_date(start, expected):
    tournament = make_tournament(dates={"start": start, "end": date(2025, 7, 20)})
    upcoming, past = split_upcoming_past([tournament], today=date(2025, 7, 10))
    assert (tournament in upcoming) == (expected == "upcoming")
    assert (tournament in past) == (expected == "past")


def test_location_without_coordinates_matches_place_text():
    tournament = make_tournament(
        location={"name": "Ashton Court, Bristol", "postcode": "BS41 9JN", "region": "South West England"}
    )

    assert matches_filters(tournament, parse_filters({"location": "bristol", "radius": "10"}))
    assert matches_filters(tournament, parse_filters({"location": "bs41  9jn"}))
    assert matches_filters(tournament, parse_filters({"location": "South West"}))
    assert not matches_filters(tournament, parse_filters({"location": "Leeds", "radius": "10"}))


def test_location_without_coordinates_excludes_tournament_without_place():
    tournament = make_tournament(location={"coordinates": [-0.0295, 51.5558]})
    assert not matches_filters(tournament, parse_filters({"location": "Hackney"}))

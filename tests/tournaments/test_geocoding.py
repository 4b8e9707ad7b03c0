"""
Test cases for venue geocoding
"""
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from tournaments.geocoding import (
    GeocodingError,
    GeocodingService,
    GeocodingUnavailable,
    build_queries,
    geocode_tournament,
)
from tournamentsuk.retry import RetryPolicy

HACKNEY = SimpleNamespace(latitude=51.5558, longitude=-0.0295, address="Hackney Marshes, London E9 5PF")


def make_service(*results, use_cache=False):
    geocoder = Mock()
    geocoder.geocode.side_effect = list(results)
    sleeps = []
    policy = RetryPolicy(max_attempts=3, retryable=lambda e: isinstance(e, GeocoderTimedOut), sleep=sleeps.append)
    return GeocodingService(geocoder=geocoder, retry_policy=policy, use_cache=use_cache), geocoder, sleeps


def test_build_queries_most_specific_first():
    queries = build_queries("Hackney Marshes", "E9 5PF", "London", "United Kingdom")
    assert queries == [
        "Hackney Marshes, E9 5PF, London, United Kingdom",
        "Hackney Marshes, E9 5PF, United Kingdom",
        "Hackney Marshes, London, United Kingdom",
        "Hackney Marshes, United Kingdom",
    ]


def test_build_queries_drops_blanks_and_duplicates():
    assert build_queries("Hackney Marshes", "", "", None) == ["Hackney Marshes, United Kingdom"]
    assert build_queries("", "", "London") == []


def test_first_hit_wins():
    service, geocoder, _ = make_service(None, HACKNEY)
    result = service.geocode_address("Hackney Marshes", "E9 5PF", "London")

    assert (result.latitude, result.longitude) == (51.5558, -0.0295)
    assert result.query == "Hackney Marshes, E9 5PF, United Kingdom"
    assert geocoder.geocode.call_count == 2


def test_provider_error_moves_to_next_query():
    service, geocoder, _ = make_service(GeocoderServiceError("bad request"), HACKNEY)
    result = service.geocode_address("Hackney Marshes", "E9 5PF", "London")

    assert result.latitude == 51.5558
    assert geocoder.geocode.call_count == 2


def test_transient_error_is_retried_with_backoff():
    service, geocoder, sleeps = make_service(GeocoderTimedOut("slow"), HACKNEY)
    result = service.geocode_queries(["Hackney Marshes, United Kingdom"])

    assert result.longitude == -0.0295
    assert sleeps == [1.0]


def test_no_match_raises_not_found():
    service, _, _ = make_service(None, None, None, None)
    with pytest.raises(GeocodingError) as excinfo:
        service.geocode_address("Nowhere Park", "ZZ1 1ZZ", "Atlantis")
    assert "Unable to find the location" in str(excinfo.value)


def test_unconfigured_geocoder_is_unavailable():
    with pytest.raises(GeocodingUnavailable):
        GeocodingService().geocode_address("Hackney Marshes", "E9 5PF")


@pytest.mark.cache
def test_results_are_cached():
    service, geocoder, _ = make_service(HACKNEY, use_cache=True)
    service.geocode_queries(["E9 5PF, United Kingdom"])
    service.geocode_queries(["E9 5PF, United Kingdom"])

    assert geocoder.geocode.call_count == 1


@pytest.mark.cache
def test_misses_are_cached():
    service, geocoder, _ = make_service(None, use_cache=True)
    for _ in range(2):
        with pytest.raises(GeocodingError):
            service.geocode_postcode("ZZ1 1ZZ")

    assert geocoder.geocode.call_count == 1


@pytest.mark.django_db
def test_geocode_tournament_sets_coordinates(tournament):
    tournament.latitude = None
    tournament.longitude = None
    service, _, _ = make_service(HACKNEY)

    geocode_tournament(tournament, service=service)

    assert tournament.has_coordinates

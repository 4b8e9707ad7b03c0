"""
Test cases for directory stats
"""
from datetime import date

from django.core.cache import cache

import pytest
from rest_framework import status

from tests.factories import TournamentFactory
from tournaments.models import Tournament
from tournaments.stats import region_slug, region_stats, site_totals
from tournaments.views import TOURNAMENT_STATS_CACHE_KEY


@pytest.mark.parametrize(
    "region,slug",
    [("London", "england"), ("yorkshire", "england"), ("Scotland", "scotland"), ("Wales", "wales"), ("", "england")],
)
def test_region_slug(region, slug):
    assert region_slug(region) == slug


def test_region_stats_counts():
    def listing(region, venue, start, end=None, **kwargs):
        return TournamentFactory.build(
            region=region, location_name=venue, start_date=start, end_date=end or start, **kwargs
        )

    tournaments = [
        listing("London", "Hackney Marshes", date(2025, 7, 20)),
        listing("Kent", "Swanley Park", date(2025, 7, 9), date(2025, 7, 11)),
        listing("Yorkshire", " hackney marshes", date(2025, 6, 1)),
        listing("Scotland", "Toryglen", date(2025, 7, 20), status="cancelled"),
        listing("", "Unknown Park", date(2025, 7, 20)),
    ]

    stats = region_stats(tournaments, today=date(2025, 7, 10))

    assert stats == {
        "england": {"total_active": 3, "upcoming": 2, "cities_count": 3},
        "scotland": {"total_active": 0, "upcoming": 0, "cities_count": 1},
    }


@pytest.mark.django_db
class TestTournamentStats:
    @pytest.fixture
    def listings(self, tournament, past_tournament, pending_tournament):
        return TournamentFactory(region="Scotland", location_name="Toryglen", status="cancelled")

    def test_site_totals(self, listings, organizer_user):
        totals = site_totals(Tournament.objects.filter(is_published=True))
        assert totals == {"tournaments": 3, "upcoming": 1, "regions": 2, "organizers": 2}

    def test_endpoint(self, api_client, listings):
        response = api_client.get("/api/tournaments/stats/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["totals"]["tournaments"] == 3
        assert response.data["regions"]["england"] == {"total_active": 1, "upcoming": 1, "cities_count": 1}
        assert response.data["regions"]["scotland"] == {"total_active": 0, "upcoming": 0, "cities_count": 1}

    @pytest.mark.cache
    def test_cached_until_a_tournament_changes(self, api_client, tournament):
        api_client.get("/api/tournaments/stats/")
        assert cache.get(TOURNAMENT_STATS_CACHE_KEY) is not None

        TournamentFactory()
        assert cache.get(TOURNAMENT_STATS_CACHE_KEY) is None

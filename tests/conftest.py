"""
Pytest fixtures and configuration for Football Tournaments UK tests
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone

import pytest
from rest_framework.test import APIClient

from tests.factories import OrganizerProfileFactory, TournamentAlertFactory, TournamentFactory, UserFactory

User = get_user_model()


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "cache: tests for the Redis-backed caches")
    config.addinivalue_line("markers", "auth: authentication and session tests")


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache (tournament list, rate limits) before and after each test"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def no_external_services(settings):
    """Tests never reach Mapbox or Resend"""
    settings.MAPBOX_ACCESS_TOKEN = ""
    settings.RESEND_API_KEY = ""


@pytest.fixture
def api_client():
    """Return DRF API client"""
    return APIClient()


@pytest.fixture
def organizer_user(db):
    """Create an organizer with a profile"""
    user = UserFactory(user_type="organizer")
    OrganizerProfileFactory(user=user)
    return user


@pytest.fixture
def other_organizer(db):
    user = UserFactory(user_type="organizer")
    OrganizerProfileFactory(user=user)
    return user


@pytest.fixture
def admin_user(db):
    """Create an admin user"""
    return User.objects.create_superuser(email="admin@test.com", password="admin123")


@pytest.fixture
def organizer_client(api_client, organizer_user):
    """Return API client authenticated as an organizer"""
    api_client.force_authenticate(user=organizer_user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as an admin"""
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def tournament(db, organizer_user):
    """Create a published tournament two weeks out"""
    return TournamentFactory(organizer=organizer_user)


@pytest.fixture
def pending_tournament(db, organizer_user):
    """Create a tournament awaiting moderation"""
    return TournamentFactory(organizer=organizer_user, is_published=False)


@pytest.fixture
def past_tournament(db, organizer_user):
    today = timezone.localdate()
    return TournamentFactory(
        organizer=organizer_user,
        start_date=today - timedelta(days=10),
        end_date=today - timedelta(days=9),
        registration_deadline=None,
    )


@pytest.fixture
def multiple_tournaments(db, organizer_user):
    """Published tournaments in different regions and formats"""
    return [
        TournamentFactory(organizer=organizer_user, region="London", format="7v7", age_groups=["U10", "U11"]),
        TournamentFactory(organizer=organizer_user, region="Manchester", format="11v11", age_groups=["U14"]),
        TournamentFactory(organizer=organizer_user, region="Kent", format="5v5, 7v7", age_groups=["U9"]),
    ]


@pytest.fixture
def verified_alert(db):
    """Active, verified daily alert with no filters"""
    return TournamentAlertFactory()

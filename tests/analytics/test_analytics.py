"""
Test cases for event ingest, the admin dashboard and engagement tracking
"""
from datetime import timedelta

from django.utils import timezone

import pytest
from rest_framework import status

from analytics.dashboard import build_dashboard, drop_off_rate, funnel_metrics, tournament_kpis
from analytics.engagement import DictEngagementStore, EngagementTracker
from analytics.models import AnalyticsEvent
from tests.factories import AnalyticsEventFactory, TournamentFactory


@pytest.mark.django_db
class TestTrackEvent:
    def test_anonymous_event(self, api_client):
        response = api_client.post(
            "/api/analytics/events/",
            {"event_name": "tournament_detail_view", "properties": {"tournament_id": 3}, "session_id": "s1"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        event = AnalyticsEvent.objects.get(id=response.data["id"])
        assert event.user is None
        assert event.properties == {"tournament_id": 3}

    def test_authenticated_event_linked_to_user(self, organizer_client, organizer_user):
        response = organizer_client.post("/api/analytics/events/", {"event_name": "registration_start"}, format="json")
        assert AnalyticsEvent.objects.get(id=response.data["id"]).user == organizer_user

    def test_properties_must_be_object(self, api_client):
        response = api_client.post(
            "/api/analytics/events/", {"event_name": "page_view", "properties": ["a"]}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rate_limited(self, api_client):
        for _ in range(120):
            api_client.post("/api/analytics/events/", {"event_name": "page_view"}, format="json")
        response = api_client.post("/api/analytics/events/", {"event_name": "page_view"}, format="json")
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS


@pytest.mark.parametrize("starts,completions,rate", [(0, 0, 0.0), (10, 10, 0.0), (3, 1, 66.7), (8, 2, 75.0)])
def test_drop_off_rate(starts, completions, rate):
    assert drop_off_rate(starts, completions) == rate


@pytest.mark.django_db
class TestDashboard:
    def test_funnel_counts_events_in_range(self):
        now = timezone.now()
        AnalyticsEventFactory.create_batch(4, event_name="registration_start")
        AnalyticsEventFactory(event_name="registration_complete")
        AnalyticsEventFactory(event_name="tournament_list_view", timestamp=now - timedelta(days=60))

        metrics = funnel_metrics(now - timedelta(days=30), now + timedelta(minutes=1))

        assert metrics == {
            "list_views": 0,
            "detail_views": 0,
            "registration_starts": 4,
            "registration_completions": 1,
            "drop_off_rate": 75.0,
        }

    def test_tournament_kpis(self, tournament, past_tournament, pending_tournament):
        TournamentFactory(organizer=None, region="Kent")
        kpis = tournament_kpis()

        assert kpis["total"] == 4
        assert kpis["published"] == 3
        assert kpis["pending"] == 1
        assert kpis["expired"] == 1
        assert kpis["unclaimed"] == 1
        assert kpis["byRegion"][0] == {"region": "London", "count": 3}
        assert kpis["trends7d"] == 4

    def test_build_dashboard_shape(self):
        now = timezone.now()
        data = build_dashboard(now - timedelta(days=30), now, now=now)
        assert set(data) == {"range", "tournaments", "funnel", "users", "events"}

    def test_endpoint_requires_moderator(self, organizer_client):
        response = organizer_client.get("/api/analytics/dashboard/")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_endpoint_with_range(self, admin_client):
        AnalyticsEventFactory(event_name="page_view")
        today = timezone.localdate()
        response = admin_client.get(
            f"/api/analytics/dashboard/?start={(today - timedelta(days=1)).isoformat()}&end={today.isoformat()}"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["events"] == [{"event": "page_view", "count": 1}]
        assert response.data["users"]["totalUsers"] == 1

    def test_endpoint_rejects_inverted_range(self, admin_client):
        response = admin_client.get("/api/analytics/dashboard/?start=2025-07-10&end=2025-07-01")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class FakeClock:
    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now


class TestEngagementTracker:
    def test_new_visitor_not_engaged(self):
        tracker = EngagementTracker(DictEngagementStore(), clock=FakeClock())
        snapshot = tracker.snapshot()

        assert snapshot["pageViews"] == 0
        assert snapshot["firstVisitTime"] == 1_000_000
        assert snapshot["isEngaged"] is False

    def test_two_page_views_engage(self):
        tracker = EngagementTracker(DictEngagementStore())
        tracker.record_page_view("/tournaments")
        assert not tracker.is_engaged()
        tracker.record_page_view("/tournaments/hackney-cup")
        assert tracker.is_engaged()

    def test_same_path_counted_once(self):
        tracker = EngagementTracker(DictEngagementStore())
        tracker.record_page_view("/tournaments")
        tracker.record_page_view("/tournaments")
        assert tracker.data.page_views == 1

    def test_time_threshold(self):
        tracker = EngagementTracker(DictEngagementStore())
        tracker.add_time(20_000)
        tracker.add_time(-5)
        assert not tracker.is_engaged()
        tracker.add_time(10_000)
        assert tracker.is_engaged()

    def test_single_action_engages(self):
        tracker = EngagementTracker(DictEngagementStore())
        tracker.track_action("alert_created")
        assert tracker.is_engaged()

    def test_counters_persist_in_store(self):
        clock = FakeClock()
        store = DictEngagementStore()
        EngagementTracker(store, clock=clock).record_page_view("/blog")
        clock.now += 5000

        tracker = EngagementTracker(store, clock=clock)
        assert tracker.data.page_views == 1
        assert tracker.data.first_visit_time == 1_000_000
        tracker.add_time(1000)
        assert store.data["last_action_time"] == 1_005_000

    def test_malformed_store_data_discarded(self):
        tracker = EngagementTracker(DictEngagementStore({"bogus": 1}))
        assert tracker.data.page_views == 0


@pytest.mark.django_db
class TestEngagementEndpoint:
    def test_session_counters(self, api_client):
        api_client.post("/api/analytics/engagement/", {"event": "page_view", "path": "/"}, format="json")
        api_client.post("/api/analytics/engagement/", {"event": "page_view", "path": "/blog"}, format="json")
        response = api_client.get("/api/analytics/engagement/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["pageViews"] == 2
        assert response.data["isEngaged"] is True

    def test_time_event_requires_milliseconds(self, api_client):
        response = api_client.post("/api/analytics/engagement/", {"event": "time"}, format="json")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

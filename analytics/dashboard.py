"""
Aggregates for the admin analytics dashboard
"""
from datetime import timedelta

from django.db.models import Count
from django.utils import timezone

from accounts.models import User
from tournaments.models import Tournament

from .models import AnalyticsEvent

FUNNEL_EVENTS = {
    "list_views": "tournament_list_view",
    "detail_views": "tournament_detail_view",
    "registration_starts": "registration_start",
    "registration_completions": "registration_complete",
}

TOP_N = 10


def _grouped(queryset, field, label, limit=None):
    rows = queryset.values(field).annotate(count=Count("id")).order_by("-count", field)
    if limit:
        rows = rows[:limit]
    return [{label: row[field] or "Unknown", "count": row["count"]} for row in rows]


def tournament_kpis(now=None):
    now = now or timezone.now()
    today = timezone.localdate(now)
    tournaments = Tournament.objects.all()

    return {
        "total": tournaments.count(),
        "active": tournaments.filter(start_date__lte=today, end_date__gte=today).count(),
        "expired": tournaments.filter(end_date__lt=today).count(),
        "published": tournaments.filter(is_published=True).count(),
        "pending": tournaments.filter(is_published=False).count(),
        # Listings imported without an organizer account
        "unclaimed": tournaments.filter(organizer__isnull=True).count(),
        "byCity": _grouped(tournaments, "location_name", "city", limit=TOP_N),
        "byRegion": _grouped(tournaments, "region", "region"),
        "byType": _grouped(tournaments, "type", "type"),
        "byFormat": _grouped(tournaments, "format", "format"),
        "trends7d": tournaments.filter(created_at__gte=now - timedelta(days=7)).count(),
        "trends30d": tournaments.filter(created_at__gte=now - timedelta(days=30)).count(),
    }


def drop_off_rate(starts, completions):
    """Percentage of started registrations that were not completed"""
    if not starts:
        return 0.0
    return round((starts - completions) / starts * 100, 1)


def funnel_metrics(start, end):
    events = AnalyticsEvent.objects.filter(timestamp__gte=start, timestamp__lte=end)
    rows = events.filter(event_name__in=FUNNEL_EVENTS.values()).values("event_name").annotate(count=Count("id"))
    counts = {row["event_name"]: row["count"] for row in rows}
    metrics = {key: counts.get(event_name, 0) for key, event_name in FUNNEL_EVENTS.items()}
    metrics["drop_off_rate"] = drop_off_rate(metrics["registration_starts"], metrics["registration_completions"])
    return metrics


def user_analytics(now=None):
    now = now or timezone.now()
    users = User.objects.all()
    return {
        "totalUsers": users.count(),
        "organizers": users.filter(user_type="organizer").count(),
        "signUpsLast7d": users.filter(created_at__gte=now - timedelta(days=7)).count(),
        "signUpsLast30d": users.filter(created_at__gte=now - timedelta(days=30)).count(),
    }


def top_events(start, end, limit=TOP_N):
    events = AnalyticsEvent.objects.filter(timestamp__gte=start, timestamp__lte=end)
    return _grouped(events, "event_name", "event", limit=limit)


def build_dashboard(start, end, now=None):
    return {
        "range": {"start": start.isoformat(), "end": end.isoformat()},
        "tournaments": tournament_kpis(now),
        "funnel": funnel_metrics(start, end),
        "users": user_analytics(now),
        "events": top_events(start, end),
    }

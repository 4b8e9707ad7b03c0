import logging
from datetime import datetime, time, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tournaments.views import IsModerator
from tournamentsuk.throttling import AnalyticsEventThrottle

from .dashboard import build_dashboard
from .engagement import EngagementTracker, SessionEngagementStore
from .serializers import AnalyticsEventSerializer, EngagementEventSerializer

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30


class TrackEventView(APIView):
    """
    Record a client-side analytics event
    POST /api/analytics/events/
    """

    permission_classes = [permissions.AllowAny]
    throttle_classes = [AnalyticsEventThrottle]

    def post(self, request):
        serializer = AnalyticsEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = request.user if request.user.is_authenticated else None
        event = serializer.save(user=user)
        logger.debug(f"Analytics event tracked: {event.event_name}")
        return Response({"id": event.id}, status=status.HTTP_201_CREATED)


def _range_bound(value, end_of_day=False):
    day = parse_date(value) if value else None
    if day is None:
        return None
    return timezone.make_aware(datetime.combine(day, time.max if end_of_day else time.min))


class AnalyticsDashboardView(APIView):
    """
    Admin analytics dashboard
    GET /api/analytics/dashboard/?start=YYYY-MM-DD&end=YYYY-MM-DD
    The date range applies to event metrics, defaulting to the last 30 days
    """

    permission_classes = [IsModerator]

    def get(self, request):
        now = timezone.now()
        try:
            start = _range_bound(request.query_params.get("start"))
            end = _range_bound(request.query_params.get("end"), end_of_day=True)
        except ValueError:
            return Response({"error": "Invalid date range"}, status=status.HTTP_400_BAD_REQUEST)

        end = end or now
        start = start or end - timedelta(days=DEFAULT_RANGE_DAYS)
        if start > end:
            return Response({"error": "Start date must be before end date"}, status=status.HTTP_400_BAD_REQUEST)

        return Response(build_dashboard(start, end, now=now))


class EngagementView(APIView):
    """
    Session engagement counters, used to decide when to show the install prompt
    GET /api/analytics/engagement/
    POST /api/analytics/engagement/ {"event": "page_view" | "time" | "action", ...}
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        tracker = EngagementTracker(SessionEngagementStore(request.session))
        return Response(tracker.snapshot())

    def post(self, request):
        serializer = EngagementEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tracker = EngagementTracker(SessionEngagementStore(request.session))
        if data["event"] == "page_view":
            tracker.record_page_view(data.get("path"))
        elif data["event"] == "time":
            tracker.add_time(data["milliseconds"])
        elif data["event"] == "action":
            tracker.track_action(data["action"])

        return Response(tracker.snapshot())

from django.urls import path

from .views import AnalyticsDashboardView, EngagementView, TrackEventView

urlpatterns = [
    path("events/", TrackEventView.as_view(), name="analytics-event"),
    path("engagement/", EngagementView.as_view(), name="analytics-engagement"),
    path("dashboard/", AnalyticsDashboardView.as_view(), name="analytics-dashboard"),
]

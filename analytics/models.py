from django.db import models
from django.utils import timezone

from accounts.models import User


class AnalyticsEvent(models.Model):
    """Client-side product event (page views, funnel steps, PWA prompts...)"""

    event_name = models.CharField(max_length=100, db_index=True)
    properties = models.JSONField(default=dict, blank=True)
    session_id = models.CharField(max_length=100, db_index=True)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="analytics_events")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "analytics_events"
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["event_name", "timestamp"]),
        ]

    def __str__(self):
        return f"{self.event_name} ({self.session_id})"

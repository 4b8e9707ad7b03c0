import uuid

from django.db import models


def generate_token():
    return f"{uuid.uuid4().hex}-{uuid.uuid4().hex}"


class TournamentAlert(models.Model):
    """
    Email subscription to new tournaments matching a saved filter set.
    Inactive until the address is verified.
    """

    FREQUENCY_CHOICES = (
        ("instant", "Instant"),
        ("daily", "Daily"),
        ("weekly", "Weekly"),
    )

    SOURCE_CHOICES = (
        ("list", "Tournament list"),
        ("city", "City page"),
        ("filters", "Filter panel"),
        ("empty", "Empty results"),
    )

    email = models.EmailField(db_index=True)
    # Stored in query-param form, see tournaments.filters.serialize_filters
    filters = models.JSONField(default=dict, blank=True)
    frequency = models.CharField(max_length=10, choices=FREQUENCY_CHOICES, default="daily")
    consent_source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default="list")
    consent_timestamp = models.DateTimeField(auto_now_add=True)

    verification_token = models.CharField(max_length=80, unique=True, default=generate_token)
    management_token = models.CharField(max_length=80, unique=True, default=generate_token)

    is_active = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)
    last_sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tournament_alerts"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["email", "is_active"]),
            models.Index(fields=["frequency", "is_active"]),
        ]

    def __str__(self):
        return f"{self.email} ({self.frequency})"

    @property
    def is_verified(self):
        return self.verified_at is not None


class AlertDelivery(models.Model):
    """One alert email attempt, used for rate limiting and duplicate suppression"""

    STATUS_CHOICES = (
        ("delivered", "Delivered"),
        ("failed", "Failed"),
        ("rate_limited", "Rate limited"),
    )

    alert = models.ForeignKey(TournamentAlert, on_delete=models.CASCADE, related_name="deliveries")
    # Set for instant alerts; digests cover several tournaments
    tournament = models.ForeignKey(
        "tournaments.Tournament", on_delete=models.SET_NULL, null=True, blank=True, related_name="alert_deliveries"
    )
    item_count = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="delivered")
    error = models.TextField(blank=True)
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "alert_deliveries"
        ordering = ["-sent_at"]
        indexes = [
            models.Index(fields=["alert", "status"]),
            models.Index(fields=["sent_at"]),
        ]

    def __str__(self):
        return f"{self.alert.email} - {self.status} ({self.item_count})"

from django.db import models
from django.utils.text import get_valid_filename, slugify

from accounts.models import User

from . import status as tournament_status


class Tournament(models.Model):
    """
    A youth football tournament, league, camp or holiday course listing
    """

    FORMAT_CHOICES = (
        ("3v3", "3v3"),
        ("5v5", "5v5"),
        ("7v7", "7v7"),
        ("9v9", "9v9"),
        ("11v11", "11v11"),
    )

    TYPE_CHOICES = (
        ("tournament", "Tournament"),
        ("league", "League"),
        ("camp", "Camp"),
        ("holiday", "Holiday course"),
    )

    AGE_GROUPS = [f"U{age}" for age in range(6, 22)]
    TEAM_TYPES = ["boys", "girls", "mixed"]

    # Extended details that count towards listing completion
    COMPLETION_FIELDS = (
        "banner_image",
        "extended_description",
        "venue_details",
        "rules_and_regulations",
        "schedule_details",
        "what_to_bring",
        "accommodation_info",
        "prize_information",
        "sponsor_info",
        "additional_notes",
    )

    organizer = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="tournaments")
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True, blank=True)
    description = models.TextField(blank=True)

    # Location
    location_name = models.CharField(max_length=255, help_text="Venue name and address")
    postcode = models.CharField(max_length=12, blank=True)
    region = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="United Kingdom")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # Dates (whole days)
    start_date = models.DateField()
    end_date = models.DateField()
    registration_deadline = models.DateField(null=True, blank=True)

    # Categories
    format = models.CharField(max_length=50, help_text="One format or a comma separated list, e.g. '5v5, 7v7'")
    age_groups = models.JSONField(default=list, blank=True)  # ["U9", "U10"]
    team_types = models.JSONField(default=list, blank=True)  # ["boys", "mixed"]
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="tournament")

    # Capacity and cost
    max_teams = models.PositiveIntegerField(null=True, blank=True)
    registered_teams = models.PositiveIntegerField(default=0)
    cost_amount = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    cost_currency = models.CharField(max_length=3, default="GBP")

    # Contact
    contact_name = models.CharField(max_length=200)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=30, blank=True)
    website = models.URLField(blank=True)
    features = models.JSONField(default=list, blank=True)

    banner_image = models.ImageField(
        upload_to="tournaments/banners/", blank=True, null=True, help_text="Tournament banner image (max 5MB)"
    )

    # Extended details
    extended_description = models.TextField(blank=True)
    venue_details = models.TextField(blank=True)
    rules_and_regulations = models.TextField(blank=True)
    schedule_details = models.TextField(blank=True)
    what_to_bring = models.TextField(blank=True)
    accommodation_info = models.TextField(blank=True)
    prize_information = models.TextField(blank=True)
    sponsor_info = models.TextField(blank=True)
    additional_notes = models.TextField(blank=True)

    # Moderation; stored status only ever records a cancellation
    is_published = models.BooleanField(default=False)
    status = models.CharField(max_length=30, choices=tournament_status.STATUS_CHOICES, default="upcoming")
    review_email_sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.start_date})"

    @property
    def computed_status(self):
        return tournament_status.tournament_status(self)

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None

    def completion_percentage(self):
        """Share of the extended details that have been filled in (0-100)"""
        completed = 0
        for field_name in self.COMPLETION_FIELDS:
            value = getattr(self, field_name)
            if isinstance(value, str):
                value = value.strip()
            if value:
                completed += 1
        return round(completed * 100 / len(self.COMPLETION_FIELDS))

    def completion_level(self):
        percentage = self.completion_percentage()
        if percentage >= 80:
            return "complete"
        if percentage >= 50:
            return "partial"
        return "incomplete"

    def _unique_slug(self):
        base = slugify(self.name)[:200] or "tournament"
        slug = base
        suffix = 2
        while Tournament.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()
        super().save(*args, **kwargs)

    class Meta:
        db_table = "tournaments"
        ordering = ["start_date", "name"]
        indexes = [
            models.Index(fields=["is_published", "start_date"]),
            models.Index(fields=["region"]),
        ]


def attachment_upload_to(instance, filename):
    return f"tournaments/attachments/{instance.tournament_id}/{get_valid_filename(filename).lower()}"


class TournamentAttachment(models.Model):
    """Rules, schedules and entry forms an organizer attaches to a listing"""

    tournament = models.ForeignKey(Tournament, on_delete=models.CASCADE, related_name="attachments")
    file = models.FileField(upload_to=attachment_upload_to)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=100)
    file_size = models.PositiveIntegerField()
    uploaded_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="tournament_attachments"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.file_name} ({self.tournament_id})"

    class Meta:
        db_table = "tournament_attachments"
        ordering = ["-created_at", "-id"]

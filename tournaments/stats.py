"""
Public directory counts for the home page and the country region pages
"""
from django.utils import timezone

from .filtering import REGION_GROUPS

DEFAULT_REGION_SLUG = "england"

# Listing region name (lower case) -> country page slug
REGION_SLUGS = {name.lower(): slug for slug, names in REGION_GROUPS.items() for name in names}


def region_slug(region):
    return REGION_SLUGS.get((region or "").strip().lower(), DEFAULT_REGION_SLUG)


def region_stats(tournaments, today=None):
    """
    Counts per country slug: active listings (not yet finished), upcoming
    listings (not yet started) and distinct venues across every listing.
    Cancelled listings only count towards venues.
    """
    today = today or timezone.localdate()
    stats = {}
    venues = {}

    for tournament in tournaments:
        slug = region_slug(tournament.region)
        counts = stats.setdefault(slug, {"total_active": 0, "upcoming": 0, "cities_count": 0})
        if tournament.location_name:
            venues.setdefault(slug, set()).add(tournament.location_name.strip().lower())

        if tournament.status == "cancelled":
            continue
        if (tournament.end_date or tournament.start_date) >= today:
            counts["total_active"] += 1
            if tournament.start_date > today:
                counts["upcoming"] += 1

    for slug, counts in stats.items():
        counts["cities_count"] = len(venues.get(slug, ()))
    return stats


def site_totals(queryset, today=None):
    """Headline numbers over published listings"""
    today = today or timezone.localdate()
    live = queryset.exclude(status="cancelled")
    return {
        "tournaments": queryset.count(),
        "upcoming": live.filter(start_date__gt=today).count(),
        "regions": queryset.exclude(region="").order_by().values("region").distinct().count(),
        "organizers": queryset.exclude(organizer=None).order_by().values("organizer").distinct().count(),
    }

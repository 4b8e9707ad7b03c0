"""
Sitemap of active tournament pages on the public site
"""
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.sitemaps import Sitemap
from django.utils import timezone

from . import status as tournament_status
from .models import Tournament

CHANGEFREQ_BY_STATUS = {
    tournament_status.ONGOING: "hourly",
    tournament_status.TODAY: "daily",
    tournament_status.TOMORROW: "daily",
    tournament_status.REGISTRATION_CLOSES_SOON: "daily",
}

PRIORITY_BY_STATUS = {
    tournament_status.ONGOING: 0.9,
    tournament_status.TODAY: 0.9,
    tournament_status.TOMORROW: 0.8,
    tournament_status.REGISTRATION_CLOSES_SOON: 0.8,
}


class SiteUrlSitemap(Sitemap):
    """Sitemaps point at the front-end site, not the API host"""

    @property
    def protocol(self):
        return urlparse(settings.SITE_URL).scheme or "https"

    def get_domain(self, site=None):
        return urlparse(settings.SITE_URL).netloc


class TournamentSitemap(SiteUrlSitemap):
    limit = 5000

    def items(self):
        # Finished tournaments drop out of the sitemap
        tournaments = Tournament.objects.filter(is_published=True, end_date__gte=timezone.localdate())
        return tournaments.order_by("-updated_at")

    def location(self, tournament):
        return f"/tournaments/{tournament.slug or tournament.id}"

    def lastmod(self, tournament):
        return tournament.updated_at

    def changefreq(self, tournament):
        return CHANGEFREQ_BY_STATUS.get(tournament.computed_status, "weekly")

    def priority(self, tournament):
        return PRIORITY_BY_STATUS.get(tournament.computed_status, 0.6)

"""
URL configuration for tournamentsuk project.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.contrib.sitemaps import views as sitemap_views
from django.urls import include, path

from blog.feeds import LatestPostsFeed
from blog.sitemaps import BlogSitemap, BlogTagSitemap, StaticPageSitemap
from tournaments.sitemaps import TournamentSitemap

sitemaps = {
    "pages": StaticPageSitemap,
    "tournaments": TournamentSitemap,
    "blog": BlogSitemap,
    "blog-tags": BlogTagSitemap,
}

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/accounts/", include("accounts.urls")),
    path("api/tournaments/", include("tournaments.urls")),
    path("api/alerts/", include("alerts.urls")),
    path("api/blog/", include("blog.urls")),
    path("api/analytics/", include("analytics.urls")),
    path("api/support/", include("support.urls")),
    # Feeds and sitemaps
    path("rss/", LatestPostsFeed(), name="rss"),
    path("blog/feed/", LatestPostsFeed(), name="blog-feed"),
    path("sitemap.xml", sitemap_views.index, {"sitemaps": sitemaps}, name="sitemap-index"),
    path(
        "sitemap-<section>.xml",
        sitemap_views.sitemap,
        {"sitemaps": sitemaps},
        name="django.contrib.sitemaps.views.sitemap",
    ),
]

if settings.DEBUG and getattr(settings, "MEDIA_ROOT", None):
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

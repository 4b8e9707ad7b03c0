"""
Sitemaps for the blog and the site's fixed pages
"""
from urllib.parse import quote

from tournaments.sitemaps import SiteUrlSitemap

from .models import BlogPost, BlogTag


class StaticPageSitemap(SiteUrlSitemap):
    changefreq = "daily"

    PAGES = {
        "/": 1.0,
        "/tournaments": 0.9,
        "/blog": 0.8,
    }

    def items(self):
        return list(self.PAGES)

    def location(self, path):
        return path

    def priority(self, path):
        return self.PAGES[path]


class BlogSitemap(SiteUrlSitemap):
    changefreq = "monthly"
    priority = 0.7

    def items(self):
        return BlogPost.published.order_by("-published_at")

    def location(self, post):
        return post.get_absolute_url()

    def lastmod(self, post):
        return post.updated_at


class BlogTagSitemap(SiteUrlSitemap):
    changefreq = "weekly"
    priority = 0.6

    def items(self):
        return BlogTag.objects.filter(posts__in=BlogPost.published.values("id")).distinct().order_by("name")

    def location(self, tag):
        return f"/blog/tags/{quote(tag.name)}"

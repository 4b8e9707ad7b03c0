"""
RSS feed of the latest published blog posts
"""
from django.conf import settings
from django.contrib.syndication.views import Feed
from django.utils.feedgenerator import Rss201rev2Feed
from django.utils.html import escape

from .models import BlogPost

FEED_SIZE = 50


class LatestPostsFeed(Feed):
    feed_type = Rss201rev2Feed
    description = "Latest news, insights, and updates from the UK's leading football tournament platform"
    language = "en-GB"

    def title(self):
        return f"{settings.SITE_NAME} - Blog"

    def link(self):
        return f"{settings.SITE_URL}/blog"

    def feed_url(self):
        return f"{settings.SITE_URL}/blog/feed/"

    def feed_copyright(self):
        return f"{settings.SITE_NAME}. All rights reserved."

    def items(self):
        return BlogPost.published.select_related("author__organizer_profile").order_by("-published_at")[:FEED_SIZE]

    def item_title(self, post):
        return post.title

    def item_description(self, post):
        summary = post.excerpt or f"{(post.content or '')[:300]}..."
        if post.cover_image_url:
            return f'<img src="{escape(post.cover_image_url)}" alt="{escape(post.cover_alt)}" />{escape(summary)}'
        return escape(summary)

    def item_link(self, post):
        return f"{settings.SITE_URL}{post.get_absolute_url()}"

    def item_guid(self, post):
        return self.item_link(post)

    item_guid_is_permalink = True

    def item_pubdate(self, post):
        return post.published_at

    def item_updateddate(self, post):
        return post.updated_at

    def item_author_name(self, post):
        return post.author_name

    def item_categories(self, post):
        return [tag.name for tag in post.tags.all()]

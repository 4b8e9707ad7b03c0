"""
Test cases for blog posts, tags, likes and the RSS feed
"""
from datetime import timedelta

from django.core.cache import cache
from django.utils import timezone

import pytest
from rest_framework import status

from blog.models import BlogPost, BlogPostLike, extract_excerpt, plain_text, reading_time
from blog.signals import BLOG_TAGS_CACHE_KEY
from tests.factories import BlogPostFactory, BlogTagFactory


def test_plain_text_strips_markdown():
    content = "## Kit list\n\nBring **shin pads** and see [the rules](https://example.test)."
    assert plain_text(content) == "Kit list Bring shin pads and see the rules."


@pytest.mark.parametrize("words,minutes", [(0, 1), (150, 1), (200, 1), (201, 2), (1000, 5)])
def test_reading_time(words, minutes):
    assert reading_time(" ".join(["goal"] * words)) == minutes


def test_excerpt_breaks_on_word_boundary():
    excerpt = extract_excerpt("word " * 100)
    assert excerpt.endswith("...")
    assert len(excerpt) <= 163
    assert not excerpt[:-3].endswith(" ")


@pytest.mark.django_db
class TestBlogPostModel:
    def test_save_fills_slug_excerpt_and_reading_time(self):
        post = BlogPost.objects.create(title="Tournament Day Checklist", content="Arrive early. " * 300)

        assert post.slug == "tournament-day-checklist"
        assert post.excerpt.startswith("Arrive early.")
        assert post.reading_time == 3
        assert post.published_at is None

    def test_duplicate_titles_get_unique_slugs(self):
        first = BlogPost.objects.create(title="Summer Festivals")
        second = BlogPost.objects.create(title="Summer Festivals")
        assert second.slug == f"{first.slug}-2"

    def test_publishing_sets_published_at(self):
        post = BlogPost.objects.create(title="News", status="published")
        assert post.is_live

    def test_future_post_is_not_live(self):
        post = BlogPostFactory(published_at=timezone.now() + timedelta(days=1))
        assert not post.is_live
        assert not BlogPost.published.filter(id=post.id).exists()

    def test_author_name_falls_back_to_site(self, organizer_user):
        assert BlogPostFactory().author_name == "Football Tournaments UK"
        assert BlogPostFactory(author=organizer_user).author_name == organizer_user.organizer_profile.full_name


@pytest.mark.django_db
class TestBlogPostList:
    def test_pinned_first_then_newest(self, api_client):
        old = BlogPostFactory(published_at=timezone.now() - timedelta(days=5))
        new = BlogPostFactory(published_at=timezone.now() - timedelta(days=1))
        pinned = BlogPostFactory(published_at=timezone.now() - timedelta(days=10), is_pinned=True)
        BlogPostFactory(status="draft", published_at=None)

        response = api_client.get("/api/blog/posts/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 3
        assert [p["id"] for p in response.data["results"]] == [pinned.id, new.id, old.id]

    def test_paginated_by_twelve(self, api_client):
        BlogPostFactory.create_batch(14)
        response = api_client.get("/api/blog/posts/")

        assert len(response.data["results"]) == 12
        assert response.data["next"] is not None

    def test_filter_by_tag_name_or_slug(self, api_client):
        tagged = BlogPostFactory(tags=["Coaching Tips"])
        BlogPostFactory(tags=["News"])

        by_slug = api_client.get("/api/blog/posts/?tag=coaching-tips")
        by_name = api_client.get("/api/blog/posts/", {"tag": "coaching tips"})

        assert [p["id"] for p in by_slug.data["results"]] == [tagged.id]
        assert [p["id"] for p in by_name.data["results"]] == [tagged.id]
        assert by_slug.data["results"][0]["tags"] == ["Coaching Tips"]

    def test_search(self, api_client):
        match = BlogPostFactory(title="Penalty shootout rules")
        BlogPostFactory(title="Kit guide", content="Shirts and socks")

        response = api_client.get("/api/blog/posts/?search=penalty")
        assert [p["id"] for p in response.data["results"]] == [match.id]

    def test_detail_by_slug(self, api_client):
        post = BlogPostFactory(content="Full article body")
        response = api_client.get(f"/api/blog/posts/{post.slug}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["content"] == "Full article body"

    def test_draft_detail_not_found(self, api_client):
        post = BlogPostFactory(status="draft", published_at=None)
        response = api_client.get(f"/api/blog/posts/{post.slug}/")
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestBlogTags:
    def test_only_tags_with_live_posts(self, api_client):
        BlogPostFactory(tags=["Coaching Tips", "News"])
        BlogPostFactory(tags=["News"])
        BlogPostFactory(status="draft", published_at=None, tags=["Drafts Only"])

        response = api_client.get("/api/blog/tags/")
        counts = {tag["name"]: tag["post_count"] for tag in response.data}

        assert counts == {"Coaching Tips": 1, "News": 2}

    @pytest.mark.cache
    def test_cache_cleared_when_tags_change(self, api_client):
        BlogPostFactory(tags=["News"])
        api_client.get("/api/blog/tags/")
        assert cache.get(BLOG_TAGS_CACHE_KEY) is not None

        BlogTagFactory(name="Events")
        assert cache.get(BLOG_TAGS_CACHE_KEY) is None


@pytest.mark.django_db
class TestBlogLike:
    def like(self, client, post_id, session_id="session-abc"):
        return client.post("/api/blog/like/", {"postId": post_id, "sessionId": session_id}, format="json")

    def test_like_increments_count(self, api_client):
        post = BlogPostFactory()
        response = self.like(api_client, post.id)

        assert response.data == {"success": True, "likes_count": 1}
        assert BlogPostLike.objects.filter(post=post, session_id="session-abc").exists()

    def test_second_like_from_same_session(self, api_client):
        post = BlogPostFactory()
        self.like(api_client, post.id)
        # Let the one-per-minute window pass
        cache.clear()
        response = self.like(api_client, post.id)

        assert response.data == {"success": True, "message": "Already liked"}
        post.refresh_from_db()
        assert post.likes_count == 1

    def test_rate_limited_per_session(self, api_client):
        first, second = BlogPostFactory(), BlogPostFactory()
        self.like(api_client, first.id)
        response = self.like(api_client, second.id)
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_other_sessions_not_throttled(self, api_client):
        first, second = BlogPostFactory(), BlogPostFactory()
        self.like(api_client, first.id, session_id="session-one")
        response = self.like(api_client, second.id, session_id="session-two")

        assert response.data == {"success": True, "likes_count": 1}

    def test_unknown_post(self, api_client):
        assert self.like(api_client, 999999).status_code == status.HTTP_404_NOT_FOUND

    def test_unpublished_post(self, api_client):
        post = BlogPostFactory(status="draft", published_at=None)
        response = self.like(api_client, post.id)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "Post is not published"

    def test_session_required(self, api_client):
        response = api_client.post("/api/blog/like/", {"postId": 1}, format="json")
        assert response.data["error"] == "Session ID is required for anonymous likes"


@pytest.mark.django_db
class TestBlogAdmin:
    def test_requires_moderator(self, organizer_client):
        response = organizer_client.get("/api/blog/admin/posts/")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_post_with_tags(self, admin_client, admin_user):
        response = admin_client.post(
            "/api/blog/admin/posts/",
            {"title": "Festival season", "content": "It is here.", "status": "published", "tags": ["News", "Events"]},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        post = BlogPost.objects.get(id=response.data["id"])
        assert post.author == admin_user
        assert post.is_live
        assert sorted(response.data["tag_names"]) == ["Events", "News"]

    def test_list_includes_drafts(self, admin_client):
        BlogPostFactory(status="draft", published_at=None)
        BlogPostFactory()

        assert admin_client.get("/api/blog/admin/posts/").data["count"] == 2
        assert admin_client.get("/api/blog/admin/posts/?status=draft").data["count"] == 1

    def test_update_and_delete(self, admin_client):
        post = BlogPostFactory(tags=["News"])
        response = admin_client.patch(f"/api/blog/admin/posts/{post.id}/", {"tags": ["Events"]}, format="json")
        assert response.data["tag_names"] == ["Events"]

        response = admin_client.delete(f"/api/blog/admin/posts/{post.id}/")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not BlogPost.objects.filter(id=post.id).exists()

    def test_duplicate_slug_rejected(self, admin_client):
        existing = BlogPostFactory()
        response = admin_client.post(
            "/api/blog/admin/posts/", {"title": "Another", "slug": existing.slug}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestBlogFeed:
    def test_feed_lists_published_posts(self, client, settings):
        settings.SITE_URL = "https://footballtournamentsuk.co.uk"
        post = BlogPostFactory(title="Grassroots guide", tags=["Coaching Tips"])
        draft = BlogPostFactory(title="Unfinished draft", status="draft", published_at=None)

        response = client.get("/blog/feed/")
        content = response.content.decode()

        assert response.status_code == 200
        assert response["Content-Type"].startswith("application/rss+xml")
        assert f"https://footballtournamentsuk.co.uk/blog/{post.slug}" in content
        assert "<category>Coaching Tips</category>" in content
        assert draft.title not in content

    def test_rss_alias(self, client):
        assert client.get("/rss/").status_code == 200

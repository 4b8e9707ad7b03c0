import math
import re

from django.db import models
from django.utils import timezone
from django.utils.text import slugify

from accounts.models import User

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160

MARKDOWN_PATTERNS = (
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\s+"), " "),
)


def plain_text(content):
    """Strip the markdown syntax used in post bodies"""
    text = content or ""
    for pattern, replacement in MARKDOWN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text.strip()


def reading_time(content):
    words = len(plain_text(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def extract_excerpt(content, max_length=EXCERPT_LENGTH):
    text = plain_text(content)
    if len(text) <= max_length:
        return text
    trimmed = text[:max_length]
    last_space = trimmed.rfind(" ")
    if last_space > 0:
        trimmed = trimmed[:last_space]
    return f"{trimmed}..."


class BlogTag(models.Model):
    name = models.CharField(max_length=50, unique=True)
    slug = models.SlugField(max_length=60, unique=True, blank=True)
    color = models.CharField(max_length=7, default="#16a34a")

    class Meta:
        db_table = "blog_tags"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class PublishedPostManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(status="published", published_at__lte=timezone.now())


class BlogPost(models.Model):
    STATUS_CHOICES = (
        ("draft", "Draft"),
        ("published", "Published"),
    )

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True, blank=True)
    excerpt = models.TextField(blank=True)
    content = models.TextField(blank=True)
    cover_image_url = models.URLField(blank=True)
    cover_alt = models.CharField(max_length=200, blank=True)
    og_image_url = models.URLField(blank=True)
    canonical_url = models.URLField(blank=True)
    sources = models.JSONField(default=list, blank=True)

    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="blog_posts")
    tags = models.ManyToManyField(BlogTag, blank=True, related_name="posts")

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="draft")
    published_at = models.DateTimeField(null=True, blank=True)
    is_pinned = models.BooleanField(default=False)
    reading_time = models.PositiveIntegerField(default=1, help_text="Minutes")
    likes_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = models.Manager()
    published = PublishedPostManager()

    class Meta:
        db_table = "blog_posts"
        ordering = ["-is_pinned", "-published_at"]
        indexes = [
            models.Index(fields=["status", "published_at"]),
        ]

    def __str__(self):
        return self.title

    @property
    def is_live(self):
        return self.status == "published" and self.published_at is not None and self.published_at <= timezone.now()

    @property
    def author_name(self):
        if self.author is None:
            return "Football Tournaments UK"
        profile = getattr(self.author, "organizer_profile", None)
        if profile and profile.full_name:
            return profile.full_name
        return self.author.get_full_name() or "Football Tournaments UK"

    def get_absolute_url(self):
        return f"/blog/{self.slug}"

    def _unique_slug(self):
        base = slugify(self.title)[:200] or "post"
        slug = base
        counter = 2
        while BlogPost.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()
        if not self.excerpt and self.content:
            self.excerpt = extract_excerpt(self.content)
        self.reading_time = reading_time(self.content)
        if self.status == "published" and self.published_at is None:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)


class BlogPostLike(models.Model):
    """Anonymous like, one per browser session per post"""

    post = models.ForeignKey(BlogPost, on_delete=models.CASCADE, related_name="likes")
    session_id = models.CharField(max_length=100)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="blog_likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "blog_post_likes"
        constraints = [
            models.UniqueConstraint(fields=["post", "session_id"], name="unique_like_per_session"),
        ]

    def __str__(self):
        return f"{self.post_id} liked by {self.session_id}"

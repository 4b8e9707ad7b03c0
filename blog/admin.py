from django.contrib import admin

from .models import BlogPost, BlogPostLike, BlogTag


@admin.register(BlogPost)
class BlogPostAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "published_at", "is_pinned", "reading_time", "likes_count")
    list_filter = ("status", "is_pinned", "tags")
    search_fields = ("title", "excerpt", "content")
    prepopulated_fields = {"slug": ("title",)}
    filter_horizontal = ("tags",)
    readonly_fields = ("reading_time", "likes_count", "created_at", "updated_at")
    ordering = ("-is_pinned", "-published_at")


@admin.register(BlogTag)
class BlogTagAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "color")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(BlogPostLike)
class BlogPostLikeAdmin(admin.ModelAdmin):
    list_display = ("post", "session_id", "created_at")
    search_fields = ("post__title", "session_id")
    raw_id_fields = ("post", "user")

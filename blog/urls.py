from django.urls import path

from .views import (
    AdminBlogPostDetailView,
    AdminBlogPostListCreateView,
    AdminBlogTagListCreateView,
    BlogLikeView,
    BlogPostDetailView,
    BlogPostListView,
    BlogTagListView,
)

urlpatterns = [
    # Public
    path("posts/", BlogPostListView.as_view(), name="blog-post-list"),
    path("posts/<slug:slug>/", BlogPostDetailView.as_view(), name="blog-post-detail"),
    path("tags/", BlogTagListView.as_view(), name="blog-tag-list"),
    path("like/", BlogLikeView.as_view(), name="blog-like"),
    # Admin
    path("admin/posts/", AdminBlogPostListCreateView.as_view(), name="blog-admin-post-list"),
    path("admin/posts/<int:pk>/", AdminBlogPostDetailView.as_view(), name="blog-admin-post-detail"),
    path("admin/tags/", AdminBlogTagListCreateView.as_view(), name="blog-admin-tag-list"),
]

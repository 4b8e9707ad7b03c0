import logging

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q

from rest_framework import generics, permissions, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from tournaments.views import IsModerator
from tournamentsuk.throttling import BlogLikeThrottle

from .models import BlogPost, BlogPostLike, BlogTag
from .serializers import (
    BlogLikeSerializer,
    BlogPostAdminSerializer,
    BlogPostDetailSerializer,
    BlogPostListSerializer,
    BlogTagSerializer,
)
from .signals import BLOG_TAGS_CACHE_KEY

logger = logging.getLogger(__name__)


class BlogPagination(PageNumberPagination):
    page_size = 12


# ============= Public Blog Views =============


class BlogPostListView(generics.ListAPIView):
    """
    Published posts, pinned first then newest
    GET /api/blog/posts/?tag=&search=&page=
    """

    serializer_class = BlogPostListSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = BlogPagination

    def get_queryset(self):
        queryset = BlogPost.published.select_related("author__organizer_profile").prefetch_related("tags")

        tag = self.request.query_params.get("tag")
        if tag:
            queryset = queryset.filter(Q(tags__slug=tag) | Q(tags__name__iexact=tag))

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(excerpt__icontains=search) | Q(content__icontains=search)
            )

        return queryset.distinct().order_by("-is_pinned", "-published_at")


class BlogPostDetailView(generics.RetrieveAPIView):
    """
    GET /api/blog/posts/<slug>/
    """

    serializer_class = BlogPostDetailSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "slug"

    def get_queryset(self):
        return BlogPost.published.select_related("author__organizer_profile").prefetch_related("tags")


class BlogTagListView(APIView):
    """
    Tags used by at least one published post
    GET /api/blog/tags/
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        cached_data = cache.get(BLOG_TAGS_CACHE_KEY)
        if cached_data is not None:
            return Response(cached_data)

        live = BlogPost.published.values("id")
        tags = (
            BlogTag.objects.annotate(post_count=Count("posts", filter=Q(posts__in=live), distinct=True))
            .filter(post_count__gt=0)
            .order_by("name")
        )
        data = BlogTagSerializer(tags, many=True).data
        cache.set(BLOG_TAGS_CACHE_KEY, data, timeout=300)
        return Response(data)


class BlogLikeView(APIView):
    """
    Anonymous like, once per browser session
    POST /api/blog/like/ {"postId": ..., "sessionId": ...}
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [BlogLikeThrottle]

    def post(self, request):
        serializer = BlogLikeSerializer(data=request.data)
        if not serializer.is_valid():
            errors = serializer.errors
            message = (errors.get("postId") or errors.get("sessionId"))[0]
            return Response({"error": str(message)}, status=status.HTTP_400_BAD_REQUEST)

        post_id = serializer.validated_data["postId"]
        session_id = serializer.validated_data["sessionId"]

        post = BlogPost.objects.filter(id=post_id).first()
        if post is None:
            return Response({"error": "Post not found"}, status=status.HTTP_404_NOT_FOUND)
        if not post.is_live:
            return Response({"error": "Post is not published"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            with transaction.atomic():
                BlogPostLike.objects.create(post=post, session_id=session_id)
                BlogPost.objects.filter(id=post.id).update(likes_count=F("likes_count") + 1)
        except IntegrityError:
            return Response({"success": True, "message": "Already liked"})

        post.refresh_from_db(fields=["likes_count"])
        return Response({"success": True, "likes_count": post.likes_count})


# ============= Admin Blog Views =============


class AdminBlogPostListCreateView(generics.ListCreateAPIView):
    """
    All posts including drafts
    GET/POST /api/blog/admin/posts/
    """

    serializer_class = BlogPostAdminSerializer
    permission_classes = [IsModerator]

    def get_queryset(self):
        queryset = BlogPost.objects.prefetch_related("tags").order_by("-created_at")
        post_status = self.request.query_params.get("status")
        if post_status:
            queryset = queryset.filter(status=post_status)
        return queryset

    def perform_create(self, serializer):
        post = serializer.save(author=self.request.user)
        logger.info(f"Blog post created: {post.slug} by {self.request.user.email}")


class AdminBlogPostDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/blog/admin/posts/<id>/
    """

    serializer_class = BlogPostAdminSerializer
    permission_classes = [IsModerator]
    queryset = BlogPost.objects.prefetch_related("tags")

    def perform_destroy(self, instance):
        logger.info(f"Blog post deleted: {instance.slug} by {self.request.user.email}")
        instance.delete()


class AdminBlogTagListCreateView(generics.ListCreateAPIView):
    """
    GET/POST /api/blog/admin/tags/
    """

    serializer_class = BlogTagSerializer
    permission_classes = [IsModerator]
    queryset = BlogTag.objects.order_by("name")
    pagination_class = None

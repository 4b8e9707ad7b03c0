from rest_framework import serializers

from .models import BlogPost, BlogTag


class BlogTagSerializer(serializers.ModelSerializer):
    post_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = BlogTag
        fields = ("id", "name", "slug", "color", "post_count")
        read_only_fields = ("id", "slug")


class BlogPostListSerializer(serializers.ModelSerializer):
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")
    author_name = serializers.CharField(read_only=True)

    class Meta:
        model = BlogPost
        fields = (
            "id",
            "title",
            "slug",
            "excerpt",
            "cover_image_url",
            "cover_alt",
            "author_name",
            "tags",
            "published_at",
            "is_pinned",
            "reading_time",
            "likes_count",
        )


class BlogPostDetailSerializer(BlogPostListSerializer):
    class Meta(BlogPostListSerializer.Meta):
        fields = BlogPostListSerializer.Meta.fields + (
            "content",
            "og_image_url",
            "canonical_url",
            "sources",
            "updated_at",
        )


class BlogPostAdminSerializer(serializers.ModelSerializer):
    """Create/update posts from the admin area, tags given by name"""

    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False, write_only=True)
    tag_names = serializers.SlugRelatedField(source="tags", many=True, read_only=True, slug_field="name")
    author_name = serializers.CharField(read_only=True)

    class Meta:
        model = BlogPost
        fields = (
            "id",
            "title",
            "slug",
            "excerpt",
            "content",
            "cover_image_url",
            "cover_alt",
            "og_image_url",
            "canonical_url",
            "sources",
            "status",
            "published_at",
            "is_pinned",
            "tags",
            "tag_names",
            "author_name",
            "reading_time",
            "likes_count",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "reading_time", "likes_count", "created_at", "updated_at")
        extra_kwargs = {"slug": {"required": False}}

    def validate_slug(self, value):
        if value and BlogPost.objects.filter(slug=value).exclude(pk=getattr(self.instance, "pk", None)).exists():
            raise serializers.ValidationError("A post with this slug already exists.")
        return value

    def _set_tags(self, post, names):
        tags = []
        for name in names:
            name = name.strip()
            if name:
                tag, _ = BlogTag.objects.get_or_create(name=name)
                tags.append(tag)
        post.tags.set(tags)

    def create(self, validated_data):
        names = validated_data.pop("tags", None)
        post = super().create(validated_data)
        if names is not None:
            self._set_tags(post, names)
        return post

    def update(self, instance, validated_data):
        names = validated_data.pop("tags", None)
        post = super().update(instance, validated_data)
        if names is not None:
            self._set_tags(post, names)
        return post


class BlogLikeSerializer(serializers.Serializer):
    postId = serializers.IntegerField(error_messages={"required": "Post ID is required"})
    sessionId = serializers.CharField(
        max_length=100, error_messages={"required": "Session ID is required for anonymous likes"}
    )

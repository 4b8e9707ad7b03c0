"""
Signal handlers for blog cache invalidation
"""
from django.core.cache import cache
from django.db.models.signals import m2m_changed, post_delete, post_save
from django.dispatch import receiver

from blog.models import BlogPost, BlogTag

BLOG_TAGS_CACHE_KEY = "blog:tags"


@receiver(post_save, sender=BlogPost)
@receiver(post_delete, sender=BlogPost)
@receiver(post_save, sender=BlogTag)
@receiver(post_delete, sender=BlogTag)
def invalidate_blog_tags_cache(sender, instance, **kwargs):
    """Tag counts change whenever a post or tag changes"""
    cache.delete(BLOG_TAGS_CACHE_KEY)


@receiver(m2m_changed, sender=BlogPost.tags.through)
def invalidate_blog_tags_cache_on_tagging(sender, instance, **kwargs):
    cache.delete(BLOG_TAGS_CACHE_KEY)

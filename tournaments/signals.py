"""
Signal handlers for tournament cache invalidation and attachment cleanup
"""
from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from tournaments.models import Tournament, TournamentAttachment

TOURNAMENT_CACHE_KEYS = ("tournaments:list:all", "tournaments:stats")


@receiver(post_save, sender=Tournament)
def invalidate_tournament_cache_on_save(sender, instance, **kwargs):
    """Clear tournament list and stats caches when a tournament is created, edited or approved"""
    cache.delete_many(TOURNAMENT_CACHE_KEYS)


@receiver(post_delete, sender=Tournament)
def invalidate_tournament_cache_on_delete(sender, instance, **kwargs):
    """Clear tournament list and stats caches when a tournament is deleted or rejected"""
    cache.delete_many(TOURNAMENT_CACHE_KEYS)


@receiver(post_delete, sender=TournamentAttachment)
def delete_attachment_file(sender, instance, **kwargs):
    """Remove the stored file once its row is gone, including cascades from a deleted tournament"""
    if instance.file:
        instance.file.delete(save=False)

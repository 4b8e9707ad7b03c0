"""
Celery tasks for tournaments app
"""
import logging
from datetime import timedelta

from django.utils import timezone

from celery import shared_task

from tournamentsuk.email_utils import send_review_request_email, send_tournament_created_email

from .models import Tournament

logger = logging.getLogger(__name__)

# Only ask about events that finished recently
REVIEW_LOOKBACK_DAYS = 7


def organizer_name(user):
    profile = getattr(user, "organizer_profile", None)
    if profile and profile.full_name:
        return profile.full_name
    return user.get_full_name() or user.email


@shared_task
def send_tournament_created_email_task(tournament_id):
    """Confirmation to the organizer after a listing is submitted"""
    try:
        tournament = Tournament.objects.select_related("organizer").get(id=tournament_id)
    except Tournament.DoesNotExist:
        logger.warning(f"Tournament {tournament_id} no longer exists, skipping confirmation email")
        return False

    if tournament.organizer is None:
        return False

    return send_tournament_created_email(
        user_email=tournament.organizer.email,
        user_name=organizer_name(tournament.organizer),
        tournament=tournament,
    )


@shared_task
def send_review_requests():
    """
    Ask organizers for feedback on tournaments that finished in the last week
    Runs daily via Celery Beat
    """
    today = timezone.localdate()
    candidates = (
        Tournament.objects.filter(
            is_published=True,
            review_email_sent_at__isnull=True,
            organizer__isnull=False,
            end_date__lt=today,
            end_date__gte=today - timedelta(days=REVIEW_LOOKBACK_DAYS),
        )
        .exclude(status="cancelled")
        .select_related("organizer")
    )

    sent = 0
    failed = 0
    for tournament in candidates:
        if send_review_request_email(tournament.organizer.email, organizer_name(tournament.organizer), tournament):
            tournament.review_email_sent_at = timezone.now()
            tournament.save(update_fields=["review_email_sent_at"])
            sent += 1
        else:
            failed += 1

    logger.info(f"Review requests: {sent} sent, {failed} failed")
    return {"sent": sent, "failed": failed, "timestamp": timezone.now().isoformat()}

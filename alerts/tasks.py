"""
Celery tasks for alerts app
"""
import logging
from datetime import timedelta

from django.utils import timezone

from celery import shared_task

from tournaments.filtering import matches_filters
from tournaments.filters import parse_filters
from tournaments.models import Tournament
from tournaments.transforms import transform_tournament, tournament_row
from tournamentsuk.email_utils import send_alert_digest_email, send_instant_alert_email

from .models import AlertDelivery, TournamentAlert

logger = logging.getLogger(__name__)

DIGEST_LOOKBACK = {
    "daily": timedelta(hours=24),
    "weekly": timedelta(days=7),
}

# A digest is not resent inside these windows even if the schedule fires twice
DIGEST_MIN_INTERVAL = {
    "daily": timedelta(hours=20),
    "weekly": timedelta(days=6),
}

MAX_DIGEST_CARDS = 10
MAX_INSTANT_PER_DAY = 3


def alert_matches(alert, tournament):
    return matches_filters(tournament, parse_filters(alert.filters or {}))


def recently_sent(alert, frequency, now):
    if alert.last_sent_at is None:
        return False
    return now - alert.last_sent_at < DIGEST_MIN_INTERVAL[frequency]


def active_alerts(frequency):
    return TournamentAlert.objects.filter(frequency=frequency, is_active=True, verified_at__isnull=False)


@shared_task
def send_alert_digests(frequency):
    """
    Email each verified alert the tournaments listed since the last run
    Runs daily and weekly via Celery Beat
    """
    if frequency not in DIGEST_LOOKBACK:
        logger.error(f"Unknown digest frequency: {frequency}")
        return {"error": "Valid frequency required (daily or weekly)"}

    now = timezone.now()
    alerts = list(active_alerts(frequency))
    logger.info(f"Starting {frequency} digest for {len(alerts)} alerts")
    if not alerts:
        return {"frequency": frequency, "alerts_processed": 0, "emails_sent": 0, "emails_failed": 0}

    recent = Tournament.objects.filter(is_published=True, created_at__gte=now - DIGEST_LOOKBACK[frequency]).order_by(
        "-created_at"
    )
    tournaments = [transform_tournament(tournament_row(t), now=now) for t in recent]
    if not tournaments:
        logger.info("No new tournaments found, skipping digest")
        return {"frequency": frequency, "alerts_processed": len(alerts), "emails_sent": 0, "emails_failed": 0}

    sent = 0
    failed = 0
    for alert in alerts:
        if recently_sent(alert, frequency, now):
            logger.debug(f"Skipping alert {alert.id}, sent too recently")
            continue

        matching = [t for t in tournaments if alert_matches(alert, t)]
        if not matching:
            continue

        if send_alert_digest_email(alert, matching[:MAX_DIGEST_CARDS], total=len(matching)):
            alert.last_sent_at = now
            alert.save(update_fields=["last_sent_at"])
            AlertDelivery.objects.create(alert=alert, item_count=len(matching), status="delivered")
            sent += 1
        else:
            AlertDelivery.objects.create(
                alert=alert, item_count=len(matching), status="failed", error="Email provider rejected the digest"
            )
            failed += 1

    logger.info(f"{frequency.capitalize()} digest complete: {sent} sent, {failed} failed")
    return {
        "frequency": frequency,
        "alerts_processed": len(alerts),
        "emails_sent": sent,
        "emails_failed": failed,
        "tournaments_found": len(tournaments),
    }


def instant_sends_today(email):
    today_start = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
    return AlertDelivery.objects.filter(alert__email=email, status="delivered", sent_at__gte=today_start).count()


@shared_task
def send_instant_alerts(tournament_id):
    """Notify instant subscribers as soon as a tournament is published"""
    try:
        tournament = Tournament.objects.get(id=tournament_id, is_published=True)
    except Tournament.DoesNotExist:
        logger.warning(f"Tournament {tournament_id} not found or unpublished, instant alerts skipped")
        return {"sent": 0, "skipped": 0, "failed": 0}

    view = transform_tournament(tournament_row(tournament))
    sent = 0
    skipped = 0
    failed = 0

    for alert in active_alerts("instant"):
        if not alert_matches(alert, view):
            continue

        if alert.deliveries.filter(tournament=tournament, status="delivered").exists():
            skipped += 1
            continue

        if instant_sends_today(alert.email) >= MAX_INSTANT_PER_DAY:
            AlertDelivery.objects.create(alert=alert, tournament=tournament, item_count=1, status="rate_limited")
            skipped += 1
            continue

        if send_instant_alert_email(alert, view):
            alert.last_sent_at = timezone.now()
            alert.save(update_fields=["last_sent_at"])
            AlertDelivery.objects.create(alert=alert, tournament=tournament, item_count=1, status="delivered")
            sent += 1
        else:
            AlertDelivery.objects.create(
                alert=alert,
                tournament=tournament,
                item_count=1,
                status="failed",
                error="Email provider rejected the alert",
            )
            failed += 1

    logger.info(f"Instant alerts for tournament {tournament_id}: {sent} sent, {skipped} skipped, {failed} failed")
    return {"sent": sent, "skipped": skipped, "failed": failed}

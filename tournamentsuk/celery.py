"""
Celery configuration for Football Tournaments UK
"""
import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tournamentsuk.settings")

app = Celery("tournamentsuk")

# All celery-related configuration keys use the `CELERY_` prefix in settings.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat schedule for periodic tasks
app.conf.beat_schedule = {
    "send-daily-alert-digests": {
        "task": "alerts.tasks.send_alert_digests",
        "schedule": crontab(hour=7, minute=0),
        "args": ("daily",),
    },
    "send-weekly-alert-digests": {
        "task": "alerts.tasks.send_alert_digests",
        "schedule": crontab(hour=7, minute=30, day_of_week="monday"),
        "args": ("weekly",),
    },
    "send-review-requests": {
        "task": "tournaments.tasks.send_review_requests",
        "schedule": crontab(hour=10, minute=0),
    },
}

app.conf.timezone = "Europe/London"

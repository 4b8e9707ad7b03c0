"""
Tournament lifecycle status, derived from dates
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

UPCOMING = "upcoming"
ONGOING = "ongoing"
TODAY = "today"
TOMORROW = "tomorrow"
REGISTRATION_OPEN = "registration_open"
REGISTRATION_CLOSES_SOON = "registration_closes_soon"
REGISTRATION_CLOSED = "registration_closed"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUS_CHOICES = (
    (UPCOMING, "Upcoming"),
    (ONGOING, "Ongoing"),
    (TODAY, "Today"),
    (TOMORROW, "Tomorrow"),
    (REGISTRATION_OPEN, "Registration open"),
    (REGISTRATION_CLOSES_SOON, "Registration closes soon"),
    (REGISTRATION_CLOSED, "Registration closed"),
    (COMPLETED, "Completed"),
    (CANCELLED, "Cancelled"),
)

CLOSES_SOON_WINDOW = timedelta(days=7)

DateLike = Union[datetime, date, str, None]


def _to_datetime(value: DateLike, end_of_day: bool = False) -> Optional[datetime]:
    """
    Coerce a date-ish value to an aware datetime in the current time zone.

    Plain dates cover the whole day, so they become 00:00 or 23:59:59.999999.
    Returns None when the value is missing or cannot be parsed.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        # Date-only strings must stay dates so they get widened to the whole day
        try:
            parsed = parse_date(value)
            if parsed is None:
                parsed = parse_datetime(value)
        except ValueError:
            return None
        if parsed is None:
            return None
        value = parsed

    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        return None

    if timezone.is_naive(result):
        result = timezone.make_aware(result)
    return result


def derive_status(start: DateLike, end: DateLike, registration_deadline: DateLike = None, now=None) -> str:
    """
    Classify a tournament by its dates. First match wins:

    completed (now past end), ongoing (now inside the event), today, tomorrow,
    then registration_closed / registration_closes_soon / registration_open when
    a deadline is known, otherwise upcoming. Never raises; unusable start or
    end dates give "upcoming".
    """
    now = _to_datetime(now or timezone.now())
    start_at = _to_datetime(start)
    end_at = _to_datetime(end, end_of_day=True)
    if now is None or start_at is None or end_at is None:
        return UPCOMING

    if now > end_at:
        return COMPLETED
    if start_at < now <= end_at:
        return ONGOING

    today = timezone.localdate(now)
    start_day = timezone.localdate(start_at)
    if start_day == today:
        return TODAY
    if start_day == today + timedelta(days=1):
        return TOMORROW

    deadline_at = _to_datetime(registration_deadline, end_of_day=True)
    if deadline_at is not None:
        if now > deadline_at:
            return REGISTRATION_CLOSED
        if deadline_at - now <= CLOSES_SOON_WINDOW:
            return REGISTRATION_CLOSES_SOON
        return REGISTRATION_OPEN

    return UPCOMING


def tournament_status(tournament, now=None) -> str:
    """
    Status for a Tournament instance or storage row (dict). A stored
    "cancelled" flag wins; any other stored value is ignored.
    """
    if isinstance(tournament, dict):
        get = tournament.get
    else:

        def get(name, default=None):
            return getattr(tournament, name, default)

    if get("status") == CANCELLED:
        return CANCELLED
    return derive_status(get("start_date"), get("end_date"), get("registration_deadline"), now=now)

"""
Celery tasks for accounts app
"""
import logging

from celery import shared_task

from accounts.models import User
from tournamentsuk.email_utils import send_welcome_email

logger = logging.getLogger(__name__)


@shared_task
def send_welcome_email_task(user_id):
    """Welcome email after organizer registration"""
    try:
        user = User.objects.select_related("organizer_profile").get(id=user_id)
    except User.DoesNotExist:
        logger.warning(f"User {user_id} not found, welcome email skipped")
        return False

    profile = getattr(user, "organizer_profile", None)
    name = profile.full_name if profile else user.email
    return send_welcome_email(user_email=user.email, user_name=name)

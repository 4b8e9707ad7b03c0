"""
Email utility functions for Football Tournaments UK
Renders templates under templates/emails/ and hands them to the configured backend (Resend in production)
"""

import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


class EmailService:
    """Service class for sending emails"""

    @staticmethod
    def send_email(
        subject: str,
        template_name: str,
        context: Dict,
        recipient_list: List[str],
        from_email: Optional[str] = None,
        reply_to: Optional[List[str]] = None,
    ) -> bool:
        """
        Send an email using a template

        Args:
            subject: Email subject
            template_name: Name of the template file (without .html)
            context: Context dictionary for template rendering
            recipient_list: List of recipient email addresses
            from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)
            reply_to: Optional Reply-To addresses

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        try:
            from_email = from_email or settings.DEFAULT_FROM_EMAIL
            context = {"site_url": settings.SITE_URL, "site_name": settings.SITE_NAME, **context}

            html_content = render_to_string(f"emails/{template_name}.html", context)
            text_content = strip_tags(html_content)

            email = EmailMultiAlternatives(
                subject=subject,
                body=text_content,
                from_email=from_email,
                to=recipient_list,
                reply_to=reply_to,
            )
            email.attach_alternative(html_content, "text/html")
            email.send(fail_silently=False)

            logger.info(f"Email sent successfully: {subject} to {recipient_list}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email: {subject} to {recipient_list}. Error: {str(e)}")
            return False


def tournament_url(tournament) -> str:
    return f"{settings.SITE_URL}/tournaments/{tournament.slug or tournament.id}"


# Account emails
def send_welcome_email(user_email: str, user_name: str) -> bool:
    """Send welcome email after organizer registration"""
    context = {
        "user_name": user_name,
        "dashboard_url": f"{settings.SITE_URL}/organizer",
        "help_url": f"{settings.SITE_URL}/support",
    }
    return EmailService.send_email(
        subject=f"Welcome to {settings.SITE_NAME}!",
        template_name="welcome",
        context=context,
        recipient_list=[user_email],
    )


# Tournament emails
def send_tournament_created_email(user_email: str, user_name: str, tournament) -> bool:
    """Confirm to the organizer that a listing was submitted for review"""
    context = {
        "user_name": user_name,
        "tournament": tournament,
        "tournament_url": tournament_url(tournament),
        "dashboard_url": f"{settings.SITE_URL}/organizer",
    }
    return EmailService.send_email(
        subject=f"Tournament submitted: {tournament.name}",
        template_name="tournament_created",
        context=context,
        recipient_list=[user_email],
    )


def send_review_request_email(user_email: str, user_name: str, tournament) -> bool:
    """Ask the organizer for feedback once their tournament has finished"""
    context = {
        "user_name": user_name,
        "tournament": tournament,
        "review_url": f"{tournament_url(tournament)}?review=1",
    }
    return EmailService.send_email(
        subject=f"How did {tournament.name} go?",
        template_name="review_request",
        context=context,
        recipient_list=[user_email],
    )


def send_contact_organizer_email(tournament, sender_name: str, sender_email: str, subject: str, message: str) -> bool:
    """Forward a visitor's enquiry to the tournament contact, replying straight to the visitor"""
    context = {
        "tournament": tournament,
        "tournament_url": tournament_url(tournament),
        "sender_name": sender_name,
        "sender_email": sender_email,
        "subject": subject,
        "message": message,
    }
    return EmailService.send_email(
        subject=f"Tournament Inquiry: {tournament.name} - {subject}",
        template_name="contact_organizer",
        context=context,
        recipient_list=[tournament.contact_email],
        reply_to=[sender_email],
    )


# Alert emails
def send_alert_verification_email(alert) -> bool:
    context = {
        "alert": alert,
        "verify_url": f"{settings.SITE_URL}/alerts/verify?token={alert.verification_token}",
        "manage_url": f"{settings.SITE_URL}/alerts/manage?token={alert.management_token}",
    }
    return EmailService.send_email(
        subject="Confirm your tournament alert",
        template_name="alert_verify",
        context=context,
        recipient_list=[alert.email],
        from_email=settings.ALERTS_FROM_EMAIL,
    )


def send_alert_digest_email(alert, tournaments: List[Dict], total: int) -> bool:
    """
    Digest of matching tournaments. `tournaments` are view models (already capped),
    `total` is the full match count used for the "and N more" line.
    """
    if total == 1:
        subject = f"New tournament: {tournaments[0]['name']}"
    else:
        subject = f"{total} new tournaments matching your interests"

    context = {
        "alert": alert,
        "tournaments": tournaments,
        "total": total,
        "remaining": max(total - len(tournaments), 0),
        "browse_url": f"{settings.SITE_URL}/tournaments",
        "manage_url": f"{settings.SITE_URL}/alerts/manage?token={alert.management_token}",
        "unsubscribe_url": f"{settings.SITE_URL}/api/alerts/unsubscribe/?token={alert.management_token}",
    }
    return EmailService.send_email(
        subject=subject,
        template_name="alert_digest",
        context=context,
        recipient_list=[alert.email],
        from_email=settings.ALERTS_FROM_EMAIL,
    )


def send_instant_alert_email(alert, tournament: Dict) -> bool:
    context = {
        "alert": alert,
        "tournament": tournament,
        "tournament_url": f"{settings.SITE_URL}/tournaments/{tournament.get('slug') or tournament['id']}",
        "manage_url": f"{settings.SITE_URL}/alerts/manage?token={alert.management_token}",
        "unsubscribe_url": f"{settings.SITE_URL}/api/alerts/unsubscribe/?token={alert.management_token}",
    }
    return EmailService.send_email(
        subject=f"New tournament: {tournament['name']}",
        template_name="alert_instant",
        context=context,
        recipient_list=[alert.email],
        from_email=settings.ALERTS_FROM_EMAIL,
    )


# Support emails
def send_support_request_email(ticket) -> bool:
    """Copy a new ticket to the support inbox, replying straight to the user"""
    return EmailService.send_email(
        subject=f"[Support] {ticket.category}: {ticket.subject}",
        template_name="support_request",
        context={"ticket": ticket},
        recipient_list=[settings.SUPPORT_EMAIL],
        reply_to=[ticket.email],
    )


def send_support_confirmation_email(ticket) -> bool:
    return EmailService.send_email(
        subject=f"Support Request Confirmed - Ticket #{ticket.id}",
        template_name="support_confirmation",
        context={"ticket": ticket},
        recipient_list=[ticket.email],
    )


def send_feedback_email(name: str, email: str, topic_label: str, message: str) -> bool:
    context = {"name": name, "email": email, "topic_label": topic_label, "message": message}
    return EmailService.send_email(
        subject=f"User Feedback: {topic_label} - from {name}",
        template_name="feedback",
        context=context,
        recipient_list=[settings.FEEDBACK_EMAIL],
        reply_to=[email],
    )

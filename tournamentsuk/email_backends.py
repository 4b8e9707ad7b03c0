"""
Django email backend that delivers through the Resend HTTP API
"""
import logging

from django.conf import settings
from django.core.mail.backends.base import BaseEmailBackend

import requests

from tournamentsuk.retry import RetryPolicy, exponential_backoff

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the provider rejects a message or stays unreachable"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class TransientEmailError(EmailDeliveryError):
    """Provider error worth retrying (timeouts, 429, 5xx)"""


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, (TransientEmailError, requests.ConnectionError, requests.Timeout))


class ResendEmailBackend(BaseEmailBackend):
    """
    POST /emails with {from, to, subject, html, reply_to}.

    Each message goes through the shared retry policy; the provider's message
    id is stored on the message as `provider_message_id`.
    """

    def __init__(self, fail_silently=False, api_key=None, api_url=None, retry_policy=None, **kwargs):
        super().__init__(fail_silently=fail_silently, **kwargs)
        self.api_key = api_key or settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.timeout = getattr(settings, "EMAIL_TIMEOUT", 10)
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=settings.EMAIL_MAX_ATTEMPTS,
            backoff=exponential_backoff(settings.EMAIL_RETRY_BASE_DELAY),
            retryable=is_transient,
            name="Resend email",
        )
        self.session = None

    def open(self):
        if self.session is not None:
            return False
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }
        )
        return True

    def close(self):
        if self.session is not None:
            self.session.close()
            self.session = None

    def send_messages(self, email_messages):
        if not email_messages:
            return 0
        if not self.api_key:
            if not self.fail_silently:
                raise EmailDeliveryError("RESEND_API_KEY is not configured")
            logger.error("RESEND_API_KEY is not configured, dropping email")
            return 0

        new_session = self.open()
        sent = 0
        try:
            for message in email_messages:
                try:
                    message.provider_message_id = self.retry_policy.call(self._post, self.build_payload(message))
                    sent += 1
                except Exception as e:
                    logger.error(f"Resend delivery failed for {message.to}: {e}")
                    if not self.fail_silently:
                        raise
        finally:
            if new_session:
                self.close()
        return sent

    def build_payload(self, message):
        html = message.body
        for content, mimetype in getattr(message, "alternatives", []) or []:
            if mimetype == "text/html":
                html = content
                break

        payload = {
            "from": message.from_email or settings.DEFAULT_FROM_EMAIL,
            "to": list(message.to),
            "subject": message.subject,
            "html": html,
        }
        if message.cc:
            payload["cc"] = list(message.cc)
        if message.bcc:
            payload["bcc"] = list(message.bcc)
        if message.reply_to:
            payload["reply_to"] = list(message.reply_to)
        if message.body and html is not message.body:
            payload["text"] = message.body
        return payload

    def _post(self, payload):
        response = self.session.post(self.api_url, json=payload, timeout=self.timeout)
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientEmailError(
                f"Resend returned {response.status_code}: {response.text}", status_code=response.status_code
            )
        if response.status_code >= 400:
            raise EmailDeliveryError(
                f"Resend returned {response.status_code}: {response.text}", status_code=response.status_code
            )
        return response.json().get("id")

"""
Session lifetime rules for organizer logins
"""
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.utils import timezone


@dataclass(frozen=True)
class SessionPolicy:
    """
    A normal login lasts SESSION_TIMEOUT_HOURS, "remember me" lasts
    SESSION_REMEMBER_ME_DAYS. Clients warn SESSION_WARNING_MINUTES before expiry.
    """

    remember_me: bool
    timeout: timedelta
    warning: timedelta

    @classmethod
    def for_login(cls, remember_me=False):
        if remember_me:
            timeout = timedelta(days=settings.SESSION_REMEMBER_ME_DAYS)
        else:
            timeout = timedelta(hours=settings.SESSION_TIMEOUT_HOURS)
        warning = timedelta(minutes=settings.SESSION_WARNING_MINUTES)
        return cls(remember_me=bool(remember_me), timeout=timeout, warning=warning)

    def expires_at(self, issued_at=None):
        return (issued_at or timezone.now()) + self.timeout

    def warning_at(self, issued_at=None):
        return self.expires_at(issued_at) - self.warning

    def should_warn(self, issued_at, now=None):
        now = now or timezone.now()
        return self.warning_at(issued_at) <= now < self.expires_at(issued_at)

    def apply(self, refresh_token):
        """Stretch or shorten a simplejwt refresh token to this policy"""
        refresh_token.set_exp(lifetime=self.timeout)
        return refresh_token

    def as_dict(self, issued_at=None):
        issued_at = issued_at or timezone.now()
        return {
            "rememberMe": self.remember_me,
            "timeoutSeconds": int(self.timeout.total_seconds()),
            "warningSeconds": int(self.warning.total_seconds()),
            "expiresAt": self.expires_at(issued_at).isoformat(),
            "warningAt": self.warning_at(issued_at).isoformat(),
        }

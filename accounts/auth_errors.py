"""
Map authentication errors to safe, user-facing messages.

Anything not recognised gets the generic message so that responses never
reveal whether an account exists; the real error is only logged.
"""
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Authentication failed. Please check your credentials and try again."


@dataclass(frozen=True)
class AuthError:
    message: str
    code: str = "unknown_error"

    def as_dict(self):
        return {"error": self.message, "code": self.code}


INVALID_CREDENTIALS = AuthError(
    "Invalid email or password. Please check your credentials and try again.", "invalid_credentials"
)
RATE_LIMITED = AuthError("Too many requests. Please wait before trying again.", "rate_limited")
WEAK_PASSWORD = AuthError("Password must be at least 8 characters long.", "weak_password")
USER_EXISTS = AuthError("An account with this email already exists. Try signing in instead.", "user_exists")
INVALID_EMAIL = AuthError("Please enter a valid email address.", "invalid_email")
SIGNUP_DISABLED = AuthError("Account registration is currently disabled. Please contact support.", "signup_disabled")
INVALID_LINK = AuthError(
    "The verification link is invalid or has expired. Please request a new one.", "invalid_link"
)
EXPIRED_TOKEN = AuthError(
    "The verification token has expired. Please request a new verification email.", "expired_token"
)

KNOWN_ERRORS = {
    "invalid login credentials": INVALID_CREDENTIALS,
    "email not confirmed": INVALID_CREDENTIALS,
    "user not found": INVALID_CREDENTIALS,
    "invalid email or password": INVALID_CREDENTIALS,
    "user account is disabled": INVALID_CREDENTIALS,
    "email rate limit exceeded": RATE_LIMITED,
    "too many requests": RATE_LIMITED,
    "password should be at least 6 characters": WEAK_PASSWORD,
    "user already registered": USER_EXISTS,
    "user with this email already exists.": USER_EXISTS,
    "invalid email": INVALID_EMAIL,
    "enter a valid email address.": INVALID_EMAIL,
    "signup is disabled": SIGNUP_DISABLED,
    "email link is invalid or has expired": INVALID_LINK,
    "token has expired or is invalid": EXPIRED_TOKEN,
    "token is invalid or expired": EXPIRED_TOKEN,
}

# Django password validator messages start with these
WEAK_PASSWORD_PREFIXES = (
    "this password is too short",
    "this password is too common",
    "this password is entirely numeric",
)


def sanitize_auth_error(error) -> AuthError:
    if not error:
        return AuthError(DEFAULT_MESSAGE)

    message = str(getattr(error, "message", None) or error).strip()
    key = message.lower()

    known = KNOWN_ERRORS.get(key)
    if known:
        return known
    if key.startswith(WEAK_PASSWORD_PREFIXES):
        return WEAK_PASSWORD

    logger.error(f"Auth error (sanitized): {message}")
    return AuthError(DEFAULT_MESSAGE)

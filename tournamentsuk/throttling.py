"""
DRF throttles for the public write endpoints
"""
import re

from rest_framework.throttling import SimpleRateThrottle

PERIOD_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class WindowRateThrottle(SimpleRateThrottle):
    """
    Accepts a multiple of the period in the rate, e.g. "5/15m" for five
    requests every fifteen minutes. Plain DRF rates such as "120/min" still work.
    """

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        match = re.match(r"(\d*)([smhd])", period)
        return int(num), int(match.group(1) or 1) * PERIOD_SECONDS[match.group(2)]


class ClientIPThrottle(WindowRateThrottle):
    """Keyed on the client IP whether or not the caller is signed in"""

    def get_cache_key(self, request, view):
        return self.cache_format % {"scope": self.scope, "ident": self.get_ident(request)}


class ContactOrganizerThrottle(ClientIPThrottle):
    scope = "contact_organizer"


class AnalyticsEventThrottle(ClientIPThrottle):
    scope = "analytics_events"


class SupportRequestThrottle(ClientIPThrottle):
    scope = "support_requests"


class BlogLikeThrottle(WindowRateThrottle):
    """Keyed on the anonymous sessionId sent with the like"""

    scope = "blog_like"

    def get_cache_key(self, request, view):
        session_id = request.data.get("sessionId") if hasattr(request.data, "get") else None
        if not session_id:
            # The serializer rejects the request
            return None
        return self.cache_format % {"scope": self.scope, "ident": session_id}

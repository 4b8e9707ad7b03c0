"""
Middleware to add cache control headers to responses
"""

PUBLIC_XML_PREFIXES = ("/rss/", "/blog/feed/", "/sitemap")


class CacheControlMiddleware:
    """
    API responses are never cached by browsers so moderation changes show up
    immediately. Feeds and sitemaps are public and may be cached for an hour.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if request.path.startswith("/api/"):
            response["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0"
            response["Pragma"] = "no-cache"
            response["Expires"] = "0"
        elif request.path.startswith(PUBLIC_XML_PREFIXES) and response.status_code == 200:
            response["Cache-Control"] = "public, max-age=3600"

        return response

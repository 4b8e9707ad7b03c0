"""
Venue and postcode geocoding through Mapbox (geopy)
"""
import hashlib
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings
from django.core.cache import cache

from geopy.exc import GeocoderRateLimited, GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import MapBox

from tournamentsuk.retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "United Kingdom"
NOT_FOUND_MESSAGE = "Unable to find the location. Please check the venue address, postcode, and region are correct."
UNAVAILABLE_MESSAGE = "Geocoding service unavailable"

# Cached "no result" marker, distinct from a cache miss
NO_RESULT = "none"


class GeocodingError(Exception):
    """No query in the fallback chain produced a result"""


class GeocodingUnavailable(GeocodingError):
    """Geocoder is not configured"""


@dataclass
class GeocodeResult:
    latitude: float
    longitude: float
    query: str
    place_name: str = ""

    def as_dict(self):
        return {"latitude": self.latitude, "longitude": self.longitude}


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, (GeocoderTimedOut, GeocoderUnavailable, GeocoderRateLimited))


def build_queries(location_name, postcode=None, region=None, country=None) -> List[str]:
    """
    Address strings to try, most specific first: full address, venue + postcode,
    venue + region, venue alone. Parts that are blank are dropped and duplicate
    queries are only tried once.
    """
    location_name = (location_name or "").strip()
    postcode = (postcode or "").strip()
    region = (region or "").strip()
    country = (country or "").strip() or DEFAULT_COUNTRY
    if not location_name and not postcode:
        return []

    candidates = [
        [location_name, postcode, region, country],
        [location_name, postcode, country],
        [location_name, region, country],
        [location_name, country],
    ]

    queries = []
    for parts in candidates:
        parts = [part for part in parts if part]
        # Country on its own is not an address
        if len(parts) < 2:
            continue
        query = ", ".join(parts)
        if query not in queries:
            queries.append(query)
    return queries


class GeocodingService:
    """Walks the fallback chain and returns the first hit; transient provider errors are retried"""

    def __init__(self, geocoder=None, retry_policy: Optional[RetryPolicy] = None, use_cache: bool = True):
        self._geocoder = geocoder
        self.retry_policy = retry_policy or RetryPolicy(max_attempts=3, retryable=is_transient, name="Mapbox geocode")
        self.use_cache = use_cache

    @property
    def geocoder(self):
        if self._geocoder is None:
            token = settings.MAPBOX_ACCESS_TOKEN
            if not token:
                logger.error("MAPBOX_ACCESS_TOKEN not configured")
                raise GeocodingUnavailable(UNAVAILABLE_MESSAGE)
            self._geocoder = MapBox(api_key=token, timeout=settings.GEOCODING_TIMEOUT)
        return self._geocoder

    def check_configured(self):
        """Raises GeocodingUnavailable when no token is configured"""
        return self.geocoder is not None

    def _cache_key(self, query: str) -> str:
        digest = hashlib.sha1(query.lower().encode("utf-8")).hexdigest()
        return f"geocode:{digest}"

    def lookup(self, query: str) -> Optional[GeocodeResult]:
        """Single query; None when the provider has no match"""
        if self.use_cache:
            cached = cache.get(self._cache_key(query))
            if cached == NO_RESULT:
                return None
            if cached:
                return GeocodeResult(**cached)

        location = self.retry_policy.call(
            self.geocoder.geocode, query, exactly_one=True, country=settings.GEOCODING_COUNTRY
        )
        result = None
        if location is not None:
            result = GeocodeResult(
                latitude=location.latitude,
                longitude=location.longitude,
                query=query,
                place_name=getattr(location, "address", "") or "",
            )

        if self.use_cache:
            value = result.__dict__ if result else NO_RESULT
            cache.set(self._cache_key(query), value, timeout=settings.GEOCODING_CACHE_TTL)
        return result

    def geocode_queries(self, queries: List[str]) -> GeocodeResult:
        if not queries:
            raise GeocodingError(NOT_FOUND_MESSAGE)

        self.check_configured()
        for query in queries:
            logger.debug(f"Trying geocoding query: {query!r}")
            try:
                result = self.lookup(query)
            except GeocoderServiceError as e:
                logger.warning(f"Geocoding error for {query!r}: {e}")
                continue
            if result is not None:
                logger.info(f"Geocoded {query!r} to {result.latitude}, {result.longitude}")
                return result
            logger.debug(f"No results for {query!r}")

        logger.error(f"All geocoding attempts failed: {queries}")
        raise GeocodingError(NOT_FOUND_MESSAGE)

    def geocode_address(self, location_name, postcode=None, region=None, country=None) -> GeocodeResult:
        return self.geocode_queries(build_queries(location_name, postcode, region, country))

    def geocode_postcode(self, postcode: str) -> GeocodeResult:
        postcode = (postcode or "").strip()
        if not postcode:
            raise GeocodingError(NOT_FOUND_MESSAGE)
        return self.geocode_queries([f"{postcode}, {DEFAULT_COUNTRY}"])


def geocode_tournament(tournament, service: Optional[GeocodingService] = None) -> GeocodeResult:
    """Geocode a tournament's venue and store the coordinates on it (not saved)"""
    service = service or GeocodingService()
    result = service.geocode_address(
        tournament.location_name, tournament.postcode, tournament.region, tournament.country
    )
    tournament.latitude = result.latitude
    tournament.longitude = result.longitude
    return result

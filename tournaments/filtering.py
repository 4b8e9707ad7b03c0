"""
Apply TournamentFilters to tournament view models
"""
import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from django.utils import timezone

from .filters import TournamentFilters

EARTH_RADIUS_MILES = 3959
DEFAULT_RADIUS_MILES = 10

# Country slugs used by region pages, expanded to the region names stored on listings
REGION_GROUPS = {
    "england": [
        "England",
        "West Midlands",
        "South West England",
        "North West England",
        "Yorkshire",
        "East England",
        "South England",
        "North East England",
        "East Midlands",
        "London",
        "South East England",
    ],
    "scotland": ["Scotland"],
    "wales": ["Wales"],
    "northern-ireland": ["Northern Ireland"],
}


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_to(tournament: Dict, latitude: float, longitude: float) -> Optional[float]:
    coordinates = tournament.get("location", {}).get("coordinates")
    if not coordinates:
        return None
    lng, lat = coordinates
    return haversine_miles(latitude, longitude, lat, lng)


def expand_regions(regions: Iterable[str]) -> List[str]:
    names = []
    for region in regions:
        names.extend(REGION_GROUPS.get(region.lower(), [region]))
    return [name.lower() for name in names]


def matches_place(location: Dict, text: str) -> bool:
    """
    Fallback for a location filter that could not be geocoded: the place or
    postcode text must appear in the venue name, region or postcode.
    """
    query = " ".join(text.lower().split())
    if not query:
        return True
    candidates = [location.get("name"), location.get("region"), location.get("postcode")]
    return any(query in " ".join(value.lower().split()) for value in candidates if value)


def _formats(tournament: Dict) -> List[str]:
    # Multi-format listings store e.g. "5v5, 7v7"
    return [value.strip() for value in (tournament.get("format") or "").split(",") if value.strip()]


def matches_filters(tournament: Dict, filters: TournamentFilters) -> bool:
    """True when a tournament view model passes every active filter"""
    location = tournament.get("location", {})
    dates = tournament.get("dates", {})

    if filters.search and filters.search.strip():
        query = filters.search.strip().lower()
        haystack = [
            tournament.get("name") or "",
            tournament.get("description") or "",
            location.get("name") or "",
            location.get("region") or "",
        ]
        if not any(query in value.lower() for value in haystack):
            return False

    if filters.date_range and (filters.date_range.start or filters.date_range.end):
        start = dates.get("start")
        end = dates.get("end") or start
        if start is None:
            return False
        range_start, range_end = filters.date_range.start, filters.date_range.end
        if range_start and range_end:
            if not (start <= range_end and end >= range_start):
                return False
        elif range_start and start < range_start:
            return False
        elif range_end and start > range_end:
            return False

    if filters.location and filters.location.has_coordinates:
        distance = distance_to(tournament, filters.location.latitude, filters.location.longitude)
        if distance is None or distance > (filters.location.radius or DEFAULT_RADIUS_MILES):
            return False
    elif filters.location and filters.location.postcode:
        if not matches_place(location, filters.location.postcode):
            return False

    price_range = filters.price_range
    if price_range and (price_range.min is not None or price_range.max is not None):
        price = (tournament.get("cost") or {}).get("amount") or 0
        if not (price_range.include_free and price == 0):
            if price_range.min is not None and price < price_range.min:
                return False
            if price_range.max is not None and price > price_range.max:
                return False

    if filters.format and not set(filters.format) & set(_formats(tournament)):
        return False
    if filters.age_groups and not set(filters.age_groups) & set(tournament.get("ageGroups") or []):
        return False
    if filters.team_types and not set(filters.team_types) & set(tournament.get("teamTypes") or []):
        return False
    if filters.type and tournament.get("type") not in filters.type:
        return False

    if filters.regions:
        region = (location.get("region") or "").lower()
        if region not in expand_regions(filters.regions):
            return False

    if filters.status and tournament.get("status") not in filters.status:
        return False

    return True


def apply_filters(tournaments: Iterable[Dict], filters: TournamentFilters) -> List[Dict]:
    """
    Filter and order view models: nearest first when the filter carries
    coordinates, otherwise soonest start first.
    """
    matched = [t for t in tournaments if matches_filters(t, filters)]

    if filters.location and filters.location.has_coordinates:
        lat, lng = filters.location.latitude, filters.location.longitude

        def sort_key(t):
            distance = distance_to(t, lat, lng)
            return distance if distance is not None else math.inf

    else:

        def sort_key(t):
            return t.get("dates", {}).get("start") or date.max

    return sorted(matched, key=sort_key)


def split_upcoming_past(tournaments: Iterable[Dict], today: Optional[date] = None) -> Tuple[List[Dict], List[Dict]]:
    """Split by start date against today; order is preserved"""
    today = today or timezone.localdate()
    upcoming, past = [], []
    for tournament in tournaments:
        start = tournament.get("dates", {}).get("start")
        if start is not None and start < today:
            past.append(tournament)
        else:
            upcoming.append(tournament)
    return upcoming, past

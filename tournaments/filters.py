"""
Tournament filters and their query-string form.

parse_filters() reads request/query parameters (accepting legacy aliases) and
serialize_filters() writes the canonical parameter names back. Alert
subscriptions store the serialized form.
"""
import math
from dataclasses import dataclass, fields
from datetime import date
from typing import Dict, List, Mapping, Optional

from django.utils.dateparse import parse_date

# Canonical name first, then accepted aliases in order of preference
PARAM_ALIASES = {
    "search": ("search", "q"),
    "location": ("location", "postcode"),
    "radius": ("radius",),
    "lat": ("lat",),
    "lng": ("lng",),
    "startDate": ("startDate",),
    "endDate": ("endDate",),
    "minPrice": ("minPrice",),
    "maxPrice": ("maxPrice",),
    "includeFree": ("includeFree",),
    "format": ("format", "formats"),
    "ageGroups": ("ageGroups", "ages"),
    "teamTypes": ("teamTypes", "teams"),
    "type": ("type",),
    "regions": ("regions", "region"),
    "status": ("status",),
}

# Written next to the canonical name for old deep links
LEGACY_ALIASES = {"regions": "region"}

ARRAY_PARAMS = {
    "format": "format",
    "ageGroups": "age_groups",
    "teamTypes": "team_types",
    "type": "type",
    "regions": "regions",
    "status": "status",
}


@dataclass
class LocationFilter:
    postcode: Optional[str] = None
    radius: Optional[int] = None  # miles
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return (
            self.latitude is not None
            and self.longitude is not None
            and math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
        )


@dataclass
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass
class PriceRange:
    min: Optional[int] = None
    max: Optional[int] = None
    include_free: bool = False


@dataclass
class TournamentFilters:
    search: Optional[str] = None
    location: Optional[LocationFilter] = None
    date_range: Optional[DateRange] = None
    price_range: Optional[PriceRange] = None
    format: Optional[List[str]] = None
    age_groups: Optional[List[str]] = None
    team_types: Optional[List[str]] = None
    type: Optional[List[str]] = None
    regions: Optional[List[str]] = None
    status: Optional[List[str]] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def _get(params: Mapping, canonical: str) -> Optional[str]:
    for name in PARAM_ALIASES[canonical]:
        value = params.get(name)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # "nan", "inf" and "1e999" all parse as floats but are never usable filter values
    return number if math.isfinite(number) else None


def _parse_int(value: Optional[str]) -> Optional[int]:
    number = _parse_float(value)
    return None if number is None else int(number)


def _parse_day(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        # Tolerate full ISO timestamps, only the day matters
        return parse_date(value[:10])
    except ValueError:
        return None


def _split(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def parse_filters(params: Mapping) -> TournamentFilters:
    """Build filters from query parameters. Missing or malformed values are left as None."""
    filters = TournamentFilters()

    filters.search = _get(params, "search")

    postcode = _get(params, "location")
    latitude = _parse_float(_get(params, "lat"))
    longitude = _parse_float(_get(params, "lng"))
    if latitude is None or longitude is None:
        latitude = longitude = None
    if postcode or latitude is not None:
        filters.location = LocationFilter(
            postcode=postcode,
            radius=_parse_int(_get(params, "radius")),
            latitude=latitude,
            longitude=longitude,
        )

    start = _parse_day(_get(params, "startDate"))
    end = _parse_day(_get(params, "endDate"))
    if start or end:
        filters.date_range = DateRange(start=start, end=end)

    min_price = _parse_int(_get(params, "minPrice"))
    max_price = _parse_int(_get(params, "maxPrice"))
    include_free = _get(params, "includeFree") == "true"
    if min_price is not None or max_price is not None or include_free:
        filters.price_range = PriceRange(min=min_price, max=max_price, include_free=include_free)

    for param, attr in ARRAY_PARAMS.items():
        setattr(filters, attr, _split(_get(params, param)))

    return filters


def serialize_filters(filters: TournamentFilters) -> Dict[str, str]:
    """Canonical query parameters for `filters`, plus legacy aliases where old links expect them."""
    params = {}

    # Canonical search text is trimmed, as parse_filters trims it
    search = (filters.search or "").strip()
    if search:
        params["search"] = search

    location = filters.location
    if location:
        if location.postcode:
            params["location"] = location.postcode
        if location.has_coordinates:
            params["lat"] = repr(float(location.latitude))
            params["lng"] = repr(float(location.longitude))
        if location.radius is not None and (location.postcode or location.has_coordinates):
            params["radius"] = str(location.radius)

    if filters.date_range:
        if filters.date_range.start:
            params["startDate"] = filters.date_range.start.isoformat()
        if filters.date_range.end:
            params["endDate"] = filters.date_range.end.isoformat()

    if filters.price_range:
        if filters.price_range.min is not None:
            params["minPrice"] = str(filters.price_range.min)
        if filters.price_range.max is not None:
            params["maxPrice"] = str(filters.price_range.max)
        if filters.price_range.include_free:
            params["includeFree"] = "true"

    for param, attr in ARRAY_PARAMS.items():
        values = getattr(filters, attr)
        if values:
            params[param] = ",".join(values)
            legacy = LEGACY_ALIASES.get(param)
            if legacy:
                params[legacy] = params[param]

    return params

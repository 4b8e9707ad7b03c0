"""
Row -> view model mapping for tournaments.

Rows are the storage shape (snake_case keys, nullable values, dates possibly as
ISO strings). View models are camelCase dicts with date objects, and keys whose
value would be null are left out.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_date, parse_datetime

from .status import tournament_status

ROW_FIELDS = (
    "id",
    "slug",
    "name",
    "description",
    "location_name",
    "postcode",
    "region",
    "country",
    "latitude",
    "longitude",
    "start_date",
    "end_date",
    "registration_deadline",
    "format",
    "age_groups",
    "team_types",
    "type",
    "status",
    "max_teams",
    "registered_teams",
    "cost_amount",
    "cost_currency",
    "contact_name",
    "contact_email",
    "contact_phone",
    "website",
    "features",
    "organizer_id",
    "is_published",
    "created_at",
    "updated_at",
)

# Extended listing details, copied through as camelCase when present
DETAIL_FIELDS = {
    "extended_description": "extendedDescription",
    "venue_details": "venueDetails",
    "rules_and_regulations": "rulesAndRegulations",
    "schedule_details": "scheduleDetails",
    "what_to_bring": "whatToBring",
    "accommodation_info": "accommodationInfo",
    "prize_information": "prizeInformation",
    "sponsor_info": "sponsorInfo",
    "additional_notes": "additionalNotes",
}


def tournament_row(tournament) -> Dict[str, Any]:
    """Storage row for a Tournament instance, as the database would return it"""
    row = {name: getattr(tournament, name, None) for name in ROW_FIELDS}
    for name in DETAIL_FIELDS:
        row[name] = getattr(tournament, name, None)
    banner = getattr(tournament, "banner_image", None)
    row["banner_url"] = banner.url if banner else None
    return row


def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_date(value) -> Optional[date]:
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_date(str(value)[:10])
    except ValueError:
        return None


def _as_datetime(value) -> Optional[datetime]:
    value = _blank_to_none(value)
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parse_datetime(str(value))
    except ValueError:
        return None


def _as_number(value):
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def transform_tournament(row: Dict[str, Any], now=None) -> Dict[str, Any]:
    """
    Map one tournament row to its view model. The status is always derived
    from the row's dates (a stored "cancelled" still wins).
    """
    latitude = _as_number(row.get("latitude"))
    longitude = _as_number(row.get("longitude"))
    coordinates = [longitude, latitude] if latitude is not None and longitude is not None else None

    cost_amount = _as_number(row.get("cost_amount"))
    cost = None
    if cost_amount is not None:
        cost = {"amount": cost_amount, "currency": _blank_to_none(row.get("cost_currency")) or "GBP"}

    dates = {
        "start": _as_date(row.get("start_date")),
        "end": _as_date(row.get("end_date")),
        "registrationDeadline": _as_date(row.get("registration_deadline")),
    }

    view = {
        "id": row.get("id"),
        "slug": _blank_to_none(row.get("slug")),
        "name": row.get("name"),
        "description": _blank_to_none(row.get("description")),
        "location": _compact(
            {
                "name": _blank_to_none(row.get("location_name")),
                "coordinates": coordinates,
                "postcode": _blank_to_none(row.get("postcode")),
                "region": _blank_to_none(row.get("region")),
                "country": _blank_to_none(row.get("country")),
            }
        ),
        "dates": _compact(dates),
        "format": _blank_to_none(row.get("format")),
        "ageGroups": row.get("age_groups") or [],
        "teamTypes": row.get("team_types") or [],
        "type": _blank_to_none(row.get("type")),
        "status": tournament_status(
            {
                "status": row.get("status"),
                "start_date": dates["start"],
                "end_date": dates["end"],
                "registration_deadline": dates["registrationDeadline"],
            },
            now=now,
        ),
        "maxTeams": row.get("max_teams") or None,
        "registeredTeams": row.get("registered_teams") or None,
        "cost": cost,
        "contact": _compact(
            {
                "name": _blank_to_none(row.get("contact_name")),
                "email": _blank_to_none(row.get("contact_email")),
                "phone": _blank_to_none(row.get("contact_phone")),
            }
        ),
        "website": _blank_to_none(row.get("website")),
        "features": row.get("features") or None,
        "organizerId": row.get("organizer_id"),
        "bannerUrl": _blank_to_none(row.get("banner_url")),
        "isPublished": row.get("is_published"),
        "createdAt": _as_datetime(row.get("created_at")),
        "updatedAt": _as_datetime(row.get("updated_at")),
    }
    for column, key in DETAIL_FIELDS.items():
        view[key] = _blank_to_none(row.get(column))

    return _compact(view)

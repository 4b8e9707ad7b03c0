import logging

from django.core.cache import cache
from django.db.models import Q
from django.shortcuts import get_object_or_404

from rest_framework import generics, parsers, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tournamentsuk.email_utils import send_contact_organizer_email
from tournamentsuk.throttling import ContactOrganizerThrottle

from .fetching import RowFetcher
from .filtering import apply_filters, split_upcoming_past
from .filters import LocationFilter, parse_filters, serialize_filters
from .geocoding import GeocodingError, GeocodingService, GeocodingUnavailable, geocode_tournament
from .models import Tournament, TournamentAttachment
from .serializers import (
    ContactOrganizerSerializer,
    GeocodeRequestSerializer,
    TournamentAttachmentSerializer,
    TournamentListSerializer,
    TournamentSerializer,
)
from .stats import region_stats, site_totals
from .tasks import send_tournament_created_email_task
from .transforms import transform_tournament, tournament_row

logger = logging.getLogger(__name__)

TOURNAMENT_LIST_CACHE_KEY = "tournaments:list:all"
TOURNAMENT_STATS_CACHE_KEY = "tournaments:stats"
ADDRESS_FIELDS = ("location_name", "postcode", "region", "country")


class IsOrganizerUser(permissions.BasePermission):
    """Permission class for organizers (admins may act as organizers too)"""

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.user_type in ("organizer", "admin")


class IsModerator(permissions.BasePermission):
    """Permission class for admins moderating listings"""

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.is_moderator


def queue_instant_alerts(tournament_id):
    from alerts.tasks import send_instant_alerts

    send_instant_alerts.delay(tournament_id)


def visible_tournaments(user):
    """Published listings, plus the user's own drafts (all listings for admins)"""
    if user.is_authenticated and user.is_moderator:
        return Tournament.objects.all()
    if user.is_authenticated:
        return Tournament.objects.filter(Q(is_published=True) | Q(organizer=user))
    return Tournament.objects.filter(is_published=True)


def managed_tournaments(user):
    if user.is_moderator:
        return Tournament.objects.all()
    # Organizers can only manage their own tournaments
    return Tournament.objects.filter(organizer=user)


# ============= Public Tournament Views =============


class TournamentListView(generics.ListAPIView):
    """
    List published tournaments, filtered by query params
    GET /api/tournaments/?search=&location=&radius=&startDate=&format=...
    Cache: Only when no filters applied
    """

    serializer_class = TournamentListSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None

    def get_queryset(self):
        return Tournament.objects.filter(is_published=True).order_by("start_date", "name")

    def resolve_location(self, filters):
        """Postcode searches need coordinates before distances can be applied"""
        location = filters.location
        if not location or location.has_coordinates or not location.postcode:
            return filters
        try:
            result = GeocodingService().geocode_postcode(location.postcode)
        except GeocodingError as e:
            logger.warning(f"Could not geocode postcode filter {location.postcode!r}: {e}")
            return filters
        filters.location = LocationFilter(
            postcode=location.postcode,
            radius=location.radius,
            latitude=result.latitude,
            longitude=result.longitude,
        )
        return filters

    def list(self, request, *args, **kwargs):
        filters = parse_filters(request.query_params)
        unfiltered = filters.is_empty()

        if unfiltered:
            cached_data = cache.get(TOURNAMENT_LIST_CACHE_KEY)
            if cached_data:
                return Response(cached_data)

        fetcher = RowFetcher(
            query=lambda: [tournament_row(t) for t in self.get_queryset()],
            transform=transform_tournament,
            name="tournaments",
        )
        state = fetcher.refetch()
        if state["error"]:
            return Response(
                {"error": "Unable to load tournaments right now. Please try again."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        filters = self.resolve_location(filters)
        results = apply_filters(state["data"], filters)
        upcoming, past = split_upcoming_past(results)
        data = {
            "count": len(results),
            "results": results,
            "upcoming": upcoming,
            "past": past,
            "filters": serialize_filters(filters),
        }

        if unfiltered:
            cache.set(TOURNAMENT_LIST_CACHE_KEY, data, timeout=300)  # 5 minutes
        # Don't cache filtered results
        return Response(data)


class TournamentDetailView(generics.RetrieveAPIView):
    """
    Get tournament details by id or slug
    GET /api/tournaments/<id>/  or  /api/tournaments/s/<slug>/
    Unpublished listings are only visible to their organizer and admins
    """

    serializer_class = TournamentListSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return visible_tournaments(self.request.user)

    def get_object(self):
        queryset = self.get_queryset()
        if "slug" in self.kwargs:
            return get_object_or_404(queryset, slug=self.kwargs["slug"])
        return get_object_or_404(queryset, pk=self.kwargs["pk"])


class TournamentStatsView(APIView):
    """
    Directory counts for the home and region pages
    GET /api/tournaments/stats/
    Cache: 5 minutes, cleared whenever a tournament changes
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        data = cache.get(TOURNAMENT_STATS_CACHE_KEY)
        if data is None:
            published = Tournament.objects.filter(is_published=True)
            data = {"totals": site_totals(published), "regions": region_stats(published)}
            cache.set(TOURNAMENT_STATS_CACHE_KEY, data, timeout=300)
        return Response(data)


# ============= Organizer Views =============


class TournamentCreateView(generics.CreateAPIView):
    """
    Organizer submits a tournament for review
    POST /api/tournaments/create/
    Admin submissions are published straight away
    """

    serializer_class = TournamentSerializer
    permission_classes = [IsOrganizerUser]
    parser_classes = (parsers.MultiPartParser, parsers.FormParser, parsers.JSONParser)

    def perform_create(self, serializer):
        user = self.request.user
        tournament = serializer.save(organizer=user, is_published=user.is_moderator)

        if not tournament.has_coordinates:
            try:
                geocode_tournament(tournament)
                tournament.save(update_fields=["latitude", "longitude", "updated_at"])
            except GeocodingError as e:
                logger.warning(f"Tournament {tournament.id} saved without coordinates: {e}")

        logger.info(f"Tournament {tournament.id} created by {user.email} (published={tournament.is_published})")
        cache.delete(TOURNAMENT_LIST_CACHE_KEY)

        send_tournament_created_email_task.delay(tournament.id)
        if tournament.is_published:
            queue_instant_alerts(tournament.id)


class OrganizerTournamentMixin:
    def get_queryset(self):
        return managed_tournaments(self.request.user)


class TournamentUpdateView(OrganizerTournamentMixin, generics.UpdateAPIView):
    """
    Organizer updates their tournament
    PUT/PATCH /api/tournaments/<id>/update/
    Re-geocodes when the address changes without new coordinates
    """

    serializer_class = TournamentSerializer
    permission_classes = [IsOrganizerUser]
    parser_classes = (parsers.MultiPartParser, parsers.FormParser, parsers.JSONParser)

    def perform_update(self, serializer):
        address_changed = any(
            field in serializer.validated_data
            and serializer.validated_data[field] != getattr(serializer.instance, field)
            for field in ADDRESS_FIELDS
        )
        coordinates_given = "latitude" in serializer.validated_data or "longitude" in serializer.validated_data
        tournament = serializer.save()

        if address_changed and not coordinates_given:
            try:
                geocode_tournament(tournament)
                tournament.save(update_fields=["latitude", "longitude", "updated_at"])
            except GeocodingError as e:
                logger.warning(f"Could not re-geocode tournament {tournament.id}: {e}")

        cache.delete(TOURNAMENT_LIST_CACHE_KEY)


class TournamentDeleteView(OrganizerTournamentMixin, generics.DestroyAPIView):
    """
    Organizer deletes their tournament
    DELETE /api/tournaments/<id>/delete/
    """

    permission_classes = [IsOrganizerUser]

    def perform_destroy(self, instance):
        logger.info(f"Tournament {instance.id} deleted by {self.request.user.email}")
        instance.delete()
        cache.delete(TOURNAMENT_LIST_CACHE_KEY)


class OrganizerTournamentsView(generics.ListAPIView):
    """
    Tournaments submitted by the current organizer, with completion details
    GET /api/tournaments/mine/
    """

    serializer_class = TournamentSerializer
    permission_classes = [IsOrganizerUser]

    def get_queryset(self):
        return Tournament.objects.filter(organizer=self.request.user).order_by("-created_at")


class TournamentAttachmentsView(generics.ListCreateAPIView):
    """
    Files attached to a tournament
    GET  /api/tournaments/<id>/attachments/   anyone who can see the listing
    POST /api/tournaments/<id>/attachments/   owning organizer or admin, multipart "file"
    """

    serializer_class = TournamentAttachmentSerializer
    parser_classes = (parsers.MultiPartParser, parsers.FormParser)
    pagination_class = None

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsOrganizerUser()]
        return [permissions.AllowAny()]

    def get_tournament(self):
        user = self.request.user
        if self.request.method == "POST":
            queryset = managed_tournaments(user)
        else:
            queryset = visible_tournaments(user)
        return get_object_or_404(queryset, pk=self.kwargs["pk"])

    def get_queryset(self):
        return self.get_tournament().attachments.all()

    def create(self, request, *args, **kwargs):
        self.tournament = self.get_tournament()
        return super().create(request, *args, **kwargs)

    def perform_create(self, serializer):
        attachment = serializer.save(tournament=self.tournament, uploaded_by=self.request.user)
        logger.info(f"Attachment {attachment.file_name} added to tournament {attachment.tournament_id}")


class TournamentAttachmentDeleteView(generics.DestroyAPIView):
    """
    Remove an attachment and its stored file
    DELETE /api/tournaments/attachments/<id>/delete/
    """

    permission_classes = [IsOrganizerUser]

    def get_queryset(self):
        return TournamentAttachment.objects.filter(tournament__in=managed_tournaments(self.request.user))

    def perform_destroy(self, instance):
        user = self.request.user
        logger.info(f"Attachment {instance.id} on tournament {instance.tournament_id} deleted by {user.email}")
        instance.delete()


class GeocodeAddressView(APIView):
    """
    Geocode a venue address with the fallback chain
    POST /api/tournaments/geocode/
    """

    permission_classes = [IsOrganizerUser]

    def post(self, request):
        serializer = GeocodeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = GeocodingService().geocode_address(**serializer.validated_data)
        except GeocodingUnavailable as e:
            return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except GeocodingError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(result.as_dict())


class ContactOrganizerView(APIView):
    """
    Send a visitor's question to the tournament contact
    POST /api/tournaments/contact/
    Rate limit: 5 per 15 minutes per IP
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [ContactOrganizerThrottle]

    def post(self, request):
        serializer = ContactOrganizerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tournament = get_object_or_404(Tournament, pk=data["tournamentId"], is_published=True)
        sent = send_contact_organizer_email(
            tournament,
            sender_name=data["name"],
            sender_email=data["email"],
            subject=data["subject"],
            message=data["message"],
        )
        if not sent:
            return Response(
                {"error": "We couldn't send your message right now. Please try again later."},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        logger.info(f"Contact request for tournament {tournament.id} forwarded")
        return Response({"success": True, "message": "Your message has been sent to the organizer."})


# ============= Moderation Views =============


class PendingTournamentsView(generics.ListAPIView):
    """
    Listings awaiting moderation
    GET /api/tournaments/admin/pending/
    """

    serializer_class = TournamentSerializer
    permission_classes = [IsModerator]

    def get_queryset(self):
        return Tournament.objects.filter(is_published=False).order_by("created_at")


class ApproveTournamentView(APIView):
    """
    Publish a pending tournament and notify instant alert subscribers
    POST /api/tournaments/admin/<id>/approve/
    """

    permission_classes = [IsModerator]

    def post(self, request, pk):
        tournament = get_object_or_404(Tournament, pk=pk)
        if tournament.is_published:
            return Response({"error": "Tournament is already published"}, status=status.HTTP_400_BAD_REQUEST)

        tournament.is_published = True
        tournament.save(update_fields=["is_published", "updated_at"])
        cache.delete(TOURNAMENT_LIST_CACHE_KEY)
        logger.info(f"Tournament {tournament.id} approved by {request.user.email}")

        queue_instant_alerts(tournament.id)
        return Response({"success": True, "tournament": TournamentSerializer(tournament).data})


class RejectTournamentView(APIView):
    """
    Reject a pending tournament (deletes it)
    POST /api/tournaments/admin/<id>/reject/
    """

    permission_classes = [IsModerator]

    def post(self, request, pk):
        tournament = get_object_or_404(Tournament, pk=pk, is_published=False)
        logger.info(f"Tournament {tournament.id} rejected by {request.user.email}: {request.data.get('reason', '')}")
        tournament.delete()
        cache.delete(TOURNAMENT_LIST_CACHE_KEY)
        return Response({"success": True}, status=status.HTTP_200_OK)

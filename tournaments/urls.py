from django.urls import path

from .views import (
    ApproveTournamentView,
    ContactOrganizerView,
    GeocodeAddressView,
    OrganizerTournamentsView,
    PendingTournamentsView,
    RejectTournamentView,
    TournamentAttachmentDeleteView,
    TournamentAttachmentsView,
    TournamentCreateView,
    TournamentDeleteView,
    TournamentDetailView,
    TournamentListView,
    TournamentStatsView,
    TournamentUpdateView,
)

urlpatterns = [
    # Public
    path("", TournamentListView.as_view(), name="tournament-list"),
    path("<int:pk>/", TournamentDetailView.as_view(), name="tournament-detail"),
    path("s/<slug:slug>/", TournamentDetailView.as_view(), name="tournament-detail-slug"),
    path("contact/", ContactOrganizerView.as_view(), name="tournament-contact"),
    path("stats/", TournamentStatsView.as_view(), name="tournament-stats"),
    path("<int:pk>/attachments/", TournamentAttachmentsView.as_view(), name="tournament-attachments"),
    # Organizer
    path("create/", TournamentCreateView.as_view(), name="tournament-create"),
    path("<int:pk>/update/", TournamentUpdateView.as_view(), name="tournament-update"),
    path("<int:pk>/delete/", TournamentDeleteView.as_view(), name="tournament-delete"),
    path("mine/", OrganizerTournamentsView.as_view(), name="organizer-tournaments"),
    path("geocode/", GeocodeAddressView.as_view(), name="tournament-geocode"),
    path(
        "attachments/<int:pk>/delete/", TournamentAttachmentDeleteView.as_view(), name="tournament-attachment-delete"
    ),
    # Moderation
    path("admin/pending/", PendingTournamentsView.as_view(), name="tournament-pending"),
    path("admin/<int:pk>/approve/", ApproveTournamentView.as_view(), name="tournament-approve"),
    path("admin/<int:pk>/reject/", RejectTournamentView.as_view(), name="tournament-reject"),
]

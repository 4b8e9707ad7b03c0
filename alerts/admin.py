from django.contrib import admin

from .models import AlertDelivery, TournamentAlert


@admin.register(TournamentAlert)
class TournamentAlertAdmin(admin.ModelAdmin):
    list_display = ("email", "frequency", "consent_source", "is_active", "verified_at", "last_sent_at", "created_at")
    list_filter = ("frequency", "is_active", "consent_source")
    search_fields = ("email",)
    readonly_fields = ("verification_token", "management_token", "consent_timestamp", "verified_at", "last_sent_at")


@admin.register(AlertDelivery)
class AlertDeliveryAdmin(admin.ModelAdmin):
    list_display = ("alert", "tournament", "item_count", "status", "sent_at")
    list_filter = ("status",)
    search_fields = ("alert__email", "tournament__name")
    raw_id_fields = ("alert", "tournament")

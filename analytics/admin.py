from django.contrib import admin

from .models import AnalyticsEvent


@admin.register(AnalyticsEvent)
class AnalyticsEventAdmin(admin.ModelAdmin):
    list_display = ("event_name", "session_id", "user", "timestamp")
    list_filter = ("event_name",)
    search_fields = ("event_name", "session_id", "user__email")
    date_hierarchy = "timestamp"
    readonly_fields = ("event_name", "properties", "session_id", "user", "timestamp", "created_at")

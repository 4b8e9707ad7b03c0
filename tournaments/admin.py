from django.contrib import admin

from .models import Tournament, TournamentAttachment


@admin.register(Tournament)
class TournamentAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "organizer",
        "region",
        "format",
        "type",
        "start_date",
        "end_date",
        "is_published",
        "computed_status",
    )
    list_filter = ("is_published", "type", "region")
    search_fields = ("name", "location_name", "postcode", "organizer__email")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("-created_at",)
    actions = ("publish",)

    @admin.action(description="Publish selected tournaments")
    def publish(self, request, queryset):
        updated = queryset.update(is_published=True)
        self.message_user(request, f"{updated} tournament(s) published")


@admin.register(TournamentAttachment)
class TournamentAttachmentAdmin(admin.ModelAdmin):
    list_display = ("file_name", "tournament", "file_type", "file_size", "uploaded_by", "created_at")
    search_fields = ("file_name", "tournament__name")
    raw_id_fields = ("tournament", "uploaded_by")

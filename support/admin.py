from django.contrib import admin

from .models import SupportTicket


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ("id", "subject", "category", "email", "status", "created_at")
    list_filter = ("status", "category")
    search_fields = ("subject", "email", "name", "message")
    raw_id_fields = ("user",)
    actions = ("mark_resolved",)

    @admin.action(description="Mark selected tickets as resolved")
    def mark_resolved(self, request, queryset):
        updated = queryset.update(status="resolved")
        self.message_user(request, f"{updated} ticket(s) resolved")

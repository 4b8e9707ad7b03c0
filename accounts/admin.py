from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import OrganizerProfile, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "user_type", "is_staff", "is_active", "created_at")
    list_filter = ("user_type", "is_staff", "is_active")
    search_fields = ("email", "username")
    ordering = ("-created_at",)

    fieldsets = BaseUserAdmin.fieldsets + (("Role", {"fields": ("user_type",)}),)

    add_fieldsets = BaseUserAdmin.add_fieldsets + (("Role", {"fields": ("email", "user_type")}),)


@admin.register(OrganizerProfile)
class OrganizerProfileAdmin(admin.ModelAdmin):
    list_display = ("full_name", "organization_name", "user", "data_processing_consent", "consent_date")
    search_fields = ("full_name", "organization_name", "user__email")
    list_filter = ("data_processing_consent",)

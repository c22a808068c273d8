from django.contrib import admin

from apps.invitations.models import GardenInvitation


@admin.register(GardenInvitation)
class GardenInvitationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "garden",
        "kind",
        "invited_user_email",
        "role",
        "status",
        "expires_at",
        "created_at",
    )
    list_filter = ("kind", "status", "role")
    search_fields = ("invited_user_email", "garden__name", "invited_by__username")
    autocomplete_fields = ("garden", "invited_by", "invited_user")
    readonly_fields = ("created_at", "updated_at")

from django.contrib import admin

from apps.gardens.models import Garden, GardenLocation, GardenMembership


class GardenLocationInline(admin.TabularInline):
    model = GardenLocation
    extra = 0
    fields = ("name", "light_conditions", "irrigation_type", "created_by")
    autocomplete_fields = ("created_by",)


@admin.register(Garden)
class GardenAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "owner", "created_at", "updated_at")
    search_fields = ("name", "owner__username", "owner__email")
    list_filter = ("created_at",)
    autocomplete_fields = ("owner",)
    inlines = [GardenLocationInline]


@admin.register(GardenLocation)
class GardenLocationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "garden", "light_conditions", "irrigation_type", "created_at")
    list_filter = ("light_conditions", "irrigation_type")
    search_fields = ("name", "garden__name")
    autocomplete_fields = ("garden", "created_by")


@admin.register(GardenMembership)
class GardenMembershipAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "garden",
        "user",
        "role",
        "joined_at",
        "created_at",
    )
    list_filter = ("role", "garden")
    search_fields = ("garden__name", "user__username", "user__email")
    autocomplete_fields = ("garden", "user", "invited_by")

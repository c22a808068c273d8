from django.contrib import admin

from apps.plants.models import Plant


@admin.register(Plant)
class PlantAdmin(admin.ModelAdmin):
    list_display = ("id", "plant_type", "variety", "garden_location", "stage", "health_status", "planting_date")
    list_filter = ("stage", "health_status")
    search_fields = ("plant_type", "variety", "garden_location__name", "garden_location__garden__name")
    autocomplete_fields = ("garden_location", "created_by")
    date_hierarchy = "planting_date"

import django_filters

from apps.plants.models import Plant


class PlantFilter(django_filters.FilterSet):
    plant_type = django_filters.CharFilter(field_name="plant_type", lookup_expr="icontains")
    stage = django_filters.ChoiceFilter(choices=Plant.Stage.choices)
    health_status = django_filters.ChoiceFilter(choices=Plant.HealthStatus.choices)
    garden_location = django_filters.NumberFilter(field_name="garden_location_id")
    planted_from = django_filters.DateFilter(field_name="planting_date", lookup_expr="gte")
    planted_to = django_filters.DateFilter(field_name="planting_date", lookup_expr="lte")

    class Meta:
        model = Plant
        fields = ["plant_type", "stage", "health_status", "garden_location"]

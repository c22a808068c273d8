import django_filters

from apps.gardens.models import GardenLocation


class GardenLocationFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    light_conditions = django_filters.ChoiceFilter(choices=GardenLocation.LightConditions.choices)
    irrigation_type = django_filters.ChoiceFilter(choices=GardenLocation.IrrigationType.choices)
    soil_type = django_filters.CharFilter(field_name="soil_type", lookup_expr="icontains")

    class Meta:
        model = GardenLocation
        fields = ["name", "light_conditions", "irrigation_type", "soil_type"]

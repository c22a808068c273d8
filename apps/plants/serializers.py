from rest_framework import serializers

from apps.plants.models import Plant


class PlantSerializer(serializers.ModelSerializer):
    garden_location_id = serializers.IntegerField()
    location_name = serializers.CharField(source="garden_location.name", read_only=True)
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Plant
        fields = [
            "id",
            "garden_location_id",
            "location_name",
            "created_by",
            "plant_type",
            "variety",
            "planting_date",
            "notes",
            "health_status",
            "stage",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "location_name", "created_by", "created_at", "updated_at"]

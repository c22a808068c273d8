from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.gardens.mixins import GardenContextMixin
from apps.plants.filters import PlantFilter
from apps.plants.serializers import PlantSerializer
from apps.plants.services import (
    create_plant,
    delete_plant,
    get_existing_plant,
    get_location_in_garden,
    get_plant,
    list_plants,
    update_plant,
)


class GardenPlantListCreateView(GardenContextMixin, generics.ListCreateAPIView):
    serializer_class = PlantSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = PlantFilter
    search_fields = ["plant_type", "variety", "notes"]
    ordering_fields = ["planting_date", "plant_type", "id"]
    ordering = ["-planting_date", "-id"]

    def get_queryset(self):
        return list_plants(self.get_garden())

    def create(self, request, *args, **kwargs):
        garden = self.get_garden_for_write()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        location = get_location_in_garden(garden, data.pop("garden_location_id"))
        plant = create_plant(location, request.user, **data)
        return Response(
            {"success": True, "id": plant.id, "message": "Plant created successfully"},
            status=status.HTTP_201_CREATED,
        )


class PlantDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, plant_id):
        plant = get_plant(plant_id, request.user)
        return Response({"success": True, "plant": PlantSerializer(plant).data})

    def patch(self, request, plant_id):
        plant = get_existing_plant(plant_id)
        serializer = PlantSerializer(plant, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        plant = update_plant(plant, request.user, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Plant updated successfully",
                "plant": PlantSerializer(plant).data,
            }
        )

    put = patch

    def delete(self, request, plant_id):
        plant = get_existing_plant(plant_id)
        delete_plant(plant, request.user)
        return Response({"success": True, "message": "Plant deleted successfully"})

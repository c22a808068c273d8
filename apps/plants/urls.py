from django.urls import path

from apps.plants.views import GardenPlantListCreateView, PlantDetailView

urlpatterns = [
    path("gardens/<int:garden_id>/plants", GardenPlantListCreateView.as_view(), name="garden-plants"),
    path("plants/<int:plant_id>", PlantDetailView.as_view(), name="plant-detail"),
]

from django.urls import path
from rest_framework.routers import DefaultRouter

from apps.gardens.views import (
    GardenLocationDetailView,
    GardenLocationListCreateView,
    GardenMembershipViewSet,
    GardenViewSet,
)

router = DefaultRouter(trailing_slash=False)
router.register(r"gardens", GardenViewSet, basename="garden")
router.register(r"garden-members", GardenMembershipViewSet, basename="garden-member")

urlpatterns = [
    path(
        "gardens/<int:garden_id>/locations",
        GardenLocationListCreateView.as_view(),
        name="garden-locations",
    ),
    path(
        "garden-locations/<int:location_id>",
        GardenLocationDetailView.as_view(),
        name="garden-location-detail",
    ),
]

urlpatterns += router.urls

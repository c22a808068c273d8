from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.exceptions import NotFound
from apps.gardens.filters import GardenLocationFilter
from apps.gardens.mixins import GardenContextMixin
from apps.gardens.serializers import (
    GardenLocationSerializer,
    GardenMembershipSerializer,
    GardenSerializer,
    GardenWriteSerializer,
    MembershipRoleSerializer,
    PublicGardenSerializer,
)
from apps.gardens.services import (
    change_role,
    create_garden,
    create_garden_location,
    delete_garden,
    delete_garden_location,
    get_existing_garden,
    get_existing_location,
    get_garden,
    get_garden_location,
    get_membership_by_id,
    get_public_garden,
    leave_garden,
    list_garden_locations,
    list_gardens,
    list_memberships,
    remove_membership,
    update_garden,
    update_garden_location,
)


class GardenViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        gardens = list_gardens(request.user)
        serializer = GardenSerializer(gardens, many=True, context={"request": request})
        return Response(serializer.data)

    def create(self, request):
        serializer = GardenWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        garden = create_garden(request.user, **serializer.validated_data)
        return Response(
            {"success": True, "id": garden.id, "message": "Garden created successfully"},
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        garden = get_garden(pk, request.user)
        if garden is None:
            raise NotFound("Garden not found")
        return Response(GardenSerializer(garden, context={"request": request}).data)

    def partial_update(self, request, pk=None):
        garden = get_existing_garden(pk)
        serializer = GardenWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        garden = update_garden(garden, request.user, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "id": garden.id,
                "message": "Garden updated successfully",
                "garden": GardenSerializer(garden, context={"request": request}).data,
            }
        )

    def destroy(self, request, pk=None):
        garden = get_existing_garden(pk)
        delete_garden(garden, request.user)
        return Response({"success": True, "message": "Garden deleted successfully"})

    @action(detail=True, methods=["get"], permission_classes=[AllowAny])
    def public(self, request, pk=None):
        return Response(PublicGardenSerializer(get_public_garden(pk)).data)

    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        garden = get_existing_garden(pk)
        leave_garden(garden, request.user)
        return Response({"success": True, "garden_id": garden.id, "message": "You left the garden"})


class GardenLocationListCreateView(GardenContextMixin, generics.ListCreateAPIView):
    serializer_class = GardenLocationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = GardenLocationFilter
    ordering_fields = ["name", "created_at", "id"]
    ordering = ["name", "id"]

    def get_queryset(self):
        return list_garden_locations(self.get_garden())

    def create(self, request, *args, **kwargs):
        garden = self.get_garden_for_write()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        location = create_garden_location(garden, request.user, **serializer.validated_data)
        return Response(
            {"success": True, "id": location.id, "message": "Garden location created successfully"},
            status=status.HTTP_201_CREATED,
        )


class GardenLocationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, location_id):
        location = get_garden_location(location_id, request.user)
        return Response({"success": True, "location": GardenLocationSerializer(location).data})

    def patch(self, request, location_id):
        location = get_existing_location(location_id)
        serializer = GardenLocationSerializer(location, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        location = update_garden_location(location, request.user, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Garden location updated successfully",
                "location": GardenLocationSerializer(location).data,
            }
        )

    put = patch

    def delete(self, request, location_id):
        location = get_existing_location(location_id)
        delete_garden_location(location, request.user)
        return Response({"success": True, "message": "Garden location deleted successfully"})


class GardenMembershipViewSet(GardenContextMixin, viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        memberships = list_memberships(self.get_garden())
        serializer = GardenMembershipSerializer(memberships, many=True)
        return Response({"success": True, "members": serializer.data})

    def partial_update(self, request, pk=None):
        membership = get_membership_by_id(pk)
        serializer = MembershipRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        membership = change_role(membership, serializer.validated_data["role"], request.user)
        return Response(
            {
                "success": True,
                "message": "Member role updated successfully",
                "member": GardenMembershipSerializer(membership).data,
            }
        )

    def destroy(self, request, pk=None):
        membership = get_membership_by_id(pk)
        remove_membership(membership, request.user)
        return Response({"success": True, "message": "Member removed successfully"})

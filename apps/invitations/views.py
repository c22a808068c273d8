from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.gardens.serializers import GardenMembershipSerializer
from apps.gardens.services import extract_garden_id, get_existing_garden, get_viewable_garden
from apps.invitations.serializers import (
    AccessRequestSerializer,
    GardenInvitationSerializer,
    InvitationActionSerializer,
    InvitationCreateSerializer,
)
from apps.invitations.services import (
    accept_invitation,
    create_invitation,
    decline_invitation,
    list_access_requests,
    list_pending_invitations_for_user,
    reject_location_scope,
    request_access,
)


class GardenInvitationListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        invitations = list_pending_invitations_for_user(request.user.email)
        return Response(
            {"success": True, "invitations": GardenInvitationSerializer(invitations, many=True).data}
        )

    def post(self, request):
        reject_location_scope(request.data)
        garden = get_existing_garden(extract_garden_id(request))
        serializer = InvitationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invitation = create_invitation(garden, request.user, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "invitation_id": invitation.id,
                "message": "Invitation sent successfully! They will receive an email with instructions.",
            },
            status=status.HTTP_201_CREATED,
        )


class GardenInvitationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, invitation_id):
        serializer = InvitationActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if serializer.validated_data["action"] == InvitationActionSerializer.ACCEPT:
            membership = accept_invitation(invitation_id, request.user)
            return Response(
                {
                    "success": True,
                    "message": "Invitation accepted successfully",
                    "garden_id": membership.garden_id,
                    "member": GardenMembershipSerializer(membership).data,
                }
            )
        invitation = decline_invitation(invitation_id, request.user)
        return Response(
            {"success": True, "message": "Invitation declined", "status": invitation.status}
        )


class GardenAccessRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        garden = get_viewable_garden(extract_garden_id(request), request.user)
        requests = list_access_requests(garden, request.user)
        return Response(
            {"success": True, "requests": GardenInvitationSerializer(requests, many=True).data}
        )

    def post(self, request):
        garden_id = extract_garden_id(request)
        serializer = AccessRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invitation = request_access(garden_id, request.user, **serializer.validated_data)
        return Response(
            {
                "success": True,
                "invitation_id": invitation.id,
                "message": "Access request sent successfully. The garden owner will be notified.",
            },
            status=status.HTTP_201_CREATED,
        )

from django.urls import path

from apps.invitations.views import (
    GardenAccessRequestView,
    GardenInvitationDetailView,
    GardenInvitationListCreateView,
)

urlpatterns = [
    path("garden-invitations", GardenInvitationListCreateView.as_view(), name="garden-invitations"),
    path(
        "garden-invitations/<int:invitation_id>",
        GardenInvitationDetailView.as_view(),
        name="garden-invitation-detail",
    ),
    path("garden-access-request", GardenAccessRequestView.as_view(), name="garden-access-request"),
]

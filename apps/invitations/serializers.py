from rest_framework import serializers

from apps.gardens.roles import permissions_for
from apps.invitations.models import GardenInvitation


class GardenInvitationSerializer(serializers.ModelSerializer):
    garden_id = serializers.IntegerField(read_only=True)
    garden_name = serializers.CharField(source="garden.name", read_only=True)
    invited_by_username = serializers.CharField(source="invited_by.username", read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = GardenInvitation
        fields = [
            "id",
            "garden_id",
            "garden_name",
            "kind",
            "invited_by_username",
            "invited_user_email",
            "role",
            "permissions",
            "status",
            "message",
            "expires_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_permissions(self, obj):
        return permissions_for(obj.role)


class InvitationCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.CharField()
    message = serializers.CharField(required=False, allow_blank=True, default="")


class InvitationActionSerializer(serializers.Serializer):
    ACCEPT = "accept"
    DECLINE = "decline"

    action = serializers.ChoiceField(choices=[ACCEPT, DECLINE])


class AccessRequestSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default="")

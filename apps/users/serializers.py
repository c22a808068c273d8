from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.gardens.models import GardenMembership

User = get_user_model()


class UserGardenMembershipSerializer(serializers.ModelSerializer):
    garden_id = serializers.IntegerField(read_only=True)
    garden_name = serializers.CharField(source="garden.name", read_only=True)
    is_owner = serializers.SerializerMethodField()

    class Meta:
        model = GardenMembership
        fields = ["garden_id", "garden_name", "role", "is_owner", "joined_at"]

    def get_is_owner(self, obj: GardenMembership) -> bool:
        return obj.role == GardenMembership.Roles.OWNER


class UserSerializer(serializers.ModelSerializer):
    memberships = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "email", "memberships"]
        read_only_fields = ["id", "username", "email"]

    def get_memberships(self, obj: User):
        memberships = obj.garden_memberships.select_related("garden").order_by("garden__name", "garden_id")
        return UserGardenMembershipSerializer(memberships, many=True).data


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "email"]
        read_only_fields = fields

from rest_framework import serializers

from apps.gardens.models import Garden, GardenLocation, GardenMembership
from apps.gardens.roles import permissions_for
from apps.users.serializers import UserSummarySerializer


class GardenSerializer(serializers.ModelSerializer):
    owner = serializers.PrimaryKeyRelatedField(read_only=True)
    role = serializers.SerializerMethodField()
    permissions = serializers.SerializerMethodField()
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Garden
        fields = [
            "id",
            "name",
            "description",
            "notes",
            "owner",
            "role",
            "permissions",
            "member_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _membership(self, obj: Garden):
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return None
        cache = self.context.setdefault("_memberships", {})
        if obj.pk not in cache:
            cache[obj.pk] = obj.memberships.filter(user=request.user).first()
        return cache[obj.pk]

    def get_role(self, obj: Garden):
        return getattr(self._membership(obj), "role", None)

    def get_permissions(self, obj: Garden):
        membership = self._membership(obj)
        return permissions_for(membership.role) if membership else None

    def get_member_count(self, obj: Garden) -> int:
        annotated = getattr(obj, "member_count", None)
        if annotated is not None:
            return annotated
        return obj.memberships.count()


class GardenWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Garden name is required")
        return value


class GardenLocationSerializer(serializers.ModelSerializer):
    garden_id = serializers.IntegerField(read_only=True)
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)
    light_conditions = serializers.ChoiceField(
        choices=GardenLocation.LightConditions.choices,
        required=False,
        allow_blank=True,
    )
    irrigation_type = serializers.ChoiceField(
        choices=GardenLocation.IrrigationType.choices,
        required=False,
    )

    class Meta:
        model = GardenLocation
        fields = [
            "id",
            "garden_id",
            "created_by",
            "name",
            "description",
            "notes",
            "size",
            "soil_type",
            "light_conditions",
            "irrigation_type",
            "microclimate_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "garden_id", "created_by", "created_at", "updated_at"]
        # Name uniqueness per garden is checked by the service so it maps to 409.
        validators = []


class GardenMembershipSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    role_display = serializers.CharField(source="get_role_display", read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = GardenMembership
        fields = [
            "id",
            "garden_id",
            "user",
            "role",
            "role_display",
            "permissions",
            "joined_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_permissions(self, obj: GardenMembership):
        return obj.permissions


class MembershipRoleSerializer(serializers.Serializer):
    # Unknown roles and owner assignment are rejected by the membership service.
    role = serializers.CharField()


class PublicGardenSerializer(serializers.Serializer):
    def to_representation(self, instance):
        from apps.plants.serializers import PlantSerializer

        garden = instance["garden"]
        return {
            "id": garden.id,
            "name": garden.name,
            "description": garden.description,
            "notes": garden.notes,
            "owner": garden.owner_id,
            "created_at": serializers.DateTimeField().to_representation(garden.created_at),
            "locations": GardenLocationSerializer(instance["locations"], many=True).data,
            "plants": PlantSerializer(instance["plants"], many=True).data,
            "total_plants": instance["total_plants"],
            "unique_types": instance["unique_types"],
            "member_count": instance["member_count"],
        }

from django.conf import settings
from django.db import models

from apps.common.models import TimeStampedModel
from apps.gardens.roles import Role, permissions_for


class Garden(TimeStampedModel):
    """A garden owned by one user and shared with its members."""

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_gardens",
    )

    class Meta:
        ordering = ["name", "id"]
        indexes = [models.Index(fields=["name"], name="garden_name_idx")]

    def __str__(self) -> str:
        return self.name


class GardenLocation(TimeStampedModel):
    """A bed, plot or area inside a garden."""

    class LightConditions(models.TextChoices):
        FULL_SUN = "full_sun", "Full sun"
        PARTIAL_SUN = "partial_sun", "Partial sun"
        PARTIAL_SHADE = "partial_shade", "Partial shade"
        FULL_SHADE = "full_shade", "Full shade"

    class IrrigationType(models.TextChoices):
        MANUAL = "manual", "Manual"
        DRIP = "drip", "Drip"
        SPRINKLER = "sprinkler", "Sprinkler"
        NONE = "none", "None"

    garden = models.ForeignKey(
        Garden,
        on_delete=models.CASCADE,
        related_name="locations",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_garden_locations",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    size = models.CharField(max_length=100, blank=True)
    soil_type = models.CharField(max_length=100, blank=True)
    light_conditions = models.CharField(
        max_length=20,
        choices=LightConditions.choices,
        blank=True,
    )
    irrigation_type = models.CharField(
        max_length=20,
        choices=IrrigationType.choices,
        default=IrrigationType.MANUAL,
    )
    microclimate_notes = models.TextField(blank=True)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.UniqueConstraint(fields=["garden", "name"], name="unique_garden_location_name"),
        ]

    def __str__(self) -> str:
        return f"{self.name} @ {self.garden_id}"


class GardenMembership(TimeStampedModel):
    """User membership and role association to a garden."""

    Roles = Role

    garden = models.ForeignKey(
        Garden,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="garden_memberships",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.MEMBER,
        db_index=True,
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="garden_members_invited",
    )
    joined_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["garden_id", "user_id"]
        constraints = [
            models.UniqueConstraint(fields=["garden", "user"], name="unique_garden_user"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.garden_id} ({self.role})"

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER

    @property
    def permissions(self):
        return permissions_for(self.role)

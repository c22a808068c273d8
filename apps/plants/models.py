from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.common.models import TimeStampedModel
from apps.gardens.models import GardenLocation


class Plant(TimeStampedModel):
    """A planting tracked inside one garden location."""

    class HealthStatus(models.TextChoices):
        EXCELLENT = "excellent", "Excellent"
        GOOD = "good", "Good"
        FAIR = "fair", "Fair"
        POOR = "poor", "Poor"

    class Stage(models.TextChoices):
        SEED = "seed", "Seed"
        SEEDLING = "seedling", "Seedling"
        VEGETATIVE = "vegetative", "Vegetative"
        FLOWERING = "flowering", "Flowering"
        FRUITING = "fruiting", "Fruiting"
        HARVEST = "harvest", "Harvest"

    garden_location = models.ForeignKey(
        GardenLocation,
        on_delete=models.CASCADE,
        related_name="plants",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_plants",
    )
    plant_type = models.CharField(max_length=100, db_index=True)
    variety = models.CharField(max_length=100, blank=True)
    planting_date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True)
    health_status = models.CharField(
        max_length=20,
        choices=HealthStatus.choices,
        default=HealthStatus.GOOD,
        db_index=True,
    )
    stage = models.CharField(
        max_length=20,
        choices=Stage.choices,
        default=Stage.SEED,
        db_index=True,
    )

    class Meta:
        ordering = ["-planting_date", "-id"]

    def __str__(self) -> str:
        return f"{self.plant_type} ({self.variety})" if self.variety else self.plant_type

    @property
    def garden(self):
        return self.garden_location.garden

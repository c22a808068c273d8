import logging

from rest_framework.exceptions import ValidationError

from apps.common.exceptions import NotFound
from apps.gardens.models import Garden, GardenLocation
from apps.gardens.roles import Capability
from apps.gardens.services import can_view, require_capability
from apps.plants.models import Plant

logger = logging.getLogger(__name__)

PLANT_FIELDS = ("plant_type", "variety", "planting_date", "notes", "health_status", "stage")


def get_location_in_garden(garden: Garden, location_id) -> GardenLocation:
    location = GardenLocation.objects.select_related("garden").filter(pk=location_id, garden=garden).first()
    if location is None:
        raise ValidationError({"garden_location_id": "Location does not belong to this garden"})
    return location


def list_plants(garden: Garden):
    return (
        Plant.objects.select_related("garden_location")
        .filter(garden_location__garden=garden)
        .order_by("-planting_date", "-id")
    )


def get_plant(plant_id, user) -> Plant:
    plant = Plant.objects.select_related("garden_location__garden").filter(pk=plant_id).first()
    if plant is None or not can_view(user, plant.garden):
        raise NotFound("Plant not found")
    return plant


def get_existing_plant(plant_id) -> Plant:
    plant = Plant.objects.select_related("garden_location__garden").filter(pk=plant_id).first()
    if plant is None:
        raise NotFound("Plant not found")
    return plant


def create_plant(location: GardenLocation, actor, **fields) -> Plant:
    require_capability(actor, location.garden, Capability.ADD_PLANTS)
    values = {field: fields[field] for field in PLANT_FIELDS if fields.get(field) is not None}
    plant = Plant.objects.create(garden_location=location, created_by=actor, **values)
    logger.info("Plant %s added to location %s by user %s", plant.pk, location.pk, actor.pk)
    return plant


def update_plant(plant: Plant, actor, **changes) -> Plant:
    garden = plant.garden
    require_capability(actor, garden, Capability.EDIT_PLANTS)
    updated_fields = []
    location_id = changes.get("garden_location_id")
    if location_id is not None and location_id != plant.garden_location_id:
        # Plants can move between beds but never leave their garden.
        plant.garden_location = get_location_in_garden(garden, location_id)
        updated_fields.append("garden_location")
    for field in PLANT_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(plant, field, changes[field])
            updated_fields.append(field)
    if updated_fields:
        updated_fields.append("updated_at")
        plant.save(update_fields=updated_fields)
    return plant


def delete_plant(plant: Plant, actor) -> None:
    require_capability(actor, plant.garden, Capability.DELETE_PLANTS)
    plant_id = plant.pk
    plant.delete()
    logger.info("Plant %s deleted by user %s", plant_id, actor.pk)

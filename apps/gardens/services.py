import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Case, Count, IntegerField, Q, Value, When
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.common.exceptions import Conflict, Forbidden, NotFound, Unauthenticated
from apps.gardens.models import Garden, GardenLocation, GardenMembership
from apps.gardens.roles import ASSIGNABLE_ROLES, Capability, Role, parse_role, role_grants

logger = logging.getLogger(__name__)

GARDEN_FIELDS = ("name", "description", "notes")
LOCATION_FIELDS = (
    "name",
    "description",
    "notes",
    "size",
    "soil_type",
    "light_conditions",
    "irrigation_type",
    "microclimate_notes",
)


def extract_garden_id(request) -> int:
    """
    Try to resolve garden_id from request kwargs, query params, or data.
    Raises ValidationError if missing or invalid.
    """
    garden_id = None

    if hasattr(request, "parser_context"):
        kwargs = request.parser_context.get("kwargs") if request.parser_context else {}
        if kwargs and kwargs.get("garden_id"):
            garden_id = kwargs.get("garden_id")

    for key in ("garden_id", "gardenId"):
        if garden_id is None and request.query_params.get(key):
            garden_id = request.query_params.get(key)

    data = getattr(request, "data", None)
    if garden_id is None and hasattr(data, "get"):
        garden_id = data.get("garden_id") or data.get("gardenId")

    if not garden_id:
        raise ValidationError({"garden_id": "garden_id is required"})

    try:
        return int(garden_id)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"garden_id": "Invalid garden_id"}) from exc


# --- Authorization gate -------------------------------------------------------


def get_membership(garden: Garden, user) -> Optional[GardenMembership]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return GardenMembership.objects.filter(garden=garden, user=user).first()


def is_owner(user, garden: Garden) -> bool:
    return bool(getattr(user, "is_authenticated", False)) and garden.owner_id == user.id


def require_authenticated(user) -> None:
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()


def authorize(user, garden: Garden, capability) -> bool:
    if is_owner(user, garden):
        return True
    membership = get_membership(garden, user)
    return membership is not None and role_grants(membership.role, capability)


def can_view(user, garden: Garden) -> bool:
    return is_owner(user, garden) or get_membership(garden, user) is not None


def require_capability(user, garden: Garden, capability, message: Optional[str] = None) -> None:
    require_authenticated(user)
    if not authorize(user, garden, capability):
        raise Forbidden(message or f"Insufficient permissions. Required: {Capability(capability).value}")


def require_owner(user, garden: Garden, message: str = "Only garden owners can perform this action") -> None:
    require_authenticated(user)
    if not is_owner(user, garden):
        raise Forbidden(message)


def get_garden(garden_id, user) -> Optional[Garden]:
    garden = Garden.objects.select_related("owner").filter(pk=garden_id).first()
    if garden is None or not can_view(user, garden):
        return None
    return garden


def get_viewable_garden(garden_id, user) -> Garden:
    garden = get_garden(garden_id, user)
    if garden is None:
        raise NotFound("Garden not found")
    return garden


def get_existing_garden(garden_id) -> Garden:
    """Resolve a garden for write paths, where the caller already supplied the id."""
    garden = Garden.objects.select_related("owner").filter(pk=garden_id).first()
    if garden is None:
        raise NotFound("Garden not found")
    return garden


# --- Garden store -------------------------------------------------------------


def create_garden(owner, name: str, description: str = "", notes: str = "") -> Garden:
    require_authenticated(owner)
    with transaction.atomic():
        garden = Garden.objects.create(
            owner=owner,
            name=name,
            description=description or "",
            notes=notes or "",
        )
        GardenMembership.objects.create(
            garden=garden,
            user=owner,
            role=Role.OWNER,
            invited_by=owner,
            joined_at=timezone.now(),
        )
    logger.info("Garden %s created by user %s", garden.pk, owner.pk)
    return garden


def list_gardens(user):
    member_of = GardenMembership.objects.filter(user=user).values("garden_id")
    return (
        Garden.objects.filter(Q(owner=user) | Q(pk__in=member_of))
        .annotate(member_count=Count("memberships"))
        .order_by("name", "id")
    )


def update_garden(garden: Garden, actor, **changes) -> Garden:
    require_capability(actor, garden, Capability.EDIT_GARDEN)
    updated_fields = []
    for field in GARDEN_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(garden, field, changes[field])
            updated_fields.append(field)
    if updated_fields:
        updated_fields.append("updated_at")
        garden.save(update_fields=updated_fields)
    return garden


def delete_garden(garden: Garden, actor) -> None:
    require_owner(actor, garden, "Only garden owners can delete gardens")
    garden_id = garden.pk
    with transaction.atomic():
        garden.delete()
    logger.info("Garden %s deleted by user %s", garden_id, actor.pk)


def get_public_garden(garden_id) -> dict:
    """Shareable-link read: no membership required."""
    garden = get_existing_garden(garden_id)
    from apps.plants.models import Plant

    locations = list(garden.locations.order_by("name", "id"))
    plants = list(
        Plant.objects.filter(garden_location__garden=garden)
        .select_related("garden_location")
        .order_by("-planting_date", "-id")
    )
    return {
        "garden": garden,
        "locations": locations,
        "plants": plants,
        "total_plants": len(plants),
        "unique_types": len({plant.plant_type for plant in plants}),
        "member_count": garden.memberships.count(),
    }


# --- Garden locations ---------------------------------------------------------


def _ensure_unique_location_name(garden: Garden, name: str, exclude_pk=None) -> None:
    queryset = GardenLocation.objects.filter(garden=garden, name=name)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise Conflict(f'A location named "{name}" already exists in this garden')


def list_garden_locations(garden: Garden):
    return GardenLocation.objects.filter(garden=garden).order_by("name", "id")


def get_garden_location(location_id, user) -> GardenLocation:
    location = GardenLocation.objects.select_related("garden").filter(pk=location_id).first()
    if location is None or not can_view(user, location.garden):
        raise NotFound("Garden location not found or access denied")
    return location


def get_existing_location(location_id) -> GardenLocation:
    """Resolve a location for write paths; the capability check decides between 403 and success."""
    location = GardenLocation.objects.select_related("garden").filter(pk=location_id).first()
    if location is None:
        raise NotFound("Garden location not found")
    return location


def create_garden_location(garden: Garden, actor, **fields) -> GardenLocation:
    require_capability(actor, garden, Capability.EDIT_GARDEN)
    values = {field: fields[field] for field in LOCATION_FIELDS if fields.get(field) is not None}
    _ensure_unique_location_name(garden, values.get("name", ""))
    try:
        with transaction.atomic():
            location = GardenLocation.objects.create(garden=garden, created_by=actor, **values)
    except IntegrityError as exc:
        raise Conflict(f'A location named "{values.get("name")}" already exists in this garden') from exc
    return location


def update_garden_location(location: GardenLocation, actor, **changes) -> GardenLocation:
    require_capability(actor, location.garden, Capability.EDIT_GARDEN)
    updated_fields = []
    for field in LOCATION_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(location, field, changes[field])
            updated_fields.append(field)
    if "name" in updated_fields:
        _ensure_unique_location_name(location.garden, location.name, exclude_pk=location.pk)
    if updated_fields:
        updated_fields.append("updated_at")
        try:
            with transaction.atomic():
                location.save(update_fields=updated_fields)
        except IntegrityError as exc:
            raise Conflict(f'A location named "{location.name}" already exists in this garden') from exc
    return location


def delete_garden_location(location: GardenLocation, actor) -> None:
    require_capability(actor, location.garden, Capability.EDIT_GARDEN)
    location.delete()


# --- Membership store ---------------------------------------------------------


def list_memberships(garden: Garden):
    return (
        GardenMembership.objects.select_related("user")
        .filter(garden=garden)
        .annotate(
            role_rank=Case(
                When(role=Role.OWNER, then=Value(0)),
                When(role=Role.ADMIN, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            )
        )
        .order_by("role_rank", "joined_at", "id")
    )


def get_membership_by_id(membership_id) -> GardenMembership:
    membership = GardenMembership.objects.select_related("garden", "user").filter(pk=membership_id).first()
    if membership is None:
        raise NotFound("Membership not found")
    return membership


def change_role(membership: GardenMembership, new_role, actor) -> GardenMembership:
    require_capability(actor, membership.garden, Capability.MANAGE_MEMBERS)
    role = parse_role(new_role)
    if membership.is_owner:
        raise Forbidden("The garden owner's role cannot be changed")
    if role not in ASSIGNABLE_ROLES:
        raise Forbidden("Ownership transfer is not supported")
    if membership.role != role:
        previous = membership.role
        membership.role = role
        membership.save(update_fields=["role", "updated_at"])
        logger.info(
            "Membership %s in garden %s changed from %s to %s by user %s",
            membership.pk,
            membership.garden_id,
            previous,
            role,
            actor.pk,
        )
    return membership


def remove_membership(membership: GardenMembership, actor) -> None:
    require_capability(actor, membership.garden, Capability.MANAGE_MEMBERS)
    if membership.is_owner:
        raise Forbidden("The garden owner cannot be removed")
    logger.info(
        "User %s removed from garden %s by user %s",
        membership.user_id,
        membership.garden_id,
        actor.pk,
    )
    membership.delete()


def leave_garden(garden: Garden, user) -> None:
    require_authenticated(user)
    membership = get_membership(garden, user)
    if membership is None:
        raise NotFound("You are not a member of this garden")
    if membership.is_owner:
        raise Forbidden("The garden owner cannot leave the garden")
    membership.delete()
    logger.info("User %s left garden %s", user.pk, garden.pk)

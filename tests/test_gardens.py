import pytest
from django.contrib.auth.models import AnonymousUser

from apps.common.exceptions import Conflict, Forbidden, NotFound, Unauthenticated
from apps.gardens.models import Garden, GardenLocation, GardenMembership
from apps.gardens.roles import Capability, Role
from apps.gardens.services import (
    authorize,
    can_view,
    create_garden,
    create_garden_location,
    delete_garden,
    delete_garden_location,
    get_garden,
    get_garden_location,
    get_public_garden,
    get_viewable_garden,
    leave_garden,
    list_gardens,
    require_capability,
    update_garden,
    update_garden_location,
)
from apps.invitations.models import GardenInvitation
from apps.invitations.services import create_invitation
from apps.plants.models import Plant
from apps.plants.services import create_plant


def test_create_garden_adds_owner_membership(owner):
    garden = create_garden(owner, "Backyard", notes="south facing")

    membership = GardenMembership.objects.get(garden=garden)
    assert garden.owner == owner
    assert membership.user == owner
    assert membership.role == Role.OWNER
    assert membership.joined_at is not None
    assert membership.permissions == {cap.value: True for cap in Capability}


def test_create_garden_rolls_back_when_membership_fails(owner, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("membership insert failed")

    monkeypatch.setattr(GardenMembership.objects, "create", boom)

    with pytest.raises(RuntimeError):
        create_garden(owner, "Orphan")
    assert not Garden.objects.filter(name="Orphan").exists()


def test_get_garden_visibility(garden, owner, make_user, add_member):
    member = make_user("bob")
    outsider = make_user("eve")
    add_member(garden, member, Role.VIEWER)

    assert get_garden(garden.pk, owner) == garden
    assert get_garden(garden.pk, member) == garden
    assert get_garden(garden.pk, outsider) is None
    assert get_garden(garden.pk, AnonymousUser()) is None
    with pytest.raises(NotFound):
        get_viewable_garden(garden.pk, outsider)


def test_anonymous_never_authorized(garden):
    anonymous = AnonymousUser()
    assert not authorize(anonymous, garden, Capability.EDIT_GARDEN)
    assert not can_view(anonymous, garden)


def test_anonymous_actor_is_unauthenticated(garden):
    anonymous = AnonymousUser()

    with pytest.raises(Unauthenticated):
        create_garden(anonymous, "Nobody's plot")
    with pytest.raises(Unauthenticated):
        require_capability(anonymous, garden, Capability.EDIT_GARDEN)
    with pytest.raises(Unauthenticated):
        leave_garden(garden, anonymous)
    assert not Garden.objects.filter(name="Nobody's plot").exists()


def test_list_gardens_for_owner_and_member(owner, make_user, add_member):
    member = make_user("bob")
    outsider = make_user("eve")
    zinnia = create_garden(owner, "Zinnia patch")
    backyard = create_garden(owner, "Backyard")
    add_member(backyard, member)

    assert list(list_gardens(owner)) == [backyard, zinnia]
    member_gardens = list(list_gardens(member))
    assert member_gardens == [backyard]
    assert member_gardens[0].member_count == 2
    assert list(list_gardens(outsider)) == []


def test_update_garden_requires_edit_capability(garden, make_user, add_member):
    member = make_user("bob")
    admin = make_user("carol")
    add_member(garden, member, Role.MEMBER)
    add_member(garden, admin, Role.ADMIN)

    with pytest.raises(Forbidden):
        update_garden(garden, member, name="Mine now")

    update_garden(garden, admin, name="Front yard", description=None)
    garden.refresh_from_db()
    assert garden.name == "Front yard"
    assert garden.description == "Raised beds"


def test_only_owner_deletes_and_everything_cascades(garden, owner, make_user, add_member):
    admin = make_user("carol")
    add_member(garden, admin, Role.ADMIN)
    location = create_garden_location(garden, owner, name="Bed A")
    create_plant(location, owner, plant_type="Tomato")
    create_invitation(garden, owner, "d@example.com", Role.VIEWER)

    with pytest.raises(Forbidden):
        delete_garden(garden, admin)

    delete_garden(garden, owner)
    assert not Garden.objects.filter(pk=garden.pk).exists()
    assert not GardenLocation.objects.exists()
    assert not GardenMembership.objects.exists()
    assert not Plant.objects.exists()
    assert not GardenInvitation.objects.exists()


def test_location_names_are_unique_per_garden(garden, owner):
    create_garden_location(garden, owner, name="Bed A")

    with pytest.raises(Conflict):
        create_garden_location(garden, owner, name="Bed A")

    other = create_garden(owner, "Allotment")
    assert create_garden_location(other, owner, name="Bed A").garden == other


def test_renaming_location_onto_existing_name_conflicts(garden, owner):
    create_garden_location(garden, owner, name="Bed A")
    bed_b = create_garden_location(garden, owner, name="Bed B")

    with pytest.raises(Conflict):
        update_garden_location(bed_b, owner, name="Bed A")

    update_garden_location(bed_b, owner, name="Bed B", soil_type="loam")
    bed_b.refresh_from_db()
    assert bed_b.soil_type == "loam"


def test_location_writes_require_edit_garden(garden, owner, make_user, add_member):
    member = make_user("bob")
    add_member(garden, member, Role.MEMBER)
    location = create_garden_location(garden, owner, name="Bed A")

    with pytest.raises(Forbidden):
        create_garden_location(garden, member, name="Bed B")
    with pytest.raises(Forbidden):
        update_garden_location(location, member, notes="mulched")
    with pytest.raises(Forbidden):
        delete_garden_location(location, member)


def test_location_reads_hide_from_outsiders(garden, owner, make_user):
    location = create_garden_location(garden, owner, name="Bed A")
    outsider = make_user("eve")

    assert get_garden_location(location.pk, owner) == location
    with pytest.raises(NotFound):
        get_garden_location(location.pk, outsider)


def test_public_garden_summary(garden, owner):
    bed = create_garden_location(garden, owner, name="Bed A")
    create_plant(bed, owner, plant_type="Tomato", variety="Roma")
    create_plant(bed, owner, plant_type="Tomato", variety="Cherry")
    create_plant(bed, owner, plant_type="Basil")

    summary = get_public_garden(garden.pk)

    assert summary["garden"] == garden
    assert summary["locations"] == [bed]
    assert summary["total_plants"] == 3
    assert summary["unique_types"] == 2
    assert summary["member_count"] == 1


def test_public_garden_missing(db):
    with pytest.raises(NotFound):
        get_public_garden(999999)

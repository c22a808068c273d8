import pytest

from apps.gardens.models import GardenMembership
from apps.gardens.roles import Role
from apps.gardens.services import create_garden, create_garden_location, get_membership
from apps.invitations.models import GardenInvitation
from apps.plants.services import create_plant


@pytest.fixture
def member(garden, make_user, add_member):
    user = make_user("bob", "b@example.com")
    add_member(garden, user, Role.MEMBER)
    return user


@pytest.fixture
def outsider(make_user):
    return make_user("eve")


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.content == b"ok"


def test_anonymous_requests_are_rejected(db, api_client):
    response = api_client().get("/api/gardens")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_me_lists_memberships(garden, owner, api_client):
    response = api_client(owner).get("/api/auth/me")

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["username"] == "alice"
    assert user["memberships"] == [
        {
            "garden_id": garden.pk,
            "garden_name": "Backyard",
            "role": "owner",
            "is_owner": True,
            "joined_at": user["memberships"][0]["joined_at"],
        }
    ]


def test_create_and_read_garden(owner, api_client):
    client = api_client(owner)

    created = client.post("/api/gardens", {"name": "  Herb spiral ", "notes": "shady"}, format="json")
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True

    detail = client.get(f"/api/gardens/{body['id']}")
    assert detail.status_code == 200
    data = detail.json()
    assert data["name"] == "Herb spiral"
    assert data["role"] == "owner"
    assert data["member_count"] == 1
    assert data["permissions"]["can_manage_members"] is True

    listing = client.get("/api/gardens")
    assert [g["name"] for g in listing.json()] == ["Herb spiral"]


def test_create_garden_validation_error(owner, api_client):
    response = api_client(owner).post("/api/gardens", {"name": "   "}, format="json")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "name" in body["details"]


def test_read_hides_garden_write_forbids(garden, member, outsider, api_client):
    assert api_client(outsider).get(f"/api/gardens/{garden.pk}").status_code == 404
    assert api_client(member).get(f"/api/gardens/{garden.pk}").status_code == 200

    response = api_client(member).patch(f"/api/gardens/{garden.pk}", {"name": "Taken"}, format="json")
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Insufficient permissions. Required: can_edit_garden"}

    assert api_client(member).delete(f"/api/gardens/{garden.pk}").status_code == 403
    assert api_client(outsider).get("/api/gardens/999999").status_code == 404


def test_owner_updates_and_deletes_garden(garden, owner, api_client):
    client = api_client(owner)

    response = client.patch(f"/api/gardens/{garden.pk}", {"description": "No-dig"}, format="json")
    assert response.status_code == 200
    assert response.json()["garden"]["description"] == "No-dig"

    assert client.delete(f"/api/gardens/{garden.pk}").status_code == 200
    assert client.get(f"/api/gardens/{garden.pk}").status_code == 404


def test_public_garden_needs_no_login(garden, owner, api_client):
    bed = create_garden_location(garden, owner, name="Bed A")
    create_plant(bed, owner, plant_type="Tomato")

    response = api_client().get(f"/api/gardens/{garden.pk}/public")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Backyard"
    assert data["total_plants"] == 1
    assert data["unique_types"] == 1
    assert [loc["name"] for loc in data["locations"]] == ["Bed A"]


def test_leave_garden(garden, owner, member, api_client):
    assert api_client(owner).post(f"/api/gardens/{garden.pk}/leave").status_code == 403
    assert api_client(member).post(f"/api/gardens/{garden.pk}/leave").status_code == 200
    assert get_membership(garden, member) is None


def test_members_endpoint(garden, owner, member, outsider, api_client):
    assert api_client(outsider).get("/api/garden-members", {"garden_id": garden.pk}).status_code == 404
    assert api_client(member).get("/api/garden-members").status_code == 400

    response = api_client(member).get("/api/garden-members", {"gardenId": garden.pk})
    assert response.status_code == 200
    members = response.json()["members"]
    assert [(m["user"]["username"], m["role"]) for m in members] == [("alice", "owner"), ("bob", "member")]
    assert members[1]["permissions"]["can_add_plants"] is True


def test_member_role_changes(garden, owner, member, api_client):
    client = api_client(owner)
    owner_membership = get_membership(garden, owner)
    member_membership = get_membership(garden, member)

    assert client.patch(
        f"/api/garden-members/{owner_membership.pk}", {"role": "admin"}, format="json"
    ).status_code == 403
    assert client.patch(
        f"/api/garden-members/{member_membership.pk}", {"role": "owner"}, format="json"
    ).status_code == 403
    assert client.patch(
        f"/api/garden-members/{member_membership.pk}", {"role": "gardener"}, format="json"
    ).status_code == 400
    assert api_client(member).patch(
        f"/api/garden-members/{member_membership.pk}", {"role": "admin"}, format="json"
    ).status_code == 403

    response = client.patch(f"/api/garden-members/{member_membership.pk}", {"role": "viewer"}, format="json")
    assert response.status_code == 200
    assert response.json()["member"]["permissions"]["can_add_plants"] is False

    assert client.delete(f"/api/garden-members/{member_membership.pk}").status_code == 200
    assert not GardenMembership.objects.filter(pk=member_membership.pk).exists()


def test_location_endpoints(garden, owner, member, outsider, api_client):
    url = f"/api/gardens/{garden.pk}/locations"

    assert api_client(member).post(url, {"name": "Bed A"}, format="json").status_code == 403
    created = api_client(owner).post(url, {"name": "Bed A", "light_conditions": "full_sun"}, format="json")
    assert created.status_code == 201
    api_client(owner).post(url, {"name": "Bed B", "light_conditions": "full_shade"}, format="json")

    duplicate = api_client(owner).post(url, {"name": "Bed A"}, format="json")
    assert duplicate.status_code == 409
    assert duplicate.json()["success"] is False

    sunny = api_client(member).get(url, {"light_conditions": "full_sun"})
    assert [loc["name"] for loc in sunny.json()] == ["Bed A"]
    assert api_client(outsider).get(url).status_code == 404

    detail_url = f"/api/garden-locations/{created.json()['id']}"
    assert api_client(outsider).get(detail_url).status_code == 404
    assert api_client(member).patch(detail_url, {"notes": "x"}, format="json").status_code == 403
    assert api_client(owner).patch(detail_url, {"name": "Bed B"}, format="json").status_code == 409
    assert api_client(owner).delete(detail_url).status_code == 200


def test_plant_endpoints(garden, owner, member, outsider, api_client):
    bed = create_garden_location(garden, owner, name="Bed A")
    url = f"/api/gardens/{garden.pk}/plants"

    created = api_client(member).post(
        url, {"garden_location_id": bed.pk, "plant_type": "Tomato", "variety": "Roma"}, format="json"
    )
    assert created.status_code == 201
    plant_id = created.json()["id"]

    listing = api_client(member).get(url, {"stage": "seed"})
    assert [p["id"] for p in listing.json()] == [plant_id]
    assert api_client(outsider).get(url).status_code == 404

    plant_url = f"/api/plants/{plant_id}"
    assert api_client(outsider).get(plant_url).status_code == 404
    edited = api_client(member).patch(plant_url, {"health_status": "fair"}, format="json")
    assert edited.json()["plant"]["health_status"] == "fair"
    assert api_client(member).delete(plant_url).status_code == 403
    assert api_client(owner).delete(plant_url).status_code == 200


def test_plant_location_must_belong_to_garden(garden, owner, api_client):
    other = create_garden_location(create_garden(owner, "Allotment"), owner, name="Plot")

    response = api_client(owner).post(
        f"/api/gardens/{garden.pk}/plants", {"garden_location_id": other.pk, "plant_type": "Leek"}, format="json"
    )

    assert response.status_code == 400
    assert "garden_location_id" in response.json()["details"]


def test_invitation_endpoints(garden, owner, make_user, api_client, mailoutbox):
    invitee = make_user("bob", "b@example.com")

    rejected = api_client(owner).post(
        "/api/garden-invitations",
        {"gardenId": garden.pk, "gardenLocationId": 3, "email": "b@example.com", "role": "member"},
        format="json",
    )
    assert rejected.status_code == 400

    created = api_client(owner).post(
        "/api/garden-invitations",
        {"gardenId": garden.pk, "email": "b@example.com", "role": "member"},
        format="json",
    )
    assert created.status_code == 201
    invitation_id = created.json()["invitation_id"]
    assert len(mailoutbox) == 1

    pending = api_client(invitee).get("/api/garden-invitations").json()["invitations"]
    assert [(i["id"], i["garden_name"], i["invited_by_username"]) for i in pending] == [
        (invitation_id, "Backyard", "alice")
    ]

    url = f"/api/garden-invitations/{invitation_id}"
    assert api_client(invitee).patch(url, {"action": "maybe"}, format="json").status_code == 400
    assert api_client(owner).patch(url, {"action": "accept"}, format="json").status_code == 403
    for _ in range(2):
        accepted = api_client(invitee).patch(url, {"action": "accept"}, format="json")
        assert accepted.status_code == 200
        assert accepted.json()["member"]["role"] == "member"
    assert GardenMembership.objects.filter(garden=garden, user=invitee).count() == 1

    declined = api_client(invitee).patch(url, {"action": "decline"}, format="json")
    assert declined.status_code == 409
    assert api_client(invitee).patch("/api/garden-invitations/999999", {"action": "accept"}, format="json").status_code == 404


def test_invitation_requires_invite_capability(garden, member, api_client):
    response = api_client(member).post(
        "/api/garden-invitations",
        {"garden_id": garden.pk, "email": "x@example.com", "role": "viewer"},
        format="json",
    )
    assert response.status_code == 403


def test_access_request_endpoints(garden, owner, member, make_user, api_client):
    requester = make_user("ron")

    created = api_client(requester).post("/api/garden-access-request", {"garden_id": garden.pk}, format="json")
    assert created.status_code == 201
    assert api_client(member).post(
        "/api/garden-access-request", {"garden_id": garden.pk}, format="json"
    ).status_code == 409

    assert api_client(requester).get("/api/garden-access-request", {"garden_id": garden.pk}).status_code == 404
    assert api_client(member).get("/api/garden-access-request", {"garden_id": garden.pk}).status_code == 403
    requests = api_client(owner).get("/api/garden-access-request", {"garden_id": garden.pk}).json()["requests"]
    assert [r["kind"] for r in requests] == ["access_request"]

    approved = api_client(owner).patch(
        f"/api/garden-invitations/{requests[0]['id']}", {"action": "accept"}, format="json"
    )
    assert approved.status_code == 200
    assert approved.json()["member"]["user"]["username"] == "ron"


def test_backyard_end_to_end(make_user, api_client):
    alice = make_user("alice", "a@example.com")
    bob = make_user("bob", "b@example.com")
    as_alice = api_client(alice)
    as_bob = api_client(bob)

    garden_id = as_alice.post("/api/gardens", {"name": "Backyard"}, format="json").json()["id"]
    as_alice.post(
        "/api/garden-invitations",
        {"garden_id": garden_id, "email": "b@example.com", "role": "member"},
        format="json",
    )
    invitation_id = as_bob.get("/api/garden-invitations").json()["invitations"][0]["id"]
    assert as_bob.patch(
        f"/api/garden-invitations/{invitation_id}", {"action": "accept"}, format="json"
    ).status_code == 200

    members = as_alice.get("/api/garden-members", {"garden_id": garden_id}).json()["members"]
    assert [(m["user"]["username"], m["role"]) for m in members] == [("alice", "owner"), ("bob", "member")]

    location = as_bob.post(f"/api/gardens/{garden_id}/locations", {"name": "Bed A"}, format="json")
    assert location.status_code == 403
    assert as_bob.get(f"/api/gardens/{garden_id}").status_code == 200
    assert GardenInvitation.objects.get(pk=invitation_id).status == GardenInvitation.Status.ACCEPTED


def test_outsider_writes_are_forbidden_not_hidden(garden, owner, outsider, api_client):
    bed = create_garden_location(garden, owner, name="Bed A")
    plant = create_plant(bed, owner, plant_type="Tomato")
    client = api_client(outsider)

    location_url = f"/api/garden-locations/{bed.pk}"
    plant_url = f"/api/plants/{plant.pk}"
    assert client.patch(location_url, {"notes": "mine"}, format="json").status_code == 403
    assert client.delete(location_url).status_code == 403
    assert client.patch(plant_url, {"notes": "mine"}, format="json").status_code == 403
    assert client.delete(plant_url).status_code == 403

    # Reads stay hidden and missing rows are still 404.
    assert client.get(location_url).status_code == 404
    assert client.get(plant_url).status_code == 404
    assert client.patch("/api/garden-locations/999999", {"notes": "x"}, format="json").status_code == 404
    assert client.delete("/api/plants/999999").status_code == 404

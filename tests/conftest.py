import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from apps.gardens.models import GardenMembership
from apps.gardens.roles import Role
from apps.gardens.services import create_garden


@pytest.fixture
def make_user(db):
    User = get_user_model()
    created = []

    def _make(username=None, email=None, **extra):
        username = username or f"user{len(created) + 1}"
        if email is None:
            email = f"{username}@example.com"
        user = User.objects.create_user(username=username, email=email, password="pw-12345", **extra)
        created.append(user)
        return user

    return _make


@pytest.fixture
def owner(make_user):
    return make_user("alice", "a@example.com")


@pytest.fixture
def garden(owner):
    return create_garden(owner, "Backyard", description="Raised beds")


@pytest.fixture
def add_member():
    def _add(garden, user, role=Role.MEMBER, joined_at=None):
        return GardenMembership.objects.create(
            garden=garden,
            user=user,
            role=role,
            invited_by=garden.owner,
            joined_at=joined_at or timezone.now(),
        )

    return _add


@pytest.fixture
def api_client():
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client

    return _client

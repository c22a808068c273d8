"""
Role to capability table for garden memberships.

Memberships only store their role; capabilities are always derived from this
table when read, so a change here applies to every existing membership.
"""

from types import MappingProxyType
from typing import Dict

from django.core.exceptions import ImproperlyConfigured
from django.db import models

from apps.common.exceptions import InvalidRole


class Role(models.TextChoices):
    OWNER = "owner", "Owner"
    ADMIN = "admin", "Admin"
    MEMBER = "member", "Member"
    VIEWER = "viewer", "Viewer"


# Roles that can be handed out through invitations or role changes.
ASSIGNABLE_ROLES = (Role.ADMIN, Role.MEMBER, Role.VIEWER)


class Capability(models.TextChoices):
    EDIT_GARDEN = "can_edit_garden", "Edit garden"
    ADD_PLANTS = "can_add_plants", "Add plants"
    EDIT_PLANTS = "can_edit_plants", "Edit plants"
    DELETE_PLANTS = "can_delete_plants", "Delete plants"
    INVITE_USERS = "can_invite_users", "Invite users"
    MANAGE_MEMBERS = "can_manage_members", "Manage members"


def _row(*granted: Capability) -> MappingProxyType:
    return MappingProxyType({cap.value: cap in granted for cap in Capability})


ROLE_PERMISSIONS = MappingProxyType(
    {
        Role.OWNER: _row(*Capability),
        Role.ADMIN: _row(*Capability),
        Role.MEMBER: _row(Capability.ADD_PLANTS, Capability.EDIT_PLANTS),
        Role.VIEWER: _row(),
    }
)

_missing = set(Role) - set(ROLE_PERMISSIONS)
if _missing:
    raise ImproperlyConfigured(f"No permissions defined for roles: {sorted(_missing)}")


def parse_role(role) -> Role:
    try:
        return Role(role)
    except ValueError as exc:
        raise InvalidRole(f"Unrecognized role: {role!r}") from exc


def permissions_for(role) -> Dict[str, bool]:
    return dict(ROLE_PERMISSIONS[parse_role(role)])


def role_grants(role, capability) -> bool:
    capability = Capability(capability)
    return ROLE_PERMISSIONS[parse_role(role)][capability.value]

import logging
import smtplib
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.common.exceptions import Conflict, Forbidden, InvalidRole, InvalidState, NotFound
from apps.gardens.models import Garden, GardenMembership
from apps.gardens.roles import ASSIGNABLE_ROLES, Capability, Role, parse_role, permissions_for
from apps.gardens.services import (
    authorize,
    get_existing_garden,
    get_membership,
    is_owner,
    require_authenticated,
    require_capability,
)
from apps.invitations.models import GardenInvitation

logger = logging.getLogger(__name__)

LOCATION_KEYS = ("garden_location_id", "gardenLocationId")


def invitation_expiry():
    return timezone.now() + timedelta(days=settings.GARDEN_INVITATION_TTL_DAYS)


def reject_location_scope(data) -> None:
    """Invitations always target a whole garden."""
    if hasattr(data, "get") and any(data.get(key) not in (None, "") for key in LOCATION_KEYS):
        raise ValidationError(
            {"garden_location_id": "Invitations are garden-scoped; location invitations are not supported"}
        )


def _normalize_email(email) -> str:
    return (email or "").strip().lower()


def _find_user_by_email(email: str):
    if not email:
        return None
    return get_user_model().objects.filter(email__iexact=email).first()


# --- Notifications ------------------------------------------------------------


def describe_role(role) -> str:
    granted = [
        Capability(name).label.lower()
        for name, allowed in permissions_for(role).items()
        if allowed
    ]
    if not granted:
        return "view all plants and garden locations"
    return "view the garden, " + ", ".join(granted)


def garden_url(garden: Garden) -> str:
    return f"{settings.GARDEN_APP_BASE_URL.rstrip('/')}/garden/{garden.pk}"


def send_invitation_email(invitation: GardenInvitation) -> bool:
    garden = invitation.garden
    inviter = invitation.invited_by
    role_label = Role(invitation.role).label
    intro = invitation.message or (
        f'{inviter.get_username()} has invited you to collaborate on their garden "{garden.name}" '
        f"as a {invitation.role}."
    )
    body = "\n".join(
        [
            intro,
            "",
            f"Garden: {garden.name}",
            f"Your role: {role_label}",
            f"What you can do: {describe_role(invitation.role)}",
            "",
            f"View the garden: {garden_url(garden)}",
            "Sign in or create an account with this email address, then accept the invitation "
            "from your dashboard.",
            "",
            f"This invitation expires on {invitation.expires_at:%Y-%m-%d}.",
        ]
    )
    try:
        send_mail(
            subject="Garden collaboration invitation",
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invitation.invited_user_email],
        )
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning(
            "Failed to send invitation %s email to %s: %s",
            invitation.pk,
            invitation.invited_user_email,
            exc,
        )
        return False
    return True


# --- Invitations --------------------------------------------------------------


def create_invitation(garden: Garden, inviter, email, role, message: str = "") -> GardenInvitation:
    require_capability(
        inviter,
        garden,
        Capability.INVITE_USERS,
        "You do not have permission to invite users to this garden",
    )
    role = parse_role(role)
    if role not in ASSIGNABLE_ROLES:
        raise InvalidRole("The owner role cannot be granted by invitation")
    email = _normalize_email(email)
    if not email:
        raise ValidationError({"email": "A valid email is required"})

    invited_user = _find_user_by_email(email)
    if invited_user is not None and (
        is_owner(invited_user, garden) or get_membership(garden, invited_user) is not None
    ):
        raise Conflict("User is already a member of this garden")

    invitation = GardenInvitation.objects.create(
        garden=garden,
        kind=GardenInvitation.Kind.INVITATION,
        invited_by=inviter,
        invited_user_email=email,
        invited_user=invited_user,
        role=role,
        status=GardenInvitation.Status.PENDING,
        message=message or "",
        expires_at=invitation_expiry(),
    )
    logger.info(
        "Invitation %s to garden %s created by user %s for %s as %s",
        invitation.pk,
        garden.pk,
        inviter.pk,
        email,
        role,
    )
    send_invitation_email(invitation)
    return invitation


def list_pending_invitations_for_user(email):
    email = _normalize_email(email)
    if not email:
        return GardenInvitation.objects.none()
    return (
        GardenInvitation.objects.select_related("garden", "invited_by")
        .filter(
            kind=GardenInvitation.Kind.INVITATION,
            status=GardenInvitation.Status.PENDING,
            expires_at__gt=timezone.now(),
            invited_user_email__iexact=email,
        )
        .order_by("-created_at", "-id")
    )


def _lock_invitation(invitation_id) -> GardenInvitation:
    invitation = GardenInvitation.objects.select_for_update().filter(pk=invitation_id).first()
    if invitation is None:
        raise NotFound("Invitation not found")
    return invitation


def _resolve_beneficiary(invitation: GardenInvitation, actor):
    """Return the user who receives the membership, after checking the actor may respond."""
    if invitation.is_access_request:
        if not authorize(actor, invitation.garden, Capability.MANAGE_MEMBERS):
            raise Forbidden("Only garden managers can respond to access requests")
        if invitation.invited_user is None:
            raise InvalidState("The requesting account no longer exists")
        return invitation.invited_user
    actor_email = _normalize_email(getattr(actor, "email", ""))
    if not actor_email or actor_email != _normalize_email(invitation.invited_user_email):
        raise Forbidden("This invitation was sent to a different email address")
    return actor


def _provision_membership(invitation: GardenInvitation, user, invited_by) -> GardenMembership:
    membership = get_membership(invitation.garden, user)
    if membership is not None:
        return membership
    try:
        with transaction.atomic():
            return GardenMembership.objects.create(
                garden=invitation.garden,
                user=user,
                role=invitation.role,
                invited_by=invited_by,
                joined_at=timezone.now(),
            )
    except IntegrityError:
        # Another request inserted the same (garden, user) pair first.
        logger.info(
            "Membership for user %s in garden %s already exists; invitation %s accepted idempotently",
            user.pk,
            invitation.garden_id,
            invitation.pk,
        )
        return GardenMembership.objects.get(garden=invitation.garden, user=user)


def accept_invitation(invitation_id, user) -> GardenMembership:
    """
    Accept an invitation or approve an access request.

    Accepting twice, or accepting when the beneficiary already belongs to the
    garden, never creates a second membership. An expired invitation is stored
    as ``expired`` before the error is raised.
    """
    with transaction.atomic():
        invitation = _lock_invitation(invitation_id)
        beneficiary = _resolve_beneficiary(invitation, user)
        existing = get_membership(invitation.garden, beneficiary)

        if invitation.status == GardenInvitation.Status.ACCEPTED and existing is not None:
            return existing
        if invitation.status != GardenInvitation.Status.PENDING:
            raise InvalidState(f"Invitation is already {invitation.status}")

        expired = invitation.is_expired
        if expired:
            invitation.status = GardenInvitation.Status.EXPIRED
            invitation.save(update_fields=["status", "updated_at"])
        else:
            invited_by = user if invitation.is_access_request else invitation.invited_by
            membership = existing or _provision_membership(invitation, beneficiary, invited_by)
            invitation.status = GardenInvitation.Status.ACCEPTED
            invitation.invited_user = beneficiary
            invitation.save(update_fields=["status", "invited_user", "updated_at"])

    if expired:
        logger.info("Invitation %s expired before acceptance", invitation.pk)
        raise InvalidState("Invitation has expired")
    logger.info(
        "Invitation %s accepted: user %s joined garden %s as %s",
        invitation.pk,
        beneficiary.pk,
        invitation.garden_id,
        membership.role,
    )
    return membership


def decline_invitation(invitation_id, user) -> GardenInvitation:
    with transaction.atomic():
        invitation = _lock_invitation(invitation_id)
        _resolve_beneficiary(invitation, user)

        if invitation.status == GardenInvitation.Status.DECLINED:
            return invitation
        if invitation.status != GardenInvitation.Status.PENDING:
            raise InvalidState(f"Invitation is already {invitation.status}")

        expired = invitation.is_expired
        invitation.status = (
            GardenInvitation.Status.EXPIRED if expired else GardenInvitation.Status.DECLINED
        )
        invitation.save(update_fields=["status", "updated_at"])

    if expired:
        raise InvalidState("Invitation has expired")
    logger.info("Invitation %s declined by user %s", invitation.pk, user.pk)
    return invitation


# --- Access requests ----------------------------------------------------------


def request_access(garden_id, requester, message: str = "") -> GardenInvitation:
    require_authenticated(requester)
    garden = get_existing_garden(garden_id)
    if is_owner(requester, garden):
        raise Conflict("You are the owner of this garden")
    if get_membership(garden, requester) is not None:
        raise Conflict("You are already a member of this garden")
    email = _normalize_email(requester.email)
    if not email:
        raise ValidationError({"email": "An email address is required to request access"})

    pending = _pending_access_requests(garden).filter(invited_user=requester).first()
    if pending is not None:
        return pending

    invitation = GardenInvitation.objects.create(
        garden=garden,
        kind=GardenInvitation.Kind.ACCESS_REQUEST,
        invited_by=requester,
        invited_user_email=email,
        invited_user=requester,
        role=Role.MEMBER,
        status=GardenInvitation.Status.PENDING,
        message=message
        or (
            f'{requester.get_username()} has requested access to collaborate on your garden '
            f'"{garden.name}". They found your garden through a shared link.'
        ),
        expires_at=invitation_expiry(),
    )
    logger.info("User %s requested access to garden %s (request %s)", requester.pk, garden.pk, invitation.pk)
    return invitation


def _pending_access_requests(garden: Garden):
    return GardenInvitation.objects.filter(
        garden=garden,
        kind=GardenInvitation.Kind.ACCESS_REQUEST,
        status=GardenInvitation.Status.PENDING,
        expires_at__gt=timezone.now(),
    )


def list_access_requests(garden: Garden, actor):
    require_capability(actor, garden, Capability.MANAGE_MEMBERS)
    return (
        _pending_access_requests(garden)
        .select_related("garden", "invited_by", "invited_user")
        .order_by("-created_at", "-id")
    )

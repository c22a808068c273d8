from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.common.models import TimeStampedModel
from apps.gardens.models import Garden
from apps.gardens.roles import ASSIGNABLE_ROLES, Role


class GardenInvitation(TimeStampedModel):
    """
    Pending offer of a garden membership.

    Owners and inviters address invitations by email. Access requests reuse the
    same row with ``kind=access_request``, where the requester is both inviter
    and beneficiary and a member manager approves.
    """

    class Kind(models.TextChoices):
        INVITATION = "invitation", "Invitation"
        ACCESS_REQUEST = "access_request", "Access request"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        DECLINED = "declined", "Declined"
        EXPIRED = "expired", "Expired"

    garden = models.ForeignKey(
        Garden,
        on_delete=models.CASCADE,
        related_name="invitations",
    )
    kind = models.CharField(
        max_length=20,
        choices=Kind.choices,
        default=Kind.INVITATION,
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="garden_invitations_sent",
    )
    invited_user_email = models.EmailField(db_index=True)
    invited_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="garden_invitations_received",
    )
    role = models.CharField(
        max_length=20,
        choices=[(role.value, role.label) for role in ASSIGNABLE_ROLES],
        default=Role.MEMBER,
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    message = models.TextField(blank=True)
    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.invited_user_email} -> {self.garden_id} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return timezone.now() > self.expires_at

    @property
    def is_access_request(self) -> bool:
        return self.kind == self.Kind.ACCESS_REQUEST

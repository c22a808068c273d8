from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models.functions import Lower


class User(AbstractUser):
    email = models.EmailField(unique=True, null=True, blank=True)

    class Meta(AbstractUser.Meta):
        constraints = [
            models.UniqueConstraint(Lower("email"), name="unique_user_email_ci"),
        ]

    def __str__(self):
        return f"{self.username} ({self.email})" if self.email else self.username

    def save(self, *args, **kwargs):
        # Invitations address users by email, so store one canonical form.
        self.email = (self.email or "").strip().lower() or None
        super().save(*args, **kwargs)

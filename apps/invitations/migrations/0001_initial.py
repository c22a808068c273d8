from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("gardens", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="GardenInvitation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("kind", models.CharField(choices=[("invitation", "Invitation"), ("access_request", "Access request")], default="invitation", max_length=20)),
                ("invited_user_email", models.EmailField(db_index=True, max_length=254)),
                ("role", models.CharField(choices=[("admin", "Admin"), ("member", "Member"), ("viewer", "Viewer")], default="member", max_length=20)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("accepted", "Accepted"), ("declined", "Declined"), ("expired", "Expired")], db_index=True, default="pending", max_length=20)),
                ("message", models.TextField(blank=True)),
                ("expires_at", models.DateTimeField(db_index=True)),
                ("garden", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="invitations", to="gardens.garden")),
                ("invited_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="garden_invitations_sent", to=settings.AUTH_USER_MODEL)),
                ("invited_user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="garden_invitations_received", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]

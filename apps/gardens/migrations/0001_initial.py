from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Garden",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="owned_gardens", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["name", "id"],
                "indexes": [models.Index(fields=["name"], name="garden_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="GardenLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("size", models.CharField(blank=True, max_length=100)),
                ("soil_type", models.CharField(blank=True, max_length=100)),
                ("light_conditions", models.CharField(blank=True, choices=[("full_sun", "Full sun"), ("partial_sun", "Partial sun"), ("partial_shade", "Partial shade"), ("full_shade", "Full shade")], max_length=20)),
                ("irrigation_type", models.CharField(choices=[("manual", "Manual"), ("drip", "Drip"), ("sprinkler", "Sprinkler"), ("none", "None")], default="manual", max_length=20)),
                ("microclimate_notes", models.TextField(blank=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_garden_locations", to=settings.AUTH_USER_MODEL)),
                ("garden", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="locations", to="gardens.garden")),
            ],
            options={
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="GardenMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("role", models.CharField(choices=[("owner", "Owner"), ("admin", "Admin"), ("member", "Member"), ("viewer", "Viewer")], db_index=True, default="member", max_length=20)),
                ("joined_at", models.DateTimeField(blank=True, null=True)),
                ("garden", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="gardens.garden")),
                ("invited_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="garden_members_invited", to=settings.AUTH_USER_MODEL)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="garden_memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["garden_id", "user_id"],
            },
        ),
        migrations.AddConstraint(
            model_name="gardenlocation",
            constraint=models.UniqueConstraint(fields=("garden", "name"), name="unique_garden_location_name"),
        ),
        migrations.AddConstraint(
            model_name="gardenmembership",
            constraint=models.UniqueConstraint(fields=("garden", "user"), name="unique_garden_user"),
        ),
    ]

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("gardens", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Plant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("plant_type", models.CharField(db_index=True, max_length=100)),
                ("variety", models.CharField(blank=True, max_length=100)),
                ("planting_date", models.DateField(default=django.utils.timezone.localdate)),
                ("notes", models.TextField(blank=True)),
                ("health_status", models.CharField(choices=[("excellent", "Excellent"), ("good", "Good"), ("fair", "Fair"), ("poor", "Poor")], db_index=True, default="good", max_length=20)),
                ("stage", models.CharField(choices=[("seed", "Seed"), ("seedling", "Seedling"), ("vegetative", "Vegetative"), ("flowering", "Flowering"), ("fruiting", "Fruiting"), ("harvest", "Harvest")], db_index=True, default="seed", max_length=20)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_plants", to=settings.AUTH_USER_MODEL)),
                ("garden_location", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="plants", to="gardens.gardenlocation")),
            ],
            options={
                "ordering": ["-planting_date", "-id"],
            },
        ),
    ]

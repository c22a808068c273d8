from django.apps import AppConfig


class GardensConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.gardens"
    verbose_name = "Gardens"

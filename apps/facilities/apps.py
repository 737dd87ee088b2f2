from django.apps import AppConfig  # type: ignore


class FacilitiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.facilities"
    label = "facilities"

from django.apps import AppConfig  # type: ignore


class ClubsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.clubs"
    label = "clubs"

"""Celery application for ClubFlow.

Tasks are discovered from the ``tasks`` modules of the installed apps;
settings are read from Django under the ``CELERY_`` prefix.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("clubflow")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

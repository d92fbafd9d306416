"""Celery configuration.

The periodic schedule lives in ``CELERY_BEAT_SCHEDULE`` (settings) and is
loaded into django-celery-beat's database scheduler.
"""
import os

from celery import Celery

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.dev"),
)

app = Celery("indana")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

"""Django app configuration for uploads app."""

from django.apps import AppConfig


class UploadsConfig(AppConfig):
    """Configuration for uploads app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'quickfile.apps.uploads'
    label = 'uploads'
    verbose_name = 'Uploads'

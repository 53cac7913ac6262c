"""Core Django settings."""

from typing import Final

from quickfile.settings.components import BASE_DIR, config  # noqa: F401

SECRET_KEY = config(
    'DJANGO_SECRET_KEY',
    default='quickfile-insecure-development-key',
)

DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)

INSTALLED_APPS: Final = [
    'quickfile.apps.uploads',
]

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Expiry arithmetic is done with aware datetimes in UTC
USE_TZ = True
TIME_ZONE = 'UTC'

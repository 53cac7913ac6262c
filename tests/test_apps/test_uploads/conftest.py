"""Shared fixtures for uploads app tests."""

import io
import random
from collections.abc import Callable
from datetime import timedelta

import pytest

from quickfile.apps.uploads.logic.quota_operations import FileInsertMeta


@pytest.fixture(autouse=True)
def upload_policy(settings):
    """Pin upload policy so tests do not depend on the environment.

    Returns:
        The pytest-django settings fixture.
    """
    settings.UPLOAD_ACCOUNTS = {'testuser': {}, 'otheruser': {}}
    settings.UPLOAD_TOTAL_LIMIT = 1_000_000_000
    settings.UPLOAD_DEFAULT_BYTE_LIMIT = 100_000_000
    settings.UPLOAD_DEFAULT_FILE_LIMIT = 1000
    settings.UPLOAD_DEFAULT_MIN_EXPIRE = timedelta(minutes=5)
    settings.UPLOAD_DEFAULT_MAX_EXPIRE = timedelta(hours=72)
    settings.UPLOAD_DEFAULT_EXPIRE = timedelta(hours=24)
    settings.UPLOAD_SIZE_LIMIT = 100_000_000
    settings.UPLOAD_MAX_TAGS = 10
    settings.UPLOAD_MAX_FILENAME_LENGTH = 256
    settings.UPLOAD_ALLOWED_MIME_TYPES = []
    settings.UPLOAD_FORBIDDEN_MIME_TYPES = []
    settings.UPLOAD_RESULTS_PER_PAGE = 100
    settings.UPLOAD_VACUUM_THRESHOLD = 0
    return settings


@pytest.fixture
def account():
    """Name of a configured account.

    Returns:
        Account name.
    """
    return 'testuser'


@pytest.fixture
def insert_meta(account):
    """Metadata for a typical upload.

    Returns:
        FileInsertMeta for a PNG with three tags, expiring in an hour.
    """
    return FileInsertMeta(
        filename='whatever.png',
        account=account,
        tags=('a', 'tag', 'yeah'),
        expire=timedelta(hours=1),
    )


@pytest.fixture
def payload() -> Callable[[int, int], bytes]:
    """Factory for deterministic pseudo-random content.

    Returns:
        Function taking (length, seed) and returning bytes.
    """
    def factory(length: int, seed: int = 0) -> bytes:
        return random.Random(seed).randbytes(length)

    return factory


@pytest.fixture
def stream(payload) -> Callable[[int, int], io.BytesIO]:
    """Factory for streams over deterministic content.

    Returns:
        Function taking (length, seed) and returning a BytesIO.
    """
    def factory(length: int, seed: int = 0) -> io.BytesIO:
        return io.BytesIO(payload(length, seed))

    return factory

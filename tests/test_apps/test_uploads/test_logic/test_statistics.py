"""Tests for file statistics."""

import dataclasses

import pytest

from quickfile.apps.uploads.logic.file_operations import expire_now, insert_file
from quickfile.apps.uploads.logic.statistics import (
    FileStatistics,
    get_page_count,
    get_statistics,
    get_system_remaining_bytes,
)


@pytest.mark.django_db
def test_get_statistics_empty():
    """Test statistics of an empty store."""
    assert get_statistics() == FileStatistics(count=0, total_size=0)


@pytest.mark.django_db
def test_get_statistics(insert_meta, stream):
    """Test statistics sum live files across accounts."""
    insert_file(insert_meta, stream(100))
    insert_file(insert_meta, stream(50))
    insert_file(dataclasses.replace(insert_meta, account='otheruser'), stream(7))

    assert get_statistics() == FileStatistics(count=3, total_size=157)
    assert get_statistics('testuser') == FileStatistics(count=2, total_size=150)
    assert get_statistics('otheruser') == FileStatistics(count=1, total_size=7)
    assert get_statistics('nobody') == FileStatistics(count=0, total_size=0)


@pytest.mark.django_db
def test_get_statistics_excludes_expired(insert_meta, stream):
    """Test expired files are not counted."""
    kept = insert_file(insert_meta, stream(100))
    gone = insert_file(insert_meta, stream(50))

    expire_now(gone.pk)

    assert get_statistics() == FileStatistics(count=1, total_size=kept.length)


@pytest.mark.django_db
def test_get_system_remaining_bytes(insert_meta, stream, settings):
    """Test remaining bytes under the system limit."""
    settings.UPLOAD_TOTAL_LIMIT = 1000
    insert_file(insert_meta, stream(300))

    assert get_system_remaining_bytes() == 700


@pytest.mark.parametrize(
    ('count', 'per_page', 'expected'),
    [
        (0, 10, 0),
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (250, 100, 3),
    ],
)
def test_get_page_count(count, per_page, expected):
    """Test page count rounds up."""
    assert get_page_count(count, per_page) == expected


def test_get_page_count_invalid():
    """Test page size must be positive."""
    with pytest.raises(ValueError, match='positive'):
        get_page_count(10, 0)

"""Aggregate statistics over live files."""

import math
from dataclasses import dataclass
from typing import final

from django.conf import settings
from django.db.models import Count, Sum

from quickfile.apps.uploads.models import FileRecord


@final
@dataclass(frozen=True, slots=True)
class FileStatistics:
    """Number and total size of live files."""

    count: int
    total_size: int


def get_statistics(account: str | None = None) -> FileStatistics:
    """Count live files and sum their lengths.

    Expired files are excluded even if their rows still exist.

    Args:
        account: Restrict to this account; None for all accounts.

    Returns:
        FileStatistics for the selection.
    """
    queryset = FileRecord.objects.all()
    if account is not None:
        queryset = queryset.filter(account=account)

    totals = queryset.aggregate(
        count=Count('id'),
        total_size=Sum('length', default=0),
    )
    return FileStatistics(count=totals['count'], total_size=totals['total_size'])


def get_system_remaining_bytes() -> int:
    """Bytes left under the system-wide upload limit.

    Returns:
        ``UPLOAD_TOTAL_LIMIT`` minus live bytes (may be negative).
    """
    return settings.UPLOAD_TOTAL_LIMIT - get_statistics().total_size


def get_page_count(count: int, per_page: int) -> int:
    """Number of pages needed to list ``count`` files.

    Args:
        count: Total number of files.
        per_page: Page size.

    Returns:
        ceil(count / per_page).

    Raises:
        ValueError: If per_page is not positive.
    """
    if per_page <= 0:
        raise ValueError(f'Page size must be positive, got {per_page}')
    return math.ceil(count / per_page)

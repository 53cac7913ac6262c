"""Expiry cleanup and space reclamation.

Cleanup runs in two phases. Expired metadata rows are deleted first,
which is the visibility cut; chunks and tags left without a parent are
deleted afterwards. Reclaimed pages stay inside the store until a
vacuum compacts it, which only happens when the slack is worth it.
"""

import logging
import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, final

from django.db import DEFAULT_DB_ALIAS, DatabaseError
from django.db.models import Exists, OuterRef
from django.utils import timezone

from quickfile.apps.uploads.infrastructure.database import (
    compact_store,
    get_store_size,
)
from quickfile.apps.uploads.logic.statistics import get_statistics
from quickfile.apps.uploads.models import Chunk, FileRecord, Tag

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class CleanupStatistics:
    """Rows deleted by one cleanup."""

    deleted_files: int
    deleted_chunks: int
    deleted_tags: int


@final
@dataclass(frozen=True, slots=True)
class VacuumStatistics:
    """Outcome of one vacuum attempt. Sizes are in bytes."""

    vacuumed: bool
    old_size: int
    new_size: int

    @property
    def saved(self) -> int:
        return self.old_size - self.new_size


@final
@dataclass(frozen=True, slots=True)
class MaintenanceReport:
    """Results of one maintenance cycle."""

    cleanup: CleanupStatistics
    vacuum: VacuumStatistics


def count_expired(now: datetime | None = None) -> int:
    """Count files that the next cleanup would delete."""
    return FileRecord.all_objects.expired(now).count()


def cleanup_expired(now: datetime | None = None) -> CleanupStatistics:
    """Delete expired files, then their orphaned chunks and tags.

    Running it again with nothing newly expired deletes nothing.

    Args:
        now: Reference time, defaults to the current time.

    Returns:
        Number of files, chunks and tags deleted.
    """
    now = now or timezone.now()

    deleted_files, _ = FileRecord.all_objects.expired(now).delete()

    has_parent = Exists(FileRecord.all_objects.filter(pk=OuterRef('file_id')))
    deleted_chunks, _ = Chunk.objects.filter(~has_parent).delete()
    deleted_tags, _ = Tag.objects.filter(~has_parent).delete()

    statistics = CleanupStatistics(
        deleted_files=deleted_files,
        deleted_chunks=deleted_chunks,
        deleted_tags=deleted_tags,
    )
    logger.info(
        'Cleanup deleted %d files, %d chunks, %d tags',
        deleted_files,
        deleted_chunks,
        deleted_tags,
    )
    return statistics


def try_vacuum(threshold: int, using: str = DEFAULT_DB_ALIAS) -> VacuumStatistics:
    """Compact the store if enough space can be reclaimed.

    Slack is the raw store size minus the bytes of live files. The
    compaction blocks all other database access while it runs, so it is
    skipped unless the slack exceeds ``threshold``.

    Args:
        threshold: Minimum slack in bytes; 0 or less disables vacuum.
        using: Database alias.

    Returns:
        Whether the store was compacted and its size before and after.
    """
    if threshold <= 0:
        return VacuumStatistics(vacuumed=False, old_size=0, new_size=0)

    old_size = get_store_size(using)
    slack = old_size - get_statistics().total_size
    if slack <= threshold:
        logger.debug('Vacuum skipped: slack %d <= threshold %d', slack, threshold)
        return VacuumStatistics(vacuumed=False, old_size=old_size, new_size=old_size)

    compact_store(using)
    new_size = get_store_size(using)
    logger.info('Vacuum reclaimed %d bytes (%d -> %d)', old_size - new_size, old_size, new_size)
    return VacuumStatistics(vacuumed=True, old_size=old_size, new_size=new_size)


@final
class MaintenanceWorker:
    """Runs cleanup and vacuum so they never interleave.

    The worker owns one lock, shared by every operation it runs. Create
    a single worker per process, or inject the same lock into several.
    """

    def __init__(
        self,
        vacuum_threshold: int,
        lock: AbstractContextManager[Any] | None = None,
    ) -> None:
        """Initialize MaintenanceWorker.

        Args:
            vacuum_threshold: Slack in bytes above which to vacuum.
            lock: Lock to share with other workers; a new one if None.
        """
        self.vacuum_threshold = vacuum_threshold
        self._lock = lock if lock is not None else threading.Lock()

    def cleanup(self) -> CleanupStatistics:
        with self._lock:
            return cleanup_expired()

    def vacuum(self) -> VacuumStatistics:
        with self._lock:
            return try_vacuum(self.vacuum_threshold)

    def run_cycle(self) -> MaintenanceReport:
        """Clean up expired files, then try to vacuum.

        Vacuum measures the store right after cleanup, under the same
        lock, so it sees a stable post-cleanup state.

        Returns:
            MaintenanceReport with both results.

        Raises:
            DatabaseError: If either step fails.
        """
        with self._lock:
            cleanup = cleanup_expired()
            vacuum = try_vacuum(self.vacuum_threshold)
        return MaintenanceReport(cleanup=cleanup, vacuum=vacuum)

    def run_forever(self, interval: float, stop_event: threading.Event) -> None:
        """Run a cycle now, then every ``interval`` seconds until stopped.

        A failed cycle is logged and retried on the next tick.

        Args:
            interval: Seconds between cycles.
            stop_event: Set to stop the loop.
        """
        logger.info('Maintenance started, every %s seconds', interval)
        while not stop_event.is_set():
            try:
                self.run_cycle()
            except DatabaseError:
                logger.exception(
                    'Maintenance cycle failed, retrying in %s seconds',
                    interval,
                )
            stop_event.wait(interval)
        logger.info('Maintenance stopped')

"""Management command to delete expired files and compact the store."""

import threading
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand

from quickfile.apps.uploads.logic.maintenance import (
    MaintenanceReport,
    MaintenanceWorker,
    count_expired,
)
from quickfile.apps.uploads.logic.schema_operations import verify_schema


class Command(BaseCommand):
    """Run expiry cleanup and vacuum, once or periodically."""

    help = 'Delete expired files and vacuum the store when worthwhile'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--once',
            action='store_true',
            help='Run a single cycle and exit',
        )
        parser.add_argument(
            '--interval',
            type=float,
            default=settings.UPLOAD_MAINTENANCE_INTERVAL,
            help='Seconds between cycles (default: %(default)s)',
        )
        parser.add_argument(
            '--vacuum-threshold',
            type=int,
            default=settings.UPLOAD_VACUUM_THRESHOLD,
            help='Reclaimable bytes needed to vacuum, 0 disables (default: %(default)s)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many files would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the maintenance command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        verify_schema()

        if options['dry_run']:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would delete {count_expired()} expired files',
                ),
            )
            return

        worker = MaintenanceWorker(vacuum_threshold=options['vacuum_threshold'])
        if options['once']:
            self._write_report(worker.run_cycle())
            return

        stop_event = threading.Event()
        self.stdout.write(
            f'Running maintenance every {options["interval"]} seconds',
        )
        try:
            worker.run_forever(options['interval'], stop_event)
        except KeyboardInterrupt:
            stop_event.set()
            self.stdout.write('Maintenance stopped')

    def _write_report(self, report: MaintenanceReport) -> None:
        cleanup = report.cleanup
        self.stdout.write(
            self.style.SUCCESS(
                f'Deleted {cleanup.deleted_files} files, '
                f'{cleanup.deleted_chunks} chunks, '
                f'{cleanup.deleted_tags} tags',
            ),
        )

        vacuum = report.vacuum
        if vacuum.vacuumed:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Vacuumed store: {vacuum.old_size} -> {vacuum.new_size} bytes',
                ),
            )
        else:
            self.stdout.write('Vacuum skipped')

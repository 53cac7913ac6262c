"""Management command to create the storage schema."""

from typing import Any

from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS

from quickfile.apps.uploads.logic.schema_operations import (
    ensure_schema,
    verify_schema,
)


class Command(BaseCommand):
    """Create tables and indexes, then verify the schema version."""

    help = 'Create the storage schema if missing and verify its version'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--database',
            default=DEFAULT_DB_ALIAS,
            help=f'Database alias (default: {DEFAULT_DB_ALIAS})',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        using = options['database']
        ensure_schema(using)
        version = verify_schema(using)
        self.stdout.write(
            self.style.SUCCESS(f'Schema version {version} ready'),
        )

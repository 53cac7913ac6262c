"""Creating and verifying the database layout."""

import logging

from django.core.management import call_command
from django.db import DEFAULT_DB_ALIAS, connections
from django.db.migrations.executor import MigrationExecutor

from quickfile.apps.uploads.exceptions import SchemaVersionMismatchError
from quickfile.apps.uploads.models import SCHEMA_VERSION, SchemaVersion

logger = logging.getLogger(__name__)


def ensure_schema(using: str = DEFAULT_DB_ALIAS) -> SchemaVersion:
    """Create tables and indexes if needed and record the schema version.

    Safe to call on every start: migrations are applied only when some
    are pending, and the version row is inserted only if missing.

    Args:
        using: Database alias.

    Returns:
        The stored SchemaVersion row.
    """
    executor = MigrationExecutor(connections[using])
    plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
    if plan:
        logger.info('Applying %d pending migrations', len(plan))
        call_command('migrate', database=using, interactive=False, verbosity=0)

    version, created = SchemaVersion.objects.using(using).get_or_create(
        pk=SchemaVersion.SINGLETON_ID,
        defaults={'version': SCHEMA_VERSION},
    )
    if created:
        logger.info('Recorded schema version %d', version.version)
    return version


def verify_schema(using: str = DEFAULT_DB_ALIAS) -> int:
    """Check the stored schema version against this code.

    Args:
        using: Database alias.

    Returns:
        The verified version.

    Raises:
        SchemaVersionMismatchError: If the version differs or is missing.
    """
    found = SchemaVersion.objects.using(using).filter(
        pk=SchemaVersion.SINGLETON_ID,
    ).values_list('version', flat=True).first()

    if found != SCHEMA_VERSION:
        logger.critical(
            'Schema version mismatch: database %s, code %d',
            found,
            SCHEMA_VERSION,
        )
        raise SchemaVersionMismatchError(expected=SCHEMA_VERSION, found=found)
    return found

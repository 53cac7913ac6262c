"""Database engine specifics: raw store size and compaction.

Only SQLite and PostgreSQL are supported. Both operations talk to the
engine directly because Django's ORM has no portable equivalent.
"""

import logging

from django.db import DEFAULT_DB_ALIAS, NotSupportedError, connections

logger = logging.getLogger(__name__)

_SQLITE = 'sqlite'
_POSTGRESQL = 'postgresql'


def get_store_size(using: str = DEFAULT_DB_ALIAS) -> int:
    """Get the raw size of the store in bytes.

    Includes pages freed by deletes that have not been compacted yet.

    Args:
        using: Database alias.

    Returns:
        Store size in bytes.

    Raises:
        NotSupportedError: If the database engine is not supported.
    """
    connection = connections[using]
    with connection.cursor() as cursor:
        if connection.vendor == _SQLITE:
            cursor.execute('PRAGMA page_count')
            page_count = cursor.fetchone()[0]
            cursor.execute('PRAGMA page_size')
            page_size = cursor.fetchone()[0]
            return page_count * page_size
        if connection.vendor == _POSTGRESQL:
            cursor.execute('SELECT pg_database_size(current_database())')
            return cursor.fetchone()[0]
    raise NotSupportedError(
        f'Store size not supported for {connection.vendor}',
    )


def compact_store(using: str = DEFAULT_DB_ALIAS) -> None:
    """Rewrite the store to give freed pages back to the filesystem.

    Blocks every other access to the database while it runs and must
    be called outside of a transaction.

    Args:
        using: Database alias.

    Raises:
        NotSupportedError: If the database engine is not supported.
        DatabaseError: If the engine refuses to compact.
    """
    connection = connections[using]
    if connection.vendor == _SQLITE:
        statement = 'VACUUM'
    elif connection.vendor == _POSTGRESQL:
        statement = 'VACUUM FULL'
    else:
        raise NotSupportedError(
            f'Compaction not supported for {connection.vendor}',
        )

    try:
        logger.info('Compacting store: %s', statement)
        with connection.cursor() as cursor:
            cursor.execute(statement)
    except Exception:
        logger.exception('Failed to compact store')
        raise

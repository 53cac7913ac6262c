"""Exceptions for uploads app."""

from enum import StrEnum

from django.core.exceptions import ImproperlyConfigured, ValidationError


class QuotaResource(StrEnum):
    """Limited resource named in a QuotaExceededError."""

    ACCOUNT_FILES = 'account files'
    ACCOUNT_BYTES = 'account bytes'
    SYSTEM_BYTES = 'system bytes'
    FILE_BYTES = 'file bytes'


class QuotaExceededError(Exception):
    """Raised when an upload would exceed a file-count or byte quota."""

    def __init__(
        self,
        resource: QuotaResource,
        limit: int,
        used: int,
        required: int = 0,
    ) -> None:
        """Initialize QuotaExceededError.

        Args:
            resource: Which quota was hit.
            limit: Total limit for the resource.
            used: Amount already in use.
            required: Amount the operation needed. Zero when the quota
                was already exhausted before the operation started.
        """
        self.resource = resource
        self.limit = limit
        self.used = used
        self.required = required

        available = max(0, limit - used)
        if required:
            message = (
                f'Quota exceeded for {resource}: need {required}, '
                f'only {available} available (limit: {limit}, used: {used})'
            )
        else:
            message = (
                f'Quota exceeded for {resource}: '
                f'{used} used of {limit}'
            )
        super().__init__(message)


class InvalidUploadError(ValidationError):
    """Raised when an upload request fails static validation.

    The ``code`` attribute identifies the failed check, e.g.
    ``too_many_tags`` or ``mime_type_forbidden``.
    """


class StorageIOError(Exception):
    """Raised when the underlying store fails during a write."""


class SchemaVersionMismatchError(ImproperlyConfigured):
    """Stored schema version differs from the one this code expects.

    Fatal: the process must not continue against this database.
    """

    def __init__(self, expected: int, found: int | None) -> None:
        """Initialize SchemaVersionMismatchError.

        Args:
            expected: Version required by the code.
            found: Version recorded in the database, None if missing.
        """
        self.expected = expected
        self.found = found
        super().__init__(
            f'Schema version mismatch: database has {found}, '
            f'code expects {expected}',
        )

"""Database models for uploads app."""

from datetime import datetime
from typing import ClassVar, Final, final, override

from django.db import models
from django.utils import timezone

# Every chunk holds exactly this many bytes, except a file's last chunk
CHUNK_SIZE: Final = 65536

# Bump together with a migration whenever the on-disk layout changes
SCHEMA_VERSION: Final = 1

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 1024
_ACCOUNT_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_BUCKET_MAX_LENGTH: Final = 255


class FileRecordQuerySet(models.QuerySet['FileRecord']):
    """Queries over file metadata split by expiry."""

    def live(self, now: datetime | None = None) -> 'FileRecordQuerySet':
        """Files that never expire or expire after ``now``."""
        now = now or timezone.now()
        return self.filter(
            models.Q(expire__isnull=True) | models.Q(expire__gt=now),
        )

    def expired(self, now: datetime | None = None) -> 'FileRecordQuerySet':
        """Files whose expiry is at or before ``now``."""
        now = now or timezone.now()
        return self.filter(expire__isnull=False, expire__lte=now)


class LiveFileManager(models.Manager['FileRecord']):
    """Default manager: expired files are logically absent."""

    @override
    def get_queryset(self) -> FileRecordQuerySet:
        return FileRecordQuerySet(self.model, using=self._db).live()


@final
class FileRecord(models.Model):
    """Metadata for one uploaded file.

    The bytes live in ``Chunk`` rows. ``length`` is written as zero when
    the record is created and set to the real total once every chunk
    has been stored, in the same transaction.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    account = models.CharField(max_length=_ACCOUNT_MAX_LENGTH)

    mime = models.CharField(max_length=_MIME_TYPE_MAX_LENGTH)

    created = models.DateTimeField(default=timezone.now)

    expire = models.DateTimeField(
        null=True,
        blank=True,
        help_text='Null means the file never expires',
    )

    bucket = models.CharField(
        max_length=_BUCKET_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Unlisted bucket; empty for the public listing',
    )

    length = models.BigIntegerField(default=0)

    objects = LiveFileManager()
    all_objects = models.Manager.from_queryset(FileRecordQuerySet)()

    class Meta:
        """Model metadata."""

        db_table = 'meta'
        verbose_name = 'File record'  # type: ignore[mutable-override]
        verbose_name_plural = 'File records'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['expire', 'bucket', 'account'],
                name='meta_expire_bucket_account_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.account}:{self.name} ({self.pk})'

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the file is past its expiry.

        Args:
            now: Reference time, defaults to the current time.

        Returns:
            True if the file has an expiry at or before ``now``.
        """
        if self.expire is None:
            return False
        return self.expire <= (now or timezone.now())

    @property
    def tag_names(self) -> frozenset[str]:
        """Distinct tags of this file. Order is not significant."""
        return frozenset(tag.name for tag in self.tags.all())


@final
class Tag(models.Model):
    """Free-text tag attached to a file.

    The reference to the file is not enforced by the database: tags of
    deleted files stay behind until expiry cleanup removes them.
    """

    file = models.ForeignKey(
        FileRecord,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='tags',
    )

    name = models.TextField()

    class Meta:
        """Model metadata."""

        db_table = 'tags'
        verbose_name = 'Tag'  # type: ignore[mutable-override]
        verbose_name_plural = 'Tags'  # type: ignore[mutable-override]

        indexes: ClassVar[list[models.Index]] = [
            models.Index(fields=['name'], name='tags_name_idx'),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.file_id}:{self.name}'


@final
class Chunk(models.Model):
    """One slice of a file's bytes.

    Chunks are written once, in ascending ``position`` order, and never
    rewritten. Like tags, they may briefly outlive their file.
    """

    file = models.ForeignKey(
        FileRecord,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='chunks',
    )

    position = models.PositiveIntegerField()

    length = models.PositiveIntegerField()

    data = models.BinaryField()

    class Meta:
        """Model metadata."""

        db_table = 'chunks'
        verbose_name = 'Chunk'  # type: ignore[mutable-override]
        verbose_name_plural = 'Chunks'  # type: ignore[mutable-override]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['file', 'position'],
                name='chunks_file_position_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.file_id}#{self.position} ({self.length} bytes)'


@final
class SchemaVersion(models.Model):
    """Singleton row recording the layout version of the database."""

    SINGLETON_ID: ClassVar[int] = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID)

    version = models.PositiveIntegerField()

    class Meta:
        """Model metadata."""

        db_table = 'schema_version'
        verbose_name = 'Schema version'  # type: ignore[mutable-override]
        verbose_name_plural = 'Schema version'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'schema v{self.version}'

"""Business logic for file operations."""

import itertools
import logging
from collections.abc import Iterable
from typing import BinaryIO

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from quickfile.apps.uploads.exceptions import (
    QuotaExceededError,
    QuotaResource,
    StorageIOError,
)
from quickfile.apps.uploads.infrastructure.chunk_reader import ChunkReader
from quickfile.apps.uploads.logic.quota_operations import (
    FileInsertMeta,
    precheck_upload,
)
from quickfile.apps.uploads.logic.statistics import get_system_remaining_bytes
from quickfile.apps.uploads.models import CHUNK_SIZE, Chunk, FileRecord, Tag

logger = logging.getLogger(__name__)


def insert_file(meta: FileInsertMeta, stream: BinaryIO) -> FileRecord:
    """Store a byte stream as a new file.

    Everything happens in one transaction: the precheck is repeated
    against the current state, the record is created with a zero
    length, tags are added, the stream is written chunk by chunk and
    finally the real length is recorded. Quotas are enforced after each
    chunk is read, so the stream is never buffered whole and its size
    need not be known in advance. Any failure rolls back every row.

    Args:
        meta: Upload metadata.
        stream: Binary file-like object with the content.

    Returns:
        The committed FileRecord, with tags prefetched.

    Raises:
        InvalidUploadError: If the upload fails validation.
        QuotaExceededError: If a quota is hit before or while streaming.
        StorageIOError: If the database fails.
    """
    try:
        with transaction.atomic():
            precheck = precheck_upload(meta)
            system_remaining = get_system_remaining_bytes()

            now = timezone.now()
            record = FileRecord.objects.create(
                name=meta.filename,
                account=meta.account,
                mime=precheck.mime_type,
                created=now,
                expire=now + meta.effective_expire,
                bucket=meta.bucket,
                length=0,
            )
            _insert_tags(record, meta.distinct_tags)
            length = _insert_chunks(
                record,
                stream,
                user_remaining=precheck.remaining_bytes,
                system_remaining=system_remaining,
            )
            FileRecord.all_objects.filter(pk=record.pk).update(length=length)
    except DatabaseError as error:
        logger.exception('Failed to store file %s', meta.filename)
        raise StorageIOError(f'Failed to store {meta.filename}') from error

    logger.info(
        'Account %s stored file %s (ID: %d, %d bytes)',
        meta.account,
        meta.filename,
        record.pk,
        length,
    )
    return get_file(record.pk)


def _insert_tags(record: FileRecord, tags: Iterable[str]) -> None:
    Tag.objects.bulk_create(
        Tag(file=record, name=tag) for tag in tags
    )


def _insert_chunks(
    record: FileRecord,
    stream: BinaryIO,
    user_remaining: int,
    system_remaining: int,
) -> int:
    """Write the stream as chunk rows; return the total length."""
    limits = (
        (QuotaResource.ACCOUNT_BYTES, user_remaining),
        (QuotaResource.SYSTEM_BYTES, system_remaining),
        (QuotaResource.FILE_BYTES, settings.UPLOAD_SIZE_LIMIT),
    )
    total = 0
    for position in itertools.count():
        block = _read_block(stream, CHUNK_SIZE)
        if not block:
            break

        total += len(block)
        for resource, remaining in limits:
            if total > remaining:
                logger.warning(
                    'Out of %s while storing %s for account %s',
                    resource,
                    record.name,
                    record.account,
                )
                raise QuotaExceededError(
                    resource=resource,
                    limit=remaining,
                    used=0,
                    required=total,
                )

        Chunk.objects.create(
            file=record,
            position=position,
            length=len(block),
            data=block,
        )
        logger.debug('Stored chunk %d of file %d', position, record.pk)

        if len(block) < CHUNK_SIZE:
            break
    return total


def _read_block(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes unless the stream ends first.

    A single ``read`` on a pipe or socket may return fewer bytes than
    asked for; this keeps reading so every block but the last is full.
    """
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        part = stream.read(remaining)
        if not part:
            break
        parts.append(part)
        remaining -= len(part)
    return b''.join(parts)


def get_file(file_id: int) -> FileRecord:
    """Get a file record by id.

    Expired files are returned until cleanup deletes them; callers
    check ``is_expired()``.

    Args:
        file_id: ID of the file.

    Returns:
        FileRecord with tags prefetched.

    Raises:
        FileRecord.DoesNotExist: If the file does not exist.
    """
    return FileRecord.all_objects.prefetch_related('tags').get(pk=file_id)


def get_files(file_ids: Iterable[int]) -> dict[int, FileRecord]:
    """Look up several files at once.

    Args:
        file_ids: IDs to look up.

    Returns:
        Mapping of id to FileRecord. Unknown ids are left out.
    """
    return FileRecord.all_objects.prefetch_related('tags').in_bulk(list(file_ids))


def list_page(
    page: int,
    per_page: int | None = None,
    bucket: str = '',
    account: str | None = None,
) -> list[int]:
    """List live file ids, newest first.

    Args:
        page: Zero-based page index.
        per_page: Page size, defaults to ``UPLOAD_RESULTS_PER_PAGE``.
        bucket: Bucket to list; empty string for the public listing.
        account: Restrict to this account; None for all accounts.

    Returns:
        File ids on the requested page.

    Raises:
        ValueError: If page is negative or per_page is not positive.
    """
    if per_page is None:
        per_page = settings.UPLOAD_RESULTS_PER_PAGE
    if page < 0 or per_page <= 0:
        raise ValueError(f'Invalid page {page} (size {per_page})')

    queryset = FileRecord.objects.filter(bucket=bucket)
    if account is not None:
        queryset = queryset.filter(account=account)

    start = page * per_page
    return list(
        queryset.order_by('-id').values_list('id', flat=True)[start:start + per_page],
    )


def expire_now(file_id: int) -> None:
    """Soft-delete a file by setting its expiry to its creation time.

    The file disappears from listings and statistics at once; its rows
    are removed by the next cleanup.

    Args:
        file_id: ID of the file.

    Raises:
        FileRecord.DoesNotExist: If the file does not exist.
    """
    updated = FileRecord.all_objects.filter(pk=file_id).update(
        expire=F('created'),
    )
    if not updated:
        raise FileRecord.DoesNotExist(f'File {file_id} not found')

    logger.info('File expired: ID=%d', file_id)


def open_reader(file_id: int) -> ChunkReader:
    """Open a seekable reader over a live file.

    Args:
        file_id: ID of the file.

    Returns:
        ChunkReader positioned at the start of the file.

    Raises:
        FileRecord.DoesNotExist: If the file does not exist or expired.
    """
    record = FileRecord.objects.only('id', 'length').get(pk=file_id)
    logger.debug('Opening reader for file %d (%d bytes)', record.pk, record.length)
    return ChunkReader(record.pk, record.length)

"""Upload precheck: static validation and quota checks."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import NamedTuple, NoReturn, final

from django.conf import settings

from quickfile.apps.uploads.exceptions import (
    InvalidUploadError,
    QuotaExceededError,
    QuotaResource,
)
from quickfile.apps.uploads.infrastructure.metadata import (
    get_file_extension,
    guess_mime_type,
    matches_any_prefix,
)
from quickfile.apps.uploads.logic.accounts import (
    AccountLimits,
    get_account_limits,
    get_default_expire,
)
from quickfile.apps.uploads.logic.statistics import get_statistics

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class FileInsertMeta:
    """Everything about an upload except its bytes.

    ``expire`` of None means the configured default expiry. An empty
    ``bucket`` puts the file in the public listing.
    """

    filename: str
    account: str
    tags: Sequence[str] = field(default_factory=tuple)
    expire: timedelta | None = None
    bucket: str = ''

    @property
    def distinct_tags(self) -> frozenset[str]:
        """Tags with duplicates collapsed."""
        return frozenset(self.tags)

    @property
    def effective_expire(self) -> timedelta:
        """Requested expiry, or the default when none was given."""
        if self.expire is None:
            return get_default_expire()
        return self.expire


class PrecheckResult(NamedTuple):
    """Outcome of a successful precheck."""

    mime_type: str
    remaining_bytes: int


def precheck_upload(meta: FileInsertMeta) -> PrecheckResult:
    """Check an upload for everything possible before storing bytes.

    Checks run in a fixed order and stop at the first failure:
    account, tag count, filename length, file count, byte usage,
    expiry bounds, extension and MIME type.

    Args:
        meta: Upload metadata.

    Returns:
        Resolved MIME type and the account's remaining byte quota.

    Raises:
        InvalidUploadError: If the request itself is invalid.
        QuotaExceededError: If the account is already at a limit.
    """
    limits = get_account_limits(meta.account)
    if limits is None:
        _reject(meta, 'Not allowed to upload', 'unknown_account')

    tag_count = len(meta.distinct_tags)
    if tag_count > settings.UPLOAD_MAX_TAGS:
        _reject(
            meta,
            f'Too many tags: {tag_count} (max {settings.UPLOAD_MAX_TAGS})',
            'too_many_tags',
        )

    _check_filename(meta)
    used_bytes = _check_account_usage(meta.account, limits)
    _check_expire(meta, limits)
    mime_type = _resolve_mime_type(meta)

    return PrecheckResult(
        mime_type=mime_type,
        remaining_bytes=limits.byte_limit - used_bytes,
    )


def _check_filename(meta: FileInsertMeta) -> None:
    if not meta.filename:
        _reject(meta, 'Must provide filename', 'filename_required')

    max_length = settings.UPLOAD_MAX_FILENAME_LENGTH
    if len(meta.filename) > max_length:
        _reject(
            meta,
            f'Filename too long: {len(meta.filename)} (max {max_length})',
            'filename_too_long',
        )


def _check_account_usage(account: str, limits: AccountLimits) -> int:
    """Check file count and byte usage; return bytes in use."""
    statistics = get_statistics(account)

    if statistics.count >= limits.file_limit:
        logger.warning(
            'File limit reached for account %s: %d/%d',
            account,
            statistics.count,
            limits.file_limit,
        )
        raise QuotaExceededError(
            resource=QuotaResource.ACCOUNT_FILES,
            limit=limits.file_limit,
            used=statistics.count,
        )

    if statistics.total_size >= limits.byte_limit:
        logger.warning(
            'Byte limit reached for account %s: %d/%d',
            account,
            statistics.total_size,
            limits.byte_limit,
        )
        raise QuotaExceededError(
            resource=QuotaResource.ACCOUNT_BYTES,
            limit=limits.byte_limit,
            used=statistics.total_size,
        )

    return statistics.total_size


def _check_expire(meta: FileInsertMeta, limits: AccountLimits) -> None:
    expire = meta.effective_expire
    if not limits.min_expire <= expire <= limits.max_expire:
        _reject(
            meta,
            f'Invalid expire duration {expire}: must be between '
            f'{limits.min_expire} and {limits.max_expire}',
            'invalid_expire',
        )


def _resolve_mime_type(meta: FileInsertMeta) -> str:
    extension = get_file_extension(meta.filename)
    if not extension:
        extension = settings.UPLOAD_FALLBACK_EXTENSION

    mime_type = guess_mime_type(extension, settings.UPLOAD_MIME_REDIRECTS)
    if not mime_type:
        _reject(meta, f'Unknown mimetype for {extension}', 'unknown_mime_type')

    allowed = settings.UPLOAD_ALLOWED_MIME_TYPES
    if allowed and not matches_any_prefix(mime_type, allowed):
        _reject(meta, f'Mimetype not allowed: {mime_type}', 'mime_type_not_allowed')

    if matches_any_prefix(mime_type, settings.UPLOAD_FORBIDDEN_MIME_TYPES):
        _reject(meta, f'Mimetype forbidden: {mime_type}', 'mime_type_forbidden')

    return mime_type


def _reject(meta: FileInsertMeta, message: str, code: str) -> NoReturn:
    logger.warning(
        'Upload rejected for account %s (%s): %s',
        meta.account,
        meta.filename,
        message,
    )
    raise InvalidUploadError(message, code=code)

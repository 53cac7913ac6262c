"""Upload policy: accounts, quotas, expiry bounds and MIME rules."""

from datetime import timedelta
from typing import Any

from decouple import Csv

from quickfile.settings.components import config

# Accounts allowed to upload. Values hold optional per-account overrides:
# byte_limit, file_limit, min_expire, max_expire.
UPLOAD_ACCOUNTS: dict[str, dict[str, Any]] = {
    account: {}
    for account in config('UPLOAD_ACCOUNTS', cast=Csv(), default='')
}

# System-wide limit on live bytes (not the size of the database file)
UPLOAD_TOTAL_LIMIT = config('UPLOAD_TOTAL_LIMIT', cast=int, default=1_000_000_000)

# Per-account defaults
UPLOAD_DEFAULT_BYTE_LIMIT = config(
    'UPLOAD_DEFAULT_BYTE_LIMIT',
    cast=int,
    default=100_000_000,
)
UPLOAD_DEFAULT_FILE_LIMIT = config('UPLOAD_DEFAULT_FILE_LIMIT', cast=int, default=1000)
UPLOAD_DEFAULT_MIN_EXPIRE = timedelta(minutes=5)
UPLOAD_DEFAULT_MAX_EXPIRE = timedelta(hours=72)
UPLOAD_DEFAULT_EXPIRE = timedelta(hours=24)

# Single file limit
UPLOAD_SIZE_LIMIT = config('UPLOAD_SIZE_LIMIT', cast=int, default=100_000_000)

UPLOAD_MAX_TAGS = config('UPLOAD_MAX_TAGS', cast=int, default=10)
UPLOAD_MAX_FILENAME_LENGTH = config('UPLOAD_MAX_FILENAME_LENGTH', cast=int, default=256)

# MIME handling. Redirect keys are resolved types ('' = unknown type).
UPLOAD_FALLBACK_EXTENSION = '.bin'
UPLOAD_MIME_REDIRECTS = {
    '': 'application/octet-stream',
    'text/html': 'text/plain',
}
UPLOAD_ALLOWED_MIME_TYPES = config('UPLOAD_ALLOWED_MIME_TYPES', cast=Csv(), default='')
UPLOAD_FORBIDDEN_MIME_TYPES = config('UPLOAD_FORBIDDEN_MIME_TYPES', cast=Csv(), default='')

UPLOAD_RESULTS_PER_PAGE = config('UPLOAD_RESULTS_PER_PAGE', cast=int, default=100)

# Maintenance: compact when reclaimable space exceeds this many bytes (0 = never)
UPLOAD_VACUUM_THRESHOLD = config('UPLOAD_VACUUM_THRESHOLD', cast=int, default=0)
UPLOAD_MAINTENANCE_INTERVAL = config(
    'UPLOAD_MAINTENANCE_INTERVAL',
    cast=int,
    default=3600,
)

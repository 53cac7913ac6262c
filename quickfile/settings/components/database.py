"""Database settings.

Chunks, metadata and tags all live in one SQLite file. Transactions
start with ``BEGIN IMMEDIATE`` so concurrent uploads queue on the write
lock (up to ``timeout`` seconds) instead of failing on lock upgrade.
WAL journalling lets readers stream files while an upload commits.
"""

from quickfile.settings.components import BASE_DIR, config

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': config(
            'QUICKFILE_DATABASE_PATH',
            default=str(BASE_DIR.joinpath('uploads.db')),
        ),
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': config('QUICKFILE_DATABASE_TIMEOUT', cast=int, default=20),
            'init_command': 'PRAGMA journal_mode=WAL; PRAGMA synchronous=NORMAL;',
        },
        'TEST': {
            # File based so that threads get independent connections
            'NAME': str(BASE_DIR.joinpath('.test-uploads.db')),
        },
    },
}

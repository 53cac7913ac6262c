"""Logging configuration."""

from quickfile.settings.components import config

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'console': {
            'format': '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
        },
    },
    'loggers': {
        'quickfile': {
            'handlers': ['console'],
            'level': config('QUICKFILE_LOG_LEVEL', default='INFO'),
            'propagate': True,
        },
    },
}

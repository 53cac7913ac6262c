"""Django settings for the quickfile project.

Settings are split into components and assembled with
``django-split-settings``. Every tunable is read through
``decouple.config`` so it can be overridden from ``config/.env``
or the process environment.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/database.py',
    'components/logging.py',
    'components/uploads.py',
)

"""Settings for the test suite.

The registry starts empty; tests that need the demo data reset it with
``load_seed=True``. Mail goes to Django's in-memory outbox and SMS is
disabled unless a test configures a gateway.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

HALL_BOOKING = {**HALL_BOOKING, 'LOAD_SEED_DATA': False}  # noqa: F405

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

SMS_GATEWAY_URL = ''

STORAGES = {
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

"""Submission core configuration parameters."""

from os import environ
import warnings

from kombu.serialization import register

from .serializer import dumps, loads

register('ejson', dumps, loads,
         content_type='application/x-ejson',
         content_encoding='utf-8')

JOURNAL_NAME = environ.get('JOURNAL_NAME',
                           'International Journal of Social and Data Sciences')
"""Full name of the journal, used in notifications."""

JOURNAL_ABBREVIATION = environ.get('JOURNAL_ABBREVIATION', 'IJSDS')

LOGLEVEL = int(environ.get('LOGLEVEL', '20'))
"""
Logging verbosity.

See `https://docs.python.org/3/library/logging.html#levels`_.
"""

JWT_SECRET = environ.get('JWT_SECRET')
"""Secret key for verifying authentication JWTs issued by the platform."""

if not JWT_SECRET:
    warnings.warn('JWT_SECRET is not set; authn/z may not work correctly!')

CORE_VERSION = "0.1.0"
"""Version tag recorded on stored events."""

ENABLE_CALLBACKS = bool(int(environ.get('ENABLE_CALLBACKS', '1')))
"""Enable/disable the :func:`Event.bind` feature."""

ENABLE_ASYNC = bool(int(environ.get('ENABLE_ASYNC', '0')))
"""
Enable/disable dispatching of callbacks to the worker.

If disabled, callbacks decorated with :func:`.tasks.is_async` execute
in-thread.
"""

# --- DATABASE CONFIGURATION ---

SUBMISSION_DATABASE_URI = environ.get('SUBMISSION_DATABASE_URI', 'sqlite:///')
"""Full database URI for the submission store."""

SQLALCHEMY_DATABASE_URI = SUBMISSION_DATABASE_URI
"""Full database URI for the submission store."""

SQLALCHEMY_TRACK_MODIFICATIONS = False
"""Track modifications feature should always be disabled."""

# --- WORKER CONFIGURATION ---

BROKER_URL = environ.get('SUBMISSION_BROKER_URL', 'redis://localhost/0')
"""Celery broker for asynchronous callbacks."""

RESULT_BACKEND = environ.get('SUBMISSION_RESULT_BACKEND', BROKER_URL)
"""Celery result backend."""

QUEUE_NAME = environ.get('SUBMISSION_QUEUE_NAME', 'submission-worker')
"""Default queue for callback tasks."""

PREFETCH_MULTIPLIER = int(environ.get('SUBMISSION_WORKER_PREFETCH_MULTIPLIER',
                                      '1'))
TASK_ACKS_LATE = bool(int(environ.get('SUBMISSION_TASK_ACKS_LATE', '1')))

REMINDER_SCHEDULE_HOURS = int(environ.get('REMINDER_SCHEDULE_HOURS', '24'))
"""How often the worker checks for upcoming review deadlines."""

# --- PLATFORM FUNCTIONS ---
#
# Email dispatch, Zenodo DOI registration and index submission are performed
# by serverless handlers on the hosted platform.

FUNCTIONS_ENDPOINT = environ.get('FUNCTIONS_ENDPOINT',
                                 'http://localhost:54321/functions/v1/')
"""Base URL for the platform's serverless handlers."""

FUNCTIONS_VERIFY = bool(int(environ.get('FUNCTIONS_VERIFY', '1')))
"""Enable/disable SSL certificate verification for the handlers."""

if FUNCTIONS_ENDPOINT.startswith('https') and not FUNCTIONS_VERIFY:
    warnings.warn('Certificate verification for platform functions is'
                  ' disabled; this should not be disabled in production.')

FUNCTIONS_SERVICE_KEY = environ.get('FUNCTIONS_SERVICE_KEY', '')
"""Service-role key presented to the platform handlers."""

if not FUNCTIONS_SERVICE_KEY:
    warnings.warn('FUNCTIONS_SERVICE_KEY is not set; calls to platform'
                  ' functions will be rejected.')

AUTO_REGISTER_DOI = bool(int(environ.get('AUTO_REGISTER_DOI', '1')))
"""Register a Zenodo DOI automatically when a submission is accepted."""

# --- EMAIL NOTIFICATIONS ---

EMAIL_ENABLED = bool(int(environ.get('EMAIL_ENABLED', '1')))
"""Enable/disable sending e-mail. Default is enabled (True)."""

EDITORIAL_EMAIL = environ.get('EDITORIAL_EMAIL', 'editor@ijsds.org')
"""Contact address for the editorial office."""

SIGNIN_URL = environ.get('SIGNIN_URL', 'https://ijsds.org/auth/signin')
"""Where reviewers and authors log in to act on a notification."""

# --- REVIEW POLICY ---

REVIEW_PERIOD_DAYS = int(environ.get('REVIEW_PERIOD_DAYS', '14'))
"""Days a reviewer is given from invitation to deadline."""

AUTO_ASSIGN_REVIEWERS = int(environ.get('AUTO_ASSIGN_REVIEWERS', '3'))
"""Number of reviewers invited by automatic assignment."""

"""Configuration for the editorial API service."""

import os

JWT_SECRET = os.environ.get('JWT_SECRET', 'foo')
"""Shared secret for HS256 tokens issued by the platform's auth service."""

SUBMISSION_DATABASE_URI = os.environ.get('SUBMISSION_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_DATABASE_URI = SUBMISSION_DATABASE_URI
SQLALCHEMY_TRACK_MODIFICATIONS = False

ENABLE_CALLBACKS = int(os.environ.get('ENABLE_CALLBACKS', '1'))
ENABLE_ASYNC = int(os.environ.get('ENABLE_ASYNC', '0'))

AUTO_REGISTER_DOI = int(os.environ.get('AUTO_REGISTER_DOI', '1'))
EMAIL_ENABLED = int(os.environ.get('EMAIL_ENABLED', '1'))

FUNCTIONS_ENDPOINT = os.environ.get('FUNCTIONS_ENDPOINT',
                                    'http://localhost:54321/functions/v1/')
FUNCTIONS_VERIFY = int(os.environ.get('FUNCTIONS_VERIFY', '1'))
FUNCTIONS_SERVICE_KEY = os.environ.get('FUNCTIONS_SERVICE_KEY', '')

REVIEW_PERIOD_DAYS = int(os.environ.get('REVIEW_PERIOD_DAYS', '14'))
AUTO_ASSIGN_REVIEWERS = int(os.environ.get('AUTO_ASSIGN_REVIEWERS', '3'))
MAX_SUGGESTIONS = int(os.environ.get('MAX_SUGGESTIONS', '10'))
"""Reviewer suggestions returned when the client does not ask for more."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', '40'))

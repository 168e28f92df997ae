"""Helpers shared by the editorial controllers."""

from datetime import datetime
from http import HTTPStatus as status
from typing import Any, Dict, List, Optional, Tuple

from dateutil import parser
from pytz import UTC
from werkzeug.exceptions import BadRequest, NotFound, InternalServerError

import ijsds.submission as ev
from ijsds.submission import logging
from ijsds.submission.domain.agent import Agent
from ijsds.submission.validation import ValidationError, errors_by_field

logger = logging.getLogger(__name__)

Response = Tuple[dict, int, dict]
Agents = Dict[str, Optional[Agent]]


def load(submission_id: int) -> ev.Submission:
    """Load a submission, or raise :class:`.NotFound`."""
    try:
        submission, _ = ev.load(submission_id)
    except ev.NoSuchSubmission as e:
        raise NotFound(f'No submission found with id {submission_id}') from e
    return submission


def save(*events: ev.Event, submission_id: Optional[int] = None) \
        -> ev.Submission:
    """Commit events, translating core exceptions to HTTP errors."""
    try:
        submission, _ = ev.save(*events, submission_id=submission_id)
    except ev.NoSuchSubmission as e:
        raise NotFound(f'No submission found with id {submission_id}') from e
    except ev.InvalidEvent as e:
        raise BadRequest(str(e)) from e
    except ev.SaveError as e:
        logger.error('Problem interacting with database: (%s) %s',
                     str(type(e)), str(e))
        raise InternalServerError('Problem interacting with database') from e
    return submission


def invalid(errors: List[ValidationError]) -> Response:
    """Describe validation errors, field by field."""
    body = {'reason': 'Invalid data', 'errors': errors_by_field(errors)}
    return body, status.BAD_REQUEST, {}


def require_data(data: Optional[dict]) -> dict:
    if not data:
        raise BadRequest('No data in request body')
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data


def parse_datetime(value: Any, name: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from a request; naive means UTC."""
    if value is None or value == '':
        return None
    try:
        parsed = parser.parse(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise BadRequest(f'{name} must be an ISO-8601 timestamp') from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (ValueError, TypeError) as e:
        raise BadRequest(f'{name} must be an integer') from e

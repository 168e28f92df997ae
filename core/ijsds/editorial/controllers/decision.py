"""Controllers for editorial decisions, revisions, and production."""

from http import HTTPStatus as status
from typing import Callable, Dict, Optional

from werkzeug.exceptions import BadRequest, ServiceUnavailable

import ijsds.submission as ev
from ijsds.submission import logging
from ijsds.submission.services import Functions
from ijsds.submission.services.integration import RequestFailed, \
    ConnectionFailed

from .submission import view
from .util import Agents, Response, load, save, require_data, \
    parse_datetime, parse_int

logger = logging.getLogger(__name__)


def _accept(data: dict, agents: Agents) -> ev.Event:
    return ev.AcceptSubmission(**agents, rationale=data.get('rationale', ''))


def _reject(data: dict, agents: Agents) -> ev.Event:
    return ev.RejectSubmission(
        **agents,
        rationale=data.get('rationale', ''),
        message=data.get('message'),
        suggested_corrections=data.get('suggested_corrections')
    )


def _desk_reject(data: dict, agents: Agents) -> ev.Event:
    return ev.DeskReject(**agents, rationale=data.get('rationale', ''))


def _revise(data: dict, agents: Agents) -> ev.Event:
    return ev.RequestRevision(
        **agents,
        rationale=data.get('rationale', ''),
        revision_type=data.get('revision_type', 'minor'),
        request_details=data.get('request_details', ''),
        deadline=parse_datetime(data.get('deadline'), 'deadline')
    )


DECISIONS: Dict[str, Callable[[dict, Agents], ev.Event]] = {
    'accept': _accept,
    'reject': _reject,
    'desk_reject': _desk_reject,
    'revise': _revise,
}


def make_decision(data: Optional[dict], submission_id: int,
                  agents: Agents) -> Response:
    """
    Record an editorial decision.

    The payload has a ``decision`` (one of ``accept``, ``reject``,
    ``desk_reject``, ``revise``) and a ``rationale``, plus whatever else the
    decision takes.
    """
    data = require_data(data)
    decision = data.get('decision')
    if decision not in DECISIONS:
        raise BadRequest(f'Unknown decision: {decision}')
    event = DECISIONS[decision](data, agents)
    submission = save(event, submission_id=submission_id)
    logger.info('Decision %s on submission %s', decision, submission_id)
    return view(submission, agents['creator']), status.OK, {}


def submit_revision(data: Optional[dict], submission_id: int,
                    agents: Agents) -> Response:
    """The authors upload a revised manuscript."""
    data = require_data(data)
    event = ev.SubmitRevision(**agents,
                              response_notes=data.get('response_notes', ''),
                              file_name=data.get('file_name', ''),
                              file_url=data.get('file_url', ''))
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def set_doi(data: Optional[dict], submission_id: int,
            agents: Agents) -> Response:
    """
    Set the DOI of an accepted article.

    If no ``doi`` is given, one is minted with the platform's archival
    service.
    """
    data = data or {}
    if data.get('doi'):
        event = ev.SetDOI(**agents, doi=data['doi'])
    else:
        submission = load(submission_id)
        if not submission.is_accepted:
            raise BadRequest('Submission has not been accepted')
        try:
            registration = Functions.current_session().register_doi(
                submission_id, existing_doi=submission.doi
            )
        except (RequestFailed, ConnectionFailed) as e:
            logger.error('DOI registration failed for submission %s: %s',
                         submission_id, e)
            raise ServiceUnavailable('Could not register a DOI') from e
        event = ev.RegisterDOI(**agents,
                               doi=registration.doi,
                               concept_doi=registration.concept_doi,
                               zenodo_id=registration.zenodo_id,
                               zenodo_url=registration.zenodo_url)
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def assign_to_issue(data: Optional[dict], submission_id: int,
                    agents: Agents) -> Response:
    data = require_data(data)
    event = ev.AssignToIssue(
        **agents,
        volume=parse_int(data.get('volume'), 'volume'),
        issue=parse_int(data.get('issue'), 'issue'),
        page_start=parse_int(data.get('page_start'), 'page_start'),
        page_end=parse_int(data.get('page_end'), 'page_end')
    )
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def publish(data: Optional[dict], submission_id: int,
            agents: Agents) -> Response:
    data = data or {}
    event = ev.Publish(**agents, publication_date=parse_datetime(
        data.get('publication_date'), 'publication_date'))
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}

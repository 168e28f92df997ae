"""Controllers for submissions and their place in the editorial workflow."""

from http import HTTPStatus as status
from typing import List, Optional

from dataclasses import asdict
from flask import url_for
from werkzeug.exceptions import BadRequest, Forbidden

import ijsds.submission as ev
from ijsds.submission import logging
from ijsds.submission.domain import workflow
from ijsds.submission.services import store
from ijsds.submission.validation import SUBMISSION_FORM, ValidationError, \
    validate_field

from . import handlers
from .util import Agents, Response, load, save, invalid, require_data

logger = logging.getLogger(__name__)

DEDICATED_ROUTES = {
    workflow.REVISION_REQUESTED: ('editorial.make_decision',
                                  {'decision': 'revise'}),
    workflow.ACCEPTED: ('editorial.make_decision', {'decision': 'accept'}),
    workflow.PUBLISHED: ('editorial.publish', {}),
}
"""Stages reached by a decision or publication, not by a transition."""


def can_view(submission: ev.Submission, user: ev.User) -> bool:
    """Editors, the owner, and invited reviewers may see a submission."""
    if user.is_editor or submission.owner == user:
        return True
    return any(review.reviewer == user
               for review in submission.reviews.values())


def can_edit(submission: ev.Submission, user: ev.User) -> bool:
    return user.is_editor or submission.owner == user


def view(submission: ev.Submission, user: ev.User) -> dict:
    """
    Represent a submission for ``user``.

    Editors see everything. Authors do not see who reviewed their manuscript,
    nor what reviewers and editors said only to the editors. Reviewers see
    only their own reviews.
    """
    data = asdict(submission)
    data['article_status'] = submission.article_status
    data['doi'] = submission.doi
    if user.is_editor:
        return data
    data.pop('editor_notes')
    if submission.owner == user:
        for review in data['reviews'].values():
            for key in ('reviewer', 'invited_by', 'comments_to_editor',
                        'conflict_of_interest_details', 'declined_reason'):
                review.pop(key)
        return data
    data['reviews'] = {
        review_id: review for review_id, review in data['reviews'].items()
        if submission.reviews[review_id].reviewer == user
    }
    return data


def validate_fields(data: dict) -> List[ValidationError]:
    """Validate the form fields present in ``data``; drafts may be partial."""
    errors: List[ValidationError] = []
    for name, rules in SUBMISSION_FORM.items():
        if name not in data:
            continue
        error = validate_field(name, data[name], rules)
        if error is not None:
            errors.append(error)
    return errors


def create_submission(data: Optional[dict], headers: dict, agents: Agents,
                      token: Optional[str] = None) -> Response:
    """
    Create a new submission.

    Parameters
    ----------
    data : dict
        Deserialized JSON payload. Any of the fields in
        :data:`.handlers.HANDLERS` may be provided; none are required.
    headers : dict
        Request headers from the client.
    agents : dict
        The ``creator``, ``proxy`` and ``client`` of the request.

    Returns
    -------
    dict
        Response data.
    int
        HTTP status code.
    dict
        Headers to add to the response.

    """
    data = data or {}
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    logger.debug('Received request to create submission, %s', agents)
    errors = validate_fields(data)
    if errors:
        return invalid(errors)
    create = ev.CreateSubmission(**agents)
    events = handlers.handle_submission(data, agents)
    submission = save(create, *events)
    response_headers = {
        'Location': url_for('editorial.get_submission',
                            submission_id=submission.submission_id)
    }
    return view(submission, agents['creator']), status.CREATED, \
        response_headers


def get_submission(submission_id: int, agents: Agents,
                   token: Optional[str] = None) -> Response:
    """Retrieve the current state of a submission."""
    submission = load(submission_id)
    if not can_view(submission, agents['creator']):
        raise Forbidden('You may not view this submission')
    return view(submission, agents['creator']), status.OK, {}


def list_submissions(params: dict, agents: Agents) -> Response:
    """
    List submissions.

    Editors may filter by ``status``; everyone else gets their own
    submissions.
    """
    user = agents['creator']
    statuses = [s for s in params.get('status', '').split(',') if s]
    if statuses:
        if not user.is_editor:
            raise Forbidden('Only editors may list submissions by status')
        submissions = store.get_submissions_by_status(*statuses)
    else:
        submissions = ev.load_submissions_for_user(user.native_id)
    return {'submissions': [view(s, user) for s in submissions]}, \
        status.OK, {}


def update_submission(data: Optional[dict], headers: dict, agents: Agents,
                      submission_id: int,
                      token: Optional[str] = None) -> Response:
    """Update the metadata of a draft submission."""
    data = require_data(data)
    submission = load(submission_id)
    if not can_edit(submission, agents['creator']):
        raise Forbidden('You may not edit this submission')
    errors = validate_fields(data)
    if errors:
        return invalid(errors)
    events = handlers.handle_submission(data, agents)
    if not events:
        raise BadRequest('No recognized fields in request body')
    submission = save(*events, submission_id=submission_id)
    response_headers = {
        'Location': url_for('editorial.get_submission',
                            submission_id=submission.submission_id)
    }
    return view(submission, agents['creator']), status.OK, response_headers


def finalize_submission(submission_id: int, agents: Agents) -> Response:
    """Send a complete draft to the editors."""
    submission = save(ev.FinalizeSubmission(**agents),
                      submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def get_workflow(submission_id: int, agents: Agents) -> Response:
    """Describe where the submission is in the editorial workflow."""
    submission = load(submission_id)
    if not can_view(submission, agents['creator']):
        raise Forbidden('You may not view this submission')
    current = submission.status
    body = {
        'submission_id': submission_id,
        'status': current,
        'progress': workflow.progress(current),
        'stages': [
            {'id': stage.id, 'name': stage.name,
             'description': stage.description,
             'depends_on': list(stage.depends_on), 'state': state}
            for stage, state in workflow.stages_for(current)
        ],
        'next_states': [_next_state(submission_id, stage)
                        for stage in workflow.next_states(current)],
    }
    return body, status.OK, {}


def _next_state(submission_id: int, stage: workflow.Stage) -> dict:
    """Where to POST, and what, to move the submission to ``stage``."""
    endpoint, payload = DEDICATED_ROUTES.get(
        stage.id, ('editorial.transition', {'target': stage.id})
    )
    return {'id': stage.id, 'name': stage.name,
            'route': url_for(endpoint, submission_id=submission_id),
            'payload': payload}


def transition(data: Optional[dict], submission_id: int,
               agents: Agents) -> Response:
    """Move the submission to another workflow stage."""
    data = require_data(data)
    event = ev.TransitionWorkflow(**agents, target=data.get('target', ''))
    submission = save(event, submission_id=submission_id)
    return get_workflow(submission.submission_id, agents)


def add_note(data: Optional[dict], submission_id: int,
             agents: Agents) -> Response:
    data = require_data(data)
    submission = save(ev.AddEditorNote(**agents, note=data.get('note', '')),
                      submission_id=submission_id)
    return view(submission, agents['creator']), status.CREATED, {}

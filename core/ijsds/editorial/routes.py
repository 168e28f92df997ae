"""Provides the editorial REST API."""

from functools import wraps
from typing import Any, Callable

from flask import Blueprint, Response, jsonify, request

from ijsds.submission import logging, User

from . import auth
from .auth import scoped
from .controllers import submission, review, decision, profile, indexing

logger = logging.getLogger(__name__)

blueprint = Blueprint('editorial', __name__, url_prefix='')


@blueprint.before_request
def get_agents() -> None:
    """Determine the agents responsible for this request."""
    auth.authenticate()


def json_response(func: Callable) -> Callable:
    """Generate a wrapper for routes that JSONifies the response body."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Response:
        r_body, r_status, r_headers = func(*args, **kwargs)
        response = jsonify(r_body)
        response.status_code = r_status
        response.headers.extend(r_headers)
        return response
    return wrapper


def _data() -> dict:
    return request.get_json(silent=True)


# Submissions and the editorial workflow.

@blueprint.route('/', methods=['GET'])
@json_response
def list_submissions() -> Response:
    """List the user's submissions, or (for editors) those by status."""
    return submission.list_submissions(request.args, request.agents)


@blueprint.route('/', methods=['POST'])
@json_response
def create_submission() -> Response:
    """Start a new submission."""
    return submission.create_submission(_data(), dict(request.headers),
                                        request.agents)


@blueprint.route('/<int:submission_id>/', methods=['GET'])
@json_response
def get_submission(submission_id: int) -> Response:
    """Get the current state of a submission."""
    return submission.get_submission(submission_id, request.agents)


@blueprint.route('/<int:submission_id>/', methods=['POST'])
@json_response
def update_submission(submission_id: int) -> Response:
    """Update the metadata of a draft submission."""
    return submission.update_submission(_data(), dict(request.headers),
                                        request.agents, submission_id)


@blueprint.route('/<int:submission_id>/finalize/', methods=['POST'])
@json_response
def finalize_submission(submission_id: int) -> Response:
    return submission.finalize_submission(submission_id, request.agents)


@blueprint.route('/<int:submission_id>/workflow/', methods=['GET'])
@json_response
def get_workflow(submission_id: int) -> Response:
    """Get workflow stages, progress, and possible next stages."""
    return submission.get_workflow(submission_id, request.agents)


@blueprint.route('/<int:submission_id>/workflow/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def transition(submission_id: int) -> Response:
    return submission.transition(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/notes/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def add_note(submission_id: int) -> Response:
    return submission.add_note(_data(), submission_id, request.agents)


# Reviewers and peer review.

@blueprint.route('/<int:submission_id>/reviewers/suggestions/',
                 methods=['GET'])
@json_response
@scoped(User.EDITOR)
def suggest_reviewers(submission_id: int) -> Response:
    """Rank reviewers for a submission, with conflict of interest checks."""
    return review.suggest_reviewers(submission_id, request.args,
                                    request.agents)


@blueprint.route('/<int:submission_id>/reviewers/auto-assign/',
                 methods=['POST'])
@json_response
@scoped(User.EDITOR)
def auto_assign(submission_id: int) -> Response:
    return review.auto_assign(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/reviewers/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def invite_reviewer(submission_id: int) -> Response:
    return review.invite_reviewer(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/reviews/<review_id>/accept/',
                 methods=['POST'])
@json_response
def accept_invitation(submission_id: int, review_id: str) -> Response:
    return review.accept_invitation(submission_id, review_id,
                                    request.agents)


@blueprint.route('/<int:submission_id>/reviews/<review_id>/decline/',
                 methods=['POST'])
@json_response
def decline_invitation(submission_id: int, review_id: str) -> Response:
    return review.decline_invitation(_data(), submission_id, review_id,
                                     request.agents)


@blueprint.route('/<int:submission_id>/reviews/<review_id>/submit/',
                 methods=['POST'])
@json_response
def submit_review(submission_id: int, review_id: str) -> Response:
    return review.submit_review(_data(), submission_id, review_id,
                                request.agents)


@blueprint.route('/<int:submission_id>/reviews/quality/', methods=['GET'])
@json_response
@scoped(User.EDITOR)
def review_quality(submission_id: int) -> Response:
    return review.review_quality(submission_id, request.agents)


@blueprint.route('/<int:submission_id>/rounds/', methods=['GET'])
@json_response
@scoped(User.EDITOR)
def get_rounds(submission_id: int) -> Response:
    return review.get_rounds(submission_id, request.agents)


@blueprint.route('/<int:submission_id>/rounds/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def start_round(submission_id: int) -> Response:
    return review.start_round(_data(), submission_id, request.agents)


@blueprint.route('/reviewers/<user_id>/performance/', methods=['GET'])
@json_response
@scoped(User.EDITOR)
def get_performance(user_id: str) -> Response:
    return review.get_performance(user_id, request.agents)


# Decisions and production.

@blueprint.route('/<int:submission_id>/decision/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def make_decision(submission_id: int) -> Response:
    """Accept, reject, desk reject, or request revisions."""
    return decision.make_decision(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/revision/', methods=['POST'])
@json_response
def submit_revision(submission_id: int) -> Response:
    return decision.submit_revision(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/doi/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def set_doi(submission_id: int) -> Response:
    return decision.set_doi(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/issue/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def assign_to_issue(submission_id: int) -> Response:
    return decision.assign_to_issue(_data(), submission_id, request.agents)


@blueprint.route('/<int:submission_id>/publish/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def publish(submission_id: int) -> Response:
    return decision.publish(_data(), submission_id, request.agents)


# Indexing services.

@blueprint.route('/indexing/doaj/', methods=['POST'])
@json_response
@scoped(User.EDITOR)
def submit_to_doaj() -> Response:
    return indexing.submit_to_doaj(_data(), request.agents)


@blueprint.route('/indexing/ajol/', methods=['GET'])
@json_response
@scoped(User.EDITOR)
def export_ajol_metadata() -> Response:
    return indexing.export_ajol_metadata(request.args, request.agents)


# The current user.

@blueprint.route('/profile/', methods=['GET'])
@json_response
def get_profile() -> Response:
    return profile.get_profile(request.agents)


@blueprint.route('/profile/', methods=['POST'])
@json_response
def update_profile() -> Response:
    return profile.update_profile(_data(), request.agents)


@blueprint.route('/notifications/', methods=['GET'])
@json_response
def get_notifications() -> Response:
    return profile.get_notifications(request.args, request.agents)


@blueprint.route('/notifications/<int:notification_id>/read/',
                 methods=['POST'])
@json_response
def mark_notification_read(notification_id: int) -> Response:
    return profile.mark_read(notification_id, request.agents)

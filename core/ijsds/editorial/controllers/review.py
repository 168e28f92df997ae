"""Controllers for finding reviewers and managing peer review."""

from http import HTTPStatus as status
from typing import Dict, Iterable, List, Optional

from dataclasses import asdict
from werkzeug.exceptions import BadRequest, NotFound

import ijsds.submission as ev
from ijsds.submission import logging, reviewers
from ijsds.submission.context import get_application_config
from ijsds.submission.domain.profile import Profile
from ijsds.submission.domain.review import Review
from ijsds.submission.services import store
from ijsds.submission.validation import REVIEW_FORM, validate_form

from .submission import view
from .util import Agents, Response, load, save, invalid, require_data, \
    parse_datetime, parse_int

logger = logging.getLogger(__name__)


def _histories(candidates: Iterable[Profile]) -> Dict[str, List[Review]]:
    return {c.user_id: store.get_reviews_for_reviewer(c.user_id)
            for c in candidates}


def _reviewed_submissions(histories: Dict[str, List[Review]]) \
        -> Dict[str, List[ev.Submission]]:
    """Submissions that each candidate has reviewed, for conflict checks."""
    cache: Dict[int, Optional[ev.Submission]] = {}
    reviewed: Dict[str, List[ev.Submission]] = {}
    for user_id, reviews in histories.items():
        reviewed[user_id] = []
        for review in reviews:
            if review.submission_id is None:
                continue
            if review.submission_id not in cache:
                try:
                    cache[review.submission_id] = \
                        ev.load_fast(review.submission_id)
                except ev.NoSuchSubmission:
                    logger.warning('Review %s refers to missing submission'
                                   ' %s', review.review_id,
                                   review.submission_id)
                    cache[review.submission_id] = None
            submission = cache[review.submission_id]
            if submission is not None:
                reviewed[user_id].append(submission)
    return reviewed


def suggest_reviewers(submission_id: int, params: dict,
                      agents: Agents) -> Response:
    """
    Rank the journal's reviewers for a submission.

    Each suggestion includes the result of a conflict of interest check, so
    that the editor can judge whether to invite them.
    """
    config = get_application_config()
    limit = parse_int(params.get('limit'), 'limit') \
        or int(config.get('MAX_SUGGESTIONS', 10))
    submission = load(submission_id)
    candidates = store.get_reviewer_profiles()
    histories = _histories(candidates)
    reviewed = _reviewed_submissions(histories)
    suggestions = []
    for match in reviewers.match_reviewers(submission, candidates,
                                           histories)[:limit]:
        report = reviewers.detect_conflicts(match.reviewer, submission,
                                            reviewed.get(match.reviewer_id))
        suggestions.append({
            'reviewer_id': match.reviewer_id,
            'name': match.reviewer.full_name,
            'email': match.reviewer.email,
            'affiliation': match.reviewer.affiliation,
            'score': match.score,
            'band': match.band,
            'reasons': match.reasons,
            'expertise_areas': match.expertise_areas,
            'history': asdict(match.history),
            'conflicts': {'has_conflict': report.has_conflict,
                          'risk_level': report.risk_level,
                          'reasons': report.reasons},
        })
    return {'submission_id': submission_id, 'suggestions': suggestions}, \
        status.OK, {}


def auto_assign(data: Optional[dict], submission_id: int,
                agents: Agents) -> Response:
    """Invite the best-matched reviewers without a serious conflict."""
    data = data or {}
    limit = parse_int(data.get('limit'), 'limit') \
        or int(get_application_config().get('AUTO_ASSIGN_REVIEWERS', 3))
    submission = load(submission_id)
    candidates = store.get_reviewer_profiles()
    histories = _histories(candidates)
    invitations = reviewers.auto_assign(
        submission, candidates, histories,
        creator=agents['creator'], limit=limit,
        conflict_history=_reviewed_submissions(histories)
    )
    if invitations:
        submission = save(*invitations, submission_id=submission_id)
    logger.info('Auto-assigned %i reviewers to submission %s',
                len(invitations), submission_id)
    body = {
        'invited': [invitation.reviewer.native_id
                    for invitation in invitations],
        'submission': view(submission, agents['creator'])
    }
    return body, status.OK, {}


def invite_reviewer(data: Optional[dict], submission_id: int,
                    agents: Agents) -> Response:
    """Invite a specific reviewer, who must have a profile."""
    data = require_data(data)
    reviewer_id = data.get('reviewer_id')
    if not reviewer_id:
        raise BadRequest('reviewer_id is required')
    profile = store.get_profile(str(reviewer_id))
    if profile is None:
        raise NotFound(f'No such user: {reviewer_id}')
    event = ev.InviteReviewer(
        **agents,
        reviewer=profile.as_agent(),
        deadline=parse_datetime(data.get('deadline'), 'deadline')
    )
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.CREATED, {}


def accept_invitation(submission_id: int, review_id: str,
                      agents: Agents) -> Response:
    submission = save(ev.AcceptInvitation(**agents, review_id=review_id),
                      submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def decline_invitation(data: Optional[dict], submission_id: int,
                       review_id: str, agents: Agents) -> Response:
    data = data or {}
    event = ev.DeclineInvitation(**agents, review_id=review_id,
                                 reason=data.get('reason'))
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def submit_review(data: Optional[dict], submission_id: int, review_id: str,
                  agents: Agents) -> Response:
    """Submit a reviewer's recommendation and comments."""
    data = require_data(data)
    errors = validate_form(data, REVIEW_FORM)
    if errors:
        return invalid(errors)
    event = ev.SubmitReview(
        **agents,
        review_id=review_id,
        recommendation=data['recommendation'],
        comments_to_author=data['comments_to_author'],
        comments_to_editor=data.get('comments_to_editor', ''),
        conflict_of_interest_declared=bool(
            data.get('conflict_of_interest_declared', False)),
        conflict_of_interest_details=data.get('conflict_of_interest_details'),
        review_file_url=data.get('review_file_url')
    )
    submission = save(event, submission_id=submission_id)
    return view(submission, agents['creator']), status.OK, {}


def review_quality(submission_id: int, agents: Agents) -> Response:
    """Score the submitted reviews of a submission."""
    submission = load(submission_id)
    scores = []
    for review in submission.reviews.values():
        if not review.is_submitted:
            continue
        score = reviewers.score_review(review)
        data = asdict(score)
        data.update({'reviewer_id': review.reviewer_id,
                     'review_round': review.review_round,
                     'overall': score.overall,
                     'quality_band': score.quality_band})
        scores.append(data)
    return {'submission_id': submission_id, 'reviews': scores}, status.OK, {}


def get_rounds(submission_id: int, agents: Agents) -> Response:
    submission = load(submission_id)
    rounds = [
        {'review_round': summary.review_round, 'total': summary.total,
         'submitted': summary.submitted,
         'completion_rate': summary.completion_rate,
         'status': summary.status}
        for summary in reviewers.round_summaries(submission)
    ]
    return {'submission_id': submission_id,
            'current_round': reviewers.current_round(submission),
            'rounds': rounds}, status.OK, {}


def start_round(data: Optional[dict], submission_id: int,
                agents: Agents) -> Response:
    """Start a new round, re-inviting the previous round's reviewers."""
    data = data or {}
    event = ev.StartReviewRound(
        **agents, deadline=parse_datetime(data.get('deadline'), 'deadline')
    )
    save(event, submission_id=submission_id)
    return get_rounds(submission_id, agents)


def get_performance(user_id: str, agents: Agents) -> Response:
    """Reviewing statistics for one person."""
    if store.get_profile(user_id) is None:
        raise NotFound(f'No such user: {user_id}')
    performance = reviewers.reviewer_performance(
        user_id, store.get_reviews_for_reviewer(user_id)
    )
    body = asdict(performance)
    body.update({'composite': performance.composite,
                 'rating': performance.rating,
                 'availability': performance.availability})
    return body, status.OK, {}

"""Invite the best-matched reviewers for a submission in one go."""

from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional

from .. import logging
from ..context import get_application_config
from ..domain.agent import Agent
from ..domain.event import InviteReviewer
from ..domain.profile import Profile
from ..domain.review import Review
from ..domain.submission import Submission
from ..domain.util import get_tzaware_utc_now
from .conflicts import HIGH, detect_conflicts
from .matching import match_reviewers

logger = logging.getLogger(__name__)


def review_period() -> timedelta:
    """Time allowed for a review, from ``REVIEW_PERIOD_DAYS``."""
    days = get_application_config().get('REVIEW_PERIOD_DAYS', 14)
    return timedelta(days=int(days))


def auto_assign(submission: Submission, candidates: Iterable[Profile],
                histories: Optional[Mapping[str, List[Review]]] = None,
                creator: Optional[Agent] = None, limit: int = 3,
                conflict_history: Optional[
                    Mapping[str, List[Submission]]] = None,
                now: Optional[datetime] = None) -> List[InviteReviewer]:
    """
    Generate invitations for the top-matched reviewers of a submission.

    The events are not saved; pass them to :func:`.core.save`.

    Parameters
    ----------
    submission : :class:`.Submission`
    candidates : iterable
        Profiles of people willing to review.
    histories : dict
        Each candidate's reviews, keyed by user id. See
        :func:`.match_reviewers`.
    creator : :class:`.Agent`
        The editor (or system process) making the invitations.
    limit : int
        Maximum number of invitations.
    conflict_history : dict
        Submissions each candidate has reviewed before, keyed by user id.
        Used to detect conflicts of interest.
    now : datetime
        Reference time for the review deadline.

    Returns
    -------
    list
        Items are :class:`.InviteReviewer` events, best match first.
        Candidates with a high-risk conflict of interest are passed over.

    """
    conflict_history = conflict_history or {}
    deadline = (now or get_tzaware_utc_now()) + review_period()
    invitations: List[InviteReviewer] = []
    for match in match_reviewers(submission, candidates, histories):
        if len(invitations) >= limit:
            break
        report = detect_conflicts(
            match.reviewer, submission,
            conflict_history.get(match.reviewer_id, [])
        )
        if report.risk_level == HIGH:
            logger.debug('Skip reviewer %s: %s', match.reviewer_id,
                         '; '.join(report.reasons))
            continue
        invitations.append(InviteReviewer(
            creator=creator,
            submission_id=submission.submission_id,
            reviewer=match.reviewer.as_agent(),
            deadline=deadline
        ))
    return invitations

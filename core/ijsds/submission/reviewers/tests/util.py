"""Shared fixtures for reviewer tooling tests."""

from datetime import datetime, timedelta

from pytz import UTC

from ...domain.agent import User
from ...domain.profile import Profile
from ...domain.review import Review
from ...domain.submission import Submission, ArticleMetadata, Author

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)

STRONG_COMMENTS = "You should expand the sample to other districts.\n\n" \
    + "The identification strategy is sound. " * 15


def make_submission(submission_id=7, **metadata):
    owner = User('author-1', 'ama@ug.edu.gh', name='Ama Mensah')
    defaults = dict(
        title='Microfinance and rural poverty in Ghana',
        keywords=['Microfinance', 'poverty'],
        subject_area='Development economics',
        authors=[Author(name='Ama Mensah', email='ama@ug.edu.gh',
                        affiliation='University of Ghana Legon')]
    )
    defaults.update(metadata)
    return Submission(submission_id=submission_id, creator=owner,
                      owner=owner, status=Submission.PEER_REVIEW,
                      metadata=ArticleMetadata(**defaults))


def make_review(reviewer_id, review_id, submitted=True, review_round=1,
                late=False, **kwargs):
    reviewer = User(reviewer_id, f'{reviewer_id}@example.org')
    deadline = NOW + timedelta(days=14)
    if submitted:
        kwargs.setdefault('recommendation', Review.MINOR_REVISIONS)
        kwargs.setdefault('submitted_at',
                          deadline + timedelta(days=2) if late
                          else NOW + timedelta(days=10))
    return Review(reviewer=reviewer, review_id=review_id,
                  review_round=review_round,
                  invitation_status=Review.ACCEPTED,
                  invitation_sent_at=NOW, deadline=deadline, **kwargs)


def make_profile(user_id, **kwargs):
    kwargs.setdefault('email', f'{user_id}@example.org')
    kwargs.setdefault('full_name', user_id.title())
    return Profile(user_id=user_id, is_reviewer=True, **kwargs)

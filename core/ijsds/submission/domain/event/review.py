"""Commands/events related to peer review."""

import hashlib
from datetime import datetime, timedelta
from typing import Optional

from dataclasses import field

from ...exceptions import InvalidEvent
from ..agent import User, agent_factory
from ..review import Review
from ..submission import Submission
from ..util import coerce_datetime
from .base import Event
from .util import dataclass
from . import validators

REVIEW_PERIOD = timedelta(days=14)
"""Reviewers have this long to submit, unless the editor says otherwise."""


def round_review_id(event_id: str, reviewer_id: str) -> str:
    """Identifier for a review invited at the start of a new round."""
    h = hashlib.new('sha1')
    h.update(b'%s:%s' % (event_id.encode('utf-8'),
                          reviewer_id.encode('utf-8')))
    return h.hexdigest()


def _get_review(event: Event, submission: Submission,
                review_id: Optional[str]) -> Review:
    """Get a review on ``submission``, or complain."""
    if not review_id or review_id not in submission.reviews:
        raise InvalidEvent(event, f"No such review: {review_id}")
    return submission.reviews[review_id]


def _creator_is_reviewer(event: Event, review: Review) -> None:
    if event.creator != review.reviewer:
        raise InvalidEvent(event, "Only the invited reviewer may do this")


@dataclass()
class InviteReviewer(Event):
    """Invite a reviewer to review the manuscript in the current round."""

    NAME = "invite reviewer"
    NAMED = "reviewer invited"

    reviewer: Optional[User] = field(default=None)
    deadline: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        super(InviteReviewer, self).__post_init__()
        if isinstance(self.reviewer, dict):
            self.reviewer = agent_factory(**self.reviewer)
        self.deadline = coerce_datetime(self.deadline)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.submission_is_under_consideration(self, submission)
        if not isinstance(self.reviewer, User):
            raise InvalidEvent(self, "Reviewer must be a user")
        self._reviewer_is_not_an_author(submission)
        self._reviewer_is_not_already_reviewing(submission)
        if self.deadline is not None and self.deadline <= self.created:
            raise InvalidEvent(self, "Deadline must be in the future")

    def _reviewer_is_not_an_author(self, submission: Submission) -> None:
        assert self.reviewer is not None
        if self.reviewer == submission.owner \
                or (self.reviewer.email or '').lower() \
                in submission.metadata.author_emails:
            raise InvalidEvent(self, "Authors may not review their own work")

    def _reviewer_is_not_already_reviewing(self, submission: Submission) \
            -> None:
        assert self.reviewer is not None
        if submission.active_review_for(self.reviewer) is not None:
            raise InvalidEvent(self, "Reviewer has already been invited")

    def project(self, submission: Submission) -> Submission:
        """Add a pending :class:`.Review` for the current round."""
        assert self.created is not None
        submission.reviews[self.event_id] = Review(
            reviewer=self.reviewer,
            invited_by=self.creator,
            review_id=self.event_id,
            submission_id=submission.submission_id,
            review_round=submission.review_round,
            invitation_sent_at=self.created,
            deadline=self.deadline or self.created + REVIEW_PERIOD
        )
        return submission


@dataclass()
class AcceptInvitation(Event):
    """The reviewer agrees to review the manuscript."""

    NAME = "accept review invitation"
    NAMED = "review invitation accepted"

    review_id: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        review = _get_review(self, submission, self.review_id)
        _creator_is_reviewer(self, review)
        if review.invitation_status != Review.PENDING:
            raise InvalidEvent(self, f"Invitation is already"
                                     f" {review.invitation_status}")

    def project(self, submission: Submission) -> Submission:
        review = submission.reviews[self.review_id]
        review.invitation_status = Review.ACCEPTED
        review.invitation_accepted_at = self.created
        return submission


@dataclass()
class DeclineInvitation(Event):
    """The reviewer declines to review the manuscript."""

    NAME = "decline review invitation"
    NAMED = "review invitation declined"

    review_id: Optional[str] = field(default=None)
    reason: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        review = _get_review(self, submission, self.review_id)
        _creator_is_reviewer(self, review)
        if review.invitation_status != Review.PENDING:
            raise InvalidEvent(self, f"Invitation is already"
                                     f" {review.invitation_status}")

    def project(self, submission: Submission) -> Submission:
        review = submission.reviews[self.review_id]
        review.invitation_status = Review.DECLINED
        review.declined_reason = self.reason
        return submission


@dataclass()
class SubmitReview(Event):
    """The reviewer submits their recommendation and comments."""

    NAME = "submit review"
    NAMED = "review submitted"

    review_id: Optional[str] = field(default=None)
    recommendation: Optional[str] = field(default=None)
    comments_to_author: str = field(default_factory=str)
    comments_to_editor: str = field(default_factory=str)
    conflict_of_interest_declared: bool = field(default=False)
    conflict_of_interest_details: Optional[str] = field(default=None)
    review_file_url: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        review = _get_review(self, submission, self.review_id)
        _creator_is_reviewer(self, review)
        if not review.is_accepted:
            raise InvalidEvent(self, "Invitation has not been accepted")
        if review.is_submitted:
            raise InvalidEvent(self, "Review has already been submitted")
        if self.recommendation not in Review.RECOMMENDATIONS:
            raise InvalidEvent(self, f"Invalid recommendation:"
                                     f" {self.recommendation}")
        validators.not_empty(self, self.comments_to_author,
                             "Comments to the author")
        if self.conflict_of_interest_declared:
            validators.not_empty(self, self.conflict_of_interest_details,
                                 "Conflict of interest details")

    def project(self, submission: Submission) -> Submission:
        review = submission.reviews[self.review_id]
        review.recommendation = self.recommendation
        review.comments_to_author = self.comments_to_author.strip()
        review.comments_to_editor = self.comments_to_editor.strip()
        review.conflict_of_interest_declared = \
            self.conflict_of_interest_declared
        review.conflict_of_interest_details = \
            self.conflict_of_interest_details
        review.review_file_url = self.review_file_url
        review.submitted_at = self.created
        return submission


@dataclass()
class StartReviewRound(Event):
    """
    Start a new round of review, usually after the authors revise.

    Everyone who took part in the previous round (i.e. did not decline) is
    invited again.
    """

    NAME = "start review round"
    NAMED = "review round started"

    deadline: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        super(StartReviewRound, self).__post_init__()
        self.deadline = coerce_datetime(self.deadline)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.submission_is_under_consideration(self, submission)
        if not submission.reviews_in_round():
            raise InvalidEvent(self, "There are no reviews in the current"
                                     " round")

    def project(self, submission: Submission) -> Submission:
        assert self.created is not None
        previous = submission.reviews_in_round()
        submission.review_round += 1
        deadline = self.deadline or self.created + REVIEW_PERIOD
        for review in previous:
            if review.is_declined:
                continue
            review_id = round_review_id(self.event_id, review.reviewer_id)
            submission.reviews[review_id] = Review(
                reviewer=review.reviewer,
                invited_by=self.creator,
                review_id=review_id,
                submission_id=submission.submission_id,
                review_round=submission.review_round,
                invitation_sent_at=self.created,
                deadline=deadline
            )
        return submission

"""Data structures for peer review."""

import math
from datetime import datetime
from typing import Optional

from dataclasses import dataclass, field

from .agent import Agent, User, agent_factory
from .util import coerce_datetime


@dataclass
class Review:
    """
    A reviewer's involvement with one round of review on a submission.

    A review starts life as an invitation (:attr:`PENDING`). The reviewer may
    accept or decline the invitation; once accepted, the reviewer may submit a
    recommendation and comments. Reviews are keyed on the submission by the
    identifier of the event that created the invitation.
    """

    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'

    ACCEPT = 'accept'
    MINOR_REVISIONS = 'minor_revisions'
    MAJOR_REVISIONS = 'major_revisions'
    REJECT = 'reject'
    RECOMMENDATIONS = (ACCEPT, MINOR_REVISIONS, MAJOR_REVISIONS, REJECT)

    reviewer: User
    invited_by: Optional[Agent] = field(default=None)
    review_id: Optional[str] = field(default=None)
    submission_id: Optional[int] = field(default=None)
    review_round: int = field(default=1)

    invitation_status: str = field(default=PENDING)
    invitation_sent_at: Optional[datetime] = field(default=None)
    invitation_accepted_at: Optional[datetime] = field(default=None)
    declined_reason: Optional[str] = field(default=None)
    deadline: Optional[datetime] = field(default=None)

    recommendation: Optional[str] = field(default=None)
    comments_to_author: str = field(default_factory=str)
    comments_to_editor: str = field(default_factory=str)
    conflict_of_interest_declared: bool = field(default=False)
    conflict_of_interest_details: Optional[str] = field(default=None)
    review_file_url: Optional[str] = field(default=None)
    submitted_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.reviewer, dict):
            self.reviewer = agent_factory(**self.reviewer)
        if isinstance(self.invited_by, dict):
            self.invited_by = agent_factory(**self.invited_by)
        self.invitation_sent_at = coerce_datetime(self.invitation_sent_at)
        self.invitation_accepted_at = \
            coerce_datetime(self.invitation_accepted_at)
        self.deadline = coerce_datetime(self.deadline)
        self.submitted_at = coerce_datetime(self.submitted_at)

    @property
    def reviewer_id(self) -> str:
        return str(self.reviewer.native_id)

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    @property
    def is_declined(self) -> bool:
        return self.invitation_status == self.DECLINED

    @property
    def is_accepted(self) -> bool:
        return self.invitation_status == self.ACCEPTED

    @property
    def is_active(self) -> bool:
        """The reviewer still owes us something on this review."""
        return not self.is_submitted and not self.is_declined

    def is_overdue(self, now: datetime) -> bool:
        """An active review whose deadline has passed."""
        if not self.is_active or self.deadline is None:
            return False
        return self.deadline < now

    def days_until_deadline(self, now: datetime) -> Optional[int]:
        """Whole days remaining until the deadline, rounded up."""
        if self.deadline is None:
            return None
        return math.ceil((self.deadline - now).total_seconds() / 86400)

"""Data structures for submissions."""

from typing import Optional, Dict, List
from datetime import datetime

from dataclasses import dataclass, field

from .agent import Agent, agent_factory
from .review import Review
from .util import coerce_datetime, dict_coerce, list_coerce
from . import workflow


@dataclass
class Author:
    """Represents an author of a submitted manuscript."""

    name: str = field(default_factory=str)
    email: str = field(default_factory=str)
    affiliation: str = field(default_factory=str)
    orcid: Optional[str] = field(default=None)
    order: int = field(default=0)


@dataclass
class ArticleMetadata:
    """Bibliographic metadata about the manuscript."""

    title: Optional[str] = None
    abstract: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    subject_area: Optional[str] = None

    authors: List[Author] = field(default_factory=list)
    corresponding_author_email: Optional[str] = None

    funding_info: Optional[str] = None
    conflicts_of_interest: Optional[str] = None
    manuscript_file_url: Optional[str] = None

    def __post_init__(self) -> None:
        self.authors = list_coerce(Author, self.authors)

    @property
    def authors_display(self) -> str:
        return ', '.join(author.name for author in self.authors)

    @property
    def author_emails(self) -> List[str]:
        return [a.email.lower() for a in self.authors if a.email]

    @property
    def corresponding_author(self) -> Optional[Author]:
        for author in self.authors:
            if author.email.lower() == \
                    (self.corresponding_author_email or '').lower():
                return author
        return self.authors[0] if self.authors else None


@dataclass
class EditorialDecision:
    """A decision (or workflow transition) recorded by an editor."""

    ACCEPT = 'accept'
    REJECT = 'reject'
    DESK_REJECTION = 'desk_rejection'
    REVISION_REQUESTED = 'revision_requested'
    REVISION_SUBMITTED = 'revision_submitted'
    WORKFLOW_TRANSITION = 'workflow_transition'

    event_id: str
    creator: Agent
    created: datetime
    decision_type: str
    rationale: str = field(default_factory=str)
    from_status: Optional[str] = None
    to_status: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.creator, dict):
            self.creator = agent_factory(**self.creator)
        self.created = coerce_datetime(self.created)


@dataclass
class RevisionRequest:
    """Changes requested of the authors before a final decision."""

    MINOR = 'minor'
    MAJOR = 'major'

    event_id: str
    creator: Agent
    created: datetime
    revision_type: str = MINOR
    request_details: str = field(default_factory=str)
    deadline: Optional[datetime] = None

    def __post_init__(self) -> None:
        if isinstance(self.creator, dict):
            self.creator = agent_factory(**self.creator)
        self.created = coerce_datetime(self.created)
        self.deadline = coerce_datetime(self.deadline)


@dataclass
class RejectionMessage:
    """Message to the authors explaining a rejection."""

    event_id: str
    creator: Agent
    created: datetime
    message: str = field(default_factory=str)
    suggested_corrections: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.creator, dict):
            self.creator = agent_factory(**self.creator)
        self.created = coerce_datetime(self.created)


@dataclass
class FileVersion:
    """An uploaded manuscript file."""

    version_number: int
    file_name: str
    file_url: str
    uploaded_by: Agent
    created: datetime
    file_type: str = field(default_factory=str)
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.uploaded_by, dict):
            self.uploaded_by = agent_factory(**self.uploaded_by)
        self.created = coerce_datetime(self.created)
        if not self.file_type and '.' in self.file_name:
            self.file_type = self.file_name.rsplit('.', 1)[1].lower()


@dataclass
class Publication:
    """Publication details for an accepted manuscript."""

    doi: Optional[str] = None
    concept_doi: Optional[str] = None
    zenodo_id: Optional[str] = None
    zenodo_url: Optional[str] = None
    volume: Optional[int] = None
    issue: Optional[int] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    publication_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.publication_date = coerce_datetime(self.publication_date)


@dataclass
class Submission:
    """
    Represents a manuscript submitted to the journal.

    The submission carries the article metadata supplied by the authors, the
    peer reviews solicited by editors, and the record of editorial decisions
    and production steps. :attr:`status` is either ``draft``, one of the
    workflow stages in :mod:`.domain.workflow`, or a terminal rejection
    status.
    """

    DRAFT = 'draft'
    SUBMITTED = workflow.SUBMITTED
    EDITORIAL_REVIEW = workflow.EDITORIAL_REVIEW
    REVIEWER_ASSIGNMENT = workflow.REVIEWER_ASSIGNMENT
    PEER_REVIEW = workflow.PEER_REVIEW
    EDITORIAL_DECISION = workflow.EDITORIAL_DECISION
    REVISION_REQUESTED = workflow.REVISION_REQUESTED
    ACCEPTED = workflow.ACCEPTED
    COPYEDITING = workflow.COPYEDITING
    PROOFREADING = workflow.PROOFREADING
    TYPESETTING = workflow.TYPESETTING
    PUBLISHED = workflow.PUBLISHED
    REJECTED = 'rejected'
    DESK_REJECTED = 'desk_rejected'

    UNDER_CONSIDERATION = (SUBMITTED, EDITORIAL_REVIEW, REVIEWER_ASSIGNMENT,
                           PEER_REVIEW, EDITORIAL_DECISION, REVISION_REQUESTED)
    """Statuses in which a decision has not yet been made."""

    IN_PRODUCTION = (ACCEPTED, COPYEDITING, PROOFREADING, TYPESETTING)

    ARTICLE_STATUS = {
        DRAFT: 'draft',
        SUBMITTED: 'submitted',
        EDITORIAL_REVIEW: 'submitted',
        REVIEWER_ASSIGNMENT: 'submitted',
        PEER_REVIEW: 'under_review',
        EDITORIAL_DECISION: 'under_review',
        REVISION_REQUESTED: 'under_review',
        ACCEPTED: 'accepted',
        COPYEDITING: 'accepted',
        PROOFREADING: 'accepted',
        TYPESETTING: 'accepted',
        PUBLISHED: 'published',
        REJECTED: 'rejected',
        DESK_REJECTED: 'rejected',
    }
    """Maps submission status onto the coarser status of the article."""

    creator: Agent
    owner: Agent
    proxy: Optional[Agent] = field(default=None)
    client: Optional[Agent] = field(default=None)
    created: Optional[datetime] = field(default=None)
    updated: Optional[datetime] = field(default=None)
    submitted: Optional[datetime] = field(default=None)
    submission_id: Optional[int] = field(default=None)
    submission_type: str = field(default='new')

    status: str = field(default=DRAFT)
    """Disposition within the editorial workflow."""

    metadata: ArticleMetadata = field(default_factory=ArticleMetadata)
    cover_letter: Optional[str] = field(default=None)
    reviewer_suggestions: Optional[str] = field(default=None)
    editor_notes: List[str] = field(default_factory=list)

    review_round: int = field(default=1)
    reviews: Dict[str, Review] = field(default_factory=dict)
    """Review invitations and reports, keyed by invitation event id."""

    decisions: Dict[str, EditorialDecision] = field(default_factory=dict)
    revision_requests: Dict[str, RevisionRequest] = \
        field(default_factory=dict)
    rejection_messages: Dict[str, RejectionMessage] = \
        field(default_factory=dict)
    file_versions: List[FileVersion] = field(default_factory=list)

    publication: Optional[Publication] = field(default=None)
    approved_at: Optional[datetime] = field(default=None)
    approved_by: Optional[Agent] = field(default=None)

    @property
    def article_status(self) -> str:
        return self.ARTICLE_STATUS.get(self.status, self.status)

    @property
    def is_finalized(self) -> bool:
        """The authors have submitted the manuscript for consideration."""
        return self.status != self.DRAFT

    @property
    def is_under_consideration(self) -> bool:
        return self.status in self.UNDER_CONSIDERATION

    @property
    def is_accepted(self) -> bool:
        """Accepted, whether in production or published."""
        return self.status in self.IN_PRODUCTION + (self.PUBLISHED,)

    @property
    def is_published(self) -> bool:
        return self.status == self.PUBLISHED

    @property
    def is_rejected(self) -> bool:
        return self.status in (self.REJECTED, self.DESK_REJECTED)

    @property
    def doi(self) -> Optional[str]:
        return self.publication.doi if self.publication else None

    @property
    def latest_file_version(self) -> Optional[FileVersion]:
        if not self.file_versions:
            return None
        return max(self.file_versions, key=lambda v: v.version_number)

    @property
    def next_file_version_number(self) -> int:
        latest = self.latest_file_version
        return latest.version_number + 1 if latest else 1

    def reviews_in_round(self, review_round: Optional[int] = None) \
            -> List[Review]:
        """Reviews for a round (default: the current round), in order."""
        if review_round is None:
            review_round = self.review_round
        return sorted((r for r in self.reviews.values()
                       if r.review_round == review_round),
                      key=lambda r: (r.invitation_sent_at is None,
                                     r.invitation_sent_at or 0))

    def active_review_for(self, reviewer: Agent) -> Optional[Review]:
        """The reviewer's non-declined review in the current round."""
        for review in self.reviews_in_round():
            if review.reviewer == reviewer and not review.is_declined:
                return review
        return None

    @property
    def decision_history(self) -> List[EditorialDecision]:
        return sorted(self.decisions.values(), key=lambda d: d.created)

    def __post_init__(self) -> None:
        if isinstance(self.creator, dict):
            self.creator = agent_factory(**self.creator)
        if isinstance(self.owner, dict):
            self.owner = agent_factory(**self.owner)
        if self.proxy and isinstance(self.proxy, dict):
            self.proxy = agent_factory(**self.proxy)
        if self.client and isinstance(self.client, dict):
            self.client = agent_factory(**self.client)
        if self.approved_by and isinstance(self.approved_by, dict):
            self.approved_by = agent_factory(**self.approved_by)
        self.created = coerce_datetime(self.created)
        self.updated = coerce_datetime(self.updated)
        self.submitted = coerce_datetime(self.submitted)
        self.approved_at = coerce_datetime(self.approved_at)
        if isinstance(self.metadata, dict):
            self.metadata = ArticleMetadata(**self.metadata)
        if isinstance(self.publication, dict):
            self.publication = Publication(**self.publication)
        self.reviews = dict_coerce(Review, self.reviews)
        self.decisions = dict_coerce(EditorialDecision, self.decisions)
        self.revision_requests = \
            dict_coerce(RevisionRequest, self.revision_requests)
        self.rejection_messages = \
            dict_coerce(RejectionMessage, self.rejection_messages)
        self.file_versions = list_coerce(FileVersion, self.file_versions)

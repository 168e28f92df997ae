"""SQLAlchemy ORM classes for the submission database."""

from typing import Optional, List, Dict, Any
from datetime import datetime

from dataclasses import asdict

from pytz import UTC
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, \
    Boolean, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base

from ... import domain
from .util import FriendlyJSON, PreciseDateTime

Base = declarative_base()


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite (and MySQL) hand back naive datetimes; these are all UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _agent_data(agent: Optional[domain.Agent]) -> Optional[dict]:
    return asdict(agent) if agent is not None else None


def _agent(data: Optional[dict]) -> Optional[domain.Agent]:
    if not data:
        return None
    return domain.agent_factory(**data)


def _native_id(agent: Optional[domain.Agent]) -> Optional[str]:
    return str(agent.native_id) if agent is not None else None


class Submission(Base):    # type: ignore
    """Projected state of a manuscript submission."""

    __tablename__ = 'submissions'

    submission_id = Column(Integer, primary_key=True)
    submission_type = Column(String(20), default='new')
    status = Column(String(40), nullable=False, index=True,
                    default=domain.Submission.DRAFT)
    """Workflow disposition; see :attr:`.domain.Submission.status`."""

    owner_id = Column(String(64), index=True)
    owner = Column(FriendlyJSON)
    creator = Column(FriendlyJSON)
    proxy = Column(FriendlyJSON)
    client = Column(FriendlyJSON)

    created = Column(DateTime, default=lambda: datetime.now(UTC))
    updated = Column(DateTime, onupdate=lambda: datetime.now(UTC))
    submitted = Column(DateTime)

    cover_letter = Column(Text)
    reviewer_suggestions = Column(Text)
    editor_notes = Column(FriendlyJSON)
    review_round = Column(Integer, default=1)

    approved_at = Column(DateTime)
    approved_by = Column(FriendlyJSON)

    article = relationship('Article', uselist=False,
                           back_populates='submission',
                           cascade='all, delete-orphan')
    reviews = relationship('Review', back_populates='submission',
                           cascade='all, delete-orphan')
    decisions = relationship('EditorialDecision', back_populates='submission',
                             cascade='all, delete-orphan')
    revision_requests = relationship('RevisionRequest',
                                     back_populates='submission',
                                     cascade='all, delete-orphan')
    rejection_messages = relationship('RejectionMessage',
                                      back_populates='submission',
                                      cascade='all, delete-orphan')
    file_versions = relationship('FileVersion', back_populates='submission',
                                 cascade='all, delete-orphan',
                                 order_by='FileVersion.version_number')

    def update_from_submission(self, submission: domain.Submission) -> None:
        """Update this database object from a :class:`.domain.Submission`."""
        self.submission_type = submission.submission_type
        self.status = submission.status
        self.owner_id = _native_id(submission.owner)
        self.owner = _agent_data(submission.owner)
        self.creator = _agent_data(submission.creator)
        self.proxy = _agent_data(submission.proxy)
        self.client = _agent_data(submission.client)
        self.created = submission.created
        self.updated = submission.updated
        self.submitted = submission.submitted
        self.cover_letter = submission.cover_letter
        self.reviewer_suggestions = submission.reviewer_suggestions
        self.editor_notes = list(submission.editor_notes)
        self.review_round = submission.review_round
        self.approved_at = submission.approved_at
        self.approved_by = _agent_data(submission.approved_by)

        if self.article is None:
            self.article = Article()
        self.article.update_from_submission(submission)

        _sync(self.reviews, 'review_id', submission.reviews, Review)
        _sync(self.decisions, 'event_id', submission.decisions,
              EditorialDecision)
        _sync(self.revision_requests, 'event_id',
              submission.revision_requests, RevisionRequest)
        _sync(self.rejection_messages, 'event_id',
              submission.rejection_messages, RejectionMessage)
        _sync(self.file_versions, 'version_number',
              {v.version_number: v for v in submission.file_versions},
              FileVersion)

    def to_submission(self, submission_id: Optional[int] = None) \
            -> domain.Submission:
        """
        Generate a representation of submission state from a DB instance.

        Parameters
        ----------
        submission_id : int or None
            If provided the database value is overridden when setting
            :attr:`domain.Submission.submission_id`.

        Returns
        -------
        :class:`.domain.Submission`

        """
        if submission_id is None:
            submission_id = self.submission_id
        article = self.article or Article()
        return domain.Submission(
            submission_id=submission_id,
            submission_type=self.submission_type,
            status=self.status,
            creator=_agent(self.creator),
            owner=_agent(self.owner),
            proxy=_agent(self.proxy),
            client=_agent(self.client),
            created=_utc(self.created),
            updated=_utc(self.updated),
            submitted=_utc(self.submitted),
            metadata=article.to_metadata(),
            publication=article.to_publication(),
            cover_letter=self.cover_letter,
            reviewer_suggestions=self.reviewer_suggestions,
            editor_notes=list(self.editor_notes or []),
            review_round=self.review_round or 1,
            approved_at=_utc(self.approved_at),
            approved_by=_agent(self.approved_by),
            reviews={r.review_id: r.to_review() for r in self.reviews},
            decisions={d.event_id: d.to_decision() for d in self.decisions},
            revision_requests={r.event_id: r.to_request()
                               for r in self.revision_requests},
            rejection_messages={r.event_id: r.to_message()
                                for r in self.rejection_messages},
            file_versions=[v.to_file_version() for v in self.file_versions]
        )


def _sync(rows: List[Any], key: str, items: Dict[Any, Any],
          model: type) -> None:
    """Bring child ``rows`` in line with domain ``items``, keyed on ``key``."""
    existing = {getattr(row, key): row for row in rows}
    for item_key, item in items.items():
        row = existing.pop(item_key, None)
        if row is None:
            row = model()
            rows.append(row)
        row.update_from(item)
    for row in existing.values():
        rows.remove(row)


class Article(Base):    # type: ignore
    """Bibliographic and publication metadata for a submission."""

    __tablename__ = 'articles'

    article_id = Column(Integer, primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'),
                           unique=True, index=True)
    status = Column(String(20), index=True)
    """Coarse status; see :attr:`.domain.Submission.article_status`."""

    title = Column(Text)
    abstract = Column(Text)
    keywords = Column(FriendlyJSON)
    subject_area = Column(String(255))
    authors = Column(FriendlyJSON)
    authors_display = Column(Text)
    corresponding_author_email = Column(String(255))
    funding_info = Column(Text)
    conflicts_of_interest = Column(Text)
    manuscript_file_url = Column(Text)

    doi = Column(String(255), index=True)
    concept_doi = Column(String(255))
    zenodo_id = Column(String(64))
    zenodo_url = Column(Text)
    volume = Column(Integer)
    issue = Column(Integer)
    page_start = Column(Integer)
    page_end = Column(Integer)
    publication_date = Column(DateTime)

    submission = relationship('Submission', back_populates='article')

    def update_from_submission(self, submission: domain.Submission) -> None:
        metadata = submission.metadata
        self.status = submission.article_status
        self.title = metadata.title
        self.abstract = metadata.abstract
        self.keywords = list(metadata.keywords)
        self.subject_area = metadata.subject_area
        self.authors = [{'name': a.name, 'email': a.email,
                         'affiliation': a.affiliation, 'orcid': a.orcid,
                         'order': a.order} for a in metadata.authors]
        self.authors_display = metadata.authors_display
        self.corresponding_author_email = metadata.corresponding_author_email
        self.funding_info = metadata.funding_info
        self.conflicts_of_interest = metadata.conflicts_of_interest
        self.manuscript_file_url = metadata.manuscript_file_url

        publication = submission.publication or domain.Publication()
        self.doi = publication.doi
        self.concept_doi = publication.concept_doi
        self.zenodo_id = publication.zenodo_id
        self.zenodo_url = publication.zenodo_url
        self.volume = publication.volume
        self.issue = publication.issue
        self.page_start = publication.page_start
        self.page_end = publication.page_end
        self.publication_date = publication.publication_date

    def to_metadata(self) -> domain.ArticleMetadata:
        return domain.ArticleMetadata(
            title=self.title,
            abstract=self.abstract,
            keywords=list(self.keywords or []),
            subject_area=self.subject_area,
            authors=list(self.authors or []),
            corresponding_author_email=self.corresponding_author_email,
            funding_info=self.funding_info,
            conflicts_of_interest=self.conflicts_of_interest,
            manuscript_file_url=self.manuscript_file_url
        )

    def to_publication(self) -> Optional[domain.Publication]:
        fields = [self.doi, self.zenodo_id, self.volume, self.issue,
                  self.publication_date]
        if all(value is None for value in fields):
            return None
        return domain.Publication(
            doi=self.doi,
            concept_doi=self.concept_doi,
            zenodo_id=self.zenodo_id,
            zenodo_url=self.zenodo_url,
            volume=self.volume,
            issue=self.issue,
            page_start=self.page_start,
            page_end=self.page_end,
            publication_date=_utc(self.publication_date)
        )


class Review(Base):    # type: ignore
    """A review invitation, and eventually the review itself."""

    __tablename__ = 'reviews'

    review_id = Column(String(128), primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'), index=True)
    reviewer_id = Column(String(64), index=True)
    reviewer = Column(FriendlyJSON)
    invited_by = Column(FriendlyJSON)
    review_round = Column(Integer, default=1)

    invitation_status = Column(String(20), index=True)
    invitation_sent_at = Column(DateTime)
    invitation_accepted_at = Column(DateTime)
    declined_reason = Column(Text)
    deadline = Column(DateTime)

    recommendation = Column(String(40))
    comments_to_author = Column(Text)
    comments_to_editor = Column(Text)
    conflict_of_interest_declared = Column(Boolean, default=False)
    conflict_of_interest_details = Column(Text)
    review_file_url = Column(Text)
    submitted_at = Column(DateTime)

    submission = relationship('Submission', back_populates='reviews')

    def update_from(self, review: domain.Review) -> None:
        self.review_id = review.review_id
        self.reviewer_id = review.reviewer_id
        self.reviewer = _agent_data(review.reviewer)
        self.invited_by = _agent_data(review.invited_by)
        self.review_round = review.review_round
        self.invitation_status = review.invitation_status
        self.invitation_sent_at = review.invitation_sent_at
        self.invitation_accepted_at = review.invitation_accepted_at
        self.declined_reason = review.declined_reason
        self.deadline = review.deadline
        self.recommendation = review.recommendation
        self.comments_to_author = review.comments_to_author
        self.comments_to_editor = review.comments_to_editor
        self.conflict_of_interest_declared = \
            review.conflict_of_interest_declared
        self.conflict_of_interest_details = review.conflict_of_interest_details
        self.review_file_url = review.review_file_url
        self.submitted_at = review.submitted_at

    def to_review(self) -> domain.Review:
        return domain.Review(
            reviewer=_agent(self.reviewer),
            invited_by=_agent(self.invited_by),
            review_id=self.review_id,
            submission_id=self.submission_id,
            review_round=self.review_round or 1,
            invitation_status=self.invitation_status,
            invitation_sent_at=_utc(self.invitation_sent_at),
            invitation_accepted_at=_utc(self.invitation_accepted_at),
            declined_reason=self.declined_reason,
            deadline=_utc(self.deadline),
            recommendation=self.recommendation,
            comments_to_author=self.comments_to_author or '',
            comments_to_editor=self.comments_to_editor or '',
            conflict_of_interest_declared=bool(
                self.conflict_of_interest_declared
            ),
            conflict_of_interest_details=self.conflict_of_interest_details,
            review_file_url=self.review_file_url,
            submitted_at=_utc(self.submitted_at)
        )


class EditorialDecision(Base):    # type: ignore
    """Log of editorial decisions and workflow transitions."""

    __tablename__ = 'editorial_decisions'

    event_id = Column(String(40), primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'), index=True)
    creator = Column(FriendlyJSON)
    editor_id = Column(String(64), index=True)
    created = Column(PreciseDateTime)
    decision_type = Column(String(40))
    rationale = Column(Text)
    from_status = Column(String(40))
    to_status = Column(String(40))

    submission = relationship('Submission', back_populates='decisions')

    def update_from(self, decision: domain.EditorialDecision) -> None:
        self.event_id = decision.event_id
        self.creator = _agent_data(decision.creator)
        self.editor_id = _native_id(decision.creator)
        self.created = decision.created
        self.decision_type = decision.decision_type
        self.rationale = decision.rationale
        self.from_status = decision.from_status
        self.to_status = decision.to_status

    def to_decision(self) -> domain.EditorialDecision:
        return domain.EditorialDecision(
            event_id=self.event_id,
            creator=_agent(self.creator),
            created=_utc(self.created),
            decision_type=self.decision_type,
            rationale=self.rationale or '',
            from_status=self.from_status,
            to_status=self.to_status
        )


class RevisionRequest(Base):    # type: ignore
    __tablename__ = 'revision_requests'

    event_id = Column(String(40), primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'), index=True)
    creator = Column(FriendlyJSON)
    created = Column(PreciseDateTime)
    revision_type = Column(String(20))
    request_details = Column(Text)
    deadline = Column(DateTime)

    submission = relationship('Submission', back_populates='revision_requests')

    def update_from(self, request: domain.RevisionRequest) -> None:
        self.event_id = request.event_id
        self.creator = _agent_data(request.creator)
        self.created = request.created
        self.revision_type = request.revision_type
        self.request_details = request.request_details
        self.deadline = request.deadline

    def to_request(self) -> domain.RevisionRequest:
        return domain.RevisionRequest(
            event_id=self.event_id,
            creator=_agent(self.creator),
            created=_utc(self.created),
            revision_type=self.revision_type,
            request_details=self.request_details or '',
            deadline=_utc(self.deadline)
        )


class RejectionMessage(Base):    # type: ignore
    __tablename__ = 'rejection_messages'

    event_id = Column(String(40), primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'), index=True)
    creator = Column(FriendlyJSON)
    created = Column(PreciseDateTime)
    message = Column(Text)
    suggested_corrections = Column(Text)

    submission = relationship('Submission',
                              back_populates='rejection_messages')

    def update_from(self, message: domain.RejectionMessage) -> None:
        self.event_id = message.event_id
        self.creator = _agent_data(message.creator)
        self.created = message.created
        self.message = message.message
        self.suggested_corrections = message.suggested_corrections

    def to_message(self) -> domain.RejectionMessage:
        return domain.RejectionMessage(
            event_id=self.event_id,
            creator=_agent(self.creator),
            created=_utc(self.created),
            message=self.message or '',
            suggested_corrections=self.suggested_corrections
        )


class FileVersion(Base):    # type: ignore
    """An uploaded version of the manuscript."""

    __tablename__ = 'file_versions'
    __table_args__ = (UniqueConstraint('submission_id', 'version_number'),)

    file_version_id = Column(Integer, primary_key=True)
    submission_id = Column(ForeignKey('submissions.submission_id',
                                      ondelete='CASCADE'), index=True)
    version_number = Column(Integer, nullable=False)
    file_name = Column(String(255))
    file_url = Column(Text)
    file_type = Column(String(20))
    description = Column(Text)
    uploaded_by = Column(FriendlyJSON)
    created = Column(DateTime)

    submission = relationship('Submission', back_populates='file_versions')

    def update_from(self, version: domain.FileVersion) -> None:
        self.version_number = version.version_number
        self.file_name = version.file_name
        self.file_url = version.file_url
        self.file_type = version.file_type
        self.description = version.description
        self.uploaded_by = _agent_data(version.uploaded_by)
        self.created = version.created

    def to_file_version(self) -> domain.FileVersion:
        return domain.FileVersion(
            version_number=self.version_number,
            file_name=self.file_name,
            file_url=self.file_url,
            file_type=self.file_type or '',
            description=self.description,
            uploaded_by=_agent(self.uploaded_by),
            created=_utc(self.created)
        )


class Profile(Base):    # type: ignore
    """A registered user of the platform."""

    __tablename__ = 'profiles'

    user_id = Column(String(64), primary_key=True)
    email = Column(String(255), index=True)
    full_name = Column(String(255))
    affiliation = Column(String(255))
    bio = Column(Text)
    orcid_id = Column(String(19))
    is_editor = Column(Boolean, default=False)
    is_reviewer = Column(Boolean, default=False, index=True)
    email_notifications_enabled = Column(Boolean, default=True)
    deadline_reminder_days = Column(Integer, default=3)

    def update_from(self, profile: domain.Profile) -> None:
        self.user_id = profile.user_id
        self.email = profile.email
        self.full_name = profile.full_name
        self.affiliation = profile.affiliation
        self.bio = profile.bio
        self.orcid_id = profile.orcid_id
        self.is_editor = profile.is_editor
        self.is_reviewer = profile.is_reviewer
        self.email_notifications_enabled = profile.email_notifications_enabled
        self.deadline_reminder_days = profile.deadline_reminder_days

    def to_profile(self) -> domain.Profile:
        return domain.Profile(
            user_id=self.user_id,
            email=self.email or '',
            full_name=self.full_name or '',
            affiliation=self.affiliation or '',
            bio=self.bio or '',
            orcid_id=self.orcid_id,
            is_editor=bool(self.is_editor),
            is_reviewer=bool(self.is_reviewer),
            email_notifications_enabled=bool(
                self.email_notifications_enabled
            ),
            deadline_reminder_days=self.deadline_reminder_days or 0
        )


class Notification(Base):    # type: ignore
    """In-app notification for a user."""

    __tablename__ = 'notifications'

    notification_id = Column(Integer, primary_key=True)
    user_id = Column(String(64), index=True, nullable=False)
    title = Column(String(255))
    message = Column(Text)
    notification_type = Column(String(20), default='info')
    read = Column(Boolean, default=False, index=True)
    created = Column(DateTime, default=lambda: datetime.now(UTC))

    def to_notification(self) -> domain.Notification:
        return domain.Notification(
            notification_id=self.notification_id,
            user_id=self.user_id,
            title=self.title or '',
            message=self.message or '',
            notification_type=self.notification_type,
            read=bool(self.read),
            created=_utc(self.created)
        )

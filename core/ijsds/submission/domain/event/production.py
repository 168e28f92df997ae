"""Commands/events for production and publication of accepted manuscripts."""

from datetime import datetime
from typing import Optional

from dataclasses import field

from ...exceptions import InvalidEvent
from ..submission import Submission, Publication
from ..util import coerce_datetime
from .base import Event
from .util import dataclass
from . import validators


def _submission_is_accepted(event: Event, submission: Submission) -> None:
    if not submission.is_accepted:
        raise InvalidEvent(event, "Submission has not been accepted")


def _publication(submission: Submission) -> Publication:
    if submission.publication is None:
        submission.publication = Publication()
    return submission.publication


@dataclass()
class SetDOI(Event):
    """Set the DOI of an accepted article by hand."""

    NAME = "set DOI"
    NAMED = "DOI set"

    doi: str = field(default_factory=str)

    def __post_init__(self) -> None:
        super(SetDOI, self).__post_init__()
        self.doi = self.doi.strip()

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        _submission_is_accepted(self, submission)
        validators.valid_doi(self, self.doi)

    def project(self, submission: Submission) -> Submission:
        _publication(submission).doi = self.doi
        return submission


@dataclass()
class RegisterDOI(Event):
    """A DOI was minted for the article by the archival service."""

    NAME = "register DOI"
    NAMED = "DOI registered"

    doi: str = field(default_factory=str)
    concept_doi: Optional[str] = field(default=None)
    zenodo_id: Optional[str] = field(default=None)
    zenodo_url: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        _submission_is_accepted(self, submission)
        validators.valid_doi(self, self.doi)
        if self.concept_doi:
            validators.valid_doi(self, self.concept_doi)

    def project(self, submission: Submission) -> Submission:
        publication = _publication(submission)
        publication.doi = self.doi
        publication.concept_doi = self.concept_doi
        publication.zenodo_id = self.zenodo_id
        publication.zenodo_url = self.zenodo_url
        return submission


@dataclass()
class AssignToIssue(Event):
    """Place an accepted article in a volume and issue of the journal."""

    NAME = "assign to issue"
    NAMED = "assigned to issue"

    volume: Optional[int] = field(default=None)
    issue: Optional[int] = field(default=None)
    page_start: Optional[int] = field(default=None)
    page_end: Optional[int] = field(default=None)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        _submission_is_accepted(self, submission)
        for name in ('volume', 'issue'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidEvent(self, f"{name.title()} must be a positive"
                                         f" number")
        self._pages_are_sensible(submission)

    def _pages_are_sensible(self, submission: Submission) -> None:
        for page in (self.page_start, self.page_end):
            if page is not None and (not isinstance(page, int) or page < 1):
                raise InvalidEvent(self, "Pages must be positive numbers")
        if self.page_start is not None and self.page_end is not None \
                and self.page_end < self.page_start:
            raise InvalidEvent(self, "Last page precedes first page")

    def project(self, submission: Submission) -> Submission:
        publication = _publication(submission)
        publication.volume = self.volume
        publication.issue = self.issue
        publication.page_start = self.page_start
        publication.page_end = self.page_end
        return submission


@dataclass()
class Publish(Event):
    """Publish the article."""

    NAME = "publish"
    NAMED = "published"

    publication_date: Optional[datetime] = field(default=None)

    ALLOWED_FROM = (Submission.ACCEPTED, Submission.TYPESETTING)

    def __post_init__(self) -> None:
        super(Publish, self).__post_init__()
        self.publication_date = coerce_datetime(self.publication_date)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.status_is_one_of(self, submission, self.ALLOWED_FROM)
        if not submission.doi:
            raise InvalidEvent(self, "A DOI is required for publication")

    def project(self, submission: Submission) -> Submission:
        _publication(submission).publication_date = \
            self.publication_date or self.created
        submission.status = Submission.PUBLISHED
        return submission

"""Commands/events for editorial decisions."""

from datetime import datetime
from typing import Optional

from dataclasses import field

from ...exceptions import InvalidEvent
from ..submission import Submission, EditorialDecision, RevisionRequest, \
    RejectionMessage, FileVersion
from ..util import coerce_datetime
from .base import Event
from .util import dataclass
from . import validators


def _record_decision(event: Event, submission: Submission,
                     decision_type: str, rationale: str,
                     to_status: str) -> Submission:
    """Record the decision, and move the submission to ``to_status``."""
    submission.decisions[event.event_id] = EditorialDecision(
        event_id=event.event_id,
        creator=event.creator,
        created=event.created,
        decision_type=decision_type,
        rationale=rationale.strip(),
        from_status=submission.status,
        to_status=to_status
    )
    submission.status = to_status
    return submission


@dataclass()
class AcceptSubmission(Event):
    """Accept the manuscript for publication."""

    NAME = "accept submission"
    NAMED = "submission accepted"

    rationale: str = field(default_factory=str)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.submission_is_under_consideration(self, submission)
        validators.not_empty(self, self.rationale, "Rationale")

    def project(self, submission: Submission) -> Submission:
        submission.approved_at = self.created
        submission.approved_by = self.creator
        return _record_decision(self, submission, EditorialDecision.ACCEPT,
                                self.rationale, Submission.ACCEPTED)


@dataclass()
class RejectSubmission(Event):
    """Reject the manuscript after consideration."""

    NAME = "reject submission"
    NAMED = "submission rejected"

    rationale: str = field(default_factory=str)
    message: Optional[str] = field(default=None)
    """Message to the authors."""

    suggested_corrections: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.submission_is_under_consideration(self, submission)
        validators.not_empty(self, self.rationale, "Rationale")

    def project(self, submission: Submission) -> Submission:
        if self.message and self.message.strip():
            submission.rejection_messages[self.event_id] = RejectionMessage(
                event_id=self.event_id,
                creator=self.creator,
                created=self.created,
                message=self.message.strip(),
                suggested_corrections=self.suggested_corrections
            )
        return _record_decision(self, submission, EditorialDecision.REJECT,
                                self.rationale, Submission.REJECTED)


@dataclass()
class DeskReject(Event):
    """Reject the manuscript without sending it out for review."""

    NAME = "desk reject submission"
    NAMED = "submission desk rejected"

    rationale: str = field(default_factory=str)

    ALLOWED_FROM = (Submission.SUBMITTED, Submission.EDITORIAL_REVIEW)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.status_is_one_of(self, submission, self.ALLOWED_FROM)
        validators.not_empty(self, self.rationale, "Rationale")

    def project(self, submission: Submission) -> Submission:
        return _record_decision(self, submission,
                                EditorialDecision.DESK_REJECTION,
                                self.rationale, Submission.DESK_REJECTED)


@dataclass()
class RequestRevision(Event):
    """Ask the authors to revise the manuscript."""

    NAME = "request revision"
    NAMED = "revision requested"

    rationale: str = field(default_factory=str)
    revision_type: str = field(default=RevisionRequest.MINOR)
    request_details: str = field(default_factory=str)
    deadline: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        super(RequestRevision, self).__post_init__()
        self.deadline = coerce_datetime(self.deadline)

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.submission_is_under_consideration(self, submission)
        validators.not_empty(self, self.rationale, "Rationale")
        if self.revision_type not in (RevisionRequest.MINOR,
                                      RevisionRequest.MAJOR):
            raise InvalidEvent(self, f"Invalid revision type:"
                                     f" {self.revision_type}")
        if self.deadline is not None and self.deadline <= self.created:
            raise InvalidEvent(self, "Deadline must be in the future")

    def project(self, submission: Submission) -> Submission:
        submission.revision_requests[self.event_id] = RevisionRequest(
            event_id=self.event_id,
            creator=self.creator,
            created=self.created,
            revision_type=self.revision_type,
            request_details=(self.request_details or self.rationale).strip(),
            deadline=self.deadline
        )
        return _record_decision(self, submission,
                                EditorialDecision.REVISION_REQUESTED,
                                self.rationale, Submission.REVISION_REQUESTED)


@dataclass()
class SubmitRevision(Event):
    """The authors respond to a revision request with a new manuscript."""

    NAME = "submit revision"
    NAMED = "revision submitted"

    response_notes: str = field(default_factory=str)
    file_name: str = field(default_factory=str)
    file_url: str = field(default_factory=str)

    def validate(self, submission: Submission) -> None:
        if self.creator != submission.owner:
            raise InvalidEvent(self, "Only the submitter may revise")
        validators.status_is_one_of(self, submission,
                                    [Submission.REVISION_REQUESTED])
        validators.not_empty(self, self.response_notes, "Response notes")
        validators.not_empty(self, self.file_name, "File name")
        validators.not_empty(self, self.file_url, "File URL")

    def project(self, submission: Submission) -> Submission:
        version = submission.next_file_version_number
        submission.file_versions.append(FileVersion(
            version_number=version,
            file_name=self.file_name,
            file_url=self.file_url,
            uploaded_by=self.creator,
            created=self.created,
            description=f'Revision {version - 1}'
        ))
        submission.metadata.manuscript_file_url = self.file_url
        return _record_decision(self, submission,
                                EditorialDecision.REVISION_SUBMITTED,
                                self.response_notes, Submission.PEER_REVIEW)

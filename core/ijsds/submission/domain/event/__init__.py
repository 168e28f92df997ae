"""
Data structures for submission events.

- Events have unique identifiers generated from their data (creation, agent,
  submission).
- Events provide methods to update a submission based on the event data.
- Events provide validation methods for event data.

Events that concern the authors' manuscript and the editorial workflow are
defined here. Review events are in :mod:`.event.review`, editorial decisions
in :mod:`.event.decision`, and production/publication events in
:mod:`.event.production`. All are importable from this module.

Writing new events/commands
===========================

Events/commands are implemented as classes that inherit from :class:`.Event`.
It should:

- Be a dataclass (i.e. be decorated with :func:`.event.util.dataclass`).
- Define (using :func:`dataclasses.field`) associated data. Every field must
  have a default.
- Implement a validation method with the signature
  ``validate(self, submission: Submission) -> None`` that raises
  :class:`.InvalidEvent` if the event cannot be applied.
- Implement a projection method with the signature
  ``project(self, submission: Submission) -> Submission:`` that mutates
  the passed :class:`.domain.submission.Submission` instance.
  The projection *must not* generate side-effects, because it will be called
  any time we are generating the state of a submission. If you need to
  generate a side-effect, see :ref:`callbacks`.

For clarity, it's a good practice to individuate validation steps as separate
private instance methods, and call them from the public ``validate`` method.
Checks that are shared by several event types live in
:mod:`.event.validators`.

.. _callbacks:

Registering event callbacks
===========================

To attach a callback to an event type, use the :func:`Event.bind` decorator.
For example:

.. code-block:: python

   @SetTitle.bind()
   def do_this_when_a_title_is_set(event, before, after, creator):
       ...
       return []


Callbacks must have the signature ``(event: Event, before: Submission,
after: Submission, creator: Agent) -> Iterable[Event]``. ``creator`` is a
:class:`.System` agent, and should be used as the creator of any events that
the callback generates. Callbacks are triggered when :func:`.Event.commit` is
called, usually by :func:`.core.save`. Setting ``ENABLE_CALLBACKS=0`` will
disable callbacks entirely.

"""

import re
from typing import Optional, List, Any

from dataclasses import field
import bleach

from ... import logging
from ...exceptions import InvalidEvent
from ..submission import Submission, Author, EditorialDecision, FileVersion
from .. import workflow
from .base import Event, event_factory, EventType
from .util import dataclass
from . import validators
from .review import InviteReviewer, AcceptInvitation, DeclineInvitation, \
    SubmitReview, StartReviewRound
from .decision import AcceptSubmission, RejectSubmission, DeskReject, \
    RequestRevision, SubmitRevision
from .production import SetDOI, RegisterDOI, AssignToIssue, Publish

logger = logging.getLogger(__name__)


# Events related to the creation of a new submission.
#
# These are largely the domain of the authors, working through the submission
# form.


@dataclass()
class CreateSubmission(Event):
    """Creation of a new :class:`.domain.submission.Submission`."""

    NAME = "create submission"
    NAMED = "submission created"

    def validate(self, *args: Any, **kwargs: Any) -> None:
        """Validate creation of a submission."""
        return

    def project(self, submission: None = None) -> Submission:
        """Create a new :class:`.domain.submission.Submission`."""
        return Submission(creator=self.creator, created=self.created,
                          owner=self.creator, proxy=self.proxy,
                          client=self.client)


@dataclass()
class SetTitle(Event):
    """Update the title of a submission."""

    NAME = "update title"
    NAMED = "title updated"

    title: str = field(default='')

    MIN_LENGTH = 5
    MAX_LENGTH = 250
    ALLOWED_HTML = {"br", "sup", "sub", "em", "strong", "i", "b"}

    def __post_init__(self) -> None:
        """Perform some light cleanup on the provided value."""
        super(SetTitle, self).__post_init__()
        self.title = self.cleanup(self.title)

    def validate(self, submission: Submission) -> None:
        """Validate the title value."""
        validators.submission_is_not_finalized(self, submission)
        self._does_not_contain_html_escapes(submission)
        self._acceptable_length(submission)
        if self.title.isupper():
            raise InvalidEvent(self, "Title must not be all-caps")
        self._check_for_html(submission)

    def project(self, submission: Submission) -> Submission:
        """Update the title on a :class:`.domain.submission.Submission`."""
        submission.metadata.title = self.title
        return submission

    def _does_not_contain_html_escapes(self, submission: Submission) -> None:
        """The title must not contain HTML escapes."""
        if re.search(r"\&(?:[a-z]{3,4}|#x?[0-9a-f]{1,4})\;", self.title):
            raise InvalidEvent(self, "Title may not contain HTML escapes")

    def _acceptable_length(self, submission: Submission) -> None:
        """Verify that the title is an acceptable length."""
        N = len(self.title)
        if N < self.MIN_LENGTH or N > self.MAX_LENGTH:
            raise InvalidEvent(self, f"Title must be between {self.MIN_LENGTH}"
                                     f" and {self.MAX_LENGTH} characters")

    def _check_for_html(self, submission: Submission) -> None:
        """Check for disallowed HTML."""
        N = len(self.title)
        N_after = len(bleach.clean(self.title, tags=self.ALLOWED_HTML,
                                   strip=True))
        if N > N_after:
            raise InvalidEvent(self, "Title contains unacceptable HTML tags")

    @staticmethod
    def cleanup(value: str) -> str:
        """Perform some light tidying on the title."""
        return re.sub(r"\s+", " ", value or '').strip()


@dataclass()
class SetAbstract(Event):
    """Update the abstract of a submission."""

    NAME = "update abstract"
    NAMED = "abstract updated"

    abstract: str = field(default='')

    MIN_LENGTH = 20
    MAX_LENGTH = 5000

    def __post_init__(self) -> None:
        """Perform some light cleanup on the provided value."""
        super(SetAbstract, self).__post_init__()
        self.abstract = self.cleanup(self.abstract)

    def validate(self, submission: Submission) -> None:
        """Validate the abstract value."""
        validators.submission_is_not_finalized(self, submission)
        self._acceptable_length(submission)

    def project(self, submission: Submission) -> Submission:
        """Update the abstract on a :class:`.domain.submission.Submission`."""
        submission.metadata.abstract = self.abstract
        return submission

    def _acceptable_length(self, submission: Submission) -> None:
        N = len(self.abstract)
        if N < self.MIN_LENGTH or N > self.MAX_LENGTH:
            raise InvalidEvent(self, f"Abstract must be between"
                                     f" {self.MIN_LENGTH} and"
                                     f" {self.MAX_LENGTH} characters")

    @staticmethod
    def cleanup(value: str) -> str:
        """Collapse runs of spaces, but keep paragraph breaks."""
        value = re.sub(r"[ \t]+", " ", value or '')
        value = re.sub(r"\n\s*\n+", "\n\n", value)
        return value.strip()


@dataclass()
class SetKeywords(Event):
    """Update the keywords that describe the manuscript."""

    NAME = "update keywords"
    NAMED = "keywords updated"

    keywords: List[str] = field(default_factory=list)

    MAX_KEYWORDS = 10

    def __post_init__(self) -> None:
        """Accept a comma-delimited string, and drop duplicates."""
        super(SetKeywords, self).__post_init__()
        self.keywords = self.cleanup(self.keywords)

    def validate(self, submission: Submission) -> None:
        """Between one and ten keywords are required."""
        validators.submission_is_not_finalized(self, submission)
        if not self.keywords:
            raise InvalidEvent(self, "At least one keyword is required")
        if len(self.keywords) > self.MAX_KEYWORDS:
            raise InvalidEvent(self, f"No more than {self.MAX_KEYWORDS}"
                                     f" keywords may be provided")

    def project(self, submission: Submission) -> Submission:
        submission.metadata.keywords = list(self.keywords)
        return submission

    @staticmethod
    def cleanup(value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(',')
        seen = set()
        keywords = []
        for keyword in value or []:
            keyword = re.sub(r"\s+", " ", keyword).strip()
            if keyword and keyword.lower() not in seen:
                seen.add(keyword.lower())
                keywords.append(keyword)
        return keywords


@dataclass()
class SetSubjectArea(Event):
    """Set the subject area of the manuscript."""

    NAME = "set subject area"
    NAMED = "subject area set"

    subject_area: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)
        validators.not_empty(self, self.subject_area, "Subject area")

    def project(self, submission: Submission) -> Submission:
        submission.metadata.subject_area = self.subject_area.strip()
        return submission


@dataclass()
class SetAuthors(Event):
    """Update the authors on a :class:`.domain.submission.Submission`."""

    NAME = "update authors"
    NAMED = "authors updated"

    authors: List[Author] = field(default_factory=list)
    corresponding_author_email: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        """Coerce authors to :class:`.Author` and fix their order."""
        super(SetAuthors, self).__post_init__()
        self.authors = [Author(**a) if isinstance(a, dict) else a
                        for a in self.authors]
        for i, author in enumerate(self.authors):
            author.order = i
            author.name = re.sub(r"\s+", " ", author.name or '').strip()
            author.email = (author.email or '').strip()

    def validate(self, submission: Submission) -> None:
        """At least one author, each with a name and an e-mail address."""
        validators.submission_is_not_finalized(self, submission)
        if not self.authors:
            raise InvalidEvent(self, "At least one author is required")
        for author in self.authors:
            validators.not_empty(self, author.name, "Author name")
            validators.valid_email(self, author.email)
        self._corresponding_author_is_an_author(submission)

    def _corresponding_author_is_an_author(self, submission: Submission) \
            -> None:
        if self.corresponding_author_email is None:
            return
        emails = [a.email.lower() for a in self.authors]
        if self.corresponding_author_email.strip().lower() not in emails:
            raise InvalidEvent(self, "Corresponding author must be one of"
                                     " the authors")

    def project(self, submission: Submission) -> Submission:
        """Replace :attr:`.ArticleMetadata.authors`."""
        submission.metadata.authors = self.authors
        if self.corresponding_author_email:
            corresponding = self.corresponding_author_email.strip()
        else:
            corresponding = self.authors[0].email
        submission.metadata.corresponding_author_email = corresponding
        return submission


@dataclass()
class SetCoverLetter(Event):
    """The authors' letter to the editor."""

    NAME = "update cover letter"
    NAMED = "cover letter updated"

    cover_letter: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)

    def project(self, submission: Submission) -> Submission:
        submission.cover_letter = self.cover_letter.strip() or None
        return submission


@dataclass()
class SetReviewerSuggestions(Event):
    """The authors suggest potential reviewers for the editor's attention."""

    NAME = "update reviewer suggestions"
    NAMED = "reviewer suggestions updated"

    reviewer_suggestions: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)

    def project(self, submission: Submission) -> Submission:
        submission.reviewer_suggestions = \
            self.reviewer_suggestions.strip() or None
        return submission


@dataclass()
class SetFunding(Event):
    """Sources of funding for the work."""

    NAME = "update funding information"
    NAMED = "funding information updated"

    funding_info: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)

    def project(self, submission: Submission) -> Submission:
        submission.metadata.funding_info = self.funding_info.strip() or None
        return submission


@dataclass()
class SetConflictsOfInterest(Event):
    """The authors' declaration of competing interests."""

    NAME = "update conflicts of interest"
    NAMED = "conflicts of interest updated"

    conflicts_of_interest: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)

    def project(self, submission: Submission) -> Submission:
        submission.metadata.conflicts_of_interest = \
            self.conflicts_of_interest.strip() or None
        return submission


@dataclass()
class AttachManuscript(Event):
    """
    Attach the manuscript file to a draft submission.

    The file itself lives in object storage; we keep track of its location,
    and record it as a new :class:`.FileVersion`.
    """

    NAME = "attach manuscript"
    NAMED = "manuscript attached"

    file_name: str = field(default='')
    file_url: str = field(default='')
    description: Optional[str] = field(default=None)

    def validate(self, submission: Submission) -> None:
        validators.submission_is_not_finalized(self, submission)
        validators.creator_is_owner_or_editor(self, submission)
        validators.not_empty(self, self.file_name, "File name")
        validators.not_empty(self, self.file_url, "File URL")

    def project(self, submission: Submission) -> Submission:
        submission.metadata.manuscript_file_url = self.file_url
        submission.file_versions.append(FileVersion(
            version_number=submission.next_file_version_number,
            file_name=self.file_name,
            file_url=self.file_url,
            uploaded_by=self.creator,
            created=self.created,
            description=self.description or 'Original submission'
        ))
        return submission


@dataclass()
class FinalizeSubmission(Event):
    """Send the submission to the editors for consideration."""

    NAME = "finalize submission"
    NAMED = "submission finalized"

    REQUIRED_METADATA = ['title', 'abstract', 'authors', 'keywords',
                         'subject_area', 'manuscript_file_url']

    def validate(self, submission: Submission) -> None:
        """Ensure that all required data/steps are complete."""
        if submission.is_finalized:
            raise InvalidEvent(self, "Submission already finalized")
        validators.creator_is_owner_or_editor(self, submission)
        self._required_fields_are_complete(submission)

    def project(self, submission: Submission) -> Submission:
        """Move the submission into the editorial workflow."""
        submission.status = Submission.SUBMITTED
        submission.submitted = self.created
        return submission

    def _required_fields_are_complete(self, submission: Submission) -> None:
        """Verify that all required fields are complete."""
        for key in self.REQUIRED_METADATA:
            if not getattr(submission.metadata, key):
                raise InvalidEvent(self, f"Missing {key}")


# Events related to the editorial workflow.


@dataclass()
class TransitionWorkflow(Event):
    """
    Move the submission to a subsequent stage of the editorial workflow.

    Stages that carry an editorial decision (requesting revisions, accepting)
    and publication have dedicated events, since they need more information
    than just the target stage.
    """

    NAME = "transition workflow"
    NAMED = "workflow transitioned"

    target: str = field(default='')

    DEDICATED = {
        workflow.REVISION_REQUESTED: 'RequestRevision',
        workflow.ACCEPTED: 'AcceptSubmission',
        workflow.PUBLISHED: 'Publish',
    }

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        if not workflow.is_stage(self.target):
            raise InvalidEvent(self, f"No such stage: {self.target}")
        if self.target in self.DEDICATED:
            raise InvalidEvent(self, f"Use {self.DEDICATED[self.target]} to"
                                     f" move to {self.target}")
        allowed = [stage.id for stage
                   in workflow.next_states(submission.status)]
        if self.target not in allowed:
            raise InvalidEvent(self, f"Cannot move from {submission.status}"
                                     f" to {self.target}")

    def project(self, submission: Submission) -> Submission:
        submission.decisions[self.event_id] = EditorialDecision(
            event_id=self.event_id,
            creator=self.creator,
            created=self.created,
            decision_type=EditorialDecision.WORKFLOW_TRANSITION,
            rationale=f"Automated transition to {self.target}",
            from_status=submission.status,
            to_status=self.target
        )
        submission.status = self.target
        return submission


@dataclass()
class AddEditorNote(Event):
    """An internal note from the editors; not visible to authors."""

    NAME = "add editor note"
    NAMED = "editor note added"

    note: str = field(default='')

    def validate(self, submission: Submission) -> None:
        validators.creator_is_editor(self, submission)
        validators.not_empty(self, self.note, "Note")

    def project(self, submission: Submission) -> Submission:
        submission.editor_notes.append(self.note.strip())
        return submission

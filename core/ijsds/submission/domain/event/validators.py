"""Reusable validators for events."""

import re
from typing import Iterable, Optional

from .base import Event
from ..agent import User, System
from ..submission import Submission
from ...exceptions import InvalidEvent

DOI_PATTERN = re.compile(r"^10\.\d{4,}/\S+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def submission_is_not_finalized(event: Event, submission: Submission) -> None:
    """
    Verify that the submission is not finalized.

    Parameters
    ----------
    event : :class:`.Event`
    submission : :class:`.domain.submission.Submission`

    Raises
    ------
    :class:`.InvalidEvent`
        Raised if the submission is finalized.

    """
    if submission.is_finalized:
        raise InvalidEvent(event, "Cannot apply to a finalized submission")


def submission_is_under_consideration(event: Event,
                                      submission: Submission) -> None:
    """The submission must be awaiting an editorial decision."""
    if not submission.is_under_consideration:
        raise InvalidEvent(event, f"Submission is {submission.status}, and"
                                  f" is not under consideration")


def status_is_one_of(event: Event, submission: Submission,
                     statuses: Iterable[str]) -> None:
    """The submission must be in one of ``statuses``."""
    statuses = tuple(statuses)
    if submission.status not in statuses:
        raise InvalidEvent(event, f"Submission must be in one of"
                                  f" {', '.join(statuses)}; is"
                                  f" {submission.status}")


def creator_is_editor(event: Event, submission: Submission) -> None:
    """Only editors (or the system itself) may do this."""
    if isinstance(event.creator, System):
        return
    if not isinstance(event.creator, User) or not event.creator.is_editor:
        raise InvalidEvent(event, "Only editors may do this")


def creator_is_owner_or_editor(event: Event, submission: Submission) -> None:
    """The owner of the submission, or an editor, may do this."""
    if event.creator == submission.owner:
        return
    creator_is_editor(event, submission)


def not_empty(event: Event, value: Optional[str], name: str) -> None:
    """``value`` must contain something other than whitespace."""
    if not value or not value.strip():
        raise InvalidEvent(event, f"{name} is required")


def valid_doi(event: Event, value: Optional[str]) -> None:
    """A DOI looks like ``10.<registrant>/<suffix>``."""
    if not value or not DOI_PATTERN.match(value):
        raise InvalidEvent(event, f"Invalid DOI: {value}")


def valid_email(event: Event, value: Optional[str]) -> None:
    if not value or not EMAIL_PATTERN.match(value):
        raise InvalidEvent(event, f"Invalid e-mail address: {value}")

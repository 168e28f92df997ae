"""Core persistence methods for submissions and submission events."""

from typing import List, Tuple, Optional
from datetime import datetime, timedelta

from flask import Flask

from . import logging
from .domain.submission import Submission
from .domain.util import get_tzaware_utc_now
from .domain.event import Event, CreateSubmission
from .services import store
from .exceptions import NoSuchSubmission, SaveError, NothingToDo


logger = logging.getLogger(__name__)


def load(submission_id: int) -> Tuple[Submission, List[Event]]:
    """
    Load a submission and its history.

    This loads all events for the submission, and generates the most
    up-to-date representation based on those events.

    Parameters
    ----------
    submission_id : int
        Submission identifier.

    Returns
    -------
    :class:`.domain.submission.Submission`
        The current state of the submission.
    list
        Items are :class:`.Event` instances, in order of their occurrence.

    Raises
    ------
    :class:`ijsds.submission.exceptions.NoSuchSubmission`
        Raised when a submission with the passed ID cannot be found.

    """
    try:
        return store.get_submission(submission_id)
    except store.NoSuchSubmission as e:
        raise NoSuchSubmission(f'No submission with id {submission_id}') from e


def load_submissions_for_user(user_id: str) -> List[Submission]:
    """
    Load :class:`.domain.submission.Submission` owned by a specific user.

    Parameters
    ----------
    user_id : str
        Unique identifier for the user.

    Returns
    -------
    list
        Items are :class:`.domain.submission.Submission` instances.

    """
    return store.get_user_submissions_fast(user_id)


def load_fast(submission_id: int) -> Submission:
    """
    Load a :class:`.domain.submission.Submission` from its projected state.

    This does not load and apply past events. The most recent stored submission
    state is loaded directly from the database.

    Parameters
    ----------
    submission_id : int
        Submission identifier.

    Returns
    -------
    :class:`.domain.submission.Submission`
        The current state of the submission.

    """
    try:
        return store.get_submission_fast(submission_id)
    except store.NoSuchSubmission as e:
        raise NoSuchSubmission(f'No submission with id {submission_id}') from e


def save(*events: Event, submission_id: Optional[int] = None) \
        -> Tuple[Submission, List[Event]]:
    """
    Commit a set of new :class:`.Event` instances for a submission.

    This will persist the events to the database, along with the final
    state of the submission, and trigger any callbacks bound to the events.

    Parameters
    ----------
    events : :class:`.Event`
        Events to apply and persist.
    submission_id : int
        The unique ID for the submission, if available. If not provided, it is
        expected that ``events`` includes a :class:`.CreateSubmission`.

    Returns
    -------
    :class:`ijsds.submission.domain.submission.Submission`
        The state of the submission after all events (including rule-derived
        events) have been applied. Updated with the submission ID, if a
        :class:`.CreateSubmission` was included.
    list
        A list of :class:`.Event` instances applied to the submission. Note
        that this list may contain more events than were passed, if event
        rules were triggered.

    Raises
    ------
    :class:`ijsds.submission.exceptions.NoSuchSubmission`
        Raised if ``submission_id`` is not provided and the first event is not
        a :class:`.CreateSubmission`, or ``submission_id`` is provided but
        no such submission exists.
    :class:`.InvalidEvent`
        If an invalid event is encountered, the entire operation is aborted
        and this exception is raised.
    :class:`.SaveError`
        There was a problem persisting the events and/or submission state
        to the database.

    """
    if len(events) == 0:
        raise NothingToDo('Must pass at least one event')
    events = list(events)   # Coerce to list so that we can index.
    prior: List[Event] = []
    before: Optional[Submission] = None

    # We need ACIDity surrounding the the validation and persistence of new
    # events.
    try:
        with store.transaction():
            if submission_id is not None:
                # This will lock the submission row while we are working with
                # it.
                try:
                    before, prior = store.get_submission(submission_id,
                                                         for_update=True)
                except store.NoSuchSubmission as e:
                    raise NoSuchSubmission(f'No submission with id'
                                           f' {submission_id}') from e

            # Either we need a submission ID, or the first event must be a
            # creation.
            elif events[0].submission_id is None \
                    and not isinstance(events[0], CreateSubmission):
                raise NoSuchSubmission('Unable to determine submission')

            committed: List[Event] = []
            last: Optional[datetime] = None
            for event in events:
                # Fill in submission IDs, if they are missing.
                if event.submission_id is None and submission_id is not None:
                    event.submission_id = submission_id

                # The created timestamp should be roughly when the event was
                # committed. Since the event projection may refer to its own
                # ID (which is based on the creation time), this must be set
                # before the event is applied. Event IDs must not collide, so
                # timestamps within a batch strictly increase.
                event.created = get_tzaware_utc_now()
                if last is not None and event.created <= last:
                    event.created = last + timedelta(microseconds=1)
                last = event.created

                # Mutation happens here; raises InvalidEvent.
                logger.debug('Apply event %s: %s', event.event_id, event.NAME)
                after = event.apply(before)
                committed.append(event)
                if not event.committed:
                    after, consequent_events = event.commit(store.store_event)
                    committed += consequent_events
                    if consequent_events:
                        last = max(last, *[e.created for e in
                                           consequent_events])

                before = after      # Prepare for the next event.

            all_ = sorted(set(prior) | set(committed), key=lambda e: e.created)
            return after, list(all_)
    except store.StoreBaseException as e:
        raise SaveError('Failed to store events') from e


def init_app(app: Flask) -> None:
    """Set default configuration parameters for an application instance."""
    store.init_app(app)
    app.config.setdefault('ENABLE_CALLBACKS', 0)
    app.config.setdefault('ENABLE_ASYNC', 0)

"""
Persistence of events and projected submission state.

This service module does two main things:

1. Store and provide access to event data generated during the editorial
   process. Playing these events forward is the authoritative way to obtain
   the state of a submission.
2. Keep the projected submission tables (articles, reviews, decisions, file
   versions) up to date, so that listings and dashboards can be served
   without replaying events. See :func:`get_submission_fast`.

Events and the resulting submission state must be persisted in the same
transaction. To achieve this, the caller should use the
:func:`.util.transaction` context manager, and (when committing new events)
call :func:`.get_submission` with ``for_update=True``. This will lock the
submission row until the transaction is committed or rolled back.

ORM representations of the tables are located in :mod:`.store.models`. An
additional model, :class:`.DBEvent`, is defined in :mod:`.store.event`.

Profiles and in-app notifications are not event-sourced; they are stored and
updated directly.
"""

from typing import List, Optional, Tuple, Callable
from datetime import datetime
from functools import wraps
from dataclasses import asdict

from flask import Flask
from pytz import UTC
from retry import retry
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import NoResultFound

from ... import logging
from ...context import get_application_config
from ...domain.event import Event
from ...domain.submission import Submission
from ...domain.review import Review
from ...domain.profile import Profile, Notification
from .exceptions import StoreBaseException, NoSuchSubmission, \
    NoSuchNotification, TransactionFailed, Unavailable
from .util import transaction, current_session, db
from .event import DBEvent
from .models import Base
from . import models


logger = logging.getLogger(__name__)


def handle_operational_errors(func):
    """Catch SQLAlchemy OperationalErrors and raise :class:`.Unavailable`."""
    @wraps(func)
    def inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationalError as e:
            raise Unavailable('Submission database unavailable') from e
    return inner


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_events(submission_id: int) -> List[Event]:
    """
    Load events from the database.

    Parameters
    ----------
    submission_id : int

    Returns
    -------
    list
        Items are :class:`.Event` instances, in the order that they occurred.

    Raises
    ------
    :class:`.store.exceptions.NoSuchSubmission`
        Raised when there are no events for the provided submission ID.

    """
    session = current_session()
    event_data = session.query(DBEvent) \
        .filter(DBEvent.submission_id == submission_id) \
        .order_by(DBEvent.created)
    events = [datum.to_event() for datum in event_data]
    if not events:      # No events, no dice.
        raise NoSuchSubmission(f'Submission {submission_id} not found')
    return events


@handle_operational_errors
def get_submission(submission_id: int, for_update: bool = False) \
        -> Tuple[Submission, List[Event]]:
    """
    Get the current state of a submission by playing its events forward.

    Parameters
    ----------
    submission_id : int
    for_update : bool
        If ``True``, the submission row is locked for the remainder of the
        transaction.

    Returns
    -------
    :class:`.domain.submission.Submission`
    list
        Items are :class:`Event` instances.

    Raises
    ------
    :class:`.store.exceptions.NoSuchSubmission`

    """
    # Let the caller determine the transaction scope.
    session = current_session()
    row = session.query(models.Submission) \
        .filter(models.Submission.submission_id == submission_id)
    if for_update:
        row = row.with_for_update()
    try:
        row.one()
    except NoResultFound as e:
        raise NoSuchSubmission(f'Submission {submission_id} not found') from e

    events = get_events(submission_id)
    submission: Optional[Submission] = None
    for event in events:
        submission = event.apply(submission)
    assert submission is not None
    submission.submission_id = submission_id
    return submission, events


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_submission_fast(submission_id: int) -> Submission:
    """
    Get the projection of the submission directly.

    Instead of playing events forward, we grab the most recent snapshot of the
    submission in the database.

    Raises
    ------
    :class:`.store.exceptions.NoSuchSubmission`
        Raised when there are is no submission for the provided submission ID.

    """
    dbs = current_session().get(models.Submission, submission_id)
    if dbs is None:
        raise NoSuchSubmission(f'Submission {submission_id} not found')
    return dbs.to_submission()


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_user_submissions_fast(user_id: str) -> List[Submission]:
    """
    Get all submissions owned by a user, most recent first.

    Uses the same approach as :func:`get_submission_fast`.
    """
    db_submissions = current_session().query(models.Submission) \
        .filter(models.Submission.owner_id == str(user_id)) \
        .order_by(models.Submission.submission_id.desc())
    return [dbs.to_submission() for dbs in db_submissions]


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_submissions_by_status(*statuses: str) -> List[Submission]:
    """Get all submissions in any of ``statuses``, oldest first."""
    db_submissions = current_session().query(models.Submission) \
        .filter(models.Submission.status.in_(statuses)) \
        .order_by(models.Submission.submission_id.asc())
    return [dbs.to_submission() for dbs in db_submissions]


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_reviews_for_reviewer(user_id: str) -> List[Review]:
    """Get all of a reviewer's reviews, across submissions and rounds."""
    rows = current_session().query(models.Review) \
        .filter(models.Review.reviewer_id == str(user_id)) \
        .order_by(models.Review.invitation_sent_at.asc())
    return [row.to_review() for row in rows]


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_active_reviews() -> List[Review]:
    """Get reviews that have been neither submitted nor declined."""
    rows = current_session().query(models.Review) \
        .filter(models.Review.submitted_at.is_(None)) \
        .filter(models.Review.invitation_status != Review.DECLINED) \
        .order_by(models.Review.deadline.asc())
    return [row.to_review() for row in rows]


@handle_operational_errors
def store_event(event: Event, before: Optional[Submission],
                after: Optional[Submission],
                *call: Callable) -> Tuple[Event, Submission]:
    """
    Store an event, and update submission state.

    Parameters
    ----------
    event : :class:`Event`
    before : :class:`Submission`
        The state of the submission before the event occurred.
    after : :class:`Submission`
        The state of the submission after the event occurred.
    call : list
        Items are callables that accept args ``Event, Submission, Submission``.
        These are called within the transaction context; if an exception is
        raised, the transaction is rolled back.

    """
    # Let the caller determine the transaction scope.
    session = current_session()
    if event.committed:
        raise TransactionFailed(f'{event.event_id} already committed')
    if after is None:
        raise TransactionFailed(f'{event.event_id} has no projected state')
    logger.debug('store event %s', event.event_type)

    # This is the case that we have a new submission.
    if before is None:
        dbs = models.Submission()
        this_is_a_new_submission = True
    else:
        this_is_a_new_submission = False
        dbs = session.get(models.Submission, before.submission_id)
        if dbs is None:
            raise NoSuchSubmission(f'Submission {before.submission_id} not'
                                   f' found')
    dbs.update_from_submission(after)

    db_event = _new_dbevent(event)
    session.add(dbs)
    session.add(db_event)

    # Make sure that we get a submission ID; note that this does not commit
    # the transaction, just pushes the SQL that we have generated so far to
    # the database server.
    session.flush()

    for func in call:
        logger.debug('call %s with event %s', func, event.event_id)
        func(event, before, after)

    # Attach the database object for the event to the row for the
    # submission.
    if this_is_a_new_submission:    # Update in transaction.
        db_event.submission = dbs
    else:                           # Just set the ID directly.
        db_event.submission_id = before.submission_id

    event.committed = True
    event.submission_id = dbs.submission_id
    after.submission_id = dbs.submission_id
    return event, after


# Profiles and notifications.

@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_profile(user_id: str) -> Optional[Profile]:
    """Get the profile for a user, if they have one."""
    row = current_session().get(models.Profile, str(user_id))
    return row.to_profile() if row is not None else None


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_reviewer_profiles() -> List[Profile]:
    """Get the profiles of everyone who has agreed to review."""
    rows = current_session().query(models.Profile) \
        .filter(models.Profile.is_reviewer.is_(True)) \
        .order_by(models.Profile.full_name.asc())
    return [row.to_profile() for row in rows]


@handle_operational_errors
def store_profile(profile: Profile) -> Profile:
    """Create or update a :class:`.Profile`."""
    with transaction() as session:
        row = session.get(models.Profile, profile.user_id)
        if row is None:
            row = models.Profile()
            session.add(row)
        row.update_from(profile)
    return profile


@handle_operational_errors
def add_notification(user_id: str, title: str, message: str,
                     notification_type: str = Notification.INFO) \
        -> Notification:
    """Add an in-app notification for a user."""
    row = models.Notification(user_id=str(user_id), title=title,
                              message=message,
                              notification_type=notification_type,
                              read=False, created=datetime.now(UTC))
    with transaction() as session:
        session.add(row)
        session.flush()
        notification = row.to_notification()
    return notification


@retry(Unavailable, tries=3, delay=1)
@handle_operational_errors
def get_notifications(user_id: str, unread_only: bool = False) \
        -> List[Notification]:
    """Get a user's notifications, most recent first."""
    rows = current_session().query(models.Notification) \
        .filter(models.Notification.user_id == str(user_id))
    if unread_only:
        rows = rows.filter(models.Notification.read.is_(False))
    rows = rows.order_by(models.Notification.created.desc())
    return [row.to_notification() for row in rows]


@handle_operational_errors
def mark_notification_read(notification_id: int) -> Notification:
    """Mark a notification as read."""
    with transaction() as session:
        row = session.get(models.Notification, notification_id)
        if row is None:
            raise NoSuchNotification(f'Notification {notification_id} not'
                                     f' found')
        row.read = True
        notification = row.to_notification()
    return notification


# Private functions down here.

def _new_dbevent(event: Event) -> DBEvent:
    """Create an event entry in the database."""
    return DBEvent(event_type=event.event_type,
                   event_id=event.event_id,
                   event_version=event.event_version or _get_app_version(),
                   data=DBEvent.event_data(event),
                   created=event.created,
                   creator=asdict(event.creator),
                   proxy=asdict(event.proxy) if event.proxy else None,
                   client=asdict(event.client) if event.client else None)


def _get_app_version() -> str:
    return get_application_config().get('CORE_VERSION', '0.0.0')


def init_app(app: Flask) -> None:
    """Register the SQLAlchemy extension to an application."""
    if 'sqlalchemy' not in app.extensions:
        db.init_app(app)

        @app.teardown_request
        def teardown_request(exception):
            if exception:
                db.session.rollback()
            db.session.remove()


def create_all() -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(db.engine)


def drop_all() -> None:
    """Drop all tables in the database."""
    Base.metadata.drop_all(db.engine)

"""Tests for storing events."""

from unittest import TestCase
from datetime import datetime, timedelta

from pytz import UTC

from ....domain.agent import User
from ....domain.submission import Submission, Author
from ....domain.event import CreateSubmission, SetTitle, SetAbstract, \
    SetAuthors, SetKeywords, SetSubjectArea, AttachManuscript, \
    FinalizeSubmission, InviteReviewer
from .. import models, DBEvent, current_session, store_event, transaction, \
    exceptions

from .util import in_memory_db


def _store_all(events, before=None):
    """Apply and store ``events``, one microsecond apart."""
    now = datetime.now(UTC)
    for i, event in enumerate(events):
        event.created = now + timedelta(microseconds=i)
        after = event.apply(before)
        event, after = store_event(event, before, after)
        before = after
    return after


class TestStoreEvent(TestCase):
    """Tests for :func:`.store_event`."""

    def setUp(self):
        """Instantiate a user."""
        self.user = User(12345, 'joe@joe.joe', name='Joe Bloggs',
                         roles=[User.AUTHOR])

    def test_store_creation(self):
        """Store a :class:`CreateSubmission`."""
        with in_memory_db():
            session = current_session()
            before = None
            event = CreateSubmission(creator=self.user)
            event.created = datetime.now(UTC)
            after = event.apply(before)

            event, after = store_event(event, before, after)

            db_sb = session.get(models.Submission, event.submission_id)

            # Make sure that we get the right submission ID.
            self.assertIsNotNone(event.submission_id)
            self.assertEqual(event.submission_id, after.submission_id)
            self.assertEqual(event.submission_id, db_sb.submission_id)
            self.assertTrue(event.committed)

            self.assertEqual(db_sb.status, Submission.DRAFT)
            self.assertEqual(db_sb.owner_id, '12345')
            self.assertEqual(db_sb.article.status, 'draft')

    def test_store_events_with_metadata(self):
        """Store events and attendant submission with metadata."""
        with in_memory_db():
            events = [
                CreateSubmission(creator=self.user),
                SetTitle(creator=self.user, title='Data  and society'),
                SetAbstract(creator=self.user,
                            abstract='A very abstract abstract indeed.'),
                SetKeywords(creator=self.user,
                            keywords='data, society, Data, ethics'),
                SetAuthors(creator=self.user, authors=[
                    Author(name='Joe Bloggs', email='joe@joe.joe'),
                    Author(name='Jane Doe', email='jane@doe.edu')
                ], corresponding_author_email='jane@doe.edu'),
            ]
            with transaction():
                after = _store_all(events)

            session = current_session()
            db_submission = session.get(models.Submission,
                                        after.submission_id)
            article = db_submission.article
            self.assertEqual(article.title, 'Data and society')
            self.assertEqual(article.keywords, ['data', 'society', 'ethics'])
            self.assertEqual(article.authors_display, 'Joe Bloggs, Jane Doe',
                             "The author list is stored for display")
            self.assertEqual(article.corresponding_author_email,
                             'jane@doe.edu')

            db_events = session.query(DBEvent).all()
            self.assertEqual(len(db_events), 5, "Five events are stored")
            for db_event in db_events:
                self.assertEqual(db_event.submission_id, after.submission_id,
                                 "The submission id should be set")
                self.assertNotIn('before', db_event.data)
                self.assertNotIn('after', db_event.data)

    def test_store_file_versions_and_reviews(self):
        """Child rows are kept in sync with the projected submission."""
        editor = User('ed1', 'ed@ijsds.org', roles=[User.EDITOR])
        reviewer = User('rev1', 'rev@uni.edu', roles=[User.REVIEWER])
        with in_memory_db():
            with transaction():
                after = _store_all([
                    CreateSubmission(creator=self.user),
                    SetTitle(creator=self.user, title='Data and society'),
                    SetAbstract(creator=self.user,
                                abstract='A very abstract abstract indeed.'),
                    SetKeywords(creator=self.user, keywords=['data']),
                    SetSubjectArea(creator=self.user,
                                   subject_area='Sociology'),
                    SetAuthors(creator=self.user, authors=[
                        Author(name='Joe Bloggs', email='joe@joe.joe')
                    ]),
                    AttachManuscript(creator=self.user,
                                     file_name='paper.pdf',
                                     file_url='https://files/paper.pdf'),
                    FinalizeSubmission(creator=self.user)
                ])
                after = _store_all([InviteReviewer(creator=editor,
                                                   reviewer=reviewer)],
                                   before=after)

            db_submission = current_session().get(models.Submission,
                                                  after.submission_id)
            self.assertEqual(len(db_submission.file_versions), 1)
            self.assertEqual(db_submission.file_versions[0].file_type, 'pdf')
            self.assertEqual(len(db_submission.reviews), 1)
            self.assertEqual(db_submission.reviews[0].reviewer_id, 'rev1')
            self.assertEqual(db_submission.reviews[0].invitation_status,
                             'pending')
            self.assertEqual(db_submission.article.status, 'submitted')

    def test_store_committed_event(self):
        """An event may only be stored once."""
        with in_memory_db():
            event = CreateSubmission(creator=self.user)
            event.created = datetime.now(UTC)
            after = event.apply(None)
            store_event(event, None, after)
            with self.assertRaises(exceptions.TransactionFailed):
                store_event(event, None, after)

    def test_rollback_on_failure(self):
        """Nothing is stored if something goes wrong in the transaction."""
        with in_memory_db():
            event = CreateSubmission(creator=self.user)
            event.created = datetime.now(UTC)
            after = event.apply(None)

            def explode(*args):
                raise RuntimeError('boom')

            with self.assertRaises(exceptions.TransactionFailed):
                with transaction():
                    store_event(event, None, after, explode)

            self.assertEqual(current_session().query(DBEvent).count(), 0)
            self.assertEqual(
                current_session().query(models.Submission).count(), 0
            )

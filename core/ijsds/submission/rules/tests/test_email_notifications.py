"""Tests for :mod:`.rules.email_notifications`."""

import copy
from datetime import datetime, timedelta
from unittest import TestCase, mock

from flask import Flask
from pytz import UTC

from ...domain.agent import User, System
from ...domain.submission import Submission, Author, ArticleMetadata
from ...domain.profile import Profile, Notification
from ...domain.event import FinalizeSubmission, InviteReviewer, \
    RejectSubmission
from ...services.integration import ConnectionFailed
from ... import init_app
from .. import email_notifications


def _app():
    app = Flask('foo')
    app.config['EMAIL_ENABLED'] = 1
    app.config['ENABLE_ASYNC'] = 0
    app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
    init_app(app)
    return app


class NotificationTestCase(TestCase):
    """Sets up a submission with an author and an editor."""

    def setUp(self):
        """Create a finalized submission."""
        self.author = User('a1', 'joe@uni.edu', name='Joe Bloggs',
                           roles=[User.AUTHOR])
        self.editor = User('ed1', 'ed@ijsds.org', name='The Editor',
                           roles=[User.EDITOR])
        self.reviewer = User('rev1', 'rev@other.edu', name='Rae Viewer',
                             roles=[User.REVIEWER])
        self.creator = System('email_notifications')
        self.before = Submission(
            submission_id=42,
            creator=self.author,
            owner=self.author,
            created=datetime.now(UTC),
            status=Submission.DRAFT,
            metadata=ArticleMetadata(
                title='Data and society',
                authors=[Author(name='Joe Bloggs', email='joe@uni.edu')],
                corresponding_author_email='joe@uni.edu'
            )
        )
        self.after = copy.deepcopy(self.before)
        self.after.status = Submission.SUBMITTED
        self.after.submitted = datetime.now(UTC)
        self.app = _app()


class TestConfirmSubmission(NotificationTestCase):
    """The corresponding author hears that we received the manuscript."""

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_confirm_submission(self, mock_Functions, mock_store):
        """An e-mail is sent, and an in-app notification is added."""
        mock_store.get_profile.return_value = None
        functions = mock_Functions.current_session.return_value
        event = FinalizeSubmission(creator=self.author,
                                   created=datetime.now(UTC))
        with self.app.app_context():
            events = list(email_notifications.confirm_submission(
                event, self.before, self.after, self.creator
            ))
        self.assertEqual(events, [], "No further events are generated")

        self.assertEqual(functions.send_email.call_count, 1)
        args, kwargs = functions.send_email.call_args
        self.assertEqual(args[0], 'joe@uni.edu')
        self.assertEqual(args[1], 'Submission Received')
        self.assertIn('Data and society', args[2])
        self.assertEqual(kwargs['user_id'], 'a1')
        self.assertEqual(kwargs['submission_id'], 42)

        args, _ = mock_store.add_notification.call_args
        user_id, title, message, level = args
        self.assertEqual(user_id, 'a1')
        self.assertEqual(title, 'Submission Received')
        self.assertNotIn('<', message, "Markup is stripped")
        self.assertTrue(message.endswith('...'))
        self.assertLessEqual(len(message), 203)
        self.assertEqual(level, Notification.SUCCESS)

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_author_opted_out(self, mock_Functions, mock_store):
        """Nothing is sent to someone who does not want notifications."""
        mock_store.get_profile.return_value = Profile(
            user_id='a1', email_notifications_enabled=False
        )
        functions = mock_Functions.current_session.return_value
        event = FinalizeSubmission(creator=self.author,
                                   created=datetime.now(UTC))
        with self.app.app_context():
            list(email_notifications.confirm_submission(
                event, self.before, self.after, self.creator
            ))
        self.assertEqual(functions.send_email.call_count, 0)
        self.assertEqual(mock_store.add_notification.call_count, 0)

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_email_disabled(self, mock_Functions, mock_store):
        """E-mail can be switched off for the whole application."""
        self.app.config['EMAIL_ENABLED'] = 0
        functions = mock_Functions.current_session.return_value
        event = FinalizeSubmission(creator=self.author,
                                   created=datetime.now(UTC))
        with self.app.app_context():
            list(email_notifications.confirm_submission(
                event, self.before, self.after, self.creator
            ))
        self.assertEqual(functions.send_email.call_count, 0)


class TestInviteReviewer(NotificationTestCase):
    """The reviewer is asked to review."""

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_invitation(self, mock_Functions, mock_store):
        """The e-mail names the manuscript and the deadline."""
        mock_store.get_profile.return_value = None
        functions = mock_Functions.current_session.return_value
        event = InviteReviewer(creator=self.editor, reviewer=self.reviewer,
                               created=datetime(2026, 3, 1, tzinfo=UTC))
        after = event.apply(self.after)
        with self.app.app_context():
            list(email_notifications.invite_reviewer(
                event, self.after, after, self.creator
            ))
        args, kwargs = functions.send_email.call_args
        self.assertEqual(args[0], 'rev@other.edu')
        self.assertEqual(args[1], 'Review Invitation: Data and society')
        self.assertIn('15 March 2026', args[2],
                      "The default deadline is two weeks out")
        self.assertEqual(kwargs['review_id'], event.event_id)
        self.assertEqual(kwargs['user_id'], 'rev1')


class TestStatusChanged(NotificationTestCase):
    """Authors hear about editorial decisions."""

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_rejection(self, mock_Functions, mock_store):
        """The editor's message to the authors is included."""
        mock_store.get_profile.return_value = None
        functions = mock_Functions.current_session.return_value
        event = RejectSubmission(creator=self.editor,
                                 created=datetime.now(UTC) + timedelta(1),
                                 rationale='Out of scope',
                                 message='Consider a methods journal.')
        after = event.apply(self.after)
        with self.app.app_context():
            list(email_notifications.status_changed(
                event, self.after, after, self.creator
            ))
        args, _ = functions.send_email.call_args
        self.assertEqual(args[1], 'Submission Status Update')
        self.assertIn('Consider a methods journal.', args[2])
        self.assertIn('REJECTED', args[2])

    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{email_notifications.__name__}.Functions')
    def test_email_service_down(self, mock_Functions, mock_store):
        """The decision stands if the e-mail cannot be sent."""
        mock_store.get_profile.return_value = None
        functions = mock_Functions.current_session.return_value
        functions.send_email.side_effect = ConnectionFailed('Nope')
        event = RejectSubmission(creator=self.editor,
                                 created=datetime.now(UTC) + timedelta(1),
                                 rationale='Out of scope')
        after = event.apply(self.after)
        with self.app.app_context():
            events = list(email_notifications.status_changed(
                event, self.after, after, self.creator
            ))
        self.assertEqual(events, [])
        self.assertEqual(functions.send_email.call_count, 1)
        self.assertEqual(mock_store.add_notification.call_count, 0,
                         "No notification for a message that was not sent")


class TestSummarize(TestCase):
    """In-app notifications carry a plain-text summary."""

    def test_summarize(self):
        """Tags are stripped and whitespace collapsed."""
        summary = email_notifications.summarize(
            '<html><body><h2>Hi</h2>\n  <p>There   you <b>are</b></p>'
            '</body></html>'
        )
        self.assertEqual(summary, 'Hi There you are...')

    def test_long_message(self):
        """Long messages are cut short."""
        summary = email_notifications.summarize('<p>' + 'x' * 500 + '</p>')
        self.assertEqual(summary, 'x' * 200 + '...')

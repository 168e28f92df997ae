"""Tests for :mod:`.rules.reminders`."""

from datetime import datetime, timedelta
from unittest import TestCase, mock

from flask import Flask
from pytz import UTC

from ...domain.agent import User
from ...domain.review import Review
from ...domain.profile import Profile
from ...domain.submission import Submission, ArticleMetadata
from ...services.integration import ConnectionFailed
from ... import init_app
from .. import reminders
from .. import email_notifications

NOW = datetime(2026, 5, 10, 9, 0, tzinfo=UTC)


def _review(review_id, days_left, **kwargs):
    return Review(reviewer=User(f'rev-{review_id}', f'{review_id}@uni.edu',
                                name=f'Reviewer {review_id}'),
                  review_id=review_id, submission_id=42,
                  invitation_status=Review.ACCEPTED,
                  deadline=NOW + timedelta(days=days_left), **kwargs)


class TestReminderIsDue(TestCase):
    """Tests for :func:`.reminders.reminder_is_due`."""

    def test_within_window(self):
        """The deadline is closer than the reviewer's preference."""
        self.assertTrue(reminders.reminder_is_due(_review('a', 2), 3, NOW))
        self.assertTrue(reminders.reminder_is_due(_review('a', 3), 3, NOW))

    def test_too_early(self):
        """The deadline is a long way off."""
        self.assertFalse(reminders.reminder_is_due(_review('a', 10), 3, NOW))

    def test_already_overdue(self):
        """Overdue reviews are chased by the editors, not by reminders."""
        self.assertFalse(reminders.reminder_is_due(_review('a', -2), 3, NOW))

    def test_submitted(self):
        """Nothing is owed on a submitted review."""
        review = _review('a', 1, submitted_at=NOW)
        self.assertFalse(reminders.reminder_is_due(review, 3, NOW))


class TestSendDeadlineReminders(TestCase):
    """Tests for :func:`.reminders.send_deadline_reminders`."""

    def setUp(self):
        """We need an app for the templates."""
        self.app = Flask('foo')
        self.app.config['EMAIL_ENABLED'] = 1
        self.app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        init_app(self.app)
        owner = User('a1', 'joe@uni.edu')
        self.submission = Submission(
            submission_id=42, creator=owner, owner=owner,
            status=Submission.PEER_REVIEW,
            metadata=ArticleMetadata(title='Data and society')
        )

    @mock.patch(f'{reminders.__name__}.notify')
    @mock.patch(f'{reminders.__name__}.store')
    def test_send_reminders(self, mock_store, mock_notify):
        """Only reviewers with a deadline in their window are reminded."""
        mock_store.get_active_reviews.return_value = [
            _review('soon', 2), _review('later', 6), _review('picky', 6)
        ]
        mock_store.get_profile.side_effect = lambda user_id: {
            'rev-picky': Profile(user_id='rev-picky',
                                 deadline_reminder_days=7),
        }.get(user_id)
        mock_store.get_submission_fast.return_value = self.submission
        mock_notify.return_value = True

        with self.app.app_context():
            sent = reminders.send_deadline_reminders(NOW)

        self.assertEqual(sent, 2)
        recipients = [c[0][0] for c in mock_notify.call_args_list]
        self.assertEqual(recipients, ['soon@uni.edu', 'picky@uni.edu'])
        _, kwargs = mock_notify.call_args_list[0]
        self.assertEqual(kwargs['review_id'], 'soon')
        html = mock_notify.call_args_list[0][0][2]
        self.assertIn('Data and society', html)
        self.assertIn('Days Remaining:</strong> 2', html)

    @mock.patch(f'{reminders.__name__}.notify')
    @mock.patch(f'{reminders.__name__}.store')
    def test_email_disabled(self, mock_store, mock_notify):
        """No reminders when e-mail is switched off."""
        self.app.config['EMAIL_ENABLED'] = 0
        with self.app.app_context():
            self.assertEqual(reminders.send_deadline_reminders(NOW), 0)
        self.assertEqual(mock_notify.call_count, 0)

    @mock.patch(f'{reminders.__name__}.notify')
    @mock.patch(f'{reminders.__name__}.store')
    def test_decided_submission(self, mock_store, mock_notify):
        """Reviews are not chased once the editor has decided."""
        self.submission.status = Submission.ACCEPTED
        mock_store.get_active_reviews.return_value = [_review('soon', 2)]
        mock_store.get_profile.return_value = None
        mock_store.get_submission_fast.return_value = self.submission

        with self.app.app_context():
            self.assertEqual(reminders.send_deadline_reminders(NOW), 0)
        self.assertEqual(mock_notify.call_count, 0)

    @mock.patch(f'{reminders.__name__}.notify')
    @mock.patch(f'{reminders.__name__}.store')
    def test_superseded_round(self, mock_store, mock_notify):
        """Invitations from an earlier round are not chased."""
        self.submission.review_round = 2
        mock_store.get_active_reviews.return_value = [
            _review('old', 2), _review('new', 2, review_round=2)
        ]
        mock_store.get_profile.return_value = None
        mock_store.get_submission_fast.return_value = self.submission
        mock_notify.return_value = True

        with self.app.app_context():
            self.assertEqual(reminders.send_deadline_reminders(NOW), 1)
        _, kwargs = mock_notify.call_args
        self.assertEqual(kwargs['review_id'], 'new')

    @mock.patch(f'{email_notifications.__name__}.Functions')
    @mock.patch(f'{email_notifications.__name__}.store')
    @mock.patch(f'{reminders.__name__}.store')
    def test_one_reviewer_unreachable(self, mock_store, mock_notify_store,
                                      mock_Functions):
        """A failed e-mail does not stop the other reminders."""
        mock_store.get_active_reviews.return_value = [
            _review('first', 1), _review('second', 2)
        ]
        mock_store.get_profile.return_value = None
        mock_store.get_submission_fast.return_value = self.submission
        mock_notify_store.get_profile.return_value = None
        functions = mock_Functions.current_session.return_value
        functions.send_email.side_effect = [ConnectionFailed('Nope'), None]

        with self.app.app_context():
            self.assertEqual(reminders.send_deadline_reminders(NOW), 1)
        self.assertEqual(functions.send_email.call_count, 2)
        args, _ = mock_notify_store.add_notification.call_args
        self.assertEqual(args[0], 'rev-second')

"""Tests for profiles and in-app notifications."""

from unittest import TestCase

from ....domain.profile import Profile, Notification
from .. import get_profile, get_reviewer_profiles, store_profile, \
    add_notification, get_notifications, mark_notification_read, exceptions

from .util import in_memory_db


class TestProfiles(TestCase):
    """Profiles are stored and updated directly."""

    def test_no_profile(self):
        """A user without a profile."""
        with in_memory_db():
            self.assertIsNone(get_profile('nobody'))

    def test_store_and_update_profile(self):
        """Store a profile, then change it."""
        with in_memory_db():
            profile = Profile(user_id='u1', email='jane@uni.edu',
                              full_name='Jane Doe', is_reviewer=True)
            store_profile(profile)
            self.assertEqual(get_profile('u1'), profile)

            profile.bio = 'I study survey methodology.'
            profile.deadline_reminder_days = 5
            store_profile(profile)
            loaded = get_profile('u1')
            self.assertEqual(loaded.bio, 'I study survey methodology.')
            self.assertEqual(loaded.deadline_reminder_days, 5)

    def test_get_reviewer_profiles(self):
        """Only those who review are returned."""
        with in_memory_db():
            store_profile(Profile(user_id='u1', full_name='Zed',
                                  is_reviewer=True))
            store_profile(Profile(user_id='u2', full_name='Amy',
                                  is_reviewer=True))
            store_profile(Profile(user_id='u3', full_name='Bob'))
            self.assertEqual([p.user_id for p in get_reviewer_profiles()],
                             ['u2', 'u1'])


class TestNotifications(TestCase):
    """In-app notifications."""

    def test_add_and_read(self):
        """Add a notification, and then mark it read."""
        with in_memory_db():
            notification = add_notification('u1', 'Hello', 'Hi there',
                                            Notification.SUCCESS)
            self.assertIsNotNone(notification.notification_id)
            self.assertFalse(notification.read)
            add_notification('u2', 'Not yours', 'Nope')

            self.assertEqual(len(get_notifications('u1')), 1)
            self.assertEqual(len(get_notifications('u1', unread_only=True)),
                             1)

            read = mark_notification_read(notification.notification_id)
            self.assertTrue(read.read)
            self.assertEqual(get_notifications('u1', unread_only=True), [])

    def test_mark_nonexistant(self):
        """Cannot mark a notification that doesn't exist."""
        with in_memory_db():
            with self.assertRaises(exceptions.NoSuchNotification):
                mark_notification_read(42)

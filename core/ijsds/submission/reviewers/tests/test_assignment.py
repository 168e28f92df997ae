"""Tests for :mod:`.reviewers.assignment`."""

from datetime import timedelta
from unittest import TestCase

from ...domain.agent import User
from ...domain.event import InviteReviewer
from .. import assignment
from .util import make_submission, make_profile, NOW


class TestAutoAssign(TestCase):
    """Tests for :func:`.assignment.auto_assign`."""

    def setUp(self):
        """The best match on paper works with the author."""
        self.submission = make_submission()
        self.editor = User('ed', 'ed@journal.org', roles=[User.EDITOR])
        self.colleague = make_profile(
            'colleague', email='kofi@ug.edu.gh',
            bio='Microfinance, poverty, and rural credit in Ghana.',
            affiliation='Economics Department'
        )
        self.expert = make_profile(
            'expert', bio='Microfinance and poverty.',
            affiliation='Economics Department'
        )
        self.generalist = make_profile('generalist', bio='Rural sociology.')
        self.novice = make_profile('novice')
        self.candidates = [self.novice, self.generalist, self.colleague,
                           self.expert]

    def test_skips_conflicted(self):
        """High-risk conflicts are passed over."""
        events = assignment.auto_assign(self.submission, self.candidates,
                                        creator=self.editor, limit=2,
                                        now=NOW)
        self.assertEqual(len(events), 2)
        self.assertTrue(all(isinstance(e, InviteReviewer) for e in events))
        self.assertEqual([e.reviewer.native_id for e in events],
                         ['expert', 'generalist'])

    def test_invitations(self):
        """Invitations carry the reviewer, creator, and deadline."""
        events = assignment.auto_assign(self.submission, self.candidates,
                                        creator=self.editor, now=NOW)
        self.assertEqual(len(events), 3)
        for event in events:
            self.assertEqual(event.creator, self.editor)
            self.assertEqual(event.submission_id,
                             self.submission.submission_id)
            self.assertEqual(event.deadline, NOW + timedelta(days=14))
        self.assertEqual(events[0].reviewer.email, 'expert@example.org')

    def test_no_candidates(self):
        """Nobody to invite."""
        self.assertEqual(
            assignment.auto_assign(self.submission, [], creator=self.editor),
            []
        )

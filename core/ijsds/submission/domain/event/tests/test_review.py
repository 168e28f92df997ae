"""Tests for peer review events."""

from datetime import timedelta
from unittest import TestCase

from ....exceptions import InvalidEvent
from ...review import Review
from ...submission import Submission
from ... import event as ev
from ...event.review import round_review_id
from .util import Clock, AUTHOR, EDITOR, REVIEWER, REVIEWER_2, draft, \
    in_review


def _peer_review(clock):
    submission = ev.FinalizeSubmission(creator=AUTHOR,
                                       created=clock()).apply(draft(clock))
    for target in (Submission.EDITORIAL_REVIEW,
                   Submission.REVIEWER_ASSIGNMENT, Submission.PEER_REVIEW):
        submission = ev.TransitionWorkflow(creator=EDITOR, created=clock(),
                                           target=target).apply(submission)
    return submission


class TestInviteReviewer(TestCase):
    """Tests for :class:`.InviteReviewer`."""

    def setUp(self):
        """A submission out for review."""
        self.clock = Clock()
        self.submission = _peer_review(self.clock)

    def test_invite(self):
        """A pending review is keyed on the event id."""
        created = self.clock()
        event = ev.InviteReviewer(creator=EDITOR, created=created,
                                  reviewer=REVIEWER)
        after = event.apply(self.submission)
        review = after.reviews[event.event_id]
        self.assertEqual(review.reviewer, REVIEWER)
        self.assertEqual(review.invited_by, EDITOR)
        self.assertEqual(review.invitation_status, Review.PENDING)
        self.assertEqual(review.review_round, 1)
        self.assertEqual(review.deadline, created + timedelta(days=14))

    def test_explicit_deadline(self):
        """The deadline must be in the future."""
        created = self.clock()
        event = ev.InviteReviewer(creator=EDITOR, created=created,
                                  reviewer=REVIEWER,
                                  deadline=created + timedelta(days=7))
        after = event.apply(self.submission)
        self.assertEqual(after.reviews[event.event_id].deadline,
                         created + timedelta(days=7))
        with self.assertRaises(InvalidEvent):
            ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                              reviewer=REVIEWER_2,
                              deadline=created).apply(after)

    def test_not_an_author(self):
        """Authors may not review their own work."""
        with self.assertRaisesRegex(InvalidEvent, 'own work'):
            ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                              reviewer=AUTHOR).apply(self.submission)

    def test_not_twice(self):
        """A reviewer is only invited once per round."""
        after = ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                                  reviewer=REVIEWER).apply(self.submission)
        with self.assertRaisesRegex(InvalidEvent, 'already been invited'):
            ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                              reviewer=REVIEWER).apply(after)

    def test_editors_only(self):
        """Reviewers may not invite each other."""
        with self.assertRaises(InvalidEvent):
            ev.InviteReviewer(creator=REVIEWER, created=self.clock(),
                              reviewer=REVIEWER_2).apply(self.submission)


class TestInvitationResponse(TestCase):
    """Tests for :class:`.AcceptInvitation` and :class:`.DeclineInvitation`."""

    def setUp(self):
        """A pending invitation."""
        self.clock = Clock()
        self.invite = ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                                        reviewer=REVIEWER)
        self.submission = self.invite.apply(_peer_review(self.clock))

    def test_accept(self):
        """The reviewer agrees to review."""
        when = self.clock()
        after = ev.AcceptInvitation(creator=REVIEWER, created=when,
                                    review_id=self.invite.event_id
                                    ).apply(self.submission)
        review = after.reviews[self.invite.event_id]
        self.assertTrue(review.is_accepted)
        self.assertEqual(review.invitation_accepted_at, when)

    def test_decline(self):
        """The reviewer declines, and may be replaced."""
        after = ev.DeclineInvitation(creator=REVIEWER, created=self.clock(),
                                     review_id=self.invite.event_id,
                                     reason='On leave').apply(self.submission)
        review = after.reviews[self.invite.event_id]
        self.assertTrue(review.is_declined)
        self.assertEqual(review.declined_reason, 'On leave')
        # The reviewer may be invited again later.
        ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                          reviewer=REVIEWER).apply(after)

    def test_only_the_reviewer(self):
        """Nobody may respond on the reviewer's behalf."""
        with self.assertRaises(InvalidEvent):
            ev.AcceptInvitation(creator=EDITOR, created=self.clock(),
                                review_id=self.invite.event_id
                                ).apply(self.submission)

    def test_no_such_review(self):
        """The review must exist."""
        with self.assertRaises(InvalidEvent):
            ev.AcceptInvitation(creator=REVIEWER, created=self.clock(),
                                review_id='nope').apply(self.submission)

    def test_respond_once(self):
        """An invitation is accepted or declined, not both."""
        after = ev.AcceptInvitation(creator=REVIEWER, created=self.clock(),
                                    review_id=self.invite.event_id
                                    ).apply(self.submission)
        with self.assertRaisesRegex(InvalidEvent, 'already accepted'):
            ev.DeclineInvitation(creator=REVIEWER, created=self.clock(),
                                 review_id=self.invite.event_id).apply(after)


class TestSubmitReview(TestCase):
    """Tests for :class:`.SubmitReview`."""

    def setUp(self):
        """An accepted invitation."""
        self.clock = Clock()
        self.submission = in_review(self.clock)
        self.review_id = list(self.submission.reviews)[0]

    def _submit(self, **data):
        data.setdefault('recommendation', Review.MINOR_REVISIONS)
        data.setdefault('comments_to_author', 'Clarify the sampling frame.')
        return ev.SubmitReview(creator=REVIEWER, created=self.clock(),
                               review_id=self.review_id,
                               **data).apply(self.submission)

    def test_submit(self):
        """The recommendation and comments are recorded."""
        after = self._submit(comments_to_editor='  Solid work. ')
        review = after.reviews[self.review_id]
        self.assertTrue(review.is_submitted)
        self.assertEqual(review.recommendation, Review.MINOR_REVISIONS)
        self.assertEqual(review.comments_to_editor, 'Solid work.')

    def test_invalid(self):
        """Recommendation and comments are required."""
        with self.assertRaises(InvalidEvent):
            self._submit(recommendation='shrug')
        with self.assertRaises(InvalidEvent):
            self._submit(comments_to_author='   ')
        with self.assertRaisesRegex(InvalidEvent, 'Conflict'):
            self._submit(conflict_of_interest_declared=True)

    def test_once(self):
        """Reviews are submitted once."""
        self.submission = self._submit()
        with self.assertRaisesRegex(InvalidEvent, 'already been submitted'):
            self._submit()

    def test_must_accept_first(self):
        """Pending invitations cannot be submitted."""
        invite = ev.InviteReviewer(creator=EDITOR, created=self.clock(),
                                   reviewer=REVIEWER_2)
        submission = invite.apply(self.submission)
        with self.assertRaisesRegex(InvalidEvent, 'not been accepted'):
            ev.SubmitReview(creator=REVIEWER_2, created=self.clock(),
                            review_id=invite.event_id,
                            recommendation=Review.ACCEPT,
                            comments_to_author='Fine.').apply(submission)


class TestStartReviewRound(TestCase):
    """Tests for :class:`.StartReviewRound`."""

    def test_new_round(self):
        """Reviewers who took part are invited again."""
        clock = Clock()
        submission = in_review(clock)
        declined = ev.InviteReviewer(creator=EDITOR, created=clock(),
                                     reviewer=REVIEWER_2)
        submission = declined.apply(submission)
        submission = ev.DeclineInvitation(
            creator=REVIEWER_2, created=clock(), review_id=declined.event_id
        ).apply(submission)

        event = ev.StartReviewRound(creator=EDITOR, created=clock())
        after = event.apply(submission)
        self.assertEqual(after.review_round, 2)
        second = after.reviews_in_round(2)
        self.assertEqual(len(second), 1)
        self.assertEqual(second[0].reviewer, REVIEWER)
        self.assertEqual(second[0].review_id,
                         round_review_id(event.event_id, REVIEWER.native_id))
        self.assertNotIn(f'-{REVIEWER.native_id}', second[0].review_id,
                         "The identifier does not give away the reviewer")
        self.assertEqual(second[0].invitation_status, Review.PENDING)
        self.assertEqual(len(after.reviews_in_round(1)), 2)

    def test_needs_reviews(self):
        """There must be something to repeat."""
        clock = Clock()
        with self.assertRaises(InvalidEvent):
            ev.StartReviewRound(creator=EDITOR,
                                created=clock()).apply(_peer_review(clock))

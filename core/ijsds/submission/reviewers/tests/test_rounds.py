"""Tests for :mod:`.reviewers.rounds`."""

from unittest import TestCase

from .. import rounds
from .util import make_submission, make_review


class TestRoundSummaries(TestCase):
    """Tests for :func:`.rounds.round_summaries`."""

    def setUp(self):
        """Three rounds in various states of completion."""
        self.submission = make_submission()
        for review in [
                    make_review('a', 'r1a', review_round=1),
                    make_review('b', 'r1b', review_round=1),
                    make_review('a', 'r2a', review_round=2),
                    make_review('b', 'r2b', review_round=2, submitted=False),
                    make_review('c', 'r3c', review_round=3, submitted=False)
                ]:
            self.submission.reviews[review.review_id] = review

    def test_summaries(self):
        """Each round is summarized in order."""
        summaries = rounds.round_summaries(self.submission)
        self.assertEqual([s.review_round for s in summaries], [1, 2, 3])
        self.assertEqual([s.status for s in summaries],
                         [rounds.COMPLETED, rounds.ACTIVE, rounds.PENDING])
        self.assertEqual(summaries[1].total, 2)
        self.assertEqual(summaries[1].submitted, 1)
        self.assertEqual(summaries[1].completion_rate, 50.0)

    def test_current_round(self):
        """The latest round with reviews."""
        self.assertEqual(rounds.current_round(self.submission), 3)

    def test_no_reviews(self):
        """Before any invitations, there is nothing to summarize."""
        submission = make_submission()
        self.assertEqual(rounds.round_summaries(submission), [])
        self.assertEqual(rounds.current_round(submission), 1)

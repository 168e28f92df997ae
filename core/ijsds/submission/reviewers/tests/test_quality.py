"""Tests for :mod:`.reviewers.quality`."""

from unittest import TestCase

from ...domain.review import Review
from .. import quality
from .util import make_review, STRONG_COMMENTS


class TestScoreReview(TestCase):
    """Tests for :func:`.quality.score_review`."""

    def test_strong_review(self):
        """A long, structured, constructive review on time."""
        score = quality.score_review(
            make_review('r', 'a', comments_to_author=STRONG_COMMENTS)
        )
        self.assertEqual(score.review_id, 'a')
        self.assertEqual(score.thoroughness, 10)
        self.assertEqual(score.clarity, 9)
        self.assertEqual(score.constructiveness, 9)
        self.assertEqual(score.timeliness, 10)
        self.assertEqual(score.overall, 9.5)
        self.assertEqual(score.quality_band, quality.HIGH)
        self.assertEqual(score.word_count, len(STRONG_COMMENTS) // 6)

    def test_terse_late_review(self):
        """A one-liner, submitted after the deadline."""
        score = quality.score_review(
            make_review('r', 'b', late=True, comments_to_author='Fine.')
        )
        self.assertEqual(score.thoroughness, 1)
        self.assertEqual(score.clarity, 7)
        self.assertEqual(score.constructiveness, 8)
        self.assertEqual(score.timeliness, 8)
        self.assertEqual(score.overall, 6.0)
        self.assertEqual(score.quality_band, quality.MEDIUM)

    def test_not_submitted(self):
        """A review that has not been submitted scores poorly."""
        score = quality.score_review(make_review('r', 'c', submitted=False))
        self.assertEqual(score.timeliness, 5)
        self.assertEqual(score.constructiveness, 7)
        self.assertEqual(score.overall, 5.0)
        self.assertEqual(score.quality_band, quality.LOW)

    def test_comments_to_editor_count(self):
        """Confidential comments count towards thoroughness."""
        review = make_review('r', 'd', comments_to_author='a' * 100,
                             comments_to_editor='b' * 150)
        self.assertEqual(quality.score_review(review).thoroughness, 5)

    def test_suggestions(self):
        """Suggestion language makes a review more constructive."""
        plain = make_review('r', 'e', comments_to_author='The model is bad.',
                            recommendation=Review.REJECT)
        helpful = make_review('r', 'f', recommendation=Review.REJECT,
                              comments_to_author='Consider a panel model.')
        self.assertEqual(quality.score_review(plain).constructiveness, 8)
        self.assertEqual(quality.score_review(helpful).constructiveness, 9)

"""Tests for :mod:`.reviewers.performance`."""

from unittest import TestCase

from .. import performance
from .util import make_review


class TestReviewerPerformance(TestCase):
    """Tests for :func:`.performance.reviewer_performance`."""

    def setUp(self):
        """One on-time, one late, and one outstanding review."""
        self.reviews = [
            make_review('esi', 'a', recommendation='accept'),
            make_review('esi', 'b', late=True, recommendation='accept'),
            make_review('esi', 'c', submitted=False),
            make_review('someone-else', 'd')
        ]

    def test_counts(self):
        """Only the reviewer's own reviews are counted."""
        stats = performance.reviewer_performance('esi', self.reviews)
        self.assertEqual(stats.total, 3)
        self.assertEqual(stats.completed, 2)
        self.assertEqual(stats.in_progress, 1)
        self.assertEqual(stats.availability, performance.BUSY)

    def test_timeliness(self):
        """Turnaround is counted in whole days, rounded up."""
        stats = performance.reviewer_performance('esi', self.reviews)
        self.assertEqual(stats.on_time_percentage, 50)
        # Ten days, and sixteen days.
        self.assertEqual(stats.avg_turnaround_days, 13)

    def test_composite(self):
        """Composite score weighs output, timeliness, and quality."""
        stats = performance.reviewer_performance('esi', self.reviews)
        self.assertEqual(stats.avg_quality, 6.25)
        self.assertAlmostEqual(stats.composite, 2 * 0.3 + 50 * 0.3 + 2.5)
        self.assertEqual(stats.rating, 'Excellent')

    def test_no_reviews(self):
        """Someone who has never reviewed."""
        stats = performance.reviewer_performance('new', [])
        self.assertEqual(stats.total, 0)
        self.assertIsNone(stats.avg_turnaround_days)
        self.assertEqual(stats.rating, 'Needs improvement')
        self.assertEqual(stats.availability, performance.AVAILABLE)

    def test_unavailable(self):
        """Three reviews in hand is too many."""
        reviews = [make_review('busy', str(i), submitted=False)
                   for i in range(3)]
        stats = performance.reviewer_performance('busy', reviews)
        self.assertEqual(stats.availability, performance.UNAVAILABLE)

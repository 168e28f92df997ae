"""Tests for :mod:`.reviewers.conflicts`."""

from unittest import TestCase

from ...domain.submission import Author
from .. import conflicts
from .util import make_submission, make_profile


class TestDetectConflicts(TestCase):
    """Tests for :func:`.conflicts.detect_conflicts`."""

    def setUp(self):
        """The submission is by an author at the University of Ghana."""
        self.submission = make_submission()

    def test_no_conflict(self):
        """An unrelated reviewer."""
        reviewer = make_profile('kwame', affiliation='University of Nairobi')
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertFalse(report.has_conflict)
        self.assertEqual(report.risk_level, conflicts.LOW)
        self.assertEqual(report.reviewer_id, 'kwame')

    def test_same_domain(self):
        """A colleague at the same institution."""
        reviewer = make_profile('kofi', email='kofi@UG.edu.gh')
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertTrue(report.has_conflict)
        self.assertEqual(report.reasons, ['Same institutional email domain'])
        self.assertEqual(report.risk_level, conflicts.HIGH)

    def test_reviewer_is_author(self):
        """Author e-mails are compared without regard to case."""
        reviewer = make_profile('ama', email='AMA@ug.edu.gh')
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertIn('Reviewer is an author', report.reasons)
        self.assertEqual(report.risk_level, conflicts.HIGH)

    def test_similar_affiliation(self):
        """Two significant words in common with an author's affiliation."""
        reviewer = make_profile(
            'yaw', affiliation='University of Ghana Business School'
        )
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertEqual(report.reasons,
                         ['Similar affiliation to Ama Mensah'])
        self.assertEqual(report.risk_level, conflicts.MEDIUM)

    def test_one_word_in_common(self):
        """Sharing only "University" is not a conflict."""
        reviewer = make_profile('yaw', affiliation='University of Lagos')
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertFalse(report.has_conflict)

    def test_previously_reviewed_same_authors(self):
        """The reviewer has refereed these authors before."""
        earlier = make_submission(submission_id=3, authors=[
            Author(name='Ama Mensah', email='ama@ug.edu.gh')
        ])
        unrelated = make_submission(submission_id=4, authors=[
            Author(name='Other Person', email='other@uct.ac.za')
        ])
        reviewer = make_profile('esi')
        report = conflicts.detect_conflicts(reviewer, self.submission,
                                            [unrelated, earlier])
        self.assertEqual(report.reasons,
                         ['Previously reviewed work by same authors'])
        self.assertEqual(report.risk_level, conflicts.MEDIUM)

    def test_risk_is_never_lowered(self):
        """A medium-risk reason does not downgrade a high risk."""
        reviewer = make_profile('kofi', email='kofi@ug.edu.gh',
                                affiliation='University of Ghana Legon')
        report = conflicts.detect_conflicts(reviewer, self.submission)
        self.assertEqual(len(report.reasons), 2)
        self.assertEqual(report.risk_level, conflicts.HIGH)
